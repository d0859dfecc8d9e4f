"""Tests for ingredient nutrition jobs."""

import asyncio

import pytest

from nutrition_pipeline.domain.catalog import Provenance
from nutrition_pipeline.errors import NotFoundError, PersistenceError
from nutrition_pipeline.services.catalog import CatalogRepository
from nutrition_pipeline.services.content import INGREDIENT_NUTRITIONS, INGREDIENTS
from nutrition_pipeline.services.ingredient_nutrition import IngredientNutritionService
from nutrition_pipeline.services.resolver import NutritionResolver
from tests.conftest import FakeEstimatorClient, InMemoryContentStore


def test_process_creates_record_once(
    store: InMemoryContentStore,
    catalog: CatalogRepository,
    resolver: NutritionResolver,
) -> None:
    store.add(
        INGREDIENTS, {"id": 5, "name": "Tomato", "slug": {"en": "tomato", "bg": "d"}}
    )
    service = IngredientNutritionService(catalog, resolver)

    first = asyncio.run(service.process(5))
    second = asyncio.run(service.process(5))

    assert first.created is True
    assert second.created is False
    assert second.nutrition.id == first.nutrition.id
    rows = store.all(INGREDIENT_NUTRITIONS)
    assert len(rows) == 1
    row = rows[0]
    assert row["ingredient_id"] == 5
    assert row["ingredient_slug"] == "tomato"
    assert row["data_source"] == Provenance.STRUCTURED_SOURCE.value
    assert row["source_id"] == 171705
    assert row["calories"] == 18
    assert row["iodine"] == 0.0


def test_process_missing_ingredient_raises_not_found(
    catalog: CatalogRepository, resolver: NutritionResolver
) -> None:
    service = IngredientNutritionService(catalog, resolver)

    with pytest.raises(NotFoundError):
        asyncio.run(service.process(404))


def test_process_records_generative_provenance(
    store: InMemoryContentStore,
    catalog: CatalogRepository,
    resolver: NutritionResolver,
    estimator_client: FakeEstimatorClient,
) -> None:
    store.add(INGREDIENTS, {"id": 6, "name": "Dragon fruit", "slug": "dragon-fruit"})
    resolver.providers[0].fdc_client.search_payload = {
        "totalHits": 0,
        "currentPage": 1,
        "totalPages": 0,
        "foods": [],
    }

    outcome = asyncio.run(IngredientNutritionService(catalog, resolver).process(6))

    assert outcome.nutrition.provenance is Provenance.GENERATIVE_FALLBACK
    assert outcome.nutrition.source_id is None
    assert outcome.nutrition.nutrients["medium_piece_weight"] == 120.0
    assert estimator_client.prompts


def test_store_write_failure_is_a_persistence_error(
    store: InMemoryContentStore,
    catalog: CatalogRepository,
    resolver: NutritionResolver,
) -> None:
    store.add(INGREDIENTS, {"id": 7, "name": "Tomato", "slug": "tomato"})

    def failing_create(*_args, **_kwargs):  # type: ignore[no-untyped-def]
        raise RuntimeError("insert rejected")

    store.create = failing_create  # type: ignore[method-assign]

    with pytest.raises(PersistenceError):
        asyncio.run(IngredientNutritionService(catalog, resolver).process(7))
