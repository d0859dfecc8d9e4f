"""Tests for recipe nutrition recompute."""

from nutrition_pipeline.domain.catalog import PUBLISHED
from nutrition_pipeline.domain.lifecycle import Transition
from nutrition_pipeline.services.catalog import CatalogRepository
from nutrition_pipeline.services.content import (
    INGREDIENT_NUTRITIONS,
    INGREDIENTS,
    RECIPE_NUTRITIONS,
    RECIPES,
)
from nutrition_pipeline.services.recipe_nutrition import RecipeNutritionService
from tests.conftest import InMemoryContentStore


def _seed(store: InMemoryContentStore) -> None:
    store.add(INGREDIENTS, {"id": 1, "name": "Carrot", "slug": "carrot"})
    store.add(INGREDIENTS, {"id": 2, "name": "Butter", "slug": "butter"})
    store.add(
        INGREDIENT_NUTRITIONS,
        {
            "ingredient_id": 1,
            "ingredient_slug": "carrot",
            "calories": 50.0,
            "protein": 1.0,
            "medium_piece_weight": 60.0,
        },
    )
    store.add(
        INGREDIENT_NUTRITIONS,
        {"ingredient_id": 2, "ingredient_slug": "butter", "calories": 150.0},
    )
    store.add(
        RECIPES,
        {
            "id": 10,
            "name": "Glazed carrots",
            "slug": "glazed-carrots",
            "_status": PUBLISHED,
            "ingredients": [
                {"amount": "100", "unit": "g", "ingredient": 1},
                {"amount": "100", "unit": "g", "ingredient": {"id": 2}},
            ],
        },
    )


def test_fresh_publish_creates_record(
    store: InMemoryContentStore,
    catalog: CatalogRepository,
    recipe_nutrition: RecipeNutritionService,
) -> None:
    _seed(store)

    saved = recipe_nutrition.recalculate(10, Transition.FRESH_PUBLISH)

    assert saved is not None
    assert saved.recipe_slug == "glazed-carrots"
    assert saved.recipe_name == "Glazed carrots"
    assert saved.recipe_id == 10
    assert saved.nutrients["calories"] == 100
    assert saved.nutrients["protein"] == 0.5
    assert saved.last_calculated is not None
    rows = store.all(RECIPE_NUTRITIONS)
    assert len(rows) == 1
    assert "medium_piece_weight" not in rows[0]


def test_amounts_with_unit_suffix_count_their_leading_number(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    _seed(store)
    store.documents[RECIPES][10]["ingredients"][0]["amount"] = "100g"

    saved = recipe_nutrition.recalculate(10, Transition.FRESH_PUBLISH)

    assert saved is not None
    assert saved.nutrients["calories"] == 100
    assert saved.nutrients["protein"] == 0.5


def test_fresh_publish_skips_existing_record(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    _seed(store)
    store.add(RECIPE_NUTRITIONS, {"recipe_slug": "glazed-carrots", "calories": 1.0})

    assert recipe_nutrition.recalculate(10, Transition.FRESH_PUBLISH) is None
    assert store.all(RECIPE_NUTRITIONS)[0]["calories"] == 1.0


def test_republish_updates_in_place(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    _seed(store)
    existing = store.add(
        RECIPE_NUTRITIONS, {"recipe_slug": "glazed-carrots", "calories": 1.0}
    )

    saved = recipe_nutrition.recalculate(10, Transition.REPUBLISH)

    assert saved is not None
    assert saved.id == existing["id"]
    rows = store.all(RECIPE_NUTRITIONS)
    assert len(rows) == 1
    assert rows[0]["calories"] == 100


def test_piece_units_use_stored_piece_weight(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    _seed(store)
    store.documents[RECIPES][10]["ingredients"] = [
        {"amount": "2", "unit": "mediumPiece", "ingredient": 1},
        {"amount": "120", "unit": "g", "ingredient": 2},
    ]

    saved = recipe_nutrition.recalculate(10, Transition.FRESH_PUBLISH)

    assert saved is not None
    assert saved.nutrients["calories"] == 100


def test_recipe_without_resolved_ingredients_is_skipped(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    store.add(
        RECIPES,
        {
            "id": 11,
            "name": "Mystery stew",
            "slug": "mystery-stew",
            "ingredients": [{"amount": "100", "unit": "g", "ingredient": 99}],
        },
    )

    assert recipe_nutrition.recalculate(11, Transition.FRESH_PUBLISH) is None
    assert store.all(RECIPE_NUTRITIONS) == []


def test_recipe_without_lines_is_skipped(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    store.add(RECIPES, {"id": 12, "name": "Water", "slug": "water"})

    assert recipe_nutrition.recalculate(12, Transition.FRESH_PUBLISH) is None


def test_localized_recipe_documents_use_primary_locale(
    store: InMemoryContentStore, recipe_nutrition: RecipeNutritionService
) -> None:
    _seed(store)
    store.documents[RECIPES][10]["name"] = {"en": "Glazed carrots", "bg": "Моркови"}

    saved = recipe_nutrition.recalculate(10, Transition.FRESH_PUBLISH)

    assert saved is not None
    assert saved.recipe_name == "Glazed carrots"
