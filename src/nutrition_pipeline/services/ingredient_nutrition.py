"""Ingredient nutrition job processing."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.domain.catalog import EntityId, IngredientNutrition
from nutrition_pipeline.errors import IncompleteDataError, NotFoundError
from nutrition_pipeline.services.catalog import CatalogRepository
from nutrition_pipeline.services.resolver import NutritionResolver

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngredientNutritionOutcome:
    """Result of one ingredient nutrition job."""

    nutrition: IngredientNutrition
    created: bool


@dataclass
class IngredientNutritionService:
    """Resolves and stores nutrition for an ingredient, at most once."""

    catalog: CatalogRepository
    resolver: NutritionResolver

    async def process(self, ingredient_id: EntityId) -> IngredientNutritionOutcome:
        """Resolve nutrition for an ingredient unless it already has a record."""
        existing = self.catalog.find_ingredient_nutrition(ingredient_id)
        if existing is not None:
            _logger.info(
                "Nutrition already exists for ingredient %s, nothing to do",
                ingredient_id,
            )
            return IngredientNutritionOutcome(nutrition=existing, created=False)

        ingredient = self.catalog.get_ingredient(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")

        _logger.info("Resolving nutrition for ingredient %r", ingredient.name)
        resolved = await self.resolver.resolve(ingredient.name)
        if resolved is None:
            raise IncompleteDataError(
                f"No nutrition data found for {ingredient.name!r}"
            )

        nutrition = self.catalog.create_ingredient_nutrition(
            ingredient,
            resolved.nutrients,
            provenance=resolved.provenance,
            source_id=resolved.source_id,
        )
        _logger.info(
            "Stored nutrition for ingredient %r (id=%s) from %s",
            ingredient.name,
            nutrition.id,
            resolved.provenance.value,
        )
        return IngredientNutritionOutcome(nutrition=nutrition, created=True)
