"""Recipe nutrition recompute."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.domain.catalog import (
    EntityId,
    RecipeIngredientLine,
    RecipeNutrition,
)
from nutrition_pipeline.domain.lifecycle import Transition
from nutrition_pipeline.domain.nutrients import NutrientRecord
from nutrition_pipeline.errors import NotFoundError
from nutrition_pipeline.services.aggregator import RecipeAggregator
from nutrition_pipeline.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class RecipeNutritionService:
    """Aggregates a published recipe into its nutrition record."""

    catalog: CatalogRepository
    aggregator: RecipeAggregator

    def recalculate(
        self, recipe_id: EntityId, transition: Transition
    ) -> RecipeNutrition | None:
        """Create or update the nutrition record of a published recipe.

        A fresh publish leaves an existing record alone; an edit of an
        already published recipe recomputes it in place. Returns None when
        nothing was written.
        """
        recipe = self.catalog.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        if not recipe.slug:
            _logger.info("Recipe %s has no slug, skipping nutrition", recipe_id)
            return None

        existing = self.catalog.find_recipe_nutrition(recipe.slug)
        if existing is not None and transition is not Transition.REPUBLISH:
            _logger.info(
                "Nutrition exists for recipe %s and this is not an edit, skipping",
                recipe.slug,
            )
            return None
        if not recipe.lines:
            _logger.info("Recipe %s has no ingredients, skipping", recipe.slug)
            return None

        records = self._ingredient_records(recipe.lines)
        aggregate = self.aggregator.aggregate(recipe.lines, records)
        if aggregate is None:
            return None

        saved = self.catalog.save_recipe_nutrition(
            recipe, aggregate.nutrients, existing
        )
        _logger.info(
            "%s nutrition for recipe %r (id=%s)",
            "Updated" if existing else "Created",
            recipe.name,
            recipe.id,
        )
        return saved

    def _ingredient_records(
        self, lines: list[RecipeIngredientLine]
    ) -> dict[EntityId, NutrientRecord]:
        records: dict[EntityId, NutrientRecord] = {}
        for line in lines:
            ingredient_id = line.ingredient_id
            if ingredient_id is None or ingredient_id in records:
                continue
            try:
                nutrition = self.catalog.find_ingredient_nutrition(ingredient_id)
            except Exception:
                _logger.exception(
                    "Failed to read nutrition for ingredient %s", ingredient_id
                )
                continue
            if nutrition is not None:
                records[ingredient_id] = nutrition.nutrients
        return records
