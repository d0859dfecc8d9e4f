"""Removal of derived nutrition records when their source goes away."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.domain.catalog import EntityId
from nutrition_pipeline.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class LifecycleCleanup:
    """Best-effort cleanup that never blocks the triggering delete or unpublish.

    Every method returns the number of records deleted; failures are logged
    and reported as zero.
    """

    catalog: CatalogRepository
    batch_size: int = 100

    def on_ingredient_deleted(
        self, ingredient_id: EntityId, fallback_slug: str | None = None
    ) -> int:
        """Delete the nutrition records joined on a deleted ingredient's slug."""
        try:
            ingredient = self.catalog.get_ingredient(ingredient_id)
            slug = ingredient.slug if ingredient else fallback_slug
            if not slug:
                _logger.warning(
                    "Ingredient %s has no slug, skipping nutrition cleanup",
                    ingredient_id,
                )
                return 0
            records = self.catalog.find_ingredient_nutritions_by_slug(
                slug, limit=self.batch_size
            )
            for record in records:
                self.catalog.delete_ingredient_nutrition(record.id)
        except Exception:
            _logger.exception(
                "Failed to clean up nutrition for ingredient %s", ingredient_id
            )
            return 0
        _logger.info(
            "Deleted %s nutrition records for ingredient slug %s", len(records), slug
        )
        return len(records)

    def on_recipe_deleted(
        self, recipe_id: EntityId, fallback_slug: str | None = None
    ) -> int:
        """Delete the nutrition records joined on a deleted recipe's slug."""
        try:
            recipe = self.catalog.get_recipe(recipe_id)
        except Exception:
            _logger.exception("Failed to read recipe %s for cleanup", recipe_id)
            return 0
        slug = recipe.slug if recipe else fallback_slug
        if not slug:
            _logger.warning(
                "Recipe %s has no slug, skipping nutrition cleanup", recipe_id
            )
            return 0
        return self._delete_recipe_nutritions(slug)

    def on_recipe_unpublished(self, slug: str | None) -> int:
        """Delete the nutrition records of a recipe leaving the published state."""
        if not slug:
            _logger.warning("Unpublished recipe has no slug, skipping cleanup")
            return 0
        return self._delete_recipe_nutritions(slug)

    def _delete_recipe_nutritions(self, slug: str) -> int:
        try:
            records = self.catalog.find_recipe_nutritions_by_slug(
                slug, limit=self.batch_size
            )
            for record in records:
                self.catalog.delete_recipe_nutrition(record.id)
        except Exception:
            _logger.exception("Failed to clean up nutrition for recipe %s", slug)
            return 0
        _logger.info("Deleted %s nutrition records for recipe %s", len(records), slug)
        return len(records)
