"""Typed access to catalog documents and derived nutrition records."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from nutrition_pipeline.domain.catalog import (
    EntityId,
    Ingredient,
    IngredientNutrition,
    Provenance,
    Recipe,
    RecipeIngredientLine,
    RecipeNutrition,
    canonical_slug,
    localized_value,
)
from nutrition_pipeline.domain.nutrients import (
    NUTRIENT_FIELDS,
    NutrientRecord,
    complete_record,
    round_record,
    sanitize,
)
from nutrition_pipeline.errors import PersistenceError, PipelineError
from nutrition_pipeline.services.content import (
    INGREDIENT_NUTRITIONS,
    INGREDIENTS,
    RECIPE_NUTRITIONS,
    RECIPES,
    ContentStore,
)

_logger = logging.getLogger(__name__)


@dataclass
class CatalogRepository:
    """Reads catalog entities and reads/writes derived nutrition records."""

    store: ContentStore
    primary_locale: str = "en"

    def get_ingredient(self, ingredient_id: EntityId) -> Ingredient | None:
        """Return an ingredient in the primary locale, if present."""
        doc = self.store.find_by_id(INGREDIENTS, ingredient_id, self.primary_locale)
        if doc is None:
            return None
        return self.ingredient_from_doc(doc)

    def get_recipe(self, recipe_id: EntityId) -> Recipe | None:
        """Return a recipe in the primary locale, if present."""
        doc = self.store.find_by_id(RECIPES, recipe_id, self.primary_locale)
        if doc is None:
            return None
        return self.recipe_from_doc(doc)

    def ingredient_from_doc(self, doc: dict[str, object]) -> Ingredient:
        """Build an ingredient from a plain or all-locale document."""
        name = localized_value(doc.get("name"), self.primary_locale)
        return Ingredient(
            id=doc["id"],
            name=str(name or ""),
            slug=canonical_slug(doc.get("slug"), self.primary_locale),
            status=doc.get("_status"),
        )

    def recipe_from_doc(self, doc: dict[str, object]) -> Recipe:
        """Build a recipe from a plain or all-locale document."""
        name = localized_value(doc.get("name"), self.primary_locale)
        rows = localized_value(doc.get("ingredients"), self.primary_locale)
        lines = [
            RecipeIngredientLine.from_row(row)
            for row in (rows if isinstance(rows, list) else [])
            if isinstance(row, dict)
        ]
        return Recipe(
            id=doc["id"],
            name=str(name or ""),
            slug=canonical_slug(doc.get("slug"), self.primary_locale),
            status=doc.get("_status"),
            lines=lines,
        )

    def find_ingredient_nutrition(
        self, ingredient_id: EntityId
    ) -> IngredientNutrition | None:
        """Return the nutrition record owned by an ingredient, if present."""
        rows = self.store.find(
            INGREDIENT_NUTRITIONS, {"ingredient_id": ingredient_id}, limit=1
        )
        if not rows:
            return None
        return _ingredient_nutrition_from_row(rows[0])

    def get_piece_weight(self, ingredient_id: EntityId, field: str) -> float | None:
        """Return a stored piece weight for an ingredient, if present."""
        nutrition = self.find_ingredient_nutrition(ingredient_id)
        if nutrition is None:
            return None
        return nutrition.nutrients.get(field)

    def create_ingredient_nutrition(
        self,
        ingredient: Ingredient,
        nutrients: NutrientRecord,
        provenance: Provenance,
        source_id: int | None,
    ) -> IngredientNutrition:
        """Persist a resolved ingredient nutrient record."""
        data: dict[str, object] = {
            "ingredient_id": ingredient.id,
            "ingredient_slug": ingredient.slug or "",
            "data_source": provenance.value,
            "source_id": source_id,
            **complete_record(nutrients),
        }
        row = self._write(
            lambda: self.store.create(INGREDIENT_NUTRITIONS, data),
            action=f"create ingredient nutrition for {ingredient.id}",
        )
        return _ingredient_nutrition_from_row(row)

    def find_ingredient_nutritions_by_slug(
        self, slug: str, limit: int
    ) -> list[IngredientNutrition]:
        """Return nutrition records joined on an ingredient slug."""
        rows = self.store.find(
            INGREDIENT_NUTRITIONS, {"ingredient_slug": slug}, limit=limit
        )
        return [_ingredient_nutrition_from_row(row) for row in rows]

    def delete_ingredient_nutrition(self, nutrition_id: EntityId) -> None:
        """Delete an ingredient nutrition record."""
        self.store.delete(INGREDIENT_NUTRITIONS, nutrition_id)

    def find_recipe_nutrition(self, slug: str) -> RecipeNutrition | None:
        """Return the live nutrition record for a recipe slug, if present."""
        rows = self.find_recipe_nutritions_by_slug(slug, limit=1)
        return rows[0] if rows else None

    def find_recipe_nutritions_by_slug(
        self, slug: str, limit: int
    ) -> list[RecipeNutrition]:
        """Return nutrition records joined on a recipe slug."""
        rows = self.store.find(RECIPE_NUTRITIONS, {"recipe_slug": slug}, limit=limit)
        return [_recipe_nutrition_from_row(row) for row in rows]

    def save_recipe_nutrition(
        self,
        recipe: Recipe,
        nutrients: NutrientRecord,
        existing: RecipeNutrition | None,
    ) -> RecipeNutrition:
        """Create or update the nutrition record of a recipe in place."""
        data: dict[str, object] = {
            "recipe_id": recipe.id,
            "recipe_slug": recipe.slug or "",
            "recipe_name": recipe.name,
            "last_calculated": datetime.now(tz=UTC).isoformat(),
            **round_record(complete_record(nutrients, NUTRIENT_FIELDS)),
        }
        if existing is None:
            row = self._write(
                lambda: self.store.create(RECIPE_NUTRITIONS, data),
                action=f"create recipe nutrition for {recipe.id}",
            )
        else:
            row = self._write(
                lambda: self.store.update(RECIPE_NUTRITIONS, existing.id, data),
                action=f"update recipe nutrition {existing.id}",
            )
        return _recipe_nutrition_from_row(row)

    def delete_recipe_nutrition(self, nutrition_id: EntityId) -> None:
        """Delete a recipe nutrition record."""
        self.store.delete(RECIPE_NUTRITIONS, nutrition_id)

    def _write(
        self, func: Callable[[], dict[str, object]], *, action: str
    ) -> dict[str, object]:
        """Run a store write, surfacing failures as persistence errors."""
        try:
            return func()
        except PipelineError:
            raise
        except Exception as exc:
            _logger.exception("Content store write failed: %s", action)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc


def _ingredient_nutrition_from_row(row: dict[str, object]) -> IngredientNutrition:
    raw_source = row.get("data_source")
    source_id = row.get("source_id")
    return IngredientNutrition(
        id=row["id"],
        ingredient_id=row.get("ingredient_id"),
        ingredient_slug=str(row.get("ingredient_slug") or ""),
        provenance=Provenance(raw_source) if raw_source else None,
        source_id=int(source_id) if source_id is not None else None,
        nutrients=sanitize(row),
    )


def _recipe_nutrition_from_row(row: dict[str, object]) -> RecipeNutrition:
    raw_calculated = row.get("last_calculated")
    return RecipeNutrition(
        id=row["id"],
        recipe_id=row.get("recipe_id"),
        recipe_slug=str(row.get("recipe_slug") or ""),
        recipe_name=str(row.get("recipe_name") or ""),
        last_calculated=(
            datetime.fromisoformat(raw_calculated)
            if isinstance(raw_calculated, str)
            else None
        ),
        nutrients=round_record(
            {
                field: value
                for field, value in sanitize(row).items()
                if field in NUTRIENT_FIELDS
            }
        ),
    )

