"""Content store interface consumed by the pipeline."""

from typing import Protocol

from nutrition_pipeline.domain.catalog import EntityId

INGREDIENTS = "ingredients"
RECIPES = "recipes"
INGREDIENT_NUTRITIONS = "ingredient-nutritions"
RECIPE_NUTRITIONS = "recipe-nutritions"

ALL_LOCALES = "all"


class ContentStore(Protocol):
    """Locale-aware CRUD over named collections.

    ``locale`` selects the view: a locale code flattens localized fields to
    that locale, ``"all"`` returns localized fields as locale maps and
    ``None`` leaves the choice to the store.
    """

    def find(
        self,
        collection: str,
        where: dict[str, object],
        limit: int = 10,
        locale: str | None = None,
    ) -> list[dict[str, object]]:
        """Return documents whose fields equal every ``where`` value."""

    def find_by_id(
        self, collection: str, entity_id: EntityId, locale: str | None = None
    ) -> dict[str, object] | None:
        """Return a document by id, if present."""

    def create(
        self, collection: str, data: dict[str, object], locale: str | None = None
    ) -> dict[str, object]:
        """Create a document and return it."""

    def update(
        self,
        collection: str,
        entity_id: EntityId,
        data: dict[str, object],
        locale: str | None = None,
    ) -> dict[str, object]:
        """Update a document and return it."""

    def delete(self, collection: str, entity_id: EntityId) -> None:
        """Delete a document by id."""
