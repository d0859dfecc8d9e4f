"""Supabase implementation of the locale-aware content store."""

from dataclasses import dataclass

from supabase import Client

from nutrition_pipeline.domain.catalog import EntityId
from nutrition_pipeline.errors import PersistenceError
from nutrition_pipeline.services.content import (
    ALL_LOCALES,
    INGREDIENTS,
    RECIPES,
    ContentStore,
)

# Localized columns hold a {locale: value} JSON object.
LOCALIZED_FIELDS: dict[str, frozenset[str]] = {
    INGREDIENTS: frozenset({"name", "long_description", "faq"}),
    RECIPES: frozenset({"name", "description", "directions", "ingredients"}),
}


def table_name(collection: str) -> str:
    """Return the table backing a collection."""
    return collection.replace("-", "_")


@dataclass
class SupabaseContentStore(ContentStore):
    """Supabase-backed content store."""

    client: Client
    default_locale: str = "en"

    def find(
        self,
        collection: str,
        where: dict[str, object],
        limit: int = 10,
        locale: str | None = None,
    ) -> list[dict[str, object]]:
        """Return rows whose columns equal every ``where`` value."""
        query = self.client.table(table_name(collection)).select("*")
        for column, value in where.items():
            query = query.eq(column, value)
        response = query.limit(limit).execute()
        return [
            self._localize(collection, row, locale) for row in response.data or []
        ]

    def find_by_id(
        self, collection: str, entity_id: EntityId, locale: str | None = None
    ) -> dict[str, object] | None:
        """Return a row by id, if present."""
        response = (
            self.client.table(table_name(collection))
            .select("*")
            .eq("id", entity_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._localize(collection, response.data[0], locale)

    def create(
        self, collection: str, data: dict[str, object], locale: str | None = None
    ) -> dict[str, object]:
        """Insert a row and return it."""
        target = self._write_locale(locale)
        payload = {
            column: (
                {target: value}
                if column in _localized(collection) and target is not None
                else value
            )
            for column, value in data.items()
        }
        response = self.client.table(table_name(collection)).insert(payload).execute()
        if not response.data:
            raise PersistenceError(f"Failed to create {collection} row")
        return self._localize(collection, response.data[0], locale)

    def update(
        self,
        collection: str,
        entity_id: EntityId,
        data: dict[str, object],
        locale: str | None = None,
    ) -> dict[str, object]:
        """Update a row and return it; localized columns merge per locale."""
        target = self._write_locale(locale)
        payload = dict(data)
        localized_columns = _localized(collection) & data.keys()
        if target is not None and localized_columns:
            current = self.find_by_id(collection, entity_id, ALL_LOCALES)
            if current is None:
                raise PersistenceError(f"{collection} row {entity_id} not found")
            for column in localized_columns:
                existing = current.get(column)
                merged = dict(existing) if isinstance(existing, dict) else {}
                merged[target] = data[column]
                payload[column] = merged
        response = (
            self.client.table(table_name(collection))
            .update(payload)
            .eq("id", entity_id)
            .execute()
        )
        if not response.data:
            raise PersistenceError(f"Failed to update {collection} row {entity_id}")
        return self._localize(collection, response.data[0], locale)

    def delete(self, collection: str, entity_id: EntityId) -> None:
        """Delete a row by id."""
        self.client.table(table_name(collection)).delete().eq(
            "id", entity_id
        ).execute()

    def _write_locale(self, locale: str | None) -> str | None:
        if locale == ALL_LOCALES:
            return None
        return locale or self.default_locale

    def _localize(
        self, collection: str, row: dict[str, object], locale: str | None
    ) -> dict[str, object]:
        """Flatten localized columns to one locale unless all are requested."""
        if locale == ALL_LOCALES:
            return row
        target = locale or self.default_locale
        flattened = dict(row)
        for column in _localized(collection) & row.keys():
            value = row[column]
            if isinstance(value, dict):
                flattened[column] = value.get(target)
        return flattened


def _localized(collection: str) -> frozenset[str]:
    return LOCALIZED_FIELDS.get(collection, frozenset())
