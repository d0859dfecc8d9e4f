"""Localized field translation for ingredients and recipes."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_pipeline.domain.catalog import EntityId
from nutrition_pipeline.errors import NotFoundError
from nutrition_pipeline.services.content import INGREDIENTS, RECIPES, ContentStore

_logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "bg": "Bulgarian",
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "it": "Italian",
}


def language_name(locale: str) -> str:
    """Return the English name of a locale's language."""
    return LANGUAGE_NAMES.get(locale.lower(), locale)


class Translator(Protocol):
    """Pure text-to-text translation into one target language."""

    async def translate(self, text: str, target_language: str) -> str:
        """Translate ``text`` into ``target_language``."""


@dataclass
class TranslationService:
    """Translates the localized fields of catalog entries into target locales."""

    store: ContentStore
    translator: Translator
    primary_locale: str = "en"
    target_locales: list[str] = field(default_factory=lambda: ["bg"])

    async def translate_text(self, text: object, target_language: str) -> object:
        """Translate a plain string; blank and non-string values pass through."""
        if not isinstance(text, str) or not text.strip():
            return text
        translated = await self.translator.translate(text, target_language)
        return translated.strip()

    async def translate_rich_text(self, value: object, target_language: str) -> object:
        """Translate every text node of a rich text document."""
        if not isinstance(value, dict):
            return value
        root = value.get("root")
        if not isinstance(root, dict) or not isinstance(root.get("children"), list):
            return value
        children = await asyncio.gather(
            *(
                self._translate_node(child, target_language)
                for child in root["children"]
            )
        )
        return {**value, "root": {**root, "children": list(children)}}

    async def _translate_node(self, node: object, target_language: str) -> object:
        if not isinstance(node, dict):
            return node
        if node.get("type") == "text" and "text" in node:
            return {
                **node,
                "text": await self.translate_text(node["text"], target_language),
            }
        children = node.get("children")
        if isinstance(children, list):
            translated = await asyncio.gather(
                *(self._translate_node(child, target_language) for child in children)
            )
            return {**node, "children": list(translated)}
        return node

    async def translate_faq(
        self, items: object, target_language: str
    ) -> list[dict[str, object]]:
        """Translate the question and answer of every FAQ item."""
        if not isinstance(items, list):
            return []

        async def translate_item(item: dict[str, object]) -> dict[str, object]:
            question = await self.translate_text(item.get("question"), target_language)
            answer = await self.translate_rich_text(item.get("answer"), target_language)
            return {**item, "question": question, "answer": answer}

        return list(
            await asyncio.gather(
                *(translate_item(item) for item in items if isinstance(item, dict))
            )
        )

    async def translate_directions(
        self, items: object, target_language: str
    ) -> list[dict[str, object]]:
        """Translate every recipe direction step."""
        if not isinstance(items, list):
            return []

        async def translate_step(item: dict[str, object]) -> dict[str, object]:
            direction = await self.translate_text(
                item.get("direction"), target_language
            )
            return {**item, "direction": direction}

        return list(
            await asyncio.gather(
                *(translate_step(item) for item in items if isinstance(item, dict))
            )
        )

    async def translate_ingredient(self, ingredient_id: EntityId) -> list[str]:
        """Translate an ingredient into every target locale."""
        doc = self.store.find_by_id(INGREDIENTS, ingredient_id, self.primary_locale)
        if doc is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        _logger.info("Translating ingredient %r", doc.get("name"))

        for locale in self.target_locales:
            language = language_name(locale)
            data: dict[str, object] = {}
            if doc.get("name"):
                data["name"] = await self.translate_text(doc["name"], language)
            if doc.get("long_description"):
                data["long_description"] = await self.translate_rich_text(
                    doc["long_description"], language
                )
            if doc.get("faq"):
                data["faq"] = await self.translate_faq(doc["faq"], language)
            if not data:
                _logger.info("Nothing to translate for ingredient %s", ingredient_id)
                continue
            self.store.update(INGREDIENTS, ingredient_id, data, locale=locale)
            _logger.info("Translated ingredient %s into %s", ingredient_id, language)
        return list(self.target_locales)

    async def translate_recipe(self, recipe_id: EntityId) -> list[str]:
        """Translate a recipe into every target locale."""
        doc = self.store.find_by_id(RECIPES, recipe_id, self.primary_locale)
        if doc is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        _logger.info("Translating recipe %r", doc.get("name"))

        for locale in self.target_locales:
            language = language_name(locale)
            data: dict[str, object] = {}
            if doc.get("name"):
                data["name"] = await self.translate_text(doc["name"], language)
            if doc.get("description"):
                data["description"] = await self.translate_rich_text(
                    doc["description"], language
                )
            if doc.get("directions"):
                data["directions"] = await self.translate_directions(
                    doc["directions"], language
                )
            # Ingredient lines carry no text; the locale keeps the same lines.
            if isinstance(doc.get("ingredients"), list):
                data["ingredients"] = [
                    dict(line) for line in doc["ingredients"] if isinstance(line, dict)
                ]
            if not data:
                _logger.info("Nothing to translate for recipe %s", recipe_id)
                continue
            self.store.update(RECIPES, recipe_id, data, locale=locale)
            _logger.info("Translated recipe %s into %s", recipe_id, language)
        return list(self.target_locales)
