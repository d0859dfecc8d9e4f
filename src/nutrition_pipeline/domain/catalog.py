"""Catalog domain models for ingredients, recipes and derived nutrition."""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from nutrition_pipeline.domain.nutrients import NutrientRecord

EntityId = int | str

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

PUBLISHED = "published"
DRAFT = "draft"


class Unit(str, Enum):
    """Units accepted on recipe ingredient lines."""

    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    TEASPOON = "tsp"
    TABLESPOON = "tbsp"
    CUP = "cup"
    SMALL_PIECE = "smallPiece"
    MEDIUM_PIECE = "mediumPiece"
    LARGE_PIECE = "largePiece"


class Provenance(str, Enum):
    """Where an ingredient nutrient record came from."""

    STRUCTURED_SOURCE = "structured-source"
    GENERATIVE_FALLBACK = "generative-fallback"


@dataclass(frozen=True)
class RecipeIngredientLine:
    """One ingredient line of a recipe."""

    amount: float
    unit: Unit | str
    ingredient_id: EntityId | None

    @classmethod
    def from_row(cls, row: dict[str, object]) -> "RecipeIngredientLine":
        """Build a line from a stored recipe ingredient row."""
        raw_unit = row.get("unit") or Unit.GRAM.value
        try:
            unit: Unit | str = Unit(raw_unit)
        except ValueError:
            unit = str(raw_unit)
        return cls(
            amount=parse_amount(row.get("amount")),
            unit=unit,
            ingredient_id=reference_id(row.get("ingredient")),
        )


@dataclass(frozen=True)
class Ingredient:
    """Ingredient as read in the primary locale."""

    id: EntityId
    name: str
    slug: str | None
    status: str | None


@dataclass(frozen=True)
class Recipe:
    """Recipe as read in the primary locale."""

    id: EntityId
    name: str
    slug: str | None
    status: str | None
    lines: list[RecipeIngredientLine] = field(default_factory=list)


@dataclass(frozen=True)
class IngredientNutrition:
    """Resolved nutrient record owned by one ingredient."""

    id: EntityId
    ingredient_id: EntityId
    ingredient_slug: str
    provenance: Provenance | None
    source_id: int | None
    nutrients: NutrientRecord


@dataclass(frozen=True)
class RecipeNutrition:
    """Aggregated per-100g nutrient record for one recipe."""

    id: EntityId
    recipe_id: EntityId | None
    recipe_slug: str
    recipe_name: str
    last_calculated: datetime | None
    nutrients: NutrientRecord


def parse_amount(raw: object) -> float:
    """Parse the leading number of a free-text amount, zero when there is none.

    Trailing text is ignored, so "100g" is 100 and "1 1/2" is 1. A decimal
    comma is read as a decimal point.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, int | float):
        value = float(raw)
    else:
        match = _LEADING_NUMBER.match(str(raw).replace(",", "."))
        if match is None:
            return 0.0
        value = float(match.group(0))
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def reference_id(raw: object) -> EntityId | None:
    """Return the id of a relationship value, populated or not."""
    if isinstance(raw, dict):
        raw = raw.get("id")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | str) and raw != "":
        return raw
    return None


def localized_value(value: object, locale: str) -> object:
    """Pick one locale out of a localized value map, if it is one."""
    if isinstance(value, dict) and locale in value:
        return value[locale]
    return value


def canonical_slug(value: object, locale: str) -> str | None:
    """Return the canonical slug from a plain or localized slug value."""
    resolved = localized_value(value, locale)
    if isinstance(resolved, str) and resolved:
        return resolved
    return None
