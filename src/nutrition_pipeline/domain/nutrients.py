"""Canonical nutrient fields and record helpers.

A nutrient record maps canonical field names to values per 100 g of
substance. Piece weights are absolute grams of one small, medium or large
piece and are not scaled.
"""

import math
from collections.abc import Mapping

NutrientRecord = dict[str, float]

CORE_FIELDS: tuple[str, ...] = ("calories", "protein", "fat", "carbohydrates")

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "fat",
    "saturated_fat",
    "trans_fat",
    "polyunsaturated_fat",
    "monounsaturated_fat",
    "cholesterol",
    "carbohydrates",
    "fiber",
    "sugars",
    "added_sugars",
    "sodium",
    "potassium",
    "calcium",
    "iron",
    "vitamin_a",
    "vitamin_c",
    "vitamin_d",
    "vitamin_e",
    "vitamin_k",
    "magnesium",
    "zinc",
    "phosphorus",
    "folate",
    "niacin",
    "riboflavin",
    "thiamin",
    "vitamin_b6",
    "vitamin_b12",
    "biotin",
    "pantothenic_acid",
    "selenium",
    "copper",
    "manganese",
    "chromium",
    "molybdenum",
    "iodine",
    "chloride",
)

PIECE_WEIGHT_FIELDS: tuple[str, ...] = (
    "small_piece_weight",
    "medium_piece_weight",
    "large_piece_weight",
)

ALL_FIELDS: tuple[str, ...] = NUTRIENT_FIELDS + PIECE_WEIGHT_FIELDS


def has_core_fields(record: Mapping[str, float]) -> bool:
    """Return true when every mandatory core field is present."""
    return all(field in record for field in CORE_FIELDS)


def missing_core_fields(record: Mapping[str, float]) -> list[str]:
    """Return the mandatory core fields absent from a record."""
    return [field for field in CORE_FIELDS if field not in record]


def fill_missing(
    primary: Mapping[str, float], secondary: Mapping[str, float]
) -> NutrientRecord:
    """Merge two records, keeping primary values and filling gaps from secondary."""
    merged: NutrientRecord = dict(secondary)
    merged.update(primary)
    return merged


def sanitize(record: Mapping[str, object]) -> NutrientRecord:
    """Keep known fields with finite, non-negative numeric values."""
    cleaned: NutrientRecord = {}
    for field in ALL_FIELDS:
        value = record.get(field)
        if isinstance(value, bool) or not isinstance(value, int | float):
            continue
        number = float(value)
        if math.isfinite(number) and number >= 0:
            cleaned[field] = number
    return cleaned


def complete_record(
    record: Mapping[str, float], fields: tuple[str, ...] = ALL_FIELDS
) -> NutrientRecord:
    """Return a record holding every field, unknown values defaulting to zero."""
    return {field: float(record.get(field, 0.0)) for field in fields}


def round2(value: float) -> float:
    """Round half up to two decimal places."""
    return math.floor(value * 100 + 0.5) / 100


def round_record(record: Mapping[str, float]) -> NutrientRecord:
    """Round every value of a record to two decimal places."""
    return {field: round2(value) for field, value in record.items()}
