"""Mapping of external nutrient amounts onto canonical nutrient fields."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.domain.nutrients import NutrientRecord

# FDC nutrient numbers.
NUTRIENT_CODES: dict[str, str] = {
    "208": "calories",
    "203": "protein",
    "204": "fat",
    "606": "saturated_fat",
    "605": "trans_fat",
    "646": "polyunsaturated_fat",
    "645": "monounsaturated_fat",
    "601": "cholesterol",
    "205": "carbohydrates",
    "291": "fiber",
    "269": "sugars",
    "539": "added_sugars",
    "307": "sodium",
    "306": "potassium",
    "301": "calcium",
    "303": "iron",
    "320": "vitamin_a",
    "401": "vitamin_c",
    "324": "vitamin_d",
    "323": "vitamin_e",
    "430": "vitamin_k",
    "304": "magnesium",
    "309": "zinc",
    "305": "phosphorus",
    "417": "folate",
    "406": "niacin",
    "405": "riboflavin",
    "404": "thiamin",
    "415": "vitamin_b6",
    "418": "vitamin_b12",
    "416": "biotin",
    "410": "pantothenic_acid",
    "317": "selenium",
    "312": "copper",
    "315": "manganese",
    "313": "chromium",
    "314": "molybdenum",
    "310": "iodine",
    "316": "chloride",
}

_MILLIGRAM_FIELDS = frozenset(
    {
        "sodium",
        "potassium",
        "calcium",
        "iron",
        "magnesium",
        "zinc",
        "phosphorus",
        "copper",
        "manganese",
        "chloride",
    }
)

_MICROGRAM_FIELDS = frozenset(
    {
        "folate",
        "vitamin_k",
        "biotin",
        "selenium",
        "chromium",
        "molybdenum",
        "iodine",
        "vitamin_b12",
    }
)

# IU values are stored as reported; no numeric conversion.
_IU_FIELDS = frozenset({"vitamin_a", "vitamin_d"})

_MICROGRAM_ALIASES = frozenset({"µg", "μg", "ug", "mcg"})

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawNutrient:
    """Nutrient amount as reported by an external source."""

    code: str
    name: str
    amount: float | None
    unit: str


def expected_unit(field: str) -> str:
    """Return the storage unit of a canonical field."""
    if field == "calories":
        return "kcal"
    if field in _IU_FIELDS:
        return "iu"
    if field in _MICROGRAM_FIELDS:
        return "mcg"
    if field in _MILLIGRAM_FIELDS:
        return "mg"
    return "g"


def convert_unit(value: float, unit_name: str, target_unit: str) -> float:
    """Convert a value between mass units; unknown pairs pass through."""
    unit = _normalize_unit(unit_name)
    target = _normalize_unit(target_unit)
    if unit == target:
        return value
    if unit == "mcg" and target == "mg":
        return value / 1000
    if unit == "mg" and target == "g":
        return value / 1000
    if unit == "g" and target == "mg":
        return value * 1000
    return value


def map_external_nutrients(raw_nutrients: list[RawNutrient]) -> NutrientRecord:
    """Map external nutrient amounts onto canonical fields.

    Unknown codes are dropped. Values that are not strictly positive after
    conversion are treated as absent and omitted from the result.
    """
    mapped: NutrientRecord = {}
    for nutrient in raw_nutrients:
        field = NUTRIENT_CODES.get(nutrient.code)
        if field is None or nutrient.amount is None:
            continue
        target = expected_unit(field)
        value = convert_unit(float(nutrient.amount), nutrient.unit, target)
        if value > 0:
            mapped[field] = value
            _logger.debug(
                "Mapped %s: %s %s (from %s)", field, value, target, nutrient.name
            )
    _logger.info("Mapped %s nutrient fields", len(mapped))
    return mapped


def _normalize_unit(unit_name: str) -> str:
    unit = unit_name.strip().lower()
    if unit in _MICROGRAM_ALIASES:
        return "mcg"
    return unit
