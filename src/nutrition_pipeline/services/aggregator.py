"""Recipe nutrient aggregation.

Recipe values follow the EuroFIR recipe formula with a retention factor of
1.0 (no cooking losses):

    total[f]   = sum(per100g_i[f] / 100 * grams_i)
    recipe[f]  = total[f] / sum(grams_i) * 100

Lines whose ingredient has no resolved record are skipped and do not count
towards the total weight.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from nutrition_pipeline.domain.catalog import EntityId, RecipeIngredientLine
from nutrition_pipeline.domain.nutrients import NUTRIENT_FIELDS, NutrientRecord, round2
from nutrition_pipeline.services.units import UnitConverter

CALORIE_TOLERANCE = 50.0

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeAggregate:
    """Per-100g recipe nutrients with calculation bookkeeping."""

    nutrients: NutrientRecord
    total_weight_g: float
    processed_lines: int
    skipped_lines: int


@dataclass
class RecipeAggregator:
    """Computes per-100g recipe nutrients from ingredient records."""

    converter: UnitConverter

    def aggregate(
        self,
        lines: list[RecipeIngredientLine],
        records: Mapping[EntityId, Mapping[str, float]],
    ) -> RecipeAggregate | None:
        """Aggregate ingredient lines, None when no line carries weight."""
        totals: NutrientRecord = dict.fromkeys(NUTRIENT_FIELDS, 0.0)
        total_weight = 0.0
        processed = 0
        skipped = 0

        for line in lines:
            record = (
                records.get(line.ingredient_id)
                if line.ingredient_id is not None
                else None
            )
            if record is None:
                _logger.info(
                    "No nutrition data for ingredient %s, skipping line",
                    line.ingredient_id,
                )
                skipped += 1
                continue
            grams = self.converter.to_grams(line.amount, line.unit, line.ingredient_id)
            total_weight += grams
            for field in NUTRIENT_FIELDS:
                contribution = record.get(field, 0.0) / 100 * grams
                if math.isfinite(contribution):
                    totals[field] += contribution
                else:
                    _logger.warning(
                        "Invalid contribution for %s: %s", field, contribution
                    )
            processed += 1

        if total_weight <= 0:
            _logger.info("Recipe has no usable weight, skipping aggregation")
            return None

        per_100g = {
            field: round2(total / total_weight * 100) for field, total in totals.items()
        }
        check_calories(per_100g)
        _logger.info(
            "Aggregated recipe: weight=%sg processed=%s skipped=%s calories=%s",
            total_weight,
            processed,
            skipped,
            per_100g["calories"],
        )
        return RecipeAggregate(
            nutrients=per_100g,
            total_weight_g=total_weight,
            processed_lines=processed,
            skipped_lines=skipped,
        )


def check_calories(record: Mapping[str, float]) -> bool:
    """Compare calories with 4/9/4 macro energy; log a warning on mismatch."""
    expected = (
        4 * record.get("protein", 0.0)
        + 9 * record.get("fat", 0.0)
        + 4 * record.get("carbohydrates", 0.0)
    )
    difference = abs(record.get("calories", 0.0) - expected)
    if difference > CALORIE_TOLERANCE:
        _logger.warning(
            "Calorie discrepancy of %.2f kcal/100g (reported %s, macros suggest %.2f)",
            difference,
            record.get("calories", 0.0),
            expected,
        )
        return False
    return True
