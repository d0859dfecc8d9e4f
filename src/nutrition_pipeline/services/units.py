"""Conversion of recipe ingredient amounts to grams."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_pipeline.domain.catalog import EntityId, Unit

# Volumetric factors assume a water-like density.
_FIXED_FACTORS: dict[str, float] = {
    Unit.GRAM.value: 1.0,
    Unit.KILOGRAM.value: 1000.0,
    Unit.MILLILITER.value: 1.0,
    Unit.LITER.value: 1000.0,
    Unit.TEASPOON.value: 5.0,
    Unit.TABLESPOON.value: 15.0,
    Unit.CUP.value: 240.0,
}

_PIECE_FIELDS: dict[str, str] = {
    Unit.SMALL_PIECE.value: "small_piece_weight",
    Unit.MEDIUM_PIECE.value: "medium_piece_weight",
    Unit.LARGE_PIECE.value: "large_piece_weight",
}

_PIECE_DEFAULTS: dict[str, float] = {
    Unit.SMALL_PIECE.value: 100.0,
    Unit.MEDIUM_PIECE.value: 200.0,
    Unit.LARGE_PIECE.value: 300.0,
}

_logger = logging.getLogger(__name__)


class PieceWeightLookup(Protocol):
    """Source of stored per-ingredient piece weights."""

    def get_piece_weight(self, ingredient_id: EntityId, field: str) -> float | None:
        """Return the stored weight in grams, if any."""


@dataclass
class UnitConverter:
    """Converts (amount, unit) pairs into grams."""

    piece_weights: PieceWeightLookup | None = None

    def to_grams(
        self,
        amount: float,
        unit: Unit | str,
        ingredient_id: EntityId | None = None,
    ) -> float:
        """Convert an amount to grams; never raises."""
        unit_value = unit.value if isinstance(unit, Unit) else str(unit)
        if unit_value in _PIECE_FIELDS:
            weight = self._stored_piece_weight(ingredient_id, unit_value)
            if weight is not None:
                return amount * weight
            return amount * _PIECE_DEFAULTS[unit_value]
        return amount * _FIXED_FACTORS.get(unit_value, 1.0)

    def _stored_piece_weight(
        self, ingredient_id: EntityId | None, unit_value: str
    ) -> float | None:
        if ingredient_id is None or self.piece_weights is None:
            return None
        field = _PIECE_FIELDS[unit_value]
        try:
            weight = self.piece_weights.get_piece_weight(ingredient_id, field)
        except Exception:
            _logger.warning(
                "Piece weight lookup failed for ingredient %s, using default %sg",
                ingredient_id,
                _PIECE_DEFAULTS[unit_value],
                exc_info=True,
            )
            return None
        if weight is None or weight <= 0:
            _logger.info(
                "No %s stored for ingredient %s, using default", field, ingredient_id
            )
            return None
        return weight
