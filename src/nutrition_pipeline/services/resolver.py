"""Ranked nutrition provider pipeline with fill-missing merge."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.domain.catalog import Provenance
from nutrition_pipeline.domain.nutrients import (
    NutrientRecord,
    fill_missing,
    has_core_fields,
    missing_core_fields,
)
from nutrition_pipeline.errors import IncompleteDataError, UpstreamUnavailable
from nutrition_pipeline.services.nutrition import NutritionProvider, ProviderResult

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedNutrition:
    """Merged nutrient record for one ingredient and its provenance."""

    nutrients: NutrientRecord
    provenance: Provenance
    source_id: int | None


@dataclass
class NutritionResolver:
    """Queries providers in rank order until the core fields are complete.

    Earlier providers win field by field; later providers only fill fields
    the earlier ones left out. The provenance is that of the first provider
    when it alone completed the core fields, otherwise that of the provider
    that completed them.
    """

    providers: list[NutritionProvider]

    async def resolve(self, ingredient_name: str) -> ResolvedNutrition | None:
        """Resolve nutrients for an ingredient name, None when nothing matched."""
        contributions: list[ProviderResult] = []
        merged: NutrientRecord = {}
        last_error: UpstreamUnavailable | None = None

        for provider in self.providers:
            if has_core_fields(merged):
                break
            try:
                result = await provider.lookup(ingredient_name)
            except UpstreamUnavailable as exc:
                _logger.warning(
                    "Provider %s unavailable for %r: %s",
                    provider.name,
                    ingredient_name,
                    exc,
                )
                last_error = exc
                continue
            if result is None or not result.nutrients:
                continue
            contributions.append(result)
            merged = fill_missing(merged, result.nutrients)

        if not contributions:
            if last_error is not None:
                raise last_error
            return None
        if not has_core_fields(merged):
            if last_error is not None:
                raise last_error
            raise IncompleteDataError(
                f"Missing core nutrients for {ingredient_name!r}: "
                + ", ".join(missing_core_fields(merged))
            )

        first = contributions[0]
        provenance = (
            first.provenance
            if has_core_fields(first.nutrients)
            else contributions[-1].provenance
        )
        source_id = next(
            (result.source_id for result in contributions if result.source_id), None
        )
        if len(contributions) > 1:
            _logger.info(
                "Merged %s providers for %r (earlier providers take priority)",
                len(contributions),
                ingredient_name,
            )
        return ResolvedNutrition(
            nutrients=merged, provenance=provenance, source_id=source_id
        )
