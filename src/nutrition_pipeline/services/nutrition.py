"""Structured nutrition source backed by USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from nutrition_pipeline.adapters.fdc_client import FdcClient
from nutrition_pipeline.domain.catalog import Provenance
from nutrition_pipeline.domain.fdc import FdcFoodDetails, FdcSearchResponse
from nutrition_pipeline.domain.nutrients import NutrientRecord, missing_core_fields
from nutrition_pipeline.errors import UpstreamUnavailable
from nutrition_pipeline.services.nutrient_mapper import (
    RawNutrient,
    map_external_nutrients,
)

_logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass(frozen=True)
class ProviderResult:
    """Partial nutrient data from one provider."""

    nutrients: NutrientRecord
    provenance: Provenance
    source_id: int | None = None


class NutritionProvider(Protocol):
    """One ranked source of ingredient nutrient data."""

    name: str

    async def lookup(self, ingredient_name: str) -> ProviderResult | None:
        """Return nutrient data, None when nothing matches.

        Raises UpstreamUnavailable when the source cannot be reached.
        """


@dataclass
class FdcNutritionProvider(NutritionProvider):
    """Looks up an ingredient in FDC and maps its nutrients."""

    fdc_client: FdcClient
    page_size: int = 5
    data_types: list[str] = field(
        default_factory=lambda: ["Foundation", "SR Legacy"]
    )
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    name: str = "fdc"

    async def lookup(self, ingredient_name: str) -> ProviderResult | None:
        """Search by name, fetch the best match and map its nutrients."""
        _logger.info("Searching FDC for %r", ingredient_name)
        search = await self.search(ingredient_name)
        if not search.foods:
            _logger.info("No FDC match for %r", ingredient_name)
            return None

        best = search.foods[0]
        _logger.info("FDC best match: %s (fdc_id=%s)", best.description, best.fdc_id)
        details = await self.get_food(best.fdc_id)
        nutrients = map_external_nutrients(
            [
                RawNutrient(
                    code=entry.nutrient.number,
                    name=entry.nutrient.name,
                    amount=entry.amount,
                    unit=entry.nutrient.unit_name,
                )
                for entry in details.food_nutrients
                if entry.nutrient is not None
            ]
        )
        missing = missing_core_fields(nutrients)
        if missing:
            _logger.info(
                "FDC data for %r lacks core nutrients: %s",
                ingredient_name,
                ", ".join(missing),
            )
        return ProviderResult(
            nutrients=nutrients,
            provenance=Provenance.STRUCTURED_SOURCE,
            source_id=best.fdc_id,
        )

    async def search(self, query: str) -> FdcSearchResponse:
        """Search FDC foods and validate the response."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(
                query, page_size=self.page_size, data_types=self.data_types
            ),
            action="search",
        )
        return _validate(FdcSearchResponse, payload, action="search")

    async def get_food(self, fdc_id: int) -> FdcFoodDetails:
        """Fetch FDC food details and validate the response."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        return _validate(FdcFoodDetails, payload, action=f"get_food:{fdc_id}")

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except (httpx.HTTPError, ValueError) as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise UpstreamUnavailable(f"FDC {action} failed: {exc}") from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _validate(
    model: type[_ModelT], payload: dict[str, object], *, action: str
) -> _ModelT:
    """Validate a raw FDC payload against its response schema."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamUnavailable(
            f"FDC {action} returned an unexpected payload: {exc}"
        ) from exc


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
