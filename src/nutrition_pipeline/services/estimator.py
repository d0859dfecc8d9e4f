"""Generative nutrient estimation used as the fallback provider."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ConfigDict, Field, ValidationError, create_model

from nutrition_pipeline.domain.catalog import Provenance
from nutrition_pipeline.domain.nutrients import ALL_FIELDS
from nutrition_pipeline.errors import ConfigurationError, UpstreamUnavailable
from nutrition_pipeline.services.nutrition import NutritionProvider, ProviderResult

NUTRIENT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {field: {"type": "number", "minimum": 0} for field in ALL_FIELDS},
    "required": list(ALL_FIELDS),
    "additionalProperties": False,
}

NutrientEstimate = create_model(
    "NutrientEstimate",
    __config__=ConfigDict(extra="ignore", allow_inf_nan=False),
    **{field: (float, Field(ge=0)) for field in ALL_FIELDS},
)

_PROMPT_TEMPLATE = """\
Provide detailed nutritional information per 100g for the following \
ingredient: "{name}".

Include all available nutrients with accurate values based on USDA or WHO \
nutritional databases. Energy is in kcal; macronutrients, fiber and sugars in \
g; cholesterol, sodium, potassium, calcium, iron, magnesium, zinc, \
phosphorus, copper, manganese, chloride and most vitamins in mg; folate, \
vitamin_k, biotin, selenium, chromium, molybdenum, iodine and vitamin_b12 in \
mcg; vitamin_a and vitamin_d in IU.

For piece weights (small_piece_weight, medium_piece_weight, \
large_piece_weight):
- Think about the smallest practical unit of this ingredient that people \
would use
- For example: one grain of rice (~0.02g), one slice of apple (~15g), one \
piece of carrot (~5g)
- Provide realistic weights in grams for small, medium, and large pieces

Respond with accurate nutritional data. Use 0 for nutrients that are not \
present or unknown."""

_logger = logging.getLogger(__name__)


class NutrientEstimatorClient(Protocol):
    """Interface for structured-output text generation."""

    async def generate(
        self, *, model: str, prompt: str, schema: dict[str, object], name: str
    ) -> dict[str, object]:
        """Return a JSON object matching the given schema."""


def build_prompt(ingredient_name: str) -> str:
    """Render the nutrient estimation prompt for one ingredient."""
    return _PROMPT_TEMPLATE.format(name=ingredient_name)


@dataclass
class GenerativeNutritionProvider(NutritionProvider):
    """Estimates every canonical field with a language model."""

    client: NutrientEstimatorClient
    model: str
    name: str = "generative"

    async def lookup(self, ingredient_name: str) -> ProviderResult | None:
        """Estimate per-100g nutrients for an ingredient."""
        _logger.info(
            "Estimating nutrients for %r with %s", ingredient_name, self.model
        )
        try:
            raw = await self.client.generate(
                model=self.model,
                prompt=build_prompt(ingredient_name),
                schema=NUTRIENT_SCHEMA,
                name="nutrient_estimate",
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            raise UpstreamUnavailable(f"Nutrient estimation failed: {exc}") from exc
        try:
            estimate = NutrientEstimate.model_validate(raw)
        except ValidationError as exc:
            raise UpstreamUnavailable(
                f"Nutrient estimate did not match the schema: {exc}"
            ) from exc
        return ProviderResult(
            nutrients={
                field: float(value) for field, value in estimate.model_dump().items()
            },
            provenance=Provenance.GENERATIVE_FALLBACK,
        )
