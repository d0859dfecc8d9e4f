"""Authenticated job delivery handling."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from nutrition_pipeline.domain.jobs import EntityKind, JobPayload, JobType
from nutrition_pipeline.errors import (
    InvalidJobError,
    JobProcessingError,
    PipelineError,
)
from nutrition_pipeline.services.ingredient_nutrition import IngredientNutritionService
from nutrition_pipeline.services.signatures import SignatureVerifier
from nutrition_pipeline.services.translation import TranslationService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobResult:
    """Successful job outcome rendered back to the transport."""

    message: str
    details: dict[str, object] = field(default_factory=dict)

    def to_body(self) -> dict[str, object]:
        """Render the JSON response body."""
        return {"success": True, "message": self.message, **self.details}


@dataclass
class JobConsumer:
    """Verifies job deliveries and routes them to the owning service."""

    verifier: SignatureVerifier
    ingredient_nutrition: IngredientNutritionService
    translation: TranslationService

    async def handle(
        self, job_type: JobType, raw_body: bytes, signature: str | None
    ) -> JobResult:
        """Verify, parse and process one job delivery."""
        self.verifier.verify(raw_body, signature)
        payload = parse_payload(raw_body)
        try:
            if job_type is JobType.NUTRITION:
                return await self._handle_nutrition(payload)
            return await self._handle_translation(payload)
        except PipelineError as exc:
            _logger.warning("%s job failed (%s): %s", job_type.value, exc.kind, exc)
            raise
        except Exception as exc:
            _logger.exception("Unexpected failure in %s job", job_type.value)
            raise JobProcessingError(str(exc)) from exc

    async def _handle_nutrition(self, payload: JobPayload) -> JobResult:
        if not payload.ingredient_id:
            raise InvalidJobError("Missing ingredient ID")
        _logger.info("Processing nutrition for ingredient %s", payload.ingredient_id)
        outcome = await self.ingredient_nutrition.process(payload.ingredient_id)
        if not outcome.created:
            return JobResult(message="Already processed")
        provenance = outcome.nutrition.provenance
        return JobResult(
            message="Nutrition data processed successfully",
            details={
                "ingredientId": payload.ingredient_id,
                "dataSource": provenance.value if provenance else None,
            },
        )

    async def _handle_translation(self, payload: JobPayload) -> JobResult:
        kind = payload.type or (
            EntityKind.INGREDIENT if payload.ingredient_id else EntityKind.RECIPE
        )
        entity_id = (
            payload.ingredient_id
            if kind is EntityKind.INGREDIENT
            else payload.recipe_id
        )
        if not entity_id:
            raise InvalidJobError("Missing entity ID")

        _logger.info("Processing %s translation for %s", kind.value, entity_id)
        if kind is EntityKind.INGREDIENT:
            locales = await self.translation.translate_ingredient(entity_id)
        else:
            locales = await self.translation.translate_recipe(entity_id)
        return JobResult(
            message=f"{kind.value} translation processed successfully",
            details={"entityId": entity_id, "type": kind.value, "locales": locales},
        )


def parse_payload(raw_body: bytes) -> JobPayload:
    """Parse a job body, rejecting anything that is not a job object."""
    try:
        return JobPayload.model_validate_json(raw_body)
    except ValidationError as exc:
        message = f"Malformed job body: {exc.error_count()} errors"
        raise InvalidJobError(message) from exc
