"""Job message envelopes exchanged with the queue transport."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from nutrition_pipeline.domain.catalog import EntityId


class JobType(str, Enum):
    """Background job kinds, one delivery route each."""

    NUTRITION = "nutrition"
    TRANSLATION = "translation"


class EntityKind(str, Enum):
    """Entity subtype a job refers to."""

    INGREDIENT = "ingredient"
    RECIPE = "recipe"


@dataclass(frozen=True)
class JobMessage:
    """Job to publish: what to do for which entity."""

    job_type: JobType
    entity_id: EntityId
    entity_kind: EntityKind

    def to_payload(self) -> dict[str, object]:
        """Render the JSON body delivered back to the job routes."""
        id_key = (
            "ingredientId" if self.entity_kind is EntityKind.INGREDIENT else "recipeId"
        )
        payload: dict[str, object] = {id_key: self.entity_id}
        if self.job_type is JobType.TRANSLATION:
            payload["type"] = self.entity_kind.value
        return payload


class JobPayload(BaseModel):
    """Inbound job delivery body."""

    model_config = ConfigDict(populate_by_name=True)

    ingredient_id: int | str | None = Field(default=None, alias="ingredientId")
    recipe_id: int | str | None = Field(default=None, alias="recipeId")
    type: EntityKind | None = None
