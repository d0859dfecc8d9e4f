"""Publish-status transitions derived from before/after snapshots."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel

from nutrition_pipeline.domain.catalog import PUBLISHED


class Transition(str, Enum):
    """Lifecycle transition of a content write."""

    NONE = "none"
    FRESH_PUBLISH = "fresh_publish"
    REPUBLISH = "republish"
    UNPUBLISH = "unpublish"


def classify(
    previous_status: str | None, next_status: str | None, operation: str
) -> Transition:
    """Classify a content write by its publish-status change."""
    if operation == "create":
        return Transition.FRESH_PUBLISH if next_status == PUBLISHED else Transition.NONE
    if operation != "update":
        return Transition.NONE
    was_published = previous_status == PUBLISHED
    is_published = next_status == PUBLISHED
    if is_published and not was_published:
        return Transition.FRESH_PUBLISH
    if is_published:
        return Transition.REPUBLISH
    if was_published:
        return Transition.UNPUBLISH
    return Transition.NONE


class ContentChange(BaseModel):
    """After-change or before-delete notification from the content store."""

    collection: str
    operation: Literal["create", "update", "delete"]
    id: int | str
    doc: dict[str, Any] | None = None
    previous_doc: dict[str, Any] | None = None
    locale: str | None = None

    @property
    def status(self) -> str | None:
        """Publish status after the write."""
        return (self.doc or {}).get("_status")

    @property
    def previous_status(self) -> str | None:
        """Publish status before the write."""
        return (self.previous_doc or {}).get("_status")
