"""Content-change hook handling: dispatch, recompute and cleanup."""

import logging
from dataclasses import dataclass, field

from nutrition_pipeline.domain.catalog import canonical_slug
from nutrition_pipeline.domain.jobs import EntityKind
from nutrition_pipeline.domain.lifecycle import ContentChange, Transition, classify
from nutrition_pipeline.services.cleanup import LifecycleCleanup
from nutrition_pipeline.services.content import ALL_LOCALES, INGREDIENTS, RECIPES
from nutrition_pipeline.services.dispatcher import JobDispatcher
from nutrition_pipeline.services.recipe_nutrition import RecipeNutritionService

_logger = logging.getLogger(__name__)

_COLLECTION_KINDS = {
    INGREDIENTS: EntityKind.INGREDIENT,
    RECIPES: EntityKind.RECIPE,
}


@dataclass
class ContentChangeOutcome:
    """What a content change triggered."""

    transition: Transition = Transition.NONE
    queued: list[str] = field(default_factory=list)
    recalculated: bool = False
    cleaned_up: int = 0
    ignored: str | None = None

    def to_body(self) -> dict[str, object]:
        """Render the hook response body."""
        return {
            "transition": self.transition.value,
            "queued": self.queued,
            "recalculated": self.recalculated,
            "cleaned_up": self.cleaned_up,
            "ignored": self.ignored,
        }


@dataclass
class ContentEventHandler:
    """Reacts to content writes without ever failing them."""

    dispatcher: JobDispatcher
    recipe_nutrition: RecipeNutritionService
    cleanup: LifecycleCleanup
    primary_locale: str = "en"

    async def handle(self, change: ContentChange) -> ContentChangeOutcome:
        """Classify a content write and run the work it triggers."""
        kind = _COLLECTION_KINDS.get(change.collection)
        if kind is None:
            return ContentChangeOutcome(ignored="collection")

        if change.operation == "delete":
            return ContentChangeOutcome(cleaned_up=self._cleanup_deleted(change, kind))

        if change.locale not in (None, ALL_LOCALES, self.primary_locale):
            _logger.debug(
                "Ignoring %s write in locale %s", change.collection, change.locale
            )
            return ContentChangeOutcome(ignored="locale")

        transition = classify(change.previous_status, change.status, change.operation)
        outcome = ContentChangeOutcome(transition=transition)
        if transition is Transition.NONE:
            return outcome

        _logger.info("%s %s: %s", kind.value.capitalize(), change.id, transition.value)
        jobs = await self.dispatcher.dispatch(transition, kind, change.id)
        outcome.queued = [job.job_type.value for job in jobs]

        if kind is EntityKind.RECIPE:
            if transition in (Transition.FRESH_PUBLISH, Transition.REPUBLISH):
                outcome.recalculated = self._recalculate(change, transition)
            elif transition is Transition.UNPUBLISH:
                outcome.cleaned_up = self.cleanup.on_recipe_unpublished(
                    self._slug(change)
                )
        return outcome

    def _recalculate(self, change: ContentChange, transition: Transition) -> bool:
        try:
            saved = self.recipe_nutrition.recalculate(change.id, transition)
        except Exception:
            _logger.exception("Failed to calculate nutrition for recipe %s", change.id)
            return False
        return saved is not None

    def _cleanup_deleted(self, change: ContentChange, kind: EntityKind) -> int:
        slug = self._slug(change)
        if kind is EntityKind.INGREDIENT:
            return self.cleanup.on_ingredient_deleted(change.id, fallback_slug=slug)
        return self.cleanup.on_recipe_deleted(change.id, fallback_slug=slug)

    def _slug(self, change: ContentChange) -> str | None:
        for doc in (change.doc, change.previous_doc):
            if doc:
                slug = canonical_slug(doc.get("slug"), self.primary_locale)
                if slug:
                    return slug
        return None
