"""Publish-triggered job dispatch."""

import logging
from dataclasses import dataclass

from nutrition_pipeline.adapters.qstash_client import JobPublisher
from nutrition_pipeline.domain.catalog import EntityId
from nutrition_pipeline.domain.jobs import EntityKind, JobMessage, JobType
from nutrition_pipeline.domain.lifecycle import Transition

_logger = logging.getLogger(__name__)

JOB_ROUTES = {
    JobType.NUTRITION: "/api/qstash/nutrition",
    JobType.TRANSLATION: "/api/qstash/translation",
}


def jobs_for_transition(
    transition: Transition, entity_kind: EntityKind, entity_id: EntityId
) -> list[JobMessage]:
    """Return the jobs a lifecycle transition should enqueue."""
    if transition is not Transition.FRESH_PUBLISH:
        return []
    jobs = [JobMessage(JobType.TRANSLATION, entity_id, entity_kind)]
    if entity_kind is EntityKind.INGREDIENT:
        jobs.append(JobMessage(JobType.NUTRITION, entity_id, entity_kind))
    return jobs


@dataclass
class JobDispatcher:
    """Publishes job messages for publish transitions.

    Publish failures are logged and never raised, so the content write that
    triggered the dispatch is never failed by the queue.
    """

    publisher: JobPublisher
    app_url: str

    def delivery_url(self, job_type: JobType) -> str:
        """Return the URL the transport delivers a job type to."""
        return f"{self.app_url.rstrip('/')}{JOB_ROUTES[job_type]}"

    async def dispatch(
        self, transition: Transition, entity_kind: EntityKind, entity_id: EntityId
    ) -> list[JobMessage]:
        """Enqueue every job due for a transition and return the published ones."""
        published: list[JobMessage] = []
        for job in jobs_for_transition(transition, entity_kind, entity_id):
            try:
                message_id = await self.publisher.publish_json(
                    self.delivery_url(job.job_type), job.to_payload()
                )
            except Exception:
                _logger.exception(
                    "Failed to queue %s job for %s %s",
                    job.job_type.value,
                    entity_kind.value,
                    entity_id,
                )
                continue
            _logger.info(
                "Queued %s job for %s %s (message %s)",
                job.job_type.value,
                entity_kind.value,
                entity_id,
                message_id,
            )
            published.append(job)
        return published
