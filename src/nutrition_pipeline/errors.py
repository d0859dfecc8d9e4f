"""Error taxonomy for job processing.

Every error carries a short machine-readable ``kind`` and the HTTP status the
job delivery endpoints answer with, so the queue transport can decide whether
to redeliver.
"""


class PipelineError(Exception):
    """Base class for errors surfaced to job callers."""

    kind = "pipeline_error"
    status_code = 500


class ConfigurationError(PipelineError):
    """A required external credential is not configured."""

    kind = "configuration_error"


class AuthenticationError(PipelineError):
    """Job delivery signature is missing or invalid."""

    kind = "authentication_error"
    status_code = 401


class InvalidJobError(PipelineError):
    """Job body is malformed or lacks an entity id."""

    kind = "invalid_job"
    status_code = 400


class NotFoundError(PipelineError):
    """Referenced entity does not exist."""

    kind = "not_found"
    status_code = 404


class UpstreamUnavailable(PipelineError):
    """Structured source or generative call failed."""

    kind = "upstream_unavailable"


class IncompleteDataError(PipelineError):
    """No source could supply every mandatory nutrient field."""

    kind = "incomplete_data"


class PersistenceError(PipelineError):
    """Content store write failed."""

    kind = "persistence_error"


class JobProcessingError(PipelineError):
    """Unexpected failure while processing a job."""

    kind = "processing_failed"
