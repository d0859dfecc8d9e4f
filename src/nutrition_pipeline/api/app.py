"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nutrition_pipeline.api.hooks import router as hooks_router
from nutrition_pipeline.app_logging import configure_logging
from nutrition_pipeline.containers import AppContainer
from nutrition_pipeline.domain.jobs import JobType
from nutrition_pipeline.errors import PipelineError
from nutrition_pipeline.services.signatures import SIGNATURE_HEADER


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    debug_errors = container.settings.environment == "local"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(hooks_router)

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(
        request: Request, exc: PipelineError
    ) -> JSONResponse:
        logger.warning(
            "%s %s failed with %s: %s", request.method, request.url.path, exc.kind, exc
        )
        body: dict[str, object] = {"error": exc.kind, "details": str(exc)}
        if debug_errors and exc.__cause__ is not None:
            body["cause"] = repr(exc.__cause__)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/qstash/nutrition")
    async def nutrition_job(request: Request) -> dict[str, object]:
        """Handle a nutrition job delivery."""
        return await _handle_job(request, JobType.NUTRITION)

    @app.get("/api/qstash/nutrition")
    async def nutrition_endpoint() -> dict[str, str]:
        """Describe the nutrition job endpoint."""
        return {"message": "Nutrition processing endpoint"}

    @app.post("/api/qstash/translation")
    async def translation_job(request: Request) -> dict[str, object]:
        """Handle a translation job delivery."""
        return await _handle_job(request, JobType.TRANSLATION)

    @app.get("/api/qstash/translation")
    async def translation_endpoint() -> dict[str, str]:
        """Describe the translation job endpoint."""
        return {"message": "Translation processing endpoint"}

    return app


async def _handle_job(request: Request, job_type: JobType) -> dict[str, object]:
    state_container: AppContainer = request.app.state.container
    raw_body = await request.body()
    result = await state_container.job_consumer.handle(
        job_type, raw_body, request.headers.get(SIGNATURE_HEADER)
    )
    return result.to_body()
