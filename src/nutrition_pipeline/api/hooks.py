"""Content store hook endpoints with shared token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrition_pipeline.domain.lifecycle import ContentChange

if TYPE_CHECKING:
    from nutrition_pipeline.containers import AppContainer

router = APIRouter(prefix="/hooks", tags=["hooks"])


def _get_hook_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.hook_token


async def require_hook_token(
    x_hook_token: str | None = Header(default=None),
    hook_token: str = Depends(_get_hook_token),
) -> None:
    """Ensure hook calls carry the shared hook token."""
    if not x_hook_token or x_hook_token != hook_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/content-change", dependencies=[Depends(require_hook_token)])
async def content_change(change: ContentChange, request: Request) -> dict[str, object]:
    """Run dispatch, recompute and cleanup for a committed content write."""
    container: AppContainer = request.app.state.container
    outcome = await container.content_events.handle(change)
    return {"status": "ok", **outcome.to_body()}
