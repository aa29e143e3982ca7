"""Published app lookup (public, read-only)."""

from fastapi import APIRouter, Depends, HTTPException

from app_builder.core.exceptions import AppNotFoundError
from app_builder.core.dependencies import get_published_app_repository
from app_builder.schemas.publish import PublishedConfigResponse, PublishedStatusResponse
from app_builder.services.published_apps import (
    PublishedAppRepository,
    find_published_app,
    load_published_config,
)
from app_builder.services.publisher import live_url

router = APIRouter()


@router.get("/{app_id}", response_model=PublishedConfigResponse)
async def get_published_app(
    app_id: str,
    repository: PublishedAppRepository = Depends(get_published_app_repository),
):
    try:
        _, config = await load_published_config(repository, app_id)
    except AppNotFoundError as exc:
        raise HTTPException(status_code=404, detail="App not found") from exc
    return PublishedConfigResponse(config=config.to_wire())


@router.get("/{app_id}/status", response_model=PublishedStatusResponse)
async def get_published_status(
    app_id: str,
    repository: PublishedAppRepository = Depends(get_published_app_repository),
):
    """Whether ``app_id`` has a published app, and where it lives."""
    app = await find_published_app(repository, app_id)
    if app is None:
        return PublishedStatusResponse(success=False, message="App has not been published yet.")
    url = app.live_url or live_url(app.app_name, app.custom_domain)
    return PublishedStatusResponse(success=True, message="App is published.", url=url)
