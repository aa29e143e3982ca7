"""Read-only viewer for published apps (``/customer-apps/{appId}``)."""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app_builder.core.dependencies import get_published_app_repository
from app_builder.core.exceptions import AppNotFoundError
from app_builder.services.published_apps import PublishedAppRepository, load_published_config
from app_builder.services.preview import render_not_found, render_preview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/customer-apps/{app_id:path}", response_class=HTMLResponse)
async def view_published_app(
    app_id: str,
    tab: int = Query(0, ge=0),
    repository: PublishedAppRepository = Depends(get_published_app_repository),
):
    """Render a published app; unknown or unreadable apps get the not-found page."""
    try:
        _, config = await load_published_config(repository, app_id)
    except AppNotFoundError:
        logger.info("Published app %s not found", app_id)
        return HTMLResponse(render_not_found(app_id), status_code=404)
    return HTMLResponse(render_preview(config, tab, published=True))
