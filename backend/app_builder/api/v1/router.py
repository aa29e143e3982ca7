"""Aggregate all v1 sub-routers."""

from fastapi import APIRouter

from app_builder.api.v1.ai import router as ai_router
from app_builder.api.v1.apps import router as apps_router
from app_builder.api.v1.builder import router as builder_router
from app_builder.api.v1.health import router as health_router
from app_builder.api.v1.media import router as media_router
from app_builder.api.v1.preview import router as preview_router
from app_builder.api.v1.publish import router as publish_router
from app_builder.api.v1.session import router as session_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["health"])
api_v1_router.include_router(session_router, tags=["session"])
api_v1_router.include_router(media_router, prefix="/builder/{user_id}/media", tags=["media"])
api_v1_router.include_router(
    preview_router, prefix="/builder/{user_id}/preview", tags=["preview"]
)
api_v1_router.include_router(
    publish_router, prefix="/builder/{user_id}/publish", tags=["publish"]
)
api_v1_router.include_router(ai_router, prefix="/builder/{user_id}/ai", tags=["ai"])
api_v1_router.include_router(builder_router, prefix="/builder/{user_id}", tags=["builder"])
api_v1_router.include_router(apps_router, prefix="/apps", tags=["apps"])
