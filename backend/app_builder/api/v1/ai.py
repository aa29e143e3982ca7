"""AI assistant endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from app_builder.core.dependencies import get_ai_service, get_editor
from app_builder.core.exceptions import AIContentError
from app_builder.schemas.ai import FeaturedImageRequest, MarketingRequest, MarketingResponse
from app_builder.schemas.builder import BuilderStateResponse
from app_builder.schemas.field_rules import ConfigField
from app_builder.services.ai_content import AIContentService
from app_builder.services.editor import DesignEditor

router = APIRouter()


@router.post("/featured-image", response_model=BuilderStateResponse)
async def generate_featured_image(
    body: FeaturedImageRequest,
    editor: DesignEditor = Depends(get_editor),
    ai: AIContentService = Depends(get_ai_service),
):
    """Generate a featured-service image and set it like a manual edit (undoable)."""
    try:
        uri = await ai.generate_featured_service_image(body.prompt)
    except AIContentError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    editor.set_field(ConfigField.FEATURED_SERVICE_IMAGE_URL, uri)
    return BuilderStateResponse.of(editor)


@router.post("/marketing", response_model=MarketingResponse)
async def generate_marketing(
    body: MarketingRequest,
    ai: AIContentService = Depends(get_ai_service),
):
    try:
        ideas = await ai.generate_marketing_content(body.prompt, body.content_type)
    except AIContentError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return MarketingResponse(ideas=ideas)
