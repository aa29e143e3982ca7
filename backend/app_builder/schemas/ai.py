"""AI assistant request/response schemas."""

from pydantic import BaseModel, Field

from app_builder.services.ai_content import DEFAULT_FEATURED_IMAGE_PROMPT, MarketingIdea


class FeaturedImageRequest(BaseModel):
    prompt: str = Field(DEFAULT_FEATURED_IMAGE_PROMPT, min_length=1, max_length=1000)


class MarketingRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=1000)
    content_type: str = Field("Social Media Post", alias="contentType", min_length=1, max_length=100)

    model_config = {"populate_by_name": True}


class MarketingResponse(BaseModel):
    ideas: list[MarketingIdea]
