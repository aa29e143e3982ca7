"""Gemini-backed content generation for the editor.

Every failure (SDK error, non-JSON reply, reply that does not match the
expected shape) surfaces as ``AIContentError`` with a generic retry message.
"""

import base64
import json
import logging
import re
from typing import Any

from google import genai
from google.genai import types
from pydantic import BaseModel, TypeAdapter, ValidationError

from app_builder.core.config import settings
from app_builder.core.exceptions import AIContentError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|```$")

DEFAULT_FEATURED_IMAGE_PROMPT = (
    "A luxurious 24k gold facial mask on a woman's face in a serene spa setting."
)


class MarketingIdea(BaseModel):
    type: str
    headline: str
    body: str


_MARKETING_IDEAS = TypeAdapter(list[MarketingIdea])

_MARKETING_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "type": types.Schema(type=types.Type.STRING),
            "headline": types.Schema(type=types.Type.STRING),
            "body": types.Schema(type=types.Type.STRING),
        },
        required=["type", "headline", "body"],
    ),
)


def parse_json_reply(text: str | None) -> Any:
    """Parse a model reply that may be wrapped in a Markdown code fence."""
    if not text:
        raise AIContentError()
    cleaned = _FENCE_RE.sub("", text.strip()).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("AI reply was not JSON: %.120s", cleaned)
        raise AIContentError() from exc


class AIContentService:
    def __init__(
        self,
        client: genai.Client | None = None,
        model: str | None = None,
        image_model: str | None = None,
    ):
        self._client = client
        self.model = model or settings.GEMINI_MODEL
        self.image_model = image_model or settings.GEMINI_IMAGE_MODEL

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not settings.GEMINI_API_KEY:
                logger.error("GEMINI_API_KEY is not set")
                raise AIContentError()
            self._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._client

    async def generate_json(self, prompt: str, schema: types.Schema) -> Any:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except AIContentError:
            raise
        except Exception as exc:
            logger.exception("Gemini generate_content failed")
            raise AIContentError() from exc
        return parse_json_reply(response.text)

    async def generate_marketing_content(
        self, prompt: str, content_type: str
    ) -> list[MarketingIdea]:
        full_prompt = (
            "You are a marketing expert for a solo service provider in the beauty/wellness "
            f'industry. Generate marketing content for the following purpose: "{prompt}". '
            f'The specific format I need is a "{content_type}". Respond with a JSON array of '
            "objects, each a different idea, with 'type', 'headline' and 'body' keys."
        )
        data = await self.generate_json(full_prompt, _MARKETING_SCHEMA)
        try:
            return _MARKETING_IDEAS.validate_python(data)
        except ValidationError as exc:
            logger.warning("AI marketing reply did not match schema: %s", exc)
            raise AIContentError() from exc

    async def generate_featured_service_image(
        self, prompt: str = DEFAULT_FEATURED_IMAGE_PROMPT
    ) -> str:
        """Generate one JPEG and return it as a data URI."""
        try:
            response = await self.client.aio.models.generate_images(
                model=self.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type="image/jpeg",
                    aspect_ratio="1:1",
                ),
            )
        except AIContentError:
            raise
        except Exception as exc:
            logger.exception("Gemini generate_images failed")
            raise AIContentError() from exc

        images = response.generated_images or []
        image_bytes = images[0].image.image_bytes if images and images[0].image else None
        if not image_bytes:
            logger.warning("Gemini returned no image for prompt %.80s", prompt)
            raise AIContentError()
        return f"data:image/jpeg;base64,{base64.b64encode(image_bytes).decode('ascii')}"
