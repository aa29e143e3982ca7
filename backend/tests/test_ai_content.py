"""Gemini content service with a stubbed SDK client."""

import base64
from types import SimpleNamespace

import pytest

from app_builder.core.exceptions import AIContentError
from app_builder.services.ai_content import AIContentService, parse_json_reply


class _Models:
    def __init__(self, text=None, images=None, error=None):
        self.text = text
        self.images = images
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)

    async def generate_images(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(generated_images=self.images)


def _service(**kwargs) -> tuple[AIContentService, _Models]:
    models = _Models(**kwargs)
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return AIContentService(client=client, model="m", image_model="im"), models


def test_parse_strips_code_fences():
    assert parse_json_reply('```json\n[{"a": 1}]\n```') == [{"a": 1}]
    assert parse_json_reply('{"a": 1}') == {"a": 1}


def test_parse_failures_map_to_retry_error():
    with pytest.raises(AIContentError):
        parse_json_reply("Sorry, I can't help with that")
    with pytest.raises(AIContentError):
        parse_json_reply("")


@pytest.mark.asyncio
async def test_marketing_ideas_parsed():
    text = '```json\n[{"type": "Instagram Post", "headline": "Glow", "body": "Book today"}]\n```'
    service, models = _service(text=text)
    ideas = await service.generate_marketing_content("summer promo", "Instagram Post")
    assert ideas[0].headline == "Glow"
    assert models.calls[0]["model"] == "m"
    assert "summer promo" in models.calls[0]["contents"]


@pytest.mark.asyncio
async def test_marketing_wrong_shape_is_an_error():
    service, _ = _service(text='{"headline": "no list"}')
    with pytest.raises(AIContentError):
        await service.generate_marketing_content("promo", "Email")


@pytest.mark.asyncio
async def test_sdk_errors_are_wrapped():
    service, _ = _service(error=RuntimeError("quota"))
    with pytest.raises(AIContentError) as exc_info:
        await service.generate_marketing_content("promo", "Email")
    assert exc_info.value.message.endswith("Please try again.")


@pytest.mark.asyncio
async def test_featured_image_returns_data_uri():
    images = [SimpleNamespace(image=SimpleNamespace(image_bytes=b"jpeg-bytes"))]
    service, models = _service(images=images)
    uri = await service.generate_featured_service_image("gold facial")
    assert uri == "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()
    assert models.calls[0]["model"] == "im"


@pytest.mark.asyncio
async def test_featured_image_empty_result_is_an_error():
    service, _ = _service(images=[])
    with pytest.raises(AIContentError):
        await service.generate_featured_service_image("gold facial")
