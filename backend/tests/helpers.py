"""Test helpers: image payloads, fake collaborators."""

import io

from PIL import Image

from app_builder.core.exceptions import AIContentError, PublishError
from app_builder.services.ai_content import MarketingIdea
from app_builder.services.publisher import PublishRequest


def make_image(width: int = 64, height: int = 48, fmt: str = "PNG", color=(200, 120, 90)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


class FakeAIService:
    """Stands in for AIContentService; set ``fail`` to simulate an outage."""

    image_uri = "data:image/jpeg;base64,ZmFrZQ=="

    def __init__(self):
        self.fail = False
        self.prompts: list[str] = []

    async def generate_featured_service_image(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise AIContentError()
        return self.image_uri

    async def generate_marketing_content(self, prompt: str, content_type: str):
        self.prompts.append(prompt)
        if self.fail:
            raise AIContentError()
        return [
            MarketingIdea(type=content_type, headline="Glow Up", body=f"Book now: {prompt}"),
        ]


class RecordingBackend:
    """Publish backend that records calls and can fail at a named step."""

    def __init__(self, fail_at: str | None = None, error: Exception | None = None):
        self.fail_at = fail_at
        self.error = error or PublishError("boom")
        self.calls: list[str] = []

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if name == self.fail_at:
            raise self.error

    async def store_snapshot(self, request: PublishRequest) -> None:
        self._step("store_snapshot")

    async def package(self, request: PublishRequest) -> bytes:
        self._step("package")
        return b"<html></html>"

    async def upload(self, request: PublishRequest, bundle: bytes) -> str:
        self._step("upload")
        return "s3://bucket/key"

    async def verify_domain(self, request: PublishRequest) -> None:
        self._step("verify_domain")

    async def provision(self, request: PublishRequest) -> None:
        self._step("provision")

    async def deploy(self, request: PublishRequest, location: str) -> str:
        self._step("deploy")
        return f"https://{request.app_name}.example.test"


class UnreachableRepository:
    """Published-app repository whose database cannot be reached."""

    async def get(self, contact_id: str):
        raise ConnectionError("database unreachable")

    async def upsert(self, contact_id: str, app_name: str, config: dict, **kwargs):
        raise ConnectionError("database unreachable")

    async def set_live_url(self, contact_id: str, url: str) -> None:
        raise ConnectionError("database unreachable")
