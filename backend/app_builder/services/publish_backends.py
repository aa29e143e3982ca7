"""Publish backends: simulated (no external hosting) and cloud.

Both store the snapshot in the published-app repository first, so the
``/customer-apps/{id}`` viewer can serve it whichever backend ran.
"""

import asyncio

from app_builder.core.config import settings
from app_builder.services import storage
from app_builder.services.deploy_client import DeployClient
from app_builder.services.preview import render_preview
from app_builder.services.published_apps import PublishedAppRepository
from app_builder.services.publisher import PublishBackend, PublishRequest, live_url
from app_builder.services.subscription import SubscriptionChecker


class _RepositoryBackend:
    def __init__(self, repository: PublishedAppRepository):
        self.repository = repository

    async def store_snapshot(self, request: PublishRequest) -> None:
        await self.repository.upsert(
            contact_id=request.user_id,
            app_name=request.app_name,
            config=request.config.to_wire(),
            custom_domain=request.custom_domain,
        )

    async def package(self, request: PublishRequest) -> bytes:
        return render_preview(request.config, published=True).encode("utf-8")


class SimulatedPublishBackend(_RepositoryBackend):
    """Stores the snapshot and reports the URL it would be served at."""

    async def upload(self, request: PublishRequest, bundle: bytes) -> str:
        return f"memory://{storage.build_bundle_key(request.user_id, request.app_name)}"

    async def verify_domain(self, request: PublishRequest) -> None:
        return None

    async def provision(self, request: PublishRequest) -> None:
        return None

    async def deploy(self, request: PublishRequest, location: str) -> str:
        url = live_url(request.app_name, request.custom_domain)
        await self.repository.set_live_url(request.user_id, url)
        return url


class CloudPublishBackend(_RepositoryBackend):
    """Subscription check, S3 bundle upload and the hosting API."""

    def __init__(
        self,
        repository: PublishedAppRepository,
        subscriptions: SubscriptionChecker | None = None,
        deploy_client: DeployClient | None = None,
    ):
        super().__init__(repository)
        self.subscriptions = subscriptions or SubscriptionChecker()
        self.deploy_client = deploy_client or DeployClient()

    async def store_snapshot(self, request: PublishRequest) -> None:
        await self.subscriptions.ensure_active(request.user_id)
        await super().store_snapshot(request)

    async def upload(self, request: PublishRequest, bundle: bytes) -> str:
        key = storage.build_bundle_key(request.user_id, request.app_name)
        await asyncio.to_thread(storage.put_bundle, key, bundle)
        return await asyncio.to_thread(storage.presign_get, key)

    async def verify_domain(self, request: PublishRequest) -> None:
        await self.deploy_client.verify_domain(request.custom_domain)

    async def provision(self, request: PublishRequest) -> None:
        await self.deploy_client.provision(request.app_name, request.custom_domain)

    async def deploy(self, request: PublishRequest, location: str) -> str:
        url = await self.deploy_client.deploy(request.app_name, location, request.custom_domain)
        await self.repository.set_live_url(request.user_id, url)
        return url


def build_publish_backend(repository: PublishedAppRepository) -> PublishBackend:
    if settings.PUBLISH_MODE == "cloud":
        return CloudPublishBackend(repository)
    return SimulatedPublishBackend(repository)
