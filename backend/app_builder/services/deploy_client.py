"""HTTP client for the hosting/deployment API."""

import logging

import httpx

from app_builder.core.config import settings
from app_builder.core.exceptions import PublishError

logger = logging.getLogger(__name__)


class DeployClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (settings.DEPLOY_API_URL if base_url is None else base_url).rstrip("/")
        self.token = settings.DEPLOY_API_TOKEN if token is None else token
        self._transport = transport

    async def _post(self, path: str, payload: dict) -> dict:
        if not self.base_url:
            raise PublishError("Deployment API is not configured.")
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        async with httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=30.0, transport=self._transport
        ) as client:
            resp = await client.post(path, json=payload)
        if resp.status_code >= 400:
            logger.warning("Deploy API %s returned %s: %s", path, resp.status_code, resp.text[:200])
            raise PublishError(f"Deployment service error ({resp.status_code}).")
        return resp.json()

    async def verify_domain(self, domain: str) -> None:
        data = await self._post(
            "/domains/verify", {"domain": domain, "cnameTarget": settings.CNAME_TARGET}
        )
        if not data.get("verified"):
            raise PublishError(
                f"{domain} does not point to {settings.CNAME_TARGET} yet. "
                "Add a CNAME record and try again."
            )

    async def provision(self, app_name: str, domain: str | None) -> None:
        await self._post("/certificates", {"appName": app_name, "domain": domain})

    async def deploy(self, app_name: str, bundle_url: str, domain: str | None) -> str:
        data = await self._post(
            "/deployments", {"appName": app_name, "bundleUrl": bundle_url, "domain": domain}
        )
        url = data.get("url")
        if not url:
            raise PublishError("Deployment service did not return a URL.")
        return url
