"""Publish orchestration: app naming and the step-by-step deploy pipeline.

The orchestrator runs a fixed, ordered list of steps against a
``PublishBackend``. Each completed step appends one line to the progress log.
A failure at any step aborts the run and puts the orchestrator back to idle;
nothing is reported as published unless every step succeeded.
"""

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol
from urllib.parse import quote

from app_builder.core.config import settings
from app_builder.core.exceptions import PublishError, PublishInProgressError
from app_builder.schemas.design_config import DesignConfig

logger = logging.getLogger(__name__)

ADJECTIVES = (
    "aura", "glow", "zen", "vivid", "luxe", "pure", "serene", "opal", "onyx", "solar", "lunar",
)
NOUNS = ("aesthetics", "studio", "spa", "beauty", "skin", "style", "place", "works", "co", "labs")

_APP_NAME_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_APP_NAME_STRIP_RE = re.compile(r"[^a-z0-9-]")
_DOMAIN_RE = re.compile(r"^(?=.{1,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def generate_app_name(rng: random.Random | None = None) -> str:
    """Suggest an ``adjective-noun-NNN`` app name."""
    rng = rng or random.Random()
    return f"{rng.choice(ADJECTIVES)}-{rng.choice(NOUNS)}-{rng.randint(100, 999)}"


def normalize_app_name(raw: str) -> str:
    """Lowercase and drop everything outside ``[a-z0-9-]``, as the name input does."""
    return _APP_NAME_STRIP_RE.sub("", raw.strip().lower())


def validate_app_name(name: str) -> str:
    if not _APP_NAME_RE.match(name):
        raise PublishError(
            "App name may only contain lowercase letters, numbers and hyphens, "
            "and must start and end with a letter or number."
        )
    return name


def normalize_domain(raw: str | None) -> str | None:
    """Strip scheme, path and trailing dot from a custom domain; ``None`` if blank."""
    if raw is None:
        return None
    domain = raw.strip().lower()
    domain = re.sub(r"^https?://", "", domain).split("/", 1)[0].rstrip(".")
    if not domain:
        return None
    if not _DOMAIN_RE.match(domain):
        raise PublishError(f"'{raw}' is not a valid domain name.")
    return domain


def live_url(app_name: str, custom_domain: str | None = None) -> str:
    if custom_domain:
        return f"https://{custom_domain}"
    return f"https://{app_name}.{settings.PUBLISH_BASE_DOMAIN}"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class PublishState(StrEnum):
    IDLE = "idle"
    PUBLISHING = "publishing"
    PUBLISHED = "published"


@dataclass(frozen=True)
class PublishRequest:
    user_id: str
    app_name: str
    config: DesignConfig
    custom_domain: str | None = None


@dataclass(frozen=True)
class PublishResult:
    url: str
    app_name: str
    viewer_path: str
    custom_domain: str | None = None
    cname_target: str | None = None


class PublishBackend(Protocol):
    async def store_snapshot(self, request: PublishRequest) -> None: ...

    async def package(self, request: PublishRequest) -> bytes: ...

    async def upload(self, request: PublishRequest, bundle: bytes) -> str: ...

    async def verify_domain(self, request: PublishRequest) -> None: ...

    async def provision(self, request: PublishRequest) -> None: ...

    async def deploy(self, request: PublishRequest, location: str) -> str: ...


@dataclass(frozen=True)
class PublishStep:
    key: str
    done: str


STEP_FETCH = PublishStep("fetch_config", "App configuration saved")
STEP_PACKAGE = PublishStep("package_assets", "Assets packaged")
STEP_UPLOAD = PublishStep("upload", "Bundle uploaded")
STEP_VERIFY_DOMAIN = PublishStep("verify_domain", "Custom domain verified")
STEP_PROVISION = PublishStep("provision", "DNS and SSL provisioned")
STEP_DEPLOY = PublishStep("deploy", "Deployed to edge network")


def steps_for(custom_domain: str | None) -> list[PublishStep]:
    steps = [STEP_FETCH, STEP_PACKAGE, STEP_UPLOAD]
    if custom_domain:
        steps.append(STEP_VERIFY_DOMAIN)
    steps.extend([STEP_PROVISION, STEP_DEPLOY])
    return steps


class PublishOrchestrator:
    """Publish state for one user. Works on a snapshot, never on history."""

    def __init__(self):
        self.state = PublishState.IDLE
        self.log: list[str] = []
        self.result: PublishResult | None = None
        self.error: str | None = None

    def reset(self) -> None:
        if self.state is PublishState.PUBLISHING:
            raise PublishInProgressError("A publish is already in progress.")
        self.state = PublishState.IDLE
        self.log = []
        self.result = None
        self.error = None

    async def publish(
        self,
        backend: PublishBackend,
        request: PublishRequest,
        *,
        step_delay: float | None = None,
    ) -> PublishResult:
        if self.state is PublishState.PUBLISHING:
            raise PublishInProgressError("A publish is already in progress.")
        validate_app_name(request.app_name)
        delay = settings.PUBLISH_STEP_DELAY_SECONDS if step_delay is None else step_delay

        self.reset()
        self.state = PublishState.PUBLISHING
        bundle = b""
        location = ""
        url = ""
        step = STEP_FETCH
        try:
            for step in steps_for(request.custom_domain):
                if step is STEP_FETCH:
                    await backend.store_snapshot(request)
                elif step is STEP_PACKAGE:
                    bundle = await backend.package(request)
                elif step is STEP_UPLOAD:
                    location = await backend.upload(request, bundle)
                elif step is STEP_VERIFY_DOMAIN:
                    await backend.verify_domain(request)
                elif step is STEP_PROVISION:
                    await backend.provision(request)
                elif step is STEP_DEPLOY:
                    url = await backend.deploy(request, location)
                if delay:
                    await asyncio.sleep(delay)
                self.log.append(step.done)
        except asyncio.CancelledError:
            self.state = PublishState.IDLE
            raise
        except Exception as exc:
            if isinstance(exc, PublishError):
                error_cls, message = type(exc), exc.message
            else:
                error_cls, message = PublishError, str(exc) or type(exc).__name__
            logger.exception("Publish of %s failed at %s", request.app_name, step.key)
            self.state = PublishState.IDLE
            self.error = f"Publishing failed: {message}"
            raise error_cls(self.error, step=step.key) from exc

        self.log.append("Deployment successful!")
        self.result = PublishResult(
            url=url,
            app_name=request.app_name,
            viewer_path=viewer_path(request.user_id),
            custom_domain=request.custom_domain,
            cname_target=settings.CNAME_TARGET if request.custom_domain else None,
        )
        self.state = PublishState.PUBLISHED
        logger.info("Published %s for %s at %s", request.app_name, request.user_id, url)
        return self.result


def viewer_path(user_id: str) -> str:
    return f"/customer-apps/{quote(user_id, safe='')}"
