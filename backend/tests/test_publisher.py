"""Publish orchestrator: naming, step order, failure handling."""

import asyncio
import random

import pytest

from app_builder.core.exceptions import PublishError, PublishInProgressError, SubscriptionError
from app_builder.schemas.design_config import default_design_config
from app_builder.services.published_apps import InMemoryPublishedAppRepository
from app_builder.services.publish_backends import SimulatedPublishBackend
from app_builder.services.publisher import (
    ADJECTIVES,
    NOUNS,
    PublishOrchestrator,
    PublishRequest,
    PublishState,
    generate_app_name,
    live_url,
    normalize_app_name,
    normalize_domain,
    steps_for,
    validate_app_name,
    viewer_path,
)
from tests.helpers import RecordingBackend


def _request(custom_domain: str | None = None, app_name: str = "radiant-spa-123") -> PublishRequest:
    return PublishRequest(
        user_id="loc-1",
        app_name=app_name,
        config=default_design_config(),
        custom_domain=custom_domain,
    )


def test_generated_name_pattern():
    name = generate_app_name(random.Random(7))
    adjective, noun, number = name.split("-")
    assert adjective in ADJECTIVES
    assert noun in NOUNS
    assert 100 <= int(number) <= 999
    assert validate_app_name(name) == name


def test_name_normalization_and_validation():
    assert normalize_app_name("  Glow Studio_2! ") == "glowstudio2"
    with pytest.raises(PublishError):
        validate_app_name("-leading-hyphen")
    with pytest.raises(PublishError):
        validate_app_name("")


def test_domain_normalization():
    assert normalize_domain(" https://Book.MySpa.com/path ") == "book.myspa.com"
    assert normalize_domain("") is None
    assert normalize_domain(None) is None
    with pytest.raises(PublishError):
        normalize_domain("not a domain")


def test_live_url():
    assert live_url("radiant-spa-123") == "https://radiant-spa-123.solopro.app"
    assert live_url("x", "book.myspa.com") == "https://book.myspa.com"


def test_domain_step_only_with_custom_domain():
    assert "verify_domain" not in [s.key for s in steps_for(None)]
    keys = [s.key for s in steps_for("book.myspa.com")]
    assert keys.index("verify_domain") == keys.index("upload") + 1


@pytest.mark.asyncio
async def test_successful_publish_logs_each_step_in_order():
    backend = RecordingBackend()
    orchestrator = PublishOrchestrator()
    result = await orchestrator.publish(backend, _request(), step_delay=0)

    assert backend.calls == ["store_snapshot", "package", "upload", "provision", "deploy"]
    assert orchestrator.log == [s.done for s in steps_for(None)] + ["Deployment successful!"]
    assert orchestrator.state is PublishState.PUBLISHED
    assert result.url == "https://radiant-spa-123.example.test"
    assert result.viewer_path == "/customer-apps/loc-1"
    assert result.cname_target is None


@pytest.mark.asyncio
async def test_custom_domain_adds_verification_and_cname():
    backend = RecordingBackend()
    orchestrator = PublishOrchestrator()
    result = await orchestrator.publish(backend, _request("book.myspa.com"), step_delay=0)
    assert "verify_domain" in backend.calls
    assert result.cname_target == "hosting.solopro.io"


@pytest.mark.asyncio
async def test_failure_aborts_and_returns_to_idle():
    """A failing step stops the pipeline with no published result."""
    backend = RecordingBackend(fail_at="upload")
    orchestrator = PublishOrchestrator()
    with pytest.raises(PublishError) as exc_info:
        await orchestrator.publish(backend, _request(), step_delay=0)

    assert exc_info.value.step == "upload"
    assert backend.calls == ["store_snapshot", "package", "upload"]
    assert orchestrator.state is PublishState.IDLE
    assert orchestrator.result is None
    assert orchestrator.error == "Publishing failed: boom"
    assert "Deployment successful!" not in orchestrator.log


@pytest.mark.asyncio
async def test_unexpected_errors_become_publish_errors():
    backend = RecordingBackend(fail_at="package", error=RuntimeError("disk full"))
    orchestrator = PublishOrchestrator()
    with pytest.raises(PublishError):
        await orchestrator.publish(backend, _request(), step_delay=0)
    assert orchestrator.error == "Publishing failed: disk full"


@pytest.mark.asyncio
async def test_subscription_error_keeps_its_type():
    backend = RecordingBackend(fail_at="store_snapshot", error=SubscriptionError("inactive"))
    with pytest.raises(SubscriptionError):
        await PublishOrchestrator().publish(backend, _request(), step_delay=0)


@pytest.mark.asyncio
async def test_second_publish_while_running_is_refused():
    orchestrator = PublishOrchestrator()
    task = asyncio.create_task(orchestrator.publish(RecordingBackend(), _request(), step_delay=0.05))
    await asyncio.sleep(0.01)
    assert orchestrator.state is PublishState.PUBLISHING
    with pytest.raises(PublishInProgressError):
        await orchestrator.publish(RecordingBackend(), _request(), step_delay=0)
    await task
    assert orchestrator.state is PublishState.PUBLISHED


@pytest.mark.asyncio
async def test_invalid_name_rejected_before_any_step():
    backend = RecordingBackend()
    with pytest.raises(PublishError):
        await PublishOrchestrator().publish(backend, _request(app_name="Bad Name"), step_delay=0)
    assert backend.calls == []


@pytest.mark.asyncio
async def test_simulated_backend_stores_snapshot():
    repository = InMemoryPublishedAppRepository()
    orchestrator = PublishOrchestrator()
    result = await orchestrator.publish(
        SimulatedPublishBackend(repository), _request(), step_delay=0
    )
    app = await repository.get("loc-1")
    assert app.app_name == "radiant-spa-123"
    assert app.config["appName"] == "Aura Aesthetics"
    assert app.live_url == result.url == "https://radiant-spa-123.solopro.app"


def test_viewer_path_is_url_encoded():
    assert viewer_path("guest 1/2") == "/customer-apps/guest%201%2F2"
