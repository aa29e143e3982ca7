"""Publish endpoints: name suggestion, run the pipeline, report its state."""

from fastapi import APIRouter, Depends, HTTPException

from app_builder.core.config import settings
from app_builder.core.dependencies import get_editor, get_publish_backend, get_publisher
from app_builder.core.exceptions import (
    ProblemDetailError,
    PublishError,
    PublishInProgressError,
    SubscriptionError,
)
from app_builder.schemas.publish import NameSuggestion, PublishBody, PublishStatusResponse
from app_builder.services.editor import DesignEditor
from app_builder.services.publisher import (
    PublishBackend,
    PublishOrchestrator,
    PublishRequest,
    generate_app_name,
    normalize_app_name,
    normalize_domain,
    validate_app_name,
)

router = APIRouter()


@router.get("/name-suggestion", response_model=NameSuggestion)
async def suggest_name():
    return NameSuggestion(app_name=generate_app_name(), base_domain=settings.PUBLISH_BASE_DOMAIN)


@router.get("", response_model=PublishStatusResponse)
async def get_publish_status(publisher: PublishOrchestrator = Depends(get_publisher)):
    return PublishStatusResponse.of(publisher)


@router.post("", response_model=PublishStatusResponse)
async def publish(
    body: PublishBody,
    editor: DesignEditor = Depends(get_editor),
    publisher: PublishOrchestrator = Depends(get_publisher),
    backend: PublishBackend = Depends(get_publish_backend),
):
    """Publish a snapshot of the current config.

    The pipeline runs to completion before responding; the returned log holds
    one line per finished step.
    """
    try:
        app_name = validate_app_name(normalize_app_name(body.app_name))
        custom_domain = normalize_domain(body.custom_domain)
    except PublishError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    request = PublishRequest(
        user_id=editor.session.user_id,
        app_name=app_name,
        config=editor.config,
        custom_domain=custom_domain,
    )
    try:
        await publisher.publish(backend, request)
    except PublishInProgressError as exc:
        raise HTTPException(status_code=409, detail=exc.message) from exc
    except SubscriptionError as exc:
        raise ProblemDetailError(
            status=402,
            title="Subscription required",
            detail=exc.message,
            extensions={"redirectUrl": exc.redirect_url},
        ) from exc
    except PublishError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return PublishStatusResponse.of(publisher)
