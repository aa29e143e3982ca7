"""Domain errors and RFC 7807 Problem Details error handling."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ProblemDetailError(Exception):
    """Raise for RFC 7807 problem+json responses."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: str,
        error_type: str | None = None,
        extensions: dict | None = None,
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.error_type = error_type or "about:blank"
        # Extra members merged into the problem document
        self.extensions = extensions or {}


# ---------------------------------------------------------------------------
# Domain errors (not HTTP-aware; routes translate them)
# ---------------------------------------------------------------------------


class MediaRejectedError(Exception):
    """An uploaded file failed the slot's type or size policy."""

    def __init__(self, message: str, reason: str = "type"):
        super().__init__(message)
        self.message = message
        self.reason = reason  # "type" | "size" | "unreadable"


class AIContentError(Exception):
    """The AI service failed or returned something unusable."""

    def __init__(self, message: str = "The AI assistant could not generate content. Please try again."):
        super().__init__(message)
        self.message = message


class PublishError(Exception):
    """A publish attempt could not start or a pipeline step failed."""

    def __init__(self, message: str, step: str | None = None):
        super().__init__(message)
        self.message = message
        self.step = step


class PublishInProgressError(PublishError):
    """Another publish for the same user has not finished yet."""


class SubscriptionError(PublishError):
    """The publishing account does not hold an active subscription."""

    redirect_url = "/payment-required.html"


class AppNotFoundError(Exception):
    """No published app is stored under the requested id."""


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content={
            "type": exc.error_type,
            "title": exc.title,
            "status": exc.status,
            "detail": exc.detail,
            "instance": str(request.url.path),
            **exc.extensions,
        },
        media_type="application/problem+json",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "about:blank",
            "title": exc.detail if isinstance(exc.detail, str) else "Error",
            "status": exc.status_code,
            "detail": exc.detail,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "type": "about:blank",
            "title": "Validation Error",
            "status": 422,
            "detail": exc.errors(),
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )
