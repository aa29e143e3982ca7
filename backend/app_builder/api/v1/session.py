"""Builder entry: resolve who is editing and return their state."""

from fastapi import APIRouter, Depends, Request, Response

from app_builder.core.config import settings
from app_builder.core.dependencies import get_session_registry
from app_builder.schemas.builder import BuilderStateResponse
from app_builder.services.entry import GUEST_COOKIE, EntryMode, resolve_entry
from app_builder.services.registry import SessionRegistry

router = APIRouter()

GUEST_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


@router.get("/session", response_model=BuilderStateResponse)
async def open_session(
    request: Request,
    response: Response,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Open the builder for ``?locationId=`` or for the cookie's guest id.

    A new guest gets a fresh id in the cookie; a ``locationId`` visit clears it.
    """
    route = resolve_entry(request.query_params, request.cookies.get(GUEST_COOKIE))
    if route.mode is EntryMode.GUEST:
        response.set_cookie(
            GUEST_COOKIE,
            route.guest_id,
            max_age=GUEST_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.ENVIRONMENT != "development",
        )
    else:
        response.delete_cookie(GUEST_COOKIE)
    editor = await registry.open(route.user_id)
    return BuilderStateResponse.of(editor)
