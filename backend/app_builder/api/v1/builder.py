"""Builder endpoints: field edits, toggles, themes, history and collections."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from app_builder.core.dependencies import get_editor
from app_builder.schemas.builder import (
    BuilderStateResponse,
    BuilderThemeBody,
    FieldUpdate,
    GalleryItemUpdate,
    GalleryUrlCreate,
    NavItemCreate,
    NavItemUpdate,
    TestimonialCreate,
    TestimonialUpdate,
    ThemeRequest,
    ToggleUpdate,
)
from app_builder.schemas.design_config import NavItem
from app_builder.services.editor import DesignEditor

router = APIRouter()


def _unprocessable(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=exc.errors(include_url=False, include_context=False, include_input=False),
    )


def _state(editor: DesignEditor) -> BuilderStateResponse:
    return BuilderStateResponse.of(editor)


@router.get("", response_model=BuilderStateResponse)
async def get_builder_state(editor: DesignEditor = Depends(get_editor)):
    """Current config, history position, save status and field errors."""
    return _state(editor)


@router.patch("/fields", response_model=BuilderStateResponse)
async def update_field(body: FieldUpdate, editor: DesignEditor = Depends(get_editor)):
    """Set one scalar field.

    Over-long text, bad colors and bad URLs are still committed; the problem
    is reported in ``errors``. Values outside an enum are rejected with 422.
    """
    try:
        editor.set_field(body.field, body.value)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _state(editor)


@router.patch("/toggles", response_model=BuilderStateResponse)
async def update_toggle(body: ToggleUpdate, editor: DesignEditor = Depends(get_editor)):
    editor.set_toggle(body.toggle, body.value)
    return _state(editor)


@router.post("/theme", response_model=BuilderStateResponse)
async def apply_theme(body: ThemeRequest, editor: DesignEditor = Depends(get_editor)):
    """Apply a preset: all colors and the font change in a single commit."""
    editor.apply_theme(body.preset)
    return _state(editor)


@router.post("/undo", response_model=BuilderStateResponse)
async def undo(editor: DesignEditor = Depends(get_editor)):
    editor.undo()
    return _state(editor)


@router.post("/redo", response_model=BuilderStateResponse)
async def redo(editor: DesignEditor = Depends(get_editor)):
    editor.redo()
    return _state(editor)


# ---------------------------------------------------------------------------
# Navigation items
# ---------------------------------------------------------------------------


@router.post("/nav-items", response_model=BuilderStateResponse, status_code=201)
async def add_nav_item(body: NavItemCreate, editor: DesignEditor = Depends(get_editor)):
    editor.add_nav_item(NavItem(**body.model_dump()))
    return _state(editor)


@router.patch("/nav-items/{index}", response_model=BuilderStateResponse)
async def update_nav_item(
    index: int, body: NavItemUpdate, editor: DesignEditor = Depends(get_editor)
):
    try:
        editor.update_nav_item(index, **body.model_dump(exclude_unset=True))
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    return _state(editor)


@router.delete("/nav-items/{index}", response_model=BuilderStateResponse)
async def remove_nav_item(index: int, editor: DesignEditor = Depends(get_editor)):
    try:
        editor.remove_nav_item(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _state(editor)


# ---------------------------------------------------------------------------
# Gallery items
# ---------------------------------------------------------------------------


@router.post("/gallery-items", response_model=BuilderStateResponse, status_code=201)
async def add_gallery_url(body: GalleryUrlCreate, editor: DesignEditor = Depends(get_editor)):
    """Add a gallery item from a URL; the media type is inferred from it."""
    editor.add_gallery_url(body.src)
    return _state(editor)


@router.patch("/gallery-items/{index}", response_model=BuilderStateResponse)
async def update_gallery_item(
    index: int, body: GalleryItemUpdate, editor: DesignEditor = Depends(get_editor)
):
    try:
        editor.update_gallery_item(index, **body.model_dump(exclude_unset=True))
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    return _state(editor)


@router.delete("/gallery-items/{index}", response_model=BuilderStateResponse)
async def remove_gallery_item(index: int, editor: DesignEditor = Depends(get_editor)):
    try:
        editor.remove_gallery_item(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _state(editor)


# ---------------------------------------------------------------------------
# Testimonials
# ---------------------------------------------------------------------------


@router.post("/testimonials", response_model=BuilderStateResponse, status_code=201)
async def add_testimonial(body: TestimonialCreate, editor: DesignEditor = Depends(get_editor)):
    editor.add_testimonial(body.author, body.text)
    return _state(editor)


@router.patch("/testimonials/{index}", response_model=BuilderStateResponse)
async def update_testimonial(
    index: int, body: TestimonialUpdate, editor: DesignEditor = Depends(get_editor)
):
    try:
        editor.update_testimonial(index, **body.model_dump(exclude_unset=True))
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    return _state(editor)


@router.delete("/testimonials/{index}", response_model=BuilderStateResponse)
async def remove_testimonial(index: int, editor: DesignEditor = Depends(get_editor)):
    try:
        editor.remove_testimonial(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _state(editor)


# ---------------------------------------------------------------------------
# Builder UI theme (not part of the design history)
# ---------------------------------------------------------------------------


@router.get("/builder-theme", response_model=BuilderThemeBody)
async def get_builder_theme(editor: DesignEditor = Depends(get_editor)):
    return BuilderThemeBody(builder_theme=editor.session.builder_theme)


@router.put("/builder-theme", response_model=BuilderThemeBody)
async def set_builder_theme(body: BuilderThemeBody, editor: DesignEditor = Depends(get_editor)):
    await editor.session.set_builder_theme(body.builder_theme)
    return BuilderThemeBody(builder_theme=editor.session.builder_theme)
