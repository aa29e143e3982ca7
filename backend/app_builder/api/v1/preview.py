"""Live preview of the app being built."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app_builder.core.dependencies import get_editor
from app_builder.services.editor import DesignEditor
from app_builder.services.preview import render_preview

router = APIRouter()


@router.get("", response_class=HTMLResponse)
async def preview(
    tab: int = Query(0, ge=0),
    editor: DesignEditor = Depends(get_editor),
):
    """Render the current config; ``tab`` is the index of the selected nav item."""
    return HTMLResponse(render_preview(editor.config, tab))
