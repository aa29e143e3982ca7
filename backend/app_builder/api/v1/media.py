"""Media upload endpoints: images embedded as data URIs, gallery crop/trim flow."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from app_builder.core.dependencies import get_editor
from app_builder.core.exceptions import MediaRejectedError
from app_builder.schemas.builder import BuilderStateResponse, GalleryConfirm, PendingMediaResponse
from app_builder.services.editor import DesignEditor
from app_builder.services.media import UPLOAD_POLICIES, CropBox, MediaSlot, TrimRange

logger = logging.getLogger(__name__)

router = APIRouter()


def _rejected(exc: MediaRejectedError) -> HTTPException:
    status = 413 if exc.reason == "size" else 400
    return HTTPException(status_code=status, detail=exc.message)


async def read_upload(file: UploadFile, slot: MediaSlot) -> bytes:
    # One byte past the limit is enough for the size check to reject it
    return await file.read(UPLOAD_POLICIES[slot].max_bytes + 1)


@router.post("/gallery", response_model=PendingMediaResponse, status_code=201)
async def begin_gallery_upload(
    file: UploadFile = File(...),
    editor: DesignEditor = Depends(get_editor),
):
    """Stage a gallery image or video for cropping/trimming.

    Nothing is added to the gallery until ``/gallery/confirm``.
    """
    data = await read_upload(file, MediaSlot.GALLERY)
    try:
        edit = editor.begin_gallery_edit(file.content_type, data)
    except MediaRejectedError as exc:
        logger.info("Gallery upload rejected for %s: %s", editor.session.user_id, exc.message)
        raise _rejected(exc) from exc
    return PendingMediaResponse.of(edit)


@router.post("/gallery/confirm", response_model=BuilderStateResponse)
async def confirm_gallery_upload(
    body: GalleryConfirm,
    editor: DesignEditor = Depends(get_editor),
):
    crop = CropBox(body.crop.x, body.crop.y, body.crop.size) if body.crop else None
    trim = TrimRange(body.trim.start, body.trim.end) if body.trim else None
    try:
        editor.confirm_gallery_edit(crop=crop, trim=trim, duration=body.duration)
    except LookupError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except MediaRejectedError as exc:
        logger.info("Gallery edit rejected for %s: %s", editor.session.user_id, exc.message)
        raise _rejected(exc) from exc
    return BuilderStateResponse.of(editor)


@router.delete("/gallery", status_code=204)
async def cancel_gallery_upload(editor: DesignEditor = Depends(get_editor)):
    editor.cancel_gallery_edit()


@router.post("/{slot}", response_model=BuilderStateResponse)
async def upload_media(
    slot: MediaSlot,
    file: UploadFile = File(...),
    nav_index: int | None = Query(None, alias="navIndex"),
    editor: DesignEditor = Depends(get_editor),
):
    """Upload a logo, hero image, featured-service image or nav icon."""
    data = await read_upload(file, slot)
    try:
        editor.upload_media(slot, file.content_type, data, nav_index=nav_index)
    except MediaRejectedError as exc:
        logger.info("%s upload rejected for %s: %s", slot, editor.session.user_id, exc.message)
        raise _rejected(exc) from exc
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return BuilderStateResponse.of(editor)
