"""Upload policies, data-URI encoding and the gallery crop/trim step.

Accepted media is embedded in the config as a base64 data URI; nothing here
talks to object storage.
"""

import base64
import io
import re
from dataclasses import dataclass
from enum import StrEnum

from PIL import Image, UnidentifiedImageError

from app_builder.core.exceptions import MediaRejectedError
from app_builder.schemas.design_config import GalleryItem, MediaType
from app_builder.schemas.field_rules import ConfigField

IMAGE_TYPES = ("image/png", "image/jpeg")
VIDEO_TYPES = ("video/mp4", "video/webm", "video/quicktime")

_VIDEO_URL_RE = re.compile(r"\.(mp4|webm|mov|ogg)$", re.IGNORECASE)

_PIL_FORMATS = {"image/png": "PNG", "image/jpeg": "JPEG"}


class MediaSlot(StrEnum):
    LOGO = "logo"
    HERO_IMAGE = "hero-image"
    FEATURED_SERVICE_IMAGE = "featured-service-image"
    NAV_ICON = "nav-icon"
    GALLERY = "gallery"


@dataclass(frozen=True)
class UploadPolicy:
    allowed_types: tuple[str, ...]
    max_mb: int
    field: ConfigField | None = None

    @property
    def max_bytes(self) -> int:
        return self.max_mb * 1024 * 1024


UPLOAD_POLICIES: dict[MediaSlot, UploadPolicy] = {
    MediaSlot.LOGO: UploadPolicy(IMAGE_TYPES, 5, ConfigField.LOGO_URL),
    MediaSlot.HERO_IMAGE: UploadPolicy(IMAGE_TYPES, 5, ConfigField.HERO_IMAGE_URL),
    MediaSlot.FEATURED_SERVICE_IMAGE: UploadPolicy(
        IMAGE_TYPES, 5, ConfigField.FEATURED_SERVICE_IMAGE_URL
    ),
    MediaSlot.NAV_ICON: UploadPolicy(IMAGE_TYPES, 2),
    MediaSlot.GALLERY: UploadPolicy(IMAGE_TYPES + VIDEO_TYPES, 10),
}


def encode_data_uri(content_type: str, data: bytes) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


def check_upload(slot: MediaSlot, content_type: str | None, data: bytes) -> UploadPolicy:
    """Raise ``MediaRejectedError`` unless ``data`` fits the slot's policy."""
    policy = UPLOAD_POLICIES[slot]
    if content_type not in policy.allowed_types:
        raise MediaRejectedError(
            f"Invalid file type. Please upload one of: {', '.join(policy.allowed_types)}",
            reason="type",
        )
    if len(data) > policy.max_bytes:
        raise MediaRejectedError(
            f"File is too large. Maximum size is {policy.max_mb}MB.", reason="size"
        )
    if not data:
        raise MediaRejectedError("The file could not be read.", reason="unreadable")
    return policy


def accept_upload(slot: MediaSlot, content_type: str | None, data: bytes) -> str:
    check_upload(slot, content_type, data)
    return encode_data_uri(content_type, data)


def detect_media_type(src: str) -> MediaType:
    """Infer image vs video from a gallery URL or data URI."""
    if src.startswith("data:video") or _VIDEO_URL_RE.search(src):
        return MediaType.VIDEO
    return MediaType.IMAGE


# ---------------------------------------------------------------------------
# Crop / trim
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CropBox:
    """Square crop in source pixels."""

    x: int
    y: int
    size: int

    def clamped(self, width: int, height: int) -> "CropBox":
        size = max(1, min(self.size, width, height))
        x = min(max(0, self.x), width - size)
        y = min(max(0, self.y), height - size)
        return CropBox(x=x, y=y, size=size)


DEFAULT_CROP = CropBox(x=10, y=10, size=200)


@dataclass(frozen=True)
class TrimRange:
    start: float
    end: float

    def clamped(self, duration: float | None = None) -> "TrimRange":
        start = max(0.0, self.start)
        end = max(0.0, self.end)
        if duration is not None:
            start = min(start, duration)
            end = min(end, duration)
        return TrimRange(start=min(start, end), end=end)


class MediaEdit:
    """A gallery upload waiting for the user to confirm a crop or trim."""

    def __init__(self, content_type: str, data: bytes):
        check_upload(MediaSlot.GALLERY, content_type, data)
        self.content_type = content_type
        self.data = data
        self.media_type = MediaType.VIDEO if content_type in VIDEO_TYPES else MediaType.IMAGE
        self.width: int | None = None
        self.height: int | None = None
        if self.media_type is MediaType.IMAGE:
            self.width, self.height = self._image_size()

    def _image_size(self) -> tuple[int, int]:
        try:
            with Image.open(io.BytesIO(self.data)) as img:
                # Full decode; a truncated file fails here
                img.load()
                return img.size
        except (UnidentifiedImageError, OSError) as exc:
            raise MediaRejectedError("The file could not be read.", reason="unreadable") from exc

    @property
    def default_crop(self) -> CropBox | None:
        if self.media_type is not MediaType.IMAGE:
            return None
        return DEFAULT_CROP.clamped(self.width, self.height)

    def crop(self, box: CropBox) -> bytes:
        box = box.clamped(self.width, self.height)
        out = io.BytesIO()
        try:
            with Image.open(io.BytesIO(self.data)) as img:
                cropped = img.crop((box.x, box.y, box.x + box.size, box.y + box.size))
                cropped.save(out, format=_PIL_FORMATS[self.content_type])
        except (UnidentifiedImageError, OSError) as exc:
            raise MediaRejectedError("The file could not be read.", reason="unreadable") from exc
        return out.getvalue()

    def to_gallery_item(
        self,
        crop: CropBox | None = None,
        trim: TrimRange | None = None,
        duration: float | None = None,
    ) -> GalleryItem:
        if self.media_type is MediaType.IMAGE:
            data = self.crop(crop) if crop is not None else self.data
            return GalleryItem(src=encode_data_uri(self.content_type, data), media_type=MediaType.IMAGE)

        src = encode_data_uri(self.content_type, self.data)
        if trim is None and duration is not None:
            trim = TrimRange(start=0.0, end=duration)
        if trim is None:
            return GalleryItem(src=src, media_type=MediaType.VIDEO)
        trim = trim.clamped(duration)
        return GalleryItem(
            src=src, media_type=MediaType.VIDEO, start_time=trim.start, end_time=trim.end
        )
