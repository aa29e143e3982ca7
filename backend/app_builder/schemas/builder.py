"""Builder request/response schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app_builder.schemas.design_config import (
    ContentType,
    DesignConfig,
    MediaType,
    ThemePreset,
)
from app_builder.schemas.field_rules import ConfigField, ToggleField
from app_builder.services.editor import DesignEditor
from app_builder.services.media import MediaEdit
from app_builder.services.persistence import BuilderTheme, SaveStatus


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BuilderStateResponse(_Body):
    user_id: str
    config: DesignConfig
    can_undo: bool
    can_redo: bool
    save_status: SaveStatus
    save_label: str
    errors: dict[str, str]
    history_length: int
    cursor: int
    builder_theme: BuilderTheme

    @classmethod
    def of(cls, editor: DesignEditor) -> "BuilderStateResponse":
        session = editor.session
        return cls(
            user_id=session.user_id,
            config=session.config,
            can_undo=session.history.can_undo,
            can_redo=session.history.can_redo,
            save_status=session.save_status,
            save_label=session.save_status.label,
            errors={field.value: message for field, message in editor.errors.items()},
            history_length=len(session.history),
            cursor=session.history.cursor,
            builder_theme=session.builder_theme,
        )


class FieldUpdate(_Body):
    field: ConfigField
    value: str


class ToggleUpdate(_Body):
    toggle: ToggleField
    value: bool


class ThemeRequest(_Body):
    preset: ThemePreset


class BuilderThemeBody(_Body):
    builder_theme: BuilderTheme


class NavItemCreate(_Body):
    label: str
    content: ContentType
    icon: str = ""
    icon_color: str = "#000000"
    visible: bool = True


class NavItemUpdate(_Body):
    """PATCH body: only the fields sent are changed."""

    label: str | None = None
    content: ContentType | None = None
    icon: str | None = None
    icon_color: str | None = None
    visible: bool | None = None


class GalleryUrlCreate(_Body):
    src: str


class GalleryItemUpdate(_Body):
    src: str | None = None
    media_type: MediaType | None = Field(None, alias="type")
    start_time: float | None = Field(None, ge=0)
    end_time: float | None = Field(None, ge=0)


class TestimonialCreate(_Body):
    author: str
    text: str


class TestimonialUpdate(_Body):
    author: str | None = None
    text: str | None = None


class CropBody(_Body):
    x: int
    y: int
    size: int = Field(..., gt=0)


class TrimBody(_Body):
    start: float = Field(..., ge=0)
    end: float = Field(..., ge=0)


class GalleryConfirm(_Body):
    crop: CropBody | None = None
    trim: TrimBody | None = None
    duration: float | None = Field(None, ge=0)


class PendingMediaResponse(_Body):
    media_type: MediaType
    content_type: str
    width: int | None = None
    height: int | None = None
    default_crop: CropBody | None = None

    @classmethod
    def of(cls, edit: MediaEdit) -> "PendingMediaResponse":
        crop = edit.default_crop
        return cls(
            media_type=edit.media_type,
            content_type=edit.content_type,
            width=edit.width,
            height=edit.height,
            default_crop=CropBody(x=crop.x, y=crop.y, size=crop.size) if crop else None,
        )
