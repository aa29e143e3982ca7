"""Design editor: every mutation of a user's DesignConfig goes through here.

Each operation builds a new config from the current one, records the
advisory validation result for the touched field, and commits the result to
the session history. Invalid values are committed anyway; only values that
cannot be represented at all (an unknown font, a bad index) raise.
"""

import logging

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app_builder.schemas.design_config import (
    DesignConfig,
    GalleryItem,
    NavItem,
    Testimonial,
    ThemePreset,
)
from app_builder.schemas.field_rules import (
    THEME_FIELDS,
    ConfigField,
    ToggleField,
    validate_config,
    validate_field,
)
from app_builder.services.media import (
    UPLOAD_POLICIES,
    CropBox,
    MediaEdit,
    MediaSlot,
    TrimRange,
    accept_upload,
    detect_media_type,
)
from app_builder.services.session import BuilderSession

logger = logging.getLogger(__name__)


def _merge(model_cls: type[BaseModel], item: BaseModel, changes: dict) -> BaseModel:
    """Shallow-merge ``changes`` (snake_case or camelCase keys) into ``item``."""
    names = {
        (info.alias or to_camel(name)): name for name, info in model_cls.model_fields.items()
    }
    data = item.model_dump()
    for key, value in changes.items():
        data[names.get(key, key)] = value
    return model_cls.model_validate(data)


class DesignEditor:
    def __init__(self, session: BuilderSession):
        self.session = session
        self.errors: dict[ConfigField, str] = validate_config(session.config)
        self.pending_media: MediaEdit | None = None

    @property
    def config(self) -> DesignConfig:
        return self.session.config

    def _commit(self, config: DesignConfig) -> DesignConfig:
        self.session.commit(config)
        return self.session.config

    def _record(self, field: ConfigField, value) -> None:
        message = validate_field(field, value)
        if message:
            self.errors[field] = message
        else:
            self.errors.pop(field, None)

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------

    def set_field(self, field: ConfigField, value: str) -> DesignConfig:
        if not field.rule.is_scalar:
            raise ValueError(f"{field.value} is not a scalar field")
        updated = self.config.with_changes(**{field.attr: value})
        self._record(field, value)
        return self._commit(updated)

    def set_toggle(self, toggle: ToggleField, value: bool) -> DesignConfig:
        return self._commit(self.config.with_changes(**{toggle.attr: value}))

    def apply_theme(self, preset: ThemePreset) -> DesignConfig:
        """Overwrite all theme colors and the font in one commit."""
        updated = self.config.with_theme(preset)
        for field in THEME_FIELDS:
            self.errors.pop(field, None)
        return self._commit(updated)

    def undo(self) -> DesignConfig | None:
        config = self.session.undo()
        if config is not None:
            self.errors = validate_config(config)
        return config

    def redo(self) -> DesignConfig | None:
        config = self.session.redo()
        if config is not None:
            self.errors = validate_config(config)
        return config

    # ------------------------------------------------------------------
    # Ordered collections (index-addressed)
    # ------------------------------------------------------------------

    def _items(self, attr: str) -> list:
        return list(getattr(self.config, attr))

    @staticmethod
    def _check_index(items: list, index: int, label: str) -> None:
        if not 0 <= index < len(items):
            raise IndexError(f"No {label} at index {index}")

    def _replace(self, attr: str, items: list) -> DesignConfig:
        updated = self.config.with_changes(**{attr: tuple(items)})
        if attr == "nav_items":
            self._record(ConfigField.NAV_ITEMS, updated.nav_items)
        return self._commit(updated)

    def _append(self, attr: str, item: BaseModel) -> DesignConfig:
        return self._replace(attr, [*self._items(attr), item])

    def _update(self, attr: str, model_cls, index: int, changes: dict, label: str):
        items = self._items(attr)
        self._check_index(items, index, label)
        items[index] = _merge(model_cls, items[index], changes)
        return self._replace(attr, items)

    def _remove(self, attr: str, index: int, label: str) -> DesignConfig:
        items = self._items(attr)
        self._check_index(items, index, label)
        del items[index]
        return self._replace(attr, items)

    def add_nav_item(self, item: NavItem) -> DesignConfig:
        return self._append("nav_items", item)

    def update_nav_item(self, index: int, **changes) -> DesignConfig:
        return self._update("nav_items", NavItem, index, changes, "nav item")

    def remove_nav_item(self, index: int) -> DesignConfig:
        return self._remove("nav_items", index, "nav item")

    def add_gallery_url(self, src: str) -> DesignConfig:
        """Append a gallery item from a pasted URL; blank input is ignored."""
        src = src.strip()
        if not src:
            return self.config
        return self.add_gallery_item(GalleryItem(src=src, media_type=detect_media_type(src)))

    def add_gallery_item(self, item: GalleryItem) -> DesignConfig:
        return self._append("gallery_items", item)

    def update_gallery_item(self, index: int, **changes) -> DesignConfig:
        return self._update("gallery_items", GalleryItem, index, changes, "gallery item")

    def remove_gallery_item(self, index: int) -> DesignConfig:
        return self._remove("gallery_items", index, "gallery item")

    def add_testimonial(self, author: str, text: str) -> DesignConfig:
        """Append a testimonial; both author and text are required."""
        author, text = author.strip(), text.strip()
        if not author or not text:
            return self.config
        return self._append("testimonials", Testimonial(author=author, text=text))

    def update_testimonial(self, index: int, **changes) -> DesignConfig:
        return self._update("testimonials", Testimonial, index, changes, "testimonial")

    def remove_testimonial(self, index: int) -> DesignConfig:
        return self._remove("testimonials", index, "testimonial")

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    def upload_media(
        self,
        slot: MediaSlot,
        content_type: str | None,
        data: bytes,
        nav_index: int | None = None,
    ) -> DesignConfig:
        """Embed an uploaded image into its slot. Rejections leave the config untouched."""
        if slot is MediaSlot.GALLERY:
            raise ValueError("gallery uploads go through begin_gallery_edit")
        if slot is MediaSlot.NAV_ICON:
            if nav_index is None:
                raise ValueError("nav_index is required for nav icon uploads")
            self._check_index(self._items("nav_items"), nav_index, "nav item")
        uri = accept_upload(slot, content_type, data)
        if slot is MediaSlot.NAV_ICON:
            return self.update_nav_item(nav_index, icon=uri)
        return self.set_field(UPLOAD_POLICIES[slot].field, uri)

    def begin_gallery_edit(self, content_type: str | None, data: bytes) -> MediaEdit:
        """Stage a gallery upload for crop/trim; replaces any unconfirmed one."""
        self.pending_media = MediaEdit(content_type, data)
        return self.pending_media

    def confirm_gallery_edit(
        self,
        crop: CropBox | None = None,
        trim: TrimRange | None = None,
        duration: float | None = None,
    ) -> DesignConfig:
        if self.pending_media is None:
            raise LookupError("No gallery upload is waiting for confirmation")
        edit, self.pending_media = self.pending_media, None
        item = edit.to_gallery_item(crop=crop, trim=trim, duration=duration)
        logger.debug("Adding edited %s to gallery for %s", item.media_type, self.session.user_id)
        return self.add_gallery_item(item)

    def cancel_gallery_edit(self) -> None:
        self.pending_media = None
