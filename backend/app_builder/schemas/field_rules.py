"""Field identifiers for DesignConfig and their advisory validation rules.

Validation here never rejects a value. ``validate_field`` returns the message
the editor shows next to the field, or ``None`` when the value is fine.
"""

import re
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

from pydantic.alias_generators import to_camel

from app_builder.schemas.design_config import ContentType, DesignConfig, NavItem

_HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_WEB_OR_DATA_URI_RE = re.compile(r"^(https?://|data:image)")
_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

URL_MESSAGE = "Please enter a valid URL (e.g., https://...)."
COLOR_MESSAGE = "Must be a valid hex color (e.g., #RRGGBB)."
HOME_TAB_MESSAGE = "At least one visible Home tab is required."


class FieldKind(StrEnum):
    TEXT = "text"
    COLOR = "color"
    URL = "url"
    CHOICE = "choice"
    NAVIGATION = "navigation"


class ConfigField(StrEnum):
    """Editable DesignConfig fields, valued by their wire (camelCase) name."""

    APP_NAME = "appName"
    LOGO_URL = "logoUrl"
    PRIMARY_COLOR = "primaryColor"
    BACKGROUND_COLOR = "backgroundColor"
    TEXT_COLOR = "textColor"
    ACCENT_COLOR_1 = "accentColor1"
    ACCENT_COLOR_2 = "accentColor2"
    ACCENT_COLOR_3 = "accentColor3"
    FONT_FAMILY = "fontFamily"
    BUTTON_SHAPE = "buttonShape"
    HERO_IMAGE_URL = "heroImageUrl"
    HERO_TITLE = "heroTitle"
    HOME_TESTIMONIALS_TITLE = "homeTestimonialsTitle"
    HOME_GALLERY_TITLE = "homeGalleryTitle"
    HOME_BLOG_TITLE = "homeBlogTitle"
    SERVICES_PAGE_TITLE = "servicesPageTitle"
    GALLERY_PAGE_TITLE = "galleryPageTitle"
    BLOG_PAGE_TITLE = "blogPageTitle"
    CONTACT_PAGE_TITLE = "contactPageTitle"
    BOOKING_LINK = "bookingLink"
    ABOUT_TEXT = "aboutText"
    CONTACT_INFO = "contactInfo"
    FEATURED_SERVICE_TITLE = "featuredServiceTitle"
    FEATURED_SERVICE_IMAGE_URL = "featuredServiceImageUrl"
    FEATURED_SERVICE_NAME = "featuredServiceName"
    FEATURED_SERVICE_PRICE = "featuredServicePrice"
    FEATURED_SERVICE_DESCRIPTION = "featuredServiceDescription"
    FACEBOOK_URL = "facebookUrl"
    INSTAGRAM_URL = "instagramUrl"
    TIKTOK_URL = "tiktokUrl"
    NAV_ITEMS = "navItems"

    @property
    def attr(self) -> str:
        """The DesignConfig attribute name for this field."""
        return _ALIAS_TO_ATTR[self.value]

    @property
    def rule(self) -> "FieldRule":
        return FIELD_RULES[self]


class ToggleField(StrEnum):
    SHOW_SERVICES = "showServices"
    SHOW_GALLERY = "showGallery"
    SHOW_TESTIMONIALS = "showTestimonials"
    SHOW_BLOG = "showBlog"
    SHOW_CONTACT = "showContact"
    SHOW_BOOKING_LINK = "showBookingLink"
    SHOW_FEATURED_SERVICE = "showFeaturedService"

    @property
    def attr(self) -> str:
        return _ALIAS_TO_ATTR[self.value]


_ALIAS_TO_ATTR = {
    (info.alias or to_camel(name)): name for name, info in DesignConfig.model_fields.items()
}


@dataclass(frozen=True)
class FieldRule:
    kind: FieldKind
    max_length: int | None = None

    @property
    def is_scalar(self) -> bool:
        return self.kind is not FieldKind.NAVIGATION


def _text(limit: int) -> FieldRule:
    return FieldRule(FieldKind.TEXT, max_length=limit)


_COLOR = FieldRule(FieldKind.COLOR)
_URL = FieldRule(FieldKind.URL)
_CHOICE = FieldRule(FieldKind.CHOICE)

FIELD_RULES: dict[ConfigField, FieldRule] = {
    ConfigField.APP_NAME: _text(30),
    ConfigField.LOGO_URL: _URL,
    ConfigField.PRIMARY_COLOR: _COLOR,
    ConfigField.BACKGROUND_COLOR: _COLOR,
    ConfigField.TEXT_COLOR: _COLOR,
    ConfigField.ACCENT_COLOR_1: _COLOR,
    ConfigField.ACCENT_COLOR_2: _COLOR,
    ConfigField.ACCENT_COLOR_3: _COLOR,
    ConfigField.FONT_FAMILY: _CHOICE,
    ConfigField.BUTTON_SHAPE: _CHOICE,
    ConfigField.HERO_IMAGE_URL: _URL,
    ConfigField.HERO_TITLE: _text(50),
    ConfigField.HOME_TESTIMONIALS_TITLE: _text(50),
    ConfigField.HOME_GALLERY_TITLE: _text(50),
    ConfigField.HOME_BLOG_TITLE: _text(50),
    ConfigField.SERVICES_PAGE_TITLE: _text(50),
    ConfigField.GALLERY_PAGE_TITLE: _text(50),
    ConfigField.BLOG_PAGE_TITLE: _text(50),
    ConfigField.CONTACT_PAGE_TITLE: _text(50),
    ConfigField.BOOKING_LINK: _URL,
    ConfigField.ABOUT_TEXT: _text(500),
    ConfigField.CONTACT_INFO: _text(200),
    ConfigField.FEATURED_SERVICE_TITLE: _text(50),
    ConfigField.FEATURED_SERVICE_IMAGE_URL: _URL,
    ConfigField.FEATURED_SERVICE_NAME: _text(50),
    ConfigField.FEATURED_SERVICE_PRICE: _text(20),
    ConfigField.FEATURED_SERVICE_DESCRIPTION: _text(200),
    ConfigField.FACEBOOK_URL: _URL,
    ConfigField.INSTAGRAM_URL: _URL,
    ConfigField.TIKTOK_URL: _URL,
    ConfigField.NAV_ITEMS: FieldRule(FieldKind.NAVIGATION),
}

THEME_FIELDS = (
    ConfigField.PRIMARY_COLOR,
    ConfigField.BACKGROUND_COLOR,
    ConfigField.TEXT_COLOR,
    ConfigField.ACCENT_COLOR_1,
    ConfigField.ACCENT_COLOR_2,
    ConfigField.ACCENT_COLOR_3,
    ConfigField.FONT_FAMILY,
)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR_RE.match(value))


def is_url_or_data_uri(value: str) -> bool:
    """Accept http(s) URLs, image data URIs and any other absolute URL."""
    if _WEB_OR_DATA_URI_RE.match(value):
        return True
    parts = urlsplit(value)
    if not parts.scheme or not _URL_SCHEME_RE.match(parts.scheme):
        return False
    return bool(parts.netloc or parts.path)


def has_visible_home(nav_items: tuple[NavItem, ...]) -> bool:
    return any(item.visible and item.content is ContentType.HOME for item in nav_items)


def validate_field(field: ConfigField, value) -> str | None:
    """Return the advisory error message for ``value`` or ``None`` if it is valid."""
    rule = FIELD_RULES[field]
    if rule.kind is FieldKind.TEXT:
        if rule.max_length is not None and len(value) > rule.max_length:
            return f"Cannot exceed {rule.max_length} characters."
    elif rule.kind is FieldKind.COLOR:
        if value and not is_hex_color(value):
            return COLOR_MESSAGE
    elif rule.kind is FieldKind.URL:
        if value and not is_url_or_data_uri(value):
            return URL_MESSAGE
    elif rule.kind is FieldKind.NAVIGATION:
        if not has_visible_home(value):
            return HOME_TAB_MESSAGE
    return None


def validate_config(config: DesignConfig) -> dict[ConfigField, str]:
    """Run every rule against ``config``; used to rebuild the error map after load."""
    errors: dict[ConfigField, str] = {}
    for field in ConfigField:
        message = validate_field(field, getattr(config, field.attr))
        if message:
            errors[field] = message
    return errors
