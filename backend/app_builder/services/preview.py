"""Preview renderer: DesignConfig -> themed, navigable mock app.

Everything here is a pure function of the config plus the active tab index.
Tabs are always addressed by their position in ``config.nav_items``, never by
their position among the visible tabs.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app_builder.schemas.design_config import (
    ButtonShape,
    ContentType,
    DesignConfig,
    GalleryItem,
    MediaType,
    Testimonial,
)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

CONTENT_TOGGLES: dict[ContentType, str] = {
    ContentType.SERVICES: "show_services",
    ContentType.GALLERY: "show_gallery",
    ContentType.BLOG: "show_blog",
    ContentType.CONTACT: "show_contact",
}

BUTTON_RADII: dict[ButtonShape, str] = {
    ButtonShape.SQUARE: "0.5rem",
    ButtonShape.SOFT: "0.375rem",
    ButtonShape.PILL: "9999px",
}

_ICON_PLACEHOLDER_RE = re.compile(r"fill='black'")
_SAFE_HREF_RE = re.compile(r"^https?://", re.IGNORECASE)

HOME_GALLERY_LIMIT = 4
HOME_TESTIMONIAL_LIMIT = 2
GALLERY_EMPTY_MESSAGE = (
    "The gallery is currently empty. Add photos and videos in the design panel!"
)


@dataclass(frozen=True)
class ServiceOffer:
    name: str
    price: str
    duration: str


@dataclass(frozen=True)
class BlogPost:
    title: str
    excerpt: str
    image: str


SERVICES = (
    ServiceOffer("Signature Facial", "$85", "60 min"),
    ServiceOffer("Microneedling", "$250", "75 min"),
    ServiceOffer("LED Therapy Add-On", "$40", "15 min"),
    ServiceOffer("Botox Consultation", "Free", "30 min"),
)

BLOG_POSTS = (
    BlogPost(
        "5 Tips for Glowing Skin Before Your Big Day",
        "Getting ready for a special event? Here are our top tips to make sure your "
        "skin is radiant and photo-ready...",
        "https://images.unsplash.com/photo-1552693673-1bf958298935?w=400&q=80",
    ),
    BlogPost(
        "The Truth About Microneedling: Is It For You?",
        "We break down the benefits, the process, and what to expect from one of our "
        "most popular advanced treatments.",
        "https://images.unsplash.com/photo-1616394584738-FC6e6fb3e198?w=400&q=80",
    ),
)

BUSINESS_HOURS = "Mon - Sat: 9:00 AM - 6:00 PM"


# ---------------------------------------------------------------------------
# Tabs and navigation
# ---------------------------------------------------------------------------


def is_content_enabled(config: DesignConfig, content: ContentType) -> bool:
    toggle = CONTENT_TOGGLES.get(content)
    return True if toggle is None else getattr(config, toggle)


@dataclass(frozen=True)
class TabView:
    index: int
    id: str
    label: str
    icon_src: str
    icon_is_image: bool
    content: ContentType
    active: bool


def colorize_icon(icon: str, color: str) -> str:
    """Swap the placeholder fill of an inline SVG data URI for ``color``.

    Raster and remote icons are returned unchanged.
    """
    if not icon or not icon.startswith("data:image/svg+xml"):
        return icon
    return _ICON_PLACEHOLDER_RE.sub(f"fill='{quote(color, safe='')}'", icon, count=1)


def visible_tabs(config: DesignConfig, active_index: int = 0) -> list[TabView]:
    tabs = []
    for index, item in enumerate(config.nav_items):
        if not (item.visible and is_content_enabled(config, item.content)):
            continue
        active = index == active_index
        color = config.primary_color if active else config.text_color
        tabs.append(
            TabView(
                index=index,
                id=item.id,
                label=item.label,
                icon_src=colorize_icon(item.icon, color),
                icon_is_image=item.icon.startswith(("http", "data:")),
                content=item.content,
                active=active,
            )
        )
    return tabs


def tab_index_for(config: DesignConfig, content: ContentType) -> int | None:
    """Index of the first nav item showing ``content``, if any."""
    for index, item in enumerate(config.nav_items):
        if item.content is content:
            return index
    return None


def active_content(config: DesignConfig, active_index: int) -> ContentType:
    if 0 <= active_index < len(config.nav_items):
        return config.nav_items[active_index].content
    return ContentType.HOME


class PreviewState:
    """The preview's only state: which nav item is active."""

    def __init__(self, active_index: int = 0):
        self.active_index = active_index

    def select(self, index: int) -> None:
        self.active_index = index

    def navigate_to(self, config: DesignConfig, content: ContentType) -> bool:
        index = tab_index_for(config, content)
        if index is None:
            return False
        self.active_index = index
        return True

    def reset(self) -> None:
        self.active_index = 0


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


def theme_variables(config: DesignConfig) -> dict[str, str]:
    return {
        "--primary-color": config.primary_color,
        "--background-color": config.background_color,
        "--text-color": config.text_color,
        "--accent-color-1": config.accent_color1,
        "--accent-color-2": config.accent_color2,
        "--accent-color-3": config.accent_color3,
    }


def inline_style(config: DesignConfig) -> str:
    parts = [f"{name}: {value}" for name, value in theme_variables(config).items()]
    parts.append(f"font-family: '{config.font_family.value}', sans-serif")
    return "; ".join(parts)


def safe_href(url: str) -> str | None:
    return url if url and _SAFE_HREF_RE.match(url) else None


# ---------------------------------------------------------------------------
# Page model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GalleryView:
    src: str
    is_video: bool
    start: float | None = None
    end: float | None = None

    @classmethod
    def of(cls, item: GalleryItem) -> "GalleryView":
        return cls(
            src=item.src,
            is_video=item.media_type is MediaType.VIDEO,
            start=item.start_time,
            end=item.end_time,
        )


@dataclass(frozen=True)
class CallToAction:
    label: str
    href: str | None = None
    tab_index: int | None = None


@dataclass(frozen=True)
class HomeView:
    cta: CallToAction | None = None
    show_featured: bool = False
    testimonials: tuple[Testimonial, ...] = ()
    gallery: tuple[GalleryView, ...] = ()
    blog_post: BlogPost | None = None
    blog_tab_index: int | None = None

    @property
    def blocks(self) -> list[str]:
        """Names of the home blocks that render, in page order."""
        names = ["hero"]
        if self.cta is not None:
            names.append("cta")
        if self.show_featured:
            names.append("featured_service")
        if self.testimonials:
            names.append("testimonials")
        if self.gallery:
            names.append("gallery")
        if self.blog_post is not None:
            names.append("blog")
        return names


@dataclass(frozen=True)
class PreviewPage:
    config: DesignConfig
    active_index: int
    content: ContentType
    tabs: list[TabView]
    style: str
    button_radius: str
    home: HomeView | None = None
    booking_href: str | None = None
    gallery: tuple[GalleryView, ...] = ()
    services: tuple[ServiceOffer, ...] = SERVICES
    blog_posts: tuple[BlogPost, ...] = BLOG_POSTS
    contact_lines: tuple[str, ...] = field(default_factory=tuple)


def _home_cta(config: DesignConfig) -> CallToAction | None:
    booking = safe_href(config.booking_link) if config.show_booking_link else None
    if booking:
        return CallToAction("Book Now", href=booking)
    if config.show_services:
        return CallToAction("View Our Services", tab_index=tab_index_for(config, ContentType.SERVICES))
    return None


def build_home(config: DesignConfig) -> HomeView:
    testimonials = ()
    if config.show_testimonials:
        testimonials = config.testimonials[:HOME_TESTIMONIAL_LIMIT]
    gallery = ()
    if config.show_gallery:
        gallery = tuple(GalleryView.of(i) for i in config.gallery_items[:HOME_GALLERY_LIMIT])
    blog_post = BLOG_POSTS[0] if config.show_blog and BLOG_POSTS else None
    featured = config.show_featured_service and bool(
        config.featured_service_name or config.featured_service_image_url
    )
    return HomeView(
        cta=_home_cta(config),
        show_featured=featured,
        testimonials=testimonials,
        gallery=gallery,
        blog_post=blog_post,
        blog_tab_index=tab_index_for(config, ContentType.BLOG),
    )


def build_page(config: DesignConfig, active_index: int = 0) -> PreviewPage:
    content = active_content(config, active_index)
    booking = safe_href(config.booking_link) if config.show_booking_link else None
    return PreviewPage(
        config=config,
        active_index=active_index,
        content=content,
        tabs=visible_tabs(config, active_index),
        style=inline_style(config),
        button_radius=BUTTON_RADII[config.button_shape],
        home=build_home(config) if content is ContentType.HOME else None,
        booking_href=booking,
        gallery=tuple(GalleryView.of(i) for i in config.gallery_items),
        contact_lines=tuple(line for line in config.contact_info.splitlines() if line.strip()),
    )


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def get_environment() -> Environment:
    return _env


def render_preview(
    config: DesignConfig,
    active_index: int = 0,
    *,
    tab_href: str = "?tab={index}",
    published: bool = False,
) -> str:
    """Render the mock app as a standalone HTML document."""
    page = build_page(config, active_index)
    template = _env.get_template("app/page.html")
    return template.render(
        page=page,
        config=config,
        tab_href=tab_href,
        published=published,
        gallery_empty_message=GALLERY_EMPTY_MESSAGE,
        business_hours=BUSINESS_HOURS,
    )


def render_not_found(app_id: str) -> str:
    return _env.get_template("app/not_found.html").render(app_id=app_id)
