"""DesignConfig: the full customizable state of one generated app.

Models are frozen; every edit produces a new instance. Field names are
snake_case in Python and camelCase on the wire (the persisted/publishable
export shape).
"""

import uuid
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ContentType(StrEnum):
    HOME = "home"
    SERVICES = "services"
    GALLERY = "gallery"
    BLOG = "blog"
    CONTACT = "contact"


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


class FontFamily(StrEnum):
    POPPINS = "Poppins"
    MONTSERRAT = "Montserrat"
    COMFORTAA = "Comfortaa"
    VT323 = "VT323"
    CHAKRA_PETCH = "Chakra Petch"
    CAVEAT = "Caveat"


class ButtonShape(StrEnum):
    SQUARE = "rounded-lg"
    SOFT = "rounded-md"
    PILL = "rounded-full"


class ThemePreset(StrEnum):
    WELLNESS = "Wellness"
    CYBER_GLOW = "CyberGlow"
    MINIMALIST = "Minimalist"
    VIBRANT = "Vibrant"
    OCEANIC = "Oceanic"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _new_nav_id() -> str:
    return uuid.uuid4().hex[:12]


class NavItem(_WireModel):
    id: str = Field(default_factory=_new_nav_id)
    label: str
    icon: str = ""
    icon_color: str = "#000000"
    content: ContentType
    visible: bool = True


class GalleryItem(_WireModel):
    src: str
    media_type: MediaType = Field(MediaType.IMAGE, alias="type")
    start_time: float | None = Field(None, ge=0)
    end_time: float | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_trim_window(self) -> "GalleryItem":
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.start_time > self.end_time
        ):
            raise ValueError("startTime must not be after endTime")
        return self


class Testimonial(_WireModel):
    author: str
    text: str


class ThemeValues(_WireModel):
    primary_color: str
    background_color: str
    text_color: str
    accent_color1: str
    accent_color2: str
    accent_color3: str
    font_family: FontFamily


THEME_PRESETS: dict[ThemePreset, ThemeValues] = {
    ThemePreset.WELLNESS: ThemeValues(
        primary_color="#D8A7B1",
        background_color="#FDF7F5",
        text_color="#5D5C61",
        accent_color1="#D8A7B1",
        accent_color2="#BFA3A8",
        accent_color3="#F4E9E6",
        font_family=FontFamily.POPPINS,
    ),
    ThemePreset.CYBER_GLOW: ThemeValues(
        primary_color="#FF00C7",
        background_color="#0A001A",
        text_color="#C0B8F0",
        accent_color1="#00FFFF",
        accent_color2="#7100FF",
        accent_color3="#2F0B5A",
        font_family=FontFamily.VT323,
    ),
    ThemePreset.MINIMALIST: ThemeValues(
        primary_color="#1F2937",
        background_color="#F9FAFB",
        text_color="#374151",
        accent_color1="#D1D5DB",
        accent_color2="#6B7280",
        accent_color3="#E5E7EB",
        font_family=FontFamily.MONTSERRAT,
    ),
    ThemePreset.VIBRANT: ThemeValues(
        primary_color="#EC4899",
        background_color="#FDF2F8",
        text_color="#831843",
        accent_color1="#D946EF",
        accent_color2="#F472B6",
        accent_color3="#FCE7F3",
        font_family=FontFamily.POPPINS,
    ),
    ThemePreset.OCEANIC: ThemeValues(
        primary_color="#0E7490",
        background_color="#F0FDFA",
        text_color="#155E75",
        accent_color1="#06B6D4",
        accent_color2="#67E8F9",
        accent_color3="#CFFAFE",
        font_family=FontFamily.COMFORTAA,
    ),
}


class DesignConfig(_WireModel):
    # Branding and theme
    theme: ThemePreset = ThemePreset.OCEANIC
    app_name: str = ""
    logo_url: str = ""
    primary_color: str = "#000000"
    background_color: str = "#FFFFFF"
    text_color: str = "#000000"
    accent_color1: str = "#000000"
    accent_color2: str = "#000000"
    accent_color3: str = "#000000"
    font_family: FontFamily = FontFamily.POPPINS
    button_shape: ButtonShape = ButtonShape.PILL
    hero_image_url: str = ""

    # Ordered collections
    nav_items: tuple[NavItem, ...] = ()
    gallery_items: tuple[GalleryItem, ...] = ()
    testimonials: tuple[Testimonial, ...] = ()

    # Section toggles
    show_services: bool = True
    show_gallery: bool = True
    show_testimonials: bool = True
    show_blog: bool = True
    show_contact: bool = True

    # Page titles
    hero_title: str = ""
    home_testimonials_title: str = ""
    home_gallery_title: str = ""
    home_blog_title: str = ""
    services_page_title: str = ""
    gallery_page_title: str = ""
    blog_page_title: str = ""
    contact_page_title: str = ""

    # Booking and about
    booking_link: str = ""
    show_booking_link: bool = True
    about_text: str = ""
    contact_info: str = ""

    # Featured service
    featured_service_title: str = ""
    show_featured_service: bool = True
    featured_service_image_url: str = ""
    featured_service_name: str = ""
    featured_service_price: str = ""
    featured_service_description: str = ""

    # Social
    facebook_url: str = ""
    instagram_url: str = ""
    tiktok_url: str = ""

    def with_changes(self, **changes) -> "DesignConfig":
        """Return a validated copy with ``changes`` (snake_case names) applied."""
        data = self.model_dump()
        data.update(changes)
        return DesignConfig.model_validate(data)

    def with_theme(self, preset: ThemePreset) -> "DesignConfig":
        """Return a copy with the preset's colors, font and name applied together."""
        values = THEME_PRESETS[preset]
        return self.with_changes(theme=preset, **values.model_dump())

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Seed
# ---------------------------------------------------------------------------

_ICON_PREFIX = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' "
    "viewBox='0 0 24 24' fill='black'%3E"
)
_ICON_SUFFIX = "%3C/svg%3E"


def _svg_icon(body: str) -> str:
    return f"{_ICON_PREFIX}{body}{_ICON_SUFFIX}"


_PEXELS = "https://images.pexels.com/photos/{0}/pexels-photo-{0}.jpeg?auto=compress&cs=tinysrgb&w=600"

_SEED_DATA = {
    "theme": "Oceanic",
    "appName": "Aura Aesthetics",
    "logoUrl": "https://cdn-icons-png.flaticon.com/512/346/346145.png",
    "primaryColor": "#0E7490",
    "backgroundColor": "#F0FDFA",
    "textColor": "#155E75",
    "accentColor1": "#06B6D4",
    "accentColor2": "#67E8F9",
    "accentColor3": "#CFFAFE",
    "fontFamily": "Comfortaa",
    "buttonShape": "rounded-full",
    "heroImageUrl": "https://images.unsplash.com/photo-1570172619644-dfd03ed5d881?w=800&q=80",
    "navItems": [
        {
            "id": "home",
            "label": "Home",
            "icon": _svg_icon("%3Cpath d='M10 20v-6h4v6h5v-8h3L12 3 2 12h3v8Z'/%3E"),
            "iconColor": "#0E7490",
            "content": "home",
            "visible": True,
        },
        {
            "id": "services",
            "label": "Services",
            "icon": _svg_icon(
                "%3Cpath d='M12 2 9.19 8.63 2 9.24l5.46 4.73L5.82 21 12 17.27 18.18 "
                "21l-1.64-7.03L22 9.24l-7.19-.61L12 2Z'/%3E"
            ),
            "iconColor": "#155E75",
            "content": "services",
            "visible": True,
        },
        {
            "id": "gallery",
            "label": "Gallery",
            "icon": _svg_icon(
                "%3Ccircle cx='12' cy='12' r='3.2'/%3E%3Cpath d='M9 2 7.17 4H4c-1.1 0-2 "
                ".9-2 2v12c0 1.1.9 2 2 2h16c1.1 0 2-.9 2-2V6c0-1.1-.9-2-2-2h-3.17L15 "
                "2H9Zm3 15c-2.76 0-5-2.24-5-5s2.24-5 5-5 5 2.24 5 5-2.24 5-5 5Z'/%3E"
            ),
            "iconColor": "#155E75",
            "content": "gallery",
            "visible": True,
        },
        {
            "id": "blog",
            "label": "Blog",
            "icon": _svg_icon(
                "%3Cpath d='M14 2H6c-1.1 0-2 .9-2 2v16c0 1.1.9 2 2 2h12c1.1 0 2-.9 "
                "2-2V8l-6-6Zm2 16H8v-2h8v2Zm0-4H8v-2h8v2Zm-3-5V3.5L18.5 9H13Z'/%3E"
            ),
            "iconColor": "#155E75",
            "content": "blog",
            "visible": True,
        },
        {
            "id": "contact",
            "label": "Contact",
            "icon": _svg_icon(
                "%3Cpath d='M20 4H4c-1.1 0-2 .9-2 2v12c0 1.1.9 2 2 2h16c1.1 0 2-.9 "
                "2-2V6c0-1.1-.9-2-2-2Zm0 4-8 5-8-5V6l8 5 8-5v2Z'/%3E"
            ),
            "iconColor": "#155E75",
            "content": "contact",
            "visible": True,
        },
    ],
    "galleryItems": [
        {"type": "image", "src": _PEXELS.format(photo)}
        for photo in (7174389, 3762879, 4465124, 4127431, 7615463)
    ],
    "testimonials": [
        {
            "author": "Jessica P.",
            "text": "Literally the best facial I have ever had. My skin is glowing!",
        },
        {
            "author": "Emily R.",
            "text": "I always leave feeling refreshed and confident. Highly recommend!",
        },
    ],
    "showServices": True,
    "showGallery": True,
    "showTestimonials": True,
    "showBlog": True,
    "showContact": True,
    "heroTitle": "Your Brand, Your App.",
    "homeTestimonialsTitle": "What Our Clients Say",
    "homeGalleryTitle": "Featured Gallery",
    "homeBlogTitle": "From The Blog",
    "servicesPageTitle": "Our Services",
    "galleryPageTitle": "Transformation Gallery",
    "blogPageTitle": "Our Blog",
    "contactPageTitle": "Contact Us",
    "bookingLink": "https://calendly.com/your-username",
    "showBookingLink": True,
    "aboutText": (
        "Aura Aesthetics is a boutique studio dedicated to providing personalized "
        "aesthetic treatments that enhance your natural beauty and boost your confidence."
    ),
    "contactInfo": "123 Glamour Ave, Suite 101\nBeverly Hills, CA 90210\n(310) 555-0123",
    "featuredServiceTitle": "Our Signature Treatment",
    "showFeaturedService": True,
    "featuredServiceImageUrl": _PEXELS.format(7047464),
    "featuredServiceName": "24K Gold Hydro-Lifting Facial",
    "featuredServicePrice": "$150",
    "featuredServiceDescription": (
        "Experience pure luxury with our 24K Gold Hydro-Lifting Facial. This treatment "
        "uses gold-infused serums to lift, firm, and illuminate your skin, leaving you "
        "with a radiant, youthful glow."
    ),
    "facebookUrl": "",
    "instagramUrl": "",
    "tiktokUrl": "",
}

DEFAULT_DESIGN_CONFIG = DesignConfig.model_validate(_SEED_DATA)


def default_design_config() -> DesignConfig:
    """The seed config every new user starts from."""
    return DEFAULT_DESIGN_CONFIG
