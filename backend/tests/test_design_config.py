"""DesignConfig model: seed, wire shape, immutability and theme presets."""

import pytest
from pydantic import ValidationError

from app_builder.schemas.design_config import (
    THEME_PRESETS,
    ContentType,
    DesignConfig,
    FontFamily,
    GalleryItem,
    MediaType,
    NavItem,
    ThemePreset,
    default_design_config,
)


def test_seed_config_values():
    """The seed starts as Aura Aesthetics on the Oceanic preset with five tabs."""
    config = default_design_config()
    assert config.app_name == "Aura Aesthetics"
    assert config.theme is ThemePreset.OCEANIC
    assert config.primary_color == THEME_PRESETS[ThemePreset.OCEANIC].primary_color
    assert [item.content for item in config.nav_items] == [
        ContentType.HOME,
        ContentType.SERVICES,
        ContentType.GALLERY,
        ContentType.BLOG,
        ContentType.CONTACT,
    ]
    assert len(config.gallery_items) == 5
    assert len(config.testimonials) == 2


def test_wire_shape_is_camel_case():
    wire = default_design_config().to_wire()
    assert wire["appName"] == "Aura Aesthetics"
    assert wire["accentColor1"] == "#06B6D4"
    assert wire["navItems"][0]["iconColor"] == "#0E7490"
    assert wire["galleryItems"][0]["type"] == "image"
    assert "app_name" not in wire


def test_wire_round_trip_preserves_config():
    config = default_design_config()
    assert DesignConfig.model_validate(config.to_wire()) == config


def test_config_is_frozen():
    config = default_design_config()
    with pytest.raises(ValidationError):
        config.app_name = "Changed"


def test_with_changes_returns_new_instance():
    """with_changes leaves the original untouched."""
    config = default_design_config()
    updated = config.with_changes(app_name="Glow Studio")
    assert updated.app_name == "Glow Studio"
    assert config.app_name == "Aura Aesthetics"


def test_with_changes_rejects_unknown_font():
    with pytest.raises(ValidationError):
        default_design_config().with_changes(font_family="Comic Sans")


def test_with_theme_overwrites_all_theme_fields():
    """Applying a preset replaces every color and the font together."""
    config = default_design_config().with_changes(primary_color="nope", accent_color2="#123")
    themed = config.with_theme(ThemePreset.CYBER_GLOW)
    values = THEME_PRESETS[ThemePreset.CYBER_GLOW]
    assert themed.theme is ThemePreset.CYBER_GLOW
    assert themed.primary_color == values.primary_color
    assert themed.background_color == values.background_color
    assert themed.text_color == values.text_color
    assert themed.accent_color1 == values.accent_color1
    assert themed.accent_color2 == values.accent_color2
    assert themed.accent_color3 == values.accent_color3
    assert themed.font_family is FontFamily.VT323
    assert themed.app_name == config.app_name


def test_nav_item_gets_generated_id():
    a = NavItem(label="Extra", content=ContentType.BLOG)
    b = NavItem(label="Extra", content=ContentType.BLOG)
    assert a.id and b.id and a.id != b.id


def test_gallery_item_accepts_wire_type_alias():
    item = GalleryItem.model_validate({"src": "clip.mp4", "type": "video", "startTime": 1})
    assert item.media_type is MediaType.VIDEO
    assert item.start_time == 1


def test_gallery_item_rejects_inverted_trim_window():
    with pytest.raises(ValidationError):
        GalleryItem(src="clip.mp4", media_type=MediaType.VIDEO, start_time=10, end_time=5)
