"""Advisory field validation rules."""

import pytest

from app_builder.schemas.design_config import ContentType, NavItem, default_design_config
from app_builder.schemas.field_rules import (
    COLOR_MESSAGE,
    HOME_TAB_MESSAGE,
    URL_MESSAGE,
    ConfigField,
    ToggleField,
    is_hex_color,
    is_url_or_data_uri,
    validate_config,
    validate_field,
)


@pytest.mark.parametrize("value", ["#fff", "#FFFFFF", "#0e7490"])
def test_hex_colors_accepted(value):
    assert is_hex_color(value)


@pytest.mark.parametrize("value", ["fff", "#ffff", "#GGGGGG", "red", "#1234567"])
def test_hex_colors_rejected(value):
    assert not is_hex_color(value)


@pytest.mark.parametrize(
    "value",
    [
        "https://example.com/logo.png",
        "http://example.com",
        "data:image/png;base64,AAAA",
        "mailto:hello@example.com",
    ],
)
def test_urls_accepted(value):
    assert is_url_or_data_uri(value)


@pytest.mark.parametrize("value", ["not a url", "example.com", "/relative/path"])
def test_urls_rejected(value):
    assert not is_url_or_data_uri(value)


def test_app_name_length_limit():
    assert validate_field(ConfigField.APP_NAME, "x" * 30) is None
    assert validate_field(ConfigField.APP_NAME, "x" * 31) == "Cannot exceed 30 characters."


def test_description_length_limit():
    message = validate_field(ConfigField.FEATURED_SERVICE_DESCRIPTION, "x" * 201)
    assert message == "Cannot exceed 200 characters."


def test_empty_color_and_url_are_valid():
    assert validate_field(ConfigField.PRIMARY_COLOR, "") is None
    assert validate_field(ConfigField.INSTAGRAM_URL, "") is None


def test_bad_color_and_url_messages():
    assert validate_field(ConfigField.TEXT_COLOR, "blue") == COLOR_MESSAGE
    assert validate_field(ConfigField.BOOKING_LINK, "calendly") == URL_MESSAGE


def test_nav_items_need_a_visible_home():
    items = (
        NavItem(label="Home", content=ContentType.HOME, visible=False),
        NavItem(label="Blog", content=ContentType.BLOG),
    )
    assert validate_field(ConfigField.NAV_ITEMS, items) == HOME_TAB_MESSAGE


def test_field_attr_maps_to_model_attribute():
    assert ConfigField.ACCENT_COLOR_1.attr == "accent_color1"
    assert ConfigField.FEATURED_SERVICE_IMAGE_URL.attr == "featured_service_image_url"
    assert ToggleField.SHOW_BOOKING_LINK.attr == "show_booking_link"


def test_seed_config_has_no_errors():
    assert validate_config(default_design_config()) == {}


def test_validate_config_collects_every_error():
    config = default_design_config().with_changes(app_name="x" * 40, primary_color="oops")
    errors = validate_config(config)
    assert set(errors) == {ConfigField.APP_NAME, ConfigField.PRIMARY_COLOR}
