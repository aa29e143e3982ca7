"""Preview renderer: tab visibility and addressing, theming, home blocks, HTML."""

from app_builder.schemas.design_config import (
    ButtonShape,
    ContentType,
    GalleryItem,
    MediaType,
    default_design_config,
)
from app_builder.services.preview import (
    GALLERY_EMPTY_MESSAGE,
    PreviewState,
    active_content,
    build_home,
    build_page,
    colorize_icon,
    inline_style,
    render_not_found,
    render_preview,
    safe_href,
    tab_index_for,
    visible_tabs,
)

SEED = default_design_config()


def test_all_seed_tabs_visible():
    tabs = visible_tabs(SEED)
    assert [tab.index for tab in tabs] == [0, 1, 2, 3, 4]
    assert tabs[0].active and not tabs[1].active


def test_toggle_hides_tab_but_keeps_original_indexes():
    """Hiding the gallery section drops its tab; other tabs keep their positions."""
    config = SEED.with_changes(show_gallery=False)
    assert [tab.index for tab in visible_tabs(config)] == [0, 1, 3, 4]
    assert tab_index_for(config, ContentType.BLOG) == 3


def test_invisible_nav_item_is_hidden():
    items = list(SEED.nav_items)
    items[4] = items[4].model_copy(update={"visible": False})
    config = SEED.with_changes(nav_items=tuple(items))
    assert ContentType.CONTACT not in [tab.content for tab in visible_tabs(config)]


def test_home_is_never_gated_by_toggles():
    config = SEED.with_changes(
        show_services=False, show_gallery=False, show_blog=False, show_contact=False
    )
    assert [tab.content for tab in visible_tabs(config)] == [ContentType.HOME]


def test_active_content_falls_back_to_home():
    assert active_content(SEED, 2) is ContentType.GALLERY
    assert active_content(SEED, 42) is ContentType.HOME


def test_preview_state_navigation():
    state = PreviewState()
    assert state.active_index == 0
    assert state.navigate_to(SEED, ContentType.BLOG)
    assert state.active_index == 3
    config = SEED.with_changes(nav_items=SEED.nav_items[:2])
    assert not state.navigate_to(config, ContentType.CONTACT)
    assert state.active_index == 3
    state.reset()
    assert state.active_index == 0


def test_colorize_icon_substitutes_placeholder_fill():
    icon = SEED.nav_items[0].icon
    colored = colorize_icon(icon, "#0E7490")
    assert "fill='%230E7490'" in colored
    assert "fill='black'" not in colored


def test_colorize_icon_leaves_raster_icons():
    url = "https://cdn.example.com/icon.png"
    assert colorize_icon(url, "#123456") == url
    assert colorize_icon("", "#123456") == ""


def test_active_and_inactive_tab_colors():
    config = SEED.with_changes(primary_color="#111111", text_color="#222222")
    tabs = visible_tabs(config, active_index=1)
    assert "%23111111" in tabs[1].icon_src
    assert "%23222222" in tabs[0].icon_src


def test_theme_variables_follow_config():
    style = inline_style(SEED.with_changes(accent_color3="#ABCDEF"))
    assert "--accent-color-3: #ABCDEF" in style
    assert "font-family: 'Comfortaa', sans-serif" in style


def test_safe_href_only_allows_http():
    assert safe_href("https://calendly.com/x") == "https://calendly.com/x"
    assert safe_href("javascript:alert(1)") is None
    assert safe_href("") is None


def test_home_blocks_follow_toggles_and_collections():
    assert build_home(SEED).blocks == [
        "hero",
        "cta",
        "featured_service",
        "testimonials",
        "gallery",
        "blog",
    ]
    config = SEED.with_changes(
        testimonials=(), show_gallery=False, show_featured_service=False, show_blog=False
    )
    assert build_home(config).blocks == ["hero", "cta"]


def test_home_gallery_preview_is_limited():
    assert len(build_home(SEED).gallery) == 4


def test_home_cta_without_booking_links_to_services():
    config = SEED.with_changes(show_booking_link=False)
    cta = build_home(config).cta
    assert cta.href is None
    assert cta.tab_index == 1


def test_button_radius_from_shape():
    assert build_page(SEED.with_changes(button_shape=ButtonShape.SQUARE)).button_radius == "0.5rem"


def test_render_home_html():
    html = render_preview(SEED)
    assert "<title>Aura Aesthetics</title>" in html
    assert 'data-block="testimonials"' in html
    assert 'data-read-more="3"' in html
    assert 'href="https://calendly.com/your-username"' in html
    assert "Powered by SoloPro" not in html


def test_render_gallery_empty_state():
    html = render_preview(SEED.with_changes(gallery_items=()), active_index=2)
    assert GALLERY_EMPTY_MESSAGE in html


def test_render_trimmed_video_attributes():
    video = GalleryItem(src="https://x.test/v.mp4", media_type=MediaType.VIDEO, start_time=5, end_time=10)
    html = render_preview(SEED.with_changes(gallery_items=(video,)), active_index=2)
    assert 'data-start="5.0"' in html
    assert 'data-end="10.0"' in html


def test_render_escapes_user_text():
    html = render_preview(SEED.with_changes(hero_title="<script>x</script>"))
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;x&lt;/script&gt;" in html


def test_render_published_footer_and_custom_tab_links():
    html = render_preview(SEED, published=True, tab_href="/customer-apps/abc?tab={index}")
    assert "Powered by SoloPro" in html
    assert 'href="/customer-apps/abc?tab=4"' in html


def test_render_not_found():
    html = render_not_found("missing-id")
    assert "App Not Found" in html
    assert "missing-id" in html
