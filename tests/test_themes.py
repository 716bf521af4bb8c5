"""Tests for the theme registry and colour helpers."""

import threading

import pytest

from src.errors import ThemeNotFoundError
from src.schema.colors import (
    generate_palette,
    harmony_colors,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    is_hex_color,
    is_light,
)
from src.schema.themes import (
    BUILTIN_THEME_NAMES,
    DEFAULT_THEME,
    Theme,
    ThemeRegistry,
    Typography,
    create_custom_theme,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def registry():
    return ThemeRegistry()


@pytest.fixture
def custom(registry):
    return create_custom_theme("acme", "ACME Health", "#0d9488", registry=registry)


# ===========================================================================
# Colour helpers
# ===========================================================================

class TestColors:

    def test_is_hex_color(self):
        assert is_hex_color("#A1b2C3")
        assert not is_hex_color("#abc")
        assert not is_hex_color("red")
        assert not is_hex_color("")

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#ff8000") == (255, 128, 0)

    def test_hsl_round_trip_primary_colours(self):
        for color in ("#ff0000", "#00ff00", "#0000ff"):
            assert hsl_to_hex(*hex_to_hsl(color)) == color

    def test_hex_to_hsl_known_value(self):
        assert hex_to_hsl("#2563eb") == (221, 83, 53)
        assert hex_to_hsl("#808080") == (0, 0, 50)

    def test_complementary(self):
        secondary, _ = harmony_colors("#ff0000", "complementary")
        assert secondary == "#00ffff"

    def test_triadic(self):
        assert harmony_colors("#ff0000", "triadic") == ("#00ff00", "#0000ff")

    def test_monochromatic_keeps_hue(self):
        secondary, accent = harmony_colors("#2563eb", "monochromatic")
        hue = hex_to_hsl("#2563eb")[0]
        assert abs(hex_to_hsl(secondary)[0] - hue) <= 3
        assert abs(hex_to_hsl(accent)[0] - hue) <= 3

    def test_unknown_harmony(self):
        with pytest.raises(ValueError, match="harmony"):
            harmony_colors("#ff0000", "tetradic")

    def test_palette_foreground_contrasts_background(self):
        assert not is_light(generate_palette("#2563eb", "#ffffff")["foreground"])
        assert is_light(generate_palette("#2563eb", "#0f172a")["foreground"])

    def test_palette_keys(self):
        palette = generate_palette("#2563eb")
        assert set(palette) == {"primary", "secondary", "accent", "background",
                                "foreground", "muted", "muted_foreground", "border"}
        assert all(is_hex_color(v) for v in palette.values())


# ===========================================================================
# Built-in themes
# ===========================================================================

class TestBuiltins:

    def test_five_builtins(self, registry):
        assert sorted(registry.names()) == sorted(BUILTIN_THEME_NAMES)
        assert set(BUILTIN_THEME_NAMES) == {"corporate", "pitch-deck", "academic",
                                            "workshop", "startup"}
        assert DEFAULT_THEME in registry

    def test_builtins_have_drawing_colours(self, registry):
        for theme in registry.all():
            for key in ("text", "surface", "axis", "grid", "label", "background"):
                assert is_hex_color(theme.color(key)), (theme.name, key)
            assert theme.chart_palette

    def test_series_color_cycles(self, registry):
        theme = registry.lookup("corporate")
        n = len(theme.chart_palette)
        assert theme.series_color(n) == theme.series_color(0)

    def test_to_dict_round_trip(self, registry):
        theme = registry.lookup("academic")
        assert Theme.from_dict(theme.to_dict()) == theme

    def test_colors_are_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.lookup("corporate").colors["primary"] = "#000000"


# ===========================================================================
# Registry lifecycle
# ===========================================================================

class TestRegistry:

    def test_lookup_unknown(self, registry):
        with pytest.raises(ThemeNotFoundError) as excinfo:
            registry.lookup("neon")
        assert "Unknown theme 'neon'" in str(excinfo.value)
        assert "corporate" in excinfo.value.available
        assert isinstance(excinfo.value, KeyError)

    def test_get_unknown_is_none(self, registry):
        assert registry.get("neon") is None

    def test_create_and_lookup(self, registry, custom):
        assert registry.lookup("acme") is custom
        assert custom.color("primary") == "#0d9488"
        assert custom.color("text") == custom.color("foreground")
        assert not custom.builtin
        assert len(registry) == 6

    def test_explicit_colours_win(self, registry):
        theme = create_custom_theme("brand", "Brand", "#0d9488", secondary="#111111",
                                    accent="#222222", registry=registry)
        assert theme.color("secondary") == "#111111"
        assert theme.chart_palette[:3] == ("#0d9488", "#111111", "#222222")

    def test_duplicate_rejected(self, registry, custom):
        with pytest.raises(ValueError, match="already exists"):
            create_custom_theme("acme", "Again", "#000000", registry=registry)

    def test_builtin_name_rejected(self, registry):
        with pytest.raises(ValueError, match="built-in"):
            create_custom_theme("corporate", "Mine", "#000000", registry=registry)

    def test_invalid_colour_rejected(self, registry):
        with pytest.raises(ValueError, match="primary"):
            create_custom_theme("bad", "Bad", "blue", registry=registry)

    def test_invalid_name_rejected(self, registry):
        with pytest.raises(ValueError, match="Invalid theme name"):
            create_custom_theme("Bad Name", "Bad", "#000000", registry=registry)

    def test_font_family_list_accepted(self, registry):
        theme = create_custom_theme("brand", "Brand", "#0d9488", registry=registry,
                                    font_family="Inter, 'Helvetica Neue', sans-serif")
        assert theme.typography.font_family == "Inter, 'Helvetica Neue', sans-serif"

    def test_font_family_cannot_close_style(self, registry):
        with pytest.raises(ValueError, match="font family"):
            create_custom_theme("brand", "Brand", "#0d9488", registry=registry,
                                font_family="Inter;}</style><script>alert(1)</script>")
        assert "brand" not in registry

    def test_update_checks_css_values(self, registry, custom):
        with pytest.raises(ValueError, match="heading sizes"):
            registry.update("acme", typography=Typography(heading_sizes=("48px;}",)))
        with pytest.raises(ValueError, match="colour names"):
            registry.update("acme", colors={"x;}</style>": "#000000"})
        assert registry.lookup("acme") is custom

    def test_update_custom(self, registry, custom):
        updated = registry.update("acme", display_name="ACME", colors={"accent": "#ff0000"})
        assert updated.display_name == "ACME"
        assert updated.color("accent") == "#ff0000"
        assert updated.color("primary") == "#0d9488"
        assert registry.lookup("acme") is updated

    def test_update_builtin_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.update("corporate", display_name="Mine")

    def test_remove(self, registry, custom):
        assert registry.remove("acme") is True
        assert registry.remove("acme") is False
        assert "acme" not in registry

    def test_remove_builtin_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.remove("startup")

    def test_clear_keeps_builtins(self, registry, custom):
        registry.clear()
        assert sorted(registry.names()) == sorted(BUILTIN_THEME_NAMES)

    def test_snapshot_is_immutable(self, registry, custom):
        snap = registry.snapshot()
        registry.remove("acme")
        assert "acme" in snap
        with pytest.raises(TypeError):
            snap["other"] = custom

    def test_concurrent_registration(self, registry):
        def add(i):
            create_custom_theme(f"team-{i}", f"Team {i}", "#336699", registry=registry)

        threads = [threading.Thread(target=add, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == len(BUILTIN_THEME_NAMES) + 20
