"""Tests for the background pattern generator."""

import pytest
from lxml import etree

from src.generator.patterns import (
    BASE_SPACING,
    DENSITY,
    MESH_GRADIENT_ID,
    PATTERN_TYPES,
    pattern_svg,
    render_pattern,
)
from src.schema.themes import default_registry


@pytest.fixture
def theme():
    return default_registry.lookup("corporate")


def _root(kind, width=400, height=200, **kwargs):
    return etree.fromstring(pattern_svg(kind, width, height, **kwargs).encode("utf-8"))


def _tags(root):
    return [etree.QName(el).localname for el in root]


# ===========================================================================
# Pattern kinds
# ===========================================================================

class TestPatterns:

    @pytest.mark.parametrize("kind", PATTERN_TYPES)
    def test_every_kind_draws(self, kind, theme):
        markup = pattern_svg(kind, 400, 200, theme=theme)
        assert "theme:" not in markup
        assert len(etree.fromstring(markup.encode("utf-8"))) > 0

    def test_dots_grid(self):
        # medium spacing 40: x at 20..380 (10), y at 20..180 (5)
        root = _root("dots")
        assert _tags(root) == ["circle"] * 50
        assert root[0].get("cx") == "20" and root[0].get("r") == "4"

    def test_density_changes_spacing(self):
        low = len(_root("grid", density="low"))
        medium = len(_root("grid"))
        high = len(_root("grid", density="high"))
        assert low < medium < high
        assert medium == 400 // BASE_SPACING + 200 // BASE_SPACING

    def test_opacity_applied(self):
        for el in _root("grid", opacity=0.25):
            assert el.get("stroke-opacity") == "0.25"

    def test_hexagons_have_six_corners(self):
        root = _root("hexagon")
        assert set(_tags(root)) == {"polygon"}
        assert len(root[0].get("points").split()) == 6

    def test_gradient_mesh_uses_gradient(self):
        root = _root("gradient-mesh", color="#123456")
        assert _tags(root)[0] == "defs"
        gradient = root[0][0]
        assert gradient.get("id") == MESH_GRADIENT_ID
        assert [s.get("stop-color") for s in gradient] == ["#123456"] * 3
        circles = root.findall("{*}circle")
        assert len(circles) == 9
        assert all(c.get("fill") == f"url(#{MESH_GRADIENT_ID})" for c in circles)

    def test_deterministic(self, theme):
        assert pattern_svg("waves", 300, 120, theme=theme) == \
            pattern_svg("waves", 300, 120, theme=theme)

    def test_density_table(self):
        assert set(DENSITY) == {"low", "medium", "high"}


class TestPatternErrors:

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown pattern"):
            render_pattern("plaid", 100, 100)

    def test_unknown_density(self):
        with pytest.raises(ValueError, match="density"):
            render_pattern("dots", 100, 100, density="extreme")

    def test_opacity_range(self):
        with pytest.raises(ValueError, match="opacity"):
            render_pattern("dots", 100, 100, opacity=1.5)

    def test_empty_canvas(self):
        with pytest.raises(ValueError, match="positive"):
            render_pattern("dots", 0, 100)
