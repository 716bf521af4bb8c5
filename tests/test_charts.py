"""Tests for the chart engine."""

import pytest
from lxml import etree

from src.errors import ChartDataShapeError
from src.generator.charts import (
    CHART_KINDS,
    Bounds,
    ChartStyle,
    pie_slices,
    render_chart,
    render_chart_svg,
)
from src.generator.svg_builder import SVG_NS
from src.schema.models import ChartDataset
from src.schema.themes import default_registry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def theme():
    return default_registry.lookup("corporate")


@pytest.fixture
def quarterly():
    return {
        "labels": ["Q1", "Q2", "Q3"],
        "series": [
            {"name": "Revenue", "values": [120, 135, 150]},
            {"name": "Cost", "values": [80, 90, 95]},
        ],
    }


def _root(kind, data, **kwargs):
    return etree.fromstring(render_chart_svg(kind, data, **kwargs).encode("utf-8"))


def _by_class(root, cls):
    return root.xpath(f"//*[@class='{cls}']")


# ===========================================================================
# Bar charts
# ===========================================================================

class TestBarChart:

    def test_one_bar_per_value_per_series(self, quarterly, theme):
        root = _root("bar", quarterly, theme=theme)
        assert len(_by_class(root, "bar")) == 6

    def test_palette_cycle(self, quarterly, theme):
        bars = _by_class(_root("bar", quarterly, theme=theme), "bar")
        assert bars[0].get("fill") == theme.chart_palette[0]
        assert bars[3].get("fill") == theme.chart_palette[1]

    def test_explicit_series_color(self, theme):
        data = {"labels": ["A"], "series": [{"name": "s", "values": [1], "color": "#ff0000"}]}
        bars = _by_class(_root("bar", data, theme=theme), "bar")
        assert bars[0].get("fill") == "#ff0000"

    def test_negative_bars_hang_from_zero_line(self, theme):
        data = {"labels": ["Up", "Down"], "series": [{"name": "Delta", "values": [10, -5]}]}
        root = _root("bar", data, theme=theme)
        zero = float(_by_class(root, "zero-line")[0].get("y1"))
        up, down = _by_class(root, "bar")

        assert float(up.get("y")) + float(up.get("height")) == pytest.approx(zero, abs=0.02)
        assert float(down.get("y")) == pytest.approx(zero, abs=0.02)
        assert float(down.get("height")) > 0

    def test_zero_line_present_for_positive_data(self, quarterly, theme):
        root = _root("bar", quarterly, theme=theme)
        assert len(_by_class(root, "zero-line")) == 1

    def test_all_zero_values_still_render(self, theme):
        data = {"labels": ["A", "B"], "series": [{"name": "s", "values": [0, 0]}]}
        root = _root("bar", data, theme=theme)
        bars = _by_class(root, "bar")
        assert len(bars) == 2
        assert all(float(b.get("height")) == 0 for b in bars)

    def test_extra_values_are_dropped(self, theme):
        data = {"labels": ["A", "B"], "series": [{"name": "s", "values": [1, 2, 3]}]}
        assert len(_by_class(_root("bar", data, theme=theme), "bar")) == 2

    def test_missing_values_leave_labels_on_axis(self, theme):
        data = {"labels": ["A", "B", "C"], "series": [{"name": "s", "values": [5]}]}
        root = _root("bar", data, theme=theme)
        assert len(_by_class(root, "bar")) == 1
        texts = [t.text for t in root.iter(f"{{{SVG_NS}}}text")]
        assert {"A", "B", "C"} <= set(texts)

    def test_value_labels(self, theme):
        data = {"labels": ["A"], "series": [{"name": "s", "values": [2500]}]}
        root = _root("bar", data, theme=theme, style=ChartStyle(show_values=True))
        texts = [t.text for t in root.iter(f"{{{SVG_NS}}}text")]
        assert "2.5k" in texts

    def test_title(self, quarterly, theme):
        root = _root("bar", quarterly, theme=theme, style=ChartStyle(title="Revenue"))
        assert root.get("aria-label") == "Revenue"

    def test_bounds(self, quarterly, theme):
        root = _root("bar", quarterly, theme=theme, bounds=Bounds(800, 400))
        assert root.get("viewBox") == "0 0 800 400"


# ===========================================================================
# Line and area charts
# ===========================================================================

class TestLineChart:

    def test_polyline_per_series(self, quarterly, theme):
        root = _root("line", quarterly, theme=theme)
        lines = _by_class(root, "line")
        assert len(lines) == 2
        assert len(lines[0].get("points").split()) == 3
        assert len(_by_class(root, "point")) == 6

    def test_area_fill(self, quarterly, theme):
        root = _root("area", quarterly, theme=theme)
        areas = _by_class(root, "area")
        assert len(areas) == 2
        assert areas[0].get("d").endswith("Z")

    def test_area_closes_on_zero_line(self, theme):
        data = {"labels": ["A", "B", "C"], "series": [{"name": "net", "values": [5, -3, 2]}]}
        root = _root("area", data, theme=theme)
        zero = float(_by_class(root, "zero-line")[0].get("y1"))
        d = _by_class(root, "area")[0].get("d").split()
        assert d[0] == "M" and float(d[2]) == zero
        assert d[-4] == "L" and float(d[-2]) == zero
        below = [float(p.get("cy")) for p in _by_class(root, "point") if float(p.get("cy")) > zero]
        assert len(below) == 1


# ===========================================================================
# Pie and doughnut charts
# ===========================================================================

class TestPieSlices:

    def test_angles_cover_full_circle(self):
        slices = pie_slices([1, 1, 2])
        assert slices[0][0] == -90
        assert sum(end - start for start, end, _ in slices) == pytest.approx(360)
        assert slices[2][1] == pytest.approx(270)

    def test_input_order_preserved(self):
        slices = pie_slices([3, 1])
        assert [v for _, _, v in slices] == [3, 1]

    def test_negatives_count_as_zero(self):
        slices = pie_slices([-5, 5])
        assert slices[0][1] - slices[0][0] == 0
        assert slices[1][1] - slices[1][0] == pytest.approx(360)

    def test_nothing_positive(self):
        assert pie_slices([0, -1]) == []
        assert pie_slices([]) == []


class TestPieChart:

    def test_slice_per_positive_value(self, theme):
        data = {"labels": ["A", "B", "C"], "series": [{"name": "Share", "values": [50, 30, 20]}]}
        root = _root("pie", data, theme=theme)
        slices = _by_class(root, "slice")
        assert len(slices) == 3
        assert [s.get("fill") for s in slices] == list(theme.chart_palette[:3])

    def test_only_primary_series_used(self, theme):
        data = {
            "labels": ["A", "B"],
            "series": [{"name": "x", "values": [1, 1]}, {"name": "y", "values": [5, 5]}],
        }
        assert len(_by_class(_root("pie", data, theme=theme), "slice")) == 2

    def test_single_value_full_circle(self, theme):
        data = {"labels": ["All"], "series": [{"name": "s", "values": [7]}]}
        slices = _by_class(_root("pie", data, theme=theme), "slice")
        assert len(slices) == 1
        assert slices[0].get("d").count(" A ") == 2

    def test_no_data_placeholder(self, theme):
        data = {"labels": ["A", "B"], "series": [{"name": "s", "values": [0, 0]}]}
        root = _root("pie", data, theme=theme)
        assert _by_class(root, "slice") == []
        assert _by_class(root, "no-data")[0].text == "No data"

    def test_doughnut_shows_total(self, theme):
        data = {"labels": ["A", "B"], "series": [{"name": "s", "values": [1200, 300]}]}
        root = _root("doughnut", data, theme=theme)
        texts = [t.text for t in root.iter(f"{{{SVG_NS}}}text")]
        assert "Total" in texts
        assert "1.5k" in texts

    def test_per_slice_colors(self, theme):
        data = {"labels": ["A", "B"],
                "series": [{"name": "s", "values": [1, 1], "color": ["#111111", "#222222"]}]}
        slices = _by_class(_root("pie", data, theme=theme), "slice")
        assert [s.get("fill") for s in slices] == ["#111111", "#222222"]


# ===========================================================================
# Scatter charts
# ===========================================================================

class TestScatterChart:

    def test_pairs_without_labels(self, theme):
        data = {"series": [{"name": "obs", "values": [[1, 2], [3, 4], [5, 1]]}]}
        root = _root("scatter", data, theme=theme)
        assert len(_by_class(root, "marker")) == 3

    def test_plain_values_use_label_positions(self, theme):
        data = {"labels": ["a", "b"], "series": [{"name": "s", "values": [3, 4]}]}
        assert len(_by_class(_root("scatter", data, theme=theme), "marker")) == 2

    def test_plain_values_without_labels_rejected(self, theme):
        data = {"series": [{"name": "s", "values": [3, 4]}]}
        with pytest.raises(ChartDataShapeError):
            render_chart("scatter", data, theme=theme)


# ===========================================================================
# Shape errors and general behaviour
# ===========================================================================

class TestChartErrors:

    def test_unknown_kind(self, quarterly):
        with pytest.raises(ChartDataShapeError, match="Unsupported chart type"):
            render_chart("radar", quarterly)

    def test_table_rows_rejected(self):
        with pytest.raises(ChartDataShapeError, match="table"):
            render_chart("bar", [{"region": "EU", "revenue": 10}])

    def test_missing_series(self):
        with pytest.raises(ChartDataShapeError, match="series"):
            render_chart("bar", {"labels": ["A"]})

    def test_category_chart_needs_labels(self):
        with pytest.raises(ChartDataShapeError, match="label"):
            render_chart("bar", {"labels": [], "series": [{"name": "s", "values": [1]}]})

    def test_pairs_only_for_scatter(self):
        data = {"labels": ["A"], "series": [{"name": "s", "values": [[1, 2]]}]}
        with pytest.raises(ChartDataShapeError, match="scatter"):
            render_chart("line", data)

    def test_error_carries_kind(self):
        with pytest.raises(ChartDataShapeError) as excinfo:
            render_chart("pie", "not data")
        assert excinfo.value.chart_kind == "pie"


class TestChartGeneral:

    def test_every_kind_listed(self):
        assert set(CHART_KINDS) == {"bar", "line", "area", "pie", "doughnut", "scatter"}

    @pytest.mark.parametrize("kind", ["bar", "line", "area", "pie", "doughnut"])
    def test_no_unresolved_theme_refs(self, kind, quarterly, theme):
        assert "theme:" not in render_chart_svg(kind, quarterly, theme=theme)

    def test_no_theme_still_renders(self, quarterly):
        markup = render_chart_svg("bar", quarterly)
        assert "theme:" not in markup
        assert "<rect" in markup

    def test_deterministic(self, quarterly, theme):
        first = render_chart_svg("line", quarterly, theme=theme)
        assert render_chart_svg("line", quarterly, theme=theme) == first

    def test_accepts_dataset_model(self, quarterly, theme):
        dataset = ChartDataset.model_validate(quarterly)
        assert render_chart_svg("bar", dataset, theme=theme) == \
            render_chart_svg("bar", quarterly, theme=theme)

    def test_chartjs_aliases(self, theme):
        data = {"labels": ["A", "B"], "datasets": [{"label": "s", "data": [1, 2]}]}
        assert len(_by_class(_root("bar", data, theme=theme), "bar")) == 2


# ===========================================================================
# Text that XML cannot carry
# ===========================================================================

class TestControlCharacters:

    @pytest.fixture
    def vt_data(self):
        return {
            "labels": ["Q1\x0b", "Q2"],
            "series": [{"name": "Rev\x00enue\x0b", "values": [3, 4]}],
        }

    @pytest.mark.parametrize("kind", ["bar", "line", "pie"])
    def test_labels_and_names_stripped(self, kind, vt_data, theme):
        markup = render_chart_svg(kind, vt_data, theme=theme, style=ChartStyle(title="Sales\x0b"))
        assert "\x0b" not in markup and "\x00" not in markup
        root = etree.fromstring(markup.encode("utf-8"))
        texts = [t.text for t in root.iter(f"{{{SVG_NS}}}text")]
        assert "Q1" in texts and "Sales" in texts
        assert root.get("aria-label") == "Sales"

    def test_series_name_stripped_in_legend(self, vt_data, theme):
        root = _root("bar", vt_data, theme=theme)
        assert "Revenue" in [t.text for t in root.iter(f"{{{SVG_NS}}}text")]

    def test_deck_with_control_characters_builds(self, vt_data):
        from src.generator.html_builder import HTMLBuilder

        doc = HTMLBuilder().build({
            "title": "Deck",
            "slides": [{"type": "data", "title": "Sales", "dataType": "chart",
                        "chartType": "bar", "data": vt_data}],
        })
        assert doc.slide_count == 1
        assert "sf-chart-error" not in doc.html
        assert "<svg" in doc.html
