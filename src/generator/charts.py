"""Chart engine — turns chart datasets into SVG drawing instructions.

Converts a :class:`~src.schema.models.ChartDataset` into shapes on an
:class:`~src.generator.svg_builder.SVGBuilder`, using the theme's chart
palette for series without an explicit colour.

Supported chart kinds:
    bar       Grouped bars anchored at the zero line
    line      One polyline per series through band centres
    area      Line closed down to the zero line and filled
    pie       Slices clockwise from 12 o'clock, in input order
    doughnut  Pie with a 60% inner cutout and a centre total
    scatter   Markers only; ``[x, y]`` pairs get a linear x axis

Mismatched label and value counts are truncated to the shorter of the two.
A dataset that does not fit the requested kind raises
:class:`~src.errors.ChartDataShapeError`.

Usage::

    from src.generator.charts import render_chart

    svg = render_chart("bar", data, theme=theme).serialize()
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from src.errors import ChartDataShapeError
from src.generator.scales import BandScale, LinearScale, value_domain
from src.generator.svg_builder import SVGBuilder, fmt
from src.schema.models import ChartDataset, ChartKind, ChartSeries
from src.schema.themes import DEFAULT_THEME, default_registry


# ---------------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------------

PADDING = {"top": 60, "right": 40, "bottom": 100, "left": 80}
TITLE_HEIGHT = 50
LEGEND_HEIGHT = 60
LEGEND_ITEM_WIDTH = 200
GRID_LINES = 5
DOUGHNUT_RATIO = 0.6

FONT_TITLE = 28
FONT_LABEL = 18
FONT_VALUE = 16


@dataclass(frozen=True)
class Bounds:
    width: float = 1200
    height: float = 600


@dataclass(frozen=True)
class ChartStyle:
    title: str | None = None
    show_legend: bool = True
    show_grid: bool = True
    show_values: bool = False


@dataclass(frozen=True)
class PlotArea:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def plot_area(bounds: Bounds, style: ChartStyle) -> PlotArea:
    """The rectangle left for marks once title, legend and axes are placed."""
    top = PADDING["top"] + (TITLE_HEIGHT if style.title else 0)
    bottom = bounds.height - PADDING["bottom"] - (LEGEND_HEIGHT if style.show_legend else 0)
    return PlotArea(
        left=PADDING["left"],
        top=top,
        right=bounds.width - PADDING["right"],
        bottom=max(bottom, top + 1),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _format_value(value: float) -> str:
    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"{fmt(value / 1_000_000)}M"
    if magnitude >= 1_000:
        return f"{fmt(value / 1_000)}k"
    return fmt(value)


def _coerce(data: Any, kind: str) -> ChartDataset:
    if isinstance(data, ChartDataset):
        return data
    if isinstance(data, list):
        raise ChartDataShapeError(
            "Chart data must be an object with labels and series; got a table "
            "(a list of rows)", kind,
        )
    if not isinstance(data, dict):
        raise ChartDataShapeError(
            f"Chart data must be an object, got {type(data).__name__}", kind,
        )
    try:
        return ChartDataset.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(p) for p in first["loc"])
        raise ChartDataShapeError(f"Invalid chart data at {where or 'root'}: {first['msg']}",
                                  kind) from exc


def _palette(theme: Any) -> tuple[str, ...]:
    palette = getattr(theme, "chart_palette", None)
    if palette:
        return tuple(palette)
    return default_registry.lookup(DEFAULT_THEME).chart_palette


def _series_color(series: ChartSeries, index: int, palette: tuple[str, ...]) -> str:
    if isinstance(series.color, str) and series.color:
        return series.color
    return palette[index % len(palette)]


def _truncated(series: ChartSeries, labels: list[str]) -> list[float]:
    """Numeric values paired with labels; extra values or labels are dropped."""
    return series.numeric()[:len(labels)]


def pie_slices(values: list[float]) -> list[tuple[float, float, float]]:
    """Angular extents for a pie, as ``(start_deg, end_deg, value)`` tuples.

    Slices start at -90° (12 o'clock) and run clockwise in input order.
    Negative values count as zero. Returns ``[]`` when nothing is positive.
    """
    clean = [max(0.0, v) for v in values]
    total = sum(clean)
    if total <= 0:
        return []
    slices = []
    angle = -90.0
    for v in clean:
        sweep = v / total * 360.0
        slices.append((angle, angle + sweep, v))
        angle += sweep
    return slices


def _polar(cx: float, cy: float, r: float, degrees: float) -> tuple[float, float]:
    rad = math.radians(degrees)
    return cx + r * math.cos(rad), cy + r * math.sin(rad)


def _arc_path(cx: float, cy: float, r: float, inner: float,
              start: float, end: float) -> str:
    """SVG path for one slice; a full-circle slice is drawn as two half arcs."""
    sweep = end - start
    if sweep >= 360.0 - 1e-9:
        top = _polar(cx, cy, r, start)
        bottom = _polar(cx, cy, r, start + 180)
        d = (f"M {fmt(top[0])} {fmt(top[1])} "
             f"A {fmt(r)} {fmt(r)} 0 1 1 {fmt(bottom[0])} {fmt(bottom[1])} "
             f"A {fmt(r)} {fmt(r)} 0 1 1 {fmt(top[0])} {fmt(top[1])} Z")
        if inner > 0:
            itop = _polar(cx, cy, inner, start)
            ibottom = _polar(cx, cy, inner, start + 180)
            d += (f" M {fmt(itop[0])} {fmt(itop[1])} "
                  f"A {fmt(inner)} {fmt(inner)} 0 1 0 {fmt(ibottom[0])} {fmt(ibottom[1])} "
                  f"A {fmt(inner)} {fmt(inner)} 0 1 0 {fmt(itop[0])} {fmt(itop[1])} Z")
        return d

    large = 1 if sweep > 180 else 0
    x0, y0 = _polar(cx, cy, r, start)
    x1, y1 = _polar(cx, cy, r, end)
    if inner <= 0:
        return (f"M {fmt(cx)} {fmt(cy)} L {fmt(x0)} {fmt(y0)} "
                f"A {fmt(r)} {fmt(r)} 0 {large} 1 {fmt(x1)} {fmt(y1)} Z")
    ix0, iy0 = _polar(cx, cy, inner, start)
    ix1, iy1 = _polar(cx, cy, inner, end)
    return (f"M {fmt(x0)} {fmt(y0)} "
            f"A {fmt(r)} {fmt(r)} 0 {large} 1 {fmt(x1)} {fmt(y1)} "
            f"L {fmt(ix1)} {fmt(iy1)} "
            f"A {fmt(inner)} {fmt(inner)} 0 {large} 0 {fmt(ix0)} {fmt(iy0)} Z")


# ---------------------------------------------------------------------------
# Chart furniture
# ---------------------------------------------------------------------------

def _draw_title(svg: SVGBuilder, bounds: Bounds, style: ChartStyle) -> None:
    if style.title:
        svg.add_text(bounds.width / 2, PADDING["top"] - 10 + TITLE_HEIGHT / 2, style.title,
                     font_size=FONT_TITLE, weight="bold", anchor="middle")


def _draw_legend(svg: SVGBuilder, bounds: Bounds, style: ChartStyle,
                 entries: list[tuple[str, str]]) -> None:
    if not style.show_legend or not entries:
        return
    y = bounds.height - LEGEND_HEIGHT / 2
    x = (bounds.width - len(entries) * LEGEND_ITEM_WIDTH) / 2
    for label, color in entries:
        svg.add_rect(x, y - 8, 16, 16, fill=color, rx=3, class_="legend-swatch")
        svg.add_text(x + 24, y, label, font_size=FONT_LABEL, fill="theme:label",
                     baseline="middle")
        x += LEGEND_ITEM_WIDTH


def _draw_value_axis(svg: SVGBuilder, area: PlotArea, y: LinearScale,
                     style: ChartStyle) -> None:
    for tick in y.ticks(GRID_LINES):
        py = y(tick)
        if style.show_grid:
            svg.add_line(area.left, py, area.right, py, stroke="theme:grid",
                         class_="grid-line")
        svg.add_text(area.left - 10, py, _format_value(tick), font_size=FONT_LABEL,
                     fill="theme:label", anchor="end", baseline="middle")
    svg.add_line(area.left, area.top, area.left, area.bottom, stroke="theme:axis",
                 stroke_width=2, class_="y-axis")


def _draw_zero_line(svg: SVGBuilder, area: PlotArea, y: LinearScale) -> None:
    zero = y(0)
    svg.add_line(area.left, zero, area.right, zero, stroke="theme:axis",
                 stroke_width=2, class_="zero-line")


def _draw_category_labels(svg: SVGBuilder, area: PlotArea, band: BandScale) -> None:
    for i, label in enumerate(band.labels):
        svg.add_text(band.center(i), area.bottom + 30, label, font_size=FONT_LABEL,
                     fill="theme:label", anchor="middle")


def _category_setup(svg: SVGBuilder, data: ChartDataset, area: PlotArea,
                    style: ChartStyle, kind: str) -> tuple[BandScale, LinearScale]:
    if not data.labels:
        raise ChartDataShapeError(f"A {kind} chart needs at least one label", kind)
    values = [v for s in data.series for v in _truncated(s, data.labels)]
    y = LinearScale(value_domain(values), (area.bottom, area.top))
    band = BandScale(data.labels, (area.left, area.right), padding=0.2)
    _draw_value_axis(svg, area, y, style)
    _draw_category_labels(svg, area, band)
    return band, y


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def _render_bar(svg, data, bounds, style, palette) -> list[tuple[str, str]]:
    area = plot_area(bounds, style)
    band, y = _category_setup(svg, data, area, style, "bar")
    zero = y(0)
    width = band.bandwidth / len(data.series)
    legend = []

    for s_idx, series in enumerate(data.series):
        color = _series_color(series, s_idx, palette)
        legend.append((series.name, color))
        for i, value in enumerate(_truncated(series, data.labels)):
            x = band.start(i) + s_idx * width
            top = min(zero, y(value))
            svg.add_rect(x, top, width, abs(y(value) - zero), fill=color, class_="bar")
            if style.show_values:
                label_y = y(value) - 8 if value >= 0 else y(value) + 20
                svg.add_text(x + width / 2, label_y, _format_value(value),
                             font_size=FONT_VALUE, anchor="middle")

    _draw_zero_line(svg, area, y)
    return legend


def _render_line(svg, data, bounds, style, palette, filled: bool = False) -> list[tuple[str, str]]:
    kind = "area" if filled else "line"
    area = plot_area(bounds, style)
    band, y = _category_setup(svg, data, area, style, kind)
    zero = y(0)
    legend = []

    for s_idx, series in enumerate(data.series):
        color = _series_color(series, s_idx, palette)
        legend.append((series.name, color))
        pts = [(band.center(i), y(v)) for i, v in enumerate(_truncated(series, data.labels))]
        if not pts:
            continue
        if filled:
            d = f"M {fmt(pts[0][0])} {fmt(zero)} "
            d += " ".join(f"L {fmt(px)} {fmt(py)}" for px, py in pts)
            d += f" L {fmt(pts[-1][0])} {fmt(zero)} Z"
            svg.add_path(d, fill=color, fill_opacity=0.3, class_="area")
        svg.add_polyline(pts, stroke=color, stroke_width=3, class_="line")
        for px, py in pts:
            svg.add_circle(px, py, 5, fill=color, class_="point")

    _draw_zero_line(svg, area, y)
    return legend


def _render_area(svg, data, bounds, style, palette):
    return _render_line(svg, data, bounds, style, palette, filled=True)


def _render_pie(svg, data, bounds, style, palette, doughnut: bool = False) -> list[tuple[str, str]]:
    title_h = TITLE_HEIGHT if style.title else 0
    legend_h = LEGEND_HEIGHT if style.show_legend else 0
    usable_h = bounds.height - title_h - legend_h
    radius = max(min(bounds.width - 100, usable_h - 100) / 2, 10)
    cx = bounds.width / 2
    cy = title_h + usable_h / 2
    inner = radius * DOUGHNUT_RATIO if doughnut else 0.0

    series = data.series[0]
    values = _truncated(series, data.labels)
    slices = pie_slices(values)
    if not slices:
        svg.add_circle(cx, cy, radius, fill="none", stroke="theme:grid", stroke_width=2,
                       class_="empty")
        svg.add_text(cx, cy, "No data", font_size=FONT_TITLE, fill="theme:label",
                     anchor="middle", baseline="middle", class_="no-data")
        return []

    colors = series.color if isinstance(series.color, list) else None
    legend = []
    for i, (start, end, value) in enumerate(slices):
        color = colors[i % len(colors)] if colors else palette[i % len(palette)]
        legend.append((data.labels[i], color))
        if end - start <= 0:
            continue
        svg.add_path(_arc_path(cx, cy, radius, inner, start, end), fill=color,
                     stroke="theme:background", stroke_width=2, fill_rule="evenodd",
                     class_="slice")

    if doughnut:
        total = sum(v for _, _, v in slices)
        svg.add_text(cx, cy - 14, "Total", font_size=FONT_LABEL, fill="theme:label",
                     anchor="middle")
        svg.add_text(cx, cy + 18, _format_value(total), font_size=FONT_TITLE,
                     weight="bold", anchor="middle")
    return legend


def _render_doughnut(svg, data, bounds, style, palette):
    return _render_pie(svg, data, bounds, style, palette, doughnut=True)


def _render_scatter(svg, data, bounds, style, palette) -> list[tuple[str, str]]:
    area = plot_area(bounds, style)
    points: list[list[tuple[float, float]]] = []
    has_pairs = any(s.has_pairs() for s in data.series)

    for series in data.series:
        pts = []
        for i, value in enumerate(series.values):
            if isinstance(value, tuple):
                pts.append((float(value[0]), float(value[1])))
            elif data.labels and i < len(data.labels):
                pts.append((float(i), 0.0 if value is None else float(value)))
            elif not data.labels:
                raise ChartDataShapeError(
                    "Scatter values without labels must be [x, y] pairs", "scatter")
        points.append(pts)

    y = LinearScale(value_domain(py for pts in points for _, py in pts), (area.bottom, area.top))
    _draw_value_axis(svg, area, y, style)

    if has_pairs:
        xs = [px for pts in points for px, _ in pts]
        lo, hi = min(xs, default=0.0), max(xs, default=1.0)
        if lo == hi:
            lo, hi = lo - 1, hi + 1
        x = LinearScale((lo, hi), (area.left + 20, area.right - 20))
        for tick in x.ticks(GRID_LINES):
            svg.add_text(x(tick), area.bottom + 30, _format_value(tick),
                         font_size=FONT_LABEL, fill="theme:label", anchor="middle")
        to_px: Callable[[float], float] = x
    else:
        band = BandScale(data.labels, (area.left, area.right), padding=0.2)
        _draw_category_labels(svg, area, band)

        def to_px(index: float) -> float:
            return band.center(int(index))

    legend = []
    for s_idx, (series, pts) in enumerate(zip(data.series, points)):
        color = _series_color(series, s_idx, palette)
        legend.append((series.name, color))
        for px, py in pts:
            svg.add_circle(to_px(px), y(py), 6, fill=color, fill_opacity=0.8, class_="marker")

    _draw_zero_line(svg, area, y)
    return legend


_RENDERERS: dict[ChartKind, Callable[..., list[tuple[str, str]]]] = {
    ChartKind.BAR: _render_bar,
    ChartKind.LINE: _render_line,
    ChartKind.AREA: _render_area,
    ChartKind.PIE: _render_pie,
    ChartKind.DOUGHNUT: _render_doughnut,
    ChartKind.SCATTER: _render_scatter,
}

CHART_KINDS = tuple(k.value for k in _RENDERERS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_chart(kind: str | ChartKind, data: Any, bounds: Bounds | None = None,
                 style: ChartStyle | None = None, theme: Any = None) -> SVGBuilder:
    """Render *data* as a *kind* chart.

    Parameters
    ----------
    kind : str | ChartKind
        One of ``bar``, ``line``, ``area``, ``pie``, ``doughnut``, ``scatter``.
    data : ChartDataset | dict
        Labels plus one or more series.
    bounds : Bounds, optional
        Canvas size (default 1200 x 600).
    style : ChartStyle, optional
        Title, legend, grid and value-label switches.
    theme : Theme, optional
        Supplies the chart palette and the ``theme:`` colour table.

    Returns
    -------
    SVGBuilder
        The accumulated drawing; call ``serialize()`` for markup.

    Raises
    ------
    ChartDataShapeError
        When the dataset cannot be drawn as *kind*.
    """
    try:
        chart_kind = ChartKind(kind)
    except ValueError:
        raise ChartDataShapeError(
            f"Unsupported chart type {kind!r}; expected one of {', '.join(CHART_KINDS)}",
            str(kind),
        ) from None

    bounds = bounds or Bounds()
    style = style or ChartStyle()
    dataset = _coerce(data, chart_kind.value)
    if chart_kind is not ChartKind.SCATTER and any(s.has_pairs() for s in dataset.series):
        raise ChartDataShapeError(
            f"[x, y] pairs are only valid for scatter charts, not {chart_kind.value}",
            chart_kind.value,
        )

    svg = SVGBuilder(bounds.width, bounds.height, theme=theme, title=style.title)
    svg.add_rect(0, 0, bounds.width, bounds.height, fill="theme:background", class_="chart-bg")
    _draw_title(svg, bounds, style)
    legend = _RENDERERS[chart_kind](svg, dataset, bounds, style, _palette(theme))
    _draw_legend(svg, bounds, style, legend)
    return svg


def render_chart_svg(kind: str | ChartKind, data: Any, bounds: Bounds | None = None,
                     style: ChartStyle | None = None, theme: Any = None) -> str:
    return render_chart(kind, data, bounds, style, theme).serialize()
