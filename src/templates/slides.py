"""Slide renderers — one function per slide kind.

Each renderer prepares whatever the markup needs (column spans, table rows,
chart SVG...) and hands it to the matching Jinja2 template under
``html/slides/``. Templates autoescape, so only values produced here as
``Markup`` (chart SVG, highlighted code) reach the page unescaped.

Chart failures are contained: a :class:`ChartDataShapeError` becomes an
inline "Chart Error" panel on that slide and a warning on the context.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from markupsafe import Markup

from src.errors import ChartDataShapeError
from src.generator.charts import Bounds, ChartStyle, render_chart
from src.generator.patterns import pattern_svg
from src.schema.models import ChartDataset, SlideKind
from src.templates.code_highlight import highlight_lines, language_label
from src.templates.environment import format_number, render

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_COLUMN_SPANS = {
    "50-50": (6, 6),
    "60-40": (7, 5),
    "40-60": (5, 7),
    "70-30": (8, 4),
    "30-70": (4, 8),
}

_GRID_COLUMNS = {"2x2": 2, "3x3": 3, "2x3": 3, "4x2": 4}

_GAP_CLASSES = {"compact": "sf-gap-4", "normal": "sf-gap-6", "spacious": "sf-gap-10"}

_PATTERN_CANVAS = {"16:9": (1600, 900), "4:3": (1600, 1200)}

_GRADIENT_RE = re.compile(r"^[\w\s#%,.()\-]+$")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

CHART_ERROR_TITLE = "Chart Error"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _slide(template: str, slide: Any, ctx: Any, **extra: Any) -> str:
    return render(f"slides/{template}.html", slide=slide, options=ctx.options, **extra)


def _warn(ctx: Any, message: str) -> None:
    logger.warning(message)
    ctx.warnings.append(message)


def chart_error_panel(message: str) -> Markup:
    return Markup(render("chart_error.html", title=CHART_ERROR_TITLE, message=message))


def _chart_markup(kind: str, data: Any, ctx: Any, bounds: Bounds,
                  title: str | None = None) -> Markup:
    """SVG for a chart, or the inline error panel if the data does not fit."""
    try:
        series_count = len(data.series) if isinstance(data, ChartDataset) else 0
        style = ChartStyle(
            title=title,
            show_legend=series_count > 1 or kind in ("pie", "doughnut"),
        )
        svg = render_chart(kind, data, bounds=bounds, style=style, theme=ctx.theme)
        return Markup(svg.serialize())
    except ChartDataShapeError as exc:
        _warn(ctx, f"Slide {ctx.index + 1}: chart could not be drawn: {exc}")
        return chart_error_panel(str(exc))


def table_rows(data: Any) -> tuple[list[str], list[list[Any]]]:
    """Header and body rows for records or a 2-D array (first row is the header)."""
    if not data:
        return [], []
    if isinstance(data[0], dict):
        headers: list[str] = []
        for row in data:
            for key in row:
                if key not in headers:
                    headers.append(key)
        return headers, [[row.get(h, "") for h in headers] for row in data]
    headers = [str(c) for c in data[0]]
    return headers, [list(r) for r in data[1:]]


def _cell(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return "" if value is None else str(value)


def _group_key(event: Any, group_by: str) -> str:
    date = event.date or ""
    m = re.match(r"^(\d{4})(?:-(\d{1,2}))?", date)
    if group_by == "quarter":
        if event.quarter:
            return event.quarter
        if m and m.group(2):
            return f"Q{(int(m.group(2)) - 1) // 3 + 1} {m.group(1)}"
    elif group_by == "month":
        if m and m.group(2) and 1 <= int(m.group(2)) <= 12:
            return f"{_MONTHS[int(m.group(2)) - 1]} {m.group(1)}"
    elif group_by == "year":
        if m:
            return m.group(1)
    return date or "Undated"


def _grouped(events: list, group_by: str) -> list[tuple[str | None, list]]:
    if group_by == "none":
        return [(None, list(events))]
    groups: dict[str, list] = {}
    for event in events:
        groups.setdefault(_group_key(event, group_by), []).append(event)
    return list(groups.items())


def _auto_columns(count: int) -> int:
    return count if count in (2, 3, 4) else (1 if count == 1 else 3)


def _price_label(price: Any) -> str:
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        return f"${format_number(price)}"
    return str(price)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_title(slide, ctx) -> str:
    return _slide("title", slide, ctx)


def render_content(slide, ctx) -> str:
    as_paragraph = isinstance(slide.content, str)
    return _slide("content", slide, ctx, as_paragraph=as_paragraph,
                  items=[slide.content] if as_paragraph else slide.content)


def render_media(slide, ctx) -> str:
    overlay = slide.overlay
    show_overlay = slide.layout == "hero" and (overlay is None or overlay.enabled)
    return _slide("media", slide, ctx, video=slide.video, show_overlay=show_overlay,
                  overlay_opacity=overlay.opacity if overlay else 0.7)


def render_data(slide, ctx) -> str:
    if slide.data_type == "table":
        if isinstance(slide.data, ChartDataset):
            _warn(ctx, f"Slide {ctx.index + 1}: table type selected but chart data provided")
            return _slide("data", slide, ctx, chart=None, headers=[], rows=[],
                          error=chart_error_panel(
                              "Table type selected but chart data provided. "
                              "Use dataType 'chart' or supply rows."))
        headers, rows = table_rows(slide.data)
        return _slide("data", slide, ctx, chart=None, headers=headers,
                      rows=[[_cell(c) for c in r] for r in rows], error=None)

    chart = _chart_markup(slide.chart_type, slide.data, ctx, Bounds(1200, 600))
    return _slide("data", slide, ctx, chart=chart, headers=[], rows=[], error=None)


def render_quote(slide, ctx) -> str:
    return _slide("quote", slide, ctx)


def render_timeline(slide, ctx) -> str:
    return _slide("timeline", slide, ctx, groups=_grouped(slide.events, slide.group_by))


def render_comparison(slide, ctx) -> str:
    return _slide("comparison", slide, ctx)


def render_process(slide, ctx) -> str:
    return _slide("process", slide, ctx)


def render_section_header(slide, ctx) -> str:
    return _slide("section_header", slide, ctx)


def render_blank(slide, ctx) -> str:
    return _slide("blank", slide, ctx)


def render_hero(slide, ctx) -> str:
    gradient = slide.background_gradient
    if gradient and not _GRADIENT_RE.match(gradient):
        _warn(ctx, f"Slide {ctx.index + 1}: ignoring unsupported background gradient")
        gradient = None
    pattern = None
    if slide.background_pattern:
        width, height = _PATTERN_CANVAS.get(ctx.options.aspect_ratio, _PATTERN_CANVAS["16:9"])
        pattern = Markup(pattern_svg(slide.background_pattern, width, height, theme=ctx.theme))
    return _slide("hero", slide, ctx, gradient=gradient, pattern=pattern)


def render_two_column(slide, ctx) -> str:
    left, right = _COLUMN_SPANS[slide.column_ratio]
    return _slide("two_column", slide, ctx, left_span=left, right_span=right)


def render_three_column(slide, ctx) -> str:
    return _slide("columns", slide, ctx, count=3)


def render_four_column(slide, ctx) -> str:
    return _slide("columns", slide, ctx, count=4)


def render_chart_with_metrics(slide, ctx) -> str:
    bounds = Bounds(1200, 500) if slide.layout == "chart-top" else Bounds(800, 500)
    chart = _chart_markup(slide.chart.type, slide.chart.data, ctx, bounds)
    metrics = []
    for metric in slide.metrics:
        value = metric.value if isinstance(metric.value, str) else format_number(metric.value)
        change = None
        if metric.change is not None:
            arrow = "↑" if metric.change.direction == "up" else "↓"
            change = {
                "direction": metric.change.direction,
                "text": f"{arrow} {format_number(abs(metric.change.value))}%",
            }
        metrics.append({"label": metric.label, "value": value, "change": change})
    return _slide("chart_with_metrics", slide, ctx, chart=chart, metrics=metrics)


def render_product_overview(slide, ctx) -> str:
    return _slide("product_overview", slide, ctx)


def render_grid(slide, ctx) -> str:
    columns = _GRID_COLUMNS.get(slide.grid_type) or _auto_columns(len(slide.items))
    return _slide("grid", slide, ctx, columns=columns, gap_class=_GAP_CLASSES[slide.gap])


def render_feature_cards(slide, ctx) -> str:
    columns = slide.columns if slide.columns != "auto" else _auto_columns(len(slide.features))
    return _slide("feature_cards", slide, ctx, columns=columns,
                  gap_class=_GAP_CLASSES[slide.gap])


def render_team(slide, ctx) -> str:
    return _slide("team", slide, ctx)


def render_pricing(slide, ctx) -> str:
    count = len(slide.plans)
    columns = count if count in (1, 2, 4) else 3
    plans = []
    for i, plan in enumerate(slide.plans):
        highlighted = plan.recommended if slide.highlight is None else i == slide.highlight
        plans.append({"plan": plan, "price": _price_label(plan.price),
                      "highlighted": highlighted})
    if slide.highlight is not None and slide.highlight >= count:
        _warn(ctx, f"Slide {ctx.index + 1}: highlight index {slide.highlight} "
                   f"is out of range for {count} plan(s)")
    return _slide("pricing", slide, ctx, plans=plans, columns=columns)


def render_code(slide, ctx) -> str:
    lines = highlight_lines(slide.code, slide.language, set(slide.highlights))
    return _slide("code", slide, ctx, lines=lines,
                  language_label=language_label(slide.language))


RENDERERS: dict[SlideKind, Callable[[Any, Any], str]] = {
    SlideKind.TITLE: render_title,
    SlideKind.CONTENT: render_content,
    SlideKind.MEDIA: render_media,
    SlideKind.DATA: render_data,
    SlideKind.QUOTE: render_quote,
    SlideKind.TIMELINE: render_timeline,
    SlideKind.COMPARISON: render_comparison,
    SlideKind.PROCESS: render_process,
    SlideKind.SECTION_HEADER: render_section_header,
    SlideKind.BLANK: render_blank,
    SlideKind.HERO: render_hero,
    SlideKind.TWO_COLUMN: render_two_column,
    SlideKind.THREE_COLUMN: render_three_column,
    SlideKind.FOUR_COLUMN: render_four_column,
    SlideKind.CHART_WITH_METRICS: render_chart_with_metrics,
    SlideKind.PRODUCT_OVERVIEW: render_product_overview,
    SlideKind.GRID: render_grid,
    SlideKind.FEATURE_CARDS: render_feature_cards,
    SlideKind.TEAM: render_team,
    SlideKind.PRICING: render_pricing,
    SlideKind.CODE: render_code,
}
