"""PPTX export — an editable outline deck built with python-pptx.

Every slide becomes one PowerPoint slide on the blank layout: a title box,
a body box with the slide's text as bullets, and the speaker notes. Data
slides get a native chart (or table), so numbers stay editable in Office.
Visual layout is not reproduced; the HTML document is the faithful render.

Usage::

    from src.export.pptx_export import PPTXExporter

    pptx_bytes = PPTXExporter(theme).build(spec)
"""

from __future__ import annotations

import io
import logging
from typing import Any, Callable

from pptx import Presentation
from pptx.chart.data import CategoryChartData, XyChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.util import Inches, Pt

from src.errors import ThemeNotFoundError
from src.schema.colors import is_hex_color
from src.schema.models import ChartDataset, PresentationSpec, SlideKind
from src.schema.options import DEFAULTS
from src.schema.themes import DEFAULT_THEME, Theme, ThemeRegistry
from src.schema.themes import default_registry as default_themes
from src.templates.slides import table_rows

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CHART_TYPE_MAP = {
    "bar": XL_CHART_TYPE.COLUMN_CLUSTERED,
    "line": XL_CHART_TYPE.LINE_MARKERS,
    "area": XL_CHART_TYPE.AREA,
    "pie": XL_CHART_TYPE.PIE,
    "doughnut": XL_CHART_TYPE.DOUGHNUT,
    "scatter": XL_CHART_TYPE.XY_SCATTER,
}

# Slide width x height in inches.
SLIDE_SIZES = {
    "16:9": (13.333, 7.5),
    "4:3": (10.0, 7.5),
}

_BLANK_LAYOUT = 6
_MARGIN = 0.6
_TITLE_HEIGHT = 1.1
_TITLE_PT = 32
_BODY_PT = 18
_CODE_FONT = "Consolas"
_FALLBACK_FONT = "Calibri"
_GENERIC_FONTS = {"system-ui", "-apple-system", "sans-serif", "serif", "monospace"}

Line = tuple[str, int]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert '#RRGGBB' (or '#RGB') to an RGBColor."""
    h = hex_color.lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    return RGBColor(*bytes.fromhex(h))


def _text_items(value: Any) -> list[str]:
    if value is None:
        return []
    return [str(v) for v in value] if isinstance(value, list) else [str(value)]


# ---------------------------------------------------------------------------
# Outline extraction (slide -> bullet lines with indent level)
# ---------------------------------------------------------------------------

def _title_lines(s) -> list[Line]:
    return [(t, 0) for t in (s.subtitle, s.author, s.date) if t]


def _content_lines(s) -> list[Line]:
    return [(t, 0) for t in _text_items(s.content)]


def _media_lines(s) -> list[Line]:
    lines = [(t, 0) for t in (s.subtitle, s.caption) if t]
    lines.append((f"{s.media_type.title()}: {s.media_url}", 0))
    return lines


def _quote_lines(s) -> list[Line]:
    attribution = s.author + (f", {s.context}" if s.context else "")
    return [(f"“{s.quote}”", 0), (attribution, 1)]


def _timeline_lines(s) -> list[Line]:
    lines = []
    for event in s.events:
        lines.append((f"{event.date}: {event.title}", 0))
        if event.description:
            lines.append((event.description, 1))
    return lines


def _comparison_lines(s) -> list[Line]:
    lines = [(s.left_title, 0)] + [(t, 1) for t in s.left_content]
    lines += [(s.right_title, 0)] + [(t, 1) for t in s.right_content]
    return [line for line in lines if line[0]]


def _process_lines(s) -> list[Line]:
    lines = []
    for n, step in enumerate(s.steps, start=1):
        lines.append((f"{n}. {step.title}", 0))
        if step.description:
            lines.append((step.description, 1))
    return lines


def _subtitle_lines(s) -> list[Line]:
    return [(s.subtitle, 0)] if s.subtitle else []


def _blank_lines(s) -> list[Line]:
    return [(s.content, 0)] if s.content else []


def _hero_lines(s) -> list[Line]:
    lines = _subtitle_lines(s)
    if s.call_to_action:
        lines.append((s.call_to_action.text, 1))
    return lines


def _two_column_lines(s) -> list[Line]:
    return [(t, 0) for col in (s.left_column, s.right_column)
            if col.type != "image" for t in _text_items(col.content)]


def _columns_lines(s) -> list[Line]:
    lines = []
    for column in s.columns:
        if column.heading:
            lines.append((column.heading, 0))
        lines += [(t, 1 if column.heading else 0) for t in _text_items(column.content)]
    return lines


def _metrics_lines(s) -> list[Line]:
    return [(f"{m.label}: {m.value}", 0) for m in s.metrics]


def _product_lines(s) -> list[Line]:
    lines = [(s.description, 0)] if s.description else []
    lines += [(f, 1) for f in s.features]
    if s.pricing:
        lines.append((" ".join(p for p in (s.pricing.price, s.pricing.period) if p), 0))
    return lines


def _items_lines(items) -> list[Line]:
    lines = []
    for item in items:
        lines.append((item.title, 0))
        if item.description:
            lines.append((item.description, 1))
    return lines


def _team_lines(s) -> list[Line]:
    return [(f"{m.name}, {m.role}", 0) for m in s.members]


def _pricing_lines(s) -> list[Line]:
    lines = []
    for plan in s.plans:
        price = f"${plan.price:g}" if isinstance(plan.price, (int, float)) else plan.price
        lines.append((f"{plan.name}: {price} {plan.period}", 0))
        lines += [(f, 1) for f in plan.features]
    return lines


_OUTLINES: dict[SlideKind, Callable[[Any], list[Line]]] = {
    SlideKind.TITLE: _title_lines,
    SlideKind.CONTENT: _content_lines,
    SlideKind.MEDIA: _media_lines,
    SlideKind.DATA: lambda s: [],
    SlideKind.QUOTE: _quote_lines,
    SlideKind.TIMELINE: _timeline_lines,
    SlideKind.COMPARISON: _comparison_lines,
    SlideKind.PROCESS: _process_lines,
    SlideKind.SECTION_HEADER: _subtitle_lines,
    SlideKind.BLANK: _blank_lines,
    SlideKind.HERO: _hero_lines,
    SlideKind.TWO_COLUMN: _two_column_lines,
    SlideKind.THREE_COLUMN: _columns_lines,
    SlideKind.FOUR_COLUMN: _columns_lines,
    SlideKind.CHART_WITH_METRICS: _metrics_lines,
    SlideKind.PRODUCT_OVERVIEW: _product_lines,
    SlideKind.GRID: lambda s: _items_lines(s.items),
    SlideKind.FEATURE_CARDS: lambda s: _items_lines(s.features),
    SlideKind.TEAM: _team_lines,
    SlideKind.PRICING: _pricing_lines,
    SlideKind.CODE: lambda s: [(line, 0) for line in s.code.split("\n")],
}


def slide_outline(slide: Any) -> tuple[str | None, list[Line]]:
    """``(title, [(text, level), ...])`` for one validated slide."""
    return slide.heading, _OUTLINES[slide.kind](slide)


# ---------------------------------------------------------------------------
# PPTXExporter
# ---------------------------------------------------------------------------

class PPTXExporter:
    """Builds an outline PowerPoint deck from a validated presentation.

    Parameters
    ----------
    theme : Theme
        Supplies title/body colours, the font and the chart palette.
    """

    def __init__(self, theme: Theme) -> None:
        self.theme = theme
        first = theme.typography.font_family.split(",")[0].strip().strip("'\"")
        self.font = _FALLBACK_FONT if first in _GENERIC_FONTS else first

    def build(self, spec: PresentationSpec) -> bytes:
        """Build the PPTX and return it as bytes."""
        aspect = (spec.options.aspect_ratio if spec.options else None) or DEFAULTS["aspect_ratio"]
        self.width, self.height = SLIDE_SIZES[aspect]

        prs = Presentation()
        prs.slide_width = Inches(self.width)
        prs.slide_height = Inches(self.height)
        prs.core_properties.title = spec.title
        if spec.metadata and spec.metadata.author:
            prs.core_properties.author = spec.metadata.author

        for slide in spec.slides:
            self._build_slide(prs, slide)

        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    # ------------------------------------------------------------------
    # Slide builders
    # ------------------------------------------------------------------

    def _build_slide(self, prs, slide) -> None:
        page = prs.slides.add_slide(prs.slide_layouts[_BLANK_LAYOUT])
        title, lines = slide_outline(slide)
        top = _MARGIN
        if slide.kind == SlideKind.SECTION_HEADER:
            fill = page.background.fill
            fill.solid()
            fill.fore_color.rgb = _hex_to_rgb(self.theme.color("primary"))
        if title:
            self._add_title(page, title, inverse=slide.kind == SlideKind.SECTION_HEADER)
            top += _TITLE_HEIGHT

        if slide.kind == SlideKind.DATA:
            self._add_data(page, slide, top)
        elif slide.kind == SlideKind.CHART_WITH_METRICS:
            self._add_chart(page, slide.chart.type, slide.chart.data, top,
                            width=(self.width - 2 * _MARGIN) * 0.62)
            self._add_body(page, lines, top,
                           left=_MARGIN + (self.width - 2 * _MARGIN) * 0.66)
        elif lines:
            self._add_body(page, lines, top, monospace=slide.kind == SlideKind.CODE)

        if slide.notes:
            page.notes_slide.notes_text_frame.text = slide.notes

    def _add_title(self, page, text: str, inverse: bool = False) -> None:
        box = page.shapes.add_textbox(Inches(_MARGIN), Inches(_MARGIN),
                                      Inches(self.width - 2 * _MARGIN), Inches(_TITLE_HEIGHT - 0.2))
        frame = box.text_frame
        frame.word_wrap = True
        run = frame.paragraphs[0].add_run()
        run.text = text
        run.font.name = self.font
        run.font.size = Pt(_TITLE_PT)
        run.font.bold = True
        color = "background" if inverse else "primary"
        run.font.color.rgb = _hex_to_rgb(self.theme.color(color))

    def _add_body(self, page, lines: list[Line], top: float, left: float = _MARGIN,
                  monospace: bool = False) -> None:
        width = self.width - left - _MARGIN
        box = page.shapes.add_textbox(Inches(left), Inches(top), Inches(width),
                                      Inches(self.height - top - _MARGIN))
        frame = box.text_frame
        frame.word_wrap = True
        for i, (text, level) in enumerate(lines):
            para = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
            para.level = level
            run = para.add_run()
            run.text = text if monospace else ("• " if level == 0 else "– ") + text
            run.font.name = _CODE_FONT if monospace else self.font
            run.font.size = Pt(_BODY_PT - 4 * level - (4 if monospace else 0))
            run.font.color.rgb = _hex_to_rgb(self.theme.color("foreground"))

    # ------------------------------------------------------------------
    # Data rendering
    # ------------------------------------------------------------------

    def _add_data(self, page, slide, top: float) -> None:
        if isinstance(slide.data, ChartDataset):
            self._add_chart(page, slide.chart_type, slide.data, top)
            return
        headers, rows = table_rows(slide.data)
        self._add_table(page, headers, rows, top)

    def _add_chart(self, page, kind: str, data: ChartDataset, top: float,
                   width: float | None = None) -> None:
        """Native chart; mirrors the SVG engine's truncation to the shorter length."""
        if data.series[0].has_pairs() or (kind == "scatter" and not data.labels):
            chart_data = XyChartData()
            for series in data.series:
                points = chart_data.add_series(series.name)
                for i, value in enumerate(series.values):
                    x, y = value if isinstance(value, tuple) else (i, value or 0)
                    points.add_data_point(x, y)
            xl_type = XL_CHART_TYPE.XY_SCATTER
        else:
            chart_data = CategoryChartData()
            series_list = data.series[:1] if kind in ("pie", "doughnut") else data.series
            longest = max(len(s.numeric()) for s in series_list)
            labels = list(data.labels) or [str(i + 1) for i in range(longest)]
            chart_data.categories = labels
            for series in series_list:
                values: list[float | None] = list(series.numeric()[:len(labels)])
                values += [None] * (len(labels) - len(values))
                chart_data.add_series(series.name, tuple(values))
            xl_type = _CHART_TYPE_MAP.get(kind, XL_CHART_TYPE.COLUMN_CLUSTERED)
            if xl_type == XL_CHART_TYPE.XY_SCATTER:
                xl_type = XL_CHART_TYPE.LINE_MARKERS

        width = width if width is not None else self.width - 2 * _MARGIN
        frame = page.shapes.add_chart(
            xl_type,
            Inches(_MARGIN), Inches(top),
            Inches(width), Inches(self.height - top - _MARGIN),
            chart_data,
        )
        chart = frame.chart
        chart.has_legend = len(data.series) > 1 or kind in ("pie", "doughnut")
        if chart.has_legend:
            chart.legend.position = XL_LEGEND_POSITION.BOTTOM
            chart.legend.include_in_layout = False

        plot = chart.plots[0]
        if kind in ("pie", "doughnut"):
            points = plot.series[0].points
            for idx in range(len(points)):
                point = points[idx]
                point.format.fill.solid()
                point.format.fill.fore_color.rgb = _hex_to_rgb(self.theme.series_color(idx))
            return
        for idx, series in enumerate(plot.series):
            explicit = data.series[idx].color if idx < len(data.series) else None
            color = (explicit if isinstance(explicit, str) and is_hex_color(explicit)
                     else self.theme.series_color(idx))
            if xl_type in (XL_CHART_TYPE.LINE_MARKERS, XL_CHART_TYPE.XY_SCATTER):
                series.format.line.color.rgb = _hex_to_rgb(color)
            else:
                series.format.fill.solid()
                series.format.fill.fore_color.rgb = _hex_to_rgb(color)

    def _add_table(self, page, headers: list[str], rows: list[list[Any]], top: float) -> None:
        if not headers and not rows:
            return
        n_cols = max([len(headers)] + [len(r) for r in rows])
        shape = page.shapes.add_table(
            len(rows) + (1 if headers else 0), n_cols,
            Inches(_MARGIN), Inches(top),
            Inches(self.width - 2 * _MARGIN), Inches(0.4 * (len(rows) + 1)),
        )
        table = shape.table
        offset = 0
        if headers:
            for c, text in enumerate(headers):
                table.cell(0, c).text = str(text)
            offset = 1
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                table.cell(r + offset, c).text = "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_pptx(spec: PresentationSpec, themes: ThemeRegistry | None = None) -> bytes:
    """One-shot convenience: PPTX bytes for a validated spec."""
    themes = themes if themes is not None else default_themes
    try:
        theme = themes.lookup(spec.theme)
    except ThemeNotFoundError:
        logger.warning("Theme %r not found for PPTX export; using %s", spec.theme, DEFAULT_THEME)
        theme = themes.lookup(DEFAULT_THEME)
    return PPTXExporter(theme).build(spec)
