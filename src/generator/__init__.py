"""Presentation generator package — charts and HTML document assembly.

Modules:
    scales: linear and band scales for chart geometry
    svg_builder: fluent SVG drawing accumulator
    charts: chart geometry for bar, line, area, pie, doughnut, scatter
    icons: named 24-grid icons drawn with SVGBuilder
    patterns: decorative background patterns for hero slides
    styles: theme CSS custom properties and the base stylesheet
    navigation: parameterizes the slide navigation script
    minify: minify-html wrapper
    html_builder: the document assembler (import from the module; it
        depends on src.templates, which renders charts from this package)
"""

from .charts import CHART_KINDS, Bounds, ChartStyle, render_chart, render_chart_svg
from .icons import ICON_NAMES, icon_svg, render_icon
from .patterns import PATTERN_TYPES, pattern_svg, render_pattern
from .svg_builder import SVGBuilder

__all__ = [
    "CHART_KINDS",
    "Bounds",
    "ChartStyle",
    "render_chart",
    "render_chart_svg",
    "ICON_NAMES",
    "icon_svg",
    "render_icon",
    "PATTERN_TYPES",
    "pattern_svg",
    "render_pattern",
    "SVGBuilder",
]
