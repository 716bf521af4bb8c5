"""Decorative background patterns for hero slides.

Seven pattern kinds, drawn in one colour at low opacity so slide text stays
readable on top. ``density`` scales the base 40px spacing.
"""

from __future__ import annotations

import math
from typing import Any

from src.generator.svg_builder import SVGBuilder, fmt

PATTERN_TYPES = ("dots", "grid", "diagonal-lines", "waves", "gradient-mesh", "hexagon", "circles")

DENSITY = {"low": 1.5, "medium": 1.0, "high": 0.66}

BASE_SPACING = 40

WAVE_AMPLITUDE = 30
WAVE_FREQUENCY = 0.01
WAVE_ROW = 60

MESH_GRADIENT_ID = "sf-mesh"


def _dots(svg, width, height, spacing, color, opacity):
    radius = spacing / 10
    x = spacing / 2
    while x < width:
        y = spacing / 2
        while y < height:
            svg.add_circle(x, y, radius, fill=color, fill_opacity=opacity)
            y += spacing
        x += spacing


def _grid(svg, width, height, spacing, color, opacity):
    x = 0.0
    while x < width:
        svg.add_line(x, 0, x, height, stroke=color, stroke_width=1, stroke_opacity=opacity)
        x += spacing
    y = 0.0
    while y < height:
        svg.add_line(0, y, width, y, stroke=color, stroke_width=1, stroke_opacity=opacity)
        y += spacing


def _diagonal_lines(svg, width, height, spacing, color, opacity):
    diagonal = math.hypot(width, height)
    offset = -diagonal
    while offset < diagonal:
        svg.add_line(0, offset, diagonal, offset - diagonal, stroke=color, stroke_width=2,
                     stroke_opacity=opacity)
        offset += spacing


def _waves(svg, width, height, spacing, color, opacity):
    y = 0
    while y < height:
        d = [f"M 0 {fmt(y)}"]
        for x in range(0, int(width) + 1, 10):
            d.append(f"L {x} {fmt(y + math.sin(x * WAVE_FREQUENCY) * WAVE_AMPLITUDE)}")
        svg.add_path(" ".join(d), fill="none", stroke=color, stroke_width=2,
                     stroke_opacity=opacity)
        y += WAVE_ROW


def _circles(svg, width, height, spacing, color, opacity):
    x = spacing
    while x < width:
        y = spacing
        while y < height:
            svg.add_circle(x, y, spacing / 3, fill="none", stroke=color, stroke_width=1,
                           stroke_opacity=opacity)
            y += spacing * 2
        x += spacing * 2


def _hexagon(svg, width, height, spacing, color, opacity):
    radius = spacing / 2
    hex_h = radius * math.sqrt(3)
    hex_w = radius * 2
    for row in range(int(height / hex_h) + 2):
        for col in range(int(width / hex_w) + 2):
            cx = col * hex_w * 0.75
            cy = row * hex_h + (hex_h / 2 if col % 2 else 0)
            corners = [
                (cx + radius * math.cos(math.pi / 3 * i), cy + radius * math.sin(math.pi / 3 * i))
                for i in range(6)
            ]
            svg.add_polygon(corners, fill="none", stroke=color, stroke_width=1,
                            stroke_opacity=opacity)


def _gradient_mesh(svg, width, height, spacing, color, opacity):
    svg.add_radial_gradient(MESH_GRADIENT_ID, [
        (0, color, min(1.0, opacity * 1.5)),
        (0.5, color, opacity),
        (1, color, 0),
    ])
    for i in range(3):
        for j in range(3):
            svg.add_circle(width / 4 + i * width / 3, height / 4 + j * height / 3, width / 4,
                           fill=f"url(#{MESH_GRADIENT_ID})")


_PATTERNS = {
    "dots": _dots,
    "grid": _grid,
    "diagonal-lines": _diagonal_lines,
    "waves": _waves,
    "gradient-mesh": _gradient_mesh,
    "hexagon": _hexagon,
    "circles": _circles,
}


def render_pattern(kind: str, width: float, height: float, theme: Any = None,
                   color: str = "theme:primary", opacity: float = 0.1,
                   density: str = "medium") -> SVGBuilder:
    """Draw a *kind* pattern covering a ``width`` x ``height`` canvas.

    Parameters
    ----------
    kind : str
        One of :data:`PATTERN_TYPES`.
    color : str
        Stroke/fill colour; ``theme:<name>`` references resolve against *theme*.
    opacity : float
        0-1, applied to every shape.
    density : str
        ``low``, ``medium`` or ``high``.

    Raises
    ------
    ValueError
        Unknown kind or density, opacity outside 0-1, or an empty canvas.
    """
    if kind not in _PATTERNS:
        raise ValueError(f"Unknown pattern {kind!r}; expected one of {', '.join(PATTERN_TYPES)}")
    if density not in DENSITY:
        raise ValueError(f"Unknown pattern density {density!r}")
    if not 0 <= opacity <= 1:
        raise ValueError("Pattern opacity must be between 0 and 1")
    if width <= 0 or height <= 0:
        raise ValueError("Pattern canvas must have a positive size")

    svg = SVGBuilder(width, height, theme=theme)
    _PATTERNS[kind](svg, width, height, BASE_SPACING * DENSITY[density], color, opacity)
    return svg


def pattern_svg(kind: str, width: float, height: float, **kwargs: Any) -> str:
    return render_pattern(kind, width, height, **kwargs).serialize()
