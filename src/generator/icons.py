"""Named SVG icons for grid items, feature cards and columns.

Every icon is drawn on a 24-unit grid and scaled to the requested size,
with round caps and joins so strokes stay legible on a projector. Colour
defaults to ``currentColor`` so an icon picks up the CSS colour of the
element it sits in.

Usage::

    from src.generator.icons import icon_svg

    markup = icon_svg("trend-up", size=48)
"""

from __future__ import annotations

import math
from typing import Any

from src.generator.svg_builder import SVGBuilder, fmt

ICON_STYLES = ("outline", "solid")


class _Pen:
    """Draws 24-unit grid coordinates onto an :class:`SVGBuilder`."""

    def __init__(self, svg: SVGBuilder, size: float, color: str, stroke_width: float,
                 solid: bool) -> None:
        self.svg = svg
        self.k = size / 24
        self.stroke = {
            "stroke": color,
            "stroke_width": stroke_width,
            "linecap": "round",
            "linejoin": "round",
        }
        self.color = color
        self.solid = solid

    def _fill(self, fillable: bool) -> str:
        return self.color if fillable and self.solid else "none"

    def line(self, x1, y1, x2, y2):
        k = self.k
        self.svg.add_line(x1 * k, y1 * k, x2 * k, y2 * k, **self.stroke)

    def poly(self, *coords, closed=False, fillable=False):
        scaled = [(x * self.k, y * self.k) for x, y in coords]
        if closed:
            self.svg.add_polygon(scaled, fill=self._fill(fillable), **self.stroke)
        else:
            self.svg.add_polyline(scaled, fill="none", **self.stroke)

    def circle(self, cx, cy, r, fillable=False):
        k = self.k
        self.svg.add_circle(cx * k, cy * k, r * k, fill=self._fill(fillable), **self.stroke)

    def dot(self, cx, cy):
        k = self.k
        self.svg.add_circle(cx * k, cy * k, 1.2 * k, fill=self.color)

    def rect(self, x, y, w, h, rx=0):
        k = self.k
        self.svg.add_rect(x * k, y * k, w * k, h * k, fill="none", rx=rx * k or None,
                          **self.stroke)

    def path(self, *segments, fillable=False):
        """``("M", x, y), ("C", x1, y1, x2, y2, x, y), ..., ("Z",)``"""
        parts = []
        for command, *coords in segments:
            parts.append(" ".join([command] + [fmt(c * self.k) for c in coords]))
        self.svg.add_path(" ".join(parts), fill=self._fill(fillable), **self.stroke)


# ---------------------------------------------------------------------------
# Icon drawings
# ---------------------------------------------------------------------------

def _briefcase(p):
    p.rect(3, 7, 18, 13, rx=2)
    p.poly((9, 7), (9, 4), (15, 4), (15, 7))
    p.line(3, 13, 21, 13)


def _chart_line(p):
    p.poly((3, 3), (3, 21), (21, 21))
    p.poly((7, 16), (11, 11), (14, 14), (20, 7))


def _chart_bar(p):
    p.line(3, 21, 21, 21)
    p.line(7, 18, 7, 13)
    p.line(12, 18, 12, 7)
    p.line(17, 18, 17, 10)


def _pie_chart(p):
    p.circle(12, 12, 9)
    p.line(12, 12, 12, 3)
    p.line(12, 12, 19.8, 16.5)


def _trend_up(p):
    p.poly((3, 17), (9, 11), (13, 15), (21, 7))
    p.poly((15, 7), (21, 7), (21, 13))


def _trend_down(p):
    p.poly((3, 7), (9, 13), (13, 9), (21, 17))
    p.poly((15, 17), (21, 17), (21, 11))


def _mail(p):
    p.rect(3, 5, 18, 14, rx=1)
    p.poly((3, 5), (12, 13), (21, 5))


def _phone(p):
    p.rect(7, 2, 10, 20, rx=2)
    p.line(11, 18, 13, 18)


def _message(p):
    p.poly((3, 5), (21, 5), (21, 17), (9, 17), (5, 21), (5, 17), (3, 17),
           closed=True, fillable=True)


def _users(p):
    p.circle(9, 7, 3)
    p.circle(17, 7, 2.5)
    p.poly((3, 21), (3, 18), (6, 15), (12, 15), (15, 18), (15, 21))
    p.poly((16, 14), (19, 14), (21, 16), (21, 20))


def _calendar(p):
    p.rect(3, 5, 18, 16, rx=2)
    p.line(3, 10, 21, 10)
    p.line(8, 3, 8, 7)
    p.line(16, 3, 16, 7)


def _check(p):
    p.poly((4, 12), (9, 17), (20, 6))


def _x(p):
    p.line(6, 6, 18, 18)
    p.line(18, 6, 6, 18)


def _arrow_right(p):
    p.line(5, 12, 19, 12)
    p.poly((13, 6), (19, 12), (13, 18))


def _arrow_left(p):
    p.line(19, 12, 5, 12)
    p.poly((11, 6), (5, 12), (11, 18))


def _plus(p):
    p.line(12, 5, 12, 19)
    p.line(5, 12, 19, 12)


def _minus(p):
    p.line(5, 12, 19, 12)


def _image(p):
    p.rect(3, 3, 18, 18, rx=2)
    p.circle(8.5, 8.5, 1.5)
    p.poly((21, 15), (16, 10), (5, 21))


def _video(p):
    p.rect(2, 6, 14, 12, rx=2)
    p.poly((16, 10), (22, 6), (22, 18), (16, 14), closed=True, fillable=True)


def _download(p):
    p.line(12, 3, 12, 15)
    p.poly((7, 10), (12, 15), (17, 10))
    p.line(4, 21, 20, 21)


def _upload(p):
    p.line(12, 15, 12, 3)
    p.poly((7, 8), (12, 3), (17, 8))
    p.line(4, 21, 20, 21)


def _alert(p):
    p.circle(12, 12, 10)
    p.line(12, 7, 12, 13)
    p.dot(12, 17)


def _info(p):
    p.circle(12, 12, 10)
    p.line(12, 11, 12, 17)
    p.dot(12, 7.5)


def _success(p):
    p.circle(12, 12, 10)
    p.poly((8, 12), (11, 15), (16, 9))


def _error(p):
    p.circle(12, 12, 10)
    p.line(9, 9, 15, 15)
    p.line(15, 9, 9, 15)


def _warning(p):
    p.poly((12, 3), (22, 20), (2, 20), closed=True)
    p.line(12, 9, 12, 14)
    p.dot(12, 17)


def _star(p):
    p.poly((12, 2), (15.09, 8.26), (22, 9.27), (17, 14.14), (18.18, 21.02),
           (12, 17.77), (5.82, 21.02), (7, 14.14), (2, 9.27), (8.91, 8.26),
           closed=True, fillable=True)


def _heart(p):
    p.path(("M", 12, 21),
           ("C", 12, 21, 3, 15, 3, 8.5),
           ("C", 3, 5.5, 5.5, 3, 8.5, 3),
           ("C", 10.2, 3, 11.4, 4, 12, 5),
           ("C", 12.6, 4, 13.8, 3, 15.5, 3),
           ("C", 18.5, 3, 21, 5.5, 21, 8.5),
           ("C", 21, 15, 12, 21, 12, 21),
           ("Z",),
           fillable=True)


def _settings(p):
    p.circle(12, 12, 3)
    p.circle(12, 12, 6.5)
    for i in range(8):
        angle = math.pi / 4 * i
        c, s = math.cos(angle), math.sin(angle)
        p.line(12 + 6.5 * c, 12 + 6.5 * s, 12 + 9.5 * c, 12 + 9.5 * s)


def _search(p):
    p.circle(11, 11, 7)
    p.line(16, 16, 21, 21)


_ICONS = {
    "briefcase": _briefcase,
    "chart-line": _chart_line,
    "chart-bar": _chart_bar,
    "pie-chart": _pie_chart,
    "trend-up": _trend_up,
    "trend-down": _trend_down,
    "mail": _mail,
    "phone": _phone,
    "message": _message,
    "users": _users,
    "calendar": _calendar,
    "check": _check,
    "x": _x,
    "arrow-right": _arrow_right,
    "arrow-left": _arrow_left,
    "plus": _plus,
    "minus": _minus,
    "image": _image,
    "video": _video,
    "download": _download,
    "upload": _upload,
    "alert": _alert,
    "info": _info,
    "success": _success,
    "error": _error,
    "warning": _warning,
    "star": _star,
    "heart": _heart,
    "settings": _settings,
    "search": _search,
}

ICON_NAMES = tuple(_ICONS)


def is_icon(name: Any) -> bool:
    return isinstance(name, str) and name in _ICONS


def render_icon(name: str, size: float = 48, color: str = "currentColor",
                stroke_width: float = 2, theme: Any = None,
                style: str = "outline") -> SVGBuilder:
    """Draw icon *name* into a fresh ``size`` x ``size`` builder.

    *color* may be a ``theme:<name>`` reference when *theme* is given.
    ``style="solid"`` fills the closed outlines (star, heart, message, video).

    Raises
    ------
    ValueError
        Unknown icon name, style, or a non-positive size.
    """
    if name not in _ICONS:
        raise ValueError(f"Unknown icon {name!r}; expected one of {', '.join(ICON_NAMES)}")
    if style not in ICON_STYLES:
        raise ValueError(f"Unknown icon style {style!r}")
    if size <= 0:
        raise ValueError("Icon size must be positive")
    svg = SVGBuilder(size, size, theme=theme)
    _ICONS[name](_Pen(svg, size, color, stroke_width, style == "solid"))
    return svg


def icon_svg(name: str, **kwargs: Any) -> str:
    return render_icon(name, **kwargs).serialize()
