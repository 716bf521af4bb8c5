"""Vector drawing builder — accumulates SVG primitives and serializes them.

Every ``add_*`` method records an immutable :class:`Shape` and returns the
builder, so drawings read as a chain. Nothing touches markup until
:meth:`SVGBuilder.serialize`, which walks the recorded shapes in order and
emits them through lxml. Identical call sequences give byte-identical
output: numbers are rounded to two decimals and attribute order is the
order the arguments were recorded in.

Colours of the form ``theme:<name>`` are looked up in the theme's colour
table at serialize time.

Usage::

    from src.generator.svg_builder import SVGBuilder

    svg = (SVGBuilder(400, 200, theme=theme)
           .add_rect(0, 0, 400, 200, fill="theme:surface")
           .add_circle(200, 100, 50, fill="theme:primary")
           .add_text(200, 100, "Hello", font_size=24, anchor="middle")
           .serialize())
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from lxml import etree

SVG_NS = "http://www.w3.org/2000/svg"

THEME_PREFIX = "theme:"

# kwarg spellings that do not map mechanically onto attribute names
_ATTR_ALIASES = {
    "class_": "class",
    "anchor": "text-anchor",
    "baseline": "dominant-baseline",
    "dasharray": "stroke-dasharray",
    "linecap": "stroke-linecap",
    "linejoin": "stroke-linejoin",
    "weight": "font-weight",
    "family": "font-family",
}

# Characters XML 1.0 cannot carry (C0 controls other than tab/LF/CR,
# surrogates, U+FFFE/U+FFFF); lxml refuses them outright.
_XML_INVALID = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in an XML document."""
    return _XML_INVALID.sub("", text)


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------

def fmt(value: Any) -> str:
    """Format a number with at most two decimals; ``-0`` becomes ``0``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        text = f"{round(float(value), 2):.2f}".rstrip("0").rstrip(".")
        return "0" if text in ("-0", "") else text
    return str(value)


def points(coords: Iterable[tuple[float, float]]) -> str:
    """``[(x, y), ...]`` to an SVG ``points`` attribute."""
    return " ".join(f"{fmt(x)},{fmt(y)}" for x, y in coords)


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Shape:
    """One recorded drawing instruction."""
    tag: str
    attrs: tuple[tuple[str, Any], ...]
    text: str | None = None
    children: tuple["Shape", ...] = ()


def _attrs(**kwargs: Any) -> tuple[tuple[str, Any], ...]:
    out = []
    for key, value in kwargs.items():
        if value is None:
            continue
        name = _ATTR_ALIASES.get(key, key.replace("_", "-"))
        out.append((name, value))
    return tuple(out)


# ---------------------------------------------------------------------------
# SVGBuilder
# ---------------------------------------------------------------------------

class SVGBuilder:
    """Fluent accumulator of SVG primitives.

    Parameters
    ----------
    width, height : float
        Canvas size; also used for the ``viewBox``.
    theme : Theme | Mapping[str, str] | None
        Colour table for ``theme:<name>`` references.
    title : str, optional
        Accessible label for the drawing.
    """

    def __init__(self, width: float, height: float, theme: Any = None,
                 title: str | None = None) -> None:
        self.width = width
        self.height = height
        self.title = title
        self._colors: Mapping[str, str] = getattr(theme, "colors", theme) or {}
        self._defs: list[Shape] = []
        self._shapes: list[Shape] = []

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return tuple(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def _add(self, tag: str, text: str | None = None, **kwargs: Any) -> SVGBuilder:
        self._shapes.append(Shape(tag, _attrs(**kwargs), text))
        return self

    # ---- primitives ----

    def add_rect(self, x: float, y: float, width: float, height: float,
                 fill: str | None = None, stroke: str | None = None,
                 stroke_width: float | None = None, rx: float | None = None,
                 **extra: Any) -> SVGBuilder:
        return self._add("rect", x=x, y=y, width=width, height=height, rx=rx,
                         fill=fill, stroke=stroke, stroke_width=stroke_width, **extra)

    def add_circle(self, cx: float, cy: float, r: float, fill: str | None = None,
                   stroke: str | None = None, stroke_width: float | None = None,
                   **extra: Any) -> SVGBuilder:
        return self._add("circle", cx=cx, cy=cy, r=r, fill=fill, stroke=stroke,
                         stroke_width=stroke_width, **extra)

    def add_ellipse(self, cx: float, cy: float, rx: float, ry: float,
                    fill: str | None = None, **extra: Any) -> SVGBuilder:
        return self._add("ellipse", cx=cx, cy=cy, rx=rx, ry=ry, fill=fill, **extra)

    def add_line(self, x1: float, y1: float, x2: float, y2: float,
                 stroke: str | None = "theme:axis", stroke_width: float | None = 1,
                 **extra: Any) -> SVGBuilder:
        return self._add("line", x1=x1, y1=y1, x2=x2, y2=y2, stroke=stroke,
                         stroke_width=stroke_width, **extra)

    def add_path(self, d: str, fill: str | None = None, stroke: str | None = None,
                 stroke_width: float | None = None, **extra: Any) -> SVGBuilder:
        return self._add("path", d=d, fill=fill, stroke=stroke,
                         stroke_width=stroke_width, **extra)

    def add_polygon(self, coords: Sequence[tuple[float, float]], fill: str | None = None,
                    stroke: str | None = None, **extra: Any) -> SVGBuilder:
        return self._add("polygon", points=points(coords), fill=fill, stroke=stroke, **extra)

    def add_polyline(self, coords: Sequence[tuple[float, float]], stroke: str | None = None,
                     stroke_width: float | None = 2, fill: str = "none",
                     **extra: Any) -> SVGBuilder:
        return self._add("polyline", points=points(coords), fill=fill, stroke=stroke,
                         stroke_width=stroke_width, **extra)

    def add_text(self, x: float, y: float, text: str, font_size: float | None = None,
                 fill: str | None = "theme:text", anchor: str | None = None,
                 weight: str | None = None, family: str | None = None,
                 baseline: str | None = None, **extra: Any) -> SVGBuilder:
        return self._add("text", text=str(text), x=x, y=y, font_size=font_size,
                         font_family=family, font_weight=weight, anchor=anchor,
                         baseline=baseline, fill=fill, **extra)

    # ---- gradients ----

    def _gradient(self, tag: str, gradient_id: str,
                  stops: Sequence[tuple[float, str] | tuple[float, str, float]],
                  **kwargs: Any) -> SVGBuilder:
        children = []
        for stop in stops:
            offset, color = stop[0], stop[1]
            opacity = stop[2] if len(stop) > 2 else None
            children.append(Shape("stop", _attrs(
                offset=f"{fmt(offset * 100)}%", stop_color=color, stop_opacity=opacity,
            )))
        self._defs.append(Shape(tag, _attrs(id=gradient_id, **kwargs), None, tuple(children)))
        return self

    def add_linear_gradient(self, gradient_id: str, stops, x1: str = "0%", y1: str = "0%",
                            x2: str = "100%", y2: str = "0%") -> SVGBuilder:
        return self._gradient("linearGradient", gradient_id, stops, x1=x1, y1=y1, x2=x2, y2=y2)

    def add_radial_gradient(self, gradient_id: str, stops, cx: str = "50%",
                            cy: str = "50%", r: str = "50%") -> SVGBuilder:
        return self._gradient("radialGradient", gradient_id, stops, cx=cx, cy=cy, r=r)

    # ---- output ----

    def resolve_color(self, value: str) -> str:
        """Resolve a ``theme:<name>`` reference; unknown names fall back to ``<name>``."""
        if isinstance(value, str) and value.startswith(THEME_PREFIX):
            name = value[len(THEME_PREFIX):]
            return self._colors.get(name, name)
        return value

    def _element(self, parent: etree._Element, shape: Shape) -> None:
        el = etree.SubElement(parent, f"{{{SVG_NS}}}{shape.tag}")
        for name, value in shape.attrs:
            el.set(name, xml_safe(self.resolve_color(fmt(value))))
        if shape.text is not None:
            el.text = xml_safe(shape.text)
        for child in shape.children:
            self._element(el, child)

    def to_element(self) -> etree._Element:
        root = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS})
        root.set("width", fmt(self.width))
        root.set("height", fmt(self.height))
        root.set("viewBox", f"0 0 {fmt(self.width)} {fmt(self.height)}")
        root.set("role", "img")
        if self.title:
            title = xml_safe(self.title)
            root.set("aria-label", title)
            etree.SubElement(root, f"{{{SVG_NS}}}title").text = title
        if self._defs:
            defs = etree.SubElement(root, f"{{{SVG_NS}}}defs")
            for shape in self._defs:
                self._element(defs, shape)
        for shape in self._shapes:
            self._element(root, shape)
        return root

    def serialize(self) -> str:
        return etree.tostring(self.to_element(), encoding="unicode")
