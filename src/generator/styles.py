"""Document styling — theme custom properties plus the shared base stylesheet.

Every colour the base stylesheet uses is a ``--sf-*`` custom property, so a
theme is applied by emitting one ``:root`` block built from its colour table.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from src.schema.themes import Theme

ASSETS_DIR = Path(__file__).parent / "assets"

ASPECT_CLASSES = {
    "16:9": "sf-aspect-16-9",
    "4:3": "sf-aspect-4-3",
}

FONT_CLASSES = {
    "default": "sf-font-default",
    "large": "sf-font-large",
    "xlarge": "sf-font-xlarge",
}

# Web fonts linked when embedding is on and the theme asks for them by name.
FONT_LINKS = {
    "Inter": "https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&display=swap",
    "Merriweather": "https://fonts.googleapis.com/css2?family=Merriweather:wght@400;700&display=swap",
    "Playfair Display": "https://fonts.googleapis.com/css2?family=Playfair+Display:wght@400;700&display=swap",
}

PRINT_CSS = """\
@page { size: 11in 8.5in; margin: 0; }
@media print {
  html, body { background: #ffffff; }
  .sf-deck { width: auto; height: auto; overflow: visible; }
  .sf-slide { position: relative; display: flex !important; flex-direction: column;
              justify-content: center; width: 100%; height: 100vh; margin: 0;
              page-break-after: always; break-after: page; }
  .sf-slide:last-child { page-break-after: auto; break-after: auto; }
  .sf-controls, .sf-progress-track, .sf-notes { display: none !important; }
}
"""


@lru_cache(maxsize=None)
def base_stylesheet() -> str:
    return (ASSETS_DIR / "base.css").read_text(encoding="utf-8")


def theme_variables(theme: Theme) -> str:
    """``:root`` block mapping the theme's colours and typography to ``--sf-*``."""
    lines = [":root {"]
    for key in sorted(theme.colors):
        lines.append(f"  --sf-{key.replace('_', '-')}: {theme.colors[key]};")
    for i, color in enumerate(theme.chart_palette, start=1):
        lines.append(f"  --sf-chart-{i}: {color};")
    lines.append(f"  --sf-font-family: {theme.typography.font_family};")
    for level, size in enumerate(theme.typography.heading_sizes, start=1):
        lines.append(f"  --sf-h{level}: {size};")
    lines.append("}")
    return "\n".join(lines)


def font_links(theme: Theme) -> list[str]:
    families = [f.strip().strip("'\"") for f in theme.typography.font_family.split(",")]
    return [FONT_LINKS[f] for f in families if f in FONT_LINKS]


def build_styles(theme: Theme, include_base: bool = True) -> str:
    parts = [theme_variables(theme)]
    if include_base:
        parts.append(base_stylesheet())
    return "\n".join(parts)


def aspect_class(aspect_ratio: str) -> str:
    return ASPECT_CLASSES.get(aspect_ratio, ASPECT_CLASSES["16:9"])


def font_class(font_size: str) -> str:
    return FONT_CLASSES.get(font_size, FONT_CLASSES["default"])
