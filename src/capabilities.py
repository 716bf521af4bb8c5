"""Capability listing — what this installation can render, computed live.

Slide kinds and theme names come from the registries passed in (the
process-wide defaults otherwise), so custom themes and extra templates
show up as soon as they are registered.
"""

from __future__ import annotations

from typing import Any

from src.export.formats import EXPORT_FORMATS
from src.generator.charts import CHART_KINDS
from src.generator.icons import ICON_NAMES
from src.generator.patterns import PATTERN_TYPES
from src.schema.colors import HARMONIES
from src.schema.models import ASPECT_RATIOS, FONT_SIZES
from src.schema.themes import ThemeRegistry
from src.schema.themes import default_registry as default_themes
from src.templates.registry import TemplateRegistry
from src.templates.registry import default_registry as default_templates

VERSION = "0.1.0"


def get_capabilities(templates: TemplateRegistry | None = None,
                     themes: ThemeRegistry | None = None) -> dict[str, Any]:
    templates = templates if templates is not None else default_templates
    themes = themes if themes is not None else default_themes
    slide_kinds = sorted(templates.kinds())
    theme_names = sorted(themes.names())
    return {
        "version": VERSION,
        "slide_kinds": slide_kinds,
        "templates": len(slide_kinds),
        "chart_kinds": list(CHART_KINDS),
        "export_formats": list(EXPORT_FORMATS),
        "aspect_ratios": list(ASPECT_RATIOS),
        "font_sizes": list(FONT_SIZES),
        "themes": theme_names,
        "theme_count": len(theme_names),
        "color_harmonies": list(HARMONIES),
        "icons": list(ICON_NAMES),
        "patterns": list(PATTERN_TYPES),
    }
