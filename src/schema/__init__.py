"""Presentation schema package — the typed contract for slide decks.

- models.py: pydantic models for every slide kind and the presentation
- validation.py: path-addressed validation results
- themes.py: theme registry and custom-theme derivation
- colors.py: hex/HSL helpers used for palettes
- options.py: generation option layering
- examples.py: one valid example per slide kind
- loader.py: JSON/YAML spec files
"""

from .examples import presentation_example, slide_example
from .loader import load_raw, load_spec, save_spec
from .models import (
    ChartDataset,
    ChartKind,
    ChartSeries,
    GenerationOptions,
    PresentationMetadata,
    PresentationSpec,
    SLIDE_MODELS,
    SlideKind,
)
from .options import DEFAULTS, RenderOptions, resolve_options
from .themes import (
    DEFAULT_THEME,
    Theme,
    ThemeRegistry,
    create_custom_theme,
    default_registry,
)
from .validation import (
    Issue,
    ValidationFailure,
    ValidSpec,
    validate,
    validate_or_raise,
    validate_slide,
    slide_or_raise,
    options_or_raise,
)

__all__ = [
    # Models
    "ChartDataset",
    "ChartKind",
    "ChartSeries",
    "GenerationOptions",
    "PresentationMetadata",
    "PresentationSpec",
    "SLIDE_MODELS",
    "SlideKind",
    # Validation
    "Issue",
    "ValidationFailure",
    "ValidSpec",
    "validate",
    "validate_or_raise",
    "validate_slide",
    "slide_or_raise",
    "options_or_raise",
    # Themes
    "DEFAULT_THEME",
    "Theme",
    "ThemeRegistry",
    "create_custom_theme",
    "default_registry",
    # Options
    "DEFAULTS",
    "RenderOptions",
    "resolve_options",
    # Examples & files
    "presentation_example",
    "slide_example",
    "load_raw",
    "load_spec",
    "save_spec",
]
