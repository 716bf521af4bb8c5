"""HTML builder — assembles a validated presentation into one self-contained document.

Pipeline: validate -> resolve options -> render every slide through the
template registry -> wrap in the document shell (theme styles, metadata,
navigation script) -> optionally minify.

Usage::

    from src.generator.html_builder import HTMLBuilder

    doc = HTMLBuilder().build(raw_spec, options={"minify": True})
    Path("deck.html").write_text(doc.html, encoding="utf-8")
    print(doc.slide_count, doc.size, doc.warnings)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from markupsafe import Markup

from src.errors import SlideRenderError, ThemeNotFoundError, UnknownTemplateError
from src.generator.minify import Minifier, minify, try_minify
from src.generator.navigation import navigation_script
from src.generator.styles import aspect_class, build_styles, font_class, font_links
from src.schema.models import GenerationOptions, PresentationSpec
from src.schema.options import RenderOptions, resolve_options
from src.schema.themes import DEFAULT_THEME, Theme, ThemeRegistry
from src.schema.themes import default_registry as default_themes
from src.schema.validation import options_or_raise, slide_or_raise, validate_or_raise
from src.templates.environment import render
from src.templates.registry import RenderContext, TemplateRegistry, render_slide
from src.templates.registry import default_registry as default_templates

logger = logging.getLogger(__name__)

GENERATOR = "slideforge"


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderedDocument:
    """A finished deck plus the facts callers usually report."""
    html: str
    slide_count: int
    theme: str
    generated_at: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        """Encoded size in bytes (UTF-8)."""
        return len(self.html.encode("utf-8"))

    def metadata(self) -> dict[str, Any]:
        return {
            "slide_count": self.slide_count,
            "theme": self.theme,
            "generated_at": self.generated_at,
            "size": self.size,
        }

    def write(self, path: str | Path) -> Path:
        path = Path(path)
        path.write_text(self.html, encoding="utf-8")
        return path


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# HTMLBuilder
# ---------------------------------------------------------------------------

class HTMLBuilder:
    """Renders presentations to HTML.

    Parameters
    ----------
    themes : ThemeRegistry, optional
        Registry used for theme validation and lookup.
    templates : TemplateRegistry, optional
        Slide kind -> renderer table.
    minifier : callable, optional
        ``str -> str``; raising :class:`MinificationError` (or ``ValueError``)
        leaves the document unminified with a warning.
    clock : callable, optional
        Returns the ``generated_at`` timestamp; the document markup itself
        never contains it, so repeated builds are byte-identical.
    """

    def __init__(self, themes: ThemeRegistry | None = None,
                 templates: TemplateRegistry | None = None,
                 minifier: Minifier = minify,
                 clock: Callable[[], str] = _utc_now) -> None:
        self.themes = themes if themes is not None else default_themes
        self.templates = templates if templates is not None else default_templates
        self.minifier = minifier
        self.clock = clock

    def build(self, spec: PresentationSpec | dict[str, Any],
              options: GenerationOptions | dict[str, Any] | None = None) -> RenderedDocument:
        """Validate *spec* and render it as a complete HTML document.

        Parameters
        ----------
        spec : PresentationSpec | dict
            Raw mapping (validated here) or an already validated spec.
        options : GenerationOptions | dict, optional
            Call-level overrides; they win over ``spec.options``.

        Returns
        -------
        RenderedDocument

        Raises
        ------
        SpecValidationError
            The spec or the options are malformed.
        SlideRenderError
            A slide failed to render for a reason other than chart data shape.
        """
        spec = validate_or_raise(spec, themes=self.themes, templates=self.templates)
        resolved = resolve_options(spec.theme, spec.options, options_or_raise(options))
        warnings: list[str] = []
        theme = self._theme(resolved.theme, warnings)

        slides = [
            Markup(self._render_one(slide, index, resolved, theme, warnings))
            for index, slide in enumerate(spec.slides)
        ]

        html = render(
            "document.html",
            lang="en",
            generator=GENERATOR,
            title=spec.title,
            metadata=spec.metadata,
            theme_name=theme.name,
            slide_count=len(slides),
            styles=Markup(build_styles(theme, include_base=resolved.include_styles)),
            font_links=font_links(theme) if resolved.embed_fonts else [],
            aspect_class=aspect_class(resolved.aspect_ratio),
            font_class=font_class(resolved.font_size),
            slides=slides,
            script=Markup(navigation_script(len(slides))),
        )

        if resolved.minify:
            html, warning = try_minify(html, self.minifier)
            if warning:
                warnings.append(warning)

        logger.info("Rendered %d slide(s) with theme %s", len(slides), theme.name)
        return RenderedDocument(
            html=html,
            slide_count=len(slides),
            theme=theme.name,
            generated_at=self.clock(),
            warnings=tuple(warnings),
        )

    def render_slide(self, raw_slide: Any, options: GenerationOptions | dict[str, Any] | None = None,
                     index: int = 0, slide_id: str | None = None,
                     theme: str = DEFAULT_THEME) -> str:
        """Validate and render one slide container, for appending to a deck.

        *slide_id* replaces the slide's own ``id`` when given.
        """
        slide = slide_or_raise(raw_slide, templates=self.templates)
        if slide_id is not None:
            slide = slide.model_copy(update={"id": slide_id})
        resolved = resolve_options(theme, None, options_or_raise(options))
        warnings: list[str] = []
        return self._render_one(slide, index, resolved, self._theme(resolved.theme, warnings),
                                warnings)

    def replace_slide(self, html: str, slide_id: str, raw_slide: Any,
                      options: GenerationOptions | dict[str, Any] | None = None) -> str:
        """Swap the slide container with id *slide_id* in an assembled document."""
        match = _container_re(slide_id).search(html)
        if match is None:
            raise KeyError(slide_id)
        end = html.find("</section>", match.end())
        if end < 0:
            raise KeyError(slide_id)
        end += len("</section>")
        index_match = _INDEX_RE.search(match.group(0))
        index = int(index_match.group(1)) if index_match else 0
        theme_match = _THEME_META_RE.search(html)
        theme = theme_match.group(1) if theme_match else DEFAULT_THEME
        fresh = self.render_slide(raw_slide, options, index=index, slide_id=slide_id, theme=theme)
        return html[:match.start()] + fresh + html[end:]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _theme(self, name: str, warnings: list[str]) -> Theme:
        try:
            return self.themes.lookup(name)
        except ThemeNotFoundError as exc:
            message = f"{exc}; falling back to {DEFAULT_THEME!r}"
            logger.warning(message)
            warnings.append(message)
            return self.themes.lookup(DEFAULT_THEME)

    def _render_one(self, slide: Any, index: int, options: RenderOptions,
                    theme: Theme, warnings: list[str]) -> str:
        context = RenderContext(options=options, theme=theme, index=index, warnings=warnings)
        try:
            return render_slide(slide, context, self.templates)
        except (UnknownTemplateError, SlideRenderError):
            raise
        except Exception as exc:
            raise SlideRenderError(index, slide.type, exc) from exc


_INDEX_RE = re.compile(r'data-slide-index=["\']?(\d+)')
_THEME_META_RE = re.compile(r'<meta name=["\']?sf-theme["\']? content=["\']?([a-z0-9-]+)')


def _container_re(slide_id: str) -> re.Pattern:
    quoted = re.escape(str(Markup.escape(slide_id)))
    return re.compile(rf'<section\b[^>]*\bid=(?:"{quoted}"|\'{quoted}\'|{quoted}(?=[\s>]))[^>]*>')


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_presentation(spec: PresentationSpec | dict[str, Any], **options: Any) -> RenderedDocument:
    """One-shot convenience: ``build_presentation(raw, minify=True)``."""
    return HTMLBuilder().build(spec, options=options or None)
