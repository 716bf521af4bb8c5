"""Template registry — maps each slide kind to the function that renders it.

A renderer takes a validated slide and a :class:`RenderContext` and returns
an HTML fragment. :func:`render_slide` wraps that fragment in the slide
container every document uses.

Usage::

    from src.templates.registry import default_registry

    html = default_registry.dispatch(slide, context)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from src.errors import UnknownTemplateError
from src.schema.models import SlideKind
from src.schema.options import RenderOptions
from src.templates.environment import render

SLIDE_CLASS = "sf-slide"


@dataclass(frozen=True)
class RenderContext:
    """Everything a renderer may look at besides the slide itself."""
    options: RenderOptions
    theme: Any
    index: int = 0
    warnings: list[str] = field(default_factory=list)


RenderFn = Callable[[Any, RenderContext], str]


class TemplateRegistry:
    """Slide kind -> renderer lookup."""

    def __init__(self) -> None:
        self._renderers: dict[str, RenderFn] = {}

    def register(self, kind: str | SlideKind, render_fn: RenderFn) -> None:
        self._renderers[_key(kind)] = render_fn

    def unregister(self, kind: str | SlideKind) -> None:
        self._renderers.pop(_key(kind), None)

    def has(self, kind: str | SlideKind) -> bool:
        return _key(kind) in self._renderers

    def kinds(self) -> list[str]:
        return list(self._renderers)

    def get(self, kind: str | SlideKind) -> RenderFn:
        try:
            return self._renderers[_key(kind)]
        except KeyError:
            raise UnknownTemplateError(_key(kind)) from None

    def dispatch(self, slide: Any, context: RenderContext) -> str:
        """Render *slide* with the renderer registered for its ``type``."""
        return self.get(slide.type)(slide, context)

    def copy(self) -> TemplateRegistry:
        clone = TemplateRegistry()
        clone._renderers = dict(self._renderers)
        return clone


def _key(kind: str | SlideKind) -> str:
    return kind.value if isinstance(kind, SlideKind) else str(kind)


def slide_id(slide: Any, index: int) -> str:
    """Stable element id: the slide's own ``id`` or ``slide-<n>`` (1-based)."""
    return slide.id or f"slide-{index + 1}"


def render_slide(slide: Any, context: RenderContext,
                 registry: TemplateRegistry | None = None) -> str:
    """Render one slide inside its container element."""
    registry = registry if registry is not None else default_registry
    body = registry.dispatch(slide, context)
    return render(
        "slide.html",
        slide=slide,
        slide_class=SLIDE_CLASS,
        element_id=slide_id(slide, context.index),
        index=context.index,
        body=body,
    )


default_registry = TemplateRegistry()


def _register_builtin_templates() -> None:
    from src.templates import slides
    for kind, fn in slides.RENDERERS.items():
        default_registry.register(kind, fn)


_register_builtin_templates()
