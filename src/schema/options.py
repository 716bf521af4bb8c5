"""Option layering — call-level overrides beat spec-level options beat defaults."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .models import GenerationOptions

DEFAULTS: dict[str, Any] = {
    "aspect_ratio": "16:9",
    "font_size": "default",
    "minify": False,
    "include_styles": True,
    "embed_fonts": True,
}


@dataclass(frozen=True)
class RenderOptions:
    """Fully resolved options handed to templates and the assembler."""
    theme: str
    aspect_ratio: str = DEFAULTS["aspect_ratio"]
    font_size: str = DEFAULTS["font_size"]
    minify: bool = DEFAULTS["minify"]
    include_styles: bool = DEFAULTS["include_styles"]
    embed_fonts: bool = DEFAULTS["embed_fonts"]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_options(layer: GenerationOptions | dict[str, Any] | None) -> GenerationOptions | None:
    if layer is None or isinstance(layer, GenerationOptions):
        return layer
    return GenerationOptions.model_validate(layer)


def resolve_options(spec_theme: str,
                    spec_options: GenerationOptions | dict[str, Any] | None = None,
                    call_options: GenerationOptions | dict[str, Any] | None = None,
                    ) -> RenderOptions:
    """Merge option layers field by field; an unset field falls through."""
    layers = [o for o in (_as_options(call_options), _as_options(spec_options)) if o is not None]

    def pick(name: str, default: Any) -> Any:
        for layer in layers:
            value = getattr(layer, name)
            if value is not None:
                return value
        return default

    return RenderOptions(
        theme=pick("theme", spec_theme),
        aspect_ratio=pick("aspect_ratio", DEFAULTS["aspect_ratio"]),
        font_size=pick("font_size", DEFAULTS["font_size"]),
        minify=pick("minify", DEFAULTS["minify"]),
        include_styles=pick("include_styles", DEFAULTS["include_styles"]),
        embed_fonts=pick("embed_fonts", DEFAULTS["embed_fonts"]),
    )
