"""Export formatter — turns a rendered deck or its spec into a deliverable.

Formats:

    html      the document as-is
    pdf-html  the document with print styling (one slide per page)
    json      versioned, structured dump of the spec (re-readable)
    pptx      an outline PowerPoint deck built with python-pptx

Usage::

    from src.export.formats import export_presentation

    result = export_presentation("json", presentation=raw_spec, filename="q3")
    Path(result.filename).write_text(result.content)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.errors import SpecValidationError
from src.export.pptx_export import build_pptx
from src.generator.styles import PRINT_CSS
from src.schema.models import PresentationSpec
from src.schema.options import DEFAULTS
from src.schema.themes import ThemeRegistry
from src.schema.validation import Issue, validate_or_raise

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

EXPORT_FORMATS = ("html", "pdf-html", "json", "pptx")

_NEEDS_HTML = {"html", "pdf-html"}
_NEEDS_SPEC = {"json", "pptx"}

_FORMAT_INFO = {
    "html": ("html", "text/html",
             "Save to .html file and open in any browser"),
    "pdf-html": ("html", "text/html",
                 "Open in a browser and use Print to PDF (Cmd/Ctrl+P)"),
    "json": ("json", "application/json",
             "Save to .json file for programmatic access or import"),
    "pptx": ("pptx",
             "application/vnd.openxmlformats-officedocument.presentationml.presentation",
             "Open in PowerPoint, Keynote or LibreOffice Impress"),
}


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExportResult:
    content: str | bytes
    filename: str
    format: str
    content_type: str
    instructions: str

    def write(self, directory: str | Path = ".") -> Path:
        path = Path(directory) / self.filename
        if isinstance(self.content, bytes):
            path.write_bytes(self.content)
        else:
            path.write_text(self.content, encoding="utf-8")
        return path


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

def add_print_styles(html: str) -> str:
    """Inject the print stylesheet before ``</head>`` (or at the top if absent)."""
    block = f"<style media=\"print\">\n{PRINT_CSS}</style>\n"
    if "</head>" in html:
        return html.replace("</head>", f"{block}</head>", 1)
    logger.warning("No </head> in document; print styles prepended")
    return block + html


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_export(spec: PresentationSpec, created_at: str | None = None) -> dict[str, Any]:
    """The versioned export structure (metadata, ordered slides, config)."""
    options = spec.options.to_dict() if spec.options else {}
    meta = spec.metadata
    aspect = options.get("aspectRatio", DEFAULTS["aspect_ratio"])

    metadata: dict[str, Any] = {
        "title": spec.title,
        "createdAt": (meta.date if meta and meta.date else None) or created_at or _now(),
        "slideCount": len(spec.slides),
        "theme": spec.theme,
        "aspectRatio": aspect,
    }
    if meta is not None:
        if meta.author is not None:
            metadata["author"] = meta.author
        if meta.description is not None:
            metadata["description"] = meta.description
        if meta.tags:
            metadata["tags"] = list(meta.tags)
        if meta.version is not None:
            metadata["version"] = meta.version

    slides = [
        {
            "id": slide.id or f"slide-{index + 1}",
            "type": slide.type,
            "content": slide.to_dict(),
            "index": index,
        }
        for index, slide in enumerate(spec.slides)
    ]

    config: dict[str, Any] = {"theme": spec.theme, "aspectRatio": aspect}
    for key in ("fontSize", "minify", "includeStyles", "embedFonts"):
        if key in options:
            config[key] = options[key]

    return {
        "version": EXPORT_VERSION,
        "metadata": metadata,
        "slides": slides,
        "config": config,
    }


def parse_json_export(text: str | bytes | dict[str, Any],
                      themes: ThemeRegistry | None = None) -> PresentationSpec:
    """Rebuild a validated spec from a JSON export."""
    data = json.loads(text) if isinstance(text, (str, bytes)) else text
    if not isinstance(data, dict) or "slides" not in data:
        raise SpecValidationError("Not a presentation export",
                                  [Issue("slides", "array", "missing")])
    version = data.get("version")
    if version != EXPORT_VERSION:
        logger.warning("Export version %r differs from %s", version, EXPORT_VERSION)

    meta_in = data.get("metadata") or {}
    config = dict(data.get("config") or {})
    theme = config.pop("theme", None) or meta_in.get("theme")
    slides = sorted(data["slides"], key=lambda s: s.get("index", 0))

    raw: dict[str, Any] = {
        "theme": theme,
        "title": meta_in.get("title"),
        "slides": [{**s.get("content", {}), "type": s.get("type")} for s in slides],
    }
    if config:
        raw["options"] = config
    metadata = {k: meta_in[k] for k in ("author", "description", "tags", "version")
                if k in meta_in}
    date = meta_in.get("createdAt") or meta_in.get("date")
    if date:
        metadata["date"] = date
    if metadata:
        raw["metadata"] = metadata
    return validate_or_raise(raw, themes=themes)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def export_presentation(format: str, html: str | None = None,
                        presentation: PresentationSpec | dict[str, Any] | None = None,
                        filename: str = "presentation",
                        themes: ThemeRegistry | None = None) -> ExportResult:
    """Export a deck.

    Parameters
    ----------
    format : str
        One of ``html``, ``pdf-html``, ``json``, ``pptx``.
    html : str, optional
        Rendered document; required for ``html`` and ``pdf-html``.
    presentation : PresentationSpec | dict, optional
        The spec; required for ``json`` and ``pptx``. Raw mappings are
        validated first.
    filename : str
        Base name; the extension is added here.

    Raises
    ------
    SpecValidationError
        Unknown format, or the input the format needs is missing or invalid.
    """
    if format not in _FORMAT_INFO:
        raise SpecValidationError(
            f"Unsupported export format {format!r}",
            [Issue("format", f"one of {', '.join(EXPORT_FORMATS)}", repr(format))],
        )
    if format in _NEEDS_HTML and not html:
        raise SpecValidationError(f"html is required for {format} export",
                                  [Issue("html", "string", "missing")])
    if format in _NEEDS_SPEC and presentation is None:
        raise SpecValidationError(f"presentation is required for {format} export",
                                  [Issue("presentation", "object", "missing")])

    extension, content_type, instructions = _FORMAT_INFO[format]

    if format == "html":
        content: str | bytes = html
    elif format == "pdf-html":
        content = add_print_styles(html)
    else:
        spec = validate_or_raise(presentation, themes=themes)
        if format == "json":
            content = json.dumps(json_export(spec), indent=2, ensure_ascii=False)
        else:
            content = build_pptx(spec, themes=themes)

    logger.info("Exported presentation as %s", format)
    return ExportResult(
        content=content,
        filename=f"{filename or 'presentation'}.{extension}",
        format=format,
        content_type=content_type,
        instructions=instructions,
    )
