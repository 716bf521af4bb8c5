"""Export package — deliverable formats for a rendered deck.

- formats.py: html, pdf-html, json export and the JSON re-reader
- pptx_export.py: outline PowerPoint deck via python-pptx
"""

from .formats import (
    EXPORT_FORMATS,
    EXPORT_VERSION,
    ExportResult,
    export_presentation,
    json_export,
    parse_json_export,
)
from .pptx_export import PPTXExporter, build_pptx

__all__ = [
    "EXPORT_FORMATS",
    "EXPORT_VERSION",
    "ExportResult",
    "export_presentation",
    "json_export",
    "parse_json_export",
    "PPTXExporter",
    "build_pptx",
]
