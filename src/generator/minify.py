"""HTML minification through ``minify-html``.

The minifier is a collaborator: when it fails the caller keeps the
unminified document and records a warning.
"""

from __future__ import annotations

import logging
from typing import Callable

import minify_html

from src.errors import MinificationError

logger = logging.getLogger(__name__)

Minifier = Callable[[str], str]


def minify(html: str) -> str:
    """Minify a complete document, including inline CSS and JS."""
    try:
        return minify_html.minify(
            html,
            minify_css=True,
            minify_js=True,
            keep_closing_tags=True,
        )
    except Exception as exc:
        raise MinificationError(f"minification failed: {exc}") from exc


def try_minify(html: str, minifier: Minifier = minify) -> tuple[str, str | None]:
    """Return ``(html, warning)``; on failure the input comes back unchanged."""
    try:
        return minifier(html), None
    except (MinificationError, ValueError, RuntimeError) as exc:
        message = f"Minification skipped: {exc}"
        logger.warning(message)
        return html, message
