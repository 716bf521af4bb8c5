"""Jinja2 environment shared by every slide template and the document shell.

Autoescaping is on for all ``.html`` templates, so any value from a slide
spec is escaped unless a filter below returns ``Markup`` built from escaped
text.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from src.generator.icons import icon_svg, is_icon

TEMPLATES_DIR = Path(__file__).parent / "html"

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"(?<![*\w])\*(?!\s)(.+?)(?<!\s)\*(?![*\w])")
_CODE_RE = re.compile(r"`([^`]+)`")


def inline_markdown(text: Any) -> Markup:
    """Escape *text*, then render ``**bold**``, ``*italic*`` and `` `code` ``."""
    if text is None:
        return Markup("")
    html = str(escape(text))
    html = _CODE_RE.sub(r"<code>\1</code>", html)
    html = _BOLD_RE.sub(r"<strong>\1</strong>", html)
    html = _ITALIC_RE.sub(r"<em>\1</em>", html)
    return Markup(html)


def format_number(value: Any) -> str:
    """``1234.0`` -> ``1,234``; ``12.5`` -> ``12.5``; strings pass through."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "" if value is None else str(value)
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def initials(name: Any) -> str:
    parts = [p for p in str(name or "").split() if p]
    return "".join(p[0] for p in parts[:2]).upper() or "?"


def icon_markup(name: Any) -> Markup:
    """Inline SVG for a known icon name; anything else is shown as escaped text."""
    if is_icon(name):
        return Markup(icon_svg(name, size=48))
    return escape(name)


def as_list(value: Any) -> list:
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"], default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.filters["md"] = inline_markdown
    env.filters["number"] = format_number
    env.filters["initials"] = initials
    env.filters["as_list"] = as_list
    env.filters["icon"] = icon_markup
    return env


env = _build_environment()


def render(template_name: str, **context: Any) -> str:
    return env.get_template(template_name).render(**context)
