"""Lightweight line-by-line syntax highlighting for code slides.

Each line is tokenized on its own with one combined regex per language
family; matched tokens are wrapped in ``<span class="tok-...">`` and
everything else is escaped. Constructs spanning lines (block comments,
triple-quoted strings) are only coloured on the line where they close.
Unknown languages are escaped but not coloured.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from markupsafe import Markup, escape

LANGUAGE_NAMES = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "jsx": "JSX",
    "tsx": "TSX",
    "python": "Python",
    "java": "Java",
    "cpp": "C++",
    "c": "C",
    "csharp": "C#",
    "go": "Go",
    "rust": "Rust",
    "php": "PHP",
    "ruby": "Ruby",
    "bash": "Bash",
    "shell": "Shell",
    "sql": "SQL",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "json": "JSON",
    "yaml": "YAML",
    "xml": "XML",
    "markdown": "Markdown",
    "text": "Text",
}

_JS_KEYWORDS = (
    "async await break case catch class const continue default delete do else "
    "export extends false finally for from function if import in instanceof "
    "interface let new null return static super switch this throw true try type "
    "typeof undefined var void while yield"
)
_PY_KEYWORDS = (
    "and as assert async await break class continue def del elif else except "
    "False finally for from global if import in is lambda None nonlocal not or "
    "pass raise return self True try while with yield"
)


def _words(keywords: str) -> str:
    return r"\b(?:" + "|".join(keywords.split()) + r")\b"


_STRING = r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'"
_NUMBER = r"\b\d+(?:\.\d+)?\b"

_PATTERNS: dict[str, re.Pattern] = {
    "js": re.compile(
        rf"(?P<comment>//.*|/\*.*?\*/)|(?P<string>{_STRING}|`(?:\\.|[^`\\])*`)"
        rf"|(?P<keyword>{_words(_JS_KEYWORDS)})|(?P<number>{_NUMBER})"
    ),
    "python": re.compile(
        rf"(?P<comment>#.*)|(?P<string>{_STRING})"
        rf"|(?P<keyword>{_words(_PY_KEYWORDS)})|(?P<number>{_NUMBER})"
    ),
    "json": re.compile(
        rf"(?P<string>{_STRING})|(?P<keyword>\b(?:true|false|null)\b)|(?P<number>-?{_NUMBER})"
    ),
    "css": re.compile(
        rf"(?P<comment>/\*.*?\*/)|(?P<string>{_STRING})"
        r"|(?P<keyword>[\w-]+(?=\s*:))|(?P<number>-?\d+(?:\.\d+)?(?:px|em|rem|%|vh|vw|s|ms)?)"
    ),
    "markup": re.compile(
        rf"(?P<comment><!--.*?-->)|(?P<string>{_STRING})"
        r"|(?P<keyword></?[\w:-]+>?|/?>)"
    ),
}

_FAMILIES = {
    "javascript": "js", "js": "js", "typescript": "js", "ts": "js",
    "jsx": "js", "tsx": "js",
    "python": "python", "py": "python",
    "json": "json",
    "css": "css", "scss": "css",
    "html": "markup", "xml": "markup", "svg": "markup",
}


@dataclass(frozen=True)
class CodeLine:
    number: int
    html: Markup
    highlighted: bool


def language_label(language: str) -> str:
    lang = (language or "text").lower()
    return LANGUAGE_NAMES.get(lang) or lang[:1].upper() + lang[1:]


def highlight(line: str, language: str) -> Markup:
    """Escape *line* and wrap recognised tokens in spans."""
    pattern = _PATTERNS.get(_FAMILIES.get((language or "").lower(), ""))
    if pattern is None:
        return Markup(escape(line))
    out = []
    pos = 0
    for match in pattern.finditer(line):
        out.append(str(escape(line[pos:match.start()])))
        kind = match.lastgroup
        out.append(f'<span class="tok-{kind}">{escape(match.group(0))}</span>')
        pos = match.end()
    out.append(str(escape(line[pos:])))
    return Markup("".join(out))


def highlight_lines(code: str, language: str,
                    emphasised: set[int] | None = None) -> list[CodeLine]:
    """Split *code* into numbered, highlighted lines (numbers start at 1)."""
    emphasised = emphasised or set()
    return [
        CodeLine(n, highlight(text, language), n in emphasised)
        for n, text in enumerate(code.replace("\r\n", "\n").split("\n"), start=1)
    ]
