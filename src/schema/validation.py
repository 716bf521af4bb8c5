"""Presentation spec validator — turns raw input into a PresentationSpec or a list of issues.

Malformed input never raises: callers get a :class:`ValidationFailure`
holding one :class:`Issue` per problem, each with a dotted path into the
input (``slides.2.type``), what was expected, and what was found. Use
:meth:`ValidationFailure.raise_error` where an exception is preferred.

Usage::

    from src.schema.validation import validate

    result = validate(raw)
    if not result.ok:
        for issue in result.issues:
            print(issue)
    spec = result.spec
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError

from src.errors import SpecValidationError, UnknownTemplateError
from src.schema.examples import slide_example
from src.schema.models import GenerationOptions, PresentationSpec, Slide, SlideKind
from src.schema.themes import ThemeRegistry, default_registry

_SLIDE_ADAPTER: TypeAdapter = TypeAdapter(Slide)

_FIELD_RE = re.compile(r"^[A-Za-z_][\w-]*$")

_VALID_KINDS = ", ".join(k.value for k in SlideKind)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Issue:
    """A single validation problem."""
    path: str
    expected: str
    actual: str
    message: str = ""

    def __str__(self) -> str:
        loc = self.path or "<root>"
        text = self.message or f"expected {self.expected}"
        return f"{loc}: {text} (got {self.actual})"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "expected": self.expected,
                "actual": self.actual, "message": self.message}


@dataclass
class ValidSpec:
    spec: PresentationSpec
    ok: bool = field(default=True, init=False)


@dataclass
class ValidationFailure:
    issues: list[Issue]
    example: dict[str, Any] | None = None
    ok: bool = field(default=False, init=False)

    def summary(self) -> str:
        return f"Presentation spec is invalid: {len(self.issues)} issue(s)"

    def report(self) -> str:
        """Multi-line report of every issue, plus the corrected example."""
        lines = [self.summary()]
        lines.extend(f"  {issue}" for issue in self.issues)
        if self.example is not None:
            lines.append(f"  example: {self.example}")
        return "\n".join(lines)

    def raise_error(self) -> None:
        raise SpecValidationError(self.summary(), self.issues, self.example)


ValidationResult = ValidSpec | ValidationFailure


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

def _describe(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return f"array of {len(value)}"
    text = repr(value)
    return text if len(text) <= 40 else text[:37] + "..."


def _clean_loc(loc: Iterable[Any], raw: Any, tagged_at: tuple) -> list:
    """Map a pydantic error location onto paths that exist in *raw*.

    Pydantic inserts union member labels (and, for the slide union, the tag
    value) into locations; those segments are dropped. *tagged_at* is the
    shape of the path prefix under which the slide tag appears.
    """
    parts = list(loc)
    path: list = []
    node = raw
    for i, part in enumerate(parts):
        at_tag = (len(path) == len(tagged_at)
                  and all(p == t or (t is int and isinstance(p, int))
                          for p, t in zip(path, tagged_at)))
        if at_tag and isinstance(node, dict) and part == node.get("type"):
            continue
        if isinstance(node, dict) and part in node:
            path.append(part)
            node = node[part]
        elif isinstance(node, list) and isinstance(part, int) and 0 <= part < len(node):
            path.append(part)
            node = node[part]
        elif i == len(parts) - 1 and (isinstance(part, int) or _FIELD_RE.match(str(part))):
            path.append(part)
            node = None
        # otherwise: a union member label, skip it
    return path


def _expected(err: dict[str, Any]) -> str:
    kind = err["type"]
    ctx = err.get("ctx") or {}
    if kind == "missing":
        return "required field"
    if kind in ("union_tag_invalid", "union_tag_not_found"):
        return f"slide type, one of: {_VALID_KINDS}"
    if kind == "literal_error":
        return f"one of {ctx.get('expected', '')}"
    if kind == "string_too_short":
        return "non-empty string"
    if kind == "too_short":
        return f"at least {ctx.get('min_length')} item(s)"
    if kind == "too_long":
        return f"at most {ctx.get('max_length')} item(s)"
    if kind == "value_error":
        return "valid value"
    return kind.replace("_", " ")


def _message(err: dict[str, Any]) -> str:
    msg = err.get("msg", "")
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def _translate(exc: ValidationError, raw: Any, tagged_at: tuple) -> list[Issue]:
    issues: list[Issue] = []
    seen: set[tuple[str, str]] = set()
    for err in exc.errors():
        path = _clean_loc(err["loc"], raw, tagged_at)
        if err["type"] in ("union_tag_invalid", "union_tag_not_found"):
            path.append("type")
        dotted = ".".join(str(p) for p in path)
        actual = "missing" if err["type"] == "missing" else _describe(err.get("input"))
        if err["type"] == "union_tag_invalid":
            actual = repr((err.get("ctx") or {}).get("tag"))
        elif err["type"] == "union_tag_not_found":
            actual = "missing"
        key = (dotted, err["type"])
        if key in seen:
            continue
        seen.add(key)
        issues.append(Issue(dotted, _expected(err), actual, _message(err)))
    return issues


def _example_for(issues: list[Issue], raw: Any, slides_prefix: bool) -> dict[str, Any] | None:
    for issue in issues:
        parts = issue.path.split(".")
        if slides_prefix:
            if len(parts) < 2 or parts[0] != "slides" or not parts[1].isdigit():
                continue
            try:
                slide = raw["slides"][int(parts[1])]
            except (KeyError, IndexError, TypeError):
                continue
        else:
            slide = raw
        kind = slide.get("type") if isinstance(slide, dict) else None
        if not isinstance(kind, str):
            kind = SlideKind.CONTENT.value
        return slide_example(kind) or slide_example(SlideKind.CONTENT)
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate(raw: Any, themes: ThemeRegistry | None = None,
             templates=None) -> ValidationResult:
    """Validate a raw presentation mapping.

    Parameters
    ----------
    raw : Any
        Decoded JSON/YAML input, or an existing PresentationSpec.
    themes : ThemeRegistry, optional
        Registry the theme id is checked against (default registry if omitted).
    templates : TemplateRegistry, optional
        Every validated slide kind must have a renderer here; a missing one
        is a configuration defect and raises :class:`UnknownTemplateError`.

    Returns
    -------
    ValidSpec | ValidationFailure
    """
    themes = themes if themes is not None else default_registry
    if isinstance(raw, PresentationSpec):
        raw = raw.to_dict()

    if not isinstance(raw, dict):
        return ValidationFailure([
            Issue("", "object", _describe(raw), "presentation must be a mapping"),
        ])

    try:
        spec = PresentationSpec.model_validate(raw, context={"themes": set(themes.names())})
    except ValidationError as exc:
        issues = _translate(exc, raw, ("slides", int))
        return ValidationFailure(issues, _example_for(issues, raw, True))

    _check_templates((s.kind for s in spec.slides), templates)
    return ValidSpec(spec)


def validate_slide(raw: Any, templates=None):
    """Validate a single slide mapping; returns ``(slide, [])`` or ``(None, issues)``."""
    if not isinstance(raw, dict):
        return None, [Issue("", "object", _describe(raw), "slide must be a mapping")]
    try:
        slide = _SLIDE_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        return None, _translate(exc, raw, ())
    _check_templates([slide.kind], templates)
    return slide, []


def validate_or_raise(raw: Any, themes: ThemeRegistry | None = None,
                      templates=None) -> PresentationSpec:
    result = validate(raw, themes=themes, templates=templates)
    if not result.ok:
        result.raise_error()
    return result.spec


def slide_or_raise(raw: Any, templates=None):
    """Like :func:`validate_slide` but raises :class:`SpecValidationError`."""
    slide, issues = validate_slide(raw, templates=templates)
    if issues:
        raise SpecValidationError(
            f"Slide is invalid: {len(issues)} issue(s)", issues,
            _example_for(issues, raw, False),
        )
    return slide


def options_or_raise(raw: Any) -> GenerationOptions | None:
    """Validate call-level generation options (``None`` passes through)."""
    if raw is None or isinstance(raw, GenerationOptions):
        return raw
    if not isinstance(raw, dict):
        raise SpecValidationError("Generation options must be a mapping",
                                  [Issue("options", "object", _describe(raw))])
    try:
        return GenerationOptions.model_validate(raw)
    except ValidationError as exc:
        issues = [Issue(f"options.{issue.path}" if issue.path else "options",
                        issue.expected, issue.actual, issue.message)
                  for issue in _translate(exc, raw, ())]
        raise SpecValidationError(
            f"Generation options are invalid: {len(issues)} issue(s)", issues,
        ) from None


def _check_templates(kinds: Iterable[SlideKind], templates) -> None:
    if templates is None:
        from src.templates.registry import default_registry as templates
    for kind in kinds:
        if not templates.has(kind):
            raise UnknownTemplateError(kind.value)
