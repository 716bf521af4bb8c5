"""Exception taxonomy for the presentation generator.

Malformed input is reported as data (see ``src.schema.validation``); the
classes here are what gets raised once a caller asks for an exception, or
when something goes wrong that is not the caller's fault.

    PresentationError
    ├── SpecValidationError        malformed spec or missing export input
    ├── UnknownTemplateError       registry misconfiguration
    ├── ChartDataShapeError        chart kind / dataset mismatch
    ├── SlideRenderError           any other failure while rendering a slide
    └── CollaboratorFailure
        ├── MinificationError
        └── ThemeNotFoundError
"""

from __future__ import annotations

from typing import Any


class PresentationError(Exception):
    """Base class for every error raised by this package."""


class SpecValidationError(PresentationError, ValueError):
    """Input failed validation.

    Parameters
    ----------
    message : str
        Human-readable summary.
    issues : list
        ``Issue`` records (path, expected, actual) describing each failure.
    example : dict | None
        A corrected example for the offending slide kind, when one exists.
    """

    def __init__(self, message: str, issues: list | None = None,
                 example: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.issues = list(issues or [])
        self.example = example

    def __str__(self) -> str:
        base = super().__str__()
        if not self.issues:
            return base
        lines = [base] + [f"  - {issue}" for issue in self.issues]
        return "\n".join(lines)


class UnknownTemplateError(PresentationError, LookupError):
    """No renderer is registered for a slide kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"No template registered for slide kind {kind!r}")
        self.kind = kind


class ChartDataShapeError(PresentationError, ValueError):
    """The dataset does not fit the requested chart kind."""

    def __init__(self, message: str, chart_kind: str | None = None) -> None:
        super().__init__(message)
        self.chart_kind = chart_kind


class SlideRenderError(PresentationError):
    """Rendering a single slide failed; aborts the whole assembly."""

    def __init__(self, index: int, kind: str, cause: BaseException) -> None:
        super().__init__(
            f"Failed to render slide {index} ({kind}): {cause}"
        )
        self.index = index
        self.kind = kind
        self.cause = cause


class CollaboratorFailure(PresentationError):
    """An external collaborator failed; callers degrade instead of aborting."""


class MinificationError(CollaboratorFailure):
    """The minifier rejected or crashed on the document."""


class ThemeNotFoundError(CollaboratorFailure, KeyError):
    """A theme id is neither built in nor registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = sorted(available or [])
        msg = f"Unknown theme {name!r}"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError repr()s its argument otherwise
        return str(self.args[0])
