"""QA validation package for generated decks.

Reads rendered HTML back and checks it against the spec it came from:
slide count and order, ids, theme, navigation wiring, speaker notes,
chart rendering and unresolved colour references. Content-quality hints
are reported as warnings.
"""

from .validator import (
    Issue,
    QAResult,
    QAValidator,
    quality_issues,
    slide_containers,
    validate_presentation,
)

__all__ = [
    "Issue",
    "QAResult",
    "QAValidator",
    "quality_issues",
    "slide_containers",
    "validate_presentation",
]
