"""Known-good slide definitions, one per slide kind.

Attached to validation failures as a corrected example for the offending
slide, and used by the CLI ``capabilities`` command and the test suite.
"""

from __future__ import annotations

import copy
from typing import Any

from .models import SlideKind

_EXAMPLES: dict[str, dict[str, Any]] = {
    "title": {
        "type": "title",
        "title": "Q3 Business Review",
        "subtitle": "Results and outlook",
        "author": "Finance Team",
        "date": "2026-10-01",
    },
    "content": {
        "type": "content",
        "title": "Key Takeaways",
        "content": ["Revenue up 12%", "Churn down to 3.1%", "Two new regions live"],
    },
    "media": {
        "type": "media",
        "title": "Our New Office",
        "mediaUrl": "https://example.com/office.jpg",
        "mediaType": "image",
        "caption": "Opened in September",
    },
    "data": {
        "type": "data",
        "title": "Quarterly Revenue",
        "dataType": "chart",
        "chartType": "bar",
        "data": {
            "labels": ["Q1", "Q2", "Q3"],
            "series": [{"name": "Revenue", "values": [120, 135, 150]}],
        },
    },
    "quote": {
        "type": "quote",
        "quote": "Simplicity is the soul of efficiency.",
        "author": "Austin Freeman",
    },
    "timeline": {
        "type": "timeline",
        "title": "Roadmap",
        "events": [
            {"date": "Jan", "title": "Beta"},
            {"date": "Apr", "title": "Launch", "milestone": True},
        ],
    },
    "comparison": {
        "type": "comparison",
        "title": "Build vs Buy",
        "leftTitle": "Build",
        "leftContent": ["Full control", "Higher cost"],
        "rightTitle": "Buy",
        "rightContent": ["Faster", "Vendor lock-in"],
    },
    "process": {
        "type": "process",
        "title": "Onboarding",
        "steps": [{"title": "Sign up"}, {"title": "Configure"}, {"title": "Go live"}],
    },
    "section-header": {
        "type": "section-header",
        "title": "Part Two",
        "subtitle": "Financials",
    },
    "blank": {"type": "blank", "content": "Questions?"},
    "hero": {
        "type": "hero",
        "title": "Meet Nova",
        "subtitle": "The fastest way to ship",
        "backgroundPattern": "dots",
        "callToAction": {"text": "Try it", "url": "https://example.com"},
    },
    "two-column": {
        "type": "two-column",
        "title": "Before and After",
        "leftColumn": {"type": "text", "content": "Manual reports every week."},
        "rightColumn": {"type": "list", "content": ["Automated", "Daily", "Accurate"]},
        "columnRatio": "50-50",
    },
    "three-column": {
        "type": "three-column",
        "title": "Pillars",
        "columns": [
            {"heading": "Speed", "content": "Sub-second builds"},
            {"heading": "Scale", "content": "Millions of users"},
            {"heading": "Safety", "content": "Audited daily"},
        ],
    },
    "four-column": {
        "type": "four-column",
        "title": "Quarter at a Glance",
        "columns": [
            {"heading": "Q1", "content": "Plan"},
            {"heading": "Q2", "content": "Build"},
            {"heading": "Q3", "content": "Launch"},
            {"heading": "Q4", "content": "Grow"},
        ],
    },
    "chart-with-metrics": {
        "type": "chart-with-metrics",
        "title": "Growth",
        "chart": {
            "type": "line",
            "data": {
                "labels": ["Jan", "Feb", "Mar"],
                "series": [{"name": "Users", "values": [100, 180, 260]}],
            },
        },
        "metrics": [
            {"label": "MAU", "value": "260k", "change": {"value": 44, "direction": "up"}},
        ],
    },
    "product-overview": {
        "type": "product-overview",
        "title": "Nova Pro",
        "description": "Everything in Nova, plus team features.",
        "features": ["SSO", "Audit log", "Priority support"],
        "pricing": {"price": "$49", "period": "per seat / month"},
    },
    "grid": {
        "type": "grid",
        "title": "Integrations",
        "items": [{"title": "Slack"}, {"title": "GitHub"}, {"title": "Jira"}, {"title": "Figma"}],
        "gridType": "2x2",
    },
    "feature-cards": {
        "type": "feature-cards",
        "title": "Why Nova",
        "features": [
            {"title": "Fast", "description": "Builds in seconds", "icon": "trend-up"},
            {"title": "Secure", "description": "SOC 2 compliant", "icon": "check",
             "highlight": True},
        ],
    },
    "team": {
        "type": "team",
        "title": "Leadership",
        "members": [{"name": "Sam Rivera", "role": "CEO"}, {"name": "Ada Chen", "role": "CTO"}],
    },
    "pricing": {
        "type": "pricing",
        "title": "Plans",
        "plans": [
            {"name": "Starter", "price": 0, "features": ["1 project"]},
            {"name": "Team", "price": 29, "features": ["10 projects"], "recommended": True},
        ],
    },
    "code": {
        "type": "code",
        "title": "Quick Start",
        "language": "python",
        "code": "from nova import build\n\nbuild('deck.yaml')",
    },
}


def slide_example(kind: str | SlideKind) -> dict[str, Any] | None:
    """Return a fresh copy of the example for *kind*, or None if unknown."""
    key = kind.value if isinstance(kind, SlideKind) else kind
    example = _EXAMPLES.get(key)
    return copy.deepcopy(example) if example is not None else None


def presentation_example(theme: str = "corporate") -> dict[str, Any]:
    """A complete presentation using every slide kind once."""
    return {
        "theme": theme,
        "title": "Example Presentation",
        "slides": [copy.deepcopy(e) for e in _EXAMPLES.values()],
    }
