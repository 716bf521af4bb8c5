"""QA validator — inspects generated HTML decks against their PresentationSpec.

Reads the document back with lxml and checks that it honours the spec:
one slide container per slide in input order, the right kinds and ids,
the theme and slide count advertised in the shell, speaker notes carried
over, charts drawn (inline chart error panels are reported as warnings),
and no unresolved ``theme:`` colour references left in the SVG.

Content-quality hints (deck length, opening title slide, bullet count)
come from the spec alone and are always warnings.

Usage::

    from src.qa.validator import QAValidator

    validator = QAValidator(spec)
    result = validator.validate(doc.html)
    assert result.passed, result.summary()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import lxml.html
from lxml import etree

from src.schema.models import ChartDataset, PresentationSpec, SlideKind
from src.templates.registry import SLIDE_CLASS, slide_id

_ERROR_CLASS = "sf-chart-error"

MIN_SLIDES = 3
MAX_SLIDES = 50
MAX_BULLETS = 7


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """A single QA issue found during validation."""
    severity: str       # "error" or "warning"
    slide_index: int    # -1 for document-level issues
    slide_kind: str
    category: str       # e.g. "slide_count", "order", "chart_error"
    message: str

    def __str__(self) -> str:
        loc = "document" if self.slide_index < 0 else f"slide {self.slide_index}"
        if self.slide_kind:
            loc += f" ({self.slide_kind})"
        return f"[{self.severity.upper()}] {loc}: {self.message}"


@dataclass
class QAResult:
    """Aggregated result of QA validation."""
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (
            f"QA {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        lines = [self.summary()]
        lines.extend(f"  {issue}" for issue in self.issues)
        return "\n".join(lines)

    def add(self, severity: str, index: int, kind: str, category: str, message: str) -> None:
        self.issues.append(Issue(severity, index, kind, category, message))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _has_class(cls: str) -> str:
    return f'contains(concat(" ", normalize-space(@class), " "), " {cls} ")'


def slide_containers(doc) -> list:
    """Slide container elements in document order."""
    return doc.xpath(f"//*[{_has_class(SLIDE_CLASS)}]")


def _meta(doc, name: str) -> str | None:
    found = doc.xpath(f'//meta[@name="{name}"]/@content')
    return found[0] if found else None


def _text(el) -> str:
    return " ".join(el.text_content().split())


# ---------------------------------------------------------------------------
# QAValidator
# ---------------------------------------------------------------------------

class QAValidator:
    """Validates a generated HTML deck against the spec it was built from.

    Parameters
    ----------
    spec : PresentationSpec
        The validated spec used to generate the document.
    """

    def __init__(self, spec: PresentationSpec) -> None:
        self.spec = spec

    def validate(self, html: str | bytes) -> QAResult:
        """Run all checks on a rendered document.

        Parameters
        ----------
        html : str | bytes
            The document markup (minified or not).

        Returns
        -------
        QAResult
        """
        result = QAResult()
        try:
            doc = lxml.html.document_fromstring(html)
        except (etree.ParserError, ValueError) as exc:
            result.add("error", -1, "", "parse", f"Document could not be parsed: {exc}")
            return result

        slides = slide_containers(doc)
        self._check_shell(doc, len(slides), result)
        self._check_slide_count(slides, result)
        for index, (element, slide) in enumerate(zip(slides, self.spec.slides)):
            self._check_slide(index, element, slide, result)
        self._check_ids_unique(slides, result)
        self._check_theme_refs(doc, result)
        result.issues.extend(quality_issues(self.spec))
        return result

    # ------------------------------------------------------------------
    # Document-level checks
    # ------------------------------------------------------------------

    def _check_shell(self, doc, found: int, result: QAResult) -> None:
        titles = doc.xpath("//title")
        if not titles or _text(titles[0]) != self.spec.title:
            result.add("warning", -1, "", "title",
                       f"Document title does not match {self.spec.title!r}")

        theme = doc.body.get("data-theme") if doc.body is not None else None
        if theme != self.spec.theme:
            result.add("warning", -1, "", "theme",
                       f"Rendered with theme {theme!r}, spec asks for {self.spec.theme!r}")

        advertised = _meta(doc, "sf-slide-count")
        if advertised is None or advertised != str(found):
            result.add("error", -1, "", "navigation",
                       f"Navigation slide count {advertised!r} does not match "
                       f"{found} slide container(s)")
        if not doc.xpath("//script"):
            result.add("error", -1, "", "navigation", "Navigation script is missing")

    def _check_slide_count(self, slides: list, result: QAResult) -> None:
        expected = len(self.spec.slides)
        if len(slides) != expected:
            result.add("error", -1, "", "slide_count",
                       f"Expected {expected} slides, got {len(slides)}")

    def _check_ids_unique(self, slides: list, result: QAResult) -> None:
        seen: set[str] = set()
        for index, element in enumerate(slides):
            element_id = element.get("id")
            if element_id in seen:
                result.add("error", index, element.get("data-slide-kind", ""), "ids",
                           f"Duplicate slide id {element_id!r}")
            seen.add(element_id)

    def _check_theme_refs(self, doc, result: QAResult) -> None:
        for el in doc.iter():
            if not isinstance(el.tag, str):
                continue
            for attr in ("fill", "stroke", "stop-color"):
                value = el.get(attr)
                if value and value.startswith("theme:"):
                    result.add("error", -1, "", "theme_ref",
                               f"Unresolved colour reference {value!r} on <{el.tag}>")

    # ------------------------------------------------------------------
    # Per-slide checks
    # ------------------------------------------------------------------

    def _check_slide(self, index: int, element, slide: Any, result: QAResult) -> None:
        kind = slide.type
        actual_kind = element.get("data-slide-kind")
        if actual_kind != kind:
            result.add("error", index, kind, "order",
                       f"Expected a {kind} slide, found {actual_kind!r}")
        if element.get("data-slide-index") != str(index):
            result.add("error", index, kind, "order",
                       f"data-slide-index is {element.get('data-slide-index')!r}")

        expected_id = slide_id(slide, index)
        if element.get("id") != expected_id:
            result.add("error", index, kind, "ids",
                       f"Expected id {expected_id!r}, found {element.get('id')!r}")

        if slide.notes and not element.xpath(f".//*[{_has_class('sf-notes')}]"):
            result.add("warning", index, kind, "notes", "Speaker notes were dropped")

        for panel in element.xpath(f".//*[{_has_class(_ERROR_CLASS)}]"):
            result.add("warning", index, kind, "chart_error", _text(panel))

        if self._expects_chart(slide):
            drawn = element.xpath(".//svg")
            panels = element.xpath(f".//*[{_has_class(_ERROR_CLASS)}]")
            if not drawn and not panels:
                result.add("error", index, kind, "chart_missing",
                           "Chart slide has neither a chart nor an error panel")

    @staticmethod
    def _expects_chart(slide: Any) -> bool:
        if slide.kind == SlideKind.CHART_WITH_METRICS:
            return True
        return slide.kind == SlideKind.DATA and slide.data_type == "chart" \
            and isinstance(slide.data, ChartDataset)


# ---------------------------------------------------------------------------
# Content quality
# ---------------------------------------------------------------------------

def quality_issues(spec: PresentationSpec) -> list[Issue]:
    """Warning-level hints about the deck's content; they never fail QA."""
    issues = []
    count = len(spec.slides)
    if count < MIN_SLIDES:
        issues.append(Issue("warning", -1, "", "quality",
                            f"Presentation has fewer than {MIN_SLIDES} slides"))
    if count > MAX_SLIDES:
        issues.append(Issue("warning", -1, "", "quality",
                            f"Presentation has more than {MAX_SLIDES} slides; consider splitting"))
    if spec.slides[0].kind != SlideKind.TITLE:
        issues.append(Issue("warning", 0, spec.slides[0].type, "quality",
                            "Presentation should start with a title slide"))
    for index, slide in enumerate(spec.slides):
        if slide.kind != SlideKind.CONTENT:
            continue
        bullets = slide.content if isinstance(slide.content, list) else [slide.content]
        if len(bullets) > MAX_BULLETS:
            issues.append(Issue("warning", index, slide.type, "quality",
                                f"Slide {slide.title!r} has {len(bullets)} bullet points; "
                                f"consider splitting"))
    return issues


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_presentation(spec: PresentationSpec, html: str | bytes) -> QAResult:
    """One-shot convenience: validate an HTML deck against its spec."""
    return QAValidator(spec).validate(html)
