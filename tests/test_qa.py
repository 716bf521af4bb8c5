"""Tests for the QA validation module."""

import pytest

from src.generator.html_builder import HTMLBuilder
from src.qa.validator import (
    Issue,
    QAResult,
    QAValidator,
    quality_issues,
    validate_presentation,
)
from src.schema.examples import presentation_example, slide_example
from src.schema.validation import validate_or_raise


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def raw():
    return {
        "theme": "startup",
        "title": "All Hands",
        "slides": [
            slide_example("title"),
            {**slide_example("content"), "notes": "Thank the team"},
            slide_example("chart-with-metrics"),
            slide_example("quote"),
        ],
    }


@pytest.fixture
def spec(raw):
    return validate_or_raise(raw)


@pytest.fixture
def html(spec):
    return HTMLBuilder().build(spec).html


def _categories(result, severity=None):
    return [i.category for i in result.issues if severity is None or i.severity == severity]


# ===========================================================================
# Result types
# ===========================================================================

class TestQAResult:

    def test_empty_passes(self):
        result = QAResult()
        assert result.passed
        assert result.summary() == "QA PASS: 0 error(s), 0 warning(s)"

    def test_errors_fail(self):
        result = QAResult()
        result.add("warning", 0, "title", "notes", "dropped")
        assert result.passed
        result.add("error", -1, "", "slide_count", "Expected 2 slides, got 1")
        assert not result.passed
        assert result.error_count == 1
        assert result.warning_count == 1
        assert result.summary() == "QA FAIL: 1 error(s), 1 warning(s)"

    def test_report(self):
        result = QAResult([Issue("error", 2, "data", "chart_missing", "no chart")])
        assert result.report().splitlines() == [
            "QA FAIL: 1 error(s), 0 warning(s)",
            "  [ERROR] slide 2 (data): no chart",
        ]

    def test_document_issue_str(self):
        assert str(Issue("warning", -1, "", "title", "mismatch")) == "[WARNING] document: mismatch"


# ===========================================================================
# Validation of generated decks
# ===========================================================================

class TestQAValidator:

    def test_generated_deck_passes(self, spec, html):
        result = QAValidator(spec).validate(html)
        assert result.passed, result.report()
        assert result.issues == []

    def test_every_kind_passes(self):
        spec = validate_or_raise(presentation_example())
        result = validate_presentation(spec, HTMLBuilder().build(spec).html)
        assert result.passed, result.report()

    def test_minified_deck_passes(self, spec):
        html = HTMLBuilder().build(spec, options={"minify": True}).html
        assert QAValidator(spec).validate(html).passed

    def test_bytes_accepted(self, spec, html):
        assert QAValidator(spec).validate(html.encode("utf-8")).passed

    def test_removed_slide(self, spec, html):
        start = html.index('<section class="sf-slide sf-slide--quote')
        end = html.index("</section>", start) + len("</section>")
        result = QAValidator(spec).validate(html[:start] + html[end:])
        assert not result.passed
        assert "slide_count" in _categories(result, "error")
        assert "navigation" in _categories(result, "error")

    def test_reordered_slides(self, spec, raw):
        raw["slides"][0], raw["slides"][3] = raw["slides"][3], raw["slides"][0]
        other = HTMLBuilder().build(raw).html
        result = QAValidator(spec).validate(other)
        assert "order" in _categories(result, "error")

    def test_wrong_ids(self, spec, raw):
        raw["slides"][0]["id"] = "cover"
        result = QAValidator(spec).validate(HTMLBuilder().build(raw).html)
        assert _categories(result) == ["ids"]

    def test_theme_mismatch_is_warning(self, spec, raw):
        other = HTMLBuilder().build(raw, options={"theme": "academic"}).html
        result = QAValidator(spec).validate(other)
        assert result.passed
        assert _categories(result, "warning") == ["theme"]

    def test_title_mismatch_is_warning(self, spec, raw):
        raw["title"] = "Different"
        result = QAValidator(spec).validate(HTMLBuilder().build(raw).html)
        assert _categories(result) == ["title"]

    def test_dropped_notes(self, spec, html):
        stripped = html.replace('<aside class="sf-notes" hidden>Thank the team</aside>', "")
        result = QAValidator(spec).validate(stripped)
        assert _categories(result, "warning") == ["notes"]

    def test_chart_error_reported_as_warning(self, raw):
        raw["slides"][2]["chart"]["data"]["labels"] = []
        spec = validate_or_raise(raw)
        result = QAValidator(spec).validate(HTMLBuilder().build(spec).html)
        assert result.passed
        warnings = [i for i in result.warnings if i.category == "chart_error"]
        assert len(warnings) == 1
        assert warnings[0].slide_index == 2
        assert "Chart Error" in warnings[0].message

    def test_missing_chart(self, spec, html):
        start = html.index("<svg")
        end = html.index("</svg>", start) + len("</svg>")
        result = QAValidator(spec).validate(html[:start] + html[end:])
        assert "chart_missing" in _categories(result, "error")

    def test_unresolved_theme_reference(self, spec, html):
        broken = html.replace('class="chart-bg"', 'class="chart-bg" stroke="theme:axis"', 1)
        result = QAValidator(spec).validate(broken)
        assert "theme_ref" in _categories(result, "error")

    def test_missing_script(self, spec, html):
        start = html.index("<script>")
        end = html.index("</script>") + len("</script>")
        result = QAValidator(spec).validate(html[:start] + html[end:])
        assert "navigation" in _categories(result, "error")

    def test_unparseable(self, spec):
        result = QAValidator(spec).validate("")
        assert _categories(result) == ["parse"]


# ===========================================================================
# Content quality
# ===========================================================================

class TestQuality:

    def test_good_deck_has_no_hints(self, spec):
        assert quality_issues(spec) == []

    def test_short_deck(self, raw):
        raw["slides"] = raw["slides"][:2]
        issues = quality_issues(validate_or_raise(raw))
        assert [i.message for i in issues] == ["Presentation has fewer than 3 slides"]
        assert issues[0].slide_index == -1

    def test_long_deck(self, raw):
        raw["slides"] += [slide_example("quote") for _ in range(47)]
        messages = [i.message for i in quality_issues(validate_or_raise(raw))]
        assert messages == ["Presentation has more than 50 slides; consider splitting"]

    def test_no_opening_title(self, raw):
        raw["slides"].pop(0)
        issues = quality_issues(validate_or_raise(raw))
        assert [(i.slide_index, i.slide_kind) for i in issues] == [(0, "content")]
        assert "title slide" in issues[0].message

    def test_too_many_bullets(self, raw):
        raw["slides"][1]["content"] = [f"Point {n}" for n in range(8)]
        issues = quality_issues(validate_or_raise(raw))
        assert len(issues) == 1
        assert issues[0].slide_index == 1
        assert "8 bullet points" in issues[0].message

    def test_seven_bullets_fine(self, raw):
        raw["slides"][1]["content"] = [f"Point {n}" for n in range(7)]
        assert quality_issues(validate_or_raise(raw)) == []

    def test_hints_never_fail_qa(self, raw):
        raw["slides"] = [slide_example("quote")]
        spec = validate_or_raise(raw)
        result = QAValidator(spec).validate(HTMLBuilder().build(spec).html)
        assert result.passed
        assert _categories(result) == ["quality", "quality"]
