"""Tests for the presentation schema: models, validation and option layering."""

import pytest

from src.errors import SpecValidationError, UnknownTemplateError
from src.schema.examples import presentation_example, slide_example
from src.schema.models import (
    ChartDataset,
    GenerationOptions,
    PresentationSpec,
    SLIDE_MODELS,
    SlideKind,
)
from src.schema.options import DEFAULTS, RenderOptions, resolve_options
from src.schema.themes import ThemeRegistry
from src.schema.validation import (
    Issue,
    ValidationFailure,
    ValidSpec,
    options_or_raise,
    slide_or_raise,
    validate,
    validate_or_raise,
    validate_slide,
)
from src.templates.registry import TemplateRegistry, default_registry as default_templates


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def raw():
    return {
        "theme": "corporate",
        "title": "Q3 Review",
        "slides": [
            {"type": "title", "title": "Q3 Review", "subtitle": "Numbers"},
            {"type": "content", "title": "Highlights", "content": ["Up", "Right"]},
        ],
    }


def _paths(result):
    return [issue.path for issue in result.issues]


# ===========================================================================
# Models
# ===========================================================================

class TestModels:

    def test_every_kind_has_a_model(self):
        assert set(SLIDE_MODELS) == set(SlideKind)

    def test_every_kind_has_an_example(self):
        for kind in SlideKind:
            assert slide_example(kind) is not None, kind

    def test_examples_are_fresh_copies(self):
        first = slide_example("content")
        first["title"] = "changed"
        assert slide_example("content")["title"] == "Key Takeaways"

    def test_camel_and_snake_case_accepted(self):
        slide = slide_or_raise({"type": "media", "media_url": "a.png", "mediaType": "image"})
        assert slide.media_url == "a.png"
        assert slide.media_type == "image"

    def test_to_dict_uses_wire_names(self):
        slide = slide_or_raise(slide_example("comparison"))
        out = slide.to_dict()
        assert out["leftTitle"] == "Build"
        assert "left_title" not in out

    def test_defaults_filled(self):
        slide = slide_or_raise({"type": "content", "title": "x", "content": "y"})
        assert slide.layout == "single-column"

    def test_kind_and_heading(self):
        slide = slide_or_raise(slide_example("section-header"))
        assert slide.kind is SlideKind.SECTION_HEADER
        assert slide.heading == "Part Two"
        assert slide_or_raise({"type": "blank"}).heading is None

    def test_series_numeric_sanitizes(self):
        data = ChartDataset.model_validate({
            "labels": ["a", "b", "c"],
            "series": [{"name": "s", "values": [1, None, float("nan")]}],
        })
        assert data.series[0].numeric() == [1.0, 0.0, 0.0]

    def test_scatter_pairs(self):
        data = ChartDataset.model_validate({"series": [{"name": "s", "values": [[1, 2]]}]})
        assert data.series[0].has_pairs()
        assert data.series[0].values == [(1.0, 2.0)]

    def test_labels_stringified(self):
        data = ChartDataset.model_validate({"labels": [2024, 2025],
                                            "series": [{"name": "s", "values": [1, 2]}]})
        assert data.labels == ["2024", "2025"]

    def test_include_styles_aliases(self):
        for key in ("includeStyles", "include_styles", "embedStyles"):
            assert GenerationOptions.model_validate({key: False}).include_styles is False
        assert GenerationOptions(include_styles=False).to_dict() == {"includeStyles": False}


# ===========================================================================
# Presentation validation
# ===========================================================================

class TestValidate:

    def test_valid_spec(self, raw):
        result = validate(raw)
        assert isinstance(result, ValidSpec)
        assert result.ok
        assert isinstance(result.spec, PresentationSpec)
        assert [s.type for s in result.spec.slides] == ["title", "content"]

    def test_full_example_validates(self):
        spec = validate_or_raise(presentation_example())
        assert len(spec.slides) == len(SlideKind)

    def test_existing_spec_revalidates(self, raw):
        spec = validate_or_raise(raw)
        assert validate_or_raise(spec).title == "Q3 Review"

    def test_zero_slides(self, raw):
        raw["slides"] = []
        result = validate(raw)
        assert isinstance(result, ValidationFailure)
        assert not result.ok
        assert result.issues[0].path == "slides"
        assert "at least one slide required" in result.issues[0].message

    def test_missing_type(self, raw):
        raw["slides"][1] = {"title": "No type"}
        result = validate(raw)
        assert _paths(result) == ["slides.1.type"]
        assert result.issues[0].actual == "missing"
        assert "content" in result.issues[0].expected

    def test_unknown_type(self, raw):
        raw["slides"][0]["type"] = "chart"
        result = validate(raw)
        assert _paths(result) == ["slides.0.type"]
        assert result.issues[0].actual == "'chart'"
        # unknown kinds get the generic content example
        assert result.example["type"] == "content"

    def test_missing_field_path_and_example(self, raw):
        del raw["slides"][1]["content"]
        result = validate(raw)
        assert _paths(result) == ["slides.1.content"]
        assert result.issues[0].expected == "required field"
        assert result.example == slide_example("content")

    def test_wire_field_names_in_paths(self, raw):
        raw["slides"].append({"type": "media", "mediaType": "image"})
        assert _paths(validate(raw)) == ["slides.2.mediaUrl"]

    def test_nested_field_path(self, raw):
        raw["slides"].append({"type": "process", "title": "Flow", "steps": [{}]})
        assert _paths(validate(raw)) == ["slides.2.steps.0.title"]

    def test_every_issue_reported(self, raw):
        raw["title"] = ""
        raw["slides"][0] = {"type": "quote", "quote": "Hi"}
        raw["slides"][1] = {"type": "three-column", "columns": [{"content": "a"}]}
        paths = _paths(validate(raw))
        assert "title" in paths
        assert "slides.0.author" in paths
        assert "slides.1.columns" in paths

    def test_unknown_theme(self, raw):
        raw["theme"] = "neon"
        result = validate(raw)
        assert _paths(result) == ["theme"]
        assert "unknown theme" in result.issues[0].message

    def test_theme_checked_against_given_registry(self, raw):
        registry = ThemeRegistry(include_builtins=False)
        assert _paths(validate(raw, themes=registry)) == ["theme"]

    def test_non_mapping(self):
        result = validate(["not", "a", "spec"])
        assert not result.ok
        assert result.issues[0].path == ""

    def test_extra_keys_ignored(self, raw):
        raw["slides"][0]["sparkle"] = True
        assert validate(raw).ok

    def test_invalid_url(self, raw):
        raw["slides"].append({"type": "media", "mediaUrl": "not a url", "mediaType": "image"})
        assert _paths(validate(raw)) == ["slides.2.mediaUrl"]

    def test_image_column_needs_url(self, raw):
        raw["slides"].append({
            "type": "two-column",
            "leftColumn": {"type": "image", "content": "javascript:alert(1)"},
            "rightColumn": {"type": "text", "content": "javascript: is fine as prose"},
        })
        assert _paths(validate(raw)) == ["slides.2.leftColumn.content"]

    def test_image_column_accepts_url(self, raw):
        raw["slides"].append({
            "type": "two-column",
            "leftColumn": {"type": "image", "content": "https://example.com/a.png"},
            "rightColumn": {"type": "list", "content": ["One", "Two"]},
        })
        assert validate(raw).ok

    def test_raise_error(self, raw):
        raw["slides"] = []
        with pytest.raises(SpecValidationError) as excinfo:
            validate_or_raise(raw)
        assert excinfo.value.issues[0].path == "slides"
        assert isinstance(excinfo.value, ValueError)

    def test_report_lists_issues(self, raw):
        del raw["slides"][1]["content"]
        report = validate(raw).report()
        assert report.startswith("Presentation spec is invalid: 1 issue(s)")
        assert "slides.1.content" in report
        assert "example:" in report

    def test_missing_template_is_configuration_error(self, raw):
        templates = default_templates.copy()
        templates.unregister("content")
        with pytest.raises(UnknownTemplateError):
            validate(raw, templates=templates)


# ===========================================================================
# Single slides and options
# ===========================================================================

class TestSlideValidation:

    def test_valid(self):
        slide, issues = validate_slide(slide_example("quote"))
        assert issues == []
        assert slide.author == "Austin Freeman"

    def test_invalid_paths_are_relative(self):
        slide, issues = validate_slide({"type": "quote", "quote": "Hi"})
        assert slide is None
        assert [i.path for i in issues] == ["author"]

    def test_slide_or_raise_attaches_example(self):
        with pytest.raises(SpecValidationError) as excinfo:
            slide_or_raise({"type": "team", "members": []})
        assert excinfo.value.example == slide_example("team")

    def test_empty_registry_rejects_every_kind(self):
        with pytest.raises(UnknownTemplateError):
            validate_slide(slide_example("title"), templates=TemplateRegistry())


class TestOptions:

    def test_none_passes_through(self):
        assert options_or_raise(None) is None

    def test_invalid_value_path(self):
        with pytest.raises(SpecValidationError) as excinfo:
            options_or_raise({"aspectRatio": "21:9"})
        assert excinfo.value.issues[0].path == "options.aspectRatio"

    def test_non_mapping(self):
        with pytest.raises(SpecValidationError):
            options_or_raise("minify")

    def test_defaults(self):
        resolved = resolve_options("corporate")
        assert resolved == RenderOptions(theme="corporate")
        assert resolved.minify is DEFAULTS["minify"]
        assert resolved.aspect_ratio == "16:9"

    def test_call_beats_spec_beats_default(self):
        resolved = resolve_options(
            "corporate",
            {"aspectRatio": "4:3", "fontSize": "large"},
            {"fontSize": "xlarge", "theme": "academic"},
        )
        assert resolved.theme == "academic"
        assert resolved.aspect_ratio == "4:3"
        assert resolved.font_size == "xlarge"
        assert resolved.include_styles is True

    def test_false_is_an_explicit_value(self):
        resolved = resolve_options("corporate", {"includeStyles": True},
                                   {"includeStyles": False})
        assert resolved.include_styles is False


class TestIssue:

    def test_str(self):
        issue = Issue("slides.0.type", "slide type", "missing")
        assert str(issue) == "slides.0.type: expected slide type (got missing)"

    def test_root_path(self):
        assert str(Issue("", "object", "'x'", "must be a mapping")).startswith("<root>:")
