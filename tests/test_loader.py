"""Tests for spec file loading/saving and the capability listing."""

import json

import pytest
import yaml

from src.capabilities import VERSION, get_capabilities
from src.errors import SpecValidationError
from src.schema.examples import presentation_example, slide_example
from src.schema.loader import load_raw, load_spec, save_spec
from src.schema.themes import ThemeRegistry, create_custom_theme
from src.schema.validation import validate_or_raise
from src.templates.registry import default_registry as default_templates


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def raw():
    return {
        "theme": "workshop",
        "title": "Café Weekly",
        "slides": [slide_example("title"), slide_example("quote")],
    }


# ===========================================================================
# Loader
# ===========================================================================

class TestLoader:

    def test_load_yaml(self, tmp_path, raw):
        path = tmp_path / "deck.yaml"
        path.write_text(yaml.safe_dump(raw, allow_unicode=True), encoding="utf-8")
        assert load_raw(path) == raw
        assert load_spec(path).title == "Café Weekly"

    def test_load_json(self, tmp_path, raw):
        path = tmp_path / "deck.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        assert load_raw(str(path)) == raw

    def test_load_spec_validates(self, tmp_path, raw):
        raw["slides"] = []
        path = tmp_path / "deck.yml"
        path.write_text(yaml.safe_dump(raw), encoding="utf-8")
        with pytest.raises(SpecValidationError):
            load_spec(path)

    def test_save_yaml_round_trip(self, tmp_path):
        spec = validate_or_raise(presentation_example())
        path = tmp_path / "nested" / "deck.yaml"
        save_spec(spec, path)
        assert load_spec(path).to_dict() == spec.to_dict()

    def test_save_json_round_trip(self, tmp_path, raw):
        spec = validate_or_raise(raw)
        path = tmp_path / "deck.json"
        save_spec(spec, path)
        text = path.read_text(encoding="utf-8")
        assert "Café" in text
        assert json.loads(text) == spec.to_dict()

    def test_save_raw_mapping(self, tmp_path, raw):
        path = tmp_path / "raw.yaml"
        save_spec(raw, path)
        assert load_raw(path) == raw


# ===========================================================================
# Capabilities
# ===========================================================================

class TestCapabilities:

    def test_defaults(self):
        caps = get_capabilities()
        assert caps["version"] == VERSION
        assert caps["slide_kinds"] == sorted(default_templates.kinds())
        assert caps["templates"] == len(caps["slide_kinds"])
        assert caps["chart_kinds"] == ["bar", "line", "area", "pie", "doughnut", "scatter"]
        assert caps["export_formats"] == ["html", "pdf-html", "json", "pptx"]
        assert caps["aspect_ratios"] == ["16:9", "4:3"]
        assert caps["font_sizes"] == ["default", "large", "xlarge"]
        assert caps["theme_count"] == len(caps["themes"])
        assert "complementary" in caps["color_harmonies"]
        assert len(caps["icons"]) == 30 and "trend-up" in caps["icons"]
        assert caps["patterns"] == ["dots", "grid", "diagonal-lines", "waves", "gradient-mesh",
                                    "hexagon", "circles"]

    def test_custom_theme_listed(self):
        registry = ThemeRegistry()
        before = get_capabilities(themes=registry)["theme_count"]
        create_custom_theme("acme", "ACME", "#0d9488", registry=registry)
        caps = get_capabilities(themes=registry)
        assert caps["theme_count"] == before + 1
        assert "acme" in caps["themes"]

    def test_custom_templates(self):
        templates = default_templates.copy()
        templates.unregister("blank")
        caps = get_capabilities(templates=templates)
        assert "blank" not in caps["slide_kinds"]
        assert caps["templates"] == len(default_templates.kinds()) - 1
