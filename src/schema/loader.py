"""Spec loader — read and write presentation specs as YAML or JSON files.

YAML is the human-editable format; ``.json`` files are read and written as
JSON. Loading returns the raw mapping so that validation can report
issues against exactly what was on disk.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from .models import PresentationSpec
from .validation import validate_or_raise

_JSON_SUFFIXES = {".json"}


def load_raw(path: str | Path) -> Any:
    """Decode a spec file without validating it."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in _JSON_SUFFIXES:
            return json.load(f)
        return yaml.safe_load(f)


def load_spec(path: str | Path, themes=None) -> PresentationSpec:
    """Load and validate a spec file; raises SpecValidationError on bad input."""
    return validate_or_raise(load_raw(path), themes=themes)


def save_spec(spec: PresentationSpec | dict[str, Any], path: str | Path) -> None:
    """Serialize a spec to YAML (or JSON for ``.json`` paths)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = spec.to_dict() if isinstance(spec, PresentationSpec) else spec
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in _JSON_SUFFIXES:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                      allow_unicode=True, width=120)
