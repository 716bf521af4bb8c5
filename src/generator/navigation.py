"""Client-side navigation — parameterizes the deck's navigation script.

The deck ships with a small script (``assets/navigation.js``) that moves
between slides. It runs in the browser only; this module fills in its
parameters:

    __SLIDE_COUNT__     number of slide containers
    __INITIAL_INDEX__   slide shown first, clamped into ``[0, count)``
    __KEY_ACTIONS__     keyboard key -> action table (:data:`KEY_BINDINGS`)

In the script, next/prev/jump all go through one ``clamp`` so the index
stays in ``[0, count)``; there is no wraparound. A ``#slide-N`` URL hash
(1-based) selects slide N.
"""

from __future__ import annotations

import json
from functools import lru_cache

from src.generator.styles import ASSETS_DIR

KEY_BINDINGS = {
    "ArrowRight": "next",
    " ": "next",
    "PageDown": "next",
    "ArrowLeft": "prev",
    "PageUp": "prev",
    "Home": "first",
    "End": "last",
}

ACTIONS = ("next", "prev", "first", "last")


def clamp_index(index: int, count: int) -> int:
    """Clamp *index* into ``[0, count)``."""
    return max(0, min(count - 1, index))


@lru_cache(maxsize=None)
def _script_source() -> str:
    return (ASSETS_DIR / "navigation.js").read_text(encoding="utf-8")


def navigation_script(slide_count: int, initial_index: int = 0) -> str:
    """The navigation script parameterized for a deck of *slide_count* slides."""
    if slide_count < 1:
        raise ValueError("a deck needs at least one slide")
    return (
        _script_source()
        .replace("__SLIDE_COUNT__", str(slide_count))
        .replace("__INITIAL_INDEX__", str(clamp_index(initial_index, slide_count)))
        .replace("__KEY_ACTIONS__", json.dumps(KEY_BINDINGS, sort_keys=True))
    )
