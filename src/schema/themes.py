"""Theme registry — named colour/typography bundles used by the renderer.

Built-in themes are loaded when a registry is constructed; custom themes are
added with :meth:`ThemeRegistry.register` or :func:`create_custom_theme`.
A registry is the only state shared between concurrent generation calls,
so every read and write goes through its lock.

Usage::

    from src.schema.themes import default_registry, create_custom_theme

    theme = default_registry.lookup("corporate")
    theme.color("primary")          # '#2563eb'

    create_custom_theme("acme", "ACME Health", primary="#0d9488")
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from src.errors import ThemeNotFoundError
from src.schema.colors import HARMONIES, generate_palette, is_hex_color

logger = logging.getLogger(__name__)

THEME_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

# Values below are written into the document's <style> block verbatim.
FONT_FAMILY_RE = re.compile(r"^[A-Za-z0-9 ,'\"-]+$")
CSS_SIZE_RE = re.compile(r"^\d+(\.\d+)?(px|rem|em|pt|%)$")
COLOR_KEY_RE = re.compile(r"^[a-z][a-z0-9_]*$")

DEFAULT_THEME = "corporate"

# Chart furniture shared by every theme unless overridden.
_CHART_FURNITURE = {
    "axis": "#374151",
    "grid": "#e5e7eb",
    "label": "#4b5563",
}

_SANS = 'system-ui, -apple-system, "Segoe UI", Roboto, sans-serif'
_SERIF = 'Georgia, "Times New Roman", serif'


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Typography:
    font_family: str = _SANS
    heading_sizes: tuple[str, ...] = ("48px", "36px", "24px")

    def to_dict(self) -> dict[str, Any]:
        return {
            "font_family": self.font_family,
            "heading_sizes": list(self.heading_sizes),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Typography:
        return cls(
            font_family=d.get("font_family", _SANS),
            heading_sizes=tuple(d.get("heading_sizes", ("48px", "36px", "24px"))),
        )


@dataclass(frozen=True)
class Theme:
    """A named palette and typography bundle.

    Parameters
    ----------
    name : str
        Identifier used in specs (``corporate``, ``pitch-deck``...).
    display_name : str
        Human-readable name.
    colors : Mapping[str, str]
        Colour table. Keys are the names usable as ``theme:<name>``
        references in drawings (``primary``, ``secondary``, ``accent``,
        ``background``, ``foreground``, ``muted``, ``muted_foreground``,
        ``border``, ``surface``, ``axis``, ``grid``, ``label``).
    chart_palette : tuple[str, ...]
        Series colours, cycled in order.
    builtin : bool
        Built-in themes cannot be replaced or removed.
    """
    name: str
    display_name: str
    colors: Mapping[str, str]
    chart_palette: tuple[str, ...]
    typography: Typography = field(default_factory=Typography)
    description: str = ""
    use_cases: tuple[str, ...] = ()
    builtin: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))
        object.__setattr__(self, "chart_palette", tuple(self.chart_palette))

    def color(self, key: str, default: str | None = None) -> str | None:
        return self.colors.get(key, default)

    def series_color(self, index: int) -> str:
        """Deterministic palette cycle for series without an explicit colour."""
        return self.chart_palette[index % len(self.chart_palette)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "colors": dict(self.colors),
            "chart_palette": list(self.chart_palette),
            "typography": self.typography.to_dict(),
            "use_cases": list(self.use_cases),
            "builtin": self.builtin,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Theme:
        return cls(
            name=d["name"],
            display_name=d.get("display_name", d["name"]),
            colors=d["colors"],
            chart_palette=tuple(d.get("chart_palette") or _derive_chart_palette(d["colors"])),
            typography=Typography.from_dict(d.get("typography", {})),
            description=d.get("description", ""),
            use_cases=tuple(d.get("use_cases", ())),
            builtin=d.get("builtin", False),
        )


def _derive_chart_palette(colors: Mapping[str, str]) -> tuple[str, ...]:
    keys = ("primary", "secondary", "accent", "muted_foreground", "foreground")
    return tuple(colors[k] for k in keys if k in colors)


def _builtin(name: str, display_name: str, *, primary: str, secondary: str,
             accent: str, foreground: str, surface: str,
             chart_palette: tuple[str, ...], font_family: str,
             heading_sizes: tuple[str, ...], description: str,
             use_cases: tuple[str, ...]) -> Theme:
    colors = generate_palette(primary, "#ffffff")
    colors.update(
        secondary=secondary,
        accent=accent,
        foreground=foreground,
        surface=surface,
        text=foreground,
        **_CHART_FURNITURE,
    )
    return Theme(
        name=name,
        display_name=display_name,
        colors=colors,
        chart_palette=chart_palette,
        typography=Typography(font_family, heading_sizes),
        description=description,
        use_cases=use_cases,
        builtin=True,
    )


def builtin_themes() -> list[Theme]:
    """The five themes every registry starts with."""
    return [
        _builtin(
            "corporate", "Corporate",
            primary="#2563eb", secondary="#64748b", accent="#0ea5e9",
            foreground="#1e293b", surface="#f8fafc",
            chart_palette=("#1e40af", "#0891b2", "#64748b",
                           "#0f766e", "#0369a1", "#1e3a8a"),
            font_family=_SANS, heading_sizes=("48px", "36px", "24px"),
            description="Professional theme for business presentations with a "
                        "clean, corporate aesthetic.",
            use_cases=("Business presentations", "Quarterly reports",
                       "Stakeholder meetings", "Executive briefings"),
        ),
        _builtin(
            "pitch-deck", "Pitch Deck",
            primary="#9333ea", secondary="#ec4899", accent="#f59e0b",
            foreground="#1e293b", surface="#faf5ff",
            chart_palette=("#7c3aed", "#ec4899", "#f59e0b",
                           "#8b5cf6", "#d946ef", "#fb923c"),
            font_family=_SANS, heading_sizes=("56px", "40px", "28px"),
            description="High-impact theme for startup pitches and investor "
                        "presentations.",
            use_cases=("Startup pitches", "Investor presentations",
                       "Product launches", "Demo days"),
        ),
        _builtin(
            "academic", "Academic",
            primary="#1e40af", secondary="#78716c", accent="#059669",
            foreground="#1c1917", surface="#f8fafc",
            chart_palette=("#1e3a8a", "#92400e", "#065f46",
                           "#7c2d12", "#14532d", "#1e40af"),
            font_family=_SERIF, heading_sizes=("44px", "34px", "26px"),
            description="Traditional theme for academic and research talks "
                        "with classic serif typography.",
            use_cases=("Research presentations", "Academic conferences",
                       "Thesis defenses", "Lectures"),
        ),
        _builtin(
            "workshop", "Workshop",
            primary="#0891b2", secondary="#84cc16", accent="#f97316",
            foreground="#1e293b", surface="#fef3c7",
            chart_palette=("#2563eb", "#10b981", "#f97316",
                           "#14b8a6", "#06b6d4", "#f59e0b"),
            font_family=_SANS, heading_sizes=("52px", "38px", "26px"),
            description="Friendly theme for training sessions and workshops.",
            use_cases=("Training sessions", "Workshops", "Team meetings"),
        ),
        _builtin(
            "startup", "Startup",
            primary="#0ea5e9", secondary="#8b5cf6", accent="#06b6d4",
            foreground="#1e293b", surface="#f0f9ff",
            chart_palette=("#0ea5e9", "#8b5cf6", "#06b6d4",
                           "#3b82f6", "#a855f7", "#0284c7"),
            font_family=_SANS, heading_sizes=("54px", "42px", "28px"),
            description="Energetic theme for modern tech companies.",
            use_cases=("Company all-hands", "Product roadmaps", "Tech talks"),
        ),
    ]


BUILTIN_THEME_NAMES = tuple(t.name for t in builtin_themes())


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class ThemeRegistry:
    """Thread-safe store of themes keyed by name.

    Built-ins are loaded on construction and survive :meth:`clear`;
    custom themes live until cleared or removed.
    """

    def __init__(self, include_builtins: bool = True) -> None:
        self._lock = threading.RLock()
        self._themes: dict[str, Theme] = {}
        if include_builtins:
            for theme in builtin_themes():
                self._themes[theme.name] = theme

    def __contains__(self, name: object) -> bool:
        return self.has(name)  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._themes)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._themes

    def names(self) -> list[str]:
        with self._lock:
            return list(self._themes)

    def all(self) -> list[Theme]:
        with self._lock:
            return list(self._themes.values())

    def get(self, name: str) -> Theme | None:
        with self._lock:
            return self._themes.get(name)

    def lookup(self, name: str) -> Theme:
        """Return the theme called *name* or raise :class:`ThemeNotFoundError`."""
        with self._lock:
            try:
                return self._themes[name]
            except KeyError:
                raise ThemeNotFoundError(name, list(self._themes)) from None

    def snapshot(self) -> Mapping[str, Theme]:
        """Immutable view of the current themes, safe to hand to renderers."""
        with self._lock:
            return MappingProxyType(dict(self._themes))

    def register(self, theme: Theme) -> Theme:
        _check_theme(theme)
        with self._lock:
            if theme.name in self._themes:
                raise ValueError(f"Theme {theme.name!r} already exists")
            self._themes[theme.name] = theme
        logger.info("Registered theme %s", theme.name)
        return theme

    def update(self, name: str, **changes: Any) -> Theme:
        """Replace fields of a custom theme; returns the new theme."""
        with self._lock:
            current = self.lookup(name)
            if current.builtin:
                raise ValueError(f"Built-in theme {name!r} cannot be modified")
            if "colors" in changes:
                merged = dict(current.colors)
                merged.update(changes["colors"])
                changes["colors"] = merged
            updated = replace(current, **changes)
            _check_theme(updated)
            self._themes[name] = updated
        return updated

    def remove(self, name: str) -> bool:
        with self._lock:
            theme = self._themes.get(name)
            if theme is None:
                return False
            if theme.builtin:
                raise ValueError(f"Built-in theme {name!r} cannot be removed")
            del self._themes[name]
            return True

    def clear(self) -> None:
        """Drop every custom theme; built-ins stay."""
        with self._lock:
            self._themes = {n: t for n, t in self._themes.items() if t.builtin}


def _check_theme(theme: Theme) -> None:
    if not THEME_NAME_RE.match(theme.name):
        raise ValueError(
            f"Invalid theme name {theme.name!r}: use lowercase letters, "
            "digits and single hyphens"
        )
    bad_keys = [k for k in theme.colors if not COLOR_KEY_RE.match(k)]
    if bad_keys:
        raise ValueError(f"Theme {theme.name!r} has invalid colour names: {bad_keys!r}")
    bad = [k for k, v in theme.colors.items() if not is_hex_color(v)]
    if bad:
        raise ValueError(f"Theme {theme.name!r} has invalid colours: {', '.join(sorted(bad))}")
    if not theme.chart_palette:
        raise ValueError(f"Theme {theme.name!r} has an empty chart palette")
    if not all(is_hex_color(c) for c in theme.chart_palette):
        raise ValueError(f"Theme {theme.name!r} has invalid chart palette colours")
    if not FONT_FAMILY_RE.match(theme.typography.font_family):
        raise ValueError(
            f"Theme {theme.name!r} has an invalid font family "
            f"{theme.typography.font_family!r}: use font names separated by commas"
        )
    bad_sizes = [s for s in theme.typography.heading_sizes if not CSS_SIZE_RE.match(s)]
    if bad_sizes:
        raise ValueError(f"Theme {theme.name!r} has invalid heading sizes: {bad_sizes!r}")


default_registry = ThemeRegistry()


# ---------------------------------------------------------------------------
# Custom themes
# ---------------------------------------------------------------------------

def create_custom_theme(name: str, display_name: str, primary: str, *,
                        secondary: str | None = None,
                        accent: str | None = None,
                        background: str = "#ffffff",
                        foreground: str | None = None,
                        harmony: str = "analogous",
                        description: str = "",
                        font_family: str | None = None,
                        registry: ThemeRegistry | None = None) -> Theme:
    """Build a theme from a brand colour and register it.

    Colours not given are derived from *primary* using *harmony*
    (one of ``analogous``, ``complementary``, ``triadic``,
    ``monochromatic``). Names that collide with a built-in theme are
    rejected.
    """
    registry = registry if registry is not None else default_registry

    if name in BUILTIN_THEME_NAMES:
        raise ValueError(f"Theme name {name!r} conflicts with a built-in theme")
    if harmony not in HARMONIES:
        raise ValueError(f"Unknown colour harmony {harmony!r}")
    for label, value in (("primary", primary), ("secondary", secondary),
                         ("accent", accent), ("background", background),
                         ("foreground", foreground)):
        if value is not None and not is_hex_color(value):
            raise ValueError(f"{label} must be a #RRGGBB colour, got {value!r}")

    colors = generate_palette(primary, background, harmony)
    if secondary:
        colors["secondary"] = secondary
    if accent:
        colors["accent"] = accent
    if foreground:
        colors["foreground"] = foreground
    colors["text"] = colors["foreground"]
    colors["surface"] = colors["muted"]
    colors.update(_CHART_FURNITURE)

    theme = Theme(
        name=name,
        display_name=display_name,
        colors=colors,
        chart_palette=_derive_chart_palette(colors),
        typography=Typography(font_family or _SANS),
        description=description,
    )
    return registry.register(theme)
