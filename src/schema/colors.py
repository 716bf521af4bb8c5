"""Colour helpers — hex/RGB/HSL conversion and palette harmonies.

Used by the theme registry to derive a full palette from a single brand
colour. HSL components are integers (hue 0-359, saturation and lightness
0-100) so derived palettes are stable across runs.
"""

from __future__ import annotations

import colorsys
import re

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

HARMONIES = ("analogous", "complementary", "triadic", "monochromatic")

_LIGHT_FOREGROUND = "#0f172a"
_DARK_FOREGROUND = "#f8fafc"


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value or ""))


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert ``#RRGGBB`` to an ``(r, g, b)`` tuple."""
    hex_color = hex_color.lstrip("#")
    return (
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


def rgb_to_hex(r: float, g: float, b: float) -> str:
    def _channel(n: float) -> str:
        return f"{max(0, min(255, round(n))):02x}"
    return f"#{_channel(r)}{_channel(g)}{_channel(b)}"


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[int, int, int]:
    hue, lightness, sat = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return round(hue * 360) % 360, round(sat * 100), round(lightness * 100)


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360, l / 100, s / 100)
    return round(r * 255), round(g * 255), round(b * 255)


def hex_to_hsl(hex_color: str) -> tuple[int, int, int]:
    return rgb_to_hsl(*hex_to_rgb(hex_color))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance in ``[0, 1]``."""
    def _linear(channel: int) -> float:
        c = channel / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (_linear(c) for c in hex_to_rgb(hex_color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def is_light(hex_color: str) -> bool:
    return relative_luminance(hex_color) > 0.5


# ---------------------------------------------------------------------------
# Harmonies
# ---------------------------------------------------------------------------

def rotate_hue(hex_color: str, degrees: int) -> str:
    h, s, l = hex_to_hsl(hex_color)
    return hsl_to_hex((h + degrees) % 360, s, l)


def shift_lightness(hex_color: str, amount: int) -> str:
    h, s, l = hex_to_hsl(hex_color)
    return hsl_to_hex(h, s, max(0, min(100, l + amount)))


def harmony_colors(primary: str, harmony: str = "analogous") -> tuple[str, str]:
    """Return ``(secondary, accent)`` derived from *primary*.

    analogous      secondary 30° counter-clockwise, accent the complement
    complementary  secondary the complement, accent 30° clockwise
    triadic        secondary +120°, accent +240°
    monochromatic  secondary 10 points darker, accent 20 points lighter
    """
    if harmony == "complementary":
        return rotate_hue(primary, 180), rotate_hue(primary, 30)
    if harmony == "triadic":
        return rotate_hue(primary, 120), rotate_hue(primary, 240)
    if harmony == "monochromatic":
        return shift_lightness(primary, -10), shift_lightness(primary, 20)
    if harmony != "analogous":
        raise ValueError(
            f"Unknown colour harmony {harmony!r}; expected one of {', '.join(HARMONIES)}"
        )
    return rotate_hue(primary, -30), rotate_hue(primary, 180)


def generate_palette(primary: str, background: str = "#ffffff",
                     harmony: str = "analogous") -> dict[str, str]:
    """Derive a complete colour table from a primary and background colour.

    The foreground is picked for contrast against the background; muted,
    muted-foreground and border tones are desaturated variants of the
    primary hue.
    """
    secondary, accent = harmony_colors(primary, harmony)
    light = is_light(background)
    hue = hex_to_hsl(primary)[0]

    return {
        "primary": primary,
        "secondary": secondary,
        "accent": accent,
        "background": background,
        "foreground": _LIGHT_FOREGROUND if light else _DARK_FOREGROUND,
        "muted": hsl_to_hex(hue, 10, 95 if light else 15),
        "muted_foreground": hsl_to_hex(hue, 20, 45 if light else 65),
        "border": hsl_to_hex(hue, 15, 88 if light else 25),
    }
