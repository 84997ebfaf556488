"""Conversions between RGB triples and the HSL colour model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HSL:
    """A colour as hue, saturation and lightness, each in the range 0 to 1."""

    h: float
    s: float
    l: float

    def rgba(self) -> tuple[int, int, int, int]:
        """Return 16-bit red, green, blue and alpha values (alpha is opaque)."""
        r, g, b = hsl_to_rgb(self.h, self.s, self.l)
        return r * 0x101, g * 0x101, b * 0x101, 0xFFFF


def _check_channel(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be in the range 0..255, got {value}")


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit RGB channels to an (h, s, l) triple."""
    for name, value in (("r", r), ("g", g), ("b", b)):
        _check_channel(name, value)
    f_r, f_g, f_b = r / 255, g / 255, b / 255
    high = max(f_r, f_g, f_b)
    low = min(f_r, f_g, f_b)
    l = (high + low) / 2
    if high == low:
        return 0.0, 0.0, l

    d = high - low
    s = d / (2.0 - high - low) if l > 0.5 else d / (high + low)
    if high == f_r:
        h = (f_g - f_b) / d
        if f_g < f_b:
            h += 6
    elif high == f_g:
        h = (f_b - f_r) / d + 2
    else:
        h = (f_r - f_g) / d + 4
    return h / 6, s, l


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1.0 / 6:
        return p + (q - p) * 6 * t
    if t < 0.5:
        return q
    if t < 2.0 / 3:
        return p + (q - p) * (2.0 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Convert an (h, s, l) triple to 8-bit RGB channels."""
    if s == 0:
        f_r = f_g = f_b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - s * l
        p = 2 * l - q
        f_r = _hue_to_rgb(p, q, h + 1.0 / 3)
        f_g = _hue_to_rgb(p, q, h)
        f_b = _hue_to_rgb(p, q, h - 1.0 / 3)
    return int(f_r * 255 + 0.5), int(f_g * 255 + 0.5), int(f_b * 255 + 0.5)


def hsl_model(color: Any) -> HSL:
    """Convert a colour to HSL.

    Accepts an HSL (returned unchanged), any object with an ``rgba()`` method
    returning 16-bit channels, or a sequence of three or four 16-bit channels.
    """
    if isinstance(color, HSL):
        return color
    rgba = getattr(color, "rgba", None)
    channels = tuple(rgba()) if callable(rgba) else tuple(color)
    if len(channels) not in (3, 4):
        raise ValueError("a colour needs three or four channels")
    r, g, b = ((int(value) >> 8) & 0xFF for value in channels[:3])
    return HSL(*rgb_to_hsl(r, g, b))