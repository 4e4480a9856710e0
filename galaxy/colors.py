from __future__ import annotations

from typing import Sequence, Tuple, Union

from galaxy.errors import GalaxyConfigError

RGB = Tuple[float, float, float]
ColorLike = Union[str, Sequence[float]]


def lerp(color_a: RGB, color_b: RGB, t: float) -> RGB:
    """Blend two colors channel by channel. ``t`` is not clamped.

    Written as ``a * (1 - t) + b * t`` so both endpoints come back exactly.
    """
    s = 1.0 - t
    return (
        color_a[0] * s + color_b[0] * t,
        color_a[1] * s + color_b[1] * t,
        color_a[2] * s + color_b[2] * t,
    )


def _parse_hex(text: str) -> RGB:
    digits = text[1:] if text.startswith("#") else text
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise GalaxyConfigError(f"Invalid hex color '{text}'.")
    try:
        value = int(digits, 16)
    except ValueError as exc:
        raise GalaxyConfigError(f"Invalid hex color '{text}'.") from exc
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def parse_color(value: ColorLike) -> RGB:
    """Normalize ``#rrggbb``, ``#rgb`` or an RGB float triple."""
    if isinstance(value, str):
        return _parse_hex(value.strip())
    channels = tuple(float(c) for c in value)
    if len(channels) != 3:
        raise GalaxyConfigError(f"Expected 3 color channels, got {len(channels)}.")
    if any(c < 0.0 or c > 1.0 for c in channels):
        raise GalaxyConfigError(f"Color channels must lie in [0, 1], got {channels}.")
    return channels  # type: ignore[return-value]


def to_hex(color: RGB) -> str:
    return "#" + "".join(f"{int(round(c * 255)):02x}" for c in color)
