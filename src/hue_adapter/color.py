"""Conversion between the bridge's hue/sat/bri integers and hex RGB colors.

The bridge encodes color as hue in [0, 65535] and saturation/brightness in
[0, 255]. Locally a light's color is a ``#rrggbb`` string. The conversion is
lossy in both directions: RGB channels are rounded to 8 bits, and the inverse
truncates each component, so a round trip is close but not exact.
"""

import colorsys
import math
import re

HUE_SCALE = 65535
SAT_SCALE = 255
BRI_SCALE = 255

# Absorbs float error in products like 204 / 255 * 255 before truncating
_EPSILON = 1e-9

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def normalize_hex(color: str) -> str:
    """Return ``color`` in canonical ``#rrggbb`` lowercase form.

    Args:
        color: A hex color, with or without the leading '#', 3 or 6 digits

    Returns:
        The canonical hex string

    Raises:
        ValueError: If the string is not a hex color
    """
    if not isinstance(color, str):
        raise ValueError(f"Not a hex color: {color!r}")
    match = _HEX_RE.match(color.strip())
    if match is None:
        raise ValueError(f"Not a hex color: {color!r}")

    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return "#" + digits


def _truncate(value: float) -> int:
    return int(math.floor(value + _EPSILON))


def bridge_to_hex(hue: int, sat: int, bri: int) -> str:
    """Convert a bridge hue/sat/bri triple to a ``#rrggbb`` string."""
    h = hue / HUE_SCALE * 360
    s = sat / SAT_SCALE * 100
    v = bri / BRI_SCALE * 100

    r, g, b = colorsys.hsv_to_rgb(h / 360, s / 100, v / 100)
    return "#{:02x}{:02x}{:02x}".format(
        round(r * 255), round(g * 255), round(b * 255)
    )


def hex_to_bridge(color: str) -> dict[str, int]:
    """Convert a hex color to the bridge's ``{"hue", "sat", "bri"}`` encoding.

    Each component is truncated independently, so the result can be one unit
    below what :func:`bridge_to_hex` was given.

    Raises:
        ValueError: If ``color`` is not a hex color
    """
    digits = normalize_hex(color)[1:]
    r, g, b = (int(digits[i : i + 2], 16) / 255 for i in (0, 2, 4))

    h, s, v = colorsys.rgb_to_hsv(r, g, b)
    return {
        "hue": _truncate(h * HUE_SCALE),
        "sat": _truncate(s * SAT_SCALE),
        "bri": _truncate(v * BRI_SCALE),
    }
