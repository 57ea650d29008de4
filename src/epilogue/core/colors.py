"""Color and range helpers shared by the atmosphere layers."""

import re
from typing import Optional

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def parse_hex(color: Optional[str]) -> Optional[tuple[int, int, int]]:
    """Parse a ``#rgb`` or ``#rrggbb`` string into an RGB triple.

    Returns:
        The (r, g, b) tuple, or None if the string is not a hex color.
    """
    if not color:
        return None
    match = _HEX_PATTERN.match(color.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def hex_to_rgba(color: Optional[str], opacity: float) -> str:
    """Convert a hex color plus opacity into a CSS ``rgba()`` paint.

    Colors that are not hex (``transparent``, ``rgba(...)``) cannot carry an
    extra alpha and resolve to ``transparent``.
    """
    rgb = parse_hex(color)
    if rgb is None:
        return "transparent"
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {clamp(opacity, 0.0, 1.0):g})"
