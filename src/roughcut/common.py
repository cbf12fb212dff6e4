"""roughcut.common — shared color and font utilities.

Contains: color parsing (hex, rgb(), rgba()), palette resolution and font
loading for labels and text shapes.
"""

import re
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont


# ── Font paths ─────────────────────────────────────────────────────
# Inter preferred for clean labels, DejaVu Sans as fallback.

FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]

RGBA = tuple[int, int, int, int]

_RGB_FUNC = re.compile(
    r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)$"
)

# Named colors used as defaults across the package.
NAMED_COLORS = {
    "transparent": (0, 0, 0, 0),
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
}


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def _is_hex(value: str) -> bool:
    body = value.lstrip("#")
    return len(body) in (6, 8) and all(c in "0123456789abcdefABCDEF" for c in body)


def parse_color(value) -> RGBA:
    """Parse a color into an (R, G, B, A) tuple with 0-255 channels.

    Accepts '#RRGGBB', '#RRGGBBAA', 'rgb(r, g, b)', 'rgba(r, g, b, a)' with
    a in 0..1, a few named colors, or an RGB/RGBA sequence.

    Raises:
        ValueError: Unrecognized color.
    """
    if isinstance(value, (tuple, list)):
        if len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]), 255)
        if len(value) == 4:
            return tuple(int(c) for c in value)
        raise ValueError(f"Color tuple must have 3 or 4 channels, got {value!r}")
    if not isinstance(value, str):
        raise ValueError(f"Unknown color: {value!r}")

    text = value.strip()
    if text.lower() in NAMED_COLORS:
        return NAMED_COLORS[text.lower()]
    if _is_hex(text):
        body = text.lstrip("#")
        r, g, b = parse_hex_color(body[:6])
        a = int(body[6:8], 16) if len(body) == 8 else 255
        return (r, g, b, a)
    match = _RGB_FUNC.match(text)
    if match:
        r, g, b = (min(255, int(match.group(i))) for i in (1, 2, 3))
        alpha = match.group(4)
        a = 255 if alpha is None else round(max(0.0, min(1.0, float(alpha))) * 255)
        return (r, g, b, a)
    raise ValueError(f"Unknown color: '{value}'. Not hex, rgb() or rgba().")


def resolve_color(value, palette: dict[str, RGBA]) -> RGBA:
    """Resolve a color reference — palette key name or inline color.

    Palette keys are tried first, then the value is parsed as an inline
    color. Raises ValueError when neither works.
    """
    if isinstance(value, str) and value in palette:
        return palette[value]
    try:
        return parse_color(value)
    except ValueError:
        raise ValueError(
            f"Unknown color: '{value}'. Not in palette and not a color value."
        ) from None


def with_alpha(color: RGBA, opacity: float) -> RGBA:
    """Scale a color's alpha channel by opacity (0..1)."""
    r, g, b, a = color
    return (r, g, b, round(a * max(0.0, min(1.0, opacity))))


# ── Font loading ───────────────────────────────────────────────────

@lru_cache(maxsize=64)
def load_font(
    size: int, family: str | None = None,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a font at the given size.

    *family* may be a font file name or path that FreeType can find
    ("DejaVuSans-Bold.ttf"). Falls back to Inter, then DejaVu Sans, then
    Pillow's built-in scalable default.
    """
    size = max(1, round(size))
    if family:
        try:
            return ImageFont.truetype(family, size=size)
        except OSError:
            pass
    for font_path in FONT_PATHS:
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size, index=0)
            except (OSError, IndexError):
                continue
    # Last resort: Pillow default font.
    return ImageFont.load_default(size=size)
