# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Palette storage format for media records.

A palette is persisted on its media record as a JSON array of up to four
'#rrggbb' strings, most dominant color first. Stored values are read back
tolerantly: older rows may hold 'rgb(...)' strings, malformed JSON or
nothing at all.
"""

import json
import logging
import re
from typing import Any, Iterable, List, Optional

from folio.cover_colors.color_science import rgb_to_hex

logger = logging.getLogger(__name__)

MAX_PALETTE_SIZE = 4

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{6})$')
_RGB_RE = re.compile(r'^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)')


def normalize_to_hex(color: Any) -> Optional[str]:
    """Normalize a color value to lowercase '#rrggbb'.

    Handles '#RRGGBB', 'RRGGBB', 'rgb(r, g, b)' and 'rgba(r, g, b, a)'.
    Channel values above 255 are clamped.

    Args:
        color: Color value of any type.

    Returns:
        Hex color string, or None if the value is not a recognizable color.
    """
    if not color or not isinstance(color, str):
        return None

    color = color.strip()
    match = _HEX_RE.match(color)
    if match:
        return '#' + match.group(1).lower()

    match = _RGB_RE.match(color)
    if match:
        r, g, b = (int(match.group(i)) for i in range(1, 4))
        return rgb_to_hex(r, g, b)

    return None


def normalize_palette(colors: Optional[Iterable[Any]]) -> List[str]:
    """Normalize every entry of a palette, dropping unrecognized values."""
    if not colors:
        return []
    result = []
    for color in colors:
        hex_color = normalize_to_hex(color)
        if hex_color is not None:
            result.append(hex_color)
    return result


def palette_to_json(colors: Optional[Iterable[Any]]) -> str:
    """Serialize a palette for storage on a media record.

    Args:
        colors: Palette entries, most dominant first.

    Returns:
        JSON array string, e.g. '["#224466","#c0392b"]'.
    """
    palette = normalize_palette(colors)[:MAX_PALETTE_SIZE]
    return json.dumps(palette, separators=(',', ':'))


def parse_palette_json(value: Any) -> List[str]:
    """Read a stored palette back into a list of hex colors.

    Args:
        value: JSON array string, an already-decoded list, or None.

    Returns:
        List of valid hex colors. Empty when the value is missing or invalid.
    """
    if value is None:
        return []

    if isinstance(value, (bytes, bytearray)):
        value = value.decode('utf-8', errors='replace')

    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            logger.debug(f"Ignoring malformed palette JSON: {e}")
            return []

    if not isinstance(value, list):
        logger.debug(f"Ignoring palette of unexpected type {type(value).__name__}")
        return []

    return normalize_palette(value)
