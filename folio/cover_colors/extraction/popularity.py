# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Popularity quantization: the default palette extractor.

Median-cut quantizes a thumbnail and walks the resulting swatches in order
of pixel coverage, skipping washed-out and duplicate colors.
"""

import logging
from typing import List

from PIL import Image

from folio.cover_colors.color_science import (
    is_near_black,
    is_near_white,
    rgb_distance,
    rgb_to_hex,
)

logger = logging.getLogger(__name__)

THUMBNAIL_SIZE = (200, 200)
CANDIDATE_COUNT = 8
MERGE_DISTANCE = 40
MAX_NEAR_BLACK_CANDIDATES = 2
MAX_COLORS = 4


def coverage_swatches(image: Image.Image, count: int = CANDIDATE_COUNT) -> List[tuple]:
    """Median-cut quantize an image and rank swatches by coverage.

    Args:
        image: RGB image.
        count: Number of swatches to quantize to.

    Returns:
        List of (r, g, b) tuples, most pixels first. Ties keep palette order.
    """
    thumb = image.convert('RGB') if image.mode != 'RGB' else image.copy()
    thumb.thumbnail(THUMBNAIL_SIZE)
    quantized = thumb.quantize(colors=count, method=Image.Quantize.MEDIANCUT)

    flat_palette = quantized.getpalette() or []
    used = quantized.getcolors(maxcolors=256) or []
    used.sort(key=lambda entry: (-entry[0], entry[1]))

    swatches = []
    for _, index in used:
        r, g, b = flat_palette[index * 3:index * 3 + 3]
        swatches.append((r, g, b))
    return swatches


def extract_popularity(image: Image.Image) -> List[str]:
    """Extract up to four colors ranked by how much of the cover they cover.

    Near-white swatches are always dropped. Near-black swatches are kept
    unless more than two of the candidates are near-black, in which case the
    cover is dark overall and black would drown the gradient. A swatch
    closer than 40 (RGB distance) to an accepted color is treated as a
    duplicate.

    Args:
        image: RGB image.

    Returns:
        Up to four hex colors, or an empty list on failure.
    """
    try:
        swatches = coverage_swatches(image)
        if not swatches:
            return []

        near_black_count = sum(1 for c in swatches if is_near_black(*c))
        include_near_black = near_black_count <= MAX_NEAR_BLACK_CANDIDATES

        accepted = []
        for color in swatches:
            if is_near_white(*color):
                continue
            if not include_near_black and is_near_black(*color):
                continue
            if any(rgb_distance(existing, color) < MERGE_DISTANCE for existing in accepted):
                continue
            accepted.append(color)
            if len(accepted) >= MAX_COLORS:
                break

        return [rgb_to_hex(*c) for c in accepted]
    except Exception as e:
        logger.warning(f"Popularity color extraction failed: {e}")
        return []
