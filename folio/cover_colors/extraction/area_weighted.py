# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Area-weighted contiguity scoring.

Title lettering is the usual way a palette goes wrong: it is bright, highly
saturated and covers a surprising number of pixels, but never as one solid
region. This strategy blurs the cover slightly, rewards colors whose pixels
touch each other and penalizes bright saturated colors, so large flat
regions win over text.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from PIL import Image

from folio.cover_colors.color_science import (
    brightness,
    is_near_black,
    is_near_white,
    rgb_distance,
    rgb_to_hex,
    round_half_up,
    saturation,
)
from folio.cover_colors.extraction.pixels import (
    count_connected,
    iter_pixels,
    quantize_key,
    working_grid,
)

logger = logging.getLogger(__name__)

WORKING_SIZE = (100, 150)
BLUR_RADIUS = 1.5
QUANTIZE_STEP = 48
MIN_DISTANCE = 50
MAX_COLORS = 4


@dataclass
class RegionBucket:
    """Pixels of one quantization cell and where they sit on the grid."""
    count: int = 0
    r_sum: int = 0
    g_sum: int = 0
    b_sum: int = 0
    positions: Set[int] = field(default_factory=set)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (
            round_half_up(self.r_sum / self.count),
            round_half_up(self.g_sum / self.count),
            round_half_up(self.b_sum / self.count),
        )


def saturation_penalty(r: int, g: int, b: int) -> float:
    """Down-weight bright, highly saturated colors typical of title text."""
    sat = saturation(r, g, b)
    level = brightness(r, g, b)
    if sat > 0.8 and level > 150:
        return 0.3
    if sat > 0.7 and level > 180:
        return 0.5
    return 1.0


def contiguity(bucket: RegionBucket, width: int, height: int) -> float:
    """Fraction of a bucket's pixels that touch another pixel of the bucket."""
    if bucket.count < 2:
        return 0.0
    return count_connected(bucket.positions, width, height) / bucket.count


def extract_area_weighted(image: Image.Image) -> List[str]:
    """Extract up to four colors from large contiguous regions of a cover.

    Args:
        image: RGB image.

    Returns:
        Up to four hex colors with pairwise RGB distance above 50, or an
        empty list on failure.
    """
    try:
        grid = working_grid(image, WORKING_SIZE, blur_radius=BLUR_RADIUS)
        width, height = grid.size

        buckets: Dict[Tuple[int, int, int], RegionBucket] = {}
        for x, y, (r, g, b) in iter_pixels(grid):
            if is_near_white(r, g, b) or is_near_black(r, g, b):
                continue
            key = quantize_key(r, g, b, QUANTIZE_STEP)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = RegionBucket()
            bucket.count += 1
            bucket.r_sum += r
            bucket.g_sum += g
            bucket.b_sum += b
            bucket.positions.add(y * width + x)

        scored = []
        for bucket in buckets.values():
            color = bucket.rgb
            score = bucket.count * (0.5 + contiguity(bucket, width, height)) * saturation_penalty(*color)
            scored.append((score, color))
        scored.sort(key=lambda entry: entry[0], reverse=True)

        selected: List[Tuple[int, int, int]] = []
        for _, color in scored:
            if len(selected) >= MAX_COLORS:
                break
            if all(rgb_distance(existing, color) > MIN_DISTANCE for existing in selected):
                selected.append(color)

        return [rgb_to_hex(*c) for c in selected]
    except Exception as e:
        logger.warning(f"Area-weighted color extraction failed: {e}")
        return []
