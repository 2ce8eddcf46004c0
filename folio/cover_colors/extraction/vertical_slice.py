# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Vertical-slice scoring.

Covers are usually composed in vertical bands (spine art, a central
illustration, a flat margin). Colors are counted per band, then ranked by
area, by how "primary" they look and by how many bands they span, so a
color that runs across the whole cover beats one confined to a corner.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

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
from folio.cover_colors.extraction.pixels import quantize_key, working_grid

logger = logging.getLogger(__name__)

WORKING_SIZE = (150, 200)
SLICE_COUNT = 5
QUANTIZE_STEP = 32
MIN_DISTANCE = 60
MAX_COLORS = 4

BucketKey = Tuple[int, int, int]


@dataclass
class ColorBucket:
    """Pixels that fell into one coarse quantization cell."""
    count: int = 0
    r_sum: int = 0
    g_sum: int = 0
    b_sum: int = 0
    score: float = 0.0
    slice_count: int = 0

    def add(self, r: int, g: int, b: int, score: float) -> None:
        self.count += 1
        self.r_sum += r
        self.g_sum += g
        self.b_sum += b
        self.score = max(self.score, score)

    def merge(self, other: 'ColorBucket') -> None:
        self.count += other.count
        self.r_sum += other.r_sum
        self.g_sum += other.g_sum
        self.b_sum += other.b_sum
        self.score = max(self.score, other.score)
        self.slice_count += 1

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (
            round_half_up(self.r_sum / self.count),
            round_half_up(self.g_sum / self.count),
            round_half_up(self.b_sum / self.count),
        )

    @property
    def final_score(self) -> float:
        return self.count * (1 + self.score / 100) * (1 + self.slice_count / SLICE_COUNT)


def primary_color_score(r: int, g: int, b: int) -> float:
    """Score 0-100 favoring saturated colors of middling brightness."""
    level = brightness(r, g, b)
    brightness_score = 1.0 if 50 < level < 220 else 0.5
    return saturation(r, g, b) * brightness_score * 100


def slice_bounds(width: int, slice_count: int = SLICE_COUNT) -> List[Tuple[int, int]]:
    """Column ranges of equal-width slices; the last absorbs the remainder."""
    slice_width = width // slice_count
    bounds = []
    for index in range(slice_count):
        start = index * slice_width
        end = width if index == slice_count - 1 else start + slice_width
        bounds.append((start, end))
    return bounds


def _bucket_slice(pixels, height: int, start: int, end: int) -> Dict[BucketKey, ColorBucket]:
    buckets: Dict[BucketKey, ColorBucket] = {}
    for y in range(height):
        for x in range(start, end):
            r, g, b = pixels[x, y][:3]
            if is_near_white(r, g, b) or is_near_black(r, g, b):
                continue
            key = quantize_key(r, g, b, QUANTIZE_STEP)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = ColorBucket()
            bucket.add(r, g, b, primary_color_score(r, g, b))
    return buckets


def extract_vertical_slice(image: Image.Image) -> List[str]:
    """Extract up to four colors that hold up across vertical cover slices.

    Args:
        image: RGB image.

    Returns:
        Up to four hex colors with pairwise RGB distance above 60, or an
        empty list on failure.
    """
    try:
        resized = working_grid(image, WORKING_SIZE)
        width, height = resized.size
        pixels = resized.load()

        combined: Dict[BucketKey, ColorBucket] = {}
        for start, end in slice_bounds(width):
            for key, bucket in _bucket_slice(pixels, height, start, end).items():
                target = combined.get(key)
                if target is None:
                    target = combined[key] = ColorBucket()
                target.merge(bucket)

        ranked = sorted(combined.values(), key=lambda b: b.final_score, reverse=True)

        selected: List[Tuple[int, int, int]] = []
        for bucket in ranked:
            if len(selected) >= MAX_COLORS:
                break
            color = bucket.rgb
            if all(rgb_distance(existing, color) > MIN_DISTANCE for existing in selected):
                selected.append(color)

        logger.debug(f"Vertical-slice scored {len(combined)} buckets, kept {len(selected)}")
        return [rgb_to_hex(*c) for c in selected]
    except Exception as e:
        logger.warning(f"Vertical-slice color extraction failed: {e}")
        return []
