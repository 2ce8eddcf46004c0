# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Pixel-grid helpers shared by the extraction strategies."""

from typing import Iterable, Optional, Set, Tuple

from PIL import Image, ImageFilter

from folio.cover_colors.color_science import round_half_up


def working_grid(
    image: Image.Image,
    size: Tuple[int, int],
    blur_radius: Optional[float] = None,
) -> Image.Image:
    """Resample an image onto a strategy's fixed working grid.

    The aspect ratio is not preserved: every cover is stretched onto the
    same grid so thresholds expressed in pixel counts stay comparable.

    Args:
        image: Decoded image in any mode.
        size: Target (width, height).
        blur_radius: Optional Gaussian blur applied after resizing.

    Returns:
        New RGB image of exactly ``size``.
    """
    if image.mode != 'RGB':
        image = image.convert('RGB')
    resized = image.resize(size, Image.Resampling.BILINEAR)
    if blur_radius:
        resized = resized.filter(ImageFilter.GaussianBlur(blur_radius))
    return resized


def quantize_key(r: int, g: int, b: int, step: int) -> Tuple[int, int, int]:
    """Snap each channel to the nearest multiple of ``step``, halves up."""
    return (
        round_half_up(r / step) * step,
        round_half_up(g / step) * step,
        round_half_up(b / step) * step,
    )


def count_neighbor_links(positions: Set[int], width: int, height: int) -> int:
    """Count same-set 4-neighbor links, each pair counted from both sides.

    Positions are row-major indexes (y * width + x). Neighbors never wrap
    across row boundaries.
    """
    links = 0
    for pos in positions:
        x = pos % width
        if x > 0 and pos - 1 in positions:
            links += 1
        if x < width - 1 and pos + 1 in positions:
            links += 1
        if pos >= width and pos - width in positions:
            links += 1
        if pos + width < width * height and pos + width in positions:
            links += 1
    return links


def count_connected(positions: Set[int], width: int, height: int) -> int:
    """Count positions that have at least one same-set 4-neighbor."""
    connected = 0
    for pos in positions:
        x = pos % width
        if (
            (x > 0 and pos - 1 in positions)
            or (x < width - 1 and pos + 1 in positions)
            or (pos >= width and pos - width in positions)
            or (pos + width < width * height and pos + width in positions)
        ):
            connected += 1
    return connected


def iter_pixels(image: Image.Image) -> Iterable[Tuple[int, int, Tuple[int, int, int]]]:
    """Yield (x, y, (r, g, b)) for every pixel in row-major order."""
    width, height = image.size
    pixels = image.load()
    for y in range(height):
        for x in range(width):
            yield x, y, pixels[x, y][:3]
