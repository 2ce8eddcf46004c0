# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Palette extraction strategies.

Each strategy maps a decoded RGB cover image to up to four hex colors,
most dominant first, and returns an empty list instead of raising:
- popularity: median-cut swatches ranked by coverage
- vertical-slice: colors that persist across five vertical bands
- area-weighted: large contiguous regions, title text suppressed
- perceptual: LAB mean-shift clustering with accent detection
"""

from typing import Callable, Dict, List

from PIL import Image

from folio.cover_colors.models import ExtractionMethod
from folio.cover_colors.extraction.popularity import extract_popularity
from folio.cover_colors.extraction.vertical_slice import extract_vertical_slice
from folio.cover_colors.extraction.area_weighted import extract_area_weighted
from folio.cover_colors.extraction.perceptual import extract_perceptual

Strategy = Callable[[Image.Image], List[str]]

STRATEGIES: Dict[ExtractionMethod, Strategy] = {
    ExtractionMethod.POPULARITY: extract_popularity,
    ExtractionMethod.VERTICAL_SLICE: extract_vertical_slice,
    ExtractionMethod.AREA_WEIGHTED: extract_area_weighted,
    ExtractionMethod.PERCEPTUAL: extract_perceptual,
}


def get_strategy(method) -> Strategy:
    """Return the extraction function for a method name or enum member."""
    return STRATEGIES[ExtractionMethod.parse(method)]


__all__ = [
    'Strategy',
    'STRATEGIES',
    'get_strategy',
    'extract_popularity',
    'extract_vertical_slice',
    'extract_area_weighted',
    'extract_perceptual',
]
