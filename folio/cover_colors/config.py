# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Configuration for cover color extraction and hero gradients.

Settings are owned and persisted by the application; this module only
turns them into an explicit value that is passed to the extractor and the
gradient synthesizer.
"""

import logging
import math
from dataclasses import dataclass, fields as dataclass_fields, asdict
from typing import Any, Dict

from folio.cover_colors.models import ExtractionMethod, GradientStyle

logger = logging.getLogger(__name__)

MIN_GRADIENT_POINTS = 3
MAX_GRADIENT_POINTS = 10
DEFAULT_GRADIENT_POINTS = 6

# Application settings keys -> ColorConfig fields
SETTINGS_KEYS = {
    'heroColorExtractionMethod': 'extraction_method',
    'heroGradientStyle': 'gradient_style',
    'heroGradientPoints': 'gradient_points',
}


def clamp_point_count(value: Any) -> int:
    """Clamp a gradient point count into [3, 10].

    Missing, zero, NaN or non-numeric values give the default of 6.
    Infinities clamp like any other out-of-range value.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_GRADIENT_POINTS
    if isinstance(value, int):
        count = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_GRADIENT_POINTS
        if math.isnan(number):
            return DEFAULT_GRADIENT_POINTS
        if math.isinf(number):
            return MAX_GRADIENT_POINTS if number > 0 else MIN_GRADIENT_POINTS
        count = int(round(number))
    if count == 0:
        return DEFAULT_GRADIENT_POINTS
    return max(MIN_GRADIENT_POINTS, min(MAX_GRADIENT_POINTS, count))


@dataclass
class ColorConfig:
    """Configuration for cover palettes and hero backgrounds.

    Attributes:
        extraction_method: Palette algorithm used at ingestion time.
            Options: 'popularity', 'vertical-slice', 'area-weighted',
            'perceptual'. Default: 'popularity'.
        gradient_style: Background layout. Options: 'radial', 'linear',
            'inverted-radial', 'horizontal', 'vertical', 'multi-point'.
            Default: 'multi-point'.
        gradient_points: Number of layers for the multi-point style,
            clamped to 3-10. Default: 6.
    """
    extraction_method: str = ExtractionMethod.POPULARITY.value
    gradient_style: str = GradientStyle.MULTI_POINT.value
    gradient_points: int = DEFAULT_GRADIENT_POINTS

    @property
    def method(self) -> ExtractionMethod:
        return ExtractionMethod.parse(self.extraction_method)

    @property
    def style(self) -> GradientStyle:
        return GradientStyle.parse(self.gradient_style)

    @property
    def points(self) -> int:
        return clamp_point_count(self.gradient_points)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary.

        Returns:
            Dictionary representation of the config.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ColorConfig':
        """Create a ColorConfig from a dictionary.

        Unknown keys are ignored. Missing keys use defaults.

        Args:
            data: Dictionary with config values.

        Returns:
            New ColorConfig instance.
        """
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered_data)

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'ColorConfig':
        """Create a ColorConfig from the application's persisted settings.

        Reads the heroColorExtractionMethod, heroGradientStyle and
        heroGradientPoints keys. Empty values use defaults.
        """
        data = {}
        for key, field_name in SETTINGS_KEYS.items():
            value = settings.get(key)
            if value not in (None, ''):
                data[field_name] = value
        logger.debug(f"Color settings resolved: {data}")
        return cls.from_dict(data)
