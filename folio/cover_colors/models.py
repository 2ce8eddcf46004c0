# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Data models for cover color extraction and gradient synthesis."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class ExtractionMethod(str, Enum):
    """Palette extraction algorithm used when a cover is ingested."""

    POPULARITY = 'popularity'
    VERTICAL_SLICE = 'vertical-slice'
    AREA_WEIGHTED = 'area-weighted'
    PERCEPTUAL = 'perceptual'

    @classmethod
    def parse(cls, value: Any) -> 'ExtractionMethod':
        """Resolve a method name, falling back to popularity.

        Accepts enum members, canonical names and the legacy 'mmcq' name
        stored by older settings files.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name == 'mmcq':
                return cls.POPULARITY
            for member in cls:
                if member.value == name:
                    return member
        if value is not None:
            logger.warning(f"Unknown extraction method {value!r}, using popularity")
        return cls.POPULARITY


class GradientStyle(str, Enum):
    """Layout of the ambient background built from a palette."""

    RADIAL = 'radial'
    LINEAR = 'linear'
    INVERTED_RADIAL = 'inverted-radial'
    HORIZONTAL = 'horizontal'
    VERTICAL = 'vertical'
    MULTI_POINT = 'multi-point'

    @classmethod
    def parse(cls, value: Any) -> 'GradientStyle':
        """Resolve a style name. Unknown names render as radial."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            for member in cls:
                if member.value == name:
                    return member
        if value is not None:
            logger.warning(f"Unknown gradient style {value!r}, using radial")
        return cls.RADIAL


@dataclass(frozen=True)
class GradientLayer:
    """One positioned radial color stop of a multi-point background.

    Attributes:
        x: Horizontal center, percent of the element width (0-100).
        y: Vertical center, percent of the element height (0-100).
        color: Layer color as '#rrggbb'.
        alpha: Layer opacity (0-1).
        radius: Distance in percent at which the layer fades out.
    """
    x: int
    y: int
    color: str
    alpha: float
    radius: int

    @property
    def alpha_hex(self) -> str:
        return f"{int(self.alpha * 255 + 0.5):02x}"

    def to_css(self) -> str:
        return (
            f"radial-gradient(at {self.x}% {self.y}%, "
            f"{self.color}{self.alpha_hex} 0px, transparent {self.radius}%)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'color': self.color,
            'alpha': self.alpha,
            'radius': self.radius,
        }


@dataclass(frozen=True)
class GradientDescriptor:
    """Background handed to the presentation layer.

    Multi-point descriptors carry a base color and an ordered tuple of
    layers, drawn back to front. Every other style carries a single composed
    gradient string in ``background``.
    """
    style: GradientStyle
    background_color: Optional[str] = None
    layers: Tuple[GradientLayer, ...] = ()
    background: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'layers', tuple(self.layers))

    @property
    def background_image(self) -> str:
        return ',\n'.join(layer.to_css() for layer in self.layers)

    def to_style(self) -> Dict[str, str]:
        """Return CSS properties ready to apply to the hero element."""
        if self.style is GradientStyle.MULTI_POINT:
            return {
                'backgroundColor': self.background_color or '',
                'backgroundImage': self.background_image,
            }
        return {'background': self.background or ''}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'style': self.style.value,
            'backgroundColor': self.background_color,
            'layers': [layer.to_dict() for layer in self.layers],
            'background': self.background,
        }
