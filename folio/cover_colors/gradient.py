# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Hero background synthesis from a stored cover palette.

Every detail page (book and audiobook alike) renders its backdrop through
``generate_gradient``. The result depends only on the palette, the item
identity used as seed, the style and the point count, so the same item
always gets the same "organic" layout without any layout data being stored.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence

from folio.cover_colors.color_science import brightness, hex_to_rgb, rgb_to_hex, round_half_up
from folio.cover_colors.config import ColorConfig, clamp_point_count
from folio.cover_colors.models import GradientDescriptor, GradientLayer, GradientStyle
from folio.cover_colors.palette import normalize_palette

logger = logging.getLogger(__name__)

DARK_BASE = 'rgba(15, 18, 25, 0.98)'

# Spread of layer anchors (x%, y%) so any point count covers the element.
BASE_POSITIONS = (
    (40, 20), (80, 10), (10, 50),
    (70, 60), (20, 90), (90, 80),
    (5, 15), (60, 40), (30, 70),
    (95, 45),
)

POSITION_JITTER = 30
MIN_RADIUS = 35
MAX_RADIUS = 60
MAX_OPACITY = 0.95
MIN_OPACITY = 0.55
OPACITY_STEP = 0.04

DEFAULT_SEED = 'default'

# Neutral slate backdrop used when a cover produced no palette.
DEFAULT_BACKGROUND_COLOR = '#191e28'
DEFAULT_LAYERS = (
    GradientLayer(x=40, y=20, color='#3c465a', alpha=0.6, radius=50),
    GradientLayer(x=80, y=10, color='#323c50', alpha=0.5, radius=50),
    GradientLayer(x=10, y=50, color='#2d374b', alpha=0.5, radius=50),
    GradientLayer(x=70, y=60, color='#374155', alpha=0.4, radius=50),
    GradientLayer(x=20, y=90, color='#283246', alpha=0.5, radius=50),
    GradientLayer(x=90, y=80, color='#323c50', alpha=0.4, radius=50),
)

DEFAULT_BACKGROUNDS = {
    GradientStyle.RADIAL: (
        f'radial-gradient(ellipse 150% 100% at 25% 0%, rgb(40, 45, 55) 0%, '
        f'rgb(25, 30, 40) 30%, {DARK_BASE} 70%)'
    ),
    GradientStyle.LINEAR: (
        f'linear-gradient(135deg, rgb(40, 45, 55) 0%, '
        f'rgb(25, 30, 40) 50%, {DARK_BASE} 100%)'
    ),
    GradientStyle.INVERTED_RADIAL: (
        f'radial-gradient(ellipse 150% 100% at 75% 100%, rgb(40, 45, 55) 0%, '
        f'rgb(25, 30, 40) 30%, {DARK_BASE} 70%)'
    ),
    GradientStyle.HORIZONTAL: (
        f'linear-gradient(90deg, rgb(40, 45, 55) 0%, '
        f'rgb(25, 30, 40) 40%, {DARK_BASE} 100%)'
    ),
    GradientStyle.VERTICAL: (
        f'linear-gradient(180deg, rgb(40, 45, 55) 0%, '
        f'rgb(25, 30, 40) 30%, {DARK_BASE} 70%)'
    ),
}


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(seed: str) -> int:
    """31-multiplier string hash over UTF-16 code units, signed 32-bit."""
    encoded = seed.encode('utf-16-le', errors='surrogatepass')
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return h


def seeded_random(seed: Any) -> Callable[[], float]:
    """Create a repeatable pseudo-random stream for a seed.

    Args:
        seed: Item identity. Non-strings are converted with str().

    Returns:
        Callable returning floats in [0, 1). Two streams with the same seed
        produce the same sequence.
    """
    state = string_hash(seed if isinstance(seed, str) else str(seed))

    def next_value() -> float:
        nonlocal state
        state = (state * 9301 + 49297) % 233280
        return state / 233280

    return next_value


def _lighten(r: int, g: int, b: int) -> tuple:
    return (min(255, r + 40), min(255, g + 40), min(255, b + 40))


def _darken(r: int, g: int, b: int) -> tuple:
    return (max(0, r - 30), max(0, g - 30), max(0, b - 30))


def _saturate(r: int, g: int, b: int) -> tuple:
    mean = (r + g + b) / 3
    return tuple(min(255, max(0, c + (c - mean) * 0.3)) for c in (r, g, b))


def _desaturate(r: int, g: int, b: int) -> tuple:
    mean = (r + g + b) / 3
    return tuple(c + (mean - c) * 0.2 for c in (r, g, b))


VARIANT_TRANSFORMS = (_lighten, _darken, _saturate, _desaturate)


def generate_color_variants(palette: Sequence[Any], target_count: int) -> List[str]:
    """Stretch a palette to ``target_count`` colors.

    The original colors come first. Each further color derives from a
    palette entry, cycling through the entries and, on each full pass,
    through lighten, darken, saturate and desaturate.

    Args:
        palette: Hex or rgb() colors. Invalid entries are ignored.
        target_count: Desired number of colors.

    Returns:
        At least ``target_count`` hex colors, or an empty list when the
        palette holds no valid color.
    """
    valid = normalize_palette(palette)
    if not valid:
        return []

    result = list(valid)
    index = 0
    while len(result) < target_count:
        base = hex_to_rgb(valid[index % len(valid)])
        transform = VARIANT_TRANSFORMS[(index // len(valid)) % len(VARIANT_TRANSFORMS)]
        r, g, b = (round_half_up(c) for c in transform(*base))
        result.append(rgb_to_hex(r, g, b))
        index += 1
    return result


def perceived_brightness(hex_color: str) -> float:
    """Perceived brightness (0-255) of a hex color."""
    return brightness(*hex_to_rgb(hex_color))


def darken_color(hex_color: str, percent: float) -> str:
    """Scale every channel toward black by ``percent``."""
    factor = 1 - percent / 100
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(round_half_up(r * factor), round_half_up(g * factor), round_half_up(b * factor))


def base_color(primary: str) -> str:
    """Darkened backdrop tone for the most area-dominant cover color.

    Bright covers are darkened the most so overlaid text keeps its
    contrast; already dark covers are darkened the least.
    """
    level = perceived_brightness(primary)
    if level > 150:
        return darken_color(primary, 65)
    if level > 80:
        return darken_color(primary, 55)
    return darken_color(primary, 40)


def _clamp_percent(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def multi_point_layers(colors: Sequence[str], point_count: int, seed: Any) -> List[GradientLayer]:
    """Lay out ``point_count`` radial layers for a non-empty palette.

    Anchors cycle through BASE_POSITIONS and are jittered by up to 15% on
    each axis. Radius grows linearly from 35% to 60% and opacity falls from
    0.95 to a floor of 0.55, so earlier (more dominant) layers read
    strongest.
    """
    random = seeded_random(seed)
    expanded = generate_color_variants(colors, point_count)
    span = max(1, point_count - 1)

    layers = []
    for i in range(point_count):
        base_x, base_y = BASE_POSITIONS[i % len(BASE_POSITIONS)]
        x = _clamp_percent(base_x + (random() - 0.5) * POSITION_JITTER)
        y = _clamp_percent(base_y + (random() - 0.5) * POSITION_JITTER)
        radius = round_half_up(MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * i / span)
        alpha = round(max(MIN_OPACITY, MAX_OPACITY - i * OPACITY_STEP), 2)
        layers.append(GradientLayer(x=x, y=y, color=expanded[i], alpha=alpha, radius=radius))
    return layers


def generate_multi_point_gradient(palette: Sequence[Any], point_count: Any = 6, seed: Any = DEFAULT_SEED) -> GradientDescriptor:
    """Build the layered multi-point backdrop.

    Args:
        palette: Stored palette, most dominant first.
        point_count: Layer count, clamped to 3-10.
        seed: Item identity.

    Returns:
        Descriptor with a base color and ordered layers.
    """
    colors = normalize_palette(palette)
    if not colors:
        return GradientDescriptor(
            style=GradientStyle.MULTI_POINT,
            background_color=DEFAULT_BACKGROUND_COLOR,
            layers=DEFAULT_LAYERS,
        )

    count = clamp_point_count(point_count)
    return GradientDescriptor(
        style=GradientStyle.MULTI_POINT,
        background_color=base_color(colors[0]),
        layers=tuple(multi_point_layers(colors, count, seed)),
    )


def _stops(*pairs) -> str:
    return ', '.join(f'{color} {position}%' for color, position in pairs)


def _simple_background(style: GradientStyle, colors: List[str]) -> str:
    """Compose a single gradient string from one to three colors."""
    c = colors
    n = len(colors)

    if style is GradientStyle.LINEAR or style is GradientStyle.HORIZONTAL:
        angle = '135deg' if style is GradientStyle.LINEAR else '90deg'
        if n == 1:
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', 40), (DARK_BASE, 100))
        elif n == 2:
            second = 30 if style is GradientStyle.LINEAR else 25
            third = 60 if style is GradientStyle.LINEAR else 50
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', second), (f'{c[1]}55', third), (DARK_BASE, 100))
        elif style is GradientStyle.LINEAR:
            stops = _stops(
                (f'{c[0]}77', 0), (f'{c[0]}33', 20), (f'{c[1]}55', 40),
                (f'{c[1]}22', 60), (f'{c[2]}44', 80), (DARK_BASE, 100),
            )
        else:
            stops = _stops(
                (f'{c[0]}77', 0), (f'{c[0]}33', 15), (f'{c[1]}55', 35),
                (f'{c[1]}22', 50), (f'{c[2]}44', 70), (DARK_BASE, 100),
            )
        return f'linear-gradient({angle}, {stops})'

    if style is GradientStyle.VERTICAL:
        if n == 1:
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', 30), (DARK_BASE, 70))
        elif n == 2:
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', 25), (f'{c[1]}55', 50), (DARK_BASE, 80))
        else:
            stops = _stops(
                (f'{c[0]}77', 0), (f'{c[0]}33', 15), (f'{c[1]}55', 35),
                (f'{c[1]}22', 50), (f'{c[2]}44', 65), (DARK_BASE, 85),
            )
        return f'linear-gradient(180deg, {stops})'

    # radial and inverted-radial differ only in where the ellipse sits
    inverted = style is GradientStyle.INVERTED_RADIAL
    if n < 3:
        shape = 'ellipse 180% 120% at 80% 90%' if inverted else 'ellipse 180% 120% at 20% 10%'
        if n == 1:
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', 25), (DARK_BASE, 65))
        else:
            stops = _stops((f'{c[0]}88', 0), (f'{c[0]}44', 20), (f'{c[1]}55', 40), (DARK_BASE, 70))
    else:
        shape = 'ellipse 200% 150% at 85% 95%' if inverted else 'ellipse 200% 150% at 15% 5%'
        stops = _stops(
            (f'{c[0]}77', 0), (f'{c[0]}33', 15), (f'{c[1]}55', 30),
            (f'{c[1]}22', 45), (f'{c[2]}44', 55), (DARK_BASE, 75),
        )
    return f'radial-gradient({shape}, {stops})'


def generate_gradient(
    palette: Optional[Sequence[Any]],
    seed: Any = DEFAULT_SEED,
    style: Any = GradientStyle.MULTI_POINT,
    point_count: Any = 6,
) -> GradientDescriptor:
    """Synthesize the hero background for an item.

    Total and deterministic: identical arguments always give an identical
    descriptor. Invalid colors are dropped, unknown styles render as radial
    and point counts are clamped to 3-10.

    Args:
        palette: Stored palette (0-4 colors), most dominant first.
        seed: Item identity used to lay out multi-point layers.
        style: GradientStyle or its name.
        point_count: Layer count for the multi-point style.

    Returns:
        GradientDescriptor for the presentation layer.
    """
    gradient_style = GradientStyle.parse(style)
    if seed is None or seed == '':
        seed = DEFAULT_SEED

    if gradient_style is GradientStyle.MULTI_POINT:
        return generate_multi_point_gradient(palette or [], point_count, seed)

    colors = normalize_palette(palette)[:3]
    if not colors:
        return GradientDescriptor(style=gradient_style, background=DEFAULT_BACKGROUNDS[gradient_style])

    return GradientDescriptor(style=gradient_style, background=_simple_background(gradient_style, colors))


def gradient_for_config(palette: Optional[Sequence[Any]], seed: Any, config: ColorConfig) -> GradientDescriptor:
    """Synthesize the hero background using an application color config."""
    return generate_gradient(palette, seed, config.style, config.points)
