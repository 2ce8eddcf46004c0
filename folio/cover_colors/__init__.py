# Cover Colors for Folio
# Derives a small palette from cover artwork at ingestion time and turns it
# into a deterministic ambient hero background on every render.

from folio.cover_colors.models import (
    ExtractionMethod,
    GradientStyle,
    GradientLayer,
    GradientDescriptor,
)
from folio.cover_colors.config import ColorConfig, clamp_point_count
from folio.cover_colors.color_science import (
    rgb_to_lab,
    lab_to_rgb,
    hex_to_lab,
    delta_e,
    lab_hue,
    lab_chroma,
)
from folio.cover_colors.palette import (
    normalize_to_hex,
    palette_to_json,
    parse_palette_json,
)
from folio.cover_colors.extraction import (
    extract_popularity,
    extract_vertical_slice,
    extract_area_weighted,
    extract_perceptual,
)
from folio.cover_colors.extractor import (
    ColorExtractor,
    load_image,
    extract_colors,
    extract_dominant_colors,
)
from folio.cover_colors.gradient import (
    seeded_random,
    generate_color_variants,
    base_color,
    generate_gradient,
    gradient_for_config,
)

__all__ = [
    # Models
    'ExtractionMethod',
    'GradientStyle',
    'GradientLayer',
    'GradientDescriptor',
    # Config
    'ColorConfig',
    'clamp_point_count',
    # Color science (CIELAB)
    'rgb_to_lab',
    'lab_to_rgb',
    'hex_to_lab',
    'delta_e',
    'lab_hue',
    'lab_chroma',
    # Palette storage
    'normalize_to_hex',
    'palette_to_json',
    'parse_palette_json',
    # Extraction strategies
    'extract_popularity',
    'extract_vertical_slice',
    'extract_area_weighted',
    'extract_perceptual',
    # Extraction facade
    'ColorExtractor',
    'load_image',
    'extract_colors',
    'extract_dominant_colors',
    # Gradient synthesis
    'seeded_random',
    'generate_color_variants',
    'base_color',
    'generate_gradient',
    'gradient_for_config',
]
