#!/usr/bin/python3
# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-

"""Tests for cover_colors.gradient - seeded hero background synthesis."""

import unittest
from unittest.mock import patch


class TestSeededRandom(unittest.TestCase):
    """Tests for the string hash and the seeded stream."""

    def test_string_hash_known_values(self):
        from folio.cover_colors.gradient import string_hash

        self.assertEqual(string_hash(''), 0)
        self.assertEqual(string_hash('a'), 97)
        self.assertEqual(string_hash('ab'), 3105)

    def test_string_hash_wraps_to_int32(self):
        """Long seeds stay within the signed 32-bit range."""
        from folio.cover_colors.gradient import string_hash

        h = string_hash('a-rather-long-item-identifier-0123456789' * 4)
        self.assertGreaterEqual(h, -2 ** 31)
        self.assertLess(h, 2 ** 31)

    def test_same_seed_same_sequence(self):
        from folio.cover_colors.gradient import seeded_random

        first = seeded_random('book-42')
        second = seeded_random('book-42')
        self.assertEqual([first() for _ in range(20)], [second() for _ in range(20)])

    def test_different_seeds_differ(self):
        from folio.cover_colors.gradient import seeded_random

        first = seeded_random('book-1')
        second = seeded_random('book-2')
        self.assertNotEqual([first() for _ in range(5)], [second() for _ in range(5)])

    def test_values_in_unit_interval(self):
        """Values stay in [0, 1)."""
        from folio.cover_colors.gradient import seeded_random

        for seed in ('x' * 40, 'audiobook-7f3e', 'zzzzzzzzzzzzzz'):
            random = seeded_random(seed)
            for _ in range(200):
                value = random()
                self.assertGreaterEqual(value, 0.0)
                self.assertLess(value, 1.0)

    def test_negative_hash_stays_in_unit_interval(self):
        from folio.cover_colors.gradient import seeded_random

        with patch('folio.cover_colors.gradient.string_hash', return_value=-123456789):
            random = seeded_random('anything')
        for _ in range(50):
            value = random()
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_non_string_seed(self):
        """Numeric item ids seed the same stream as their string form."""
        from folio.cover_colors.gradient import seeded_random

        self.assertEqual(seeded_random(17)(), seeded_random('17')())


class TestColorVariants(unittest.TestCase):
    """Tests for generate_color_variants."""

    def test_single_color_variants(self):
        """Lighten, darken, saturate and desaturate in turn."""
        from folio.cover_colors.gradient import generate_color_variants

        self.assertEqual(
            generate_color_variants(['#224466'], 5),
            ['#224466', '#4a6c8e', '#042648', '#184470', '#29445f'])

    def test_originals_first(self):
        from folio.cover_colors.gradient import generate_color_variants

        palette = ['#224466', '#c0392b', '#f1c40f']
        result = generate_color_variants(palette, 8)
        self.assertEqual(result[:3], palette)
        self.assertEqual(len(result), 8)

    def test_cycles_through_palette(self):
        """The first pass lightens every original before darkening any."""
        from folio.cover_colors.gradient import generate_color_variants

        result = generate_color_variants(['#102030', '#405060'], 6)
        self.assertEqual(result[2:], ['#384858', '#687888', '#000212', '#223242'])

    def test_channels_clamped(self):
        from folio.cover_colors.gradient import generate_color_variants

        self.assertEqual(generate_color_variants(['#f0f0f0'], 3), ['#f0f0f0', '#ffffff', '#d2d2d2'])

    def test_no_padding_needed(self):
        from folio.cover_colors.gradient import generate_color_variants

        palette = ['#224466', '#c0392b']
        self.assertEqual(generate_color_variants(palette, 2), palette)

    def test_empty_or_invalid_palette(self):
        from folio.cover_colors.gradient import generate_color_variants

        self.assertEqual(generate_color_variants([], 6), [])
        self.assertEqual(generate_color_variants(['nope'], 6), [])


class TestBaseColor(unittest.TestCase):
    """Tests for base_color darkening tiers."""

    def test_dark_primary(self):
        from folio.cover_colors.gradient import base_color

        self.assertEqual(base_color('#224466'), '#14293d')

    def test_mid_primary(self):
        from folio.cover_colors.gradient import base_color

        # brightness 128 -> darkened by 55%
        self.assertEqual(base_color('#808080'), '#3a3a3a')

    def test_bright_primary(self):
        from folio.cover_colors.gradient import base_color

        # brightness 255 -> darkened by 65%
        self.assertEqual(base_color('#ffffff'), '#595959')

    def test_always_darker(self):
        from folio.cover_colors.gradient import base_color, perceived_brightness

        for color in ('#ff0000', '#00ff00', '#123456', '#fafafa'):
            self.assertLess(perceived_brightness(base_color(color)), perceived_brightness(color))


class TestMultiPointGradient(unittest.TestCase):
    """Tests for the layered multi-point style."""

    def test_single_color_scenario(self):
        """A one-color palette expands into six tinted layers."""
        from folio.cover_colors.gradient import generate_gradient
        from folio.cover_colors.models import GradientStyle

        result = generate_gradient(['#224466'], 'book-123', 'multi-point', 6)

        self.assertIs(result.style, GradientStyle.MULTI_POINT)
        self.assertEqual(result.background_color, '#14293d')
        self.assertEqual(len(result.layers), 6)
        self.assertEqual(result.layers[0].color, '#224466')
        self.assertEqual(
            [layer.color for layer in result.layers],
            ['#224466', '#4a6c8e', '#042648', '#184470', '#29445f', '#4a6c8e'])
        self.assertEqual(result.layers[0].radius, 35)
        self.assertEqual(result.layers[-1].radius, 60)

    def test_opacity_ladder(self):
        """Opacity falls by 0.04 per layer down to a 0.55 floor."""
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['#224466'], 'book-1', 'multi-point', 10)
        alphas = [layer.alpha for layer in result.layers]
        self.assertEqual(alphas[:6], [0.95, 0.91, 0.87, 0.83, 0.79, 0.75])
        self.assertEqual(alphas, sorted(alphas, reverse=True))
        self.assertGreaterEqual(min(alphas), 0.55)

    def test_radius_grows(self):
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['#224466', '#c0392b'], 'id', 'multi-point', 3)
        self.assertEqual([layer.radius for layer in result.layers], [35, 48, 60])

    def test_positions_jittered_within_bounds(self):
        """Each anchor moves at most 15% from its base position."""
        from folio.cover_colors.gradient import BASE_POSITIONS, generate_gradient

        for seed in ('a', 'book-1', 'audiobook-99', 'zzzz'):
            result = generate_gradient(['#224466'], seed, 'multi-point', 10)
            for layer, (base_x, base_y) in zip(result.layers, BASE_POSITIONS):
                self.assertLessEqual(abs(layer.x - base_x), 15)
                self.assertLessEqual(abs(layer.y - base_y), 15)
                self.assertTrue(0 <= layer.x <= 100)
                self.assertTrue(0 <= layer.y <= 100)

    def test_deterministic(self):
        """Same inputs give the same descriptor."""
        from folio.cover_colors.gradient import generate_gradient

        palette = ['#224466', '#c0392b', '#f1c40f']
        first = generate_gradient(palette, 'item-5', 'multi-point', 7)
        second = generate_gradient(palette, 'item-5', 'multi-point', 7)
        self.assertEqual(first, second)
        self.assertEqual(first.to_style(), second.to_style())

    def test_seed_changes_layout(self):
        from folio.cover_colors.gradient import generate_gradient

        first = generate_gradient(['#224466'], 'item-1', 'multi-point', 6)
        second = generate_gradient(['#224466'], 'item-2', 'multi-point', 6)
        self.assertNotEqual(
            [(layer.x, layer.y) for layer in first.layers],
            [(layer.x, layer.y) for layer in second.layers])

    def test_point_count_clamped(self):
        from folio.cover_colors.gradient import generate_gradient

        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', 1).layers), 3)
        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', 50).layers), 10)
        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', None).layers), 6)
        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', 'abc').layers), 6)
        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', 10 ** 400).layers), 10)
        self.assertEqual(len(generate_gradient(['#224466'], 's', 'multi-point', float('-inf')).layers), 3)

    def test_missing_seed_uses_default(self):
        from folio.cover_colors.gradient import generate_gradient

        self.assertEqual(
            generate_gradient(['#224466'], None),
            generate_gradient(['#224466'], 'default'))
        self.assertEqual(
            generate_gradient(['#224466'], ''),
            generate_gradient(['#224466']))

    def test_invalid_colors_dropped(self):
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['not-a-color', 'rgb(34, 68, 102)'], 'x')
        self.assertEqual(result.layers[0].color, '#224466')
        self.assertEqual(result.background_color, '#14293d')

    def test_empty_palette_uses_neutral_layers(self):
        from folio.cover_colors.gradient import (
            DEFAULT_BACKGROUND_COLOR,
            DEFAULT_LAYERS,
            generate_gradient,
        )

        for palette in ([], None, ['garbage']):
            result = generate_gradient(palette, 'x', 'multi-point', 9)
            self.assertEqual(result.background_color, DEFAULT_BACKGROUND_COLOR)
            self.assertEqual(result.layers, DEFAULT_LAYERS)

    def test_to_style(self):
        """Multi-point descriptors render as a color plus stacked images."""
        from folio.cover_colors.gradient import generate_gradient

        style = generate_gradient(['#224466'], 'book-1', 'multi-point', 3).to_style()
        self.assertEqual(style['backgroundColor'], '#14293d')
        parts = style['backgroundImage'].split(',\n')
        self.assertEqual(len(parts), 3)
        self.assertTrue(parts[0].startswith('radial-gradient(at '))
        self.assertIn('#224466f2 0px, transparent 35%)', parts[0])


class TestSimpleStyles(unittest.TestCase):
    """Tests for single-string gradient styles."""

    STYLES = ('radial', 'linear', 'inverted-radial', 'horizontal', 'vertical')

    def test_radial_single_color(self):
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['#224466'], style='radial')
        self.assertEqual(
            result.background,
            'radial-gradient(ellipse 180% 120% at 20% 10%, #22446688 0%, '
            '#22446644 25%, rgba(15, 18, 25, 0.98) 65%)')

    def test_linear_two_colors(self):
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['#224466', '#c0392b'], style='linear')
        self.assertEqual(
            result.background,
            'linear-gradient(135deg, #22446688 0%, #22446644 30%, '
            '#c0392b55 60%, rgba(15, 18, 25, 0.98) 100%)')

    def test_inverted_radial_three_colors(self):
        from folio.cover_colors.gradient import generate_gradient

        result = generate_gradient(['#224466', '#c0392b', '#f1c40f'], style='inverted-radial')
        self.assertTrue(result.background.startswith(
            'radial-gradient(ellipse 200% 150% at 85% 95%, #22446677 0%'))
        self.assertTrue(result.background.endswith('rgba(15, 18, 25, 0.98) 75%)'))

    def test_horizontal_and_vertical_angles(self):
        from folio.cover_colors.gradient import generate_gradient

        self.assertTrue(generate_gradient(['#224466'], style='horizontal').background.startswith(
            'linear-gradient(90deg, '))
        self.assertTrue(generate_gradient(['#224466'], style='vertical').background.startswith(
            'linear-gradient(180deg, '))

    def test_only_three_colors_used(self):
        """A fourth palette color never shows up in a single-string style."""
        from folio.cover_colors.gradient import generate_gradient

        palette = ['#224466', '#c0392b', '#f1c40f', '#8e44ad']
        for style in self.STYLES:
            background = generate_gradient(palette, style=style).background
            self.assertIn('#f1c40f', background)
            self.assertNotIn('#8e44ad', background)

    def test_every_style_ends_on_dark_base(self):
        from folio.cover_colors.gradient import DARK_BASE, generate_gradient

        for style in self.STYLES:
            for n in (1, 2, 3):
                palette = ['#224466', '#c0392b', '#f1c40f'][:n]
                self.assertIn(DARK_BASE, generate_gradient(palette, style=style).background)

    def test_empty_palette_defaults(self):
        from folio.cover_colors.gradient import DEFAULT_BACKGROUNDS, generate_gradient
        from folio.cover_colors.models import GradientStyle

        for style in self.STYLES:
            result = generate_gradient([], style=style)
            self.assertEqual(result.background, DEFAULT_BACKGROUNDS[GradientStyle(style)])
            self.assertEqual(result.to_style(), {'background': result.background})

    def test_unknown_style_renders_radial(self):
        from folio.cover_colors.gradient import generate_gradient
        from folio.cover_colors.models import GradientStyle

        result = generate_gradient(['#224466'], style='spiral')
        self.assertIs(result.style, GradientStyle.RADIAL)
        self.assertEqual(result.background, generate_gradient(['#224466'], style='radial').background)

    def test_seed_irrelevant(self):
        from folio.cover_colors.gradient import generate_gradient

        self.assertEqual(
            generate_gradient(['#224466'], 'a', 'linear'),
            generate_gradient(['#224466'], 'b', 'linear'))


class TestGradientForConfig(unittest.TestCase):
    """Tests for gradient_for_config."""

    def test_uses_config_style_and_points(self):
        from folio.cover_colors.config import ColorConfig
        from folio.cover_colors.gradient import gradient_for_config
        from folio.cover_colors.models import GradientStyle

        config = ColorConfig(gradient_style='multi-point', gradient_points=4)
        result = gradient_for_config(['#224466'], 'book-1', config)
        self.assertEqual(len(result.layers), 4)

        config = ColorConfig(gradient_style='vertical')
        self.assertIs(gradient_for_config(['#224466'], 'book-1', config).style, GradientStyle.VERTICAL)


if __name__ == '__main__':
    unittest.main()
