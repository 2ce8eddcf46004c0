# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Synthetic cover images shared by the cover color tests."""

import io

from PIL import Image

TEAL = (60, 110, 120)
NAVY = (30, 40, 70)
TITLE_RED = (230, 30, 40)
ORANGE = (240, 120, 20)
SLATE = (90, 100, 110)

BAND_COLORS = [
    (200, 60, 50),
    (40, 120, 200),
    (230, 200, 60),
    (60, 160, 80),
]


def solid(color, size=(120, 180)):
    """Single-color cover."""
    return Image.new('RGB', size, color)


def vertical_bands(colors=None, size=(160, 200)):
    """Cover split into equal-width vertical bands, one per color."""
    colors = colors or BAND_COLORS
    width, height = size
    img = Image.new('RGB', size)
    pixels = img.load()
    band = width // len(colors)
    for x in range(width):
        color = colors[min(x // band, len(colors) - 1)]
        for y in range(height):
            pixels[x, y] = color
    return img


def teal_with_title():
    """100x150 cover: navy top quarter, teal body and scattered red title.

    Roughly 25% navy, 70% teal and 5% isolated red pixels laid out like
    thin lettering.
    """
    width, height = 100, 150
    img = Image.new('RGB', (width, height), TEAL)
    pixels = img.load()
    for y in range(38):
        for x in range(width):
            pixels[x, y] = NAVY
    for y in range(50, 90, 2):
        for x in range(10, 86, 2):
            pixels[x, y] = TITLE_RED
    return img


def slate_with_accent():
    """80x120 cover: muted slate field with one solid orange block (~8%)."""
    img = Image.new('RGB', (80, 120), SLATE)
    pixels = img.load()
    for y in range(60, 98):
        for x in range(30, 50):
            pixels[x, y] = ORANGE
    return img


def gradient_cover(size=(120, 180)):
    """Smooth multi-hue gradient with plenty of color variety."""
    width, height = size
    img = Image.new('RGB', size)
    pixels = img.load()
    for y in range(height):
        for x in range(width):
            r = int(40 + 180 * x / width)
            g = int(60 + 120 * y / height)
            b = int(200 - 150 * (x + y) / (width + height))
            pixels[x, y] = (r, g, b)
    return img


def encode(img, fmt='PNG'):
    """Encode an image to bytes."""
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()
