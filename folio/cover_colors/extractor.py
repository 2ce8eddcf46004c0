# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Cover palette extraction entry point.

Decodes cover artwork once, hands it to the configured extraction strategy
and maps every failure to an empty palette. Palettes are computed when a
cover is ingested and stored on the media record; nothing here is needed on
the render path.
"""

import io
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image, ImageOps

from folio.cover_colors.config import ColorConfig
from folio.cover_colors.extraction import get_strategy
from folio.cover_colors.models import ExtractionMethod

logger = logging.getLogger(__name__)

# Longest side kept after decoding; every strategy works on a smaller grid.
MAX_DECODE_SIZE = 512


def load_image(data: bytes) -> Image.Image:
    """Decode cover bytes into a bounded RGB image.

    EXIF orientation is applied and transparency is flattened onto white,
    so the strategies always see what a reader sees.

    Args:
        data: Encoded image in any format Pillow can read.

    Returns:
        Detached RGB image no larger than 512 pixels on its longest side.

    Raises:
        OSError: If the data cannot be decoded.
        ValueError: If the data is empty.
    """
    if not data:
        raise ValueError("Empty image data")

    with Image.open(io.BytesIO(data)) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode in ('RGBA', 'LA', 'PA') or (img.mode == 'P' and 'transparency' in img.info):
            rgba = img.convert('RGBA')
            background = Image.new('RGB', rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel('A'))
            rgb = background
        else:
            rgb = img.convert('RGB')
        rgb.thumbnail((MAX_DECODE_SIZE, MAX_DECODE_SIZE))
        return rgb


def extract_colors(image: Image.Image, method=ExtractionMethod.POPULARITY) -> List[str]:
    """Run one extraction strategy on an already decoded image.

    Args:
        image: Decoded image.
        method: ExtractionMethod or its name.

    Returns:
        Up to four hex colors, most dominant first.
    """
    strategy = get_strategy(method)
    try:
        return strategy(image)
    except Exception as e:
        logger.warning(f"Extraction strategy {strategy.__name__} raised: {e}")
        return []


def extract_dominant_colors(data: bytes, method=ExtractionMethod.POPULARITY) -> List[str]:
    """Extract a palette from encoded cover bytes.

    Args:
        data: Encoded cover image.
        method: ExtractionMethod or its name. Unknown names use popularity.

    Returns:
        Up to four hex colors, or an empty list if the cover cannot be
        decoded or processed.
    """
    try:
        image = load_image(data)
    except Image.DecompressionBombError as e:
        logger.warning(f"Refusing oversized cover image: {e}")
        return []
    except OSError as e:
        logger.warning(f"Could not decode cover image: {e}")
        return []
    except ValueError as e:
        logger.warning(f"Invalid cover image data: {e}")
        return []

    try:
        return extract_colors(image, method)
    finally:
        image.close()


class ColorExtractor:
    """Extracts cover palettes using the configured method."""

    def __init__(self, config: Optional[ColorConfig] = None):
        """Initialize the extractor.

        Args:
            config: Color configuration. If None, uses defaults.
        """
        self.config = config or ColorConfig()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._shutdown_event = threading.Event()

    @property
    def method(self) -> ExtractionMethod:
        return self.config.method

    def extract(self, data: bytes) -> List[str]:
        """Extract a palette from encoded cover bytes.

        Args:
            data: Encoded cover image.

        Returns:
            Up to four hex colors, or an empty list on failure.
        """
        return extract_dominant_colors(data, self.method)

    def extract_file(self, image_path: str) -> Optional[List[str]]:
        """Extract a palette from a cover file.

        Args:
            image_path: Path to the cover image.

        Returns:
            Palette (possibly empty), or None if the file is missing or
            unreadable.
        """
        if not os.path.isfile(image_path):
            logger.debug(f"Cover file not found: {image_path}")
            return None

        try:
            with open(image_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            logger.warning(f"Could not read cover {image_path}: {e}")
            return None

        palette = self.extract(data)
        logger.debug(f"Extracted {palette} from {image_path} using {self.method.value}")
        return palette

    def _extract_single(self, image_path: str) -> Tuple[str, Optional[List[str]]]:
        """Thread-safe wrapper for single extraction.

        Args:
            image_path: Path to the cover image.

        Returns:
            Tuple of (image_path, palette or None).
        """
        if self._shutdown_event.is_set():
            return (image_path, None)

        try:
            return (image_path, self.extract_file(image_path))
        except Exception as e:
            logger.warning(f"Exception extracting palette from {image_path}: {e}")
            return (image_path, None)

    def extract_all_parallel(
        self,
        images: List[str],
        max_workers: int = 4,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> Dict[str, Optional[List[str]]]:
        """Re-extract palettes for many covers in parallel.

        Used when the extraction method changes and every stored palette
        has to be recomputed.

        Args:
            images: List of cover paths.
            max_workers: Number of parallel workers (default 4).
            progress_callback: Called with (completed, total).

        Returns:
            Dict mapping every input path to its palette, or None if the
            cover could not be read or the batch was shut down.
        """
        if not images:
            return {}

        # Covers not reached before a shutdown stay None
        results: Dict[str, Optional[List[str]]] = dict.fromkeys(images)
        total = len(images)
        completed = 0

        self._shutdown_event.clear()
        executor = ThreadPoolExecutor(max_workers=max_workers)
        self._executor = executor

        try:
            pending = [executor.submit(self._extract_single, path) for path in images]

            for future in as_completed(pending):
                if self._shutdown_event.is_set():
                    for f in pending:
                        f.cancel()
                    break

                path, palette = future.result()
                results[path] = palette

                completed += 1
                if progress_callback:
                    progress_callback(completed, total)
        finally:
            executor.shutdown(wait=False)
            if self._executor is executor:
                self._executor = None

        logger.info(
            f"Re-extracted {sum(1 for p in results.values() if p is not None)} of "
            f"{total} cover palettes using {self.method.value}"
        )
        return results

    def shutdown(self) -> None:
        """Stop a running batch. Safe to call multiple times."""
        self._shutdown_event.set()

        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
