# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Perceptual palette extraction with mean-shift clustering in LAB.

Steps:
    1. Resample the cover to 80x120 and convert every pixel except pure
       white and pure black to LAB.
    2. Collapse pixels into coarse LAB buckets. Buckets under 1% of the
       pixels are dropped unless they look like an accent (colorful and of
       middling lightness).
    3. Mean-shift every bucket centroid toward the local density peak and
       merge peaks closer than half the bandwidth.
    4. Assign buckets to their nearest peak and score each cluster by area,
       contiguity, accent status and lightness.
    5. Greedily pick up to four clusters that are perceptually distinct and
       not too dark or too light as a group, then order them by area.

Distances are CIE76 delta E; the bandwidth (25) and selection thresholds
(15, relaxed to 10) are tuned for it.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from PIL import Image

from folio.cover_colors.color_science import (
    LAB,
    delta_e,
    lab_chroma,
    lab_to_rgb,
    rgb_to_hex,
    rgb_to_lab,
    round_half_up,
)
from folio.cover_colors.extraction.pixels import count_neighbor_links, iter_pixels, working_grid

logger = logging.getLogger(__name__)

WORKING_SIZE = (80, 120)
MIN_VALID_PIXELS = 10

L_STEP = 10
AB_STEP = 15
MIN_BUCKET_SHARE = 0.01

BANDWIDTH = 25.0
MAX_ITERATIONS = 10
CONVERGENCE = 1.0

MIN_CLUSTER_WEIGHT = 0.005
MIN_DELTA_E = 15.0
RELAXED_DELTA_E = 10.0
MAX_DARK = 1
MAX_LIGHT = 2
ACCENT_BOOST = 2.5
MAX_COLORS = 4


@dataclass
class LabBucket:
    """Pixels sharing one coarse LAB cell."""
    count: int = 0
    L_sum: float = 0.0
    a_sum: float = 0.0
    b_sum: float = 0.0
    positions: List[int] = field(default_factory=list)

    @property
    def lab(self) -> LAB:
        return (self.L_sum / self.count, self.a_sum / self.count, self.b_sum / self.count)


@dataclass(eq=False)
class ColorCluster:
    """A mean-shift mode and the pixels assigned to it."""
    centroid: LAB
    positions: Set[int] = field(default_factory=set)
    weight: float = 0.0
    contiguity: float = 0.0
    is_accent: bool = False

    @property
    def chroma(self) -> float:
        return lab_chroma(self.centroid)

    @property
    def lightness(self) -> float:
        return self.centroid[0]


def is_outlier(r: int, g: int, b: int) -> bool:
    """Only pure white and pure black are excluded before clustering."""
    if r > 252 and g > 252 and b > 252:
        return True
    return r < 3 and g < 3 and b < 3


def is_accent_candidate(lab: LAB) -> bool:
    """Colorful, and neither dark nor washed out."""
    return lab_chroma(lab) > 40 and 30 < lab[0] < 85


def gaussian_kernel(distance: float, bandwidth: float) -> float:
    if distance > bandwidth:
        return 0.0
    ratio = distance / bandwidth
    return math.exp(-0.5 * ratio * ratio)


def mean_shift_step(point: LAB, points: Sequence[LAB], bandwidth: float) -> LAB:
    """Move a point to the kernel-weighted mean of its neighborhood."""
    sum_L = sum_a = sum_b = 0.0
    total = 0.0
    for other in points:
        weight = gaussian_kernel(delta_e(point, other), bandwidth)
        if weight > 0:
            sum_L += other[0] * weight
            sum_a += other[1] * weight
            sum_b += other[2] * weight
            total += weight
    if total == 0:
        return point
    return (sum_L / total, sum_a / total, sum_b / total)


def mean_shift_modes(
    points: Sequence[LAB],
    bandwidth: float = BANDWIDTH,
    max_iterations: int = MAX_ITERATIONS,
    convergence: float = CONVERGENCE,
) -> List[LAB]:
    """Find density modes by shifting every point until it settles.

    A converged point within half the bandwidth of an existing mode is
    merged into it; modes are returned in discovery order.
    """
    modes: List[LAB] = []
    for start in points:
        current = start
        for _ in range(max_iterations):
            shifted = mean_shift_step(current, points, bandwidth)
            shift = delta_e(current, shifted)
            current = shifted
            if shift < convergence:
                break
        if all(delta_e(current, mode) >= bandwidth / 2 for mode in modes):
            modes.append(current)
    return modes


def _bucket_key(lab: LAB) -> Tuple[int, int, int]:
    return (
        round_half_up(lab[0] / L_STEP) * L_STEP,
        round_half_up(lab[1] / AB_STEP) * AB_STEP,
        round_half_up(lab[2] / AB_STEP) * AB_STEP,
    )


def _collect_buckets(grid: Image.Image) -> Tuple[Dict[Tuple[int, int, int], LabBucket], int]:
    width = grid.size[0]
    lab_cache: Dict[Tuple[int, int, int], LAB] = {}
    buckets: Dict[Tuple[int, int, int], LabBucket] = {}
    valid = 0

    for x, y, rgb in iter_pixels(grid):
        if is_outlier(*rgb):
            continue
        lab = lab_cache.get(rgb)
        if lab is None:
            lab = lab_cache[rgb] = rgb_to_lab(*rgb)
        key = _bucket_key(lab)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = LabBucket()
        bucket.count += 1
        bucket.L_sum += lab[0]
        bucket.a_sum += lab[1]
        bucket.b_sum += lab[2]
        bucket.positions.append(y * width + x)
        valid += 1

    return buckets, valid


def lightness_penalty(L: float) -> float:
    if L < 15:
        return 0.3
    if L < 25:
        return 0.6
    if L > 95:
        return 0.8
    return 1.0


def cluster_score(cluster: ColorCluster) -> float:
    accent = ACCENT_BOOST if cluster.is_accent else 1.0
    return cluster.weight * (1 + cluster.contiguity) * accent * lightness_penalty(cluster.lightness)


def build_clusters(
    buckets: Sequence[LabBucket],
    modes: Sequence[LAB],
    valid_pixels: int,
    width: int,
    height: int,
) -> List[ColorCluster]:
    """Assign buckets to their nearest mode and measure each cluster."""
    clusters = [ColorCluster(centroid=mode) for mode in modes]

    for bucket in buckets:
        lab = bucket.lab
        nearest = min(clusters, key=lambda c: delta_e(lab, c.centroid))
        nearest.positions.update(bucket.positions)

    for cluster in clusters:
        size = len(cluster.positions)
        cluster.weight = size / valid_pixels
        if size >= 2:
            cluster.contiguity = count_neighbor_links(cluster.positions, width, height) / (size * 4)
        cluster.is_accent = (
            cluster.chroma > 45
            and 0.02 < cluster.weight < 0.15
            and cluster.contiguity > 0.1
        )
    return clusters


def _lightness_allows(cluster: ColorCluster, selected: Sequence[ColorCluster]) -> bool:
    if cluster.lightness < 30:
        if sum(1 for c in selected if c.lightness < 30) >= MAX_DARK:
            return False
    if cluster.lightness > 70:
        if sum(1 for c in selected if c.lightness > 70) >= MAX_LIGHT:
            return False
    return True


def _distinct(cluster: ColorCluster, selected: Sequence[ColorCluster], threshold: float) -> bool:
    return all(delta_e(c.centroid, cluster.centroid) > threshold for c in selected)


def select_clusters(clusters: Sequence[ColorCluster]) -> List[ColorCluster]:
    """Greedy, diversity-constrained palette selection.

    Args:
        clusters: Measured clusters.

    Returns:
        Up to four clusters, most pixels first.
    """
    ranked = sorted(
        (c for c in clusters if c.weight > MIN_CLUSTER_WEIGHT),
        key=cluster_score,
        reverse=True,
    )

    selected: List[ColorCluster] = []
    for cluster in ranked:
        if len(selected) >= MAX_COLORS:
            break
        if _distinct(cluster, selected, MIN_DELTA_E) and _lightness_allows(cluster, selected):
            selected.append(cluster)

    if len(selected) < 3:
        for cluster in ranked:
            if len(selected) >= MAX_COLORS:
                break
            if cluster in selected:
                continue
            if _distinct(cluster, selected, RELAXED_DELTA_E) and _lightness_allows(cluster, selected):
                selected.append(cluster)

    if len(selected) < MAX_COLORS:
        accent: Optional[ColorCluster] = next(
            (
                c for c in ranked
                if c.is_accent and c not in selected
                and _distinct(c, selected, RELAXED_DELTA_E)
            ),
            None,
        )
        if accent is not None:
            selected.append(accent)

    selected.sort(key=lambda c: c.weight, reverse=True)
    return selected


def extract_perceptual(image: Image.Image) -> List[str]:
    """Extract up to four perceptually distinct colors, area-dominant first.

    Args:
        image: RGB image.

    Returns:
        Up to four hex colors, or an empty list when the cover has too few
        usable pixels or processing fails.
    """
    try:
        grid = working_grid(image, WORKING_SIZE)
        width, height = grid.size

        buckets, valid = _collect_buckets(grid)
        if valid < MIN_VALID_PIXELS:
            logger.debug("Not enough valid pixels for perceptual extraction")
            return []

        min_count = valid * MIN_BUCKET_SHARE
        significant = [
            b for b in buckets.values()
            if b.count >= min_count or is_accent_candidate(b.lab)
        ]
        if not significant:
            significant = list(buckets.values())

        modes = mean_shift_modes([b.lab for b in significant])
        clusters = build_clusters(significant, modes, valid, width, height)
        selected = select_clusters(clusters)

        palette = [rgb_to_hex(*lab_to_rgb(*c.centroid)) for c in selected]
        logger.debug(
            f"Perceptual extraction: {len(significant)} buckets, "
            f"{len(modes)} modes, palette {palette}"
        )
        return palette
    except Exception as e:
        logger.warning(f"Perceptual color extraction failed: {e}")
        return []
