"""
Orientation assignment for interest points.

The orientation of a point is found by building a histogram of edge
orientations in a window around it, weighting each sample by its edge
magnitude times a Gaussian. The histogram is smoothed, effectively
computing a kernel density estimate, and every local peak of that density
becomes an orientation hypothesis. A point with several hypotheses is
split into several points that differ only in orientation.
"""

import math
import numpy as np
from typing import List, Sequence

from .core_data_structures import InterestPoint, InterestPointList
from .filters import gaussian_kernel_2d, crop_edge_extend
from .weighted_histogram import (weighted_histogram, smooth_weighted_histogram,
                                 find_weighted_histogram_mode)

# Nominal window is (2 * HALF_WIDTH + 1)^2 at the reference scale
ORIENTATION_HALF_WIDTH = 5
ORIENTATION_NUM_BINS = 36
ORIENTATION_SMOOTHING = 5.0
# Gaussian weight sigma per unit of sigma ratio
ORIENTATION_WEIGHT_SIGMA = 6.0


class OrientationAssigner:
    """Assigns dominant orientations from orientation and magnitude images"""

    def __init__(self, half_width: int = ORIENTATION_HALF_WIDTH,
                 num_bins: int = ORIENTATION_NUM_BINS,
                 smoothing: float = ORIENTATION_SMOOTHING):
        self.half_width = half_width
        self.num_bins = num_bins
        self.smoothing = smoothing

    @property
    def bin_width(self) -> float:
        return 2 * math.pi / self.num_bins

    def get_orientation(self, ori: np.ndarray, mag: np.ndarray,
                        i0: int, j0: int, sigma_ratio: float = 1.0) -> List[float]:
        """
        Orientations at the modes of the weighted edge orientation histogram.

        Args:
            ori: Edge orientation image, values in [-pi, pi]
            mag: Edge magnitude image
            i0, j0: Column and row of the point
            sigma_ratio: Plane sigma over the reference plane sigma; scales the window

        Returns:
            Angles in [-pi, pi) in histogram order; empty if the window
            does not fit inside the image
        """
        halfwidth = int(self.half_width * sigma_ratio + 0.5)
        left = i0 - halfwidth
        top = j0 - halfwidth
        width = 2 * halfwidth + 1
        rows, cols = ori.shape[:2]
        if left < 0 or top < 0 or left + width >= cols or top + width >= rows:
            return []

        # (gaussian weight) * (edge magnitude)
        weight = gaussian_kernel_2d(ORIENTATION_WEIGHT_SIGMA * sigma_ratio, width)
        weight = weight * crop_edge_extend(mag, left, top, width, width)

        histogram = weighted_histogram(crop_edge_extend(ori, left, top, width, width),
                                       weight, -math.pi, math.pi, self.num_bins)
        histogram = smooth_weighted_histogram(histogram, self.smoothing)

        return [m * self.bin_width - math.pi
                for m in find_weighted_histogram_mode(histogram)]

    def orient_point(self, point: InterestPoint, ori: np.ndarray, mag: np.ndarray,
                     sigma_ratio: float = 1.0) -> InterestPointList:
        """
        One point per orientation hypothesis.

        The first hypothesis is written into ``point`` itself; each further
        hypothesis is a copy of it. Returns an empty list when no
        orientation could be computed.
        """
        angles = self.get_orientation(ori, mag, int(math.floor(point.x + 0.5)),
                                      int(math.floor(point.y + 0.5)), sigma_ratio)
        if not angles:
            return []
        point.orientation = angles[0]
        return [point] + [point.with_orientation(angle) for angle in angles[1:]]

    def assign_orientations(self, points: Sequence[InterestPoint], ori: np.ndarray,
                            mag: np.ndarray, sigma_ratio: float = 1.0) -> InterestPointList:
        """Orient every point against one plane, dropping points with no orientation"""
        oriented: InterestPointList = []
        for point in points:
            oriented.extend(self.orient_point(point, ori, mag, sigma_ratio))
        return oriented


def get_orientation(ori: np.ndarray, mag: np.ndarray, i0: int, j0: int,
                    sigma_ratio: float = 1.0) -> List[float]:
    """get_orientation with the default window, bin count and smoothing"""
    return OrientationAssigner().get_orientation(ori, mag, i0, j0, sigma_ratio)
