"""
Weighted histogram primitives for orientation assignment.

The histograms here are circular: the value range wraps, so the value at
the top of the range falls in bin 0 and the first and last bins are
neighbours when smoothing and when searching for modes.
"""

import math
import numpy as np
from typing import List


def weighted_histogram(values: np.ndarray, weights: np.ndarray,
                       lo: float, hi: float, num_bins: int) -> np.ndarray:
    """
    Histogram of ``values`` in [lo, hi) where each sample adds its weight.

    Args:
        values: Sample values (any shape)
        weights: Per-sample weights, same shape as values
        lo, hi: Value range; values outside wrap around
        num_bins: Number of bins

    Returns:
        float64 array of shape (num_bins,)
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    weights = np.asarray(weights, dtype=np.float64).ravel()
    bins = np.floor((values - lo) / (hi - lo) * num_bins).astype(np.int64) % num_bins
    return np.bincount(bins, weights=weights, minlength=num_bins)


def smooth_weighted_histogram(histogram: np.ndarray, bandwidth: float) -> np.ndarray:
    """
    Circularly smooth a histogram with a truncated Gaussian.

    ``bandwidth`` is the standard deviation in degrees of the full circle,
    so its width in bins is bandwidth / (360 / num_bins).
    """
    histogram = np.asarray(histogram, dtype=np.float64)
    num_bins = len(histogram)
    sigma = bandwidth / (360.0 / num_bins)
    if sigma <= 0:
        return histogram.copy()

    radius = int(math.ceil(3.0 * sigma))
    offsets = np.arange(-radius, radius + 1)
    kernel = np.exp(-0.5 * (offsets / sigma) ** 2)
    kernel /= kernel.sum()

    smoothed = np.zeros(num_bins)
    for offset, weight in zip(offsets, kernel):
        smoothed += weight * np.roll(histogram, offset)
    return smoothed


def find_weighted_histogram_mode(histogram: np.ndarray) -> List[int]:
    """
    Indices of bins strictly greater than both circular neighbours, in bin order.
    """
    histogram = np.asarray(histogram)
    if len(histogram) < 3:
        return []
    left = np.roll(histogram, 1)
    right = np.roll(histogram, -1)
    return [int(i) for i in np.nonzero((histogram > left) & (histogram > right))[0]]
