"""
Extrema search in interest images.

Finds strict local extrema of a single interest image (8-neighbourhood) or
of a stack of interest images across scale (26-neighbourhood). A one pixel
image border, and in the stacked case the first and last planes, are never
reported since they lack a complete neighbourhood.
"""

import cv2
import numpy as np
from typing import List, Sequence

from .core_data_structures import InterestPoint, InterestPointList, PeakType, Score
from .octave import ImageOctave

_RING = np.array([[1, 1, 1],
                  [1, 0, 1],
                  [1, 1, 1]], dtype=np.uint8)
_BLOCK = np.ones((3, 3), dtype=np.uint8)


def _neighbour_max(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return cv2.dilate(image, kernel, borderType=cv2.BORDER_REPLICATE)


def _neighbour_min(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return cv2.erode(image, kernel, borderType=cv2.BORDER_REPLICATE)


def _interior_mask(shape) -> np.ndarray:
    mask = np.zeros(shape, dtype=bool)
    if shape[0] > 2 and shape[1] > 2:
        mask[1:-1, 1:-1] = True
    return mask


def _mask_to_points(mask: np.ndarray, interest: np.ndarray, scale: float) -> InterestPointList:
    rows, cols = np.nonzero(mask)
    return [InterestPoint(x=float(c), y=float(r), scale=scale,
                          interest=Score(float(interest[r, c])))
            for r, c in zip(rows, cols)]


def find_peaks(interest: np.ndarray, peak_type: PeakType,
               scale: float = 1.0) -> InterestPointList:
    """
    Find strict local extrema of one interest image.

    Args:
        interest: Interest image
        peak_type: PeakType.MAX for maxima only, PeakType.MINMAX for both
        scale: Scale assigned to the returned points

    Returns:
        Points in row-major order with position and interest set
    """
    interest = np.asarray(interest, dtype=np.float32)
    mask = _interior_mask(interest.shape)
    if not mask.any():
        return []

    extrema = interest > _neighbour_max(interest, _RING)
    if peak_type == PeakType.MINMAX:
        extrema |= interest < _neighbour_min(interest, _RING)
    return _mask_to_points(extrema & mask, interest, scale)


def find_peaks_in_octave(interest_stack: Sequence[np.ndarray], peak_type: PeakType,
                         octave: ImageOctave) -> InterestPointList:
    """
    Find strict space+scale extrema across the interest images of an octave.

    Point coordinates are in the octave's pixels; point scale is the
    absolute scale of the plane the extremum was found in.
    """
    stack = [np.asarray(plane, dtype=np.float32) for plane in interest_stack]
    points: List[InterestPoint] = []
    if len(stack) < 3:
        return points

    mask = _interior_mask(stack[0].shape)
    if not mask.any():
        return points

    for k in range(1, len(stack) - 1):
        below, here, above = stack[k - 1], stack[k], stack[k + 1]
        upper = np.maximum.reduce([_neighbour_max(here, _RING),
                                   _neighbour_max(below, _BLOCK),
                                   _neighbour_max(above, _BLOCK)])
        extrema = here > upper
        if peak_type == PeakType.MINMAX:
            lower = np.minimum.reduce([_neighbour_min(here, _RING),
                                       _neighbour_min(below, _BLOCK),
                                       _neighbour_min(above, _BLOCK)])
            extrema |= here < lower
        points.extend(_mask_to_points(extrema & mask, here, octave.plane_index_to_scale(k)))
    return points
