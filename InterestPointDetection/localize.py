"""
Subpixel localization of interest points.

Fits a quadratic to the interest function around each integer extremum
using central differences (a second order Taylor expansion) and moves the
point to the vertex of that quadratic. A fit is rejected when the Hessian
is singular or the vertex lies more than one sample away; rejected points
keep their integer location. A successful fit also re-rounds ix/iy.
"""

import numpy as np
from typing import Sequence

from .core_data_structures import InterestPoint, Score
from .octave import ImageOctave

MAX_OFFSET = 1.0


def _spatial_derivatives(I: np.ndarray, r: int, c: int):
    dx = 0.5 * (I[r, c + 1] - I[r, c - 1])
    dy = 0.5 * (I[r + 1, c] - I[r - 1, c])
    dxx = I[r, c + 1] - 2.0 * I[r, c] + I[r, c - 1]
    dyy = I[r + 1, c] - 2.0 * I[r, c] + I[r - 1, c]
    dxy = 0.25 * (I[r + 1, c + 1] - I[r + 1, c - 1] - I[r - 1, c + 1] + I[r - 1, c - 1])
    return dx, dy, dxx, dyy, dxy


def _solve(hessian: np.ndarray, gradient: np.ndarray):
    if abs(np.linalg.det(hessian)) < 1e-12:
        return None
    offset = -np.linalg.solve(hessian, gradient)
    if not np.all(np.isfinite(offset)) or np.any(np.abs(offset) > MAX_OFFSET):
        return None
    return offset


def _in_interior(I: np.ndarray, r: int, c: int) -> bool:
    rows, cols = I.shape[:2]
    return 1 <= r < rows - 1 and 1 <= c < cols - 1


def fit_peak(interest: np.ndarray, point: InterestPoint) -> bool:
    """
    Refine a point's (x, y) in place from a single interest image.

    Returns:
        True if the quadratic fit succeeded and the point was moved
    """
    I = np.asarray(interest, dtype=np.float64)
    r, c = point.iy, point.ix
    if not _in_interior(I, r, c):
        return False

    dx, dy, dxx, dyy, dxy = _spatial_derivatives(I, r, c)
    gradient = np.array([dx, dy])
    offset = _solve(np.array([[dxx, dxy], [dxy, dyy]]), gradient)
    if offset is None:
        return False

    point.x = c + float(offset[0])
    point.y = r + float(offset[1])
    point.update_integer_location()
    point.interest = Score(float(I[r, c] + 0.5 * gradient.dot(offset)))
    return True


def fit_peak_in_octave(interest_stack: Sequence[np.ndarray], point: InterestPoint,
                       octave: ImageOctave) -> bool:
    """
    Refine a point's (x, y, scale) in place from the interest images of an octave.

    Points on the first or last plane are only refined in space.

    Returns:
        True if the quadratic fit succeeded and the point was moved
    """
    k = octave.scale_to_plane_index(point.scale)
    if k <= 0 or k >= len(interest_stack) - 1:
        return fit_peak(interest_stack[k], point)

    below = np.asarray(interest_stack[k - 1], dtype=np.float64)
    here = np.asarray(interest_stack[k], dtype=np.float64)
    above = np.asarray(interest_stack[k + 1], dtype=np.float64)
    r, c = point.iy, point.ix
    if not _in_interior(here, r, c):
        return False

    dx, dy, dxx, dyy, dxy = _spatial_derivatives(here, r, c)
    ds = 0.5 * (above[r, c] - below[r, c])
    dss = above[r, c] - 2.0 * here[r, c] + below[r, c]
    dxs = 0.25 * (above[r, c + 1] - above[r, c - 1] - below[r, c + 1] + below[r, c - 1])
    dys = 0.25 * (above[r + 1, c] - above[r - 1, c] - below[r + 1, c] + below[r - 1, c])

    gradient = np.array([dx, dy, ds])
    hessian = np.array([[dxx, dxy, dxs],
                        [dxy, dyy, dys],
                        [dxs, dys, dss]])
    offset = _solve(hessian, gradient)
    if offset is None:
        return False

    point.x = c + float(offset[0])
    point.y = r + float(offset[1])
    point.update_integer_location()
    point.scale = octave.plane_index_to_scale(k + float(offset[2]))
    point.interest = Score(float(here[r, c] + 0.5 * gradient.dot(offset)))
    return True
