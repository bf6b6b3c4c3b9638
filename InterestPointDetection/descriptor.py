"""
Support regions for descriptor computation.

The support region of an interest point is a fixed size square patch,
resampled so that the point sits at the centre, its orientation is
cancelled and one patch pixel corresponds to one unit of its scale.
Interpolation and edge extension are left to filters.transform_image.
"""

import numpy as np

from .core_data_structures import InterestPoint
from .filters import (compose, translate_transform, resample_transform,
                      rotate_transform, transform_image)
from .octave import ImageOctave

DEFAULT_SUPPORT_SIZE = 41


def extract_patch(image: np.ndarray, x: float, y: float, scale: float,
                  orientation: float, size: int = DEFAULT_SUPPORT_SIZE) -> np.ndarray:
    """
    Get the size x size support region around (x, y) in ``image``.

    The point is translated to the origin, rotated by -orientation, scaled
    by 1 / scale and translated to the patch centre.

    Returns:
        float32 array of shape (size, size)
    """
    half_size = (size - 1) / 2.0
    scaling = 1.0 / scale
    transform = compose(translate_transform(half_size, half_size),
                        resample_transform(scaling, scaling),
                        rotate_transform(-orientation),
                        translate_transform(-x, -y))
    return transform_image(image, transform, size, size)


def get_support(point: InterestPoint, octave: ImageOctave,
                size: int = DEFAULT_SUPPORT_SIZE) -> np.ndarray:
    """
    Get the support region of a point from the octave plane matching its scale.

    The point's coordinates are used as given, so they must be expressed
    in the pixels of ``octave``.
    """
    plane = octave.scale_to_plane_index(point.scale)
    orientation = point.orientation if point.orientation is not None else 0.0
    return extract_patch(octave.scales[plane], point.x, point.y, point.scale,
                         orientation, size)
