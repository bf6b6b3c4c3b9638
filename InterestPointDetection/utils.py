"""
Utility functions for the interest point detector.
"""

import psutil

from .logger import get_logger

logger = get_logger("utils")

# Approximate float32 working images held per pixel by a detector:
# source, 2 gradients, orientation, magnitude, interest and the three
# smoothed Harris products, times the planes of an octave.
FLOATS_PER_PIXEL = 9
BYTES_PER_FLOAT = 4


def suggest_max_tile_dimension(num_planes: int = 1,
                               memory_fraction: float = 0.25,
                               minimum: int = 256,
                               maximum: int = 8192) -> int:
    """
    Suggest a max tile dimension for InterestDetectorBase.detect().

    Sizes square tiles so that the detector's working images for one tile
    fit into a fraction of the currently available memory. The result is
    rounded down to a multiple of 256 and clamped to [minimum, maximum].

    Args:
        num_planes: Planes held at once (scales + 2 for scale-space detection)
        memory_fraction: Share of available memory a tile may use
        minimum: Smallest dimension returned
        maximum: Largest dimension returned

    Returns:
        Tile dimension in pixels
    """
    available = psutil.virtual_memory().available
    budget = available * memory_fraction
    bytes_per_pixel = FLOATS_PER_PIXEL * BYTES_PER_FLOAT * max(1, num_planes)
    dimension = int((budget / bytes_per_pixel) ** 0.5)
    dimension = (dimension // 256) * 256
    dimension = min(max(dimension, minimum), maximum)
    logger.debug("Available memory %.0f MB, suggested tile dimension %d",
                 available / 1024 / 1024, dimension)
    return dimension
