"""
Per-image derived data used by the detectors.

ImageInterestData bundles a single-channel source image with its
gradients, edge orientation and edge magnitude, plus the interest image
filled in by an interest operator.
"""

import cv2
import numpy as np
from typing import List, Optional, Tuple

from .filters import BORDER


def to_gray_float(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to single-channel float32.

    Colour images (RGB or RGBA) are converted to grayscale. Integer images
    are rescaled to [0, 1] by their dtype's maximum value; float images are
    passed through unchanged.

    Args:
        image: Input image (H, W), (H, W, 1), (H, W, 3) or (H, W, 4)

    Returns:
        float32 array of shape (H, W)
    """
    image = np.asarray(image)
    if image.ndim == 3:
        if image.shape[2] == 1:
            image = image[:, :, 0]
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
        else:
            image = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    elif image.ndim != 2:
        raise ValueError(f"Image must have 2 or 3 dimensions, got {image.ndim}")

    if np.issubdtype(image.dtype, np.integer):
        return image.astype(np.float32) / float(np.iinfo(image.dtype).max)
    return image.astype(np.float32)


class ImageInterestData:
    """Gradients, orientation, magnitude and interest for one image plane"""

    def __init__(self, source: np.ndarray):
        self.source = np.ascontiguousarray(source, dtype=np.float32)
        # Central differences: (I[x+1] - I[x-1]) / 2
        self.gradient_x = cv2.Sobel(self.source, cv2.CV_32F, 1, 0, ksize=1,
                                    scale=0.5, borderType=BORDER)
        self.gradient_y = cv2.Sobel(self.source, cv2.CV_32F, 0, 1, ksize=1,
                                    scale=0.5, borderType=BORDER)
        self.orientation = np.arctan2(self.gradient_y, self.gradient_x)
        self.magnitude = np.hypot(self.gradient_x, self.gradient_y)
        self.interest: Optional[np.ndarray] = None

    @property
    def shape(self) -> Tuple[int, int]:
        return self.source.shape[:2]

    def set_interest(self, interest: np.ndarray):
        self.interest = np.asarray(interest, dtype=np.float32)


def image_blocks(width: int, height: int, block_width: int,
                 block_height: int) -> List[Tuple[int, int, int, int]]:
    """
    Partition an image into non-overlapping blocks.

    Blocks are returned row-major as (x, y, w, h); blocks on the right and
    bottom edges may be smaller than the requested size.
    """
    blocks = []
    for y in range(0, height, block_height):
        for x in range(0, width, block_width):
            blocks.append((x, y, min(block_width, width - x), min(block_height, height - y)))
    return blocks
