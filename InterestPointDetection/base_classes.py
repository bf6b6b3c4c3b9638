"""
Base class for interest point detectors.

A detector only has to implement process_image(), which finds oriented
interest points in one single-channel float image. InterestDetectorBase
turns that into detect(), which converts the input to grayscale and
optionally splits large images into tiles.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional

from .core_data_structures import InterestPointList, cull
from .image_data import to_gray_float, image_blocks
from .logger import get_logger, Timer

logger = get_logger("detector")


class InterestDetectorBase(ABC):
    """Abstract base class for all interest point detectors"""

    def __init__(self, max_points: int = 1000, debug_dir: Optional[str] = None):
        """
        Args:
            max_points: Keep only the max_points most interesting points
                (per image, tile or octave); 0 disables culling
            debug_dir: If set, intermediate images are written there
        """
        if max_points < 0:
            raise ValueError(f"max_points must be >= 0, got {max_points}")
        self.max_points = max_points
        self.debug_dir = debug_dir
        self.name = self.__class__.__name__

    @abstractmethod
    def process_image(self, image: np.ndarray) -> InterestPointList:
        """
        Detect interest points in a single-channel float image

        Args:
            image: Grayscale float32 image

        Returns:
            Oriented interest points in image coordinates
        """
        pass

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Preprocess image for interest point detection

        Args:
            image: Input image

        Returns:
            Grayscale float32 image
        """
        return to_gray_float(image)

    def detect(self, image: np.ndarray, max_dimension: int = 0) -> InterestPointList:
        """
        Find the interest points in an image.

        Some images are too large to be processed all at once. A non-zero
        max_dimension splits the image into blocks of at most that size
        which are processed individually; their points are shifted back
        to image coordinates and concatenated. A few interest points along
        block borders may be lost. A value of 2048 works well in most cases.

        Args:
            image: Input image (RGB or grayscale)
            max_dimension: Maximum block width/height; 0 processes the whole image

        Returns:
            Oriented interest points
        """
        gray = self.preprocess_image(image)
        height, width = gray.shape[:2]

        with Timer(f"{self.name} total", logger):
            if not max_dimension:
                points = self.process_image(gray)
            else:
                points = []
                blocks = image_blocks(width, height, max_dimension, max_dimension)
                logger.debug("Processing %d blocks of at most %dx%d pixels",
                             len(blocks), max_dimension, max_dimension)
                for x0, y0, w, h in blocks:
                    block_points = self.process_image(gray[y0:y0 + h, x0:x0 + w])
                    for pt in block_points:
                        pt.translate(x0, y0)
                    points.extend(block_points)

        logger.info("%s: %d interest points found", self.name, len(points))
        return points

    def __call__(self, image: np.ndarray, max_dimension: int = 0) -> InterestPointList:
        return self.detect(image, max_dimension)

    def cull(self, points: InterestPointList) -> InterestPointList:
        """Sort by interest and limit to the max_points most interesting points"""
        original_num_points = len(points)
        points = cull(points, self.max_points)
        logger.debug("Culled %d interest points (limit %d), %d remaining",
                     original_num_points - len(points), self.max_points, len(points))
        return points
