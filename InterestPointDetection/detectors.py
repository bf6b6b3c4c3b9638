"""
Interest point detectors.

InterestPointDetector works on the source image at a single scale;
ScaledInterestPointDetector repeats the same pipeline on every plane of a
scale-space pyramid to achieve scale invariance. Both run:

    interest image -> extrema -> localize -> threshold -> cull -> orient
"""

import numpy as np
from typing import List, Optional

from .base_classes import InterestDetectorBase
from .core_data_structures import InterestPointList
from .extrema import find_peaks, find_peaks_in_octave
from .image_data import ImageInterestData
from .interest_operators import BaseInterestOperator, HarrisInterestOperator
from .localize import fit_peak, fit_peak_in_octave
from .logger import get_logger, Timer
from .octave import ImageOctave
from .orientation import OrientationAssigner
from .visualization import write_images, write_octave_images

logger = get_logger("detector")


class InterestPointDetector(InterestDetectorBase):
    """Interest point detection on the source image without scale space"""

    def __init__(self, interest: Optional[BaseInterestOperator] = None,
                 max_points: int = 1000,
                 orientation: Optional[OrientationAssigner] = None,
                 reject_unlocalized: bool = False,
                 debug_dir: Optional[str] = None):
        """
        Initialize single-scale detector

        Args:
            interest: Interest operator (Harris/Noble by default)
            max_points: Keep the max_points most interesting points; 0 disables culling
            orientation: Orientation assigner (default window and histogram)
            reject_unlocalized: Drop points whose subpixel fit fails instead
                of keeping them at their integer location
            debug_dir: If set, intermediate images are written there
        """
        super().__init__(max_points, debug_dir)
        self.interest = interest if interest is not None else HarrisInterestOperator()
        self.orientation = orientation if orientation is not None else OrientationAssigner()
        self.reject_unlocalized = reject_unlocalized

    def find_candidates(self, image: np.ndarray) -> InterestPointList:
        """Thresholded and culled, but not yet oriented, points of an image"""
        return self._find_candidates(ImageInterestData(image))

    def process_image(self, image: np.ndarray) -> InterestPointList:
        with Timer("Creating image data", logger):
            img_data = ImageInterestData(image)

        points = self._find_candidates(img_data)

        with Timer("Assigning orientations", logger):
            points = self.orientation.assign_orientations(
                points, img_data.orientation, img_data.magnitude)
        logger.debug("Oriented: %d interest points", len(points))

        if self.debug_dir:
            write_images(img_data, self.debug_dir)
        return points

    def _find_candidates(self, img_data: ImageInterestData) -> InterestPointList:
        with Timer("Computing interest image", logger):
            self.interest(img_data)

        with Timer("Finding extrema", logger):
            points = find_peaks(img_data.interest, self.interest.peak_type)
        logger.debug("Extrema: %d interest points", len(points))

        with Timer("Localizing", logger):
            points = self.localize(points, img_data)
        logger.debug("Localized: %d interest points", len(points))

        with Timer("Thresholding", logger):
            points = [pt for pt in points if self.interest.threshold(pt, img_data)]
        logger.debug("Thresholded: %d interest points", len(points))

        with Timer("Culling", logger):
            points = self.cull(points)
        return points

    def localize(self, points: InterestPointList,
                 img_data: ImageInterestData) -> InterestPointList:
        """Subpixel-refine points in place; failed fits are kept unless reject_unlocalized"""
        localized = []
        for pt in points:
            if fit_peak(img_data.interest, pt) or not self.reject_unlocalized:
                localized.append(pt)
        return localized


class ScaledInterestPointDetector(InterestDetectorBase):
    """
    Interest point detection using scale space methods to achieve scale
    invariance. Assumes the interest operator works properly over different
    choices of scale.
    """

    DEFAULT_SCALES = 3
    DEFAULT_OCTAVES = 3

    def __init__(self, interest: Optional[BaseInterestOperator] = None,
                 scales: int = DEFAULT_SCALES,
                 octaves: int = DEFAULT_OCTAVES,
                 max_points: int = 1000,
                 init_sigma: float = 1.6,
                 orientation: Optional[OrientationAssigner] = None,
                 reject_unlocalized: bool = False,
                 debug_dir: Optional[str] = None):
        """
        Initialize scale-space detector

        Args:
            interest: Interest operator (Harris/Noble by default)
            scales: Scales (planes searched for extrema) per octave
            octaves: Number of octaves
            max_points: Keep the max_points most interesting points of each
                octave; 0 disables culling
            init_sigma: Blur of the first plane of each octave
            orientation: Orientation assigner (default window and histogram)
            reject_unlocalized: Drop points whose subpixel fit fails
            debug_dir: If set, intermediate images are written there
        """
        super().__init__(max_points, debug_dir)
        if scales < 1:
            raise ValueError(f"scales must be positive, got {scales}")
        if octaves < 1:
            raise ValueError(f"octaves must be positive, got {octaves}")
        self.interest = interest if interest is not None else HarrisInterestOperator()
        self.scales = scales
        self.octaves = octaves
        self.init_sigma = init_sigma
        self.orientation = orientation if orientation is not None else OrientationAssigner()
        self.reject_unlocalized = reject_unlocalized
        self.octave_counts: List[int] = []

    def detect(self, image: np.ndarray, max_dimension: int = 0) -> InterestPointList:
        self.octave_counts = []
        return super().detect(image, max_dimension)

    def process_image(self, image: np.ndarray) -> InterestPointList:
        """
        Detect the points of one image or tile over all octaves.

        Survivor counts are added to octave_counts per octave index, so a
        tiled detect() reports the totals over all tiles.
        """
        with Timer("Creating initial image octave", logger):
            octave = ImageOctave(image, self.scales, self.init_sigma)

        points: InterestPointList = []

        for o in range(self.octaves):
            if min(octave.scales[0].shape[:2]) < 3:
                logger.debug("Octave %d is too small to search, stopping", o)
                break

            with Timer(f"Octave {o}", logger):
                new_points = self.process_octave(octave, o)

            if o < len(self.octave_counts):
                self.octave_counts[o] += len(new_points)
            else:
                self.octave_counts.append(len(new_points))
            points.extend(new_points)

            if o != self.octaves - 1:
                with Timer("Building next octave", logger):
                    octave.build_next()

        return points

    def process_octave(self, octave: ImageOctave, index: int = 0) -> InterestPointList:
        """
        Detect the points of one octave, in source-image coordinates.

        Args:
            octave: Octave to search
            index: Octave number, used for logging and debug file names
        """
        img_data = [ImageInterestData(plane) for plane in octave.scales]
        for k, data in enumerate(img_data):
            self.interest(data, octave.plane_index_to_scale(k))

        interest_stack = [data.interest for data in img_data]
        new_points = find_peaks_in_octave(interest_stack, self.interest.peak_type, octave)
        logger.debug("Octave %d extrema: %d", index, len(new_points))

        new_points = [pt for pt in new_points
                      if fit_peak_in_octave(interest_stack, pt, octave) or not self.reject_unlocalized]

        new_points = [pt for pt in new_points
                      if self.interest.threshold(pt, img_data[octave.scale_to_plane_index(pt.scale)])]
        logger.debug("Octave %d thresholded: %d", index, len(new_points))

        new_points = self.cull(new_points)
        new_points = self.assign_orientations(new_points, img_data, octave)
        logger.debug("Octave %d oriented: %d", index, len(new_points))

        self.to_base_frame(new_points, octave.base_scale)

        if self.debug_dir:
            write_octave_images(img_data, self.debug_dir, prefix=f"octave_{index:02d}_")
        return new_points

    def assign_orientations(self, points: InterestPointList,
                            img_data: List[ImageInterestData],
                            octave: ImageOctave) -> InterestPointList:
        """Orient each point on its own plane with a window scaled by sigma[k] / sigma[1]"""
        oriented: InterestPointList = []
        for pt in points:
            k = octave.scale_to_plane_index(pt.scale)
            sigma_ratio = octave.sigma[k] / octave.sigma[1]
            oriented.extend(self.orientation.orient_point(
                pt, img_data[k].orientation, img_data[k].magnitude, sigma_ratio))
        return oriented

    @staticmethod
    def to_base_frame(points: InterestPointList, base_scale: float):
        """Scale octave coordinates in place back to source-image coordinates"""
        for pt in points:
            pt.x *= base_scale
            pt.y *= base_scale
            pt.update_integer_location()


# Factory function for easy detector creation
def create_detector(detector_type: str, **kwargs) -> InterestDetectorBase:
    """
    Factory function to create interest point detectors

    Args:
        detector_type: Type of detector ('flat', 'scaled')
        **kwargs: Additional parameters for the detector

    Returns:
        Initialized detector instance

    Raises:
        ValueError: If detector_type is not supported
    """
    detector_map = {
        'flat': InterestPointDetector,
        'scaled': ScaledInterestPointDetector
    }

    if detector_type not in detector_map:
        available = ', '.join(detector_map.keys())
        raise ValueError(f"Unknown detector type: {detector_type}. Available: {available}")

    return detector_map[detector_type](**kwargs)
