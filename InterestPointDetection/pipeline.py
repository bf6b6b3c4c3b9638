"""
Configuration driven detection.

Builds a detector from a preset or configuration dictionary, runs it with
the configured tiling and optionally extracts the support patch of every
point for descriptor computation.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import create_config_from_preset, create_detector_from_config, get_default_config, merge_configs
from .core_data_structures import InterestPointList
from .descriptor import extract_patch
from .image_data import to_gray_float
from .logger import get_logger

logger = get_logger("pipeline")


@dataclass
class DetectionResult:
    """Container for a configured detection run"""
    points: InterestPointList
    config: Dict[str, Any]
    supports: List[np.ndarray] = field(default_factory=list)

    def __len__(self):
        return len(self.points)


def detect_interest_points(image: np.ndarray,
                           preset: Optional[str] = None,
                           config: Optional[Dict[str, Any]] = None,
                           with_support: bool = False) -> DetectionResult:
    """
    Detect interest points as described by a preset and/or configuration

    Args:
        image: Input image (RGB or grayscale)
        preset: Optional preset name; ``config`` is merged over it
        config: Optional configuration overrides
        with_support: Also extract the support patch of every point

    Returns:
        DetectionResult with the points, the effective configuration and
        the support patches (empty unless requested)
    """
    effective = create_config_from_preset(preset) if preset else get_default_config()
    if config:
        effective = merge_configs(effective, config)

    detector = create_detector_from_config(effective)
    points = detector.detect(image, effective['max_tile_dimension'])

    supports = []
    if with_support:
        # Points are in source-image coordinates and their scale is
        # relative to the source image, so sample the source directly.
        gray = to_gray_float(image)
        supports = [extract_patch(gray, pt.x, pt.y, pt.scale,
                                  pt.orientation or 0.0, effective['support_size'])
                    for pt in points]
        logger.debug("Extracted %d support patches", len(supports))

    return DetectionResult(points=points, config=effective, supports=supports)
