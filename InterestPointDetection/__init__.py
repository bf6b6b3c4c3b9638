"""
InterestPointDetection - Oriented interest point detection

Detects repeatable interest points in an image, optionally across a
scale-space pyramid, and assigns each a canonical orientation so that
descriptors can be computed in a rotation and scale normalized frame.

Key Features:
- Harris/Noble corner and Laplacian of Gaussian blob interest operators
- Single-scale and multi-octave scale-space detectors
- Histogram based orientation assignment with multiple hypotheses
- Tiled processing of very large images
- Support patch extraction for descriptor computation

Quick Start:
    >>> from InterestPointDetection import InterestPointDetector, LogInterestOperator
    >>>
    >>> detector = InterestPointDetector(max_points=500)
    >>> points = detector.detect(image)
    >>>
    >>> # Or from a preset
    >>> from InterestPointDetection import detect_interest_points
    >>> result = detect_interest_points(image, preset='blobs', with_support=True)
"""

__version__ = '1.0.0'

# =============================================================================
# CORE DATA STRUCTURES
# =============================================================================

from .core_data_structures import (
    InterestPoint,
    InterestPointList,
    PeakType,
    Score,
    cull,
    crop,
    keypoint_error,
    points_to_cv2_keypoints,
    points_from_cv2_keypoints,
    points_to_serializable,
    points_from_serializable,
)

# =============================================================================
# INTEREST OPERATORS
# =============================================================================

from .interest_operators import (
    BaseInterestOperator,
    HarrisInterestOperator,
    LogInterestOperator,
    create_interest_operator,
)

# =============================================================================
# DETECTORS
# =============================================================================

from .base_classes import InterestDetectorBase
from .detectors import (
    InterestPointDetector,
    ScaledInterestPointDetector,
    create_detector,
)
from .orientation import OrientationAssigner, get_orientation
from .descriptor import extract_patch, get_support

# =============================================================================
# SCALE SPACE AND IMAGE DATA
# =============================================================================

from .image_data import ImageInterestData, image_blocks, to_gray_float
from .octave import ImageOctave

# =============================================================================
# CONFIGURATION AND PIPELINE
# =============================================================================

from .config import (
    get_default_config,
    create_config_from_preset,
    merge_configs,
    validate_config,
    save_config,
    load_config,
    get_available_presets,
    describe_preset,
    create_detector_from_config,
)
from .pipeline import DetectionResult, detect_interest_points

# =============================================================================
# EXPORT, VISUALIZATION AND UTILITIES
# =============================================================================

from .export import points_to_dataframe, export_points_csv, save_points_json, load_points_json
from .visualization import write_images, write_octave_images, plot_interest_points
from .utils import suggest_max_tile_dimension
from .logger import setup_logger, get_logger, configure_root_logger, set_level, Timer

__all__ = [
    # Core data structures
    'InterestPoint',
    'InterestPointList',
    'PeakType',
    'Score',
    'cull',
    'crop',
    'keypoint_error',
    'points_to_cv2_keypoints',
    'points_from_cv2_keypoints',
    'points_to_serializable',
    'points_from_serializable',

    # Interest operators
    'BaseInterestOperator',
    'HarrisInterestOperator',
    'LogInterestOperator',
    'create_interest_operator',

    # Detectors
    'InterestDetectorBase',
    'InterestPointDetector',
    'ScaledInterestPointDetector',
    'create_detector',
    'OrientationAssigner',
    'get_orientation',
    'extract_patch',
    'get_support',

    # Scale space and image data
    'ImageInterestData',
    'image_blocks',
    'to_gray_float',
    'ImageOctave',

    # Configuration and pipeline
    'get_default_config',
    'create_config_from_preset',
    'merge_configs',
    'validate_config',
    'save_config',
    'load_config',
    'get_available_presets',
    'describe_preset',
    'create_detector_from_config',
    'DetectionResult',
    'detect_interest_points',

    # Export, visualization and utilities
    'points_to_dataframe',
    'export_points_csv',
    'save_points_json',
    'load_points_json',
    'write_images',
    'write_octave_images',
    'plot_interest_points',
    'suggest_max_tile_dimension',
    'setup_logger',
    'get_logger',
    'configure_root_logger',
    'set_level',
    'Timer',
]
