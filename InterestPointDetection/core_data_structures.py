"""
Core data structures and enums for the interest point detector.

This module contains the InterestPoint record passed between every stage
of the detection pipeline, the peak polarity enumeration used by the
interest operators, and helpers for culling, cropping and converting
point sets.
"""

import math
import cv2
import numpy as np
from typing import List, Tuple, Dict, Optional, NewType, Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum


# Interest function value. Higher is more interesting for corner measures;
# blob measures are compared by magnitude.
Score = NewType('Score', float)

# Side of the nominal orientation window at the base scale (2 * 5 + 1).
# Used to map between InterestPoint.scale and cv2.KeyPoint.size.
KEYPOINT_SIZE_PER_SCALE = 11.0


class PeakType(Enum):
    """Which extrema of an interest image are considered features"""
    MAX = "max"         # Only local maxima (corners)
    MINMAX = "minmax"   # Local minima and maxima (blobs)


@dataclass
class InterestPoint:
    """A single detected interest point.

    ``x``/``y`` are the subpixel (col, row) location and ``ix``/``iy`` the
    rounded integer location. ``orientation`` is None until an orientation
    has been assigned, after which it lies in [-pi, pi).

    Points order by descending interest: ``a < b`` means ``a`` is more
    interesting than ``b``, so ``sorted(points)`` puts the strongest first.
    """
    x: float
    y: float
    scale: float = 1.0
    interest: Score = Score(0.0)
    orientation: Optional[float] = None
    ix: Optional[int] = None
    iy: Optional[int] = None
    descriptor: List[float] = field(default_factory=list)

    def __post_init__(self):
        if self.ix is None:
            self.ix = int(math.floor(self.x + 0.5))
        if self.iy is None:
            self.iy = int(math.floor(self.y + 0.5))

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self.x
        elif index == 1:
            return self.y
        raise IndexError("Interest Point: Invalid index")

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __lt__(self, other: 'InterestPoint') -> bool:
        return other.interest < self.interest

    @property
    def has_orientation(self) -> bool:
        return self.orientation is not None

    def update_integer_location(self):
        """Recompute ix/iy from the subpixel location"""
        self.ix = int(math.floor(self.x + 0.5))
        self.iy = int(math.floor(self.y + 0.5))

    def translate(self, dx: float, dy: float):
        """Shift the point in place, integer location included"""
        self.x += dx
        self.y += dy
        self.update_integer_location()

    def with_orientation(self, orientation: float) -> 'InterestPoint':
        """Return a copy of this point carrying a different orientation"""
        return replace(self, orientation=float(orientation), descriptor=list(self.descriptor))

    def to_cv2_keypoint(self) -> cv2.KeyPoint:
        """Convert to cv2.KeyPoint so OpenCV descriptor extractors can use it"""
        angle = -1.0
        if self.orientation is not None:
            angle = math.degrees(self.orientation) % 360.0
        return cv2.KeyPoint(float(self.x), float(self.y),
                            float(self.scale * KEYPOINT_SIZE_PER_SCALE),
                            float(angle), float(self.interest))

    @classmethod
    def from_cv2_keypoint(cls, kp: cv2.KeyPoint) -> 'InterestPoint':
        orientation = None
        if kp.angle >= 0:
            orientation = math.radians(kp.angle)
            if orientation >= math.pi:
                orientation -= 2 * math.pi
        return cls(
            x=float(kp.pt[0]),
            y=float(kp.pt[1]),
            scale=float(kp.size) / KEYPOINT_SIZE_PER_SCALE,
            interest=Score(float(kp.response)),
            orientation=orientation
        )

    def to_serializable(self) -> Dict:
        """Convert to serializable format"""
        return {
            'x': float(self.x),
            'y': float(self.y),
            'ix': int(self.ix),
            'iy': int(self.iy),
            'scale': float(self.scale),
            'orientation': None if self.orientation is None else float(self.orientation),
            'interest': float(self.interest),
            'descriptor': [float(v) for v in self.descriptor]
        }

    @classmethod
    def from_serializable(cls, data: Dict) -> 'InterestPoint':
        return cls(
            x=data['x'],
            y=data['y'],
            scale=data.get('scale', 1.0),
            interest=Score(data.get('interest', 0.0)),
            orientation=data.get('orientation'),
            ix=data.get('ix'),
            iy=data.get('iy'),
            descriptor=list(data.get('descriptor', []))
        )


InterestPointList = List[InterestPoint]


# =============================================================================
# Point Set Utilities
# =============================================================================

def cull(points: InterestPointList, max_points: int) -> InterestPointList:
    """
    Keep the ``max_points`` most interesting points.

    The result is sorted by descending interest. ``max_points <= 0``
    disables culling (the points are still sorted).

    Args:
        points: Candidate interest points
        max_points: Maximum number of points to keep

    Returns:
        New list of points
    """
    ranked = sorted(points)
    if max_points > 0 and max_points < len(ranked):
        ranked = ranked[:max_points]
    return ranked


def crop(points: Sequence[InterestPoint],
         bbox: Tuple[float, float, float, float]) -> InterestPointList:
    """
    Select only the interest points that fall within a bounding box.

    Args:
        points: Interest points
        bbox: (min_x, min_y, max_x, max_y); min inclusive, max exclusive

    Returns:
        Points inside the box, in their original order
    """
    min_x, min_y, max_x, max_y = bbox
    return [pt for pt in points
            if min_x <= pt.x < max_x and min_y <= pt.y < max_y]


def keypoint_error(H: np.ndarray, p1: InterestPoint, p2: InterestPoint) -> float:
    """
    Error between keypoint p2 and keypoint p1 transformed by a 3x3 matrix H.

    Used to score correspondences when fitting a homography with RANSAC.
    """
    transformed = np.asarray(H, dtype=np.float64) @ np.array([p1.x, p1.y, 1.0])
    return float(np.linalg.norm(np.array([p2.x, p2.y, 1.0]) - transformed))


def points_to_cv2_keypoints(points: Sequence[InterestPoint]) -> List[cv2.KeyPoint]:
    """Convert interest points to cv2.KeyPoint objects"""
    return [pt.to_cv2_keypoint() for pt in points]


def points_from_cv2_keypoints(keypoints: Sequence[cv2.KeyPoint]) -> InterestPointList:
    """Convert cv2.KeyPoint objects back to interest points"""
    return [InterestPoint.from_cv2_keypoint(kp) for kp in keypoints]


def points_to_serializable(points: Sequence[InterestPoint]) -> List[Dict]:
    """Convert interest points to serializable format"""
    return [pt.to_serializable() for pt in points]


def points_from_serializable(points_data: List[Dict]) -> InterestPointList:
    """Convert serialized points back to InterestPoint objects"""
    return [InterestPoint.from_serializable(data) for data in points_data]
