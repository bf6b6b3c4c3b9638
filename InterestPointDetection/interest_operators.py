"""
Interest operators (Harris/Noble corners, Laplacian of Gaussian blobs).

An interest operator turns the derived data of an image plane into an
interest image, decides whether a localized point is strong enough to
keep, and declares which extrema of its interest image are features.
Operators hold only their parameters and can be shared between detectors.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional

from .core_data_structures import InterestPoint, PeakType
from .filters import gaussian_kernel, separable_convolution, laplacian
from .image_data import ImageInterestData

NOBLE_EPSILON = 1e-6


class BaseInterestOperator(ABC):
    """Abstract base class for all interest operators"""

    peak_type: PeakType = PeakType.MAX

    def __init__(self, threshold: float):
        self.threshold_value = threshold
        self.name = self.__class__.__name__

    @abstractmethod
    def compute(self, data: ImageInterestData, scale: float = 1.0) -> np.ndarray:
        """
        Compute the interest image of a plane and store it on ``data``

        Args:
            data: Derived data of the plane
            scale: Absolute scale of the plane

        Returns:
            Interest image
        """
        pass

    @abstractmethod
    def threshold(self, point: InterestPoint,
                  data: Optional[ImageInterestData] = None) -> bool:
        """
        Decide whether a point is interesting enough to keep

        Args:
            point: Localized interest point
            data: Derived data of the plane the point was found in

        Returns:
            True to keep the point
        """
        pass

    def __call__(self, data: ImageInterestData, scale: float = 1.0) -> np.ndarray:
        return self.compute(data, scale)

    def interest_image(self, source: np.ndarray, scale: float = 1.0) -> np.ndarray:
        """Interest image of a raw single-channel image"""
        return self.compute(ImageInterestData(source), scale)

    def __repr__(self) -> str:
        return f"{self.name}(threshold={self.threshold_value})"


class HarrisInterestOperator(BaseInterestOperator):
    """
    Harris corner interest operator.

    Returns a "cornerness" image whose local maxima correspond to corners.
    By default uses the Noble measure det / trace, which needs no tuning.
    A non-negative k selects the Harris measure det - k * trace^2
    (typical values: 0.04 <= k <= 0.15).
    """

    peak_type = PeakType.MAX

    def __init__(self, threshold: float = 1e-5, k: float = -1.0):
        super().__init__(threshold)
        self.k = k

    @property
    def uses_noble_measure(self) -> bool:
        return self.k < 0

    def compute(self, data: ImageInterestData, scale: float = 1.0) -> np.ndarray:
        kernel = gaussian_kernel(scale)
        gx, gy = data.gradient_x, data.gradient_y

        # Elements of the Harris matrix
        Ix2 = separable_convolution(gx * gx, kernel, kernel)
        Iy2 = separable_convolution(gy * gy, kernel, kernel)
        Ixy = separable_convolution(gx * gy, kernel, kernel)

        trace = Ix2 + Iy2
        det = Ix2 * Iy2 - Ixy * Ixy
        if self.uses_noble_measure:
            interest = det / (trace + NOBLE_EPSILON)
        else:
            interest = det - self.k * trace * trace

        data.set_interest(interest)
        return data.interest

    def threshold(self, point: InterestPoint,
                  data: Optional[ImageInterestData] = None) -> bool:
        return point.interest > self.threshold_value

    def __repr__(self) -> str:
        return f"{self.name}(threshold={self.threshold_value}, k={self.k})"


class LogInterestOperator(BaseInterestOperator):
    """
    Laplacian of Gaussian blob interest operator.

    The interest image is the negated Laplacian of the (already blurred)
    plane multiplied by the plane's scale, so bright blobs on a dark
    background give positive peaks and dark blobs negative ones. Both
    polarities are features.
    """

    peak_type = PeakType.MINMAX

    def __init__(self, threshold: float = 0.03):
        super().__init__(threshold)

    def compute(self, data: ImageInterestData, scale: float = 1.0) -> np.ndarray:
        data.set_interest(-scale * laplacian(data.source))
        return data.interest

    def threshold(self, point: InterestPoint,
                  data: Optional[ImageInterestData] = None) -> bool:
        return abs(point.interest) > self.threshold_value


# Factory function for easy operator creation
def create_interest_operator(operator_type: str, **kwargs) -> BaseInterestOperator:
    """
    Factory function to create interest operators

    Args:
        operator_type: Type of operator ('harris', 'log')
        **kwargs: Additional parameters for the operator

    Returns:
        Initialized operator instance

    Raises:
        ValueError: If operator_type is not supported
    """
    operator_map = {
        'harris': HarrisInterestOperator,
        'log': LogInterestOperator
    }

    key = operator_type.lower()
    if key not in operator_map:
        available = ', '.join(operator_map.keys())
        raise ValueError(f"Unknown interest operator: {operator_type}. Available: {available}")

    return operator_map[key](**kwargs)
