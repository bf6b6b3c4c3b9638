"""
Image filtering and geometric transform helpers.

Thin wrappers around OpenCV for the Gaussian kernels, separable
convolution, Laplacian and affine resampling used by the interest
operators, the scale-space octave and the support patch extractor.
All filters extend image edges (BORDER_REPLICATE).
"""

import math
import cv2
import numpy as np
from typing import Optional

BORDER = cv2.BORDER_REPLICATE


def default_kernel_size(sigma: float) -> int:
    """Odd kernel size covering +/- 3 sigma"""
    return 2 * int(math.ceil(3.0 * sigma)) + 1


def gaussian_kernel(sigma: float, size: int = 0) -> np.ndarray:
    """
    Normalized 1-D Gaussian kernel.

    Args:
        sigma: Standard deviation in pixels
        size: Kernel length; 0 picks default_kernel_size(sigma)

    Returns:
        float32 array of shape (size,)
    """
    if size <= 0:
        size = default_kernel_size(sigma)
    kernel = cv2.getGaussianKernel(size, sigma, cv2.CV_32F).ravel()
    return kernel / kernel.sum()


def gaussian_kernel_2d(sigma: float, size: int) -> np.ndarray:
    """Normalized size x size Gaussian kernel"""
    k = gaussian_kernel(sigma, size)
    kernel = np.outer(k, k)
    return (kernel / kernel.sum()).astype(np.float32)


def separable_convolution(image: np.ndarray, kernel_x: np.ndarray,
                          kernel_y: Optional[np.ndarray] = None) -> np.ndarray:
    """Convolve rows with kernel_x and columns with kernel_y"""
    if kernel_y is None:
        kernel_y = kernel_x
    return cv2.sepFilter2D(image.astype(np.float32), cv2.CV_32F,
                           np.asarray(kernel_x, dtype=np.float32),
                           np.asarray(kernel_y, dtype=np.float32),
                           borderType=BORDER)


def gaussian_blur(image: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian blur with edge extension; sigma <= 0 returns a copy"""
    if sigma <= 0:
        return image.astype(np.float32, copy=True)
    k = gaussian_kernel(sigma)
    return separable_convolution(image, k, k)


def laplacian(image: np.ndarray) -> np.ndarray:
    """Discrete 5-point Laplacian"""
    return cv2.Laplacian(image.astype(np.float32), cv2.CV_32F, ksize=1, borderType=BORDER)


def normalize(image: np.ndarray) -> np.ndarray:
    """Linearly rescale an image to [0, 1]; constant images map to 0"""
    image = image.astype(np.float32)
    lo, hi = float(image.min()), float(image.max())
    if hi - lo <= 0:
        return np.zeros_like(image)
    return (image - lo) / (hi - lo)


def crop_edge_extend(image: np.ndarray, left: int, top: int,
                     width: int, height: int) -> np.ndarray:
    """
    Crop a window, replicating edge pixels for any part outside the image.
    """
    rows, cols = image.shape[:2]
    pad_left = max(0, -left)
    pad_top = max(0, -top)
    pad_right = max(0, left + width - cols)
    pad_bottom = max(0, top + height - rows)
    if pad_left or pad_top or pad_right or pad_bottom:
        image = cv2.copyMakeBorder(image, pad_top, pad_bottom, pad_left, pad_right, BORDER)
        left += pad_left
        top += pad_top
    return image[top:top + height, left:left + width]


# =============================================================================
# Affine Transforms (3x3 homogeneous matrices acting on (x, y, 1))
# =============================================================================

def translate_transform(dx: float, dy: float) -> np.ndarray:
    return np.array([[1.0, 0.0, dx],
                     [0.0, 1.0, dy],
                     [0.0, 0.0, 1.0]])


def rotate_transform(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s, 0.0],
                     [s, c, 0.0],
                     [0.0, 0.0, 1.0]])


def resample_transform(sx: float, sy: float) -> np.ndarray:
    return np.array([[sx, 0.0, 0.0],
                     [0.0, sy, 0.0],
                     [0.0, 0.0, 1.0]])


def compose(*transforms: np.ndarray) -> np.ndarray:
    """
    Compose transforms right to left: compose(A, B, C) applies C first.
    """
    result = np.eye(3)
    for t in transforms:
        result = result @ t
    return result


def transform_image(image: np.ndarray, transform: np.ndarray,
                    width: int, height: int) -> np.ndarray:
    """
    Rasterize ``image`` warped by ``transform`` (source -> output pixel
    coordinates) into a width x height buffer. Bilinear interpolation,
    edge extension outside the source.
    """
    return cv2.warpAffine(image.astype(np.float32), transform[:2, :].astype(np.float64),
                          (int(width), int(height)),
                          flags=cv2.INTER_LINEAR, borderMode=BORDER)
