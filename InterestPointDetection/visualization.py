"""
Visualization Functions for the interest point detector

Debug dumps of the images internal to the detectors, and matplotlib
plots of detected interest points.
"""

import math
import cv2
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List, Optional, Sequence

from .core_data_structures import InterestPoint
from .filters import normalize
from .image_data import ImageInterestData
from .logger import get_logger
from .orientation import ORIENTATION_HALF_WIDTH

logger = get_logger("visualization")


def _write_normalized(path: Path, image: np.ndarray):
    cv2.imwrite(str(path), np.uint8(np.rint(normalize(image) * 255.0)))


def write_images(img_data: ImageInterestData, output_dir: str = ".") -> List[str]:
    """
    Dump the images internal to a single-scale detector.

    Writes the x and y gradients, edge orientation and magnitude, and
    interest image as grad_x.jpg, grad_y.jpg, ori.jpg, mag.jpg and
    interest.jpg.

    Returns:
        Paths of the written files
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    images = {
        'grad_x.jpg': img_data.gradient_x,
        'grad_y.jpg': img_data.gradient_y,
        'ori.jpg': img_data.orientation,
        'mag.jpg': img_data.magnitude,
    }
    if img_data.interest is not None:
        images['interest.jpg'] = img_data.interest

    written = []
    for filename, image in images.items():
        _write_normalized(out / filename, image)
        written.append(str(out / filename))
    logger.debug("Wrote %d debug images to %s", len(written), out)
    return written


def write_octave_images(img_data: Sequence[ImageInterestData], output_dir: str = ".",
                        prefix: str = "") -> List[str]:
    """
    Dump the images internal to a scale-space detector, one set per plane.

    Files are named scale_%02d.jpg, grad_x_%02d.jpg, grad_y_%02d.jpg,
    ori_%02d.jpg, mag_%02d.jpg and interest_%02d.jpg, optionally prefixed
    (e.g. with the octave number).
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []
    for k, data in enumerate(img_data):
        images = {
            'scale': data.source,
            'grad_x': data.gradient_x,
            'grad_y': data.gradient_y,
            'ori': data.orientation,
            'mag': data.magnitude,
        }
        if data.interest is not None:
            images['interest'] = data.interest
        for name, image in images.items():
            path = out / f"{prefix}{name}_{k:02d}.jpg"
            _write_normalized(path, image)
            written.append(str(path))
    logger.debug("Wrote %d debug images to %s", len(written), out)
    return written


def plot_interest_points(image: np.ndarray,
                         points: Sequence[InterestPoint],
                         ax: Optional[plt.Axes] = None,
                         show_orientation: bool = True,
                         title: Optional[str] = None,
                         color: str = 'lime') -> plt.Axes:
    """
    Plot interest points over an image.

    Each point is drawn as a circle whose radius follows its scale, with a
    line from the centre along its orientation.

    Args:
        image: Image the points were detected in
        points: Interest points
        ax: Axes to draw on (a new figure is created if None)
        show_orientation: Draw orientation ticks
        title: Optional plot title
        color: Marker colour

    Returns:
        The matplotlib axes
    """
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(10, 8))

    if image.ndim == 2:
        ax.imshow(image, cmap='gray')
    else:
        ax.imshow(image)

    for pt in points:
        radius = ORIENTATION_HALF_WIDTH * pt.scale
        ax.add_patch(plt.Circle((pt.x, pt.y), radius, fill=False, color=color, linewidth=0.8))
        if show_orientation and pt.orientation is not None:
            ax.plot([pt.x, pt.x + radius * math.cos(pt.orientation)],
                    [pt.y, pt.y + radius * math.sin(pt.orientation)],
                    color=color, linewidth=0.8)

    ax.set_title(title or f"{len(points)} interest points")
    ax.axis('off')
    return ax
