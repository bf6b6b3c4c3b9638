"""
Scale-space octave.

An ImageOctave holds num_scales + 2 progressively blurred planes of one
resolution level. Plane k has blur sigma[k] = init_sigma * 2**(k / num_scales)
in the octave's own pixels, so plane num_scales is blurred twice as much
as plane 0 and seeds the next octave after 2x downsampling. base_scale is
the size of one octave pixel in source-image pixels.
"""

import math
import numpy as np
from typing import List

from .filters import gaussian_blur


class ImageOctave:
    """One octave of a Gaussian scale-space pyramid"""

    def __init__(self, source: np.ndarray, num_scales: int = 3, init_sigma: float = 1.6):
        if num_scales < 1:
            raise ValueError(f"num_scales must be positive, got {num_scales}")
        self.num_scales = num_scales
        self.num_planes = num_scales + 2
        self.init_sigma = init_sigma
        self.base_scale = 1.0
        self.sigma: List[float] = [init_sigma * 2.0 ** (k / float(num_scales))
                                   for k in range(self.num_planes)]
        self.scales: List[np.ndarray] = []
        self._build_planes(gaussian_blur(np.asarray(source, dtype=np.float32), init_sigma))

    def _build_planes(self, first_plane: np.ndarray):
        self.scales = [first_plane]
        for k in range(1, self.num_planes):
            # Incremental blur taking plane k-1 from sigma[k-1] to sigma[k]
            delta = math.sqrt(self.sigma[k] ** 2 - self.sigma[k - 1] ** 2)
            self.scales.append(gaussian_blur(self.scales[k - 1], delta))

    def plane_index_to_scale(self, plane: float) -> float:
        """Absolute scale (in source-image units) of a possibly fractional plane"""
        return self.base_scale * 2.0 ** (plane / float(self.num_scales))

    def scale_to_plane_index(self, scale: float) -> int:
        """Nearest plane index for an absolute scale, clamped to this octave"""
        if scale <= 0:
            return 0
        plane = self.num_scales * math.log2(scale / self.base_scale)
        return int(min(max(round(plane), 0), self.num_planes - 1))

    def build_next(self):
        """Advance to the next octave: downsample plane num_scales by 2 and re-blur"""
        seed = self.scales[self.num_scales][::2, ::2].copy()
        self.base_scale *= 2.0
        self._build_planes(seed)
