"""
Shared fixtures: synthetic images built with numpy and OpenCV.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')

import cv2
import numpy as np
import pytest

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))


@pytest.fixture
def constant_image():
    return np.full((64, 64), 0.5, dtype=np.float32)


@pytest.fixture
def blob_image():
    """A bright 9x9 square centred on (32, 32), blurred with sigma 3"""
    image = np.zeros((64, 64), dtype=np.float32)
    image[28:37, 28:37] = 1.0
    return cv2.GaussianBlur(image, (0, 0), 3.0)


@pytest.fixture
def corner_image():
    """Dark image with a bright bottom-right quadrant starting at (20, 20)"""
    image = np.zeros((40, 40), dtype=np.float32)
    image[20:, 20:] = 1.0
    return image


@pytest.fixture
def textured_image():
    """Smoothed random texture with plenty of corners"""
    rng = np.random.RandomState(42)
    noise = rng.rand(96, 128).astype(np.float32)
    return cv2.GaussianBlur(noise, (0, 0), 2.0)


@pytest.fixture
def blocky_image():
    """Random 8x8 pixel blocks: strong edges and corners at every scale"""
    rng = np.random.RandomState(7)
    return np.kron(rng.rand(12, 16), np.ones((8, 8))).astype(np.float32)
