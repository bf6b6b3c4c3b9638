import numpy as np
import pytest

from InterestPointDetection.core_data_structures import InterestPoint, PeakType
from InterestPointDetection.extrema import find_peaks, find_peaks_in_octave
from InterestPointDetection.image_data import ImageInterestData, image_blocks, to_gray_float
from InterestPointDetection.localize import fit_peak, fit_peak_in_octave
from InterestPointDetection.octave import ImageOctave


def quadratic_surface(x0, y0, shape=(20, 20)):
    rows, cols = np.mgrid[0:shape[0], 0:shape[1]].astype(np.float64)
    return -(cols - x0) ** 2 - (rows - y0) ** 2


# =============================================================================
# Extrema
# =============================================================================

def test_single_maximum_found():
    interest = np.zeros((12, 12), dtype=np.float32)
    interest[5, 7] = 1.0
    points = find_peaks(interest, PeakType.MAX)
    assert len(points) == 1
    assert (points[0].x, points[0].y, points[0].interest) == (7.0, 5.0, 1.0)
    assert (points[0].ix, points[0].iy) == (7, 5)


def test_minima_only_found_for_minmax():
    interest = np.zeros((12, 12), dtype=np.float32)
    interest[4, 4] = -1.0
    assert find_peaks(interest, PeakType.MAX) == []
    points = find_peaks(interest, PeakType.MINMAX)
    assert [(pt.x, pt.y, pt.interest) for pt in points] == [(4.0, 4.0, -1.0)]


def test_border_and_plateaus_are_not_extrema():
    interest = np.zeros((12, 12), dtype=np.float32)
    interest[0, 5] = 3.0
    interest[6, 6] = interest[6, 7] = 2.0
    assert find_peaks(interest, PeakType.MAX) == []


def test_octave_extrema_need_both_neighbouring_planes():
    octave = ImageOctave(np.zeros((12, 12), dtype=np.float32), num_scales=3)
    stack = [np.zeros((12, 12), dtype=np.float32) for _ in range(octave.num_planes)]
    stack[0][3, 3] = 5.0     # first plane: never reported
    stack[2][6, 6] = 1.0     # beaten by the plane above
    stack[3][6, 6] = 2.0

    points = find_peaks_in_octave(stack, PeakType.MAX, octave)
    assert len(points) == 1
    assert (points[0].x, points[0].y) == (6.0, 6.0)
    assert points[0].scale == pytest.approx(2.0)
    assert points[0].interest == 2.0


# =============================================================================
# Localization
# =============================================================================

def test_fit_peak_finds_quadratic_vertex():
    point = InterestPoint(x=10.0, y=8.0, interest=-0.25)
    assert fit_peak(quadratic_surface(10.3, 7.6), point)
    assert point.x == pytest.approx(10.3)
    assert point.y == pytest.approx(7.6)
    assert point.interest == pytest.approx(0.0, abs=1e-9)


def test_fit_peak_rerounds_integer_location():
    point = InterestPoint(x=10.0, y=8.0)
    assert fit_peak(quadratic_surface(10.7, 7.4), point)
    assert point.x == pytest.approx(10.7)
    assert point.y == pytest.approx(7.4)
    assert (point.ix, point.iy) == (11, 7)


def test_fit_peak_fails_on_flat_curvature():
    ramp = np.tile(np.arange(20, dtype=np.float64), (20, 1))
    point = InterestPoint(x=10.0, y=10.0)
    assert not fit_peak(ramp, point)
    assert (point.x, point.y) == (10.0, 10.0)


def test_fit_peak_rejects_distant_vertex_and_border():
    surface = quadratic_surface(12.5, 10.0)
    assert not fit_peak(surface, InterestPoint(x=10.0, y=10.0))
    assert not fit_peak(surface, InterestPoint(x=0.0, y=10.0))


def test_fit_peak_in_octave_refines_scale():
    octave = ImageOctave(np.zeros((20, 20), dtype=np.float32), num_scales=3)
    stack = [quadratic_surface(10.3, 7.6) - (k - 2.2) ** 2 for k in range(octave.num_planes)]
    point = InterestPoint(x=10.0, y=8.0, scale=octave.plane_index_to_scale(2))

    assert fit_peak_in_octave(stack, point, octave)
    assert point.x == pytest.approx(10.3)
    assert point.y == pytest.approx(7.6)
    assert point.scale == pytest.approx(2.0 ** (2.2 / 3))


def test_fit_peak_in_octave_rerounds_integer_location():
    octave = ImageOctave(np.zeros((20, 20), dtype=np.float32), num_scales=3)
    stack = [quadratic_surface(9.4, 7.7) - (k - 2.0) ** 2 for k in range(octave.num_planes)]
    point = InterestPoint(x=10.0, y=7.0, scale=octave.plane_index_to_scale(2))

    assert fit_peak_in_octave(stack, point, octave)
    assert point.x == pytest.approx(9.4)
    assert point.y == pytest.approx(7.7)
    assert (point.ix, point.iy) == (9, 8)


# =============================================================================
# Octaves
# =============================================================================

def test_octave_planes_and_scales():
    image = np.random.RandomState(1).rand(32, 32).astype(np.float32)
    octave = ImageOctave(image, num_scales=3, init_sigma=1.6)

    assert len(octave.scales) == 5
    assert octave.sigma[0] == pytest.approx(1.6)
    assert octave.sigma[3] == pytest.approx(3.2)
    assert octave.plane_index_to_scale(3) == pytest.approx(2.0)
    for k in range(octave.num_planes):
        assert octave.scale_to_plane_index(octave.plane_index_to_scale(k)) == k
    assert octave.scale_to_plane_index(100.0) == octave.num_planes - 1
    assert octave.scale_to_plane_index(0.1) == 0
    # Each plane is smoother than the one before
    variances = [plane.var() for plane in octave.scales]
    assert variances == sorted(variances, reverse=True)


def test_build_next_halves_resolution():
    octave = ImageOctave(np.full((32, 48), 0.25, dtype=np.float32), num_scales=2)
    octave.build_next()
    assert octave.base_scale == 2.0
    assert all(plane.shape == (16, 24) for plane in octave.scales)
    assert octave.plane_index_to_scale(0) == pytest.approx(2.0)
    np.testing.assert_allclose(octave.scales[-1], 0.25, atol=1e-6)


def test_octave_requires_a_scale():
    with pytest.raises(ValueError):
        ImageOctave(np.zeros((8, 8)), num_scales=0)


# =============================================================================
# Image data
# =============================================================================

def test_image_blocks_cover_image():
    blocks = image_blocks(70, 50, 32, 32)
    assert len(blocks) == 6
    assert blocks[0] == (0, 0, 32, 32)
    assert blocks[-1] == (64, 32, 6, 18)
    assert sum(w * h for _, _, w, h in blocks) == 70 * 50


def test_gray_conversion():
    gray8 = np.full((4, 5), 255, dtype=np.uint8)
    np.testing.assert_allclose(to_gray_float(gray8), 1.0)
    rgb = np.zeros((4, 5, 3), dtype=np.uint8)
    assert to_gray_float(rgb).shape == (4, 5)
    float_image = np.full((4, 5), 0.3, dtype=np.float32)
    np.testing.assert_array_equal(to_gray_float(float_image), float_image)
    with pytest.raises(ValueError):
        to_gray_float(np.zeros((2, 2, 2, 2)))


def test_gradients_are_central_differences():
    ramp = np.tile(np.arange(10, dtype=np.float32) * 2.0, (6, 1))
    data = ImageInterestData(ramp)
    assert data.shape == (6, 10)
    np.testing.assert_allclose(data.gradient_x[:, 1:-1], 2.0)
    np.testing.assert_allclose(data.gradient_y, 0.0)
    np.testing.assert_allclose(data.orientation[:, 1:-1], 0.0)
    np.testing.assert_allclose(data.magnitude[:, 1:-1], 2.0)
    assert data.interest is None
