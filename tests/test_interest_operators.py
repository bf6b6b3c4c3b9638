import numpy as np
import pytest

from InterestPointDetection.core_data_structures import InterestPoint, PeakType, Score
from InterestPointDetection.image_data import ImageInterestData
from InterestPointDetection.interest_operators import (
    HarrisInterestOperator, LogInterestOperator, create_interest_operator,
)


def test_noble_is_default_corner_measure():
    operator = HarrisInterestOperator()
    assert operator.uses_noble_measure
    assert operator.threshold_value == 1e-5
    assert operator.peak_type == PeakType.MAX


def test_constant_image_has_no_cornerness(constant_image):
    interest = HarrisInterestOperator().interest_image(constant_image)
    assert np.abs(interest).max() == pytest.approx(0.0, abs=1e-12)


def test_noble_peaks_at_corner(corner_image):
    data = ImageInterestData(corner_image)
    interest = HarrisInterestOperator()(data)
    assert data.interest is interest

    row, col = np.unravel_index(np.argmax(interest), interest.shape)
    assert abs(row - 20) <= 2 and abs(col - 20) <= 2
    assert interest[row, col] > 1e-3
    # Straight edge away from the corner: one gradient direction, det == 0
    assert interest[30, 20] == pytest.approx(0.0, abs=1e-9)


def test_harris_measure_penalizes_edges(corner_image):
    operator = HarrisInterestOperator(k=0.04)
    assert not operator.uses_noble_measure
    interest = operator.interest_image(corner_image)
    assert interest.max() > 0
    assert interest[30, 20] < 0


def test_corner_threshold_is_strict():
    operator = HarrisInterestOperator(threshold=0.5)
    assert operator.threshold(InterestPoint(x=0, y=0, interest=Score(0.51)))
    assert not operator.threshold(InterestPoint(x=0, y=0, interest=Score(0.5)))
    assert not operator.threshold(InterestPoint(x=0, y=0, interest=Score(-0.9)))


def test_blob_threshold_is_symmetric():
    operator = LogInterestOperator(threshold=0.03)
    assert operator.peak_type == PeakType.MINMAX
    assert operator.threshold(InterestPoint(x=0, y=0, interest=Score(0.05)))
    assert operator.threshold(InterestPoint(x=0, y=0, interest=Score(-0.05)))
    assert not operator.threshold(InterestPoint(x=0, y=0, interest=Score(0.02)))
    assert not operator.threshold(InterestPoint(x=0, y=0, interest=Score(-0.03)))


def test_bright_blob_gives_positive_peak_at_centre(blob_image):
    interest = LogInterestOperator().interest_image(blob_image)
    row, col = np.unravel_index(np.argmax(interest), interest.shape)
    assert (row, col) == (32, 32)
    assert interest[32, 32] > 0.03


def test_blob_response_scales_with_plane_scale(blob_image):
    operator = LogInterestOperator()
    base = operator.interest_image(blob_image, scale=1.0)
    doubled = operator.interest_image(blob_image, scale=2.0)
    np.testing.assert_allclose(doubled, 2.0 * base, rtol=1e-5, atol=1e-7)


def test_operator_factory():
    assert isinstance(create_interest_operator('harris', k=0.06), HarrisInterestOperator)
    assert isinstance(create_interest_operator('LoG', threshold=0.1), LogInterestOperator)
    with pytest.raises(ValueError, match="Unknown interest operator"):
        create_interest_operator('hessian')
