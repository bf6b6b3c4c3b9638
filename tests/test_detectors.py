import math
import os

import numpy as np
import pytest

from InterestPointDetection.base_classes import InterestDetectorBase
from InterestPointDetection.core_data_structures import InterestPoint, Score
from InterestPointDetection.detectors import (
    InterestPointDetector, ScaledInterestPointDetector, create_detector,
)
from InterestPointDetection.interest_operators import HarrisInterestOperator, LogInterestOperator


def as_records(points):
    return [pt.to_serializable() for pt in points]


class BlockRecordingDetector(InterestDetectorBase):
    """Returns one fixed point per processed block and remembers block shapes"""

    def __init__(self):
        super().__init__(max_points=0)
        self.shapes = []

    def process_image(self, image):
        self.shapes.append(image.shape)
        return [InterestPoint(x=1.5, y=2.5, interest=Score(1.0), orientation=0.0)]


# =============================================================================
# Single-scale detector
# =============================================================================

def test_constant_image_has_no_points(constant_image):
    assert InterestPointDetector().detect(constant_image) == []
    assert ScaledInterestPointDetector(interest=LogInterestOperator()).detect(constant_image) == []


def test_blob_candidate_at_blob_centre(blob_image):
    detector = InterestPointDetector(interest=LogInterestOperator(), max_points=1)
    candidates = detector.find_candidates(blob_image)
    assert len(candidates) == 1
    assert candidates[0].x == pytest.approx(32.0, abs=0.5)
    assert candidates[0].y == pytest.approx(32.0, abs=0.5)
    assert candidates[0].interest > 0.03


def test_detected_points_are_oriented_and_consistent(textured_image):
    points = InterestPointDetector().detect(textured_image)
    assert len(points) > 0
    height, width = textured_image.shape
    for pt in points:
        assert pt.orientation is not None
        assert -math.pi <= pt.orientation < math.pi
        assert 0 <= pt.x <= width - 1 and 0 <= pt.y <= height - 1
        assert pt.ix == math.floor(pt.x + 0.5)
        assert pt.iy == math.floor(pt.y + 0.5)


def test_detect_accepts_uint8_rgb(textured_image):
    gray8 = np.uint8(np.clip(textured_image, 0, 1) * 255)
    rgb = np.dstack([gray8, gray8, gray8])
    detector = InterestPointDetector()
    assert as_records(detector(rgb)) == as_records(detector.detect(gray8))


def test_candidates_pass_threshold(textured_image):
    operator = HarrisInterestOperator()
    candidates = InterestPointDetector(interest=operator, max_points=0).find_candidates(textured_image)
    assert len(candidates) > 0
    assert all(operator.threshold(pt) for pt in candidates)


def test_culling_keeps_most_interesting(textured_image):
    all_points = InterestPointDetector(max_points=0).find_candidates(textured_image)
    top = InterestPointDetector(max_points=5).find_candidates(textured_image)
    assert len(all_points) > 5
    assert len(top) == 5
    assert [pt.interest for pt in top] == [pt.interest for pt in all_points[:5]]
    assert min(pt.interest for pt in top) >= max(pt.interest for pt in all_points[5:])


def test_whole_image_tile_matches_untiled(textured_image):
    detector = InterestPointDetector()
    untiled = detector.detect(textured_image)
    tiled = detector.detect(textured_image, max_dimension=200)
    assert as_records(tiled) == as_records(untiled)


def test_tiled_points_are_shifted_to_image_coordinates():
    detector = BlockRecordingDetector()
    points = detector.detect(np.zeros((50, 70), dtype=np.float32), max_dimension=32)

    assert detector.shapes == [(32, 32), (32, 32), (32, 6), (18, 32), (18, 32), (18, 6)]
    assert [(pt.x, pt.y) for pt in points] == [
        (1.5, 2.5), (33.5, 2.5), (65.5, 2.5), (1.5, 34.5), (33.5, 34.5), (65.5, 34.5)]
    assert [(pt.ix, pt.iy) for pt in points] == [
        (2, 3), (34, 3), (66, 3), (2, 35), (34, 35), (66, 35)]


def test_unlocalized_points_kept_unless_rejected(textured_image, monkeypatch):
    monkeypatch.setattr('InterestPointDetection.detectors.fit_peak', lambda interest, point: False)

    kept = InterestPointDetector().find_candidates(textured_image)
    assert len(kept) > 0
    assert all(pt.x == pt.ix and pt.y == pt.iy for pt in kept)

    assert InterestPointDetector(reject_unlocalized=True).find_candidates(textured_image) == []


def test_debug_images_written(textured_image, tmp_path):
    InterestPointDetector(debug_dir=str(tmp_path)).detect(textured_image)
    for name in ['grad_x.jpg', 'grad_y.jpg', 'ori.jpg', 'mag.jpg', 'interest.jpg']:
        assert os.path.exists(tmp_path / name)


# =============================================================================
# Scale-space detector
# =============================================================================

def test_scaled_detection(blocky_image):
    detector = ScaledInterestPointDetector(scales=3, octaves=3)
    points = detector.detect(blocky_image)

    assert len(points) > 0
    assert len(detector.octave_counts) == 3
    assert sum(detector.octave_counts) == len(points)

    height, width = blocky_image.shape
    for pt in points:
        assert 0 <= pt.x <= width - 1 and 0 <= pt.y <= height - 1
        assert pt.scale > 0
        assert -math.pi <= pt.orientation < math.pi
        assert pt.ix == math.floor(pt.x + 0.5)
        assert pt.iy == math.floor(pt.y + 0.5)


def test_tiled_scaled_detection_counts_every_tile(blocky_image):
    detector = ScaledInterestPointDetector(scales=3, octaves=2)
    points = detector.detect(blocky_image, max_dimension=48)

    assert len(points) > 0
    assert len(detector.octave_counts) == 2
    assert sum(detector.octave_counts) == len(points)

    # A second run starts the counts afresh
    again = detector.detect(blocky_image, max_dimension=48)
    assert sum(detector.octave_counts) == len(again) == len(points)


def test_scaled_detection_stops_on_tiny_octaves():
    detector = ScaledInterestPointDetector(octaves=5)
    image = np.random.RandomState(3).rand(16, 16).astype(np.float32)
    detector.detect(image)
    # 16 -> 8 -> 4 -> 2: the fourth octave is too small to search
    assert len(detector.octave_counts) == 3


def test_to_base_frame_scales_coordinates():
    points = [InterestPoint(x=3.3, y=7.8), InterestPoint(x=0.0, y=12.6)]
    originals = [(pt.x, pt.y) for pt in points]
    ScaledInterestPointDetector.to_base_frame(points, 4.0)
    for pt, (x, y) in zip(points, originals):
        assert pt.x / 4.0 == pytest.approx(x, abs=1e-5)
        assert pt.y / 4.0 == pytest.approx(y, abs=1e-5)
        assert pt.ix == math.floor(pt.x + 0.5)
    assert (points[0].ix, points[0].iy) == (13, 31)


def test_scaled_debug_images_written(blocky_image, tmp_path):
    ScaledInterestPointDetector(octaves=1, debug_dir=str(tmp_path)).detect(blocky_image)
    assert os.path.exists(tmp_path / 'octave_00_scale_00.jpg')
    assert os.path.exists(tmp_path / 'octave_00_interest_04.jpg')


# =============================================================================
# Construction
# =============================================================================

def test_invalid_parameters():
    with pytest.raises(ValueError):
        InterestPointDetector(max_points=-1)
    with pytest.raises(ValueError):
        ScaledInterestPointDetector(scales=0)
    with pytest.raises(ValueError):
        ScaledInterestPointDetector(octaves=0)


def test_detector_factory():
    assert isinstance(create_detector('flat', max_points=10), InterestPointDetector)
    scaled = create_detector('scaled', scales=2, octaves=2)
    assert isinstance(scaled, ScaledInterestPointDetector)
    assert isinstance(scaled.interest, HarrisInterestOperator)
    with pytest.raises(ValueError, match="Unknown detector type"):
        create_detector('pyramid')
