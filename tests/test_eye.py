import pytest

from helpers import make_landmarks, mirror

from shapescan.eye_classifier import (
    EYE_THRESHOLDS, classify_eye_features, classify_eye_shape, classify_spacing,
)
from shapescan.eye_features import EyeFeatures, extract_eye_features


def eye(ear=0.28, corner_angle=2.0, hood_score=1.6, spacing_ratio=1.0):
    return EyeFeatures(ear=ear, corner_angle=corner_angle, hood_score=hood_score,
                       spacing_ratio=spacing_ratio)


def test_extract_eye_features(round_face):
    f = extract_eye_features(round_face)
    assert f.ear == pytest.approx(0.28)
    assert f.corner_angle == pytest.approx(3.0)
    assert f.hood_score == pytest.approx(1.6)
    assert f.spacing_ratio == pytest.approx(1.0)


def test_corner_angle_sign():
    up = extract_eye_features(make_landmarks(eye_angle=8.0))
    down = extract_eye_features(make_landmarks(eye_angle=-8.0))
    assert up.corner_angle == pytest.approx(8.0)
    assert down.corner_angle == pytest.approx(-8.0)


def test_eye_features_mirror_and_scale_invariant():
    lm = make_landmarks(eye_angle=7.0, ear=0.31, hood=1.3, spacing=1.2)
    base = extract_eye_features(lm)
    for other in (extract_eye_features(mirror(lm)), extract_eye_features(lm * 0.7)):
        for name, value in base.to_dict().items():
            assert getattr(other, name) == pytest.approx(value), name


def test_short_landmark_set_returns_none(round_face):
    assert extract_eye_features(round_face[:300]) is None
    assert classify_eye_shape(round_face[:300]) is None


def test_classify_from_landmarks(round_face):
    result = classify_eye_shape(round_face)
    assert result.shape == "almond"
    assert result.confidence == 45 + 3 * 14
    assert result.spacing == "proportional"


@pytest.mark.parametrize("hood", [1.0, 1.5, 2.5])
def test_upturned_scenario(hood):
    result = classify_eye_features(eye(ear=0.25, corner_angle=15.0, hood_score=hood))
    assert result.shape == "upturned"
    assert result.confidence == 75


def test_hooded_outranks_everything():
    assert classify_eye_features(eye(hood_score=0.8, corner_angle=15.0)).shape == "hooded"
    strong = classify_eye_features(eye(hood_score=0.8))
    weak = classify_eye_features(eye(hood_score=1.0, ear=0.22))
    assert (strong.shape, strong.confidence) == ("hooded", 80)
    assert (weak.shape, weak.confidence) == ("hooded", 60)


def test_loose_hood_needs_low_ear():
    assert classify_eye_features(eye(hood_score=1.0, ear=0.30)).shape == "almond"


@pytest.mark.parametrize("features, shape, confidence", [
    (eye(corner_angle=10.0, ear=0.26), "upturned", 55),
    (eye(corner_angle=30.0), "upturned", 85),
    (eye(corner_angle=-8.0), "downturned", 71),
    (eye(corner_angle=-5.0, ear=0.26), "downturned", 50),
    (eye(ear=0.36, corner_angle=2.0), "round", 67),
    (eye(ear=0.40, corner_angle=7.0), "round", 70),
    (eye(ear=0.18, corner_angle=0.0, hood_score=1.3), "almond", 45 + 2 * 14),
    (eye(corner_angle=-5.0, ear=0.22), "almond", 45 + 3 * 14),
])
def test_cascade(features, shape, confidence):
    result = classify_eye_features(features)
    assert (result.shape, result.confidence) == (shape, confidence)


def test_weak_upturned_requires_narrow_eye():
    result = classify_eye_features(eye(corner_angle=10.0, ear=0.30))
    assert result.shape == "almond"
    # angle over the typical band costs one almond sub-condition
    assert result.confidence == 45 + 2 * 14


@pytest.mark.parametrize("ratio, label", [
    (0.70, "close-set"), (1.30, "wide-set"), (1.00, "proportional"),
    (EYE_THRESHOLDS["close_set_max"], "proportional"),
    (EYE_THRESHOLDS["wide_set_min"], "proportional"),
])
def test_spacing(ratio, label):
    assert classify_spacing(ratio) == label
    assert classify_eye_features(eye(spacing_ratio=ratio)).spacing == label


def test_spacing_from_landmarks():
    assert classify_eye_shape(make_landmarks(spacing=0.7)).spacing == "close-set"
    assert classify_eye_shape(make_landmarks(spacing=1.3)).spacing == "wide-set"


def test_result_dict():
    d = classify_eye_features(eye()).to_dict()
    assert d["shape"] == "almond"
    assert set(d["features"]) == {"ear", "corner_angle", "hood_score", "spacing_ratio"}


@pytest.mark.parametrize("angle, shape, confidence", [
    (12.5, "upturned", 73),
    (-6.25, "downturned", 68),
])
def test_cascade_confidence_rounds_halves_up(angle, shape, confidence):
    result = classify_eye_features(eye(corner_angle=angle))
    assert (result.shape, result.confidence) == (shape, confidence)
