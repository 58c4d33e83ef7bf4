import numpy as np
import pytest

from helpers import make_landmarks, mirror

from shapescan.errors import DegenerateGeometry, InsufficientLandmarks
from shapescan.face_features import FaceFeatures, extract_face_features


def test_extracts_all_nineteen_features(round_face):
    f = extract_face_features(round_face)
    assert isinstance(f, FaceFeatures)
    values = f.to_dict()
    assert len(values) == 19
    assert all(np.isfinite(v) for v in values.values())


def test_round_face_ratios(round_face):
    f = extract_face_features(round_face)
    assert f.width_height_ratio == pytest.approx(0.898, abs=1e-3)
    assert f.jaw_cheek_ratio == pytest.approx(0.42 / 0.449, abs=1e-3)
    assert f.width_variance < 0.08
    assert f.upper_third_ratio == pytest.approx(0.33)
    assert f.lower_third_ratio == pytest.approx(0.34)
    assert f.chin_length_ratio == pytest.approx(0.14)
    assert f.jaw_angle == pytest.approx(126.5, abs=0.5)
    assert f.chin_angle > 150


def test_dynamic_scan_recovers_under_measured_width(round_face):
    lm = round_face.copy()
    # pull the fixed cheekbone pair inward; the contour still spans the face
    lm[234, 0] = 0.4
    lm[454, 0] = 0.6
    f = extract_face_features(lm)
    assert f.width_height_ratio == pytest.approx(0.4425 / 0.5, abs=1e-3)


def test_input_not_mutated(round_face):
    before = round_face.copy()
    extract_face_features(round_face)
    np.testing.assert_array_equal(round_face, before)


def test_scale_invariance(round_face):
    a = extract_face_features(round_face)
    b = extract_face_features(round_face * 0.6)
    for name, value in a.to_dict().items():
        assert getattr(b, name) == pytest.approx(value, rel=1e-6, abs=1e-9), name


def test_mirror_invariance():
    lm = make_landmarks(right_skew=1.1)
    a = extract_face_features(lm)
    b = extract_face_features(mirror(lm))
    for name, value in a.to_dict().items():
        assert getattr(b, name) == pytest.approx(value, rel=1e-6, abs=1e-9), name


def test_degenerate_geometry_when_height_collapses(round_face):
    lm = round_face.copy()
    lm[10] = lm[152]
    out = extract_face_features(lm)
    assert isinstance(out, DegenerateGeometry)
    assert out.span == pytest.approx(0.0)


def test_insufficient_landmarks(round_face):
    out = extract_face_features(round_face[:400])
    assert isinstance(out, InsufficientLandmarks)
    assert out.count == 400


def test_accepts_xyz_and_mapping_points(round_face):
    xyz = [(x, y, 0.0) for x, y in round_face]
    dicts = [{"x": x, "y": y, "z": 0.1} for x, y in round_face]
    base = extract_face_features(round_face)
    assert extract_face_features(xyz) == base
    assert extract_face_features(dicts) == base


def test_from_mapping_fills_gaps(neutral):
    f = FaceFeatures.from_mapping({"jaw_angle": 140.0, "chin_angle": float("nan")})
    assert f.jaw_angle == 140.0
    assert f.chin_angle == neutral["chin_angle"]


def test_from_measurements():
    f = FaceFeatures.from_measurements(200.0, 150.0, 160.0, 120.0)
    assert f.width_height_ratio == pytest.approx(0.8)
    assert f.jaw_forehead_ratio == pytest.approx(0.8)
    assert f.width_variance == pytest.approx(40.0 / 160.0)
