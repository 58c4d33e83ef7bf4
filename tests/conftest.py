"""Shared fixtures for shapescan tests."""

import pytest

from helpers import make_landmarks

from shapescan.face_features import NEUTRAL_FEATURES, FaceFeatures


@pytest.fixture
def round_face():
    return make_landmarks()


@pytest.fixture
def neutral():
    return dict(NEUTRAL_FEATURES)


@pytest.fixture
def features(neutral):
    """Build a FaceFeatures from neutral values plus overrides."""
    def _make(**overrides):
        return FaceFeatures(**{**neutral, **overrides})
    return _make
