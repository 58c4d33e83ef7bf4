import math

import pytest

from shapescan.geometry import (
    NEUTRAL_ANGLE, angle_at_point, distance, point_line_distance, ratio, round_half_up,
)


def test_distance_normalized_and_scaled():
    assert distance((0.0, 0.0), (0.3, 0.4)) == pytest.approx(0.5)
    assert distance((0.0, 0.0), (0.5, 0.5), 640, 480) == pytest.approx(math.hypot(320, 240))


def test_angle_at_point():
    assert angle_at_point((1, 0), (0, 0), (0, 1)) == pytest.approx(90.0)
    assert angle_at_point((1, 0), (0, 0), (-1, 0)) == pytest.approx(180.0)
    # magnitude only: orientation does not matter
    assert angle_at_point((0, 1), (0, 0), (1, 0)) == pytest.approx(90.0)


def test_angle_degenerate_returns_neutral():
    assert angle_at_point((0.2, 0.2), (0.2, 0.2), (0.5, 0.1)) == NEUTRAL_ANGLE


def test_point_line_distance():
    assert point_line_distance((0.5, 0.3), (0, 0), (1, 0)) == pytest.approx(0.3)
    # degenerate segment falls back to point distance
    assert point_line_distance((0.3, 0.4), (0, 0), (0, 0)) == pytest.approx(0.5)


@pytest.mark.parametrize("den", [0.0, 1e-9, float("nan"), float("inf")])
def test_ratio_guards_denominator(den):
    assert ratio(1.0, den) == 1.0
    assert ratio(1.0, den, fallback=0.25) == 0.25


def test_ratio_plain():
    assert ratio(1.0, 4.0) == 0.25


@pytest.mark.parametrize("x, expected", [(62.5, 63), (72.5, 73), (0.5, 1), (2.4999, 2), (-2.5, -2), (68.0, 68)])
def test_round_half_up(x, expected):
    assert round_half_up(x) == expected
