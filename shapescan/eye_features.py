# shapescan/eye_features.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, NamedTuple, Optional

from shapescan.geometry import deg, distance, ratio
from shapescan.landmarks import LandmarkSet, as_landmarks, usable

NEUTRAL_EAR = 0.25
NEUTRAL_HOOD = 2.0
NEUTRAL_SPACING = 1.0


class EyeTopology(NamedTuple):
    inner: int
    outer: int
    upper_center: int
    lower_center: int
    upper_outer: int     # outer third of the lid
    lower_outer: int
    brow_center: int


# Subject's right eye appears on the image left
RIGHT_EYE = EyeTopology(inner=133, outer=33, upper_center=159, lower_center=145,
                        upper_outer=160, lower_outer=144, brow_center=105)
LEFT_EYE = EyeTopology(inner=362, outer=263, upper_center=386, lower_center=374,
                       upper_outer=387, lower_outer=373, brow_center=334)


@dataclass(frozen=True)
class EyeFeatures:
    ear: float
    corner_angle: float          # degrees, positive = outer corner higher
    hood_score: float
    spacing_ratio: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def eye_aspect_ratio(lm: LandmarkSet, eye: EyeTopology) -> float:
    v1 = distance(lm[eye.upper_center], lm[eye.lower_center])
    v2 = distance(lm[eye.upper_outer], lm[eye.lower_outer])
    return ratio((v1 + v2) / 2.0, distance(lm[eye.inner], lm[eye.outer]), NEUTRAL_EAR)


def corner_angle(lm: LandmarkSet, eye: EyeTopology) -> float:
    inner, outer = lm[eye.inner], lm[eye.outer]
    # Image y grows downward: positive when the outer corner sits higher
    dy = inner[1] - outer[1]
    dx = abs(outer[0] - inner[0])
    if dx == 0 and dy == 0:
        return 0.0
    return deg(math.atan2(dy, dx))


def hood_score(lm: LandmarkSet, eye: EyeTopology) -> float:
    opening = distance(lm[eye.upper_center], lm[eye.lower_center])
    return ratio(distance(lm[eye.brow_center], lm[eye.upper_center]), opening, NEUTRAL_HOOD)


def extract_eye_features(landmarks) -> Optional[EyeFeatures]:
    """Both-eye means of EAR, corner tilt, hood score, plus inter-eye spacing.

    Returns None when the landmark set is shorter than the face-mesh topology.
    """
    lm = as_landmarks(landmarks)
    if not usable(lm):
        return None
    eyes = (RIGHT_EYE, LEFT_EYE)
    widths = [distance(lm[e.inner], lm[e.outer]) for e in eyes]
    inter_eye = distance(lm[RIGHT_EYE.inner], lm[LEFT_EYE.inner])
    return EyeFeatures(
        ear=sum(eye_aspect_ratio(lm, e) for e in eyes) / 2.0,
        corner_angle=sum(corner_angle(lm, e) for e in eyes) / 2.0,
        hood_score=sum(hood_score(lm, e) for e in eyes) / 2.0,
        spacing_ratio=ratio(inter_eye, sum(widths) / 2.0, NEUTRAL_SPACING),
    )
