# shapescan/face_classifier.py
"""
Face shape classification by weighted rule accumulation.

Every shape owns an ordered list of threshold rules over the feature ratios;
each satisfied rule adds its points to that shape. Commonly confused pairs
are then separated by a single discriminating feature, but only while both
scores are already in contention, so a clear winner is never overridden.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Union

from shapescan.face_features import FaceFeatures
from shapescan.geometry import ratio, round_half_up
from shapescan.labels import FACE_SHAPES

logger = logging.getLogger(__name__)


class Rule(NamedTuple):
    feature: str
    low: Optional[float]
    high: Optional[float]
    points: int

    def matches(self, value: float) -> bool:
        if self.low is not None and value < self.low:
            return False
        if self.high is not None and value > self.high:
            return False
        return True


class Tiebreak(NamedTuple):
    low_wins: str     # winner when feature < threshold
    high_wins: str    # winner when feature >= threshold
    feature: str
    threshold: float


# ---------------- Tunables ----------------
FACE_RULES: Dict[str, List[Rule]] = {
    "oval": [
        Rule("width_height_ratio", 0.64, 0.80, 3),
        Rule("forehead_cheek_ratio", 0.85, 0.97, 2),
        Rule("jaw_forehead_ratio", 0.75, 0.95, 1),
        Rule("cheek_jaw_taper", 0.10, 0.28, 2),
        Rule("chin_angle", 95.0, 140.0, 1),
        Rule("width_variance", 0.08, 0.30, 1),
    ],
    "round": [
        Rule("width_height_ratio", 0.82, None, 4),
        Rule("width_variance", None, 0.10, 3),
        Rule("jaw_angle", 130.0, None, 3),
        Rule("jaw_curvature", 0.02, None, 1),
        Rule("chin_angle", 130.0, None, 1),
    ],
    "square": [
        Rule("width_height_ratio", 0.78, 0.98, 2),
        Rule("width_variance", None, 0.10, 2),
        Rule("jaw_angle", None, 120.0, 4),
        Rule("jaw_cheek_ratio", 0.90, None, 2),
        Rule("jaw_curvature", None, 0.012, 1),
    ],
    "heart": [
        Rule("forehead_cheek_ratio", 0.95, None, 2),
        Rule("forehead_jaw_taper", 0.22, None, 3),
        Rule("jaw_chin_taper", 0.60, None, 2),
        Rule("chin_angle", None, 105.0, 1),
        Rule("width_height_ratio", 0.65, 0.82, 1),
    ],
    "oblong": [
        Rule("width_height_ratio", None, 0.64, 3),
        Rule("width_height_ratio", None, 0.58, 2),
        Rule("width_variance", None, 0.15, 1),
        Rule("lower_third_ratio", 0.36, None, 1),
        Rule("chin_length_ratio", 0.15, None, 1),
    ],
    "diamond": [
        Rule("forehead_cheek_ratio", None, 0.88, 3),
        Rule("forehead_cheek_ratio", None, 0.82, 2),
        Rule("jaw_cheek_ratio", None, 0.82, 2),
        Rule("chin_angle", None, 110.0, 1),
        Rule("width_variance", 0.18, None, 1),
    ],
}

TIEBREAKS: List[Tiebreak] = [
    Tiebreak("square", "round", "jaw_angle", 125.0),
    Tiebreak("oval", "round", "width_height_ratio", 0.80),
    Tiebreak("oval", "heart", "forehead_jaw_taper", 0.20),
    Tiebreak("diamond", "heart", "forehead_cheek_ratio", 0.92),
    Tiebreak("oblong", "oval", "width_height_ratio", 0.64),
]

CONTENTION     = 4     # both scores must exceed this for a tiebreak
TIEBREAK_BONUS = 2
MARGIN_POINTS  = 3     # confidence points per score of lead over runner-up
MARGIN_MAX     = 15
CONFIDENCE_MAX = 95

MEASUREMENT_KEYS = ("face_length", "forehead_width", "cheekbone_width", "jawline_width")
# ------------------------------------------


@dataclass(frozen=True)
class FaceShapeResult:
    shape: str
    confidence: int
    width_height_ratio: float
    jaw_forehead_ratio: float
    cheek_jaw_ratio: float
    scores: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": self.shape,
            "confidence": self.confidence,
            "width_height_ratio": self.width_height_ratio,
            "jaw_forehead_ratio": self.jaw_forehead_ratio,
            "cheek_jaw_ratio": self.cheek_jaw_ratio,
            "scores": dict(self.scores),
        }


def score_features(f: FaceFeatures) -> Dict[str, int]:
    """Additive rule scores, before tiebreaks."""
    values = f.to_dict()
    scores = {s: 0 for s in FACE_SHAPES}
    for shape, rules in FACE_RULES.items():
        for rule in rules:
            if rule.matches(values[rule.feature]):
                scores[shape] += rule.points
    return scores


def apply_tiebreaks(scores: Dict[str, int], f: FaceFeatures) -> Dict[str, int]:
    out = dict(scores)
    values = f.to_dict()
    for tb in TIEBREAKS:
        if out[tb.low_wins] > CONTENTION and out[tb.high_wins] > CONTENTION:
            winner = tb.low_wins if values[tb.feature] < tb.threshold else tb.high_wins
            out[winner] += TIEBREAK_BONUS
    return out


def confidence_from_scores(scores: Dict[str, int]) -> int:
    ranked = sorted(scores.values(), reverse=True)
    total = sum(ranked)
    if total <= 0:
        return 0
    top = ranked[0]
    runner_up = ranked[1] if len(ranked) > 1 else 0
    margin_bonus = min((top - runner_up) * MARGIN_POINTS, MARGIN_MAX)
    return max(0, min(round_half_up(top / total * 100 + margin_bonus), CONFIDENCE_MAX))


def _coerce(features: Union[FaceFeatures, Mapping[str, Any]]) -> FaceFeatures:
    if isinstance(features, FaceFeatures):
        return features
    if all(k in features for k in MEASUREMENT_KEYS):
        return FaceFeatures.from_measurements(*(float(features[k]) for k in MEASUREMENT_KEYS))
    return FaceFeatures.from_mapping(features)


def classify_face_shape(features: Union[FaceFeatures, Mapping[str, Any]]) -> FaceShapeResult:
    f = _coerce(features)
    scores = apply_tiebreaks(score_features(f), f)
    # max() keeps the first of equal scores, i.e. FACE_SHAPES order
    shape = max(FACE_SHAPES, key=lambda s: scores[s])
    confidence = confidence_from_scores(scores)
    logger.debug("face scores=%s -> %s (%d%%)", scores, shape, confidence)
    return FaceShapeResult(
        shape=shape,
        confidence=confidence,
        width_height_ratio=round(f.width_height_ratio, 3),
        jaw_forehead_ratio=round(f.jaw_forehead_ratio, 3),
        cheek_jaw_ratio=round(ratio(1.0, f.jaw_cheek_ratio), 3),
        scores=scores,
    )
