# shapescan/eye_classifier.py
"""
Eye shape classification as an ordered, exclusive cascade.

Distinctive shapes are checked first with strict thresholds and the first
match wins; almond is the population default rather than a leftover, so its
confidence comes from how typical the eye looks, not from a competition.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from shapescan.eye_features import EyeFeatures, extract_eye_features
from shapescan.geometry import round_half_up
from shapescan.labels import CLOSE_SET, PROPORTIONAL, WIDE_SET

logger = logging.getLogger(__name__)

# ---------------- Tunables ----------------
EYE_THRESHOLDS: Dict[str, float] = {
    "hood_strict": 0.9,
    "hood_loose": 1.15,
    "hood_loose_ear_max": 0.24,
    "upturned_strong": 12.0,
    "upturned_weak": 9.0,
    "upturned_weak_ear_max": 0.28,
    "downturned_strong": -6.0,
    "downturned_weak": -4.0,
    "downturned_weak_ear_min": 0.24,
    "round_ear": 0.34,
    "round_angle_max": 6.0,
    "round_ear_alone": 0.38,
    "almond_ear_min": 0.20,
    "almond_ear_max": 0.34,
    "almond_angle_max": 9.0,
    "almond_hood_min": 1.15,
    "close_set_max": 0.85,
    "wide_set_min": 1.15,
}

CASCADE_CONFIDENCE_MAX = 85
ALMOND_BASE = 45
ALMOND_STEP = 14
# ------------------------------------------


@dataclass(frozen=True)
class EyeShapeResult:
    shape: str
    confidence: int
    features: EyeFeatures
    spacing: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": self.shape,
            "confidence": self.confidence,
            "features": self.features.to_dict(),
            "spacing": self.spacing,
        }


def classify_spacing(spacing_ratio: float) -> str:
    t = EYE_THRESHOLDS
    if spacing_ratio < t["close_set_max"]:
        return CLOSE_SET
    if spacing_ratio > t["wide_set_min"]:
        return WIDE_SET
    return PROPORTIONAL


def _cascade(f: EyeFeatures) -> Tuple[str, int]:
    t = EYE_THRESHOLDS
    ear, angle, hood = f.ear, f.corner_angle, f.hood_score
    cap = CASCADE_CONFIDENCE_MAX

    if hood < t["hood_strict"]:
        return "hooded", 80
    if hood < t["hood_loose"] and ear < t["hood_loose_ear_max"]:
        return "hooded", 60

    if angle > t["upturned_strong"]:
        return "upturned", min(60 + round_half_up(angle), cap)
    if angle > t["upturned_weak"] and ear < t["upturned_weak_ear_max"]:
        return "upturned", 55

    if angle < t["downturned_strong"]:
        return "downturned", min(55 + round_half_up(abs(angle) * 2), cap)
    if angle < t["downturned_weak"] and ear >= t["downturned_weak_ear_min"]:
        return "downturned", 50

    if ear > t["round_ear"] and abs(angle) < t["round_angle_max"]:
        return "round", max(0, min(55 + round_half_up((ear - 0.30) * 200), cap))
    if ear > t["round_ear_alone"]:
        return "round", 70

    typical = [
        t["almond_ear_min"] <= ear <= t["almond_ear_max"],
        abs(angle) <= t["almond_angle_max"],
        hood >= t["almond_hood_min"],
    ]
    return "almond", ALMOND_BASE + ALMOND_STEP * sum(typical)


def classify_eye_features(features: EyeFeatures) -> EyeShapeResult:
    shape, confidence = _cascade(features)
    spacing = classify_spacing(features.spacing_ratio)
    logger.debug("eye features=%s -> %s (%d%%), %s", features, shape, confidence, spacing)
    return EyeShapeResult(shape=shape, confidence=confidence, features=features, spacing=spacing)


def classify_eye_shape(landmarks) -> Optional[EyeShapeResult]:
    features = extract_eye_features(landmarks)
    if features is None:
        return None
    return classify_eye_features(features)
