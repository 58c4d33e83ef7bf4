# shapescan/aggregate.py
"""
Multi-sample aggregation for a capture burst.

Face features are averaged per feature across samples (a sample missing one
feature still contributes the others); the discrete eye label is decided by
majority vote with a capped, vote-based confidence.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from shapescan.errors import NoFaceDetected
from shapescan.eye_classifier import EyeShapeResult, classify_eye_shape
from shapescan.face_classifier import FaceShapeResult, classify_face_shape
from shapescan.face_features import NEUTRAL_FEATURES, FaceFeatures, extract_face_features
from shapescan.geometry import round_half_up
from shapescan.labels import combined_key
from shapescan.landmarks import as_landmarks

logger = logging.getLogger(__name__)

VOTE_CONFIDENCE_MAX = 90


@dataclass(frozen=True)
class Sample:
    face: Optional[Union[FaceFeatures, Mapping[str, Any]]]
    eye: Optional[EyeShapeResult] = None


@dataclass(frozen=True)
class AggregateResult:
    face: FaceShapeResult
    eye: Optional[EyeShapeResult]
    sample_count: int

    @property
    def combined_key(self) -> Optional[str]:
        if self.eye is None:
            return None
        return combined_key(self.face.shape, self.eye.shape)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "face": self.face.to_dict(),
            "eye": None if self.eye is None else self.eye.to_dict(),
            "sample_count": self.sample_count,
            "combined_key": self.combined_key,
        }


def collect_sample(landmarks) -> Sample:
    """Extract one (face features, eye result) pair from a LandmarkSet."""
    lm = as_landmarks(landmarks)
    face = extract_face_features(lm)
    if not isinstance(face, FaceFeatures):
        logger.debug("sample rejected: %s", face.code)
        face = None
    return Sample(face=face, eye=classify_eye_shape(lm))


def _as_mapping(face: Union[FaceFeatures, Mapping[str, Any]]) -> Mapping[str, Any]:
    return face.to_dict() if isinstance(face, FaceFeatures) else face


def _number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def average_features(faces: Sequence[Union[FaceFeatures, Mapping[str, Any]]]) -> FaceFeatures:
    rows = [_as_mapping(f) for f in faces]
    averaged: Dict[str, float] = {}
    for name in FaceFeatures.names():
        vals = [float(r[name]) for r in rows if _number(r.get(name))]
        averaged[name] = float(np.mean(vals)) if vals else NEUTRAL_FEATURES[name]
    return FaceFeatures(**averaged)


def vote_eye_shape(samples: Sequence[Sample], denominator: int) -> Optional[EyeShapeResult]:
    votes = Counter(s.eye.shape for s in samples if s.eye is not None)
    if not votes:
        return None
    # most_common keeps first-seen order among equal counts
    shape, count = votes.most_common(1)[0]
    best = next(s.eye for s in reversed(samples) if s.eye is not None and s.eye.shape == shape)
    confidence = min(round_half_up(count / max(denominator, 1) * 100), VOTE_CONFIDENCE_MAX)
    return EyeShapeResult(shape=shape, confidence=confidence,
                          features=best.features, spacing=best.spacing)


def _has_face(s: Sample) -> bool:
    if s.face is None:
        return False
    row = _as_mapping(s.face)
    return any(_number(row.get(name)) for name in FaceFeatures.names())


def aggregate_samples(samples: Sequence[Sample]) -> Union[AggregateResult, NoFaceDetected]:
    valid: List[Sample] = [s for s in samples if _has_face(s)]
    if not valid:
        return NoFaceDetected()
    face = classify_face_shape(average_features([s.face for s in valid]))
    eye = vote_eye_shape(valid, len(valid))
    logger.info("aggregated %d/%d samples -> face=%s eye=%s",
                len(valid), len(samples), face.shape, None if eye is None else eye.shape)
    return AggregateResult(face=face, eye=eye, sample_count=len(valid))
