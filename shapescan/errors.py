# shapescan/errors.py
"""
Failure values returned by the extraction and aggregation functions.

None of these are raised: unusable geometry is reported back to the caller,
who decides how to prompt the user (reframe, move closer, retry).
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisFailure:
    code: str
    message: str


@dataclass(frozen=True)
class DegenerateGeometry(AnalysisFailure):
    code: str = "degenerate_geometry"
    message: str = "Face too small or badly framed."
    span: float = 0.0


@dataclass(frozen=True)
class InsufficientLandmarks(AnalysisFailure):
    code: str = "insufficient_landmarks"
    message: str = "Not enough landmarks for the face-mesh topology."
    count: int = 0


@dataclass(frozen=True)
class NoFaceDetected(AnalysisFailure):
    code: str = "no_face_detected"
    message: str = "No face found."
