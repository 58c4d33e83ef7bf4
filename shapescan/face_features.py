# shapescan/face_features.py
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, Mapping, Union

import numpy as np

from shapescan.errors import DegenerateGeometry, InsufficientLandmarks
from shapescan.geometry import angle_at_point, distance, point_line_distance, ratio
from shapescan.landmarks import (
    FACE_OVAL, JAW_CONTOUR_L, JAW_CONTOUR_R,
    LM_BROW_LINE, LM_CHEEK_L, LM_CHEEK_R, LM_CHIN, LM_CHIN_L, LM_CHIN_R,
    LM_FOREHEAD_L, LM_FOREHEAD_R, LM_HAIRLINE, LM_JAW_L, LM_JAW_R,
    LM_LOWER_LIP, LM_NOSE_BASE, LandmarkSet, as_landmarks, usable,
)

logger = logging.getLogger(__name__)

# ---------------- Tunables ----------------
MIN_FACE_HEIGHT = 0.01     # normalized hairline->chin distance
SCAN_BAND       = 0.06     # dynamic scan tolerance, fraction of face height
SCAN_FOREHEAD   = 0.25
SCAN_CHEEKBONE  = 0.45
SCAN_JAW        = 0.75
# ------------------------------------------


@dataclass(frozen=True)
class FaceFeatures:
    """Scale-invariant ratios and angles describing one face."""
    width_height_ratio: float      # cheekbone width / face height
    forehead_height_ratio: float
    jaw_height_ratio: float
    forehead_cheek_ratio: float
    jaw_cheek_ratio: float
    jaw_forehead_ratio: float
    chin_jaw_ratio: float
    chin_cheek_ratio: float
    upper_third_ratio: float       # hairline -> brow line
    middle_third_ratio: float      # brow line -> nose base
    lower_third_ratio: float       # nose base -> chin
    chin_length_ratio: float       # lower lip -> chin
    cheek_jaw_taper: float
    forehead_jaw_taper: float
    jaw_chin_taper: float
    jaw_angle: float               # degrees, mean of both gonial angles
    chin_angle: float              # degrees
    jaw_curvature: float
    width_variance: float          # (widest - narrowest) / widest

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FaceFeatures":
        """Build from a (possibly partial) mapping; gaps take neutral values."""
        values = {}
        for name in cls.names():
            v = data.get(name)
            values[name] = float(v) if _valid(v) else NEUTRAL_FEATURES[name]
        return cls(**values)

    @classmethod
    def from_measurements(cls, face_length: float, forehead_width: float,
                          cheekbone_width: float, jawline_width: float) -> "FaceFeatures":
        """Legacy entry point: four raw measurements in any unit."""
        widths = (forehead_width, cheekbone_width, jawline_width)
        widest = max(widths)
        return cls.from_mapping({
            "width_height_ratio": ratio(cheekbone_width, face_length, NEUTRAL_FEATURES["width_height_ratio"]),
            "forehead_height_ratio": ratio(forehead_width, face_length, NEUTRAL_FEATURES["forehead_height_ratio"]),
            "jaw_height_ratio": ratio(jawline_width, face_length, NEUTRAL_FEATURES["jaw_height_ratio"]),
            "forehead_cheek_ratio": ratio(forehead_width, cheekbone_width),
            "jaw_cheek_ratio": ratio(jawline_width, cheekbone_width),
            "jaw_forehead_ratio": ratio(jawline_width, forehead_width),
            "cheek_jaw_taper": ratio(cheekbone_width - jawline_width, cheekbone_width, 0.0),
            "forehead_jaw_taper": ratio(forehead_width - jawline_width, forehead_width, 0.0),
            "width_variance": ratio(widest - min(widths), widest, 0.0),
        })


# Mid-range values used wherever a feature cannot be measured
NEUTRAL_FEATURES: Dict[str, float] = {
    "width_height_ratio": 0.75,
    "forehead_height_ratio": 0.68,
    "jaw_height_ratio": 0.62,
    "forehead_cheek_ratio": 0.92,
    "jaw_cheek_ratio": 0.84,
    "jaw_forehead_ratio": 0.91,
    "chin_jaw_ratio": 0.45,
    "chin_cheek_ratio": 0.38,
    "upper_third_ratio": 0.33,
    "middle_third_ratio": 0.33,
    "lower_third_ratio": 0.34,
    "chin_length_ratio": 0.12,
    "cheek_jaw_taper": 0.16,
    "forehead_jaw_taper": 0.09,
    "jaw_chin_taper": 0.55,
    "jaw_angle": 125.0,
    "chin_angle": 120.0,
    "jaw_curvature": 0.015,
    "width_variance": 0.16,
}


def _valid(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _scan_width(lm: LandmarkSet, top_y: float, bottom_y: float, face_h: float, frac: float) -> float:
    """Horizontal span of face-oval points near ``frac`` of the face height."""
    target = top_y + frac * (bottom_y - top_y)
    contour = lm[list(FACE_OVAL)]
    near = contour[np.abs(contour[:, 1] - target) <= SCAN_BAND * face_h]
    if len(near) < 2:
        return 0.0
    return float(near[:, 0].max() - near[:, 0].min())


def _curvature(lm: LandmarkSet, corner: int, contour: Iterable[int]) -> float:
    a, b = lm[corner], lm[LM_CHIN]
    ds = [point_line_distance(lm[i], a, b) for i in contour]
    return sum(ds) / len(ds)


def extract_face_features(landmarks) -> Union[FaceFeatures, DegenerateGeometry, InsufficientLandmarks]:
    lm = as_landmarks(landmarks)
    if not usable(lm):
        return InsufficientLandmarks(count=len(lm))

    top, chin = lm[LM_HAIRLINE], lm[LM_CHIN]
    face_h = distance(top, chin)
    if face_h < MIN_FACE_HEIGHT:
        return DegenerateGeometry(span=face_h)

    # Fixed pairs can under-measure; the contour always traces the true edge
    fixed = {
        "forehead": distance(lm[LM_FOREHEAD_L], lm[LM_FOREHEAD_R]),
        "cheek": distance(lm[LM_CHEEK_L], lm[LM_CHEEK_R]),
        "jaw": distance(lm[LM_JAW_L], lm[LM_JAW_R]),
    }
    scanned = {
        "forehead": _scan_width(lm, top[1], chin[1], face_h, SCAN_FOREHEAD),
        "cheek": _scan_width(lm, top[1], chin[1], face_h, SCAN_CHEEKBONE),
        "jaw": _scan_width(lm, top[1], chin[1], face_h, SCAN_JAW),
    }
    forehead_w = max(fixed["forehead"], scanned["forehead"])
    cheek_w = max(fixed["cheek"], scanned["cheek"])
    jaw_w = max(fixed["jaw"], scanned["jaw"])
    if cheek_w < MIN_FACE_HEIGHT:
        return DegenerateGeometry(message="Face width too small.", span=cheek_w)
    chin_w = distance(lm[LM_CHIN_L], lm[LM_CHIN_R])

    brow, nose_base, lower_lip = lm[LM_BROW_LINE], lm[LM_NOSE_BASE], lm[LM_LOWER_LIP]
    jaw_angle = (angle_at_point(lm[LM_CHEEK_L], lm[LM_JAW_L], chin) +
                 angle_at_point(lm[LM_CHEEK_R], lm[LM_JAW_R], chin)) / 2.0
    curvature = (_curvature(lm, LM_JAW_L, JAW_CONTOUR_L) +
                 _curvature(lm, LM_JAW_R, JAW_CONTOUR_R)) / 2.0
    widest = max(forehead_w, cheek_w, jaw_w)
    n = NEUTRAL_FEATURES

    features = FaceFeatures(
        width_height_ratio=cheek_w / face_h,
        forehead_height_ratio=forehead_w / face_h,
        jaw_height_ratio=jaw_w / face_h,
        forehead_cheek_ratio=ratio(forehead_w, cheek_w, n["forehead_cheek_ratio"]),
        jaw_cheek_ratio=ratio(jaw_w, cheek_w, n["jaw_cheek_ratio"]),
        jaw_forehead_ratio=ratio(jaw_w, forehead_w, n["jaw_forehead_ratio"]),
        chin_jaw_ratio=ratio(chin_w, jaw_w, n["chin_jaw_ratio"]),
        chin_cheek_ratio=ratio(chin_w, cheek_w, n["chin_cheek_ratio"]),
        upper_third_ratio=distance(top, brow) / face_h,
        middle_third_ratio=distance(brow, nose_base) / face_h,
        lower_third_ratio=distance(nose_base, chin) / face_h,
        chin_length_ratio=distance(lower_lip, chin) / face_h,
        cheek_jaw_taper=ratio(cheek_w - jaw_w, cheek_w, n["cheek_jaw_taper"]),
        forehead_jaw_taper=ratio(forehead_w - jaw_w, forehead_w, n["forehead_jaw_taper"]),
        jaw_chin_taper=ratio(jaw_w - chin_w, jaw_w, n["jaw_chin_taper"]),
        jaw_angle=jaw_angle,
        chin_angle=angle_at_point(lm[LM_CHIN_L], chin, lm[LM_CHIN_R]),
        jaw_curvature=curvature / face_h,
        width_variance=ratio(widest - min(forehead_w, cheek_w, jaw_w), widest, n["width_variance"]),
    )
    logger.debug("face widths fixed=%s scanned=%s height=%.4f", fixed, scanned, face_h)
    return features
