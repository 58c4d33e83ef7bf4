# shapescan/landmarks.py
"""
LandmarkSet coercion and the MediaPipe FaceMesh indices the classifiers use.

A LandmarkSet is a read-only ``(N, 2)`` float array of normalized image
coordinates. Input may be ``(x, y)`` / ``(x, y, z)`` tuples, ``{"x": .., "y": ..}``
mappings or detector landmark objects exposing ``.x`` / ``.y``.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import numpy as np

MIN_LANDMARKS = 468
REFINED_LANDMARKS = 478

# Landmarks (MediaPipe FaceMesh 468/478 indices)
LM_HAIRLINE   = 10
LM_CHIN       = 152
LM_FOREHEAD_L = 54
LM_FOREHEAD_R = 284
LM_CHEEK_L    = 234
LM_CHEEK_R    = 454
LM_JAW_L      = 172
LM_JAW_R      = 397
LM_CHIN_L     = 176
LM_CHIN_R     = 400
LM_BROW_LINE  = 9
LM_NOSE_BASE  = 2
LM_LOWER_LIP  = 17

# Closed contour, clockwise from the hairline
FACE_OVAL = (
    10, 338, 297, 332, 284, 251, 389, 356, 454, 323, 361, 288,
    397, 365, 379, 378, 400, 377, 152, 148, 176, 149, 150, 136,
    172, 58, 132, 93, 234, 127, 162, 21, 54, 103, 67, 109,
)

# Lower contour from each jaw corner down to (excluding) the chin
JAW_CONTOUR_L = (136, 150, 149, 176, 148)
JAW_CONTOUR_R = (365, 379, 378, 400, 377)

LandmarkSet = np.ndarray


def _xy(p: Any):
    if hasattr(p, "x") and hasattr(p, "y"):
        return float(p.x), float(p.y)
    if isinstance(p, Mapping):
        return float(p["x"]), float(p["y"])
    return float(p[0]), float(p[1])


def as_landmarks(points: Iterable[Any]) -> LandmarkSet:
    """Copy ``points`` into a read-only ``(N, 2)`` array; z is dropped."""
    if isinstance(points, np.ndarray) and points.ndim == 2 and points.shape[1] >= 2:
        arr = np.array(points[:, :2], dtype=float)
    else:
        arr = np.array([_xy(p) for p in points], dtype=float).reshape(-1, 2)
    arr.flags.writeable = False
    return arr


def usable(lm: Optional[LandmarkSet], min_count: int = MIN_LANDMARKS) -> bool:
    return lm is not None and len(lm) >= min_count and bool(np.isfinite(lm).all())
