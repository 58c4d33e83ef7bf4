# shapescan/detector.py
from __future__ import annotations

import logging
import threading
from typing import Optional

import cv2
import numpy as np

from shapescan import config
from shapescan.landmarks import LandmarkSet, as_landmarks

# MediaPipe
try:
    import mediapipe as mp
except Exception:
    mp = None

logger = logging.getLogger(__name__)


def decode_image_bytes(b: bytes) -> Optional[np.ndarray]:
    if not b:
        return None
    arr = np.frombuffer(b, dtype=np.uint8)
    return cv2.imdecode(arr, cv2.IMREAD_COLOR)


class LandmarkDetector:
    """Face-mesh collaborator: load once, detect many times, close explicitly."""

    def load(self) -> None:
        pass

    def detect(self, img_bgr: np.ndarray) -> Optional[LandmarkSet]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "LandmarkDetector":
        self.load()
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MediaPipeDetector(LandmarkDetector):
    def __init__(self,
                 min_detection_confidence: float = config.DETECTION_CONFIDENCE,
                 min_tracking_confidence: float = config.TRACKING_CONFIDENCE,
                 refine_landmarks: bool = config.REFINE_LANDMARKS):
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.refine_landmarks = refine_landmarks
        self._mesh = None
        # FaceMesh graphs are not thread-safe; the API shares one detector
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._mesh is not None

    def load(self) -> None:
        with self._lock:
            self._load()

    def _load(self) -> None:
        if self._mesh is not None:
            return
        if mp is None:
            raise RuntimeError("mediapipe is not available.")
        self._mesh = mp.solutions.face_mesh.FaceMesh(
            static_image_mode=True,
            max_num_faces=1,
            refine_landmarks=self.refine_landmarks,
            min_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
        )
        logger.info("MediaPipe FaceMesh loaded (refine_landmarks=%s)", self.refine_landmarks)

    def detect(self, img_bgr: np.ndarray) -> Optional[LandmarkSet]:
        img_rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
        with self._lock:
            self._load()
            res = self._mesh.process(img_rgb)
        if not res.multi_face_landmarks:
            return None
        return as_landmarks(res.multi_face_landmarks[0].landmark)

    def close(self) -> None:
        with self._lock:
            if self._mesh is None:
                return
            self._mesh.close()
            self._mesh = None
            logger.info("MediaPipe FaceMesh released")
