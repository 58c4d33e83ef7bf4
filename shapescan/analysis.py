# shapescan/analysis.py
from __future__ import annotations

import logging
from typing import Iterable, List, Union

from shapescan import capture
from shapescan.aggregate import AggregateResult
from shapescan.detector import LandmarkDetector, decode_image_bytes
from shapescan.errors import AnalysisFailure, NoFaceDetected

logger = logging.getLogger(__name__)


def _run(frames: Iterable) -> capture.CaptureSession:
    session = capture.start(capture.CaptureSession())
    for lm in frames:
        session = capture.add_frame(session, lm)
    return capture.finish(session)


def _outcome(session: capture.CaptureSession) -> Union[AggregateResult, AnalysisFailure]:
    if session.phase is capture.Phase.DONE:
        return session.result
    if session.failure is not None:
        return session.failure
    return NoFaceDetected()


def analyze_landmark_frames(frames: Iterable) -> Union[AggregateResult, AnalysisFailure]:
    """Classify a burst of LandmarkSets of the same subject."""
    return _outcome(_run(frames))


def analyze_images(images: List[bytes], detector: LandmarkDetector) -> Union[AggregateResult, AnalysisFailure]:
    if not images:
        return NoFaceDetected(message="No images received.")

    def landmarks():
        for i, b in enumerate(images):
            img = decode_image_bytes(b)
            if img is None:
                logger.warning("frame %d could not be decoded", i)
                yield None
                continue
            yield detector.detect(img)

    session = _run(landmarks())
    logger.info("analyzed %d frames, %d usable", session.frames_seen, len(session.samples))
    return _outcome(session)
