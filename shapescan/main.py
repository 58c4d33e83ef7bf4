# shapescan/main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from shapescan import __version__, config
from shapescan.aggregate import AggregateResult
from shapescan.analysis import analyze_images, analyze_landmark_frames
from shapescan.detector import LandmarkDetector, MediaPipeDetector
from shapescan.errors import AnalysisFailure
from shapescan.labels import eye_key, face_key, spacing_key
from shapescan.schemas import AnalysisResponse, HealthResponse, LandmarksRequest

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Loaded lazily on first detection, released on shutdown
    app.state.detector = MediaPipeDetector()
    try:
        yield
    finally:
        app.state.detector.close()


app = FastAPI(title=config.API_TITLE, version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_detector(request: Request) -> LandmarkDetector:
    detector = getattr(request.app.state, "detector", None)
    if detector is None:
        raise HTTPException(status_code=503, detail="Landmark detector not initialized.")
    return detector


def _to_response(out: Union[AggregateResult, AnalysisFailure]) -> AnalysisResponse:
    if isinstance(out, AnalysisFailure):
        raise HTTPException(status_code=422, detail=out.message)
    face = {**out.face.to_dict(), "table_key": face_key(out.face.shape)}
    eye = None
    if out.eye is not None:
        eye = {**out.eye.to_dict(),
               "table_key": eye_key(out.eye.shape),
               "spacing_key": spacing_key(out.eye.spacing)}
    return AnalysisResponse(face=face, eye=eye, sample_count=out.sample_count,
                            combined_key=out.combined_key)


def _read_upload(file: UploadFile) -> bytes:
    if file is None:
        return b""
    data = file.file.read()
    file.file.close()
    return data


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, version=app.version)


@app.post("/classify/landmarks", response_model=AnalysisResponse)
def classify_landmarks(req: LandmarksRequest) -> AnalysisResponse:
    if len(req.frames) > config.MAX_FRAMES:
        raise HTTPException(status_code=400, detail=f"At most {config.MAX_FRAMES} frames per request.")
    out = analyze_landmark_frames(req.frames)
    logger.info("classify/landmarks frames=%d -> %s", len(req.frames),
                out.code if isinstance(out, AnalysisFailure) else out.face.shape)
    return _to_response(out)


@app.post("/detect/face-shape", response_model=AnalysisResponse)
def detect_face_shape(
    files: Optional[List[UploadFile]] = File(default=None, description="3–5 best frames"),
    file: Optional[UploadFile] = File(default=None, description="legacy single frame"),
    detector: LandmarkDetector = Depends(get_detector),
) -> AnalysisResponse:
    """
    Accepts either:
      - multiple frames via 'files' (preferred), or
      - a single frame via 'file' (backward compatibility).
    Nothing is written to disk.
    """
    frames: List[bytes] = [_read_upload(f) for f in files or [] if f and f.filename]
    if not frames and file:
        frames.append(_read_upload(file))
    if not frames:
        raise HTTPException(status_code=400, detail="No image(s) provided. Send 'files' or 'file'.")
    if len(frames) > config.MAX_FRAMES:
        raise HTTPException(status_code=400, detail=f"At most {config.MAX_FRAMES} frames per request.")

    try:
        out = analyze_images(frames, detector)
    except RuntimeError as e:
        logger.exception("detector failure")
        raise HTTPException(status_code=500, detail=f"Analyzer error: {e}")
    return _to_response(out)


def run() -> None:
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # Bind to 0.0.0.0 for Docker
    uvicorn.run("shapescan.main:app", host=config.API_HOST, port=config.API_PORT, reload=False)


if __name__ == "__main__":
    run()
