# shapescan/schemas.py
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, conlist

Point = conlist(float, min_length=2, max_length=3)


class LandmarksRequest(BaseModel):
    frames: conlist(List[Point], min_length=1) = Field(
        ..., description="One landmark list per captured frame (normalized x, y[, z]).")


class FaceShapeOut(BaseModel):
    shape: str
    confidence: int = Field(..., ge=0, le=100)
    width_height_ratio: float
    jaw_forehead_ratio: float
    cheek_jaw_ratio: float
    scores: Dict[str, int]
    table_key: str


class EyeFeaturesOut(BaseModel):
    ear: float
    corner_angle: float
    hood_score: float
    spacing_ratio: float


class EyeShapeOut(BaseModel):
    shape: str
    confidence: int = Field(..., ge=0, le=100)
    features: EyeFeaturesOut
    spacing: str
    table_key: str
    spacing_key: str


class AnalysisResponse(BaseModel):
    face: FaceShapeOut
    eye: Optional[EyeShapeOut] = None
    sample_count: int
    combined_key: Optional[str] = None
    message: str = "Face analyzed."


class HealthResponse(BaseModel):
    ok: bool
    version: str
