# shapescan/__init__.py
from shapescan.face_features import FaceFeatures, extract_face_features
from shapescan.face_classifier import FaceShapeResult, classify_face_shape
from shapescan.eye_features import EyeFeatures, extract_eye_features
from shapescan.eye_classifier import EyeShapeResult, classify_eye_shape, classify_eye_features
from shapescan.aggregate import AggregateResult, Sample, aggregate_samples, collect_sample
from shapescan.errors import AnalysisFailure, DegenerateGeometry, InsufficientLandmarks, NoFaceDetected

__version__ = "2.1.0"

__all__ = [
    "FaceFeatures", "extract_face_features",
    "FaceShapeResult", "classify_face_shape",
    "EyeFeatures", "extract_eye_features",
    "EyeShapeResult", "classify_eye_shape", "classify_eye_features",
    "AggregateResult", "Sample", "aggregate_samples", "collect_sample",
    "AnalysisFailure", "DegenerateGeometry", "InsufficientLandmarks", "NoFaceDetected",
]
