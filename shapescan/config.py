# shapescan/config.py
import os


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, float(default)))


# ---------------- Service settings ----------------
API_TITLE = "Shapescan Face API"
API_HOST = os.getenv("SHAPESCAN_HOST", "0.0.0.0")
API_PORT = _env_int("SHAPESCAN_PORT", 8000)
LOG_LEVEL = os.getenv("SHAPESCAN_LOG_LEVEL", "INFO").upper()

# Frames accepted per capture (the app sends a 5-sample burst)
MAX_FRAMES = _env_int("SHAPESCAN_MAX_FRAMES", 10)

# MediaPipe FaceMesh
DETECTION_CONFIDENCE = _env_float("SHAPESCAN_DETECTION_CONFIDENCE", 0.6)
TRACKING_CONFIDENCE = _env_float("SHAPESCAN_TRACKING_CONFIDENCE", 0.6)
REFINE_LANDMARKS = os.getenv("SHAPESCAN_REFINE_LANDMARKS", "1") not in {"0", "false", "no"}
# --------------------------------------------------
