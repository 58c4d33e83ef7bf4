# shapescan/labels.py
from typing import Dict, Tuple

FACE_SHAPES: Tuple[str, ...] = ("oval", "round", "square", "heart", "oblong", "diamond")
EYE_SHAPES: Tuple[str, ...] = ("almond", "round", "upturned", "downturned", "hooded")

CLOSE_SET = "close-set"
WIDE_SET = "wide-set"
PROPORTIONAL = "proportional"
SPACINGS: Tuple[str, ...] = (CLOSE_SET, WIDE_SET, PROPORTIONAL)

# Keys used by the recommendation tables (Spanish vocabulary)
FACE_TABLE_KEYS: Dict[str, str] = {
    "oval": "ovalado",
    "round": "redondo",
    "square": "cuadrado",
    "heart": "corazon",
    "oblong": "alargado",
    "diamond": "diamante",
}
EYE_TABLE_KEYS: Dict[str, str] = {
    "almond": "almendra",
    "round": "redondo",
    "upturned": "rasgado",
    "downturned": "caido",
    "hooded": "encapotado",
}
SPACING_TABLE_KEYS: Dict[str, str] = {
    CLOSE_SET: "juntos",
    WIDE_SET: "separados",
    PROPORTIONAL: "proporcional",
}


def face_key(shape: str) -> str:
    try:
        return FACE_TABLE_KEYS[shape]
    except KeyError:
        raise ValueError(f"Unknown face shape: {shape!r}") from None


def eye_key(shape: str) -> str:
    try:
        return EYE_TABLE_KEYS[shape]
    except KeyError:
        raise ValueError(f"Unknown eye shape: {shape!r}") from None


def spacing_key(spacing: str) -> str:
    try:
        return SPACING_TABLE_KEYS[spacing]
    except KeyError:
        raise ValueError(f"Unknown eye spacing: {spacing!r}") from None


def combined_key(face_shape: str, eye_shape: str) -> str:
    """Key of the combined face+eye tips table, e.g. ``ovalado+almendra``."""
    return f"{face_key(face_shape)}+{eye_key(eye_shape)}"
