"""Synthetic 478-point face-mesh landmark sets for tests."""

import math

import numpy as np

N_POINTS = 478

# (image-left index, image-right index, fraction of face height below hairline)
OVAL_SIDES = [
    (109, 338, 0.02), (67, 297, 0.06), (103, 332, 0.12), (54, 284, 0.21),
    (21, 251, 0.28), (162, 389, 0.34), (127, 356, 0.40), (234, 454, 0.46),
    (93, 323, 0.54), (132, 361, 0.61), (58, 288, 0.68), (172, 397, 0.75),
    (136, 365, 0.81), (150, 379, 0.87), (149, 378, 0.92), (176, 400, 0.96),
    (148, 377, 0.99),
]

EYE_PAIRS = [(133, 362), (33, 263), (159, 386), (145, 374), (160, 387), (144, 373), (105, 334)]

MIRROR_PAIRS = [(a, b) for a, b, _ in OVAL_SIDES] + EYE_PAIRS


def _half_width(frac, forehead, cheek, jaw, chin):
    F, C, J, K = forehead / 2, cheek / 2, jaw / 2, chin / 2
    xs = [0.0, 0.12, 0.25, 0.45, 0.75, 0.96, 1.0]
    ys = [0.30 * F, 0.80 * F, F, C, J, K, 0.0]
    return float(np.interp(frac, xs, ys))


def _place_eye(lm, inner, outer, upper_c, lower_c, upper_o, lower_o, brow,
               inner_xy, direction, width, ear, angle, hood):
    ix, iy = inner_xy
    dy = math.tan(math.radians(angle)) * width
    ox, oy = ix + direction * width, iy - dy
    eye_w = math.hypot(width, dy)
    opening = ear * eye_w
    lm[inner] = (ix, iy)
    lm[outer] = (ox, oy)
    for t, up, lo in ((0.5, upper_c, lower_c), (2.0 / 3.0, upper_o, lower_o)):
        x, y = ix + t * (ox - ix), iy + t * (oy - iy)
        lm[up] = (x, y - opening / 2)
        lm[lo] = (x, y + opening / 2)
    lm[brow] = (lm[upper_c][0], lm[upper_c][1] - hood * opening)


def make_landmarks(forehead=0.42, cheek=0.45, jaw=0.42, chin=0.24, height=0.5,
                   top=0.2, cx=0.5, right_skew=1.0,
                   brow_line=0.33, nose_base=0.66, lower_lip=0.86,
                   ear=0.28, eye_angle=3.0, hood=1.6, spacing=1.0, eye_width=0.09):
    """Round-ish frontal face by default; ``right_skew`` widens the image-right side."""
    lm = np.tile([cx, top + height / 2], (N_POINTS, 1)).astype(float)
    lm[10] = (cx, top)
    lm[152] = (cx, top + height)
    for left, right, frac in OVAL_SIDES:
        h = _half_width(frac, forehead, cheek, jaw, chin)
        y = top + frac * height
        lm[left] = (cx - h, y)
        lm[right] = (cx + h * right_skew, y)
    lm[9] = (cx, top + brow_line * height)
    lm[2] = (cx, top + nose_base * height)
    lm[17] = (cx, top + lower_lip * height)

    eye_y = top + 0.40 * height
    eye_w = math.hypot(eye_width, math.tan(math.radians(eye_angle)) * eye_width)
    half_gap = spacing * eye_w / 2
    _place_eye(lm, 133, 33, 159, 145, 160, 144, 105, (cx - half_gap, eye_y), -1,
               eye_width, ear, eye_angle, hood)
    _place_eye(lm, 362, 263, 386, 374, 387, 373, 334, (cx + half_gap, eye_y), +1,
               eye_width, ear, eye_angle, hood)
    return lm


def mirror(lm):
    """Reflect x -> 1 - x and swap left/right landmark roles."""
    src = np.asarray(lm, dtype=float)
    out = src.copy()
    out[:, 0] = 1.0 - src[:, 0]
    for a, b in MIRROR_PAIRS:
        out[a] = (1.0 - src[b, 0], src[b, 1])
        out[b] = (1.0 - src[a, 0], src[a, 1])
    return out
