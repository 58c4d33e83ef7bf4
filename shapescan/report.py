#!/usr/bin/env python3
# shapescan/report.py
"""
Calibration report over a directory of landmark captures.

Each ``*.json`` file holds either a single landmark list or
``{"frames": [...], "face_label": "...", "eye_label": "..."}``. Labels are
optional; when present, agreement is reported so threshold changes can be
checked against a labeled set.
"""
import argparse
import csv
import json
import logging
import os
from typing import Any, Dict, List

from shapescan.analysis import analyze_landmark_frames
from shapescan.errors import AnalysisFailure

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "json_file", "frames", "face_shape", "face_confidence", "face_label", "face_match",
    "eye_shape", "eye_confidence", "eye_label", "eye_match", "spacing",
    "width_height_ratio", "jaw_forehead_ratio", "cheek_jaw_ratio", "scores", "error",
]

INVALID_CAPTURE = "invalid_capture"


def _frames(data: Any) -> List[Any]:
    if isinstance(data, dict):
        return data.get("frames") or []
    if data and isinstance(data[0], list) and data[0] and isinstance(data[0][0], (list, dict)):
        return data
    # A bare landmark list is a single frame
    return [data]


def _match(predicted, label):
    if not label:
        return None
    return predicted == label


def build_row(fname: str, data: Any) -> Dict[str, Any]:
    labels = data if isinstance(data, dict) else {}
    frames = _frames(data)
    row: Dict[str, Any] = {"json_file": fname, "frames": len(frames),
                           "face_label": labels.get("face_label"),
                           "eye_label": labels.get("eye_label")}
    out = analyze_landmark_frames(frames)
    if isinstance(out, AnalysisFailure):
        row["error"] = out.code
        return row
    row.update({
        "face_shape": out.face.shape,
        "face_confidence": out.face.confidence,
        "face_match": _match(out.face.shape, row["face_label"]),
        "width_height_ratio": out.face.width_height_ratio,
        "jaw_forehead_ratio": out.face.jaw_forehead_ratio,
        "cheek_jaw_ratio": out.face.cheek_jaw_ratio,
        "scores": json.dumps(out.face.scores),
    })
    if out.eye is not None:
        row.update({
            "eye_shape": out.eye.shape,
            "eye_confidence": out.eye.confidence,
            "eye_match": _match(out.eye.shape, row["eye_label"]),
            "spacing": out.eye.spacing,
        })
    return row


def accuracy(rows: List[Dict[str, Any]], key: str):
    judged = [r[key] for r in rows if r.get(key) is not None]
    if not judged:
        return None
    return sum(1 for m in judged if m) / len(judged)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Classify landmark captures and export a CSV report.")
    parser.add_argument("input_dir", help="directory of *.json landmark files")
    parser.add_argument("-o", "--output", default="shapescan_report.csv")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    rows = []
    for fname in sorted(os.listdir(args.input_dir)):
        if not fname.endswith(".json"):
            continue
        fpath = os.path.join(args.input_dir, fname)
        try:
            with open(fpath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to parse %s: %s", fname, e)
            continue
        try:
            row = build_row(fname, data)
        except (TypeError, ValueError, KeyError) as e:
            logger.warning("Failed to classify %s: %s", fname, e)
            row = {"json_file": fname, "error": INVALID_CAPTURE}
        rows.append(row)

    if not rows:
        print(f"No JSON files found in {args.input_dir}.")
        return 1

    with open(args.output, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)

    print(f"Exported {len(rows)} records to {args.output}")
    for key, name in (("face_match", "face"), ("eye_match", "eye")):
        acc = accuracy(rows, key)
        if acc is not None:
            print(f"{name} accuracy: {acc:.1%}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
