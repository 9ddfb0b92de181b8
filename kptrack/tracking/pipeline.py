"""
Keypoint tracking over an image sequence.

Each frame passes through detection, optional region and count filtering,
and description; once two frames are buffered the previous frame's
descriptors are matched against the current frame's.
"""

import os

from kptrack.descriptors.extract import (
    BriskParams,
    check_combination,
    describe_keypoints,
    descriptor_kind,
)
from kptrack.detectors.harris import HarrisParams
from kptrack.detectors.modern import FastParams
from kptrack.detectors.select import ALL_DETECTOR_TYPES, detect_keypoints
from kptrack.detectors.shi_tomasi import ShiTomasiParams
from kptrack.matching.matcher import match_descriptors
from kptrack.suppression.filters import filter_by_region, retain_best
from kptrack.tracking.buffer import DataFrame, FrameBuffer
from kptrack.utils.image_io import load_grayscale


def validate_config(cfg: dict) -> None:
    """Reject detector/descriptor names and pairings that cannot run."""
    if cfg["detector"] not in ALL_DETECTOR_TYPES:
        raise ValueError(f"Unsupported detector type: {cfg['detector']}")
    descriptor_kind(cfg["descriptor"])
    check_combination(cfg["detector"], cfg["descriptor"])


def track_sequence(image_paths: list, cfg: dict) -> list:
    """Detect, describe and match keypoints across consecutive images.

    Parameters
    ----------
    image_paths : list of str
        Image files in sequence order.
    cfg : dict
        Pipeline configuration (see ``configs/default.yaml``).

    Returns
    -------
    list of dict
        One entry per frame with the frame name and its keypoint,
        descriptor and match counts.  The first frame has no matches.
    """
    validate_config(cfg)

    harris = HarrisParams(**cfg.get("harris", {}))
    shi_tomasi = ShiTomasiParams(**cfg.get("shi_tomasi", {}))
    fast = FastParams(**cfg.get("fast", {}))
    brisk = BriskParams(**cfg.get("brisk", {}))
    focus = cfg.get("focus", {})
    limit = cfg.get("limit", {})
    kind = descriptor_kind(cfg["descriptor"])

    buffer = FrameBuffer(cfg.get("buffer_size", 2))
    metrics = []

    for path in image_paths:
        name = os.path.basename(path)
        print(f"  Frame {name}")
        frame = DataFrame(name=name, image=load_grayscale(path))
        buffer.push(frame)

        # ── Detection ───────────────────────────────────────────────────
        keypoints = detect_keypoints(frame.image, cfg["detector"],
                                     harris=harris, shi_tomasi=shi_tomasi,
                                     fast=fast)
        if focus.get("enabled", False):
            keypoints = filter_by_region(keypoints, tuple(focus["rect"]))
        if limit.get("enabled", False):
            keypoints = retain_best(keypoints, limit["max_keypoints"])
            print(f"    Keypoints limited to {len(keypoints)}")

        # ── Description ─────────────────────────────────────────────────
        frame.descriptors, frame.keypoints = describe_keypoints(
            keypoints, frame.image, cfg["descriptor"], brisk=brisk)

        # ── Matching against the previous frame ─────────────────────────
        if len(buffer) > 1:
            frame.matches = match_descriptors(
                buffer.previous.descriptors, frame.descriptors,
                descriptor_kind=kind,
                matcher_type=cfg["matcher"],
                selector_type=cfg["selector"],
                ratio=cfg.get("ratio", 0.8),
            )
            print(f"    {len(frame.matches)} matches "
                  f"({cfg['matcher']}, {cfg['selector']})")

        metrics.append({
            "frame": name,
            "keypoints": len(frame.keypoints),
            "descriptors": len(frame.descriptors),
            "matches": len(frame.matches) if len(buffer) > 1 else None,
        })

    return metrics
