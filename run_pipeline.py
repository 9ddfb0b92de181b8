#!/usr/bin/env python3
"""
run_pipeline.py – Keypoint Detection, Description & Tracking Pipeline

Loads configuration from configs/default.yaml (or a user-specified file),
tracks keypoints through every image sequence ("scene") defined in the
config, and writes per-frame metrics to the results directory.

Usage
-----
    python run_pipeline.py
    python run_pipeline.py --config configs/default.yaml
    python run_pipeline.py --scenes kitti
    python run_pipeline.py --detector FAST --descriptor ORB --selector SEL_KNN
"""

import argparse
import os
import sys
import time

import yaml

# Ensure the project root is on the Python path when invoked directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from kptrack.tracking.pipeline import track_sequence, validate_config
from kptrack.utils.image_io import ensure_output_dir, list_images


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────

def load_config(path: str) -> dict:
    with open(path, "r") as fh:
        return yaml.safe_load(fh)


def banner(text: str) -> None:
    width = 60
    print("\n" + "─" * width)
    print(f"  {text}")
    print("─" * width)


# ──────────────────────────────────────────────────────────────────────────────
# Per-scene pipeline
# ──────────────────────────────────────────────────────────────────────────────

def run_scene(scene_cfg: dict, cfg: dict) -> dict:
    """Track keypoints through a single scene and return summary metrics."""
    name = scene_cfg["name"]
    banner(f"Scene: {name}")

    paths = list_images(scene_cfg["image_dir"], scene_cfg.get("pattern", "*.png"))
    max_frames = scene_cfg.get("max_frames")
    if max_frames is not None:
        paths = paths[:max_frames]
    print(f"  {len(paths)} frames  |  {cfg['detector']} / {cfg['descriptor']}"
          f"  |  {cfg['matcher']} / {cfg['selector']}")

    frames = track_sequence(paths, cfg)

    matched = [f["matches"] for f in frames if f["matches"] is not None]
    return {
        "scene": name,
        "frames": len(frames),
        "keypoints": sum(f["keypoints"] for f in frames),
        "descriptors": sum(f["descriptors"] for f in frames),
        "matches": sum(matched),
        "mean_matches": sum(matched) / len(matched) if matched else None,
        "per_frame": frames,
    }


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Keypoint detection, description and tracking pipeline"
    )
    p.add_argument(
        "--config", default="configs/default.yaml",
        help="Path to YAML configuration file (default: configs/default.yaml)",
    )
    p.add_argument(
        "--scenes", nargs="*", default=None,
        help="Subset of scene names to process (default: all scenes in config)",
    )
    p.add_argument("--detector", default=None,
                   help="Override detector (SHITOMASI, HARRIS, FAST, BRISK, ORB, AKAZE, SIFT)")
    p.add_argument("--descriptor", default=None,
                   help="Override descriptor (BRISK, ORB, AKAZE, SIFT, FREAK)")
    p.add_argument("--matcher", default=None, help="Override matcher (MAT_BF, MAT_FLANN)")
    p.add_argument("--selector", default=None, help="Override selector (SEL_NN, SEL_KNN)")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Load configuration
    if not os.path.exists(args.config):
        print(f"[ERROR] Config file not found: {args.config}")
        sys.exit(1)
    cfg = load_config(args.config)

    for key in ("detector", "descriptor", "matcher", "selector"):
        if getattr(args, key) is not None:
            cfg[key] = getattr(args, key)

    try:
        validate_config(cfg)
    except ValueError as exc:
        print(f"[ERROR] {exc}")
        sys.exit(1)

    results_dir = cfg.get("results_dir", "results")
    scenes = cfg.get("scenes", [])

    # Optionally restrict to a subset of scenes
    if args.scenes:
        scenes = [s for s in scenes if s["name"] in args.scenes]
        if not scenes:
            print(f"[ERROR] No matching scenes found for: {args.scenes}")
            sys.exit(1)

    # Validate that every scene has images
    for sc in scenes:
        if not os.path.isdir(sc["image_dir"]):
            print(f"[ERROR] Image directory not found: {sc['image_dir']}")
            sys.exit(1)
        if not list_images(sc["image_dir"], sc.get("pattern", "*.png")):
            print(f"[ERROR] No images in {sc['image_dir']} "
                  f"matching {sc.get('pattern', '*.png')}")
            sys.exit(1)

    ensure_output_dir(results_dir)

    banner("Keypoint Tracking Pipeline")
    print(f"  Config    : {args.config}")
    print(f"  Scenes    : {[s['name'] for s in scenes]}")
    print(f"  Detector  : {cfg['detector']}")
    print(f"  Descriptor: {cfg['descriptor']}")
    print(f"  Matching  : {cfg['matcher']} / {cfg['selector']}")
    print(f"  Output    : {results_dir}/")

    t0 = time.time()
    all_metrics = []

    for sc in scenes:
        metrics = run_scene(sc, cfg)
        all_metrics.append(metrics)

    # ── Summary table ──────────────────────────────────────────────────────
    banner("Results Summary")
    header = f"{'Scene':<10} {'Frames':>7} {'Keypoints':>10} {'Desc':>8} {'Matches':>9} {'Mean':>8}"
    print(header)
    print("─" * len(header))
    for m in all_metrics:
        mean = f"{m['mean_matches']:.1f}" if m["mean_matches"] is not None else "–"
        print(f"{m['scene']:<10} {m['frames']:>7} {m['keypoints']:>10} "
              f"{m['descriptors']:>8} {m['matches']:>9} {mean:>8}")

    out_path = os.path.join(results_dir, "metrics.yaml")
    with open(out_path, "w") as fh:
        yaml.safe_dump({"config": {k: cfg[k] for k in ("detector", "descriptor", "matcher", "selector")},
                        "scenes": all_metrics}, fh, sort_keys=False)

    elapsed = time.time() - t0
    print(f"\nPipeline complete in {elapsed:.1f}s")
    print(f"Results saved to: {os.path.abspath(out_path)}")
    return all_metrics


if __name__ == "__main__":
    main()
