"""
Shi-Tomasi corner detection via ``cv2.goodFeaturesToTrack``.
"""

import time
from dataclasses import dataclass

import cv2
import numpy as np

from kptrack.geometry.keypoint import Keypoint
from kptrack.utils.image_io import as_uint8


@dataclass(frozen=True)
class ShiTomasiParams:
    """
    Parameters for Shi-Tomasi corner detection.

    block_size:
      - Size of the averaging block for the derivative covariation matrix.
    max_overlap:
      - Maximum permissible overlap between two features; sets the minimum
        corner distance to (1 - max_overlap) * block_size.
    quality_level:
      - Rejects corners with response < quality_level * best_response.
    k:
      - Harris free parameter (unused unless the Harris measure is chosen).
    """
    block_size: int = 4
    max_overlap: float = 0.0
    quality_level: float = 0.01
    k: float = 0.04

    @property
    def min_distance(self) -> float:
        return (1.0 - self.max_overlap) * self.block_size


def detect_shi_tomasi(gray: np.ndarray,
                      params: ShiTomasiParams = ShiTomasiParams()) -> list:
    """Detect Shi-Tomasi corners on a grayscale image.

    The corner budget scales with the image area so that the minimum
    distance, not the budget, limits the corner count.  Each keypoint's
    footprint diameter equals the block size.
    """
    if gray.ndim != 2:
        raise ValueError("detect_shi_tomasi expects grayscale (H,W).")

    max_corners = int(gray.shape[0] * gray.shape[1] / max(1.0, params.min_distance))

    t0 = time.perf_counter()
    corners = cv2.goodFeaturesToTrack(
        as_uint8(gray),
        maxCorners=max_corners,
        qualityLevel=params.quality_level,
        minDistance=params.min_distance,
        mask=None,
        blockSize=params.block_size,
        useHarrisDetector=False,
        k=params.k,
    )

    keypoints = []
    if corners is not None:
        for x, y in corners.reshape(-1, 2):
            keypoints.append(Keypoint(x=float(x), y=float(y),
                                      radius=params.block_size / 2.0))

    elapsed = 1000.0 * (time.perf_counter() - t0)
    print(f"    Shi-Tomasi detection with n={len(keypoints)} keypoints "
          f"in {elapsed:.2f} ms")
    return keypoints
