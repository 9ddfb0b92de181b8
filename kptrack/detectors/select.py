"""
Detector selection by name.
"""

import numpy as np

from kptrack.detectors.harris import HarrisParams, detect_harris
from kptrack.detectors.modern import DETECTOR_TYPES, FastParams, detect_modern
from kptrack.detectors.shi_tomasi import ShiTomasiParams, detect_shi_tomasi

ALL_DETECTOR_TYPES = ("SHITOMASI", "HARRIS") + DETECTOR_TYPES


def detect_keypoints(gray: np.ndarray, detector_type: str,
                     harris: HarrisParams = HarrisParams(),
                     shi_tomasi: ShiTomasiParams = ShiTomasiParams(),
                     fast: FastParams = FastParams()) -> list:
    """Run the detector named *detector_type* on a grayscale image."""
    if detector_type == "SHITOMASI":
        return detect_shi_tomasi(gray, shi_tomasi)
    if detector_type == "HARRIS":
        return detect_harris(gray, harris)
    return detect_modern(gray, detector_type, fast)
