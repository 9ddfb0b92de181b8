"""
Binary and gradient-based keypoint detectors provided by OpenCV.

FAST, BRISK, ORB, AKAZE and SIFT are created per call from explicit
parameters; no detector object outlives the call.
"""

import time
from dataclasses import dataclass

import cv2
import numpy as np

from kptrack.geometry.keypoint import from_cv_keypoints
from kptrack.utils.image_io import as_uint8

DETECTOR_TYPES = ("FAST", "BRISK", "ORB", "AKAZE", "SIFT")

# cv::FastFeatureDetector::DetectorType values
_FAST_TYPES = {
    "TYPE_5_8": 0,
    "TYPE_7_12": 1,
    "TYPE_9_16": 2,
}


@dataclass(frozen=True)
class FastParams:
    """
    threshold:
      - Intensity difference between the centre pixel and the circle pixels.
    nonmax_suppression:
      - Apply FAST's own non-maximal suppression.
    type:
      - Circle pattern: TYPE_9_16, TYPE_7_12 or TYPE_5_8.
    """
    threshold: int = 80
    nonmax_suppression: bool = True
    type: str = "TYPE_9_16"


def create_detector(detector_type: str, fast: FastParams = FastParams()):
    """Instantiate the OpenCV feature detector named *detector_type*."""
    if detector_type == "FAST":
        if fast.type not in _FAST_TYPES:
            raise ValueError(f"Unknown FAST type: {fast.type}")
        return cv2.FastFeatureDetector_create(
            threshold=fast.threshold,
            nonmaxSuppression=fast.nonmax_suppression,
            type=_FAST_TYPES[fast.type],
        )
    if detector_type == "BRISK":
        return cv2.BRISK_create()
    if detector_type == "ORB":
        return cv2.ORB_create()
    if detector_type == "AKAZE":
        return cv2.AKAZE_create()
    if detector_type == "SIFT":
        if not hasattr(cv2, "SIFT_create"):
            raise ValueError("SIFT not available in this OpenCV build.")
        return cv2.SIFT_create()
    raise ValueError(f"Unsupported detector type: {detector_type}")


def detect_modern(gray: np.ndarray, detector_type: str,
                  fast: FastParams = FastParams()) -> list:
    """Detect keypoints with one of the OpenCV detectors.

    Parameters
    ----------
    gray : np.ndarray
        Grayscale image (H x W).
    detector_type : str
        One of ``DETECTOR_TYPES``.
    fast : FastParams
        Settings used when *detector_type* is ``"FAST"``.

    Returns
    -------
    list of Keypoint
    """
    detector = create_detector(detector_type, fast)

    t0 = time.perf_counter()
    keypoints = from_cv_keypoints(detector.detect(as_uint8(gray), None))
    elapsed = 1000.0 * (time.perf_counter() - t0)
    print(f"    {detector_type} detection with n={len(keypoints)} keypoints "
          f"in {elapsed:.2f} ms")
    return keypoints
