"""
Keypoint descriptor extraction with OpenCV extractors.

Binary descriptors (BRISK, ORB, AKAZE, FREAK) are compared with the Hamming
norm; SIFT produces gradient-histogram vectors compared with the L2 norm.
"""

import time
from dataclasses import dataclass

import cv2
import numpy as np

from kptrack.geometry.keypoint import from_cv_keypoints, to_cv_keypoints
from kptrack.utils.image_io import as_uint8

DESCRIPTOR_TYPES = ("BRISK", "ORB", "AKAZE", "SIFT", "FREAK")

# (detector, descriptor) pairs OpenCV cannot describe
_INCOMPATIBLE = {
    ("SIFT", "ORB"),
}


@dataclass(frozen=True)
class BriskParams:
    """
    threshold:
      - FAST/AGAST detection threshold score.
    octaves:
      - Detection octaves (0 for single scale).
    pattern_scale:
      - Scale applied to the neighbourhood sampling pattern.
    """
    threshold: int = 30
    octaves: int = 3
    pattern_scale: float = 1.0


def descriptor_kind(descriptor_type: str) -> str:
    """Return ``"DES_HOG"`` for SIFT and ``"DES_BINARY"`` for the others."""
    if descriptor_type not in DESCRIPTOR_TYPES:
        raise ValueError(f"Unsupported descriptor type: {descriptor_type}")
    return "DES_HOG" if descriptor_type == "SIFT" else "DES_BINARY"


def check_combination(detector_type: str, descriptor_type: str) -> None:
    """Raise ``ValueError`` if the descriptor cannot describe these keypoints.

    AKAZE descriptors need the class and octave information only the AKAZE
    detector writes, and ORB cannot describe SIFT's octave layout.
    """
    if descriptor_type == "AKAZE" and detector_type != "AKAZE":
        raise ValueError("AKAZE descriptors require AKAZE keypoints.")
    if (detector_type, descriptor_type) in _INCOMPATIBLE:
        raise ValueError(
            f"{descriptor_type} descriptors cannot be computed on "
            f"{detector_type} keypoints.")


def create_extractor(descriptor_type: str, brisk: BriskParams = BriskParams()):
    """Instantiate the OpenCV descriptor extractor named *descriptor_type*."""
    if descriptor_type == "BRISK":
        return cv2.BRISK_create(brisk.threshold, brisk.octaves,
                                brisk.pattern_scale)
    if descriptor_type == "ORB":
        return cv2.ORB_create()
    if descriptor_type == "AKAZE":
        return cv2.AKAZE_create()
    if descriptor_type == "SIFT":
        if not hasattr(cv2, "SIFT_create"):
            raise ValueError("SIFT not available in this OpenCV build.")
        return cv2.SIFT_create()
    if descriptor_type == "FREAK":
        if not hasattr(cv2, "xfeatures2d"):
            raise ValueError("FREAK requires the opencv-contrib xfeatures2d module.")
        return cv2.xfeatures2d.FREAK_create()
    raise ValueError(f"Unsupported descriptor type: {descriptor_type}")


def describe_keypoints(keypoints, gray: np.ndarray, descriptor_type: str,
                       brisk: BriskParams = BriskParams()):
    """Compute descriptors for a set of keypoints.

    Parameters
    ----------
    keypoints : list of Keypoint
        Keypoints to describe.
    gray : np.ndarray
        Grayscale image (H x W) the keypoints were detected on.
    descriptor_type : str
        One of ``DESCRIPTOR_TYPES``.
    brisk : BriskParams
        Settings used when *descriptor_type* is ``"BRISK"``.

    Returns
    -------
    descriptors : np.ndarray
        N x D descriptor matrix (uint8 for binary descriptors, float32 for
        SIFT).  Shape (0, 0) when nothing could be described.
    keypoints : list of Keypoint
        The N keypoints that were described.  Extractors drop keypoints
        whose sampling pattern leaves the image.
    """
    extractor = create_extractor(descriptor_type, brisk)

    t0 = time.perf_counter()
    cv_kps, descriptors = extractor.compute(as_uint8(gray),
                                            to_cv_keypoints(keypoints))
    elapsed = 1000.0 * (time.perf_counter() - t0)
    print(f"    {descriptor_type} descriptor extraction in {elapsed:.2f} ms")

    if descriptors is None or not cv_kps:
        return np.empty((0, 0), dtype=np.uint8), []
    return descriptors, from_cv_keypoints(cv_kps)
