"""
Descriptor matching between two frames.

Brute-force or FLANN matching, followed by either plain nearest-neighbour
selection or Lowe's ratio test: a k=2 match is accepted only when the best
candidate is clearly closer than the second best, ensuring distinctiveness.
"""

import cv2
import numpy as np

MATCHER_TYPES = ("MAT_BF", "MAT_FLANN")
SELECTOR_TYPES = ("SEL_NN", "SEL_KNN")


def create_matcher(matcher_type: str, descriptor_kind: str = "DES_BINARY"):
    """Instantiate a brute-force or FLANN descriptor matcher."""
    if matcher_type == "MAT_BF":
        norm = cv2.NORM_HAMMING if descriptor_kind == "DES_BINARY" else cv2.NORM_L2
        return cv2.BFMatcher(norm, crossCheck=False)
    if matcher_type == "MAT_FLANN":
        return cv2.FlannBasedMatcher()
    raise ValueError(f"Unsupported matcher type: {matcher_type}")


def match_descriptors(desc_source: np.ndarray, desc_ref: np.ndarray,
                      descriptor_kind: str = "DES_BINARY",
                      matcher_type: str = "MAT_BF",
                      selector_type: str = "SEL_NN",
                      ratio: float = 0.8) -> list:
    """Match source descriptors against reference descriptors.

    Parameters
    ----------
    desc_source : np.ndarray
        M x D descriptors of the earlier frame.
    desc_ref : np.ndarray
        N x D descriptors of the later frame.
    descriptor_kind : str
        ``"DES_BINARY"`` (Hamming norm) or ``"DES_HOG"`` (L2 norm).
    matcher_type : str
        ``"MAT_BF"`` or ``"MAT_FLANN"``.
    selector_type : str
        ``"SEL_NN"`` for the best match, ``"SEL_KNN"`` for the ratio test.
    ratio : float
        Ratio-test threshold in (0, 1].  Lower values are more selective.

    Returns
    -------
    list of (int, int, float)
        Each entry is ``(source_idx, ref_idx, distance)``.
    """
    if selector_type not in SELECTOR_TYPES:
        raise ValueError(f"Unsupported selector type: {selector_type}")
    if not 0.0 < ratio <= 1.0:
        raise ValueError(f"ratio must lie in (0, 1], got {ratio}")

    matcher = create_matcher(matcher_type, descriptor_kind)

    if desc_source is None or desc_ref is None or len(desc_source) == 0 or len(desc_ref) == 0:
        return []

    if matcher_type == "MAT_FLANN":
        # FLANN's KD-tree index only accepts float32 data
        desc_source = np.asarray(desc_source, dtype=np.float32)
        desc_ref = np.asarray(desc_ref, dtype=np.float32)

    if selector_type == "SEL_NN":
        return [(m.queryIdx, m.trainIdx, float(m.distance))
                for m in matcher.match(desc_source, desc_ref)]

    matches = []
    for pair in matcher.knnMatch(desc_source, desc_ref, k=2):
        if len(pair) < 2:
            continue
        best, second = pair[0], pair[1]
        if best.distance < ratio * second.distance:
            matches.append((best.queryIdx, best.trainIdx, float(best.distance)))
    return matches
