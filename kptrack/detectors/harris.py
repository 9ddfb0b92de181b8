"""
Harris corner detector.

Detects corners by analysing the structure tensor: regions where image
gradients change strongly in multiple directions yield large eigenvalues of
the tensor and are marked as corners.  The response map is rescaled to the
8-bit range and thinned with overlap-based non-maximal suppression.
"""

import time
from dataclasses import dataclass

import numpy as np
from skimage.feature import corner_harris
from skimage.util import img_as_float

from kptrack.suppression.nms import non_maximal_suppression


@dataclass(frozen=True)
class HarrisParams:
    """Harris detector settings.

    min_response:
      - Minimum corner value in the 0-255 scaled response map.
    aperture_size:
      - Footprint radius given to each keypoint (diameter is twice this).
    k:
      - Harris detector free parameter.
    sigma:
      - Standard deviation of the Gaussian window of the structure tensor.
    max_overlap:
      - Maximum permissible footprint overlap between two corners.
    clamp_negative:
      - Set negative (edge) responses to zero before scaling, so flat regions
        map to 0 instead of the level of a zero response.
    """
    min_response: int = 120
    aperture_size: int = 3
    k: float = 0.04
    sigma: float = 1.0
    max_overlap: float = 0.0
    clamp_negative: bool = False


def harris_response(gray: np.ndarray, params: HarrisParams = HarrisParams()) -> np.ndarray:
    """Compute a Harris response map scaled to [0, 255].

    Parameters
    ----------
    gray : np.ndarray
        Grayscale image (H x W), uint8 or float.
    params : HarrisParams
        Detector settings (``k``, ``sigma`` and ``clamp_negative`` are used).

    Returns
    -------
    np.ndarray
        H x W float64 response map, min-max scaled over the signed response,
        so a zero response lands at ``255 * -min / (max - min)``.  A constant
        map scales to all zeros.
    """
    h = corner_harris(img_as_float(gray), method="k", k=params.k,
                      sigma=params.sigma)
    if params.clamp_negative:
        h = np.maximum(h, 0.0)

    lo, hi = float(h.min()), float(h.max())
    if hi <= lo:
        return np.zeros_like(h)
    return (h - lo) * (255.0 / (hi - lo))


def detect_harris(gray: np.ndarray, params: HarrisParams = HarrisParams()) -> list:
    """Detect Harris corners in a grayscale image.

    Parameters
    ----------
    gray : np.ndarray
        Grayscale image (H x W).
    params : HarrisParams
        Detector and suppression settings.

    Returns
    -------
    list of Keypoint
        Suppressed corners with integer responses in (min_response, 255].
    """
    t0 = time.perf_counter()

    # Integer response levels, as in an 8-bit response image
    levels = np.trunc(harris_response(gray, params))
    keypoints = non_maximal_suppression(levels, params.min_response,
                                        params.aperture_size,
                                        max_overlap=params.max_overlap)

    elapsed = 1000.0 * (time.perf_counter() - t0)
    print(f"    Harris detection with n={len(keypoints)} keypoints "
          f"in {elapsed:.2f} ms")
    return keypoints
