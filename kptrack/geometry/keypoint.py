"""
Keypoint type and circular-footprint geometry.

A keypoint is a circle in image space: a centre ``(x, y)`` in (column, row)
order and a radius describing its visual extent.  Two keypoints are
duplicates of the same feature when their footprints overlap; the overlap
ratio follows OpenCV's ``KeyPoint::overlap`` convention so that keypoints
produced here and keypoints produced by OpenCV detectors behave alike.
"""

from dataclasses import dataclass

import cv2


@dataclass(frozen=True)
class Keypoint:
    """A detected feature location.

    ``x`` is the horizontal (column) coordinate and ``y`` the vertical (row)
    coordinate, i.e. the reverse of numpy's ``(row, col)`` indexing.
    ``angle``, ``octave`` and ``class_id`` are carried through unchanged for
    OpenCV descriptor extractors and keep OpenCV's "unset" defaults.
    """
    x: float
    y: float
    radius: float
    response: float = 0.0
    angle: float = -1.0
    octave: int = 0
    class_id: int = -1

    @property
    def position(self) -> tuple:
        return (self.x, self.y)

    @property
    def size(self) -> float:
        """Footprint diameter (OpenCV's ``KeyPoint.size``)."""
        return 2.0 * self.radius


def keypoint_overlap(a: Keypoint, b: Keypoint) -> float:
    """Ratio of intersection area to union area of two keypoint footprints.

    Computed by OpenCV's ``KeyPoint::overlap`` on the converted keypoints.

    Parameters
    ----------
    a, b : Keypoint
        Keypoints whose circular footprints are compared.

    Returns
    -------
    float
        Value in [0, 1].  0 when the circles are disjoint or only touch,
        1 for identical footprints.  When one circle lies entirely inside
        the other the ratio of their areas is returned.
    """
    cv_a, cv_b = to_cv_keypoints([a, b])
    return float(cv2.KeyPoint_overlap(cv_a, cv_b))


def to_cv_keypoints(keypoints) -> list:
    """Convert keypoints to ``cv2.KeyPoint`` objects for OpenCV extractors."""
    return [
        cv2.KeyPoint(float(kp.x), float(kp.y), float(kp.size),
                     float(kp.angle), float(kp.response),
                     int(kp.octave), int(kp.class_id))
        for kp in keypoints
    ]


def from_cv_keypoints(cv_keypoints) -> list:
    """Convert ``cv2.KeyPoint`` objects returned by OpenCV into keypoints."""
    return [
        Keypoint(x=float(kp.pt[0]), y=float(kp.pt[1]),
                 radius=float(kp.size) / 2.0,
                 response=float(kp.response), angle=float(kp.angle),
                 octave=int(kp.octave), class_id=int(kp.class_id))
        for kp in cv_keypoints
    ]
