"""
Non-maximal suppression (NMS) for corner response maps.

Every response cell above a threshold becomes a candidate keypoint with a
circular footprint.  Candidates whose footprints overlap an already accepted
keypoint either replace it (when strictly stronger) or are dropped, reducing
dense clusters of strong responses to single representative points.
"""

import numpy as np

from kptrack.geometry.keypoint import Keypoint, keypoint_overlap


class InvalidResponseGrid(ValueError):
    """Raised when the response grid is not a 2-D array."""


def non_maximal_suppression(grid: np.ndarray, min_response: float,
                            aperture_radius: float, max_overlap: float = 0.0,
                            overlap=keypoint_overlap) -> list:
    """Build a de-duplicated keypoint list from a dense response grid.

    Cells are visited in row-major order.  A cell whose value exceeds
    *min_response* becomes a candidate at ``(x=col, y=row)``.  The candidate
    is compared with the accepted keypoints in insertion order: the first
    overlapping keypoint with a strictly lower response is replaced by the
    candidate and the scan stops.  A candidate that overlaps any accepted
    keypoint is never appended, even when it replaced nothing.

    Because only the first beaten keypoint is replaced, a candidate can
    take the place of one keypoint while still overlapping another one that
    stays in the list.  Chains of nearby peaks may therefore leave
    overlapping survivors; this first-match behaviour is kept on purpose.

    Parameters
    ----------
    grid : np.ndarray
        2-D response map indexed ``(row, col)``.  Not modified.
    min_response : float
        Cells with a value strictly greater than this are candidates.
    aperture_radius : float
        Footprint radius given to every keypoint.
    max_overlap : float
        Overlap ratio above which two keypoints are considered duplicates.
    overlap : callable
        ``overlap(a, b) -> float`` in [0, 1].

    Returns
    -------
    list of Keypoint
        Surviving keypoints.  Empty when no cell exceeds *min_response* or
        when the grid has zero rows or columns.

    Raises
    ------
    InvalidResponseGrid
        If *grid* is not two-dimensional.
    ValueError
        If *aperture_radius* is not positive or *max_overlap* is outside
        [0, 1].
    """
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise InvalidResponseGrid(
            f"response grid must be 2-D, got shape {grid.shape}")
    if aperture_radius <= 0:
        raise ValueError(f"aperture_radius must be positive, got {aperture_radius}")
    if not 0.0 <= max_overlap <= 1.0:
        raise ValueError(f"max_overlap must lie in [0, 1], got {max_overlap}")

    keypoints = []
    if grid.size == 0:
        return keypoints

    # argwhere yields (row, col) pairs in row-major order
    for row, col in np.argwhere(grid > min_response):
        candidate = Keypoint(x=float(col), y=float(row),
                             radius=float(aperture_radius),
                             response=float(grid[row, col]))

        found_overlap = False
        for i, existing in enumerate(keypoints):
            if overlap(candidate, existing) > max_overlap:
                found_overlap = True
                if candidate.response > existing.response:
                    keypoints[i] = candidate
                    break

        if not found_overlap:
            keypoints.append(candidate)

    return keypoints


def rasterize_keypoints(keypoints, shape: tuple) -> np.ndarray:
    """Write keypoint responses into an otherwise zero response grid.

    Parameters
    ----------
    keypoints : list of Keypoint
        Keypoints to place; each lands on ``[round(y), round(x)]``.
    shape : tuple of (int, int)
        (rows, cols) of the output grid.

    Returns
    -------
    np.ndarray
        float64 grid of the given shape.
    """
    grid = np.zeros(shape, dtype=np.float64)
    for kp in keypoints:
        grid[int(round(kp.y)), int(round(kp.x))] = kp.response
    return grid
