"""
Post-detection keypoint filters: region of interest and strongest-N.
"""


def filter_by_region(keypoints, rect: tuple) -> list:
    """Keep keypoints that lie inside an axis-aligned rectangle.

    Parameters
    ----------
    keypoints : list of Keypoint
        Keypoints to filter.
    rect : tuple of (x, y, width, height)
        Region in pixel coordinates; the left/top edges are inclusive and
        the right/bottom edges exclusive.

    Returns
    -------
    list of Keypoint
        Keypoints inside *rect*, in their original order.
    """
    x, y, w, h = rect
    return [kp for kp in keypoints
            if x <= kp.x < x + w and y <= kp.y < y + h]


def retain_best(keypoints, n: int) -> list:
    """Keep the *n* strongest keypoints, plus any tied with the n-th one.

    Ties at the boundary response are all kept, so the result may hold more
    than *n* keypoints.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if n >= len(keypoints):
        return list(keypoints)
    if n == 0:
        return []

    ranked = sorted(keypoints, key=lambda kp: kp.response, reverse=True)
    boundary = ranked[n - 1].response
    return ranked[:n] + [kp for kp in ranked[n:] if kp.response >= boundary]
