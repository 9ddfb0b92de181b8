"""
Ring buffer of the most recent frames of a sequence.
"""

from collections import deque
from dataclasses import dataclass, field

import numpy as np


@dataclass
class DataFrame:
    """Everything the pipeline keeps about one image of the sequence."""
    name: str
    image: np.ndarray
    keypoints: list = field(default_factory=list)
    descriptors: np.ndarray = None
    matches: list = field(default_factory=list)


class FrameBuffer:
    """Holds at most *size* frames; pushing beyond that drops the oldest."""

    def __init__(self, size: int = 2):
        if size < 1:
            raise ValueError(f"buffer size must be at least 1, got {size}")
        self._frames = deque(maxlen=size)

    @property
    def size(self) -> int:
        return self._frames.maxlen

    def push(self, frame: DataFrame) -> None:
        self._frames.append(frame)

    @property
    def current(self) -> DataFrame:
        return self._frames[-1]

    @property
    def previous(self) -> DataFrame:
        return self._frames[-2]

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return iter(self._frames)
