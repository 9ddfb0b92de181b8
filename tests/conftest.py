"""
Shared synthetic images for the detector, descriptor and pipeline tests.
"""

import numpy as np
import pytest
from PIL import Image


def _texture(height: int, width: int, seed: int = 0) -> np.ndarray:
    """Blob texture: coarse random noise upsampled with bicubic filtering."""
    rng = np.random.default_rng(seed)
    coarse = rng.integers(0, 256, (height // 4, width // 4), dtype=np.uint8)
    return np.array(Image.fromarray(coarse).resize((width, height), Image.Resampling.BICUBIC))


@pytest.fixture
def square_image():
    """100x100 black image with a white square covering rows/cols 30..69."""
    img = np.zeros((100, 100), dtype=np.uint8)
    img[30:70, 30:70] = 255
    return img


@pytest.fixture
def square_corners():
    """(x, y) of the square's four corners, on pixel boundaries."""
    return [(29.5, 29.5), (69.5, 29.5), (29.5, 69.5), (69.5, 69.5)]


@pytest.fixture
def textured_image():
    return _texture(240, 320)


@pytest.fixture
def sequence_dir(tmp_path):
    """Three PNG frames of one texture, each shifted by a few pixels."""
    texture = _texture(256, 336, seed=1)
    for i, (dy, dx) in enumerate([(0, 0), (2, 3), (4, 6)]):
        frame = texture[dy:dy + 240, dx:dx + 320]
        Image.fromarray(frame).save(tmp_path / f"{i:04d}.png")
    return tmp_path


def nearest_distance(point, targets) -> float:
    return min(np.hypot(point[0] - tx, point[1] - ty) for tx, ty in targets)
