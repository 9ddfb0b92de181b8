"""
Image I/O helpers.

Thin wrappers around PIL and scikit-image for consistent image loading,
dtype conversion, and output directory management across the pipeline.
"""

import os
from pathlib import Path

import numpy as np
from PIL import Image
from skimage.util import img_as_ubyte


def load_grayscale(path: str) -> np.ndarray:
    """Load an image file as an H x W uint8 grayscale array."""
    return np.array(Image.open(path).convert("L"))


def as_uint8(gray: np.ndarray) -> np.ndarray:
    """Return *gray* as uint8, rescaling float images from [0, 1]."""
    if gray.dtype == np.uint8:
        return gray
    return img_as_ubyte(gray)


def list_images(directory: str, pattern: str = "*.png") -> list:
    """Sorted paths of the images in *directory* that match *pattern*."""
    return sorted(str(p) for p in Path(directory).glob(pattern) if p.is_file())


def ensure_output_dir(base: str = "results") -> None:
    """Create the root output directory if it does not exist."""
    os.makedirs(base, exist_ok=True)
