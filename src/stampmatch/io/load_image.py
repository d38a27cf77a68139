"""
Image loading for StampMatch.

Reads image files into RGBA raster buffers for comparison.
"""

import os

import cv2
import numpy as np

from stampmatch.models import RasterBuffer
from stampmatch.tracer import get_tracer, trace


SUPPORTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp", ".webp"]


@trace(label="load_buffer")
def load_buffer(path):
    """
    Load an image from disk as an RGBA buffer.

    Grayscale and RGB images get a fully opaque alpha channel.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if image cannot be decoded.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Failed to load image: {path}")

    rgba = to_rgba(img)
    tracer.event(f"Loaded image: {rgba.shape[1]}x{rgba.shape[0]}", path=path)
    return RasterBuffer(rgba)


def to_rgba(img):
    """Convert an OpenCV image (gray, BGR or BGRA) to an RGBA uint8 array."""
    if img.dtype != np.uint8:
        # 16-bit PNG and TIFF
        img = (img / 257).astype(np.uint8) if img.dtype == np.uint16 else img.astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)

    raise ValueError(f"Unsupported channel count: {img.shape[2]}")


def validate_image_inputs(paths):
    """
    Validate that all input paths exist and look like images.

    Returns a list of error messages (empty if all valid).
    """
    errors = []

    for path in paths:
        if not os.path.exists(path):
            errors.append(f"File not found: {path}")
            continue

        ext = os.path.splitext(path)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            errors.append(f"Unsupported image format: {path}")

    return errors
