"""Crop rectangle calculation."""

from __future__ import annotations

import logging

import numpy as np

from .exceptions import GeometryError
from .models import Rectangle

logger = logging.getLogger(__name__)


def compute_crop(
    bounds: Rectangle,
    aspect_ratio: float,
    inset: float,
    image_size: tuple[int, int],
) -> Rectangle:
    """Adjust frame bounds to an aspect ratio and an extra inset.

    The axis that is too long for the aspect ratio is shrunk and centered;
    the other axis is inset by ``inset`` of the image dimension on each side.

    Args:
        bounds: Frame bounds in full-resolution coordinates
        aspect_ratio: Target aspect ratio (width/height)
        inset: Extra inset per side as a fraction of the full image size
        image_size: Full image (width, height)

    Returns:
        Crop rectangle contained in bounds. Degenerate bounds are returned
        unchanged.
    """
    img_w, img_h = image_size
    width = bounds.width
    height = bounds.height

    if width == 0 or height == 0:
        return bounds

    current_ratio = width / height

    if current_ratio >= aspect_ratio:
        # Too wide (or exact) - inset height, derive width, center horizontally
        inset_y = int(round(img_h * inset))
        top = min(bounds.min_y + inset_y, bounds.max_y)
        bottom = max(bounds.max_y - inset_y, top)
        new_width = min(width, int(round((bottom - top) * aspect_ratio)))
        left = bounds.min_x + (width - new_width) // 2
        right = left + new_width

    else:
        # Too tall - inset width, derive height, center vertically
        inset_x = int(round(img_w * inset))
        left = min(bounds.min_x + inset_x, bounds.max_x)
        right = max(bounds.max_x - inset_x, left)
        new_height = min(height, int(round((right - left) / aspect_ratio)))
        top = bounds.min_y + (height - new_height) // 2
        bottom = top + new_height

    crop = Rectangle(left, top, right, bottom)
    logger.debug(
        "Crop %s (ratio %.4f) from %s", crop.as_tuple(), crop.aspect_ratio, bounds.as_tuple()
    )
    return crop


def crop_raster(raster: np.ndarray, rect: Rectangle) -> np.ndarray:
    """Copy the pixels inside rect into a new raster.

    Raises:
        GeometryError: If the rectangle has no area inside the image
    """
    img_h, img_w = raster.shape[:2]
    rect = rect.clamped(img_w, img_h)
    if rect.is_empty:
        raise GeometryError(f"crop rectangle {rect.as_tuple()} has zero area")
    return raster[rect.min_y : rect.max_y, rect.min_x : rect.max_x].copy()
