"""White balance from the film border, crop and inversion."""

from __future__ import annotations

import logging

import numpy as np

from .exceptions import GeometryError
from .geometry import crop_raster
from .models import MAX_VALUE, Border, Rectangle

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])
"""Rec.601 luma weights in RGB order."""


def reference_color(raster: np.ndarray, samples: np.ndarray) -> np.ndarray:
    """Root-mean-square color of the raster at the sample coordinates.

    RMS rather than the mean, so the brighter tones that dominate how the
    border looks weigh more.

    Args:
        raster: Full-resolution 16-bit RGB image
        samples: (x, y) coordinates, shape (N, 2)

    Returns:
        RGB reference color as float64 array of shape (3,)
    """
    pixels = raster[samples[:, 1], samples[:, 0]].astype(np.float64)
    return np.sqrt(np.mean(pixels**2, axis=0))


def white_balance_ratios(reference: np.ndarray) -> np.ndarray:
    """Per-channel multipliers that turn the reference color neutral.

    The neutral target is the perceived brightness of the reference,
    sqrt(0.299 R^2 + 0.587 G^2 + 0.114 B^2).

    Raises:
        GeometryError: If a reference channel is zero
    """
    if np.any(reference <= 0):
        raise GeometryError(
            f"border reference color {reference.round(1).tolist()} has a black channel"
        )

    luminance = np.sqrt(np.sum(LUMA_WEIGHTS * reference**2))
    return luminance / reference


def apply_ratios(raster: np.ndarray, ratios: np.ndarray) -> np.ndarray:
    """Multiply each channel by its ratio, clamped to the 16-bit range."""
    balanced = raster.astype(np.float32) * ratios.astype(np.float32)
    return np.clip(balanced, 0, MAX_VALUE).astype(np.uint16)


def invert(raster: np.ndarray) -> np.ndarray:
    """Flip tonal polarity: every value v becomes MAX_VALUE - v."""
    return MAX_VALUE - raster


def calibrate_and_crop(raster: np.ndarray, border: Border, crop_rect: Rectangle) -> np.ndarray:
    """White balance on the border, crop to the frame and invert.

    Args:
        raster: Full-resolution 16-bit RGB negative
        border: Located border with sample coordinates
        crop_rect: Final crop rectangle in full-resolution coordinates

    Returns:
        New cropped, balanced, inverted 16-bit RGB raster

    Raises:
        GeometryError: If the crop is empty or the border is black
    """
    reference = reference_color(raster, border.samples)
    ratios = white_balance_ratios(reference)
    logger.debug(
        "Border reference %s, ratios %s",
        reference.round(1).tolist(),
        ratios.round(4).tolist(),
    )

    balanced = apply_ratios(raster, ratios)
    cropped = crop_raster(balanced, crop_rect)
    return invert(cropped)
