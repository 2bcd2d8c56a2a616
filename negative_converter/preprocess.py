"""Analysis copy of the working raster."""

from __future__ import annotations

import logging

import cv2
import numpy as np

from .exceptions import DecodeError
from .models import AnalysisImage, PreprocessParams

logger = logging.getLogger(__name__)


def check_raster(raster: np.ndarray, source: str = "<raster>") -> None:
    """Ensure the raster is a 16-bit, 3-channel image.

    Raises:
        DecodeError: If the raster has a different layout or bit depth
    """
    if raster.dtype != np.uint16:
        raise DecodeError(source, f"unsupported bit depth ({raster.dtype})")
    if raster.ndim != 3 or raster.shape[2] != 3:
        raise DecodeError(source, f"expected 3 color channels, got shape {raster.shape}")
    if raster.shape[0] == 0 or raster.shape[1] == 0:
        raise DecodeError(source, "image is empty")


def to_luma8(raster: np.ndarray) -> np.ndarray:
    """Convert a 16-bit RGB raster to 8-bit luma."""
    gray16 = cv2.cvtColor(raster, cv2.COLOR_RGB2GRAY)
    return np.rint(gray16.astype(np.float32) / 257.0).astype(np.uint8)


def create_analysis_image(
    raster: np.ndarray,
    params: PreprocessParams | None = None,
) -> AnalysisImage:
    """Create the downscaled grayscale copy used for geometry detection.

    Images whose longest side exceeds ``params.max_dimension`` are resampled
    with area interpolation so that side equals the maximum; smaller images
    keep their size.

    Args:
        raster: Full-resolution 16-bit RGB image
        params: Preprocessing parameters

    Returns:
        AnalysisImage with the 8-bit luma copy and per-axis scale factors
    """
    params = params or PreprocessParams()
    check_raster(raster)

    full_h, full_w = raster.shape[:2]
    longest = max(full_w, full_h)

    if longest > params.max_dimension:
        factor = params.max_dimension / longest
        width = max(1, int(round(full_w * factor)))
        height = max(1, int(round(full_h * factor)))
        small = cv2.resize(raster, (width, height), interpolation=cv2.INTER_AREA)
    else:
        width, height = full_w, full_h
        small = raster

    gray = to_luma8(small)
    logger.debug("Analysis copy %dx%d from %dx%d", width, height, full_w, full_h)

    return AnalysisImage(
        gray=gray,
        scale_x=width / full_w,
        scale_y=height / full_h,
        full_width=full_w,
        full_height=full_h,
    )
