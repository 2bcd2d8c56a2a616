"""Negative to positive conversion pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .calibration import calibrate_and_crop
from .detection import locate_border
from .geometry import compute_crop
from .models import ConversionConfig, ToneCutoffs
from .tone import stretch_tone

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer

logger = logging.getLogger(__name__)


def convert(
    raster: np.ndarray,
    aspect_ratio: float,
    inset: float = 0.0,
    visualizer: DebugVisualizer | None = None,
    config: ConversionConfig | None = None,
) -> np.ndarray:
    """Convert a linear 16-bit RGB negative scan into a positive.

    Locates the frame, crops it to the aspect ratio, white balances on the
    film border, inverts, and stretches the tones.

    Args:
        raster: Full-resolution 16-bit RGB negative
        aspect_ratio: Frame aspect ratio (width/height)
        inset: Extra crop per side as a fraction of the image size
        visualizer: Optional debug visualizer to save intermediate images
        config: Conversion configuration

    Returns:
        16-bit RGB positive

    Raises:
        GeometryError: If the frame or its border cannot be found
        ToneMapError: If the result has no dynamic range to stretch
    """
    config = config or ConversionConfig()
    img_h, img_w = raster.shape[:2]

    border = locate_border(raster, config, visualizer)
    crop = compute_crop(border.bounds, aspect_ratio, inset, (img_w, img_h))

    if visualizer:
        visualizer.save_border_overlay(raster, border, crop)

    positive = calibrate_and_crop(raster, border, crop)
    if visualizer:
        visualizer.save_inverted(positive)

    passes: list[ToneCutoffs] = []
    result = stretch_tone(positive, config.tone, passes)

    if visualizer:
        visualizer.save_tone_histograms(positive, result, passes)

    logger.debug("Converted %dx%d negative to %dx%d positive", img_w, img_h, *result.shape[1::-1])
    return result
