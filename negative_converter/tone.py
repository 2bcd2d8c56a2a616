"""Two-pass histogram stretch of the calibrated positive."""

from __future__ import annotations

import logging

import numpy as np

from .exceptions import ToneMapError
from .histogram import (
    channel_histogram,
    find_cutoff_value,
    find_refined_cutoff,
    smooth_histogram,
)
from .models import MAX_VALUE, ToneCutoffs, ToneParams

logger = logging.getLogger(__name__)


def rescale_channels(raster: np.ndarray, cutoffs: ToneCutoffs) -> np.ndarray:
    """Linearly map each channel's [low, high] onto [0, MAX_VALUE], clamped.

    Raises:
        ToneMapError: If a channel's high cutoff is not above its low cutoff
    """
    for channel, (low, high) in enumerate(zip(cutoffs.low, cutoffs.high)):
        if high <= low:
            raise ToneMapError(channel, low, high)

    low = np.array(cutoffs.low, dtype=np.float32)
    high = np.array(cutoffs.high, dtype=np.float32)
    scaled = (raster.astype(np.float32) - low) * (MAX_VALUE / (high - low))
    return np.clip(np.rint(scaled), 0, MAX_VALUE).astype(np.uint16)


def coarse_cutoffs(raster: np.ndarray, params: ToneParams) -> ToneCutoffs:
    """Loose per-channel cutoffs that only exclude true outliers."""
    cutoff = params.max_pixels_pct / 10
    low, high = [], []
    for channel in range(raster.shape[2]):
        hist = channel_histogram(raster[:, :, channel])
        low.append(find_cutoff_value(hist, cutoff))
        high.append(find_cutoff_value(hist, cutoff, reverse=True))
    return ToneCutoffs(low, high)


def refined_cutoffs(raster: np.ndarray, params: ToneParams) -> ToneCutoffs:
    """Per-channel cutoffs from a smoothed coarse histogram.

    Low cutoffs sit on the lower edge of their bucket, high cutoffs on the
    upper edge.
    """
    bin_width = (MAX_VALUE + 1) // params.bins
    low, high = [], []
    for channel in range(raster.shape[2]):
        hist = smooth_histogram(
            channel_histogram(raster[:, :, channel], params.bins), params.smoothing
        )
        low_bin = find_refined_cutoff(
            hist, params.max_pixels_pct, params.max_pixels_pct_diff, params.max_clip_pct
        )
        high_bin = find_refined_cutoff(
            hist,
            params.max_pixels_pct,
            params.max_pixels_pct_diff,
            params.max_clip_pct,
            reverse=True,
        )
        low.append(low_bin * bin_width)
        high.append((high_bin + 1) * bin_width - 1)
    return ToneCutoffs(low, high)


def stretch_tone(
    raster: np.ndarray,
    params: ToneParams | None = None,
    passes: list[ToneCutoffs] | None = None,
) -> np.ndarray:
    """Stretch each channel to the full 16-bit range in two passes.

    Args:
        raster: Calibrated 16-bit RGB positive
        params: Tone parameters
        passes: Optional list that receives the cutoffs of each pass

    Returns:
        New stretched 16-bit RGB raster

    Raises:
        ToneMapError: If a channel has zero dynamic range
    """
    params = params or ToneParams()

    first = coarse_cutoffs(raster, params)
    logger.debug("Coarse cutoffs low=%s high=%s", first.low, first.high)
    stretched = rescale_channels(raster, first)

    second = refined_cutoffs(stretched, params)
    logger.debug("Refined cutoffs low=%s high=%s", second.low, second.high)
    result = rescale_channels(stretched, second)

    if passes is not None:
        passes.extend([first, second])
    return result
