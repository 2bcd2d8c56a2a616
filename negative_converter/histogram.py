"""Histogram helpers shared by frame location and tone mapping."""

from __future__ import annotations

import numpy as np

from .models import MAX_VALUE


def normalize_histogram(gray: np.ndarray) -> np.ndarray:
    """Equalize an 8-bit image while keeping 0 and 255 fixed.

    Plain equalization (cv2.equalizeHist) maps the darkest observed value to
    0, which shifts real black pixels. Here the CDF is offset by the number
    of zero-valued pixels instead, so 0 stays 0 and 255 stays 255.

    Args:
        gray: 8-bit single channel image

    Returns:
        New equalized 8-bit image
    """
    hist = np.bincount(gray.ravel(), minlength=256)
    cdf = np.cumsum(hist).astype(np.float32)
    cdf_min = cdf[0]
    total = cdf[255]

    # Only black pixels: nothing to spread
    if total == cdf_min:
        return gray.copy()

    lut = np.minimum(255.0, 255.0 * (cdf - cdf_min) / (total - cdf_min))
    return lut.astype(np.uint8)[gray]


def channel_histogram(values: np.ndarray, bins: int = MAX_VALUE + 1) -> np.ndarray:
    """Count 16-bit values into ``bins`` equally wide buckets."""
    shift = int(np.log2((MAX_VALUE + 1) // bins))
    return np.bincount((values.ravel() >> shift).astype(np.intp), minlength=bins)


def smooth_histogram(hist: np.ndarray, kernel_size: int = 3) -> np.ndarray:
    """Moving-average smoothing of a histogram."""
    if kernel_size <= 1:
        return hist.astype(np.float64)
    return np.convolve(hist.astype(np.float64), np.ones(kernel_size) / kernel_size, mode="same")


def find_cutoff_value(hist: np.ndarray, cutoff: float, reverse: bool = False) -> int:
    """Find the first bucket at which the running pixel fraction exceeds cutoff.

    Args:
        hist: Histogram counts
        cutoff: Fraction (0-1) of pixels allowed beyond the cutoff
        reverse: Scan from the top end instead of the bottom

    Returns:
        Bucket index counted from the bottom of the histogram
    """
    counts = hist[::-1] if reverse else hist
    fractions = np.cumsum(counts) / counts.sum()
    above = np.flatnonzero(fractions > cutoff)
    index = int(above[0]) if len(above) else 0
    return len(hist) - 1 - index if reverse else index


def find_refined_cutoff(
    hist: np.ndarray,
    max_pixels_pct: float,
    max_pixels_pct_diff: float,
    max_clip_pct: float,
    reverse: bool = False,
) -> int:
    """Find a cutoff bucket using the pixel fraction and the histogram slope.

    Scans from one end, tracking two independent candidates: the first bucket
    at which the running pixel fraction exceeds ``max_pixels_pct`` (thin
    tails), and the first bucket whose count rises above the previous
    non-empty bucket by more than ``max_pixels_pct_diff`` of all pixels (a
    cliff at the true black or white point). The cutoff is the later of the
    two. The scan stops before a bucket that would clip more than
    ``max_clip_pct`` of the pixels; if that happens first, the last bucket
    reached is the cutoff.

    Returns:
        Bucket index counted from the bottom of the histogram
    """
    counts = hist[::-1] if reverse else hist
    total = float(counts.sum())

    cumulative_index = None
    slope_index = None
    last = 0
    accumulated = 0.0
    previous = 0.0
    for index, freq in enumerate(counts):
        # Every bucket before this one is clipped if it becomes the cutoff
        if accumulated / total > max_clip_pct:
            break
        last = index
        accumulated += freq

        if cumulative_index is None and accumulated / total > max_pixels_pct:
            cumulative_index = index
        if slope_index is None and freq > 0:
            if (freq - previous) / total > max_pixels_pct_diff:
                slope_index = index
            else:
                previous = freq

        if cumulative_index is not None and slope_index is not None:
            break

    if cumulative_index is not None and slope_index is not None:
        index = max(cumulative_index, slope_index)
    else:
        index = last
    return len(hist) - 1 - index if reverse else index
