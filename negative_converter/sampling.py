"""Border sampling methods for white balance reference."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .exceptions import GeometryError
from .models import AnalysisImage, Rectangle, SamplerParams


class SamplingMethod(Enum):
    """Available border sampling methods."""

    MODAL = "modal"  # Most common candidate intensity is the film base
    CANDIDATES = "candidates"  # Every candidate in the gap band


def create_ring_mask(
    shape: tuple[int, int], rect: Rectangle, gap_x: int, gap_y: int
) -> np.ndarray:
    """Create a mask of the band just outside a rectangle.

    Args:
        shape: (height, width) of the mask
        rect: Rectangle in the same coordinate space
        gap_x: Band width left and right of the rectangle
        gap_y: Band height above and below the rectangle

    Returns:
        Boolean mask, True inside the grown rectangle but outside rect
    """
    img_h, img_w = shape
    ring = np.zeros(shape, dtype=bool)
    ring[
        max(0, rect.min_y - gap_y) : min(img_h, rect.max_y + gap_y),
        max(0, rect.min_x - gap_x) : min(img_w, rect.max_x + gap_x),
    ] = True
    ring[rect.min_y : rect.max_y, rect.min_x : rect.max_x] = False
    return ring


def sample_modal(mask: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """Keep the candidates sharing the most common mask intensity.

    The film base is the largest uniform tone around the frame; scattered
    noise and frame content in the band spread over many other values.

    Args:
        mask: Borderless 8-bit mask
        candidates: Boolean candidate mask

    Returns:
        Boolean mask of selected pixels
    """
    hist = np.bincount(mask[candidates], minlength=256)
    modal = int(np.argmax(hist))
    if hist[modal] == 0:
        return np.zeros_like(candidates)
    return candidates & (mask == modal)


def sample_candidates(mask: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """Keep every candidate."""
    return candidates


# Mapping from SamplingMethod enum to function
_SAMPLING_FUNCTIONS = {
    SamplingMethod.MODAL: sample_modal,
    SamplingMethod.CANDIDATES: sample_candidates,
}


def apply_sampling(
    mask: np.ndarray, candidates: np.ndarray, method: SamplingMethod
) -> np.ndarray:
    """Apply the specified sampling method.

    Args:
        mask: Borderless 8-bit mask
        candidates: Boolean candidate mask
        method: Which sampling method to use

    Returns:
        Boolean mask of selected border pixels
    """
    fn = _SAMPLING_FUNCTIONS[method]
    return fn(mask, candidates)


def sample_border(
    analysis: AnalysisImage,
    bounds: Rectangle,
    borderless: np.ndarray,
    params: SamplerParams | None = None,
) -> np.ndarray:
    """Find pixels of the film border material around the frame.

    Args:
        analysis: Analysis copy the mask was computed from
        bounds: Frame bounds in full-resolution coordinates
        borderless: Borderless mask in analysis coordinates
        params: Sampler parameters

    Returns:
        Full-resolution (x, y) sample coordinates, shape (N, 2)

    Raises:
        GeometryError: If no border pixel qualifies
    """
    params = params or SamplerParams()

    rect = analysis.to_analysis(bounds)
    gap_x = max(1, int(round(analysis.width * params.gap_fraction)))
    gap_y = max(1, int(round(analysis.height * params.gap_fraction)))

    candidates = create_ring_mask(borderless.shape, rect, gap_x, gap_y)
    candidates &= borderless != 255

    selected = apply_sampling(borderless, candidates, SamplingMethod(params.method))

    ys, xs = np.nonzero(selected)
    if len(xs) == 0:
        raise GeometryError("no border samples around the frame")

    return analysis.points_to_full(np.stack([xs, ys], axis=1))
