"""Film frame location in the analysis copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import cv2
import numpy as np

from .exceptions import GeometryError
from .histogram import normalize_histogram
from .models import AnalysisImage, Border, ConversionConfig, LocatorParams, Rectangle
from .preprocess import create_analysis_image
from .sampling import sample_border

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer

logger = logging.getLogger(__name__)


@dataclass
class FrameMasks:
    """Intermediate rasters produced while locating the frame."""

    normalized: np.ndarray
    denoised: np.ndarray
    borderless: np.ndarray
    edges: np.ndarray


def adjust_contrast(gray: np.ndarray, contrast: float) -> np.ndarray:
    """Scale distances from mid-gray by ((100 + contrast) / 100) ** 2.

    Args:
        gray: 8-bit single channel image
        contrast: Contrast change in percent (negative lowers contrast)

    Returns:
        New 8-bit image
    """
    factor = ((100.0 + contrast) / 100.0) ** 2
    values = (gray.astype(np.float32) / 255.0 - 0.5) * factor + 0.5
    return np.clip(values * 255.0, 0, 255).astype(np.uint8)


def remove_border_noise(
    gray: np.ndarray, params: LocatorParams
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Separate holder borders and light leaks from the film.

    Pixels darker than the dark threshold (film holder) or brighter than the
    light threshold (sprocket holes, light leaks) are forced to black, the
    remainder re-equalized, and the dark class finally turned white.

    Returns:
        Tuple of (normalized, denoised, borderless):
            - normalized: equalized input
            - denoised: noise classes removed and re-equalized
            - borderless: median-filtered mask
    """
    normalized = normalize_histogram(gray)

    dark = normalized < params.dark_threshold
    light = normalized > params.light_threshold

    denoised = normalized.copy()
    denoised[dark | light] = 0
    denoised = normalize_histogram(denoised)
    denoised[dark] = 255

    # Erase ~1px specks left by the thresholds
    borderless = denoised
    if params.median_radius > 0:
        borderless = cv2.medianBlur(denoised, 2 * params.median_radius + 1)

    return normalized, denoised, borderless


def find_edges(borderless: np.ndarray, params: LocatorParams) -> np.ndarray:
    """Boost contrast and run Canny edge detection on the borderless mask."""
    boosted = adjust_contrast(borderless, params.contrast)
    return cv2.Canny(boosted, params.canny.low, params.canny.high)


def contour_points(edges: np.ndarray, min_points: int) -> np.ndarray:
    """Collect the points of all contours with at least ``min_points`` points.

    Returns:
        Array of (x, y) points, shape (N, 2); empty if no contour survives
    """
    contours, _ = cv2.findContours(edges, cv2.RETR_LIST, cv2.CHAIN_APPROX_NONE)
    kept = [c.reshape(-1, 2) for c in contours if len(c) >= min_points]
    logger.debug("Kept %d of %d contours", len(kept), len(contours))

    if not kept:
        return np.empty((0, 2), dtype=np.int32)
    return np.vstack(kept)


def bounding_rectangle(points: np.ndarray, width: int, height: int) -> Rectangle:
    """Axis-aligned bounds of the minimum-area rectangle enclosing the points.

    Raises:
        GeometryError: If there are no points
    """
    if len(points) == 0:
        raise GeometryError("no contour survived filtering")

    rotated = cv2.minAreaRect(points.astype(np.float32))
    corners = cv2.boxPoints(rotated)
    return Rectangle.from_corners(corners, width, height)


def find_frame(
    analysis: AnalysisImage,
    params: LocatorParams | None = None,
    visualizer: DebugVisualizer | None = None,
) -> tuple[Rectangle, FrameMasks]:
    """Locate the film frame in analysis coordinates.

    Args:
        analysis: Downscaled grayscale copy
        params: Locator parameters
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        Tuple of (rectangle, masks) with the rectangle in analysis space

    Raises:
        GeometryError: If no contour survives filtering
    """
    params = params or LocatorParams()

    normalized, denoised, borderless = remove_border_noise(analysis.gray, params)
    edges = find_edges(borderless, params)
    masks = FrameMasks(normalized, denoised, borderless, edges)

    if visualizer:
        visualizer.save_masks(masks)

    points = contour_points(edges, params.min_contour_points)
    rect = bounding_rectangle(points, analysis.width, analysis.height)
    logger.debug("Frame in analysis space: %s", rect.as_tuple())

    return rect, masks


def locate_border(
    raster: np.ndarray,
    config: ConversionConfig | None = None,
    visualizer: DebugVisualizer | None = None,
) -> Border:
    """Locate the film frame and sample its border material.

    Args:
        raster: Full-resolution 16-bit RGB image
        config: Conversion configuration
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        Border with full-resolution bounds and sample coordinates

    Raises:
        GeometryError: If no frame or no border samples are found
    """
    config = config or ConversionConfig()

    analysis = create_analysis_image(raster, config.preprocess)
    if visualizer:
        visualizer.save_grayscale(analysis.gray)

    rect, masks = find_frame(analysis, config.locator, visualizer)
    bounds = analysis.to_full(rect)
    samples = sample_border(analysis, bounds, masks.borderless, config.sampler)

    logger.debug("Border bounds %s with %d samples", bounds.as_tuple(), len(samples))
    return Border(bounds=bounds, samples=samples)
