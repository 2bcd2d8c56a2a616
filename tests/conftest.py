"""Shared fixtures: synthetic negative scans."""

import numpy as np
import pytest


def make_negative(
    width: int = 600,
    height: int = 400,
    frame: tuple[int, int, int, int] = (25, 25, 575, 375),
    interior=40000,
    border=5000,
) -> np.ndarray:
    """Build a 16-bit RGB raster with a uniform frame on a uniform border.

    Args:
        width, height: Raster size
        frame: Interior as (min_x, min_y, max_x, max_y), max exclusive
        interior: Interior value (scalar or RGB triple)
        border: Border value (scalar or RGB triple)
    """
    raster = np.empty((height, width, 3), dtype=np.uint16)
    raster[:, :] = border
    min_x, min_y, max_x, max_y = frame
    raster[min_y:max_y, min_x:max_x] = interior
    return raster


@pytest.fixture
def negative() -> np.ndarray:
    """600x400 scan with a 550x350 frame of 40000 on a 5000 border."""
    return make_negative()


@pytest.fixture
def gradient_positive() -> np.ndarray:
    """Inverted-looking positive with smooth per-channel gradients."""
    rng = np.random.default_rng(7)
    ys, xs = np.mgrid[0:200, 0:300]
    base = 12000 + xs * 100 + ys * 50
    raster = np.stack([base, base * 0.8 + 3000, base * 0.6 + 8000], axis=2)
    raster = raster + rng.normal(0, 300, raster.shape)
    return np.clip(raster, 0, 65535).astype(np.uint16)


@pytest.fixture
def scene() -> np.ndarray:
    """Like ``negative``, with a darker square inside the frame as content."""
    raster = make_negative()
    raster[150:250, 250:350] = 35000
    return raster
