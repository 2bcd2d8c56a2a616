"""Tests for border sampling."""

import numpy as np
import pytest

from conftest import make_negative
from negative_converter.calibration import reference_color
from negative_converter.detection import locate_border
from negative_converter.exceptions import GeometryError
from negative_converter.models import AnalysisImage, Rectangle, SamplerParams
from negative_converter.sampling import (
    SamplingMethod,
    apply_sampling,
    create_ring_mask,
    sample_border,
)


def _analysis(width=40, height=30):
    return AnalysisImage(
        gray=np.zeros((height, width), dtype=np.uint8),
        scale_x=1.0,
        scale_y=1.0,
        full_width=width,
        full_height=height,
    )


def test_ring_mask_excludes_rectangle():
    ring = create_ring_mask((20, 20), Rectangle(5, 5, 15, 15), 2, 2)

    assert ring.sum() == 14 * 14 - 10 * 10
    assert not ring[5:15, 5:15].any()
    assert ring[3, 3] and ring[16, 16]
    assert not ring[2, 2]


def test_ring_mask_is_clipped_to_image():
    ring = create_ring_mask((20, 20), Rectangle(1, 1, 19, 19), 3, 3)
    assert ring.shape == (20, 20)
    assert ring[0, 0] and ring[19, 19]


def test_modal_sampling_picks_most_common_value():
    mask = np.array([[10, 10, 10, 20, 30]], dtype=np.uint8)
    candidates = np.ones_like(mask, dtype=bool)

    selected = apply_sampling(mask, candidates, SamplingMethod.MODAL)
    assert selected.tolist() == [[True, True, True, False, False]]

    everything = apply_sampling(mask, candidates, SamplingMethod.CANDIDATES)
    assert everything.all()


def test_sample_border_skips_white_pixels():
    analysis = _analysis()
    borderless = np.full((30, 40), 255, dtype=np.uint8)
    borderless[:, :10] = 80
    bounds = Rectangle(10, 5, 30, 25)

    samples = sample_border(analysis, bounds, borderless, SamplerParams(method="candidates"))
    assert len(samples) > 0
    assert np.all(samples[:, 0] < 10)


def test_sample_border_without_candidates_raises():
    analysis = _analysis()
    borderless = np.full((30, 40), 255, dtype=np.uint8)

    with pytest.raises(GeometryError):
        sample_border(analysis, Rectangle(10, 5, 30, 25), borderless)


def test_colored_border_reference_matches_border_color():
    raster = make_negative(interior=(40000, 30000, 20000), border=(9000, 5000, 3000))
    border = locate_border(raster)

    reference = reference_color(raster, border.samples)
    assert reference == pytest.approx([9000, 5000, 3000])
