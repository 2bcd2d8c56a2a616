"""Tests for the analysis copy."""

import numpy as np
import pytest

from conftest import make_negative
from negative_converter.exceptions import DecodeError
from negative_converter.models import PreprocessParams
from negative_converter.preprocess import check_raster, create_analysis_image, to_luma8


def test_large_image_is_downscaled():
    raster = make_negative(1000, 600, frame=(50, 50, 950, 550))
    analysis = create_analysis_image(raster)

    assert analysis.gray.shape == (300, 500)
    assert analysis.gray.dtype == np.uint8
    assert analysis.scale_x == pytest.approx(0.5)
    assert analysis.scale_y == pytest.approx(0.5)
    assert (analysis.full_width, analysis.full_height) == (1000, 600)


def test_small_image_keeps_size():
    raster = make_negative(300, 200, frame=(20, 20, 280, 180))
    analysis = create_analysis_image(raster)

    assert analysis.gray.shape == (200, 300)
    assert analysis.scale_x == 1.0
    assert analysis.scale_y == 1.0


def test_max_dimension_is_configurable():
    raster = make_negative(1000, 600, frame=(50, 50, 950, 550))
    analysis = create_analysis_image(raster, PreprocessParams(max_dimension=250))
    assert analysis.gray.shape == (150, 250)


def test_luma_uses_eight_bit_scale():
    raster = np.full((4, 4, 3), 5000, dtype=np.uint16)
    assert np.all(to_luma8(raster) == 19)

    raster[:] = 65535
    assert np.all(to_luma8(raster) == 255)


@pytest.mark.parametrize(
    "raster",
    [
        np.zeros((10, 10, 3), dtype=np.uint8),
        np.zeros((10, 10), dtype=np.uint16),
        np.zeros((10, 10, 4), dtype=np.uint16),
        np.zeros((0, 10, 3), dtype=np.uint16),
    ],
)
def test_check_raster_rejects_unsupported_layouts(raster):
    with pytest.raises(DecodeError):
        check_raster(raster)
