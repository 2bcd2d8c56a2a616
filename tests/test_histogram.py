"""Tests for histogram equalization and cutoff search."""

import numpy as np
import pytest

from negative_converter.histogram import (
    channel_histogram,
    find_cutoff_value,
    find_refined_cutoff,
    normalize_histogram,
    smooth_histogram,
)


def test_normalize_keeps_black_and_white_fixed():
    gray = np.array([0] * 10 + [100] * 10 + [255] * 10, dtype=np.uint8).reshape(3, 10)
    result = normalize_histogram(gray)

    assert result.dtype == np.uint8
    assert np.all(result[0] == 0)
    assert np.all(result[1] == 127)
    assert np.all(result[2] == 255)


def test_normalize_all_black_is_unchanged():
    gray = np.zeros((5, 5), dtype=np.uint8)
    result = normalize_histogram(gray)
    assert np.array_equal(result, gray)
    assert result is not gray


def test_channel_histogram_buckets():
    values = np.array([0, 255, 256, 65535], dtype=np.uint16)

    hist = channel_histogram(values, bins=256)
    assert len(hist) == 256
    assert hist[0] == 2
    assert hist[1] == 1
    assert hist[255] == 1

    full = channel_histogram(values)
    assert len(full) == 65536
    assert full[65535] == 1


def test_smooth_histogram_moving_average():
    smoothed = smooth_histogram(np.array([0, 3, 0]), 3)
    assert smoothed == pytest.approx([1.0, 1.0, 1.0])
    assert smooth_histogram(np.array([0, 3, 0]), 1) == pytest.approx([0.0, 3.0, 0.0])


def test_find_cutoff_value_skips_thin_tails():
    hist = np.zeros(256)
    hist[100] = 1
    hist[200] = 9999

    assert find_cutoff_value(hist, 0.0002) == 200
    assert find_cutoff_value(hist, 0.0002, reverse=True) == 200
    assert find_cutoff_value(hist, 0.00001) == 100


def _cliff_histogram():
    hist = np.zeros(256)
    hist[0:5] = 1
    hist[5] = 15
    hist[100] = 9980
    return hist


def _tail_then_cliff():
    # 0.3% of the pixels in a thin tail, then a jump at bucket 30
    hist = np.zeros(256)
    hist[0:30] = 10
    hist[30] = 310
    hist[128] = 100000 - hist.sum()
    return hist


def test_refined_cutoff_takes_later_trigger():
    hist = _tail_then_cliff()
    # Fraction trigger fires at bucket 20, the slope at bucket 30
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.005) == 30
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.49) == 30


def test_refined_cutoff_slope_before_fraction():
    hist = _cliff_histogram()
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.005) == 100
    assert find_refined_cutoff(hist, 0.002, 0.01, 0.005) == 100


def test_refined_cutoff_reverse_counts_from_bottom():
    hist = _tail_then_cliff()[::-1]
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.005, reverse=True) == 225


def test_refined_cutoff_stops_at_clip_ceiling():
    # Long thin tail without a cliff: only the ceiling ends the scan
    hist = np.zeros(256)
    hist[0:100] = 10
    hist[200] = 99000
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.005) == 50
    assert find_refined_cutoff(hist, 0.002, 0.001, 0.003) == 30


def test_refined_cutoff_ceiling_on_flat_histogram():
    hist = np.full(200, 50.0)
    assert find_refined_cutoff(hist, 0.1, 0.5, 0.005) == 1
