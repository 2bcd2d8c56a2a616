"""Tests for batch conversion and output naming."""

from pathlib import Path

import pytest

from negative_converter.batch import (
    ConversionOptions,
    build_output_path,
    convert_batch,
    detect_delim,
    parse_aspect_ratio,
)
from negative_converter.raw import load_image, save_image


@pytest.mark.parametrize(
    "value, landscape, expected",
    [
        ("3/2", True, 1.5),
        ("2/3", True, 1.5),
        ("3/2", False, 2 / 3),
        ("6:6", True, 1.0),
        ("6/4.5", True, 4 / 3),
        ("1.5", False, 2 / 3),
    ],
)
def test_parse_aspect_ratio(value, landscape, expected):
    assert parse_aspect_ratio(value, landscape) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["0/2", "3/-2", "abc"])
def test_parse_aspect_ratio_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_aspect_ratio(value, True)


def test_detect_delim():
    assert detect_delim("roll_01.NEF") == "_"
    assert detect_delim("roll-01.NEF") == "-"
    assert detect_delim("roll01.NEF") is None


def test_build_output_path():
    options = ConversionOptions(prefix="pos", extension=".png")
    assert build_output_path(Path("/scans/roll-01.NEF"), options) == Path(
        "/scans/pos-roll-01-positive.png"
    )

    options = ConversionOptions(output_dir=Path("/out"), suffix="", delim=".")
    assert build_output_path(Path("/scans/frame1.tiff"), options) == Path("/out/frame1.tiff")

    options = ConversionOptions(default_delim="+")
    assert build_output_path(Path("frame1.tiff"), options) == Path("frame1+positive.tiff")


@pytest.mark.parametrize("jobs", [1, 2])
def test_batch_reports_failures_and_keeps_going(tmp_path, scene, jobs):
    good = save_image(tmp_path / "good.png", scene)
    missing = tmp_path / "missing.png"
    options = ConversionOptions(output_dir=tmp_path / "out")

    results = convert_batch([good, missing], options, jobs=jobs)

    assert [r.input_path for r in results] == [good, missing]
    assert results[0].ok
    assert results[0].output_path == tmp_path / "out" / "good_positive.tiff"
    assert load_image(results[0].output_path).shape[2] == 3
    assert not results[1].ok
    assert "read" in results[1].user_message


def test_batch_writes_debug_images(tmp_path, scene):
    good = save_image(tmp_path / "good.png", scene)
    options = ConversionOptions(debug_dir=tmp_path / "debug")

    (result,) = convert_batch([good], options)

    assert result.ok
    assert (tmp_path / "debug" / "good" / "01_grayscale.png").exists()
