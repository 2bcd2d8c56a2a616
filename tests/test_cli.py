"""Tests for the command-line interface."""

import json

import pytest

from negative_converter.cli import main, parse_config
from negative_converter.raw import save_image


def test_config_prints_defaults(capsys):
    main(["config"])
    data = json.loads(capsys.readouterr().out)
    assert data["preprocess"]["max_dimension"] == 500
    assert data["sampler"]["method"] == "modal"


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1
    assert "convert" in capsys.readouterr().out


def test_parse_config_inline_and_file(tmp_path):
    assert parse_config(None).tone.bins == 256
    assert parse_config('{"tone": {"bins": 512}}').tone.bins == 512

    path = tmp_path / "config.json"
    path.write_text('{"locator": {"median_radius": 2}}')
    assert parse_config(str(path)).locator.median_radius == 2

    with pytest.raises(ValueError):
        parse_config("{not json")


def test_convert_missing_file_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["convert", str(tmp_path / "missing.tiff")])
    assert excinfo.value.code == 1
    assert "missing.tiff" in capsys.readouterr().err


def test_convert_rejects_bad_crop_in(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["convert", str(tmp_path / "scan.tiff"), "--crop-in", "40"])
    assert "--crop-in" in str(excinfo.value.code)


def test_convert_writes_positive(tmp_path, scene):
    scan = save_image(tmp_path / "roll_01.png", scene)

    with pytest.raises(SystemExit) as excinfo:
        main(["convert", str(scan), "-o", str(tmp_path / "out"), "--format", "png"])

    assert excinfo.value.code == 0
    assert (tmp_path / "out" / "roll_01_positive.png").exists()


@pytest.mark.parametrize("ratio", ["abc", "3/0", "-1.5"])
def test_convert_rejects_bad_ratio(tmp_path, ratio):
    with pytest.raises(SystemExit) as excinfo:
        main(["convert", str(tmp_path / "scan.tiff"), "--ratio", ratio])
    assert "--ratio" in str(excinfo.value.code)
