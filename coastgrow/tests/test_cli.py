"""
Tests for the coastgrow command line.
"""

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from coastgrow.cli.__main__ import app
from coastgrow.tests.conftest import rgba_from_mask

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path, coastline_mask):
    source = tmp_path / "source.png"
    Image.fromarray(rgba_from_mask(coastline_mask)).save(source)
    return {
        "source": source,
        "config": tmp_path / "missing.yml",
        "log": tmp_path / "logs" / "run.log",
        "dir": tmp_path,
    }


def _grow(ws, *extra):
    return runner.invoke(app, [
        "grow", str(ws["source"]), str(ws["dir"] / "out.png"),
        "--config", str(ws["config"]),
        "--log-file", str(ws["log"]),
        *extra,
    ])


def test_grow_writes_output_and_log(workspace):
    result = _grow(workspace, "--seed", "2")
    assert result.exit_code == 0, result.output
    assert (workspace["dir"] / "out.png").exists()
    assert workspace["log"].exists()
    assert "\x1b[" not in workspace["log"].read_text(encoding="utf-8")


def test_grow_binary_classic(workspace):
    result = _grow(workspace, "--preset", "classic", "--save-steps")
    assert result.exit_code == 0, result.output
    with Image.open(workspace["dir"] / "out.png") as img:
        rgba = np.array(img.convert("RGBA"))
    assert not rgba[..., :3].any()
    assert (workspace["dir"] / "out_dilated.png").exists()


def test_dry_run_writes_nothing(workspace):
    result = _grow(workspace, "--dry-run")
    assert result.exit_code == 0, result.output
    assert "erode_passes" in result.output
    assert not (workspace["dir"] / "out.png").exists()


def test_missing_source_exits_1(workspace):
    workspace["source"] = workspace["dir"] / "absent.png"
    result = _grow(workspace)
    assert result.exit_code == 1
    assert "Could not load mask" in result.output


def test_bad_preset_exits_2(workspace):
    result = _grow(workspace, "--preset", "baroque")
    assert result.exit_code == 2


def test_negative_erode_passes_exits_2(workspace):
    result = _grow(workspace, "--erode-passes=-1")
    assert result.exit_code == 2


def test_noise_command(tmp_path):
    out = tmp_path / "noise.png"
    result = runner.invoke(app, [
        "noise", str(out), "--width", "12", "--height", "8",
        "--config", str(tmp_path / "missing.yml"),
    ])
    assert result.exit_code == 0, result.output
    with Image.open(out) as img:
        assert img.size == (12, 8)


def test_show_config(tmp_path):
    result = runner.invoke(app, ["show-config", "--config", str(tmp_path / "missing.yml"), "--preset", "classic"])
    assert result.exit_code == 0
    assert "output: binary" in result.output


@pytest.mark.parametrize("body", [
    "spurs:\n  gate_base: abc\n",
    "noise:\n  persistence: abc\n",
    "seed: abc\n",
    "erode_passes: 2.9\n",
])
def test_malformed_config_value_exits_2(workspace, body):
    workspace["config"].write_text(body)
    result = _grow(workspace)
    assert result.exit_code == 2, result.output
    assert "Invalid configuration" in result.output
    assert not (workspace["dir"] / "out.png").exists()
