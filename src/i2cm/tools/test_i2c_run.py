# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/tools/test_i2c_run.py

"""Tests for the i2c-run command line tool."""

from __future__ import annotations

import json
import logging
import shlex
from pathlib import Path
from typing import Iterator

import pytest

from i2cm.master.dv.i2c_master_config import ENV_SETTINGS

from . import i2c_run


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for setting, _, _ in ENV_SETTINGS:
        monkeypatch.delenv(setting, raising=False)
        monkeypatch.delenv(f"I2CM_{setting}", raising=False)
    for key in ("PLUSARGS", "I2CM_PLUSARGS", "MAX_TICKS", "DRAIN_TICKS"):
        monkeypatch.delenv(key, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_run_writes_outputs(tmp_path: Path) -> None:
    outdir = tmp_path / "out"
    rc = i2c_run.main(
        [f"--outdir={outdir}", "--seq-len=2", "--seed=5", "--trace", "--plot"]
    )
    assert rc == 0
    for name in ("manifest.json", "trace.json", "trace.csv", "waves.png", "run.log"):
        assert (outdir / name).is_file(), name

    manifest = json.loads((outdir / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["status"] == "PASS"
    assert manifest["summary"]["started"] == 2
    assert manifest["config"]["seed"] == 5
    assert "--seed=0x5" in manifest["replay_cmd"]

    trace = json.loads((outdir / "trace.json").read_text(encoding="utf-8"))
    assert len(trace["transfers"]) == manifest["summary"]["observed"]
    header = (outdir / "trace.csv").read_text(encoding="utf-8").splitlines()[0]
    assert header.startswith("tick,state,")


def test_config_file_and_flags(tmp_path: Path) -> None:
    cfg = tmp_path / "bench.yaml"
    cfg.write_text(
        "strategy: read\n"
        "packets:\n"
        "  - {address: 0x21, data: 0x5C}\n",
        encoding="utf-8",
    )
    outdir = tmp_path / "out"
    assert i2c_run.main([f"--config={cfg}", f"--outdir={outdir}"]) == 0
    manifest = json.loads((outdir / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["summary"]["captured_byte"] == 0x5C
    assert manifest["summary"]["completed"] == 1


def test_timeout_returns_one(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("I2C_MAX_TICKS", "25")
    outdir = tmp_path / "out"
    assert i2c_run.main([f"--outdir={outdir}", "--seq-len=3", "--seed=1"]) == 1
    manifest = json.loads((outdir / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["status"] == "TIMEOUT"


def test_bad_config_exits(tmp_path: Path) -> None:
    cfg = tmp_path / "bench.yaml"
    cfg.write_text("seq_len: 0\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        i2c_run.main([f"--config={cfg}", f"--outdir={tmp_path}"])


def test_bad_seed_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        i2c_run.main(["--seed=banana", f"--outdir={tmp_path}"])


def test_summary_table_formats_captured_byte() -> None:
    table = i2c_run.summary_table({"completed": 2, "captured_byte": 0xA})
    assert "0x0a" in table
    assert "| completed" in table


@pytest.mark.parametrize(
    ("seed_args", "expected"),
    [
        (["--seed", "0x10"], "--seed=0x10"),
        (["--seed=0x10"], "--seed=0x10"),
        (["--seed", "random"], None),
    ],
)
def test_replay_cmd_replaces_seed(
    tmp_path: Path, seed_args: list[str], expected: str | None
) -> None:
    outdir = tmp_path / "out"
    argv = [*seed_args, "--seq-len", "1", f"--outdir={outdir}"]
    assert i2c_run.main(argv) == 0
    manifest = json.loads((outdir / "manifest.json").read_text(encoding="utf-8"))
    seed = manifest["config"]["seed"]
    assert shlex.split(manifest["replay_cmd"]) == [
        "i2c-run",
        "--seq-len",
        "1",
        f"--outdir={outdir}",
        f"--seed={seed:#x}",
    ]
    if expected is not None:
        assert manifest["replay_cmd"].endswith(expected)


def test_strip_seed_args() -> None:
    argv = ["--seed", "random", "--trace", "--seed=5", "--plot"]
    assert i2c_run._strip_seed_args(argv) == ["--trace", "--plot"]
