# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/tools/i2c_run.py

"""Run the I2C master bench from the command line.

Configuration is layered: model defaults, then --config (YAML), then
I2C_* environment variables and plusargs, then the command-line flags.

Command-line interface:
    i2c-run [--config=<yaml>] [--strategy=<s>] [OPTIONS]

Typical usage:
    # Four count-strategy transactions (write, read, write, read)
    i2c-run

    # Eight forced reads with a fixed seed, keep the trace and a plot
    i2c-run --strategy=read --seq-len=8 --seed=0x1234 --trace --plot

    # Random strategy with a random seed
    i2c-run --strategy=random --seed=random
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import random
import shlex
import sys
import time
from pathlib import Path
from typing import Any, Sequence

from tabulate import tabulate

from i2cm import utils
from i2cm.master.dv.i2c_master_config import I2cMasterBenchConfig
from i2cm.master.dv.i2c_master_driver import DriveStrategy
from i2cm.master.dv.i2c_master_test import I2cMasterTest
from i2cm.shared.dv.utils_dv import ConfigError, SimulationTimeout

DEFAULT_OUT_DIR = "out_i2c"

logger = logging.getLogger(__name__)


# === CLI ===


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for a bench run.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    ap = argparse.ArgumentParser(
        description="Run the I2C master bench",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--config", type=Path, default=None, help="bench YAML file")
    ap.add_argument(
        "--strategy",
        choices=[s.value for s in DriveStrategy],
        default=None,
        help="driver strategy (overrides config and I2C_STRATEGY)",
    )
    ap.add_argument("--seq-len", type=int, default=None, help="generator length")
    ap.add_argument(
        "--iterations", type=int, default=None, help="driver iterations"
    )
    ap.add_argument(
        "--seed",
        default=None,
        help="seed (decimal, 0x..., or 'random')",
    )
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    ap.add_argument(
        "--trace", action="store_true", help="save the bus trace (JSON and CSV)"
    )
    ap.add_argument("--plot", action="store_true", help="save a waveform plot")
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug", "notset"],
        default=os.getenv("VERBOSITY", "info"),
        help="logging level",
    )
    return ap.parse_args(argv)


def build_config(args: argparse.Namespace) -> I2cMasterBenchConfig:
    """Defaults < YAML < env/plusargs < flags."""
    cfg = I2cMasterBenchConfig.load(args.config)
    seed = None
    if args.seed is not None:
        seed = utils.normalize_seed(random.Random(), str(args.seed))
    cfg = cfg.updated(
        strategy=args.strategy,
        seq_len=args.seq_len,
        iterations=args.iterations,
        seed=seed,
    )
    if args.plot and not cfg.record_trace:
        cfg = cfg.updated(record_trace=True)
    return cfg


def summary_table(summary: dict[str, Any]) -> str:
    """Two-column table of the run summary."""
    rows = []
    for k, v in summary.items():
        if k == "captured_byte":
            v = f"{v:#04x}"
        rows.append([k, v])
    return tabulate(rows, headers=["Item", "Value"], tablefmt="github")


def _strip_seed_args(argv: list[str]) -> list[str]:
    """Drop --seed from argv, in both the '--seed val' and '--seed=val' forms."""
    out: list[str] = []
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok == "--seed":
            i += 2  # flag + value
            continue
        if not tok.startswith("--seed="):
            out.append(tok)
        i += 1
    return out


def _write_manifest(
    outdir: Path,
    cfg: I2cMasterBenchConfig,
    status: str,
    duration_s: float,
    summary: dict[str, Any],
    orig_argv: list[str],
) -> Path:
    replay_argv = _strip_seed_args(orig_argv)
    if cfg.seed is not None:
        replay_argv.append(f"--seed={cfg.seed:#x}")
    manifest = {
        "status": status,
        "started": utils.iso_utc(),
        "duration_s": round(duration_s, 3),
        "replay_cmd": shlex.join(["i2c-run", *replay_argv]),
        "config": cfg.model_dump(mode="json"),
        "summary": summary,
    }
    path = outdir / "manifest.json"
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


# === Main ===


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 when the run completes, 1 on SimulationTimeout.
    """
    orig_argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)
    outdir = utils.ensure_dir(args.outdir, True)
    utils.configure_logger(str(args.verbosity), outdir / "run.log")

    try:
        cfg = build_config(args)
    except ConfigError as exc:
        raise SystemExit(f"[i2c-run] {exc}") from exc
    logger.info("%s", cfg)

    test = I2cMasterTest("test", cfg)
    status = "PASS"
    t0 = time.time()
    try:
        asyncio.run(test.run())
    except SimulationTimeout as exc:
        status = "TIMEOUT"
        logger.error(utils.red(str(exc)))
    t1 = time.time()

    summary = test.summary()
    if args.trace:
        test.env.mon.save_json(outdir)
        test.env.mon.save_csv(outdir)
    if args.plot:
        test.env.mon.save_plot(outdir)
    manifest = _write_manifest(outdir, cfg, status, t1 - t0, summary, orig_argv)
    logger.debug("Saved manifest: %s", manifest)

    print(summary_table(summary))
    if status == "PASS":
        print(f"\n[i2c-run] {utils.green(status)}: {outdir}")
        return 0
    print(f"\n[i2c-run] {utils.red(status)}: {outdir}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
