# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/utils.py

"""Utility functions for i2c-run and the bench."""

from __future__ import annotations

import logging
import random
import re
import time
from os import PathLike
from pathlib import Path
from typing import Sequence, Union

import matplotlib.pyplot as plt

RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"


class NoColorFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""

    # Regex to match ANSI escape sequences
    ANSI_ESCAPE = re.compile(r"\033\[[0-9;]*m")

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and strip ANSI codes."""
        formatted = super().format(record)
        return self.ANSI_ESCAPE.sub("", formatted)


class PlotWaves:
    """Stacked digital waveform plot (one step trace per signal)."""

    def __init__(
        self,
        outdir: Union[str, Path] = "output",
        figsize: tuple[int, int] = (14, 4),
    ):
        """Initialize with output directory and figure size."""
        self.outdir = ensure_dir(outdir, True)
        self.figsize = figsize
        self.title: str = ""
        self._traces: list[tuple[str, Sequence[int], Sequence[int]]] = []

    def add_trace(self, name: str, xs: Sequence[int], ys: Sequence[int]) -> None:
        """Add one 0/1 signal; traces are stacked bottom-up in call order."""
        if len(xs) != len(ys):
            raise ValueError(f"{name}: {len(xs)=} != {len(ys)=}")
        self._traces.append((name, xs, ys))

    def save(self, filename: str, fmt: str = "png") -> Path:
        """Render the traces and save the figure to disk."""
        fig, ax = plt.subplots(figsize=self.figsize)
        ticks: list[float] = []
        labels: list[str] = []
        for lane, (name, xs, ys) in enumerate(self._traces):
            base = lane * 1.5
            ax.step(xs, [base + y for y in ys], where="post", linewidth=1.5)
            ticks.append(base + 0.5)
            labels.append(name)
        ax.set_yticks(ticks)
        ax.set_yticklabels(labels)
        ax.set_xlabel("tick")
        if self.title:
            ax.set_title(self.title)
        ax.grid(True, axis="x", linestyle=":")
        fig.tight_layout()
        path = self.outdir / f"{filename}.{fmt}"
        fig.savefig(path)
        plt.close(fig)
        logging.debug("Saved plot: %s", path)
        return path


def configure_logger(
    verbosity: str = "info", log_file: Path | None = None
) -> logging.Logger:
    """Configure and return a logger with console and optional file handlers.

    Args:
        verbosity: Log level (critical, error, warning, info, debug, notset)
        log_file: Optional path to log file. If provided, logs to both console and file.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(verbosity.upper())

    # Remove any existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    no_color_formatter = NoColorFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stdout) - keeps colors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(verbosity.upper())
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (if log_file provided) - strips colors
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(verbosity.upper())
        file_handler.setFormatter(no_color_formatter)
        logger.addHandler(file_handler)

    return logging.getLogger(__name__)


def ensure_dir(
    d: Union[str, Path, PathLike[str]], make_if_not_exists: bool = False
) -> Path:
    """Return absolute path if directory exists, optionally create it."""
    path = Path(d)
    if not path.exists():
        if make_if_not_exists:
            path.mkdir(parents=True, exist_ok=True)
            logging.info("Created directory: %s", path)
        else:
            raise FileNotFoundError(f"Directory does not exist: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return path.resolve()


def green(s: str) -> str:
    """Wrap text in green ANSI escape codes."""
    return f"{GREEN}{s}{RESET}"


def iso_utc() -> str:
    """Return current time in ISO8601 Z format (UTC)."""
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def normalize_seed(rng: random.Random, s: str) -> int:
    """
    Normalize a seed string to an int.
    Supports 'rand'/'random'/'auto' and 0x... hex.
    Raises SystemExit on invalid input (to match existing CLI behavior).
    """
    low = s.lower()
    if low in {"rand", "random", "auto"}:
        return rng.getrandbits(32)
    try:
        return int(s, 0) & 0xFFFF_FFFF
    except ValueError as exc:
        raise SystemExit(
            f"[i2c-run] Invalid seed '{s}'. Use decimal, 0x..., or 'random'."
        ) from exc


def red(s: str) -> str:
    """Wrap text in red ANSI escape codes."""
    return f"{RED}{s}{RESET}"
