# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/utils_cli.py

"""Command-line interface utilities for bench configuration.

This module provides utilities for reading configuration from environment
variables and plusargs, following the standard UVM command-line processor
pattern.

Configuration Precedence:
    1. Environment variables (NAME or I2CM_NAME)
    2. Plusargs (+NAME or +NAME=value)
    3. Default values

Plusargs Format:
    Boolean flags: +NAME (treated as True) or +NAME=1/0/true/false/yes/no
    String values: +NAME=value
    Integer values: +NAME=123 or +NAME=0x7B (hex supported)

Environment Variables:
    PLUSARGS or I2CM_PLUSARGS: Space-separated plusargs
    Individual settings: NAME or I2CM_NAME (e.g., I2C_SEQ_LEN=8)

Example:
    >>> seq_len = get_int_setting("I2C_SEQ_LEN", 4)
    >>> strategy = get_str_setting("I2C_STRATEGY", "count")
"""

from __future__ import annotations

import os
from typing import Iterable

ENV_PREFIX = "I2CM_"

_TRUE_SET = {"1", "true", "yes", "y", "on"}
_FALSE_SET = {"0", "false", "no", "n", "off"}


def iter_plusargs() -> Iterable[str]:
    """Yield +args from the PLUSARGS / I2CM_PLUSARGS env vars."""
    s = os.environ.get("PLUSARGS") or os.environ.get(f"{ENV_PREFIX}PLUSARGS", "")
    return s.split()


def _plusarg(name: str) -> str | None:
    # A bare +NAME reads as "1"
    for tok in iter_plusargs():
        key, sep, val = tok[1:].partition("=")
        if tok.startswith("+") and key == name:
            return val if sep else "1"
    return None


def _lookup(name: str) -> str | None:
    """Raw value of NAME: env, then I2CM_NAME, then plusarg."""
    for key in (name, f"{ENV_PREFIX}{name}"):
        v = os.environ.get(key)
        if v is not None:
            return v
    return _plusarg(name)


def has_setting(name: str) -> bool:
    """Return True if NAME is set in the environment or as a plusarg."""
    return _lookup(name) is not None


def get_bool_setting(name: str, default: bool) -> bool:
    """Boolean setting; unrecognized values give the default."""
    v = _lookup(name)
    if v is None:
        return default
    v = v.strip().lower()
    if v in _TRUE_SET:
        return True
    if v in _FALSE_SET:
        return False
    return default


def get_str_setting(name: str, default: str) -> str:
    v = _lookup(name)
    return default if v is None else v


def get_int_setting(name: str, default: int) -> int:
    """Integer setting (decimal or 0x/0o/0b); unparsable values give the default."""
    v = _lookup(name)
    if v is None:
        return default
    try:
        return int(v, 0)
    except ValueError:
        return default
