# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/utils_dv.py

"""Bench utilities: logger setup and the bench exception types.

Functions:
    desired_log_level(): Get log level from I2CM_LOG_LEVEL env var
    configure_non_component_logger(): Configure a bench component's logger
    component_logger(): Create and configure the logger for a named component

Exceptions:
    BenchError: Base class of all bench errors
    ConfigError: Bench configuration could not be loaded or validated
    MailboxClosed: Mailbox drained after its producer finished
    ResetAbort: Reset observed while a driver was mid-sequence
    SimulationTimeout: The clock reached max_ticks before the bench finished
"""

from __future__ import annotations

import logging
import os


class BenchError(Exception):
    """Base class for bench errors."""


class ConfigError(BenchError, ValueError):
    """Raised when the bench configuration is missing or invalid."""


class MailboxClosed(BenchError):
    """Raised by Mailbox.get() once the mailbox is closed and drained."""


class ResetAbort(BenchError):
    """Raised inside a driver when reset is seen in mid-sequence."""


class SimulationTimeout(BenchError):
    """Raised when the clock exceeds its tick budget."""


def desired_log_level(default: int = logging.INFO) -> int:
    """Return desired log level from env vars or default."""
    name = (os.getenv("I2CM_LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, default)


def configure_non_component_logger(logger: logging.Logger) -> None:
    """Configure logger for a bench component"""
    logger.setLevel(desired_log_level())
    # Make sure it bubbles up to the root handlers (don't add new handlers)
    logger.propagate = True


def component_logger(name: str) -> logging.Logger:
    """Return the configured 'i2cm.<name>' logger."""
    logger = logging.getLogger(f"i2cm.{name}")
    configure_non_component_logger(logger)
    return logger
