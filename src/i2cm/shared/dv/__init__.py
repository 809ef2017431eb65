# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/__init__.py

"""Shared design verification infrastructure.

This package provides the base classes and utilities for building
UVM-style benches on asyncio. A single clock source ticks the bench; the
design model steps on its edges and drivers wait on them.

Base Classes:
- BaseEnv: Testbench environment
- BaseTest: Test case framework and run loop
- BaseDriver: Component for driving design inputs
- BaseMonitor: Pre-edge sampling monitor with an analysis port
- BaseSequence: Item generator feeding a mailbox
- BaseItem: Immutable transaction item base class
- Mailbox: Bounded sequence-to-driver hand-off

Clock and Reset Infrastructure:
- BaseClockDriver: Tick source with a settle barrier
- BaseClockMixin: Mixin for clock-aware, reset-aware components
- BaseResetDriver: Reset generation component

Utilities:
- utils_dv: Logging helpers and bench exceptions
- utils_cli: Environment variable / plusarg settings
"""

from __future__ import annotations

from i2cm import __version__

from . import utils_cli, utils_dv
from .base_clock_driver import BaseClockDriver
from .base_clock_mixin import BaseClockMixin
from .base_driver import BaseDriver
from .base_env import BaseEnv
from .base_item import BaseItem
from .base_mailbox import Mailbox
from .base_monitor import AnalysisPort, BaseMonitor
from .base_reset_driver import BaseResetDriver
from .base_sequence import BaseSequence
from .base_test import BaseTest

__all__ = (
    "AnalysisPort",
    "BaseClockDriver",
    "BaseClockMixin",
    "BaseDriver",
    "BaseEnv",
    "BaseItem",
    "BaseMonitor",
    "BaseResetDriver",
    "BaseSequence",
    "BaseTest",
    "Mailbox",
    "utils_dv",
    "utils_cli",
    "__version__",
)
