# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/__init__.py

"""i2cm: an I2C bus master model with a UVM-style verification bench.

The package models an I2C master on a discrete tick model (one tick per
falling clock edge) and provides the stimulus side needed to exercise it.

Main Components:

master:
    The I2C master itself and its bench:
    - SignalBus: the shared clock/data lines and control pins
    - ProtocolEngine: the master's START/ADDRESS/ACK/DATA/STOP state machine
    - dv: packet, generator, driver strategies, monitor, env and test

shared:
    Reusable bench infrastructure (clock source, reset driver, mailbox,
    base driver/sequence/monitor/item/test classes, config helpers).

tools:
    Command-line runner (i2c-run).

utils:
    Common utilities used across the package.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

try:
    __version__ = pkg_version("i2cm")
except PackageNotFoundError:
    __version__ = "0+local"
