# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/__init__.py

"""I2C bus master model.

Modules:
- i2c_master_bus: SignalBus, the shared pins and the data-line owner tag
- i2c_master_engine: ProtocolEngine and its pure evaluate() step

Subpackages:
- dv: Bench (packet, generators, driver, monitor, config, env, test)
"""

from __future__ import annotations

from .i2c_master_bus import BusOwnershipError, LineOwner, SignalBus
from .i2c_master_engine import (
    ADDRESS_BITS,
    DATA_BITS,
    EngineInputs,
    EngineOutputs,
    EngineRegs,
    EngineState,
    ProtocolEngine,
    evaluate,
)

__all__ = (
    "ADDRESS_BITS",
    "DATA_BITS",
    "BusOwnershipError",
    "EngineInputs",
    "EngineOutputs",
    "EngineRegs",
    "EngineState",
    "LineOwner",
    "ProtocolEngine",
    "SignalBus",
    "evaluate",
)
