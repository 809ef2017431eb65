# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/i2c_master_engine.py

"""I2C master protocol engine.

The engine is a Moore machine stepped once per falling clock edge. Its
combinational block is the pure function evaluate(regs, inputs), which
returns the next registers and the outputs of the state the engine moves
into. Between two edges the bus therefore shows the outputs of the current
state, and the engine samples the data line at the edge that ends a state.

State sequence of one acknowledged transaction (20 edge-driven steps)::

    IDLE -> START -> ADDRESS x7 -> DIRECTION -> ADDR_ACK
         -> DATA x8 -> DATA_ACK -> STOP -> IDLE

A high data line at the end of ADDR_ACK (no acknowledge) goes straight to
STOP. The data-phase acknowledge is not evaluated.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum

from i2cm.shared.dv import utils_dv

from .i2c_master_bus import LineOwner, SignalBus

ADDRESS_BITS = 7
DATA_BITS = 8
ADDRESS_MSB = ADDRESS_BITS - 1
DATA_MSB = DATA_BITS - 1

# Edges from an accepted request back to IDLE
ACKED_TRANSACTION_EDGES = 1 + 1 + ADDRESS_BITS + 1 + 1 + DATA_BITS + 1 + 1
NACKED_TRANSACTION_EDGES = 1 + 1 + ADDRESS_BITS + 1 + 1 + 1


class EngineState(str, Enum):
    IDLE = "IDLE"
    START = "START"
    ADDRESS = "ADDRESS"
    DIRECTION = "DIRECTION"
    ADDR_ACK = "ADDR_ACK"
    DATA = "DATA"
    DATA_ACK = "DATA_ACK"
    STOP = "STOP"


@dataclass(frozen=True)
class EngineRegs:  # pylint: disable=too-many-instance-attributes
    """Registered state of the engine."""

    state: EngineState = EngineState.IDLE
    address_bit_index: int = ADDRESS_MSB
    data_bit_index: int = DATA_MSB
    latched_address: int = 0
    latched_data: int = 0
    latched_direction: bool = False
    shift: int = 0
    acked: bool = False
    captured_byte: int = 0


@dataclass(frozen=True)
class EngineInputs:
    data_line: bool = True
    address: int = 0
    data_byte: int = 0
    direction: bool = False
    reset: bool = False


@dataclass(frozen=True)
class EngineOutputs:
    clock_enable: bool
    data_drive_enable: bool
    data_out: bool
    captured_byte: int


POWER_ON = EngineRegs()


def _bit(value: int, index: int) -> bool:
    return bool((value >> index) & 1)


def outputs_for(regs: EngineRegs) -> EngineOutputs:
    """Outputs shown on the bus while the engine sits in regs.state."""
    state = regs.state
    clock_enable = state in (
        EngineState.ADDRESS,
        EngineState.DIRECTION,
        EngineState.ADDR_ACK,
        EngineState.DATA,
        EngineState.DATA_ACK,
    )
    drive = True
    data_out = True
    if state in (EngineState.START, EngineState.STOP):
        data_out = False
    elif state is EngineState.ADDRESS:
        data_out = _bit(regs.latched_address, regs.address_bit_index)
    elif state is EngineState.DIRECTION:
        data_out = regs.latched_direction
    elif state in (EngineState.ADDR_ACK, EngineState.DATA_ACK):
        drive = False
    elif state is EngineState.DATA:
        if regs.latched_direction:
            drive = False
        else:
            data_out = _bit(regs.latched_data, regs.data_bit_index)
    return EngineOutputs(
        clock_enable=clock_enable,
        data_drive_enable=drive,
        data_out=data_out,
        captured_byte=regs.captured_byte,
    )


def _next_regs(regs: EngineRegs, inputs: EngineInputs) -> EngineRegs:
    # pylint: disable=too-many-return-statements
    state = regs.state
    replace = dataclasses.replace

    if state is EngineState.IDLE:
        if inputs.address == 0:
            return regs
        return replace(
            regs,
            state=EngineState.START,
            address_bit_index=ADDRESS_MSB,
            data_bit_index=DATA_MSB,
            latched_address=inputs.address,
            latched_data=inputs.data_byte,
            latched_direction=inputs.direction,
            shift=0,
            acked=False,
        )

    if state is EngineState.START:
        return replace(regs, state=EngineState.ADDRESS)

    if state is EngineState.ADDRESS:
        if regs.address_bit_index > 0:
            return replace(regs, address_bit_index=regs.address_bit_index - 1)
        return replace(regs, state=EngineState.DIRECTION)

    if state is EngineState.DIRECTION:
        return replace(regs, state=EngineState.ADDR_ACK)

    if state is EngineState.ADDR_ACK:
        if inputs.data_line:
            return replace(regs, state=EngineState.STOP)
        return replace(regs, state=EngineState.DATA, acked=True)

    if state is EngineState.DATA:
        shift = regs.shift
        if regs.latched_direction and inputs.data_line:
            shift |= 1 << regs.data_bit_index
        if regs.data_bit_index > 0:
            return replace(regs, shift=shift, data_bit_index=regs.data_bit_index - 1)
        return replace(regs, shift=shift, state=EngineState.DATA_ACK)

    if state is EngineState.DATA_ACK:
        # Acknowledge level is not evaluated
        return replace(regs, state=EngineState.STOP)

    # STOP
    captured = regs.captured_byte
    if regs.acked and regs.latched_direction:
        captured = regs.shift
    return replace(
        regs,
        state=EngineState.IDLE,
        address_bit_index=ADDRESS_MSB,
        data_bit_index=DATA_MSB,
        captured_byte=captured,
    )


def evaluate(
    regs: EngineRegs, inputs: EngineInputs
) -> tuple[EngineRegs, EngineOutputs]:
    """Combinational block: next registers and their outputs."""
    nxt = POWER_ON if inputs.reset else _next_regs(regs, inputs)
    return nxt, outputs_for(nxt)


class ProtocolEngine:
    """Stateful wrapper around evaluate().

    Attributes:
        regs: Current registers
        steps: Number of edges seen

    Example:
        >>> engine = ProtocolEngine()
        >>> clock.add_edge_handler(lambda tick: engine.step_bus(bus))
    """

    def __init__(self, name: str = "engine") -> None:
        self.name = name
        self.logger = utils_dv.component_logger(name)
        self.regs: EngineRegs = POWER_ON
        self.steps: int = 0

    @property
    def state(self) -> EngineState:
        return self.regs.state

    @property
    def outputs(self) -> EngineOutputs:
        return outputs_for(self.regs)

    def step(self, inputs: EngineInputs) -> EngineOutputs:
        """Advance one falling edge."""
        prev = self.regs.state
        self.regs, out = evaluate(self.regs, inputs)
        self.steps += 1
        if self.logger.isEnabledFor(logging.DEBUG):
            if prev is not self.regs.state or inputs.reset:
                self.logger.debug(
                    "edge %d: %s -> %s (reset=%s sda=%d)",
                    self.steps,
                    prev.value,
                    self.regs.state.value,
                    inputs.reset,
                    inputs.data_line,
                )
        return out

    @staticmethod
    def inputs_from(bus: SignalBus) -> EngineInputs:
        return EngineInputs(
            data_line=bus.data_line,
            address=bus.address,
            data_byte=bus.data_byte,
            direction=bus.direction,
            reset=bus.reset,
        )

    @staticmethod
    def apply(bus: SignalBus, out: EngineOutputs) -> None:
        """Drive the engine outputs onto the bus."""
        bus.clock_enable = out.clock_enable
        bus.data_drive_enable = out.data_drive_enable
        bus.owner = LineOwner.MASTER if out.data_drive_enable else LineOwner.SLAVE
        bus.master_data = out.data_out
        bus.captured_byte = out.captured_byte

    def step_bus(self, bus: SignalBus) -> EngineOutputs:
        """Read inputs from bus, step, and drive the outputs back."""
        out = self.step(self.inputs_from(bus))
        self.apply(bus, out)
        return out
