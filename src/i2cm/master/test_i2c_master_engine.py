# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/test_i2c_master_engine.py

"""Tests for the I2C master protocol engine (pure step function)."""

from __future__ import annotations

import dataclasses

import pytest

from .i2c_master_engine import (
    ACKED_TRANSACTION_EDGES,
    NACKED_TRANSACTION_EDGES,
    POWER_ON,
    EngineInputs,
    EngineRegs,
    EngineState,
    ProtocolEngine,
    evaluate,
    outputs_for,
)

S = EngineState

ACKED_STATES = (
    [S.START]
    + [S.ADDRESS] * 7
    + [S.DIRECTION, S.ADDR_ACK]
    + [S.DATA] * 8
    + [S.DATA_ACK, S.STOP]
)


def _slave_level(regs: EngineRegs, ack: bool, slave_byte: int) -> bool:
    """Level the slave leaves on the line while the engine is in regs."""
    out = outputs_for(regs)
    if out.data_drive_enable:
        return out.data_out
    if regs.state is S.ADDR_ACK:
        return not ack
    if regs.state is S.DATA:
        return bool((slave_byte >> regs.data_bit_index) & 1)
    if regs.state is S.DATA_ACK:
        return False
    return True


def _transact(
    address: int,
    data: int,
    direction: bool,
    ack: bool = True,
    slave_byte: int = 0,
    regs: EngineRegs = POWER_ON,
) -> tuple[list[EngineRegs], EngineRegs]:
    """Step from IDLE until IDLE again; return regs after every edge."""
    seen: list[EngineRegs] = []
    request = address
    for _ in range(64):
        inputs = EngineInputs(
            data_line=_slave_level(regs, ack, slave_byte),
            address=request,
            data_byte=data,
            direction=direction,
        )
        regs, _ = evaluate(regs, inputs)
        seen.append(regs)
        if regs.state is S.STOP:
            request = 0
        if regs.state is S.IDLE:
            return seen, regs
    raise AssertionError("engine never returned to IDLE")


@pytest.mark.parametrize("direction", [False, True])
@pytest.mark.parametrize("address", [0x01, 0x2A, 0x55, 0x7F])
def test_acked_transaction_takes_twenty_steps(address: int, direction: bool) -> None:
    seen, last = _transact(address, 0x3C, direction)
    states = [r.state for r in seen]
    assert states[:-1] == ACKED_STATES
    assert len(states[:-1]) == 20
    assert last.state is S.IDLE
    assert len(seen) == ACKED_TRANSACTION_EDGES


def test_nack_goes_straight_to_stop_and_keeps_captured_byte() -> None:
    start = dataclasses.replace(POWER_ON, captured_byte=0x99)
    seen, last = _transact(0x42, 0x00, True, ack=False, slave_byte=0xFF, regs=start)
    states = [r.state for r in seen]
    assert states == [S.START] + [S.ADDRESS] * 7 + [
        S.DIRECTION,
        S.ADDR_ACK,
        S.STOP,
        S.IDLE,
    ]
    assert len(seen) == NACKED_TRANSACTION_EDGES
    assert last.captured_byte == 0x99


def test_address_bits_go_out_msb_first() -> None:
    seen, _ = _transact(0b1011010, 0x00, False)
    bits = [int(outputs_for(r).data_out) for r in seen if r.state is S.ADDRESS]
    assert bits == [1, 0, 1, 1, 0, 1, 0]


def test_write_drives_data_msb_first_and_keeps_captured_byte() -> None:
    start = dataclasses.replace(POWER_ON, captured_byte=0x11)
    seen, last = _transact(0x55, 0xA3, False, regs=start)
    data = [outputs_for(r) for r in seen if r.state is S.DATA]
    assert all(o.data_drive_enable for o in data)
    assert [int(o.data_out) for o in data] == [1, 0, 1, 0, 0, 0, 1, 1]
    assert last.captured_byte == 0x11


def test_read_releases_line_and_captures_byte() -> None:
    seen, last = _transact(0x55, 0x00, True, slave_byte=0b11001010)
    data = [outputs_for(r) for r in seen if r.state is S.DATA]
    assert not any(o.data_drive_enable for o in data)
    assert last.captured_byte == 0xCA


def test_captured_byte_is_committed_only_at_stop() -> None:
    seen, _ = _transact(0x10, 0x00, True, slave_byte=0x5A)
    before_stop = [r for r in seen if r.state is not S.IDLE]
    assert all(r.captured_byte == 0 for r in before_stop)
    assert seen[-1].captured_byte == 0x5A


@pytest.mark.parametrize("state", list(EngineState))
def test_reset_from_any_state(state: EngineState) -> None:
    regs = EngineRegs(
        state=state,
        address_bit_index=2,
        data_bit_index=3,
        latched_address=0x55,
        shift=0x0F,
        acked=True,
        captured_byte=0xAB,
    )
    nxt, out = evaluate(regs, EngineInputs(address=0x55, reset=True))
    assert nxt == POWER_ON
    assert nxt.address_bit_index == 6
    assert nxt.data_bit_index == 7
    assert not out.clock_enable
    assert out.captured_byte == 0


def test_address_zero_stays_idle() -> None:
    regs = POWER_ON
    for _ in range(5):
        regs, out = evaluate(regs, EngineInputs(address=0, data_byte=0xFF))
        assert regs.state is S.IDLE
        assert out.data_drive_enable and out.data_out


def test_request_is_latched_at_start() -> None:
    regs, _ = evaluate(POWER_ON, EngineInputs(address=0x21, data_byte=0x80))
    # Changing the request mid-flight does not change what goes out
    regs, _ = evaluate(regs, EngineInputs(address=0x7F, data_byte=0x01))
    assert regs.state is S.ADDRESS
    assert regs.latched_address == 0x21
    assert regs.latched_data == 0x80


def test_outputs_per_state() -> None:
    idle = outputs_for(POWER_ON)
    assert (idle.clock_enable, idle.data_drive_enable, idle.data_out) == (
        False,
        True,
        True,
    )
    start = outputs_for(EngineRegs(state=S.START))
    assert (start.clock_enable, start.data_out) == (False, False)
    stop = outputs_for(EngineRegs(state=S.STOP))
    assert (stop.clock_enable, stop.data_drive_enable, stop.data_out) == (
        False,
        True,
        False,
    )
    ack = outputs_for(EngineRegs(state=S.ADDR_ACK))
    assert ack.clock_enable and not ack.data_drive_enable
    direction = outputs_for(EngineRegs(state=S.DIRECTION, latched_direction=True))
    assert direction.data_out


def test_protocol_engine_step_counts_edges() -> None:
    engine = ProtocolEngine("engine")
    engine.step(EngineInputs(address=0x30))
    engine.step(EngineInputs(address=0x30))
    assert engine.state is S.ADDRESS
    assert engine.steps == 2
    engine.step(EngineInputs(address=0x30, reset=True))
    assert engine.regs == POWER_ON
    assert engine.steps == 3
