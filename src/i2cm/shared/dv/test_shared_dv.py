# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/test_shared_dv.py

"""Tests for the shared bench infrastructure."""

from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace

import pytest

from .base_clock_driver import BaseClockDriver
from .base_clock_mixin import BaseClockMixin
from .base_mailbox import Mailbox
from .base_reset_driver import BaseResetDriver
from .utils_cli import get_bool_setting, get_int_setting, get_str_setting, has_setting
from .utils_dv import MailboxClosed, ResetAbort, SimulationTimeout


def test_tick_order() -> None:
    clock = BaseClockDriver("clock")
    order: list[str] = []
    clock.add_level_listener(lambda level: order.append(f"level{int(level)}"))
    clock.add_sampler(lambda t: order.append(f"sample{t}"))
    clock.add_edge_handler(lambda t: order.append(f"edge{t}"))
    assert clock.tick() == 1
    assert order == ["level1", "sample1", "level0", "edge1"]


def test_edges_counts_falling_edges() -> None:
    async def body() -> tuple[int, int]:
        clock = BaseClockDriver("clock", max_ticks=100)
        task = asyncio.create_task(clock.run())
        t = await clock.edges(5)
        clock.stop()
        await task
        return t, clock.tick_count

    assert asyncio.run(body()) == (5, 5)


def test_settle_barrier_makes_writes_visible_to_next_edge() -> None:
    async def body() -> list[int]:
        clock = BaseClockDriver("clock", max_ticks=1_000)
        value = {"v": 0}
        seen: list[int] = []
        clock.add_edge_handler(lambda t: seen.append(value["v"]))

        async def writer() -> None:
            for i in range(1, 5):
                await clock.edges(1)
                await asyncio.sleep(0)
                await asyncio.sleep(0)
                value["v"] = i

        task = asyncio.create_task(clock.run())
        await asyncio.create_task(writer())
        await clock.edges(1)
        clock.stop()
        await task
        return seen

    assert asyncio.run(body())[:5] == [0, 1, 2, 3, 4]


def test_clock_raises_simulation_timeout() -> None:
    async def body() -> None:
        clock = BaseClockDriver("clock", max_ticks=3)
        task = asyncio.create_task(clock.run())
        waiter = asyncio.create_task(clock.edges(10))
        with pytest.raises(SimulationTimeout):
            await task
        assert clock.tick_count == 3
        waiter.cancel()

    asyncio.run(body())


def test_clock_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        BaseClockDriver("clock", max_ticks=0)

    async def body() -> None:
        clock = BaseClockDriver("clock")
        with pytest.raises(ValueError):
            await clock.edges(0)

    asyncio.run(body())


def test_mailbox_backpressure() -> None:
    async def body() -> None:
        mbx: Mailbox[int] = Mailbox("mbx", depth=1)
        await mbx.put(1)
        blocked = asyncio.create_task(mbx.put(2))
        await asyncio.sleep(0)
        assert not blocked.done()
        assert mbx.qsize() == 1
        assert await mbx.get() == 1
        await blocked
        assert mbx.qsize() == 1
        assert await mbx.get() == 2
        assert (mbx.put_count, mbx.get_count) == (2, 2)

    asyncio.run(body())


def test_mailbox_close() -> None:
    async def body() -> None:
        mbx: Mailbox[str] = Mailbox("mbx", depth=2)
        await mbx.put("a")
        await mbx.close()
        assert mbx.closed
        with pytest.raises(MailboxClosed):
            await mbx.put("b")
        assert await mbx.get() == "a"
        with pytest.raises(MailboxClosed):
            await mbx.get()
        with pytest.raises(MailboxClosed):
            await mbx.get()

    asyncio.run(body())


def test_mailbox_depth_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Mailbox("mbx", depth=0)


class _Sink:
    def __init__(self) -> None:
        self.events: list[tuple[int, bool]] = []

    def reset_change(self, value: int, active: bool) -> None:
        self.events.append((value, active))


def test_reset_pulse_holds_for_reset_cycles() -> None:
    async def body() -> tuple[list[bool], _Sink, int]:
        clock = BaseClockDriver("clock", max_ticks=100)
        target = SimpleNamespace(rst_n=True)
        levels: list[bool] = []
        clock.add_edge_handler(lambda t: levels.append(target.rst_n))
        rst = BaseResetDriver(
            "rst", clock, target, "rst_n", reset_active_low=True, reset_cycles=3
        )
        sink = _Sink()
        rst.sinks.append(sink)
        task = asyncio.create_task(clock.run())
        await rst.pulse_reset()
        await clock.edges(2)
        clock.stop()
        await task
        return levels, sink, rst.pulse_count

    levels, sink, pulses = asyncio.run(body())
    assert levels[:5] == [False, False, False, True, True]
    assert sink.events == [(0, True), (1, False)]
    assert pulses == 1


def test_reset_driver_checks_target() -> None:
    clock = BaseClockDriver("clock")
    with pytest.raises(RuntimeError):
        BaseResetDriver("rst", clock, SimpleNamespace(), "reset")
    with pytest.raises(ValueError):
        BaseResetDriver("rst", clock, SimpleNamespace(reset=False), reset_cycles=0)


def test_settings_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("FOO", "I2CM_FOO", "PLUSARGS", "I2CM_PLUSARGS"):
        monkeypatch.delenv(key, raising=False)
    assert not has_setting("FOO")
    assert get_int_setting("FOO", 3) == 3

    monkeypatch.setenv("PLUSARGS", "+FOO=0x10 +BAR")
    assert has_setting("FOO")
    assert get_int_setting("FOO", 3) == 16
    assert get_bool_setting("BAR", False) is True

    monkeypatch.setenv("I2CM_FOO", "7")
    assert get_int_setting("FOO", 3) == 7
    monkeypatch.setenv("FOO", "9")
    assert get_int_setting("FOO", 3) == 9
    assert get_str_setting("FOO", "x") == "9"


class _EdgeWaiter(BaseClockMixin):
    def __init__(self, clock: BaseClockDriver) -> None:
        self.logger = logging.getLogger("waiter")
        self._clock_init_defaults(clock)


def test_reset_after_an_edge_aborts_only_the_next_wait() -> None:
    async def body() -> list[tuple[str, int]]:
        clock = BaseClockDriver("clock", max_ticks=100)
        waiter = _EdgeWaiter(clock)
        events: list[tuple[str, int]] = []

        async def drive() -> None:
            await waiter.clock_drive_edge(3)
            events.append(("done", clock.tick_count))
            try:
                await waiter.clock_drive_edge(1)
            except ResetAbort:
                events.append(("abort", clock.tick_count))

        async def assert_reset() -> None:
            await clock.edges(3)
            waiter.reset_change(1, True)
            events.append(("reset", clock.tick_count))

        task = asyncio.create_task(clock.run())
        # Both wake on the same edge; the reset side is woken first
        await asyncio.gather(assert_reset(), drive())
        clock.stop()
        await task
        return events

    events = asyncio.run(body())
    assert [e for e, _ in events] == ["reset", "done", "abort"]
    (_, t_reset), (_, t_done), (_, t_abort) = events
    assert t_done == t_reset
    assert t_abort == t_reset + 1
