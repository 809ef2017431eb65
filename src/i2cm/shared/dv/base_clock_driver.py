# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_clock_driver.py

"""Base clock driver: the single tick source of the bench."""

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Callable

from . import utils_dv
from .utils_dv import SimulationTimeout

EdgeHandler = Callable[[int], None]
LevelListener = Callable[[bool], None]


class BaseClockDriver:
    """Clock generation component driving every other part of the bench.

    One call to tick() is one clock period ending in a falling edge. Each
    tick runs, in order:

    1. level listeners with the high level (e.g. SignalBus.clock = True),
    2. samplers: pre-edge observers (monitors) that see the bus exactly as
       the falling edge will see it,
    3. level listeners with the low level (the falling edge),
    4. edge handlers: edge-triggered step functions (the protocol engine),
    5. wake-up of the tasks waiting in edges() whose count has run out.

    run() keeps ticking until stop(). Before each tick it waits until every
    task woken by the previous tick has parked again (called edges(), left
    through released(), or finished). That settle barrier gives the same
    ordering guarantee as a simulator's delta cycles: whatever a task
    writes after an edge is visible to the next edge, and nothing a task
    reads after an edge is stale.

    Configuration:
        max_ticks (int): Tick budget; run() raises SimulationTimeout past it
                         (default: 100_000)

    Example:
        >>> clock = BaseClockDriver("clock", max_ticks=1_000)
        >>> clock.add_edge_handler(lambda tick: engine.step_bus(bus))
        >>> task = asyncio.create_task(clock.run())
        >>> await clock.edges(20)
        >>> clock.stop()
    """

    def __init__(self, name: str = "clock", max_ticks: int = 100_000) -> None:
        if max_ticks <= 0:
            raise ValueError(f"{max_ticks=}")
        self.name = name
        self.max_ticks = max_ticks
        self.logger = utils_dv.component_logger(name)
        self.tick_count: int = 0
        self.level: bool = True
        self._level_listeners: list[LevelListener] = []
        self._samplers: list[EdgeHandler] = []
        self._edge_handlers: list[EdgeHandler] = []
        # [edges remaining, future, task]
        self._waiters: list[tuple[list[int], asyncio.Future[int], asyncio.Task]] = []
        self._awake: set[asyncio.Task] = set()
        self._watched: set[asyncio.Task] = set()
        self._settled = asyncio.Event()
        self._running = False

    def add_level_listener(self, fn: LevelListener) -> None:
        """Call fn(level) whenever the clock level changes."""
        self._level_listeners.append(fn)

    def add_sampler(self, fn: EdgeHandler) -> None:
        """Call fn(tick) just before each falling edge."""
        self._samplers.append(fn)

    def add_edge_handler(self, fn: EdgeHandler) -> None:
        """Call fn(tick) on each falling edge, in registration order."""
        self._edge_handlers.append(fn)

    async def run(self) -> None:
        """Tick until stop(); raise SimulationTimeout past max_ticks."""
        self.logger.debug("run begin")
        self._running = True
        while self._running:
            if self._awake:
                self._settled.clear()
                await self._settled.wait()
            else:
                # Nobody is on the clock; let other tasks have a turn.
                await asyncio.sleep(0)
            if not self._running:
                break
            if self.tick_count >= self.max_ticks:
                raise SimulationTimeout(
                    f"{self.name}: no completion within {self.max_ticks} ticks"
                )
            self.tick()
        self.logger.debug("run end: %d ticks", self.tick_count)

    def stop(self) -> None:
        """Stop run() before its next tick."""
        self._running = False
        self._settled.set()

    def tick(self) -> int:
        """Advance one clock period (ending on its falling edge)."""
        self.tick_count += 1
        t = self.tick_count
        self._set_level(True)
        for sample in self._samplers:
            sample(t)
        self._set_level(False)
        for handler in self._edge_handlers:
            handler(t)
        self._wake(t)
        return t

    async def edges(self, n: int = 1) -> int:
        """Suspend the calling task until n falling edges have occurred.

        Returns the tick number of the last of those edges.
        """
        if n < 1:
            raise ValueError(f"{n=}")
        task = asyncio.current_task()
        assert task is not None, "edges() must be awaited from a task"
        fut: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        self._waiters.append(([n], fut, task))
        self._park(task)
        return await fut

    @contextlib.asynccontextmanager
    async def released(self) -> AsyncIterator[None]:
        """Take the calling task off the clock while it blocks elsewhere.

        Use around awaits that are not edge waits (mailbox get, events) so
        that the clock keeps ticking while the task is blocked.
        """
        task = asyncio.current_task()
        if task is not None:
            self._park(task)
        yield

    def _set_level(self, level: bool) -> None:
        self.level = level
        for listener in self._level_listeners:
            listener(level)

    def _wake(self, t: int) -> None:
        keep = []
        for remaining, fut, task in self._waiters:
            remaining[0] -= 1
            if remaining[0] > 0:
                keep.append((remaining, fut, task))
            elif not fut.done():
                fut.set_result(t)
                self._awake.add(task)
                if task not in self._watched:
                    self._watched.add(task)
                    task.add_done_callback(self._on_task_done)
        self._waiters = keep

    def _park(self, task: asyncio.Task) -> None:
        self._awake.discard(task)
        if not self._awake:
            self._settled.set()

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._watched.discard(task)
        self._waiters = [w for w in self._waiters if w[2] is not task]
        self._park(task)
