# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_clock_mixin.py

"""Shared helpers for binding a clock, tracking reset, and waiting edges."""

from __future__ import annotations

import asyncio
import logging

from .base_clock_driver import BaseClockDriver
from .utils_dv import ResetAbort


class BaseClockMixin:
    """Mixin providing clock binding, reset tracking and edge alignment.

    This mixin is used by drivers to standardize how they wait for clock
    edges. It provides:

    - Binding to the bench clock
    - Reset state tracking through reset_change() (called by the reset
      driver), with level-triggered events
    - Drive edge alignment that aborts on reset

    Drivers act on falling edges only: the protocol engine steps on the
    falling edge and a driver reacts after it, in time for the next one.

    Reset Events:
        _rst_asserted: Event set when reset is active
        _rst_deasserted: Event set when reset is inactive

    Example:
        >>> class MyDriver(BaseClockMixin):
        ...     def __init__(self, name, clock):
        ...         self.logger = logging.getLogger(name)
        ...         self._clock_init_defaults(clock)
    """

    logger: logging.Logger

    def _clock_init_defaults(self, clock: BaseClockDriver) -> None:
        """Set defaults in __init__ of the consumer."""
        self.clock: BaseClockDriver = clock
        self._reset_active: bool = False
        # Set on assertion, consumed by the next edge wait
        self._reset_pending: bool = False
        self._reset_tick: int = -1
        # Level-triggered events reflect current reset state
        self._rst_asserted: asyncio.Event = asyncio.Event()
        self._rst_deasserted: asyncio.Event = asyncio.Event()
        self._rst_deasserted.set()  # default: not in reset at t=0

    @property
    def reset_active(self) -> bool:
        """True while the bench reset is asserted."""
        return self._reset_active

    def reset_change(self, value: int, active: bool) -> None:
        """Called by the reset driver on reset level changes."""
        self.logger.debug("reset_change begin")
        self._reset_active = active
        if active:
            self._reset_pending = True
            self._reset_tick = self.clock.tick_count
            self._rst_asserted.set()
            self._rst_deasserted.clear()
        else:
            self._rst_deasserted.set()
            self._rst_asserted.clear()
        self.logger.debug("reset_change end: value=%d active=%s", value, active)

    async def clock_drive_edge(self, n: int = 1) -> None:
        """Wait n falling edges; raise ResetAbort if a reset hit any of them.

        A reset asserted after edge t is first seen by the design at edge
        t + 1, so it only aborts a wait that ends on a later edge.
        """
        for _ in range(n):
            t = await self.clock.edges(1)
            if self._reset_pending and self._reset_tick < t:
                self._reset_pending = False
                raise ResetAbort(
                    f"reset asserted after tick {self._reset_tick}, seen at {t}"
                )

    async def wait_for_reset_inactive(self) -> None:
        """Block (off the clock) until reset is deasserted."""
        self.logger.debug("wait_for_reset_inactive begin")
        async with self.clock.released():
            await self._rst_deasserted.wait()
        self.logger.debug("wait_for_reset_inactive end")
