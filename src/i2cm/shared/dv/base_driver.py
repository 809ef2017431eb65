# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_driver.py

"""Base driver with BFM hooks folded in."""

from __future__ import annotations

from typing import Generic, TypeVar

from . import utils_dv
from .base_clock_driver import BaseClockDriver
from .base_clock_mixin import BaseClockMixin
from .base_item import BaseItem
from .base_mailbox import Mailbox
from .utils_dv import MailboxClosed, ResetAbort

T = TypeVar("T", bound=BaseItem)


class BaseDriver(BaseClockMixin, Generic[T]):
    """Driver with clock synchronization and reset handling.

    This driver provides the framework for driving design inputs with proper
    edge alignment and reset awareness. It integrates with the clock via
    BaseClockMixin and hears about reset through reset_change().

    The driver:
    - Applies initial input values before the first item
    - Pulls up to `iterations` items (next_item) and drives each one
      (drive_item)
    - Aborts the in-flight item when reset is seen in mid-sequence, returns
      its inputs to their initial values, and waits for reset to clear
    - Stops early (with a warning) when its mailbox is closed and drained

    Subclasses must implement:
        drive_item(tr): Drive design signals for one transaction
        apply_initial_dut_inputs(): Return inputs to their idle values

    Attributes:
        mailbox: Source of items (None for drivers that make their own)
        iterations: Number of items to drive
        count: Items started
        aborted: Items dropped because of a reset

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs," SNUG 2016

    Example:
        >>> class MyDriver(BaseDriver[MyItem]):
        ...     async def drive_item(self, tr):
        ...         self.bus.data = tr.data
        ...         await self.clock_drive_edge()
    """

    def __init__(
        self,
        name: str,
        clock: BaseClockDriver,
        mailbox: Mailbox[T] | None = None,
        iterations: int = 1,
    ) -> None:
        self.name = name
        self.logger = utils_dv.component_logger(name)
        self._clock_init_defaults(clock)
        self.mailbox = mailbox
        self.iterations = iterations
        self.count: int = 0
        self.aborted: int = 0
        if self.iterations < 0:
            raise ValueError(f"{self.iterations=}")

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        tr: T
        await self.apply_initial_dut_inputs()
        for index in range(self.iterations):
            try:
                tr = await self.next_item(index)
            except MailboxClosed:
                self.logger.warning(
                    "mailbox closed after %d of %d item(s); stopping early",
                    self.count,
                    self.iterations,
                )
                break
            if self._reset_active or self._reset_pending:
                await self.wait_for_reset_inactive()
                self._reset_pending = False
            self.count += 1
            try:
                await self.drive_item(tr)
            except ResetAbort as exc:
                self.aborted += 1
                self.logger.warning("item %d aborted (%s): %s", index, exc, tr)
                await self.apply_initial_dut_inputs()
                await self.wait_for_reset_inactive()
        self.logger.debug("run_phase end")

    async def next_item(self, index: int) -> T:
        """Return the next item to drive (default: from the mailbox)."""
        if self.mailbox is None:
            raise RuntimeError(f"{self.name}: no mailbox connected")
        async with self.clock.released():
            return await self.mailbox.get()

    async def apply_initial_dut_inputs(self) -> None:
        """Return the driven inputs to their idle values."""
        raise NotImplementedError("Implement apply_initial_dut_inputs here")

    async def drive_item(self, tr: T) -> None:
        """Drive design signals for one transaction."""
        raise NotImplementedError("Implement design signal driving here")
