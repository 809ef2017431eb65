# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_reset_driver.py

"""Base reset driver."""

from __future__ import annotations

from typing import Any, Protocol

from . import utils_dv
from .base_clock_driver import BaseClockDriver


class ResetSink(Protocol):  # pylint: disable=too-few-public-methods
    """Anything that wants to hear about reset level changes."""

    def reset_change(self, value: int, active: bool) -> None:
        """Called on every reset level change."""


class BaseResetDriver:
    """Reset generation component with configurable pulse timing.

    This driver generates a synchronous reset pulse counted in clock edges.

    Reset Sequence:
        1. Assert reset between edges and notify the sinks
        2. Hold reset for reset_cycles falling edges (the design sees reset
           asserted on each of them)
        3. Deassert reset and notify the sinks
        4. Wait reset_settle_cycles edges for the design to stabilize

    Configuration:
        reset_name (str): Attribute of the target holding the reset pin
                          (default: "reset")
        reset_active_low (bool): True for active-low reset (default: False)
        reset_cycles (int): Number of clock edges to hold reset (default: 1)
        reset_settle_cycles (int): Edges after deassertion to settle (default: 0)

    Sinks (drivers, monitors) are told about every level change through
    reset_change(value, active), so that a driver in mid-sequence can
    abort.

    Example:
        >>> reset_driver = BaseResetDriver("reset_driver", clock, bus)
        >>> reset_driver.sinks.append(driver)
        >>> await reset_driver.pulse_reset()
    """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        name: str,
        clock: BaseClockDriver,
        target: Any,
        reset_name: str = "reset",
        reset_active_low: bool = False,
        reset_cycles: int = 1,
        reset_settle_cycles: int = 0,
    ) -> None:
        self.name = name
        self.logger = utils_dv.component_logger(name)
        self.clock = clock
        self.target = target
        self.reset_name = reset_name
        self.reset_active_low = reset_active_low
        self.reset_cycles = reset_cycles
        self.reset_settle_cycles = reset_settle_cycles
        self.sinks: list[ResetSink] = []
        self.pulse_count: int = 0
        self.check()

    def check(self) -> None:
        """Validate the reset configuration."""
        if not hasattr(self.target, self.reset_name):
            raise RuntimeError(f"Signal '{self.reset_name}' not found on target")
        if self.reset_cycles < 1:
            raise ValueError(f"{self.reset_cycles=} (must be >= 1)")
        if self.reset_settle_cycles < 0:
            raise ValueError(f"{self.reset_settle_cycles=}")

    def _drive(self, active: bool) -> None:
        value = int(active) ^ int(self.reset_active_low)
        setattr(self.target, self.reset_name, bool(value))
        for sink in self.sinks:
            sink.reset_change(value, active)

    async def pulse_reset(self) -> None:
        """Assert reset for reset_cycles edges, then deassert and settle."""
        self.logger.debug("pulse_reset begin")
        self.pulse_count += 1
        self._drive(True)

        # Hold reset for exactly N edges (synchronous semantics)
        await self.clock.edges(self.reset_cycles)
        self._drive(False)
        self.logger.debug(
            "reset released at tick %d after %d edge(s)",
            self.clock.tick_count,
            self.reset_cycles,
        )

        if self.reset_settle_cycles:
            await self.clock.edges(self.reset_settle_cycles)

        self.logger.debug("pulse_reset end")
