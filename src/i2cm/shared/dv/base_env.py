# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_env.py

"""Environment scaffold (UVM-style)."""

from __future__ import annotations

from typing import Any

from . import utils_dv
from .base_clock_driver import BaseClockDriver
from .base_driver import BaseDriver
from .base_mailbox import Mailbox
from .base_monitor import BaseMonitor
from .base_reset_driver import BaseResetDriver, ResetSink


class BaseEnv:
    """Environment that builds and connects the verification components.

    The environment is responsible for:
    - Creating the design model (dut), the mailbox, the driver and the
      monitor in build_phase()
    - Registering the reset sinks with the reset driver in connect_phase()

    Components:
        dut: Object the design's pins live on (carries the reset pin)
        mailbox: Sequence-to-driver hand-off (None for self-stimulating
                 drivers)
        drv: Driver
        mon: Monitor (optional)

    Example:
        >>> env = MyEnv("env")
        >>> env.build_phase(clock)
        >>> env.connect_phase(reset_driver)
    """

    def __init__(self, name: str = "env") -> None:
        self.name = name
        self.logger = utils_dv.component_logger(name)
        self.dut: Any = None
        self.mailbox: Mailbox[Any] | None = None
        self.drv: BaseDriver[Any]
        self.mon: BaseMonitor[Any] | None = None

    def build_phase(self, clock: BaseClockDriver) -> None:
        """Create the components on clock."""
        raise NotImplementedError("Implement build_phase here")

    def reset_sinks(self) -> list[ResetSink]:
        """Components that must hear about reset (default: the driver)."""
        return [self.drv]

    def connect_phase(self, reset_driver: BaseResetDriver) -> None:
        self.logger.debug("connect_phase begin")
        reset_driver.sinks.extend(self.reset_sinks())
        self.logger.debug("connect_phase end")
