# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_env.py

"""I2C master environment: bus, engine, mailbox, driver and monitor."""

from __future__ import annotations

from i2cm.master.i2c_master_bus import SignalBus
from i2cm.master.i2c_master_engine import ProtocolEngine
from i2cm.shared.dv.base_clock_driver import BaseClockDriver
from i2cm.shared.dv.base_env import BaseEnv
from i2cm.shared.dv.base_mailbox import Mailbox

from .i2c_master_config import I2cMasterBenchConfig
from .i2c_master_driver import I2cMasterDriver
from .i2c_master_item import TransactionPacket
from .i2c_master_monitor import I2cMasterMonitor


class I2cMasterEnv(BaseEnv):
    """Builds the design model and the bench around it.

    On every tick the clock runs the monitor (before the edge) and then
    engine.step_bus (on the edge). The bus clock pin follows the clock
    level.
    """

    def __init__(
        self, name: str = "env", cfg: I2cMasterBenchConfig | None = None
    ) -> None:
        super().__init__(name)
        self.cfg = cfg if cfg is not None else I2cMasterBenchConfig()
        self.dut: SignalBus
        self.engine: ProtocolEngine
        self.mailbox: Mailbox[TransactionPacket] | None = None
        self.drv: I2cMasterDriver
        self.mon: I2cMasterMonitor

    def build_phase(self, clock: BaseClockDriver) -> None:
        self.logger.debug("build_phase begin")
        cfg = self.cfg
        self.dut = SignalBus()
        self.engine = ProtocolEngine("engine")
        # Power-on outputs are on the bus before the first edge
        ProtocolEngine.apply(self.dut, self.engine.outputs)

        clock.add_level_listener(self.dut.set_clock)
        clock.add_edge_handler(self.step_engine)
        self.mon = I2cMasterMonitor(
            "mon", clock, self.dut, self.engine, record=cfg.record_trace
        )

        if cfg.strategy.uses_mailbox:
            self.mailbox = Mailbox("mailbox", depth=cfg.mailbox_depth)
        self.drv = I2cMasterDriver(
            "drv",
            clock,
            self.dut,
            strategy=cfg.strategy,
            mailbox=self.mailbox,
            iterations=cfg.driver_iterations,
            ack_addresses=cfg.ack_addresses,
            seed=cfg.seed,
        )
        self.logger.debug("build_phase end")

    def step_engine(self, tick: int) -> None:
        self.engine.step_bus(self.dut)
