# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_test.py

"""I2C master test: picks the generator and runs the bench once."""

from __future__ import annotations

from typing import Any, Coroutine

from i2cm.shared.dv.base_sequence import BaseSequence
from i2cm.shared.dv.base_test import BaseTest

from .i2c_master_config import I2cMasterBenchConfig
from .i2c_master_env import I2cMasterEnv
from .i2c_master_item import TransactionPacket
from .i2c_master_sequence import I2cMasterDirectedSequence, I2cMasterRandomSequence


class I2cMasterTest(BaseTest):
    """One bench run driven by an I2cMasterBenchConfig.

    The generator is directed when cfg.packets is set and random otherwise;
    the random strategy runs without one. Extra reset pulses listed in
    cfg.reset_after are issued beside the driver.

    Example:
        >>> cfg = I2cMasterBenchConfig(strategy="read", seq_len=2, seed=1)
        >>> test = I2cMasterTest("test", cfg)
        >>> asyncio.run(test.run())
        >>> test.summary()["completed"]
        2
    """

    def __init__(
        self, name: str = "test", cfg: I2cMasterBenchConfig | None = None
    ) -> None:
        super().__init__(name)
        self.cfg = cfg if cfg is not None else I2cMasterBenchConfig.load()
        self.env: I2cMasterEnv
        self.seq: BaseSequence[TransactionPacket] | None = None

    def build_config(self) -> None:
        self.drain_ticks = self.cfg.drain_ticks
        self.max_ticks = self.cfg.max_ticks
        self.reset_cycles = self.cfg.reset_cycles
        super().build_config()
        self.logger.debug("%s", self.cfg)

    def build_envs(self) -> None:
        self.env = I2cMasterEnv("env", self.cfg)
        self.env.build_phase(self.clock_driver)

    def build_sequence(self) -> BaseSequence[TransactionPacket] | None:
        cfg = self.cfg
        if not cfg.strategy.uses_mailbox:
            return None
        if cfg.packets is not None:
            self.seq = I2cMasterDirectedSequence(cfg.packets, name="seq")
        else:
            self.seq = I2cMasterRandomSequence("seq", cfg.seq_len, cfg.seed)
        return self.seq

    def build_side_tasks(self) -> list[Coroutine[Any, Any, None]]:
        if not self.cfg.reset_after:
            return []
        return [self.inject_resets(sorted(self.cfg.reset_after))]

    async def inject_resets(self, ticks: list[int]) -> None:
        """Pulse reset at each tick offset (from the end of the initial reset)."""
        clock = self.clock_driver
        base = clock.tick_count
        for at in ticks:
            n = base + at - clock.tick_count
            if n > 0:
                await clock.edges(n)
            self.logger.info("reset pulse at tick %d", clock.tick_count)
            await self.reset_driver.pulse_reset()

    def report_phase(self) -> None:
        super().report_phase()
        s = self.summary()
        self.logger.info(
            "%s: completed=%d nacked=%d skipped=%d observed=%d captured_byte=%#04x",
            self.name,
            s["completed"],
            s["nacked"],
            s["skipped"],
            s["observed"],
            s["captured_byte"],
        )

    def summary(self) -> dict[str, Any]:
        """Counters of the run, for reports and manifests."""
        drv = self.env.drv
        return {
            "strategy": self.cfg.strategy.value,
            "iterations": drv.iterations,
            "started": drv.count,
            "completed": drv.completed,
            "nacked": drv.nacked,
            "aborted": drv.aborted,
            "skipped": drv.skipped,
            "observed": len(self.env.mon.transfers),
            "dropped": self.env.mon.dropped,
            "captured_byte": self.env.dut.captured_byte,
            "ticks": self.clock_driver.tick_count,
            "seed": self.cfg.seed,
        }
