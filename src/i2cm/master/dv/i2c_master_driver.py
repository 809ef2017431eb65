# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_driver.py

"""I2C master driver: one playback routine, four packet strategies."""

from __future__ import annotations

import random
from enum import Enum
from typing import Iterable

from i2cm.master.i2c_master_bus import SignalBus
from i2cm.master.i2c_master_engine import ADDRESS_BITS, DATA_BITS, DATA_MSB
from i2cm.shared.dv.base_clock_driver import BaseClockDriver
from i2cm.shared.dv.base_driver import BaseDriver
from i2cm.shared.dv.base_mailbox import Mailbox

from .i2c_master_item import READ, WRITE, TransactionPacket

# Edges from publishing a request until the engine is in ADDRESS
START_EDGES = 2


class DriveStrategy(str, Enum):
    """Where packets come from and how their direction is chosen.

    COUNT:  mailbox packets, direction alternates write/read
    RANDOM: own random packets, own direction
    READ:   mailbox packets, always read
    WRITE:  mailbox packets, always write
    """

    COUNT = "count"
    RANDOM = "random"
    READ = "read"
    WRITE = "write"

    @property
    def uses_mailbox(self) -> bool:
        return self is not DriveStrategy.RANDOM


class I2cMasterDriver(BaseDriver[TransactionPacket]):
    """Plays transactions onto the bus in lock-step with the engine.

    The driver publishes the request, then counts edges through every
    protocol phase. It also plays the slave: it acknowledges the address
    (unless ack_addresses excludes it), presents the read byte MSB first
    during DATA and acknowledges the data byte.

    Edge counts come from the engine's ADDRESS_BITS and DATA_BITS, so the
    driver and the engine agree on the phase boundaries.

    Attributes:
        strategy: Packet sourcing and direction policy
        ack_addresses: Addresses the slave acknowledges (None = all)
        driven: Packets actually played (after the direction override)
        completed: Acknowledged transactions that reached STOP
        nacked: Transactions whose address was not acknowledged
        skipped: Packets with address 0 (no transaction on the bus)

    Example:
        >>> drv = I2cMasterDriver("drv", clock, bus, DriveStrategy.READ, mbx, 4)
        >>> await drv.run_phase()
    """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        name: str,
        clock: BaseClockDriver,
        bus: SignalBus,
        strategy: DriveStrategy = DriveStrategy.COUNT,
        mailbox: Mailbox[TransactionPacket] | None = None,
        iterations: int = 4,
        ack_addresses: Iterable[int] | None = None,
        seed: int | None = None,
    ) -> None:
        super().__init__(name, clock, mailbox, iterations)
        self.bus = bus
        self.strategy = DriveStrategy(strategy)
        if self.strategy.uses_mailbox and mailbox is None:
            raise ValueError(f"{self.strategy=} needs a mailbox")
        self.ack_addresses = (
            None if ack_addresses is None else frozenset(ack_addresses)
        )
        self.rng = random.Random(seed)
        self.counter: int = 0
        self.driven: list[TransactionPacket] = []
        self.completed: int = 0
        self.nacked: int = 0
        self.skipped: int = 0

    async def run_phase(self) -> None:
        self.bus.claim(self.name)
        try:
            await super().run_phase()
        finally:
            self.bus.release(self.name)

    async def next_item(self, index: int) -> TransactionPacket:
        if self.strategy is DriveStrategy.RANDOM:
            return TransactionPacket.randomize(self.rng)
        return await super().next_item(index)

    def direction_for(self, packet: TransactionPacket) -> bool:
        """Direction to play packet with, per strategy."""
        if self.strategy is DriveStrategy.COUNT:
            self.counter += 1
            return WRITE if self.counter % 2 else READ
        if self.strategy is DriveStrategy.READ:
            return READ
        if self.strategy is DriveStrategy.WRITE:
            return WRITE
        return packet.direction

    def acks(self, address: int) -> bool:
        return self.ack_addresses is None or address in self.ack_addresses

    async def apply_initial_dut_inputs(self) -> None:
        self.bus.clear_request()
        self.bus.slave_release()

    async def drive_item(self, tr: TransactionPacket) -> None:
        packet = tr.with_direction(self.direction_for(tr))
        self.driven.append(packet)
        await self.drive_transaction(packet)

    async def drive_transaction(self, packet: TransactionPacket) -> None:
        """Play one transaction, sub-step by sub-step."""
        bus = self.bus
        edge = self.clock_drive_edge

        if packet.address == 0:
            # Address 0 never leaves IDLE
            self.skipped += 1
            self.logger.info("%r: address 0, nothing to send", packet)
            await edge(1)
            return

        # START: IDLE -> START -> ADDRESS
        bus.slave_release()
        bus.set_request(packet.address, packet.data, packet.direction)
        await edge(START_EDGES)

        # ADDRESS: one edge per address bit, slave released
        await edge(ADDRESS_BITS)

        # DIRECTION
        await edge(1)

        # ADDRESS ACK: the engine samples the line at this edge
        ack = self.acks(packet.address)
        bus.slave_pull(not ack)
        await edge(1)
        bus.slave_release()

        if ack:
            # DATA: a read gets packet.data MSB first, one bit per edge
            for idx in range(DATA_MSB, DATA_MSB - DATA_BITS, -1):
                if packet.direction:
                    bus.slave_pull(bool((packet.data >> idx) & 1))
                await edge(1)
            bus.slave_release()

            # DATA ACK
            bus.slave_pull(False)
            await edge(1)
            bus.slave_release()

        # STOP: withdraw the request before the engine returns to IDLE
        bus.clear_request()
        await edge(1)

        if ack:
            self.completed += 1
            self.logger.info("%r: done, captured_byte=%#04x", packet, bus.captured_byte)
        else:
            self.nacked += 1
            self.logger.info("%r: address not acknowledged", packet)
