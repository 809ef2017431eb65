# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/i2c_master_bus.py

"""Shared two-wire bus between the I2C master engine and the bench."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum

from i2cm.shared.dv.utils_dv import BenchError

ADDRESS_MAX = 0x7F
DATA_MAX = 0xFF


class BusOwnershipError(BenchError):
    """Raised when a second driver claims a bus that is already held."""


class LineOwner(str, Enum):
    """Side currently driving the data line."""

    MASTER = "master"
    SLAVE = "slave"


@dataclass
class SignalBus:  # pylint: disable=too-many-instance-attributes
    """Pins of the I2C master plus the slave side of the data line.

    The data line is open-drain on a real bus. Here the resolution is an
    explicit tag: `owner` follows the engine's data_drive_enable output, and
    data_line reads master_data or slave_data accordingly. The slave may
    preset slave_data at any time; it only shows on data_line while the
    master has released the line.

    Attributes:
        clock: Free-running clock level (set by the clock source)
        clock_enable: Clock gate output of the engine
        data_drive_enable: Engine drives the data line when True
        master_data: Level the engine drives
        slave_data: Level the slave pulls (high = pull-up only)
        owner: Current driver of the data line
        address: Requested 7-bit address (0 = no request)
        data_byte: Byte to write
        direction: False = master writes, True = master reads
        reset: Synchronous reset input
        captured_byte: Last byte read from a slave
        holder: Name of the bench driver that claimed the bus

    Example:
        >>> bus = SignalBus()
        >>> bus.claim("drv")
        >>> bus.set_request(0x55, 0xA3, direction=False)
    """

    clock: bool = True
    clock_enable: bool = False
    data_drive_enable: bool = True
    master_data: bool = True
    slave_data: bool = True
    owner: LineOwner = LineOwner.MASTER
    address: int = 0
    data_byte: int = 0
    direction: bool = False
    reset: bool = False
    captured_byte: int = 0
    holder: str | None = None

    @property
    def data_line(self) -> bool:
        """Resolved level of the data line."""
        if self.owner is LineOwner.MASTER:
            return self.master_data
        return self.slave_data

    @property
    def scl(self) -> bool:
        """Output clock: follows clock while gated, high otherwise."""
        return self.clock if self.clock_enable else True

    def set_clock(self, level: bool) -> None:
        self.clock = level

    def set_request(self, address: int, data: int, direction: bool) -> None:
        """Publish a transaction request for the engine to pick up."""
        if not 0 <= address <= ADDRESS_MAX:
            raise ValueError(f"{address=:#x} (must fit in 7 bits)")
        if not 0 <= data <= DATA_MAX:
            raise ValueError(f"{data=:#x} (must fit in 8 bits)")
        self.address = address
        self.data_byte = data
        self.direction = bool(direction)

    def clear_request(self) -> None:
        """Withdraw the request; the engine stays in IDLE afterwards."""
        self.address = 0

    def slave_pull(self, level: bool) -> None:
        """Slave side: pull the line low (False) or let it float high."""
        self.slave_data = bool(level)

    def slave_release(self) -> None:
        self.slave_data = True

    def claim(self, name: str) -> None:
        """Take exclusive use of the bus for driver name."""
        if self.holder is not None and self.holder != name:
            raise BusOwnershipError(
                f"bus held by '{self.holder}', claim by '{name}' refused"
            )
        self.holder = name

    def release(self, name: str) -> None:
        """Give the bus back (no-op for anyone but the holder)."""
        if self.holder == name:
            self.holder = None

    def snapshot(self) -> dict[str, object]:
        """Plain-data view of every pin, plus the derived lines."""
        d = asdict(self)
        d["owner"] = self.owner.value
        d["data_line"] = self.data_line
        d["scl"] = self.scl
        return d
