# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_item.py

"""I2C master transaction packet."""

from __future__ import annotations

import random
from typing import Iterable, Self

from pydantic import Field

from i2cm.master.i2c_master_bus import ADDRESS_MAX, DATA_MAX
from i2cm.shared.dv.base_item import BaseItem

READ = True
WRITE = False


class TransactionPacket(BaseItem):
    """One I2C transaction request.

    Attributes:
        address: 7-bit slave address (0 never starts a transaction)
        data: Byte to write, or the byte the slave returns on a read
        direction: False = write, True = read
    """

    address: int = Field(0, ge=0, le=ADDRESS_MAX)
    data: int = Field(0, ge=0, le=DATA_MAX)
    direction: bool = WRITE

    def _in_fields(self) -> Iterable[str]:
        return ("address", "data", "direction")

    @property
    def is_read(self) -> bool:
        return bool(self.direction)

    def with_direction(self, direction: bool) -> Self:
        """Copy of this packet with direction forced."""
        if direction == self.direction:
            return self
        return self.clone(direction=direction)

    @classmethod
    def randomize(cls, rng: random.Random) -> Self:
        """Uniform over the full address, data and direction domain."""
        return cls(
            address=rng.randint(0, ADDRESS_MAX),
            data=rng.randint(0, DATA_MAX),
            direction=bool(rng.getrandbits(1)),
        )

    def __repr__(self) -> str:
        kind = "R" if self.direction else "W"
        return f"TransactionPacket({kind} addr={self.address:#04x} data={self.data:#04x})"
