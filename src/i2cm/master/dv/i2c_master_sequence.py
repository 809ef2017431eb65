# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_sequence.py

"""I2C master packet generators."""

from __future__ import annotations

import random
from typing import Iterable

from i2cm.shared.dv import utils_cli
from i2cm.shared.dv.base_sequence import BaseSequence

from .i2c_master_item import TransactionPacket

PacketSpec = TransactionPacket | tuple[int, int, bool]


class I2cMasterRandomSequence(BaseSequence[TransactionPacket]):
    """Random packets, uniform over address, data and direction.

    Honors I2C_SEQ_LEN (env or plusarg) when seq_len is not given.
    """

    def __init__(
        self,
        name: str = "seq",
        seq_len: int | None = None,
        seed: int | None = None,
    ) -> None:
        if seq_len is None:
            seq_len = utils_cli.get_int_setting("I2C_SEQ_LEN", 4)
        super().__init__(name, seq_len)
        self.seed = seed
        self.rng = random.Random(seed)

    def make_item(self, index: int) -> TransactionPacket:
        return TransactionPacket.randomize(self.rng)


class I2cMasterDirectedSequence(BaseSequence[TransactionPacket]):
    """Caller-supplied packets, in order.

    Example:
        >>> seq = I2cMasterDirectedSequence([(0x55, 0xA3, False)])
    """

    def __init__(self, packets: Iterable[PacketSpec], name: str = "seq") -> None:
        self.packets = [self._to_packet(p) for p in packets]
        if not self.packets:
            raise ValueError(f"{name}: directed sequence needs at least one packet")
        super().__init__(name, len(self.packets))

    @staticmethod
    def _to_packet(p: PacketSpec) -> TransactionPacket:
        if isinstance(p, TransactionPacket):
            return p
        address, data, direction = p
        return TransactionPacket(address=address, data=data, direction=direction)

    def make_item(self, index: int) -> TransactionPacket:
        return self.packets[index]
