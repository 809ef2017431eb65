# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_sequence.py

"""Unified base for item-generating sequences (UVM-style)."""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from . import utils_dv
from .base_item import BaseItem
from .base_mailbox import Mailbox

T = TypeVar("T", bound=BaseItem)


class BaseSequence(Generic[T]):
    """Base class for item-generating sequences.

    A sequence produces seq_len immutable items and puts them into a
    mailbox, blocking whenever the mailbox is full. When it runs out it
    closes the mailbox so that the consumer can stop early.

    Execution Flow:
        1. body_pre() - Optional pre-sequence hook
        2. For each item (seq_len times):
           a. make_item(index) - Create transaction (must implement)
           b. mailbox.put(item) - Hand it to the driver
        3. body_post() - Optional post-sequence hook
        4. mailbox.close()

    Subclasses must implement:
        make_item(index): Return the fully configured transaction

    Attributes:
        seq_len (int): Number of items to generate (default: 100)
        mailbox (Mailbox): Target mailbox (set by start())
        logger: Logger for debug output

    Example:
        >>> class MySequence(BaseSequence[MyItem]):
        ...     def make_item(self, index):
        ...         return MyItem(addr=index % 128)
        ...
        >>> seq = MySequence("seq", seq_len=4)
        >>> await seq.start(mailbox)
    """

    def __init__(self, name: str = "seq", seq_len: int = 100) -> None:
        self.name = name
        self.logger: logging.Logger = logging.getLogger(f"i2cm.{name}")
        utils_dv.configure_non_component_logger(self.logger)
        self.mailbox: Mailbox[T]
        self.seq_len: int = max(1, int(seq_len))

    async def start(self, mailbox: Mailbox[T]) -> None:
        """Run body() against mailbox, closing it at the end."""
        self.mailbox = mailbox
        try:
            await self.body()
        finally:
            await self.mailbox.close()

    async def body(self) -> None:
        """make_item -> put, in a fixed loop."""
        self.logger.debug("BaseSequence body begin: length = %d", self.seq_len)
        await self.body_pre()
        make = self.make_item
        put = self.mailbox.put
        for i in range(self.seq_len):
            await put(make(i))
        await self.body_post()
        self.logger.debug("BaseSequence body end")

    async def body_pre(self) -> None:
        """Placeholder."""
        self.logger.debug("BaseSequence body_pre begin")
        self.logger.debug("BaseSequence body_pre end")

    def make_item(self, index: int) -> T:
        """Must be implemented in subclasses: build item number index."""
        raise NotImplementedError

    async def body_post(self) -> None:
        """Placeholder."""
        self.logger.debug("BaseSequence body_post begin")
        self.logger.debug("BaseSequence body_post end")
