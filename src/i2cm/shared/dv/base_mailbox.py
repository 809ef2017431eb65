# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_mailbox.py

"""Bounded mailbox between a sequence (producer) and a driver (consumer)."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar, cast

from . import utils_dv
from .utils_dv import MailboxClosed

T = TypeVar("T")

_CLOSED = object()


class Mailbox(Generic[T]):
    """Bounded FIFO with blocking put/get, standing in for a UVM sequencer.

    The mailbox is the TLM connection point between a sequence (which puts
    items) and a driver (which gets them). put() blocks while the mailbox is
    full, so a depth-1 mailbox gives a strict hand-off: the producer idles
    until the previous item has been taken.

    The producer calls close() once it has nothing more to send. The close
    marker queues behind any pending items; get() raises MailboxClosed once
    the consumer reaches it, and on every call after that.

    Attributes:
        depth: Capacity in items (>= 1)
        put_count: Items accepted so far
        get_count: Items handed out so far

    Example:
        >>> mbx = Mailbox[MyItem]("mbx", depth=1)
        >>> await mbx.put(item)       # producer
        >>> item = await mbx.get()    # consumer
    """

    def __init__(self, name: str = "mailbox", depth: int = 1) -> None:
        if depth <= 0:
            raise ValueError(f"{depth=}")
        self.name = name
        self.depth = depth
        self.logger = utils_dv.component_logger(name)
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=depth)
        self._closed = False
        self._drained = False
        self.put_count = 0
        self.get_count = 0

    @property
    def closed(self) -> bool:
        """True once the producer has called close()."""
        return self._closed

    def qsize(self) -> int:
        """Number of queued items (the close marker included)."""
        return self._queue.qsize()

    async def put(self, item: T) -> None:
        """Queue one item, blocking while the mailbox is full."""
        if self._closed:
            raise MailboxClosed(f"{self.name}: put() after close()")
        await self._queue.put(item)
        self.put_count += 1
        self.logger.debug("put #%d: %s", self.put_count, item)

    async def get(self) -> T:
        """Take the next item, blocking while the mailbox is empty."""
        if self._drained:
            raise MailboxClosed(f"{self.name}: closed and drained")
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            self.logger.debug("get: close marker reached")
            raise MailboxClosed(f"{self.name}: closed and drained")
        self.get_count += 1
        self.logger.debug("get #%d: %s", self.get_count, item)
        return cast(T, item)

    async def close(self) -> None:
        """Mark the end of the stream (blocks while the mailbox is full)."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)
        self.logger.debug("closed after %d items", self.put_count)
