# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_monitor.py

"""Base monitor with a pre-edge sampling hook and an analysis port."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from . import utils_dv
from .base_clock_driver import BaseClockDriver

T = TypeVar("T")


class AnalysisPort(Generic[T]):
    """One-to-many broadcast of observed transactions."""

    def __init__(self, name: str = "ap") -> None:
        self.name = name
        self.subscribers: list[Callable[[T], None]] = []

    def connect(self, fn: Callable[[T], None]) -> None:
        self.subscribers.append(fn)

    def write(self, tr: T) -> None:
        for fn in self.subscribers:
            fn(tr)


class BaseMonitor(Generic[T]):
    """Base monitor with clock synchronization and analysis port infrastructure.

    The monitor registers itself as a sampler on the clock, so sample_edge()
    runs on every tick just before the falling edge, seeing the bus exactly
    as the edge will. It never drives anything.

    Subclasses must implement:
        sample_edge(tick): Sample the bus; call publish() on completed
                           transactions

    Attributes:
        ap: Analysis port for broadcasting observed transactions
        item_count: Number of transactions published

    Example:
        >>> class MyMonitor(BaseMonitor[MyItem]):
        ...     def sample_edge(self, tick):
        ...         if self.bus.valid:
        ...             self.publish(MyItem(data=self.bus.data))
    """

    def __init__(self, name: str, clock: BaseClockDriver) -> None:
        self.name = name
        self.logger = utils_dv.component_logger(name)
        self.clock = clock
        self.ap: AnalysisPort[T] = AnalysisPort("ap")
        self.item_count: int = 0
        clock.add_sampler(self.sample_edge)

    def publish(self, tr: T) -> None:
        self.item_count += 1
        self.logger.debug("observed #%d: %s", self.item_count, tr)
        self.ap.write(tr)

    def sample_edge(self, tick: int) -> None:
        """Sample the bus just before falling edge number tick."""
        raise NotImplementedError("Implement sample_edge here")
