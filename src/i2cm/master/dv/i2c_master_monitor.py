# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_monitor.py

"""I2C bus monitor: per-edge trace and observed transfers."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from pydantic import Field

from i2cm.master.i2c_master_bus import ADDRESS_MAX, DATA_MAX, LineOwner, SignalBus
from i2cm.master.i2c_master_engine import EngineState, ProtocolEngine
from i2cm.shared.dv.base_clock_driver import BaseClockDriver
from i2cm.shared.dv.base_item import BaseItem
from i2cm.shared.dv.base_monitor import BaseMonitor
from i2cm.utils import PlotWaves, ensure_dir


@dataclass(frozen=True)
class TraceSample:  # pylint: disable=too-many-instance-attributes
    """Bus and engine state just before one falling edge."""

    tick: int
    state: str
    clock_enable: bool
    scl: bool
    sda: bool
    owner: str
    reset: bool
    captured_byte: int


class ObservedTransfer(BaseItem):
    """One transaction as seen on the bus, START to STOP."""

    address: int = Field(ge=0, le=ADDRESS_MAX)
    direction: bool
    acked: bool
    data: int | None = Field(default=None, ge=0, le=DATA_MAX)
    address_bits: tuple[bool, ...] = ()
    data_bits: tuple[bool, ...] = ()
    start_tick: int = 0
    end_tick: int = 0


def _bits_to_int(bits: list[bool]) -> int:
    v = 0
    for b in bits:
        v = (v << 1) | int(b)
    return v


class I2cMasterMonitor(BaseMonitor[ObservedTransfer]):
    """Samples the bus before every falling edge.

    Every sample goes into history (when record is True). Samples taken in
    ADDRESS and DATA give the transmitted bits MSB first; a transfer is
    published on its STOP sample. A reset in mid-transfer drops the
    partial transfer.

    Attributes:
        history: TraceSample per edge
        transfers: Published transfers
        dropped: Partial transfers lost to reset
    """

    def __init__(
        self,
        name: str,
        clock: BaseClockDriver,
        bus: SignalBus,
        engine: ProtocolEngine,
        record: bool = True,
    ) -> None:
        super().__init__(name, clock)
        self.bus = bus
        self.engine = engine
        self.record = record
        self.history: list[TraceSample] = []
        self.transfers: list[ObservedTransfer] = []
        self.dropped: int = 0
        self._start_tick: int | None = None
        self._direction: bool = False
        self._acked: bool = False
        self._addr_bits: list[bool] = []
        self._data_bits: list[bool] = []
        self.ap.connect(self.transfers.append)

    def sample_edge(self, tick: int) -> None:
        bus = self.bus
        state = self.engine.state
        sda = bus.data_line
        if self.record:
            self.history.append(
                TraceSample(
                    tick=tick,
                    state=state.value,
                    clock_enable=bus.clock_enable,
                    scl=bus.scl,
                    sda=sda,
                    owner=bus.owner.value,
                    reset=bus.reset,
                    captured_byte=bus.captured_byte,
                )
            )

        if bus.reset:
            if self._start_tick is not None:
                self.dropped += 1
                self.logger.debug("tick %d: reset, partial transfer dropped", tick)
                self._start_tick = None
            return

        if state is EngineState.START:
            self._start_tick = tick
            self._direction = False
            self._acked = False
            self._addr_bits = []
            self._data_bits = []
        elif self._start_tick is None:
            return
        elif state is EngineState.ADDRESS:
            self._addr_bits.append(sda)
        elif state is EngineState.DIRECTION:
            self._direction = sda
        elif state is EngineState.ADDR_ACK:
            self._acked = not sda
        elif state is EngineState.DATA:
            self._data_bits.append(sda)
        elif state is EngineState.STOP:
            self._close(tick)

    def _close(self, tick: int) -> None:
        assert self._start_tick is not None
        acked = self._acked
        tr = ObservedTransfer(
            address=_bits_to_int(self._addr_bits),
            direction=self._direction,
            acked=acked,
            data=_bits_to_int(self._data_bits) if acked else None,
            address_bits=tuple(self._addr_bits),
            data_bits=tuple(self._data_bits),
            start_tick=self._start_tick,
            end_tick=tick,
        )
        self._start_tick = None
        self.publish(tr)

    def states(self) -> list[str]:
        """Recorded engine state per edge."""
        return [s.state for s in self.history]

    def save_json(self, outdir: Path | str, name: str = "trace") -> Path:
        """Save history and transfers to <name>.json."""
        path = ensure_dir(outdir, True) / f"{name}.json"
        doc = {
            "samples": [asdict(s) for s in self.history],
            "transfers": [t.to_dict() for t in self.transfers],
        }
        path.write_text(json.dumps(doc, indent=2) + "\n", encoding="utf-8")
        self.logger.info("Saved trace: %s", path)
        return path

    def save_csv(self, outdir: Path | str, name: str = "trace") -> Path:
        """Save history to <name>.csv, one row per edge."""
        path = ensure_dir(outdir, True) / f"{name}.csv"
        labels = [f.name for f in fields(TraceSample)]
        with path.open("w", newline="", encoding="utf-8") as f:
            wr = csv.writer(f)
            wr.writerow(labels)
            for s in self.history:
                row = asdict(s).values()
                wr.writerow([int(v) if isinstance(v, bool) else v for v in row])
        self.logger.info("Saved CSV: %s", path)
        return path

    def save_plot(self, outdir: Path | str, name: str = "waves") -> Path:
        """Plot scl/sda/owner/reset as stacked waveforms.

        Each tick becomes two half-ticks (clock high, then low) so that the
        gated clock shows its pulses.
        """
        xs: list[int] = []
        lanes: dict[str, list[int]] = {"reset": [], "owner": [], "sda": [], "scl": []}
        for s in self.history:
            for half in (0, 1):
                xs.append(2 * s.tick + half - 2)
                lanes["scl"].append(int(s.scl if half == 0 else not s.clock_enable))
                lanes["sda"].append(int(s.sda))
                lanes["owner"].append(int(s.owner == LineOwner.MASTER.value))
                lanes["reset"].append(int(s.reset))
        p = PlotWaves(outdir)
        p.title = "I2C master bus (owner: 1 = master)"
        for lane, ys in lanes.items():
            p.add_trace(lane, xs, ys)
        return p.save(name)
