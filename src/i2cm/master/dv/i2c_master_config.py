# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/i2c_master_config.py

"""I2C master bench configuration.

The configuration is a pydantic model. Values come from, in increasing
order of precedence: model defaults, a YAML file (from_yaml), plusargs and
environment variables (with_env_overrides).

Example YAML:

    strategy: read
    seq_len: 8
    seed: 0x1234
    ack_addresses: [0x50, 0x51]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    ValidationError,
    field_validator,
)

from i2cm.master.i2c_master_bus import ADDRESS_MAX
from i2cm.shared.dv import utils_cli
from i2cm.shared.dv.utils_dv import ConfigError

from .i2c_master_driver import DriveStrategy
from .i2c_master_item import TransactionPacket

logger = logging.getLogger(__name__)

# (setting name, field name, kind)
ENV_SETTINGS: tuple[tuple[str, str, str], ...] = (
    ("I2C_STRATEGY", "strategy", "str"),
    ("I2C_SEQ_LEN", "seq_len", "int"),
    ("I2C_ITERATIONS", "iterations", "int"),
    ("I2C_RANDOM_ITERATIONS", "random_iterations", "int"),
    ("I2C_MAILBOX_DEPTH", "mailbox_depth", "int"),
    ("I2C_RESET_CYCLES", "reset_cycles", "int"),
    ("I2C_SEED", "seed", "int"),
    ("I2C_DRAIN_TICKS", "drain_ticks", "int"),
    ("I2C_MAX_TICKS", "max_ticks", "int"),
    ("I2C_RECORD_TRACE", "record_trace", "bool"),
)


class I2cMasterBenchConfig(BaseModel):
    """Settings for one bench run.

    Attributes:
        strategy: Driver strategy (count, random, read, write)
        seq_len: Packets produced by the generator
        iterations: Driver iterations; None picks seq_len, or
                    random_iterations for the random strategy
        random_iterations: Default iterations of the random strategy
        mailbox_depth: Generator-to-driver mailbox capacity
        reset_cycles: Edges the initial reset is held for
        reset_after: Ticks (from the end of the initial reset) at which a
                     further reset pulse is issued
        drain_ticks: Edges run after the driver finishes
        seed: Seed for the generator and the random strategy
        ack_addresses: Addresses the slave acknowledges (None = all)
        packets: Directed packets; when given they replace the random
                 generator
        max_ticks: Tick budget before SimulationTimeout
        record_trace: Keep the per-edge monitor history
    """

    model_config = ConfigDict(extra="forbid")

    strategy: DriveStrategy = DriveStrategy.COUNT
    seq_len: PositiveInt = 4
    iterations: PositiveInt | None = None
    random_iterations: PositiveInt = 16
    mailbox_depth: PositiveInt = 1
    reset_cycles: PositiveInt = 1
    reset_after: list[NonNegativeInt] = Field(default_factory=list)
    drain_ticks: NonNegativeInt = 0
    seed: int | None = None
    ack_addresses: list[Annotated[int, Field(ge=0, le=ADDRESS_MAX)]] | None = None
    packets: list[TransactionPacket] | None = None
    max_ticks: PositiveInt = 100_000
    record_trace: bool = True

    @field_validator("packets")
    @classmethod
    def _packets_not_empty(
        cls, v: list[TransactionPacket] | None
    ) -> list[TransactionPacket] | None:
        if v is not None and not v:
            raise ValueError("packets must not be empty")
        return v

    @property
    def driver_iterations(self) -> int:
        """Iterations the driver runs."""
        if self.iterations is not None:
            return self.iterations
        if self.strategy is DriveStrategy.RANDOM:
            return self.random_iterations
        if self.packets is not None:
            return len(self.packets)
        return self.seq_len

    def __str__(self) -> str:
        return f"{self.__class__.__name__}:\n" + json.dumps(
            self.model_dump(mode="json"), indent=2
        )

    def save(self, outdir: Path, name: str = "") -> Path:
        """Save the model to <outdir>/<name>.json."""
        name = name if name else self.__class__.__name__
        path = outdir / f"{name}.json"
        path.write_text(json.dumps(self.model_dump(mode="json"), indent=2) + "\n")
        return path

    def updated(self, **updates: Any) -> Self:
        """Validated copy with updates applied (None values are ignored)."""
        clean = {k: v for k, v in updates.items() if v is not None}
        if not clean:
            return self
        try:
            return self.model_validate({**self.model_dump(), **clean})
        except ValidationError as exc:
            raise ConfigError(f"invalid settings {clean}: {exc}") from exc

    def with_env_overrides(self) -> Self:
        """Apply I2C_* settings from the environment and plusargs."""
        updates: dict[str, Any] = {}
        for setting, field, kind in ENV_SETTINGS:
            if not utils_cli.has_setting(setting):
                continue
            raw = utils_cli.get_str_setting(setting, "").strip()
            value: Any = raw.lower()
            if kind == "bool":
                value = utils_cli.get_bool_setting(setting, getattr(self, field))
            elif kind == "int":
                try:
                    value = int(raw, 0)
                except ValueError as exc:
                    raise ConfigError(f"{setting}={raw!r}: not an integer") from exc
            updates[field] = value
            logger.debug("%s overrides %s = %r", setting, field, value)
        return self.updated(**updates)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """Load a config file; raise ConfigError on any problem."""
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"{path}: cannot read ({exc})") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML ({exc})") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"{path}: {exc}") from exc

    @classmethod
    def load(cls, path: Path | str | None = None) -> Self:
        """Defaults, then the file (if any), then env/plusargs."""
        cfg = cls.from_yaml(path) if path is not None else cls()
        return cfg.with_env_overrides()
