# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/dv/base_item.py

"""Base sequence item: an immutable, validated transaction value."""

from __future__ import annotations

import json
from typing import Any, Iterable, Self

from pydantic import BaseModel, ConfigDict


class BaseItem(BaseModel):
    """Base transaction item with field management and comparison utilities.

    Items are frozen pydantic models: every field is validated when the item
    is built and an item is never mutated afterwards. Derived items (for
    example a copy with a forced direction) are built with clone(), which
    re-runs validation.

    Subclasses declare their fields as pydantic fields and may override:
        _in_fields(): Return tuple of input field names

    The class provides:
    - Validated copies with overrides (clone)
    - Comparison of input fields
    - JSON serialization for logging and debugging

    Example:
        >>> class MyItem(BaseItem):
        ...     addr: int = Field(0, ge=0, le=0xFF)
        ...     data: int = 0
        ...
        ...     def _in_fields(self):
        ...         return ("addr", "data")
    """

    model_config = ConfigDict(frozen=True)

    def _in_fields(self) -> Iterable[str]:
        """Fields considered *inputs* (randomized / constrained)."""
        return tuple(type(self).model_fields)

    def clone(self, **updates: Any) -> Self:
        """Return a validated copy with the given fields replaced."""
        return self.model_validate({**self.model_dump(), **updates})

    def to_dict(self) -> dict[str, object]:
        """Structured view for logging/JSON."""
        return self.model_dump()

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    def compare_in(self, other: Self, *, fields: Iterable[str] | None = None) -> bool:
        """Compare only input fields."""
        if type(self) is not type(other):
            return False
        flist = list(fields) if fields is not None else list(self._in_fields())
        return all(getattr(self, f) == getattr(other, f) for f in flist)
