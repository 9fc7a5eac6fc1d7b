"""Shared resampling option enums and parsing helpers."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class ResampleMode(str, Enum):
    """Sample-rate conversion algorithms.

    ``nearest`` is a zero-order hold without an anti-aliasing filter and is the
    default. ``linear`` interpolates between neighbouring samples for consumers
    that are sensitive to the aliasing nearest-neighbour picking introduces.
    """

    NEAREST = "nearest"
    LINEAR = "linear"


EnumT = TypeVar("EnumT", bound=Enum)


def enum_values(enum_cls: type[EnumT]) -> tuple[str, ...]:
    """Return enum values for UI/API hinting in declaration order."""

    return tuple(str(member.value) for member in enum_cls)


def parse_case_insensitive_enum(raw_value: str, enum_cls: type[EnumT]) -> EnumT:
    """Parse enum values case-insensitively and raise ValueError with allowed values."""

    normalized = raw_value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == normalized:
            return member

    allowed = ", ".join(enum_values(enum_cls))
    enum_name = enum_cls.__name__
    raise ValueError(f"Invalid {enum_name}: '{raw_value}'. Allowed values: {allowed}.")
