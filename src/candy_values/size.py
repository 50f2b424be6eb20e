"""Estimated encoded size of candy values.

The estimate is the cost function used by workspace paging. It follows the
variable-length wire format rather than native widths, so 32- and 64-bit
integers count as 3 and 4 bytes.
"""

from __future__ import annotations

from typing import Iterable

from candy_values.types import (
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Float,
    Floats,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Map,
    Nat,
    Nat8,
    Nat16,
    Nat32,
    Nat64,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)

_FIXED_SIZES: dict[type[Value], int] = {
    Nat8: 1,
    Nat16: 2,
    Nat32: 3,
    Nat64: 4,
    Int8: 1,
    Int16: 2,
    Int32: 3,
    Int64: 4,
    Float: 4,
    Bool: 1,
    Empty: 0,
}


def base256_digits(number: int) -> int:
    """Number of base-256 digits of a non-negative integer (at least one)."""
    return max(1, (number.bit_length() + 7) // 8)


def get_value_size(value: Value) -> int:
    """Return the estimated number of bytes the value occupies once encoded."""
    fixed = _FIXED_SIZES.get(type(value))
    if fixed is not None:
        return fixed
    if isinstance(value, Nat):
        return base256_digits(value.value)
    if isinstance(value, Int):
        return base256_digits(abs(value.value)) + 1
    if isinstance(value, Text):
        return len(value.value) * 4
    if isinstance(value, Record):
        return sum(1 + len(f.name) * 4 + get_value_size(f.value) for f in value.fields)
    if isinstance(value, Array):
        return sum(1 + get_value_size(item) for item in value.items)
    if isinstance(value, Optional):
        return 0 if value.value is None else get_value_size(value.value)
    if isinstance(value, (Nats, Floats)):
        return len(value.items) * 4 + 2
    if isinstance(value, Bytes):
        return len(value.items) + 2
    if isinstance(value, Blob):
        return len(value.value)
    if isinstance(value, OpaqueId):
        return len(value.raw)
    if isinstance(value, Map):
        return sum(1 + get_value_size(k) + get_value_size(v) for k, v in value.entries)
    if isinstance(value, Set):
        return sum(1 + get_value_size(e) for e in value.elements)
    raise TypeError(f"Unknown value variant: {type(value).__name__}")


def get_data_zone_size(zone: Iterable[Value]) -> int:
    """Estimated size of every chunk in a zone."""
    return sum(get_value_size(chunk) for chunk in zone)
