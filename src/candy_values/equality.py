"""Structural equality and hashing for candy values.

Equality is variant sensitive: Nat(5) and Nat8(5) are different values.
The frozen/thawed tag of a collection is not part of its identity.

Hashes of ordered containers fold child hashes in position order; Map and
Set add their element hashes together so insertion order never matters.
"""

from __future__ import annotations

from typing import Any, Sequence

from candy_values.types import (
    INTEGER_TYPES,
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Float,
    Floats,
    Map,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)

_HASH_MASK = (1 << 64) - 1

_SCALAR_TYPES = INTEGER_TYPES + (Float, Text, Bool, Blob)


def _sequences_equal(left: Sequence[Any], right: Sequence[Any]) -> bool:
    # Element-wise ==, so NaN never equals itself through an identity shortcut
    return len(left) == len(right) and all(a == b for a, b in zip(left, right))


def values_equal(left: Value, right: Value) -> bool:
    """Return whether two values carry the same variant and equal payloads.

    Map keys and Set elements that are not equal to themselves (NaN floats)
    never match, so such containers are unequal even to themselves.
    """
    if type(left) is not type(right):
        return False
    other: Any = right
    if isinstance(left, _SCALAR_TYPES):
        return left.value == other.value
    if isinstance(left, OpaqueId):
        return left.raw == other.raw
    if isinstance(left, Empty):
        return True
    if isinstance(left, Bytes):
        return bytes(left.items) == bytes(other.items)
    if isinstance(left, (Nats, Floats)):
        return _sequences_equal(left.items, other.items)
    if isinstance(left, Array):
        return len(left.items) == len(other.items) and all(
            values_equal(a, b) for a, b in zip(left.items, other.items)
        )
    if isinstance(left, Record):
        return len(left.fields) == len(other.fields) and all(
            a.name == b.name and a.immutable == b.immutable and values_equal(a.value, b.value)
            for a, b in zip(left.fields, other.fields)
        )
    if isinstance(left, Optional):
        if left.value is None or other.value is None:
            return left.value is None and other.value is None
        return values_equal(left.value, other.value)
    if isinstance(left, Map):
        if len(left) != len(other):
            return False
        for key, value in left.entries:
            if not values_equal(key, key) or key not in other:
                return False
            if not values_equal(value, other[key]):
                return False
        return True
    if isinstance(left, Set):
        return len(left) == len(other) and all(
            values_equal(e, e) and e in other for e in left.elements
        )
    raise TypeError(f"Unknown value variant: {type(left).__name__}")


def value_hash(value: Value) -> int:
    """Return a hash consistent with values_equal."""
    tag = type(value).__name__
    if isinstance(value, _SCALAR_TYPES):
        return hash((tag, value.value))
    if isinstance(value, OpaqueId):
        return hash((tag, value.raw))
    if isinstance(value, Empty):
        return hash(tag)
    if isinstance(value, Bytes):
        return hash((tag, bytes(value.items)))
    if isinstance(value, (Nats, Floats)):
        return hash((tag, tuple(value.items)))
    if isinstance(value, Array):
        return hash((tag, tuple(value_hash(item) for item in value.items)))
    if isinstance(value, Record):
        return hash((tag, tuple((f.name, value_hash(f.value), f.immutable) for f in value.fields)))
    if isinstance(value, Optional):
        return hash((tag, None if value.value is None else value_hash(value.value)))
    if isinstance(value, Map):
        total = sum(hash((value_hash(k), value_hash(v))) for k, v in value.entries)
        return hash((tag, total & _HASH_MASK))
    if isinstance(value, Set):
        total = sum(value_hash(e) for e in value.elements)
        return hash((tag, total & _HASH_MASK))
    raise TypeError(f"Unknown value variant: {type(value).__name__}")
