"""Stable (persisted) form of candy values.

Working values may hold thawed collections backed by mutable containers.
Before a value is persisted it is stabilized into a StableValue tree made
only of immutable parts; after reload it is destabilized back into a
working value. The two mappings are inverse to each other and refuse any
variant or kind they do not know rather than dropping it.

Thawed collections keep their THAWED tag in the stable form (their
contents are copied into immutable storage) so that destabilize can hand
back a fresh mutable container.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from candy_values.errors import UnsupportedError
from candy_values.types import (
    INTEGER_TYPES,
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Field,
    Float,
    Floats,
    Map,
    Mutability,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)

logger = logging.getLogger(__name__)

# Variants whose payload is a single immutable Python scalar
_SCALAR_KINDS: dict[str, type[Any]] = {
    cls.__name__: cls for cls in INTEGER_TYPES + (Float, Text, Bool)
}

_COLLECTION_KINDS: dict[str, type[Any]] = {
    "Bytes": Bytes,
    "Nats": Nats,
    "Floats": Floats,
    "Array": Array,
}


@dataclass(frozen=True)
class StableField:
    name: str
    value: StableValue
    immutable: bool


@dataclass(frozen=True)
class StableValue:
    """Immutable persisted form of a value.

    kind is the variant name. payload holds a scalar, bytes, None, or a
    tuple of StableValue / StableField / (key, value) pairs. mutability is
    set for collection kinds only.
    """

    kind: str
    payload: Any = None
    mutability: Mutability | None = None

    def to_primitive(self) -> dict[str, Any]:
        """Return JSON-compatible data for durable storage."""
        data: dict[str, Any] = {"kind": self.kind}
        if self.mutability is not None:
            data["mutability"] = self.mutability.value
        if self.kind in ("Blob", "OpaqueId", "Bytes"):
            data["value"] = self.payload.hex()
        elif self.kind in _SCALAR_KINDS or self.kind in ("Nats", "Floats"):
            data["value"] = list(self.payload) if isinstance(self.payload, tuple) else self.payload
        elif self.kind in ("Array", "Set"):
            data["value"] = [item.to_primitive() for item in self.payload]
        elif self.kind == "Record":
            data["value"] = [
                {"name": f.name, "value": f.value.to_primitive(), "immutable": f.immutable}
                for f in self.payload
            ]
        elif self.kind == "Map":
            data["value"] = [[k.to_primitive(), v.to_primitive()] for k, v in self.payload]
        elif self.kind == "Optional":
            data["value"] = None if self.payload is None else self.payload.to_primitive()
        elif self.kind != "Empty":
            raise UnsupportedError(f"Unknown stable kind: {self.kind}", variant=self.kind)
        return data

    @classmethod
    def from_primitive(cls, data: dict[str, Any]) -> StableValue:
        """Rebuild a stable value from to_primitive() output."""
        kind = data.get("kind")
        raw = data.get("value")
        mutability = Mutability(data["mutability"]) if "mutability" in data else None
        if kind in _SCALAR_KINDS:
            payload: Any = raw
        elif kind in ("Blob", "OpaqueId", "Bytes"):
            payload = bytes.fromhex(raw)
        elif kind in ("Nats", "Floats"):
            payload = tuple(raw)
        elif kind in ("Array", "Set"):
            payload = tuple(cls.from_primitive(item) for item in raw)
        elif kind == "Record":
            payload = tuple(
                StableField(f["name"], cls.from_primitive(f["value"]), f["immutable"]) for f in raw
            )
        elif kind == "Map":
            payload = tuple((cls.from_primitive(k), cls.from_primitive(v)) for k, v in raw)
        elif kind == "Optional":
            payload = None if raw is None else cls.from_primitive(raw)
        elif kind == "Empty":
            payload = None
        else:
            raise UnsupportedError(f"Unknown stable kind: {kind}", variant=kind)
        return cls(kind, payload, mutability)


def stabilize(value: Value) -> StableValue:
    """Convert a working value into its persisted form."""
    kind = value.kind
    if isinstance(value, (INTEGER_TYPES, Float, Text, Bool)):
        return StableValue(kind, value.value)
    if isinstance(value, Blob):
        return StableValue(kind, value.value)
    if isinstance(value, OpaqueId):
        return StableValue(kind, value.raw)
    if isinstance(value, Empty):
        return StableValue(kind)
    if isinstance(value, Bytes):
        return StableValue(kind, bytes(value.items), value.mutability)
    if isinstance(value, (Nats, Floats)):
        return StableValue(kind, tuple(value.items), value.mutability)
    if isinstance(value, Array):
        return StableValue(kind, tuple(stabilize(item) for item in value.items), value.mutability)
    if isinstance(value, Record):
        return StableValue(
            kind, tuple(StableField(f.name, stabilize(f.value), f.immutable) for f in value.fields)
        )
    if isinstance(value, Optional):
        return StableValue(kind, None if value.value is None else stabilize(value.value))
    if isinstance(value, Map):
        return StableValue(kind, tuple((stabilize(k), stabilize(v)) for k, v in value.entries))
    if isinstance(value, Set):
        return StableValue(kind, tuple(stabilize(e) for e in value.elements))
    raise UnsupportedError(f"Cannot stabilize {kind}", variant=kind)


def destabilize(stable: StableValue) -> Value:
    """Convert a persisted value back into a working value."""
    kind = stable.kind
    scalar_type = _SCALAR_KINDS.get(kind)
    if scalar_type is not None:
        return scalar_type(stable.payload)
    if kind == "Blob":
        return Blob(stable.payload)
    if kind == "OpaqueId":
        return OpaqueId(stable.payload)
    if kind == "Empty":
        return Empty()
    collection_type = _COLLECTION_KINDS.get(kind)
    if collection_type is not None:
        if stable.mutability is None:
            raise UnsupportedError(f"Stable {kind} is missing its mutability tag", variant=kind)
        items = stable.payload
        if kind == "Array":
            items = [destabilize(item) for item in items]
        return collection_type(items, stable.mutability)
    if kind == "Record":
        return Record(tuple(Field(f.name, destabilize(f.value), f.immutable) for f in stable.payload))
    if kind == "Optional":
        return Optional(None if stable.payload is None else destabilize(stable.payload))
    if kind == "Map":
        return Map((destabilize(k), destabilize(v)) for k, v in stable.payload)
    if kind == "Set":
        return Set(destabilize(e) for e in stable.payload)
    raise UnsupportedError(f"Cannot destabilize {kind}", variant=kind)


def dump_stable(value: Value) -> str:
    """Serialize a value's stable form to JSON text."""
    text = json.dumps(stabilize(value).to_primitive())
    logger.debug("stabilized %s into %d characters", value.kind, len(text))
    return text


def load_stable(text: str) -> Value:
    """Inverse of dump_stable."""
    value = destabilize(StableValue.from_primitive(json.loads(text)))
    logger.debug("destabilized %s from %d characters", value.kind, len(text))
    return value
