"""Value model for candy values.

A candy value is one of a fixed set of variants. Each variant is a small
immutable dataclass deriving from Value; code that needs per-variant
behaviour dispatches on the concrete class.

Collection variants (Bytes, Nats, Floats, Array) carry a Mutability tag.
A frozen collection stores an immutable container (bytes/tuple), a thawed
one stores a mutable container (bytearray/list) that belongs to exactly
one value: every constructor and copy() builds a fresh container.
"""

from __future__ import annotations

import base64
import binascii
import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterable, Iterator, Mapping

from candy_values.errors import NotRepresentableError, ValueOverflowError


class Mutability(Enum):
    """Mutability tag carried by collection variants."""

    FROZEN = "frozen"
    THAWED = "thawed"


def fits_width(number: int, bits: int | None, signed: bool) -> bool:
    """Return whether number fits an integer of the given width and sign.

    A bits value of None means arbitrary precision.
    """
    if not signed and number < 0:
        return False
    if bits is None:
        return True
    if signed:
        limit = 1 << (bits - 1)
        return -limit <= number < limit
    return number < (1 << bits)


class Value:
    """Base class for all candy value variants."""

    @property
    def kind(self) -> str:
        """Return the variant name."""
        return type(self).__name__

    def copy(self) -> Value:
        """Return a copy that shares no thawed container with this value."""
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        from candy_values.equality import values_equal

        return values_equal(self, other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        from candy_values.equality import value_hash

        return value_hash(self)

    def __str__(self) -> str:
        return self.to_string()

    # --- Numeric and scalar coercions (None when not representable) ---

    def _coerce_int(self, bits: int | None, signed: bool) -> int | None:
        from candy_values.conversion import coerce_int

        try:
            return coerce_int(self, bits, signed)
        except (NotRepresentableError, ValueOverflowError):
            return None

    def to_nat(self) -> int | None:
        return self._coerce_int(None, False)

    def to_nat8(self) -> int | None:
        return self._coerce_int(8, False)

    def to_nat16(self) -> int | None:
        return self._coerce_int(16, False)

    def to_nat32(self) -> int | None:
        return self._coerce_int(32, False)

    def to_nat64(self) -> int | None:
        return self._coerce_int(64, False)

    def to_int(self) -> int | None:
        return self._coerce_int(None, True)

    def to_int8(self) -> int | None:
        return self._coerce_int(8, True)

    def to_int16(self) -> int | None:
        return self._coerce_int(16, True)

    def to_int32(self) -> int | None:
        return self._coerce_int(32, True)

    def to_int64(self) -> int | None:
        return self._coerce_int(64, True)

    def to_float(self) -> float | None:
        from candy_values.conversion import coerce_float

        try:
            return coerce_float(self)
        except (NotRepresentableError, ValueOverflowError):
            return None

    def to_bool(self) -> bool | None:
        from candy_values.conversion import coerce_bool

        try:
            return coerce_bool(self)
        except NotRepresentableError:
            return None

    def to_opaque_id(self) -> OpaqueId | None:
        from candy_values.conversion import coerce_opaque_id

        try:
            return coerce_opaque_id(self)
        except NotRepresentableError:
            return None

    def to_text(self) -> str | None:
        from candy_values.conversion import coerce_text

        try:
            return coerce_text(self)
        except NotRepresentableError:
            return None

    # --- Encodings ---

    def to_blob(self) -> bytes:
        """Return the canonical byte form; raises UnsupportedError for structural variants."""
        from candy_values.conversion import to_blob

        return to_blob(self)

    def to_json(self) -> str:
        from candy_values.serialize import to_json

        return to_json(self)

    def to_string(self) -> str:
        from candy_values.serialize import to_string

        return to_string(self)

    def get_value_size(self) -> int:
        from candy_values.size import get_value_size

        return get_value_size(self)


# --- Integers ---


@dataclass(frozen=True, eq=False)
class _Integer(Value):
    value: int

    BITS: ClassVar[int | None] = None
    SIGNED: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{self.kind} expects an int, got {type(self.value).__name__}")
        if not fits_width(self.value, self.BITS, self.SIGNED):
            raise ValueOverflowError(f"{self.value} does not fit in {self.kind}")


@dataclass(frozen=True, eq=False)
class Int(_Integer):
    """Arbitrary-precision signed integer."""


@dataclass(frozen=True, eq=False)
class Int8(_Integer):
    BITS: ClassVar[int | None] = 8


@dataclass(frozen=True, eq=False)
class Int16(_Integer):
    BITS: ClassVar[int | None] = 16


@dataclass(frozen=True, eq=False)
class Int32(_Integer):
    BITS: ClassVar[int | None] = 32


@dataclass(frozen=True, eq=False)
class Int64(_Integer):
    BITS: ClassVar[int | None] = 64


@dataclass(frozen=True, eq=False)
class Nat(_Integer):
    """Arbitrary-precision unsigned integer."""

    SIGNED: ClassVar[bool] = False


@dataclass(frozen=True, eq=False)
class Nat8(_Integer):
    BITS: ClassVar[int | None] = 8
    SIGNED: ClassVar[bool] = False


@dataclass(frozen=True, eq=False)
class Nat16(_Integer):
    BITS: ClassVar[int | None] = 16
    SIGNED: ClassVar[bool] = False


@dataclass(frozen=True, eq=False)
class Nat32(_Integer):
    BITS: ClassVar[int | None] = 32
    SIGNED: ClassVar[bool] = False


@dataclass(frozen=True, eq=False)
class Nat64(_Integer):
    BITS: ClassVar[int | None] = 64
    SIGNED: ClassVar[bool] = False


INTEGER_TYPES: tuple[type[_Integer], ...] = (
    Int, Int8, Int16, Int32, Int64, Nat, Nat8, Nat16, Nat32, Nat64,
)


# --- Scalars ---


@dataclass(frozen=True, eq=False)
class Float(Value):
    """64-bit IEEE-754 float."""

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Float expects a number, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, eq=False)
class Text(Value):
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Text expects a str, got {type(self.value).__name__}")


@dataclass(frozen=True, eq=False)
class Bool(Value):
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"Bool expects a bool, got {type(self.value).__name__}")


@dataclass(frozen=True, eq=False)
class Blob(Value):
    """Immutable raw bytes."""

    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", bytes(self.value))

    def __len__(self) -> int:
        return len(self.value)


@dataclass(frozen=True, eq=False)
class OpaqueId(Value):
    """Opaque network identifier, handled as raw bytes.

    The textual form is the CRC-32 of the raw bytes (big-endian) followed by
    the raw bytes, base32 encoded in lower case without padding and grouped
    in blocks of five characters separated by dashes.
    """

    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))

    def to_text(self) -> str:
        checksum = zlib.crc32(self.raw).to_bytes(4, "big")
        encoded = base64.b32encode(checksum + self.raw).decode("ascii").lower().rstrip("=")
        return "-".join(encoded[i : i + 5] for i in range(0, len(encoded), 5))

    @classmethod
    def from_text(cls, text: str) -> OpaqueId:
        """Parse the textual form, verifying its checksum."""
        compact = text.replace("-", "").upper()
        padded = compact + "=" * (-len(compact) % 8)
        try:
            decoded = base64.b32decode(padded)
        except (binascii.Error, ValueError) as error:
            raise NotRepresentableError(f"Invalid opaque id text: '{text}'") from error
        if len(decoded) < 4:
            raise NotRepresentableError(f"Opaque id text too short: '{text}'")
        opaque_id = cls(decoded[4:])
        if opaque_id.to_text() != text:
            raise NotRepresentableError(f"Opaque id checksum mismatch: '{text}'")
        return opaque_id


@dataclass(frozen=True, eq=False)
class Empty(Value):
    pass


# --- Collections with a mutability tag ---


@dataclass(frozen=True, eq=False)
class _Collection(Value):
    items: Any = ()
    mutability: Mutability = Mutability.FROZEN

    def __post_init__(self) -> None:
        if not isinstance(self.mutability, Mutability):
            raise TypeError(f"Expected Mutability, got {type(self.mutability).__name__}")
        elements = [self._check_element(e) for e in self.items]
        if self.mutability is Mutability.THAWED:
            container: Any = self._thawed_container(elements)
        else:
            container = self._frozen_container(elements)
        object.__setattr__(self, "items", container)

    def _check_element(self, element: Any) -> Any:
        return element

    def _frozen_container(self, elements: list[Any]) -> Any:
        return tuple(elements)

    def _thawed_container(self, elements: list[Any]) -> Any:
        return elements

    @classmethod
    def frozen(cls, items: Iterable[Any] = ()) -> Any:
        return cls(items, Mutability.FROZEN)

    @classmethod
    def thawed(cls, items: Iterable[Any] = ()) -> Any:
        return cls(items, Mutability.THAWED)

    @property
    def is_thawed(self) -> bool:
        return self.mutability is Mutability.THAWED

    def freeze(self) -> Any:
        """Return a frozen value holding a copy of the contents."""
        return type(self)(self.items, Mutability.FROZEN)

    def thaw(self) -> Any:
        """Return a thawed value with its own mutable container."""
        return type(self)(self.items, Mutability.THAWED)

    def copy(self) -> Any:
        return type(self)(self.items, self.mutability)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]


@dataclass(frozen=True, eq=False)
class Bytes(_Collection):
    """Byte string with a frozen/thawed tag."""

    def _check_element(self, element: Any) -> int:
        if isinstance(element, bool) or not isinstance(element, int) or not 0 <= element <= 255:
            raise ValueOverflowError(f"Bytes element out of range: {element!r}")
        return element

    def _frozen_container(self, elements: list[Any]) -> bytes:
        return bytes(elements)

    def _thawed_container(self, elements: list[Any]) -> bytearray:
        return bytearray(elements)


@dataclass(frozen=True, eq=False)
class Nats(_Collection):
    """Vector of arbitrary-precision unsigned integers."""

    def _check_element(self, element: Any) -> int:
        if isinstance(element, bool) or not isinstance(element, int):
            raise TypeError(f"Nats expects ints, got {type(element).__name__}")
        if element < 0:
            raise ValueOverflowError(f"Nats element is negative: {element}")
        return element


@dataclass(frozen=True, eq=False)
class Floats(_Collection):
    """Vector of 64-bit floats."""

    def _check_element(self, element: Any) -> float:
        if isinstance(element, bool) or not isinstance(element, (int, float)):
            raise TypeError(f"Floats expects numbers, got {type(element).__name__}")
        return float(element)


@dataclass(frozen=True, eq=False)
class Array(_Collection):
    """Heterogeneous list of values."""

    def _check_element(self, element: Any) -> Value:
        if not isinstance(element, Value):
            raise TypeError(f"Array expects Value elements, got {type(element).__name__}")
        return element

    def _copy_items(self) -> list[Value]:
        return [item.copy() for item in self.items]

    def freeze(self) -> Array:
        return Array(self._copy_items(), Mutability.FROZEN)

    def thaw(self) -> Array:
        return Array(self._copy_items(), Mutability.THAWED)

    def copy(self) -> Array:
        return Array(self._copy_items(), self.mutability)


# --- Records, optionals, associative collections ---


@dataclass(frozen=True)
class Field:
    """Named member of a Record."""

    name: str
    value: Value
    immutable: bool = False

    def copy(self) -> Field:
        return Field(self.name, self.value.copy(), self.immutable)


@dataclass(frozen=True, eq=False)
class Record(Value):
    """Ordered list of named fields."""

    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        for f in fields:
            if not isinstance(f, Field):
                raise TypeError(f"Record expects Field members, got {type(f).__name__}")
        object.__setattr__(self, "fields", fields)

    def get(self, name: str) -> Field | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def copy(self) -> Record:
        return Record(tuple(f.copy() for f in self.fields))

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)


@dataclass(frozen=True, eq=False)
class Optional(Value):
    """A value that may be absent."""

    value: Value | None = None

    def __post_init__(self) -> None:
        if self.value is not None and not isinstance(self.value, Value):
            raise TypeError(f"Optional expects a Value, got {type(self.value).__name__}")

    @property
    def is_none(self) -> bool:
        return self.value is None

    def copy(self) -> Optional:
        return self if self.value is None else Optional(self.value.copy())


NONE = Optional(None)


@dataclass(frozen=True, eq=False)
class Map(Value):
    """Associative collection from values to values (insertion ordered).

    Repeated keys keep the position of their first insertion and the
    value of their last.
    """

    entries: Any = ()
    _index: dict[Value, Value] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        source = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        index: dict[Value, Value] = {}
        for key, value in source:
            if not isinstance(key, Value) or not isinstance(value, Value):
                raise TypeError("Map keys and values must be Value instances")
            index[key] = value
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "entries", tuple(index.items()))

    def get(self, key: Value, default: Value | None = None) -> Value | None:
        return self._index.get(key, default)

    def keys(self) -> list[Value]:
        return [k for k, _ in self.entries]

    def values(self) -> list[Value]:
        return [v for _, v in self.entries]

    def items(self) -> tuple[tuple[Value, Value], ...]:
        return self.entries

    def copy(self) -> Map:
        return Map((k.copy(), v.copy()) for k, v in self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __getitem__(self, key: Value) -> Value:
        return self._index[key]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.keys())


@dataclass(frozen=True, eq=False)
class Set(Value):
    """Collection of distinct values (first-insertion ordered)."""

    elements: Any = ()
    _index: dict[Value, None] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[Value, None] = {}
        for element in self.elements:
            if not isinstance(element, Value):
                raise TypeError("Set elements must be Value instances")
            index.setdefault(element, None)
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "elements", tuple(index))

    def copy(self) -> Set:
        return Set(e.copy() for e in self.elements)

    def __contains__(self, element: object) -> bool:
        return element in self._index

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.elements)


# Every concrete variant, in declaration order
VARIANT_TYPES: tuple[type[Value], ...] = INTEGER_TYPES + (
    Float, Text, Bool, Blob, Bytes, Record, OpaqueId, Optional,
    Array, Nats, Floats, Map, Set, Empty,
)


def to_value(obj: Any) -> Value:
    """Convert a native Python object into a candy value.

    Python's own mutable/immutable split picks the collection tag: lists and
    bytearrays become thawed collections, tuples and bytes frozen ones.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Optional(None)
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Int(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, bytes):
        return Blob(obj)
    if isinstance(obj, bytearray):
        return Bytes.thawed(obj)
    if isinstance(obj, (list, tuple)):
        if obj and all(isinstance(item, Field) for item in obj):
            return Record(tuple(obj))
        converted = [to_value(item) for item in obj]
        if isinstance(obj, list):
            return Array.thawed(converted)
        return Array.frozen(converted)
    if isinstance(obj, dict):
        return Map((to_value(k), to_value(v)) for k, v in obj.items())
    if isinstance(obj, (set, frozenset)):
        return Set(to_value(item) for item in obj)
    raise NotRepresentableError(f"Cannot convert {type(obj).__name__} to a candy value")
