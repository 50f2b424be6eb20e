"""Numeric coercions and the canonical byte ("blob") encoding."""

from __future__ import annotations

import math
import struct
from decimal import ROUND_HALF_UP, Decimal

from candy_values.errors import NotRepresentableError, UnsupportedError, ValueOverflowError
from candy_values.types import (
    INTEGER_TYPES,
    Blob,
    Bool,
    Bytes,
    Float,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Nat,
    Nat8,
    Nat16,
    Nat32,
    Nat64,
    OpaqueId,
    Text,
    Value,
    fits_width,
)

# Big-endian struct formats for the fixed-width integer variants
_FIXED_WIDTH_FORMATS: dict[type[Value], str] = {
    Nat8: ">B",
    Nat16: ">H",
    Nat32: ">I",
    Nat64: ">Q",
    Int8: ">b",
    Int16: ">h",
    Int32: ">i",
    Int64: ">q",
}


def round_half_away_from_zero(number: float) -> int:
    """Round a finite float to the nearest integer, ties away from zero."""
    # Decimal(float) is exact, so no binary rounding creeps in before the tie check
    return int(Decimal(number).to_integral_value(rounding=ROUND_HALF_UP))


def _describe_width(bits: int | None, signed: bool) -> str:
    prefix = "int" if signed else "nat"
    return prefix if bits is None else f"{prefix}{bits}"


def coerce_int(value: Value, bits: int | None, signed: bool) -> int:
    """Coerce a numeric value to an integer of the given width.

    Args:
        value: Source value; any integer variant or Float.
        bits: Target width (8/16/32/64), or None for arbitrary precision.
        signed: Whether the target is signed.

    Returns:
        The integer.

    Raises:
        NotRepresentableError: The variant is not numeric, the float is not
            finite, or a negative float was asked for an unsigned target.
        ValueOverflowError: The number does not fit the target width.
    """
    target = _describe_width(bits, signed)
    if isinstance(value, INTEGER_TYPES):
        number = value.value
    elif isinstance(value, Float):
        if not math.isfinite(value.value):
            raise NotRepresentableError(f"Cannot convert {value.value} to {target}")
        if not signed and value.value < 0.0:
            raise NotRepresentableError(f"Cannot convert negative float {value.value} to {target}")
        number = round_half_away_from_zero(value.value)
    else:
        raise NotRepresentableError(f"Cannot convert {value.kind} to {target}")

    if not fits_width(number, bits, signed):
        raise ValueOverflowError(f"{number} does not fit in {target}")
    return number


def coerce_float(value: Value) -> float:
    """Coerce a numeric value to a float."""
    if isinstance(value, Float):
        return value.value
    if isinstance(value, INTEGER_TYPES):
        try:
            return float(value.value)
        except OverflowError as error:
            raise ValueOverflowError(f"{value.kind} is too large for a float") from error
    raise NotRepresentableError(f"Cannot convert {value.kind} to float")


def coerce_bool(value: Value) -> bool:
    if isinstance(value, Bool):
        return value.value
    raise NotRepresentableError(f"Cannot convert {value.kind} to bool")


def coerce_opaque_id(value: Value) -> OpaqueId:
    if isinstance(value, OpaqueId):
        return value
    raise NotRepresentableError(f"Cannot convert {value.kind} to opaque id")


def coerce_text(value: Value) -> str:
    if isinstance(value, Text):
        return value.value
    raise NotRepresentableError(f"Cannot convert {value.kind} to text")


def nat_to_blob(number: int) -> bytes:
    """Minimal big-endian base-256 digits; zero is a single zero byte."""
    return number.to_bytes(max(1, (number.bit_length() + 7) // 8), "big")


def int_to_blob(number: int) -> bytes:
    """Sign byte (1 = negative) followed by minimal big-endian base-128 digits."""
    magnitude = abs(number)
    digits = []
    while True:
        digits.append(magnitude % 128)
        magnitude //= 128
        if magnitude == 0:
            break
    return bytes([1 if number < 0 else 0]) + bytes(reversed(digits))


def text_to_blob(text: str) -> bytes:
    """Each character as a 4-byte big-endian code point."""
    return b"".join(struct.pack(">I", ord(ch)) for ch in text)


def to_blob(value: Value) -> bytes:
    """Encode a value in its canonical byte form.

    Raises:
        UnsupportedError: For Bool, Float and every structural variant.
    """
    fmt = _FIXED_WIDTH_FORMATS.get(type(value))
    if fmt is not None:
        return struct.pack(fmt, value.value)  # type: ignore[attr-defined]
    if isinstance(value, Nat):
        return nat_to_blob(value.value)
    if isinstance(value, Int):
        return int_to_blob(value.value)
    if isinstance(value, Text):
        return text_to_blob(value.value)
    if isinstance(value, Blob):
        return value.value
    if isinstance(value, Bytes):
        return bytes(value.items)
    if isinstance(value, OpaqueId):
        return value.raw
    raise UnsupportedError(f"Cannot convert {value.kind} to blob", variant=value.kind)
