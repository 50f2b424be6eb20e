"""Display and JSON renderings of candy values.

to_string is diagnostic output: arbitrary-precision integers are grouped
with underscores. to_json is the canonical text encoding and never groups
digits. Both are best effort and return an empty rendering for variants
that have no textual form instead of raising.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal

from candy_values.types import (
    INTEGER_TYPES,
    Array,
    Blob,
    Bool,
    Bytes,
    Field,
    Float,
    Floats,
    Int,
    Map,
    Nat,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)


def format_float(number: float) -> str:
    """Render a float in plain decimal notation.

    Integral values drop the fractional part (1.0 -> "1"); everything else
    uses the shortest round-trip digits, expanded out of exponent notation.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        if number == 0 and math.copysign(1.0, number) < 0:
            return "-0"
        return str(int(number))
    text = repr(number)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def group_digits(number: int) -> str:
    """Insert an underscore every three digits from the right."""
    return f"{number:_}"


def _field_to_string(f: Field) -> str:
    marker = "var " if f.immutable else ""
    return f"{f.name}:{marker}{to_string(f.value)}; "


def to_string(value: Value) -> str:
    """Human-readable rendering of a value."""
    if isinstance(value, (Int, Nat)):
        return group_digits(value.value)
    if isinstance(value, INTEGER_TYPES):
        return str(value.value)
    if isinstance(value, Float):
        return format_float(value.value)
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Blob):
        return value.value.hex()
    if isinstance(value, Bytes):
        return bytes(value.items).hex()
    if isinstance(value, OpaqueId):
        return value.to_text()
    if isinstance(value, Optional):
        return "null" if value.value is None else to_string(value.value)
    if isinstance(value, Record):
        return "{" + "".join(_field_to_string(f) for f in value.fields).rstrip() + "}"
    if isinstance(value, Array):
        return "[" + " ".join("{" + to_string(item) + "}" for item in value.items) + "]"
    if isinstance(value, Set):
        return "[" + " ".join("{" + to_string(e) + "}" for e in value.elements) + "]"
    if isinstance(value, Nats):
        return "[" + " ".join(group_digits(n) for n in value.items) + "]"
    if isinstance(value, Floats):
        return "[" + " ".join(format_float(f) for f in value.items) + "]"
    if isinstance(value, Map):
        entries = "".join(f"{to_string(k)}:{to_string(v)}; " for k, v in value.entries)
        return "{" + entries.rstrip() + "}"
    return ""


def _json_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _json_float(number: float) -> str:
    if not math.isfinite(number):
        return "null"
    return format_float(number)


def to_json(value: Value) -> str:
    """Canonical JSON text of a value.

    Bool renders as the quoted string "true"/"false", not a JSON boolean.
    Map, Set and Empty have no JSON form and render as "".
    """
    if isinstance(value, INTEGER_TYPES):
        return str(value.value)
    if isinstance(value, Float):
        return _json_float(value.value)
    if isinstance(value, Text):
        return _json_string(value.value)
    if isinstance(value, Bool):
        return '"true"' if value.value else '"false"'
    if isinstance(value, Blob):
        return f'"{value.value.hex()}"'
    if isinstance(value, Bytes):
        return f'"{bytes(value.items).hex()}"'
    if isinstance(value, OpaqueId):
        return f'"{value.raw.hex()}"'
    if isinstance(value, Optional):
        return "null" if value.value is None else to_json(value.value)
    if isinstance(value, Record):
        members = ",".join(f"{_json_string(f.name)}:{to_json(f.value)}" for f in value.fields)
        return "{" + members + "}"
    if isinstance(value, Array):
        return "[" + ",".join(to_json(item) for item in value.items) + "]"
    if isinstance(value, Nats):
        return "[" + ",".join(str(n) for n in value.items) + "]"
    if isinstance(value, Floats):
        return "[" + ",".join(_json_float(f) for f in value.items) + "]"
    return ""
