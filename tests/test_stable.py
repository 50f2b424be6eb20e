"""Tests for the stable (persisted) form."""

from dataclasses import dataclass

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from candy_values.errors import UnsupportedError
from candy_values.stable import StableValue, destabilize, dump_stable, load_stable, stabilize
from candy_values.types import (
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Field,
    Float,
    Floats,
    Int,
    Int16,
    Map,
    Mutability,
    Nat,
    Nat64,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
)

scalars = st.one_of(
    st.integers().map(Int),
    st.integers(min_value=0).map(Nat),
    st.integers(min_value=-(1 << 15), max_value=(1 << 15) - 1).map(Int16),
    st.floats(allow_nan=False).map(Float),
    st.text(max_size=8).map(Text),
    st.booleans().map(Bool),
    st.binary(max_size=8).map(Blob),
    st.binary(max_size=8).map(OpaqueId),
    st.just(Empty()),
)

mutabilities = st.sampled_from(list(Mutability))


def _containers(children):
    return st.one_of(
        st.builds(Array, st.lists(children, max_size=4), mutabilities),
        st.builds(Bytes, st.binary(max_size=6), mutabilities),
        st.builds(Nats, st.lists(st.integers(min_value=0), max_size=4), mutabilities),
        st.builds(Floats, st.lists(st.floats(allow_nan=False), max_size=4), mutabilities),
        st.builds(Optional, st.one_of(st.none(), children)),
        st.lists(st.tuples(st.text(max_size=4), children, st.booleans()), max_size=4).map(
            lambda fields: Record(tuple(Field(n, v, i) for n, v, i in fields))
        ),
        st.lists(st.tuples(children, children), max_size=4).map(Map),
        st.lists(children, max_size=4).map(Set),
    )


values = st.recursive(scalars, _containers, max_leaves=12)


def _same_tags(left: Value, right: Value) -> bool:
    """Equality ignores mutability; compare the tags explicitly."""
    if isinstance(left, (Array, Bytes, Nats, Floats)):
        if left.mutability is not right.mutability:
            return False
    if isinstance(left, Array):
        return all(_same_tags(a, b) for a, b in zip(left.items, right.items))
    if isinstance(left, Record):
        return all(_same_tags(a.value, b.value) for a, b in zip(left.fields, right.fields))
    if isinstance(left, Optional) and left.value is not None:
        return _same_tags(left.value, right.value)
    return True


class TestStabilize:
    """Tests for stabilize and destabilize."""

    def test_scalars(self):
        """Test that scalars map one to one."""
        assert stabilize(Nat64(5)) == StableValue("Nat64", 5)
        assert destabilize(StableValue("Text", "x")) == Text("x")
        assert destabilize(stabilize(OpaqueId(b"\x04"))) == OpaqueId(b"\x04")

    def test_thawed_payload_is_immutable(self):
        """Test that thawed contents are copied into immutable storage."""
        stable = stabilize(Nats.thawed([1, 2]))
        assert stable.payload == (1, 2)
        assert stable.mutability is Mutability.THAWED
        stable = stabilize(Bytes.thawed([1]))
        assert stable.payload == b"\x01"

    def test_thawed_round_trip_gets_new_container(self):
        """Test that a reloaded thawed collection owns its container."""
        original = Array.thawed([Nat(1)])
        restored = destabilize(stabilize(original))
        assert restored == original
        assert restored.is_thawed
        restored.items.append(Nat(2))
        assert len(original) == 1

    def test_nested_record(self):
        """Test that records keep names, order and flags."""
        record = Record(
            (
                Field("id", Nat(1), immutable=True),
                Field("tags", Array.thawed([Text("a"), Optional(None)])),
            )
        )
        restored = destabilize(stabilize(record))
        assert restored == record
        assert restored.get("id").immutable
        assert restored.get("tags").value.is_thawed

    def test_missing_mutability_tag(self):
        """Test that a collection without its tag is refused."""
        with pytest.raises(UnsupportedError):
            destabilize(StableValue("Nats", (1,)))

    def test_unknown_kind(self):
        """Test that unknown kinds fail loudly in both directions."""
        with pytest.raises(UnsupportedError) as excinfo:
            destabilize(StableValue("Decimal", "1.5"))
        assert excinfo.value.variant == "Decimal"
        with pytest.raises(UnsupportedError):
            StableValue("Decimal", "1.5").to_primitive()
        with pytest.raises(UnsupportedError):
            StableValue.from_primitive({"kind": "Decimal", "value": "1.5"})

    def test_unknown_variant(self):
        """Test that a value outside the variant set cannot be stabilized."""

        @dataclass(frozen=True, eq=False)
        class Decimal(Value):
            digits: str

        with pytest.raises(UnsupportedError):
            stabilize(Array.frozen([Decimal("1.5")]))


class TestStableJson:
    """Tests for the JSON form of stable values."""

    def test_dump_and_load(self):
        """Test a persisted map survives reload."""
        value = Map({Text("k"): Bytes.thawed(b"\x00\xff"), Nat(1): Set([Empty()])})
        text = dump_stable(value)
        restored = load_stable(text)
        assert restored == value
        assert restored[Text("k")].is_thawed

    def test_primitive_shape(self):
        """Test the JSON-compatible primitive layout."""
        primitive = stabilize(Bytes.frozen(b"\x01\x02")).to_primitive()
        assert primitive == {"kind": "Bytes", "mutability": "frozen", "value": "0102"}

    @given(values)
    @settings(max_examples=100)
    def test_round_trip_property(self, value):
        """Test that reload reproduces the value and its tags."""
        restored = load_stable(dump_stable(value))
        assert restored == value
        assert _same_tags(value, restored)
