"""Tests for numeric coercion and the blob encoding."""

import pytest

from candy_values.conversion import (
    coerce_bool,
    coerce_float,
    coerce_int,
    coerce_opaque_id,
    coerce_text,
    int_to_blob,
    nat_to_blob,
    round_half_away_from_zero,
    to_blob,
)
from candy_values.errors import NotRepresentableError, UnsupportedError, ValueOverflowError
from candy_values.types import (
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Float,
    Int,
    Int8,
    Int16,
    Map,
    Nat,
    Nat16,
    Nat64,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Text,
)


class TestRounding:
    """Tests for float to integer rounding."""

    def test_ties(self):
        """Test that ties round away from zero."""
        assert round_half_away_from_zero(0.5) == 1
        assert round_half_away_from_zero(-0.5) == -1
        assert round_half_away_from_zero(2.5) == 3

    def test_just_below_half(self):
        """Test the largest double below one half."""
        assert round_half_away_from_zero(0.49999999999999994) == 0


class TestCoerceInt:
    """Tests for coerce_int, which raises instead of returning None."""

    def test_not_numeric(self):
        """Test that text has no integer value."""
        with pytest.raises(NotRepresentableError):
            coerce_int(Text("1"), None, True)

    def test_negative_float_unsigned(self):
        """Test that negative floats are not representable as unsigned."""
        with pytest.raises(NotRepresentableError):
            coerce_int(Float(-1.0), None, False)

    def test_overflow(self):
        """Test narrowing out of range."""
        with pytest.raises(ValueOverflowError):
            coerce_int(Nat(300), 8, False)
        with pytest.raises(ValueOverflowError):
            coerce_int(Int(-1), 64, False)

    def test_in_range(self):
        """Test successful conversions."""
        assert coerce_int(Int8(-3), 16, True) == -3
        assert coerce_int(Float(41.6), 8, False) == 42

    def test_errors_are_builtin_subclasses(self):
        """Test that callers can catch the builtin exception types."""
        with pytest.raises(ValueError):
            coerce_int(Text("1"), None, True)
        with pytest.raises(OverflowError):
            coerce_int(Nat(300), 8, False)


class TestCoerceScalars:
    """Tests for the bool, opaque id and text coercions."""

    def test_matching_variant(self):
        """Test that each coercion accepts its own variant."""
        opaque_id = OpaqueId(b"\x04")
        assert coerce_bool(Bool(True)) is True
        assert coerce_opaque_id(opaque_id) is opaque_id
        assert coerce_text(Text("x")) == "x"

    def test_other_variants(self):
        """Test that other variants are not representable."""
        with pytest.raises(NotRepresentableError):
            coerce_bool(Nat(1))
        with pytest.raises(NotRepresentableError):
            coerce_opaque_id(Blob(b"\x04"))
        with pytest.raises(NotRepresentableError):
            coerce_text(OpaqueId(b"\x04"))


class TestCoerceFloat:
    """Tests for coerce_float."""

    def test_integer(self):
        """Test that integers widen to float."""
        assert coerce_float(Int(-2)) == -2.0

    def test_too_large(self):
        """Test an integer beyond the float range."""
        with pytest.raises(ValueOverflowError):
            coerce_float(Nat(10 ** 400))

    def test_not_numeric(self):
        """Test that bool has no float value."""
        with pytest.raises(NotRepresentableError):
            coerce_float(Bool(False))


class TestToBlob:
    """Tests for the canonical byte encoding."""

    def test_fixed_width_unsigned(self):
        """Test big-endian fixed-width encoding."""
        assert Nat16(2566).to_blob() == b"\x0a\x06"
        assert Nat64(1).to_blob() == b"\x00" * 7 + b"\x01"

    def test_fixed_width_signed(self):
        """Test two's complement for signed widths."""
        assert Int8(-1).to_blob() == b"\xff"
        assert Int16(-2).to_blob() == b"\xff\xfe"

    def test_arbitrary_int(self):
        """Test the sign byte plus base-128 digits."""
        assert Int(-123).to_blob() == b"\x01\x7b"
        assert Int(0).to_blob() == b"\x00\x00"
        assert Int(128).to_blob() == b"\x00\x01\x00"
        assert int_to_blob(-1) == b"\x01\x01"

    def test_arbitrary_nat(self):
        """Test minimal big-endian base-256 digits."""
        assert Nat(0).to_blob() == b"\x00"
        assert Nat(255).to_blob() == b"\xff"
        assert Nat(256).to_blob() == b"\x01\x00"
        assert nat_to_blob(1 << 64) == b"\x01" + b"\x00" * 8

    def test_text(self):
        """Test four bytes per code point."""
        assert Text("A").to_blob() == b"\x00\x00\x00A"
        assert Text("€").to_blob() == b"\x00\x00\x20\xac"
        assert Text("").to_blob() == b""

    def test_raw_bytes(self):
        """Test variants that are already bytes."""
        assert Blob(b"\x01\x02").to_blob() == b"\x01\x02"
        assert Bytes.thawed([3, 4]).to_blob() == b"\x03\x04"
        assert OpaqueId(b"\x04").to_blob() == b"\x04"

    @pytest.mark.parametrize(
        "value",
        [
            Bool(True),
            Float(1.0),
            Array.frozen([]),
            Record(()),
            Optional(None),
            Nats.frozen([1]),
            Map(()),
            Empty(),
        ],
    )
    def test_unsupported(self, value):
        """Test variants with no blob form."""
        with pytest.raises(UnsupportedError) as excinfo:
            to_blob(value)
        assert excinfo.value.variant == value.kind
