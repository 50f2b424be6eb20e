"""Tests for record property queries and updates."""

import pytest

from candy_values.errors import PropertyError, PropertyErrorKind
from candy_values.properties import (
    Query,
    QueryMode,
    Update,
    UpdateMode,
    UpdateModeKind,
    UpdateRequest,
    select_properties,
    update_properties,
)
from candy_values.types import Field, Nat, Record, Text


def _profile():
    address = Record((Field("city", Text("Zurich")), Field("zip", Nat(8000))))
    return [
        Field("id", Nat(7), immutable=True),
        Field("name", Text("Ada")),
        Field("address", address),
    ]


class TestSelectProperties:
    """Tests for select_properties."""

    def test_all(self):
        """Test selecting every property."""
        assert select_properties(_profile(), QueryMode.all()) == _profile()

    def test_some(self):
        """Test selecting named properties in query order."""
        selected = select_properties(_profile(), QueryMode.some([Query("name"), Query("id")]))
        assert [f.name for f in selected] == ["name", "id"]
        assert selected[1].immutable

    def test_nested(self):
        """Test narrowing a nested record."""
        query = Query("address", (Query("zip"),))
        (selected,) = select_properties(_profile(), QueryMode.some([query]))
        assert selected.value == Record((Field("zip", Nat(8000)),))

    def test_not_found(self):
        """Test querying a missing property."""
        with pytest.raises(PropertyError) as excinfo:
            select_properties(_profile(), QueryMode.some([Query("email")]))
        assert excinfo.value.kind is PropertyErrorKind.NOT_FOUND
        assert excinfo.value.name == "email"

    def test_nested_on_scalar(self):
        """Test descending into a property that is not a record."""
        with pytest.raises(PropertyError) as excinfo:
            select_properties(_profile(), QueryMode.some([Query("name", (Query("x"),))]))
        assert excinfo.value.kind is PropertyErrorKind.INVALID_REQUEST


class TestUpdateProperties:
    """Tests for update_properties."""

    def test_set_replaces(self):
        """Test replacing a value in place."""
        updated = update_properties(_profile(), [Update("name", UpdateMode.set(Text("Grace")))])
        assert updated[1] == Field("name", Text("Grace"))

    def test_set_appends_missing(self):
        """Test that setting an unknown property adds it."""
        updated = update_properties(_profile(), [Update("email", UpdateMode.set(Text("a@b")))])
        assert updated[-1] == Field("email", Text("a@b"))
        assert len(updated) == 4

    def test_lock(self):
        """Test that lock marks the field immutable."""
        updated = update_properties(_profile(), [Update("name", UpdateMode.lock(Text("Ada")))])
        assert updated[1].immutable
        with pytest.raises(PropertyError) as excinfo:
            update_properties(updated, [Update("name", UpdateMode.set(Text("Bob")))])
        assert excinfo.value.kind is PropertyErrorKind.IMMUTABLE

    def test_immutable(self):
        """Test that immutable fields refuse updates."""
        with pytest.raises(PropertyError) as excinfo:
            update_properties(_profile(), [Update("id", UpdateMode.set(Nat(8)))])
        assert excinfo.value.kind is PropertyErrorKind.IMMUTABLE
        assert "id" in str(excinfo.value)

    def test_next(self):
        """Test nested updates."""
        update = Update("address", UpdateMode.next([Update("zip", UpdateMode.set(Nat(8001)))]))
        updated = update_properties(_profile(), [update])
        assert updated[2].value.get("zip").value == Nat(8001)
        assert updated[2].value.get("city").value == Text("Zurich")

    def test_next_missing(self):
        """Test nested updates on a missing property."""
        update = Update("phone", UpdateMode.next([]))
        with pytest.raises(PropertyError) as excinfo:
            update_properties(_profile(), [update])
        assert excinfo.value.kind is PropertyErrorKind.NOT_FOUND

    def test_next_on_scalar(self):
        """Test nested updates on a property that is not a record."""
        update = Update("name", UpdateMode.next([]))
        with pytest.raises(PropertyError) as excinfo:
            update_properties(_profile(), [update])
        assert excinfo.value.kind is PropertyErrorKind.INVALID_REQUEST

    def test_set_without_value(self):
        """Test that a set with no value is invalid."""
        with pytest.raises(PropertyError) as excinfo:
            update_properties(_profile(), [Update("name", UpdateMode(UpdateModeKind.SET))])
        assert excinfo.value.kind is PropertyErrorKind.INVALID_REQUEST

    def test_input_untouched(self):
        """Test that updates never mutate their input."""
        fields = _profile()
        update_properties(fields, [Update("name", UpdateMode.set(Text("Grace")))])
        assert fields == _profile()

    def test_update_request(self):
        """Test applying a request addressed to an object."""
        request = UpdateRequest("user-1", (Update("name", UpdateMode.set(Text("Grace"))),))
        assert request.apply(_profile())[1].value == Text("Grace")
