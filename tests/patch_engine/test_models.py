"""Tests for the patch models."""

import pytest
from pydantic import TypeAdapter, ValidationError
from src.patch_engine.models import (
    Add,
    InvertibleOperation,
    Move,
    OperationType,
    PatchOperation,
    Remove,
    Replace,
)


class TestPatchOperation:
    """Tests for plain operations."""

    def test_pointer_must_start_with_slash(self):
        """A non-empty pointer without a leading '/' is rejected."""
        with pytest.raises(ValidationError):
            PatchOperation.add("a", 1)

    def test_from_pointer_checked(self):
        """The from pointer is validated too."""
        with pytest.raises(ValidationError):
            PatchOperation.move("a", "/b")

    def test_root_pointer_allowed(self):
        """The empty pointer addresses the whole document."""
        assert PatchOperation.replace("", 1).path == ""

    def test_to_json_patch(self):
        """Only the members meaningful for the operation are emitted."""
        assert PatchOperation.remove("/a").to_json_patch() == {"op": "remove", "path": "/a"}
        assert PatchOperation.copy("/a", "/b").to_json_patch() == {
            "op": "copy", "from": "/a", "path": "/b"
        }
        assert PatchOperation.test("/a", None).to_json_patch() == {
            "op": "test", "path": "/a", "value": None
        }

    def test_from_json_patch(self):
        """The RFC 6902 object form is read back."""
        operation = PatchOperation.from_json_patch({"op": "move", "from": "/a", "path": "/b"})
        assert operation.op == OperationType.MOVE
        assert operation.from_path == "/a"
        assert operation == PatchOperation.move("/a", "/b")

    def test_from_alias(self):
        """The source pointer is populated from 'from'."""
        operation = PatchOperation.model_validate({"op": "copy", "from": "/x", "path": "/y"})
        assert operation.from_path == "/x"

    def test_frozen(self):
        """Operations are immutable."""
        operation = PatchOperation.add("/a", 1)
        with pytest.raises(ValidationError):
            operation.path = "/b"


class TestInvertibleOperations:
    """Tests for invertible operations."""

    def test_move_alias(self):
        """Move accepts both the field name and the 'from' alias."""
        assert Move(from_path="/a", path="/b") == Move.model_validate({"from": "/a", "path": "/b"})

    def test_pointer_validated(self):
        """Invertible operations validate their pointers."""
        with pytest.raises(ValidationError):
            Remove(path="oops", old_value=1)
        with pytest.raises(ValidationError):
            Move(from_path="oops", path="/b")

    def test_equality(self):
        """Operations compare by value."""
        assert Replace(path="/a", old_value=1, value=2) == Replace(path="/a", old_value=1, value=2)
        assert Add(path="/a", value=1) != Remove(path="/a", old_value=1)

    def test_discriminated_union(self):
        """The op member selects the operation class."""
        adapter = TypeAdapter(list[InvertibleOperation])
        patch = adapter.validate_python([
            {"op": "add", "path": "/a", "value": 1},
            {"op": "remove", "path": "/b", "old_value": 2},
            {"op": "replace", "path": "/c", "old_value": 3, "value": 4},
            {"op": "move", "from": "/d", "path": "/e"},
        ])
        assert patch == [
            Add(path="/a", value=1),
            Remove(path="/b", old_value=2),
            Replace(path="/c", old_value=3, value=4),
            Move(from_path="/d", path="/e"),
        ]

    def test_unknown_op_rejected(self):
        """Copy and test have no invertible counterpart."""
        adapter = TypeAdapter(InvertibleOperation)
        with pytest.raises(ValidationError):
            adapter.validate_python({"op": "copy", "from": "/a", "path": "/b"})
