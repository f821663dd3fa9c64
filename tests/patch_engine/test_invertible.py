"""Tests for the invertible patch algebra."""

import pytest
from src.patch_engine.invertible import (
    apply_patch,
    from_patch,
    invert,
    merge,
    to_minimal_patch,
    to_patch,
)
from src.patch_engine.operations import apply_plain_patch
from src.patch_engine.models import (
    Add,
    Move,
    PatchOperation,
    Remove,
    Replace,
)


@pytest.fixture
def patch():
    return [
        Add(path="/a", value=1),
        Replace(path="/b", old_value=1, value=2),
        Move(from_path="/c", path="/d"),
        Remove(path="/e", old_value={"x": [3]}),
    ]


@pytest.fixture
def document():
    return {"b": 1, "c": "moved", "e": {"x": [3]}}


class TestInvert:
    """Tests for patch inversion."""

    def test_invert(self, patch):
        """Order is reversed and each operation swapped for its opposite."""
        assert invert(patch) == [
            Add(path="/e", value={"x": [3]}),
            Move(from_path="/d", path="/c"),
            Replace(path="/b", old_value=2, value=1),
            Remove(path="/a", old_value=1),
        ]

    def test_double_inversion(self, patch):
        """Inverting twice gives the original patch."""
        assert invert(invert(patch)) == patch

    def test_empty(self):
        """The empty patch is its own inverse."""
        assert invert([]) == []

    def test_undo(self, patch, document):
        """The inverse undoes the patch."""
        forward = apply_patch(patch, document)
        assert forward.success is True
        assert forward.value == {"a": 1, "b": 2, "d": "moved"}

        backward = apply_patch(invert(patch), forward.value)
        assert backward.success is True
        assert backward.value == document

    def test_undo_array_moves(self):
        """Inverted array moves restore the original order."""
        patch = [Move(from_path="/0", path="/2")]
        forward = apply_patch(patch, ["x", "y", "z"])
        assert forward.value == ["y", "z", "x"]
        assert apply_patch(invert(patch), forward.value).value == ["x", "y", "z"]


class TestToPatch:
    """Tests for conversion to plain patches."""

    def test_to_patch(self, patch):
        """Removes and replaces are preceded by a test of the old value."""
        assert to_patch(patch) == [
            PatchOperation.add("/a", 1),
            PatchOperation.test("/b", 1),
            PatchOperation.replace("/b", 2),
            PatchOperation.move("/c", "/d"),
            PatchOperation.test("/e", {"x": [3]}),
            PatchOperation.remove("/e"),
        ]

    def test_to_minimal_patch(self, patch):
        """The minimal form drops the tests."""
        assert to_minimal_patch(patch) == [
            PatchOperation.add("/a", 1),
            PatchOperation.replace("/b", 2),
            PatchOperation.move("/c", "/d"),
            PatchOperation.remove("/e"),
        ]

    def test_tested_form_applies(self, patch, document):
        """The test-annotated form applies to the original document."""
        assert apply_plain_patch(to_patch(patch), document) == apply_patch(patch, document)


class TestApplyPatch:
    """Tests for applying invertible patches."""

    def test_original_unchanged(self, patch, document):
        """The input document is not modified."""
        apply_patch(patch, document)
        assert document == {"b": 1, "c": "moved", "e": {"x": [3]}}

    def test_missing_member(self):
        """Removing a missing member is reported, not raised."""
        result = apply_patch([Remove(path="/missing", old_value=1)], {"a": 1})
        assert result.success is False
        assert result.error.operation_index == 0
        assert result.error.path == "/missing"
        assert "missing" in result.error.message

    def test_failure_index(self):
        """The error names the first failing operation."""
        result = apply_patch(
            [Add(path="/a", value=1), Replace(path="/x/y", old_value=1, value=2)],
            {}
        )
        assert result.success is False
        assert result.error.operation_index == 1

    def test_old_values_not_checked(self):
        """Recorded old values are metadata only."""
        result = apply_patch([Replace(path="/a", old_value="stale", value=2)], {"a": 1})
        assert result.success is True
        assert result.value == {"a": 2}


class TestFromPatch:
    """Tests for recovering invertible patches."""

    def test_empty(self):
        """Empty input parses to an empty patch."""
        result = from_patch([])
        assert result.success is True
        assert result.patch == []

    def test_round_trip(self, patch):
        """from_patch reverses to_patch."""
        result = from_patch(to_patch(patch))
        assert result.success is True
        assert result.patch == patch

    def test_copy_rejected(self):
        """Copy cannot be inverted."""
        result = from_patch([PatchOperation.copy("/a", "/b")])
        assert result.success is False
        assert "copy is ambiguous" in result.error.message

    def test_remove_without_test(self):
        """A bare remove is rejected."""
        result = from_patch([PatchOperation.remove("/a")])
        assert result.success is False
        assert result.error.message == "remove must be preceded by matching test"

    def test_replace_without_test(self):
        """A bare replace is rejected."""
        result = from_patch([
            PatchOperation.add("/a", 1),
            PatchOperation.replace("/a", 2),
        ])
        assert result.success is False
        assert result.error.message == "replace must be preceded by matching test"
        assert result.error.operation_index == 1

    def test_standalone_test_at_end(self):
        """A trailing test is rejected."""
        result = from_patch([PatchOperation.test("/a", 1)])
        assert result.success is False
        assert result.error.path == "/a"

    def test_test_followed_by_add(self):
        """A test must be followed by remove or replace."""
        result = from_patch([
            PatchOperation.test("/a", 1),
            PatchOperation.add("/a", 2),
        ])
        assert result.success is False
        assert result.error.operation_index == 0

    def test_mismatched_pointers(self):
        """Test and remove must target the same pointer."""
        result = from_patch([
            PatchOperation.test("/a", 1),
            PatchOperation.remove("/b"),
        ])
        assert result.success is False
        assert "'/a'" in result.error.message
        assert "'/b'" in result.error.message

    def test_test_and_replace(self):
        """A test followed by a replace becomes one Replace."""
        result = from_patch([
            PatchOperation.test("/a", 1),
            PatchOperation.replace("/a", 2),
        ])
        assert result.patch == [Replace(path="/a", old_value=1, value=2)]


class TestMerge:
    """Tests for folding remove/add pairs into moves."""

    def test_adjacent_pair(self):
        """Remove followed by an equal Add becomes a Move."""
        patch = [Remove(path="/a", old_value=[1, 2]), Add(path="/b", value=[1, 2])]
        assert merge(patch) == [Move(from_path="/a", path="/b")]

    def test_unrelated_operation_between(self):
        """Independent operations in between keep their place."""
        patch = [
            Remove(path="/a", old_value=1),
            Replace(path="/c", old_value=2, value=3),
            Add(path="/b", value=1),
        ]
        assert merge(patch) == [
            Replace(path="/c", old_value=2, value=3),
            Move(from_path="/a", path="/b"),
        ]

    def test_add_before_remove(self):
        """An Add that commutes with the Remove is folded too."""
        patch = [Add(path="/b", value=1), Remove(path="/a", old_value=1)]
        assert merge(patch) == [Move(from_path="/a", path="/b")]

    def test_array_shift_not_folded(self):
        """Operations on the same array do not commute."""
        patch = [
            Remove(path="/items/0", old_value=1),
            Add(path="/items/1", value=5),
            Add(path="/items/0", value=1),
        ]
        assert merge(patch) == patch

    def test_different_values_not_folded(self):
        """Only equal values are folded."""
        patch = [Remove(path="/a", old_value=1), Add(path="/b", value=True)]
        assert merge(patch) == patch

    def test_into_own_child_not_folded(self):
        """A value is never moved below its own location."""
        patch = [Remove(path="/a", old_value={"k": 1}), Add(path="/a/k", value={"k": 1})]
        assert merge(patch) == patch

    def test_first_matching_add_wins(self):
        """Among equal candidates the earliest Add is used."""
        patch = [
            Remove(path="/a", old_value=1),
            Add(path="/b", value=1),
            Add(path="/c", value=1),
        ]
        assert merge(patch) == [
            Move(from_path="/a", path="/b"),
            Add(path="/c", value=1),
        ]

    @pytest.mark.parametrize("patch,document", [
        (
            [Remove(path="/a", old_value=1), Replace(path="/c", old_value=2, value=3), Add(path="/b", value=1)],
            {"a": 1, "c": 2},
        ),
        (
            [Add(path="/b", value=1), Remove(path="/a", old_value=1)],
            {"a": 1},
        ),
        (
            [Remove(path="/2", old_value="z"), Add(path="/0", value="z")],
            ["x", "y", "z"],
        ),
    ])
    def test_same_result(self, patch, document):
        """Merged patches produce the same document."""
        assert apply_patch(merge(patch), document) == apply_patch(patch, document)
