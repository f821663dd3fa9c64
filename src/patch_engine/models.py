"""
Pydantic models for plain and invertible JSON patches.

Plain operations follow JSON Patch (RFC 6902). Invertible operations carry
the values they overwrite so that a patch can be reversed exactly.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_pointer(v: str) -> str:
    if v and not v.startswith("/"):
        raise ValueError("pointer must be empty or start with '/'")
    return v


class OperationType(str, Enum):
    """
    Plain JSON Patch operations.

    Only ADD, REMOVE, REPLACE and MOVE have invertible counterparts;
    TEST carries the old value of a following REMOVE/REPLACE, and COPY
    cannot be inverted at all.
    """

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


VALUE_OPERATIONS = {OperationType.ADD, OperationType.REPLACE, OperationType.TEST}
FROM_OPERATIONS = {OperationType.MOVE, OperationType.COPY}


class PatchOperation(BaseModel):
    """
    A single plain JSON Patch operation.

    Examples:
        Add a member:
            {"op": "add", "path": "/foo", "value": 1}

        Move an array element:
            {"op": "move", "from": "/items/0", "path": "/items/2"}

    Use the factory classmethods (``add``, ``remove``, ...) rather than
    the constructor so that only the members meaningful for the operation
    are populated.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    op: OperationType = Field(
        ...,
        description="The operation to perform"
    )
    path: str = Field(
        ...,
        description="JSON Pointer to the target location ('' is the whole document)"
    )
    value: Any = Field(
        default=None,
        description="Value for add, replace and test operations"
    )
    from_path: Optional[str] = Field(
        default=None,
        alias="from",
        description="Source pointer for move and copy operations"
    )

    @field_validator("path", "from_path")
    @classmethod
    def validate_pointer_format(cls, v: Optional[str]) -> Optional[str]:
        """Pointers must be empty or start with /."""
        if v is None:
            return v
        return _check_pointer(v)

    @classmethod
    def add(cls, path: str, value: Any) -> "PatchOperation":
        return cls(op=OperationType.ADD, path=path, value=value, from_path=None)

    @classmethod
    def remove(cls, path: str) -> "PatchOperation":
        return cls(op=OperationType.REMOVE, path=path, value=None, from_path=None)

    @classmethod
    def replace(cls, path: str, value: Any) -> "PatchOperation":
        return cls(op=OperationType.REPLACE, path=path, value=value, from_path=None)

    @classmethod
    def move(cls, from_path: str, path: str) -> "PatchOperation":
        return cls(op=OperationType.MOVE, path=path, value=None, from_path=from_path)

    @classmethod
    def copy(cls, from_path: str, path: str) -> "PatchOperation":
        return cls(op=OperationType.COPY, path=path, value=None, from_path=from_path)

    @classmethod
    def test(cls, path: str, value: Any) -> "PatchOperation":
        return cls(op=OperationType.TEST, path=path, value=value, from_path=None)

    @classmethod
    def from_json_patch(cls, data: dict[str, Any]) -> "PatchOperation":
        """
        Build an operation from its RFC 6902 object form.

        The object is expected to be structurally valid already
        (see ``validation.validate_operation``).
        """
        op = OperationType(data["op"])
        if op in FROM_OPERATIONS:
            return cls(op=op, path=data["path"], value=None, from_path=data["from"])
        return cls(op=op, path=data["path"], value=data.get("value"), from_path=None)

    def to_json_patch(self) -> dict[str, Any]:
        """Return the RFC 6902 object form of this operation."""
        data: dict[str, Any] = {"op": self.op.value}
        if self.op in FROM_OPERATIONS:
            data["from"] = self.from_path
        data["path"] = self.path
        if self.op in VALUE_OPERATIONS:
            data["value"] = self.value
        return data


# --- Invertible operations ---

class _InvertibleBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(
        ...,
        description="JSON Pointer to the target location"
    )

    @field_validator("path")
    @classmethod
    def validate_pointer_format(cls, v: str) -> str:
        return _check_pointer(v)


class Add(_InvertibleBase):
    """Insert ``value`` at ``path``; inverted by a Remove of the same value."""

    op: Literal["add"] = "add"
    value: Any = Field(
        ...,
        description="The inserted value"
    )


class Remove(_InvertibleBase):
    """Remove the value at ``path``, remembering what was there."""

    op: Literal["remove"] = "remove"
    old_value: Any = Field(
        ...,
        description="The value being removed"
    )


class Replace(_InvertibleBase):
    """Overwrite ``old_value`` at ``path`` with ``value``."""

    op: Literal["replace"] = "replace"
    old_value: Any = Field(
        ...,
        description="The value being overwritten"
    )
    value: Any = Field(
        ...,
        description="The new value"
    )


class Move(_InvertibleBase):
    """Move the value at ``from_path`` to ``path``."""

    op: Literal["move"] = "move"
    from_path: str = Field(
        ...,
        alias="from",
        description="Source pointer"
    )

    @field_validator("from_path")
    @classmethod
    def validate_from_format(cls, v: str) -> str:
        return _check_pointer(v)


InvertibleOperation = Annotated[
    Union[Add, Remove, Replace, Move],
    Field(discriminator="op"),
]


# --- Results ---

class PatchError(BaseModel):
    """Error details for a patch operation."""

    path: str = Field(description="Pointer of the offending operation")
    message: str = Field(description="Error message")
    operation_index: int = Field(description="Index of the offending operation")


class ApplyResult(BaseModel):
    """Result of applying a patch to a document."""

    success: bool = Field(description="Whether every operation was applied")
    value: Any = Field(
        default=None,
        description="The patched document (if successful)"
    )
    error: Optional[PatchError] = Field(
        default=None,
        description="The first failing operation (if any)"
    )


class ParseResult(BaseModel):
    """Result of recovering an invertible patch from a plain patch."""

    success: bool = Field(description="Whether the plain patch had invertible shape")
    patch: list[InvertibleOperation] = Field(
        default_factory=list,
        description="The invertible patch (if successful)"
    )
    error: Optional[PatchError] = Field(
        default=None,
        description="Why the plain patch could not be parsed"
    )


class DecodeResult(BaseModel):
    """Result of decoding a plain patch from its wire form."""

    success: bool = Field(description="Whether the document was a valid patch")
    patch: list[PatchOperation] = Field(
        default_factory=list,
        description="Decoded operations (if successful)"
    )
    errors: list[PatchError] = Field(
        default_factory=list,
        description="Structural errors (if any)"
    )
