"""
Structural validation of plain patch documents.

Checks the RFC 6902 shape of each operation before it is turned into a
PatchOperation, so that malformed input is reported with the index of
every offending operation instead of failing on the first one.
"""

from typing import Any

from jsonpointer import JsonPointer, JsonPointerException

from .models import FROM_OPERATIONS, VALUE_OPERATIONS, OperationType, PatchError


def validate_pointer(
    pointer: Any,
    member: str,
    operation_index: int
) -> PatchError | None:
    """
    Validate that a member holds a well-formed JSON Pointer.

    Args:
        pointer: The member's value
        member: Member name ("path" or "from"), for the message
        operation_index: Index of the operation

    Returns:
        PatchError if invalid, None otherwise
    """
    if not isinstance(pointer, str):
        return PatchError(
            path="",
            message=f"'{member}' must be a string",
            operation_index=operation_index
        )

    try:
        JsonPointer(pointer)
    except JsonPointerException as e:
        return PatchError(
            path=pointer,
            message=f"Invalid '{member}' pointer: {e}",
            operation_index=operation_index
        )

    return None


def validate_operation(
    raw: Any,
    operation_index: int
) -> list[PatchError]:
    """
    Validate a single raw operation object.

    Args:
        raw: The decoded JSON object
        operation_index: Index of the operation

    Returns:
        List of validation errors (empty if valid)
    """
    if not isinstance(raw, dict):
        return [PatchError(
            path="",
            message="Operation must be an object",
            operation_index=operation_index
        )]

    errors: list[PatchError] = []

    path = raw.get("path")
    if "path" not in raw:
        errors.append(PatchError(
            path="",
            message="Operation does not contain 'path' member",
            operation_index=operation_index
        ))
    else:
        err = validate_pointer(path, "path", operation_index)
        if err:
            errors.append(err)

    location = path if isinstance(path, str) else ""

    if "op" not in raw:
        errors.append(PatchError(
            path=location,
            message="Operation does not contain 'op' member",
            operation_index=operation_index
        ))
        return errors

    try:
        op = OperationType(raw["op"])
    except ValueError:
        errors.append(PatchError(
            path=location,
            message=f"Unknown operation {raw['op']!r}",
            operation_index=operation_index
        ))
        return errors

    if op in VALUE_OPERATIONS and "value" not in raw:
        errors.append(PatchError(
            path=location,
            message=f"Operation '{op.value}' requires a 'value' member",
            operation_index=operation_index
        ))

    if op in FROM_OPERATIONS:
        if "from" not in raw:
            errors.append(PatchError(
                path=location,
                message=f"Operation '{op.value}' requires a 'from' member",
                operation_index=operation_index
            ))
        else:
            err = validate_pointer(raw["from"], "from", operation_index)
            if err:
                errors.append(err)

    return errors


def validate_patch_document(raw: Any) -> list[PatchError]:
    """
    Validate a decoded plain patch document.

    Args:
        raw: The decoded JSON document (expected to be an array)

    Returns:
        List of validation errors (empty if valid)
    """
    if not isinstance(raw, list):
        return [PatchError(
            path="",
            message="Patch must be an array of operations",
            operation_index=0
        )]

    errors: list[PatchError] = []
    for i, operation in enumerate(raw):
        errors.extend(validate_operation(operation, i))

    return errors
