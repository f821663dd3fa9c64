"""
JSON Pointer and JSON Patch glue.

Pointer resolution, patch application and the wire encoding of plain
patches are delegated to the jsonpointer and jsonpatch libraries. This
module adapts them to the engine's models: application never raises for
an inapplicable patch, it returns an ApplyResult instead.
"""

import copy
import json
from typing import Any, Optional, Sequence, Union

import jsonpatch
from jsonpointer import JsonPointer, JsonPointerException

from .models import ApplyResult, DecodeResult, PatchError, PatchOperation
from .validation import validate_patch_document


Token = Union[str, int]
Pointer = tuple[Token, ...]


# --- Pointers ---

def parse_path(path: str) -> list[str]:
    """
    Parse a JSON Pointer into its unescaped tokens.

    Args:
        path: JSON Pointer (e.g., "/items/0/a~1b")

    Returns:
        List of tokens (e.g., ["items", "0", "a/b"])

    Raises:
        JsonPointerException: If the pointer is malformed
    """
    return JsonPointer(path).parts


def to_path(pointer: Sequence[Token]) -> str:
    """
    Build a JSON Pointer string from a token sequence.

    Tokens are escaped ('~' -> '~0', '/' -> '~1'); an empty sequence
    gives the whole-document pointer "".
    """
    return JsonPointer.from_parts(pointer).path


def is_index_token(token: str) -> bool:
    """Whether a token could address an array element."""
    return token == "-" or (token.isascii() and token.isdigit())


def get_value_at_path(obj: Any, path: str) -> Any:
    """
    Get the value at a JSON Pointer.

    Raises:
        JsonPointerException: If the pointer cannot be resolved
    """
    return JsonPointer(path).resolve(obj)


# --- Values ---

def primitive_kind(value: Any) -> Optional[str]:
    """
    Classify a primitive JSON value.

    Returns "string", "bool", "number" or "null", or None for arrays,
    objects and anything that is not a JSON primitive. Integers and
    floats share the "number" kind; bool is never a number.
    """
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return None


def values_equal(a: Any, b: Any) -> bool:
    """
    Structural equality of two JSON values.

    Unlike ``==`` this keeps booleans apart from numbers, so
    ``values_equal(True, 1)`` is False. Object member order is ignored.
    """
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    kind = primitive_kind(a)
    return kind is not None and kind == primitive_kind(b) and a == b


# --- Application ---

def apply_plain_patch(
    patch: Sequence[PatchOperation],
    value: Any
) -> ApplyResult:
    """
    Apply a plain patch to a document.

    Operations are applied left to right, each against the document as
    modified by the previous ones. The input document is not modified.

    Args:
        patch: Plain operations to apply
        value: The document to patch

    Returns:
        ApplyResult with the patched document, or the first failure

    Example:
        >>> result = apply_plain_patch([PatchOperation.add("/b", 2)], {"a": 1})
        >>> result.value
        {'a': 1, 'b': 2}
    """
    document = copy.deepcopy(value)
    # Operation values end up inside the document; copy them too.
    operations = copy.deepcopy([operation.to_json_patch() for operation in patch])

    for index, operation in enumerate(operations):
        try:
            document = jsonpatch.JsonPatch([operation]).apply(document, in_place=True)
        except (jsonpatch.JsonPatchException, JsonPointerException, TypeError) as e:
            return ApplyResult(
                success=False,
                value=None,
                error=PatchError(
                    path=operation["path"],
                    message=str(e),
                    operation_index=index
                )
            )

    return ApplyResult(success=True, value=document, error=None)


# --- Wire form ---

def encode_patch(patch: Sequence[PatchOperation]) -> str:
    """Serialize a plain patch to its JSON text form."""
    return jsonpatch.JsonPatch(
        [operation.to_json_patch() for operation in patch]
    ).to_string()


def decode_operations(raw: Any) -> DecodeResult:
    """
    Decode an already-parsed JSON document into plain operations.

    Every structural problem is reported, each tagged with the index of
    the operation it belongs to.
    """
    errors = validate_patch_document(raw)
    if errors:
        return DecodeResult(success=False, patch=[], errors=errors)

    return DecodeResult(
        success=True,
        patch=[PatchOperation.from_json_patch(item) for item in raw],
        errors=[]
    )


def decode_patch(text: str) -> DecodeResult:
    """Decode a plain patch from its JSON text form."""
    try:
        raw = json.loads(text)
    except ValueError as e:
        return DecodeResult(
            success=False,
            patch=[],
            errors=[PatchError(path="", message=f"Invalid JSON: {e}", operation_index=0)]
        )

    return decode_operations(raw)
