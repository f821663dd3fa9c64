"""
Invertible patch algebra.

An invertible patch is a list of Add / Remove / Replace / Move operations
that remember the values they overwrite. The extra values are never read
when applying a patch; they only make inversion possible.

    invert(invert(p)) == p
    apply_patch(invert(p), apply_patch(p, v).value).value == v
    from_patch(to_patch(p)).patch == p
"""

from typing import Any, Sequence

from .models import (
    Add,
    ApplyResult,
    InvertibleOperation,
    Move,
    OperationType,
    ParseResult,
    PatchError,
    PatchOperation,
    Remove,
    Replace,
)
from .operations import apply_plain_patch, is_index_token, parse_path, values_equal


def invert_operation(operation: InvertibleOperation) -> InvertibleOperation:
    """Return the operation that undoes ``operation``."""
    if isinstance(operation, Add):
        return Remove(path=operation.path, old_value=operation.value)
    if isinstance(operation, Remove):
        return Add(path=operation.path, value=operation.old_value)
    if isinstance(operation, Replace):
        return Replace(path=operation.path, old_value=operation.value, value=operation.old_value)
    return Move(from_path=operation.path, path=operation.from_path)


def invert(patch: Sequence[InvertibleOperation]) -> list[InvertibleOperation]:
    """
    Invert a patch.

    Operation order is reversed and every operation is swapped for its
    opposite, so applying the result undoes the original patch.
    """
    return [invert_operation(operation) for operation in reversed(patch)]


def to_patch(patch: Sequence[InvertibleOperation]) -> list[PatchOperation]:
    """
    Convert to a plain patch that can be parsed back with from_patch.

    The old value of every Remove and Replace is preserved as a preceding
    test operation:

        Remove(p, old)       -> [test(p, old), remove(p)]
        Replace(p, old, new) -> [test(p, old), replace(p, new)]
    """
    result: list[PatchOperation] = []
    for operation in patch:
        if isinstance(operation, (Remove, Replace)):
            result.append(PatchOperation.test(operation.path, operation.old_value))
        result.extend(_minimal(operation))
    return result


def to_minimal_patch(patch: Sequence[InvertibleOperation]) -> list[PatchOperation]:
    """Convert to the smallest equivalent plain patch (no test operations)."""
    result: list[PatchOperation] = []
    for operation in patch:
        result.extend(_minimal(operation))
    return result


def _minimal(operation: InvertibleOperation) -> list[PatchOperation]:
    if isinstance(operation, Add):
        return [PatchOperation.add(operation.path, operation.value)]
    if isinstance(operation, Remove):
        return [PatchOperation.remove(operation.path)]
    if isinstance(operation, Replace):
        return [PatchOperation.replace(operation.path, operation.value)]
    return [PatchOperation.move(operation.from_path, operation.path)]


def apply_patch(patch: Sequence[InvertibleOperation], value: Any) -> ApplyResult:
    """
    Apply an invertible patch to a document.

    Equivalent to applying ``to_minimal_patch(patch)``; recorded old
    values are not checked against the document.
    """
    return apply_plain_patch(to_minimal_patch(patch), value)


# --- Parsing ---

def _parse_error(index: int, path: str, message: str) -> ParseResult:
    return ParseResult(
        success=False,
        patch=[],
        error=PatchError(path=path, message=message, operation_index=index)
    )


def from_patch(patch: Sequence[PatchOperation]) -> ParseResult:
    """
    Recover an invertible patch from a plain patch built by to_patch.

    Every remove and replace must be immediately preceded by a test of
    the same pointer; the tested value becomes the recorded old value.

    Args:
        patch: Plain operations, front to back

    Returns:
        ParseResult with the invertible patch, or the first shape error

    Example:
        >>> result = from_patch([
        ...     PatchOperation.test("/a", 1),
        ...     PatchOperation.remove("/a"),
        ... ])
        >>> result.patch
        [Remove(path='/a', op='remove', old_value=1)]
    """
    result: list[InvertibleOperation] = []
    index = 0

    while index < len(patch):
        operation = patch[index]

        if operation.op == OperationType.ADD:
            result.append(Add(path=operation.path, value=operation.value))
            index += 1

        elif operation.op == OperationType.MOVE:
            result.append(Move(from_path=operation.from_path, path=operation.path))
            index += 1

        elif operation.op == OperationType.TEST:
            following = patch[index + 1] if index + 1 < len(patch) else None
            if following is None or following.op not in (OperationType.REMOVE, OperationType.REPLACE):
                return _parse_error(
                    index,
                    operation.path,
                    "test must be immediately followed by a remove or replace of the same path"
                )
            if following.path != operation.path:
                return _parse_error(
                    index + 1,
                    following.path,
                    f"{following.op.value} of '{following.path}' does not match "
                    f"preceding test of '{operation.path}'"
                )

            if following.op == OperationType.REMOVE:
                result.append(Remove(path=operation.path, old_value=operation.value))
            else:
                result.append(Replace(
                    path=operation.path,
                    old_value=operation.value,
                    value=following.value
                ))
            index += 2

        elif operation.op == OperationType.REMOVE:
            return _parse_error(index, operation.path, "remove must be preceded by matching test")

        elif operation.op == OperationType.REPLACE:
            return _parse_error(index, operation.path, "replace must be preceded by matching test")

        else:
            # A removed copy target could be either a Remove or a Copy.
            return _parse_error(index, operation.path, "copy is ambiguous to invert")

    return ParseResult(success=True, patch=result, error=None)


# --- Merging ---

def _pointers(operation: InvertibleOperation) -> list[str]:
    if isinstance(operation, Move):
        return [operation.from_path, operation.path]
    return [operation.path]


def _independent(first: str, second: str) -> bool:
    """
    Whether operations at the two pointers commute.

    True only when the pointers diverge at an object member: the first
    differing tokens are not both possible array indices.
    """
    a, b = parse_path(first), parse_path(second)
    for token_a, token_b in zip(a, b):
        if token_a != token_b:
            return not (is_index_token(token_a) and is_index_token(token_b))
    return False


def _commutes(path: str, operations: Sequence[InvertibleOperation]) -> bool:
    return all(
        _independent(path, pointer)
        for operation in operations
        for pointer in _pointers(operation)
    )


def _is_proper_prefix(prefix: str, path: str) -> bool:
    a, b = parse_path(prefix), parse_path(path)
    return len(a) < len(b) and b[:len(a)] == a


def _fold_pair(patch: list[InvertibleOperation]) -> list[InvertibleOperation] | None:
    for r, remove in enumerate(patch):
        if not isinstance(remove, Remove):
            continue

        for s, add in enumerate(patch):
            if not isinstance(add, Add) or not values_equal(add.value, remove.old_value):
                continue
            if _is_proper_prefix(remove.path, add.path):
                continue

            move = Move(from_path=remove.path, path=add.path)

            # Slide the Remove forward until it sits right before the Add
            if r < s and _commutes(remove.path, patch[r + 1:s]):
                return patch[:r] + patch[r + 1:s] + [move] + patch[s + 1:]

            # Slide the Add past everything up to and including the Remove
            if s < r and _commutes(add.path, patch[s + 1:r + 1]):
                return patch[:s] + patch[s + 1:r] + [move] + patch[r + 1:]

    return None


def merge(patch: Sequence[InvertibleOperation]) -> list[InvertibleOperation]:
    """
    Fold Remove/Add pairs that carry equal values into Moves.

    Removes are considered in patch order; each is paired with the first
    Add (in patch order) holding a structurally equal value for which the
    fold keeps the patch's effect. A pair folds only when one operation
    can be moved next to the other across operations it provably commutes
    with. The Move takes the slot of whichever operation came second, and
    unrelated operations keep their relative order.

    The result applies to the same documents as ``patch`` and produces the
    same output, provided each removed value matches its recorded
    old value.
    """
    merged = list(patch)
    while True:
        folded = _fold_pair(merged)
        if folded is None:
            return merged
        merged = folded
