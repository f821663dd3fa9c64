"""
Diff engine.

Computes a patch that turns one JSON value into another.

    diff(a, b)                          -> plain patch
    invertible_diff(a, b)               -> invertible patch
    diff_with_custom_weight(a, b, w)    -> invertible patch, cost measured by w
    cheap_diff(a, b)                    -> invertible patch, linear list walk

Comparison is recursive and pointer-scoped:
    1. Same primitive kind: nothing if equal, otherwise a Replace
    2. Two arrays: list diff
    3. Two objects: member-wise diff, or a single Replace if that weighs less
    4. Anything else: a Replace

The optimizing list diff walks both arrays from the tail. Removing or
inserting at index i never renumbers indices below i, so operations
collected for the tail stay valid while the head is still being compared.
At every mismatch three continuations compete: remove the element of a,
insert the element of b, or diff the two elements in place. The winner
is the one whose complete patch weighs least; ties go to remove, then
insert, then in-place.
"""

from typing import Any, Callable, Sequence

from .invertible import to_minimal_patch
from .models import Add, InvertibleOperation, PatchOperation, Remove, Replace
from .operations import Pointer, primitive_kind, to_path
from .weights import WeightFunction, encoded_length


Compare = Callable[[Pointer, Any, Any], list[InvertibleOperation]]

# Final ordering: every removal (highest index first), then insertions and
# in-place element diffs (lowest index first).
SortKey = tuple[int, int]
Keyed = list[tuple[SortKey, InvertibleOperation]]


def _replace(pointer: Pointer, a: Any, b: Any) -> list[InvertibleOperation]:
    return [Replace(path=to_path(pointer), old_value=a, value=b)]


def _diff_objects(
    pointer: Pointer,
    a: dict[str, Any],
    b: dict[str, Any],
    compare: Compare
) -> list[InvertibleOperation]:
    """Member-wise diff of two objects; member order is not significant."""
    operations: list[InvertibleOperation] = []

    for key, value in a.items():
        if key in b:
            operations.extend(compare(pointer + (key,), value, b[key]))
        else:
            operations.append(Remove(path=to_path(pointer + (key,)), old_value=value))

    for key, value in b.items():
        if key not in a:
            operations.append(Add(path=to_path(pointer + (key,)), value=value))

    return operations


class _Differ:
    """Cost-optimizing diff under a single weight function."""

    def __init__(self, weight: WeightFunction):
        self.weight = weight

    def compare(self, pointer: Pointer, a: Any, b: Any) -> list[InvertibleOperation]:
        kind = primitive_kind(a)
        if kind is not None and kind == primitive_kind(b):
            return [] if a == b else _replace(pointer, a, b)

        if isinstance(a, list) and isinstance(b, list):
            return self._diff_lists(pointer, a, b)

        if isinstance(a, dict) and isinstance(b, dict):
            operations = _diff_objects(pointer, a, b, self.compare)
            replacement = _replace(pointer, a, b)
            if self.weight(replacement) < self.weight(operations):
                return replacement
            return operations

        return _replace(pointer, a, b)

    def _diff_lists(self, pointer: Pointer, a: list, b: list) -> list[InvertibleOperation]:
        """
        Optimizing list diff.

        State (i, j) stands for the unprocessed prefixes a[:i] and b[:j].
        The best patch for each state is memoized and states are evaluated
        from an explicit stack, so long arrays neither repeat work nor
        recurse once per element.
        """
        best: dict[tuple[int, int], Keyed] = {}
        elements: dict[tuple[int, int], list[InvertibleOperation]] = {}

        def element_diff(i: int, j: int) -> list[InvertibleOperation]:
            if (i, j) not in elements:
                elements[(i, j)] = self.compare(pointer + (j - 1,), a[i - 1], b[j - 1])
            return elements[(i, j)]

        def removal(i: int) -> tuple[SortKey, InvertibleOperation]:
            return (0, -i), Remove(path=to_path(pointer + (i,)), old_value=a[i])

        def insertion(j: int) -> tuple[SortKey, InvertibleOperation]:
            return (1, j), Add(path=to_path(pointer + (j,)), value=b[j])

        stack = [(len(a), len(b))]
        while stack:
            i, j = stack[-1]
            if (i, j) in best:
                stack.pop()
                continue

            if i == 0:
                best[(i, j)] = [insertion(k) for k in range(j)]
                stack.pop()
                continue

            if j == 0:
                best[(i, j)] = [removal(k) for k in reversed(range(i))]
                stack.pop()
                continue

            changes = element_diff(i, j)
            if not changes:
                if (i - 1, j - 1) not in best:
                    stack.append((i - 1, j - 1))
                    continue
                best[(i, j)] = best[(i - 1, j - 1)]
                stack.pop()
                continue

            pending = [
                state for state in ((i - 1, j), (i, j - 1), (i - 1, j - 1))
                if state not in best
            ]
            if pending:
                stack.extend(pending)
                continue

            candidates = [
                [removal(i - 1)] + best[(i - 1, j)],
                [insertion(j - 1)] + best[(i, j - 1)],
                [((1, j - 1), operation) for operation in changes] + best[(i - 1, j - 1)],
            ]
            # min() keeps the first of equally weighted candidates
            best[(i, j)] = min(
                candidates,
                key=lambda candidate: self.weight([operation for _, operation in candidate])
            )
            stack.pop()

        keyed = sorted(best[(len(a), len(b))], key=lambda item: item[0])
        return [operation for _, operation in keyed]


def diff_with_custom_weight(
    a: Any,
    b: Any,
    weight: WeightFunction
) -> list[InvertibleOperation]:
    """
    Compute an invertible patch from ``a`` to ``b`` under a custom weight.

    Args:
        a: Source value
        b: Target value
        weight: Cost of a candidate patch; lower is preferred

    Returns:
        Invertible patch that turns ``a`` into ``b``

    Example:
        >>> from src.patch_engine.weights import operation_count
        >>> diff_with_custom_weight([1, 2], [2], operation_count)
        [Remove(path='/0', op='remove', old_value=1)]
    """
    return _Differ(weight).compare((), a, b)


def invertible_diff(a: Any, b: Any) -> list[InvertibleOperation]:
    """Compute the invertible patch from ``a`` to ``b`` with the smallest encoding."""
    return diff_with_custom_weight(a, b, encoded_length)


def diff(a: Any, b: Any) -> list[PatchOperation]:
    """
    Compute a plain patch from ``a`` to ``b``.

    Example:
        >>> patch = diff([1, 2, 3, 4], [1, 3])
        >>> # patch = [PatchOperation.remove("/3"), PatchOperation.remove("/1")]
    """
    return to_minimal_patch(invertible_diff(a, b))


# --- Cheap diff ---

def _cheap_compare(pointer: Pointer, a: Any, b: Any) -> list[InvertibleOperation]:
    kind = primitive_kind(a)
    if kind is not None and kind == primitive_kind(b):
        return [] if a == b else _replace(pointer, a, b)

    if isinstance(a, list) and isinstance(b, list):
        return _cheap_diff_lists(pointer, a, b)

    if isinstance(a, dict) and isinstance(b, dict):
        return _diff_objects(pointer, a, b, _cheap_compare)

    return _replace(pointer, a, b)


def _cheap_diff_lists(pointer: Pointer, a: Sequence, b: Sequence) -> list[InvertibleOperation]:
    operations: list[InvertibleOperation] = []

    if len(a) >= len(b):
        # Shrinking: highest index first so removals don't shift pending indices
        for index in reversed(range(len(a))):
            if index >= len(b):
                operations.append(Remove(path=to_path(pointer + (index,)), old_value=a[index]))
            else:
                operations.extend(_cheap_compare(pointer + (index,), a[index], b[index]))
    else:
        for index in range(len(b)):
            if index >= len(a):
                operations.append(Add(path=to_path(pointer + (index,)), value=b[index]))
            else:
                operations.extend(_cheap_compare(pointer + (index,), a[index], b[index]))

    return operations


def cheap_diff(a: Any, b: Any) -> list[InvertibleOperation]:
    """
    Compute an invertible patch position by position.

    Linear in the number of compared elements, but never looks for shifted
    elements: a single insertion at the front of an array makes every later
    element look replaced. The patch is always correct, just not minimal.
    """
    return _cheap_compare((), a, b)
