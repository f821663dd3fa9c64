"""
Weight functions for choosing between candidate patches.

A weight function maps an invertible patch to an integer cost; the diff
engine keeps the candidate with the lowest cost.
"""

from typing import Callable, Sequence

from .invertible import to_minimal_patch
from .models import InvertibleOperation
from .operations import encode_patch


WeightFunction = Callable[[Sequence[InvertibleOperation]], int]


def encoded_length(patch: Sequence[InvertibleOperation]) -> int:
    """
    Length of the encoded minimal patch.

    Accounts for the size of embedded values, at the price of encoding
    every candidate.
    """
    return len(encode_patch(to_minimal_patch(patch)))


def operation_count(patch: Sequence[InvertibleOperation]) -> int:
    """
    Number of operations.

    Cheap, but blind to value sizes: it can prefer several small
    operations over one replace that is shorter on the wire.
    """
    return len(patch)


WEIGHT_FUNCTIONS: dict[str, WeightFunction] = {
    "encoded_length": encoded_length,
    "operation_count": operation_count,
}
