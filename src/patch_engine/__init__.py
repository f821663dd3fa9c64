"""
Invertible JSON Patch Engine

Computes minimal JSON Patch (RFC 6902) edit scripts between JSON values,
in a form that can be inverted to undo the edit.
"""

__version__ = "0.1.0"

from .models import (
    Add,
    Remove,
    Replace,
    Move,
    InvertibleOperation,
    OperationType,
    PatchOperation,
    PatchError,
    ApplyResult,
    ParseResult,
    DecodeResult,
)
from .operations import (
    apply_plain_patch,
    encode_patch,
    decode_patch,
    decode_operations,
)
from .invertible import (
    invert,
    apply_patch,
    to_patch,
    to_minimal_patch,
    from_patch,
    merge,
)
from .weights import encoded_length, operation_count
from .diff import (
    diff,
    invertible_diff,
    diff_with_custom_weight,
    cheap_diff,
)

__all__ = [
    "__version__",
    "Add",
    "Remove",
    "Replace",
    "Move",
    "InvertibleOperation",
    "OperationType",
    "PatchOperation",
    "PatchError",
    "ApplyResult",
    "ParseResult",
    "DecodeResult",
    "apply_plain_patch",
    "encode_patch",
    "decode_patch",
    "decode_operations",
    "invert",
    "apply_patch",
    "to_patch",
    "to_minimal_patch",
    "from_patch",
    "merge",
    "encoded_length",
    "operation_count",
    "diff",
    "invertible_diff",
    "diff_with_custom_weight",
    "cheap_diff",
]
