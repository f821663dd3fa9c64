"""
Patch endpoints.

Thin HTTP layer over the patch engine. Every endpoint is a pure
computation on the request body; nothing is persisted.

Patches travel in their plain RFC 6902 form. Endpoints that need the
invertible form (invert, merge) expect the shape produced by
``to_patch``: every remove/replace preceded by a test of its old value.
"""

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from src.patch_engine import (
    PatchError,
    PatchOperation,
    apply_plain_patch,
    cheap_diff,
    decode_operations,
    diff_with_custom_weight,
    from_patch,
    invert,
    merge,
    to_minimal_patch,
    to_patch,
)
from src.patch_engine.models import InvertibleOperation
from src.patch_engine.weights import WEIGHT_FUNCTIONS

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---

class DiffRequest(BaseModel):
    """Request body for computing a patch between two documents."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": {"tags": ["a", "b", "c"], "name": "draft"},
                "target": {"tags": ["a", "c"], "name": "final"},
                "strategy": "optimal",
                "invertible": True
            }
        }
    )

    source: Any = Field(
        ...,
        description="Document to transform"
    )
    target: Any = Field(
        ...,
        description="Document to produce"
    )
    strategy: Optional[Literal["optimal", "cheap"]] = Field(
        default=None,
        description="Diff strategy (defaults to the configured strategy)"
    )
    weight: Optional[Literal["encoded_length", "operation_count"]] = Field(
        default=None,
        description="Cost function for the optimal strategy (defaults to configuration)"
    )
    invertible: bool = Field(
        default=False,
        description="Keep old values as test operations so the patch can be inverted"
    )
    merge: bool = Field(
        default=False,
        description="Fold matching remove/add pairs into moves"
    )


class DiffResponse(BaseModel):
    """Response for patch computation."""

    strategy: str
    operation_count: int = Field(description="Number of plain operations")
    patch: list[dict[str, Any]] = Field(description="RFC 6902 operations")


class ApplyRequest(BaseModel):
    """Request body for applying a patch."""

    document: Any = Field(
        ...,
        description="Document to patch"
    )
    patch: list[Any] = Field(
        ...,
        description="RFC 6902 operations"
    )


class ApplyResponse(BaseModel):
    """Response for patch application."""

    success: bool
    document: Any = None
    error: Optional[PatchError] = None


class PatchRequest(BaseModel):
    """Request body carrying a patch in invertible (test-annotated) form."""

    patch: list[Any] = Field(
        ...,
        description="RFC 6902 operations as produced by an invertible diff"
    )


class PatchResponse(BaseModel):
    """Response carrying a patch in invertible (test-annotated) form."""

    operation_count: int
    patch: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")
    detail: Any = Field(default=None, description="Additional error details")


ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Malformed patch"},
    500: {"model": ErrorResponse, "description": "Computation error"},
}


# --- Helpers ---

def _encode(patch: list[PatchOperation]) -> list[dict[str, Any]]:
    return [operation.to_json_patch() for operation in patch]


def _decode(raw: list[Any]) -> list[PatchOperation]:
    decoded = decode_operations(raw)
    if not decoded.success:
        logger.error("Patch validation failed: %d error(s)", len(decoded.errors))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "validation_error",
                "message": decoded.errors[0].message,
                "detail": [error.model_dump() for error in decoded.errors],
            },
        )
    return decoded.patch


def _decode_invertible(raw: list[Any]) -> list[InvertibleOperation]:
    parsed = from_patch(_decode(raw))
    if not parsed.success:
        logger.error("Patch is not invertible: %s", parsed.error.message)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "not_invertible",
                "message": parsed.error.message,
                "detail": parsed.error.model_dump(),
            },
        )
    return parsed.patch


def _computation_error(e: Exception) -> HTTPException:
    logger.exception("Computation error")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "computation_error", "message": str(e)},
    )


# --- Endpoints ---

@router.post(
    "/diff",
    response_model=DiffResponse,
    responses=ERROR_RESPONSES,
    summary="Compute a patch between two documents",
)
async def compute_diff(request: DiffRequest) -> DiffResponse:
    """
    Compute a patch that turns ``source`` into ``target``.

    The optimal strategy searches for the lightest patch under the chosen
    weight; the cheap strategy compares arrays position by position.
    """
    strategy = request.strategy or settings.diff_strategy
    weight_name = request.weight or settings.diff_weight

    logger.info(
        "Computing diff | strategy=%s weight=%s invertible=%s merge=%s",
        strategy,
        weight_name,
        request.invertible,
        request.merge,
    )

    try:
        if strategy == "cheap":
            result = cheap_diff(request.source, request.target)
        else:
            result = diff_with_custom_weight(
                request.source,
                request.target,
                WEIGHT_FUNCTIONS[weight_name],
            )

        if request.merge:
            result = merge(result)

        plain = to_patch(result) if request.invertible else to_minimal_patch(result)
    except Exception as e:
        raise _computation_error(e)

    return DiffResponse(
        strategy=strategy,
        operation_count=len(plain),
        patch=_encode(plain),
    )


@router.post(
    "/apply",
    response_model=ApplyResponse,
    responses=ERROR_RESPONSES,
    summary="Apply a patch to a document",
)
async def apply(request: ApplyRequest) -> ApplyResponse:
    """
    Apply a plain patch.

    A patch that cannot be applied to the document is not an HTTP error:
    the response reports ``success=false`` and the failing operation.
    """
    operations = _decode(request.patch)

    result = apply_plain_patch(operations, request.document)
    if not result.success:
        logger.info(
            "Patch not applicable | index=%s path=%s",
            result.error.operation_index,
            result.error.path,
        )

    return ApplyResponse(
        success=result.success,
        document=result.value,
        error=result.error,
    )


@router.post(
    "/invert",
    response_model=PatchResponse,
    responses=ERROR_RESPONSES,
    summary="Invert a patch",
)
async def invert_patch(request: PatchRequest) -> PatchResponse:
    """Return the patch that undoes the given invertible patch."""
    inverted = to_patch(invert(_decode_invertible(request.patch)))
    return PatchResponse(operation_count=len(inverted), patch=_encode(inverted))


@router.post(
    "/merge",
    response_model=PatchResponse,
    responses=ERROR_RESPONSES,
    summary="Fold remove/add pairs into moves",
)
async def merge_patch(request: PatchRequest) -> PatchResponse:
    """Return an equivalent invertible patch with matching remove/add pairs folded into moves."""
    merged = to_patch(merge(_decode_invertible(request.patch)))
    return PatchResponse(operation_count=len(merged), patch=_encode(merged))
