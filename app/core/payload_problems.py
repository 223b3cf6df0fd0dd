"""Classification and rendering of JSON payload mapping failures."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import status
from fastapi.responses import JSONResponse

from app.deserialization.failures import CauseKind
from app.deserialization.failures import PayloadMappingError
from app.schemas.problem import PROBLEM_MEDIA_TYPE
from app.schemas.problem import ProblemDetails
from app.schemas.submission import BomSubmitRequest
from app.schemas.submission import VexSubmitRequest

MAPPING_PROBLEM_TITLE = "The provided JSON payload could not be mapped"


def _multipart_guidance(artifact: str, endpoint: str) -> Callable[[str], str]:
    def render(cause_message: str) -> str:
        return (
            f"The {artifact} is too large to be transmitted safely via Base64 encoded JSON value. "
            f'Please use the "POST {endpoint}" endpoint with Content-Type "multipart/form-data" instead. '
            f"Original cause: {cause_message}"
        )

    return render


# Keyed by exact (request shape, field name); subclasses and other spellings do not match.
OVERSIZED_FIELD_GUIDANCE: dict[tuple[type, str], Callable[[str], str]] = {
    (BomSubmitRequest, "bom"): _multipart_guidance("BOM", "/api/v1/bom"),
    (VexSubmitRequest, "vex"): _multipart_guidance("VEX", "/api/v1/vex"),
}


def describe_mapping_failure(failure: PayloadMappingError) -> str:
    """Return the problem detail text for a payload mapping failure."""
    cause = failure.cause
    if cause is None or cause.kind is not CauseKind.STREAM_CONSTRAINT:
        return failure.message

    if not failure.path:
        return failure.message

    reference = failure.path[0]
    guidance = OVERSIZED_FIELD_GUIDANCE.get((reference.owner, reference.field_name))
    if guidance is None:
        return failure.message

    return guidance(cause.message)


def render_mapping_problem(detail: str) -> JSONResponse:
    """Wrap a mapping failure detail in a 400 problem document response."""
    problem = ProblemDetails(
        status=status.HTTP_400_BAD_REQUEST,
        title=MAPPING_PROBLEM_TITLE,
        detail=detail,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )
