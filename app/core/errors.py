"""Exception-to-response mappers and their registration on the FastAPI app."""

from __future__ import annotations

from http import HTTPStatus
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.payload_problems import describe_mapping_failure
from app.core.payload_problems import render_mapping_problem
from app.deserialization.failures import PayloadMappingError
from app.schemas.problem import PROBLEM_MEDIA_TYPE
from app.schemas.problem import ProblemDetails

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a requested resource does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)
        self.message = message


def _build_problem_response(*, status_code: int, title: str, detail: str | None = None) -> JSONResponse:
    problem = ProblemDetails(status=status_code, title=title, detail=detail)
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _http_title(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def _validation_detail(exc: RequestValidationError) -> str:
    issues: list[str] = []
    for issue in exc.errors():
        field = _format_location(issue.get("loc", ()))
        message = str(issue.get("msg", "Invalid value"))
        issues.append(f"{field}: {message}")
    return "; ".join(issues)


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def payload_mapping_exception_handler(_: Request, exc: PayloadMappingError) -> JSONResponse:
    """Render JSON mapping failures as 400 problem documents."""
    first_reference = str(exc.path[0]) if exc.path else "<root>"
    cause_kind = exc.cause.kind.value if exc.cause is not None else "none"
    logger.warning("JSON payload could not be mapped at %s (cause=%s)", first_reference, cause_kind)

    return render_mapping_problem(describe_mapping_failure(exc))


async def not_found_exception_handler(_: Request, __: NotFoundError) -> Response:
    """Answer missing resources with a bare 404."""
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI parameter validation errors to a problem document."""
    return _build_problem_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        title="The request could not be validated",
        detail=_validation_detail(exc),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Normalize HTTP exceptions; 404s share the bare not-found response."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return await not_found_exception_handler(request, NotFoundError())

    detail = exc.detail if isinstance(exc.detail, str) and exc.detail else None
    return _build_problem_response(
        status_code=exc.status_code,
        title=_http_title(exc.status_code),
        detail=detail,
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""
    logger.exception("Unhandled error: %s", type(exc).__name__)
    return _build_problem_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title="An unexpected error occurred",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception mappers to a FastAPI app instance.

    Starlette picks the handler registered for the most specific class in the
    raised exception's MRO, so the catch-all ``Exception`` mapper only applies
    when none of the more specific mappers below match.
    """

    app.add_exception_handler(PayloadMappingError, payload_mapping_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
