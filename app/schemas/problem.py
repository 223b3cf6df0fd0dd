"""Problem document schema shared by structured error responses."""

from __future__ import annotations

from pydantic import BaseModel

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetails(BaseModel):
    """Machine-readable error body returned in place of raw error text."""

    status: int
    title: str
    detail: str | None = None
