"""Deserialization failure types raised while mapping JSON payloads to request shapes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import enum


class CauseKind(str, enum.Enum):
    """Discriminant for the nested cause of a mapping failure."""

    STREAM_CONSTRAINT = "stream_constraint"
    OTHER = "other"


@dataclass(frozen=True)
class PayloadCause:
    """Nested cause carried by a payload mapping failure."""

    kind: CauseKind
    message: str


@dataclass(frozen=True)
class PathReference:
    """One step in the object graph that was being populated when mapping failed."""

    owner: type | None
    field_name: str | None = None
    index: int | None = None

    def __str__(self) -> str:
        owner_name = self.owner.__name__ if self.owner is not None else "Object"
        if self.field_name is not None:
            return f'{owner_name}["{self.field_name}"]'
        if self.index is not None:
            return f"{owner_name}[{self.index}]"
        return f"{owner_name}[?]"


def format_reference_chain(path: Sequence[PathReference]) -> str:
    """Render a path as a `->` separated reference chain."""
    return "->".join(str(reference) for reference in path)


class PayloadMappingError(Exception):
    """Raised when a JSON payload cannot be mapped into its target request shape."""

    def __init__(
        self,
        message: str,
        *,
        cause: PayloadCause | None = None,
        path: Sequence[PathReference] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.path = tuple(path)


def stream_constraint_cause(message: str) -> PayloadCause:
    """Build the nested cause for a violated stream read constraint."""
    return PayloadCause(kind=CauseKind.STREAM_CONSTRAINT, message=message)
