"""JSON payload reader that maps request bodies into pydantic request shapes.

Stream read constraints are enforced before model validation so that an oversized
value is reported against the field it was destined for, not as a generic parse error.
Fields declared as strings that receive a non-string value are left to model
validation, which reports them as type mismatches.
"""

from __future__ import annotations

from collections.abc import Sequence
import json
import types
from typing import Any
from typing import TypeVar
from typing import Union
from typing import get_args
from typing import get_origin

from pydantic import BaseModel
from pydantic import ValidationError

from app.core.config import PayloadSettings
from app.deserialization.failures import CauseKind
from app.deserialization.failures import PathReference
from app.deserialization.failures import PayloadCause
from app.deserialization.failures import PayloadMappingError
from app.deserialization.failures import format_reference_chain
from app.deserialization.failures import stream_constraint_cause

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_payload(raw: bytes, model: type[ModelT], *, settings: PayloadSettings) -> ModelT:
    """Decode ``raw`` as JSON and map it into ``model``, raising PayloadMappingError on failure."""
    document = _decode(raw, settings)
    if not isinstance(document, dict):
        raise PayloadMappingError(
            f"Cannot map JSON {type(document).__name__} value into {model.__name__}",
            cause=PayloadCause(kind=CauseKind.OTHER, message="Expected a JSON object"),
        )

    _enforce_stream_constraints(document, model, settings)

    try:
        return model.model_validate(document)
    except ValidationError as exc:
        raise _validation_failure(exc, model) from exc


def _decode(raw: bytes, settings: PayloadSettings) -> Any:
    def parse_int(text: str) -> int:
        _check_number_length(text, settings)
        try:
            return int(text)
        except ValueError as exc:
            # Interpreter-wide integer digit limit.
            raise _unplaced_constraint_failure(str(exc)) from exc

    def parse_float(text: str) -> float:
        _check_number_length(text, settings)
        return float(text)

    try:
        return json.loads(raw, parse_int=parse_int, parse_float=parse_float)
    except RecursionError as exc:
        raise _unplaced_constraint_failure("Document nesting depth exceeds the JSON parser recursion limit") from exc
    except ValueError as exc:
        message = f"Unable to parse JSON payload: {exc}"
        raise PayloadMappingError(message, cause=PayloadCause(kind=CauseKind.OTHER, message=str(exc))) from exc


def _check_number_length(text: str, settings: PayloadSettings) -> None:
    if len(text) > settings.max_number_length:
        raise _unplaced_constraint_failure(
            f"Number value length ({len(text)}) exceeds the maximum allowed ({settings.max_number_length})"
        )


def _unplaced_constraint_failure(message: str) -> PayloadMappingError:
    # The parser does not report where in the document it stopped.
    return PayloadMappingError(message, cause=stream_constraint_cause(message))


def _string_field_keys(model: type[BaseModel]) -> set[str]:
    keys: set[str] = set()
    for name, field in model.model_fields.items():
        annotation = field.annotation
        is_string = annotation is str
        if get_origin(annotation) in (Union, types.UnionType):
            members = set(get_args(annotation))
            is_string = str in members and members <= {str, type(None)}
        if is_string:
            keys.add(name)
            if field.alias:
                keys.add(field.alias)
    return keys


def _enforce_stream_constraints(
    document: dict[str, Any],
    model: type[BaseModel],
    settings: PayloadSettings,
) -> None:
    string_fields = _string_field_keys(model)
    pending: list[tuple[Any, tuple[PathReference, ...], int]] = [
        (value, (PathReference(model, str(field_name)),), 1)
        for field_name, value in document.items()
        if field_name not in string_fields or isinstance(value, str)
    ]
    pending.reverse()

    while pending:
        value, path, depth = pending.pop()
        if isinstance(value, str):
            if len(value) > settings.max_string_length:
                raise _constraint_failure(
                    f"String value length ({len(value)}) exceeds the maximum allowed ({settings.max_string_length})",
                    path,
                )
            continue

        if isinstance(value, dict):
            children = [(item, (*path, PathReference(None, str(key))), depth + 1) for key, item in value.items()]
        elif isinstance(value, list):
            children = [(item, (*path, PathReference(None, index=index)), depth + 1) for index, item in enumerate(value)]
        else:
            continue

        if depth + 1 > settings.max_nesting_depth:
            raise _constraint_failure(
                f"Document nesting depth ({depth + 1}) exceeds the maximum allowed ({settings.max_nesting_depth})",
                path,
            )
        pending.extend(reversed(children))


def _constraint_failure(message: str, path: Sequence[PathReference]) -> PayloadMappingError:
    return PayloadMappingError(
        f"{message} (through reference chain: {format_reference_chain(path)})",
        cause=stream_constraint_cause(message),
        path=path,
    )


def _validation_failure(exc: ValidationError, model: type[BaseModel]) -> PayloadMappingError:
    issue = exc.errors()[0]
    message = str(issue.get("msg", "Invalid value"))
    path = _path_from_location(model, issue.get("loc", ()))

    if path:
        message = f"{message} (through reference chain: {format_reference_chain(path)})"
    return PayloadMappingError(message, cause=PayloadCause(kind=CauseKind.OTHER, message=str(exc)), path=path)


def _path_from_location(model: type[BaseModel], location: Sequence[Any]) -> tuple[PathReference, ...]:
    path: list[PathReference] = []
    for position, part in enumerate(location):
        owner = model if position == 0 else None
        if isinstance(part, int):
            path.append(PathReference(owner, index=part))
        else:
            path.append(PathReference(owner, str(part)))
    return tuple(path)
