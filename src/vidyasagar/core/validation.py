"""Request validation on top of pydantic models."""

from __future__ import annotations

from typing import Any, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from vidyasagar.core.errors import FieldViolation, RequestValidationError

M = TypeVar("M", bound=BaseModel)

# pydantic error types mapped onto the constraint names surfaced to callers
_CONSTRAINTS = {
    "missing": "required",
    "string_too_short": "min_length",
    "string_too_long": "max_length",
    "too_short": "min_items",
    "too_long": "max_items",
    "greater_than_equal": "ge",
    "greater_than": "gt",
    "less_than_equal": "le",
    "less_than": "lt",
    "enum": "enum",
    "literal_error": "enum",
    "int_parsing": "type",
    "int_type": "type",
    "int_from_float": "type",
    "string_type": "type",
    "list_type": "type",
    "date_parsing": "date_format",
    "date_from_datetime_parsing": "date_format",
    "date_type": "date_format",
}


class FeatureModel(BaseModel):
    """Base for request and response models: camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CrossFieldError(ValueError):
    """Raised from model validators to name the field and constraint."""

    def __init__(self, field: str, constraint: str, message: str) -> None:
        self.field = field
        self.constraint = constraint
        super().__init__(message)


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) if loc else "__root__"


def violations_from(exc: PydanticValidationError) -> List[FieldViolation]:
    violations: List[FieldViolation] = []
    for err in exc.errors():
        ctx_error = (err.get("ctx") or {}).get("error")
        if isinstance(ctx_error, CrossFieldError):
            violations.append(FieldViolation(ctx_error.field, ctx_error.constraint, str(ctx_error)))
            continue
        constraint = _CONSTRAINTS.get(err["type"], err["type"])
        violations.append(FieldViolation(_field_name(err["loc"]), constraint, err["msg"]))
    return violations


def validate_request(flow: str, model: Type[M], candidate: Union[M, Mapping[str, Any]]) -> M:
    """Return a validated ``model`` instance or raise RequestValidationError."""
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump(mode="json", by_alias=True)
    try:
        return model.model_validate(candidate)
    except PydanticValidationError as exc:
        raise RequestValidationError(flow, violations_from(exc)) from exc
