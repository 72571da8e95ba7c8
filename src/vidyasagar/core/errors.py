"""Error taxonomy shared by every flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

DEFAULT_USER_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class FieldViolation:
    field: str
    constraint: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "constraint": self.constraint, "message": self.message}


class FlowError(Exception):
    """Base class for failures scoped to a single flow invocation."""


class RequestValidationError(FlowError):
    """The request failed its schema; it never reached the model."""

    def __init__(self, flow: str, violations: List[FieldViolation]) -> None:
        if not violations:
            raise ValueError("RequestValidationError needs at least one violation")
        self.flow = flow
        self.violations = list(violations)
        first = self.violations[0]
        super().__init__(f"{flow}: invalid '{first.field}' ({first.constraint}): {first.message}")

    @property
    def field(self) -> str:
        return self.violations[0].field

    @property
    def constraint(self) -> str:
        return self.violations[0].constraint

    def to_list(self) -> List[Dict[str, str]]:
        return [v.to_dict() for v in self.violations]


class InvocationError(FlowError):
    """The model call failed or its reply did not match the output schema.

    Both kinds share one user-facing message; ``kind`` is kept for logs and
    metrics only.
    """

    TRANSPORT = "transport"
    SCHEMA = "schema"

    def __init__(self, kind: str, detail: str, user_message: Optional[str] = None) -> None:
        self.kind = kind
        self.detail = detail
        self.user_message = user_message or DEFAULT_USER_MESSAGE
        super().__init__(f"{kind} failure: {detail}")


class TransportError(Exception):
    """Raised by model clients when the endpoint cannot produce a reply."""
