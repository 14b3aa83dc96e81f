from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Literal

ErrorKind = Literal[
    "not_yet_open",
    "deadline_passed",
    "age_out_of_range",
    "team_size_out_of_range",
    "invalid_field",
    "already_registered",
    "idea_already_committed",
    "not_owner",
    "not_found",
    "invalid_transition",
]


class RegistrationError(Exception):
    """A registration attempt or transition was rejected by a named rule."""

    def __init__(self, kind: ErrorKind, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    def as_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "details": self.details}

    def __repr__(self) -> str:
        return f"RegistrationError({self.kind!r}, {self.message!r})"


@dataclass(frozen=True)
class Verdict:
    """Outcome of a pure check: ok, or the first rule that failed."""
    ok: bool
    kind: ErrorKind | None = None
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise RegistrationError(self.kind, self.message, self.details)


OK = Verdict(ok=True)


def reject(kind: ErrorKind, message: str, **details: Any) -> Verdict:
    return Verdict(ok=False, kind=kind, message=message, details=details)
