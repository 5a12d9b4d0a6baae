"""Data models for the validation module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from registrar.exceptions import ErrorKind
    from registrar.store.models import Schedule


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation query.

    Unpacks as ``(valid, reason)`` and is truthy when valid.

    Attributes:
        valid: Whether the check passed.
        reason: Why it failed. For prerequisite checks this is the missing
            prerequisite subject code.
        kind: Error kind of the failure, None when valid.
    """

    valid: bool
    reason: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str, kind: ErrorKind) -> ValidationResult:
        return cls(valid=False, reason=reason, kind=kind)

    def __iter__(self) -> Iterator[bool | str | None]:
        return iter((self.valid, self.reason))

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class StudentScheduleConflict:
    """An enrolled course whose schedule overlaps a requested course.

    Attributes:
        course_code: Code of the already-enrolled course.
        schedule: Its schedule.
    """

    course_code: str
    schedule: Schedule
