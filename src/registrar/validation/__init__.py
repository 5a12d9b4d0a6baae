"""Validation - prerequisite graph and schedule conflict checks."""

from registrar.validation.intervals import overlaps, schedules_overlap
from registrar.validation.models import StudentScheduleConflict, ValidationResult
from registrar.validation.prerequisites import PrerequisiteValidator
from registrar.validation.schedules import ScheduleConflictChecker

__all__ = [
    "PrerequisiteValidator",
    "ScheduleConflictChecker",
    "StudentScheduleConflict",
    "ValidationResult",
    "overlaps",
    "schedules_overlap",
]
