"""Prerequisite graph validation.

Each subject has at most one direct prerequisite, so the prerequisite relation
is a forest of chains. Every walk below follows a single edge per step and is
bounded by a visited set, so a chain that is already corrupt (cyclic) still
terminates after at most one pass over the subjects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_

from registrar.exceptions import ErrorKind, SubjectNotFoundError
from registrar.store.models import Course, Enrollment, EnrollmentStatus
from registrar.validation.models import ValidationResult

if TYPE_CHECKING:
    from registrar.store.interfaces import EnrollmentLookup, SubjectLookup
    from registrar.store.models import Subject

logger = logging.getLogger(__name__)


class PrerequisiteValidator:
    """Checks prerequisite configuration and student eligibility."""

    def __init__(self, subjects: SubjectLookup, enrollments: EnrollmentLookup) -> None:
        """Initialize the validator.

        Args:
            subjects: Subject lookup used to walk prerequisite edges.
            enrollments: Enrollment lookup used for completion queries.
        """
        self._subjects = subjects
        self._enrollments = enrollments

    def validate_prerequisite(
        self, subject_code: str, candidate_prereq_code: str | None
    ) -> ValidationResult:
        """Check whether ``candidate_prereq_code`` may become the prerequisite of ``subject_code``.

        A blank candidate means "no prerequisite" and is always valid.

        Args:
            subject_code: Subject being configured.
            candidate_prereq_code: Proposed prerequisite subject code.

        Returns:
            ValidationResult with kind NOT_FOUND if the candidate does not
            exist, or CIRCULAR_PREREQUISITE if it would close a cycle.
        """
        if candidate_prereq_code is None or not candidate_prereq_code.strip():
            return ValidationResult.ok()

        candidate = candidate_prereq_code.strip()
        if not self._subjects.exists(candidate):
            return ValidationResult.fail(
                f"Prerequisite subject '{candidate}' not found", ErrorKind.NOT_FOUND
            )

        if self.has_cycle(subject_code, candidate):
            return ValidationResult.fail(
                f"Setting '{candidate}' as prerequisite would create a circular dependency",
                ErrorKind.CIRCULAR_PREREQUISITE,
            )

        return ValidationResult.ok()

    def has_cycle(self, subject_code: str, candidate_prereq_code: str) -> bool:
        """Check whether ``candidate_prereq_code``'s chain leads back to ``subject_code``.

        Args:
            subject_code: Subject being configured.
            candidate_prereq_code: Proposed prerequisite subject code.

        Returns:
            True if the codes are equal or the candidate's prerequisite chain
            reaches ``subject_code``.
        """
        if subject_code == candidate_prereq_code:
            return True

        visited: set[str] = set()
        current: str | None = candidate_prereq_code
        while current and current not in visited:
            visited.add(current)
            subject = self._subjects.get(current)
            if subject is None or not subject.prerequisite_code:
                return False
            if subject.prerequisite_code == subject_code:
                return True
            current = subject.prerequisite_code

        if current:
            logger.warning(
                "Prerequisite chain from %s revisits %s; chain is already cyclic",
                candidate_prereq_code,
                current,
            )
        return False

    def build_prerequisite_chain(self, subject_code: str) -> list[Subject]:
        """Resolve the transitive prerequisites of a subject.

        Args:
            subject_code: Subject whose chain to build.

        Returns:
            Prerequisites ordered from the direct prerequisite outward. Empty
            if the subject is unknown or has no prerequisite.
        """
        chain: list[Subject] = []
        visited = {subject_code}

        subject = self._subjects.get(subject_code)
        next_code = subject.prerequisite_code if subject is not None else None
        while next_code and next_code not in visited:
            visited.add(next_code)
            prereq = self._subjects.get(next_code)
            if prereq is None:
                break
            chain.append(prereq)
            next_code = prereq.prerequisite_code

        return chain

    def can_take_subject(self, student_id: str, subject_code: str) -> ValidationResult:
        """Check whether a student satisfies a subject's prerequisite.

        The prerequisite is satisfied by an enrollment in any course of the
        prerequisite subject that is either Enrolled or marked passed.

        Args:
            student_id: The student's user ID.
            subject_code: Subject the student wants to take.

        Returns:
            ValidationResult whose reason is the missing prerequisite code.

        Raises:
            SubjectNotFoundError: If the subject does not exist.
        """
        subject = self._subjects.get(subject_code)
        if subject is None:
            raise SubjectNotFoundError(subject_code)

        prerequisite_code = subject.prerequisite_code
        if not prerequisite_code:
            return ValidationResult.ok()

        completed = self._enrollments.find(
            Enrollment.student_id == student_id,
            Course.subject_code == prerequisite_code,
            or_(
                Enrollment.is_passed.is_(True),
                Enrollment.status == EnrollmentStatus.ENROLLED.value,
            ),
        )
        if completed:
            return ValidationResult.ok()
        return ValidationResult.fail(prerequisite_code, ErrorKind.PREREQUISITE_NOT_MET)

    def validate_subjects_for_student(
        self, student_id: str, subject_codes: list[str]
    ) -> dict[str, str | None]:
        """Check several subjects at once.

        Args:
            student_id: The student's user ID.
            subject_codes: Subjects to check.

        Returns:
            Mapping of subject code to missing prerequisite code (None when
            the student may take it).
        """
        results: dict[str, str | None] = {}
        for code in subject_codes:
            results[code] = self.can_take_subject(student_id, code).reason
        return results
