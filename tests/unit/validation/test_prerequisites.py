"""Unit tests for PrerequisiteValidator."""

from unittest.mock import MagicMock

import pytest

from registrar.exceptions import ErrorKind, SubjectNotFoundError
from registrar.store import (
    Course,
    Database,
    Enrollment,
    EnrollmentStatus,
    Student,
    Subject,
    UnitOfWork,
)
from registrar.validation import PrerequisiteValidator, ValidationResult


def make_lookup(*subjects: Subject) -> MagicMock:
    """Build a SubjectLookup mock over the given subjects."""
    by_code = {s.code: s for s in subjects}
    lookup = MagicMock()
    lookup.get.side_effect = by_code.get
    lookup.exists.side_effect = lambda code: code in by_code
    return lookup


@pytest.fixture
def chain_lookup() -> MagicMock:
    """CS101 <- CS102 <- CS201 <- CS301, plus an unrelated MATH101."""
    return make_lookup(
        Subject("CS101", name="Intro"),
        Subject("CS102", name="Programming", prerequisite_code="CS101"),
        Subject("CS201", name="Data Structures", prerequisite_code="CS102"),
        Subject("CS301", name="Algorithms", prerequisite_code="CS201"),
        Subject("MATH101", name="Calculus"),
    )


@pytest.mark.unit
class TestValidatePrerequisite:
    """Tests for validate_prerequisite."""

    def test_blank_candidate_is_valid(self, chain_lookup: MagicMock) -> None:
        """None, empty and whitespace mean 'no prerequisite'."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        for candidate in (None, "", "   "):
            assert validator.validate_prerequisite("CS201", candidate) == ValidationResult.ok()

    def test_unknown_candidate(self, chain_lookup: MagicMock) -> None:
        """A missing candidate fails with NOT_FOUND."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        valid, reason = validator.validate_prerequisite("CS201", "NOPE")

        assert valid is False
        assert "NOPE" in reason
        assert validator.validate_prerequisite("CS201", "NOPE").kind == ErrorKind.NOT_FOUND

    def test_candidate_is_trimmed(self, chain_lookup: MagicMock) -> None:
        """Surrounding whitespace is ignored."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert validator.validate_prerequisite("MATH101", "  CS101 ")

    def test_cycle_rejected(self, chain_lookup: MagicMock) -> None:
        """Making CS101 depend on CS301 would close a cycle."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        result = validator.validate_prerequisite("CS101", "CS301")

        assert not result
        assert result.kind == ErrorKind.CIRCULAR_PREREQUISITE

    def test_self_prerequisite_rejected(self, chain_lookup: MagicMock) -> None:
        """A subject cannot be its own prerequisite."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert validator.validate_prerequisite("CS101", "CS101").kind == (
            ErrorKind.CIRCULAR_PREREQUISITE
        )


@pytest.mark.unit
class TestHasCycle:
    """Tests for has_cycle."""

    def test_no_cycle(self, chain_lookup: MagicMock) -> None:
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert not validator.has_cycle("MATH101", "CS301")

    def test_transitive_cycle(self, chain_lookup: MagicMock) -> None:
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert validator.has_cycle("CS102", "CS201")
        assert validator.has_cycle("CS101", "CS301")

    def test_already_cyclic_data_terminates(self) -> None:
        """A corrupt A -> B -> A chain not involving the subject still terminates."""
        lookup = make_lookup(
            Subject("A", prerequisite_code="B"),
            Subject("B", prerequisite_code="A"),
            Subject("X"),
        )
        validator = PrerequisiteValidator(lookup, MagicMock())

        assert not validator.has_cycle("X", "A")


@pytest.mark.unit
class TestBuildPrerequisiteChain:
    """Tests for build_prerequisite_chain."""

    def test_chain_order(self, chain_lookup: MagicMock) -> None:
        """Direct prerequisite first, then outward."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        chain = validator.build_prerequisite_chain("CS301")

        assert [s.code for s in chain] == ["CS201", "CS102", "CS101"]

    def test_chain_is_idempotent(self, chain_lookup: MagicMock) -> None:
        """Repeated calls give the same answer."""
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        first = [s.code for s in validator.build_prerequisite_chain("CS301")]
        second = [s.code for s in validator.build_prerequisite_chain("CS301")]

        assert first == second

    def test_no_prerequisite(self, chain_lookup: MagicMock) -> None:
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert validator.build_prerequisite_chain("CS101") == []

    def test_unknown_subject(self, chain_lookup: MagicMock) -> None:
        validator = PrerequisiteValidator(chain_lookup, MagicMock())

        assert validator.build_prerequisite_chain("NOPE") == []

    def test_cyclic_chain_terminates(self) -> None:
        """Each subject appears at most once even if the stored data is cyclic."""
        lookup = make_lookup(
            Subject("A", prerequisite_code="B"),
            Subject("B", prerequisite_code="C"),
            Subject("C", prerequisite_code="A"),
        )
        validator = PrerequisiteValidator(lookup, MagicMock())

        assert [s.code for s in validator.build_prerequisite_chain("A")] == ["B", "C"]


@pytest.fixture
def seeded(database: Database) -> Database:
    """CS101 <- CS102 with one section each and student s1."""
    with UnitOfWork(database) as uow:
        uow.subjects.add(Subject("CS101", name="Intro"))
        uow.subjects.add(Subject("CS102", name="Programming", prerequisite_code="CS101"))
        uow.courses.add(Course("CS101.1", "CS101", max_enrollment=30))
        uow.courses.add(Course("CS102.1", "CS102", max_enrollment=30))
        uow.students.add(Student("s1", "ST-001", "Ada Lovelace"))
        uow.commit()
    return database


@pytest.mark.unit
class TestCanTakeSubject:
    """Tests for can_take_subject against a real store."""

    def test_missing_prerequisite(self, seeded: Database) -> None:
        """No CS101 history means CS102 is blocked by CS101."""
        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)

            valid, missing = validator.can_take_subject("s1", "CS102")

        assert valid is False
        assert missing == "CS101"

    def test_enrolled_prerequisite_satisfies(self, seeded: Database) -> None:
        """An Enrolled prerequisite course counts."""
        with UnitOfWork(seeded) as uow:
            uow.enrollments.add(Enrollment("s1", "CS101.1"))
            uow.commit()

        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            assert tuple(validator.can_take_subject("s1", "CS102")) == (True, None)

    def test_waitlisted_prerequisite_does_not_satisfy(self, seeded: Database) -> None:
        """A Waitlisted, unpassed prerequisite does not count."""
        with UnitOfWork(seeded) as uow:
            uow.enrollments.add(Enrollment("s1", "CS101.1", status=EnrollmentStatus.WAITLISTED))
            uow.commit()

        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            assert not validator.can_take_subject("s1", "CS102")

    def test_passed_prerequisite_satisfies(self, seeded: Database) -> None:
        """A passed prerequisite counts regardless of status."""
        with UnitOfWork(seeded) as uow:
            uow.enrollments.add(
                Enrollment("s1", "CS101.1", status=EnrollmentStatus.WAITLISTED, is_passed=True)
            )
            uow.commit()

        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            assert validator.can_take_subject("s1", "CS102")

    def test_no_prerequisite(self, seeded: Database) -> None:
        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            assert validator.can_take_subject("s1", "CS101")

    def test_unknown_subject_raises(self, seeded: Database) -> None:
        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            with pytest.raises(SubjectNotFoundError):
                validator.can_take_subject("s1", "NOPE")

    def test_validate_subjects_for_student(self, seeded: Database) -> None:
        """Each subject maps to its missing prerequisite or None."""
        with UnitOfWork(seeded) as uow:
            validator = PrerequisiteValidator(uow.subjects, uow.enrollments)
            results = validator.validate_subjects_for_student("s1", ["CS101", "CS102"])

        assert results == {"CS101": None, "CS102": "CS101"}
