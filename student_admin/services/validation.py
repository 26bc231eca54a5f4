"""
Cross-entity validation of a student's email, department and courses.

The rules live in :func:`check_student_assignment`, a pure function over
immutable snapshots of the referenced rows. :class:`StudentValidator` loads
those snapshots once, runs the rules and either returns the resolved
entities or raises with the complete list of violations.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from student_admin.exceptions import BusinessRuleViolation, ValidationFailedError
from student_admin.models import Course, Department
from student_admin.repositories import CourseRepository, DepartmentRepository, StudentRepository

logger = logging.getLogger(__name__)

INVALID_STUDENT_SUMMARY = "Student data is invalid. Please correct the following issues."


@dataclass(frozen=True)
class DepartmentSnapshot:
    id: int
    name: str
    is_active: bool

    @classmethod
    def of(cls, department: Department) -> "DepartmentSnapshot":
        return cls(department.id, department.name, bool(department.is_active))


@dataclass(frozen=True)
class CourseSnapshot:
    id: int
    name: str
    is_active: bool
    department_id: int
    department_name: str

    @classmethod
    def of(cls, course: Course) -> "CourseSnapshot":
        return cls(
            course.id,
            course.name,
            bool(course.is_active),
            course.department_id,
            course.department.name,
        )


@dataclass(frozen=True)
class AssignmentCheck:
    """Outcome of the rules: ``errors`` is empty when the assignment is valid."""

    errors: Tuple[str, ...] = ()
    department_failed: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ResolvedAssignment:
    department: Department
    courses: List[Course] = field(default_factory=list)


def email_needs_check(current_email: Optional[str], new_email: str) -> bool:
    return current_email is None or current_email.lower() != new_email.lower()


def unique_ids(ids: Optional[Sequence[int]]) -> List[int]:
    """De-duplicate while keeping submission order."""
    seen = set()
    result = []
    for item in ids or []:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def check_student_assignment(
    new_email: str,
    email_taken: bool,
    department_id: int,
    department: Optional[DepartmentSnapshot],
    course_ids: Sequence[int],
    courses: Dict[int, CourseSnapshot],
) -> AssignmentCheck:
    """Evaluate every rule and collect all violations in a stable order.

    ``email_taken`` is only True when the email changed and another student
    already uses it. ``courses`` maps the IDs that resolved to their snapshot.
    """
    errors: List[str] = []
    department_failed = False

    if email_taken:
        errors.append(f"Email '{new_email}' is already in use by another student.")

    if department is None:
        department_failed = True
        errors.append(f"Department with ID '{department_id}' does not exist.")
    elif not department.is_active:
        department_failed = True
        errors.append(
            f"Cannot assign student to an inactive department: {department.name}"
        )

    requested = unique_ids(course_ids)
    missing = [course_id for course_id in requested if course_id not in courses]
    if missing:
        errors.append(f"The following course IDs do not exist: {missing}")

    for course_id in requested:
        course = courses.get(course_id)
        if course is None:
            continue
        if not course.is_active:
            errors.append(f"Course '{course.name}' is inactive and cannot be assigned.")
        if department is not None and course.department_id != department.id:
            errors.append(
                f"Course '{course.name}' belongs to the '{course.department_name}' "
                f"department, not the '{department.name}' department."
            )

    return AssignmentCheck(tuple(errors), department_failed)


class StudentValidator:
    """Loads current state and applies :func:`check_student_assignment`."""

    def __init__(self, db: Session):
        self.students = StudentRepository(db)
        self.departments = DepartmentRepository(db)
        self.courses = CourseRepository(db)

    def validate(
        self,
        current_email: Optional[str],
        new_email: str,
        department_id: int,
        course_ids: Optional[Sequence[int]] = None,
    ) -> ResolvedAssignment:
        logger.debug(
            "Validating email=%s department_id=%s course_ids=%s",
            new_email,
            department_id,
            course_ids,
        )
        email_taken = email_needs_check(current_email, new_email) and self.students.exists_by_email(
            new_email
        )
        department = self.departments.find_by_id(department_id)
        requested = unique_ids(course_ids)
        found = self.courses.find_by_ids_with_department(requested)
        by_id = {course.id: course for course in found}

        check = check_student_assignment(
            new_email,
            email_taken,
            department_id,
            DepartmentSnapshot.of(department) if department is not None else None,
            requested,
            {course_id: CourseSnapshot.of(course) for course_id, course in by_id.items()},
        )
        if not check.ok:
            logger.warning("Validation failed with %d errors: %s", len(check.errors), check.errors)
            error_cls = BusinessRuleViolation if check.department_failed else ValidationFailedError
            raise error_cls(INVALID_STUDENT_SUMMARY, list(check.errors))

        return ResolvedAssignment(department, [by_id[course_id] for course_id in requested])
