"""
Student lifecycle: create, update, soft delete, status toggle, listing and
export. Each mutating call is one transaction; nothing is written when
validation fails.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from student_admin.database import transaction
from student_admin.exceptions import DuplicateResourceError, StudentNotFoundError
from student_admin.models import Student, utcnow
from student_admin.repositories import StudentRepository
from student_admin.services.pagination import PageResult, page_request
from student_admin.services.validation import StudentValidator

logger = logging.getLogger(__name__)


class StudentService:
    def __init__(self, db: Session):
        self.db = db
        self.students = StudentRepository(db)
        self.validator = StudentValidator(db)

    def create_student(
        self,
        student_id: str,
        first_name: str,
        last_name: str,
        email: str,
        department_id: int,
        course_ids: Optional[Sequence[int]] = None,
    ) -> Student:
        logger.info("Attempting to add a new student with student_id: %s", student_id)

        with transaction(self.db):
            if self.students.exists_by_student_id(student_id):
                logger.warning("Failed to add student. Duplicate student_id: %s", student_id)
                raise DuplicateResourceError(
                    f"A student with ID '{student_id}' already exists."
                )

            resolved = self.validator.validate(None, email, department_id, course_ids)

            student = Student(
                student_id=student_id,
                first_name=first_name,
                last_name=last_name,
                email=email,
                department=resolved.department,
                courses=resolved.courses,
                is_active=True,
            )
            self.students.add(student)

        logger.info(
            "Added student with database ID: %s and student_id: %s",
            student.id,
            student.student_id,
        )
        return student

    def update_student(
        self,
        student_id: str,
        first_name: str,
        last_name: str,
        email: str,
        department_id: int,
        course_ids: Optional[Sequence[int]] = None,
    ) -> Student:
        logger.info("Attempting to update student with student_id: %s", student_id)

        with transaction(self.db):
            student = self._find(student_id)
            resolved = self.validator.validate(
                student.email, email, department_id, course_ids
            )

            student.first_name = first_name
            student.last_name = last_name
            student.email = email
            student.department = resolved.department
            student.courses = resolved.courses
            # association-only edits do not trigger onupdate
            student.updated_at = utcnow()

        logger.info("Updated student with student_id: %s", student_id)
        return student

    def soft_delete_student(self, student_id: str) -> None:
        logger.info("Attempting to soft delete student with student_id: %s", student_id)
        with transaction(self.db):
            student = self._find(student_id)
            student.is_active = False
        logger.info("Soft-deleted student with student_id: %s", student_id)

    def toggle_student_status(self, student_id: str) -> Student:
        with transaction(self.db):
            student = self._find(student_id)
            previous = student.is_active
            student.is_active = not previous
        logger.info(
            "Toggled status for student_id: %s from %s to %s",
            student_id,
            previous,
            student.is_active,
        )
        return student

    def get_student(self, student_id: str) -> Student:
        return self._find(student_id)

    def list_students(
        self,
        filter_text: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 0,
        size: int = 10,
        sort_by: str = "first_name",
        sort_dir: str = "asc",
    ) -> PageResult[Student]:
        request = page_request(
            page, size, sort_by, sort_dir, StudentRepository.SORTABLE_FIELDS
        )
        logger.info(
            "Fetching students page=%s size=%s filter=%r is_active=%s",
            request.page,
            request.size,
            filter_text,
            is_active,
        )
        items, total = self.students.find_page(
            filter_text,
            is_active,
            request.offset,
            request.size,
            request.sort_by,
            request.sort_dir,
        )
        return PageResult(items, request.page, request.size, total)

    def export_students(
        self, filter_text: Optional[str] = None, is_active: Optional[bool] = None
    ) -> List[Student]:
        """Every matching student, ordered by surrogate ID, for the export renderers."""
        students = self.students.find_all(filter_text, is_active)
        logger.info(
            "Exporting %d students filter=%r is_active=%s",
            len(students),
            filter_text,
            is_active,
        )
        return students

    def _find(self, student_id: str) -> Student:
        student = self.students.find_by_student_id(student_id)
        if student is None:
            logger.warning("Student not found with student_id: %s", student_id)
            raise StudentNotFoundError(student_id)
        return student
