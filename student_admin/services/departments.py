"""
Department management, including course synchronization and the status
cascade from a department to the courses it owns.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from student_admin.database import transaction
from student_admin.exceptions import DepartmentNotFoundError, DuplicateResourceError
from student_admin.models import Course, Department
from student_admin.repositories import CourseRepository, DepartmentRepository
from student_admin.services.course_sync import CourseEntry, sync_courses
from student_admin.services.pagination import PageResult, page_request

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, db: Session):
        self.db = db
        self.departments = DepartmentRepository(db)
        self.courses = CourseRepository(db)

    def create_department(self, name: str, courses: Sequence[CourseEntry] = ()) -> Department:
        """Create a department and its initial courses in one transaction."""
        logger.info("Adding department: %s", name)
        with transaction(self.db):
            if self.departments.exists_by_name(name):
                raise DuplicateResourceError(f"Department with name '{name}' already exists.")

            department = Department(name=name, is_active=True)
            for entry in courses:
                department.courses.append(
                    Course(name=entry.name, description=entry.description, is_active=True)
                )
            self.departments.add(department)

        logger.info("Added department %s with %d courses", department.id, len(department.courses))
        return department

    def update_department(
        self, department_id: int, name: str, courses: Sequence[CourseEntry]
    ) -> Department:
        """Rename the department and make its course list match ``courses``."""
        logger.info("Updating department ID: %s", department_id)
        with transaction(self.db):
            department = self._find(department_id, with_courses=True)

            if department.name.lower() != name.lower() and self.departments.exists_by_name(name):
                raise DuplicateResourceError(f"Department name '{name}' is already in use.")
            department.name = name

            sync_courses(department, courses)

        return department

    def toggle_department_status(self, department_id: int) -> Department:
        """Flip the department flag and give every owned course the same value."""
        with transaction(self.db):
            department = self._find(department_id, with_courses=True)
            new_status = not department.is_active
            department.is_active = new_status
            updated = self.courses.set_active_for_department(department_id, new_status)

        logger.info(
            "Set department %s to active=%s, cascaded to %d courses",
            department_id,
            new_status,
            updated,
        )
        return department

    def get_department(self, department_id: int) -> Department:
        return self._find(department_id, with_courses=True)

    def list_departments(
        self,
        filter_text: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 0,
        size: int = 10,
        sort_by: str = "name",
        sort_dir: str = "asc",
    ) -> PageResult[Department]:
        request = page_request(
            page, size, sort_by, sort_dir, DepartmentRepository.SORTABLE_FIELDS
        )
        items, total = self.departments.find_page(
            filter_text,
            is_active,
            request.offset,
            request.size,
            request.sort_by,
            request.sort_dir,
        )
        return PageResult(items, request.page, request.size, total)

    def list_active_departments(self) -> List[Department]:
        return self.departments.find_active()

    def _find(self, department_id: int, with_courses: bool = False) -> Department:
        if with_courses:
            department = self.departments.find_with_courses(department_id)
        else:
            department = self.departments.find_by_id(department_id)
        if department is None:
            logger.warning("Department not found with ID: %s", department_id)
            raise DepartmentNotFoundError(department_id)
        return department


class CourseService:
    def __init__(self, db: Session):
        self.courses = CourseRepository(db)

    def list_active_courses(self, department_id: Optional[int] = None) -> List[Course]:
        courses = self.courses.find_active(department_id)
        logger.info("Found %d active courses (department_id=%s)", len(courses), department_id)
        return courses
