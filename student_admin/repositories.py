"""
Data access for students, departments and courses.

Repositories only query and stage changes on the session; committing is the
caller's job (see ``student_admin.database.transaction``).
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from student_admin.models import Course, Department, Student


def _apply_sort(query: Query, column, sort_dir: str, tiebreaker) -> Query:
    if sort_dir.lower() == "desc":
        return query.order_by(column.desc(), tiebreaker.desc())
    return query.order_by(column.asc(), tiebreaker.asc())


class StudentRepository:
    """Queries over the ``students`` table."""

    SORTABLE_FIELDS = {
        "id": Student.id,
        "student_id": Student.student_id,
        "first_name": Student.first_name,
        "last_name": Student.last_name,
        "email": Student.email,
        "is_active": Student.is_active,
        "created_at": Student.created_at,
        "updated_at": Student.updated_at,
    }

    def __init__(self, db: Session):
        self.db = db

    def exists_by_student_id(self, student_id: str) -> bool:
        return (
            self.db.query(Student.id).filter(Student.student_id == student_id).first()
            is not None
        )

    def exists_by_email(self, email: str) -> bool:
        """Case-insensitive email lookup."""
        return (
            self.db.query(Student.id)
            .filter(func.lower(Student.email) == email.lower())
            .first()
            is not None
        )

    def find_by_student_id(self, student_id: str) -> Optional[Student]:
        return (
            self.db.query(Student)
            .options(joinedload(Student.department), selectinload(Student.courses))
            .filter(Student.student_id == student_id)
            .first()
        )

    def add(self, student: Student) -> Student:
        self.db.add(student)
        return student

    def filtered(self, filter_text: Optional[str], is_active: Optional[bool]) -> Query:
        """Text filter is OR-combined across ID, names and email; status is AND-ed."""
        query = self.db.query(Student)
        if is_active is not None:
            query = query.filter(Student.is_active == is_active)
        if filter_text and filter_text.strip():
            # % and _ in the text match literally
            text = filter_text.strip()
            query = query.filter(
                or_(
                    Student.student_id.icontains(text, autoescape=True),
                    Student.first_name.icontains(text, autoescape=True),
                    Student.last_name.icontains(text, autoescape=True),
                    Student.email.icontains(text, autoescape=True),
                )
            )
        return query

    def find_page(
        self,
        filter_text: Optional[str],
        is_active: Optional[bool],
        offset: int,
        limit: int,
        sort_by: str,
        sort_dir: str,
    ) -> tuple[List[Student], int]:
        query = self.filtered(filter_text, is_active)
        total = query.order_by(None).count()
        query = _apply_sort(query, self.SORTABLE_FIELDS[sort_by], sort_dir, Student.id)
        items = (
            query.options(joinedload(Student.department), selectinload(Student.courses))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def find_all(self, filter_text: Optional[str], is_active: Optional[bool]) -> List[Student]:
        """Unpaginated, ordered by surrogate ID."""
        return (
            self.filtered(filter_text, is_active)
            .options(joinedload(Student.department), selectinload(Student.courses))
            .order_by(Student.id.asc())
            .all()
        )


class DepartmentRepository:
    """Queries over the ``departments`` table."""

    SORTABLE_FIELDS = {
        "id": Department.id,
        "name": Department.name,
        "is_active": Department.is_active,
    }

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, department_id: int) -> Optional[Department]:
        return self.db.get(Department, department_id)

    def find_with_courses(self, department_id: int) -> Optional[Department]:
        return (
            self.db.query(Department)
            .options(selectinload(Department.courses))
            .filter(Department.id == department_id)
            .first()
        )

    def exists_by_name(self, name: str) -> bool:
        """Case-insensitive name lookup."""
        return (
            self.db.query(Department.id)
            .filter(func.lower(Department.name) == name.strip().lower())
            .first()
            is not None
        )

    def find_active(self) -> List[Department]:
        return (
            self.db.query(Department)
            .options(selectinload(Department.courses))
            .filter(Department.is_active.is_(True))
            .order_by(Department.name)
            .all()
        )

    def find_page(
        self,
        filter_text: Optional[str],
        is_active: Optional[bool],
        offset: int,
        limit: int,
        sort_by: str,
        sort_dir: str,
    ) -> tuple[List[Department], int]:
        query = self.db.query(Department)
        if is_active is not None:
            query = query.filter(Department.is_active == is_active)
        if filter_text and filter_text.strip():
            query = query.filter(
                Department.name.icontains(filter_text.strip(), autoescape=True)
            )
        total = query.count()
        query = _apply_sort(query, self.SORTABLE_FIELDS[sort_by], sort_dir, Department.id)
        items = query.options(selectinload(Department.courses)).offset(offset).limit(limit).all()
        return items, total

    def add(self, department: Department) -> Department:
        self.db.add(department)
        return department


class CourseRepository:
    """Queries over the ``courses`` table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_ids_with_department(self, course_ids: Iterable[int]) -> List[Course]:
        ids = list(course_ids)
        if not ids:
            return []
        return (
            self.db.query(Course)
            .options(joinedload(Course.department))
            .filter(Course.id.in_(ids))
            .all()
        )

    def find_active(self, department_id: Optional[int] = None) -> List[Course]:
        query = self.db.query(Course).filter(Course.is_active.is_(True))
        if department_id is not None:
            query = query.filter(Course.department_id == department_id)
        return query.order_by(Course.id).all()

    def set_active_for_department(self, department_id: int, is_active: bool) -> int:
        """Bulk status update of every course owned by a department."""
        return (
            self.db.query(Course)
            .filter(Course.department_id == department_id)
            .update({Course.is_active: is_active}, synchronize_session="fetch")
        )