from fastapi import Depends
from sqlalchemy.orm import Session

from student_admin.database import get_db
from student_admin.services.departments import CourseService, DepartmentService
from student_admin.services.students import StudentService


def get_student_service(db: Session = Depends(get_db)) -> StudentService:
    """Student service bound to the request's session."""
    return StudentService(db)


def get_department_service(db: Session = Depends(get_db)) -> DepartmentService:
    """Department service bound to the request's session."""
    return DepartmentService(db)


def get_course_service(db: Session = Depends(get_db)) -> CourseService:
    return CourseService(db)
