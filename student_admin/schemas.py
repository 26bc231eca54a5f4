from datetime import datetime
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, StringConstraints

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

T = TypeVar("T")


# ---- requests ----

class CourseCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    description: Optional[str] = None


class CourseUpsert(CourseCreate):
    """A course inside a department update; no ``id`` means a new course."""

    id: Optional[int] = None


class DepartmentCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    courses: List[CourseCreate] = []


class DepartmentUpdate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    courses: List[CourseUpsert] = []


class StudentUpdate(BaseModel):
    first_name: NonBlank
    last_name: NonBlank
    email: EmailStr
    department_id: int
    course_ids: Optional[List[int]] = None


class StudentCreate(StudentUpdate):
    student_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


# ---- responses ----

class CourseResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class CourseDetailResponse(CourseResponse):
    is_active: bool
    department_id: int


class DepartmentSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class DepartmentResponse(BaseModel):
    id: int
    name: str
    is_active: bool
    course_count: int = 0


class DepartmentDetailResponse(BaseModel):
    id: int
    name: str
    is_active: bool
    courses: List[CourseDetailResponse] = []

    model_config = {"from_attributes": True}


class StudentResponse(BaseModel):
    student_id: str
    first_name: str
    last_name: str
    email: str
    department: DepartmentSummary
    courses: List[CourseResponse] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class Page(BaseModel, Generic[T]):
    items: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
