from typing import List, Optional

from fastapi import APIRouter, Depends

from student_admin.dependencies import get_course_service
from student_admin.schemas import CourseDetailResponse
from student_admin.services.departments import CourseService

router = APIRouter(prefix="/api/courses")


@router.get("/", response_model=List[CourseDetailResponse])
async def list_courses(
    department_id: Optional[int] = None,
    service: CourseService = Depends(get_course_service),
):
    """Active courses, optionally limited to one department."""
    return [
        CourseDetailResponse.model_validate(c)
        for c in service.list_active_courses(department_id)
    ]
