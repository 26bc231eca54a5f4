from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from config import settings
from student_admin.dependencies import get_student_service
from student_admin.models import Student
from student_admin.schemas import Page, StudentCreate, StudentResponse, StudentUpdate
from student_admin.services.export import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    render_csv,
    render_xlsx,
)
from student_admin.services.students import StudentService

router = APIRouter(prefix="/api/students")


def _student_to_response(s: Student) -> StudentResponse:
    return StudentResponse.model_validate(s)


def _attachment(extension: str) -> dict:
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    filename = f"{settings.export_filename_prefix}_{stamp}.{extension}"
    return {"Content-Disposition": f"attachment; filename={filename}"}


@router.get("/", response_model=Page[StudentResponse])
async def list_students(
    filter: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 0,
    size: int = Query(settings.default_page_size, le=settings.max_page_size),
    sort_by: str = "first_name",
    sort_dir: str = "asc",
    service: StudentService = Depends(get_student_service),
):
    result = service.list_students(filter, is_active, page, size, sort_by, sort_dir)
    return Page[StudentResponse](
        items=[_student_to_response(s) for s in result.items],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    )


@router.post("/", response_model=StudentResponse, status_code=201)
async def create_student(
    data: StudentCreate,
    service: StudentService = Depends(get_student_service),
):
    student = service.create_student(
        data.student_id,
        data.first_name,
        data.last_name,
        data.email,
        data.department_id,
        data.course_ids,
    )
    return _student_to_response(student)


@router.get("/download/csv")
async def download_students_csv(
    filter: Optional[str] = None,
    is_active: Optional[bool] = None,
    service: StudentService = Depends(get_student_service),
):
    students = service.export_students(filter, is_active)
    return Response(
        content=render_csv(students),
        media_type=CSV_MEDIA_TYPE,
        headers=_attachment("csv"),
    )


@router.get("/download/xlsx")
async def download_students_xlsx(
    filter: Optional[str] = None,
    is_active: Optional[bool] = None,
    service: StudentService = Depends(get_student_service),
):
    students = service.export_students(filter, is_active)
    return Response(
        content=render_xlsx(students),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment("xlsx"),
    )


@router.get("/{student_id}", response_model=StudentResponse)
async def student_detail(
    student_id: str,
    service: StudentService = Depends(get_student_service),
):
    return _student_to_response(service.get_student(student_id))


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    data: StudentUpdate,
    service: StudentService = Depends(get_student_service),
):
    student = service.update_student(
        student_id,
        data.first_name,
        data.last_name,
        data.email,
        data.department_id,
        data.course_ids,
    )
    return _student_to_response(student)


@router.delete("/{student_id}", status_code=204)
async def soft_delete_student(
    student_id: str,
    service: StudentService = Depends(get_student_service),
):
    service.soft_delete_student(student_id)
    return Response(status_code=204)


@router.patch("/{student_id}/toggle-status", response_model=StudentResponse)
async def toggle_student_status(
    student_id: str,
    service: StudentService = Depends(get_student_service),
):
    return _student_to_response(service.toggle_student_status(student_id))
