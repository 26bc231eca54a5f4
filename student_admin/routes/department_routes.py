from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from config import settings
from student_admin.dependencies import get_department_service
from student_admin.models import Department
from student_admin.schemas import (
    DepartmentCreate,
    DepartmentDetailResponse,
    DepartmentResponse,
    DepartmentUpdate,
    Page,
)
from student_admin.services.departments import DepartmentService

router = APIRouter(prefix="/api/departments")


def _dept_to_response(d: Department) -> DepartmentResponse:
    return DepartmentResponse(
        id=d.id,
        name=d.name,
        is_active=d.is_active,
        course_count=len(d.courses) if d.courses else 0,
    )


def _dept_to_detail(d: Department) -> DepartmentDetailResponse:
    return DepartmentDetailResponse.model_validate(d)


@router.get("/", response_model=Page[DepartmentResponse])
async def list_departments(
    filter: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 0,
    size: int = Query(settings.default_page_size, le=settings.max_page_size),
    sort_by: str = "name",
    sort_dir: str = "asc",
    service: DepartmentService = Depends(get_department_service),
):
    result = service.list_departments(filter, is_active, page, size, sort_by, sort_dir)
    return Page[DepartmentResponse](
        items=[_dept_to_response(d) for d in result.items],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    )


@router.get("/active", response_model=List[DepartmentResponse])
async def list_active_departments(
    service: DepartmentService = Depends(get_department_service),
):
    return [_dept_to_response(d) for d in service.list_active_departments()]


@router.post("/", response_model=DepartmentResponse, status_code=201)
async def create_department(
    data: DepartmentCreate,
    service: DepartmentService = Depends(get_department_service),
):
    department = service.create_department(data.name, data.courses)
    return _dept_to_response(department)


@router.get("/{department_id}", response_model=DepartmentDetailResponse)
async def department_detail(
    department_id: int,
    service: DepartmentService = Depends(get_department_service),
):
    return _dept_to_detail(service.get_department(department_id))


@router.put("/{department_id}", response_model=DepartmentDetailResponse)
async def update_department(
    department_id: int,
    data: DepartmentUpdate,
    service: DepartmentService = Depends(get_department_service),
):
    department = service.update_department(department_id, data.name, data.courses)
    return _dept_to_detail(department)


@router.patch("/{department_id}/toggle-status", response_model=DepartmentResponse)
async def toggle_department_status(
    department_id: int,
    service: DepartmentService = Depends(get_department_service),
):
    return _dept_to_response(service.toggle_department_status(department_id))
