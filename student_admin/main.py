import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import settings
from student_admin.database import init_db
from student_admin.exceptions import StudentAdminError
from student_admin.logging_config import setup_logging
from student_admin.routes import course_routes, department_routes, student_routes

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.include_router(student_routes.router)
app.include_router(department_routes.router)
app.include_router(course_routes.router)


@app.on_event("startup")
async def startup():
    init_db()


@app.exception_handler(StudentAdminError)
async def student_admin_error_handler(request: Request, exc: StudentAdminError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/api/health")
async def health():
    return {"status": "ok"}
