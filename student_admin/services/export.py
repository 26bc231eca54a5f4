"""Tabular renderings of a finalized student list (CSV and Excel)."""

import csv
import io
import logging
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from student_admin.models import Student

logger = logging.getLogger(__name__)

HEADERS = ["Student ID", "First Name", "Last Name", "Email", "Department", "Courses", "Status"]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def student_row(student: Student, course_separator: str) -> List[str]:
    return [
        student.student_id,
        student.first_name,
        student.last_name,
        student.email,
        student.department.name.replace("_", " "),
        course_separator.join(course.name for course in student.courses),
        "Active" if student.is_active else "Inactive",
    ]


def render_csv(students: Iterable[Student]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(HEADERS)
    count = 0
    for student in students:
        # semicolons keep course names with commas readable
        writer.writerow(student_row(student, "; "))
        count += 1
    logger.info("CSV export rendered %d students", count)
    return output.getvalue()


def render_xlsx(students: Iterable[Student]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Students"

    sheet.append(HEADERS)
    bold = Font(bold=True)
    for cell in sheet[1]:
        cell.font = bold

    widths = [len(header) for header in HEADERS]
    count = 0
    for student in students:
        row = student_row(student, ", ")
        sheet.append(row)
        widths = [max(width, len(value)) for width, value in zip(widths, row)]
        count += 1

    for index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width + 2

    output = io.BytesIO()
    workbook.save(output)
    logger.info("Excel export rendered %d students", count)
    return output.getvalue()
