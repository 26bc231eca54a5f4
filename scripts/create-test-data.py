#!/usr/bin/env python3
"""Seed the database with departments, courses and a handful of students."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from student_admin.database import init_db, SessionLocal
from student_admin.exceptions import StudentAdminError
from student_admin.models import Course, Department, Student
from student_admin.schemas import CourseCreate
from student_admin.services.departments import DepartmentService
from student_admin.services.students import StudentService

DEPARTMENTS = [
    {
        "name": "Computer Science",
        "courses": [
            ("Algorithms", "Design and analysis of algorithms"),
            ("Databases", "Relational modelling and SQL"),
            ("Operating Systems", "Processes, memory and file systems"),
        ],
    },
    {
        "name": "Mathematics",
        "courses": [
            ("Calculus", "Limits, derivatives and integrals"),
            ("Linear Algebra", "Vector spaces and linear maps"),
        ],
    },
    {
        "name": "Physics",
        "courses": [
            ("Mechanics", "Motion and forces"),
            ("Electromagnetism", "Electric and magnetic fields"),
        ],
    },
]

STUDENTS = [
    ("S001", "Ada", "Lovelace", "ada.lovelace@example.com", "Computer Science", ["Algorithms", "Databases"]),
    ("S002", "Alan", "Turing", "alan.turing@example.com", "Computer Science", ["Algorithms"]),
    ("S003", "Emmy", "Noether", "emmy.noether@example.com", "Mathematics", ["Linear Algebra"]),
    ("S004", "Carl", "Gauss", "carl.gauss@example.com", "Mathematics", ["Calculus", "Linear Algebra"]),
    ("S005", "Marie", "Curie", "marie.curie@example.com", "Physics", ["Electromagnetism"]),
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # Seed departments and their courses (idempotent)
        departments = DepartmentService(db)
        for dept_data in DEPARTMENTS:
            existing = db.query(Department).filter(
                Department.name == dept_data["name"]
            ).first()
            if existing:
                print(f"  Department already exists: {dept_data['name']}")
                continue
            courses = [CourseCreate(name=name, description=desc) for name, desc in dept_data["courses"]]
            departments.create_department(dept_data["name"], courses)
            print(f"  Created department: {dept_data['name']} ({len(courses)} courses)")

        # Seed students through the service so every rule applies
        students = StudentService(db)
        for student_id, first_name, last_name, email, dept_name, course_names in STUDENTS:
            if db.query(Student).filter(Student.student_id == student_id).first():
                print(f"  Student already exists: {student_id}")
                continue
            department = db.query(Department).filter(Department.name == dept_name).one()
            course_ids = [
                c.id
                for c in db.query(Course).filter(
                    Course.department_id == department.id,
                    Course.name.in_(course_names),
                )
            ]
            try:
                students.create_student(
                    student_id, first_name, last_name, email, department.id, course_ids
                )
                print(f"  Created student: {student_id} {first_name} {last_name}")
            except StudentAdminError as e:
                print(f"  Warning: Could not create student {student_id}: {e.message}")

        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
