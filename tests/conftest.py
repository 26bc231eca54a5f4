"""Test configuration and fixtures: in-memory SQLite, one fresh schema per test."""

import os

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "DEBUG"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_admin.database import Base, build_engine, get_db
from student_admin.main import app
from student_admin.models import Course, Department, Student

test_engine = build_engine("sqlite://", poolclass=StaticPool)
TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db_session():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture()
def client(db_session):
    """API client sharing the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def catalog(db_session):
    """Departments with courses:

    - Computer Science (active): Algorithms, Databases, Compilers (inactive)
    - Mathematics (active): Calculus
    - History (inactive): Ancient Rome (inactive)
    """
    cs = Department(name="Computer Science", is_active=True)
    cs.courses = [
        Course(name="Algorithms", description="Sorting and searching"),
        Course(name="Databases", description="Relational modelling"),
        Course(name="Compilers", is_active=False),
    ]
    math = Department(name="Mathematics", is_active=True)
    math.courses = [Course(name="Calculus")]
    history = Department(name="History", is_active=False)
    history.courses = [Course(name="Ancient Rome", is_active=False)]

    db_session.add_all([cs, math, history])
    db_session.commit()

    return {
        "cs": cs,
        "math": math,
        "history": history,
        "algorithms": cs.courses[0],
        "databases": cs.courses[1],
        "compilers": cs.courses[2],
        "calculus": math.courses[0],
        "rome": history.courses[0],
    }


@pytest.fixture()
def make_student(db_session):
    """Insert a student directly, bypassing validation."""

    def _make(student_id, first_name, last_name, email, department, courses=(), is_active=True):
        student = Student(
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            department=department,
            courses=list(courses),
            is_active=is_active,
        )
        db_session.add(student)
        db_session.commit()
        return student

    return _make
