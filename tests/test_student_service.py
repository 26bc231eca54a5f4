"""Tests for the student lifecycle service."""

from datetime import timedelta

import pytest

from config import settings
from student_admin.exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    StudentNotFoundError,
    ValidationFailedError,
)
from student_admin.models import Student
from student_admin.services.students import StudentService


def _create(service, catalog, student_id="S001", email="ada@example.com", courses=("algorithms",), **overrides):
    fields = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "department_id": catalog["cs"].id,
        "course_ids": [catalog[name].id for name in courses],
    }
    fields.update(overrides)
    return service.create_student(student_id, email=email, **fields)


class TestCreateStudent:
    def test_created_student_is_active_with_resolved_associations(self, db_session, catalog):
        student = _create(StudentService(db_session), catalog, courses=("algorithms", "databases"))

        assert student.is_active is True
        assert student.department.name == "Computer Science"
        assert [c.name for c in student.courses] == ["Algorithms", "Databases"]
        assert student.created_at is not None
        assert student.updated_at is not None

    def test_timestamps_stay_utc_after_reload(self, db_session, catalog):
        _create(StudentService(db_session), catalog)

        db_session.expire_all()
        stored = db_session.query(Student).one()
        assert stored.created_at.utcoffset() == timedelta(0)
        assert stored.updated_at.utcoffset() == timedelta(0)

    def test_duplicate_student_id_leaves_store_unchanged(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)

        with pytest.raises(DuplicateResourceError):
            _create(service, catalog, email="other@example.com")
        assert db_session.query(Student).count() == 1

    def test_duplicate_id_is_checked_before_validation(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)

        with pytest.raises(DuplicateResourceError):
            _create(service, catalog, department_id=9999)

    def test_nonexistent_department_persists_nothing(self, db_session, catalog):
        with pytest.raises(BusinessRuleViolation) as exc_info:
            _create(StudentService(db_session), catalog, department_id=9999, courses=())
        assert "Department with ID '9999' does not exist." in exc_info.value.errors
        assert db_session.query(Student).count() == 0

    def test_inactive_department_is_rejected(self, db_session, catalog):
        with pytest.raises(BusinessRuleViolation):
            _create(StudentService(db_session), catalog, department_id=catalog["history"].id, courses=())

    def test_course_from_other_department_persists_nothing(self, db_session, catalog):
        with pytest.raises(ValidationFailedError) as exc_info:
            _create(StudentService(db_session), catalog, courses=("algorithms", "calculus"))

        assert exc_info.value.errors == [
            "Course 'Calculus' belongs to the 'Mathematics' department, "
            "not the 'Computer Science' department."
        ]
        assert db_session.query(Student).count() == 0

    def test_email_already_used(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)
        with pytest.raises(ValidationFailedError):
            _create(service, catalog, student_id="S002", email="ADA@example.com")


class TestUpdateStudent:
    def test_updates_fields_and_associations(self, db_session, catalog):
        service = StudentService(db_session)
        created = _create(service, catalog)
        created_at = created.created_at

        student = service.update_student(
            "S001",
            "Augusta",
            "King",
            "augusta@example.com",
            catalog["math"].id,
            [catalog["calculus"].id],
        )

        assert student.student_id == "S001"
        assert (student.first_name, student.last_name, student.email) == ("Augusta", "King", "augusta@example.com")
        assert student.department.name == "Mathematics"
        assert [c.name for c in student.courses] == ["Calculus"]
        assert student.created_at == created_at

    def test_same_email_in_other_case_is_not_a_duplicate(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)
        student = service.update_student("S001", "Ada", "Lovelace", "ADA@EXAMPLE.COM", catalog["cs"].id)
        assert student.email == "ADA@EXAMPLE.COM"

    def test_omitted_courses_clear_enrollment(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)
        student = service.update_student("S001", "Ada", "Lovelace", "ada@example.com", catalog["cs"].id)
        assert student.courses == []

    def test_failed_update_changes_nothing(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)

        with pytest.raises(ValidationFailedError):
            service.update_student(
                "S001", "Changed", "Name", "ada@example.com", catalog["cs"].id, [catalog["calculus"].id]
            )

        db_session.expire_all()
        stored = db_session.query(Student).filter(Student.student_id == "S001").one()
        assert stored.first_name == "Ada"
        assert [c.name for c in stored.courses] == ["Algorithms"]

    def test_unknown_student(self, db_session, catalog):
        with pytest.raises(StudentNotFoundError):
            StudentService(db_session).update_student("NOPE", "A", "B", "a@b.com", catalog["cs"].id)


class TestStatus:
    def test_soft_delete_keeps_the_row(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)

        service.soft_delete_student("S001")

        db_session.expire_all()
        stored = db_session.query(Student).filter(Student.student_id == "S001").one()
        assert stored.is_active is False

    def test_toggle_flips_both_ways(self, db_session, catalog):
        service = StudentService(db_session)
        _create(service, catalog)

        assert service.toggle_student_status("S001").is_active is False
        assert service.toggle_student_status("S001").is_active is True

    def test_unknown_student(self, db_session):
        service = StudentService(db_session)
        with pytest.raises(StudentNotFoundError):
            service.soft_delete_student("NOPE")
        with pytest.raises(StudentNotFoundError):
            service.toggle_student_status("NOPE")
        with pytest.raises(StudentNotFoundError):
            service.get_student("NOPE")


@pytest.fixture()
def roster(catalog, make_student):
    cs = catalog["cs"]
    make_student("S001", "John", "Smith", "john@example.com", cs)
    make_student("S002", "Anna", "Smithson", "anna@example.com", cs)
    make_student("S003", "Mark", "Jones", "mark.smith@example.com", cs)
    make_student("S004", "Eve", "Smith", "eve@example.com", cs, is_active=False)
    make_student("SMITH-5", "Zed", "Adams", "zed@example.com", cs)
    make_student("S006", "Carl", "Brown", "carl@example.com", cs)


class TestListAndExport:
    def test_filter_matches_any_field_case_insensitively(self, db_session, roster):
        page = StudentService(db_session).list_students(filter_text="smith", is_active=True, page=0, size=10)
        assert sorted(s.student_id for s in page.items) == ["S001", "S002", "S003", "SMITH-5"]
        assert page.total_elements == 4

    def test_status_filter_alone(self, db_session, roster):
        page = StudentService(db_session).list_students(is_active=False)
        assert [s.student_id for s in page.items] == ["S004"]

    def test_page_size_and_sort(self, db_session, roster):
        service = StudentService(db_session)
        first = service.list_students(page=0, size=4, sort_by="last_name", sort_dir="desc")
        second = service.list_students(page=1, size=4, sort_by="last_name", sort_dir="desc")

        assert [s.last_name for s in first.items] == ["Smithson", "Smith", "Smith", "Jones"]
        assert [s.last_name for s in second.items] == ["Brown", "Adams"]
        assert first.total_pages == 2

    def test_rejects_bad_paging(self, db_session, roster):
        with pytest.raises(ValidationFailedError) as exc_info:
            StudentService(db_session).list_students(page=-1, size=0, sort_by="password", sort_dir="up")
        assert len(exc_info.value.errors) == 4

    def test_export_equals_concatenated_pages(self, db_session, roster):
        service = StudentService(db_session)
        exported = service.export_students(filter_text="smith")

        total = service.list_students(filter_text="smith", size=1).total_elements
        pages = []
        for number in range(total):
            pages.extend(service.list_students(filter_text="smith", page=number, size=1, sort_by="id").items)

        assert [s.id for s in exported] == [s.id for s in pages]
        assert [s.id for s in exported] == sorted(s.id for s in exported)
        assert len(exported) == 5

    def test_wildcard_characters_match_literally(self, db_session, catalog, roster, make_student):
        make_student("S_007", "Ida", "Under", "ida@example.com", catalog["cs"])
        service = StudentService(db_session)

        assert [s.student_id for s in service.list_students(filter_text="_").items] == ["S_007"]
        assert service.list_students(filter_text="%").total_elements == 0
        assert service.list_students(filter_text="j_hn").total_elements == 0
        assert [s.student_id for s in service.export_students(filter_text="_")] == ["S_007"]

    def test_one_page_can_hold_every_match(self, db_session, catalog):
        total = settings.max_page_size + 1
        db_session.add_all(
            [
                Student(
                    student_id=f"B{n:03d}",
                    first_name="Bulk",
                    last_name=f"{n:03d}",
                    email=f"bulk{n}@example.com",
                    department=catalog["cs"],
                )
                for n in range(total)
            ]
        )
        db_session.commit()
        service = StudentService(db_session)

        page = service.list_students(page=0, size=total, sort_by="id")

        assert len(page.items) == total
        assert page.total_pages == 1
        assert [s.id for s in page.items] == [s.id for s in service.export_students()]
