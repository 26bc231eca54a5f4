"""
Reconcile a department's persisted courses with a submitted course list.

Planning is a single pass over ID-indexed state and never touches the
managed collection; :func:`apply_course_sync` then performs the updates,
inserts and orphan removals in one batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from student_admin.exceptions import ValidationFailedError
from student_admin.models import Course, Department

logger = logging.getLogger(__name__)


class CourseEntry(Protocol):
    id: Optional[int]
    name: str
    description: Optional[str]


@dataclass
class CourseSyncPlan:
    updates: List[Tuple[Course, CourseEntry]] = field(default_factory=list)
    inserts: List[CourseEntry] = field(default_factory=list)
    deletes: List[Course] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.updates or self.inserts or self.deletes)


def plan_course_sync(
    persisted: Iterable[Course], submitted: Sequence[CourseEntry]
) -> CourseSyncPlan:
    """Classify each submitted entry as update or insert and the rest as deletes.

    Raises ValidationFailedError listing every submitted ID that does not
    belong to the department, or that appears more than once.
    """
    by_id = {course.id: course for course in persisted}
    plan = CourseSyncPlan()
    referenced = set()
    errors = []

    for entry in submitted:
        if entry.id is None:
            plan.inserts.append(entry)
            continue
        if entry.id in referenced:
            errors.append(f"Course ID '{entry.id}' is submitted more than once.")
            continue
        course = by_id.get(entry.id)
        if course is None:
            errors.append(f"Course with ID '{entry.id}' does not belong to this department.")
            continue
        referenced.add(entry.id)
        plan.updates.append((course, entry))

    if errors:
        raise ValidationFailedError("Course list is invalid.", errors)

    plan.deletes = [course for course_id, course in by_id.items() if course_id not in referenced]
    return plan


def apply_course_sync(department: Department, plan: CourseSyncPlan) -> None:
    for course, entry in plan.updates:
        course.name = entry.name
        course.description = entry.description

    for entry in plan.inserts:
        department.courses.append(
            Course(
                name=entry.name,
                description=entry.description,
                is_active=department.is_active,
            )
        )

    # delete-orphan cascade removes these rows on flush
    for course in plan.deletes:
        department.courses.remove(course)

    logger.info(
        "Synchronized courses for department %s: %d updated, %d added, %d removed",
        department.id,
        len(plan.updates),
        len(plan.inserts),
        len(plan.deletes),
    )


def sync_courses(department: Department, submitted: Sequence[CourseEntry]) -> CourseSyncPlan:
    plan = plan_course_sync(department.courses, submitted)
    apply_course_sync(department, plan)
    return plan
