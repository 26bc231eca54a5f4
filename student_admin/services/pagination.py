import math
from dataclasses import dataclass
from typing import Generic, Iterable, List, TypeVar

from student_admin.exceptions import ValidationFailedError

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort_by: str
    sort_dir: str

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class PageResult(Generic[T]):
    items: List[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0


def page_request(
    page: int, size: int, sort_by: str, sort_dir: str, sortable: Iterable[str]
) -> PageRequest:
    """Check paging arguments, collecting every problem before failing."""
    errors = []
    if page < 0:
        errors.append("Page index must not be negative.")
    if size < 1:
        errors.append("Page size must be at least 1.")
    sortable = list(sortable)
    if sort_by not in sortable:
        errors.append(f"Cannot sort by '{sort_by}'. Allowed fields: {', '.join(sortable)}.")
    direction = (sort_dir or "asc").lower()
    if direction not in ("asc", "desc"):
        errors.append("Sort direction must be 'asc' or 'desc'.")
    if errors:
        raise ValidationFailedError("Invalid paging parameters.", errors)
    return PageRequest(page, size, sort_by, direction)
