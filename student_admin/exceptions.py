"""
Domain exceptions for the student records service.

Services raise these at the point of detection; the HTTP layer renders them
through a single exception handler using ``status_code`` and ``to_dict()``.
"""

from typing import Any, Dict, List, Optional


class StudentAdminError(Exception):
    """Base exception for all student records errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            **self.details,
        }


# ============================================
# Conflict Errors (409-type)
# ============================================

class DuplicateResourceError(StudentAdminError):
    """A uniqueness rule would be violated (student ID, email, department name)"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="DUPLICATE_RESOURCE")


class IntegrityConflictError(StudentAdminError):
    """The store rejected a write the application checks let through"""

    status_code = 409

    def __init__(
        self,
        message: str = "A database constraint was violated. This may be due to a duplicate entry.",
    ):
        super().__init__(message, code="INTEGRITY_CONFLICT")


class ConcurrentModificationError(StudentAdminError):
    """The record changed between read and write"""

    status_code = 409

    def __init__(
        self,
        message: str = "The record was modified by another request. Reload and try again.",
    ):
        super().__init__(message, code="CONCURRENT_MODIFICATION")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(StudentAdminError):
    """Lookup by identifier found nothing"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found with ID: {resource_id}",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class StudentNotFoundError(ResourceNotFoundError):
    def __init__(self, student_id: str):
        super().__init__("Student", student_id)


class DepartmentNotFoundError(ResourceNotFoundError):
    def __init__(self, department_id: int):
        super().__init__("Department", department_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationFailedError(StudentAdminError):
    """One or more business data rules failed.

    Carries every violated rule, in evaluation order, so a caller sees all
    problems in one response.
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        code: str = "VALIDATION_FAILED",
    ):
        self.errors = list(errors or [message])
        super().__init__(message, code=code, details={"errors": self.errors})


class BusinessRuleViolation(ValidationFailedError):
    """Structurally valid input forbidden by policy, e.g. an inactive department"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message, errors, code="BUSINESS_RULE_VIOLATION")
