"""HTTP errors that carry a machine-readable error code.

Usage:
    from lms.core.errors import raise_with_code, ASSIGNMENT_NOT_VISIBLE

    raise_with_code(
        status_code=404,
        detail="Assignment not found",
        code=ASSIGNMENT_NOT_VISIBLE,
    )

The response body will be:
    {"detail": "Assignment not found", "code": "ASSIGNMENT_NOT_VISIBLE"}
"""

from fastapi import HTTPException
from fastapi.responses import JSONResponse


ASSIGNMENT_NOT_VISIBLE = "ASSIGNMENT_NOT_VISIBLE"
COURSE_NOT_IN_ORGANIZATION = "COURSE_NOT_IN_ORGANIZATION"
UNIT_NOT_IN_ORGANIZATION = "UNIT_NOT_IN_ORGANIZATION"
STUDENT_NOT_IN_ORGANIZATION = "STUDENT_NOT_IN_ORGANIZATION"
NO_ORGANIZATION = "NO_ORGANIZATION"
ASSIGNMENT_NOT_FOUND = "ASSIGNMENT_NOT_FOUND"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
SHARED_RESOURCE_NOT_FOUND = "SHARED_RESOURCE_NOT_FOUND"
RESOURCE_NOT_IN_ORGANIZATION = "RESOURCE_NOT_IN_ORGANIZATION"
ALREADY_ENROLLED = "ALREADY_ENROLLED"
ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"


class CodedHTTPException(HTTPException):
    """HTTPException that includes an error ``code`` in the JSON response."""

    def __init__(self, status_code: int, detail: str, code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


def raise_with_code(status_code: int, detail: str, code: str) -> None:
    raise CodedHTTPException(status_code=status_code, detail=detail, code=code)


def coded_exception_handler(_request, exc: CodedHTTPException):
    """Registered on the FastAPI app for CodedHTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )
