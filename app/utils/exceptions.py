"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error statuses
the API emits, so routers and services never spell out status codes.

Usage:
    from app.utils.exceptions import NotFoundError, BadRequestError
    raise NotFoundError("Company not found")
    raise BadRequestError("Max age can't be less than min age.")
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a company or employee does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — null 본문, 잘못된 파라미터.

    Raised for null/malformed bodies and invalid query parameter combinations.
    detail may be a list of error messages (e.g. registration failures).
    """

    def __init__(self, detail: Any = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when the bearer token is missing, invalid or expired, or when
    login credentials are wrong.
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 역할 부족 (Authenticated user lacks a required role)."""

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotAcceptableError(HTTPException):
    """406 Not Acceptable 예외 — 지원하지 않는 Accept 미디어 타입."""

    def __init__(self, detail: str = "Requested media type is not supported") -> None:
        super().__init__(status_code=status.HTTP_406_NOT_ACCEPTABLE, detail=detail)


class UnprocessableEntityError(HTTPException):
    """422 Unprocessable Entity 예외 — 모델 검증 실패.

    Raised when a request body (or a patched DTO) fails validation.

    Args:
        detail: 검증 오류 목록 또는 메시지 (Validation error list or message)
    """

    def __init__(self, detail: Any = "Validation failed") -> None:
        super().__init__(status_code=422, detail=detail)
