"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across routers.
"""

from pydantic import BaseModel


class ErrorDetails(BaseModel):
    """처리되지 않은 예외 응답 스키마.

    Body returned by the catch-all exception handler.

    Attributes:
        status_code: HTTP 상태 코드 (HTTP status code)
        message: 오류 메시지 (Error message)
    """

    status_code: int
    message: str
