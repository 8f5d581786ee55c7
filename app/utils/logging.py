"""로깅 설정 모듈 — 표준 logging 구성 및 요청 ID 주입.

Logging configuration module.
Configures the root logger once with a structured format and a filter that
injects the current request id (set by the request logging middleware).
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

# 요청 ID 컨텍스트 변수 — Per-request id visible to every log record
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestContextFilter(logging.Filter):
    """로그 레코드에 request_id를 주입하는 필터 (Adds request_id to each record)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def configure_logging(level: str | int = logging.INFO) -> None:
    """루트 로거를 stdout 핸들러와 컨텍스트 필터로 구성합니다.

    Configure root logging with a structured format and the request context filter.
    Pre-existing root handlers are replaced so repeated calls stay idempotent.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | rid=%(request_id)s | %(message)s")
    )
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
