"""구조화 로깅 — JSON 포매터 및 로깅 초기화.

Structured logging for application loggers. Request/response logs go to
Axiom through ``AxiomLoggingMiddleware``; everything logged through
``logging.getLogger(__name__)`` in services and handlers goes to stdout
via the handler installed here.
"""

import json
import logging
from datetime import datetime, timezone

# 로그 레코드에서 추출할 추가 필드 — Extra fields surfaced when present
_EXTRA_KEYS = ("user_id", "target_id", "kind", "path", "error_code", "status_code")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = str(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """애플리케이션 로깅을 한 번 구성합니다 — Configure root logging once on startup."""
    root = logging.getLogger()
    # 재호출 시 핸들러 중복 방지 — Avoid stacking handlers on repeated startup
    for existing in list(root.handlers):
        if getattr(existing, "_vidtube", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._vidtube = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
