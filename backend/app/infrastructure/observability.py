"""Structured Logging: JSON records, credential redaction, and the access log.

Invariants:
    - Every record carries timestamp (event time, UTC), level, logger, message
    - Known extras (user_id, expense_id, error_code, path, method, status_code,
      duration_ms) are copied to the JSON body when set
    - Bearer tokens, JWT-shaped strings and password values are masked in the
      message and the exception text before any handler writes them
    - One access line per request; the query string and headers are never logged

Design Decisions:
    - stdlib logging only; the formatter and filter are the whole layer
    - Redaction is a handler filter, so third-party loggers (uvicorn, sqlalchemy)
      are covered too
"""

import json
import logging
import re
import time
from datetime import datetime, timezone

from fastapi import Request

LOG_EXTRA_FIELDS = (
    "user_id", "expense_id", "error_code", "path", "method", "status_code",
    "duration_ms",
)

REDACTED = "[REDACTED]"

_SECRET_PATTERNS = (
    re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+"),
    re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]*\.[A-Za-z0-9_-]*"),
    re.compile(r"""(?i)("?password"?\s*[:=]\s*)("[^"]*"|'[^']*'|\S+)"""),
)

# Libraries that are chatty at INFO and add nothing to the access log.
_QUIET_LOGGERS = ("sqlalchemy.engine", "passlib", "uvicorn.access")

access_logger = logging.getLogger("app.access")


def redact(text: str) -> str:
    """Mask credentials in a free-form string."""
    text = _SECRET_PATTERNS[0].sub(f"Bearer {REDACTED}", text)
    text = _SECRET_PATTERNS[1].sub(REDACTED, text)
    return _SECRET_PATTERNS[2].sub(lambda m: f"{m.group(1)}{REDACTED}", text)


class RedactingFilter(logging.Filter):
    """Rewrites the rendered message so tokens and passwords never reach a sink."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg, record.args = cleaned, None
        if record.exc_info and not record.exc_text:
            record.exc_text = redact(
                logging.Formatter().formatException(record.exc_info),
            )
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in LOG_EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_text:
            log["exception"] = record.exc_text
        elif record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install one redacting stream handler on the root logger."""
    handler = logging.StreamHandler()
    handler.addFilter(RedactingFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


async def log_requests(request: Request, call_next):
    """HTTP middleware: method, path, status and latency of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    access_logger.info(
        f"{request.method} {request.url.path} {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response
