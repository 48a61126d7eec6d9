"""Structured Logging — one JSON object per log line, keyed by order identifiers.

Invariants:
    - Every line carries timestamp (record time, UTC), level, logger and message
    - Order-domain `extra=` fields are copied when present; non-JSON values
      (UUIDs, Decimals, datetimes) are rendered with str()
    - setup_logging is idempotent: calling it twice leaves a single handler

Design Decisions:
    - SQLAlchemy engine and httpx request chatter is capped at WARNING; the
      request middleware already logs one line per HTTP call
"""

import json
import logging
from datetime import datetime, timezone

STRUCTURED_FIELDS = (
    "order_id", "order_number", "correlation_id", "user_id",
    "error_code", "operation",
    "method", "path", "status_code", "duration_ms",
)

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


def _jsonable(value):
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: _jsonable(getattr(record, key))
            for key in STRUCTURED_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class _OrderServiceHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _OrderServiceHandler)]:
        root.removeHandler(handler)

    handler = _OrderServiceHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
