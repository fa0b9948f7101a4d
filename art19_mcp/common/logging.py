from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict

from fastapi import FastAPI, Request

_request_id: ContextVar[str | None] = ContextVar("art19_mcp_request_id", default=None)

_EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "tool",
    "rpc_method",
    "session_id",
    "is_error",
    "upstream_status",
    "port",
)

logger = logging.getLogger("art19_mcp.http")


class JsonRequestFormatter(logging.Formatter):
    """Render log records as JSON lines with request metadata when available."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - base class contract
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or _request_id.get()
        if request_id:
            payload["request_id"] = request_id

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Send JSON log lines to stderr; stdout is reserved for the startup line."""

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonRequestFormatter())

    package_logger = logging.getLogger("art19_mcp")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False


def init_logging(app: FastAPI) -> None:
    """Attach request ID middleware and per-request completion logging."""

    @app.middleware("http")
    async def _log_request(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = _request_id.set(request_id)
        started = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request error", extra={"method": request.method, "path": request.url.path})
            raise
        finally:
            _request_id.reset(token)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request complete",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.time() - started) * 1000, 2),
            },
        )
        return response


def current_request_id() -> str | None:
    """Return the request ID for the active request if present."""

    return _request_id.get()
