from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from .common.art19 import Art19APIError, Art19Client
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def text_result(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def error_result(message: str, payload: Any = None) -> Dict[str, Any]:
    text = f"Error: {message}"
    if payload not in (None, "", {}):
        rendered = payload if isinstance(payload, str) else json.dumps(payload, indent=2, ensure_ascii=False)
        text = f"{text}\n\nUpstream response:\n{rendered}"
    return text_result(text, is_error=True)


def format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        message = str(error.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems) or "invalid arguments"


class Dispatcher:
    """Route a tool call to its translator and shape the outcome as a call result.

    Every failure below this boundary becomes an ``isError`` result.
    """

    def __init__(self, registry: ToolRegistry, client: Art19Client) -> None:
        self.registry = registry
        self.client = client

    def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        started = time.time()
        result = self._call(name, dict(arguments or {}))
        logger.info(
            "tool call",
            extra={
                "tool": name,
                "is_error": result["isError"],
                "duration_ms": round((time.time() - started) * 1000, 2),
            },
        )
        return result

    def _call(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        spec = self.registry.get(name)
        if spec is None:
            return error_result(f"Unknown tool: {name}")

        try:
            params = spec.input_model.model_validate(arguments)
        except ValidationError as exc:
            return error_result(f"Invalid arguments for {name}: {format_validation_error(exc)}")

        try:
            output = spec.handler(self.client, params)
        except Art19APIError as exc:
            logger.warning(
                "upstream error",
                extra={"tool": name, "upstream_status": exc.status_code},
            )
            return error_result(exc.message, exc.payload)
        except ValueError as exc:
            return error_result(str(exc))
        except Exception as exc:  # noqa: BLE001 - nothing may escape the tool boundary
            logger.exception("tool failed", extra={"tool": name})
            return error_result(f"{type(exc).__name__}: {exc}")

        return text_result(json.dumps(output, indent=2, ensure_ascii=False, default=str))
