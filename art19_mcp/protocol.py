"""JSON-RPC 2.0 handling for the MCP Streamable HTTP endpoint."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import __version__
from .common.api import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ProtocolError,
    result_envelope,
)
from .common.sessions import SessionStore
from .dispatch import Dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "art19-mcp"
SESSION_HEADER = "Mcp-Session-Id"
DEFAULT_PROTOCOL_VERSION = "2025-03-26"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")
INVALID_SESSION_MESSAGE = f"Invalid or missing {SESSION_HEADER}"


@dataclass
class RPCReply:
    body: Optional[Dict[str, Any]]
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)


class MCPHandler:
    def __init__(self, dispatcher: Dispatcher, sessions: SessionStore) -> None:
        self.dispatcher = dispatcher
        self.sessions = sessions

    def parse(self, raw: bytes) -> Dict[str, Any]:
        if not raw or not raw.strip():
            raise ProtocolError(INVALID_REQUEST, "Missing request body")
        try:
            message = json.loads(raw)
        except (UnicodeDecodeError, ValueError):
            raise ProtocolError(PARSE_ERROR, "Invalid JSON") from None
        if not isinstance(message, dict):
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", data="batch requests are not supported")
        if not isinstance(message.get("method"), str):
            raise ProtocolError(
                INVALID_REQUEST,
                "Invalid Request",
                data="method must be a string",
                request_id=message.get("id"),
            )
        return message

    def handle(self, message: Dict[str, Any], session_id: Optional[str]) -> RPCReply:
        method = message["method"]
        request_id = message.get("id")
        params = message.get("params")
        if params is None:
            params = {}

        if method == "initialize":
            return self._initialize(request_id, params)

        if not self.sessions.validate(session_id):
            logger.info("rejected session", extra={"rpc_method": method})
            raise ProtocolError(INVALID_REQUEST, INVALID_SESSION_MESSAGE, request_id=request_id)

        if "id" not in message:
            # notifications/initialized, notifications/cancelled, ...
            return RPCReply(body=None, status_code=202)

        if method == "ping":
            return RPCReply(result_envelope(request_id, {}))
        if method == "tools/list":
            return RPCReply(result_envelope(request_id, {"tools": self.dispatcher.registry.describe()}))
        if method == "tools/call":
            return RPCReply(result_envelope(request_id, self._call_tool(request_id, params)))

        raise ProtocolError(
            METHOD_NOT_FOUND,
            "Method not found",
            http_status=200,
            data=method,
            request_id=request_id,
        )

    def _initialize(self, request_id: Any, params: Any) -> RPCReply:
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else DEFAULT_PROTOCOL_VERSION
        session_id = self.sessions.create()
        logger.info("session created", extra={"session_id": session_id})
        result = {
            "protocolVersion": version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }
        return RPCReply(result_envelope(request_id, result), headers={SESSION_HEADER: session_id})

    def _call_tool(self, request_id: Any, params: Any) -> Dict[str, Any]:
        if not isinstance(params, dict):
            raise ProtocolError(
                INVALID_REQUEST,
                "Invalid Request",
                http_status=200,
                data="params must be an object",
                request_id=request_id,
            )
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError(
                INVALID_PARAMS,
                "Invalid params",
                http_status=200,
                data="name is required",
                request_id=request_id,
            )
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ProtocolError(
                INVALID_REQUEST,
                "Invalid Request",
                http_status=200,
                data="arguments must be an object",
                request_id=request_id,
            )
        return self.dispatcher.call(name, arguments)
