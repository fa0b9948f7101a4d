from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class MCPHTTPError(Exception):
    def __init__(self, message: str, status_code: int | None = 502, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ProtocolError(MCPHTTPError):
    """A JSON-RPC level failure: bad envelope, bad session, bad arguments."""

    def __init__(
        self,
        code: int,
        message: str,
        *,
        http_status: int = 400,
        data: Any = None,
        request_id: Any = None,
    ) -> None:
        super().__init__(message, status_code=http_status, payload=data)
        self.code = code
        self.data = data
        self.request_id = request_id

    def envelope(self) -> Dict[str, Any]:
        return error_envelope(self.request_id, self.code, self.message, self.data)


def error_envelope(request_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def result_envelope(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def register_exception_handler(app: FastAPI) -> None:
    @app.exception_handler(ProtocolError)
    async def _protocol_error_handler(request: Request, exc: ProtocolError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code or 400, content=exc.envelope())
