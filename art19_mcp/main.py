from __future__ import annotations

import argparse
import json
import logging
import socket
import sys
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from . import __version__
from .common.api import INTERNAL_ERROR, INVALID_REQUEST, ProtocolError, register_exception_handler
from .common.art19 import Art19Client
from .common.config import Art19ConfigError, Settings
from .common.logging import configure_logging, init_logging
from .common.sessions import SessionStore
from .dispatch import Dispatcher
from .protocol import INVALID_SESSION_MESSAGE, SESSION_HEADER, MCPHandler
from .tools import registry as default_registry
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    client: Optional[Art19Client] = None,
    sessions: Optional[SessionStore] = None,
    registry: Optional[ToolRegistry] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    client = client or Art19Client.from_settings(settings)
    sessions = sessions or SessionStore(ttl=settings.session_ttl, max_sessions=settings.max_sessions)
    registry = registry or default_registry

    handler = MCPHandler(Dispatcher(registry, client), sessions)

    app = FastAPI(title="ART19 MCP Server", version=__version__)
    init_logging(app)
    register_exception_handler(app)
    app.state.mcp = handler

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "tools": len(registry), "sessions": len(sessions)}

    @app.post("/mcp")
    async def mcp_endpoint(request: Request) -> Response:
        message = handler.parse(await request.body())
        try:
            reply = await run_in_threadpool(handler.handle, message, request.headers.get(SESSION_HEADER))
        except ProtocolError:
            raise
        except Exception as exc:  # noqa: BLE001 - always answer with an envelope
            logger.exception("unhandled error", extra={"rpc_method": message.get("method")})
            raise ProtocolError(
                INTERNAL_ERROR,
                "Internal error",
                http_status=500,
                data=type(exc).__name__,
                request_id=message.get("id"),
            ) from exc

        if reply.body is None:
            return Response(status_code=reply.status_code, headers=reply.headers)
        return JSONResponse(reply.body, status_code=reply.status_code, headers=reply.headers)

    @app.delete("/mcp")
    def end_session(request: Request) -> Response:
        if not sessions.expire(request.headers.get(SESSION_HEADER)):
            raise ProtocolError(INVALID_REQUEST, INVALID_SESSION_MESSAGE, http_status=404)
        return Response(status_code=204)

    return app


def bind_socket(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET6 if ":" in host else socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, port))
    sock.set_inheritable(True)
    return sock


def main(argv: Optional[List[str]] = None) -> int:
    import uvicorn

    parser = argparse.ArgumentParser(description="ART19 MCP Server")
    parser.add_argument("--host", default=None, help="Host to bind to (default ART19_MCP_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port to run on (default ART19_MCP_PORT or OS-assigned)")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        client = Art19Client.from_settings(settings)
    except Art19ConfigError as exc:
        print(f"art19-mcp: {exc.message}", file=sys.stderr)
        return 1

    host = args.host or settings.host
    port = settings.port if args.port is None else args.port
    app = create_app(settings, client=client)

    sock = bind_socket(host, port)
    bound_port = sock.getsockname()[1]
    print(json.dumps({"status": "started", "port": bound_port, "tools": len(default_registry)}), flush=True)
    logger.info("listening", extra={"port": bound_port})

    server = uvicorn.Server(
        uvicorn.Config(app, log_level=settings.log_level.lower(), access_log=False, log_config=None)
    )
    server.run(sockets=[sock])
    return 0


if __name__ == "__main__":
    sys.exit(main())
