"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

MCP server definition and HTTP edge middleware.
"""
# spell-checker:ignore fastmcp

import json
import logging

from fastmcp import FastMCP
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from prompt_server._version import __version__
from prompt_server.app.core.config import settings
from prompt_server.app.database import get_substrate
from prompt_server.app.prompts.importer import SheetImporter
from prompt_server.app.prompts.store import PromptStore
from .tools import PromptTools, register

LOGGER = logging.getLogger(__name__)

LIVENESS_TEXT = "OK: MCP server up"

CORS_HEADERS = [
    (b"access-control-allow-origin", b"*"),
    (b"access-control-allow-methods", b"*"),
    (b"access-control-allow-headers", b"*"),
    (b"access-control-expose-headers", b"Mcp-Session-Id"),
]
_CORS_NAMES = {name for name, _ in CORS_HEADERS}


def build_tools() -> PromptTools:
    """Bind the tools to the active substrate and current settings."""

    return PromptTools(
        store=PromptStore(get_substrate()),
        importer=SheetImporter(settings.sheet_url, settings.shared_secret, settings.import_timeout),
        public_url=settings.public_url,
    )


mcp = FastMCP("Prompt Catalog", version=__version__)
register(mcp, build_tools)


async def _respond(send: Send, status: int, body: bytes = b"", content_type: bytes | None = None) -> None:
    headers = list(CORS_HEADERS)
    if content_type is not None:
        headers.append((b"content-type", content_type))
    headers.append((b"content-length", str(len(body)).encode()))
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})


class EdgeMiddleware:
    """ASGI middleware for connectivity probes, CORS headers and last-resort errors.

    - ``OPTIONS`` gets an empty 204 and ``HEAD`` an empty 200.
    - ``GET /`` without ``text/event-stream`` in Accept returns a liveness string;
      any other request to ``/`` is routed to the MCP endpoint.
    - Every response carries permissive CORS headers.
    - Uncaught exceptions become a JSON 500 when the response has not started.
    """

    def __init__(self, app: ASGIApp, mcp_path: str = "/mcp") -> None:
        self.app = app
        self.mcp_path = "/" + mcp_path.strip("/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        if method == "OPTIONS":
            await _respond(send, 204)
            return
        if method == "HEAD":
            await _respond(send, 200)
            return

        root_path = scope.get("root_path", "")
        path = scope["path"]
        local_path = path[len(root_path):] if root_path and path.startswith(root_path) else path
        if local_path in ("", "/"):
            headers = dict(scope.get("headers", []))
            accept = headers.get(b"accept", b"").decode("latin-1")
            if method == "GET" and "text/event-stream" not in accept:
                await _respond(send, 200, LIVENESS_TEXT.encode(), b"text/plain; charset=utf-8")
                return
            target = f"{root_path}{self.mcp_path}/"
            scope = dict(scope, path=target, raw_path=target.encode())

        started = False

        async def send_with_cors(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
                headers = [(k, v) for k, v in message.get("headers", []) if k.lower() not in _CORS_NAMES]
                message = {**message, "headers": headers + CORS_HEADERS}
            await send(message)

        try:
            await self.app(scope, receive, send_with_cors)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Unhandled error serving %s %s", method, path)
            if started:
                raise
            body = json.dumps({"error": str(ex)}).encode("utf-8")
            await _respond(send, 500, body, b"application/json")
