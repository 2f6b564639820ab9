"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

FastAPI application entrypoint.
"""
# spell-checker:ignore fastmcp

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from prompt_server._version import __version__
from prompt_server.app.api.v1.router import router as v1_router
from prompt_server.app.core.config import settings
from prompt_server.app.database import close_substrate, initialize_substrate
from prompt_server.app.mcp.server import EdgeMiddleware, mcp


#############################################################################
# APP FACTORY
#############################################################################
LOGGER = logging.getLogger(__name__)

API_PREFIX = "/v1"
MCP_PATH = "/" + settings.mcp_path.strip("/")

mcp_app = mcp.http_app(path="/", stateless_http=True)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """FastAPI Lifespan"""
    substrate = await initialize_substrate()
    LOGGER.info("Prompt store using %s substrate", substrate.backend)
    if not settings.importer_configured():
        LOGGER.info("Sheet importer not configured; import_from_sheet will report an error")
    try:
        async with mcp_app.lifespan(_app):
            yield
    finally:
        await close_substrate()


BASE_PATH = settings.url_prefix.strip("/")
BASE_PATH = f"/{BASE_PATH}" if BASE_PATH else ""

app = FastAPI(
    title="Prompt Catalog MCP Server",
    version=__version__,
    docs_url=f"{API_PREFIX}/docs",
    openapi_url=f"{API_PREFIX}/openapi.json",
    root_path=BASE_PATH,
    lifespan=lifespan,
    license_info={
        "name": "Universal Permissive License",
        "url": "http://oss.oracle.com/licenses/upl",
    },
)

app.include_router(v1_router, prefix=API_PREFIX)
app.mount(MCP_PATH, mcp_app)
app.add_middleware(EdgeMiddleware, mcp_path=MCP_PATH)
