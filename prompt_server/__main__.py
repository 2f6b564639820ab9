"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Run the prompt catalog server with uvicorn.
"""

import argparse
import logging

import uvicorn

from prompt_server import configure_logging
from prompt_server.app.core.config import settings

LOGGER = logging.getLogger("prompt_server")


def main() -> None:
    """Parse arguments and start uvicorn."""
    parser = argparse.ArgumentParser(description="Prompt catalog MCP server")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to start server")
    args = parser.parse_args()

    configure_logging(settings.log_level)
    LOGGER.info("API Server Using port: %i", args.port)
    uvicorn.run(
        "prompt_server.app.main:app",
        host=args.host,
        port=args.port,
        timeout_graceful_shutdown=5,
        log_config=None,
    )


if __name__ == "__main__":
    main()
