"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.
"""
# spell-checker:ignore noauth healthz

from fastapi import APIRouter

from prompt_server._version import __version__
from prompt_server.app.database import get_substrate

noauth = APIRouter()


@noauth.get("/liveness")
async def liveness_probe():
    """Kubernetes liveness probe"""
    return {"status": "alive"}


@noauth.get("/readiness")
async def readiness_probe():
    """Kubernetes readiness probe"""
    return {"status": "ready"}


@noauth.get("/status")
async def get_status():
    """Return application version, status and the active substrate backend."""
    return {"version": __version__, "status": "ok", "substrate": get_substrate().backend}
