"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Shared helpers for API test modules.
"""
# pylint: disable=redefined-outer-name import-outside-toplevel

import importlib
import sys

import pytest
from fastapi.testclient import TestClient

ENV_TO_CLEAR = (
    "PROMPTS_DB_USERNAME",
    "PROMPTS_DB_PASSWORD",
    "PROMPTS_DB_DSN",
    "PROMPTS_URL_PREFIX",
    "PROMPTS_SHEET_URL",
    "PROMPTS_SHARED_SECRET",
    "PROMPTS_PUBLIC_URL",
)


def reload_app_modules() -> None:
    """Drop cached application modules so settings and the MCP server are rebuilt."""
    for mod in [name for name in sys.modules if name.startswith("prompt_server.app")]:
        sys.modules.pop(mod, None)


@pytest.fixture
def app_client(monkeypatch):
    """Build a TestClient after setting env vars and reloading the app."""

    def _make(env_vars: dict | None = None):
        # Prevent real DB connections
        for key in ENV_TO_CLEAR:
            monkeypatch.delenv(key, raising=False)

        if env_vars:
            for key, value in env_vars.items():
                monkeypatch.setenv(key, value)

        reload_app_modules()
        main = importlib.import_module("prompt_server.app.main")
        return TestClient(main.app)

    return _make
