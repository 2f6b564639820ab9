"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Shared fixtures for the prompt server tests.
"""
# pylint: disable=redefined-outer-name

import pytest

from prompt_server.app.database import MemoryKeyValueStore, clear_substrate, set_substrate
from prompt_server.app.prompts.store import PromptStore


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def substrate():
    """Fresh in-memory substrate installed as the active backend."""
    kv = MemoryKeyValueStore()
    set_substrate(kv)
    yield kv
    clear_substrate()


@pytest.fixture
def store(substrate):
    """PromptStore over the in-memory substrate."""
    return PromptStore(substrate)
