"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

One-shot bulk import of prompts from a spreadsheet-backed web app.
"""

import json
import logging
from typing import Any, Optional

import httpx

from .store import PromptStore

LOGGER = logging.getLogger(__name__)


class ImporterError(Exception):
    """Base exception for sheet import failures."""


class ImporterConfigError(ImporterError):
    """Raised when the sheet URL or shared secret is not configured."""


def _extract_items(response: httpx.Response) -> list[Any]:
    """Return the ``items`` array of the response body; anything malformed counts as empty."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        LOGGER.warning("Sheet response is not valid JSON; treating as empty")
        return []
    if not isinstance(body, dict):
        return []
    items = body.get("items")
    return items if isinstance(items, list) else []


class SheetImporter:
    """Pull every row from the sheet web app and upsert it into the store."""

    def __init__(
        self,
        url: Optional[str],
        secret: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.secret = secret
        self.timeout = timeout
        self.transport = transport

    def check_config(self) -> None:
        """Raise ImporterConfigError unless both URL and secret are set."""
        missing = [
            name
            for name, value in (("PROMPTS_SHEET_URL", self.url), ("PROMPTS_SHARED_SECRET", self.secret))
            if not value
        ]
        if missing:
            raise ImporterConfigError(f"missing {' / '.join(missing)}")

    async def fetch_items(self) -> list[Any]:
        """POST the list action and return the raw rows."""
        self.check_config()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.url, json={"action": "list", "secret": self.secret})
        if response.is_error:
            LOGGER.warning("Sheet responded with status %i", response.status_code)
        return _extract_items(response)

    async def run(self, store: PromptStore) -> int:
        """Import every row through ``store.put``; returns the number stored.

        A failing put aborts the remaining rows.
        """
        items = await self.fetch_items()
        count = 0
        for item in items:
            await store.put(item if isinstance(item, dict) else {})
            count += 1
        LOGGER.info("Imported %i prompts from sheet", count)
        return count
