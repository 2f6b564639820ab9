"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

MCP tools for the prompt catalog.

Every tool answers with a single text payload. Validation and not-found
outcomes are ordinary payloads starting with ``Error:`` (or a JSON object with
an ``error`` key); only infrastructure failures raise.
"""
# spell-checker:ignore fastmcp

import json
import logging
from typing import Callable, Optional

from fastmcp import FastMCP

from prompt_server.app.prompts.importer import ImporterConfigError, SheetImporter
from prompt_server.app.prompts.schemas import PromptDraft, PromptRecord
from prompt_server.app.prompts.store import PromptStore

LOGGER = logging.getLogger(__name__)

SEARCH_LIMIT = 25
UNTITLED = "(untitled)"


def _dumps(value, indent: Optional[int] = None) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent)


class PromptTools:
    """Tool implementations bound to one store and importer."""

    def __init__(self, store: PromptStore, importer: SheetImporter, public_url: str) -> None:
        self.store = store
        self.importer = importer
        self.public_url = public_url.rstrip("/")

    def deep_link(self, prompt_id: str) -> str:
        """Link a connector can show for a prompt."""
        return f"{self.public_url}/#prompt-{prompt_id}"

    async def ping(self) -> str:
        return "pong"

    async def list_prompts(self) -> str:
        records = await self.store.list_prompts()
        return _dumps([record.model_dump() for record in records], indent=2)

    async def find_prompts(self, q: str) -> str:
        records = await self.store.search(q)
        projected = [
            {"id": r.id, "name": r.name, "objective": r.objective, "tags": r.tags} for r in records
        ]
        return _dumps(projected, indent=2)

    async def append_prompt(
        self,
        name: Optional[str] = None,
        template: Optional[str] = None,
        objective: Optional[str] = None,
        tags: Optional[str] = None,
        author: Optional[str] = None,
        notes: Optional[str] = None,
        id: Optional[str] = None,  # pylint: disable=redefined-builtin
    ) -> str:
        missing = [field for field, value in (("name", name), ("template", template)) if not (value or "").strip()]
        if missing:
            return f"Error: missing required field(s): {', '.join(missing)}"
        draft = PromptDraft(
            id=id, name=name, template=template, objective=objective, tags=tags, author=author, notes=notes
        )
        prompt_id = await self.store.put(draft)
        return f"OK - id {prompt_id}"

    async def update_last_used(
        self,
        id: Optional[str] = None,  # pylint: disable=redefined-builtin
        name: Optional[str] = None,
    ) -> str:
        prompt_id = (id or "").strip()
        if not prompt_id and name:
            prompt_id = await self.store.get_id_by_name(name)
            if not prompt_id:
                return f"Error: no prompt named {name!r}"
        if not prompt_id:
            return "Error: missing id or name"
        if await self.store.mark_used(prompt_id) is None:
            return "Error: not found"
        return "OK"

    async def import_from_sheet(self) -> str:
        try:
            count = await self.importer.run(self.store)
        except ImporterConfigError as ex:
            return f"Error: {ex}"
        return f"Imported {count} items from sheet"

    async def search(self, query: str) -> str:
        records = await self.store.search(query)
        results = [
            {"id": r.id, "title": r.name or UNTITLED, "url": self.deep_link(r.id)} for r in records[:SEARCH_LIMIT]
        ]
        return _dumps({"results": results})

    async def fetch(self, id: str) -> str:  # pylint: disable=redefined-builtin
        doc = await self.store.get_by_id(id)
        if doc is None:
            return _dumps({"error": "not found", "id": id})
        return _dumps(self._document(doc))

    def _document(self, doc: PromptRecord) -> dict:
        return {
            "id": doc.id,
            "title": doc.name or UNTITLED,
            "text": doc.template,
            "url": self.deep_link(doc.id),
            "metadata": {
                "objective": doc.objective,
                "tags": doc.tags,
                "author": doc.author,
                "created_at": doc.created_at,
                "last_used_at": doc.last_used_at,
                "notes": doc.notes,
            },
        }


def register(mcp: FastMCP, tools: Callable[[], PromptTools]) -> None:
    """Bind every prompt tool onto ``mcp``; ``tools`` builds a fresh PromptTools per call."""

    @mcp.tool(name="ping", title="Ping", description="Health check.")
    async def ping() -> str:
        return await tools().ping()

    @mcp.tool(name="list_prompts", title="List prompts", description="Return every stored prompt.")
    async def list_prompts() -> str:
        return await tools().list_prompts()

    @mcp.tool(
        name="find_prompts",
        title="Find prompts",
        description="Filter prompts by text in name, template or tags.",
    )
    async def find_prompts(q: str) -> str:
        return await tools().find_prompts(q)

    @mcp.tool(
        name="append_prompt",
        title="Append prompt",
        description="Insert a prompt, or replace it when an existing id is given. name and template are required.",
    )
    async def append_prompt(
        name: Optional[str] = None,
        template: Optional[str] = None,
        objective: Optional[str] = None,
        tags: Optional[str] = None,
        author: Optional[str] = None,
        notes: Optional[str] = None,
        id: Optional[str] = None,  # pylint: disable=redefined-builtin
    ) -> str:
        return await tools().append_prompt(
            name=name, template=template, objective=objective, tags=tags, author=author, notes=notes, id=id
        )

    @mcp.tool(
        name="update_last_used",
        title="Mark prompt used",
        description="Set last_used_at to today for the prompt with this id or name.",
    )
    async def update_last_used(
        id: Optional[str] = None,  # pylint: disable=redefined-builtin
        name: Optional[str] = None,
    ) -> str:
        return await tools().update_last_used(id=id, name=name)

    @mcp.tool(
        name="import_from_sheet",
        title="Import from sheet",
        description="Load every row from the configured sheet web app (run once).",
    )
    async def import_from_sheet() -> str:
        return await tools().import_from_sheet()

    @mcp.tool(name="search", title="Search", description="Search prompts; returns up to 25 id/title/url results.")
    async def search(query: str) -> str:
        return await tools().search(query)

    @mcp.tool(name="fetch", title="Fetch", description="Fetch a prompt document by id.")
    async def fetch(id: str) -> str:  # pylint: disable=redefined-builtin
        return await tools().fetch(id)

    LOGGER.info("Registered prompt catalog MCP tools")
