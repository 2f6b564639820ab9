"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Prompt record store over the key-value substrate.

Records live under ``prompt:<id>`` as JSON. A secondary index under
``name:<normalized name>`` holds the id of the last record written with that
name. The two writes of an upsert are independent; a failure between them can
leave the index pointing at a stale id.
"""

import asyncio
import logging
import random
import time
import unicodedata
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

from prompt_server.app.database.kv import KeyValueStore
from .schemas import PromptDraft, PromptRecord

LOGGER = logging.getLogger(__name__)

RECORD_PREFIX = "prompt:"
NAME_PREFIX = "name:"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_name(name: Optional[str]) -> str:
    """Index key for a prompt name: surrounding whitespace removed, lower-cased."""

    return (name or "").strip().lower()


def today() -> str:
    """Current UTC date in ISO format."""

    return datetime.now(timezone.utc).date().isoformat()


def _base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def mint_id() -> str:
    """Return a new record id.

    Uses a random UUID. Platforms without an OS randomness source get a
    millisecond timestamp plus a pseudo-random base-36 suffix, which is not
    collision-free.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        LOGGER.warning("No secure random source; minting a timestamp-based id that may collide")
        return f"{int(time.time() * 1000)}-{_base36(random.getrandbits(52))}"


def _fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _collation_key(record: PromptRecord) -> tuple[str, str, str]:
    """Dictionary order: accents and case only break ties."""
    folded = record.name.casefold()
    return (_fold_accents(folded), folded, record.name)


def _matches(record: PromptRecord, needle: str) -> bool:
    return needle in record.name.lower() or needle in record.template.lower() or needle in record.tags.lower()


class PromptStore:
    """Create, read, list, search and touch prompt records."""

    def __init__(self, substrate: KeyValueStore) -> None:
        self.substrate = substrate

    async def put(self, record: Union[PromptDraft, Mapping[str, Any]]) -> str:
        """Upsert ``record`` and return its id.

        An explicit id replaces that record wholesale; otherwise a new id is
        minted. Missing fields take their defaults (``created_at`` is today).
        """
        draft = record if isinstance(record, PromptDraft) else PromptDraft.model_validate(record)
        prompt_id = draft.id if draft.id and draft.id.strip() else mint_id()
        doc = PromptRecord(
            id=prompt_id,
            name=draft.name or "",
            objective=draft.objective or "",
            template=draft.template or "",
            tags=draft.tags or "",
            author=draft.author or "",
            created_at=draft.created_at or today(),
            last_used_at=draft.last_used_at or "",
            notes=draft.notes or "",
        )
        await self.substrate.put(f"{RECORD_PREFIX}{prompt_id}", doc.model_dump_json())
        LOGGER.debug("Stored prompt id=%s", prompt_id)

        norm = normalize_name(doc.name)
        if norm:
            await self.substrate.put(f"{NAME_PREFIX}{norm}", prompt_id)
            LOGGER.debug("Indexed prompt name=%r -> id=%s", norm, prompt_id)
        return prompt_id

    async def get_by_id(self, prompt_id: Optional[str]) -> Optional[PromptRecord]:
        """Return the record stored under ``prompt_id`` or None."""
        if not prompt_id:
            return None
        raw = await self.substrate.get(f"{RECORD_PREFIX}{prompt_id}")
        if not raw:
            return None
        return PromptRecord.model_validate_json(raw)

    async def get_id_by_name(self, name: Optional[str]) -> Optional[str]:
        """Resolve a prompt name (any case, surrounding whitespace ignored) to an id."""
        norm = normalize_name(name)
        if not norm:
            return None
        return await self.substrate.get(f"{NAME_PREFIX}{norm}") or None

    async def get_by_name(self, name: Optional[str]) -> Optional[PromptRecord]:
        """Return the record currently indexed under ``name`` or None."""
        prompt_id = await self.get_id_by_name(name)
        if prompt_id is None:
            return None
        return await self.get_by_id(prompt_id)

    async def list_prompts(self) -> list[PromptRecord]:
        """Return every record sorted by name."""
        keys = await self.substrate.list_keys(RECORD_PREFIX)
        raws = await asyncio.gather(*(self.substrate.get(key) for key in keys))
        records = [PromptRecord.model_validate_json(raw) for raw in raws if raw]
        records.sort(key=_collation_key)
        return records

    async def search(self, query: Optional[str]) -> list[PromptRecord]:
        """Records whose name, template or tags contain ``query``, ignoring case."""
        needle = (query or "").lower()
        return [record for record in await self.list_prompts() if _matches(record, needle)]

    async def mark_used(self, prompt_id: Optional[str]) -> Optional[PromptRecord]:
        """Set ``last_used_at`` to today; returns None when the id is unknown."""
        doc = await self.get_by_id(prompt_id)
        if doc is None:
            return None
        doc.last_used_at = today()
        await self.substrate.put(f"{RECORD_PREFIX}{doc.id}", doc.model_dump_json())
        LOGGER.debug("Marked prompt id=%s used on %s", doc.id, doc.last_used_at)
        return doc
