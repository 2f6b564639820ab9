"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Pydantic models for prompt records.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class PromptRecord(BaseModel):
    """A stored prompt, as persisted under its id."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    objective: str = ""
    template: str = ""
    tags: str = ""
    author: str = ""
    created_at: str = ""
    last_used_at: str = ""
    notes: str = ""


def _to_day(value: str) -> str:
    """Reduce an ISO timestamp to its date part; other text passes through."""

    text = value.strip()
    if len(text) <= 10:
        return text
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return text


class PromptDraft(BaseModel):
    """Partial prompt accepted by upsert.

    Every field is optional; missing or empty values fall back to the record
    defaults. Spreadsheet rows use Spanish column names, accepted as aliases.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nombre"))
    objective: Optional[str] = Field(default=None, validation_alias=AliasChoices("objective", "objetivo"))
    template: Optional[str] = Field(default=None, validation_alias=AliasChoices("template", "plantilla"))
    tags: Optional[str] = None
    author: Optional[str] = Field(default=None, validation_alias=AliasChoices("author", "autor"))
    created_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("created_at", "fecha_creacion")
    )
    last_used_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("last_used_at", "fecha_ultimo_uso")
    )
    notes: Optional[str] = Field(default=None, validation_alias=AliasChoices("notes", "notas"))

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value)
        return str(value)

    @field_validator("created_at", "last_used_at")
    @classmethod
    def _day_precision(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _to_day(value)
