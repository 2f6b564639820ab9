"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Application settings loaded from environment variables and .env file.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings populated from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="PROMPTS_",
        env_file=PROJECT_ROOT / f".env.{os.getenv('PROMPTS_ENV', 'dev')}",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    # Server
    env: str = "dev"
    url_prefix: str = ""
    port: int = 8000
    log_level: str = "INFO"
    public_url: str = "http://localhost:8000"
    mcp_path: str = "/mcp"

    # Sheet importer
    sheet_url: Optional[str] = None
    shared_secret: Optional[str] = None
    import_timeout: float = 30.0

    # Key-value substrate (Oracle); in-memory when unset
    db_username: Optional[str] = None
    db_password: Optional[str] = None
    db_dsn: Optional[str] = None
    db_wallet_password: Optional[str] = None
    db_wallet_location: Optional[str] = None

    def importer_configured(self) -> bool:
        """Return True when both the sheet URL and shared secret are set."""

        return bool(self.sheet_url and self.shared_secret)


settings = Settings()
