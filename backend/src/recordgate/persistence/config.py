"""Database configuration and store factory selection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recordgate.persistence.adapter import StoreFactory

MEMORY_URL = "memory://"


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports memory://, sqlite:/// and postgresql:// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. DATABASE_URL env var (standard)
        2. RECORDGATE_DB=memory (in-memory stores, nothing persisted)
        3. Default: sqlite:///{base_path}/data/recordgate.db
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        if os.environ.get("RECORDGATE_DB", "").lower() == "memory":
            return cls(url=MEMORY_URL)

        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / 'recordgate.db'}")

        return cls(url="sqlite:///recordgate.db")

    @property
    def is_memory(self) -> bool:
        return self.url == MEMORY_URL

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        Ensures postgresql:// URLs use the psycopg (v3) driver.
        """
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


def create_store_factory(config: DatabaseConfig) -> StoreFactory:
    """Create a store factory based on the database URL scheme.

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_memory:
        from recordgate.persistence.memory import MemoryStoreFactory

        return MemoryStoreFactory()

    if config.is_sqlite:
        # Ensure parent directory exists for file databases
        db_path = config.url.replace("sqlite:///", "", 1)
        if db_path and db_path != ":memory:" and config.url.startswith("sqlite:///"):
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if config.is_sqlite or config.is_postgresql:
        from recordgate.persistence.sql import SQLStoreFactory

        return SQLStoreFactory(config.sqlalchemy_url)

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
