"""Persistence layer - record stores and store factories."""

from recordgate.persistence.adapter import Store, StoreFactory
from recordgate.persistence.config import DatabaseConfig, create_store_factory
from recordgate.persistence.memory import MemoryStore, MemoryStoreFactory

__all__ = [
    "DatabaseConfig",
    "MemoryStore",
    "MemoryStoreFactory",
    "Store",
    "StoreFactory",
    "create_store_factory",
]
