"""Collection resources - CRUD orchestration over a Store."""

from recordgate.resources.collection import Collection, build_collections, resolve_hooks

__all__ = ["Collection", "build_collections", "resolve_hooks"]
