"""Collection resource: validates requests and proxies them into a Store.

A Collection is configured with:

- ``path``: the base path the resource handles (also names its store)
- ``properties``: the PropertySchema records must conform to
- ``store``: the Store used for persistence
- ``hooks``: callables (or registered hook names) keyed by event, e.g.
  ``{"onPost": stamp_created, "onGet": "hideSecret"}``
- ``resources``: auxiliary resources exposed to hooks as capabilities

Example:

    todos = Collection(
        "/todos",
        properties={"title": {"type": "string", "required": True}},
        store=MemoryStore("todos"),
        hooks={"onPost": lambda ctx: ctx.data.setdefault("done", False)},
    )
    saved = await todos.save(Session(), {"title": "write tests"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from recordgate.auth.types import Session
from recordgate.errors import PreconditionError
from recordgate.hooks.context import PUBLIC_OPERATIONS, ResourceCapability, narrow_resources
from recordgate.hooks.registry import HookRegistry
from recordgate.hooks.service import HookService
from recordgate.hooks.types import HookDefinition, HookEvent
from recordgate.persistence.adapter import Store
from recordgate.validation.services import sanitize, validate
from recordgate.validation.types import (
    IDENTITY_FIELD,
    ErrorMap,
    PropertySchema,
    Query,
    Record,
)

if TYPE_CHECKING:
    from recordgate.metadata.loader import ResourceConfig
    from recordgate.persistence.adapter import StoreFactory

logger = logging.getLogger(__name__)


def resolve_hooks(hooks: Mapping[Any, Any] | None) -> dict[HookEvent, HookDefinition]:
    """Bind configured hooks to events.

    Keys may be HookEvent members or setting keys (``onGet``...). Values
    may be callables or names registered in the HookRegistry.

    Raises:
        ValueError: For unknown events or unregistered hook names
    """
    resolved: dict[HookEvent, HookDefinition] = {}
    for key, value in (hooks or {}).items():
        if value is None:
            continue
        event = key if isinstance(key, HookEvent) else HookEvent.from_setting_key(key)
        if isinstance(value, str):
            resolved[event] = HookDefinition(event=event, name=value, fn=HookRegistry.get(value))
        elif callable(value):
            name = getattr(value, "__name__", event.setting_key)
            resolved[event] = HookDefinition(event=event, name=name, fn=value)
        else:
            raise ValueError(f"Hook for {event.setting_key} must be a callable or a hook name")
    return resolved


class Collection:
    """A schema-validated CRUD resource backed by a Store."""

    def __init__(
        self,
        path: str,
        properties: PropertySchema | Mapping[str, Any] | None = None,
        store: Store | None = None,
        hooks: Mapping[Any, Any] | None = None,
        resources: Mapping[str, Any] | None = None,
        strict: bool = True,
    ):
        self.path = "/" + path.strip("/")
        self.name = self.path.strip("/")
        if isinstance(properties, PropertySchema):
            self.properties = properties
        else:
            self.properties = PropertySchema.from_dict(dict(properties or {}))
        self.store = store
        self.strict = strict
        self.hooks = resolve_hooks(hooks)
        self._hook_service = HookService(narrow_resources(resources), self.name)

    @classmethod
    def from_config(
        cls,
        config: ResourceConfig,
        store_factory: StoreFactory,
        resources: Mapping[str, Any] | None = None,
    ) -> Collection:
        """Build a collection from loaded configuration."""
        return cls(
            path=config.path,
            properties=config.properties,
            store=store_factory.create_store(config.name),
            hooks=config.hooks,
            resources=resources,
            strict=config.strict,
        )

    def bind_resources(self, resources: Mapping[str, Any]) -> None:
        """Set the auxiliary resources exposed to this collection's hooks.

        Called once while wiring resources at startup, after every
        collection exists.
        """
        self._hook_service = HookService(narrow_resources(resources), self.name)

    def capability(self) -> ResourceCapability:
        """This collection as seen from other collections' hooks."""
        return ResourceCapability.narrow(self.name, self, PUBLIC_OPERATIONS)

    def validate(self, body: Record) -> ErrorMap | None:
        """Validate ``body`` against the collection properties."""
        return validate(body, self.properties)

    def sanitize(self, body: Record) -> Record:
        """Return only the declared, well-typed properties of ``body``."""
        return sanitize(body, self.properties, strict=self.strict)

    def _require_store(self) -> Store:
        if self.store is None:
            raise PreconditionError(f"Collection '{self.path}' has no store configured", 500)
        return self.store

    async def find(self, session: Session, query: Query | None = None) -> list[Any]:
        """Find the records matching ``query``, then run the get hook on each.

        Args:
            session: The caller's session
            query: Field equality filter

        Returns:
            The records in store order, redacted by the get hook. A record
            the hook reported errors for appears as ``{"errors": ...}``.
        """
        store = self._require_store()
        records = await store.find(dict(query or {}))
        logger.debug("find %s matched %d record(s)", self.path, len(records))
        outcome = await self._hook_service.exec_listener(
            HookEvent.GET, self.hooks.get(HookEvent.GET), session, query, records
        )
        return outcome.data

    async def save(
        self,
        session: Session,
        item: Record | None,
        query: Query | None = None,
    ) -> Record | ErrorMap | None:
        """Insert or update a record.

        An ``_id`` on the item (or in the query) makes this an update;
        otherwise it is an insert. The item is sanitized and validated,
        then the validate hook and the post/put hook run before the store
        is touched.

        Args:
            session: The caller's session
            item: The record to save
            query: Optional query; its ``_id`` targets an update

        Returns:
            The stored record, or an ErrorMap if validation or a hook
            reported field errors (nothing is persisted in that case)

        Raises:
            PreconditionError: If no item was given
            CancellationError: If a hook cancelled the request
        """
        if item is None or not isinstance(item, Mapping):
            raise PreconditionError("You must include an object when saving or updating.")
        store = self._require_store()

        query = dict(query or {})
        item = dict(item)

        # Identity travels in the query, never as a data field
        identity = item.pop(IDENTITY_FIELD, None)
        if identity:
            query[IDENTITY_FIELD] = identity
        is_update = bool(query.get(IDENTITY_FIELD))

        item = self.sanitize(item)
        errors = self.validate(item)
        if errors:
            logger.debug("save %s rejected by schema: %s", self.path, errors)
            return errors

        for event in (HookEvent.VALIDATE, HookEvent.PUT if is_update else HookEvent.POST):
            outcome = await self._hook_service.exec_listener(
                event, self.hooks.get(event), session, query, item
            )
            if outcome.failed:
                return outcome.errors
            item = outcome.data

        # Hooks may set or drop fields; re-check what reaches the store
        item = self.sanitize(item)
        errors = self.validate(item)
        if errors:
            logger.debug("save %s rejected after hooks: %s", self.path, errors)
            return errors

        if is_update:
            logger.debug("update %s %s", self.path, query.get(IDENTITY_FIELD))
            return await store.update(query, item)

        logger.debug("insert into %s", self.path)
        return await store.insert(item)

    async def remove(self, session: Session, query: Query | None) -> None:
        """Remove the record identified by ``query["_id"]``.

        The record is looked up first, then the delete hook runs for its
        authorization side effects, then the record is removed. Only a
        cancellation or a fault stops the removal; field errors the hook
        reports are logged and dropped.

        Raises:
            PreconditionError: If the query has no ``_id``
            CancellationError: If the delete hook cancelled the request
        """
        if not (query and query.get(IDENTITY_FIELD)):
            raise PreconditionError(
                "You must include a query with an _id when deleting an object from a collection."
            )
        store = self._require_store()
        query = dict(query)

        await store.find(query)
        outcome = await self._hook_service.exec_listener(
            HookEvent.DELETE, self.hooks.get(HookEvent.DELETE), session, query, None
        )
        if outcome.failed:
            logger.debug("delete hook on %s reported %s", self.path, outcome.errors)

        logger.debug("remove from %s %s", self.path, query[IDENTITY_FIELD])
        await store.remove(query)
        return None

    def __repr__(self) -> str:
        return f"Collection({self.path!r}, properties={list(self.properties)})"


def build_collections(
    configs: list[ResourceConfig],
    store_factory: StoreFactory,
) -> dict[str, Collection]:
    """Build every configured collection and wire auxiliary resources.

    Collections are created first so resources may reference each other
    in any order (including themselves).
    """
    collections = {
        config.name: Collection.from_config(config, store_factory) for config in configs
    }
    for config in configs:
        if config.resources:
            collections[config.name].bind_resources(
                {name: collections[name] for name in config.resources}
            )
    return collections
