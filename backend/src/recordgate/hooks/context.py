"""Execution context handed to hook functions.

A hook never receives the collection, the store or the host application.
It gets a HookContext exposing the record in scope, the request query and
session, and a fixed set of capabilities:

- ``error(field, message)``: report a field error (does not abort)
- ``cancel(message, status)``: abort the operation (non-root sessions only)
- ``hide(field)`` / ``protect(field)``: drop a field from the record in
  scope (non-root sessions only)
- ``resources``: narrowed handles on auxiliary resources
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from recordgate.auth.types import Session
from recordgate.errors import CancellationError
from recordgate.hooks.types import HookEvent
from recordgate.validation.types import ErrorMap, Query

PUBLIC_OPERATIONS = ("find", "save", "remove")


def _forward(op: str, fn: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a bound method in a plain function without ``__self__``."""

    def call(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    call.__name__ = call.__qualname__ = op
    return call


class ResourceCapability:
    """Callable-only view of an auxiliary resource.

    Exposes the named operations of the target and nothing else: no
    attributes, no state, no way back to the target object itself.
    """

    __slots__ = ("_name", "_operations")

    def __init__(self, name: str, operations: Mapping[str, Callable[..., Any]]):
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_operations", MappingProxyType(dict(operations)))

    @classmethod
    def narrow(
        cls,
        name: str,
        target: Any,
        operations: Iterable[str] = PUBLIC_OPERATIONS,
    ) -> ResourceCapability:
        """Build a capability from the public callables of ``target``.

        Raises:
            ValueError: If a requested operation is missing or private
        """
        bound: dict[str, Callable[..., Any]] = {}
        for op in operations:
            fn = getattr(target, op, None)
            if op.startswith("_") or not callable(fn):
                raise ValueError(f"Resource '{name}' has no public operation '{op}'")
            bound[op] = _forward(op, fn)
        return cls(name, bound)

    @property
    def name(self) -> str:
        return self._name

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(self._operations)

    def __getattr__(self, op: str) -> Callable[..., Any]:
        try:
            return self._operations[op]
        except KeyError:
            raise AttributeError(
                f"Resource '{self._name}' does not expose '{op}'"
            ) from None

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError("ResourceCapability is read-only")

    def __dir__(self) -> list[str]:
        return sorted(self._operations)

    def __repr__(self) -> str:
        return f"<ResourceCapability {self._name} {list(self._operations)}>"


def narrow_resources(
    resources: Mapping[str, Any] | None,
) -> Mapping[str, ResourceCapability]:
    """Narrow a name -> resource mapping into read-only capabilities.

    Values that are already capabilities are kept as-is. Objects providing
    a ``capability()`` method (collections) narrow themselves.
    """
    narrowed: dict[str, ResourceCapability] = {}
    for name, target in (resources or {}).items():
        if isinstance(target, ResourceCapability):
            narrowed[name] = target
        elif callable(getattr(target, "capability", None)):
            narrowed[name] = target.capability()
        else:
            narrowed[name] = ResourceCapability.narrow(name, target)
    return MappingProxyType(narrowed)


class HookContext:
    """Runtime context for one hook invocation.

    Attributes:
        event: The lifecycle event being handled
        session: The caller's session
        query: The request query (read-only view)
        data: The record in scope; hooks may set defaults on it
        resources: Auxiliary resource capabilities
        resource_name: Name of the collection running the hook
    """

    def __init__(
        self,
        event: HookEvent,
        session: Session,
        query: Query | None,
        data: Any,
        resources: Mapping[str, ResourceCapability] | None = None,
        resource_name: str = "",
    ):
        self.event = event
        self.session = session
        self.query = MappingProxyType(dict(query or {}))
        self.data = data
        self.resources = resources if resources is not None else MappingProxyType({})
        self.resource_name = resource_name
        self._errors = ErrorMap()

    @property
    def is_root(self) -> bool:
        return self.session.is_root

    @property
    def errors(self) -> Mapping[str, str | bool]:
        """Errors reported so far in this invocation."""
        return MappingProxyType(self._errors)

    def collected_errors(self) -> ErrorMap | None:
        return ErrorMap(self._errors) if self._errors else None

    def error(self, field: str, message: str | None = None) -> None:
        """Report an error for ``field``. Later calls for a field win."""
        self._errors[field] = message or True

    def cancel(self, message: str, status: int | None = None) -> None:
        """Abort the operation. No-op for root sessions.

        Raises:
            CancellationError: For non-root sessions
        """
        if not self.session.is_root:
            raise CancellationError(message, status)

    def hide(self, field: str) -> None:
        """Remove ``field`` from the record in scope. No-op for root sessions."""
        if self.session.is_root:
            return
        if isinstance(self.data, dict):
            self.data.pop(field, None)

    protect = hide


def build_context(
    event: HookEvent,
    session: Session,
    query: Query | None,
    data: Any,
    resources: Mapping[str, ResourceCapability] | None = None,
    resource_name: str = "",
) -> HookContext:
    """Build the HookContext for a single invocation."""
    return HookContext(
        event=event,
        session=session,
        query=query,
        data=data,
        resources=resources,
        resource_name=resource_name,
    )
