"""Hook system types for RecordGate.

Defines the core data structures for collection lifecycle hooks:
- HookEvent: the lifecycle event a hook is bound to
- HookDefinition: a hook callable bound to an event
- HookOutcome: what a hook invocation produced
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from recordgate.validation.types import ErrorMap

if TYPE_CHECKING:
    from recordgate.hooks.registry import HookFn


class HookEvent(Enum):
    """Collection lifecycle events.

    GET: after a find, once per returned record
    POST: before inserting a new record
    PUT: before updating an existing record
    DELETE: before removing a record (no payload)
    VALIDATE: before POST/PUT on every write
    """

    GET = "Get"
    POST = "Post"
    PUT = "Put"
    DELETE = "Delete"
    VALIDATE = "Validate"

    @property
    def setting_key(self) -> str:
        """Configuration key for this event (e.g. ``onPost``)."""
        return f"on{self.value}"

    @classmethod
    def from_setting_key(cls, key: str) -> HookEvent:
        """Resolve ``onGet``/``onPost``/... to an event.

        Raises:
            ValueError: If the key does not name a lifecycle event
        """
        for event in cls:
            if event.setting_key == key:
                return event
        raise ValueError(f"Unknown hook event '{key}'")


VALID_HOOK_KEYS = tuple(event.setting_key for event in HookEvent)


@dataclass(frozen=True)
class HookDefinition:
    """A hook bound to one lifecycle event of a collection.

    Attributes:
        event: The lifecycle event
        name: Registered hook name, or the callable's own name
        fn: Sync or async callable taking a HookContext
    """

    event: HookEvent
    name: str
    fn: HookFn


@dataclass
class HookOutcome:
    """Result of a completed hook invocation.

    Attributes:
        data: The record (or list) in scope, possibly redacted by the hook
        errors: Field errors reported through ``error()``, None if none
    """

    data: Any = None
    errors: ErrorMap | None = None

    @property
    def failed(self) -> bool:
        return bool(self.errors)
