"""RecordGate collection lifecycle hook system.

Provides extension points for owner logic that runs around collection
operations:
- onGet: after a find, once per returned record (redaction)
- onValidate: before onPost/onPut on every write
- onPost: before inserting a record (defaulting, authorization)
- onPut: before updating a record
- onDelete: before removing a record (authorization only)

Usage:
    from recordgate.hooks import hook, HookContext

    @hook("ownerOnly")
    def owner_only(ctx: HookContext) -> None:
        if ctx.data.get("owner") != ctx.session.user_id:
            ctx.cancel("Not your record", 403)
"""

from recordgate.hooks.builtin import BUILTIN_HOOKS, register_builtin_hooks
from recordgate.hooks.context import (
    HookContext,
    ResourceCapability,
    build_context,
    narrow_resources,
)
from recordgate.hooks.registry import HookFn, HookRegistry, hook
from recordgate.hooks.service import HookService
from recordgate.hooks.types import (
    VALID_HOOK_KEYS,
    HookDefinition,
    HookEvent,
    HookOutcome,
)

__all__ = [
    "BUILTIN_HOOKS",
    "HookContext",
    "HookDefinition",
    "HookEvent",
    "HookFn",
    "HookOutcome",
    "HookRegistry",
    "HookService",
    "ResourceCapability",
    "VALID_HOOK_KEYS",
    "build_context",
    "hook",
    "narrow_resources",
    "register_builtin_hooks",
]
