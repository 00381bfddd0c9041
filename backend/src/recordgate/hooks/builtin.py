"""Framework-provided hooks, referenced by name from resource YAML."""

from datetime import UTC, datetime

from recordgate.hooks.context import HookContext
from recordgate.hooks.registry import HookRegistry


def require_session(ctx: HookContext) -> None:
    """Cancel requests that carry no authenticated subject."""
    if not ctx.session.user_id:
        ctx.cancel("You must be logged in", 401)


def stamp_created(ctx: HookContext) -> None:
    """Set ``created`` to the current UTC time."""
    ctx.data["created"] = datetime.now(UTC).isoformat()


def stamp_owner(ctx: HookContext) -> None:
    """Set ``owner`` to the session subject, or report it missing."""
    if ctx.session.user_id:
        ctx.data["owner"] = ctx.session.user_id
    elif not ctx.is_root:
        ctx.error("owner", "is required")


BUILTIN_HOOKS = {
    "requireSession": require_session,
    "stampCreated": stamp_created,
    "stampOwner": stamp_owner,
}


def register_builtin_hooks() -> None:
    """Register framework-provided hooks.

    Called at application startup; idempotent.
    """
    for name, fn in BUILTIN_HOOKS.items():
        HookRegistry.register(name, fn)
