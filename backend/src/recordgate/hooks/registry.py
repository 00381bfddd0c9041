"""Named hook lookup for RecordGate.

Resource YAML refers to hooks by name (``onPost: stampOwner``); this module
maps those names to the callables that implement them.
"""

from collections.abc import Awaitable, Callable

from recordgate.hooks.context import HookContext

# (HookContext) -> None, either a plain function or a coroutine function
HookFn = Callable[[HookContext], Awaitable[None] | None]


class HookRegistry:
    """Process-wide table of hook implementations.

    A name must be registered before a collection referencing it is built.
    Application modules register at import time with ``@hook``; the
    framework hooks are added by ``register_builtin_hooks()``.

    Example:
        @hook("hideSecret")
        def hide_secret(ctx: HookContext) -> None:
            ctx.hide("secret")
    """

    _hooks: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> None:
        """Register ``hook_fn`` under ``name``.

        The first registration of a name wins; later ones are ignored, so
        importing a hook module twice is harmless.
        """
        cls._hooks.setdefault(name, hook_fn)

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Look up a hook by name.

        Raises:
            ValueError: If nothing is registered under ``name``
        """
        try:
            return cls._hooks[name]
        except KeyError:
            raise ValueError(
                f"Hook '{name}' is not registered. "
                "Import the module defining it (RECORDGATE_HOOK_MODULES) "
                "before resources are loaded."
            ) from None

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        """Registered names, sorted."""
        return sorted(cls._hooks)

    @classmethod
    def clear(cls) -> None:
        """Forget every registration (test isolation)."""
        cls._hooks.clear()


def hook(name: str) -> Callable[[HookFn], HookFn]:
    """Register the decorated function as hook ``name``.

    The function is returned unchanged.
    """

    def decorator(fn: HookFn) -> HookFn:
        HookRegistry.register(name, fn)
        return fn

    return decorator
