"""Hook execution service for RecordGate.

Runs the hook bound to a lifecycle event against a freshly built context,
collects the field errors it reports, and lets cancellations and faults
propagate to the caller untouched.
"""

import inspect
import logging
from collections.abc import Mapping
from typing import Any

from recordgate.auth.types import Session
from recordgate.errors import CancellationError
from recordgate.hooks.context import HookContext, ResourceCapability, build_context
from recordgate.hooks.types import HookDefinition, HookEvent, HookOutcome
from recordgate.validation.types import Query

logger = logging.getLogger(__name__)


class HookService:
    """Executes collection hooks.

    One instance serves one collection; it holds the auxiliary resource
    capabilities handed to every context it builds. Each invocation gets
    its own context and ErrorMap, so concurrent requests never share
    error state.
    """

    def __init__(
        self,
        resources: Mapping[str, ResourceCapability] | None = None,
        resource_name: str = "",
    ):
        self._resources = resources
        self._resource_name = resource_name

    async def exec_listener(
        self,
        event: HookEvent,
        definition: HookDefinition | None,
        session: Session,
        query: Query | None,
        data: Any,
    ) -> HookOutcome:
        """Run the hook for ``event``.

        Args:
            event: The lifecycle event
            definition: The bound hook, or None when the event has no hook
            session: The caller's session
            query: The request query
            data: The record in scope; for GET, the list of found records

        Returns:
            HookOutcome with the (possibly redacted) data and any field errors

        Raises:
            CancellationError: If the hook cancelled for a non-root session
            Exception: Any other failure raised by the hook, unchanged
        """
        if definition is None:
            return HookOutcome(data=data)

        if event is HookEvent.GET:
            return await self._exec_each(definition, session, query, data or [])

        ctx = build_context(event, session, query, data, self._resources, self._resource_name)
        await self._invoke(definition, ctx)
        return HookOutcome(data=ctx.data, errors=ctx.collected_errors())

    async def _exec_each(
        self,
        definition: HookDefinition,
        session: Session,
        query: Query | None,
        records: list[dict[str, Any]],
    ) -> HookOutcome:
        """Apply a GET hook to each record independently, keeping order.

        A record whose own invocation reported errors is replaced in the
        result by ``{"errors": ...}``; the other records are unaffected.
        """
        results: list[Any] = []
        for record in records:
            ctx = build_context(
                HookEvent.GET, session, query, record, self._resources, self._resource_name
            )
            await self._invoke(definition, ctx)
            errors = ctx.collected_errors()
            results.append({"errors": errors} if errors else ctx.data)
        return HookOutcome(data=results)

    async def _invoke(self, definition: HookDefinition, ctx: HookContext) -> None:
        logger.debug(
            "Running %s hook '%s' on '%s' (root=%s)",
            ctx.event.value,
            definition.name,
            ctx.resource_name,
            ctx.is_root,
        )
        try:
            result = definition.fn(ctx)
            if inspect.isawaitable(result):
                await result
        except CancellationError as e:
            logger.info(
                "%s hook '%s' cancelled the request: %s (status %s)",
                ctx.event.value,
                definition.name,
                e.message,
                e.status,
            )
            raise
        except Exception as e:
            logger.warning(
                "%s hook '%s' failed: %s",
                ctx.event.value,
                definition.name,
                e,
            )
            raise
