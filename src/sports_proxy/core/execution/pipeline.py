"""Two-phase execution: resolvers first, then data tools enriched with the resolved ids."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..logger import get_logger
from ..tools.models import ExecutionResult, ResolvedEntity, RunContext, ToolCall
from ..tools.registry import ENTITY_ARGUMENT_KEYS, ToolRegistry
from .executor import ToolExecutor

logger = get_logger(__name__)


class ResolutionEnrichmentPipeline:
    """
    Runs a batch of tool calls for one request.

    Phase 1 executes every resolver call and remembers the resolved entity of
    each type. Phase 2 executes the remaining calls, injecting resolved ids
    into arguments the call does not already carry. A failing call becomes a
    failed ``ExecutionResult`` and never stops the batch.
    """

    def __init__(self, executor: ToolExecutor, registry: Optional[ToolRegistry] = None) -> None:
        self.executor = executor
        self.registry = registry or executor.registry

    def new_context(self) -> RunContext:
        return RunContext()

    def ordered(self, tool_calls: Sequence[ToolCall]) -> List[ToolCall]:
        """Resolver calls first, then the others; relative order kept within each phase."""
        resolvers = [call for call in tool_calls if self.registry.is_resolver(call.name)]
        others = [call for call in tool_calls if not self.registry.is_resolver(call.name)]
        return resolvers + others

    async def process(self, tool_calls: Sequence[ToolCall]) -> List[ExecutionResult]:
        """Execute every call and return one result per call, resolver results first."""
        context = self.new_context()
        results: List[ExecutionResult] = []
        for call in self.ordered(tool_calls):
            results.append(await self.run(self.prepare(call, context), context, original=call))
        logger.info(
            "Processed %d tool call(s): %d succeeded.", len(results), sum(1 for result in results if result.success)
        )
        return results

    def prepare(self, call: ToolCall, context: RunContext) -> ToolCall:
        """The call as it will be executed: resolvers untouched, data tools enriched."""
        if self.registry.is_resolver(call.name):
            return call
        enriched = self.enrich_arguments(call, context.resolved)
        if enriched == call.arguments:
            return call
        return call.with_arguments(enriched)

    def enrich_arguments(self, call: ToolCall, resolved: Dict[str, ResolvedEntity]) -> Dict[str, object]:
        """Copy of the call's arguments with missing entity ids filled in.

        Arguments already present are never overwritten.
        """
        arguments = call.arguments_dict()
        for entity_type in self.registry.required_entities(call.name):
            entity = resolved.get(entity_type)
            key = ENTITY_ARGUMENT_KEYS.get(entity_type)
            if entity is None or key is None:
                continue
            if key not in arguments or arguments[key] in (None, ""):
                arguments[key] = str(entity.id)
        return arguments

    async def run(self, call: ToolCall, context: RunContext, original: Optional[ToolCall] = None) -> ExecutionResult:
        """Execute an already prepared call, recording resolved entities into ``context``.

        Args:
            call: The call to execute (as returned by ``prepare``).
            context: State of the current run.
            original: The call before enrichment, used to flag enriched results.
        """
        enriched = original is not None and call.arguments != original.arguments
        arguments = call.arguments_dict()
        try:
            payload, source = await self.executor.execute_with_source(call.name, arguments)
        except Exception as exc:
            msg = str(exc) or type(exc).__name__
            logger.warning("Tool '%s' failed: %s (%s)", call.name, msg, type(exc).__name__)
            return ExecutionResult.failed(call.name, msg, arguments=arguments, enriched=enriched)

        spec = self.registry.tools.get(call.name)
        if spec is not None and spec.resolves and isinstance(payload, dict):
            entity = ResolvedEntity.from_payload(spec.resolves, payload)
            if entity is not None:
                context.remember(entity)
                logger.debug("Resolved %s '%s' -> %s.", entity.entity_type, arguments.get("name"), entity.id)

        return ExecutionResult.ok(call.name, payload, arguments=arguments, enriched=enriched, source=source)
