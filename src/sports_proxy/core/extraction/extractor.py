"""Turns a request's text and declared tools into an ordered list of tool calls."""

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..exceptions import ToolValidationError
from ..logger import get_logger
from ..tools.models import ToolCall, ToolDefinition
from ..tools.registry import ToolRegistry, default_registry
from .matcher import PatternMatcher, default_matcher

logger = get_logger(__name__)

ToolDeclarations = Iterable[Union[ToolDefinition, Dict[str, Any]]]


def flatten_input(input_data: Any) -> str:
    """Lower-case a string input, or the JSON rendering of a structured one."""
    if input_data is None:
        return ""
    if isinstance(input_data, str):
        return input_data.lower()
    return json.dumps(input_data, ensure_ascii=False, default=str).lower()


class IntentExtractor:
    """
    Decides which tools an utterance needs.

    The primary pass emits at most one resolver call per entity type, then at
    most one data-tool call for the highest priority intent that has a
    declared tool. A naive name-substring pass runs only when the primary
    pass found nothing.
    """

    def __init__(self, matcher: Optional[PatternMatcher] = None, registry: Optional[ToolRegistry] = None) -> None:
        self.matcher = matcher or default_matcher()
        self.registry = registry or default_registry()

    def extract(self, input_data: Any, tool_definitions: Optional[ToolDeclarations]) -> List[ToolCall]:
        """Extract tool calls from the input.

        Args:
            input_data: Free text, or a structured message list.
            tool_definitions: Tools declared by the caller.

        Returns:
            Calls in emission order; empty when nothing matches or no tools are declared.
        """
        declared = self._declared_names(tool_definitions)
        if not declared:
            return []

        text = flatten_input(input_data)
        entities = self._match_entities(text)
        calls: List[ToolCall] = []

        for entity_type, matched in entities.items():
            resolver = self.registry.resolver_for(entity_type)
            if resolver and resolver in declared:
                calls.append(ToolCall(name=resolver, arguments={"name": matched}))

        for intent in self.matcher.matching_intents(text):
            tool_name = self.matcher.tool_for_intent(intent)
            if tool_name and tool_name in declared:
                calls.append(ToolCall(name=tool_name, arguments={}))
                break

        if not calls:
            calls = self._fallback(text, declared, entities)

        logger.debug("Extracted %d tool call(s): %s", len(calls), [call.name for call in calls])
        return calls

    def _match_entities(self, text: str) -> Dict[str, str]:
        entities: Dict[str, str] = {}
        for entity_type in self.matcher.entity_types:
            matched = self.matcher.match_entity(entity_type, text)
            if matched:
                entities[entity_type] = matched
        return entities

    def _fallback(self, text: str, declared: Sequence[str], entities: Dict[str, str]) -> List[ToolCall]:
        calls: List[ToolCall] = []
        for name in declared:
            hint = name.replace("get_", "", 1).replace("_", " ")
            if hint in text:
                calls.append(ToolCall(name=name, arguments={}))
            elif name.startswith("resolve_") and entities:
                own_type = self.registry.tools[name].resolves if name in self.registry else None
                matched = entities.get(own_type) if own_type else None
                calls.append(ToolCall(name=name, arguments={"name": matched} if matched else {}))
        return calls

    @staticmethod
    def _declared_names(tool_definitions: Optional[ToolDeclarations]) -> List[str]:
        names: List[str] = []
        for raw in tool_definitions or []:
            try:
                definition = ToolDefinition.parse(raw)
            except ToolValidationError as e:
                logger.warning("Ignoring unusable tool declaration: %s", e)
                continue
            if definition.name not in names:
                names.append(definition.name)
        return names
