"""Data models for resolution and execution outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

ENTITY_TEAM = "team"
ENTITY_PLAYER = "player"

_CANONICAL_NAME_KEYS = ("canonicalName", "name", "fullName")


@dataclass(frozen=True)
class ResolvedEntity:
    """A free-text entity reference resolved to its canonical identifier."""

    entity_type: str
    id: str
    canonical_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, entity_type: str, payload: Mapping[str, Any]) -> Optional["ResolvedEntity"]:
        """Build an entity from a resolver payload, or None when it carries no ``id``."""
        raw_id = payload.get("id")
        if raw_id is None or raw_id == "":
            return None

        canonical_name = None
        for key in _CANONICAL_NAME_KEYS:
            if payload.get(key):
                canonical_name = str(payload[key])
                break

        metadata = {k: v for k, v in payload.items() if k != "id"}
        return cls(entity_type=entity_type, id=str(raw_id), canonical_name=canonical_name, metadata=metadata)


@dataclass(frozen=True)
class ExecutionResult:
    """Represents the outcome of executing one tool call."""

    tool: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    arguments: Dict[str, Any] = field(default_factory=dict)
    enriched: bool = False
    source: Optional[str] = None

    @classmethod
    def ok(cls, tool: str, data: Any, **kwargs: Any) -> "ExecutionResult":
        return cls(tool=tool, success=True, data=data, **kwargs)

    @classmethod
    def failed(cls, tool: str, error: str, **kwargs: Any) -> "ExecutionResult":
        return cls(tool=tool, success=False, error=error, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation: ``{tool, success, result}`` or ``{tool, success, error}``."""
        body: Dict[str, Any] = {"tool": self.tool, "success": self.success}
        if self.success:
            body["result"] = self.data
        else:
            body["error"] = self.error
        if self.enriched:
            body["enriched"] = True
        return body


@dataclass
class RunContext:
    """State owned by a single pipeline run.

    ``resolved`` holds at most one entity per type; a later resolution of the
    same type replaces the earlier one.
    """

    resolved: Dict[str, ResolvedEntity] = field(default_factory=dict)

    def remember(self, entity: ResolvedEntity) -> None:
        self.resolved[entity.entity_type] = entity

    def lookup(self, entity_type: str) -> Optional[ResolvedEntity]:
        return self.resolved.get(entity_type)
