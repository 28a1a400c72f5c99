"""Tool registry: the single table mapping tool names to backend commands."""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..models import ToolDefinition, ENTITY_PLAYER, ENTITY_TEAM
from ...exceptions import ToolNotFoundError, ToolRegistrationError
from ...logger import get_logger
from ...schemas import transform_mlb_game, transform_mlb_player, transform_mlb_team

logger = get_logger(__name__)

DEFAULT_SEASON = "2025"

# Argument key receiving the resolved id of each entity type.
ENTITY_ARGUMENT_KEYS: Dict[str, str] = {
    ENTITY_TEAM: "teamId",
    ENTITY_PLAYER: "playerId",
}


def _passthrough(raw: Any) -> Any:
    return raw


def _no_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return {}


class ToolSpec(BaseModel):
    """
    Everything the proxy knows about one tool.

    Attributes:
        name: Tool name as declared to callers.
        command: Backend command the tool is translated to.
        description: Human readable description.
        parameters: JSON schema of the accepted arguments.
        required_entities: Entity types whose resolved ids this tool consumes.
        resolves: Entity type produced by a resolver tool, None for data tools.
        base_ttl: Cache TTL in seconds outside live windows.
        live_sensitive: Whether the TTL is clamped during live windows.
        build_params: Maps call arguments to the backend ``params`` object.
        normalize: Maps the raw backend result to the common schema.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    command: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    required_entities: Tuple[str, ...] = ()
    resolves: Optional[str] = None
    base_ttl: int = 60
    live_sensitive: bool = False
    build_params: Callable[[Mapping[str, Any]], Dict[str, Any]] = _no_params
    normalize: Callable[[Any], Any] = _passthrough

    @property
    def is_resolver(self) -> bool:
        return self.resolves is not None

    def definition(self) -> ToolDefinition:
        return ToolDefinition(name=self.name, description=self.description, parameters=self.parameters)


class ToolRegistry:
    """
    A central registry of every tool the proxy can execute.

    Unknown names are rejected at lookup time with ``ToolNotFoundError``.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self.tools: Dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        """Register a tool.

        Args:
            spec: The tool to add.

        Raises:
            ToolRegistrationError: If a tool of the same name is already registered.
        """
        if spec.name in self.tools:
            msg = f"Tool '{spec.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)
        self.tools[spec.name] = spec
        logger.debug("Registered tool '%s' -> '%s'.", spec.name, spec.command)

    def unregister(self, tool_name: str) -> None:
        """Remove a tool.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        del self.tools[tool_name]

    def get(self, tool_name: str) -> ToolSpec:
        """Look up a tool.

        Raises:
            ToolNotFoundError: If the tool has no backend mapping.
        """
        spec = self.tools.get(tool_name)
        if spec is None:
            raise ToolNotFoundError(f"Unknown tool: {tool_name}")
        return spec

    def is_resolver(self, tool_name: str) -> bool:
        spec = self.tools.get(tool_name)
        return spec is not None and spec.is_resolver

    def resolver_for(self, entity_type: str) -> Optional[str]:
        """Name of the resolver tool producing ``entity_type``."""
        for spec in self.tools.values():
            if spec.resolves == entity_type:
                return spec.name
        return None

    def required_entities(self, tool_name: str) -> Tuple[str, ...]:
        spec = self.tools.get(tool_name)
        return spec.required_entities if spec else ()

    def base_ttl(self, tool_name: str, default: int = 60) -> int:
        spec = self.tools.get(tool_name)
        return spec.base_ttl if spec else default

    def is_live_sensitive(self, tool_name: str) -> bool:
        spec = self.tools.get(tool_name)
        return spec is not None and spec.live_sensitive

    def definitions(self) -> List[ToolDefinition]:
        """Declarations of every registered tool, in registration order."""
        return [spec.definition() for spec in self.tools.values()]

    @property
    def names(self) -> List[str]:
        return list(self.tools.keys())

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.tools

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self.tools.values())

    def __len__(self) -> int:
        return len(self.tools)


# --- MLB command parameters ---


def _resolver_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return {"name": arguments.get("name")}


def _team_info_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    if arguments.get("teamId"):
        params["pathParams"] = {"teamId": arguments["teamId"]}
    if arguments.get("season"):
        params["queryParams"] = {"season": arguments["season"]}
    return params


def _player_stats_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "pathParams": {"playerId": arguments.get("playerId")},
        "queryParams": {
            "stats": "season",
            "group": arguments.get("statType") or "hitting",
            "season": arguments.get("season") or DEFAULT_SEASON,
        },
    }


def _roster_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {"pathParams": {"teamId": arguments.get("teamId")}}
    if arguments.get("season"):
        params["queryParams"] = {"season": arguments["season"]}
    return params


def _schedule_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if arguments.get("date"):
        query["date"] = arguments["date"]
    if arguments.get("teamId"):
        query["teamId"] = arguments["teamId"]
    query["sportId"] = "1"
    return {"queryParams": query}


def _standings_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    query: Dict[str, Any] = {"season": arguments.get("season") or DEFAULT_SEASON}
    if arguments.get("divisionId"):
        query["divisionId"] = arguments["divisionId"]
    return {"queryParams": query}


def _live_game_params(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    return {"pathParams": {"gamePk": arguments.get("gameId")}}


# --- MLB result normalizers ---


def _normalize_team_info(raw: Any) -> Any:
    if isinstance(raw, Mapping) and isinstance(raw.get("teams"), list):
        return {"teams": [transform_mlb_team(team) for team in raw["teams"]]}
    return raw


def _normalize_roster(raw: Any) -> Any:
    if not (isinstance(raw, Mapping) and isinstance(raw.get("roster"), list)):
        return raw
    roster = []
    for entry in raw["roster"]:
        player = transform_mlb_player(entry.get("person") or {})
        player["position"] = (entry.get("position") or {}).get("name")
        player["status"] = (entry.get("status") or {}).get("code")
        roster.append(player)
    return {"roster": roster}


def _normalize_schedule(raw: Any) -> Any:
    if not (isinstance(raw, Mapping) and isinstance(raw.get("dates"), list)):
        return raw
    games = [transform_mlb_game(game) for date in raw["dates"] for game in (date.get("games") or [])]
    return {"games": games}


def _normalize_live_game(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    game = raw.get("game") if isinstance(raw.get("game"), Mapping) else raw
    if "gamePk" not in game:
        return raw
    return transform_mlb_game(game)


def _object_schema(properties: Dict[str, str], required: Tuple[str, ...] = ()) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {name: {"type": "string", "description": desc} for name, desc in properties.items()},
    }
    if required:
        schema["required"] = list(required)
    return schema


def default_registry() -> ToolRegistry:
    """Build the registry of resolver and MLB data tools served by the proxy."""
    registry = ToolRegistry()
    specs = [
        ToolSpec(
            name="resolve_team",
            command="resolveTeam",
            description="Resolve team name to team ID and information",
            parameters=_object_schema({"name": "Team name (e.g., 'Yankees', 'Red Sox')"}, required=("name",)),
            resolves=ENTITY_TEAM,
            build_params=_resolver_params,
        ),
        ToolSpec(
            name="resolve_player",
            command="resolvePlayer",
            description="Resolve player name to player ID and information",
            parameters=_object_schema({"name": "Player name (e.g., 'Aaron Judge', 'Ohtani')"}, required=("name",)),
            resolves=ENTITY_PLAYER,
            build_params=_resolver_params,
        ),
        ToolSpec(
            name="get_team_info",
            command="getTeamInfo",
            description="Get MLB team information",
            parameters=_object_schema({"teamId": "MLB team ID", "season": "Season year"}),
            required_entities=(ENTITY_TEAM,),
            base_ttl=300,
            build_params=_team_info_params,
            normalize=_normalize_team_info,
        ),
        ToolSpec(
            name="get_player_stats",
            command="getPlayerStats",
            description="Get MLB player statistics",
            parameters=_object_schema(
                {"playerId": "MLB player ID", "season": "Season year", "statType": "Type of stats (hitting, pitching)"}
            ),
            required_entities=(ENTITY_PLAYER,),
            base_ttl=60,
            live_sensitive=True,
            build_params=_player_stats_params,
        ),
        ToolSpec(
            name="get_team_roster",
            command="getRoster",
            description="Get MLB team roster",
            parameters=_object_schema({"teamId": "MLB team ID", "season": "Season year"}),
            required_entities=(ENTITY_TEAM,),
            base_ttl=3600,
            build_params=_roster_params,
            normalize=_normalize_roster,
        ),
        ToolSpec(
            name="get_schedule",
            command="getSchedule",
            description="Get MLB game schedule",
            parameters=_object_schema({"date": "Date (YYYY-MM-DD)", "teamId": "Optional team ID filter"}),
            required_entities=(ENTITY_TEAM,),
            base_ttl=30,
            build_params=_schedule_params,
            normalize=_normalize_schedule,
        ),
        ToolSpec(
            name="get_standings",
            command="getStandings",
            description="Get MLB standings",
            parameters=_object_schema({"season": "Season year", "divisionId": "Optional division ID"}),
            base_ttl=60,
            build_params=_standings_params,
        ),
        ToolSpec(
            name="get_live_game",
            command="getLiveGame",
            description="Get live MLB game data",
            parameters=_object_schema({"gameId": "MLB game ID"}),
            base_ttl=5,
            live_sensitive=True,
            build_params=_live_game_params,
            normalize=_normalize_live_game,
        ),
    ]
    for spec in specs:
        registry.register(spec)
    return registry


def default_tool_definitions() -> List[ToolDefinition]:
    """Declarations of the default tools, as callers would send them."""
    return default_registry().definitions()
