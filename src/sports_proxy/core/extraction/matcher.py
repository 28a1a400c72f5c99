"""Keyword tables used to spot entities, intents and sports in free text.

Every lookup is a plain substring test against lower-cased text and ties are
broken by declaration order, so the same input always yields the same match.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..tools.models import ENTITY_PLAYER, ENTITY_TEAM

INTENT_ROSTER = "roster"
INTENT_INFO = "team_info"
INTENT_STATS = "stats"
INTENT_SCHEDULE = "schedule"
INTENT_STANDINGS = "standings"


class PatternMatcher(Protocol):
    """Contract of the pluggable vocabulary used by the extractor."""

    @property
    def entity_types(self) -> Sequence[str]:
        """Entity types in the order resolver calls are emitted."""
        ...

    def match_entity(self, entity_type: str, text: str) -> Optional[str]:
        """First pattern of ``entity_type``, in declaration order, contained in ``text``."""
        ...

    def matching_intents(self, text: str) -> List[str]:
        """Every intent whose keyphrases occur in ``text``, highest priority first."""
        ...

    def tool_for_intent(self, intent: str) -> Optional[str]:
        """Data tool serving ``intent``."""
        ...


class KeywordMatcher:
    """Substring matcher over ordered keyword tables."""

    def __init__(
        self,
        entity_patterns: Mapping[str, Sequence[str]],
        intent_patterns: Sequence[Tuple[str, Sequence[str]]],
        intent_tools: Mapping[str, str],
    ) -> None:
        """
        Args:
            entity_patterns: Entity type -> patterns, each list in declaration order.
            intent_patterns: (intent, keyphrases) pairs in priority order.
            intent_tools: Intent -> data tool name.
        """
        self._entity_patterns = {etype: [p.lower() for p in patterns] for etype, patterns in entity_patterns.items()}
        self._intent_patterns = [(intent, [p.lower() for p in phrases]) for intent, phrases in intent_patterns]
        self._intent_tools = dict(intent_tools)

    @property
    def entity_types(self) -> Sequence[str]:
        return list(self._entity_patterns.keys())

    def match_entity(self, entity_type: str, text: str) -> Optional[str]:
        for pattern in self._entity_patterns.get(entity_type, []):
            if pattern in text:
                return pattern
        return None

    def matching_intents(self, text: str) -> List[str]:
        return [intent for intent, phrases in self._intent_patterns if any(p in text for p in phrases)]

    def tool_for_intent(self, intent: str) -> Optional[str]:
        return self._intent_tools.get(intent)


DEFAULT_ENTITY_PATTERNS: Dict[str, List[str]] = {
    ENTITY_TEAM: [
        "yankees", "red sox", "dodgers", "giants", "mets", "cubs", "braves", "astros",
        "bruins", "rangers", "penguins", "oilers", "lightning", "blackhawks",
    ],
    ENTITY_PLAYER: [
        "judge", "ohtani", "trout", "betts", "acuna", "freeman",
        "mcdavid", "crosby", "ovechkin", "pastrnak", "draisaitl", "mackinnon",
    ],
}

DEFAULT_INTENT_PATTERNS: List[Tuple[str, List[str]]] = [
    (INTENT_ROSTER, ["roster", "players", "team members", "lineup"]),
    (INTENT_INFO, ["about", "info", "information", "details", "tell me about"]),
    (INTENT_STATS, ["stats", "statistics", "performance", "numbers"]),
    (INTENT_SCHEDULE, ["schedule", "games", "when", "playing"]),
    (INTENT_STANDINGS, ["standings", "rankings", "position", "place"]),
]

DEFAULT_INTENT_TOOLS: Dict[str, str] = {
    INTENT_ROSTER: "get_team_roster",
    INTENT_INFO: "get_team_info",
    INTENT_STATS: "get_player_stats",
    INTENT_SCHEDULE: "get_schedule",
    INTENT_STANDINGS: "get_standings",
}


def default_matcher() -> KeywordMatcher:
    """Matcher with the built-in MLB and NHL vocabulary."""
    return KeywordMatcher(DEFAULT_ENTITY_PATTERNS, DEFAULT_INTENT_PATTERNS, DEFAULT_INTENT_TOOLS)


SPORT_PATTERNS: Dict[str, List[str]] = {
    "mlb": [
        "yankees", "red sox", "dodgers", "giants", "mets", "cubs", "braves",
        "baseball", "mlb", "pitcher", "batter", "home run", "strikeout",
        "innings", "world series", "aaron judge", "ohtani", "trout",
    ],
    "hockey": [
        "bruins", "rangers", "penguins", "blackhawks", "oilers", "lightning",
        "hockey", "nhl", "goalie", "puck", "goal", "assist", "power play",
        "stanley cup", "mcdavid", "crosby", "ovechkin", "pastrnak",
    ],
    "nfl": [
        "patriots", "cowboys", "packers", "steelers", "chiefs", "ravens",
        "football", "nfl", "quarterback", "touchdown", "super bowl",
    ],
    "nba": [
        "lakers", "warriors", "celtics", "heat", "bulls", "knicks",
        "basketball", "nba", "lebron", "curry", "playoffs",
    ],
}

_ROUTING_PATTERNS: List[Tuple[str, List[str]]] = [
    ("hockey", ["bruins", "rangers", "penguins", "oilers", "mcdavid", "crosby", "hockey", "nhl"]),
    ("mlb", ["yankees", "red sox", "dodgers", "judge", "ohtani", "baseball", "mlb"]),
]

_FULL_MENU = [
    "resolve_team", "resolve_player", "get_team_info", "get_player_stats",
    "get_team_roster", "get_schedule", "get_standings", "get_live_game",
]

SPORT_TOOL_MENUS: Dict[str, List[str]] = {
    "mlb": list(_FULL_MENU),
    "hockey": list(_FULL_MENU),
    "nfl": [],
    "nba": [],
}


class SportDetector:
    """Keyword heuristics picking the sport a request or a call is about."""

    DEFAULT_SPORT = "mlb"
    CONFIDENT = 0.8
    UNSURE = 0.3
    MENU_THRESHOLD = 0.7

    def __init__(self, patterns: Optional[Mapping[str, Sequence[str]]] = None) -> None:
        self._patterns = {sport: list(words) for sport, words in (patterns or SPORT_PATTERNS).items()}

    def detect(self, text: str) -> Tuple[str, float]:
        """Sport with the most keyword hits; ties keep the earlier sport.

        Returns:
            ``(sport, confidence)`` with confidence 0.8 on any hit, 0.3 otherwise.
        """
        text = text.lower()
        best_sport, best_hits = self.DEFAULT_SPORT, 0
        for sport, words in self._patterns.items():
            hits = sum(1 for word in words if word in text)
            if hits > best_hits:
                best_sport, best_hits = sport, hits
        return best_sport, (self.CONFIDENT if best_hits > 0 else self.UNSURE)

    def detect_from_arguments(self, arguments: Mapping[str, Any]) -> str:
        """Route a tool call to a sport from its argument values."""
        text = " ".join(f"{k} {v}" for k, v in arguments.items()).lower()
        for sport, words in _ROUTING_PATTERNS:
            if any(word in text for word in words):
                return sport
        return self.DEFAULT_SPORT

    def filter_tool_names(self, sport: str, confidence: float) -> List[str]:
        """Tool menu offered for ``sport``; low confidence falls back to the MLB menu."""
        if confidence < self.MENU_THRESHOLD:
            return list(SPORT_TOOL_MENUS[self.DEFAULT_SPORT])
        menu = SPORT_TOOL_MENUS.get(sport)
        if menu is None:
            menu = SPORT_TOOL_MENUS[self.DEFAULT_SPORT]
        return list(menu)
