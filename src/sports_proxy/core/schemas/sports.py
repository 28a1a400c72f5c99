"""Normalized sports schemas shared by every upstream feed, plus the MLB transforms."""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field


class EntityRef(BaseModel):
    """Minimal reference to a team, venue or player."""

    id: Optional[str] = None
    name: Optional[str] = None


class TeamColors(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None


class Team(BaseModel):
    id: str
    name: Optional[str] = None
    abbreviation: Optional[str] = None
    city: Optional[str] = None
    league: Optional[str] = None
    division: Optional[str] = None
    venue: EntityRef = Field(default_factory=EntityRef)
    colors: TeamColors = Field(default_factory=TeamColors)


class Player(BaseModel):
    id: str
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    number: Optional[str] = None
    position: Optional[str] = None
    team: EntityRef = Field(default_factory=EntityRef)
    birthDate: Optional[str] = None
    age: Optional[int] = None
    height: Optional[str] = None
    weight: Optional[int] = None
    stats: Dict[str, Any] = Field(default_factory=dict)


class GameSide(EntityRef):
    score: int = 0


class Game(BaseModel):
    id: str
    date: Optional[str] = None
    time: Optional[str] = None
    status: Optional[str] = None
    homeTeam: GameSide = Field(default_factory=GameSide)
    awayTeam: GameSide = Field(default_factory=GameSide)
    venue: EntityRef = Field(default_factory=EntityRef)
    inning: Optional[int] = None
    inningHalf: Optional[str] = None
    liveData: Dict[str, Any] = Field(default_factory=dict)


def _get(node: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def transform_mlb_team(raw: Mapping[str, Any]) -> Dict[str, Any]:
    team = Team(
        id=str(raw["id"]),
        name=raw.get("name"),
        abbreviation=raw.get("abbreviation"),
        city=raw.get("locationName"),
        league=_get(raw, "league", "name"),
        division=_get(raw, "division", "name"),
        venue=EntityRef(id=_str_or_none(_get(raw, "venue", "id")), name=_get(raw, "venue", "name")),
    )
    return team.model_dump()


def transform_mlb_player(raw: Mapping[str, Any]) -> Dict[str, Any]:
    player = Player(
        id=str(raw["id"]),
        name=raw.get("fullName"),
        firstName=raw.get("firstName"),
        lastName=raw.get("lastName"),
        number=_str_or_none(raw.get("primaryNumber")),
        position=_get(raw, "primaryPosition", "name"),
        team=EntityRef(id=_str_or_none(_get(raw, "currentTeam", "id")), name=_get(raw, "currentTeam", "name")),
        birthDate=raw.get("birthDate"),
        age=raw.get("currentAge"),
        height=raw.get("height"),
        weight=raw.get("weight"),
    )
    return player.model_dump()


def transform_mlb_game(raw: Mapping[str, Any]) -> Dict[str, Any]:
    def side(which: str) -> GameSide:
        return GameSide(
            id=_str_or_none(_get(raw, "teams", which, "team", "id")),
            name=_get(raw, "teams", which, "team", "name"),
            score=_get(raw, "teams", which, "score") or 0,
        )

    status = _get(raw, "status", "detailedState")
    game = Game(
        id=str(raw["gamePk"]),
        date=raw.get("gameDate"),
        time=raw.get("gameDate"),
        status=status.lower() if isinstance(status, str) else None,
        homeTeam=side("home"),
        awayTeam=side("away"),
        venue=EntityRef(id=_str_or_none(_get(raw, "venue", "id")), name=_get(raw, "venue", "name")),
        inning=_get(raw, "linescore", "currentInning"),
        inningHalf=_get(raw, "linescore", "inningHalf"),
        liveData=raw.get("liveData") or {},
    )
    return game.model_dump()
