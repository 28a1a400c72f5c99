"""Normalized result schemas."""

from .sports import Team, Player, Game, transform_mlb_team, transform_mlb_player, transform_mlb_game

__all__ = ["Team", "Player", "Game", "transform_mlb_team", "transform_mlb_player", "transform_mlb_game"]
