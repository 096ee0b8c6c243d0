"""LIT game primitives used by the WebSocket host."""

from .actions import Action, parse_action
from .cards import Card, SET_RANKS, SET_TYPES, SUITS, build_deck, deal
from .errors import GameError
from .evaluator import check_winner, next_player
from .game import GameRoom
from .models import RoomConfig, RoomStatus, Team
from .registry import RoomRegistry

__all__ = [
    "Action",
    "parse_action",
    "Card",
    "SET_RANKS",
    "SET_TYPES",
    "SUITS",
    "build_deck",
    "deal",
    "GameError",
    "check_winner",
    "next_player",
    "GameRoom",
    "RoomConfig",
    "RoomStatus",
    "Team",
    "RoomRegistry",
]
