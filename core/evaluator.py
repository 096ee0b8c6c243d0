from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .cards import SET_RANKS
from .errors import NotFound
from .models import DRAW, CapturedSet, Player, Team

WINNING_SETS = 3


def next_player(current_id: str, players: Sequence[Player]) -> Player:
    """Circular successor of ``current_id`` in join order."""
    for idx, player in enumerate(players):
        if player.id == current_id:
            return players[(idx + 1) % len(players)]
    raise NotFound(f"Player {current_id} is not in the room")


def team_has_complete_set(players: Iterable[Player], team: Team, suit: str, set_type: str) -> bool:
    held = {
        card.rank
        for player in players
        if player.team == team
        for card in player.hand
        if card.in_set(suit, set_type)
    }
    return held.issuperset(SET_RANKS[set_type])


def tally(captured_sets: List[CapturedSet]) -> Dict[Team, int]:
    counts = {Team.A: 0, Team.B: 0}
    for entry in captured_sets:
        counts[entry.team] += 1
    return counts


def check_winner(captured_sets: List[CapturedSet]) -> Optional[str]:
    counts = tally(captured_sets)
    a, b = counts[Team.A], counts[Team.B]
    if a >= WINNING_SETS and a > b:
        return Team.A.value
    if b >= WINNING_SETS and b > a:
        return Team.B.value
    if a >= WINNING_SETS and a == b:
        return DRAW
    return None
