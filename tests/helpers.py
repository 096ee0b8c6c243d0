from __future__ import annotations

from typing import Dict, List, Sequence

from core.cards import Card, ordered_deck
from core.game import GameRoom
from core.models import Team
from core.registry import RoomRegistry

PLAYER_IDS = [f"P{idx}" for idx in range(8)]


def create_room(*, name: str = "r1", players: int = 8, assign_teams: bool = True) -> tuple[RoomRegistry, GameRoom]:
    """Registry with one room, P0 as host, and alternating A/B teams."""
    registry = RoomRegistry()
    room = registry.create_room(name, PLAYER_IDS[0], "Player0", capacity=8)
    for idx in range(1, players):
        registry.join_room(name, PLAYER_IDS[idx], f"Player{idx}")
    if assign_teams:
        for idx, player in enumerate(room.players):
            room.join_team(player.id, Team.A if idx % 2 == 0 else Team.B)
    return registry, room


def start_game(room: GameRoom, seed: int = 42) -> GameRoom:
    room.start_game(room.players[0].id, seed=seed)
    return room


def rig_hands(room: GameRoom) -> Dict[str, List[Card]]:
    """Replace the dealt hands with the unshuffled deck.

    P0 ends up with every lower heart, P1 every upper heart, P2 every lower
    diamond and so on: even seats (team A) hold the lower sets, odd seats
    (team B) the upper ones.
    """
    deck = ordered_deck()
    for player in room.players:
        player.hand = deck[:6]
        del deck[:6]
    room.deck = deck
    return {player.id: player.hand for player in room.players}


def move_card(room: GameRoom, card: Card, to_player: str) -> None:
    for player in room.players:
        if card in player.hand:
            player.hand.remove(card)
    room.player(to_player).hand.append(card)


def all_cards(room: GameRoom) -> Sequence[Card]:
    return [card for player in room.players for card in player.hand] + list(room.deck)
