from __future__ import annotations

from typing import Dict, List, Optional

from .cards import SET_TYPES, SUITS, Card, build_deck, deal
from .errors import (
    AlreadyExists,
    CannotClaimTurn,
    InvalidInput,
    InvalidRequest,
    NotFound,
    NotHost,
    NotYourTurn,
    RoomFull,
    RoomNotFull,
    TeamsUnbalanced,
    WrongStatus,
)
from .evaluator import check_winner, next_player, team_has_complete_set
from .models import CapturedSet, Player, RoomConfig, RoomStatus, Team

# GameRoom keeps all room state in memory. No networking lives here, only
# LIT rules, hand bookkeeping and turn order. Every action validates first
# and mutates afterwards, so a rejected action leaves the room untouched.


def request_problem(requester: Player, target: Player, card: Card) -> Optional[str]:
    """Return why ``requester`` may not ask ``target`` for ``card``, or None if the ask is legal."""
    if requester.id == target.id:
        return "Cannot request a card from yourself"
    if requester.team == target.team:
        return "Cannot request a card from a teammate"
    if not requester.hand:
        return "You have no cards"
    if not target.hand:
        return f"{target.name} has no cards"
    if not requester.holds_any_of_set(card.suit, card.set_type):
        return f"You hold no cards of the {card.set_type} {card.suit} set"
    if requester.holds(card):
        return f"You already hold the {card.label}"
    return None


class GameRoom:
    """One LIT room: lobby, dealing, card requests, declarations and scoring."""

    def __init__(self, name: str, config: Optional[RoomConfig] = None) -> None:
        self.name = name
        self.config = config or RoomConfig()
        self.players: List[Player] = []
        self.status = RoomStatus.WAITING
        self.current_turn_player_id: Optional[str] = None
        self.captured_sets: List[CapturedSet] = []
        self.last_action: Optional[str] = None
        self.winner: Optional[str] = None
        self.deck: List[Card] = []

    @property
    def capacity(self) -> int:
        return self.config.capacity

    # Lobby -----------------------------------------------------------

    def add_player(self, player_id: str, name: str, is_host: bool = False) -> Player:
        if len(self.players) >= self.capacity:
            raise RoomFull("Room is full")
        if self.status != RoomStatus.WAITING:
            raise WrongStatus("Game already started")
        if self._find(player_id):
            raise AlreadyExists("You are already in this room")
        player = Player(id=player_id, name=name, is_host=is_host)
        self.players.append(player)
        return player

    def player(self, player_id: str) -> Player:
        player = self._find(player_id)
        if player is None:
            raise NotFound("Player not found")
        return player

    def _find(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def join_team(self, player_id: str, team: Team) -> None:
        player = self.player(player_id)
        if self.status != RoomStatus.WAITING:
            raise WrongStatus("Teams are locked once the game starts")
        player.team = team
        self.last_action = f"{player.name} joined team {team.value}"

    def team_members(self, team: Team) -> List[Player]:
        return [player for player in self.players if player.team == team]

    # Game lifecycle --------------------------------------------------

    def start_game(self, player_id: str, seed: Optional[int] = None) -> None:
        player = self.player(player_id)
        if self.status != RoomStatus.WAITING:
            raise WrongStatus("Game already started")
        if not player.is_host:
            raise NotHost("Only the host can start the game")
        if len(self.players) != self.capacity:
            raise RoomNotFull("Room is not full")
        if any(p.team is None for p in self.players):
            raise TeamsUnbalanced("Every player must join a team")
        if len(self.team_members(Team.A)) != len(self.team_members(Team.B)):
            raise TeamsUnbalanced("Teams must be balanced")

        self.deck = build_deck(seed)
        for p in self.players:
            p.hand = deal(self.deck, self.config.hand_size)

        self.current_turn_player_id = self.players[0].id
        self.status = RoomStatus.PLAYING
        self.last_action = "Game started"

    def _require_playing(self) -> None:
        if self.status == RoomStatus.WAITING:
            raise WrongStatus("Game has not started")
        if self.status == RoomStatus.FINISHED:
            raise WrongStatus("Game is over")

    def _require_turn(self, player_id: str) -> Player:
        player = self.player(player_id)
        self._require_playing()
        if player.id != self.current_turn_player_id:
            raise NotYourTurn("Not your turn")
        return player

    # Actions ---------------------------------------------------------

    def request_card(self, player_id: str, target_id: str, card: Card) -> bool:
        """Ask ``target_id`` for ``card``; returns whether the card changed hands."""
        requester = self._require_turn(player_id)
        target = self.player(target_id)
        problem = request_problem(requester, target, card)
        if problem:
            raise InvalidRequest(problem)

        transferred = target.holds(card)
        if transferred:
            target.hand.remove(card)
            requester.hand.append(card)
            self.last_action = f"{requester.name} got the {card.rank} of {card.suit} from {target.name}"
        else:
            self.last_action = (
                f"{requester.name} asked {target.name} for the {card.rank} of {card.suit} "
                "but they didn't have it"
            )

        # The turn passes to whoever was asked, win or lose.
        self.current_turn_player_id = target.id
        return transferred

    def declare_set(self, player_id: str, suit: str, set_type: str) -> bool:
        """Resolve a declaration immediately; returns whether it was correct."""
        if suit not in SUITS or set_type not in SET_TYPES:
            raise InvalidInput(f"Unknown set: {set_type} {suit}")
        declarer = self._require_turn(player_id)
        if declarer.team is None:
            raise InvalidRequest("You are not on a team")

        # Hands are left as they are; scoring reads captured_sets only.
        correct = team_has_complete_set(self.players, declarer.team, suit, set_type)
        if correct:
            self.captured_sets.append(CapturedSet(declarer.team, suit, set_type))
            self.last_action = (
                f"{declarer.name} correctly declared the {set_type} {suit} set "
                f"for the {declarer.team.value} team"
            )
        else:
            opponent = declarer.team.opponent
            self.captured_sets.append(CapturedSet(opponent, suit, set_type))
            self.last_action = (
                f"{declarer.name} incorrectly declared the {set_type} {suit} set, "
                f"giving it to the {opponent.value} team"
            )

        winner = check_winner(self.captured_sets)
        if winner:
            self.status = RoomStatus.FINISHED
            self.winner = winner
            return correct

        self.current_turn_player_id = next_player(declarer.id, self.players).id
        return correct

    def claim_turn(self, player_id: str) -> None:
        player = self.player(player_id)
        self._require_playing()
        if not player.can_claim_turn:
            raise CannotClaimTurn("You cannot claim the turn")
        player.can_claim_turn = False
        self.current_turn_player_id = player.id
        self.last_action = f"{player.name} claimed the turn"

    # Payload helpers -------------------------------------------------

    def snapshot(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "capacity": self.capacity,
            "status": self.status.value,
            "players": [player.to_payload() for player in self.players],
            "currentTurnPlayerId": self.current_turn_player_id,
            "capturedSets": [entry.to_payload() for entry in self.captured_sets],
            "lastAction": self.last_action,
            "winner": self.winner,
        }

    def total_cards(self) -> int:
        return len(self.deck) + sum(len(player.hand) for player in self.players)
