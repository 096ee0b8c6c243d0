from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .cards import DECK_SIZE, Card
from .errors import InvalidInput

DRAW = "draw"


class Team(str, Enum):
    A = "A"
    B = "B"

    @property
    def opponent(self) -> "Team":
        return Team.B if self is Team.A else Team.A


class RoomStatus(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class ActionType(str, Enum):
    CREATE_ROOM = "createRoom"
    JOIN_ROOM = "joinRoom"
    JOIN_TEAM = "joinTeam"
    START_GAME = "startGame"
    REQUEST_CARD = "requestCard"
    DECLARE_SET = "declareSet"
    CLAIM_TURN = "claimTurn"


@dataclass
class RoomConfig:
    capacity: int = 8
    hand_size: int = 6

    def validate(self) -> None:
        if self.capacity <= 0 or self.capacity % 2:
            raise InvalidInput("Capacity must be a positive even number")
        if self.capacity * self.hand_size != DECK_SIZE:
            raise InvalidInput(f"Capacity must deal the whole deck ({DECK_SIZE // self.hand_size} players)")


@dataclass
class Player:
    id: str
    name: str
    team: Optional[Team] = None
    hand: List[Card] = field(default_factory=list)
    is_host: bool = False
    can_claim_turn: bool = False

    def holds(self, card: Card) -> bool:
        return card in self.hand

    def holds_any_of_set(self, suit: str, set_type: str) -> bool:
        return any(card.in_set(suit, set_type) for card in self.hand)

    def to_payload(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "team": self.team.value if self.team else None,
            "hand": [card.to_payload() for card in self.hand],
            "isHost": self.is_host,
            "canClaimTurn": self.can_claim_turn,
        }


@dataclass(frozen=True)
class CapturedSet:
    team: Team
    suit: str
    set_type: str

    def to_payload(self) -> Dict[str, str]:
        return {"team": self.team.value, "suit": self.suit, "setType": self.set_type}


@dataclass
class Event:
    ev: str
    data: Dict[str, object] = field(default_factory=dict)


@dataclass
class ActionOutcome:
    # reply goes to the acting session only; broadcast goes to every subscriber of the room.
    room_name: str
    reply: Optional[Event] = None
    broadcast: Optional[Event] = None
    subscribe: bool = False
