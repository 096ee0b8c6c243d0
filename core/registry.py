from __future__ import annotations

from typing import Dict, List, Optional

from .actions import Action, ClaimTurn, CreateRoom, DeclareSet, JoinRoom, JoinTeam, RequestCard, StartGame
from .errors import AlreadyExists, InvalidInput, NotFound
from .game import GameRoom
from .models import ActionOutcome, Event, RoomConfig


class RoomRegistry:
    """Owns every live room, keyed by room name."""

    def __init__(self) -> None:
        self.rooms: Dict[str, GameRoom] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    # Room table ------------------------------------------------------

    def create_room(self, room_name: str, host_id: str, host_name: str, capacity: int) -> GameRoom:
        if not room_name or not host_name:
            raise InvalidInput("Player name and room name are required")
        if room_name in self.rooms:
            raise AlreadyExists("Room already exists")
        config = RoomConfig(capacity=capacity)
        config.validate()
        room = GameRoom(room_name, config)
        room.add_player(host_id, host_name, is_host=True)
        self.rooms[room_name] = room
        return room

    def join_room(self, room_name: str, player_id: str, player_name: str) -> GameRoom:
        if not player_name:
            raise InvalidInput("Player name is required")
        room = self.lookup(room_name)
        room.add_player(player_id, player_name)
        return room

    def lookup(self, room_name: str) -> GameRoom:
        room = self.rooms.get(room_name)
        if room is None:
            raise NotFound("Room not found")
        return room

    def remove_room(self, room_name: str) -> Optional[GameRoom]:
        return self.rooms.pop(room_name, None)

    def rooms_for_player(self, player_id: str) -> List[str]:
        return [
            name
            for name, room in self.rooms.items()
            if any(player.id == player_id for player in room.players)
        ]

    # Dispatch --------------------------------------------------------

    def apply(self, player_id: str, action: Action, seed: Optional[int] = None) -> ActionOutcome:
        """Run ``action`` for ``player_id`` and describe what should be emitted.

        Raises a ``GameError`` subclass when the action is rejected; the room is
        left unchanged in that case.
        """
        name = action.room_name
        if isinstance(action, CreateRoom):
            self.create_room(name, player_id, action.player_name, action.capacity)
            reply = Event("roomCreated", {"roomName": name, "playerId": player_id})
            return ActionOutcome(name, reply=reply, subscribe=True)
        if isinstance(action, JoinRoom):
            room = self.join_room(name, player_id, action.player_name)
            reply = Event("joinedRoom", {"roomName": name, "playerId": player_id})
            broadcast = Event("roomUpdate", {"room": room.snapshot()})
            return ActionOutcome(name, reply=reply, broadcast=broadcast, subscribe=True)

        room = self.lookup(name)
        if isinstance(action, JoinTeam):
            room.join_team(player_id, action.team)
            return ActionOutcome(name, broadcast=Event("roomUpdate", {"room": room.snapshot()}))
        if isinstance(action, StartGame):
            room.start_game(player_id, seed=seed)
            return ActionOutcome(name, broadcast=Event("gameStarted", {"room": room.snapshot()}))
        if isinstance(action, RequestCard):
            room.request_card(player_id, action.target_player_id, action.card)
        elif isinstance(action, DeclareSet):
            room.declare_set(player_id, action.suit, action.set_type)
        elif isinstance(action, ClaimTurn):
            room.claim_turn(player_id)
        else:
            raise InvalidInput(f"Unsupported action {action!r}")
        return ActionOutcome(name, broadcast=Event("gameUpdate", {"room": room.snapshot()}))
