"""Inbound action requests.

Clients send JSON objects of the form ``{"type": "<action>", ...fields}`` with
camelCase field names. ``parse_action`` turns one of those into a typed
request, so the rules engine never sees a half-formed payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from .cards import SET_TYPES, SUITS, Card
from .errors import InvalidInput
from .models import ActionType, Team


@dataclass(frozen=True)
class CreateRoom:
    room_name: str
    player_name: str
    capacity: int


@dataclass(frozen=True)
class JoinRoom:
    room_name: str
    player_name: str


@dataclass(frozen=True)
class JoinTeam:
    room_name: str
    team: Team


@dataclass(frozen=True)
class StartGame:
    room_name: str


@dataclass(frozen=True)
class RequestCard:
    room_name: str
    target_player_id: str
    card: Card


@dataclass(frozen=True)
class DeclareSet:
    room_name: str
    suit: str
    set_type: str


@dataclass(frozen=True)
class ClaimTurn:
    room_name: str


Action = Union[CreateRoom, JoinRoom, JoinTeam, StartGame, RequestCard, DeclareSet, ClaimTurn]

_ERROR_EVENTS = {ActionType.CREATE_ROOM.value: "error:createRoom"}


def error_event_for(msg_type: Any) -> str:
    return _ERROR_EVENTS.get(msg_type, "error") if isinstance(msg_type, str) else "error"


def _text(message: Mapping[str, Any], key: str) -> str:
    raw = message.get(key)
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInput(f"{key} is required")
    return raw.strip()


def _suit_and_set(message: Mapping[str, Any]) -> tuple[str, str]:
    suit = _text(message, "suit").lower()
    set_type = _text(message, "setType").lower()
    if suit not in SUITS:
        raise InvalidInput(f"Unknown suit: {suit}")
    if set_type not in SET_TYPES:
        raise InvalidInput(f"Unknown set type: {set_type}")
    return suit, set_type


def parse_action(message: Dict[str, Any]) -> Action:
    if not isinstance(message, dict):
        raise InvalidInput("Message must be a JSON object")
    try:
        action_type = ActionType(message.get("type"))
    except ValueError:
        raise InvalidInput("Unsupported message type") from None

    room_name = _text(message, "roomName")

    if action_type == ActionType.CREATE_ROOM:
        capacity = message.get("capacity")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise InvalidInput("capacity must be an integer")
        return CreateRoom(room_name, _text(message, "playerName"), capacity)
    if action_type == ActionType.JOIN_ROOM:
        return JoinRoom(room_name, _text(message, "playerName"))
    if action_type == ActionType.JOIN_TEAM:
        team_raw = _text(message, "team").upper()
        try:
            team = Team(team_raw)
        except ValueError:
            raise InvalidInput(f"Unknown team: {team_raw}") from None
        return JoinTeam(room_name, team)
    if action_type == ActionType.START_GAME:
        return StartGame(room_name)
    if action_type == ActionType.REQUEST_CARD:
        target = _text(message, "targetPlayerId")
        suit, set_type = _suit_and_set(message)
        rank = _text(message, "rank").lower()
        try:
            card = Card(suit, rank, set_type)
        except ValueError as exc:
            raise InvalidInput(str(exc)) from None
        return RequestCard(room_name, target, card)
    if action_type == ActionType.DECLARE_SET:
        suit, set_type = _suit_and_set(message)
        return DeclareSet(room_name, suit, set_type)
    return ClaimTurn(room_name)
