import pytest

from core.actions import ClaimTurn, CreateRoom, DeclareSet, JoinRoom, JoinTeam, RequestCard, StartGame
from core.cards import Card
from core.errors import NotFound
from core.models import RoomStatus, Team
from core.registry import RoomRegistry

from .helpers import move_card, rig_hands

SNAPSHOT_KEYS = {
    "name",
    "capacity",
    "status",
    "players",
    "currentTurnPlayerId",
    "capturedSets",
    "lastAction",
    "winner",
}


def fill_room(registry: RoomRegistry) -> None:
    registry.apply("P0", CreateRoom("r1", "Player0", 8))
    for idx in range(1, 8):
        registry.apply(f"P{idx}", JoinRoom("r1", f"Player{idx}"))
    for idx in range(8):
        registry.apply(f"P{idx}", JoinTeam("r1", Team.A if idx % 2 == 0 else Team.B))


def test_create_room_outcome_replies_to_actor_only():
    registry = RoomRegistry()
    outcome = registry.apply("P0", CreateRoom("r1", "Ann", 8))

    assert outcome.room_name == "r1"
    assert outcome.subscribe
    assert outcome.broadcast is None
    assert outcome.reply.ev == "roomCreated"
    assert outcome.reply.data == {"roomName": "r1", "playerId": "P0"}
    room = registry.lookup("r1")
    assert room.status == RoomStatus.WAITING
    assert [p.id for p in room.players] == ["P0"]
    assert room.players[0].is_host and room.players[0].team is None


def test_join_room_outcome_replies_and_updates_room():
    registry = RoomRegistry()
    registry.apply("P0", CreateRoom("r1", "Ann", 8))
    outcome = registry.apply("P1", JoinRoom("r1", "Bo"))

    assert outcome.subscribe
    assert outcome.reply.ev == "joinedRoom"
    assert outcome.reply.data == {"roomName": "r1", "playerId": "P1"}
    assert outcome.broadcast.ev == "roomUpdate"
    players = outcome.broadcast.data["room"]["players"]
    assert players[1] == {
        "id": "P1",
        "name": "Bo",
        "team": None,
        "hand": [],
        "isHost": False,
        "canClaimTurn": False,
    }


def test_join_team_broadcasts_room_update():
    registry = RoomRegistry()
    registry.apply("P0", CreateRoom("r1", "Ann", 8))
    outcome = registry.apply("P0", JoinTeam("r1", Team.B))
    assert outcome.reply is None
    assert outcome.broadcast.ev == "roomUpdate"
    assert outcome.broadcast.data["room"]["players"][0]["team"] == "B"


def test_game_actions_broadcast_room_snapshots():
    registry = RoomRegistry()
    fill_room(registry)

    started = registry.apply("P0", StartGame("r1"), seed=5)
    assert started.broadcast.ev == "gameStarted"
    snapshot = started.broadcast.data["room"]
    assert set(snapshot) == SNAPSHOT_KEYS
    assert snapshot["status"] == "playing"
    assert snapshot["currentTurnPlayerId"] == "P0"
    assert all(len(p["hand"]) == 6 for p in snapshot["players"])

    room = registry.lookup("r1")
    rig_hands(room)
    ace = Card("hearts", "ace", "lower")
    move_card(room, ace, "P1")

    asked = registry.apply("P0", RequestCard("r1", "P1", ace))
    assert asked.broadcast.ev == "gameUpdate"
    assert asked.broadcast.data["room"]["currentTurnPlayerId"] == "P1"
    assert asked.broadcast.data["room"]["lastAction"] == "Player0 got the ace of hearts from Player1"

    declared = registry.apply("P1", DeclareSet("r1", "hearts", "upper"))
    assert declared.broadcast.data["room"]["capturedSets"] == [
        {"team": "B", "suit": "hearts", "setType": "upper"}
    ]

    room.player("P5").can_claim_turn = True
    claimed = registry.apply("P5", ClaimTurn("r1"))
    assert claimed.broadcast.ev == "gameUpdate"
    assert claimed.broadcast.data["room"]["currentTurnPlayerId"] == "P5"


def test_snapshot_is_detached_from_room_state():
    registry = RoomRegistry()
    fill_room(registry)
    outcome = registry.apply("P0", StartGame("r1"), seed=9)
    registry.lookup("r1").player("P0").hand.clear()
    assert len(outcome.broadcast.data["room"]["players"][0]["hand"]) == 6


def test_lookup_remove_and_player_rooms():
    registry = RoomRegistry()
    registry.apply("P0", CreateRoom("r1", "Ann", 8))
    registry.apply("P0", CreateRoom("r2", "Ann", 8))
    registry.apply("P1", JoinRoom("r2", "Bo"))

    assert registry.rooms_for_player("P0") == ["r1", "r2"]
    assert registry.rooms_for_player("P1") == ["r2"]
    assert registry.remove_room("r1") is not None
    assert registry.remove_room("r1") is None
    with pytest.raises(NotFound):
        registry.lookup("r1")
    with pytest.raises(NotFound):
        registry.apply("P0", StartGame("r1"))
