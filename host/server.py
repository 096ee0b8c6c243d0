from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Deque, Dict, List, Optional, Set

import websockets
from websockets.asyncio.server import ServerConnection, serve
from websockets.http11 import Request, Response

from core.actions import error_event_for, parse_action
from core.errors import GameError
from core.models import ActionOutcome, Event
from core.registry import RoomRegistry

LOGGER = logging.getLogger("lit_host")

# HostServer glues the LIT rooms to WebSocket clients.
# Every network concern lives here; the rooms stay pure.


@dataclass(eq=False)
class ClientSession:
    player_id: str
    websocket: Any
    rooms: Set[str] = field(default_factory=set)
    # Frames are queued in room-lock order and written by one flusher at a time.
    outbox: Deque[str] = field(default_factory=deque)
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class HostServer:
    def __init__(self) -> None:
        self.registry = RoomRegistry()
        self.sessions: Dict[str, ClientSession] = {}
        self.subscribers: Dict[str, Set[str]] = {}
        self.room_locks: Dict[str, asyncio.Lock] = {}

    async def start(self, host: str = "0.0.0.0", port: int = 3002) -> None:
        # serve keeps accepting clients until the process stops.
        async with serve(self._handle_connection, host, port, process_request=self._process_request):
            LOGGER.info("LIT server listening on %s:%s", host, port)
            await asyncio.Future()

    def _process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        if request.headers.get("Upgrade", "").lower() == "websocket":
            return None  # let the WebSocket handshake continue
        if request.path in {"/", "/health", "/healthz"}:
            body = json.dumps(
                {
                    "status": "ok",
                    "rooms": len(self.registry),
                    "connections": len(self.sessions),
                    "timestamp": self._now_ts(),
                }
            )
            return connection.respond(HTTPStatus.OK, body + "\n")
        return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        session = ClientSession(player_id=self._new_player_id(), websocket=websocket)
        self.sessions[session.player_id] = session
        LOGGER.info("Client connected: %s", session.player_id)
        await self._send_json(session, "connected", {"playerId": session.player_id})

        try:
            async for raw in websocket:
                await self._handle_message(session, self._decode(raw))
        except websockets.ConnectionClosed:
            pass
        finally:
            await self._handle_disconnect(session)

    async def _handle_message(self, session: ClientSession, message: Dict[str, Any]) -> None:
        msg_type = message.get("type")
        error_event = error_event_for(msg_type)
        try:
            action = parse_action(message)
        except GameError as exc:
            await self._send_error(session, error_event, exc.code, exc.msg)
            return

        try:
            async with self._room_lock(action.room_name):
                outcome = self.registry.apply(session.player_id, action)
                targets = self._queue_outcome(session, outcome)
        except GameError as exc:
            LOGGER.warning(
                "Rejected %s player=%s room=%s reason=%s",
                msg_type,
                session.player_id,
                action.room_name,
                exc.msg,
            )
            await self._send_error(session, error_event, exc.code, exc.msg)
            return
        except Exception:  # noqa: BLE001
            LOGGER.exception("Unexpected error handling %s for %s", msg_type, session.player_id)
            await self._send_error(session, error_event, "INTERNAL_ERROR", "Server error")
            return
        finally:
            self._discard_unused_lock(action.room_name)

        LOGGER.debug("Applied %s player=%s room=%s", msg_type, session.player_id, action.room_name)
        await self._broadcast(targets)

    def _queue_outcome(self, session: ClientSession, outcome: ActionOutcome) -> List[ClientSession]:
        """Queue the reply and broadcast frames; runs under the room lock so queues follow lock order."""
        if outcome.subscribe:
            session.rooms.add(outcome.room_name)
            self.subscribers.setdefault(outcome.room_name, set()).add(session.player_id)
        targets: List[ClientSession] = []
        if outcome.reply:
            self._queue(session, outcome.reply.ev, outcome.reply.data)
            targets.append(session)
        if outcome.broadcast:
            self._log_transition(outcome.room_name, outcome.broadcast)
            message = self._envelope(outcome.broadcast.ev, outcome.broadcast.data)
            for player_id in sorted(self.subscribers.get(outcome.room_name, ())):
                member = self.sessions.get(player_id)
                if member is None:
                    continue
                member.outbox.append(message)
                if member is not session or not outcome.reply:
                    targets.append(member)
        return targets

    def _log_transition(self, room_name: str, event: Event) -> None:
        room = event.data.get("room")
        if not isinstance(room, dict):
            return
        if event.ev == "gameStarted":
            LOGGER.info("Game started in room %s", room_name)
        elif room.get("winner"):
            LOGGER.info("Game in room %s finished; winner=%s", room_name, room["winner"])
        elif room.get("lastAction"):
            LOGGER.info("[%s] %s", room_name, room["lastAction"])

    async def _handle_disconnect(self, session: ClientSession) -> None:
        self.sessions.pop(session.player_id, None)
        LOGGER.info("Client disconnected: %s", session.player_id)
        for room_name in self.registry.rooms_for_player(session.player_id):
            # Players stay seated; only an emptied room is dropped.
            LOGGER.info("Player %s disconnected from room %s", session.player_id, room_name)
        for room_name in sorted(session.rooms):
            async with self._room_lock(room_name):
                members = self.subscribers.get(room_name, set())
                members.discard(session.player_id)
                if members:
                    continue
                self.subscribers.pop(room_name, None)
                self.registry.remove_room(room_name)
            self.room_locks.pop(room_name, None)
            LOGGER.info("Room %s closed; no connected players remain", room_name)
        session.rooms.clear()

    def _room_lock(self, room_name: str) -> asyncio.Lock:
        lock = self.room_locks.get(room_name)
        if lock is None:
            lock = asyncio.Lock()
            self.room_locks[room_name] = lock
        return lock

    def _discard_unused_lock(self, room_name: str) -> None:
        if room_name in self.registry.rooms or room_name in self.subscribers:
            return
        lock = self.room_locks.get(room_name)
        if lock is not None and not lock.locked():
            del self.room_locks[room_name]

    async def _broadcast(self, targets: List[ClientSession]) -> None:
        if not targets:
            return
        await asyncio.gather(*(self._flush(member) for member in targets), return_exceptions=True)

    async def _flush(self, session: ClientSession) -> None:
        # Whoever holds send_lock drains the whole outbox, so frames leave in queue order.
        async with session.send_lock:
            while session.outbox:
                message = session.outbox.popleft()
                try:
                    await session.websocket.send(message)
                except websockets.ConnectionClosed:
                    session.outbox.clear()
                    return

    def _new_player_id(self) -> str:
        return uuid.uuid4().hex[:12]

    def _now_ts(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _queue(self, session: ClientSession, msg_type: str, payload: Dict[str, object]) -> None:
        session.outbox.append(self._envelope(msg_type, payload))

    async def _send_json(self, session: ClientSession, msg_type: str, payload: Dict[str, object]) -> None:
        self._queue(session, msg_type, payload)
        await self._flush(session)

    async def _send_error(self, session: ClientSession, msg_type: str, code: str, msg: str) -> None:
        await self._send_json(session, msg_type, {"code": code, "message": msg})

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body: Dict[str, object] = {"type": msg_type, "v": 1, "ts": self._now_ts()}
        body.update(payload)
        return json.dumps(body)

    def _decode(self, raw: Any) -> Dict[str, Any]:
        try:
            message = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return {}
        return message if isinstance(message, dict) else {}
