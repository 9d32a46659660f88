"""
Session management and WebSocket handling.

This module provides:
- SessionManager: Keeps one RoundController per browser session
- WebSocket endpoint: Pushes state and game events to a connected client
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import logging
import uuid

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from pokerduel.core.betting import ActionResult
from pokerduel.core.controller import RoundController, GameEvent
from pokerduel.core.rules import GameConfig, ActionType, HUMAN
from pokerduel.server.schemas import WSActionMessage


logger = logging.getLogger(__name__)


def parse_action(action: str) -> ActionType:
    """
    Parse an action name sent by a client.

    Raises:
        ValueError: If the name is not an ``ActionType``
    """
    return ActionType(action.strip().upper())


@dataclass
class Session:
    """A game session with its controller and connected clients."""
    session_id: str
    controller: RoundController
    connections: List[WebSocket] = field(default_factory=list)
    pending_events: List[GameEvent] = field(default_factory=list)

    def __post_init__(self):
        self.controller.subscribe(self.pending_events.append)

    def action_response(self, result: ActionResult) -> Dict[str, Any]:
        """Action result plus the round outcome once the round is over."""
        response = result.to_dict()
        controller = self.controller
        if result.success and controller.outcome is not None:
            response["outcome"] = controller.outcome.to_dict()
        response["game_over"] = controller.is_game_over()
        return response

    async def broadcast(self, message: Dict[str, Any]):
        """Send a message to every connected client."""
        for ws in list(self.connections):
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.error(f"Error sending to session {self.session_id}: {e}")

    async def send_state_to_all(self):
        await self.broadcast({"type": "state", **self.controller.get_state(HUMAN)})

    async def flush_events(self):
        """Push queued game events to the connected clients."""
        events = list(self.pending_events)
        self.pending_events.clear()
        for event in events:
            await self.broadcast(event.to_dict())


class SessionManager:
    """
    Manages game sessions and client connections.

    Usage:
        manager = SessionManager()
        session_id = manager.create_session(GameConfig(seed=1))
        session = manager.get_session(session_id)
        await manager.connect(session_id, websocket)
        await manager.handle_message(session_id, message)
        manager.disconnect(session_id, websocket)
    """

    def __init__(self):
        self.sessions: Dict[str, Session] = {}

    def create_session(self, config: Optional[GameConfig] = None) -> str:
        """Create a new session and return its id."""
        session_id = uuid.uuid4().hex[:12]
        controller = RoundController(config or GameConfig())
        self.sessions[session_id] = Session(session_id=session_id, controller=controller)
        logger.info(f"Created session {session_id}")
        return session_id

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.sessions.get(session_id)

    def remove_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    async def connect(self, session_id: str, websocket: WebSocket) -> bool:
        """
        Attach an accepted WebSocket to a session and send it the state.

        Returns:
            True if the session exists
        """
        session = self.get_session(session_id)
        if session is None:
            logger.warning(f"Session {session_id} not found")
            return False

        session.connections.append(websocket)
        logger.info(f"Client connected to session {session_id}")
        await websocket.send_json({"type": "state", **session.controller.get_state(HUMAN)})
        return True

    def disconnect(self, session_id: str, websocket: WebSocket):
        session = self.get_session(session_id)
        if session and websocket in session.connections:
            session.connections.remove(websocket)
            logger.info(f"Client disconnected from session {session_id}")

    async def handle_message(self, session_id: str, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle a message from a client.

        Args:
            session_id: The session ID
            message: The message dict with 'type' and optional data

        Returns:
            Response dict
        """
        session = self.get_session(session_id)
        if session is None:
            return {"type": "error", "message": "Session not found"}

        msg_type = message.get("type", "")

        if msg_type == "action":
            return await self._handle_action(session, message)
        elif msg_type == "start_round":
            return await self._handle_start_round(session)
        elif msg_type == "new_game":
            return await self._handle_new_game(session)
        elif msg_type == "get_state":
            return {"type": "state", **session.controller.get_state(HUMAN)}
        else:
            return {"type": "error", "message": f"Unknown message type: {msg_type}"}

    async def _handle_action(self, session: Session, message: Dict[str, Any]) -> Dict[str, Any]:
        controller = session.controller
        if not controller.is_round_running():
            return {"type": "error", "message": "No round in progress"}

        try:
            request = WSActionMessage.model_validate(message)
        except ValidationError:
            logger.info(f"Malformed action message in session {session.session_id}: {message}")
            return {"type": "error", "message": f"Malformed action message: {message}"}

        try:
            action_type = parse_action(request.action)
        except ValueError:
            return {"type": "error", "message": f"Invalid action: {request.action}"}

        result = controller.act(HUMAN, action_type, request.amount or 0)
        if result.success:
            await session.send_state_to_all()
            await session.flush_events()

        return {"type": "action_result", **session.action_response(result)}

    async def _handle_start_round(self, session: Session) -> Dict[str, Any]:
        controller = session.controller
        if not controller.start_round():
            return {"type": "error", "message": "Cannot start round"}

        await session.send_state_to_all()
        await session.flush_events()
        return {"type": "round_started", "round_number": controller.round_number}

    async def _handle_new_game(self, session: Session) -> Dict[str, Any]:
        controller = session.controller
        if controller.is_round_running():
            return {"type": "error", "message": "Round in progress"}

        controller.new_game()
        await session.send_state_to_all()
        return {"type": "new_game"}


# Global session manager instance
session_manager = SessionManager()


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for game communication.

    Protocol:
    1. Client connects and sends: {"type": "join", "session_id": "..."}
       (a session is created when the id is missing or unknown)
    2. Server sends the game state
    3. Client sends {"type": "start_round"} or actions:
       {"type": "action", "action": "CALL", "amount": 0}
    4. Server pushes state updates and street_advanced, round_ended and
       game_over events
    """
    session_id: Optional[str] = None

    try:
        await websocket.accept()
        join_msg = await websocket.receive_json()

        if join_msg.get("type") != "join":
            await websocket.send_json({
                "type": "error",
                "message": "First message must be join"
            })
            await websocket.close()
            return

        session_id = join_msg.get("session_id")
        if not session_id or session_manager.get_session(session_id) is None:
            session_id = session_manager.create_session()
            await websocket.send_json({"type": "session_created", "session_id": session_id})

        await session_manager.connect(session_id, websocket)

        # Message loop
        while True:
            message = await websocket.receive_json()
            response = await session_manager.handle_message(session_id, message)
            await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {session_id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        if session_id:
            session_manager.disconnect(session_id, websocket)
