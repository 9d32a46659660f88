"""
HTTP API Routes for pokerduel.

These routes create sessions, start rounds, take the human's actions and
query state and the game log. The computer's answers happen inside the
action request. Clients connected over WebSocket receive the same updates.
"""

from typing import Dict, Any
from fastapi import APIRouter, HTTPException

from pokerduel.core.rules import GameConfig, HUMAN
from pokerduel.server.schemas import (
    CreateSessionRequest, ActionRequest, ActionResultSchema,
    SessionSchema, RoundStartedSchema, GameLogSchema,
)
from pokerduel.server.websocket import Session, session_manager, parse_action

router = APIRouter()


def get_session(session_id: str) -> Session:
    """Get a session or fail with 404."""
    session = session_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.post("/sessions", response_model=SessionSchema)
async def create_session(req: CreateSessionRequest) -> Dict[str, Any]:
    """
    Create a new heads-up session against the computer.

    Both players start with the configured stack.
    """
    try:
        config = GameConfig(
            small_blind=req.small_blind,
            big_blind=req.big_blind,
            starting_stack=req.starting_stack,
            min_raise=req.min_raise,
            seed=req.seed,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session_id = session_manager.create_session(config)
    return {
        "session_id": session_id,
        "small_blind": config.small_blind,
        "big_blind": config.big_blind,
        "starting_stack": config.starting_stack,
        "min_raise": config.min_raise,
    }


@router.post("/sessions/{session_id}/rounds", response_model=RoundStartedSchema)
async def start_round(session_id: str) -> Dict[str, Any]:
    """
    Start a new round.

    Deals cards and posts blinds.
    """
    session = get_session(session_id)
    controller = session.controller

    if controller.is_round_running():
        raise HTTPException(status_code=409, detail="Round already in progress")
    if controller.is_game_over():
        raise HTTPException(status_code=409, detail="Game over, start a new game")

    controller.start_round()
    await session.send_state_to_all()
    await session.flush_events()

    return {
        "success": True,
        "message": f"Round #{controller.round_number} started",
        "round_number": controller.round_number,
    }


@router.get("/sessions/{session_id}/state")
async def get_state(session_id: str) -> Dict[str, Any]:
    """
    Get the current game state.

    Returns public information and the human player's private information.
    """
    return get_session(session_id).controller.get_state(for_player_id=HUMAN)


@router.post("/sessions/{session_id}/actions", response_model=ActionResultSchema)
async def take_action(session_id: str, req: ActionRequest) -> Dict[str, Any]:
    """
    Take an action for the human player.

    The computer responds before this returns. If the round ends, the
    response includes the outcome.
    """
    session = get_session(session_id)
    controller = session.controller

    if not controller.is_round_running():
        raise HTTPException(status_code=409, detail="No round in progress")

    try:
        action_type = parse_action(req.action_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid action type: {req.action_type}")

    result = controller.act(HUMAN, action_type, req.amount or 0)
    if result.success:
        await session.send_state_to_all()
        await session.flush_events()

    return session.action_response(result)


@router.get("/sessions/{session_id}/log", response_model=GameLogSchema)
async def get_log(session_id: str) -> Dict[str, Any]:
    """Get the game log, oldest entry first."""
    return {"entries": get_session(session_id).controller.log_entries()}


@router.post("/sessions/{session_id}/new_game")
async def new_game(session_id: str) -> Dict[str, Any]:
    """Reset both stacks after a game over."""
    session = get_session(session_id)
    controller = session.controller

    if controller.is_round_running():
        raise HTTPException(status_code=409, detail="Round in progress")

    controller.new_game()
    await session.send_state_to_all()
    return {"success": True, "message": "New game started"}


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str) -> Dict[str, Any]:
    get_session(session_id)
    session_manager.remove_session(session_id)
    return {"success": True, "message": "Session closed"}
