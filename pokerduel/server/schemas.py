"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Dict
from pydantic import BaseModel, Field

from pokerduel.core.rules import (
    DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND,
    DEFAULT_STARTING_STACK, DEFAULT_MIN_RAISE,
)


# ============= Request Schemas =============

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    starting_stack: int = Field(gt=0, default=DEFAULT_STARTING_STACK)
    min_raise: int = Field(gt=0, default=DEFAULT_MIN_RAISE)
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible game")


class ActionRequest(BaseModel):
    """Request to take a game action."""
    action_type: str = Field(..., description="Action type: FOLD, CHECK, CALL, BET, RAISE, ALL_IN")
    amount: Optional[int] = Field(default=0, ge=0, description="Chips to commit for BET/RAISE actions")


# ============= Response Schemas =============

class CardSchema(BaseModel):
    """Card representation."""
    rank: str
    suit: str
    text: str
    color: str


class SessionSchema(BaseModel):
    """A created session and its settings."""
    session_id: str
    small_blind: int
    big_blind: int
    starting_stack: int
    min_raise: int


class RoundStartedSchema(BaseModel):
    """Response to starting a round."""
    success: bool
    message: str
    round_number: int


class ShowdownHandSchema(BaseModel):
    """Best five cards of one hand at showdown."""
    score: int
    name: str
    cards: List[CardSchema]


class OutcomeSchema(BaseModel):
    """Result of a finished round."""
    winner: str
    amount_won: int
    payouts: Dict[str, int]
    revealed_opponent_cards: List[CardSchema]
    showdown: bool
    split: bool
    hands: Dict[str, ShowdownHandSchema] = {}


class ActionResultSchema(BaseModel):
    """Result of an action."""
    success: bool
    message: str
    action_type: Optional[str] = None
    amount: int = 0
    error: Optional[str] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    # Included once the round is over
    outcome: Optional[OutcomeSchema] = None
    game_over: bool = False


class LogEntrySchema(BaseModel):
    """One line of the game log."""
    text: str
    category: str


class GameLogSchema(BaseModel):
    """The game log of a session."""
    entries: List[LogEntrySchema]


# ============= WebSocket Message Schemas =============

class WSJoinMessage(BaseModel):
    """WebSocket join session message."""
    type: str = "join"
    session_id: str


class WSActionMessage(BaseModel):
    """WebSocket action message."""
    type: str = "action"
    action: str  # FOLD, CHECK, CALL, BET, RAISE, ALL_IN
    amount: Optional[int] = Field(default=0, ge=0)


class WSErrorMessage(BaseModel):
    """WebSocket error message."""
    type: str = "error"
    message: str
