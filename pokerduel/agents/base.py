"""
Base Agent Interface for pokerduel.

An agent plays the computer seat. The round controller hands it an
``OpponentView`` (what the computer may legitimately know) whenever it is the
computer's turn and applies the returned ``Decision`` through the betting
engine.

Usage:
    class MyAgent(BaseAgent):
        def act(self, view):
            return Decision(ActionType.CHECK if view.call_amount == 0 else ActionType.CALL)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from pokerduel.core.card import Card
from pokerduel.core.rules import Street, ActionType, COMPUTER, other_seat, minimum_commitment

if TYPE_CHECKING:
    from pokerduel.core.betting import BettingEngine


@dataclass
class OpponentView:
    """Public round state plus the acting player's own hole cards."""
    hole_cards: List[Card]
    community_cards: List[Card]
    street: Street
    pot: int
    call_amount: int
    stack: int
    # Chips this player already has in front of it this street
    contribution: int
    min_raise: int
    can_raise: bool

    @property
    def min_commitment(self) -> int:
        """Smallest legal bet or raise for this view."""
        return minimum_commitment(self.call_amount, self.min_raise)

    @classmethod
    def from_engine(cls, engine: BettingEngine, player_id: str = COMPUTER) -> OpponentView:
        state = engine.state
        player = state.players[player_id]
        other = state.players[other_seat(player_id)]
        return cls(
            hole_cards=list(player.hole_cards),
            community_cards=list(state.community_cards),
            street=state.street,
            pot=state.pot,
            call_amount=engine.call_amount(player_id),
            stack=player.stack,
            contribution=player.current_bet,
            min_raise=state.min_raise,
            can_raise=other.can_act,
        )


@dataclass
class Decision:
    """
    One action chosen by an agent.

    Attributes:
        action: Action type to submit
        amount: Chips to commit for BET/RAISE (ignored otherwise)
        strength: Estimated hand strength in [0, 1]
        adjusted_strength: Strength after street and bluff adjustments
        bluffing: Whether the bluff gate fired
        message: Optional log line describing the action
    """
    action: ActionType
    amount: int = 0
    strength: float = 0.0
    adjusted_strength: float = 0.0
    bluffing: bool = False
    message: Optional[str] = None


class BaseAgent(ABC):
    """
    Abstract base class for computer opponents.

    Attributes:
        player_id: Seat this agent plays
        name: Human-readable name
    """

    def __init__(self, player_id: str = COMPUTER, name: Optional[str] = None):
        self.player_id = player_id
        self.name = name or f"Agent-{player_id}"

    @abstractmethod
    def act(self, view: OpponentView) -> Decision:
        """
        Choose an action given the current view.

        The returned decision must be legal for the view; the controller
        treats an engine rejection of an agent decision as a bug.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"


class CallAgent(BaseAgent):
    """
    An agent that always checks or calls, going all-in when it cannot cover.

    Useful for testing and as a simple baseline.
    """

    def __init__(self, player_id: str = COMPUTER, name: Optional[str] = None):
        super().__init__(player_id, name or f"Caller-{player_id}")

    def act(self, view: OpponentView) -> Decision:
        if view.call_amount == 0:
            return Decision(ActionType.CHECK)
        if view.call_amount >= view.stack:
            return Decision(ActionType.ALL_IN, view.stack)
        return Decision(ActionType.CALL, view.call_amount)
