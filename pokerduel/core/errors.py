"""
Error taxonomy for the betting engine.

Expected rejections (out of turn, illegal action, below minimum,
insufficient chips) are raised inside the engine's validation helpers and
converted into failed ``ActionResult`` values before they reach the caller.
``EmptyDeckError`` signals a broken dealing invariant and is allowed to
propagate.
"""

from enum import Enum
from typing import Optional


class ActionError(Enum):
    """Reason codes carried by a rejected action."""
    OUT_OF_TURN = "OUT_OF_TURN"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    INSUFFICIENT_CHIPS = "INSUFFICIENT_CHIPS"


class PokerError(Exception):
    """Base class for all pokerduel errors."""


class EmptyDeckError(PokerError):
    """Raised when a card is drawn from an exhausted deck."""


class ActionRejected(PokerError):
    """An action was refused; the round state is unchanged."""

    code = ActionError.ILLEGAL_ACTION

    def __init__(
        self,
        message: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.minimum = minimum
        self.maximum = maximum


class OutOfTurn(ActionRejected):
    code = ActionError.OUT_OF_TURN


class IllegalAction(ActionRejected):
    code = ActionError.ILLEGAL_ACTION


class BelowMinimum(ActionRejected):
    """Bet or raise smaller than the required minimum (sent back in ``minimum``)."""
    code = ActionError.BELOW_MINIMUM

    def __init__(self, message: str, minimum: int):
        super().__init__(message, minimum=minimum)


class InsufficientChips(ActionRejected):
    """The action costs more than the stack; ``maximum`` holds the stack."""
    code = ActionError.INSUFFICIENT_CHIPS

    def __init__(self, message: str, available: int):
        super().__init__(message, maximum=available)
        self.available = available
