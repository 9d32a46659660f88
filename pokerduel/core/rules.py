"""
Heads-up Texas Hold'em rules and constants.

Seating is fixed: the human posts the small blind, the computer posts the
big blind, and the human acts first on every street.

Minimum bet sizing, in terms of the chips a single action moves from the
stack into the pot:

1. Opening bet: at least the current minimum raise (default 20).
2. Raise over a bet: at least max(min_raise, 2 x amount owed).
3. After a bet or raise, the minimum raise becomes the amount the bet was
   raised by, never below the configured minimum.
4. All-in is always allowed, whatever its size.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class Street(Enum):
    """Streets of a heads-up hand."""
    PREFLOP = auto()
    FLOP = auto()
    TURN = auto()
    RIVER = auto()
    SHOWDOWN = auto()


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


# Seat ids, also used as game log categories
HUMAN = "player"
COMPUTER = "computer"
SYSTEM = "system"
SEATS = (HUMAN, COMPUTER)

# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_STARTING_STACK = 1000
DEFAULT_MIN_RAISE = 20

# Cards per street
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1

NEXT_STREET = {
    Street.PREFLOP: Street.FLOP,
    Street.FLOP: Street.TURN,
    Street.TURN: Street.RIVER,
    Street.RIVER: Street.SHOWDOWN,
}

CARDS_FOR_STREET = {
    Street.FLOP: FLOP_CARDS,
    Street.TURN: TURN_CARDS,
    Street.RIVER: RIVER_CARDS,
    Street.SHOWDOWN: 0,
}


@dataclass
class GameConfig:
    """Settings for a heads-up game."""
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    starting_stack: int = DEFAULT_STARTING_STACK
    min_raise: int = DEFAULT_MIN_RAISE
    seed: Optional[int] = None

    def __post_init__(self):
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.small_blind > self.big_blind:
            raise ValueError("Small blind cannot exceed big blind")
        if self.starting_stack <= 0:
            raise ValueError("Starting stack must be positive")
        if self.min_raise <= 0:
            raise ValueError("Minimum raise must be positive")


def other_seat(player_id: str) -> str:
    """Return the id of the other player at the table."""
    if player_id == HUMAN:
        return COMPUTER
    if player_id == COMPUTER:
        return HUMAN
    raise ValueError(f"Unknown player: {player_id}")


def minimum_commitment(call_amount: int, min_raise: int) -> int:
    """
    Minimum chips a bet or raise must move from the stack.

    Args:
        call_amount: Chips owed before the action (0 for an opening bet)
        min_raise: Current minimum raise

    Returns:
        The smallest legal amount for ``bet_or_raise``
    """
    if call_amount <= 0:
        return min_raise
    return max(min_raise, 2 * call_amount)


def next_min_raise(raised_by: int, floor: int) -> int:
    """Minimum raise after a bet that lifted the current bet by ``raised_by``."""
    return max(raised_by, floor)
