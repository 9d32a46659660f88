"""
Player class for heads-up Texas Hold'em.

Manages player state including:
- Stack (chip count)
- Hole cards
- Contribution in the current street and in the whole round
- Folded flag
"""

from __future__ import annotations
from typing import List, Dict, Any
from dataclasses import dataclass, field

from pokerduel.core.card import Card


@dataclass
class Player:
    """
    One of the two seats.

    Attributes:
        player_id: "player" (human) or "computer"
        stack: Current chip count
        hole_cards: The player's private cards (2 cards)
        current_bet: Chips contributed in the current street
        total_bet: Chips contributed in the current round
        folded: Whether the player folded this round
        has_acted: Acted since the last bet or raise on this street
    """
    player_id: str
    stack: int
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    total_bet: int = 0
    folded: bool = False
    has_acted: bool = False
    last_action: str = ""

    def reset_for_new_round(self) -> None:
        """Reset per-round state before the blinds."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet = 0
        self.folded = False
        self.has_acted = False
        self.last_action = ""

    def reset_for_new_street(self) -> None:
        """Reset per-street state (flop, turn, river)."""
        self.current_bet = 0
        self.has_acted = False

    def deal_cards(self, cards: List[Card]) -> None:
        self.hole_cards = list(cards)

    def commit(self, amount: int) -> int:
        """
        Move chips from the stack into this street's contribution.

        Callers validate affordability first; the stack is never allowed to
        go negative.

        Returns:
            Amount committed
        """
        if amount < 0 or amount > self.stack:
            raise ValueError(f"Cannot commit {amount} from a stack of {self.stack}")
        self.stack -= amount
        self.current_bet += amount
        self.total_bet += amount
        return amount

    def refund(self, amount: int) -> None:
        """Take back uncalled chips from this street's contribution."""
        self.stack += amount
        self.current_bet -= amount
        self.total_bet -= amount

    @property
    def is_all_in(self) -> bool:
        """Still in the round with no chips behind."""
        return not self.folded and self.stack == 0

    @property
    def can_act(self) -> bool:
        return not self.folded and self.stack > 0

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.player_id,
            "stack": self.stack,
            "bet": self.current_bet,
            "total_bet": self.total_bet,
            "folded": self.folded,
            "all_in": self.is_all_in,
            "last_action": self.last_action,
        }

        if not hide_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __repr__(self) -> str:
        return (
            f"Player({self.player_id}, stack={self.stack}, "
            f"bet={self.current_bet}, folded={self.folded})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.player_id} [{cards_str}] ${self.stack}"
