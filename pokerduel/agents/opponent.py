"""
Scripted opponent policy.

The computer sizes up its hand with the category evaluator, adjusts for
heads-up play, position and pot odds, adds some noise, and then decides
between all-in, fold, raise, call and check. It bluffs now and then, more
often on the flop.

Every random draw comes from the injected ``RandomSource``, in this order:

1. noise factor of the strength estimate
2. ``random_factor`` used by the raise and call gates
3. aggression
4. bluff gate
5. bluff aggression (only when bluffing)
6. bluff raise factor (only when raising on a bluff)
7. bluff message (only when raising on a bluff)

Draws 3 onwards are skipped when the hand ends early in the all-in or
weak-hand fold branches.
"""

import logging
import math
from typing import Optional

from pokerduel.agents.base import BaseAgent, OpponentView, Decision
from pokerduel.core.hand import classify
from pokerduel.core.random_source import RandomSource, SeededRandom
from pokerduel.core.rules import Street, ActionType, COMPUTER


logger = logging.getLogger(__name__)


# Strength estimate
DEFAULT_STRENGTH = 0.4
HEADS_UP_BOOST = 1.2
LATE_POSITION_BOOST = 1.1
GOOD_ODDS_BOOST = 1.2
POOR_ODDS_PENALTY = 0.8
NOISE_MIN = 0.9
NOISE_SPAN = 0.2

# Early exits
WEAK_HAND = 0.3
WEAK_HAND_CALL_SHARE = 0.3

# Street tables
BLUFF_CHANCE = {
    Street.PREFLOP: 0.15,
    Street.FLOP: 0.2,
    Street.TURN: 0.15,
    Street.RIVER: 0.15,
}
STRENGTH_MULTIPLIER = {
    Street.PREFLOP: 0.9,
    Street.FLOP: 1.1,
    Street.TURN: 1.2,
    Street.RIVER: 1.2,
}

# Raising
RAISE_THRESHOLD = 0.6
MAX_RAISE_SHARE = 0.5
BLUFF_BOOST = 1.5

BLUFF_MESSAGES = [
    "Computer confidently raises to ${total}.",
    "Computer quickly raises to ${total}.",
    "Computer doesn't hesitate and raises to ${total}.",
]


def pot_odds(call_amount: int, pot: int) -> float:
    """Share of the resulting pot the call would cost."""
    if call_amount <= 0:
        return 0.0
    return call_amount / (pot + call_amount)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class OpponentPolicy(BaseAgent):
    """
    The computer's decision policy.

    Args:
        rng: Source of uniform draws in [0, 1); a seeded ``SeededRandom`` by
            default.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        player_id: str = COMPUTER,
        name: Optional[str] = None,
    ):
        super().__init__(player_id, name or "Computer")
        self.rng = rng or SeededRandom()

    def estimate_strength(self, view: OpponentView) -> float:
        """
        Hand strength in [0, 1].

        The 1-10 category of hole cards plus board, scaled to [0, 1], boosted
        for heads-up play and for acting after the flop, nudged by pot odds,
        then multiplied by a noise factor in [0.9, 1.1].
        """
        cards = view.hole_cards + view.community_cards
        if len(cards) < 2:
            return DEFAULT_STRENGTH

        s = int(classify(cards)) / 10
        s = min(1.0, s * HEADS_UP_BOOST)

        if len(view.community_cards) >= 3:
            s = min(1.0, s * LATE_POSITION_BOOST)

        odds = pot_odds(view.call_amount, view.pot)
        if view.call_amount > 0:
            if s > odds * 1.5:
                s = min(1.0, s * GOOD_ODDS_BOOST)
            elif s < odds * 0.7:
                s *= POOR_ODDS_PENALTY

        noise = NOISE_MIN + self.rng.next_float() * NOISE_SPAN
        return clamp(s * noise)

    def raise_size(self, view: OpponentView, adjusted: float, aggression: float, bluffing: bool) -> int:
        """Chips to commit when raising: between the legal minimum and half the stack."""
        max_raise = int(view.stack * MAX_RAISE_SHARE)
        if bluffing:
            raise_factor = 0.8 + self.rng.next_float() * 0.4
        else:
            raise_factor = 0.6 + adjusted * 0.5

        sized = min(math.floor(raise_factor * max_raise * aggression), max_raise)
        return max(view.min_commitment, sized)

    def act(self, view: OpponentView) -> Decision:
        return self.decide(view)

    def decide(self, view: OpponentView) -> Decision:
        to_call = view.call_amount
        strength = self.estimate_strength(view)
        random_factor = self.rng.next_float()
        odds = pot_odds(to_call, view.pot)

        if to_call > 0 and to_call >= view.stack:
            return Decision(
                ActionType.ALL_IN, view.stack, strength, strength,
                message=f"Computer goes all-in with ${view.stack}!",
            )

        if to_call > 0 and strength < WEAK_HAND and to_call > view.stack * WEAK_HAND_CALL_SHARE:
            return Decision(ActionType.FOLD, 0, strength, strength)

        adjusted = strength * STRENGTH_MULTIPLIER[view.street]
        aggression = 0.6 + self.rng.next_float() * 0.4

        # Strict comparison: a draw equal to the bluff chance does not bluff
        bluffing = self.rng.next_float() < BLUFF_CHANCE[view.street]
        if bluffing:
            adjusted = min(1.0, adjusted * BLUFF_BOOST)
            aggression = 1.2 + self.rng.next_float() * 0.3
            logger.debug("Computer is bluffing")

        should_raise = adjusted > RAISE_THRESHOLD and (
            adjusted > odds * 1.2 or random_factor < 0.8 or bluffing
        )

        if should_raise and view.can_raise:
            amount = self.raise_size(view, adjusted, aggression, bluffing)
            if amount <= view.stack:
                return self._raise_decision(view, amount, strength, adjusted, bluffing)

        if to_call > 0:
            threshold = min(0.3, odds * 0.8)
            should_call = strength > threshold or (
                strength > threshold * 0.7 and random_factor < 0.6
            )
            if should_call:
                return Decision(
                    ActionType.CALL, to_call, strength, adjusted, bluffing,
                    message=self._call_message(view),
                )
            return Decision(ActionType.FOLD, 0, strength, adjusted, bluffing)

        message = None
        if strength > 0.5 and random_factor < 0.3:
            message = "Computer checks (trapping...)."
        return Decision(ActionType.CHECK, 0, strength, adjusted, bluffing, message)

    def _raise_decision(
        self,
        view: OpponentView,
        amount: int,
        strength: float,
        adjusted: float,
        bluffing: bool,
    ) -> Decision:
        action = ActionType.BET if view.contribution == 0 and view.call_amount == 0 else ActionType.RAISE
        total = view.contribution + amount

        if bluffing:
            template = BLUFF_MESSAGES[int(self.rng.next_float() * len(BLUFF_MESSAGES))]
            message = template.format(total=total)
        elif view.call_amount > 0:
            message = f"Computer raises to ${total}."
        else:
            message = f"Computer bets ${amount}."

        return Decision(action, amount, strength, adjusted, bluffing, message)

    @staticmethod
    def _call_message(view: OpponentView) -> str:
        if view.call_amount > view.stack * 0.2:
            return f"Computer makes a big call of ${view.call_amount}."
        return f"Computer calls ${view.call_amount}."
