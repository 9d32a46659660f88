"""
Heads-up betting engine.

This module owns the per-round betting state machine:
- Blind posting (human = small blind, computer = big blind)
- Player actions (check, call, bet/raise, all-in, fold)
- Street completion and uncalled-chip return after a short all-in
- Street advancement once the dealer has produced the next cards

The engine never deals cards itself; the round controller burns and deals
and then calls ``advance_street``. Rejected actions come back as failed
``ActionResult`` values with an ``ActionError`` code and leave the state
untouched.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Callable
from dataclasses import dataclass, field
import logging

from pokerduel.core.card import Card
from pokerduel.core.player import Player
from pokerduel.core.errors import (
    ActionError, ActionRejected, OutOfTurn, IllegalAction,
    BelowMinimum, InsufficientChips,
)
from pokerduel.core.rules import (
    Street, ActionType, HUMAN, COMPUTER, SEATS,
    DEFAULT_MIN_RAISE, NEXT_STREET, CARDS_FOR_STREET,
    other_seat, minimum_commitment, next_min_raise,
)


logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Result of a player action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0
    error: Optional[ActionError] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "action_type": self.action_type.value if self.action_type else None,
            "amount": self.amount,
            "error": self.error.value if self.error else None,
            "minimum": self.minimum,
            "maximum": self.maximum,
        }


@dataclass
class RoundState:
    """
    Mutable state of one round.

    Created fresh for every round and only changed through ``BettingEngine``.
    """
    players: Dict[str, Player]
    street: Street = Street.PREFLOP
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    min_raise: int = DEFAULT_MIN_RAISE
    last_aggressor: Optional[str] = None
    actor_to_move: Optional[str] = None
    actions_this_street: int = 0
    street_closed: bool = False
    blinds_posted: bool = False
    folded_player: Optional[str] = None
    # (player_id, amount) of the last uncalled chips handed back
    uncalled_return: Optional[tuple] = None

    @property
    def chips_in_play(self) -> int:
        """Pot plus both stacks; constant for the whole round."""
        return self.pot + sum(p.stack for p in self.players.values())

    @property
    def live_players(self) -> List[Player]:
        return [self.players[pid] for pid in SEATS if not self.players[pid].folded]


class BettingEngine:
    """
    Betting state machine for one heads-up round.

    Usage:
        state = RoundState(players={"player": human, "computer": computer})
        engine = BettingEngine(state)
        engine.post_blinds(10, 20)
        engine.call("player")
        engine.check("computer")
        if engine.state.street_closed:
            engine.advance_street(flop_cards)
    """

    def __init__(self, state: RoundState, min_raise: int = DEFAULT_MIN_RAISE):
        self.state = state
        self.min_raise_floor = min_raise
        self.state.min_raise = min_raise

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def player(self, player_id: str) -> Player:
        if player_id not in self.state.players:
            raise IllegalAction(f"Unknown player: {player_id}")
        return self.state.players[player_id]

    @property
    def is_round_over(self) -> bool:
        """A fold ended the round or the showdown was reached."""
        return self.state.folded_player is not None or self.state.street == Street.SHOWDOWN

    @property
    def needs_runout(self) -> bool:
        """Street closed with a player all-in: remaining cards are dealt without betting."""
        if not self.state.street_closed or self.is_round_over:
            return False
        return any(p.is_all_in for p in self.state.live_players)

    def call_amount(self, player_id: str) -> int:
        """Chips the player owes to match the current bet."""
        return max(0, self.state.current_bet - self.state.players[player_id].current_bet)

    def legal_actions(self, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Get legal actions for the player to move.

        Returns:
            List of action dicts with type and constraints; empty when it is
            not this player's turn.
        """
        if player_id is None:
            player_id = self.state.actor_to_move
        if player_id is None or player_id != self.state.actor_to_move or self.is_round_over:
            return []

        player = self.state.players[player_id]
        other = self.state.players[other_seat(player_id)]
        to_call = self.call_amount(player_id)

        actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

        if to_call == 0:
            actions.append({"type": ActionType.CHECK.value})
        elif to_call <= player.stack:
            actions.append({"type": ActionType.CALL.value, "amount": to_call})

        required = minimum_commitment(to_call, self.state.min_raise)
        if other.can_act and player.stack >= required:
            bet_type = ActionType.BET if self.state.current_bet == 0 else ActionType.RAISE
            actions.append({
                "type": bet_type.value,
                "min": required,
                "max": player.stack,
            })

        if player.stack > 0:
            actions.append({"type": ActionType.ALL_IN.value, "amount": player.stack})

        return actions

    def snapshot(self, for_player_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Get the current round state.

        Args:
            for_player_id: If specified, include that player's hole cards,
                call amount and legal actions.
        """
        state = self.state
        public_info = {
            "street": state.street.name,
            "pot": state.pot,
            "current_bet": state.current_bet,
            "min_raise": state.min_raise,
            "last_aggressor": state.last_aggressor,
            "actor_to_move": state.actor_to_move,
            "community_cards": [c.to_dict() for c in state.community_cards],
            "players": [state.players[pid].to_dict() for pid in SEATS],
            "round_over": self.is_round_over,
        }

        private_info: Dict[str, Any] = {}
        if for_player_id in state.players:
            player = state.players[for_player_id]
            private_info = {
                "hand": [c.to_dict() for c in player.hole_cards],
                "call_amount": self.call_amount(for_player_id),
                "legal_actions": self.legal_actions(for_player_id),
            }

        return {"public_info": public_info, "private_info": private_info}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def post_blinds(self, small_blind: int, big_blind: int, allow_short: bool = False) -> ActionResult:
        """
        Post the blinds: the human pays the small blind, the computer the big.

        A stack that cannot cover its blind is rejected with
        INSUFFICIENT_CHIPS unless ``allow_short`` is set, in which case the
        blind is clamped to the stack (an all-in blind).
        """
        try:
            if self.state.blinds_posted:
                raise IllegalAction("Blinds already posted")

            human = self.state.players[HUMAN]
            computer = self.state.players[COMPUTER]

            if not allow_short:
                if human.stack < small_blind:
                    raise InsufficientChips(
                        f"Cannot post small blind ${small_blind} with ${human.stack}", human.stack
                    )
                if computer.stack < big_blind:
                    raise InsufficientChips(
                        f"Cannot post big blind ${big_blind} with ${computer.stack}", computer.stack
                    )
        except ActionRejected as e:
            return self._rejected(e, None)

        sb_amount = human.commit(min(small_blind, human.stack))
        bb_amount = computer.commit(min(big_blind, computer.stack))
        human.last_action = f"SB ${sb_amount}"
        computer.last_action = f"BB ${bb_amount}"

        self.state.pot = sb_amount + bb_amount
        self.state.current_bet = max(sb_amount, bb_amount)
        self.state.min_raise = self.min_raise_floor
        self.state.blinds_posted = True

        logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")
        self._advance_turn(None)

        return ActionResult(True, f"Blinds posted ${sb_amount}/${bb_amount}", None, sb_amount + bb_amount)

    def check(self, player_id: str) -> ActionResult:
        return self._apply(player_id, ActionType.CHECK, self._check)

    def call(self, player_id: str) -> ActionResult:
        return self._apply(player_id, ActionType.CALL, self._call)

    def bet_or_raise(self, player_id: str, amount: int) -> ActionResult:
        """
        Bet or raise.

        Args:
            amount: Total chips this action moves from the stack, including
                any amount owed.
        """
        return self._apply(player_id, ActionType.RAISE, self._bet_or_raise, amount)

    def all_in(self, player_id: str) -> ActionResult:
        return self._apply(player_id, ActionType.ALL_IN, self._all_in)

    def fold(self, player_id: str) -> ActionResult:
        return self._apply(player_id, ActionType.FOLD, self._fold)

    def take_action(self, player_id: str, action_type: ActionType, amount: int = 0) -> ActionResult:
        """Dispatch an action by type; BET and RAISE both go to ``bet_or_raise``."""
        if action_type == ActionType.FOLD:
            return self.fold(player_id)
        elif action_type == ActionType.CHECK:
            return self.check(player_id)
        elif action_type == ActionType.CALL:
            return self.call(player_id)
        elif action_type in (ActionType.BET, ActionType.RAISE):
            return self.bet_or_raise(player_id, amount)
        elif action_type == ActionType.ALL_IN:
            return self.all_in(player_id)
        return ActionResult(False, f"Unknown action: {action_type}", error=ActionError.ILLEGAL_ACTION)

    def advance_street(self, cards: List[Card]) -> Street:
        """
        Move to the next street once the current one has closed.

        Args:
            cards: Community cards dealt for the new street (3, 1, 1, then
                none for the showdown)

        Returns:
            The new street

        Raises:
            IllegalAction: If the street is still open or the round is over.
        """
        state = self.state
        if not state.street_closed or self.is_round_over:
            raise IllegalAction(f"Cannot advance from {state.street.name}")

        next_street = NEXT_STREET[state.street]
        if len(cards) != CARDS_FOR_STREET[next_street]:
            raise ValueError(
                f"{next_street.name} needs {CARDS_FOR_STREET[next_street]} cards, got {len(cards)}"
            )

        state.street = next_street
        state.community_cards.extend(cards)
        state.current_bet = 0
        state.min_raise = self.min_raise_floor
        state.last_aggressor = None
        state.actions_this_street = 0
        state.uncalled_return = None
        for player in state.players.values():
            player.reset_for_new_street()

        logger.debug(f"Advanced to {next_street.name}")

        if next_street == Street.SHOWDOWN:
            state.actor_to_move = None
            return next_street

        state.street_closed = False
        self._advance_turn(None)
        return next_street

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _apply(
        self,
        player_id: str,
        action_type: ActionType,
        handler: Callable[..., ActionResult],
        *args: Any,
    ) -> ActionResult:
        """Validate whose turn it is, run the handler and convert rejections."""
        try:
            player = self._require_turn(player_id)
            result = handler(player, *args)
        except ActionRejected as e:
            return self._rejected(e, action_type)

        self.state.actions_this_street += 1
        player.has_acted = True
        logger.debug(f"{player_id}: {result.message}")

        if result.action_type != ActionType.FOLD:
            self._advance_turn(player_id)
        return result

    def _rejected(self, error: ActionRejected, action_type: Optional[ActionType]) -> ActionResult:
        logger.info(f"Rejected {action_type.value if action_type else 'BLINDS'}: {error.message}")
        return ActionResult(
            False,
            error.message,
            action_type,
            0,
            error.code,
            error.minimum,
            error.maximum,
        )

    def _require_turn(self, player_id: str) -> Player:
        player = self.player(player_id)
        if not self.state.blinds_posted:
            raise IllegalAction("Blinds have not been posted")
        if self.is_round_over or self.state.street_closed:
            raise IllegalAction("No betting in progress")
        if self.state.actor_to_move != player_id:
            raise OutOfTurn(f"It is not {player_id}'s turn")
        return player

    def _check(self, player: Player) -> ActionResult:
        to_call = self.call_amount(player.player_id)
        if to_call > 0:
            raise IllegalAction(f"Cannot check, must call ${to_call}")
        player.last_action = "CHECK"
        return ActionResult(True, "Checked", ActionType.CHECK, 0)

    def _call(self, player: Player) -> ActionResult:
        to_call = self.call_amount(player.player_id)
        if to_call == 0:
            raise IllegalAction("Nothing to call, use CHECK")
        if to_call > player.stack:
            raise InsufficientChips(
                f"Cannot call ${to_call} with ${player.stack}, go all-in instead", player.stack
            )

        player.commit(to_call)
        self.state.pot += to_call
        player.last_action = f"CALL ${to_call}"
        return ActionResult(True, f"Called ${to_call}", ActionType.CALL, to_call)

    def _bet_or_raise(self, player: Player, amount: int) -> ActionResult:
        other = self.state.players[other_seat(player.player_id)]
        if not other.can_act:
            raise IllegalAction("Opponent is all-in, call or fold")

        to_call = self.call_amount(player.player_id)
        required = minimum_commitment(to_call, self.state.min_raise)
        if amount < required:
            raise BelowMinimum(f"Minimum is ${required}", required)
        if amount > player.stack:
            raise InsufficientChips(
                f"Cannot bet ${amount} with ${player.stack}, go all-in instead", player.stack
            )

        action_type = ActionType.BET if self.state.current_bet == 0 else ActionType.RAISE
        player.commit(amount)
        self.state.pot += amount
        self._register_raise(player)

        if action_type == ActionType.BET:
            player.last_action = f"BET ${amount}"
            return ActionResult(True, f"Bet ${amount}", action_type, amount)
        player.last_action = f"RAISE ${player.current_bet}"
        return ActionResult(True, f"Raised to ${player.current_bet}", action_type, amount)

    def _all_in(self, player: Player) -> ActionResult:
        amount = player.stack
        player.commit(amount)
        self.state.pot += amount
        if player.current_bet > self.state.current_bet:
            self._register_raise(player)

        player.last_action = f"ALL-IN ${player.total_bet}"
        return ActionResult(True, f"All-in for ${amount}", ActionType.ALL_IN, amount)

    def _fold(self, player: Player) -> ActionResult:
        player.folded = True
        player.last_action = "FOLD"
        self.state.folded_player = player.player_id
        self.state.actor_to_move = None
        return ActionResult(True, "Folded", ActionType.FOLD, 0)

    def _register_raise(self, player: Player) -> None:
        """Bookkeeping after the current bet was lifted by ``player``."""
        raised_by = player.current_bet - self.state.current_bet
        self.state.current_bet = player.current_bet
        self.state.min_raise = next_min_raise(raised_by, self.min_raise_floor)
        self.state.last_aggressor = player.player_id
        # Everyone else must respond to the new bet
        for other in self.state.players.values():
            if other is not player:
                other.has_acted = False

    # ------------------------------------------------------------------
    # Turn order and street completion
    # ------------------------------------------------------------------

    def _next_actor(self, after: Optional[str]) -> Optional[str]:
        """
        Find the next player who still has something to do this street.

        A player with chips must act if they owe chips, or if they have not
        acted since the last aggression while the other player can still
        respond. Blinds do not count as acting, so the street never closes
        straight after the blinds.
        """
        order = [other_seat(after), after] if after else [HUMAN, COMPUTER]
        live = self.state.live_players

        for pid in order:
            player = self.state.players[pid]
            if not player.can_act:
                continue
            if player.current_bet < self.state.current_bet:
                return pid
            others_can_respond = any(p.stack > 0 for p in live if p is not player)
            if not player.has_acted and others_can_respond:
                return pid
        return None

    def _advance_turn(self, after: Optional[str]) -> None:
        next_actor = self._next_actor(after)
        if next_actor is None:
            self._close_street()
        else:
            self.state.actor_to_move = next_actor

    def _close_street(self) -> None:
        self.state.street_closed = True
        self.state.actor_to_move = None
        self._return_uncalled_chips()
        logger.debug(f"{self.state.street.name} closed, pot={self.state.pot}")

    def _return_uncalled_chips(self) -> None:
        """Hand back the part of a bet the all-in player could not match."""
        live = self.state.live_players
        if len(live) != 2:
            return

        high, low = sorted(live, key=lambda p: p.current_bet, reverse=True)
        excess = high.current_bet - low.current_bet
        if excess <= 0:
            return

        high.refund(excess)
        self.state.pot -= excess
        self.state.current_bet = high.current_bet
        self.state.uncalled_return = (high.player_id, excess)
        logger.debug(f"Returned uncalled ${excess} to {high.player_id}")
