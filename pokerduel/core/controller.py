"""
Round controller for a heads-up game against the computer.

The controller owns both players across rounds and, for the round in
progress, the deck and the ``BettingEngine`` with its ``RoundState``. It:
- deals hole cards and posts blinds
- applies human actions and lets the computer answer synchronously
- burns and deals the flop, turn and river as streets close
- runs out the board when a player is all-in
- settles folds and showdowns and reports a ``RoundOutcome``
- keeps the player-facing game log and notifies event subscribers
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Callable
from dataclasses import dataclass, field
from enum import Enum
import logging

from pokerduel.agents.base import BaseAgent, OpponentView
from pokerduel.agents.opponent import OpponentPolicy
from pokerduel.core.betting import BettingEngine, RoundState, ActionResult
from pokerduel.core.card import Card, Deck
from pokerduel.core.errors import ActionError, PokerError
from pokerduel.core.hand import HandRank, HAND_RANK_NAMES, best_five_of
from pokerduel.core.player import Player
from pokerduel.core.random_source import SeededRandom
from pokerduel.core.rules import (
    GameConfig, Street, ActionType,
    HUMAN, COMPUTER, SYSTEM, SEATS,
    HOLE_CARDS, CARDS_FOR_STREET, NEXT_STREET,
    other_seat,
)


logger = logging.getLogger(__name__)


TIE = "tie"


class EventType(Enum):
    """Notifications for the presentation layer."""
    STREET_ADVANCED = "street_advanced"
    ROUND_ENDED = "round_ended"
    GAME_OVER = "game_over"


@dataclass
class GameEvent:
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, **self.data}


@dataclass
class LogEntry:
    """One line of the game log; category is player, computer or system."""
    text: str
    category: str = SYSTEM

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "category": self.category}


@dataclass
class ShowdownHand:
    """A player's best five cards at showdown."""
    score: int
    best_cards: List[Card]

    @property
    def name(self) -> str:
        return HAND_RANK_NAMES[HandRank(self.score)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "name": self.name,
            "cards": [c.to_dict() for c in self.best_cards],
        }


@dataclass
class RoundOutcome:
    """
    Terminal result of a round.

    Attributes:
        winner: "player", "computer" or "tie"
        amount_won: Chips the winner took (whole pot; on a tie, the pot)
        payouts: Chips paid to each seat
        revealed_opponent_cards: The computer's hole cards
        showdown: False when the round ended by a fold
        hands: Best five-card hand per seat (showdown only)
    """
    winner: str
    amount_won: int
    payouts: Dict[str, int]
    revealed_opponent_cards: List[Card]
    showdown: bool
    hands: Dict[str, ShowdownHand] = field(default_factory=dict)

    @property
    def split(self) -> bool:
        return self.winner == TIE

    @property
    def player_hand(self) -> Optional[ShowdownHand]:
        return self.hands.get(HUMAN)

    @property
    def computer_hand(self) -> Optional[ShowdownHand]:
        return self.hands.get(COMPUTER)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": self.winner,
            "amount_won": self.amount_won,
            "payouts": dict(self.payouts),
            "revealed_opponent_cards": [c.to_dict() for c in self.revealed_opponent_cards],
            "showdown": self.showdown,
            "split": self.split,
            "hands": {pid: hand.to_dict() for pid, hand in self.hands.items()},
        }


EventCallback = Callable[[GameEvent], None]


class RoundController:
    """
    Heads-up game driver.

    Usage:
        controller = RoundController(GameConfig(seed=7))
        controller.start_round()

        while controller.is_round_running():
            result = controller.act("player", ActionType.CALL)

        outcome = controller.outcome
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        agent: Optional[BaseAgent] = None,
        rng: Optional[SeededRandom] = None,
    ):
        self.config = config or GameConfig()
        self.rng = rng or SeededRandom(self.config.seed)
        self.agent = agent or OpponentPolicy(self.rng)

        self.players: Dict[str, Player] = {
            pid: Player(player_id=pid, stack=self.config.starting_stack)
            for pid in SEATS
        }

        self.deck: Optional[Deck] = None
        self.engine: Optional[BettingEngine] = None
        self.outcome: Optional[RoundOutcome] = None
        self.round_number = 0

        self.log: List[LogEntry] = []
        self.events: List[GameEvent] = []
        self._subscribers: List[EventCallback] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> Optional[RoundState]:
        return self.engine.state if self.engine else None

    def is_round_running(self) -> bool:
        return self.engine is not None and self.outcome is None

    def is_game_over(self) -> bool:
        return any(p.stack == 0 for p in self.players.values()) and not self.is_round_running()

    @property
    def game_winner(self) -> Optional[str]:
        if not self.is_game_over():
            return None
        return HUMAN if self.players[COMPUTER].stack == 0 else COMPUTER

    def get_state(self, for_player_id: Optional[str] = HUMAN) -> Dict[str, Any]:
        """
        Snapshot for the presentation layer.

        The computer's hole cards are included only once the round is over.
        """
        if self.engine is None:
            public_info = {
                "street": None,
                "pot": 0,
                "players": [self.players[pid].to_dict() for pid in SEATS],
            }
            state = {"public_info": public_info, "private_info": {}}
        else:
            state = self.engine.snapshot(for_player_id)

        state["public_info"]["round_number"] = self.round_number
        state["public_info"]["game_over"] = self.is_game_over()
        state["outcome"] = self.outcome.to_dict() if self.outcome else None
        return state

    def log_entries(self) -> List[Dict[str, str]]:
        return [entry.to_dict() for entry in self.log]

    # ------------------------------------------------------------------
    # Events and log
    # ------------------------------------------------------------------

    def subscribe(self, callback: EventCallback) -> None:
        self._subscribers.append(callback)

    def _emit(self, event_type: EventType, **data: Any) -> None:
        event = GameEvent(event_type, data)
        self.events.append(event)
        for callback in self._subscribers:
            callback(event)

    def _log(self, text: str, category: str = SYSTEM) -> None:
        self.log.append(LogEntry(text, category))

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def start_round(self, deck: Optional[Deck] = None) -> bool:
        """
        Shuffle, deal and post blinds for a new round.

        Args:
            deck: Prepared deck to deal from instead of a fresh shuffle
                (tests and replays)

        Returns:
            True if the round started, False if a round is still running or
            the game is over.
        """
        if self.is_round_running():
            logger.warning("Cannot start round: a round is in progress")
            return False
        if self.is_game_over():
            logger.warning("Cannot start round: game over")
            return False

        self.round_number += 1
        logger.info(f"Starting round #{self.round_number}")

        for player in self.players.values():
            player.reset_for_new_round()

        self.deck = deck if deck is not None else Deck(shuffle=True, rng=self.rng.generator)
        self.outcome = None
        self.events = []
        self.engine = BettingEngine(RoundState(players=self.players), min_raise=self.config.min_raise)

        self._deal_hole_cards()
        self._log("New round started!")
        human_cards = " ".join(str(c) for c in self.players[HUMAN].hole_cards)
        self._log(f"Your cards: {human_cards}", HUMAN)

        self._post_blinds()
        self._progress()
        return True

    def new_game(self) -> None:
        """Reset both stacks to the starting stack after a game over."""
        for player in self.players.values():
            player.stack = self.config.starting_stack
            player.reset_for_new_round()
        self.engine = None
        self.deck = None
        self.outcome = None
        self.round_number = 0
        self.events = []
        self.log = []
        self._log("New game started! Good luck!")
        logger.info("New game started")

    def _deal_hole_cards(self) -> None:
        """Two cards each, dealt alternately starting with the human."""
        dealt: Dict[str, List[Card]] = {pid: [] for pid in SEATS}
        for _ in range(HOLE_CARDS):
            for pid in SEATS:
                dealt[pid].append(self.deck.draw())
        for pid in SEATS:
            self.players[pid].deal_cards(dealt[pid])

    def _post_blinds(self) -> None:
        sb, bb = self.config.small_blind, self.config.big_blind
        human, computer = self.players[HUMAN], self.players[COMPUTER]
        # Amounts as posted, before any uncalled part of the big blind is returned
        sb_posted, bb_posted = min(sb, human.stack), min(bb, computer.stack)

        result = self.engine.post_blinds(sb, bb)
        if not result.success and result.error == ActionError.INSUFFICIENT_CHIPS:
            logger.info(f"Short stack, posting all-in blind: {result.message}")
            result = self.engine.post_blinds(sb, bb, allow_short=True)
        if not result.success:
            raise PokerError(f"Could not post blinds: {result.message}")

        self._log(f"You post small blind: ${sb_posted}", HUMAN)
        self._log(f"Computer posts big blind: ${bb_posted}", COMPUTER)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def act(self, player_id: str, action_type: ActionType, amount: int = 0) -> ActionResult:
        """
        Submit an action for ``player_id`` (normally the human).

        On success the computer answers immediately if it is its turn, and
        streets advance as they close. Rejections are returned unchanged and
        leave the game as it was.
        """
        if not self.is_round_running():
            return ActionResult(False, "No round in progress", action_type, error=ActionError.ILLEGAL_ACTION)

        result = self.engine.take_action(player_id, action_type, amount)
        if not result.success:
            self._log(result.message, SYSTEM)
            return result

        self._log_action(player_id, result)
        self._progress()
        return result

    def check(self, player_id: str = HUMAN) -> ActionResult:
        return self.act(player_id, ActionType.CHECK)

    def call(self, player_id: str = HUMAN) -> ActionResult:
        return self.act(player_id, ActionType.CALL)

    def bet_or_raise(self, amount: int, player_id: str = HUMAN) -> ActionResult:
        return self.act(player_id, ActionType.RAISE, amount)

    def all_in(self, player_id: str = HUMAN) -> ActionResult:
        return self.act(player_id, ActionType.ALL_IN)

    def fold(self, player_id: str = HUMAN) -> ActionResult:
        return self.act(player_id, ActionType.FOLD)

    def _progress(self) -> None:
        """Advance streets and let the computer act until the human must move or the round ends."""
        while self.outcome is None:
            state = self.engine.state

            if state.folded_player is not None:
                self._settle_fold()
                return

            if state.street_closed:
                if state.uncalled_return:
                    pid, excess = state.uncalled_return
                    self._log(f"Uncalled ${excess} returned to {self._name(pid)}.")
                if state.street == Street.RIVER:
                    self.engine.advance_street([])
                    self._settle_showdown()
                    return
                self._deal_next_street()
                continue

            if state.actor_to_move == self.agent.player_id:
                self._run_agent()
                continue

            return

    def _run_agent(self) -> None:
        view = OpponentView.from_engine(self.engine, self.agent.player_id)
        decision = self.agent.act(view)
        result = self.engine.take_action(self.agent.player_id, decision.action, decision.amount)
        if not result.success:
            # An agent must only choose legal actions
            raise PokerError(f"{self.agent} chose an illegal action: {result.message}")
        self._log_action(self.agent.player_id, result, decision.message)

    def _deal_next_street(self) -> None:
        next_street = NEXT_STREET[self.engine.state.street]
        self.deck.burn()
        cards = self.deck.deal(CARDS_FOR_STREET[next_street])
        self.engine.advance_street(cards)

        board = " ".join(str(c) for c in self.engine.state.community_cards)
        self._log(f"{next_street.name.capitalize()} dealt: {board}")
        logger.debug(f"{next_street.name}: {board}")
        self._emit(
            EventType.STREET_ADVANCED,
            street=next_street.name,
            community_cards=[c.to_dict() for c in self.engine.state.community_cards],
        )

    def _log_action(self, player_id: str, result: ActionResult, message: Optional[str] = None) -> None:
        if message is None:
            message = self._describe(player_id, result)
        self._log(message, player_id)

    def _describe(self, player_id: str, result: ActionResult) -> str:
        player = self.players[player_id]
        you = player_id == HUMAN
        name = "You" if you else "Computer"

        def verb(base: str) -> str:
            return base if you else base + "s"

        if result.action_type == ActionType.FOLD:
            return "You folded." if you else "Computer folds."
        if result.action_type == ActionType.CHECK:
            return f"{name} {verb('check')}."
        if result.action_type == ActionType.CALL:
            return f"{name} {verb('call')} ${result.amount}."
        if result.action_type == ActionType.BET:
            return f"{name} {verb('bet')} ${result.amount}."
        if result.action_type == ActionType.RAISE:
            return f"{name} {verb('raise')} to ${player.current_bet}."
        if result.action_type == ActionType.ALL_IN:
            return f"{name} {'go' if you else 'goes'} all-in with ${result.amount}!"
        return result.message

    @staticmethod
    def _name(player_id: str) -> str:
        return "you" if player_id == HUMAN else "computer"

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def _settle_fold(self) -> None:
        state = self.engine.state
        winner = other_seat(state.folded_player)
        pot = state.pot
        self._pay({winner: pot})

        if winner == HUMAN:
            self._log(f"You win ${pot}!", HUMAN)
        else:
            self._log(f"Computer wins ${pot}.", COMPUTER)

        self._finish(RoundOutcome(
            winner=winner,
            amount_won=pot,
            payouts={winner: pot, state.folded_player: 0},
            revealed_opponent_cards=list(self.players[COMPUTER].hole_cards),
            showdown=False,
        ))

    def _settle_showdown(self) -> None:
        state = self.engine.state
        board = state.community_cards
        hands = {}
        for pid in SEATS:
            score, best = best_five_of(self.players[pid].hole_cards + board)
            hands[pid] = ShowdownHand(score, best)

        pot = state.pot
        human_score, computer_score = hands[HUMAN].score, hands[COMPUTER].score
        opponent_cards = ", ".join(str(c) for c in self.players[COMPUTER].hole_cards)
        self._log(f"Computer's cards: {opponent_cards}", COMPUTER)

        if human_score > computer_score:
            winner, payouts = HUMAN, {HUMAN: pot, COMPUTER: 0}
            self._log("Your hand was stronger!", HUMAN)
            self._log(f"You win ${pot}!", HUMAN)
        elif computer_score > human_score:
            winner, payouts = COMPUTER, {HUMAN: 0, COMPUTER: pot}
            self._log("Computer's hand was stronger!", COMPUTER)
            self._log(f"Computer wins ${pot}.", COMPUTER)
        else:
            # Human takes the floor of half, the computer the odd chip
            half = pot // 2
            winner, payouts = TIE, {HUMAN: half, COMPUTER: pot - half}
            self._log(
                f"It's a tie! Pot of ${pot} is split. You get ${half}, computer gets ${pot - half}."
            )

        self._pay(payouts)
        self._finish(RoundOutcome(
            winner=winner,
            amount_won=pot,
            payouts=payouts,
            revealed_opponent_cards=list(self.players[COMPUTER].hole_cards),
            showdown=True,
            hands=hands,
        ))

    def _pay(self, payouts: Dict[str, int]) -> None:
        for pid, amount in payouts.items():
            self.players[pid].stack += amount
        self.engine.state.pot = 0

    def _finish(self, outcome: RoundOutcome) -> None:
        self.outcome = outcome
        logger.info(
            f"Round #{self.round_number} over: winner={outcome.winner} "
            f"pot={outcome.amount_won} showdown={outcome.showdown}"
        )
        self._emit(EventType.ROUND_ENDED, outcome=outcome.to_dict())

        if self.is_game_over():
            winner = self.game_winner
            if winner == HUMAN:
                self._log("Congratulations! You won the game!", HUMAN)
            else:
                self._log("You've run out of chips. Better luck next time!", COMPUTER)
            logger.info(f"Game over, winner={winner}")
            self._emit(EventType.GAME_OVER, winner=winner)
