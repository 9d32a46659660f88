"""
pokerduel Core - Pure Python heads-up Texas Hold'em game logic

This module contains all game logic without any network dependencies.
"""

from pokerduel.core.card import Card, Deck, Rank, Suit, parse_cards
from pokerduel.core.errors import ActionError, PokerError, EmptyDeckError
from pokerduel.core.hand import HandRank, classify, strength, best_five_of, compare_hands
from pokerduel.core.player import Player
from pokerduel.core.random_source import RandomSource, SeededRandom, FixedRandom
from pokerduel.core.rules import GameConfig, Street, ActionType, HUMAN, COMPUTER
from pokerduel.core.betting import BettingEngine, RoundState, ActionResult
from pokerduel.core.controller import RoundController, RoundOutcome, GameEvent, EventType, LogEntry

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "parse_cards",
    "ActionError",
    "PokerError",
    "EmptyDeckError",
    "HandRank",
    "classify",
    "strength",
    "best_five_of",
    "compare_hands",
    "Player",
    "RandomSource",
    "SeededRandom",
    "FixedRandom",
    "GameConfig",
    "Street",
    "ActionType",
    "HUMAN",
    "COMPUTER",
    "BettingEngine",
    "RoundState",
    "ActionResult",
    "RoundController",
    "RoundOutcome",
    "GameEvent",
    "EventType",
    "LogEntry",
]
