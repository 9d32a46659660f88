"""
pokerduel - Heads-up Texas Hold'em against a scripted opponent

A two-player poker game project with:
- Pure Python game core (betting engine, category hand evaluator)
- A scripted computer opponent with injectable randomness
- FastAPI + WebSocket server for a browser client, and a text CLI

Usage:
    from pokerduel.core import RoundController, GameConfig, ActionType
    from pokerduel.agents import OpponentPolicy
"""

__version__ = "0.1.0"

from pokerduel.core.card import Card, Deck
from pokerduel.core.player import Player
from pokerduel.core.hand import HandRank, best_five_of, classify
from pokerduel.core.rules import GameConfig, ActionType, Street
from pokerduel.core.controller import RoundController

__all__ = [
    "Card",
    "Deck",
    "Player",
    "HandRank",
    "best_five_of",
    "classify",
    "GameConfig",
    "ActionType",
    "Street",
    "RoundController",
    "__version__",
]
