"""
Pytest configuration and shared fixtures for pokerduel tests.
"""

import pytest
from pokerduel.agents.base import CallAgent
from pokerduel.core.betting import BettingEngine, RoundState
from pokerduel.core.card import Card, Deck, Rank, Suit, DECK_SIZE, parse_cards
from pokerduel.core.controller import RoundController
from pokerduel.core.player import Player
from pokerduel.core.random_source import FixedRandom
from pokerduel.core.rules import GameConfig, HUMAN, COMPUTER


def build_deck(human: str, computer: str, board: str = "") -> Deck:
    """
    Stack a deck for one round.

    Hole cards are dealt alternately starting with the human, then burn,
    flop, burn, turn, burn, river. Missing board cards and the burns are
    filled from the unused cards in order.
    """
    human_cards = parse_cards(human)
    computer_cards = parse_cards(computer)
    board_cards = parse_cards(board)
    used = set(human_cards + computer_cards + board_cards)

    spare = iter([c for c in Deck(shuffle=False).deal(DECK_SIZE) if c not in used])
    while len(board_cards) < 5:
        board_cards.append(next(spare))

    order = [human_cards[0], computer_cards[0], human_cards[1], computer_cards[1]]
    order += [next(spare)] + board_cards[:3]
    order += [next(spare), board_cards[3]]
    order += [next(spare), board_cards[4]]
    order += list(spare)
    return Deck.from_cards(order)


@pytest.fixture
def stacked_deck():
    """Factory for a deck with chosen hole cards and board."""
    return build_deck


@pytest.fixture
def deck():
    """Create a fresh shuffled deck."""
    return Deck(shuffle=True)


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def players():
    """Both seats with 1000 chips."""
    return {
        HUMAN: Player(player_id=HUMAN, stack=1000),
        COMPUTER: Player(player_id=COMPUTER, stack=1000),
    }


@pytest.fixture
def engine(players):
    """Betting engine for a fresh round, blinds not yet posted."""
    return BettingEngine(RoundState(players=players))


@pytest.fixture
def started_engine(engine):
    """Betting engine after blinds of 10/20."""
    engine.post_blinds(10, 20)
    return engine


@pytest.fixture
def fixed_random():
    """Factory for a FixedRandom source."""
    return FixedRandom


@pytest.fixture
def controller():
    """Controller whose computer always checks or calls."""
    return RoundController(GameConfig(seed=1), agent=CallAgent())


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return parse_cards("10s Js Qs Ks As")


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return parse_cards("5h 6h 7h 8h 9h")
