"""
Hand Evaluation for heads-up Texas Hold'em.

Hands are ranked by category only, on a 1-10 scale where a higher number is
a better hand:

10. Royal Flush: A K Q J 10 of one suit
 9. Straight Flush
 8. Four of a Kind
 7. Full House
 6. Flush
 5. Straight
 4. Three of a Kind
 3. Two Pair
 2. One Pair
 1. High Card

Two hands in the same category score the same; there is no kicker or
within-category tie-break. Showdowns between such hands are split pots.

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
from typing import Iterable, List, Tuple
from itertools import combinations
from enum import IntEnum
from collections import Counter

from pokerduel.core.card import Card, Rank


class HandRank(IntEnum):
    """Hand categories; the value is the hand's strength score."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

HAND_SIZE = 5

WHEEL = {Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE}
ROYAL = {Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE}


def has_straight(ranks: Iterable[Rank]) -> bool:
    """
    Check for five consecutive ranks among any number of ranks.

    Ranks are deduplicated and sorted by ordinal; the wheel (A-2-3-4-5) also
    counts.
    """
    ordinals = sorted(set(int(r) for r in ranks))
    if WHEEL.issubset(ordinals):
        return True

    for i in range(len(ordinals) - 4):
        if ordinals[i + 4] - ordinals[i] == 4:
            return True
    return False


def classify(cards: Iterable[Card]) -> HandRank:
    """
    Classify any number of cards into a hand category.

    Unlike ``strength`` this accepts fewer than five cards, which is what the
    opponent needs to size up a partial board.

    Every test runs on the whole set at once. On six or seven cards a flush
    and a straight anywhere in the set make a straight flush, and a full
    house needs a rank seen exactly twice, so two sets of trips stay three of
    a kind. On five cards the categories are exact.
    """
    cards = list(cards)
    rank_counts = Counter(c.rank for c in cards)
    suit_counts = Counter(c.suit for c in cards)

    counts = list(rank_counts.values())
    pairs = counts.count(2)
    trips = 3 in counts
    quads = 4 in counts
    flush_suits = [s for s, n in suit_counts.items() if n >= HAND_SIZE]
    straight = has_straight(rank_counts)

    if flush_suits and straight:
        flush_ranks = {c.rank for c in cards if c.suit == flush_suits[0]}
        if ROYAL.issubset(flush_ranks):
            return HandRank.ROYAL_FLUSH
        return HandRank.STRAIGHT_FLUSH

    if quads:
        return HandRank.FOUR_OF_A_KIND

    if trips and pairs >= 1:
        return HandRank.FULL_HOUSE

    if flush_suits:
        return HandRank.FLUSH

    if straight:
        return HandRank.STRAIGHT

    if trips:
        return HandRank.THREE_OF_A_KIND

    if pairs >= 2:
        return HandRank.TWO_PAIR

    if pairs == 1:
        return HandRank.ONE_PAIR

    return HandRank.HIGH_CARD


def strength(cards: Iterable[Card]) -> int:
    """
    Score a set of at least five cards on the 1-10 category scale.

    Raises:
        ValueError: If fewer than 5 cards are given.
    """
    cards = list(cards)
    if len(cards) < HAND_SIZE:
        raise ValueError(f"Need at least 5 cards, got {len(cards)}")
    return int(classify(cards))


def best_five_of(cards: Iterable[Card]) -> Tuple[int, List[Card]]:
    """
    Find the best five-card subset.

    Every 5-card combination is scored (21 of them for 7 cards) and the
    first one reaching the maximal score is returned, so ties between equal
    combinations are resolved by enumeration order.

    Returns:
        Tuple of (score, best five cards)
    """
    cards = list(cards)
    if len(cards) < HAND_SIZE:
        raise ValueError(f"Need at least 5 cards, got {len(cards)}")

    best_score = 0
    best_cards: List[Card] = []
    for combo in combinations(cards, HAND_SIZE):
        score = strength(combo)
        if score > best_score:
            best_score = score
            best_cards = list(combo)

    return best_score, best_cards


def compare_hands(cards1: List[Card], cards2: List[Card]) -> int:
    """
    Compare two hands by best five-card category.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    score1, _ = best_five_of(cards1)
    score2, _ = best_five_of(cards2)

    if score1 > score2:
        return 1
    elif score1 < score2:
        return -1
    return 0


def get_hand_description(cards: List[Card]) -> str:
    """Human-readable category name of the best hand in ``cards``."""
    if len(cards) < HAND_SIZE:
        return HAND_RANK_NAMES[classify(cards)]
    score, _ = best_five_of(cards)
    return HAND_RANK_NAMES[HandRank(score)]
