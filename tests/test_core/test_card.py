"""
Tests for Card and Deck classes.
"""

import random

import pytest
from pokerduel.core.card import Card, Deck, Rank, Suit, DECK_SIZE, parse_cards
from pokerduel.core.errors import EmptyDeckError


class TestCard:
    """Tests for Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_from_string(self):
        """Test creating cards from string notation."""
        card1 = Card.from_string("As")
        assert card1.rank == Rank.ACE
        assert card1.suit == Suit.SPADES

        # With symbol
        card2 = Card.from_string("K♥")
        assert card2.rank == Rank.KING
        assert card2.suit == Suit.HEARTS

        # Ten, both spellings
        assert Card.from_string("Td") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("10d") == Card(Rank.TEN, Suit.DIAMONDS)

    @pytest.mark.parametrize("text", ["", "A", "1s", "Zh", "Ax", "11c"])
    def test_invalid_card_string(self, text):
        """Test that malformed card strings are rejected."""
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_card_equality(self):
        """Test card equality and hashing."""
        card1 = Card(Rank.ACE, Suit.SPADES)
        card2 = Card(Rank.ACE, Suit.SPADES)
        card3 = Card(Rank.ACE, Suit.HEARTS)

        assert card1 == card2
        assert card1 != card3
        assert len({card1, card2, card3}) == 2

    def test_card_is_immutable(self):
        """Test that cards cannot be changed."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_str(self):
        """Test card display."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"
        assert repr(Card(Rank.TWO, Suit.CLUBS)) == "Card(2c)"

    def test_card_color(self):
        """Test card colors."""
        assert Card.from_string("Ah").color == "red"
        assert Card.from_string("Ad").color == "red"
        assert Card.from_string("Ac").color == "black"
        assert Card.from_string("As").color == "black"

    def test_card_to_dict(self):
        """Test serialization for the client."""
        assert Card.from_string("Qd").to_dict() == {
            "rank": "Q",
            "suit": "♦",
            "text": "Q♦",
            "color": "red",
        }

    def test_sorting_by_rank(self):
        """Test cards sort by rank."""
        cards = parse_cards("Kh 2c As 10d")
        assert [c.rank for c in sorted(cards)] == [Rank.TWO, Rank.TEN, Rank.KING, Rank.ACE]


class TestDeck:
    """Tests for Deck class."""

    def test_deck_has_52_unique_cards(self, deck):
        """Test a new deck holds every card exactly once."""
        assert len(deck) == DECK_SIZE
        cards = deck.deal(DECK_SIZE)
        assert len(set(cards)) == DECK_SIZE

    def test_draws_never_repeat(self, deck):
        """Test drawn cards are removed from the deck."""
        seen = set()
        while deck.remaining:
            card = deck.draw()
            assert card not in seen
            seen.add(card)
        assert len(seen) == DECK_SIZE

    def test_draw_from_empty_deck(self, unshuffled_deck):
        """Test drawing past the last card fails."""
        unshuffled_deck.deal(DECK_SIZE)
        with pytest.raises(EmptyDeckError):
            unshuffled_deck.draw()

    def test_deal_more_than_remaining(self, unshuffled_deck):
        """Test dealing too many cards fails without drawing any."""
        unshuffled_deck.deal(50)
        with pytest.raises(EmptyDeckError):
            unshuffled_deck.deal(3)
        assert unshuffled_deck.remaining == 2

    def test_burn(self, unshuffled_deck):
        """Test burned cards are tracked."""
        top = unshuffled_deck.burn()
        assert unshuffled_deck.burned_cards == [top]
        assert unshuffled_deck.dealt_cards == [top]
        assert unshuffled_deck.remaining == DECK_SIZE - 1

    def test_seeded_shuffle_is_reproducible(self):
        """Test the same seed gives the same order."""
        deck1 = Deck(rng=random.Random(42))
        deck2 = Deck(rng=random.Random(42))
        assert deck1.deal(DECK_SIZE) == deck2.deal(DECK_SIZE)

    def test_shuffle_changes_order(self, unshuffled_deck):
        """Test a shuffled deck differs from the fresh order."""
        shuffled = Deck(rng=random.Random(7))
        assert shuffled.deal(DECK_SIZE) != unshuffled_deck.deal(DECK_SIZE)

    def test_from_cards(self):
        """Test building a stacked deck."""
        cards = parse_cards("As Kd 2c")
        deck = Deck.from_cards(cards)
        assert deck.deal(3) == cards

    def test_from_cards_rejects_duplicates(self):
        """Test a stacked deck cannot repeat a card."""
        with pytest.raises(ValueError):
            Deck.from_cards(parse_cards("As As"))


class TestParseCards:
    """Tests for parse_cards."""

    def test_parse(self):
        cards = parse_cards("As Kh 10d")
        assert cards == [
            Card(Rank.ACE, Suit.SPADES),
            Card(Rank.KING, Suit.HEARTS),
            Card(Rank.TEN, Suit.DIAMONDS),
        ]

    def test_parse_empty(self):
        assert parse_cards("") == []
