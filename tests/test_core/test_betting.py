"""
Tests for the heads-up betting engine.
"""

import pytest
from pokerduel.core.betting import BettingEngine, RoundState
from pokerduel.core.card import parse_cards
from pokerduel.core.errors import ActionError, IllegalAction
from pokerduel.core.player import Player
from pokerduel.core.rules import Street, ActionType, HUMAN, COMPUTER


def chips(engine):
    return engine.state.chips_in_play


def action_types(engine, player_id):
    return {a["type"] for a in engine.legal_actions(player_id)}


class TestBlinds:
    """Tests for posting blinds."""

    def test_post_blinds(self, started_engine):
        """Test blinds of 10/20 from 1000/1000."""
        state = started_engine.state
        assert state.pot == 30
        assert state.current_bet == 20
        assert state.players[HUMAN].stack == 990
        assert state.players[COMPUTER].stack == 980
        assert started_engine.call_amount(HUMAN) == 10
        assert state.actor_to_move == HUMAN
        assert not state.street_closed

    def test_blinds_only_once(self, started_engine):
        result = started_engine.post_blinds(10, 20)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION
        assert started_engine.state.pot == 30

    def test_actions_before_blinds(self, engine):
        result = engine.check(HUMAN)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION

    def test_short_blind_rejected(self):
        """Test a stack below its blind is rejected unless allowed."""
        players = {
            HUMAN: Player(player_id=HUMAN, stack=5),
            COMPUTER: Player(player_id=COMPUTER, stack=1000),
        }
        engine = BettingEngine(RoundState(players=players))

        result = engine.post_blinds(10, 20)
        assert not result.success
        assert result.error == ActionError.INSUFFICIENT_CHIPS
        assert result.maximum == 5
        assert players[HUMAN].stack == 5
        assert engine.state.pot == 0

    def test_short_blind_allowed(self):
        """Test an all-in blind closes the street and returns the excess."""
        players = {
            HUMAN: Player(player_id=HUMAN, stack=5),
            COMPUTER: Player(player_id=COMPUTER, stack=1000),
        }
        engine = BettingEngine(RoundState(players=players))

        result = engine.post_blinds(10, 20, allow_short=True)
        assert result.success
        assert players[HUMAN].is_all_in
        # Nobody can bet: the big blind is cut back to the all-in amount
        assert engine.state.street_closed
        assert engine.needs_runout
        assert engine.state.pot == 10
        assert players[COMPUTER].stack == 995
        assert engine.state.uncalled_return == (COMPUTER, 15)


class TestPreflopRound:
    """Tests for the documented preflop example."""

    def test_call_then_check_closes_preflop(self, started_engine):
        result = started_engine.call(HUMAN)
        assert result.success
        assert result.amount == 10

        state = started_engine.state
        assert state.players[HUMAN].stack == 990 - 10
        assert state.players[COMPUTER].stack == 980
        assert state.pot == 40
        # Street does not close until the big blind acts
        assert not state.street_closed
        assert state.actor_to_move == COMPUTER

        assert started_engine.check(COMPUTER).success
        assert state.street_closed
        assert state.actor_to_move is None

        street = started_engine.advance_street(parse_cards("2c 7d 9h"))
        assert street == Street.FLOP
        assert len(state.community_cards) == 3
        assert state.current_bet == 0
        assert state.actor_to_move == HUMAN

    def test_stacks_after_call(self, started_engine):
        """Test the small blind call leaves both players with 980."""
        started_engine.call(HUMAN)
        stacks = {p.player_id: p.stack for p in started_engine.state.players.values()}
        assert stacks == {HUMAN: 980, COMPUTER: 980}
        assert started_engine.state.pot == 40


class TestCheckAndCall:
    """Tests for check/call legality."""

    def test_check_when_owing_is_illegal(self, started_engine):
        result = started_engine.check(HUMAN)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION
        assert started_engine.state.pot == 30
        assert started_engine.state.actor_to_move == HUMAN

    def test_call_with_nothing_owed_is_illegal(self, started_engine):
        started_engine.call(HUMAN)
        result = started_engine.call(COMPUTER)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION
        assert started_engine.state.pot == 40

    def test_out_of_turn(self, started_engine):
        result = started_engine.check(COMPUTER)
        assert not result.success
        assert result.error == ActionError.OUT_OF_TURN
        assert started_engine.state.actor_to_move == HUMAN

    def test_legal_actions_preflop(self, started_engine):
        assert action_types(started_engine, HUMAN) == {"FOLD", "CALL", "RAISE", "ALL_IN"}
        assert started_engine.legal_actions(COMPUTER) == []

    def test_legal_actions_facing_nothing(self, started_engine):
        started_engine.call(HUMAN)
        assert action_types(started_engine, COMPUTER) == {"FOLD", "CHECK", "RAISE", "ALL_IN"}


class TestBetAndRaise:
    """Tests for bet/raise sizing."""

    def test_raise_sets_min_raise(self, started_engine):
        result = started_engine.bet_or_raise(HUMAN, 50)
        assert result.success
        assert result.action_type == ActionType.RAISE

        state = started_engine.state
        assert state.current_bet == 60
        assert state.min_raise == 40
        assert state.last_aggressor == HUMAN
        assert state.pot == 80
        assert state.actor_to_move == COMPUTER

    def test_reraise_below_minimum(self, started_engine):
        started_engine.bet_or_raise(HUMAN, 50)
        # Computer owes 40; a raise must move at least max(40, 80)
        result = started_engine.bet_or_raise(COMPUTER, 60)
        assert not result.success
        assert result.error == ActionError.BELOW_MINIMUM
        assert result.minimum == 80
        assert started_engine.state.current_bet == 60

    def test_raise_below_minimum_preflop(self, started_engine):
        result = started_engine.bet_or_raise(HUMAN, 15)
        assert result.error == ActionError.BELOW_MINIMUM
        assert result.minimum == 20

    def test_bet_more_than_stack(self, started_engine):
        result = started_engine.bet_or_raise(HUMAN, 2000)
        assert not result.success
        assert result.error == ActionError.INSUFFICIENT_CHIPS
        assert result.maximum == 990
        assert started_engine.state.players[HUMAN].stack == 990

    def test_opening_bet_on_flop(self, started_engine):
        started_engine.call(HUMAN)
        started_engine.check(COMPUTER)
        started_engine.advance_street(parse_cards("2c 7d 9h"))

        small = started_engine.bet_or_raise(HUMAN, 10)
        assert small.error == ActionError.BELOW_MINIMUM
        assert small.minimum == 20

        result = started_engine.bet_or_raise(HUMAN, 20)
        assert result.success
        assert result.action_type == ActionType.BET
        assert started_engine.call_amount(COMPUTER) == 20

    def test_raise_reopens_action(self, started_engine):
        """Test the raiser must act again after a re-raise."""
        started_engine.call(HUMAN)
        assert started_engine.bet_or_raise(COMPUTER, 40).success
        assert started_engine.state.actor_to_move == HUMAN
        assert started_engine.call(HUMAN).success
        assert started_engine.state.street_closed

    def test_check_check_closes_flop(self, started_engine):
        started_engine.call(HUMAN)
        started_engine.check(COMPUTER)
        started_engine.advance_street(parse_cards("2c 7d 9h"))

        started_engine.check(HUMAN)
        assert not started_engine.state.street_closed
        started_engine.check(COMPUTER)
        assert started_engine.state.street_closed


class TestAllIn:
    """Tests for all-in play."""

    def short_stack_engine(self):
        """Human with 15 chips facing a bet of 20 on the flop."""
        players = {
            HUMAN: Player(player_id=HUMAN, stack=15),
            COMPUTER: Player(player_id=COMPUTER, stack=980, current_bet=20, total_bet=20, has_acted=True),
        }
        state = RoundState(
            players=players,
            street=Street.FLOP,
            pot=20,
            current_bet=20,
            actor_to_move=HUMAN,
            blinds_posted=True,
        )
        return BettingEngine(state)

    def test_short_stack_cannot_call(self):
        engine = self.short_stack_engine()
        result = engine.call(HUMAN)
        assert not result.success
        assert result.error == ActionError.INSUFFICIENT_CHIPS
        assert result.maximum == 15
        assert engine.state.players[HUMAN].stack == 15

    def test_short_stack_only_all_in(self):
        engine = self.short_stack_engine()
        assert action_types(engine, HUMAN) == {"FOLD", "ALL_IN"}

    def test_short_all_in_returns_uncalled(self):
        engine = self.short_stack_engine()
        before = chips(engine)

        result = engine.all_in(HUMAN)
        assert result.success
        assert result.amount == 15

        state = engine.state
        assert state.street_closed
        assert state.players[COMPUTER].stack == 985
        assert state.pot == 30
        assert state.uncalled_return == (COMPUTER, 5)
        assert chips(engine) == before

    def test_all_in_raise(self, started_engine):
        """Test an all-in above the current bet counts as a raise."""
        result = started_engine.all_in(HUMAN)
        assert result.success
        state = started_engine.state
        assert state.current_bet == 1000
        assert state.last_aggressor == HUMAN
        assert state.actor_to_move == COMPUTER

    def test_no_raise_against_all_in(self, started_engine):
        started_engine.all_in(HUMAN)
        result = started_engine.bet_or_raise(COMPUTER, 980)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION
        assert "RAISE" not in action_types(started_engine, COMPUTER)

    def test_all_in_call_runs_out(self, started_engine):
        started_engine.all_in(HUMAN)
        # 980 owed with 980 behind is an exact call
        assert started_engine.call(COMPUTER).success
        assert started_engine.state.street_closed
        assert started_engine.needs_runout

        started_engine.advance_street(parse_cards("2c 7d 9h"))
        # Nobody can act on the flop
        assert started_engine.state.street_closed
        assert started_engine.state.actor_to_move is None

    def test_uncalled_bet_after_short_call(self):
        """Test a bet larger than the other stack is cut back."""
        players = {
            HUMAN: Player(player_id=HUMAN, stack=1000),
            COMPUTER: Player(player_id=COMPUTER, stack=300),
        }
        engine = BettingEngine(RoundState(players=players))
        engine.post_blinds(10, 20)

        assert engine.bet_or_raise(HUMAN, 500).success
        assert engine.all_in(COMPUTER).success

        assert engine.state.street_closed
        assert players[HUMAN].stack == 700
        assert players[HUMAN].current_bet == 300
        assert engine.state.pot == 600
        assert engine.state.uncalled_return == (HUMAN, 210)


class TestFold:
    """Tests for folding."""

    def test_fold_ends_round(self, started_engine):
        result = started_engine.fold(HUMAN)
        assert result.success
        state = started_engine.state
        assert state.folded_player == HUMAN
        assert started_engine.is_round_over
        assert state.actor_to_move is None

    def test_no_action_after_fold(self, started_engine):
        started_engine.fold(HUMAN)
        result = started_engine.check(COMPUTER)
        assert not result.success
        assert result.error == ActionError.ILLEGAL_ACTION


class TestStreets:
    """Tests for street advancement."""

    def test_cannot_advance_open_street(self, started_engine):
        with pytest.raises(IllegalAction):
            started_engine.advance_street(parse_cards("2c 7d 9h"))

    def test_wrong_card_count(self, started_engine):
        started_engine.call(HUMAN)
        started_engine.check(COMPUTER)
        with pytest.raises(ValueError):
            started_engine.advance_street(parse_cards("2c 7d"))

    def test_full_round_to_showdown(self, started_engine):
        started_engine.call(HUMAN)
        started_engine.check(COMPUTER)
        boards = ["2c 7d 9h", "Js", "4d", ""]
        streets = []
        for board in boards:
            streets.append(started_engine.advance_street(parse_cards(board)))
            if streets[-1] != Street.SHOWDOWN:
                started_engine.check(HUMAN)
                started_engine.check(COMPUTER)

        assert streets == [Street.FLOP, Street.TURN, Street.RIVER, Street.SHOWDOWN]
        assert started_engine.is_round_over
        assert len(started_engine.state.community_cards) == 5


class TestChipConservation:
    """Tests that chips are never created or destroyed."""

    def test_conservation_through_a_round(self, started_engine):
        total = 2000
        steps = [
            lambda e: e.bet_or_raise(HUMAN, 50),
            lambda e: e.bet_or_raise(COMPUTER, 120),
            lambda e: e.call(HUMAN),
            lambda e: e.advance_street(parse_cards("2c 7d 9h")),
            lambda e: e.bet_or_raise(HUMAN, 100),
            lambda e: e.all_in(COMPUTER),
            lambda e: e.call(HUMAN),
        ]
        assert chips(started_engine) == total
        for step in steps:
            step(started_engine)
            assert chips(started_engine) == total

        assert started_engine.needs_runout

    def test_rejections_change_nothing(self, started_engine):
        before = started_engine.snapshot(HUMAN)
        started_engine.check(HUMAN)
        started_engine.bet_or_raise(HUMAN, 5)
        started_engine.bet_or_raise(HUMAN, 5000)
        started_engine.call(COMPUTER)
        assert started_engine.snapshot(HUMAN) == before
