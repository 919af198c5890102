"""
Tests for validation functions
"""

import pytest

from core import GameError, ValidationError, can_select, require_move, validate_bet_amount
from models import Choice, GamePhase


class TestCanSelect:
    """Tests for can_select predicate"""

    def test_first_pick_allowed(self):
        assert can_select(GamePhase.SELECTING_HANDS, Choice.ROCK, []) is True

    def test_second_distinct_pick_allowed(self):
        assert can_select(GamePhase.SELECTING_HANDS, Choice.PAPER, [Choice.ROCK]) is True

    def test_duplicate_pick_rejected(self):
        assert can_select(GamePhase.SELECTING_HANDS, Choice.ROCK, [Choice.ROCK]) is False

    def test_third_pick_rejected(self):
        """A full selection rejects every hand, even an unpicked one"""
        player_set = [Choice.ROCK, Choice.PAPER]
        assert can_select(GamePhase.SELECTING_HANDS, Choice.SCISSORS, player_set) is False

    def test_discard_must_be_picked(self):
        player_set = [Choice.ROCK, Choice.PAPER]
        phase = GamePhase.SELECTING_HAND_TO_REMOVE

        assert can_select(phase, Choice.PAPER, player_set) is True
        assert can_select(phase, Choice.SCISSORS, player_set) is False

    @pytest.mark.parametrize(
        "phase",
        [
            GamePhase.AWAITING_WAGER,
            GamePhase.AWAITING_FIRST_REVEAL,
            GamePhase.AWAITING_SECOND_REVEAL,
            GamePhase.AWAITING_OUTCOME,
            GamePhase.ROUND_COMPLETE,
        ],
    )
    def test_non_input_phases_reject(self, phase):
        assert can_select(phase, Choice.ROCK, []) is False
        assert can_select(phase, Choice.ROCK, [Choice.ROCK]) is False

    def test_does_not_mutate_player_set(self):
        player_set = [Choice.ROCK]
        can_select(GamePhase.SELECTING_HANDS, Choice.PAPER, player_set)
        assert player_set == [Choice.ROCK]


class TestRequireMove:
    """Tests for the raising variant used by the state machine"""

    def test_legal_pick_passes(self):
        require_move(
            GamePhase.SELECTING_HANDS, GamePhase.SELECTING_HANDS, Choice.PAPER, [Choice.ROCK]
        )

    def test_wrong_phase(self):
        with pytest.raises(ValidationError, match="not accepted in awaiting_wager"):
            require_move(GamePhase.AWAITING_WAGER, GamePhase.SELECTING_HANDS, Choice.ROCK, [])

    def test_duplicate_pick(self):
        with pytest.raises(ValidationError, match=r"not allowed with picks \(rock\)"):
            require_move(
                GamePhase.SELECTING_HANDS, GamePhase.SELECTING_HANDS, Choice.ROCK, [Choice.ROCK]
            )

    def test_discard_not_picked(self):
        phase = GamePhase.SELECTING_HAND_TO_REMOVE
        with pytest.raises(ValidationError):
            require_move(phase, phase, Choice.SCISSORS, [Choice.ROCK, Choice.PAPER])

    def test_is_a_game_error(self):
        assert issubclass(ValidationError, GameError)


class TestValidateBetAmount:
    """Tests for validate_bet_amount function"""

    def test_valid_tier(self):
        is_valid, error = validate_bet_amount(5, [1, 5, 10])

        assert is_valid is True
        assert error is None

    def test_any_positive_amount_without_tiers(self):
        assert validate_bet_amount(7) == (True, None)

    def test_amount_not_in_tiers(self):
        is_valid, error = validate_bet_amount(3, [1, 5, 10])

        assert is_valid is False
        assert "not one of the offered tiers" in error

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive(self, amount):
        is_valid, error = validate_bet_amount(amount, [1, 5])

        assert is_valid is False
        assert "must be positive" in error

    @pytest.mark.parametrize("amount", [None, 2.5, "5", True])
    def test_non_integer(self, amount):
        is_valid, error = validate_bet_amount(amount, [1, 5])

        assert is_valid is False
        assert "whole number" in error
