"""
Tests for enums and session dataclasses
"""

from models import (
    Choice,
    GamePhase,
    GameResult,
    Leg,
    PendingRequest,
    RoundSummary,
    Session,
)


class TestChoice:
    def test_beats(self):
        assert Choice.ROCK.beats(Choice.SCISSORS)
        assert Choice.PAPER.beats(Choice.ROCK)
        assert Choice.SCISSORS.beats(Choice.PAPER)
        assert not Choice.ROCK.beats(Choice.PAPER)
        assert not Choice.ROCK.beats(Choice.ROCK)

    def test_wire_value(self):
        assert Choice("paper") is Choice.PAPER
        assert Choice.SCISSORS.value == "scissors"


class TestGamePhase:
    def test_input_phases(self):
        inputs = [p for p in GamePhase if GamePhase.accepts_player_input(p)]
        assert inputs == [
            GamePhase.AWAITING_WAGER,
            GamePhase.SELECTING_HANDS,
            GamePhase.SELECTING_HAND_TO_REMOVE,
        ]


class TestSession:
    def test_has_bet(self):
        session = Session(session_id="s")
        assert not session.has_bet

        session.bet_amount = 5
        assert session.has_bet
        assert session.to_dict()["bet_amount"] == 5

    def test_pending_request_age(self):
        request = PendingRequest(leg=Leg.BET, generation=0)
        assert request.age_seconds >= 0

    def test_round_summary_to_dict(self):
        summary = RoundSummary(
            player_hand=Choice.ROCK,
            bot_hand=Choice.SCISSORS,
            player_discard=Choice.PAPER,
            bot_discard=Choice.ROCK,
            result=GameResult.WIN,
            payout=10,
            authoritative=True,
        )
        assert summary.to_dict() == {
            "player_hand": "rock",
            "bot_hand": "scissors",
            "player_discard": "paper",
            "bot_discard": "rock",
            "result": "win",
            "payout": 10,
            "authoritative": True,
        }
