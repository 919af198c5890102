"""
Tests for wire payloads and hand parsing
"""

import importlib.util
import warnings
from pathlib import Path

import pytest
from pydantic import ValidationError
from pydantic.warnings import PydanticDeprecatedSince20

from models import Choice, CurrencyMode, parse_hand, payloads
from models.payloads import (
    BetRequest,
    HandData,
    InitResponse,
    RemoveHandData,
    RemoveHandRequest,
    TokenResponse,
)


class TestParseHand:
    """Lenient parsing of server hands"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("rock", Choice.ROCK),
            ("ROCK", Choice.ROCK),
            ("  Paper ", Choice.PAPER),
            ("scissors", Choice.SCISSORS),
            ("stone", Choice.ROCK),
            ("r", Choice.ROCK),
            ("p", Choice.PAPER),
            ("s", Choice.SCISSORS),
            ("Scissor", Choice.SCISSORS),
        ],
    )
    def test_known_values(self, raw, expected):
        assert parse_hand(raw) is expected

    @pytest.mark.parametrize("raw", ["lizard", "", None, "   "])
    def test_unparseable_defaults_to_rock(self, raw, caplog):
        with caplog.at_level("WARNING"):
            assert parse_hand(raw) is Choice.ROCK
        assert caplog.records


class TestResponses:
    """Response envelope validation"""

    def test_init_response(self):
        envelope = InitResponse.model_validate(
            {"success": True, "data": {"sessionId": "abc", "betsValues": [5, 1, 5], "mode": "coins"}}
        )

        assert envelope.data.betsValues == [1, 5]
        assert envelope.data.mode is CurrencyMode.COINS

    def test_init_rejects_empty_session(self):
        with pytest.raises(ValidationError):
            InitResponse.model_validate({"success": True, "data": {"sessionId": ""}})

    def test_init_rejects_non_positive_tiers(self):
        with pytest.raises(ValidationError):
            InitResponse.model_validate(
                {"success": True, "data": {"sessionId": "abc", "betsValues": [0, 5]}}
            )

    def test_extra_fields_allowed(self):
        envelope = InitResponse.model_validate(
            {"success": True, "data": {"sessionId": "abc", "balance": 12}, "requestId": "x"}
        )
        assert envelope.data.sessionId == "abc"

    def test_hand_data_alias(self):
        assert HandData.model_validate({"opponentHand": "P"}).opponent_hand is Choice.PAPER

    def test_remove_hand_whole_float_payout(self):
        data = RemoveHandData.model_validate({"pcHandToRemove": "rock", "winAmount": 10.0})
        assert data.winAmount == 10

    def test_remove_hand_fractional_payout_rejected(self):
        with pytest.raises(ValidationError):
            RemoveHandData.model_validate({"pcHandToRemove": "rock", "winAmount": 2.5})

    def test_token_response(self):
        envelope = TokenResponse.model_validate(
            {"success": True, "data": {"ACCESS_TOKEN": "a", "REFRESH_TOKEN": "b"}}
        )
        assert envelope.data.ACCESS_TOKEN == "a"


class TestRequests:
    def test_bet_request_game_id_is_string(self):
        body = BetRequest(betAmount=5, sessionId="s", gameId="1104").model_dump()
        assert body == {"betAmount": 5, "sessionId": "s", "gameId": "1104"}

    def test_remove_hand_request(self):
        body = RemoveHandRequest(
            playerHands=["rock", "paper"], playerHandToRemove="rock", sessionId="s", gameId=1104
        ).model_dump()
        assert body["playerHandToRemove"] == "rock"
        assert body["playerHands"] == ["rock", "paper"]


class TestModelConfig:
    def test_models_define_without_deprecation_warnings(self):
        """Payload classes use model_config rather than a nested Config class"""
        path = Path(payloads.__file__)
        spec = importlib.util.spec_from_file_location("models._payloads_fresh", path)
        module = importlib.util.module_from_spec(spec)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            spec.loader.exec_module(module)

        assert not [w for w in caught if issubclass(w.category, PydanticDeprecatedSince20)]
        assert module.InitData.model_config["extra"] == "allow"
