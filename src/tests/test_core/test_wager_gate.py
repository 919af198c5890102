"""
Tests for WagerGate
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from core import LegTracker, StaleResponseError, WagerFailure, WagerGate
from gateway.base import ErrorKind, GatewayResult
from models import CurrencyMode, Leg, Session
from models.payloads import BetData
from services.notifier import Events


@pytest.fixture
def legs():
    return LegTracker()


@pytest.fixture
def gate(gateway, legs, notifier):
    return WagerGate(gateway, legs, notifier)


@pytest.fixture
def session():
    return Session(session_id="sess-1", currency_mode=CurrencyMode.COINS, bet_tiers=[1, 5, 10])


class TestWagerGateSuccess:
    """Tests for accepted bets"""

    @pytest.mark.asyncio
    async def test_accepted_bet_attaches_amount(self, gate, gateway, session, recorder, legs):
        outcome = await gate.place_bet(session, 5)

        assert outcome.accepted is True
        assert outcome.amount == 5
        assert session.bet_amount == 5
        assert legs.pending is None
        gateway.place_bet.assert_awaited_once_with("sess-1", 5)
        assert recorder.of(Events.BALANCE_CHANGED) == []

    @pytest.mark.asyncio
    async def test_confirm_publishes_stake(self, gate, session, recorder):
        """The wallet debit is announced only when the caller confirms"""
        outcome = await gate.place_bet(session, 5)
        gate.confirm(session, outcome)

        assert recorder.of(Events.BALANCE_CHANGED) == [
            {"delta": -5, "currency": "coins", "session_id": "sess-1", "reason": "bet"}
        ]


class TestWagerGateFailures:
    """Tests for refused and failed bets"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,reason",
        [
            (ErrorKind.REFUSED, WagerFailure.INSUFFICIENT_FUNDS),
            (ErrorKind.UNAUTHORIZED, WagerFailure.UNAUTHORIZED),
            (ErrorKind.TRANSPORT, WagerFailure.NETWORK),
            (ErrorKind.TIMEOUT, WagerFailure.NETWORK),
            (ErrorKind.HTTP_STATUS, WagerFailure.NETWORK),
            (ErrorKind.MALFORMED, WagerFailure.NETWORK),
        ],
    )
    async def test_gateway_failure_surfaces(self, gate, gateway, session, recorder, kind, reason):
        gateway.place_bet.return_value = GatewayResult.failure(kind, "no more coins")

        outcome = await gate.place_bet(session, 5)

        assert outcome.accepted is False
        assert outcome.reason is reason
        assert session.bet_amount is None
        assert recorder.of(Events.BALANCE_CHANGED) == []
        assert recorder.of(Events.WAGER_FAILED) == [
            {"accepted": False, "amount": 5, "reason": reason.value, "error": "no more coins"}
        ]

    @pytest.mark.asyncio
    async def test_invalid_amount_never_reaches_gateway(self, gate, gateway, session, recorder):
        outcome = await gate.place_bet(session, 3)

        assert outcome.reason is WagerFailure.INVALID_AMOUNT
        gateway.place_bet.assert_not_awaited()
        assert len(recorder.of(Events.WAGER_FAILED)) == 1

    @pytest.mark.asyncio
    async def test_double_submit_rejected_without_event(
        self, gate, gateway, session, recorder, legs
    ):
        legs.begin(Leg.BET)

        outcome = await gate.place_bet(session, 5)

        assert outcome.reason is WagerFailure.ALREADY_PENDING
        gateway.place_bet.assert_not_awaited()
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_concurrent_second_bet_rejected(self, gate, gateway, session, recorder):
        release = asyncio.Event()

        async def slow_bet(session_id, amount):
            await release.wait()
            return GatewayResult.success(BetData(amount=amount))

        gateway.place_bet = AsyncMock(side_effect=slow_bet)

        first = asyncio.create_task(gate.place_bet(session, 5))
        await asyncio.sleep(0)
        second = await gate.place_bet(session, 5)
        release.set()
        first_outcome = await first

        assert second.reason is WagerFailure.ALREADY_PENDING
        assert first_outcome.accepted is True
        assert gateway.place_bet.await_count == 1

    @pytest.mark.asyncio
    async def test_stale_completion_discarded(self, gate, gateway, session, recorder, legs):
        release = asyncio.Event()

        async def slow_bet(session_id, amount):
            await release.wait()
            return GatewayResult.success(BetData(amount=amount))

        gateway.place_bet = AsyncMock(side_effect=slow_bet)

        task = asyncio.create_task(gate.place_bet(session, 5))
        await asyncio.sleep(0)
        legs.cancel_all()
        release.set()

        with pytest.raises(StaleResponseError):
            await task

        assert session.bet_amount is None
        assert recorder.events == []
