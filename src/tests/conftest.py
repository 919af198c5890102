"""
Shared test fixtures for pytest
"""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from core import BetTierSelector, GameStateMachine
from gateway.base import ErrorKind, GatewayResult, NetworkGateway
from models import Choice, CurrencyMode
from models.payloads import BetData, HandData, InitData, RemoveHandData
from services.notifier import Events, ResultNotifier


class EventRecorder:
    """Subscribes to every event kind and keeps envelopes in order"""

    def __init__(self, notifier: ResultNotifier):
        self.events = []
        for event in Events:
            notifier.subscribe(event, self, weak=False)

    def __call__(self, envelope):
        self.events.append(envelope)

    @property
    def names(self) -> list[str]:
        return [e["name"] for e in self.events]

    def of(self, event: Events) -> list:
        return [e["data"] for e in self.events if e["name"] == event.value]

    def clear(self):
        self.events.clear()


def ok(data):
    return GatewayResult.success(data)


def failed(kind=ErrorKind.TRANSPORT, error="connection reset"):
    return GatewayResult.failure(kind, error)


@pytest.fixture
def notifier():
    """Fresh per-test notifier"""
    return ResultNotifier(name="test")


@pytest.fixture
def recorder(notifier):
    return EventRecorder(notifier)


@pytest.fixture
def gateway():
    """
    Gateway mock scripted for the happy path:
    tiers [1, 5, 10], bot reveals scissors then rock,
    bot discards rock and pays 10.
    """
    gw = MagicMock(spec=NetworkGateway)
    gw.init = AsyncMock(return_value=ok(InitData(sessionId="sess-1", betsValues=[1, 5, 10])))
    gw.place_bet = AsyncMock(return_value=ok(BetData(amount=5)))
    gw.submit_first_hand = AsyncMock(return_value=ok(HandData(pcHand="scissors")))
    gw.submit_second_hand = AsyncMock(return_value=ok(HandData(pcHand="rock")))
    gw.remove_hand = AsyncMock(
        return_value=ok(RemoveHandData(pcHandToRemove="rock", winAmount=10))
    )
    gw.close = AsyncMock()
    gw.get_mode_name.return_value = "scripted"
    return gw


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def selector(notifier):
    return BetTierSelector(notifier, currency_mode=CurrencyMode.COINS)


@pytest.fixture
def machine(gateway, notifier, selector, rng):
    """State machine with no reveal pacing"""
    return GameStateMachine(
        gateway=gateway,
        notifier=notifier,
        selector=selector,
        rng=rng,
        reveal_delay=0,
    )


@pytest.fixture
def picks():
    return [Choice.ROCK, Choice.PAPER]
