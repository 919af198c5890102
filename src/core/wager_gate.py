"""
Wager placement

One bet in flight per session. Funding and connectivity errors are the
only leg failures that reach the player.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from gateway.base import ErrorKind, NetworkGateway
from models import Leg, Session
from services.notifier import Events, ResultNotifier

from .legs import LegTracker
from .validators import validate_bet_amount

logger = logging.getLogger(__name__)


class WagerFailure(str, Enum):
    """Why a bet was not placed"""

    ALREADY_PENDING = "already_pending"
    NOT_ACCEPTING = "not_accepting"
    INVALID_AMOUNT = "invalid_amount"
    NETWORK = "network"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNAUTHORIZED = "unauthorized"
    CANCELLED = "cancelled"


# Rejections that are dropped quietly instead of surfaced
SILENT_FAILURES = frozenset(
    [WagerFailure.ALREADY_PENDING, WagerFailure.NOT_ACCEPTING, WagerFailure.CANCELLED]
)


@dataclass
class WagerOutcome:
    accepted: bool
    amount: int | None = None
    reason: WagerFailure | None = None
    error: str | None = None

    @classmethod
    def rejected(
        cls, reason: WagerFailure, error: str, amount: int | None = None
    ) -> "WagerOutcome":
        return cls(accepted=False, amount=amount, reason=reason, error=error)

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "amount": self.amount,
            "reason": self.reason.value if self.reason else None,
            "error": self.error,
        }


def _failure_for(kind: ErrorKind | None) -> WagerFailure:
    if kind is ErrorKind.REFUSED:
        return WagerFailure.INSUFFICIENT_FUNDS
    if kind is ErrorKind.UNAUTHORIZED:
        return WagerFailure.UNAUTHORIZED
    return WagerFailure.NETWORK


class WagerGate:
    """
    Places the bet leg for a session.

    Responsibilities:
    - Reject double submission while any leg is pending
    - Validate the amount against the session's tiers
    - Attach the confirmed amount to the session
    - Publish WAGER_FAILED on refusal
    - Publish BALANCE_CHANGED once the caller has committed the bet (confirm)
    """

    def __init__(self, gateway: NetworkGateway, legs: LegTracker, notifier: ResultNotifier):
        self._gateway = gateway
        self._legs = legs
        self._notifier = notifier

    async def place_bet(self, session: Session, amount: int | None) -> WagerOutcome:
        """
        Stake amount on the session.

        Raises:
            StaleResponseError: the round was reset while the bet was in flight
        """
        if self._legs.is_busy():
            pending = self._legs.pending
            logger.debug(f"Bet rejected, {pending.leg.value} still pending")
            return WagerOutcome.rejected(
                WagerFailure.ALREADY_PENDING, "A request is already in flight", amount
            )

        if session.has_bet:
            return WagerOutcome.rejected(
                WagerFailure.NOT_ACCEPTING, "Session already has a bet", amount
            )

        is_valid, error = validate_bet_amount(amount, session.bet_tiers)
        if not is_valid:
            return self.fail(WagerFailure.INVALID_AMOUNT, error, amount)

        request = self._legs.begin(Leg.BET)
        try:
            result = await self._gateway.place_bet(session.session_id, amount)
        finally:
            self._legs.finish(request)

        if not result.ok:
            return self.fail(_failure_for(result.error_kind), result.error, amount)

        session.bet_amount = amount
        logger.info(f"Bet of {amount} {session.currency_mode.value} accepted")
        return WagerOutcome(accepted=True, amount=amount)

    def confirm(self, session: Session, outcome: WagerOutcome):
        """Announce the stake leaving the wallet. Call after the round has moved on."""
        self._notifier.publish(
            Events.BALANCE_CHANGED,
            {
                "delta": -outcome.amount,
                "currency": session.currency_mode.value,
                "session_id": session.session_id,
                "reason": "bet",
            },
        )

    def fail(self, reason: WagerFailure, error: str | None, amount: int | None = None) -> WagerOutcome:
        """Build a rejection and surface it unless it is a silent one"""
        outcome = WagerOutcome.rejected(reason, error or reason.value, amount)
        if reason in SILENT_FAILURES:
            logger.debug(f"Bet rejected quietly: {outcome.error}")
            return outcome

        logger.warning(f"Bet failed ({reason.value}): {outcome.error}")
        self._notifier.publish(Events.WAGER_FAILED, outcome.to_dict())
        return outcome
