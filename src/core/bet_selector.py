"""
Bet tier and currency selection
"""

import logging
from collections.abc import Iterable

from models import CurrencyMode
from services.notifier import Events, ResultNotifier

logger = logging.getLogger(__name__)


class BetTierSelector:
    """
    Owns the selected wager amount and currency mode.

    Tiers come from the server on init. The wager gate only reads from
    this object; the player (or CLI) drives it.
    """

    def __init__(
        self,
        notifier: ResultNotifier,
        tiers: Iterable[int] = (),
        currency_mode: CurrencyMode = CurrencyMode.COINS,
    ):
        self._notifier = notifier
        self._tiers: list[int] = sorted(set(tiers))
        self._amount: int | None = self._tiers[0] if self._tiers else None
        self._currency_mode = CurrencyMode(currency_mode)

    @property
    def tiers(self) -> list[int]:
        return list(self._tiers)

    @property
    def amount(self) -> int | None:
        return self._amount

    @property
    def currency_mode(self) -> CurrencyMode:
        return self._currency_mode

    def set_tiers(self, tiers: Iterable[int]):
        """Replace the offered tiers, keeping the selection when still offered"""
        self._tiers = sorted(set(tiers))
        if self._amount in self._tiers:
            logger.debug(f"Bet tiers updated to {self._tiers}, keeping {self._amount}")
            return
        self._change_amount(self._tiers[0] if self._tiers else None)

    def select(self, amount: int) -> bool:
        """Select an offered amount. Returns False when it is not offered."""
        if self._tiers and amount not in self._tiers:
            logger.debug(f"Bet amount {amount} not in tiers {self._tiers}")
            return False
        self._change_amount(amount)
        return True

    def step(self, direction: int) -> int | None:
        """Move to the next (direction > 0) or previous tier, clamped at the ends"""
        if not self._tiers:
            return self._amount
        if self._amount not in self._tiers:
            index = 0
        else:
            index = self._tiers.index(self._amount) + (1 if direction > 0 else -1)
            index = max(0, min(index, len(self._tiers) - 1))
        self._change_amount(self._tiers[index])
        return self._amount

    def set_currency(self, mode: CurrencyMode):
        mode = CurrencyMode(mode)
        if mode is self._currency_mode:
            return
        old = self._currency_mode
        self._currency_mode = mode
        logger.info(f"Currency {old.value} -> {mode.value}")
        self._notifier.publish(
            Events.CURRENCY_CHANGED, {"old": old.value, "new": mode.value}
        )

    def _change_amount(self, amount: int | None):
        if amount == self._amount:
            return
        old = self._amount
        self._amount = amount
        logger.debug(f"Bet amount {old} -> {amount}")
        self._notifier.publish(
            Events.BET_TIER_CHANGED, {"old": old, "new": amount, "tiers": list(self._tiers)}
        )
