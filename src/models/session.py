"""
Round session data models
"""

import time
from dataclasses import dataclass, field

from .enums import Choice, CurrencyMode, GameResult, Leg


@dataclass
class Session:
    """
    Server session for one round

    Created when the Init leg succeeds and discarded on reset.

    Attributes:
        session_id: Server-issued session identifier
        currency_mode: Wallet the round is played with
        bet_tiers: Bet amounts the server accepts for this session
        bet_amount: Confirmed wager (None until the Bet leg succeeds)
    """

    session_id: str
    currency_mode: CurrencyMode = CurrencyMode.COINS
    bet_tiers: list[int] = field(default_factory=list)
    bet_amount: int | None = None

    @property
    def has_bet(self) -> bool:
        return self.bet_amount is not None

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "currency_mode": self.currency_mode.value,
            "bet_tiers": list(self.bet_tiers),
            "bet_amount": self.bet_amount,
        }


@dataclass(frozen=True)
class PendingRequest:
    """The single leg in flight, tagged with the generation it belongs to"""

    leg: Leg
    generation: int
    started_at: float = field(default_factory=time.monotonic)

    @property
    def age_seconds(self) -> float:
        return time.monotonic() - self.started_at


@dataclass
class RoundSummary:
    """
    Final hands and outcome of a completed round

    Attributes:
        player_hand: Player hand left after the discard
        bot_hand: Bot hand left after the discard
        player_discard: Hand the player removed
        bot_discard: Hand the bot removed
        result: Outcome from the player's point of view
        payout: Server payout (None when the outcome was computed offline)
        authoritative: True when the server decided the outcome
    """

    player_hand: Choice
    bot_hand: Choice
    player_discard: Choice
    bot_discard: Choice
    result: GameResult
    payout: int | None = None
    authoritative: bool = False

    def to_dict(self) -> dict:
        return {
            "player_hand": self.player_hand.value,
            "bot_hand": self.bot_hand.value,
            "player_discard": self.player_discard.value,
            "bot_discard": self.bot_discard.value,
            "result": self.result.value,
            "payout": self.payout,
            "authoritative": self.authoritative,
        }
