"""
Outcome resolution and local fallback draws

The remote authority decides the round whenever it answers. Everything
here is pure apart from the injected random source, which is only used
when a leg fails and the round has to be completed locally.
"""

import logging
import random
from collections.abc import Collection, Sequence

from models import BEATS, Choice, GameResult

logger = logging.getLogger(__name__)


def resolve(player: Choice, bot: Choice) -> GameResult:
    """Winner table from the player's point of view"""
    if player is bot:
        return GameResult.DRAW
    if BEATS[player] is bot:
        return GameResult.WIN
    return GameResult.LOSE


def resolve_from_payout(payout: int, bet: int) -> GameResult:
    """
    Derive the result from an authoritative payout

    payout == bet is a refund (DRAW), anything above the stake is a WIN.
    A partial refund below the stake still counts as a loss.
    """
    if payout > bet:
        return GameResult.WIN
    if payout == bet and payout > 0:
        return GameResult.DRAW
    return GameResult.LOSE


def draw_bot_hands(
    existing: Collection[Choice], target_size: int, rng: random.Random
) -> list[Choice]:
    """
    Draw new bot hands without replacement until the set reaches target_size

    Returns only the newly drawn hands, in draw order.
    """
    remaining = [c for c in Choice if c not in existing]
    needed = target_size - len(existing)
    if needed <= 0:
        return []
    if needed > len(remaining):
        raise ValueError(f"Cannot grow bot hand set from {len(existing)} to {target_size}")

    drawn = rng.sample(remaining, needed)
    logger.debug(f"Fallback bot draw: {[c.value for c in drawn]}")
    return drawn


def draw_bot_discard(bot_hands: Sequence[Choice], rng: random.Random) -> Choice:
    """Uniform pick of the hand the bot removes"""
    if not bot_hands:
        raise ValueError("Bot has no hands to discard")
    discard = rng.choice(list(bot_hands))
    logger.debug(f"Fallback bot discard: {discard.value}")
    return discard
