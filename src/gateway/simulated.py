"""
SimulatedGateway - in-process practice backend.

No network. Keeps a wallet per currency and plays the bot side with a
seeded random source, so whole rounds can be exercised offline.
"""

import asyncio
import logging
import random
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from core.outcome import draw_bot_discard, draw_bot_hands, resolve
from models import Choice, CurrencyMode, GameResult
from models.payloads import BetData, HandData, InitData, RemoveHandData

from .base import ErrorKind, GatewayResult, NetworkGateway

logger = logging.getLogger(__name__)


@dataclass
class _SimSession:
    mode: CurrencyMode
    bet: int | None = None
    player_hands: list[Choice] = field(default_factory=list)
    bot_hands: list[Choice] = field(default_factory=list)


class SimulatedGateway(NetworkGateway):
    """
    Practice backend with a local wallet.

    Payout table: win pays win_multiplier x bet, draw refunds the bet,
    loss pays nothing.
    """

    def __init__(
        self,
        bet_tiers: Sequence[int] = (1, 5, 10),
        starting_balance: int = 1000,
        win_multiplier: int = 2,
        rng: random.Random | None = None,
        latency: float = 0.0,
    ):
        """
        Initialize SimulatedGateway.

        Args:
            bet_tiers: Amounts offered on init
            starting_balance: Initial balance of every currency wallet
            win_multiplier: Payout multiple of the bet on a win
            rng: Random source for bot hands (seed it for reproducible rounds)
            latency: Artificial delay per call in seconds
        """
        self.bet_tiers = sorted(set(bet_tiers))
        self.win_multiplier = win_multiplier
        self.rng = rng or random.Random()
        self.latency = latency
        self.balances: dict[CurrencyMode, int] = {mode: starting_balance for mode in CurrencyMode}
        self._sessions: dict[str, _SimSession] = {}

    def get_mode_name(self) -> str:
        return "simulated"

    def balance(self, mode: CurrencyMode = CurrencyMode.COINS) -> int:
        return self.balances[mode]

    @property
    def open_sessions(self) -> int:
        return len(self._sessions)

    async def _pause(self):
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def _lookup(self, session_id: str) -> _SimSession | None:
        return self._sessions.get(session_id)

    async def init(self, mode: CurrencyMode):
        await self._pause()
        mode = CurrencyMode(mode)
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = _SimSession(mode=mode)
        logger.debug(f"Simulated session {session_id} opened ({mode.value})")
        return GatewayResult.success(
            InitData(sessionId=session_id, betsValues=list(self.bet_tiers), mode=mode)
        )

    async def place_bet(self, session_id: str, amount: int):
        await self._pause()
        sim = self._lookup(session_id)
        if sim is None:
            return GatewayResult.failure(ErrorKind.REFUSED, "Unknown session")
        if sim.bet is not None:
            return GatewayResult.failure(ErrorKind.REFUSED, "Bet already placed")
        if amount not in self.bet_tiers:
            return GatewayResult.failure(ErrorKind.REFUSED, f"Bet {amount} is not an offered tier")
        if self.balances[sim.mode] < amount:
            return GatewayResult.failure(ErrorKind.REFUSED, f"Not enough {sim.mode.value}")

        self.balances[sim.mode] -= amount
        sim.bet = amount
        logger.debug(f"Simulated bet {amount} accepted, balance {self.balances[sim.mode]}")
        return GatewayResult.success(BetData(amount=amount))

    async def _reveal(self, session_id: str, hand: Choice, expected_index: int):
        await self._pause()
        sim = self._lookup(session_id)
        if sim is None or sim.bet is None:
            return GatewayResult.failure(ErrorKind.REFUSED, "No active bet")
        if len(sim.player_hands) != expected_index or hand in sim.player_hands:
            return GatewayResult.failure(ErrorKind.REFUSED, "Hand out of sequence")

        sim.player_hands.append(hand)
        (bot_hand,) = draw_bot_hands(sim.bot_hands, len(sim.bot_hands) + 1, self.rng)
        sim.bot_hands.append(bot_hand)
        return GatewayResult.success(HandData(pcHand=bot_hand.value))

    async def submit_first_hand(self, session_id: str, hand: Choice):
        return await self._reveal(session_id, hand, 0)

    async def submit_second_hand(self, session_id: str, hand: Choice):
        return await self._reveal(session_id, hand, 1)

    async def remove_hand(self, session_id: str, player_hands: Sequence[Choice], discarded: Choice):
        await self._pause()
        sim = self._lookup(session_id)
        if sim is None or len(sim.bot_hands) != 2:
            return GatewayResult.failure(ErrorKind.REFUSED, "Round not ready for removal")
        if discarded not in sim.player_hands:
            return GatewayResult.failure(ErrorKind.REFUSED, "Discarded hand was not picked")

        player_final = next(h for h in sim.player_hands if h is not discarded)
        bot_discard = draw_bot_discard(sim.bot_hands, self.rng)
        bot_final = next(h for h in sim.bot_hands if h is not bot_discard)

        result = resolve(player_final, bot_final)
        if result is GameResult.WIN:
            payout = sim.bet * self.win_multiplier
        elif result is GameResult.DRAW:
            payout = sim.bet
        else:
            payout = 0

        self.balances[sim.mode] += payout
        # Settled sessions are forgotten
        del self._sessions[session_id]
        logger.debug(
            f"Simulated round {player_final.value} vs {bot_final.value}: "
            f"{result.value}, payout {payout}"
        )
        return GatewayResult.success(
            RemoveHandData(pcHandToRemove=bot_discard.value, winAmount=payout)
        )
