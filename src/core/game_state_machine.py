"""
Game State Machine - one round of Rock-Paper-Scissors-Minus-One

State Machine:
    AWAITING_WAGER → SELECTING_HANDS → AWAITING_FIRST_REVEAL
        → AWAITING_SECOND_REVEAL → SELECTING_HAND_TO_REMOVE
        → AWAITING_OUTCOME → ROUND_COMPLETE
    reset() returns to AWAITING_WAGER from any state.

States:
- AWAITING_WAGER: waiting for place_bet()
- SELECTING_HANDS: player picks two distinct hands
- AWAITING_FIRST_REVEAL: first-hand leg in flight
- AWAITING_SECOND_REVEAL: second-hand leg in flight
- SELECTING_HAND_TO_REMOVE: player discards one of the picked hands
- AWAITING_OUTCOME: remove-hand leg in flight
- ROUND_COMPLETE: result published, waiting for reset()

Game legs that fail remotely are completed with a local draw so the
round always finishes. Only the wager can fail visibly.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from gateway.base import GatewayResult, NetworkGateway
from models import Choice, CurrencyMode, GamePhase, GameResult, Leg, RoundSummary, Session, Side
from services.notifier import Events, ResultNotifier

from .bet_selector import BetTierSelector
from .errors import StaleResponseError, ValidationError
from .legs import LegTracker
from .outcome import draw_bot_discard, draw_bot_hands, resolve, resolve_from_payout
from .validators import require_move
from .wager_gate import WagerFailure, WagerGate, WagerOutcome

logger = logging.getLogger(__name__)


class GameStateMachine:
    """
    Orchestrates the five legs of a round.

    Usage:
        notifier = ResultNotifier()
        machine = GameStateMachine(gateway, notifier)
        notifier.subscribe(Events.ROUND_RESULT_READY, on_result, weak=False)

        await machine.place_bet(5)
        await machine.select_choice(Choice.ROCK)
        await machine.select_choice(Choice.PAPER)   # runs both reveal legs
        await machine.remove_choice(Choice.PAPER)   # runs the outcome leg
        machine.reset()
    """

    def __init__(
        self,
        gateway: NetworkGateway,
        notifier: ResultNotifier,
        selector: BetTierSelector | None = None,
        rng: random.Random | None = None,
        reveal_delay: float = 1.0,
        legs: LegTracker | None = None,
    ):
        """
        Args:
            gateway: Remote backend for every leg
            notifier: Per-session observer hub
            selector: Bet amount and currency owner (created if omitted)
            rng: Random source for local fallback draws
            reveal_delay: Pause in seconds between the two bot reveals
            legs: Pending-leg tracker (created if omitted)
        """
        self._gateway = gateway
        self._notifier = notifier
        self._selector = selector or BetTierSelector(notifier)
        self._rng = rng or random.Random()
        self._reveal_delay = reveal_delay
        self._legs = legs or LegTracker()
        self._wager_gate = WagerGate(gateway, self._legs, notifier)

        self._phase = GamePhase.AWAITING_WAGER
        self._session: Session | None = None
        self._player_choices: list[Choice] = []
        self._bot_choices: list[Choice] = []
        self._last_result: GameResult | None = None
        self._last_summary: RoundSummary | None = None

        # Callbacks
        self.on_state_change: Callable[[GamePhase, GamePhase], None] | None = None

    # ========================================================================
    # ACCESSORS
    # ========================================================================

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def selector(self) -> BetTierSelector:
        return self._selector

    @property
    def player_choices(self) -> tuple[Choice, ...]:
        return tuple(self._player_choices)

    @property
    def bot_choices(self) -> tuple[Choice, ...]:
        return tuple(self._bot_choices)

    @property
    def pending(self):
        return self._legs.pending

    @property
    def generation(self) -> int:
        return self._legs.generation

    @property
    def last_result(self) -> GameResult | None:
        return self._last_result

    @property
    def last_summary(self) -> RoundSummary | None:
        return self._last_summary

    def _transition_to(self, new_phase: GamePhase) -> None:
        """Transition to a new phase, calling callback and notifying if changed."""
        old_phase = self._phase
        if old_phase == new_phase:
            return
        self._phase = new_phase
        logger.info(f"Round phase: {old_phase.value} -> {new_phase.value}")
        if self.on_state_change:
            self.on_state_change(old_phase, new_phase)
        self._notifier.publish(
            Events.PHASE_CHANGED, {"old": old_phase.value, "new": new_phase.value}
        )

    async def _run_leg(
        self, leg: Leg, call: Callable[[], Awaitable[GatewayResult]]
    ) -> GatewayResult:
        request = self._legs.begin(leg)
        try:
            return await call()
        finally:
            self._legs.finish(request)

    # ========================================================================
    # WAGER
    # ========================================================================

    async def initialize(self, mode: CurrencyMode | None = None) -> bool:
        """
        Run the Init leg and open a server session.

        Returns:
            True when a session is open for the requested currency
        """
        if self._phase is not GamePhase.AWAITING_WAGER or self._legs.is_busy():
            logger.debug(f"initialize ignored in {self._phase.value}")
            return False
        try:
            return await self._open_session(mode or self._selector.currency_mode)
        except StaleResponseError as e:
            logger.debug(str(e))
            return False

    async def _open_session(self, mode: CurrencyMode) -> bool:
        mode = CurrencyMode(mode)
        result = await self._run_leg(Leg.INIT, lambda: self._gateway.init(mode))
        if not result.ok:
            logger.warning(f"Init failed ({result.error_kind}): {result.error}")
            return False

        self._session = Session(
            session_id=result.data.sessionId,
            currency_mode=mode,
            bet_tiers=list(result.data.betsValues),
        )
        logger.info(f"Session {self._session.session_id} opened, tiers {self._session.bet_tiers}")
        self._selector.set_currency(mode)
        if self._session.bet_tiers:
            self._selector.set_tiers(self._session.bet_tiers)
        return True

    async def place_bet(self, amount: int | None = None) -> WagerOutcome:
        """
        Place the wager for a new round.

        Opens a session first when none is open or the selected currency
        changed. amount defaults to the selector's current amount.
        """
        if self._phase is not GamePhase.AWAITING_WAGER:
            logger.debug(f"place_bet rejected in {self._phase.value}")
            return WagerOutcome.rejected(
                WagerFailure.NOT_ACCEPTING, f"Not accepting bets in {self._phase.value}", amount
            )
        if self._legs.is_busy():
            return WagerOutcome.rejected(
                WagerFailure.ALREADY_PENDING, "A request is already in flight", amount
            )

        if amount is None:
            amount = self._selector.amount

        generation = self._legs.generation
        try:
            mode = self._selector.currency_mode
            if self._session is None or self._session.currency_mode is not mode:
                if not await self._open_session(mode):
                    return self._wager_gate.fail(
                        WagerFailure.NETWORK, "Could not open a game session", amount
                    )
            self._legs.assert_current(generation, Leg.BET)
            session = self._session
            outcome = await self._wager_gate.place_bet(session, amount)
            self._legs.assert_current(generation, Leg.BET)
        except StaleResponseError as e:
            logger.debug(str(e))
            return WagerOutcome.rejected(WagerFailure.CANCELLED, "Round was reset", amount)

        if outcome.accepted:
            self._transition_to(GamePhase.SELECTING_HANDS)
            # Listeners may reset the round from here on
            self._wager_gate.confirm(session, outcome)
        return outcome

    # ========================================================================
    # PLAYER INPUT
    # ========================================================================

    async def select_choice(self, choice: Choice) -> bool:
        """
        Pick a hand. The second distinct pick runs both reveal legs.

        Returns:
            False when the pick was rejected (no state change)
        """
        try:
            require_move(self._phase, GamePhase.SELECTING_HANDS, choice, self._player_choices)
        except ValidationError as e:
            logger.debug(f"Rejected pick: {e}")
            return False

        self._player_choices.append(choice)
        logger.debug(f"Picked {choice.value} ({len(self._player_choices)}/2)")
        if len(self._player_choices) < 2:
            return True

        generation = self._legs.generation
        self._transition_to(GamePhase.AWAITING_FIRST_REVEAL)
        try:
            await self._reveal_bot_hands(generation)
        except StaleResponseError as e:
            logger.debug(str(e))
        return True

    async def remove_choice(self, choice: Choice) -> bool:
        """
        Discard one of the picked hands and run the outcome leg.

        Returns:
            False when the discard was rejected (no state change)
        """
        try:
            require_move(
                self._phase, GamePhase.SELECTING_HAND_TO_REMOVE, choice, self._player_choices
            )
        except ValidationError as e:
            logger.debug(f"Rejected discard: {e}")
            return False

        picked = list(self._player_choices)
        self._player_choices = [c for c in picked if c is not choice]
        generation = self._legs.generation
        self._transition_to(GamePhase.AWAITING_OUTCOME)
        self._notifier.publish(
            Events.CHOICE_REMOVED, {"side": Side.PLAYER.value, "choice": choice.value}
        )

        try:
            await self._resolve_round(picked, choice, generation)
        except StaleResponseError as e:
            logger.debug(str(e))
        return True

    def reset(self) -> None:
        """Abandon the current round. Effective immediately from any phase."""
        generation = self._legs.cancel_all()
        self._player_choices = []
        self._bot_choices = []
        self._session = None
        logger.debug(f"Round reset, generation {generation}")
        self._transition_to(GamePhase.AWAITING_WAGER)

    # ========================================================================
    # LEGS
    # ========================================================================

    async def _reveal_bot_hands(self, generation: int):
        self._legs.assert_current(generation, Leg.FIRST_HAND)
        first, second = self._player_choices

        self._reveal(await self._hand_leg(Leg.FIRST_HAND, first))

        # Pacing between the two reveals
        await asyncio.sleep(self._reveal_delay)
        self._legs.assert_current(generation, Leg.SECOND_HAND)

        self._transition_to(GamePhase.AWAITING_SECOND_REVEAL)
        self._legs.assert_current(generation, Leg.SECOND_HAND)
        self._reveal(await self._hand_leg(Leg.SECOND_HAND, second))
        self._transition_to(GamePhase.SELECTING_HAND_TO_REMOVE)

    def _reveal(self, revealed: tuple[Choice, bool]):
        bot_hand, authoritative = revealed
        self._bot_choices.append(bot_hand)
        self._notifier.publish(
            Events.CHOICE_REVEALED,
            {
                "side": Side.BOT.value,
                "choice": bot_hand.value,
                "index": len(self._bot_choices) - 1,
                "authoritative": authoritative,
            },
        )

    async def _hand_leg(self, leg: Leg, hand: Choice) -> tuple[Choice, bool]:
        session_id = self._session.session_id
        if leg is Leg.FIRST_HAND:
            submit = self._gateway.submit_first_hand
        else:
            submit = self._gateway.submit_second_hand

        result = await self._run_leg(leg, lambda: submit(session_id, hand))
        if result.ok:
            bot_hand = result.data.opponent_hand
            if bot_hand not in self._bot_choices:
                return bot_hand, True
            logger.warning(f"{leg.value} repeated bot hand {bot_hand.value}, drawing locally")
        else:
            logger.warning(
                f"{leg.value} failed ({result.error_kind}): {result.error}, drawing locally"
            )

        (bot_hand,) = draw_bot_hands(self._bot_choices, len(self._bot_choices) + 1, self._rng)
        return bot_hand, False

    async def _resolve_round(self, picked: list[Choice], discard: Choice, generation: int):
        self._legs.assert_current(generation, Leg.REMOVE_HAND)
        session = self._session
        result = await self._run_leg(
            Leg.REMOVE_HAND,
            lambda: self._gateway.remove_hand(session.session_id, picked, discard),
        )

        payout = None
        bot_discard = None
        if result.ok:
            if result.data.opponent_discard in self._bot_choices:
                bot_discard = result.data.opponent_discard
                payout = result.data.winAmount
            else:
                logger.warning(
                    f"Bot discard {result.data.pcHandToRemove!r} is not a bot hand, "
                    f"resolving locally"
                )
        else:
            logger.warning(
                f"remove_hand failed ({result.error_kind}): {result.error}, resolving locally"
            )

        if bot_discard is None:
            bot_discard = draw_bot_discard(self._bot_choices, self._rng)

        player_final = self._player_choices[0]
        bot_final = next(c for c in self._bot_choices if c is not bot_discard)
        if payout is not None:
            game_result = resolve_from_payout(payout, session.bet_amount)
        else:
            game_result = resolve(player_final, bot_final)

        summary = RoundSummary(
            player_hand=player_final,
            bot_hand=bot_final,
            player_discard=discard,
            bot_discard=bot_discard,
            result=game_result,
            payout=payout,
            authoritative=payout is not None,
        )
        self._bot_choices = [bot_final]
        self._last_result = game_result
        self._last_summary = summary
        logger.info(
            f"Round result: {player_final.value} vs {bot_final.value} -> {game_result.value}"
            + (f" (payout {payout})" if payout is not None else " (offline)")
        )

        self._transition_to(GamePhase.ROUND_COMPLETE)
        self._notifier.publish(
            Events.CHOICE_REMOVED, {"side": Side.BOT.value, "choice": bot_discard.value}
        )
        if payout:
            self._notifier.publish(
                Events.BALANCE_CHANGED,
                {
                    "delta": payout,
                    "currency": session.currency_mode.value,
                    "session_id": session.session_id,
                    "reason": "payout",
                },
            )
        self._notifier.publish(Events.ROUND_RESULT_READY, summary.to_dict())
