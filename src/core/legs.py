"""
Pending-leg bookkeeping and the generation counter

The generation is bumped on every reset. A leg remembers the generation
it started in; when it completes under a different one its result is
discarded.
"""

import logging

from models import Leg, PendingRequest

from .errors import LegInFlightError, StaleResponseError

logger = logging.getLogger(__name__)


class LegTracker:
    """
    Tracks the single in-flight request for a session.

    Usage:
        request = tracker.begin(Leg.BET)
        result = await gateway.place_bet(...)
        tracker.finish(request)   # raises StaleResponseError after a reset
    """

    def __init__(self):
        self._generation = 0
        self._pending: PendingRequest | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> PendingRequest | None:
        return self._pending

    def is_busy(self) -> bool:
        return self._pending is not None

    def begin(self, leg: Leg) -> PendingRequest:
        """Register a new in-flight leg for the current generation"""
        if self._pending is not None:
            raise LegInFlightError(leg, self._pending.leg)
        self._pending = PendingRequest(leg=leg, generation=self._generation)
        logger.debug(f"Leg {leg.value} started (generation {self._generation})")
        return self._pending

    def finish(self, request: PendingRequest):
        """
        Mark a leg complete.

        Raises:
            StaleResponseError: the round was reset while the leg was in flight
        """
        if request.generation != self._generation:
            logger.debug(
                f"Discarding {request.leg.value} completion from generation "
                f"{request.generation} after {request.age_seconds:.3f}s"
            )
            raise StaleResponseError(request.leg, request.generation, self._generation)

        if self._pending is request:
            self._pending = None
        logger.debug(f"Leg {request.leg.value} finished in {request.age_seconds:.3f}s")

    def assert_current(self, generation: int, leg: Leg):
        """Re-check the generation after a suspension point that is not a leg"""
        if generation != self._generation:
            raise StaleResponseError(leg, generation, self._generation)

    def cancel_all(self) -> int:
        """Start a new generation and forget the pending leg. Returns the new generation."""
        if self._pending is not None:
            logger.debug(f"Abandoning in-flight {self._pending.leg.value}")
        self._pending = None
        self._generation += 1
        return self._generation
