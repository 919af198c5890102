"""
Exception hierarchy for the round engine
"""

from models import Leg


class GameError(Exception):
    """Base class for round engine errors"""

    pass


class ValidationError(GameError):
    """Raised when a move is not legal in the current phase"""

    pass


class NetworkError(GameError):
    """
    Transport failure, non-2xx status or malformed payload

    kind is the gateway's classification of the failure (an ErrorKind).
    """

    def __init__(self, message: str, status: int | None = None, kind=None):
        super().__init__(message)
        self.status = status
        self.kind = kind


class AuthError(NetworkError):
    """Backend rejected the access token, even after a refresh"""

    pass


class StaleResponseError(GameError):
    """A leg completed after the round it belonged to was reset"""

    def __init__(self, leg: Leg, generation: int, current: int):
        super().__init__(
            f"{leg.value} response for generation {generation} discarded (current {current})"
        )
        self.leg = leg
        self.generation = generation
        self.current = current


class LegInFlightError(GameError):
    """A leg was started while another one is still pending"""

    def __init__(self, requested: Leg, pending: Leg):
        super().__init__(f"Cannot start {requested.value}: {pending.value} still pending")
        self.requested = requested
        self.pending = pending
