"""
NetworkGateway abstract base class.

Defines the five remote calls of a round. Implementations never raise:
every failure comes back as a GatewayResult with ok=False.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from models import Choice, CurrencyMode
from models.payloads import BetData, HandData, InitData, RemoveHandData

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why a remote call failed"""

    TRANSPORT = "transport"  # connection refused, DNS, reset
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"  # non-2xx other than 401
    UNAUTHORIZED = "unauthorized"  # 401 after the refresh-and-retry
    MALFORMED = "malformed"  # body did not match the expected payload
    REFUSED = "refused"  # well-formed envelope with success=false


@dataclass
class GatewayResult(Generic[T]):
    """
    Outcome of a single remote call.

    ok is True only when the envelope reported success and the payload
    validated. data is None whenever ok is False.
    """

    ok: bool
    data: T | None = None
    error: str | None = None
    status: int | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def success(cls, data: T, status: int | None = 200) -> "GatewayResult[T]":
        return cls(ok=True, data=data, status=status)

    @classmethod
    def failure(
        cls, kind: ErrorKind, error: str, status: int | None = None
    ) -> "GatewayResult[T]":
        return cls(ok=False, error=error, status=status, error_kind=kind)


class NetworkGateway(ABC):
    """
    Abstract base for round backends.

    Implementations:
    - HttpGateway: the real backend over aiohttp
    - SimulatedGateway: in-process practice backend with a local wallet
    """

    @abstractmethod
    async def init(self, mode: CurrencyMode) -> GatewayResult[InitData]:
        """Open a server session and fetch the accepted bet tiers."""
        pass

    @abstractmethod
    async def place_bet(self, session_id: str, amount: int) -> GatewayResult[BetData]:
        """Stake the wager for the session."""
        pass

    @abstractmethod
    async def submit_first_hand(self, session_id: str, hand: Choice) -> GatewayResult[HandData]:
        """Send the first picked hand, receive the first bot hand."""
        pass

    @abstractmethod
    async def submit_second_hand(self, session_id: str, hand: Choice) -> GatewayResult[HandData]:
        """Send the second picked hand, receive the second bot hand."""
        pass

    @abstractmethod
    async def remove_hand(
        self, session_id: str, player_hands: Sequence[Choice], discarded: Choice
    ) -> GatewayResult[RemoveHandData]:
        """Send the discarded hand, receive the bot discard and the payout."""
        pass

    @abstractmethod
    def get_mode_name(self) -> str:
        """Return human-readable backend name."""
        pass

    def is_available(self) -> bool:
        return True

    async def close(self):
        """Release transport resources. Safe to call more than once."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
