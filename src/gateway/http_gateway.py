"""
HttpGateway - the real rock-paper-scissors-minus-one backend over aiohttp.

Every call goes through _request(). _exchange() classifies transport errors,
non-2xx statuses, malformed bodies and success=false envelopes as
NetworkError (AuthError for a persistent 401), and _request() turns them into
a failed GatewayResult. A 401 triggers one token refresh followed by one retry.
"""

import asyncio
import logging
from collections.abc import Sequence

import aiohttp
from pydantic import BaseModel, ValidationError

from core.errors import AuthError, NetworkError
from models import Choice, CurrencyMode
from models.payloads import (
    BetRequest,
    BetResponse,
    HandRequest,
    HandResponse,
    InitResponse,
    RemoveHandRequest,
    RemoveHandResponse,
    TokenResponse,
)
from services.logger import PerformanceLogger

from .base import ErrorKind, GatewayResult, NetworkGateway
from .tokens import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_GAME_ENDPOINT = "game/rock-paper-scissors-minus-one"
DEFAULT_REFRESH_PATH = "auth/refresh_token"


class HttpGateway(NetworkGateway):
    """
    aiohttp client for the game backend.

    Owns its ClientSession unless one is passed in.
    """

    def __init__(
        self,
        base_url: str,
        game_id: int,
        tokens: TokenStore | None = None,
        timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
        game_endpoint: str = DEFAULT_GAME_ENDPOINT,
        refresh_path: str = DEFAULT_REFRESH_PATH,
        max_auth_retries: int = 1,
    ):
        """
        Initialize HttpGateway.

        Args:
            base_url: Backend root, e.g. https://backend.example.com
            game_id: Numeric game identifier sent with every leg
            tokens: Access token holder (empty store sends no Authorization)
            timeout: Total per-request timeout in seconds
            session: Optional externally managed ClientSession
            game_endpoint: Path of the game under base_url
            refresh_path: Path of the token refresh endpoint
            max_auth_retries: Refresh-and-retry attempts after a 401
        """
        self.base_url = base_url.rstrip("/")
        self.game_id = game_id
        self.tokens = tokens or TokenStore()
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.game_endpoint = game_endpoint.strip("/")
        self.refresh_path = refresh_path.strip("/")
        self.max_auth_retries = max_auth_retries

        self._session = session
        self._owns_session = session is None

    def get_mode_name(self) -> str:
        return "http"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self):
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _game_url(self, path: str) -> str:
        return f"{self.base_url}/{self.game_endpoint}/{path}"

    # ========================================================================
    # LEGS
    # ========================================================================

    async def init(self, mode: CurrencyMode):
        return await self._request(
            "init",
            "GET",
            self._game_url("init"),
            InitResponse,
            params={"mode": CurrencyMode(mode).value, "gameId": str(self.game_id)},
        )

    async def place_bet(self, session_id: str, amount: int):
        body = BetRequest(betAmount=amount, sessionId=session_id, gameId=str(self.game_id))
        return await self._request(
            "bet", "POST", self._game_url("bet"), BetResponse, json=body.model_dump()
        )

    async def submit_first_hand(self, session_id: str, hand: Choice):
        body = HandRequest(playerHand=hand.value, sessionId=session_id, gameId=self.game_id)
        return await self._request(
            "firstHand", "POST", self._game_url("firstHand"), HandResponse, json=body.model_dump()
        )

    async def submit_second_hand(self, session_id: str, hand: Choice):
        body = HandRequest(playerHand=hand.value, sessionId=session_id, gameId=self.game_id)
        return await self._request(
            "secondHand",
            "POST",
            self._game_url("secondHand"),
            HandResponse,
            json=body.model_dump(),
        )

    async def remove_hand(self, session_id: str, player_hands: Sequence[Choice], discarded: Choice):
        body = RemoveHandRequest(
            playerHands=[h.value for h in player_hands],
            playerHandToRemove=discarded.value,
            sessionId=session_id,
            gameId=self.game_id,
        )
        return await self._request(
            "remove-hand",
            "POST",
            self._game_url("remove-hand"),
            RemoveHandResponse,
            json=body.model_dump(),
        )

    # ========================================================================
    # TRANSPORT
    # ========================================================================

    async def _send(self, method: str, url: str, **kwargs) -> tuple[int, object]:
        """Perform one HTTP exchange. Body is None when it is not JSON."""
        session = self._get_session()
        async with session.request(
            method, url, headers=self.tokens.auth_headers(), **kwargs
        ) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError:
                body = None
            return resp.status, body

    async def _request(
        self,
        leg: str,
        method: str,
        url: str,
        response_model: type[BaseModel],
        **kwargs,
    ) -> GatewayResult:
        """Run one leg and convert every failure into a GatewayResult"""
        try:
            data, status = await self._exchange(leg, method, url, response_model, **kwargs)
        except AuthError as e:
            logger.warning(str(e))
            return GatewayResult.failure(ErrorKind.UNAUTHORIZED, str(e), status=e.status)
        except NetworkError as e:
            return GatewayResult.failure(e.kind, str(e), status=e.status)
        return GatewayResult.success(data, status=status)

    async def _exchange(
        self,
        leg: str,
        method: str,
        url: str,
        response_model: type[BaseModel],
        **kwargs,
    ) -> tuple[BaseModel, int]:
        """
        Send the request, refreshing the token once on 401.

        Raises:
            AuthError: 401 persisted after the refresh-and-retry
            NetworkError: any other failure, with kind set
        """
        attempts = 0
        while True:
            try:
                with PerformanceLogger(logger, f"{method} {leg}"):
                    status, body = await self._send(method, url, **kwargs)
            except asyncio.TimeoutError as e:
                raise NetworkError(f"{leg} timed out", kind=ErrorKind.TIMEOUT) from e
            except aiohttp.ClientError as e:
                raise NetworkError(
                    f"{leg} transport error: {e}", kind=ErrorKind.TRANSPORT
                ) from e

            if status != 401:
                break
            if attempts >= self.max_auth_retries or not await self._refresh_token():
                raise AuthError(
                    f"{leg} rejected with 401 after token refresh",
                    status=status,
                    kind=ErrorKind.UNAUTHORIZED,
                )
            attempts += 1

        if not 200 <= status < 300:
            logger.warning(f"{leg} returned HTTP {status}")
            raise NetworkError(
                f"{leg} returned HTTP {status}", status=status, kind=ErrorKind.HTTP_STATUS
            )

        if not isinstance(body, dict):
            logger.warning(f"{leg} returned a non-JSON body")
            raise NetworkError(
                f"{leg} returned a non-JSON body", status=status, kind=ErrorKind.MALFORMED
            )

        try:
            envelope = response_model.model_validate(body)
        except ValidationError as e:
            logger.warning(f"{leg} payload rejected: {e.error_count()} validation error(s)")
            logger.debug(f"{leg} payload: {body}")
            raise NetworkError(
                f"{leg} malformed payload", status=status, kind=ErrorKind.MALFORMED
            ) from e

        if not envelope.success:
            message = body.get("message") or body.get("error") or f"{leg} refused by server"
            logger.info(f"{leg} refused: {message}")
            raise NetworkError(str(message), status=status, kind=ErrorKind.REFUSED)

        if envelope.data is None:
            raise NetworkError(f"{leg} missing data", status=status, kind=ErrorKind.MALFORMED)

        return envelope.data, status

    async def _refresh_token(self) -> bool:
        """POST auth/refresh_token and store the new pair. True on success."""
        url = f"{self.base_url}/{self.refresh_path}"
        try:
            status, body = await self._send("POST", url)
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            logger.warning(f"Token refresh failed: {e}")
            return False

        if status != 200 or not isinstance(body, dict):
            logger.warning(f"Token refresh returned HTTP {status}")
            return False

        try:
            envelope = TokenResponse.model_validate(body)
        except ValidationError:
            logger.warning("Token refresh returned a malformed payload")
            return False

        if not envelope.success or envelope.data is None:
            logger.warning("Token refresh refused by server")
            return False

        self.tokens.update(envelope.data.ACCESS_TOKEN, envelope.data.REFRESH_TOKEN)
        return True
