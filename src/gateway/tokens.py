"""
Access token holder shared by the HTTP gateway and its refresh call
"""

import logging
import threading

logger = logging.getLogger(__name__)


class TokenStore:
    """Current access/refresh token pair"""

    def __init__(self, access_token: str = "", refresh_token: str | None = None):
        self._lock = threading.Lock()
        self._access_token = access_token or ""
        self._refresh_token = refresh_token

    @property
    def access_token(self) -> str:
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self) -> str | None:
        with self._lock:
            return self._refresh_token

    def has_token(self) -> bool:
        return bool(self.access_token)

    def update(self, access_token: str, refresh_token: str | None = None):
        with self._lock:
            self._access_token = access_token
            if refresh_token:
                self._refresh_token = refresh_token
        logger.info("Access token refreshed")

    def auth_headers(self) -> dict[str, str]:
        """Authorization header carrying the raw token (no scheme prefix)"""
        token = self.access_token
        return {"Authorization": token} if token else {}
