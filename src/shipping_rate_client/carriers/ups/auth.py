from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from shipping_rate_client.core.config import UPSConfig
from shipping_rate_client.core.errors import AuthError, RequestTimeoutError
from shipping_rate_client.core.http import TOKEN_TIMEOUT, response_body
from shipping_rate_client.core.logging import configure_logging

logger = configure_logging(logger_name=__name__)

TOKEN_PATH = "/security/v1/oauth/token"
REFRESH_BUFFER_SECONDS = 60.0


@dataclass(frozen=True)
class Credential:
    token: str
    expires_at: float

    def is_fresh(self, now: float, buffer: float) -> bool:
        return now < self.expires_at - buffer


class UPSAuthenticator:
    """
    Client-credentials token cache for one UPS account.

    Holds at most one Credential. `get_valid_credential` reuses it until it is
    within `refresh_buffer` seconds of expiry, then fetches a replacement.
    Concurrent callers may both fetch when the cache is empty; the lock only
    keeps the stored Credential consistent.
    """

    def __init__(
        self,
        config: UPSConfig,
        client: httpx.Client,
        refresh_buffer: float = REFRESH_BUFFER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._client = client
        self._refresh_buffer = refresh_buffer
        self._clock = clock
        self._lock = threading.Lock()
        self._credential: Optional[Credential] = None

    @property
    def credential(self) -> Optional[Credential]:
        with self._lock:
            return self._credential

    def get_valid_credential(self) -> str:
        with self._lock:
            cached = self._credential
        if cached is not None and cached.is_fresh(self._clock(), self._refresh_buffer):
            return cached.token

        credential = self._fetch()
        with self._lock:
            self._credential = credential
        return credential.token

    def invalidate(self) -> None:
        with self._lock:
            self._credential = None

    def _fetch(self) -> Credential:
        logger.info("Requesting UPS access token")
        try:
            response = self._client.post(
                f"{self._config.base_url}{TOKEN_PATH}",
                data={"grant_type": "client_credentials"},
                auth=(self._config.client_id, self._config.client_secret),
                headers={"Accept": "application/json"},
                timeout=TOKEN_TIMEOUT,
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"UPS token request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise AuthError(f"UPS token request failed: {exc}", status_code=None) from exc

        body = response_body(response)
        if response.status_code == 401 or (
            isinstance(body, dict) and body.get("error") == "invalid_client"
        ):
            raise AuthError(
                "Invalid UPS client credentials", status_code=response.status_code, payload=body
            )
        if response.status_code != 200:
            raise AuthError(
                f"UPS token request failed: {response.status_code}",
                status_code=response.status_code,
                payload=body,
            )

        token = body.get("access_token") if isinstance(body, dict) else None
        expires_in = body.get("expires_in") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("Malformed UPS token response", status_code=200, payload=body)
        if (
            isinstance(expires_in, bool)
            or not isinstance(expires_in, (int, float))
            or not math.isfinite(expires_in)
            or expires_in < 0
        ):
            raise AuthError("Malformed UPS token response", status_code=200, payload=body)

        logger.debug("UPS access token acquired (expires_in=%ss)", expires_in)
        return Credential(token=token, expires_at=self._clock() + float(expires_in))
