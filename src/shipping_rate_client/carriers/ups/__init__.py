from __future__ import annotations

from typing import Any, Mapping, Union

import httpx

from shipping_rate_client.carriers.base import Carrier
from shipping_rate_client.carriers.ups.auth import Credential, UPSAuthenticator
from shipping_rate_client.carriers.ups.rating import UPSRatingClient
from shipping_rate_client.core.config import UPSConfig
from shipping_rate_client.core.http import create_http_client
from shipping_rate_client.models import NormalizedRate, RateRequest


class UPSCarrier(Carrier):
    """UPS rating behind the carrier-agnostic interface."""

    def __init__(self, config: UPSConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or create_http_client(base_url=config.base_url)
        self._auth = UPSAuthenticator(config, self._client)
        self._rating = UPSRatingClient(config.base_url, self._auth, self._client)

    @property
    def authenticator(self) -> UPSAuthenticator:
        return self._auth

    def get_rates(self, request: Union[RateRequest, Mapping[str, Any]]) -> list[NormalizedRate]:
        return self._rating.get_rates(request)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "UPSCarrier":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_ups_carrier(config: UPSConfig, client: httpx.Client | None = None) -> UPSCarrier:
    return UPSCarrier(config, client=client)


__all__ = [
    "Credential",
    "UPSAuthenticator",
    "UPSCarrier",
    "UPSRatingClient",
    "create_ups_carrier",
]
