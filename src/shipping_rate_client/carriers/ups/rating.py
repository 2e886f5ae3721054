from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import httpx

from shipping_rate_client.carriers.ups.auth import UPSAuthenticator
from shipping_rate_client.carriers.ups.normalizer import (
    embedded_errors,
    first_error_message,
    parse_provider_response,
    to_provider_request,
)
from shipping_rate_client.core.errors import (
    AuthError,
    BadRequestError,
    CarrierError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
)
from shipping_rate_client.core.http import RATING_TIMEOUT, response_body
from shipping_rate_client.core.logging import configure_logging
from shipping_rate_client.models import NormalizedRate, RateRequest, validate_rate_request

logger = configure_logging(logger_name=__name__)

RATING_PATH = "/api/rating/v1/Shop"


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def _logged(error: CarrierError) -> CarrierError:
    logger.debug("UPS rating failed [%s]: %s", error.kind.value, error.message)
    return error


def _classify(response: httpx.Response, body: Any) -> Optional[CarrierError]:
    status = response.status_code
    if status == 429:
        return RateLimitError(
            "UPS rate limit exceeded", retry_after=_retry_after(response), payload=body
        )
    if status >= 500:
        return ServerError(f"UPS server error: {status}", status_code=status, payload=body)
    if status >= 400:
        message = first_error_message(body) or f"UPS error: {status}"
        return BadRequestError(message, status_code=status, payload=body)
    if status != 200:
        return BadRequestError(
            f"Unexpected UPS rating status: {status}", status_code=status, payload=body
        )
    if embedded_errors(body):
        message = first_error_message(body) or "UPS rating error"
        return BadRequestError(message, status_code=400, payload=body)
    return None


class UPSRatingClient:
    """
    Issues UPS Shop requests and classifies the outcome.

    A 401 on the rating call is taken to mean a stale token: the cache is
    invalidated and the call is retried once with a freshly fetched token.
    A second 401 means the credentials themselves are bad and is raised.
    """

    def __init__(self, base_url: str, auth: UPSAuthenticator, client: httpx.Client) -> None:
        self._url = f"{base_url.rstrip('/')}{RATING_PATH}"
        self._auth = auth
        self._client = client

    def get_rates(self, request: Union[RateRequest, Mapping[str, Any]]) -> list[NormalizedRate]:
        validated = validate_rate_request(request)
        payload = to_provider_request(validated)

        response = self._post(payload)
        if response.status_code == 401:
            logger.warning("UPS rating returned 401; refreshing token and retrying once")
            self._auth.invalidate()
            response = self._post(payload)
            if response.status_code == 401:
                raise _logged(
                    AuthError(
                        "UPS rating rejected a freshly issued token",
                        status_code=401,
                        payload=response_body(response),
                    )
                )
        return self._handle(response)

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        token = self._auth.get_valid_credential()
        try:
            return self._client.post(
                self._url,
                json=payload,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {token}",
                },
                timeout=RATING_TIMEOUT,
            )
        except httpx.TimeoutException as exc:
            raise _logged(RequestTimeoutError(f"UPS rating request timed out: {exc}")) from exc

    def _handle(self, response: httpx.Response) -> list[NormalizedRate]:
        body = response_body(response)
        error = _classify(response, body)
        if error is not None:
            raise _logged(error)

        try:
            rates = parse_provider_response(body)
        except BadRequestError as exc:
            raise _logged(exc)
        logger.debug("UPS returned %d rate(s)", len(rates))
        return rates
