import copy
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

# Ensure the project src directory is on sys.path for test imports without installation.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from shipping_rate_client.carriers.ups.auth import TOKEN_PATH  # noqa: E402
from shipping_rate_client.carriers.ups.rating import RATING_PATH  # noqa: E402
from shipping_rate_client.core.config import UPSConfig  # noqa: E402

BASE_URL = "https://onlinetools.ups.test"

VALID_TOKEN = {
    "access_token": "test_access_token_123",
    "expires_in": 3600,
    "token_type": "Bearer",
}

VALID_RATING = {
    "RateResponse": {
        "RatedShipment": [
            {
                "Service": {"Code": "03", "Name": "UPS Ground"},
                "TotalCharges": {"MonetaryValue": "12.50", "CurrencyCode": "USD"},
                "GuaranteedDelivery": {"BusinessDaysInTransit": 5},
            },
            {
                "Service": {"Code": "02", "Name": "UPS 2nd Day Air"},
                "TotalCharges": {"MonetaryValue": "24.00", "CurrencyCode": "USD"},
                "GuaranteedDelivery": {"BusinessDaysInTransit": 2},
            },
        ]
    }
}


class FakeUPS:
    """
    Scripted UPS endpoints. Replies are consumed in order per endpoint; once a
    queue is empty the endpoint's `default` reply (if any) is used.
    """

    def __init__(self) -> None:
        self.token_replies: list[dict[str, Any]] = []
        self.rating_replies: list[dict[str, Any]] = []
        self.token_default: Optional[dict[str, Any]] = None
        self.rating_default: Optional[dict[str, Any]] = None
        self.token_calls: list[httpx.Request] = []
        self.rating_calls: list[httpx.Request] = []

    def token(self, status: int = 200, json: Any = VALID_TOKEN, **kwargs: Any) -> "FakeUPS":
        self.token_replies.append({"status": status, "json": json, **kwargs})
        return self

    def rating(self, status: int = 200, json: Any = VALID_RATING, **kwargs: Any) -> "FakeUPS":
        self.rating_replies.append({"status": status, "json": json, **kwargs})
        return self

    def _reply(self, request: httpx.Request, queue: list, default: Optional[dict]) -> httpx.Response:
        if queue:
            reply = queue.pop(0)
        elif default is not None:
            reply = default
        else:
            raise AssertionError(f"Unexpected call to {request.url.path}")
        if reply.get("error") is not None:
            raise reply["error"]("stubbed transport failure", request=request)
        if "content" in reply:
            return httpx.Response(reply["status"], content=reply["content"], headers=reply.get("headers"))
        return httpx.Response(reply["status"], json=reply["json"], headers=reply.get("headers"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_calls.append(request)
            return self._reply(request, self.token_replies, self.token_default)
        if request.url.path == RATING_PATH:
            self.rating_calls.append(request)
            return self._reply(request, self.rating_replies, self.rating_default)
        raise AssertionError(f"Unexpected path {request.url.path}")

    def client(self) -> httpx.Client:
        return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_ups() -> FakeUPS:
    return FakeUPS()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ups_config() -> UPSConfig:
    return UPSConfig(base_url=BASE_URL, client_id="client-id", client_secret="client-secret")


@pytest.fixture
def sample_request() -> dict:
    return {
        "from": {"country": "US", "postalCode": "10001"},
        "to": {"country": "US", "postalCode": "90210"},
        "package": {
            "weight": {"value": 5.2, "unit": "lb"},
            "dimensions": {"length": 10, "width": 8, "height": 6, "unit": "in"},
        },
    }


@pytest.fixture
def valid_rating() -> dict:
    return copy.deepcopy(VALID_RATING)
