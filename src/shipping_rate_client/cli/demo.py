"""
In-process stand-in for the UPS token and rating endpoints.

Lets `shipping-rates demo` exercise the full token + rating flow without
credentials or network access.
"""
from __future__ import annotations

import httpx

from shipping_rate_client.carriers.ups.auth import TOKEN_PATH
from shipping_rate_client.carriers.ups.rating import RATING_PATH
from shipping_rate_client.core.config import UPSConfig

DEMO_CONFIG = UPSConfig(
    base_url="https://wwwcie.ups.com",
    client_id="demo-client",
    client_secret="demo-secret",
)

SAMPLE_REQUEST = {
    "from": {"country": "US", "postalCode": "10001"},
    "to": {"country": "US", "postalCode": "90210"},
    "package": {
        "weight": {"value": 5.2, "unit": "lb"},
        "dimensions": {"length": 10, "width": 8, "height": 6, "unit": "in"},
    },
}

SAMPLE_TOKEN = {
    "access_token": "demo_access_token",
    "expires_in": 3600,
    "token_type": "Bearer",
}

SAMPLE_RATING = {
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


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == TOKEN_PATH:
        return httpx.Response(200, json=SAMPLE_TOKEN)
    if request.url.path == RATING_PATH:
        return httpx.Response(200, json=SAMPLE_RATING)
    return httpx.Response(404, json={"response": {"errors": [{"message": "Not found"}]}})


def demo_transport() -> httpx.MockTransport:
    return httpx.MockTransport(_handler)
