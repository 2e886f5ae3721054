from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import ValidationError

from shipping_rate_client.core.errors import BadRequestError
from shipping_rate_client.core.logging import configure_logging
from shipping_rate_client.models import Address, NormalizedRate, RateRequest

logger = configure_logging(logger_name=__name__)

PACKAGING_CODE = "02"
DEFAULT_CURRENCY = "USD"

# Short name -> (service code, display name).
SERVICE_LEVELS: dict[str, tuple[str, str]] = {
    "Ground": ("03", "UPS Ground"),
    "3DaySelect": ("12", "UPS 3 Day Select"),
    "2ndDayAir": ("02", "UPS 2nd Day Air"),
    "NextDayAirSaver": ("13", "UPS Next Day Air Saver"),
    "NextDayAir": ("01", "UPS Next Day Air"),
    "NextDayAirEarly": ("14", "UPS Next Day Air Early"),
}
SERVICE_NAMES: dict[str, str] = {code: display for code, display in SERVICE_LEVELS.values()}

# Accepts the short name, the display name (case-insensitive) or the code itself.
_SERVICE_LOOKUP: dict[str, str] = {
    key: code
    for short, (code, display) in SERVICE_LEVELS.items()
    for key in (short.lower(), display.lower(), code)
}

WEIGHT_UNITS = {"lb": "LBS", "kg": "KGS"}
DIMENSION_UNITS = {"in": "IN", "cm": "CM"}


def service_code_for(service_level: str | None) -> Optional[str]:
    if not service_level:
        return None
    return _SERVICE_LOOKUP.get(service_level.strip().lower())


def _address(address: Address) -> dict[str, Any]:
    return {"Address": {"CountryCode": address.country, "PostalCode": address.postal_code}}


def to_provider_request(request: RateRequest) -> dict[str, Any]:
    pkg = request.package
    package: dict[str, Any] = {
        "Packaging": {"Code": PACKAGING_CODE},
        "PackageWeight": {
            "Weight": pkg.weight.value,
            "Unit": {"Code": WEIGHT_UNITS[pkg.weight.unit]},
        },
    }
    if pkg.dimensions is not None:
        dims = pkg.dimensions
        package["Dimensions"] = {
            "Length": dims.length,
            "Width": dims.width,
            "Height": dims.height,
            "Unit": {"Code": DIMENSION_UNITS[dims.unit]},
        }

    shipment: dict[str, Any] = {
        "ShipFrom": _address(request.from_address),
        "ShipTo": _address(request.to_address),
        "Package": package,
    }
    if request.service_level:
        code = service_code_for(request.service_level)
        if code:
            shipment["Service"] = {"Code": code}
        else:
            logger.debug("Ignoring unknown service level %r", request.service_level)
    return {"RateRequest": {"Shipment": shipment}}


def embedded_errors(raw: Any) -> list[Any]:
    """Return the provider's `response.errors` list, or an empty list."""
    if not isinstance(raw, dict):
        return []
    response = raw.get("response")
    if not isinstance(response, dict):
        return []
    errors = response.get("errors")
    if not isinstance(errors, list):
        return []
    return errors


def first_error_message(raw: Any) -> Optional[str]:
    """Message of the first embedded error only; later errors are never consulted."""
    errors = embedded_errors(raw)
    if not errors or not isinstance(errors[0], dict):
        return None
    message = errors[0].get("message")
    if isinstance(message, str) and message:
        return message
    return None


def _parse_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def _parse_days(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        raise ValueError("not an integer")
    if isinstance(value, int):
        days = value
    elif isinstance(value, str) and value.strip().isdigit():
        days = int(value.strip())
    else:
        raise ValueError("not an integer")
    if days < 0:
        raise ValueError("negative")
    return days


def _parse_entry(entry: Any, index: int, raw: Any) -> NormalizedRate:
    def fail(reason: str) -> BadRequestError:
        return BadRequestError(
            f"Malformed UPS rating response: {reason} at index {index}",
            status_code=200,
            payload=raw,
            index=index,
        )

    if not isinstance(entry, dict):
        raise fail("rated shipment is not an object")

    charges = entry.get("TotalCharges") if isinstance(entry.get("TotalCharges"), dict) else {}
    amount = _parse_amount(charges.get("MonetaryValue"))
    if amount is None:
        raise fail("invalid TotalCharges")

    currency = charges.get("CurrencyCode")
    if currency is None:
        currency = DEFAULT_CURRENCY
    if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
        raise fail("invalid currency")

    estimated_days = None
    delivery = entry.get("GuaranteedDelivery")
    if isinstance(delivery, dict) and delivery.get("BusinessDaysInTransit") is not None:
        try:
            estimated_days = _parse_days(delivery["BusinessDaysInTransit"])
        except ValueError:
            raise fail("invalid BusinessDaysInTransit") from None

    service = entry.get("Service") if isinstance(entry.get("Service"), dict) else {}
    code = service.get("Code")
    code = str(code) if code is not None else None
    name = service.get("Name") or SERVICE_NAMES.get(code or "") or code or "Unknown"

    try:
        return NormalizedRate(
            service_name=str(name),
            service_code=code,
            amount=amount,
            currency=currency.upper(),
            estimated_days=estimated_days,
        )
    except ValidationError as exc:
        raise fail(str(exc)) from exc


def parse_provider_response(raw: Any) -> list[NormalizedRate]:
    """
    Parse a UPS Shop response into normalized rates.

    All-or-nothing: the first invalid entry fails the whole call with a
    BadRequestError carrying that entry's index.
    """
    if not isinstance(raw, dict):
        raise BadRequestError(
            "Malformed UPS rating response: not an object", status_code=200, payload=raw
        )
    rate_response = raw.get("RateResponse")
    rated = rate_response.get("RatedShipment") if isinstance(rate_response, dict) else None
    # UPS collapses a single rated shipment into an object.
    if isinstance(rated, dict):
        rated = [rated]
    if not isinstance(rated, list):
        raise BadRequestError(
            "Malformed UPS rating response: missing or invalid RatedShipment",
            status_code=200,
            payload=raw,
        )
    return [_parse_entry(entry, index, raw) for index, entry in enumerate(rated)]
