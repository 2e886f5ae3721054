import pytest

from shipping_rate_client.carriers.ups.normalizer import (
    first_error_message,
    parse_provider_response,
    service_code_for,
    to_provider_request,
)
from shipping_rate_client.core.errors import BadRequestError
from shipping_rate_client.models import RateRequest


def _request(**overrides) -> RateRequest:
    data = {
        "from": {"country": "us", "postalCode": "10001"},
        "to": {"country": "CA", "postalCode": "M5V 2T6"},
        "package": {"weight": {"value": 2.5, "unit": "kg"}},
    }
    data.update(overrides)
    return RateRequest.model_validate(data)


def test_maps_request_to_shop_payload() -> None:
    request = _request(
        package={
            "weight": {"value": 5.2, "unit": "lb"},
            "dimensions": {"length": 10, "width": 8, "height": 6, "unit": "in"},
        },
        serviceLevel="Ground",
    )

    payload = to_provider_request(request)

    assert payload == {
        "RateRequest": {
            "Shipment": {
                "ShipFrom": {"Address": {"CountryCode": "US", "PostalCode": "10001"}},
                "ShipTo": {"Address": {"CountryCode": "CA", "PostalCode": "M5V 2T6"}},
                "Package": {
                    "Packaging": {"Code": "02"},
                    "PackageWeight": {"Weight": 5.2, "Unit": {"Code": "LBS"}},
                    "Dimensions": {
                        "Length": 10,
                        "Width": 8,
                        "Height": 6,
                        "Unit": {"Code": "IN"},
                    },
                },
                "Service": {"Code": "03"},
            }
        }
    }


def test_metric_units_and_no_dimensions_or_service() -> None:
    payload = to_provider_request(
        _request(
            package={
                "weight": {"value": 1, "unit": "kg"},
                "dimensions": {"length": 30, "width": 20, "height": 10, "unit": "cm"},
            }
        )
    )
    shipment = payload["RateRequest"]["Shipment"]
    assert shipment["Package"]["PackageWeight"]["Unit"] == {"Code": "KGS"}
    assert shipment["Package"]["Dimensions"]["Unit"] == {"Code": "CM"}
    assert "Service" not in shipment

    bare = to_provider_request(_request())["RateRequest"]["Shipment"]
    assert "Dimensions" not in bare["Package"]


@pytest.mark.parametrize(
    "level, code",
    [
        ("Ground", "03"),
        ("3DaySelect", "12"),
        ("2ndDayAir", "02"),
        ("NextDayAirSaver", "13"),
        ("NextDayAir", "01"),
        ("NextDayAirEarly", "14"),
        ("UPS Next Day Air Saver", "13"),
        ("ups ground", "03"),
        ("14", "14"),
    ],
)
def test_service_level_lookup(level, code) -> None:
    assert service_code_for(level) == code


def test_unknown_service_level_is_silently_omitted() -> None:
    payload = to_provider_request(_request(serviceLevel="Teleport"))
    assert "Service" not in payload["RateRequest"]["Shipment"]


def test_parses_rated_shipments(valid_rating) -> None:
    rates = parse_provider_response(valid_rating)

    assert [r.service_code for r in rates] == ["03", "02"]
    assert rates[0].service_name == "UPS Ground"
    assert rates[0].amount == 12.5
    assert rates[0].currency == "USD"
    assert rates[0].estimated_days == 5
    assert rates[1].amount == 24.0


def test_defaults_currency_and_names_from_code() -> None:
    rates = parse_provider_response(
        {
            "RateResponse": {
                "RatedShipment": [
                    {"Service": {"Code": "13"}, "TotalCharges": {"MonetaryValue": 0}},
                    {"TotalCharges": {"MonetaryValue": "3.10", "CurrencyCode": "cad"}},
                    {
                        "Service": {"Code": "96"},
                        "TotalCharges": {"MonetaryValue": "99"},
                        "GuaranteedDelivery": {"BusinessDaysInTransit": "3"},
                    },
                ]
            }
        }
    )

    assert rates[0].service_name == "UPS Next Day Air Saver"
    assert rates[0].currency == "USD"
    assert rates[0].amount == 0.0
    assert rates[1].service_name == "Unknown"
    assert rates[1].service_code is None
    assert rates[1].currency == "CAD"
    assert rates[2].service_name == "96"
    assert rates[2].estimated_days == 3


def test_single_rated_shipment_object_is_accepted(valid_rating) -> None:
    single = valid_rating["RateResponse"]["RatedShipment"][0]
    rates = parse_provider_response({"RateResponse": {"RatedShipment": single}})
    assert len(rates) == 1
    assert rates[0].service_code == "03"


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "text",
        {},
        {"RateResponse": {}},
        {"RateResponse": {"RatedShipment": "nope"}},
    ],
)
def test_missing_rated_shipment_is_rejected(raw) -> None:
    with pytest.raises(BadRequestError) as excinfo:
        parse_provider_response(raw)
    assert excinfo.value.index is None
    assert "Malformed UPS rating response" in excinfo.value.message


@pytest.mark.parametrize(
    "charges, reason",
    [
        ({"MonetaryValue": "-1.00"}, "invalid TotalCharges"),
        ({"MonetaryValue": "abc"}, "invalid TotalCharges"),
        ({"MonetaryValue": True}, "invalid TotalCharges"),
        ({"MonetaryValue": "NaN"}, "invalid TotalCharges"),
        ({}, "invalid TotalCharges"),
        ({"MonetaryValue": "5", "CurrencyCode": "US"}, "invalid currency"),
        ({"MonetaryValue": "5", "CurrencyCode": 840}, "invalid currency"),
    ],
)
def test_bad_entry_fails_whole_response_with_index(valid_rating, charges, reason) -> None:
    valid_rating["RateResponse"]["RatedShipment"].append({"TotalCharges": charges})

    with pytest.raises(BadRequestError) as excinfo:
        parse_provider_response(valid_rating)

    assert excinfo.value.index == 2
    assert reason in excinfo.value.message
    assert "index 2" in excinfo.value.message
    assert excinfo.value.payload is valid_rating


def test_bad_transit_days_are_rejected(valid_rating) -> None:
    valid_rating["RateResponse"]["RatedShipment"][0]["GuaranteedDelivery"] = {
        "BusinessDaysInTransit": "soon"
    }
    with pytest.raises(BadRequestError) as excinfo:
        parse_provider_response(valid_rating)
    assert excinfo.value.index == 0


def test_first_error_message() -> None:
    assert first_error_message({"response": {"errors": [{"code": "1", "message": "Bad zip"}]}}) == "Bad zip"
    assert first_error_message({"response": {"errors": []}}) is None
    assert first_error_message("oops") is None


def test_first_error_message_ignores_later_errors() -> None:
    raw = {"response": {"errors": [{"code": "1"}, {"code": "2", "message": "Second"}]}}
    assert first_error_message(raw) is None
    assert first_error_message({"response": {"errors": ["text", {"message": "Second"}]}}) is None
