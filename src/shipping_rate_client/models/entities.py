from __future__ import annotations

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from shipping_rate_client.core.errors import BadRequestError

_VALUE_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "extra": "ignore",
}


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


class Address(BaseModel):
    country: str = Field(description="ISO 3166-1 alpha-2 country code, e.g., US")
    postal_code: str = Field(alias="postalCode")
    city: Optional[str] = None
    state_province_code: Optional[str] = Field(default=None, alias="stateProvinceCode", max_length=3)
    address_line1: Optional[str] = Field(default=None, alias="addressLine1")
    address_line2: Optional[str] = Field(default=None, alias="addressLine2")

    model_config = _VALUE_CONFIG

    @field_validator("country")
    @classmethod
    def validate_country(cls, value: str) -> str:
        value = value.strip()
        if len(value) != 2 or not value.isalpha():
            raise ValueError("country must be a 2-letter code")
        return value.upper()

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("postal code must not be empty")
        return value


class Weight(BaseModel):
    value: float = Field(gt=0, allow_inf_nan=False)
    unit: Literal["lb", "kg"]

    model_config = _VALUE_CONFIG

    @field_validator("value", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class Dimensions(BaseModel):
    length: float = Field(gt=0, allow_inf_nan=False)
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    unit: Literal["in", "cm"]

    model_config = _VALUE_CONFIG

    @field_validator("length", "width", "height", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class Package(BaseModel):
    weight: Weight
    dimensions: Optional[Dimensions] = None

    model_config = _VALUE_CONFIG


class RateRequest(BaseModel):
    from_address: Address = Field(alias="from")
    to_address: Address = Field(alias="to")
    package: Package
    service_level: Optional[str] = Field(
        default=None,
        alias="serviceLevel",
        description="Service level name; unknown names are ignored when mapping.",
    )

    model_config = _VALUE_CONFIG


class NormalizedRate(BaseModel):
    service_name: str
    service_code: Optional[str] = None
    amount: float = Field(ge=0)
    currency: str = Field(min_length=3, max_length=3, description="ISO currency code, e.g., USD")
    estimated_days: Optional[int] = Field(default=None, ge=0)

    model_config = _VALUE_CONFIG


def _error_path(error: Mapping[str, Any]) -> str:
    return ".".join(str(part) for part in error.get("loc", ())) or "request"


def validate_rate_request(request: Union[RateRequest, Mapping[str, Any]]) -> RateRequest:
    """
    Validate caller input before any network call.
    Raises BadRequestError naming every invalid field.
    """
    if isinstance(request, RateRequest):
        return request
    try:
        return RateRequest.model_validate(request)
    except ValidationError as exc:
        details = {_error_path(error): error["msg"] for error in exc.errors()}
        summary = "; ".join(f"{path}: {msg}" for path, msg in details.items())
        raise BadRequestError(
            f"Invalid rate request: {summary}",
            status_code=400,
            payload=details,
            fields=list(details),
        ) from exc
