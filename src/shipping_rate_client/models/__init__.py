from .entities import (
    Address,
    Dimensions,
    NormalizedRate,
    Package,
    RateRequest,
    Weight,
    validate_rate_request,
)

__all__ = [
    "Address",
    "Dimensions",
    "NormalizedRate",
    "Package",
    "RateRequest",
    "Weight",
    "validate_rate_request",
]
