from shipping_rate_client.carriers import Carrier, UPSCarrier, create_ups_carrier
from shipping_rate_client.core.config import Settings, UPSConfig, get_settings, load_ups_config
from shipping_rate_client.core.errors import (
    AuthError,
    BadRequestError,
    CarrierError,
    ConfigError,
    ErrorKind,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
)
from shipping_rate_client.models import (
    Address,
    Dimensions,
    NormalizedRate,
    Package,
    RateRequest,
    Weight,
)

__all__ = [
    "Address",
    "AuthError",
    "BadRequestError",
    "Carrier",
    "CarrierError",
    "ConfigError",
    "Dimensions",
    "ErrorKind",
    "NormalizedRate",
    "Package",
    "RateLimitError",
    "RateRequest",
    "RequestTimeoutError",
    "ServerError",
    "Settings",
    "UPSCarrier",
    "UPSConfig",
    "Weight",
    "create_ups_carrier",
    "get_settings",
    "load_ups_config",
]
