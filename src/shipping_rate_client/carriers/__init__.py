from .base import Carrier
from .ups import UPSCarrier, create_ups_carrier

__all__ = [
    "Carrier",
    "UPSCarrier",
    "create_ups_carrier",
]
