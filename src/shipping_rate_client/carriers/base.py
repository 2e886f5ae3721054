from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Union

from shipping_rate_client.models import NormalizedRate, RateRequest


class Carrier(ABC):
    """Abstract interface for carrier rating clients."""

    @abstractmethod
    def get_rates(self, request: Union[RateRequest, Mapping[str, Any]]) -> Sequence[NormalizedRate]:
        """Return normalized rates for the request."""
