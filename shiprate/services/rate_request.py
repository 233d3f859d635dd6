"""Holder of the rate request for one shipping calculation.

A ``RateRequestContext`` belongs to exactly one calculation. Create one per
request (``rate_request_scope`` does this) and pass it to the key generator
and cache manager; never share an instance between concurrent calculations.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from shiprate.exceptions import RateRequestMissingError
from shiprate.models import RateRequest


class RateRequestContext:
    """Single mutable slot for the active rate request."""

    def __init__(self, request: Optional[RateRequest] = None):
        self._request = request

    def set(self, request: RateRequest) -> "RateRequestContext":
        self._request = request
        return self

    def get(self) -> Optional[RateRequest]:
        return self._request

    def clear(self) -> "RateRequestContext":
        self._request = None
        return self

    def require(self) -> RateRequest:
        """Return the active request or raise ``RateRequestMissingError``."""
        if self._request is None:
            raise RateRequestMissingError("No active rate request")
        return self._request


@contextmanager
def rate_request_scope(request: RateRequest) -> Iterator[RateRequestContext]:
    """Context for one calculation, cleared on exit."""
    context = RateRequestContext(request)
    try:
        yield context
    finally:
        context.clear()
