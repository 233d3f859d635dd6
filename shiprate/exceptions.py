"""Error taxonomy for the rate cache.

Nothing here is fatal to a shipping calculation; every error is a reason to
bypass the cache and compute rates live.
"""


class ShipRateError(Exception):
    """Base class for rate cache errors."""


class RateRequestMissingError(ShipRateError):
    """A cache key was requested with no active rate request."""


class CacheSerializationError(ShipRateError):
    """A payload could not be serialized, or a cached payload is malformed."""


class CacheStoreUnavailableError(ShipRateError):
    """The cache store could not be reached."""
