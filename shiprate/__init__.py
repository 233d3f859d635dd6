"""ShipRate-Cache: shipping rate quote caching for shopping carts."""

__version__ = "1.0.0"
