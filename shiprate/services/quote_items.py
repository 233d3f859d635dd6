"""Cart line eligibility and effective quantity.

Both policies dispatch on a closed set of product types. Children of a
parent line (configurable options, bundle selections) dispatch on the
parent's type; top-level lines dispatch on their own type.
"""

from typing import Callable, Optional

from shiprate.models import CartLineItem, ProductType

# Types whose lines never ship a physical package.
NON_SHIPPABLE_TYPES = frozenset({ProductType.VIRTUAL, ProductType.DOWNLOADABLE})

# Types whose top-level line only aggregates child lines.
AGGREGATE_TYPES = frozenset({ProductType.CONFIGURABLE, ProductType.BUNDLE})


class QuoteItemValidator:
    """Decides which cart lines count toward the shipping calculation."""

    def is_eligible(self, item: CartLineItem) -> bool:
        item_type = item.type
        if item_type in NON_SHIPPABLE_TYPES:
            return False
        if item.parent is None and item_type in AGGREGATE_TYPES:
            return False
        # Unknown types are counted.
        return True


def _own_quantity(item: CartLineItem) -> float:
    return float(item.quantity)


def _configurable_child_quantity(item: CartLineItem) -> float:
    # The selected option always carries qty 1; the parent line holds the real amount.
    return float(item.parent.quantity)


def _bundle_child_quantity(item: CartLineItem) -> float:
    return float(item.quantity) * float(item.parent.quantity)


QuantityStrategy = Callable[[CartLineItem], float]

_CHILD_QUANTITY_STRATEGIES: dict[ProductType, QuantityStrategy] = {
    ProductType.CONFIGURABLE: _configurable_child_quantity,
    ProductType.BUNDLE: _bundle_child_quantity,
}


class ItemQuantityCalculator:
    """Effective shippable quantity of a cart line."""

    def __init__(self, strategies: Optional[dict[ProductType, QuantityStrategy]] = None):
        self._strategies = _CHILD_QUANTITY_STRATEGIES if strategies is None else strategies

    def quantity(self, item: CartLineItem) -> float:
        if item.parent is None:
            return _own_quantity(item)
        strategy = self._strategies.get(item.parent_type, _own_quantity)
        return strategy(item)


quote_item_validator = QuoteItemValidator()
item_quantity_calculator = ItemQuantityCalculator()
