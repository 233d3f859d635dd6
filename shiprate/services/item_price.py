"""Per-item prices used when asking carriers for rates.

Each product type prices its lines differently, and for some types the line
that carries the real price is the parent rather than the item itself.
``PriceStrategyFactory`` picks the strategy from the parent's type when the
item has a parent, otherwise from the item's own type.
"""

from typing import Optional

from shiprate.models import CartLineItem, ProductType
from shiprate.services.quote_items import ItemQuantityCalculator, item_quantity_calculator


class PriceStrategy:
    """Default pricing: the item is its own real item."""

    def __init__(self, quantity_calculator: ItemQuantityCalculator):
        self.quantity_calculator = quantity_calculator

    def real_item(self, item: CartLineItem) -> CartLineItem:
        return item

    def unit_price(self, item: CartLineItem) -> float:
        return float(self.real_item(item).price)

    def final_price(self, item: CartLineItem) -> float:
        real = self.real_item(item)
        qty = self.quantity_calculator.quantity(real)
        if not qty:
            return 0.0
        return float(real.row_total) / qty


class ConfigurablePriceStrategy(PriceStrategy):
    """Configurable options carry no price; the parent line does."""

    def real_item(self, item: CartLineItem) -> CartLineItem:
        return item.parent if item.parent is not None else item


class PriceStrategyFactory:
    """Selects the pricing strategy for a cart line."""

    def __init__(self, quantity_calculator: Optional[ItemQuantityCalculator] = None):
        qty_calc = quantity_calculator or item_quantity_calculator
        self.default = PriceStrategy(qty_calc)
        configurable = ConfigurablePriceStrategy(qty_calc)
        self._strategies: dict[ProductType, PriceStrategy] = {
            ProductType.SIMPLE: self.default,
            ProductType.CONFIGURABLE: configurable,
            ProductType.BUNDLE: self.default,
            ProductType.GROUPED: self.default,
            ProductType.VIRTUAL: self.default,
            ProductType.DOWNLOADABLE: self.default,
        }

    def create(self, item: CartLineItem) -> PriceStrategy:
        item_type = item.parent_type if item.parent is not None else item.type
        return self._strategies.get(item_type, self.default)


class ItemPriceCalculator:
    """Unit and final price of a cart line."""

    def __init__(self, factory: Optional[PriceStrategyFactory] = None):
        self.factory = factory or PriceStrategyFactory()

    def unit_price(self, item: CartLineItem) -> float:
        return self.factory.create(item).unit_price(item)

    def final_price(self, item: CartLineItem) -> float:
        """Row total of the real item amortized over its effective quantity."""
        return self.factory.create(item).final_price(item)


item_price_calculator = ItemPriceCalculator()
