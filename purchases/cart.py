"""
Cart validation: checks every requested line against the live catalog and
prices it from the catalog, never from the client.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from backoffice.exceptions import (
    ColorNotAvailable, InvalidQuantity, ProductNotFound, ProductUnavailable,
)
from catalog.colors import normalize_color
from catalog.store import ProductSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartItem:
    product_id: int
    quantity: int
    selected_color: Optional[str] = None


@dataclass(frozen=True)
class ValidatedCartItem:
    product_id: int
    quantity: int
    selected_color: Optional[str]
    product: ProductSnapshot
    unit_price: Decimal
    total_price: Decimal


class CartValidator:
    def __init__(self, catalog):
        self.catalog = catalog

    def validate_and_price(self, items):
        """
        Validate items in order and stop at the first bad one.

        Raises:
            InvalidQuantity, ProductNotFound, ProductUnavailable, ColorNotAvailable
        """
        return [self.validate_item(item) for item in items]

    def validate_item(self, item):
        if item.quantity is None or item.quantity <= 0:
            raise InvalidQuantity(f'Quantity must be greater than 0 for product {item.product_id}')

        product = self.catalog.get_product_by_id(item.product_id)
        if product is None:
            raise ProductNotFound(f'Product {item.product_id} not found')

        if not product.is_available:
            raise ProductUnavailable(f'Product {product.name} is not available')

        if item.selected_color:
            wanted = normalize_color(item.selected_color)
            if not any(normalize_color(c) == wanted for c in product.colors):
                raise ColorNotAvailable(
                    f'Color {item.selected_color} not available for {product.name}. '
                    f'Available colors: {", ".join(product.colors)}'
                )

        unit_price = Decimal(product.price)
        total_price = unit_price * item.quantity
        logger.debug('Validated %s x %s at %s', item.quantity, product.name, unit_price)
        return ValidatedCartItem(
            product_id=product.id,
            quantity=item.quantity,
            selected_color=item.selected_color,
            product=product,
            unit_price=unit_price,
            total_price=total_price,
        )
