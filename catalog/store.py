"""Read side of the catalog used by checkout."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from .models import Product


@dataclass(frozen=True)
class ProductSnapshot:
    """Product state as seen at validation time; colors already parsed."""

    id: int
    name: str
    price: Decimal
    status: str
    colors: List[str] = field(default_factory=list)

    @property
    def is_available(self):
        return self.status == Product.STATUS_AVAILABLE


class CatalogStore:
    def __init__(self, using='default'):
        self.using = using

    def get_product_by_id(self, product_id):
        try:
            pk = int(product_id)
        except (TypeError, ValueError):
            return None
        product = Product.objects.using(self.using).filter(pk=pk).first()
        if product is None:
            return None
        return ProductSnapshot(
            id=product.pk,
            name=product.name,
            price=Decimal(product.price),
            status=product.status,
            colors=product.color_list,
        )
