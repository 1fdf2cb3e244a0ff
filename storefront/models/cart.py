"""
Cart data contracts.
Lines are server-authoritative; product enrichment is derived and optional.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any

from storefront.models.product import Product


@dataclass(frozen=True)
class CartLine:
    """A line as served by GET /cart."""
    product_id: str
    qty: int

    def to_dict(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "qty": self.qty}


@dataclass(frozen=True)
class CartItem:
    """
    A cart line joined with the catalog.
    `product` is None when the line references a product the catalog
    cache does not hold.
    """
    product_id: str
    qty: int
    product: Optional[Product] = None

    @property
    def is_enriched(self) -> bool:
        return self.product is not None

    @property
    def subtotal(self) -> float:
        # Unknown products cannot be priced
        if self.product is None:
            return 0
        return self.product.cost * self.qty

    @property
    def display_name(self) -> str:
        if self.product is None:
            return f"Unavailable product ({self.product_id})"
        return self.product.name


@dataclass(frozen=True)
class CartState:
    items: Tuple[CartItem, ...] = ()
    loading: bool = False

    @property
    def total(self) -> float:
        """Recomputed from the current lines on every read."""
        return sum(item.subtotal for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
