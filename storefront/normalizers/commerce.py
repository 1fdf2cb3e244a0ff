"""
Explicit normalization layer.
Converts commerce API JSON into the internal models.
"""
import math
from typing import List, Dict, Any

from storefront.errors import NormalizationError
from storefront.logger import logger
from storefront.models.cart import CartLine
from storefront.models.checkout import Address
from storefront.models.product import Product


class CommerceNormalizer:
    """
    Normalizes raw backend records into internal models.
    Field names follow the backend: `_id`, `productId`, `qty`.
    """

    @staticmethod
    def normalize_product(raw_product: Dict[str, Any]) -> Product:
        """
        Convert a /products record to a Product.

        Raises:
            NormalizationError: If the record has no id or an unusable cost
        """
        try:
            product_id = str(raw_product["_id"]).strip()
            if not product_id:
                raise ValueError("empty _id")

            cost = CommerceNormalizer._normalize_cost(raw_product.get("cost"))

            return Product(
                id=product_id,
                name=str(raw_product.get("name") or "").strip(),
                category=str(raw_product.get("category") or "").strip(),
                cost=cost,
                rating=CommerceNormalizer._normalize_rating(raw_product.get("rating")),
                image=str(raw_product.get("image") or "").strip()
            )

        except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
            raise NormalizationError(
                f"Failed to normalize product: {str(e)}. "
                f"Data: {raw_product!r}"
            )

    @staticmethod
    def _normalize_cost(raw_cost: Any) -> float:
        if raw_cost is None or raw_cost == "":
            raise ValueError("missing cost")
        if isinstance(raw_cost, bool):
            raise TypeError("cost cannot be a boolean")
        cost = float(raw_cost)
        if not math.isfinite(cost):
            raise ValueError(f"non-finite cost {raw_cost!r}")
        if cost < 0:
            raise ValueError(f"negative cost {cost}")
        return cost

    @staticmethod
    def _normalize_rating(raw_rating: Any) -> int:
        """Round and clamp to 0-5."""
        if raw_rating is None or raw_rating == "":
            return 0
        try:
            rating = float(raw_rating)
        except (ValueError, TypeError, OverflowError):
            return 0
        if not math.isfinite(rating):
            return 0
        return max(0, min(5, int(round(rating))))

    @staticmethod
    def normalize_cart_line(raw_line: Dict[str, Any]) -> CartLine:
        """Convert a /cart record to a CartLine. Quantity must be positive."""
        try:
            product_id = str(raw_line["productId"]).strip()
            qty = raw_line["qty"]
            if isinstance(qty, float) and not math.isfinite(qty):
                raise ValueError(f"qty must be finite, got {qty!r}")
            if isinstance(qty, bool) or int(qty) != qty:
                raise ValueError(f"qty must be an integer, got {qty!r}")
            qty = int(qty)
            if not product_id:
                raise ValueError("empty productId")
            if qty <= 0:
                raise ValueError(f"qty must be positive, got {qty}")
            return CartLine(product_id=product_id, qty=qty)

        except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
            raise NormalizationError(f"Failed to normalize cart line: {str(e)}")

    @staticmethod
    def normalize_address(raw_address: Dict[str, Any]) -> Address:
        try:
            address_id = str(raw_address["_id"]).strip()
            if not address_id:
                raise ValueError("empty _id")
            return Address(id=address_id, address=str(raw_address.get("address") or ""))

        except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
            raise NormalizationError(f"Failed to normalize address: {str(e)}")

    @staticmethod
    def normalize_products(raw_products: List[Dict[str, Any]]) -> List[Product]:
        """
        Normalize a batch of products.

        Returns:
            List of normalized products (failures are logged and skipped)
        """
        normalized = []
        for raw in raw_products:
            try:
                normalized.append(CommerceNormalizer.normalize_product(raw))
            except NormalizationError as e:
                logger.warning(f"Skipping product: {e}")
        return normalized

    @staticmethod
    def normalize_cart_lines(raw_lines: List[Dict[str, Any]]) -> List[CartLine]:
        normalized = []
        for raw in raw_lines:
            try:
                normalized.append(CommerceNormalizer.normalize_cart_line(raw))
            except NormalizationError as e:
                logger.warning(f"Skipping cart line: {e}")
        return normalized

    @staticmethod
    def normalize_addresses(raw_addresses: List[Dict[str, Any]]) -> List[Address]:
        normalized = []
        for raw in raw_addresses:
            try:
                normalized.append(CommerceNormalizer.normalize_address(raw))
            except NormalizationError as e:
                logger.warning(f"Skipping address: {e}")
        return normalized
