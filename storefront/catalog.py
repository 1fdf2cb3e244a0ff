"""
Catalog cache and in-memory filter.
"""
import time
from typing import Dict, List, Optional

from storefront.config import config
from storefront.errors import ApplicationError, TransportError
from storefront.logger import logger
from storefront.models.product import Product
from storefront.normalizers.commerce import CommerceNormalizer
from storefront.notices import NoticeBoard
from storefront.services.api_gateway import ApiGateway

FETCH_FAILED_MESSAGE = (
    "Could not fetch products. Check that the backend is running, "
    "reachable and returns valid JSON."
)
NO_PRODUCTS_MESSAGE = "No products found in database"


class CatalogCache:
    """
    Holds the last successfully fetched product list.

    A failed or invalid fetch never replaces the cache. When fetches overlap,
    only the most recently started one may write.
    """

    def __init__(self, gateway: ApiGateway, notices: NoticeBoard,
                 max_age: Optional[float] = None):
        self.gateway = gateway
        self.notices = notices
        self.max_age = config.CATALOG_MAX_AGE if max_age is None else max_age
        self._products: List[Product] = []
        self._index: Dict[str, Product] = {}
        self._fetched_at: Optional[float] = None
        self._fetch_seq = 0
        self._in_flight = 0

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def is_loaded(self) -> bool:
        return self._fetched_at is not None

    def is_stale(self) -> bool:
        if self._fetched_at is None:
            return True
        return time.monotonic() - self._fetched_at >= self.max_age

    def lookup(self, product_id: str) -> Optional[Product]:
        return self._index.get(product_id)

    def filter(self, query: str) -> List[Product]:
        """Products whose name or category contains `query`, ignoring case."""
        return [product for product in self._products if product.matches(query)]

    def _validate(self, errored: bool, body) -> List[Product]:
        if errored:
            raise TransportError(FETCH_FAILED_MESSAGE)
        if not isinstance(body, list) or not body:
            message = body.get("message") if isinstance(body, dict) else None
            if not message:
                raise TransportError(FETCH_FAILED_MESSAGE)
            raise ApplicationError(str(message))

        products = CommerceNormalizer.normalize_products(body)
        if not products:
            raise ApplicationError(NO_PRODUCTS_MESSAGE)
        return products

    async def fetch_catalog(self) -> Optional[List[Product]]:
        """
        GET /products and replace the cache.

        Returns:
            The fetched products, or None if the fetch failed or was
            superseded by a later fetch.
        """
        self._fetch_seq += 1
        seq = self._fetch_seq
        self._in_flight += 1
        try:
            errored, body = await self.gateway.call("/products")
            products = self._validate(errored, body)
        except (TransportError, ApplicationError) as e:
            if seq == self._fetch_seq:
                self.notices.error(str(e))
            else:
                logger.info(f"Ignoring failure of superseded catalog fetch #{seq}: {e}")
            return None
        finally:
            self._in_flight -= 1

        if seq != self._fetch_seq:
            logger.info(f"Discarding superseded catalog fetch #{seq} (latest #{self._fetch_seq})")
            return None

        self._products = products
        self._index = {product.id: product for product in products}
        self._fetched_at = time.monotonic()
        logger.info(f"Catalog refreshed with {len(products)} products")
        return list(products)

    async def ensure_loaded(self) -> List[Product]:
        """Fetch only if the cache is missing or older than max_age."""
        if self.is_stale():
            await self.fetch_catalog()
        return self.products
