"""
Cart reconciliation engine.

The server owns the cart. Every mutation is followed by a full re-fetch and
the fetched lines are joined with the catalog cache; nothing is updated
optimistically.
"""
from typing import List, Optional

from storefront import reducers
from storefront.catalog import CatalogCache
from storefront.errors import ApplicationError, TransportError, ValidationError
from storefront.logger import logger
from storefront.models.cart import CartItem, CartLine, CartState
from storefront.navigation import Navigator
from storefront.normalizers.commerce import CommerceNormalizer
from storefront.notices import NoticeBoard
from storefront.services.api_gateway import ApiGateway, check_response

ALREADY_IN_CART_MESSAGE = (
    "Item already added to cart. Use the cart sidebar to update quantity or remove item."
)
EMPTY_CHECKOUT_CART_MESSAGE = "You must add items to cart first"


class CartEngine:
    """
    Shopping cart for the logged-in user.

    Args:
        gateway: API gateway used for /cart calls
        catalog: Catalog cache used to enrich lines
        notices: Where failures are reported
        navigator: Needed only when `checkout_view` is set
        checkout_view: The cart is shown on the checkout page; an empty cart
            there sends the shopper back to the product list
    """

    def __init__(self, gateway: ApiGateway, catalog: CatalogCache, notices: NoticeBoard,
                 navigator: Optional[Navigator] = None, checkout_view: bool = False):
        self.gateway = gateway
        self.catalog = catalog
        self.notices = notices
        self.navigator = navigator
        self.checkout_view = checkout_view
        self.state = CartState()
        self._fetch_seq = 0
        self._in_flight = 0

    @property
    def items(self) -> List[CartItem]:
        return list(self.state.items)

    @property
    def loading(self) -> bool:
        return self.state.loading

    def _begin(self):
        self._in_flight += 1
        self.state = reducers.cart_loading(self.state, True)

    def _end(self):
        self._in_flight -= 1
        self.state = reducers.cart_loading(self.state, self._in_flight > 0)

    def calculate_total(self) -> float:
        return self.state.total

    def merge(self, lines: List[CartLine]) -> tuple:
        items = reducers.merge_cart(lines, self.catalog.lookup)
        missing = [item.product_id for item in items if item.product is None]
        if missing:
            logger.warning(f"Cart lines reference products missing from the catalog: {missing}")
        return items

    async def fetch_cart(self) -> Optional[List[CartItem]]:
        """
        GET /cart and replace the enriched view.

        Overlapping fetches resolve last-started-wins.

        Returns:
            The enriched items, or None on failure or when a later fetch
            superseded this one (items stay unchanged).
        """
        self._fetch_seq += 1
        seq = self._fetch_seq
        self._begin()
        try:
            errored, body = await self.gateway.call("/cart", auth=True)
            body = check_response(errored, body, "fetch cart")
            if not isinstance(body, list):
                raise TransportError(
                    "Could not fetch cart. Check that the backend is running, "
                    "reachable and returns valid JSON."
                )
            lines = CommerceNormalizer.normalize_cart_lines(body)
        except (TransportError, ApplicationError) as e:
            if seq == self._fetch_seq:
                self.notices.error(str(e))
            else:
                logger.info(f"Ignoring failure of superseded cart fetch #{seq}: {e}")
            return None
        finally:
            self._end()

        if seq != self._fetch_seq:
            logger.info(f"Discarding superseded cart fetch #{seq} (latest #{self._fetch_seq})")
            return None

        self.state = reducers.cart_loaded(self.state, self.merge(lines))
        logger.info(f"Cart refreshed: {len(lines)} lines, total {self.calculate_total()}")

        if self.checkout_view and self.state.is_empty:
            self.notices.error(EMPTY_CHECKOUT_CART_MESSAGE)
            if self.navigator is not None:
                self.navigator.push("/products")

        return self.items

    def reconcile(self):
        """Re-join the current lines with the catalog cache. No network call."""
        lines = [CartLine(product_id=item.product_id, qty=item.qty) for item in self.state.items]
        self.state = reducers.cart_loaded(self.state, self.merge(lines))

    def _check_mutation(self, product_id: str, qty: int, from_quick_add: bool):
        if from_quick_add:
            existing = self.state.find(product_id)
            if existing is not None and existing.qty > 0:
                raise ValidationError(ALREADY_IN_CART_MESSAGE)
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 0:
            raise ValidationError("Quantity must be a whole number of zero or more")

    async def add_or_update(self, product_id: str, qty: int,
                            from_quick_add: bool = False) -> bool:
        """
        Set the quantity of `product_id` in the cart, then re-fetch.

        Args:
            product_id: Product to add or update
            qty: Desired quantity; 0 asks the backend to remove the line
            from_quick_add: Triggered from a product card's add button

        Returns:
            True if the backend accepted the mutation
        """
        try:
            self._check_mutation(product_id, qty, from_quick_add)
        except ValidationError as e:
            self.notices.error(str(e))
            return False

        self._begin()
        try:
            errored, body = await self.gateway.call(
                "/cart",
                method="POST",
                payload={"productId": product_id, "qty": qty},
                auth=True
            )
            check_response(errored, body, "update cart")
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return False
        finally:
            self._end()

        logger.info(f"Cart mutation accepted: {product_id} -> {qty}")
        await self.fetch_cart()
        return True
