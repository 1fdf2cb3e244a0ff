"""
Checkout decision flow.

    IDLE -> VALIDATING -> BLOCKED(reason)
                       -> PLACING_ORDER -> COMPLETED
                                        -> IDLE (with error)

Eligibility is decided locally before any network call: the wallet must
cover the cart total and a saved address must be selected.
"""
from typing import List, Optional

from storefront import reducers
from storefront.cart import CartEngine
from storefront.catalog import CatalogCache
from storefront.errors import ApplicationError, TransportError
from storefront.logger import logger
from storefront.models.checkout import Address, BlockReason, CheckoutPhase, CheckoutState
from storefront.navigation import Navigator
from storefront.normalizers.commerce import CommerceNormalizer
from storefront.notices import NoticeBoard
from storefront.sentry import capture_checkout_failure
from storefront.services.api_gateway import ApiGateway, check_response
from storefront.session import SessionStore

BLOCK_MESSAGES = {
    BlockReason.INSUFFICIENT_BALANCE: "You do not have enough balance in your wallet for this purchase",
    BlockReason.NO_ADDRESS: "Please select an address or add a new address to proceed",
}
LOGIN_REQUIRED_MESSAGE = "You must be logged in to access checkout page"


class CheckoutFlow:

    def __init__(self, gateway: ApiGateway, catalog: CatalogCache, cart: CartEngine,
                 session: SessionStore, notices: NoticeBoard, navigator: Navigator):
        self.gateway = gateway
        self.catalog = catalog
        self.cart = cart
        self.session = session
        self.notices = notices
        self.navigator = navigator
        self.state = CheckoutState()

    @property
    def phase(self) -> CheckoutPhase:
        return self.state.phase

    @property
    def addresses(self) -> List[Address]:
        return list(self.state.addresses)

    def is_eligible(self) -> bool:
        return self.state.is_eligible(self.cart.calculate_total())

    async def load(self) -> bool:
        """
        Page mount: requires a logged-in session, then loads the balance,
        the catalog, the cart and the saved addresses.
        """
        if not self.session.is_logged_in:
            self.notices.error(LOGIN_REQUIRED_MESSAGE)
            self.navigator.push("/")
            return False

        self.state = reducers.balance_loaded(self.state, self.session.balance)
        await self.catalog.fetch_catalog()
        await self.cart.fetch_cart()
        await self.fetch_addresses()
        return True

    async def fetch_addresses(self) -> Optional[List[Address]]:
        """GET /user/addresses."""
        self.state = reducers.checkout_loading(self.state, True)
        try:
            errored, body = await self.gateway.call("/user/addresses", auth=True)
            body = check_response(errored, body, "fetch addresses")
            if not isinstance(body, list):
                raise TransportError(
                    "Could not fetch addresses. Check that the backend is running, "
                    "reachable and returns valid JSON."
                )
            addresses = CommerceNormalizer.normalize_addresses(body)
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return None
        finally:
            self.state = reducers.checkout_loading(self.state, False)

        self.state = reducers.addresses_loaded(self.state, addresses)
        return addresses

    def select_address(self, index: Optional[int]):
        self.state = reducers.address_selected(self.state, index)

    def set_new_address(self, text: str):
        self.state = reducers.new_address_changed(self.state, text)

    async def add_address(self, text: Optional[str] = None) -> bool:
        """
        POST /user/addresses with `text` (or the bound input field).
        Length and content rules are the backend's; its message is shown as is.
        """
        if text is not None:
            self.set_new_address(text)

        self.state = reducers.checkout_loading(self.state, True)
        try:
            errored, body = await self.gateway.call(
                "/user/addresses",
                method="POST",
                payload={"address": self.state.new_address},
                auth=True
            )
            check_response(errored, body, "add a new address")
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return False
        finally:
            self.state = reducers.checkout_loading(self.state, False)

        self.notices.success("Address added")
        self.set_new_address("")
        await self.fetch_addresses()
        return True

    async def delete_address(self, address_id: str) -> bool:
        """DELETE /user/addresses/{id}, then refresh the list."""
        self.state = reducers.checkout_loading(self.state, True)
        try:
            errored, body = await self.gateway.call(
                f"/user/addresses/{address_id}",
                method="DELETE",
                auth=True
            )
            check_response(errored, body, "delete this address")
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return False
        finally:
            self.state = reducers.checkout_loading(self.state, False)

        self.notices.success("Address deleted")
        await self.fetch_addresses()
        return True

    def _block_reason(self, total: float) -> Optional[BlockReason]:
        if self.state.balance < total:
            return BlockReason.INSUFFICIENT_BALANCE
        if not self.state.addresses or self.state.selected_address is None:
            return BlockReason.NO_ADDRESS
        return None

    async def place_order(self) -> CheckoutPhase:
        """
        Validate eligibility and, if it holds, POST /cart/checkout.

        Returns:
            The phase the flow ended in: BLOCKED, IDLE (order failed) or COMPLETED
        """
        total = self.cart.calculate_total()
        self.state = reducers.balance_loaded(self.state, self.session.balance)
        self.state = reducers.checkout_validating(self.state)

        reason = self._block_reason(total)
        if reason is not None:
            self.state = reducers.checkout_blocked(self.state, reason)
            self.notices.error(BLOCK_MESSAGES[reason])
            logger.info(f"Checkout blocked: {reason.value} (balance {self.state.balance}, total {total})")
            return self.state.phase

        address = self.state.selected_address
        self.state = reducers.checkout_placing(self.state)
        self.state = reducers.checkout_loading(self.state, True)
        try:
            errored, body = await self.gateway.call(
                "/cart/checkout",
                method="POST",
                payload={"addressId": address.id},
                auth=True
            )
            body = check_response(errored, body, "place order")
        except (TransportError, ApplicationError) as e:
            self.state = reducers.checkout_failed(self.state, str(e))
            self.notices.error(str(e))
            capture_checkout_failure(address.id, str(e))
            return self.state.phase
        finally:
            self.state = reducers.checkout_loading(self.state, False)

        new_balance = self.state.balance - total
        if isinstance(body, dict) and body.get("balance") is not None:
            try:
                new_balance = float(body["balance"])
            except (TypeError, ValueError):
                logger.warning(f"Ignoring unreadable balance in checkout response: {body['balance']!r}")

        self.session.set_balance(new_balance)
        self.state = reducers.checkout_completed(self.state, new_balance)
        self.notices.success("Order placed successfully")
        logger.info(f"Order placed to address {address.id}; balance now {new_balance}")
        self.navigator.push("/thanks")
        return self.state.phase
