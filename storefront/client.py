"""
Composition root for the storefront engine.
Wires the session, gateway and components together and manages their lifecycle.
"""
import asyncio
from typing import Any, Dict, Optional

from storefront.cart import CartEngine
from storefront.catalog import CatalogCache
from storefront.checkout import CheckoutFlow
from storefront.config import config
from storefront.logger import logger
from storefront.navigation import Navigator
from storefront.notices import NoticeBoard
from storefront.search import SearchController
from storefront.sentry import initialize_sentry
from storefront.services.api_gateway import ApiGateway
from storefront.services.auth_service import AuthService
from storefront.session import SessionStore

LOGIN_TO_ADD_MESSAGE = "Login to add an item to the Cart"


class StorefrontClient:
    """
    One shopper's view of the store.

    Components only see the collaborators they are handed, so tests can
    swap any of them.
    """

    def __init__(self, session: Optional[SessionStore] = None,
                 navigator: Optional[Navigator] = None,
                 notices: Optional[NoticeBoard] = None,
                 gateway: Optional[ApiGateway] = None):
        self.session = session or SessionStore()
        self.navigator = navigator or Navigator()
        self.notices = notices or NoticeBoard()
        self.gateway = gateway or ApiGateway(self.session)

        self.catalog = CatalogCache(self.gateway, self.notices)
        self.search = SearchController(self.catalog)
        self.cart = CartEngine(self.gateway, self.catalog, self.notices, navigator=self.navigator)
        self.checkout = CheckoutFlow(self.gateway, self.catalog, self.cart, self.session,
                                     self.notices, self.navigator)
        self.auth = AuthService(self.gateway, self.session, self.notices, self.navigator)

        self.is_ready = False
        self.sentry_enabled = False
        self.startup_time: Optional[float] = None

    async def initialize(self):
        """Validate config, start error tracking and open the HTTP session."""
        config.validate()
        self.sentry_enabled = initialize_sentry()
        await self.gateway.initialize()
        self.is_ready = True
        self.startup_time = asyncio.get_running_loop().time()
        logger.info(f"Storefront client ready against {self.gateway.base_url}")

    async def close(self):
        await self.search.close()
        await self.gateway.close()
        self.is_ready = False
        logger.info("Storefront client closed")

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def open_products_page(self):
        """Product list mount: catalog for everyone, cart for logged-in shoppers."""
        self.cart.checkout_view = False
        await self.search.load()
        if self.session.is_logged_in:
            await self.cart.fetch_cart()

    async def open_checkout_page(self) -> bool:
        self.cart.checkout_view = True
        return await self.checkout.load()

    async def add_to_cart(self, product_id: str, qty: int = 1) -> bool:
        """The add-to-cart button on a product card."""
        if not self.session.is_logged_in:
            self.notices.error(LOGIN_TO_ADD_MESSAGE)
            return False
        return await self.cart.add_or_update(product_id, qty, from_quick_add=True)

    async def refresh_catalog(self):
        """Re-fetch the catalog and re-join the cart with it."""
        if await self.catalog.fetch_catalog() is not None:
            self.cart.reconcile()

    def get_status(self) -> Dict[str, Any]:
        uptime = 0
        if self.startup_time is not None:
            uptime = asyncio.get_running_loop().time() - self.startup_time
        return {
            "ready": self.is_ready,
            "logged_in": self.session.is_logged_in,
            "endpoint": self.gateway.base_url,
            "sentry": self.sentry_enabled,
            "catalog_size": len(self.catalog.products),
            "cart_items": len(self.cart.items),
            "uptime": uptime
        }
