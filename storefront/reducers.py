"""
Pure state transitions.
Components never mutate a state record; they replace it with the result of
one of these functions.
"""
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from storefront.models.cart import CartItem, CartLine, CartState
from storefront.models.checkout import Address, BlockReason, CheckoutPhase, CheckoutState
from storefront.models.product import Product
from storefront.models.search import SearchState


# Search

def query_changed(state: SearchState, text: str) -> SearchState:
    return replace(state, query=text)


def search_dispatched(state: SearchState, text: str, sequence: int) -> SearchState:
    return replace(state, dispatched_query=text, sequence=sequence, loading=True)


def search_completed(state: SearchState, sequence: int,
                     products: Iterable[Product]) -> SearchState:
    """Apply results only if they belong to the latest dispatched search."""
    if sequence != state.sequence:
        return state
    return replace(state, products=tuple(products), loading=False)


# Cart

def cart_loading(state: CartState, loading: bool) -> CartState:
    return replace(state, loading=loading)


def merge_cart(lines: Sequence[CartLine], lookup) -> tuple:
    """
    Join server lines with catalog products.
    `lookup` maps a product id to an Optional[Product]; unknown ids keep
    their line with product=None.
    """
    return tuple(
        CartItem(product_id=line.product_id, qty=line.qty, product=lookup(line.product_id))
        for line in lines
    )


def cart_loaded(state: CartState, items: Sequence[CartItem]) -> CartState:
    return replace(state, items=tuple(items))


# Checkout

def addresses_loaded(state: CheckoutState, addresses: Sequence[Address]) -> CheckoutState:
    addresses = tuple(addresses)
    selected = state.selected_index
    if selected is not None and not 0 <= selected < len(addresses):
        selected = None
    return replace(state, addresses=addresses, selected_index=selected)


def address_selected(state: CheckoutState, index: Optional[int]) -> CheckoutState:
    if index is not None and not 0 <= index < len(state.addresses):
        index = None
    return replace(state, selected_index=index)


def new_address_changed(state: CheckoutState, text: str) -> CheckoutState:
    return replace(state, new_address=text)


def balance_loaded(state: CheckoutState, balance: float) -> CheckoutState:
    return replace(state, balance=balance)


def checkout_loading(state: CheckoutState, loading: bool) -> CheckoutState:
    return replace(state, loading=loading)


def checkout_validating(state: CheckoutState) -> CheckoutState:
    return replace(state, phase=CheckoutPhase.VALIDATING, block_reason=None, error=None)


def checkout_blocked(state: CheckoutState, reason: BlockReason) -> CheckoutState:
    return replace(state, phase=CheckoutPhase.BLOCKED, block_reason=reason)


def checkout_placing(state: CheckoutState) -> CheckoutState:
    return replace(state, phase=CheckoutPhase.PLACING_ORDER)


def checkout_completed(state: CheckoutState, balance: float) -> CheckoutState:
    return replace(state, phase=CheckoutPhase.COMPLETED, balance=balance, error=None)


def checkout_failed(state: CheckoutState, message: str) -> CheckoutState:
    return replace(state, phase=CheckoutPhase.IDLE, error=message)
