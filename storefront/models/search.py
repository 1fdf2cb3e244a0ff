from dataclasses import dataclass
from typing import Tuple

from storefront.models.product import Product


@dataclass(frozen=True)
class SearchState:
    """
    Search box state.

    `query` follows every keystroke, `dispatched_query` is the text of the
    search the debouncer last released, and `sequence` is that search's
    number. Only a completion carrying `sequence` may replace `products`.
    """
    query: str = ""
    dispatched_query: str = ""
    products: Tuple[Product, ...] = ()
    loading: bool = False
    sequence: int = 0
