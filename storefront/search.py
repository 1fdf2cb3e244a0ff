"""
Debounced, sequence-numbered product search.

Keystrokes update the query immediately; the debouncer releases one search
per quiet window. Every released search gets the next sequence number and
only the search holding the latest number may publish its results, no
matter in which order the network answers.
"""
import itertools
from typing import List, Optional

from storefront import reducers
from storefront.catalog import CatalogCache
from storefront.config import config
from storefront.logger import logger
from storefront.models.product import Product
from storefront.models.search import SearchState
from storefront.utils.debounce import Debouncer


class SearchController:

    def __init__(self, catalog: CatalogCache, debounce_ms: Optional[int] = None):
        self.catalog = catalog
        delay_ms = config.SEARCH_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self.debouncer = Debouncer(self.search, delay_ms / 1000)
        self.state = SearchState()
        self._sequence = itertools.count(1)

    @property
    def results(self) -> List[Product]:
        return list(self.state.products)

    def on_input(self, text: str):
        """Record a keystroke and (re)schedule the trailing search."""
        self.state = reducers.query_changed(self.state, text)
        self.debouncer.trigger(text)

    async def search(self, text: str) -> Optional[List[Product]]:
        """
        Run the search pipeline for `text` now.

        Re-fetches the catalog only when the cache is stale, then filters in
        memory. Returns the published results, or None when a later search
        superseded this one.
        """
        sequence = next(self._sequence)
        self.state = reducers.search_dispatched(self.state, text, sequence)
        logger.debug(f"Search #{sequence} dispatched for '{text}'")

        if self.catalog.is_stale():
            await self.catalog.fetch_catalog()

        if sequence != self.state.sequence:
            logger.info(
                f"Discarding stale search #{sequence} for '{text}' "
                f"(latest #{self.state.sequence})"
            )
            return None

        results = self.catalog.filter(text)

        self.state = reducers.search_completed(self.state, sequence, results)
        return results

    async def load(self) -> List[Product]:
        """Fetch the catalog unconditionally and show everything matching the current query."""
        sequence = next(self._sequence)
        self.state = reducers.search_dispatched(self.state, self.state.query, sequence)
        await self.catalog.fetch_catalog()
        results = self.catalog.filter(self.state.query)
        self.state = reducers.search_completed(self.state, sequence, results)
        return self.results

    async def flush(self):
        """Wait for searches already released by the debouncer."""
        await self.debouncer.drain()

    async def close(self):
        await self.debouncer.close()
