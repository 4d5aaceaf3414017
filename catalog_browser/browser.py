"""Event-driven shell around the catalog query engine.

``CatalogBrowser`` owns the store, the query state and the view projection
for one view instance. Every mutation entry point recomputes the visible page
through ``query`` and writes the clamped page index back into the state.
"""

import logging
from typing import Awaitable, List, Optional, Protocol, Tuple

from catalog_browser.book import Book
from catalog_browser.catalog import CatalogStore
from catalog_browser.query import QueryResult, QueryState, query
from catalog_browser.services.catalog_service import CatalogFetchError
from catalog_browser.view import ViewProjection, ViewState

logger = logging.getLogger(__name__)


class CatalogFetcher(Protocol):
    def fetch_catalog(self) -> Awaitable[List[Book]]: ...


class CatalogBrowser:
    def __init__(self, fetcher: CatalogFetcher, state: Optional[QueryState] = None) -> None:
        self.fetcher = fetcher
        self.store = CatalogStore()
        self.state = state or QueryState()
        self.projection = ViewProjection()
        self._closed = False
        self._cache_key: Optional[Tuple] = None
        self._cached: Optional[QueryResult] = None

    # ------------------------- Fetch lifecycle ------------------------- #
    async def refresh(self) -> ViewState:
        """Fetch the catalog and load it into the store.

        A browser closed while the request was in flight drops the result
        without touching its state, and a closed browser does not fetch.
        """
        if self._closed:
            logger.debug("Browser closed, refresh ignored")
            return self.view()
        self.projection.begin_fetch()
        try:
            books = await self.fetcher.fetch_catalog()
        except CatalogFetchError as e:
            if self._closed:
                logger.debug("Browser closed, dropping fetch error: %s", e)
                return self.view()
            logger.error("Error fetching books: %s", e)
            self.projection.fetch_failed(str(e))
            return self.view()

        if self._closed:
            logger.debug("Browser closed, dropping %d fetched books", len(books))
            return self.view()

        self.store.load(books)
        self.projection.fetch_succeeded()
        return self.view()

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------- User events ------------------------- #
    def search(self, term: str) -> QueryResult:
        self.state.set_search_term(term)
        return self.result

    def filter_category(self, category: str) -> QueryResult:
        self.state.set_category(category)
        return self.result

    def sort_by(self, sort_key: str) -> QueryResult:
        self.state.set_sort(sort_key)
        return self.result

    def go_to_page(self, page_index: int) -> QueryResult:
        self.state.set_page(page_index)
        return self.result

    def next_page(self) -> QueryResult:
        self.state.next_page()
        return self.result

    def previous_page(self) -> QueryResult:
        self.state.previous_page()
        return self.result

    # ------------------------- Derived state ------------------------- #
    @property
    def result(self) -> QueryResult:
        key = (self.store.version, self.state.snapshot())
        if key != self._cache_key or self._cached is None:
            self._cached = query(self.store, self.state)
            self._cache_key = key
        # Keep the state in range after clamping
        if self.state.page_index != self._cached.page_index:
            self.state.page_index = self._cached.page_index
            self._cache_key = (self.store.version, self.state.snapshot())
        return self._cached

    def view(self) -> ViewState:
        return self.projection.project(self.result)
