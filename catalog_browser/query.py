"""In-memory catalog query engine.

``query`` turns a catalog snapshot and a ``QueryState`` into the visible
page plus pagination metadata. The stages always run in the same order:

1. search filter on title/author (case-insensitive substring)
2. category filter (``all`` disables it)
3. stable sort by the selected key
4. pagination, with the page index clamped into range

The function is pure: identical input gives identical output, and no input
makes it raise.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple, Union

from catalog_browser.book import Book
from catalog_browser.catalog import CatalogStore

logger = logging.getLogger(__name__)

PAGE_SIZE = 12

ALL_CATEGORIES = "all"
CATEGORIES: Tuple[str, ...] = (
    ALL_CATEGORIES,
    "fiction",
    "non-fiction",
    "science",
    "history",
    "art",
    "psychology",
    "business",
    "technology",
    "cooking",
)

SORT_NEWEST = "newest"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_POPULAR = "popular"
SORT_KEYS: Tuple[str, ...] = (SORT_NEWEST, SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_POPULAR)


@dataclass
class QueryState:
    """The user's current search, filter, sort and page selection."""

    search_term: str = ""
    category: str = ALL_CATEGORIES
    sort_key: str = SORT_NEWEST
    page_index: int = 1
    page_size: int = field(default=PAGE_SIZE, init=False)

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""
        self.page_index = 1

    def set_category(self, category: str) -> None:
        normalized = (category or "").strip().lower()
        if normalized not in CATEGORIES:
            logger.debug("Unknown category %r, falling back to %r", category, ALL_CATEGORIES)
            normalized = ALL_CATEGORIES
        self.category = normalized
        self.page_index = 1

    def set_sort(self, sort_key: str) -> None:
        # Ordering only; the page index is kept.
        normalized = (sort_key or "").strip().lower()
        if normalized not in SORT_KEYS:
            logger.debug("Unknown sort key %r, falling back to %r", sort_key, SORT_NEWEST)
            normalized = SORT_NEWEST
        self.sort_key = normalized

    def set_page(self, page_index: int) -> None:
        self.page_index = page_index

    def next_page(self) -> None:
        self.page_index += 1

    def previous_page(self) -> None:
        self.page_index = max(1, self.page_index - 1)

    def reset(self) -> None:
        self.search_term = ""
        self.category = ALL_CATEGORIES
        self.sort_key = SORT_NEWEST
        self.page_index = 1

    def snapshot(self) -> Tuple[str, str, str, int]:
        return (self.search_term, self.category, self.sort_key, self.page_index)


@dataclass(frozen=True)
class QueryResult:
    """Output of one engine run."""

    visible_page: Tuple[Book, ...]
    total_count: int
    total_pages: int
    page_index: int
    page_size: int = PAGE_SIZE

    @property
    def has_previous(self) -> bool:
        return self.page_index > 1

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    @property
    def first_item(self) -> int:
        """1-based position of the first visible book, 0 when the page is empty."""
        if not self.visible_page:
            return 0
        return (self.page_index - 1) * self.page_size + 1

    @property
    def last_item(self) -> int:
        if not self.visible_page:
            return 0
        return self.first_item + len(self.visible_page) - 1


# ------------------------- Stages ------------------------- #
def _fold(text) -> str:
    return (text or "").casefold()


def matches_search(book: Book, search_term: str) -> bool:
    term = _fold(search_term)
    if not term:
        return True
    return term in _fold(book.title) or term in _fold(book.author)


def matches_category(book: Book, category: str) -> bool:
    if _fold(category) == ALL_CATEGORIES:
        return True
    if not book.category:
        return False
    return _fold(book.category) == _fold(category)


def _id_sort_key(book: Book) -> Tuple[int, int, str]:
    # Numeric ids (ints or digit strings) compare numerically and rank above
    # non-numeric ids, which compare as text.
    book_id = book.id
    if isinstance(book_id, int):
        return (1, book_id, "")
    text = str(book_id).strip()
    try:
        return (1, int(text), "")
    except ValueError:
        return (0, 0, text)


# sort key -> (key function, descending)
_SORTERS: Dict[str, Tuple[Callable[[Book], object], bool]] = {
    SORT_PRICE_LOW: (lambda b: b.price, False),
    SORT_PRICE_HIGH: (lambda b: b.price, True),
    SORT_POPULAR: (lambda b: b.reviews or 0, True),
    SORT_NEWEST: (_id_sort_key, True),
}


def sort_books(books: Sequence[Book], sort_key: str) -> List[Book]:
    """Stable sort; equal keys keep their incoming order."""
    key_func, descending = _SORTERS.get(sort_key, _SORTERS[SORT_NEWEST])
    # list.sort stays stable with reverse=True
    return sorted(books, key=key_func, reverse=descending)


def paginate(books: Sequence[Book], page_index: int, page_size: int = PAGE_SIZE) -> QueryResult:
    total_count = len(books)
    total_pages = max(1, math.ceil(total_count / page_size))
    try:
        page = int(page_index)
    except (TypeError, ValueError):
        page = 1
    page = min(max(1, page), total_pages)

    start = (page - 1) * page_size
    end = start + page_size
    return QueryResult(
        visible_page=tuple(books[start:end]),
        total_count=total_count,
        total_pages=total_pages,
        page_index=page,
        page_size=page_size,
    )


def query(catalog: Union[CatalogStore, Sequence[Book]], state: QueryState) -> QueryResult:
    """Derive the visible page of ``catalog`` for ``state``."""
    books = catalog.all() if isinstance(catalog, CatalogStore) else tuple(catalog)

    items = [b for b in books if matches_search(b, state.search_term)]
    items = [b for b in items if matches_category(b, state.category)]
    items = sort_books(items, state.sort_key)
    return paginate(items, state.page_index, state.page_size)
