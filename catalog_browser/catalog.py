import logging
from typing import Iterable, Iterator, List, Tuple, Union

from catalog_browser.book import Book

logger = logging.getLogger(__name__)


class CatalogStore:
    """Holds the last fetched snapshot of the book catalog.

    The snapshot is only ever replaced as a whole by ``load``; there is no
    partial update. ``version`` changes on every load so callers can cache
    derived results against it.
    """

    def __init__(self) -> None:
        self._books: Tuple[Book, ...] = ()
        self._loaded = False
        self._version = 0

    # ------------------------- Core operations ------------------------- #
    def load(self, records: Iterable[Union[Book, dict]]) -> None:
        """Replace the stored collection with ``records``.

        Raw dicts are decoded with ``Book.from_dict``. A repeated id keeps the
        first record. Decoding happens before the swap, so a bad record leaves
        the previous snapshot in place.
        """
        books: List[Book] = []
        seen = set()
        for record in records:
            book = record if isinstance(record, Book) else Book.from_dict(record)
            key = str(book.id)
            if key in seen:
                logger.warning("Duplicate book id %s ignored", book.id)
                continue
            seen.add(key)
            books.append(book)

        self._books = tuple(books)
        self._loaded = True
        self._version += 1
        logger.debug("Catalog loaded: %d books (version %d)", len(self._books), self._version)

    def all(self) -> Tuple[Book, ...]:
        return self._books

    # ------------------------- Introspection ------------------------- #
    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)
