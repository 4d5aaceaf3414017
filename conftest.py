import pytest

from catalog_browser.book import Book
from catalog_browser.services.catalog_service import CatalogFetchError


def make_book(book_id, title="Untitled", author="Anon", price=10.0, category="fiction", reviews=0) -> Book:
    return Book(id=book_id, title=title, author=author, price=price, category=category, reviews=reviews)


class FakeFetcher:
    """Stands in for CatalogService in browser tests"""

    def __init__(self, books=None, error=None):
        self.books = list(books or [])
        self.error = error
        self.calls = 0
        self.closed = False

    async def fetch_catalog(self):
        self.calls += 1
        if self.error:
            raise CatalogFetchError(self.error)
        return list(self.books)

    async def close(self):
        self.closed = True


@pytest.fixture
def book_factory():
    return make_book


@pytest.fixture
def sample_books():
    return [
        make_book(1, "Dune", "Frank Herbert", 30.0, "fiction", 120),
        make_book(2, "Dune Messiah", "Frank Herbert", 10.0, "fiction", 45),
        make_book(3, "Foundation", "Isaac Asimov", 20.0, "Fiction", 300),
        make_book(4, "A Brief History of Time", "Stephen Hawking", 25.0, "science", 80),
        make_book(5, "Sapiens", "Yuval Noah Harari", 18.5, "history"),
        make_book(6, "Salt Fat Acid Heat", "Samin Nosrat", 35.0, "cooking", 60),
        make_book(7, "Untagged Notes", "Someone", 5.0, None, 2),
    ]


@pytest.fixture
def fake_fetcher(sample_books):
    return FakeFetcher(sample_books)


@pytest.fixture
def fetcher_factory():
    return FakeFetcher
