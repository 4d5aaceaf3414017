import logging
from typing import Any, List, Optional

import httpx

from catalog_browser.book import Book, BookId
from catalog_browser.config import Settings, settings as default_settings
from catalog_browser.services.http_client import CatalogHTTPClient


logger = logging.getLogger(__name__)


class CatalogFetchError(Exception):
    """Raised when the bookstore API cannot be reached or answers with an error.

    The message is meant to be shown to the user as-is.
    """
    pass


class BookNotFoundError(CatalogFetchError):
    """Raised when a single-book call answers 404"""
    pass


class CatalogService:
    """Client for the bookstore REST API (``/api/v1/books``)"""

    def __init__(self, config: Optional[Settings] = None, http_client: Optional[CatalogHTTPClient] = None):
        self.config = config or default_settings
        self._http = http_client or CatalogHTTPClient(self.config)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ------------------------- Catalog ------------------------- #
    async def fetch_catalog(self) -> List[Book]:
        """Fetch every book in the catalog"""
        data = await self._get_json(self.config.api_url("books"), "Failed to fetch books")
        return self._parse_books(data)

    async def fetch_new_books(self) -> List[Book]:
        """Fetch the most recently added books (the server returns the latest four)"""
        data = await self._get_json(self.config.api_url("books/new"), "Failed to fetch new books")
        return self._parse_books(data)

    async def fetch_book(self, book_id: BookId) -> Optional[Book]:
        """Fetch a single book, ``None`` when the server does not know the id"""
        url = self.config.api_url(f"books/{book_id}")
        try:
            data = await self._get_json(url, "Failed to fetch book")
        except BookNotFoundError:
            return None
        try:
            return Book.from_dict(data)
        except ValueError as e:
            logger.error(f"Invalid book record for id {book_id}: {e}")
            raise CatalogFetchError(f"Failed to fetch book: {e}") from e

    # ------------------------- Admin ------------------------- #
    async def delete_book(self, book_id: BookId) -> None:
        """Delete a book on the server"""
        url = self.config.api_url(f"books/{book_id}")
        try:
            response = await self._http.delete(url)
        except httpx.RequestError as e:
            logger.error(f"DELETE {url} failed: {e}")
            raise CatalogFetchError(f"Failed to delete book: {e}") from e

        if response.status_code == 404:
            raise BookNotFoundError(f"Book {book_id} not found")
        if not response.is_success:
            raise CatalogFetchError(self._error_message("Failed to delete book", response))
        logger.info(f"Book {book_id} deleted")

    async def update_book(self, book: Book) -> Book:
        """Replace a book's editable fields on the server and return the stored record"""
        url = self.config.api_url(f"books/{book.id}")
        payload = {
            "title": book.title,
            "author": book.author,
            "isbn": book.isbn or "",
            "year": book.year or 0,
            "price": book.price,
        }
        try:
            response = await self._http.put(url, json=payload)
        except httpx.RequestError as e:
            logger.error(f"PUT {url} failed: {e}")
            raise CatalogFetchError(f"Failed to update book: {e}") from e

        if response.status_code == 404:
            raise BookNotFoundError(f"Book {book.id} not found")
        if not response.is_success:
            raise CatalogFetchError(self._error_message("Failed to update book", response))

        try:
            body = response.json()
        except ValueError:
            body = None
        # The server echoes the payload plus updated_at; id, category, reviews
        # and created_at are not filled in.
        merged = book.to_dict()
        if isinstance(body, dict):
            merged.update({k: v for k, v in body.items() if k in payload or k == "updated_at"})
        merged["id"] = book.id
        try:
            updated = Book.from_dict(merged)
        except ValueError as e:
            raise CatalogFetchError(f"Failed to update book: {e}") from e
        logger.info(f"Book {book.id} updated")
        return updated

    async def check_health(self) -> bool:
        """True when ``/health`` answers 200"""
        url = self.config.root_url("health")
        try:
            response = await self._http.get(url)
        except httpx.RequestError as e:
            logger.warning(f"Health check failed: {e}")
            return False
        return response.status_code == 200

    # ------------------------- Helpers ------------------------- #
    async def _get_json(self, url: str, failure: str) -> Any:
        try:
            response = await self._http.get_with_retry(url)
        except httpx.TimeoutException as e:
            logger.error(f"GET {url} timed out after {self.config.request_timeout}s")
            raise CatalogFetchError(f"{failure}: request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"GET {url} failed: {e}")
            raise CatalogFetchError(f"{failure}: {e}") from e

        if response.status_code == 404:
            raise BookNotFoundError(self._error_message(failure, response))
        if not response.is_success:
            logger.error(f"GET {url} returned {response.status_code} - {response.text}")
            raise CatalogFetchError(self._error_message(failure, response))

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GET {url} returned invalid JSON: {e}")
            raise CatalogFetchError(f"{failure}: invalid response body") from e

    @staticmethod
    def _parse_books(data: Any) -> List[Book]:
        # The server encodes an empty table as ``null``.
        if data is None:
            return []
        if not isinstance(data, list):
            raise CatalogFetchError("Failed to fetch books: expected a list of books")

        books: List[Book] = []
        for entry in data:
            try:
                books.append(Book.from_dict(entry))
            except ValueError as e:
                logger.warning(f"Skipping invalid book record: {e}")
        return books

    @staticmethod
    def _error_message(failure: str, response: httpx.Response) -> str:
        detail = None
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = body.get("error") or body.get("message")
        except ValueError:
            pass
        if detail:
            return f"{failure} ({response.status_code}): {detail}"
        return f"{failure} ({response.status_code})"
