from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

BookId = Union[int, str]


class BookRecord(BaseModel):
    """Wire shape of one entry of ``GET /api/v1/books``"""

    id: Union[int, str]
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: Optional[str] = None
    reviews: Optional[int] = Field(default=None, ge=0)
    isbn: Optional[str] = None
    year: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", "price", "reviews", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("boolean is not a valid value")
        return value

    @field_validator("id", mode="before")
    @classmethod
    def _non_empty_id(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("id must not be empty")
        return value

    @field_validator("title", "author", "category", "isbn", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("year", mode="before")
    @classmethod
    def _optional_year(cls, value):
        # The backend sends 0 for an unknown year
        return None if value in ("", 0) else value


@dataclass(frozen=True)
class Book:
    """Represents a single book record served by the bookstore API."""

    id: BookId
    title: str
    author: str
    price: float
    category: Optional[str] = None
    reviews: int = 0
    # Backend fields, passed through untouched
    isbn: Optional[str] = None
    year: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.title} by {self.author} ({self.price:.2f})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "price": self.price,
            "category": self.category,
            "reviews": self.reviews,
            "isbn": self.isbn,
            "year": self.year,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        """Build a Book from one JSON object of the books endpoint.

        ``category`` and ``reviews`` may be missing or null. Raises
        ValueError (pydantic's ValidationError is one) when a required field
        is missing or out of range.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Book record must be an object, got {type(data).__name__}.")
        record = BookRecord.model_validate(data)
        return Book(
            id=record.id,
            title=record.title,
            author=record.author,
            price=record.price,
            category=record.category or None,
            reviews=record.reviews or 0,
            isbn=record.isbn or None,
            year=record.year,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
