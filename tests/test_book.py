import pytest

from catalog_browser.book import Book


def test_from_dict_full_record():
    book = Book.from_dict({
        "id": 3,
        "title": " Dune ",
        "author": "Frank Herbert",
        "isbn": "9780441013593",
        "year": 1965,
        "price": 350.5,
        "category": "Fiction",
        "reviews": 12,
        "created_at": "2024-01-01T00:00:00Z",
    })
    assert book.id == 3
    assert book.title == "Dune"
    assert book.price == 350.5
    assert book.category == "Fiction"
    assert book.reviews == 12
    assert book.year == 1965
    assert book.created_at == "2024-01-01T00:00:00Z"


def test_from_dict_tolerates_missing_optional_fields():
    book = Book.from_dict({"id": "b-1", "title": "T", "author": "A", "price": 0})
    assert book.category is None
    assert book.reviews == 0
    assert book.isbn is None
    assert book.year is None


def test_null_reviews_and_blank_category():
    book = Book.from_dict({"id": 1, "title": "T", "author": "A", "price": 1, "reviews": None, "category": "  "})
    assert book.reviews == 0
    assert book.category is None


@pytest.mark.parametrize("record", [
    {"title": "T", "author": "A", "price": 1},
    {"id": 1, "title": "", "author": "A", "price": 1},
    {"id": 1, "title": "T", "author": "  ", "price": 1},
    {"id": 1, "title": "T", "author": "A", "price": -1},
    {"id": 1, "title": "T", "author": "A", "price": "cheap"},
    {"id": 1, "title": "T", "author": "A"},
    {"id": 1, "title": "T", "author": "A", "price": 1, "reviews": -2},
    {"id": True, "title": "T", "author": "A", "price": 1},
])
def test_from_dict_rejects_invalid_records(record):
    with pytest.raises(ValueError):
        Book.from_dict(record)


def test_from_dict_rejects_non_objects():
    with pytest.raises(ValueError):
        Book.from_dict(["not", "a", "dict"])


def test_to_dict_round_trip():
    book = Book(id=9, title="T", author="A", price=2.5, category="art", reviews=4)
    assert Book.from_dict(book.to_dict()) == book


def test_book_is_immutable():
    book = Book(id=1, title="T", author="A", price=1)
    with pytest.raises(AttributeError):
        book.title = "Other"


def test_str_is_the_listing_line():
    book = Book(id=1, title="Dune", author="Frank Herbert", price=30)
    assert str(book) == "Dune by Frank Herbert (30.00)"
