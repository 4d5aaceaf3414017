import os
import json
from typing import Sequence
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from catalog_browser.book import Book
from catalog_browser.config import settings
from catalog_browser.query import ALL_CATEGORIES, QueryResult, QueryState
from catalog_browser.view import ERROR, LOADING, ViewState

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "CATALOG_CLI_OUTPUT"
OUTPUT_MODES = ("plain", "json", "rich")

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"

def _format_price(price: float) -> str:
    return f"{price:.2f}"

def print_book_list(books: Sequence[Book], title: str = "Books") -> None:
    """Print books in the current output mode.
    - plain: 'ID - Title by Author (price)' lines, or 'No books found.'
    - json: JSON array of book objects
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print("No books found.")
        return

    if mode == "rich":
        table = Table(title=f"📚 {title}", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Category", style="green")
        table.add_column("Price", justify="right")
        table.add_column("Reviews", justify="right")
        for b in books:
            table.add_row(
                str(b.id),
                escape(b.title),
                escape(b.author),
                escape(b.category or "-"),
                _format_price(b.price),
                str(b.reviews),
            )
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b}")

def print_page_result(result: QueryResult, state: QueryState) -> None:
    """Print one page of query results followed by pagination info."""
    mode = get_output_mode()

    if mode == "json":
        payload = {
            "search": state.search_term,
            "category": state.category,
            "sort": state.sort_key,
            "page": result.page_index,
            "page_size": result.page_size,
            "total": result.total_count,
            "total_pages": result.total_pages,
            "items": [b.to_dict() for b in result.visible_page],
        }
        print(json.dumps(payload, ensure_ascii=False))
        return

    print_book_list(result.visible_page)

    summary = f"Found {result.total_count} books"
    if state.category != ALL_CATEGORIES:
        summary += f" in {state.category}"
    footer = f"Page {result.page_index}/{result.total_pages}"
    if mode == "rich":
        _console.print(f"[dim]{escape(summary)} · {footer}[/]")
    else:
        print(summary)
        print(footer)

def print_book_detail(book: Book) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]Title:[/] {escape(book.title)}\n"
            f"[bold]Author:[/] {escape(book.author)}\n"
            f"[bold]Category:[/] {escape(book.category or '-')}\n"
            f"[bold]Price:[/] {_format_price(book.price)}\n"
            f"[bold]Reviews:[/] {book.reviews}\n"
            f"[bold]ISBN:[/] {escape(book.isbn or '-')}",
            title=f"📖 Book {book.id}",
            border_style="green"
        ))
    else:
        print(f"ID: {book.id}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Category: {book.category or '-'}")
        print(f"Price: {_format_price(book.price)}")
        print(f"Reviews: {book.reviews}")
        if book.isbn:
            print(f"ISBN: {book.isbn}")
        if book.year:
            print(f"Year: {book.year}")

def print_view(view: ViewState, state: QueryState) -> None:
    """Render whichever of loading / error / ready applies."""
    if view.kind == LOADING:
        print("Loading books...")
    elif view.kind == ERROR:
        if get_output_mode() == "json":
            print(json.dumps({"error": view.message}, ensure_ascii=False))
        else:
            print(f"Error: {view.message}")
    else:
        print_page_result(view.result, state)
