import asyncio
import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from catalog_browser.book import Book
from catalog_browser.browser import CatalogBrowser
from catalog_browser.config import settings
from catalog_browser.query import CATEGORIES, SORT_KEYS, SORT_NEWEST, ALL_CATEGORIES
from catalog_browser.services.catalog_service import BookNotFoundError, CatalogFetchError, CatalogService
from catalog_browser.ui_helpers import (
    print_book_detail,
    print_book_list,
    print_view,
    set_output_mode,
)
from catalog_browser.view import READY

APP_NAME = settings.app_name

console = Console()


def _make_service() -> CatalogService:
    return CatalogService(settings)


def _run(coro):
    return asyncio.run(coro)


async def _load(browser: CatalogBrowser) -> None:
    try:
        await browser.refresh()
    finally:
        await browser.fetcher.close()


# --- Typer CLI Application ---
app = typer.Typer(help="Browse the bookstore catalog")

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global CLI options (output mode, logging)."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if output:
        set_output_mode(output)

@app.command("browse")
def cli_browse(
    search: str = typer.Option("", "--search", "-s", help="Match text in title or author"),
    category: str = typer.Option(ALL_CATEGORIES, "--category", "-c", help=f"One of: {', '.join(CATEGORIES)}"),
    sort: str = typer.Option(SORT_NEWEST, "--sort", help=f"One of: {', '.join(SORT_KEYS)}"),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
):
    """Fetch the catalog and show one page of results."""
    browser = CatalogBrowser(_make_service())
    _run(_load(browser))

    browser.search(search)
    browser.filter_category(category)
    browser.sort_by(sort)
    browser.go_to_page(page)

    view = browser.view()
    print_view(view, browser.state)
    if view.kind != READY:
        raise typer.Exit(code=1)

@app.command("new")
def cli_new():
    """Show the most recently added books."""
    async def _fetch():
        async with _make_service() as service:
            return await service.fetch_new_books()

    try:
        books = _run(_fetch())
    except CatalogFetchError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print_book_list(books, title="New books")

@app.command("show")
def cli_show(book_id: str):
    """Show a single book by id."""
    async def _fetch():
        async with _make_service() as service:
            return await service.fetch_book(book_id)

    try:
        book = _run(_fetch())
    except CatalogFetchError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    if book is None:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    print_book_detail(book)

@app.command("delete")
def cli_delete(
    book_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a book (admin)."""
    if not yes and not Confirm.ask(f"Delete book {book_id}?", default=False):
        print("Delete cancelled.")
        return

    async def _delete():
        async with _make_service() as service:
            await service.delete_book(book_id)

    try:
        _run(_delete())
    except BookNotFoundError:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    except CatalogFetchError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Book {book_id} has been deleted.")

@app.command("edit")
def cli_edit(
    book_id: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    price: Optional[float] = typer.Option(None, "--price", help="New price"),
    isbn: Optional[str] = typer.Option(None, "--isbn", help="New ISBN"),
    year: Optional[int] = typer.Option(None, "--year", help="New publication year"),
):
    """Edit a book's details (admin)."""
    changes = {k: v for k, v in
               {"title": title, "author": author, "price": price, "isbn": isbn, "year": year}.items()
               if v is not None}
    if not changes:
        print("Nothing to update. Provide at least one field.")
        raise typer.Exit(code=1)

    async def _edit():
        async with _make_service() as service:
            book = await service.fetch_book(book_id)
            if book is None:
                raise BookNotFoundError(f"Book {book_id} not found")
            try:
                edited = Book.from_dict({**book.to_dict(), **changes})
            except ValueError as e:
                raise CatalogFetchError(f"Invalid value: {e}") from e
            return await service.update_book(edited)

    try:
        updated = _run(_edit())
    except BookNotFoundError:
        print(f"Book {book_id} not found.")
        raise typer.Exit(code=1)
    except CatalogFetchError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Updated: {updated}")

@app.command("categories")
def cli_categories():
    """List the available categories."""
    for category in CATEGORIES:
        print(category)

@app.command("health")
def cli_health():
    """Check whether the bookstore API is up."""
    async def _check():
        async with _make_service() as service:
            return await service.check_health()

    if _run(_check()):
        print(f"API at {settings.api_base_url} is healthy.")
    else:
        print(f"API at {settings.api_base_url} is unavailable.")
        raise typer.Exit(code=1)

@app.command("interactive")
def cli_interactive():
    """Browse the catalog with an interactive menu."""
    run_menu()


def run_menu():
    """Simple interactive menu; each choice mutates the query state and redraws the page."""
    browser = CatalogBrowser(_make_service())
    unused_client = True

    def reload() -> None:
        # Each event loop gets its own client; _load closes it afterwards.
        nonlocal unused_client
        if not unused_client:
            browser.fetcher = _make_service()
        unused_client = False
        with console.status("[bold green]Fetching books..."):
            _run(_load(browser))

    reload()

    def render_menu() -> None:
        menu_items = [
            ("1", "Search title / author", "🔎"),
            ("2", "Filter by category", "🔖"),
            ("3", "Sort", "🔄"),
            ("4", "Next page", "➡️"),
            ("5", "Previous page", "⬅️"),
            ("6", "Go to page", "🔢"),
            ("7", "Refresh", "♻️"),
            ("8", "Reset filters", "🧹"),
            ("0", "Exit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(
            table,
            title=APP_NAME,
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        ))

    try:
        while True:
            console.clear()
            state = browser.state
            console.print(
                f"[dim]search={state.search_term!r} category={state.category} "
                f"sort={state.sort_key} page={state.page_index}[/]"
            )
            print_view(browser.view(), state)
            render_menu()
            choice = Prompt.ask(
                "Choose an option",
                choices=["1", "2", "3", "4", "5", "6", "7", "8", "0"],
                default="4",
            ).strip()

            if choice == "1":
                browser.search(Prompt.ask("Search term", default=""))
            elif choice == "2":
                browser.filter_category(Prompt.ask("Category", choices=list(CATEGORIES), default=ALL_CATEGORIES))
            elif choice == "3":
                browser.sort_by(Prompt.ask("Sort by", choices=list(SORT_KEYS), default=SORT_NEWEST))
            elif choice == "4":
                browser.next_page()
            elif choice == "5":
                browser.previous_page()
            elif choice == "6":
                browser.go_to_page(IntPrompt.ask("Page", default=1))
            elif choice == "7":
                reload()
            elif choice == "8":
                browser.state.reset()
            elif choice == "0":
                console.print("[green]Goodbye![/]")
                break
    finally:
        browser.close()


def main():
    app()


if __name__ == "__main__":
    main()
