import asyncio

from catalog_browser.browser import CatalogBrowser
from catalog_browser.view import FetchError, Loading, Ready


def test_refresh_loads_store_and_becomes_ready(fake_fetcher):
    browser = CatalogBrowser(fake_fetcher)
    assert isinstance(browser.view(), Loading)

    view = asyncio.run(browser.refresh())

    assert isinstance(view, Ready)
    assert view.total_count == 7
    assert fake_fetcher.calls == 1


def test_refresh_failure_surfaces_message(fetcher_factory):
    browser = CatalogBrowser(fetcher_factory(error="Failed to fetch books (500)"))
    view = asyncio.run(browser.refresh())
    assert view == FetchError("Failed to fetch books (500)")
    assert not browser.store.is_loaded


def test_closed_browser_discards_late_result(fake_fetcher):
    browser = CatalogBrowser(fake_fetcher)

    async def close_then_finish():
        task = asyncio.ensure_future(browser.refresh())
        browser.close()
        return await task

    view = asyncio.run(close_then_finish())
    assert not browser.store.is_loaded
    assert isinstance(view, Loading)


def test_closed_browser_discards_late_error(fetcher_factory):
    browser = CatalogBrowser(fetcher_factory(error="boom"))
    browser.close()
    asyncio.run(browser.refresh())
    assert browser.projection.error_message is None


def test_refresh_after_close_keeps_ready_view(fake_fetcher):
    browser = CatalogBrowser(fake_fetcher)
    asyncio.run(browser.refresh())
    browser.close()

    view = asyncio.run(browser.refresh())

    assert isinstance(view, Ready)
    assert view.total_count == 7
    assert fake_fetcher.calls == 1


def test_search_and_category_reset_page(fetcher_factory, book_factory):
    books = [book_factory(i, f"Book {i}") for i in range(1, 40)]
    browser = CatalogBrowser(fetcher_factory(books))
    asyncio.run(browser.refresh())

    assert browser.go_to_page(3).page_index == 3
    assert browser.search("book").page_index == 1

    browser.go_to_page(2)
    assert browser.filter_category("fiction").page_index == 1


def test_sort_keeps_page(fetcher_factory, book_factory):
    books = [book_factory(i, price=i) for i in range(1, 40)]
    browser = CatalogBrowser(fetcher_factory(books))
    asyncio.run(browser.refresh())

    browser.go_to_page(2)
    result = browser.sort_by("price-low")
    assert result.page_index == 2
    assert [b.price for b in result.visible_page][0] == 13


def test_out_of_range_page_is_written_back(fake_fetcher):
    browser = CatalogBrowser(fake_fetcher)
    asyncio.run(browser.refresh())

    result = browser.go_to_page(99)
    assert result.page_index == 1
    assert browser.state.page_index == 1
    assert len(result.visible_page) == 7


def test_next_and_previous_page(fetcher_factory, book_factory):
    books = [book_factory(i) for i in range(1, 26)]
    browser = CatalogBrowser(fetcher_factory(books))
    asyncio.run(browser.refresh())

    assert browser.next_page().page_index == 2
    assert browser.next_page().page_index == 3
    # Past the end stays on the last page
    assert browser.next_page().page_index == 3
    assert browser.previous_page().page_index == 2


def test_result_is_recomputed_after_refresh(fetcher_factory, book_factory):
    fetcher = fetcher_factory([book_factory(1)])
    browser = CatalogBrowser(fetcher)
    asyncio.run(browser.refresh())
    assert browser.result.total_count == 1

    fetcher.books = [book_factory(1), book_factory(2)]
    asyncio.run(browser.refresh())
    assert browser.result.total_count == 2


def test_result_is_cached_for_unchanged_input(fake_fetcher):
    browser = CatalogBrowser(fake_fetcher)
    asyncio.run(browser.refresh())
    assert browser.result is browser.result
