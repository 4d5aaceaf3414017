from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from catalog_browser.query import QueryResult

LOADING = "loading"
ERROR = "error"
READY = "ready"


@dataclass(frozen=True)
class Loading:
    kind: str = LOADING


@dataclass(frozen=True)
class FetchError:
    message: str
    kind: str = ERROR


@dataclass(frozen=True)
class Ready:
    result: QueryResult
    kind: str = READY

    @property
    def visible_page(self):
        return self.result.visible_page

    @property
    def total_pages(self) -> int:
        return self.result.total_pages

    @property
    def total_count(self) -> int:
        return self.result.total_count


ViewState = Union[Loading, FetchError, Ready]


class ViewProjection:
    """Tracks the fetch lifecycle and maps it to a display state.

    Starts in ``loading``. ``fetch_succeeded`` moves to ``ready``,
    ``fetch_failed`` to ``error``; ``begin_fetch`` re-enters ``loading`` from
    any state. The ready state is built on demand from the latest query
    result, so it never shows a stale page.
    """

    def __init__(self) -> None:
        self._status = LOADING
        self._error: Optional[str] = None

    @property
    def status(self) -> str:
        return self._status

    @property
    def error_message(self) -> Optional[str]:
        return self._error

    def begin_fetch(self) -> None:
        self._status = LOADING
        self._error = None

    def fetch_succeeded(self) -> None:
        self._status = READY
        self._error = None

    def fetch_failed(self, message: str) -> None:
        self._status = ERROR
        self._error = message or "Failed to fetch books"

    def project(self, result: QueryResult) -> ViewState:
        if self._status == READY:
            return Ready(result)
        if self._status == ERROR:
            return FetchError(self._error or "Failed to fetch books")
        return Loading()
