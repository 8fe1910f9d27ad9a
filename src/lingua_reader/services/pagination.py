"""Pagination - fixed-size token pages and the vocabulary progress counter."""

import math
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

DEFAULT_PAGE_SIZE = 300


def page_of(token_index: int, page_size: int) -> int:
    _check_page_size(page_size)
    return token_index // page_size


def range_of(page: int, page_size: int, total: Optional[int] = None) -> Tuple[int, int]:
    """Half-open token range [start, end) of a page, clipped to total if given."""
    _check_page_size(page_size)
    start = page * page_size
    end = start + page_size
    if total is not None:
        start = min(start, total)
        end = min(end, total)
    return start, end


def total_pages(total_units: int, page_size: int) -> int:
    _check_page_size(page_size)
    return math.ceil(max(0, total_units) / page_size)


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ValueError(f"Page size must be positive, got {page_size}")


class PaginationController(QObject):
    """
    Tracks the page window shown over the token sequence.

    Two counters are kept separate:
    - token_count drives slicing (token_pages, current_range)
    - vocabulary_size (distinct normalized words) drives progress and
      vocabulary_pages

    page_changed(page, scroll_to_top) is emitted on every page change with
    scroll_to_top set, and on a page-size change that keeps the page number
    with scroll_to_top cleared.
    """

    page_changed = Signal(int, bool)

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        super().__init__()
        _check_page_size(page_size)
        self._page_size = page_size
        self.token_count = 0
        self.vocabulary_size = 0
        self.current_page = 0

    @property
    def page_size(self) -> int:
        return self._page_size

    def set_page_size(self, page_size: int) -> None:
        """Change page size, keeping the first token of the current page visible."""
        _check_page_size(page_size)
        first_token = self.current_page * self._page_size
        self._page_size = page_size
        page = self._clamp(page_of(first_token, page_size))
        # The window always changes; only a new page number scrolls to the top.
        moved = page != self.current_page
        self.current_page = page
        self.page_changed.emit(page, moved)

    def configure(
        self,
        token_count: int,
        vocabulary_size: int,
        current_page: int = 0,
        page_size: Optional[int] = None,
    ) -> None:
        """Reset counters for a new tokenization and show current_page."""
        if page_size is not None:
            _check_page_size(page_size)
            self._page_size = page_size
        self.token_count = token_count
        self.vocabulary_size = vocabulary_size
        self.current_page = self._clamp(current_page)
        self.page_changed.emit(self.current_page, True)

    @property
    def token_pages(self) -> int:
        return total_pages(self.token_count, self._page_size)

    @property
    def vocabulary_pages(self) -> int:
        return total_pages(self.vocabulary_size, self._page_size)

    @property
    def current_range(self) -> Tuple[int, int]:
        return range_of(self.current_page, self._page_size, self.token_count)

    def go_to(self, page: int) -> bool:
        if not 0 <= page < self.token_pages:
            return False
        return self._move_to(page)

    def next_page(self) -> bool:
        return self.go_to(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to(self.current_page - 1)

    def show_token(self, token_index: int) -> bool:
        """Make sure token_index is on the displayed page; True if the page changed."""
        if not 0 <= token_index < self.token_count:
            return False
        return self._move_to(page_of(token_index, self._page_size))

    def progress(self, known: int) -> float:
        """Percentage of the article's vocabulary that is known."""
        if self.vocabulary_size <= 0:
            return 0.0
        return min(100.0, 100.0 * known / self.vocabulary_size)

    def _clamp(self, page: int) -> int:
        last = max(0, self.token_pages - 1)
        return min(max(0, page), last)

    def _move_to(self, page: int) -> bool:
        page = self._clamp(page)
        if page == self.current_page:
            return False
        self.current_page = page
        self.page_changed.emit(page, True)
        return True
