"""Tests for page arithmetic and PaginationController."""

import pytest

from lingua_reader.services.pagination import (
    PaginationController,
    page_of,
    range_of,
    total_pages,
)


class TestPageArithmetic:
    def test_seven_tokens_in_pages_of_two(self):
        assert total_pages(7, 2) == 4
        assert range_of(3, 2, 7) == (6, 7)
        assert range_of(0, 2, 7) == (0, 2)

    def test_page_of(self):
        assert page_of(0, 300) == 0
        assert page_of(299, 300) == 0
        assert page_of(300, 300) == 1

    @pytest.mark.parametrize("size", [1, 2, 7, 300])
    def test_first_token_of_each_page_maps_back(self, size):
        for page in range(total_pages(1000, size)):
            assert page_of(range_of(page, size, 1000)[0], size) == page

    def test_range_without_total(self):
        assert range_of(2, 10) == (20, 30)

    def test_empty_text_has_no_pages(self):
        assert total_pages(0, 300) == 0
        assert range_of(0, 300, 0) == (0, 0)

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_page_size_rejected(self, size):
        with pytest.raises(ValueError):
            total_pages(10, size)
        with pytest.raises(ValueError):
            page_of(1, size)
        with pytest.raises(ValueError):
            range_of(0, size)


@pytest.fixture
def controller():
    pagination = PaginationController(page_size=2)
    pagination.configure(token_count=7, vocabulary_size=3)
    return pagination


@pytest.fixture
def pages(controller):
    emitted = []
    controller.page_changed.connect(lambda page, scroll: emitted.append((page, scroll)))
    return emitted


class TestPaginationController:
    def test_configure_emits_initial_page(self):
        pagination = PaginationController(page_size=2)
        emitted = []
        pagination.page_changed.connect(lambda page, scroll: emitted.append((page, scroll)))

        pagination.configure(token_count=7, vocabulary_size=3, current_page=9)

        assert pagination.current_page == 3
        assert emitted == [(3, True)]

    def test_next_and_previous(self, controller, pages):
        assert controller.next_page()
        assert controller.current_range == (2, 4)
        assert controller.previous_page()
        assert not controller.previous_page()
        assert pages == [(1, True), (0, True)]

    def test_next_stops_at_last_page(self, controller, pages):
        controller.go_to(3)
        assert not controller.next_page()
        assert controller.current_range == (6, 7)
        assert pages == [(3, True)]

    def test_go_to_out_of_range_is_ignored(self, controller, pages):
        assert not controller.go_to(4)
        assert not controller.go_to(-1)
        assert controller.current_page == 0
        assert pages == []

    def test_go_to_same_page_emits_nothing(self, controller, pages):
        assert not controller.go_to(0)
        assert pages == []

    def test_show_token_moves_to_its_page(self, controller, pages):
        assert controller.show_token(5)
        assert controller.current_page == 2
        assert not controller.show_token(4)
        assert not controller.show_token(7)
        assert pages == [(2, True)]

    def test_page_size_change_keeps_first_token_visible(self, controller, pages):
        controller.go_to(2)
        controller.set_page_size(3)
        # First token was 4, which lives on page 1 of size 3.
        assert controller.current_page == 1
        assert controller.current_range == (3, 6)
        assert pages[-1] == (1, True)

    def test_page_size_change_on_same_page_does_not_scroll(self, controller, pages):
        controller.set_page_size(5)
        assert pages == [(0, False)]
        assert controller.token_pages == 2

    def test_vocabulary_counter_is_separate(self, controller):
        assert controller.token_pages == 4
        assert controller.vocabulary_pages == 2

    def test_progress(self, controller):
        assert controller.progress(0) == 0.0
        assert controller.progress(3) == 100.0
        assert controller.progress(10) == 100.0
        assert controller.progress(1) == pytest.approx(33.333, rel=1e-3)

    def test_progress_without_vocabulary(self):
        assert PaginationController().progress(5) == 0.0

    def test_invalid_page_size(self, controller):
        with pytest.raises(ValueError):
            controller.set_page_size(0)
        with pytest.raises(ValueError):
            PaginationController(page_size=-1)
