"""Unit tests for SuggestionCoordinator."""

from unittest.mock import MagicMock

import pytest

from lingua_reader.coordinators import SuggestionCoordinator
from lingua_reader.services import SuggestionResult


@pytest.fixture
def service():
    mock = MagicMock()
    mock.suggest.side_effect = lambda word, source_lang, target_lang: SuggestionResult(
        suggestions=[f"{word}-{target_lang}"], provider="test"
    )
    return mock


@pytest.fixture
def recorded():
    return {"loading": [], "ready": [], "failed": []}


def connect(coordinator, recorded):
    coordinator.suggestions_loading.connect(recorded["loading"].append)
    coordinator.suggestions_ready.connect(lambda wid, s: recorded["ready"].append((wid, s)))
    coordinator.suggestions_failed.connect(lambda wid, m: recorded["failed"].append((wid, m)))


def test_requires_service():
    with pytest.raises(ValueError):
        SuggestionCoordinator(None)


def test_request_delivers_suggestions(service, sync_pool, recorded):
    coordinator = SuggestionCoordinator(service, thread_pool=sync_pool)
    connect(coordinator, recorded)

    coordinator.request(7, "chien", "fr", "en")

    assert recorded["loading"] == [7]
    assert recorded["ready"] == [(7, ["chien-en"])]
    service.suggest.assert_called_once_with(word="chien", source_lang="fr", target_lang="en")


def test_newer_request_supersedes_older(service, deferred_pool, recorded):
    coordinator = SuggestionCoordinator(service, thread_pool=deferred_pool)
    connect(coordinator, recorded)

    coordinator.request(1, "chat", "fr", "en")
    coordinator.request(2, "chien", "fr", "en")
    deferred_pool.run_pending(1)
    deferred_pool.run_pending(0)

    assert recorded["ready"] == [(2, ["chien-en"])]
    assert coordinator.active_word_id == 2


def test_same_word_requested_twice_keeps_latest_only(service, deferred_pool, recorded):
    coordinator = SuggestionCoordinator(service, thread_pool=deferred_pool)
    connect(coordinator, recorded)

    coordinator.request(3, "chat", "fr", "en")
    coordinator.request(3, "chat", "fr", "en")

    # The first request's result arrives late under an outdated request id.
    coordinator._handle_result(SuggestionResult(suggestions=["old"]), 3, 1)
    deferred_pool.run_pending(1)

    assert recorded["ready"] == [(3, ["chat-en"])]


def test_cancel_drops_pending_result(service, deferred_pool, recorded):
    coordinator = SuggestionCoordinator(service, thread_pool=deferred_pool)
    connect(coordinator, recorded)

    coordinator.request(4, "chat", "fr", "en")
    coordinator.cancel()
    deferred_pool.run_pending()

    assert recorded["ready"] == []
    assert coordinator.active_word_id is None


def test_error_result_yields_empty_list(sync_pool, recorded):
    service = MagicMock()
    service.suggest.return_value = SuggestionResult(provider="test", error="offline")
    coordinator = SuggestionCoordinator(service, thread_pool=sync_pool)
    connect(coordinator, recorded)

    coordinator.request(5, "chat", "fr", "en")

    assert recorded["ready"] == [(5, [])]
    assert recorded["failed"] == []


def test_worker_exception_reports_failure(sync_pool, recorded):
    service = MagicMock()
    service.suggest.side_effect = RuntimeError("boom")
    coordinator = SuggestionCoordinator(service, thread_pool=sync_pool)
    connect(coordinator, recorded)

    coordinator.request(6, "chat", "fr", "en")

    assert recorded["failed"][0][0] == 6
    assert "boom" in recorded["failed"][0][1]
    assert recorded["ready"] == [(6, [])]
