"""Suggestion Coordinator - fetches translation suggestions for the selected word."""

import logging
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from lingua_reader.services import SuggestionService, SuggestionWorker

logger = logging.getLogger(__name__)


class _SuggestionRequest(QObject):
    """Helper class to hold request context and route worker results back safely."""

    def __init__(self, word_id: int, request_id: int, parent: "SuggestionCoordinator"):
        super().__init__()
        self.word_id = word_id
        self.request_id = request_id
        self.parent_ref = parent

    @Slot(object)
    def on_result(self, result):
        coordinator = self.parent_ref
        if coordinator:
            try:
                coordinator._handle_result(result, self.word_id, self.request_id)
            except RuntimeError:
                # Coordinator might be destroyed, ignore
                pass

    @Slot(str)
    def on_error(self, error: str):
        coordinator = self.parent_ref
        if coordinator:
            try:
                coordinator._handle_error(error, self.word_id, self.request_id)
            except RuntimeError:
                pass


class SuggestionCoordinator(QObject):
    """
    Runs suggestion lookups off the GUI thread, one active request at a time.

    A newer request supersedes older ones: results are delivered only if they
    belong to the word id (and request) that is still active.
    """

    suggestions_loading = Signal(int)  # word_id
    suggestions_ready = Signal(int, list)  # word_id, suggestions
    suggestions_failed = Signal(int, str)  # word_id, message

    def __init__(
        self,
        suggestion_service: SuggestionService,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()
        if suggestion_service is None:
            raise ValueError("SuggestionService must not be None")

        self.suggestion_service = suggestion_service
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        self._active_word_id: Optional[int] = None
        self._active_request_id: Optional[int] = None
        self._request_counter = 0
        # Keep the helper alive while its worker runs
        self._request_helper: Optional[_SuggestionRequest] = None

    @property
    def active_word_id(self) -> Optional[int]:
        return self._active_word_id

    def request(self, word_id: int, word: str, source_lang: str, target_lang: str) -> None:
        """Start fetching suggestions for word, superseding any pending request."""
        self._request_counter += 1
        request_id = self._request_counter
        self._active_word_id = word_id
        self._active_request_id = request_id

        self.suggestions_loading.emit(word_id)

        worker = SuggestionWorker(
            suggestion_service=self.suggestion_service,
            word=word,
            source_lang=source_lang,
            target_lang=target_lang,
        )
        helper = _SuggestionRequest(word_id, request_id, self)
        self._request_helper = helper
        worker.signals.suggestion_result.connect(helper.on_result)
        worker.signals.error.connect(helper.on_error)

        self.thread_pool.start(worker)

    def cancel(self) -> None:
        """Invalidate the pending request; its result will be dropped."""
        self._active_word_id = None
        self._active_request_id = None

    def _is_current(self, word_id: int, request_id: int) -> bool:
        return word_id == self._active_word_id and request_id == self._active_request_id

    def _handle_result(self, result, word_id: int, request_id: int) -> None:
        if not self._is_current(word_id, request_id):
            logger.debug(
                "Ignoring stale suggestions for word %s (active %s)", word_id, self._active_word_id
            )
            return
        if result.is_error:
            logger.info("No suggestions for word %s: %s", word_id, result.error)
        self.suggestions_ready.emit(word_id, list(result.suggestions))

    def _handle_error(self, error: str, word_id: int, request_id: int) -> None:
        if not self._is_current(word_id, request_id):
            return
        logger.warning("Suggestion worker failed for word %s: %s", word_id, error)
        self.suggestions_failed.emit(word_id, error)
        self.suggestions_ready.emit(word_id, [])
