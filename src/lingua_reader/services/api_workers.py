"""Async workers for non-blocking suggestion lookups using Qt threading."""

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from lingua_reader.services.translation import SuggestionResult, SuggestionService


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    suggestion_result = Signal(object)  # SuggestionResult


class SuggestionWorker(QRunnable):
    """
    Worker that runs a suggestion lookup in a background thread.

    Uses Qt's thread pool for efficient thread management.
    """

    def __init__(
        self,
        suggestion_service: SuggestionService,
        word: str,
        source_lang: str,
        target_lang: str,
    ):
        super().__init__()
        self.suggestion_service = suggestion_service
        self.word = word
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the lookup in the background thread."""
        try:
            result = self.suggestion_service.suggest(
                word=self.word,
                source_lang=self.source_lang,
                target_lang=self.target_lang,
            )
            if not isinstance(result, SuggestionResult):
                result = SuggestionResult(suggestions=list(result or []))
            self.signals.suggestion_result.emit(result)
        except Exception as e:
            # Services are best-effort; anything that slips through is reported, not raised
            self.signals.error.emit(f"Unexpected suggestion error: {e}")
        finally:
            self.signals.finished.emit()
