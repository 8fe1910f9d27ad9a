"""Shared fixtures: a Qt core application and a scriptable narration engine."""

from typing import List, Optional, Tuple

import pytest
from PySide6.QtCore import QCoreApplication

from lingua_reader.core import NarrationUnavailable
from lingua_reader.services import NarrationEngine


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Signals and thread pools need a QCoreApplication instance."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


class FakeNarrationEngine(NarrationEngine):
    """Records calls and lets tests emit engine events by hand."""

    def __init__(self, available: bool = True):
        super().__init__()
        self.available = available
        self.spoken: List[Tuple[str, Optional[str], float, float]] = []
        self.calls: List[str] = []
        self._next_id = 0

    def is_available(self) -> bool:
        return self.available

    def speak(self, text, voice_hint, rate, pitch) -> int:
        if not self.available:
            raise NarrationUnavailable("no voices")
        self._next_id += 1
        self.spoken.append((text, voice_hint, rate, pitch))
        self.calls.append("speak")
        return self._next_id

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def cancel(self) -> None:
        self.calls.append("cancel")

    @property
    def last_utterance(self) -> int:
        return self._next_id

    def word(self, char_index: int, utterance_id: Optional[int] = None) -> None:
        self.signals.boundary.emit(utterance_id or self._next_id, char_index)

    def finish(self, utterance_id: Optional[int] = None) -> None:
        self.signals.finished.emit(utterance_id or self._next_id)

    def fail(self, message: str, utterance_id: Optional[int] = None) -> None:
        self.signals.failed.emit(utterance_id or self._next_id, message)


@pytest.fixture
def fake_engine():
    return FakeNarrationEngine()


@pytest.fixture
def unavailable_engine():
    return FakeNarrationEngine(available=False)


class SyncThreadPool:
    """Runs workers immediately on the calling thread, or defers them on request."""

    def __init__(self, defer: bool = False):
        self.defer = defer
        self.pending = []

    def start(self, worker) -> None:
        if self.defer:
            self.pending.append(worker)
        else:
            worker.run()

    def run_pending(self, index: int = 0) -> None:
        self.pending.pop(index).run()


@pytest.fixture
def sync_pool():
    return SyncThreadPool()


@pytest.fixture
def deferred_pool():
    return SyncThreadPool(defer=True)
