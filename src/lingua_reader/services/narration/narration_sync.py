"""Narration Sync - turns engine boundary events into page changes and highlights."""

import logging
from typing import Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot

from lingua_reader.core import NarrationUnavailable
from lingua_reader.services.narration.narration_engine import (
    NarrationEngine,
    NarrationState,
    VoiceParams,
)
from lingua_reader.services.pagination import page_of
from lingua_reader.services.text_processing import NOT_FOUND, OffsetIndex

logger = logging.getLogger(__name__)


class NarrationSync(QObject):
    """
    State machine over one narration engine: IDLE -> SPEAKING <-> PAUSED -> IDLE.

    Works purely on token-array indices. The OffsetIndex captured by start()
    is the only one boundary events are resolved against; events carrying a
    different utterance id are dropped.

    Signals:
        page_change_requested(page): the narrated token left the displayed page.
            Always emitted before the matching highlight_changed.
        highlight_changed(index): token being spoken, or -1 to clear.
        state_changed(state): NarrationState value.
        availability_changed(available): engine became (un)usable.
        failed(message): engine reported an error; state is IDLE again.
    """

    page_change_requested = Signal(int)
    highlight_changed = Signal(int)
    state_changed = Signal(str)
    availability_changed = Signal(bool)
    failed = Signal(str)

    def __init__(
        self,
        engine: NarrationEngine,
        connection_type: Qt.ConnectionType = Qt.QueuedConnection,
    ):
        super().__init__()
        if engine is None:
            raise ValueError("NarrationEngine must not be None")

        self._engine = engine
        self._state = NarrationState.IDLE
        self._index: Optional[OffsetIndex] = None
        self._page_size = 1
        self._displayed_page = 0
        self._utterance_id: Optional[int] = None
        self.current_index = NOT_FOUND

        signals = engine.signals
        signals.boundary.connect(self.on_boundary, type=connection_type)
        signals.finished.connect(self.on_finished, type=connection_type)
        signals.failed.connect(self.on_failed, type=connection_type)

    @property
    def state(self) -> NarrationState:
        return self._state

    @property
    def available(self) -> bool:
        return self._engine.is_available()

    @property
    def utterance_id(self) -> Optional[int]:
        return self._utterance_id

    def start(
        self,
        offset_index: OffsetIndex,
        page_size: int,
        displayed_page: int,
        voice: VoiceParams,
    ) -> bool:
        """Speak the whole token sequence of offset_index from the beginning.

        Returns False (and reports unavailability) when the engine cannot speak.
        """
        self.stop()
        if not self.available:
            self.availability_changed.emit(False)
            return False

        self._index = offset_index
        self._page_size = page_size
        self._displayed_page = displayed_page
        try:
            self._utterance_id = self._engine.speak(
                offset_index.narration_text, voice.voice_hint, voice.rate, voice.pitch
            )
        except NarrationUnavailable as exc:
            logger.warning("Narration unavailable: %s", exc)
            self._index = None
            self.availability_changed.emit(False)
            return False

        self._set_state(NarrationState.SPEAKING)
        return True

    def pronounce(self, text: str, voice: VoiceParams) -> bool:
        """Speak a single word outside the article utterance; no highlighting."""
        self.stop()
        if not self.available:
            self.availability_changed.emit(False)
            return False
        try:
            self._engine.speak(text, voice.voice_hint, voice.rate, voice.pitch)
        except NarrationUnavailable as exc:
            logger.warning("Narration unavailable: %s", exc)
            self.availability_changed.emit(False)
            return False
        return True

    def pause(self) -> None:
        if self._state is NarrationState.SPEAKING:
            self._engine.pause()
            self._set_state(NarrationState.PAUSED)

    def resume(self) -> None:
        if self._state is NarrationState.PAUSED:
            self._engine.resume()
            self._set_state(NarrationState.SPEAKING)

    def stop(self) -> None:
        """Cancel any utterance. Safe to call repeatedly or when idle."""
        if self._state is NarrationState.IDLE:
            return
        self._engine.cancel()
        self._reset()

    def set_displayed_page(self, page: int) -> None:
        """Keep track of pages the learner navigates to while narration runs."""
        self._displayed_page = page

    @Slot(int, int)
    def on_boundary(self, utterance_id: int, char_index: int) -> None:
        if self._state is NarrationState.IDLE or utterance_id != self._utterance_id:
            logger.debug("Ignoring boundary for stale utterance %s", utterance_id)
            return

        token_index = self._index.token_index_at_offset(char_index)
        if token_index == NOT_FOUND:
            return

        page = page_of(token_index, self._page_size)
        if page != self._displayed_page:
            self._displayed_page = page
            self.page_change_requested.emit(page)

        self.current_index = token_index
        self.highlight_changed.emit(token_index)

    @Slot(int)
    def on_finished(self, utterance_id: int) -> None:
        if utterance_id != self._utterance_id:
            return
        self._reset()

    @Slot(int, str)
    def on_failed(self, utterance_id: int, message: str) -> None:
        if utterance_id != self._utterance_id:
            return
        logger.warning("Narration failed: %s", message)
        self._reset()
        self.failed.emit(message)

    def _reset(self) -> None:
        self._index = None
        self._utterance_id = None
        had_highlight = self.current_index != NOT_FOUND
        self.current_index = NOT_FOUND
        self._set_state(NarrationState.IDLE)
        if had_highlight:
            self.highlight_changed.emit(NOT_FOUND)

    def _set_state(self, state: NarrationState) -> None:
        if state is not self._state:
            self._state = state
            self.state_changed.emit(state.value)
