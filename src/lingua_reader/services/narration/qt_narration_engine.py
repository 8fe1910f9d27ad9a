"""Qt Narration Engine - NarrationEngine backed by QtTextToSpeech."""

import logging
from typing import Optional

from PySide6.QtCore import QLocale
from PySide6.QtTextToSpeech import QTextToSpeech

from lingua_reader.core import NarrationUnavailable
from lingua_reader.services.narration.narration_engine import NarrationEngine

logger = logging.getLogger(__name__)


def _to_qt_scale(value: float) -> float:
    """Map a Web Speech rate/pitch (1.0 = normal) onto Qt's -1.0..1.0 range."""
    return max(-1.0, min(1.0, value - 1.0))


class QtNarrationEngine(NarrationEngine):
    """
    Speech via the platform engine exposed by QTextToSpeech.

    Word boundaries come from the sayingWord signal (Qt 6.6+). Engines that
    do not report words still speak; they just never move the highlight.
    """

    def __init__(self, engine_name: Optional[str] = None):
        super().__init__()
        self._tts: Optional[QTextToSpeech] = None
        self._utterance_counter = 0
        self._active_utterance: Optional[int] = None
        self._was_speaking = False

        if not QTextToSpeech.availableEngines():
            logger.warning("No text-to-speech engines installed; narration disabled")
            return

        self._tts = QTextToSpeech(engine_name) if engine_name else QTextToSpeech()
        self._tts.sayingWord.connect(self._on_saying_word)
        self._tts.stateChanged.connect(self._on_state_changed)
        self._tts.errorOccurred.connect(self._on_error)

    def is_available(self) -> bool:
        if self._tts is None:
            return False
        if self._tts.state() == QTextToSpeech.State.Error:
            return False
        return bool(self._tts.availableVoices())

    def speak(self, text: str, voice_hint: Optional[str], rate: float, pitch: float) -> int:
        if not self.is_available():
            raise NarrationUnavailable("No speech synthesis voice available")

        self.cancel()
        if voice_hint:
            self._apply_voice(voice_hint)
        self._tts.setRate(_to_qt_scale(rate))
        self._tts.setPitch(_to_qt_scale(pitch))

        self._utterance_counter += 1
        self._active_utterance = self._utterance_counter
        self._was_speaking = False
        self._tts.say(text)
        return self._active_utterance

    def pause(self) -> None:
        if self._tts is not None:
            self._tts.pause()

    def resume(self) -> None:
        if self._tts is not None:
            self._tts.resume()

    def cancel(self) -> None:
        self._active_utterance = None
        if self._tts is not None and self._tts.state() != QTextToSpeech.State.Ready:
            self._tts.stop()

    def _apply_voice(self, voice_hint: str) -> None:
        locale = QLocale(voice_hint.replace("-", "_"))
        self._tts.setLocale(locale)
        voices = self._tts.availableVoices()
        if voices:
            self._tts.setVoice(voices[0])

    def _on_saying_word(self, word: str, request_id: int, start: int, length: int) -> None:
        if self._active_utterance is not None:
            self.signals.boundary.emit(self._active_utterance, start)

    def _on_state_changed(self, state) -> None:
        if state == QTextToSpeech.State.Speaking:
            self._was_speaking = True
        elif state == QTextToSpeech.State.Ready and self._was_speaking:
            utterance = self._active_utterance
            self._active_utterance = None
            self._was_speaking = False
            if utterance is not None:
                self.signals.finished.emit(utterance)

    def _on_error(self, reason, message: str) -> None:
        logger.error("Text-to-speech error (%s): %s", reason, message)
        utterance = self._active_utterance
        self._active_utterance = None
        if utterance is not None:
            self.signals.failed.emit(utterance, message)
