"""Narration Engine - abstract interface to an external text-to-speech engine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

LANG_MAP = {
    "en": "en-US",
    "pt": "pt-BR",
    "es": "es-ES",
    "fr": "fr-FR",
}


class NarrationState(str, Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


@dataclass(frozen=True)
class VoiceParams:
    """Voice settings in Web Speech units (rate and pitch are 1.0 at normal)."""

    voice_hint: str
    rate: float = 1.0
    pitch: float = 1.0


def voice_params_for(language: str) -> VoiceParams:
    """Voice hint, rate and pitch used to read a language aloud."""
    lang_key = (language or "en").split("-")[0]
    hint = LANG_MAP.get(lang_key, language)
    if lang_key == "en":
        return VoiceParams(voice_hint=hint, rate=0.89, pitch=1.19)
    return VoiceParams(voice_hint=hint, rate=0.9, pitch=1.2)


class NarrationSignals(QObject):
    """
    Events reported by a narration engine.

    Engines may emit from their own thread or callback context; consumers
    connect with a queued connection so handling happens on their own turn.
    """

    boundary = Signal(int, int)  # utterance_id, char_index
    finished = Signal(int)  # utterance_id
    failed = Signal(int, str)  # utterance_id, message


class NarrationEngine(ABC):
    """
    Abstract speech engine driven by NarrationSync.

    Implementations (e.g., QtNarrationEngine) own the audio pipeline and report
    word boundaries as character offsets into the text passed to speak().
    """

    def __init__(self) -> None:
        self.signals = NarrationSignals()

    @abstractmethod
    def is_available(self) -> bool:
        """True if an engine and at least one voice can be used."""

    @abstractmethod
    def speak(self, text: str, voice_hint: Optional[str], rate: float, pitch: float) -> int:
        """
        Start speaking text, replacing any current utterance.

        Returns:
            Utterance id carried by every event of this utterance.

        Raises:
            NarrationUnavailable: if no engine or voice is available.
        """

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def resume(self) -> None:
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop speaking; must be safe to call when nothing is being spoken."""
