"""Narration services - speech engine interface, Qt adapter and boundary sync."""

from lingua_reader.services.narration.narration_engine import (
    LANG_MAP,
    NarrationEngine,
    NarrationSignals,
    NarrationState,
    VoiceParams,
    voice_params_for,
)
from lingua_reader.services.narration.narration_sync import NarrationSync

__all__ = [
    "LANG_MAP",
    "NarrationEngine",
    "NarrationSignals",
    "NarrationState",
    "NarrationSync",
    "VoiceParams",
    "voice_params_for",
]
