"""Translation suggestion services - abstract interface and remote backends."""

from lingua_reader.services.translation.suggestion_service import (
    SuggestionResult,
    SuggestionService,
    unique_suggestions,
)
from lingua_reader.services.translation.mymemory_suggestion_service import MyMemorySuggestionService
from lingua_reader.services.translation.gemini_suggestion_service import GeminiSuggestionService

__all__ = [
    "SuggestionService",
    "SuggestionResult",
    "unique_suggestions",
    "MyMemorySuggestionService",
    "GeminiSuggestionService",
]
