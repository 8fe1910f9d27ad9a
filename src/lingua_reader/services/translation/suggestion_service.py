"""Suggestion Service - abstract interface for translation suggestions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional


@dataclass
class SuggestionResult:
    """Result of a suggestion request. Failures carry an error and no suggestions."""

    suggestions: List[str] = field(default_factory=list)
    provider: str = ""
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def unique_suggestions(candidates: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """Strip, drop blanks and duplicates (first occurrence wins), then truncate."""
    seen = []
    for candidate in candidates:
        text = (candidate or "").strip()
        if text and text not in seen:
            seen.append(text)
    return seen[:limit] if limit is not None else seen


class SuggestionService(ABC):
    """
    Abstract best-effort translation suggestion lookup.

    Implementations never raise for remote failures; they return an empty
    SuggestionResult with `error` set.
    """

    @abstractmethod
    def suggest(self, word: str, source_lang: str, target_lang: str) -> SuggestionResult:
        """
        Suggest translations of a word.

        Args:
            word: Normalized word to translate.
            source_lang: ISO 639-1 code of the article language.
            target_lang: ISO 639-1 code of the learner's native language.

        Returns:
            SuggestionResult with suggestions in preference order.
        """
        pass
