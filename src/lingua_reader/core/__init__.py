"""Domain layer - Pure entities representing reading content."""

from .errors import (
    NarrationUnavailable,
    NotFoundError,
    PersistenceError,
    ReaderError,
    RuleCompilationError,
)
from .token import Token, TokenKind
from .vocabulary_entities import (
    KNOWN_COMFORT,
    MAX_COMFORT,
    Article,
    LanguageRules,
    ReaderSettings,
    WordEntry,
    comfort_level_name,
)

__all__ = [
    "Token",
    "TokenKind",
    "WordEntry",
    "Article",
    "LanguageRules",
    "ReaderSettings",
    "KNOWN_COMFORT",
    "MAX_COMFORT",
    "comfort_level_name",
    "ReaderError",
    "RuleCompilationError",
    "PersistenceError",
    "NarrationUnavailable",
    "NotFoundError",
]
