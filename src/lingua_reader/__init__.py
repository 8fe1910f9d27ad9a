"""
Lingua Reader - A reading companion for foreign-language learners.

This package provides the reading session engine behind the reader:
- Language-aware tokenization and word normalization
- Vocabulary tracking with comfort levels and translations
- Token-based pagination
- Narration synchronized word-by-word with the text
"""

__version__ = "0.1.0"

# Make key components available at package level
from lingua_reader.core import Article, LanguageRules, Token, TokenKind, WordEntry
from lingua_reader.io import DatabaseManager

__all__ = [
    "Article",
    "LanguageRules",
    "Token",
    "TokenKind",
    "WordEntry",
    "DatabaseManager",
]
