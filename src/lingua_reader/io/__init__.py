"""I/O layer - Persistence for words, articles, languages and settings."""

from .database_manager import DatabaseManager

__all__ = ["DatabaseManager"]
