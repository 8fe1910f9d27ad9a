"""Word Registry - in-memory projection of the word store, one cache per language."""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Set

from lingua_reader.core import (
    MAX_COMFORT,
    NotFoundError,
    PersistenceError,
    Token,
    WordEntry,
)
from lingua_reader.io import DatabaseManager
from lingua_reader.services.text_processing import normalize_word

logger = logging.getLogger(__name__)


def count_frequencies(tokens: Sequence[Token], word_pattern: str = "") -> Dict[str, int]:
    """Tally normalized keys over all tokens of an article.

    Tokens that normalize to "" (punctuation, numbers, rejected words) are skipped.
    """
    counts: Counter = Counter()
    for token in tokens:
        key = normalize_word(token.text, word_pattern)
        if key:
            counts[key] += 1
    return dict(counts)


class WordRegistry:
    """
    Application service for vocabulary entries.

    Depends on DatabaseManager for persistence. Writes update the cached
    entry first and then the store; a failed store write rolls the cached
    value back and raises PersistenceError so the caller can notify.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db
        # language -> lower-cased name -> entry
        self._by_key: Dict[str, Dict[str, WordEntry]] = {}
        # entry id -> entry, across languages
        self._by_id: Dict[int, WordEntry] = {}

    def load(self, language: str) -> List[WordEntry]:
        """(Re)load every entry of a language from the store."""
        entries = self._db.list_words(language)
        for entry in self._by_key.get(language, {}).values():
            self._by_id.pop(entry.id, None)
        index: Dict[str, WordEntry] = {}
        for entry in entries:
            index.setdefault(entry.name.lower(), entry)
            self._by_id[entry.id] = entry
        self._by_key[language] = index
        logger.debug("Loaded %d words for language %s", len(entries), language)
        return entries

    def entries(self, language: str) -> List[WordEntry]:
        return list(self._language_index(language).values())

    def lookup(self, key: str, language: str) -> Optional[WordEntry]:
        """Exact match of a normalized (lower-cased) key against entry names of one language."""
        if not key:
            return None
        return self._language_index(language).get(key.lower())

    def get(self, entry_id: int) -> WordEntry:
        """Return a cached entry, falling back to the store.

        Raises:
            NotFoundError: if no such word exists.
        """
        entry = self._by_id.get(entry_id)
        if entry is not None:
            return entry
        entry = self._db.get_word(entry_id)
        self._remember(entry)
        return entry

    def ensure(self, key: str, language: str, observed_frequency: int = 0) -> WordEntry:
        """
        Return the entry for key, creating it on first sight.

        The new entry is visible to lookup() before the store write is issued,
        so a second ensure() for the same key never creates a duplicate.

        Raises:
            ValueError: if key is empty.
            PersistenceError: if the store write fails (the entry is discarded).
        """
        if not key:
            raise ValueError("Cannot register an empty word")

        existing = self.lookup(key, language)
        if existing is not None:
            return existing

        entry = WordEntry(
            id=None,
            name=key,
            language=language,
            comfort=0,
            count=max(0, observed_frequency),
        )
        index = self._language_index(language)
        index[key.lower()] = entry
        try:
            self._db.add_word(entry)
        except PersistenceError:
            index.pop(key.lower(), None)
            raise
        self._by_id[entry.id] = entry
        logger.info("Registered new word %r (%s) with id %s", key, language, entry.id)
        return entry

    def set_comfort(self, entry_id: int, level: int) -> WordEntry:
        if not 0 <= level <= MAX_COMFORT:
            raise ValueError(f"Comfort level must be between 0 and {MAX_COMFORT}, got {level}")
        return self._update_field(entry_id, "comfort", level)

    def set_translation(self, entry_id: int, text: Optional[str]) -> WordEntry:
        return self._update_field(entry_id, "translation", text)

    def known_count(self, language: str) -> int:
        return sum(
            1
            for entry in self._language_index(language).values()
            if entry.is_known and not entry.is_not_a_word
        )

    def reconcile_ids(self, word_ids: Iterable[int], language: str) -> Set[int]:
        """Keep only the ids that still point at live entries of this language."""
        live = {entry.id for entry in self._language_index(language).values()}
        return {word_id for word_id in word_ids if word_id in live}

    def search(self, query: str, language: str) -> List[WordEntry]:
        """Substring search over names and translations."""
        needle = query.casefold()
        return [
            entry
            for entry in self._language_index(language).values()
            if needle in entry.name.casefold()
            or (entry.translation and needle in entry.translation.casefold())
        ]

    def forget(self, entry_id: int) -> None:
        """Drop an entry from the cache after it was deleted from the store."""
        entry = self._by_id.pop(entry_id, None)
        if entry is not None:
            self._by_key.get(entry.language, {}).pop(entry.name.lower(), None)

    def _language_index(self, language: str) -> Dict[str, WordEntry]:
        if language not in self._by_key:
            self.load(language)
        return self._by_key[language]

    def _remember(self, entry: WordEntry) -> None:
        self._by_id[entry.id] = entry
        if entry.language in self._by_key:
            self._by_key[entry.language].setdefault(entry.name.lower(), entry)

    def _update_field(self, entry_id: int, field_name: str, value) -> WordEntry:
        entry = self.get(entry_id)
        previous = getattr(entry, field_name)
        setattr(entry, field_name, value)
        try:
            self._db.update_word(entry_id, **{field_name: value})
        except (PersistenceError, NotFoundError) as exc:
            setattr(entry, field_name, previous)
            logger.warning("Rolled back %s of word %s: %s", field_name, entry_id, exc)
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(str(exc)) from exc
        return entry
