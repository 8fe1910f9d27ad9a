"""SQLite-backed word, article, language and settings persistence."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from lingua_reader.core import (
    Article,
    LanguageRules,
    NotFoundError,
    PersistenceError,
    ReaderSettings,
    WordEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_WORD_REGEX = r"^\p{L}+(['’-]\p{L}+)*$"
DEFAULT_SPLIT_REGEX = r"[\p{Z}\p{P}\p{S}]+"

SEED_LANGUAGES = [
    ("french", "fr", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("english", "en", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("spanish", "es", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("polish", "pl", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("german", "de", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("swedish", "sv", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("dutch", "nl", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("italian", "it", DEFAULT_SPLIT_REGEX, DEFAULT_WORD_REGEX),
    ("portugues", "pt", DEFAULT_SPLIT_REGEX, r"^\p{L}+([ãõâêôáéíóúç'-]\p{L}+)*$"),
]

# Writable columns per table; anything else passed to add/update is rejected.
_COLUMNS: Dict[str, tuple] = {
    "words": (
        "name", "slug", "comfort", "translation", "language",
        "is_not_a_word", "count", "date_created",
    ),
    "articles": (
        "name", "source", "original", "word_ids", "language",
        "date_created", "last_opened", "current_page",
    ),
    "languages": ("name", "iso_639_1", "text_splitting_regex", "word_regex"),
    "settings": ("native_lang", "target_lang", "trunk_version", "page_size"),
}

SETTINGS_ROW_ID = 1


class DatabaseManager:
    """Owns the SQLite connection, schema, and the reader's store operations.

    The generic get/add/update/query calls work on any known table; the typed
    helpers below them convert rows into domain entities. Every sqlite3 error
    surfaces as PersistenceError.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except sqlite3.Error as exc:
            try:
                self.connection.rollback()
            except sqlite3.Error:
                logger.debug("Rollback after failed %s also failed", action)
            logger.error("Store operation failed (%s): %s", action, exc)
            raise PersistenceError(f"{action} failed: {exc}") from exc

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._guard("ensure_schema"):
            cur = self.connection.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS words (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL,
                    comfort INTEGER NOT NULL DEFAULT 0,
                    translation TEXT,
                    language TEXT NOT NULL,
                    is_not_a_word INTEGER NOT NULL DEFAULT 0,
                    count INTEGER NOT NULL DEFAULT 0,
                    date_created INTEGER NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS articles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    source TEXT NOT NULL DEFAULT '',
                    original TEXT NOT NULL,
                    word_ids TEXT NOT NULL DEFAULT '',
                    language TEXT NOT NULL,
                    date_created INTEGER NOT NULL,
                    last_opened INTEGER NOT NULL,
                    current_page INTEGER NOT NULL DEFAULT 0
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS languages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    iso_639_1 TEXT NOT NULL UNIQUE,
                    text_splitting_regex TEXT NOT NULL DEFAULT '',
                    word_regex TEXT NOT NULL DEFAULT ''
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    id INTEGER PRIMARY KEY,
                    native_lang TEXT NOT NULL,
                    target_lang TEXT NOT NULL,
                    trunk_version TEXT NOT NULL,
                    page_size INTEGER NOT NULL
                );
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_words_language ON words(language);"
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_articles_language ON articles(language);"
            )
            self.connection.commit()

    def seed(self) -> None:
        """Insert default languages and settings on a fresh database."""
        with self._guard("seed"):
            cur = self.connection.cursor()
            cur.execute("SELECT COUNT(*) FROM settings")
            if cur.fetchone()[0] > 0:
                return
            cur.executemany(
                """
                INSERT OR IGNORE INTO languages (name, iso_639_1, text_splitting_regex, word_regex)
                VALUES (?, ?, ?, ?)
                """,
                SEED_LANGUAGES,
            )
            cur.execute(
                """
                INSERT INTO settings (id, native_lang, target_lang, trunk_version, page_size)
                VALUES (?, 'en', 'fr', '0.0.1', 1000)
                """,
                (SETTINGS_ROW_ID,),
            )
            self.connection.commit()
        logger.info("Seeded %d languages and default settings", len(SEED_LANGUAGES))

    def initialize(self) -> None:
        self.ensure_schema()
        self.seed()

    # ------------------------------------------------------------------
    # Generic store contract
    # ------------------------------------------------------------------

    def get(self, table: str, record_id: int) -> Optional[sqlite3.Row]:
        self._check_table(table)
        with self._guard(f"get {table}"):
            cur = self.connection.cursor()
            cur.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,))
            return cur.fetchone()

    def add(self, table: str, record: Dict[str, Any]) -> int:
        columns = self._check_columns(table, record)
        placeholders = ", ".join("?" for _ in columns)
        with self._guard(f"add {table}"):
            cur = self.connection.cursor()
            cur.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [record[c] for c in columns],
            )
            self.connection.commit()
            return cur.lastrowid

    def update(self, table: str, record_id: int, fields: Dict[str, Any]) -> None:
        columns = self._check_columns(table, fields)
        if not columns:
            return
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with self._guard(f"update {table}"):
            cur = self.connection.cursor()
            cur.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                [fields[c] for c in columns] + [record_id],
            )
            self.connection.commit()
            if cur.rowcount == 0:
                raise NotFoundError(table, record_id)

    def query(self, table: str, field: str, value: Any) -> List[sqlite3.Row]:
        self._check_table(table)
        if field != "id" and field not in _COLUMNS[table]:
            raise ValueError(f"Unknown field {field!r} for table {table!r}")
        with self._guard(f"query {table}"):
            cur = self.connection.cursor()
            cur.execute(f"SELECT * FROM {table} WHERE {field} = ? ORDER BY id", (value,))
            return cur.fetchall()

    def delete(self, table: str, record_id: int) -> None:
        self._check_table(table)
        with self._guard(f"delete {table}"):
            self.connection.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            self.connection.commit()

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def add_word(self, entry: WordEntry) -> WordEntry:
        entry.id = self.add(
            "words",
            {
                "name": entry.name,
                "slug": entry.slug,
                "comfort": entry.comfort,
                "translation": entry.translation,
                "language": entry.language,
                "is_not_a_word": int(entry.is_not_a_word),
                "count": entry.count,
                "date_created": entry.date_created,
            },
        )
        return entry

    def get_word(self, word_id: int) -> WordEntry:
        row = self.get("words", word_id)
        if row is None:
            raise NotFoundError("word", word_id)
        return self._row_to_word(row)

    def list_words(self, language: str) -> List[WordEntry]:
        return [self._row_to_word(row) for row in self.query("words", "language", language)]

    def update_word(self, word_id: int, **fields: Any) -> None:
        self.update("words", word_id, fields)

    def delete_word(self, word_id: int) -> None:
        self.delete("words", word_id)

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    def add_article(self, article: Article) -> Article:
        article.id = self.add(
            "articles",
            {
                "name": article.name,
                "source": article.source,
                "original": article.original,
                "word_ids": Article.encode_word_ids(article.word_ids),
                "language": article.language,
                "date_created": article.date_created,
                "last_opened": article.last_opened,
                "current_page": article.current_page,
            },
        )
        return article

    def get_article(self, article_id: int) -> Article:
        row = self.get("articles", article_id)
        if row is None:
            raise NotFoundError("article", article_id)
        return self._row_to_article(row)

    def update_article(self, article_id: int, **fields: Any) -> None:
        if "word_ids" in fields and not isinstance(fields["word_ids"], str):
            fields["word_ids"] = Article.encode_word_ids(fields["word_ids"])
        self.update("articles", article_id, fields)

    def list_articles(self, language: str) -> List[Article]:
        rows = self.query("articles", "language", language)
        articles = [self._row_to_article(row) for row in rows]
        return sorted(articles, key=lambda a: a.date_created, reverse=True)

    # ------------------------------------------------------------------
    # Languages and settings
    # ------------------------------------------------------------------

    def get_language_rules(self, code: str) -> Optional[LanguageRules]:
        """Return the rules for an ISO 639-1 code (case-insensitive), or None."""
        with self._guard("get language"):
            cur = self.connection.cursor()
            cur.execute(
                "SELECT * FROM languages WHERE lower(iso_639_1) = lower(?)",
                (code,),
            )
            row = cur.fetchone()
        if row is None:
            return None
        return LanguageRules(
            code=row["iso_639_1"],
            name=row["name"],
            split_pattern=row["text_splitting_regex"] or r"\s+",
            word_pattern=row["word_regex"] or "",
        )

    def save_language_rules(self, rules: LanguageRules) -> None:
        with self._guard("save language"):
            self.connection.execute(
                """
                INSERT INTO languages (name, iso_639_1, text_splitting_regex, word_regex)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(iso_639_1) DO UPDATE SET
                    name = excluded.name,
                    text_splitting_regex = excluded.text_splitting_regex,
                    word_regex = excluded.word_regex
                """,
                (rules.name or rules.code, rules.code, rules.split_pattern, rules.word_pattern),
            )
            self.connection.commit()

    def get_settings(self) -> ReaderSettings:
        row = self.get("settings", SETTINGS_ROW_ID)
        if row is None:
            return ReaderSettings(page_size=1000)
        return ReaderSettings(
            native_lang=row["native_lang"],
            target_lang=row["target_lang"],
            page_size=row["page_size"],
            trunk_version=row["trunk_version"],
        )

    def update_settings(self, **fields: Any) -> ReaderSettings:
        current = self.get_settings()
        merged = {
            "native_lang": current.native_lang,
            "target_lang": current.target_lang,
            "trunk_version": current.trunk_version,
            "page_size": current.page_size,
        }
        merged.update(fields)
        self._check_columns("settings", merged)
        with self._guard("update settings"):
            self.connection.execute(
                """
                INSERT INTO settings (id, native_lang, target_lang, trunk_version, page_size)
                VALUES (:id, :native_lang, :target_lang, :trunk_version, :page_size)
                ON CONFLICT(id) DO UPDATE SET
                    native_lang = excluded.native_lang,
                    target_lang = excluded.target_lang,
                    trunk_version = excluded.trunk_version,
                    page_size = excluded.page_size
                """,
                {"id": SETTINGS_ROW_ID, **merged},
            )
            self.connection.commit()
        return self.get_settings()

    def close(self) -> None:
        self.connection.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_table(table: str) -> None:
        if table not in _COLUMNS:
            raise ValueError(f"Unknown table {table!r}")

    @classmethod
    def _check_columns(cls, table: str, record: Dict[str, Any]) -> List[str]:
        cls._check_table(table)
        unknown = set(record) - set(_COLUMNS[table])
        if unknown:
            raise ValueError(f"Unknown fields for {table}: {sorted(unknown)}")
        return [c for c in _COLUMNS[table] if c in record]

    @staticmethod
    def _row_to_word(row: sqlite3.Row) -> WordEntry:
        return WordEntry(
            id=row["id"],
            name=row["name"],
            slug=row["slug"],
            language=row["language"],
            comfort=row["comfort"],
            translation=row["translation"],
            count=row["count"],
            is_not_a_word=bool(row["is_not_a_word"]),
            date_created=row["date_created"],
        )

    @staticmethod
    def _row_to_article(row: sqlite3.Row) -> Article:
        return Article(
            id=row["id"],
            name=row["name"],
            source=row["source"],
            original=row["original"],
            language=row["language"],
            word_ids=Article.decode_word_ids(row["word_ids"]),
            date_created=row["date_created"],
            last_opened=row["last_opened"],
            current_page=row["current_page"],
        )
