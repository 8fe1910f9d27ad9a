"""Vocabulary and article entities used across services and persistence."""

import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set

MAX_COMFORT = 5
KNOWN_COMFORT = 4

_COMFORT_NAMES = {
    1: "Unknown",
    2: "Difficult",
    3: "Medium",
    4: "Comfortable",
    5: "Mastered",
}


def comfort_level_name(level: int) -> str:
    """Human-readable label for a comfort level (0 and 1 both read as 'Unknown')."""
    return _COMFORT_NAMES.get(level, "Unknown")


def now_ms() -> int:
    """Current time as epoch milliseconds, the timestamp unit used by the store."""
    return int(time.time() * 1000)


@dataclass
class WordEntry:
    """One distinct vocabulary item for one target language.

    Attributes:
        id: Store identifier, None until the entry has been persisted.
        name: Display name (the normalized key the entry was created from).
        language: ISO 639-1 code of the language the word belongs to.
        comfort: Familiarity level, 0 (unrated) to 5 (fully known).
        translation: Learner-provided translation, if any.
        count: Frequency observed when the entry was created.
        date_created: Epoch milliseconds of creation.
    """

    id: Optional[int]
    name: str
    language: str
    comfort: int = 0
    translation: Optional[str] = None
    count: int = 0
    is_not_a_word: bool = False
    date_created: int = field(default_factory=now_ms)
    slug: str = ""

    def __post_init__(self) -> None:
        if not self.slug:
            self.slug = self.name

    @property
    def comfort_name(self) -> str:
        return comfort_level_name(self.comfort)

    @property
    def is_known(self) -> bool:
        return self.comfort >= KNOWN_COMFORT


@dataclass
class Article:
    """The text being read plus the ids of words touched while reading it."""

    id: Optional[int]
    name: str
    original: str
    language: str
    source: str = ""
    word_ids: Set[int] = field(default_factory=set)
    date_created: int = field(default_factory=now_ms)
    last_opened: int = field(default_factory=now_ms)
    current_page: int = 0

    @staticmethod
    def decode_word_ids(raw: Optional[str]) -> Set[int]:
        """Parse the '$'-delimited id list used by the store ("3$7$12$")."""
        if not raw:
            return set()
        ids = set()
        for part in raw.split("$"):
            part = part.strip()
            if part.isdigit():
                ids.add(int(part))
        return ids

    @staticmethod
    def encode_word_ids(ids: Iterable[int]) -> str:
        return "".join(f"{word_id}$" for word_id in sorted(ids))


@dataclass(frozen=True)
class LanguageRules:
    """Per-language tokenization rules, resolved once per language.

    An empty word_pattern means "one or more letters".
    """

    code: str
    name: str = ""
    split_pattern: str = r"\s+"
    word_pattern: str = ""

    @classmethod
    def default(cls, code: str) -> "LanguageRules":
        return cls(code=code, name=code)


@dataclass
class ReaderSettings:
    """Learner settings kept in the store's settings table."""

    native_lang: str = "en"
    target_lang: str = "fr"
    page_size: int = 300
    trunk_version: str = "0.0.1"
