"""Reading Session - Central coordinator for reading one article."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal, Slot

from lingua_reader.core import (
    Article,
    LanguageRules,
    MAX_COMFORT,
    NotFoundError,
    PersistenceError,
    ReaderSettings,
    Token,
    WordEntry,
)
from lingua_reader.core.vocabulary_entities import now_ms
from lingua_reader.io import DatabaseManager
from lingua_reader.services import (
    NarrationState,
    NarrationSync,
    OffsetIndex,
    PaginationController,
    WordRegistry,
    canonical_text,
    count_frequencies,
    normalize_word,
    page_of,
    tokenize,
    voice_params_for,
)
from lingua_reader.coordinators.suggestion_coordinator import SuggestionCoordinator

logger = logging.getLogger(__name__)

HOME_VIEW = "home"


@dataclass(frozen=True)
class PageToken:
    """A token in the displayed page window, resolved against the registry."""

    index: int
    token: Token
    key: str
    entry: Optional[WordEntry]

    @property
    def is_word(self) -> bool:
        return bool(self.key)

    @property
    def comfort(self) -> int:
        return self.entry.comfort if self.entry else 0


class ReadingSession(QObject):
    """
    Owns the live state of a reading session and routes events between the
    registry, pagination, narration and suggestion services.

    Every mutation happens on the session's thread; narration and suggestion
    results arrive as queued signals.
    """

    article_loaded = Signal(object)  # Article
    page_changed = Signal(int, bool)  # page, scroll_to_top
    highlight_changed = Signal(int)  # token index, -1 clears
    word_selected = Signal(object)  # WordEntry or None
    word_updated = Signal(object)  # WordEntry
    suggestions_changed = Signal(int, list)  # word_id, suggestions
    notification = Signal(str, str)  # title, message
    redirect_requested = Signal(str)  # view name
    narration_state_changed = Signal(str)
    narration_available_changed = Signal(bool)

    def __init__(
        self,
        db: DatabaseManager,
        registry: WordRegistry,
        narration: NarrationSync,
        suggestions: SuggestionCoordinator,
        pagination: Optional[PaginationController] = None,
    ):
        super().__init__()

        self.db = db
        self.registry = registry
        self.narration = narration
        self.suggestions = suggestions
        self.pagination = pagination or PaginationController()

        # Session state
        self.settings = ReaderSettings()
        self.article: Optional[Article] = None
        self.rules: Optional[LanguageRules] = None
        self.tokens: Tuple[Token, ...] = ()
        self.offset_index = OffsetIndex(())
        self.frequencies: Dict[str, int] = {}
        self.selected_word: Optional[WordEntry] = None

        self.pagination.page_changed.connect(self._on_page_changed)
        self.narration.page_change_requested.connect(self._on_narration_page_requested)
        self.narration.highlight_changed.connect(self.highlight_changed)
        self.narration.state_changed.connect(self.narration_state_changed)
        self.narration.availability_changed.connect(self.narration_available_changed)
        self.narration.failed.connect(self._on_narration_failed)
        self.suggestions.suggestions_ready.connect(self.suggestions_changed)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def open_article(self, article_id: int) -> bool:
        """
        Load an article and everything needed to read it.

        Returns False (after requesting a redirect home) when the article does
        not exist or the store cannot be read.
        """
        self.stop_narration()
        self.suggestions.cancel()

        try:
            settings = self.db.get_settings()
            article = self.db.get_article(article_id)
            rules = self.db.get_language_rules(article.language)
            self.registry.load(article.language)
        except NotFoundError as exc:
            logger.warning("Cannot open article: %s", exc)
            self.redirect_requested.emit(HOME_VIEW)
            return False
        except PersistenceError as exc:
            self.notification.emit("Load Failed", f"Could not load article:\n{exc}")
            self.redirect_requested.emit(HOME_VIEW)
            return False

        if rules is None:
            logger.info("No rules for language %r; using defaults", article.language)
            rules = LanguageRules.default(article.language)

        self.settings = settings
        self.article = article
        self.selected_word = None
        self.word_selected.emit(None)

        # Drop ids of words deleted since the article was last read
        live_ids = self.registry.reconcile_ids(article.word_ids, article.language)
        if live_ids != article.word_ids:
            article.word_ids = live_ids
            self._persist_article(word_ids=live_ids)

        first_token = article.current_page * settings.page_size
        self._retokenize(rules, settings.page_size, first_token)

        article.last_opened = now_ms()
        self._persist_article(last_opened=article.last_opened)

        self.article_loaded.emit(article)
        return True

    def reload_rules(self, rules: LanguageRules) -> None:
        """Apply new language rules, keeping the reading position."""
        if self.article is None:
            self.rules = rules
            return
        self.stop_narration()
        first_token = self.pagination.current_range[0]
        self._retokenize(rules, self.pagination.page_size, first_token)

    def set_page_size(self, page_size: int) -> None:
        """Change the learner's page size and persist it."""
        if page_size <= 0:
            raise ValueError(f"Page size must be positive, got {page_size}")
        self.stop_narration()
        try:
            self.settings = self.db.update_settings(page_size=page_size)
        except PersistenceError as exc:
            self.notification.emit("Settings Not Saved", str(exc))
            self.settings.page_size = page_size
        self.pagination.set_page_size(page_size)

    def _retokenize(self, rules: LanguageRules, page_size: int, first_token: int) -> None:
        text = canonical_text(self.article.original)
        tokens = tuple(tokenize(text, rules.word_pattern))
        offset_index = OffsetIndex(tokens, text)
        frequencies = count_frequencies(tokens, rules.word_pattern)

        # Swap together so the offsets always match the tokens they came from
        self.rules, self.tokens, self.offset_index, self.frequencies = (
            rules,
            tokens,
            offset_index,
            frequencies,
        )
        self.pagination.configure(
            token_count=len(tokens),
            vocabulary_size=len(frequencies),
            current_page=page_of(max(0, first_token), page_size),
            page_size=page_size,
        )

    # ------------------------------------------------------------------
    # Page window
    # ------------------------------------------------------------------

    def tokens_on_page(self) -> List[PageToken]:
        if self.article is None:
            return []
        start, end = self.pagination.current_range
        word_pattern = self.rules.word_pattern
        window = []
        for index in range(start, end):
            token = self.tokens[index]
            key = normalize_word(token.text, word_pattern)
            entry = self.registry.lookup(key, self.article.language) if key else None
            window.append(PageToken(index=index, token=token, key=key, entry=entry))
        return window

    def next_page(self) -> bool:
        return self.pagination.next_page()

    def previous_page(self) -> bool:
        return self.pagination.previous_page()

    def go_to_page(self, page: int) -> bool:
        return self.pagination.go_to(page)

    def progress(self) -> Tuple[int, int, float]:
        """(known words in this article, distinct words in this article, percent)."""
        if self.article is None:
            return 0, 0, 0.0
        known = 0
        for key in self.frequencies:
            entry = self.registry.lookup(key, self.article.language)
            if entry is not None and entry.is_known and not entry.is_not_a_word:
                known += 1
        return known, self.pagination.vocabulary_size, self.pagination.progress(known)

    @Slot(int, bool)
    def _on_page_changed(self, page: int, scroll_to_top: bool) -> None:
        self.narration.set_displayed_page(page)
        if self.article is not None and self.article.current_page != page:
            self.article.current_page = page
            self._persist_article(current_page=page)
        self.page_changed.emit(page, scroll_to_top)

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def click_token(self, token_index: int) -> Optional[WordEntry]:
        """Select the word under a token; separators and non-words are ignored."""
        if self.article is None or not 0 <= token_index < len(self.tokens):
            return None
        key = normalize_word(self.tokens[token_index].text, self.rules.word_pattern)
        if not key:
            return None
        return self.select_word(key)

    def select_word(self, key: str) -> Optional[WordEntry]:
        if self.article is None or not key:
            return None
        language = self.article.language
        entry = self.registry.lookup(key, language)
        if entry is None:
            try:
                entry = self.registry.ensure(key, language, self.frequencies.get(key, 0))
            except PersistenceError as exc:
                self.notification.emit("Save Failed", f"Could not save '{key}':\n{exc}")
                return None

        self._mark_seen(entry)
        self.selected_word = entry
        self.word_selected.emit(entry)
        self.suggestions.request(entry.id, entry.name, language, self.settings.native_lang)
        return entry

    def clear_selection(self) -> None:
        self.selected_word = None
        self.suggestions.cancel()
        self.word_selected.emit(None)

    def set_comfort(self, level: int) -> bool:
        if self.selected_word is None:
            return False
        entry = self.selected_word
        try:
            self.registry.set_comfort(entry.id, level)
        except ValueError as exc:
            self.notification.emit("Invalid Comfort", str(exc))
            return False
        except PersistenceError as exc:
            self.notification.emit("Update Failed", f"Could not update comfort:\n{exc}")
            self.word_updated.emit(entry)
            return False
        self.word_updated.emit(entry)
        return True

    def set_translation(self, text: str) -> bool:
        if self.selected_word is None:
            return False
        entry = self.selected_word
        try:
            self.registry.set_translation(entry.id, text)
        except PersistenceError as exc:
            self.notification.emit("Update Failed", f"Could not save translation:\n{exc}")
            self.word_updated.emit(entry)
            return False
        self.word_updated.emit(entry)
        return True

    def apply_suggestion(self, suggestion: str) -> bool:
        return self.set_translation(suggestion)

    def mark_all_known(self) -> int:
        """
        Set every word seen in this article to the top comfort level.

        Each word is written on its own; a failed write rolls that word back and
        notifies, the rest still go through. Returns the number of words updated.
        """
        if self.article is None:
            return 0
        updated = 0
        for word_id in sorted(self.article.word_ids):
            try:
                entry = self.registry.get(word_id)
                if entry.comfort == MAX_COMFORT:
                    continue
                self.registry.set_comfort(word_id, MAX_COMFORT)
            except (PersistenceError, NotFoundError) as exc:
                self.notification.emit("Update Failed", f"Could not mark word {word_id} as known:\n{exc}")
                continue
            updated += 1
            self.word_updated.emit(entry)
        logger.info("Marked %d words of article %s as known", updated, self.article.id)
        return updated

    def _mark_seen(self, entry: WordEntry) -> None:
        if entry.id in self.article.word_ids:
            return
        self.article.word_ids.add(entry.id)
        self._persist_article(word_ids=self.article.word_ids)

    def _persist_article(self, **fields) -> None:
        try:
            self.db.update_article(self.article.id, **fields)
        except (PersistenceError, NotFoundError) as exc:
            logger.warning("Could not persist article %s: %s", self.article.id, exc)
            self.notification.emit("Save Failed", f"Could not save reading progress:\n{exc}")

    # ------------------------------------------------------------------
    # Narration
    # ------------------------------------------------------------------

    @property
    def narration_available(self) -> bool:
        return self.narration.available

    def toggle_narration(self) -> NarrationState:
        """Play, pause or resume the article narration."""
        state = self.narration.state
        if state is NarrationState.SPEAKING:
            self.narration.pause()
        elif state is NarrationState.PAUSED:
            self.narration.resume()
        elif self.article is not None and self.tokens:
            self.narration.start(
                self.offset_index,
                self.pagination.page_size,
                self.pagination.current_page,
                voice_params_for(self.article.language),
            )
        return self.narration.state

    def stop_narration(self) -> None:
        self.narration.stop()

    def speak_selected_word(self) -> bool:
        if self.selected_word is None or self.article is None:
            return False
        return self.narration.pronounce(
            self.selected_word.name, voice_params_for(self.article.language)
        )

    @Slot(int)
    def _on_narration_page_requested(self, page: int) -> None:
        self.pagination.go_to(page)

    @Slot(str)
    def _on_narration_failed(self, message: str) -> None:
        self.notification.emit("Narration Error", message)

    def close(self) -> None:
        self.stop_narration()
        self.suggestions.cancel()
