"""Main entry point - narrates an article headlessly with live highlighting."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QCoreApplication

from lingua_reader.core import Article
from lingua_reader.coordinators import ReadingSession, SuggestionCoordinator
from lingua_reader.io import DatabaseManager
from lingua_reader.services import (
    GeminiSuggestionService,
    MyMemorySuggestionService,
    NarrationEngine,
    NarrationState,
    NarrationSync,
    SettingsManager,
    SuggestionService,
    WordRegistry,
)

logger = logging.getLogger("lingua_reader")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_suggestion_service(settings: SettingsManager) -> SuggestionService:
    if settings.get_suggestion_provider() == "gemini":
        api_key = settings.get_gemini_api_key()
        if api_key:
            return GeminiSuggestionService(api_key=api_key)
        logger.warning("GEMINI_API_KEY not set; falling back to MyMemory suggestions")
    return MyMemorySuggestionService()


def build_session(
    settings: SettingsManager,
    engine: Optional[NarrationEngine] = None,
) -> ReadingSession:
    """
    Composition root: the only place that knows how to instantiate and wire
    all components.
    """
    db = DatabaseManager(settings.get_database_path())
    db.initialize()

    if engine is None:
        from lingua_reader.services.narration.qt_narration_engine import QtNarrationEngine

        engine = QtNarrationEngine()

    return ReadingSession(
        db=db,
        registry=WordRegistry(db),
        narration=NarrationSync(engine),
        suggestions=SuggestionCoordinator(build_suggestion_service(settings)),
    )


def import_article(db: DatabaseManager, path: Path, title: Optional[str]) -> Article:
    """Store a UTF-8 text file as a new article in the learner's target language."""
    language = db.get_settings().target_lang
    article = Article(
        id=None,
        name=(title or path.stem).strip(),
        original=path.read_text(encoding="utf-8").strip(),
        language=language,
    )
    return db.add_article(article)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Narrate an article with word highlighting.")
    parser.add_argument("article_id", nargs="?", type=int, help="id of the article to read")
    parser.add_argument("--add", type=Path, metavar="FILE", help="import a text file as an article")
    parser.add_argument("--title", help="title for an imported article")
    parser.add_argument(
        "--mark-known", action="store_true", help="mark every word seen in the article as known and exit"
    )
    args = parser.parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Lingua Reader")

    settings = SettingsManager()
    configure_logging(settings.get_log_level())
    session = build_session(settings)

    article_id = args.article_id
    if args.add is not None:
        article = import_article(session.db, args.add, args.title)
        logger.info("Imported %r as article %s", article.name, article.id)
        article_id = article.id
    if article_id is None:
        parser.error("an article id or --add FILE is required")

    session.notification.connect(lambda title, message: logger.warning("%s: %s", title, message))
    if not session.open_article(article_id):
        logger.error("Article %s not found", article_id)
        return 1

    if args.mark_known:
        logger.info("Marked %d words as known", session.mark_all_known())
        session.close()
        return 0

    session.page_changed.connect(
        lambda page, _scroll: logger.info("Page %d/%d", page + 1, session.pagination.token_pages)
    )
    session.highlight_changed.connect(
        lambda index: index >= 0 and logger.info("%5d  %s", index, session.tokens[index].text)
    )
    session.narration_state_changed.connect(
        lambda state: app.quit() if state == NarrationState.IDLE.value else None
    )

    if session.toggle_narration() is NarrationState.IDLE:
        logger.error("Narration is not available on this system")
        session.close()
        return 1

    status = app.exec()
    session.close()
    return status


if __name__ == "__main__":
    sys.exit(main())
