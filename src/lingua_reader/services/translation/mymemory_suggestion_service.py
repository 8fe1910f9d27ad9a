"""MyMemory Suggestion Service - suggestions from the MyMemory translation API."""

import logging
from typing import Optional

import requests

from lingua_reader.services.translation.suggestion_service import (
    SuggestionResult,
    SuggestionService,
    unique_suggestions,
)

logger = logging.getLogger(__name__)


class MyMemorySuggestionService(SuggestionService):
    """
    Suggestion service using the public MyMemory API.

    Returns the main translation followed by up to three alternative matches.
    """

    API_URL = "https://api.mymemory.translated.net/get"
    PROVIDER = "mymemory"
    MAX_MATCHES = 3

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._session = session or requests.Session()
        self._timeout = timeout

    def suggest(self, word: str, source_lang: str, target_lang: str) -> SuggestionResult:
        try:
            response = self._session.get(
                self.API_URL,
                params={"q": word, "langpair": f"{source_lang}|{target_lang}"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Suggestion lookup for %r failed: %s", word, exc)
            return SuggestionResult(provider=self.PROVIDER, error=str(exc))

        if data.get("responseStatus") != 200:
            return SuggestionResult(
                provider=self.PROVIDER,
                error=f"Unexpected response status {data.get('responseStatus')}",
            )

        main = (data.get("responseData") or {}).get("translatedText") or ""
        matches = [
            match.get("translation", "")
            for match in data.get("matches") or []
            if match.get("translation") != main
        ][: self.MAX_MATCHES]
        return SuggestionResult(
            suggestions=unique_suggestions([main, *matches]),
            provider=self.PROVIDER,
        )
