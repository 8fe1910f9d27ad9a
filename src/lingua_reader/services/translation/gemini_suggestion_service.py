"""Gemini Suggestion Service - suggestions via the Google Gemini API."""

import logging
import time

import google.genai as genai
from google.genai import types

from lingua_reader.services.translation.suggestion_service import (
    SuggestionResult,
    SuggestionService,
    unique_suggestions,
)

logger = logging.getLogger(__name__)


class GeminiSuggestionService(SuggestionService):
    """
    Suggestion service using Google Gemini.

    Low temperature for consistent short answers; retries with exponential
    backoff on rate limits.
    """

    MODEL_NAME = "gemini-2.0-flash"
    MAX_SUGGESTIONS = 4

    SUGGESTION_PROMPT = """Give up to {limit} short translations of the {source} word below into {target}.
Most common meaning first. One translation per line, no numbering, no explanations.

Word:
{word}"""

    def __init__(self, api_key: str, max_retries: int = 3, retry_delay: float = 2.0):
        self._api_key = api_key
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    def suggest(self, word: str, source_lang: str, target_lang: str) -> SuggestionResult:
        if not self._api_key:
            return SuggestionResult(provider=self.MODEL_NAME, error="Gemini API key not configured")

        prompt = self.SUGGESTION_PROMPT.format(
            limit=self.MAX_SUGGESTIONS, source=source_lang, target=target_lang, word=word
        )
        retry_delay = self._retry_delay
        attempt = 0

        while attempt < self._max_retries:
            attempt += 1
            try:
                client = genai.Client(api_key=self._api_key)
                response = client.models.generate_content(
                    model=self.MODEL_NAME,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        temperature=0.2,
                        top_p=0.95,
                        max_output_tokens=128,
                    ),
                )
            except Exception as e:
                error_msg = str(e).lower()
                is_rate_limit = (
                    "429" in error_msg
                    or "resource_exhausted" in error_msg
                    or "quota" in error_msg
                    or "rate_limit" in error_msg
                )
                if is_rate_limit and attempt < self._max_retries:
                    logger.info("Rate limited on attempt %d; retrying in %.1fs", attempt, retry_delay)
                    time.sleep(retry_delay)
                    retry_delay *= 2
                    continue
                logger.warning("Gemini suggestion for %r failed: %s", word, e)
                if is_rate_limit:
                    return SuggestionResult(
                        provider=self.MODEL_NAME,
                        error="API quota exceeded. Please try again later.",
                    )
                return SuggestionResult(provider=self.MODEL_NAME, error=f"Suggestion failed: {e}")

            if not response.text:
                return SuggestionResult(provider=self.MODEL_NAME, error="Empty response from API")
            return SuggestionResult(
                suggestions=self.parse_suggestions(response.text),
                provider=self.MODEL_NAME,
            )

        return SuggestionResult(provider=self.MODEL_NAME, error="Suggestion failed: retries exhausted")

    @classmethod
    def parse_suggestions(cls, text: str):
        lines = [line.strip().lstrip("-•*").strip() for line in text.splitlines()]
        return unique_suggestions(lines, limit=cls.MAX_SUGGESTIONS)
