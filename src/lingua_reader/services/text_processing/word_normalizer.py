"""Word normalization - canonical registry keys for raw tokens."""

import logging
import unicodedata
from functools import lru_cache
from typing import Optional

import regex

from lingua_reader.core import RuleCompilationError
from lingua_reader.services.text_processing.tokenizer import strip_anchors

logger = logging.getLogger(__name__)

_EDGE_NOISE = regex.compile(r"^[\p{P}\p{S}\p{N}]+|[\p{P}\p{S}\p{N}]+$")
_MARKS = regex.compile(r"\p{M}+")


@lru_cache(maxsize=64)
def compile_word_predicate(word_pattern: str) -> Optional["regex.Pattern"]:
    """Compile the per-language word pattern for whole-string tests.

    Returns None when no pattern is configured or the pattern is invalid;
    both mean "any non-empty string is a word".
    """
    body = strip_anchors(word_pattern)
    if not body:
        return None
    try:
        return regex.compile(body, regex.UNICODE)
    except regex.error as exc:
        logger.warning("%s; word validation disabled", RuleCompilationError(word_pattern, str(exc)))
        return None


def normalize_word(raw: str, word_pattern: str = "") -> str:
    """
    Normalize a raw token into its registry key.

    Rules:
    - Canonical decomposition (NFD) first
    - Strip leading and trailing punctuation, symbol and number code points
    - Validate against the language's word pattern as a whole-string match;
      combining marks are ignored for validation so accented words pass
    - Lower-case only when valid

    Args:
        raw: Token text as it appears in the article.
        word_pattern: Per-language word regex (may be empty).

    Returns:
        The normalized key, or "" if the token is not a word.
    """
    decomposed = unicodedata.normalize("NFD", raw or "")
    trimmed = _EDGE_NOISE.sub("", decomposed)
    if not trimmed:
        return ""

    predicate = compile_word_predicate(word_pattern or "")
    if predicate is not None:
        skeleton = _MARKS.sub("", trimmed)
        if not skeleton or predicate.fullmatch(skeleton) is None:
            return ""
    return trimmed.lower()


def is_word(raw: str, word_pattern: str = "") -> bool:
    return normalize_word(raw, word_pattern) != ""
