"""Tokenizer - splits raw text into word and separator tokens per language rules."""

import logging
import unicodedata
from functools import lru_cache
from typing import List

import regex

from lingua_reader.core import RuleCompilationError, Token, TokenKind

logger = logging.getLogger(__name__)

DEFAULT_WORD_PATTERN = r"\p{L}[\p{L}\p{M}]*"
SEPARATOR_CLASS = r"[\p{P}\p{S}]"
# Per-match budget in seconds; user-editable patterns can backtrack badly.
MATCH_TIMEOUT = 2.0

_ANCHORS = regex.compile(r"^\^|\$$")
_LETTER_RUNS = regex.compile(r"(\p{L}[\p{L}\p{M}]*)")
_LETTERS = regex.compile(r"\p{L}[\p{L}\p{M}]*")


def canonical_text(text: str) -> str:
    """NFC form of text; token offsets always refer to this form."""
    return unicodedata.normalize("NFC", text or "")


def strip_anchors(pattern: str) -> str:
    """Remove a leading '^' and trailing '$' so the pattern can be embedded."""
    return _ANCHORS.sub("", pattern or "")


@lru_cache(maxsize=64)
def compile_token_pattern(word_pattern: str) -> "regex.Pattern":
    """Build the `(WORD)|(PUNCTUATION_OR_SYMBOL)` alternation for a word pattern.

    Raises:
        RuleCompilationError: if the word pattern is not a valid regex.
    """
    body = strip_anchors(word_pattern) or DEFAULT_WORD_PATTERN
    try:
        return regex.compile(
            f"(?P<word>{body})|(?P<sep>{SEPARATOR_CLASS})",
            regex.UNICODE | regex.IGNORECASE,
        )
    except regex.error as exc:
        raise RuleCompilationError(word_pattern, str(exc)) from exc


def tokenize(text: str, word_pattern: str = "") -> List[Token]:
    """
    Split text into WORD and SEPARATOR tokens in text order.

    The text is brought to NFC first so decomposed accents stay inside their
    word; token offsets index canonical_text(text). Whitespace between
    matches is not emitted; it is recoverable from the token offsets.
    Never raises: an invalid or runaway pattern falls back to splitting on
    runs of letters.

    Args:
        text: Raw article text
        word_pattern: Per-language word regex (anchors allowed, may be empty)

    Returns:
        List of Token objects
    """
    text = canonical_text(text)
    if not text:
        return []

    try:
        pattern = compile_token_pattern(word_pattern)
        tokens = []
        for match in pattern.finditer(text, timeout=MATCH_TIMEOUT):
            if not match.group(0):
                continue
            kind = TokenKind.WORD if match.group("word") is not None else TokenKind.SEPARATOR
            tokens.append(Token(text=match.group(0), start=match.start(), kind=kind))
        return tokens
    except RuleCompilationError as exc:
        logger.warning("%s; using letter-run fallback", exc)
    except (regex.error, TimeoutError) as exc:
        logger.warning(
            "%s; using letter-run fallback",
            RuleCompilationError(word_pattern, str(exc) or type(exc).__name__),
        )
    return fallback_tokenize(text)


def fallback_tokenize(text: str) -> List[Token]:
    """Split on runs of Unicode letters, keeping the non-blank gaps as separators."""
    tokens = []
    position = 0
    for part in _LETTER_RUNS.split(text):
        if not part:
            continue
        stripped = part.strip()
        if stripped:
            lead = len(part) - len(part.lstrip())
            kind = TokenKind.WORD if _LETTERS.fullmatch(stripped) else TokenKind.SEPARATOR
            tokens.append(Token(text=stripped, start=position + lead, kind=kind))
        position += len(part)
    return tokens
