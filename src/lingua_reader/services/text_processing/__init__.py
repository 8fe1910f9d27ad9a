"""Text processing services - tokenization, normalization and offset lookup."""

from lingua_reader.services.text_processing.offset_index import (
    NOT_FOUND,
    OffsetIndex,
    build_offsets,
    token_index_at_offset,
)
from lingua_reader.services.text_processing.tokenizer import (
    canonical_text,
    fallback_tokenize,
    tokenize,
)
from lingua_reader.services.text_processing.word_normalizer import is_word, normalize_word

__all__ = [
    "tokenize",
    "canonical_text",
    "fallback_tokenize",
    "normalize_word",
    "is_word",
    "OffsetIndex",
    "NOT_FOUND",
    "build_offsets",
    "token_index_at_offset",
]
