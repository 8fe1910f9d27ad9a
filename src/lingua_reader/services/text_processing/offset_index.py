"""Offset index - maps token positions to narration character offsets."""

from bisect import bisect_right
from typing import List, Optional, Sequence, Tuple

from lingua_reader.core import Token

NOT_FOUND = -1
NARRATION_SEPARATOR = " "


def spoken_gap(text: str, start: int, end: int) -> str:
    """Non-blank content of text[start:end] with whitespace collapsed."""
    return NARRATION_SEPARATOR.join(text[start:end].split())


def build_narration(tokens: Sequence[Token], text: Optional[str] = None) -> Tuple[str, List[int]]:
    """
    Build the narration text and the offset of every token inside it.

    Tokens are joined by a single space. When the source text is given, the
    non-blank gaps between tokens (numbers, stray marks) are spoken too, each
    padded by single spaces, so nothing in the article is left out of the audio.
    """
    pieces = []
    offsets = []
    position = 0
    previous_end = 0
    for token in tokens:
        joiner = NARRATION_SEPARATOR if pieces else ""
        if text is not None:
            gap = spoken_gap(text, previous_end, token.start)
            if gap:
                joiner += gap + NARRATION_SEPARATOR
        pieces.append(joiner)
        position += len(joiner)
        offsets.append(position)
        pieces.append(token.text)
        position += token.length
        previous_end = token.end
    if text is not None:
        tail = spoken_gap(text, previous_end, len(text))
        if tail:
            pieces.append((NARRATION_SEPARATOR if pieces else "") + tail)
    return "".join(pieces), offsets


def build_offsets(tokens: Sequence[Token], text: Optional[str] = None) -> List[int]:
    """Starting offset of every token in the narration text."""
    return build_narration(tokens, text)[1]


def token_index_at_offset(offsets: Sequence[int], char_offset: int, end: Optional[int] = None) -> int:
    """Binary search for the greatest index whose offset is <= char_offset.

    Returns NOT_FOUND for offsets before the first token or, when `end` is
    given, at or past it.
    """
    if not offsets or char_offset < offsets[0]:
        return NOT_FOUND
    if end is not None and char_offset >= end:
        return NOT_FOUND
    return bisect_right(offsets, char_offset) - 1


class OffsetIndex:
    """
    Immutable token index -> character offset table for one tokenization.

    Offsets are expressed in narration-text coordinates (see build_narration),
    so spoken boundaries line up with token indices exactly. Pass the text the
    tokens were cut from to have its numbers spoken as well. Build a new index
    whenever the tokens change.
    """

    def __init__(self, tokens: Sequence[Token], text: Optional[str] = None):
        self._tokens: Tuple[Token, ...] = tuple(tokens)
        narration, offsets = build_narration(self._tokens, text)
        self._narration = narration
        self._offsets: Tuple[int, ...] = tuple(offsets)
        if self._tokens:
            self._end = self._offsets[-1] + self._tokens[-1].length
        else:
            self._end = 0

    @classmethod
    def build(cls, tokens: Sequence[Token], text: Optional[str] = None) -> "OffsetIndex":
        return cls(tokens, text)

    @property
    def offsets(self) -> Tuple[int, ...]:
        return self._offsets

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    @property
    def end(self) -> int:
        """Offset just past the last token."""
        return self._end

    @property
    def narration_text(self) -> str:
        return self._narration

    def __len__(self) -> int:
        return len(self._offsets)

    def token_index_at_offset(self, char_offset: int) -> int:
        return token_index_at_offset(self._offsets, char_offset, self._end)

    def span(self, index: int) -> Tuple[int, int]:
        """Half-open [start, end) narration span of token `index`."""
        start = self._offsets[index]
        return start, start + self._tokens[index].length
