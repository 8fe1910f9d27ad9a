"""Token entity - a word or separator slice of the original text."""

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    WORD = "word"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Token:
    """A maximal word or separator substring produced by splitting raw text."""

    text: str
    """Raw token text exactly as it appears in the source"""

    start: int
    """Character offset in the original text (inclusive)"""

    kind: TokenKind = TokenKind.WORD

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def end(self) -> int:
        """Character offset in the original text (exclusive)."""
        return self.start + len(self.text)

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD
