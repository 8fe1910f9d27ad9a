"""Error taxonomy for the reading engine.

None of these are fatal: each one is recovered by the operation that hits it.
"""


class ReaderError(Exception):
    """Base class for reading engine errors."""


class RuleCompilationError(ReaderError):
    """A per-language regex could not be compiled or applied."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid language pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class PersistenceError(ReaderError):
    """A write or read against the word/article store failed."""


class NarrationUnavailable(ReaderError):
    """No speech synthesis engine or voice is available."""


class NotFoundError(ReaderError):
    """A requested article, word or language record does not exist."""

    def __init__(self, kind: str, identifier):
        super().__init__(f"{kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier
