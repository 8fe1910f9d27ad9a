"""Coordinators - Orchestration layer connecting the reader with business logic."""

from .suggestion_coordinator import SuggestionCoordinator
from .reading_session import PageToken, ReadingSession

__all__ = [
    "ReadingSession",
    "PageToken",
    "SuggestionCoordinator",
]
