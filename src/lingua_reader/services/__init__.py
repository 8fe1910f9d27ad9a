"""Services layer - business logic and external integrations."""

from lingua_reader.services.pagination import (
	DEFAULT_PAGE_SIZE,
	PaginationController,
	page_of,
	range_of,
	total_pages,
)
from lingua_reader.services.word_registry import WordRegistry, count_frequencies
from lingua_reader.services.settings_manager import SettingsManager

# Text processing services
from lingua_reader.services.text_processing import (
	NOT_FOUND,
	OffsetIndex,
	canonical_text,
	normalize_word,
	tokenize,
)

# Narration services
from lingua_reader.services.narration import (
	NarrationEngine,
	NarrationState,
	NarrationSync,
	VoiceParams,
	voice_params_for,
)

# Suggestion services
from lingua_reader.services.translation import (
	GeminiSuggestionService,
	MyMemorySuggestionService,
	SuggestionResult,
	SuggestionService,
)
from lingua_reader.services.api_workers import SuggestionWorker, WorkerSignals

__all__ = [
	"DEFAULT_PAGE_SIZE",
	"PaginationController",
	"page_of",
	"range_of",
	"total_pages",
	"WordRegistry",
	"count_frequencies",
	"SettingsManager",
	"NOT_FOUND",
	"OffsetIndex",
	"canonical_text",
	"normalize_word",
	"tokenize",
	"NarrationEngine",
	"NarrationState",
	"NarrationSync",
	"VoiceParams",
	"voice_params_for",
	"SuggestionService",
	"SuggestionResult",
	"MyMemorySuggestionService",
	"GeminiSuggestionService",
	"SuggestionWorker",
	"WorkerSignals",
]
