"""Settings Manager - Handles environment configuration from .env."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path.home() / ".lingua_reader" / "reader.db"
SUGGESTION_PROVIDERS = ("mymemory", "gemini")


class SettingsManager:
    """
    Manages process-level configuration.

    Reads the .env file in the project root. Learner settings (languages,
    page size) live in the store, not here.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_gemini_api_key(self) -> Optional[str]:
        """Get the Gemini API key from environment."""
        return self._get("GEMINI_API_KEY")

    def get_database_path(self) -> Path:
        value = self._get("LINGUA_READER_DB")
        return Path(value).expanduser() if value else DEFAULT_DB_PATH

    def get_suggestion_provider(self) -> str:
        """Suggestion backend name; unknown values fall back to 'mymemory'."""
        value = (self._get("LINGUA_READER_SUGGESTIONS") or "mymemory").lower()
        return value if value in SUGGESTION_PROVIDERS else "mymemory"

    def get_log_level(self) -> str:
        return (self._get("LINGUA_READER_LOG_LEVEL") or "INFO").upper()

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get(name: str) -> Optional[str]:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else None
