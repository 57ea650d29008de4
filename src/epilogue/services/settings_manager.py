"""Settings Manager - Handles application directory and tuning configuration."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_APP_DIR = Path.home() / ".epilogue"
DEFAULT_DEBOUNCE_MS = 2000
DEFAULT_RECENT_LIMIT = 10

_TRUTHY = ("1", "true", "yes", "on")


class SettingsManager:
    """
    Manages runtime configuration.

    Reads EPILOGUE_* variables from the .env file in the project root (and
    from the process environment). Every getter falls back to a hard-coded
    default when its variable is absent or malformed.
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

    def get_app_dir(self) -> Path:
        """Directory holding presets, preferences and the library database."""
        value = os.getenv("EPILOGUE_HOME")
        if value and value.strip():
            return Path(value.strip()).expanduser()
        return DEFAULT_APP_DIR

    def get_media_dir(self) -> Path:
        """Directory that relative preset media paths resolve against."""
        return self.get_app_dir() / "media"

    def get_log_level(self) -> int:
        value = (os.getenv("EPILOGUE_LOG_LEVEL") or "").strip().upper()
        level = logging.getLevelName(value) if value else logging.INFO
        return level if isinstance(level, int) else logging.INFO

    def get_progress_debounce_seconds(self) -> float:
        """Coalescing window for progress writes, in seconds."""
        ms = self._get_int("EPILOGUE_PROGRESS_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS)
        return max(ms, 0) / 1000

    def get_recent_limit(self) -> int:
        return max(self._get_int("EPILOGUE_RECENT_LIMIT", DEFAULT_RECENT_LIMIT), 1)

    def use_in_memory_backend(self) -> bool:
        """True when EPILOGUE_IN_MEMORY forces the in-memory stub backend."""
        value = os.getenv("EPILOGUE_IN_MEMORY")
        return bool(value) and value.strip().lower() in _TRUTHY

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        value = os.getenv(name)
        if not value or not value.strip():
            return default
        try:
            return int(value.strip())
        except ValueError:
            return default
