"""Application settings for the bookmark store and the saved.io sync service.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through a Pydantic settings object. A missing API key is not an
error: the application then runs in offline mode and sync is disabled.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from src.domain.value_objects.enums import SortOrder

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_BASE_URL = "https://devapi.saved.io/"
DEFAULT_DB_PATH = Path("data") / "savedio.sqlite3"
REQUEST_TIMEOUT = 10  # seconds
_TRUE_SET = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    dev_key: str | None = None
    timeout: int = REQUEST_TIMEOUT
    db_path: Path = DEFAULT_DB_PATH
    sort_order: SortOrder = SortOrder.TITLE
    smart_favorites: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def online(self) -> bool:
        """True when a user API key is configured and sync can run."""
        return bool(self.api_key)


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    raw_timeout = os.getenv("SAVEDIO_TIMEOUT", str(REQUEST_TIMEOUT))
    try:
        timeout = int(raw_timeout)
    except ValueError:
        raise RuntimeError(f"SAVEDIO_TIMEOUT must be an integer, got {raw_timeout!r}") from None
    if timeout <= 0:
        raise RuntimeError("SAVEDIO_TIMEOUT must be positive")

    return Settings(
        base_url=os.getenv("SAVEDIO_BASE_URL", DEFAULT_BASE_URL),
        api_key=os.getenv("SAVEDIO_API_KEY") or None,
        dev_key=os.getenv("SAVEDIO_DEV_KEY") or None,
        timeout=timeout,
        db_path=Path(os.getenv("SAVEDIO_DB_PATH", str(DEFAULT_DB_PATH))),
        sort_order=SortOrder.parse(os.getenv("SAVEDIO_SORT")),
        smart_favorites=os.getenv("SAVEDIO_SMART_FAVORITES", "false").strip().lower()
        in _TRUE_SET,
    )


# Public settings instance
settings = _build_settings()
