"""
AutoSaveService - crash-recovery cache for the in-progress session.

One JSON file, overwritten wholesale on every save. Failures never reach
the caller; a cache that cannot be read counts as no cache.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .config import get_cache_path
from .session_schema import SessionModel

logger = logging.getLogger(__name__)


class AutoSaveService:
    """Save, load and clear the cached session."""

    def __init__(self, cache_path: Path | None = None):
        """
        Initialize the cache.

        Args:
            cache_path: Cache file (default: <app dir>/Cache/session_cache.json)
        """
        self.cache_path = cache_path or get_cache_path()

    def save(self, model: SessionModel) -> bool:
        """
        Atomically write the session to the cache file.

        Returns:
            True if the write succeeded
        """
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self._write_atomic(model.to_cache_json())
        except OSError as e:
            logger.warning(f"AutoSave failed: {e}")
            return False
        return True

    def _write_atomic(self, content: str) -> None:
        """Write to a temp file in the same directory, then rename over the target."""
        fd, temp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix="session_cache_",
            dir=self.cache_path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(temp_path, self.cache_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def load(self) -> SessionModel | None:
        """Load the cached session, or None if absent or unreadable."""
        if not self.cache_path.exists():
            return None

        try:
            content = self.cache_path.read_text(encoding="utf-8")
            return SessionModel.model_validate_json(content)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"AutoLoad failed: {e}")
            return None

    def clear(self) -> None:
        """Delete the cache file if present."""
        try:
            self.cache_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"ClearCache failed: {e}")

    def exists(self) -> bool:
        return self.cache_path.exists()


__all__ = ["AutoSaveService"]
