"""
Configuration management for Test Companion.

Application data lives in one directory:
1. TESTCOMPANION_HOME environment variable (if set)
2. Default: ~/.testcompanion
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .report.report_renderer import ExportFormat

logger = logging.getLogger(__name__)

APP_DIR_ENV = "TESTCOMPANION_HOME"
SETTINGS_FILE = "settings.json"
CACHE_FILE = "session_cache.json"
COVERAGE_FILE = "coverage.ini"
DEFAULT_REPORTS_DIR = Path.home() / "Documents" / "TestingSessionReports"


def _filter_dataclass_fields(data: dict[str, Any], cls: type) -> dict[str, Any]:
    """Filter dict to only include fields that exist in the dataclass."""
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in valid_fields}


def get_app_dir() -> Path:
    """Return the application data dir. Honors TESTCOMPANION_HOME."""
    env_value = os.getenv(APP_DIR_ENV)
    if env_value:
        return Path(env_value)
    return Path.home() / ".testcompanion"


def get_settings_path() -> Path:
    return get_app_dir() / SETTINGS_FILE


def get_cache_path() -> Path:
    return get_app_dir() / "Cache" / CACHE_FILE


def coverage_candidates(settings: "AppSettings | None" = None) -> list[Path]:
    """Coverage files to try, in priority order."""
    candidates: list[Path] = []
    if settings is not None and settings.coverage_path:
        candidates.append(Path(settings.coverage_path).expanduser())
    candidates += [
        get_app_dir() / COVERAGE_FILE,
        Path.cwd() / COVERAGE_FILE,
    ]
    return candidates


@dataclass
class AppSettings:
    """
    User settings for export and coverage.

    Attributes:
        export_path: Folder reports are written to ("" = default folder)
        last_export_format: Format preselected on export
        coverage_path: Optional coverage taxonomy file
    """

    export_path: str = ""
    last_export_format: ExportFormat = ExportFormat.PLAIN_TEXT
    coverage_path: str = ""

    @classmethod
    def load(cls, path: Path | None = None) -> "AppSettings":
        """
        Load settings from file.

        Returns defaults if the file is missing or unreadable.
        """
        if path is None:
            path = get_settings_path()

        if not path.exists():
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Settings load failed, using defaults: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {path}")
            return cls()

        filtered = _filter_dataclass_fields(data, cls)
        for key in ("export_path", "coverage_path"):
            if not isinstance(filtered.get(key, ""), str):
                logger.warning(f"Ignoring non-string {key} in settings file {path}")
                filtered[key] = ""
        try:
            filtered["last_export_format"] = ExportFormat(
                filtered.get("last_export_format", ExportFormat.PLAIN_TEXT.value)
            )
        except (TypeError, ValueError):
            filtered["last_export_format"] = ExportFormat.PLAIN_TEXT

        return cls(**filtered)

    def save(self, path: Path | None = None) -> None:
        """Save settings to file. Failures are logged, not raised."""
        if path is None:
            path = get_settings_path()

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(
                    {
                        "export_path": self.export_path,
                        "last_export_format": self.last_export_format.value,
                        "coverage_path": self.coverage_path,
                    },
                    f,
                    indent=2,
                )
        except OSError as e:
            logger.warning(f"Settings save failed: {e}")

    def get_export_path(self) -> Path:
        """Configured export folder if it exists, else the default folder (created)."""
        if self.export_path.strip():
            configured = Path(self.export_path).expanduser()
            if configured.is_dir():
                return configured

        DEFAULT_REPORTS_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_REPORTS_DIR


__all__ = [
    "APP_DIR_ENV",
    "AppSettings",
    "DEFAULT_REPORTS_DIR",
    "coverage_candidates",
    "get_app_dir",
    "get_cache_path",
    "get_settings_path",
]
