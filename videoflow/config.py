"""Configuration helpers for videoflow."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

MANUSCRIPT_DIR_NAME = "manuscript"
INDEX_FILE_NAME = "index.yaml"
SETTINGS_FILE_NAME = "settings.yaml"

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppPaths:
    """Container for application paths.

    The manuscript directory holds one sub-directory per category; the index
    file lists every video by name and category.
    """

    root: Path
    manuscript_dir: Path
    index_path: Path
    settings_path: Path
    logs_dir: Path


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the API server and logging."""

    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def get_paths(root: Path | str | None = None) -> AppPaths:
    """Resolve application paths.

    Args:
        root: Optional project root override. Falls back to the
            ``VIDEOFLOW_ROOT`` environment variable, then the working directory.

    Returns:
        AppPaths for the resolved root.
    """

    if root is None:
        root = os.environ.get("VIDEOFLOW_ROOT") or Path.cwd()
    base = Path(root)
    return AppPaths(
        root=base,
        manuscript_dir=base / MANUSCRIPT_DIR_NAME,
        index_path=base / INDEX_FILE_NAME,
        settings_path=base / SETTINGS_FILE_NAME,
        logs_dir=base / "data" / "logs",
    )


def _read_settings_file(path: Path) -> dict[str, Any]:
    logger = logging.getLogger(__name__)
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(
            "Settings file could not be read; using defaults",
            extra={
                "event": "settings_unreadable",
                "context": {"path": str(path), "error": str(exc)},
            },
        )
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def load_settings(paths: AppPaths) -> Settings:
    """Load settings from settings.yaml with environment overrides."""

    data = _read_settings_file(paths.settings_path)
    api = data.get("api") if isinstance(data.get("api"), dict) else {}
    logging_section = (
        data.get("logging") if isinstance(data.get("logging"), dict) else {}
    )

    host = str(api.get("host") or DEFAULT_API_HOST)
    port = api.get("port", DEFAULT_API_PORT)
    level = str(logging_section.get("level") or DEFAULT_LOG_LEVEL)

    env_port = os.environ.get("VIDEOFLOW_API_PORT")
    if env_port:
        port = env_port
    env_level = os.environ.get("VIDEOFLOW_LOG_LEVEL")
    if env_level:
        level = env_level

    try:
        port = int(port)
    except (TypeError, ValueError):
        logging.getLogger(__name__).warning(
            "Invalid API port in settings; using default",
            extra={"event": "settings_invalid_port", "context": {"port": port}},
        )
        port = DEFAULT_API_PORT

    return Settings(api_host=host, api_port=port, log_level=level.upper())
