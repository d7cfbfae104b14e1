"""YAML persistence for video records and the index.

Every path to a video file is built by path_for(); nothing else derives
record locations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import yaml

from videoflow.errors import StorageError
from videoflow.models import IndexEntry, Video

logger = logging.getLogger(__name__)


def sanitize_category(category: str) -> str:
    """Return the directory name used for a category."""

    return category.lower().replace(" ", "-")


def sanitize_name(name: str) -> str:
    """Return the file stem used for a video name."""

    return name.lower().replace(" ", "-").replace("?", "")


def category_dir(manuscript_dir: Path, category: str) -> Path:
    """Return the directory holding all videos of a category."""

    return Path(manuscript_dir) / sanitize_category(category)


def path_for(
    manuscript_dir: Path, category: str, name: str, extension: str = "yaml"
) -> Path:
    """Return the file path for a video record or one of its sibling files."""

    return category_dir(manuscript_dir, category) / f"{sanitize_name(name)}.{extension}"


def video_exists(path: Path) -> bool:
    """Return True if a record file exists at the path."""

    return Path(path).is_file()


def _read_yaml(path: Path):
    return yaml.safe_load(Path(path).read_text(encoding="utf-8"))


def _write_yaml(data, path: Path) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Overwrites in place; a crash mid-write can leave a truncated file.
        path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
    except OSError as exc:
        raise StorageError(str(path), str(exc)) from exc


def load_video(path: Path) -> Video:
    """Load a video record.

    A missing file yields an empty Video. An unreadable or malformed file is
    logged and also yields an empty Video, so phase inference and progress
    never see partial data.
    """

    path = Path(path)
    if not path.exists():
        return Video()
    try:
        data = _read_yaml(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning(
            "Video record could not be parsed",
            extra={
                "event": "video_record_malformed",
                "context": {"path": str(path), "error": str(exc)},
            },
        )
        return Video()
    if data is None:
        return Video()
    if not isinstance(data, dict):
        logger.warning(
            "Video record is not a mapping",
            extra={
                "event": "video_record_malformed",
                "context": {"path": str(path), "type": type(data).__name__},
            },
        )
        return Video()
    return Video.from_dict(data)


def save_video(video: Video, path: Path) -> None:
    """Serialise a video record and overwrite the file."""

    _write_yaml(video.to_dict(), path)
    logger.debug(
        "Video record written",
        extra={"event": "video_saved", "context": {"path": str(path)}},
    )


def load_index(index_path: Path) -> list[IndexEntry]:
    """Load the ordered list of index entries."""

    index_path = Path(index_path)
    if not index_path.exists():
        return []
    try:
        data = _read_yaml(index_path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning(
            "Index file could not be parsed",
            extra={
                "event": "index_malformed",
                "context": {"path": str(index_path), "error": str(exc)},
            },
        )
        return []
    if not isinstance(data, list):
        return []
    entries = []
    for item in data:
        entry = IndexEntry.from_dict(item)
        if entry is not None:
            entries.append(entry)
    return entries


def save_index(entries: Iterable[IndexEntry], index_path: Path) -> None:
    """Replace the index file with the given entries."""

    _write_yaml([entry.to_dict() for entry in entries], index_path)


def delete_video_files(path: Path) -> list[Path]:
    """Delete a record and every sibling file sharing its stem.

    Returns:
        The paths that were removed.
    """

    path = Path(path)
    removed: list[Path] = []
    if not path.parent.is_dir():
        return removed
    for candidate in sorted(path.parent.iterdir()):
        if candidate.stem != path.stem or not candidate.is_file():
            continue
        try:
            candidate.unlink()
        except OSError as exc:
            raise StorageError(str(candidate), str(exc)) from exc
        removed.append(candidate)
    if removed:
        logger.info(
            "Deleted video files",
            extra={
                "event": "video_files_deleted",
                "context": {"paths": [str(item) for item in removed]},
            },
        )
    return removed


def list_categories(manuscript_dir: Path) -> list[Path]:
    """Return category directories present on disk."""

    manuscript_dir = Path(manuscript_dir)
    if not manuscript_dir.is_dir():
        return []
    return sorted(
        entry
        for entry in manuscript_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )
