"""Video lifecycle operations shared by the CLI and the API."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from videoflow.config import AppPaths
from videoflow.errors import InvalidRequestError, StorageError, VideoNotFoundError
from videoflow.models import IndexEntry, Tasks, Video
from videoflow.services.aspects import (
    apply_field_updates,
    refresh_cached_tasks,
    video_overall_progress,
)
from videoflow.services.phases import Phase, count_phases, infer_phase
from videoflow.storage import (
    category_dir,
    delete_video_files,
    list_categories,
    load_index,
    load_video,
    path_for,
    save_index,
    save_video,
    video_exists,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoListItem:
    """Lightweight view of a video for list screens."""

    name: str
    category: str
    date: str
    title: str
    thumbnail: str
    phase: Phase
    progress: Tasks

    @property
    def status(self) -> str:
        return "published" if self.phase is Phase.PUBLISHED else "draft"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "date": self.date,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "status": self.status,
            "phase": int(self.phase),
            "progress": self.progress.to_dict(),
        }


@dataclass(frozen=True)
class Category:
    """A category and the directory holding its videos."""

    name: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path}


def _require(name: str, category: str) -> None:
    if not name.strip() or not category.strip():
        raise InvalidRequestError("name and category are required")


class VideoService:
    """Create, read, update, delete and classify videos."""

    def __init__(self, paths: AppPaths):
        self.paths = paths

    def video_path(self, name: str, category: str, extension: str = "yaml") -> Path:
        return path_for(self.paths.manuscript_dir, category, name, extension)

    def load_entry(self, entry: IndexEntry) -> Video:
        """Load the record an index entry points to.

        A dangling entry yields an empty video, which classifies as Ideas.
        A record file that lacks its identity, or cannot be parsed, takes the
        entry's name and category.
        """

        return self._load(entry.name, entry.category) or Video()

    def _load(self, name: str, category: str) -> Video | None:
        path = self.video_path(name, category)
        if not video_exists(path):
            return None
        video = load_video(path)
        video.name = video.name or name
        video.category = video.category or category
        return video

    def get_index(self) -> list[IndexEntry]:
        return load_index(self.paths.index_path)

    def get_phase_counts(self) -> dict[Phase, int]:
        """Count indexed videos per phase."""

        return count_phases(self.load_entry(entry) for entry in self.get_index())

    def list_entries(self, phase: Phase | None = None) -> list[tuple[IndexEntry, Video]]:
        """Return index entries with their records, optionally filtered by phase."""

        result = []
        for entry in self.get_index():
            video = self.load_entry(entry)
            if phase is not None and infer_phase(video) is not phase:
                continue
            result.append((entry, video))
        return result

    def list_videos(self, phase: Phase | None = None) -> list[Video]:
        return [video for _, video in self.list_entries(phase)]

    def list_summaries(self, phase: Phase | None = None) -> list[VideoListItem]:
        """Return lightweight list items in index order."""

        items = []
        for entry, video in self.list_entries(phase):
            items.append(
                VideoListItem(
                    name=video.name or entry.name,
                    category=video.category or entry.category,
                    date=video.date,
                    title=video.title,
                    thumbnail=video.thumbnail,
                    phase=infer_phase(video),
                    progress=video_overall_progress(video),
                )
            )
        return items

    def get_video(self, name: str, category: str) -> Video:
        """Load a video or raise VideoNotFoundError."""

        _require(name, category)
        video = self._load(name, category)
        if video is None:
            raise VideoNotFoundError(name, category)
        return video

    def find_video(self, name: str | None, category: str | None) -> Video | None:
        """Load a video if both keys are given and the record exists."""

        if not name or not category:
            return None
        return self._load(name, category)

    def _save(self, video: Video, path: Path) -> None:
        refresh_cached_tasks(video)
        video.path = str(path)
        save_video(video, path)

    def create_video(self, name: str, category: str) -> Video:
        """Create an empty record and append it to the index."""

        _require(name, category)
        path = self.video_path(name, category)
        index = self.get_index()
        if video_exists(path) or IndexEntry(name, category) in index:
            raise InvalidRequestError(f"Video already exists: {name} ({category})")

        video = Video(
            name=name,
            category=category,
            gist=str(self.video_path(name, category, "md")),
        )
        self._save(video, path)
        index.append(IndexEntry(name=name, category=category))
        save_index(index, self.paths.index_path)
        logger.info(
            "Created video",
            extra={
                "event": "video_created",
                "context": {"name": name, "category": category, "path": str(path)},
            },
        )
        return video

    def update_video(self, video: Video) -> Video:
        """Overwrite an existing record with the given video."""

        _require(video.name, video.category)
        path = self.video_path(video.name, video.category)
        if not video_exists(path):
            raise VideoNotFoundError(video.name, video.category)
        self._save(video, path)
        logger.info(
            "Updated video",
            extra={
                "event": "video_updated",
                "context": {"name": video.name, "category": video.category},
            },
        )
        return video

    def update_aspect(
        self, name: str, category: str, aspect_key: str, updates: Mapping[str, Any]
    ) -> Video:
        """Apply field updates of one aspect and save the video."""

        video = self.get_video(name, category)
        applied = apply_field_updates(video, aspect_key, updates)
        self._save(video, self.video_path(name, category))
        logger.info(
            "Updated video aspect",
            extra={
                "event": "video_aspect_updated",
                "context": {
                    "name": name,
                    "category": category,
                    "aspect": aspect_key,
                    "fields": applied,
                },
            },
        )
        return video

    def delete_video(self, name: str, category: str) -> list[Path]:
        """Delete a video's files and its index entry."""

        _require(name, category)
        removed = delete_video_files(self.video_path(name, category))
        index = self.get_index()
        remaining = [
            entry
            for entry in index
            if entry.name != name or entry.category != category
        ]
        if not removed and len(remaining) == len(index):
            raise VideoNotFoundError(name, category)
        save_index(remaining, self.paths.index_path)
        logger.info(
            "Deleted video",
            extra={
                "event": "video_deleted",
                "context": {"name": name, "category": category},
            },
        )
        return removed

    def move_video(self, name: str, category: str, target_category: str) -> Video:
        """Move a video and its sibling files to another category.

        The record is written to the target directory before anything else
        moves, so a failed save leaves the source untouched. A target that
        maps to the same directory only renames the category.
        """

        _require(name, target_category)
        video = self.get_video(name, category)
        if target_category == category:
            return video
        source = self.video_path(name, category)
        target = self.video_path(name, target_category)
        video.category = target_category

        if target == source:
            self._save(video, source)
        else:
            if video_exists(target):
                raise InvalidRequestError(
                    f"Video already exists: {name} ({target_category})"
                )
            if video.gist == str(self.video_path(name, category, "md")):
                video.gist = str(self.video_path(name, target_category, "md"))
            self._save(video, target)
            self._move_siblings(source, target)

        index = [
            IndexEntry(name, target_category)
            if entry.name == name and entry.category == category
            else entry
            for entry in self.get_index()
        ]
        save_index(index, self.paths.index_path)
        logger.info(
            "Moved video",
            extra={
                "event": "video_moved",
                "context": {"name": name, "from": category, "to": target_category},
            },
        )
        return video

    def _move_siblings(self, source: Path, target: Path) -> None:
        """Move files sharing the source stem, then drop the old record."""

        try:
            for sibling in sorted(source.parent.iterdir()):
                if sibling.stem != source.stem or sibling == source or not sibling.is_file():
                    continue
                shutil.move(str(sibling), str(target.parent / sibling.name))
            source.unlink()
        except OSError as exc:
            raise StorageError(str(source), str(exc)) from exc

    def get_categories(self) -> list[Category]:
        """Return categories from the index and the manuscript directory."""

        by_dir: dict[str, Category] = {}
        for entry in self.get_index():
            directory = category_dir(self.paths.manuscript_dir, entry.category)
            by_dir.setdefault(
                directory.name, Category(name=entry.category, path=str(directory))
            )
        for directory in list_categories(self.paths.manuscript_dir):
            by_dir.setdefault(
                directory.name,
                Category(name=directory.name.replace("-", " ").title(), path=str(directory)),
            )
        return sorted(by_dir.values(), key=lambda item: item.name.lower())
