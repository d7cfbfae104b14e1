"""Data structures for videos, the index and derived progress.

Persisted key names are the lower-cased field names used by existing
manuscript files; a few localisation keys keep their camel case and are only
written when set.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

YAML_KEY = "yaml_key"
OMIT_EMPTY = "omit_empty"


def _key(name: str, omit_empty: bool = False) -> dict[str, Any]:
    return {YAML_KEY: name, OMIT_EMPTY: omit_empty}


@dataclass(frozen=True)
class Tasks:
    """A completed/total pair summarising progress over a group of fields."""

    completed: int = 0
    total: int = 0

    @property
    def done(self) -> bool:
        return self.total > 0 and self.completed == self.total

    def __add__(self, other: Tasks) -> Tasks:
        return Tasks(self.completed + other.completed, self.total + other.total)

    def to_dict(self) -> dict[str, int]:
        return {"completed": self.completed, "total": self.total}

    @classmethod
    def from_dict(cls, data: Any) -> Tasks:
        if not isinstance(data, dict):
            return cls()
        return cls(
            completed=_as_int(data.get("completed")),
            total=_as_int(data.get("total")),
        )


@dataclass
class Sponsorship:
    """Sponsorship details attached to a video."""

    amount: str = ""
    emails: str = ""
    blocked: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"amount": self.amount, "emails": self.emails, "blocked": self.blocked}

    @classmethod
    def from_dict(cls, data: Any) -> Sponsorship:
        if not isinstance(data, dict):
            return cls()
        return cls(
            amount=_as_str(data.get("amount")),
            emails=_as_str(data.get("emails")),
            blocked=_as_str(data.get("blocked")),
        )


@dataclass
class Playlist:
    """A playlist the video is published to."""

    title: str = ""
    id: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "id": self.id}

    @classmethod
    def from_dict(cls, data: Any) -> Playlist:
        if not isinstance(data, dict):
            return cls()
        return cls(title=_as_str(data.get("title")), id=_as_str(data.get("id")))


@dataclass(frozen=True)
class IndexEntry:
    """Pointer to a video record in the index file."""

    name: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "category": self.category}

    @classmethod
    def from_dict(cls, data: Any) -> IndexEntry | None:
        if not isinstance(data, dict):
            return None
        name = _as_str(data.get("name"))
        category = _as_str(data.get("category"))
        if not name and not category:
            return None
        return cls(name=name, category=category)


@dataclass
class Video:
    """All data recorded for one video project.

    The five Tasks slots are a display cache refreshed on save; phase and
    progress are always recomputed from the other fields.
    """

    name: str = field(default="", metadata=_key("name"))
    index: int = field(default=0, metadata=_key("index"))
    path: str = field(default="", metadata=_key("path"))
    category: str = field(default="", metadata=_key("category"))

    init: Tasks = field(default_factory=Tasks, metadata=_key("init"))
    work: Tasks = field(default_factory=Tasks, metadata=_key("work"))
    define: Tasks = field(default_factory=Tasks, metadata=_key("define"))
    edit: Tasks = field(default_factory=Tasks, metadata=_key("edit"))
    publish: Tasks = field(default_factory=Tasks, metadata=_key("publish"))

    # Initial details
    project_name: str = field(default="", metadata=_key("projectname"))
    project_url: str = field(default="", metadata=_key("projecturl"))
    sponsorship: Sponsorship = field(
        default_factory=Sponsorship, metadata=_key("sponsorship")
    )
    date: str = field(default="", metadata=_key("date"))
    delayed: bool = field(default=False, metadata=_key("delayed"))
    gist: str = field(default="", metadata=_key("gist"))

    # Work progress
    code: bool = field(default=False, metadata=_key("code"))
    head: bool = field(default=False, metadata=_key("head"))
    screen: bool = field(default=False, metadata=_key("screen"))
    related_videos: str = field(default="", metadata=_key("relatedvideos"))
    thumbnails: bool = field(default=False, metadata=_key("thumbnails"))
    diagrams: bool = field(default=False, metadata=_key("diagrams"))
    screenshots: bool = field(default=False, metadata=_key("screenshots"))
    location: str = field(default="", metadata=_key("location"))
    tagline: str = field(default="", metadata=_key("tagline"))
    tagline_ideas: str = field(default="", metadata=_key("taglineideas"))
    other_logos: str = field(default="", metadata=_key("otherlogos"))

    # Definition
    title: str = field(default="", metadata=_key("title"))
    description: str = field(default="", metadata=_key("description"))
    highlight: str = field(default="", metadata=_key("highlight"))
    tags: str = field(default="", metadata=_key("tags"))
    description_tags: str = field(default="", metadata=_key("descriptiontags"))
    tweet: str = field(default="", metadata=_key("tweet"))
    animations: str = field(default="", metadata=_key("animations"))
    request_thumbnail: bool = field(default=False, metadata=_key("requestthumbnail"))

    # Post-production
    thumbnail: str = field(default="", metadata=_key("thumbnail"))
    members: str = field(default="", metadata=_key("members"))
    request_edit: bool = field(default=False, metadata=_key("requestedit"))
    timecodes: str = field(default="", metadata=_key("timecodes"))
    movie: bool = field(default=False, metadata=_key("movie"))
    slides: bool = field(default=False, metadata=_key("slides"))

    # Publishing
    upload_video: str = field(default="", metadata=_key("uploadvideo"))
    video_id: str = field(default="", metadata=_key("videoid"))
    hugo_path: str = field(default="", metadata=_key("hugopath"))
    playlists: list[Playlist] = field(default_factory=list, metadata=_key("playlists"))

    # Post-publish
    dot_posted: bool = field(default=False, metadata=_key("dotposted"))
    bluesky_posted: bool = field(default=False, metadata=_key("blueskyposted"))
    linkedin_posted: bool = field(default=False, metadata=_key("linkedinposted"))
    slack_posted: bool = field(default=False, metadata=_key("slackposted"))
    hn_posted: bool = field(default=False, metadata=_key("hnposted"))
    youtube_highlight: bool = field(default=False, metadata=_key("youtubehighlight"))
    youtube_comment: bool = field(default=False, metadata=_key("youtubecomment"))
    youtube_comment_reply: bool = field(
        default=False, metadata=_key("youtubecommentreply")
    )
    gde: bool = field(default=False, metadata=_key("gde"))
    repo: str = field(default="", metadata=_key("repo"))
    notified_sponsors: bool = field(default=False, metadata=_key("notifiedsponsors"))

    # Localisation
    language: str = field(default="", metadata=_key("language"))
    applied_language: str = field(
        default="", metadata=_key("appliedLanguage", omit_empty=True)
    )
    audio_language: str = field(
        default="", metadata=_key("audioLanguage", omit_empty=True)
    )
    applied_audio_language: str = field(
        default="", metadata=_key("appliedAudioLanguage", omit_empty=True)
    )

    def is_empty(self) -> bool:
        """Return True when the record carries no identity (file absent or unreadable)."""

        return not self.name and not self.category

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted key layout."""

        data: dict[str, Any] = {}
        for spec in fields(self):
            value = getattr(self, spec.name)
            if spec.metadata[OMIT_EMPTY] and not value:
                continue
            if isinstance(value, (Tasks, Sponsorship)):
                value = value.to_dict()
            elif spec.name == "playlists":
                value = [playlist.to_dict() for playlist in value]
            data[spec.metadata[YAML_KEY]] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Video:
        """Build a Video from a persisted mapping, ignoring unknown keys."""

        if not isinstance(data, dict):
            return cls()
        video = cls()
        for spec in fields(cls):
            key = spec.metadata[YAML_KEY]
            if key not in data:
                continue
            raw = data[key]
            current = getattr(video, spec.name)
            if isinstance(current, Tasks):
                value: Any = Tasks.from_dict(raw)
            elif isinstance(current, Sponsorship):
                value = Sponsorship.from_dict(raw)
            elif spec.name == "playlists":
                items = raw if isinstance(raw, list) else []
                value = [Playlist.from_dict(item) for item in items if isinstance(item, dict)]
            elif isinstance(current, bool):
                value = raw if isinstance(raw, bool) else False
            elif isinstance(current, int):
                value = _as_int(raw)
            else:
                value = _as_str(raw)
            setattr(video, spec.name, value)
        return video


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
