"""Catalog of editing aspects.

Each aspect groups the fields of one production phase. The catalog is the
single table binding every field to its accessor and completion criterion;
forms, progress suffixes and API payloads are all generated from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from operator import attrgetter
from typing import Any, Mapping

from videoflow.errors import AspectNotFoundError, InvalidRequestError
from videoflow.models import Tasks, Video
from videoflow.services.completion import Criterion
from videoflow.services.progress import aspect_progress, overall_progress, progress_by_aspect

logger = logging.getLogger(__name__)

FIELD_TYPE_STRING = "string"
FIELD_TYPE_TEXT = "text"
FIELD_TYPE_BOOLEAN = "boolean"
FIELD_TYPE_DATE = "date"
FIELD_TYPE_NUMBER = "number"
FIELD_TYPE_SELECT = "select"

DATE_FORMAT = "%Y-%m-%dT%H:%M"

ASPECT_INITIAL_DETAILS = "initial-details"
ASPECT_WORK_PROGRESS = "work-progress"
ASPECT_DEFINITION = "definition"
ASPECT_POST_PRODUCTION = "post-production"
ASPECT_PUBLISHING = "publishing"
ASPECT_POST_PUBLISH = "post-publish"


@dataclass(frozen=True)
class FieldSpec:
    """One editable field of an aspect."""

    key: str
    attribute: str
    title: str
    field_type: str
    criterion: Criterion
    order: int
    description: str = ""
    required: bool = False
    options: tuple[str, ...] = ()

    def value_of(self, video: Video) -> Any:
        """Read the field's current value from a video."""

        return attrgetter(self.attribute)(video)

    @property
    def ui_hints(self) -> dict[str, Any]:
        hints: dict[str, Any] = {"inputType": "text", "multiline": False}
        if self.field_type == FIELD_TYPE_TEXT:
            hints = {"inputType": "textarea", "multiline": True, "rows": 3}
        elif self.field_type == FIELD_TYPE_BOOLEAN:
            hints = {"inputType": "checkbox", "multiline": False}
        elif self.field_type == FIELD_TYPE_DATE:
            hints = {
                "inputType": "datetime",
                "multiline": False,
                "placeholder": "YYYY-MM-DDTHH:MM",
            }
        elif self.field_type == FIELD_TYPE_NUMBER:
            hints = {"inputType": "number", "multiline": False}
        elif self.field_type == FIELD_TYPE_SELECT:
            hints = {
                "inputType": "select",
                "multiline": False,
                "options": [{"label": value, "value": value} for value in self.options],
            }
        if self.description:
            hints["helpText"] = self.description
        return hints

    @property
    def default_value(self) -> Any:
        if self.field_type == FIELD_TYPE_BOOLEAN:
            return False
        if self.field_type == FIELD_TYPE_NUMBER:
            return 0
        return "" if self.required else None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "key": self.key,
            "name": self.title,
            "type": self.field_type,
            "required": self.required,
            "order": self.order,
            "description": self.description,
            "completionCriteria": self.criterion.value,
            "uiHints": self.ui_hints,
            "defaultValue": self.default_value,
        }
        if self.options:
            data["options"] = {"values": list(self.options)}
        return data


@dataclass(frozen=True)
class Aspect:
    """A named, ordered group of fields for one production phase."""

    key: str
    title: str
    description: str
    order: int
    icon: str
    fields: tuple[FieldSpec, ...]

    @property
    def endpoint(self) -> str:
        return f"/api/videos/{{videoName}}/{self.key}"

    def field(self, key: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.key == key:
                return spec
        return None

    def summary(self, video: Video | None = None) -> dict[str, Any]:
        progress = aspect_progress(video, self)
        return {
            "key": self.key,
            "title": self.title,
            "description": self.description,
            "endpoint": self.endpoint,
            "icon": self.icon,
            "order": self.order,
            "fieldCount": len(self.fields),
            "completedFieldCount": progress.completed,
        }


def _field(
    order: int,
    key: str,
    attribute: str,
    title: str,
    field_type: str,
    criterion: Criterion,
    description: str,
    required: bool = False,
) -> FieldSpec:
    return FieldSpec(
        key=key,
        attribute=attribute,
        title=title,
        field_type=field_type,
        criterion=criterion,
        order=order,
        description=description,
        required=required,
    )


ASPECTS: tuple[Aspect, ...] = (
    Aspect(
        key=ASPECT_INITIAL_DETAILS,
        title="Initial Details",
        description="Initial video details and project information",
        order=1,
        icon="info",
        fields=(
            _field(1, "projectName", "project_name", "Project Name",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Name of the related project"),
            _field(2, "projectURL", "project_url", "Project URL",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "URL to the project repository or documentation"),
            _field(3, "sponsorshipAmount", "sponsorship.amount", "Sponsorship Amount",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Sponsorship amount, or '-'/'N/A' when not sponsored"),
            _field(4, "sponsorshipEmails", "sponsorship.emails",
                   "Sponsorship Emails (comma separated)",
                   FIELD_TYPE_STRING, Criterion.CONDITIONAL_SPONSORSHIP,
                   "Sponsor contact emails"),
            _field(5, "sponsorshipBlockedReason", "sponsorship.blocked",
                   "Sponsorship Blocked Reason",
                   FIELD_TYPE_STRING, Criterion.EMPTY_OR_FILLED,
                   "Reason the sponsorship blocks publication"),
            _field(6, "publishDate", "date", "Publish Date (YYYY-MM-DDTHH:MM)",
                   FIELD_TYPE_DATE, Criterion.FILLED_ONLY,
                   "Scheduled publication date and time"),
            _field(7, "delayed", "delayed", "Delayed",
                   FIELD_TYPE_BOOLEAN, Criterion.FALSE_ONLY,
                   "Whether the video is delayed"),
            _field(8, "gistPath", "gist", "Gist Path (.md file)",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Path to the manuscript file"),
        ),
    ),
    Aspect(
        key=ASPECT_WORK_PROGRESS,
        title="Work In Progress",
        description="Work progress and content creation status",
        order=2,
        icon="video",
        fields=(
            _field(1, "codeDone", "code", "Code Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Code/demonstration completed"),
            _field(2, "talkingHeadDone", "head", "Talking Head Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Talking head video recorded"),
            _field(3, "screenRecordingDone", "screen", "Screen Recording Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Screen recording completed"),
            _field(4, "relatedVideos", "related_videos", "Related Videos (comma separated)",
                   FIELD_TYPE_TEXT, Criterion.FILLED_ONLY,
                   "List of related videos for reference"),
            _field(5, "thumbnailsDone", "thumbnails", "Thumbnails Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Thumbnail images prepared"),
            _field(6, "diagramsDone", "diagrams", "Diagrams Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Diagrams and visual aids created"),
            _field(7, "screenshotsDone", "screenshots", "Screenshots Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Screenshots captured"),
            _field(8, "filesLocation", "location", "Files Location (e.g., Google Drive link)",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "File storage location"),
            _field(9, "tagline", "tagline", "Tagline",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Video tagline or subtitle"),
            _field(10, "taglineIdeas", "tagline_ideas", "Tagline Ideas",
                   FIELD_TYPE_TEXT, Criterion.FILLED_ONLY,
                   "Alternative tagline options"),
            _field(11, "otherLogos", "other_logos", "Other Logos/Assets",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Additional logos or assets needed"),
        ),
    ),
    Aspect(
        key=ASPECT_DEFINITION,
        title="Definition",
        description="Video content definition and metadata",
        order=3,
        icon="edit",
        fields=(
            _field(1, "title", "title", "Title",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Video title", required=True),
            _field(2, "description", "description", "Description",
                   FIELD_TYPE_TEXT, Criterion.FILLED_ONLY,
                   "Video description text"),
            _field(3, "highlight", "highlight", "Highlight",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Key highlight or main point"),
            _field(4, "tags", "tags", "Tags",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Video tags for categorization"),
            _field(5, "descriptionTags", "description_tags", "Description Tags",
                   FIELD_TYPE_TEXT, Criterion.FILLED_ONLY,
                   "Tags for video description"),
            _field(6, "tweet", "tweet", "Tweet",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Social media post text"),
            _field(7, "animationsScript", "animations", "Animations Script",
                   FIELD_TYPE_TEXT, Criterion.FILLED_ONLY,
                   "Animation instructions or script"),
        ),
    ),
    Aspect(
        key=ASPECT_POST_PRODUCTION,
        title="Post-Production",
        description="Post-production editing and review tasks",
        order=4,
        icon="scissors",
        fields=(
            _field(1, "thumbnailPath", "thumbnail", "Thumbnail Path",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Path to thumbnail image file"),
            _field(2, "members", "members", "Members (comma separated)",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Team members involved"),
            _field(3, "requestEdit", "request_edit", "Edit Request",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Editing has been requested"),
            _field(4, "timecodes", "timecodes", "Timecodes",
                   FIELD_TYPE_TEXT, Criterion.NO_FIXME,
                   "Important timestamp markers"),
            _field(5, "movieDone", "movie", "Movie Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Video editing completed"),
            _field(6, "slidesDone", "slides", "Slides Done",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Presentation slides finalized"),
        ),
    ),
    Aspect(
        key=ASPECT_PUBLISHING,
        title="Publishing Details",
        description="Publishing settings and video upload",
        order=5,
        icon="upload",
        fields=(
            _field(1, "videoFilePath", "upload_video", "Video File Path",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Path to final video file"),
            _field(2, "youTubeVideoId", "video_id", "Current YouTube Video ID",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "ID of the uploaded video"),
            _field(3, "hugoPostPath", "hugo_path", "Create/Update Hugo Post",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Path to the blog post"),
        ),
    ),
    Aspect(
        key=ASPECT_POST_PUBLISH,
        title="Post-Publish Details",
        description="Post-publication tasks and social media",
        order=6,
        icon="share",
        fields=(
            _field(1, "dotPosted", "dot_posted", "DevOpsToolkit Post Sent (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Posted to the DevOpsToolkit site"),
            _field(2, "blueSkyPosted", "bluesky_posted", "BlueSky Post Sent",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Posted to BlueSky"),
            _field(3, "linkedInPosted", "linkedin_posted", "LinkedIn Post Sent (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Posted to LinkedIn"),
            _field(4, "slackPosted", "slack_posted", "Slack Post Sent",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Posted to Slack channels"),
            _field(5, "youTubeHighlight", "youtube_highlight",
                   "YouTube Highlight Created (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "YouTube highlight created"),
            _field(6, "youTubeComment", "youtube_comment",
                   "YouTube Pinned Comment Added (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Pinned comment added"),
            _field(7, "youTubeCommentReply", "youtube_comment_reply",
                   "Replied to YouTube Comments (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Replied to comments"),
            _field(8, "gdePosted", "gde", "GDE Advocu Post Sent (manual)",
                   FIELD_TYPE_BOOLEAN, Criterion.TRUE_ONLY,
                   "Posted to GDE Advocu"),
            _field(9, "codeRepository", "repo", "Code Repository URL",
                   FIELD_TYPE_STRING, Criterion.FILLED_ONLY,
                   "Link to associated code repository"),
            _field(10, "notifySponsors", "notified_sponsors", "Notify Sponsors",
                   FIELD_TYPE_BOOLEAN, Criterion.CONDITIONAL_SPONSORS,
                   "Sponsors notified of publication"),
        ),
    ),
)

# Video attributes holding each aspect's cached Tasks.
TASKS_ATTRIBUTE = {
    ASPECT_INITIAL_DETAILS: "init",
    ASPECT_WORK_PROGRESS: "work",
    ASPECT_DEFINITION: "define",
    ASPECT_POST_PRODUCTION: "edit",
    ASPECT_PUBLISHING: "publish",
}


def get_aspects() -> tuple[Aspect, ...]:
    """Return every aspect in display order."""

    return ASPECTS


def get_aspect(key: str) -> Aspect:
    """Return one aspect or raise AspectNotFoundError."""

    for aspect in ASPECTS:
        if aspect.key == key:
            return aspect
    raise AspectNotFoundError(key)


def aspect_overview(video: Video | None = None) -> dict[str, Any]:
    """Return all aspects with per-video completion counts.

    Without a video, or with an empty one, every aspect reports zero
    completed fields.
    """

    return {"aspects": [aspect.summary(video) for aspect in ASPECTS]}


def aspect_fields(key: str) -> dict[str, Any]:
    """Return full field metadata for one aspect."""

    aspect = get_aspect(key)
    return {
        "aspectKey": aspect.key,
        "aspectTitle": aspect.title,
        "fields": [spec.to_dict() for spec in aspect.fields],
    }


def video_progress(video: Video | None) -> dict[str, Tasks]:
    """Return progress for every aspect of a video."""

    return progress_by_aspect(video, ASPECTS)


def video_overall_progress(video: Video | None) -> Tasks:
    """Return progress summed over every aspect."""

    return overall_progress(video, ASPECTS)


def refresh_cached_tasks(video: Video) -> None:
    """Write current aspect progress into the video's display cache.

    Post-publish progress has no cache slot of its own.
    """

    for aspect_key, attribute in TASKS_ATTRIBUTE.items():
        setattr(video, attribute, aspect_progress(video, get_aspect(aspect_key)))


def field_value(video: Video, spec: FieldSpec) -> Any:
    return spec.value_of(video)


def aspect_values(video: Video, aspect_key: str) -> dict[str, Any]:
    """Return the current values of one aspect's fields keyed by field key."""

    aspect = get_aspect(aspect_key)
    return {spec.key: field_value(video, spec) for spec in aspect.fields}


def _coerce(spec: FieldSpec, value: Any) -> Any:
    if spec.field_type == FIELD_TYPE_BOOLEAN:
        if not isinstance(value, bool):
            raise InvalidRequestError(f"{spec.key} must be a boolean")
        return value
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidRequestError(f"{spec.key} must be a string")
    if spec.field_type == FIELD_TYPE_DATE and value:
        try:
            datetime.strptime(value, DATE_FORMAT)
        except ValueError as exc:
            raise InvalidRequestError(
                f"{spec.key} must use the YYYY-MM-DDTHH:MM format"
            ) from exc
    return value


def _assign(video: Video, attribute: str, value: Any) -> None:
    owner_path, _, leaf = attribute.rpartition(".")
    owner = attrgetter(owner_path)(video) if owner_path else video
    setattr(owner, leaf, value)


def apply_field_updates(
    video: Video, aspect_key: str, updates: Mapping[str, Any]
) -> list[str]:
    """Apply API field updates for one aspect to a video.

    All values are validated before any is written. Keys that are not
    fields of the aspect are ignored.

    Returns:
        The field keys that were applied.
    """

    aspect = get_aspect(aspect_key)
    pending: list[tuple[FieldSpec, Any]] = []
    ignored: list[str] = []
    for key, value in updates.items():
        spec = aspect.field(key)
        if spec is None:
            ignored.append(key)
            continue
        pending.append((spec, _coerce(spec, value)))

    for spec, value in pending:
        _assign(video, spec.attribute, value)

    if ignored:
        logger.info(
            "Ignored unknown aspect fields",
            extra={
                "event": "aspect_fields_ignored",
                "context": {"aspect": aspect_key, "fields": ignored},
            },
        )
    return [spec.key for spec, _ in pending]
