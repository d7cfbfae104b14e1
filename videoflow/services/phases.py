"""Lifecycle phase inference.

The phase of a video is never stored. It is recomputed from the record on
every read by checking a fixed list of predicates in priority order; the
first one that holds wins. Clearing a field therefore moves a video back to
an earlier phase.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Iterable

from videoflow.models import Video


class Phase(IntEnum):
    """Lifecycle phases, with the ids exposed by the API."""

    PUBLISHED = 0
    PUBLISH_PENDING = 1
    EDIT_REQUESTED = 2
    MATERIAL_DONE = 3
    STARTED = 4
    DELAYED = 5
    SPONSORED_BLOCKED = 6
    IDEAS = 7

    @property
    def title(self) -> str:
        return PHASE_NAMES[self]


PHASE_NAMES = {
    Phase.PUBLISHED: "Published",
    Phase.PUBLISH_PENDING: "Publish Pending",
    Phase.EDIT_REQUESTED: "Edit Requested",
    Phase.MATERIAL_DONE: "Material Done",
    Phase.STARTED: "Started",
    Phase.DELAYED: "Delayed",
    Phase.SPONSORED_BLOCKED: "Sponsored Blocked",
    Phase.IDEAS: "Ideas",
}

# Order in which phases are listed by the menu and the API.
PHASE_MENU_ORDER = (
    Phase.PUBLISHED,
    Phase.PUBLISH_PENDING,
    Phase.EDIT_REQUESTED,
    Phase.MATERIAL_DONE,
    Phase.STARTED,
    Phase.DELAYED,
    Phase.SPONSORED_BLOCKED,
    Phase.IDEAS,
)


def _material_done(video: Video) -> bool:
    # Thumbnails and screenshots are not part of this check.
    return video.code and video.screen and video.head and video.diagrams


_RULES: tuple[tuple[Phase, Callable[[Video], bool]], ...] = (
    (Phase.DELAYED, lambda video: video.delayed),
    (Phase.SPONSORED_BLOCKED, lambda video: bool(video.sponsorship.blocked)),
    (Phase.PUBLISHED, lambda video: bool(video.repo)),
    (Phase.PUBLISH_PENDING, lambda video: bool(video.upload_video) and bool(video.tweet)),
    (Phase.EDIT_REQUESTED, lambda video: video.request_edit),
    (Phase.MATERIAL_DONE, _material_done),
    (Phase.STARTED, lambda video: bool(video.date)),
)


def infer_phase(video: Video) -> Phase:
    """Return the single phase a video currently occupies."""

    for phase, predicate in _RULES:
        if predicate(video):
            return phase
    return Phase.IDEAS


def parse_phase(value) -> Phase:
    """Convert an API/CLI phase id into a Phase.

    Raises:
        ValueError: if the value is not one of the phase ids.
    """

    return Phase(int(value))


def count_phases(videos: Iterable[Video]) -> dict[Phase, int]:
    """Count videos per phase, with every phase present."""

    counts = {phase: 0 for phase in PHASE_MENU_ORDER}
    for video in videos:
        counts[infer_phase(video)] += 1
    return counts
