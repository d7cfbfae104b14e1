"""Progress aggregation over groups of fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from videoflow.models import Tasks, Video
from videoflow.services.completion import Criterion, is_complete

if TYPE_CHECKING:
    from videoflow.services.aspects import Aspect


def aggregate(
    pairs: Iterable[tuple[object, Criterion]], sponsorship_amount: str = ""
) -> Tasks:
    """Count how many (value, criterion) pairs are complete."""

    completed = 0
    total = 0
    for value, criterion in pairs:
        total += 1
        if is_complete(value, criterion, sponsorship_amount):
            completed += 1
    return Tasks(completed=completed, total=total)


def aspect_progress(video: Video | None, aspect: Aspect) -> Tasks:
    """Return progress of one aspect for a video.

    A missing or empty video counts nothing as complete.
    """

    if video is None or video.is_empty():
        return Tasks(completed=0, total=len(aspect.fields))
    return aggregate(
        ((spec.value_of(video), spec.criterion) for spec in aspect.fields),
        video.sponsorship.amount,
    )


def progress_by_aspect(video: Video | None, aspects: Sequence[Aspect]) -> dict[str, Tasks]:
    """Return progress keyed by aspect key, in catalog order."""

    return {aspect.key: aspect_progress(video, aspect) for aspect in aspects}


def overall_progress(video: Video | None, aspects: Sequence[Aspect]) -> Tasks:
    """Return the sum of progress across all aspects."""

    total = Tasks()
    for aspect in aspects:
        total = total + aspect_progress(video, aspect)
    return total
