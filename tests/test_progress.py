"""Tests for progress aggregation over aspects."""

from videoflow.models import Sponsorship, Tasks, Video
from videoflow.services.aspects import (
    ASPECT_INITIAL_DETAILS,
    ASPECT_POST_PUBLISH,
    ASPECT_WORK_PROGRESS,
    get_aspect,
    get_aspects,
    video_overall_progress,
    video_progress,
)
from videoflow.services.completion import Criterion, is_complete
from videoflow.services.progress import aggregate, aspect_progress


def test_aggregate_counts_pairs():
    pairs = [
        ("x", Criterion.FILLED_ONLY),
        ("", Criterion.FILLED_ONLY),
        (True, Criterion.TRUE_ONLY),
        (False, Criterion.FALSE_ONLY),
    ]
    assert aggregate(pairs) == Tasks(3, 4)


def test_aggregate_of_placeholders_is_complete():
    pairs = [("-", Criterion.FILLED_ONLY), ("N/A", Criterion.FILLED_ONLY)]
    result = aggregate(pairs)
    assert result.completed == result.total == 2
    assert result.done


def test_aggregate_passes_sponsorship_amount():
    pairs = [("", Criterion.CONDITIONAL_SPONSORSHIP)]
    assert aggregate(pairs) == Tasks(1, 1)
    assert aggregate(pairs, "500") == Tasks(0, 1)


def test_date_only_initial_details(started_video):
    """Only the date is set; defaults that satisfy their criterion also count."""
    aspect = get_aspect(ASPECT_INITIAL_DETAILS)
    progress = aspect_progress(started_video, aspect)

    # date, delayed=False, empty blocked reason and unsponsored emails.
    assert progress == Tasks(4, 8)
    date_spec = aspect.field("publishDate")
    assert is_complete(date_spec.value_of(started_video), date_spec.criterion)
    for key in ("projectName", "projectURL", "sponsorshipAmount", "gistPath"):
        spec = aspect.field(key)
        assert not is_complete(spec.value_of(started_video), spec.criterion)


def test_date_only_leaves_other_aspects_incomplete(started_video):
    progress = video_progress(started_video)
    assert progress[ASPECT_WORK_PROGRESS] == Tasks(0, 11)
    assert progress["definition"] == Tasks(0, 7)


def test_sponsored_video_needs_emails_and_notification():
    video = Video(name="v", category="c", sponsorship=Sponsorship(amount="1000"))
    initial = aspect_progress(video, get_aspect(ASPECT_INITIAL_DETAILS))
    post_publish = aspect_progress(video, get_aspect(ASPECT_POST_PUBLISH))

    # amount, delayed=False and blocked reason
    assert initial == Tasks(3, 8)
    assert post_publish == Tasks(0, 10)

    video.sponsorship.emails = "sponsor@example.com"
    video.notified_sponsors = True
    assert aspect_progress(video, get_aspect(ASPECT_INITIAL_DETAILS)) == Tasks(4, 8)
    assert aspect_progress(video, get_aspect(ASPECT_POST_PUBLISH)) == Tasks(1, 10)


def test_missing_video_counts_nothing():
    for aspect in get_aspects():
        assert aspect_progress(None, aspect) == Tasks(0, len(aspect.fields))
        assert aspect_progress(Video(), aspect) == Tasks(0, len(aspect.fields))


def test_overall_is_sum_of_aspects(material_done_video):
    per_aspect = video_progress(material_done_video)
    overall = video_overall_progress(material_done_video)
    assert overall.completed == sum(t.completed for t in per_aspect.values())
    assert overall.total == 45
