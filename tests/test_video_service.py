"""Tests for the video service."""

import pytest

from videoflow.errors import (
    AspectNotFoundError,
    InvalidRequestError,
    StorageError,
    VideoNotFoundError,
)
from videoflow.models import IndexEntry, Tasks
from videoflow.services.phases import Phase
from videoflow.storage import load_index, load_video, save_index


# =============================================================================
# CREATE
# =============================================================================

class TestCreate:

    def test_creates_record_and_index_entry(self, service, paths):
        video = service.create_video("Why GitOps?", "Dev Ops")

        record = paths.manuscript_dir / "dev-ops" / "why-gitops.yaml"
        assert record.is_file()
        assert video.gist == str(paths.manuscript_dir / "dev-ops" / "why-gitops.md")
        assert video.path == str(record)
        assert load_index(paths.index_path) == [IndexEntry("Why GitOps?", "Dev Ops")]

    def test_new_video_is_an_idea_with_cached_progress(self, service):
        video = service.create_video("v", "c")
        assert service.get_phase_counts()[Phase.IDEAS] == 1
        # gist, delayed=False, blocked and unsponsored emails
        assert video.init == Tasks(4, 8)

    def test_duplicate_is_rejected(self, service):
        service.create_video("v", "c")
        with pytest.raises(InvalidRequestError):
            service.create_video("v", "c")

    @pytest.mark.parametrize("name, category", [("", "c"), ("v", ""), ("  ", "c")])
    def test_name_and_category_required(self, service, name, category):
        with pytest.raises(InvalidRequestError):
            service.create_video(name, category)

    def test_index_keeps_creation_order(self, service):
        for name in ("c", "a", "b"):
            service.create_video(name, "x")
        assert [video.name for video in service.list_videos()] == ["c", "a", "b"]


# =============================================================================
# READ
# =============================================================================

class TestRead:

    def test_get_missing_video(self, service):
        with pytest.raises(VideoNotFoundError):
            service.get_video("nope", "c")

    def test_find_missing_video_returns_none(self, service):
        assert service.find_video("nope", "c") is None
        assert service.find_video(None, None) is None

    def test_dangling_index_entry_is_an_idea(self, service, paths):
        save_index([IndexEntry("ghost", "c")], paths.index_path)
        counts = service.get_phase_counts()
        assert counts[Phase.IDEAS] == 1

        summaries = service.list_summaries()
        assert summaries[0].name == "ghost"
        assert summaries[0].phase is Phase.IDEAS
        assert summaries[0].progress.completed == 0

    def test_list_filters_by_phase(self, make_video, service):
        make_video("started", date="2030-01-21T16:00")
        make_video("idea")
        make_video("late", delayed=True)

        assert [v.name for v in service.list_videos(Phase.STARTED)] == ["started"]
        assert [v.name for v in service.list_videos(Phase.DELAYED)] == ["late"]
        assert len(service.list_videos()) == 3

    def test_summary_status(self, make_video, service):
        make_video("done", repo="org/repo", title="Done")
        item = service.list_summaries()[0].to_dict()
        assert item["status"] == "published"
        assert item["phase"] == 0
        assert item["title"] == "Done"
        assert item["progress"]["total"] == 45


# =============================================================================
# UPDATE
# =============================================================================

class TestUpdate:

    def test_update_aspect_persists_and_refreshes_cache(self, service, paths):
        service.create_video("v", "c")
        service.update_aspect("v", "c", "work-progress", {"codeDone": True, "tagline": "t"})

        stored = load_video(paths.manuscript_dir / "c" / "v.yaml")
        assert stored.code is True
        assert stored.tagline == "t"
        assert stored.work == Tasks(2, 11)

    def test_update_aspect_unknown_key(self, service):
        service.create_video("v", "c")
        with pytest.raises(AspectNotFoundError):
            service.update_aspect("v", "c", "nope", {})

    def test_update_missing_video(self, service):
        with pytest.raises(VideoNotFoundError):
            service.update_aspect("v", "c", "definition", {"title": "x"})

    def test_update_aspect_on_record_without_identity(self, service, paths):
        record = paths.manuscript_dir / "c" / "v.yaml"
        record.parent.mkdir(parents=True)
        record.write_text("date: '2030-01-21T16:00'\n")
        save_index([IndexEntry("v", "c")], paths.index_path)

        video = service.update_aspect("v", "c", "work-progress", {"codeDone": True})

        stored = load_video(record)
        assert video.work == Tasks(1, 11)
        assert stored.work == Tasks(1, 11)
        assert stored.name == "v"
        assert stored.category == "c"
        assert stored.date == "2030-01-21T16:00"
        assert service.list_summaries()[0].phase is Phase.STARTED

    def test_update_aspect_on_malformed_record(self, service, paths):
        record = paths.manuscript_dir / "c" / "v.yaml"
        record.parent.mkdir(parents=True)
        record.write_text("title: [broken\n")

        service.update_aspect("v", "c", "work-progress", {"codeDone": True})

        stored = load_video(record)
        assert stored.code is True
        assert stored.work == Tasks(1, 11)
        assert stored.name == "v"
        assert stored.category == "c"

    def test_phase_follows_updates(self, service):
        service.create_video("v", "c")
        service.update_aspect("v", "c", "definition", {"tweet": "hello"})
        service.update_aspect("v", "c", "publishing", {"videoFilePath": "v.mp4"})
        assert service.get_phase_counts()[Phase.PUBLISH_PENDING] == 1

        service.update_aspect("v", "c", "post-publish", {"codeRepository": "org/repo"})
        assert service.get_phase_counts()[Phase.PUBLISHED] == 1


# =============================================================================
# DELETE / MOVE / CATEGORIES
# =============================================================================

class TestDeleteMove:

    def test_delete_removes_files_and_entry(self, service, paths):
        video = service.create_video("v", "c")
        md = paths.manuscript_dir / "c" / "v.md"
        md.write_text("# script")

        removed = service.delete_video("v", "c")

        assert len(removed) == 2
        assert not md.exists()
        assert load_index(paths.index_path) == []
        assert video.gist == str(md)

    def test_delete_missing_video(self, service):
        with pytest.raises(VideoNotFoundError):
            service.delete_video("nope", "c")

    def test_delete_dangling_entry(self, service, paths):
        save_index([IndexEntry("ghost", "c")], paths.index_path)
        assert service.delete_video("ghost", "c") == []
        assert load_index(paths.index_path) == []

    def test_move_relocates_record_and_siblings(self, service, paths):
        service.create_video("v", "Old One")
        (paths.manuscript_dir / "old-one" / "v.md").write_text("# script")

        moved = service.move_video("v", "Old One", "New One")

        assert moved.category == "New One"
        assert moved.gist == str(paths.manuscript_dir / "new-one" / "v.md")
        assert (paths.manuscript_dir / "new-one" / "v.yaml").is_file()
        assert (paths.manuscript_dir / "new-one" / "v.md").is_file()
        assert not (paths.manuscript_dir / "old-one" / "v.yaml").exists()
        assert load_index(paths.index_path) == [IndexEntry("v", "New One")]
        assert service.get_video("v", "New One").category == "New One"

    def test_move_onto_existing_video(self, service):
        service.create_video("v", "a")
        service.create_video("v", "b")
        with pytest.raises(InvalidRequestError):
            service.move_video("v", "a", "b")

    def test_move_within_same_directory_renames_category(self, service, paths):
        service.create_video("v", "Dev Ops")

        moved = service.move_video("v", "Dev Ops", "dev ops")

        record = paths.manuscript_dir / "dev-ops" / "v.yaml"
        assert moved.category == "dev ops"
        assert load_video(record).category == "dev ops"
        assert load_index(paths.index_path) == [IndexEntry("v", "dev ops")]

    def test_move_keeps_source_when_save_fails(self, service, paths, monkeypatch):
        service.create_video("v", "old")
        md = paths.manuscript_dir / "old" / "v.md"
        md.write_text("# script")

        def fail_save(video, path):
            raise StorageError(str(path), "disk full")

        monkeypatch.setattr("videoflow.services.videos.save_video", fail_save)
        with pytest.raises(StorageError):
            service.move_video("v", "old", "new")

        assert md.is_file()
        assert (paths.manuscript_dir / "old" / "v.yaml").is_file()
        assert not (paths.manuscript_dir / "new" / "v.md").exists()
        assert load_index(paths.index_path) == [IndexEntry("v", "old")]

    def test_categories_union_sorted(self, service, paths):
        service.create_video("v", "Dev Ops")
        (paths.manuscript_dir / "ama").mkdir(parents=True)
        names = [category.name for category in service.get_categories()]
        assert names == ["Ama", "Dev Ops"]
