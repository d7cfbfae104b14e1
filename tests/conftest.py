"""
Pytest fixtures for videoflow testing.

Provides:
- An isolated project root with manuscript/ and index.yaml
- A VideoService bound to that root
- A Flask test client for the REST API
- A click CliRunner invocation helper
"""

import logging

import pytest
from click.testing import CliRunner

from videoflow.app import create_app
from videoflow.cli import cli
from videoflow.config import Settings, get_paths
from videoflow.models import Sponsorship, Video
from videoflow.services.videos import VideoService


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop handlers installed by setup_logging so tests stay isolated."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "baseFilename", None) or handler.__class__ is logging.StreamHandler:
            handler.close()
            root.removeHandler(handler)


# =============================================================================
# PROJECT FIXTURES
# =============================================================================

@pytest.fixture
def paths(tmp_path):
    """Application paths rooted in a temporary directory."""
    return get_paths(tmp_path)


@pytest.fixture
def service(paths):
    """VideoService over an empty project."""
    return VideoService(paths)


@pytest.fixture
def make_video(service):
    """Create a video and apply attribute overrides, then save it."""

    def _make(name="my video", category="Dev Ops", **fields):
        video = service.create_video(name, category)
        for key, value in fields.items():
            setattr(video, key, value)
        return service.update_video(video)

    return _make


# =============================================================================
# SAMPLE VIDEOS
# =============================================================================

@pytest.fixture
def started_video():
    return Video(name="started", category="devops", date="2030-01-21T16:00")


@pytest.fixture
def material_done_video():
    return Video(
        name="material", category="devops",
        code=True, screen=True, head=True, diagrams=True,
    )


@pytest.fixture
def blocked_video():
    return Video(
        name="blocked", category="devops",
        sponsorship=Sponsorship(amount="1000", blocked="waiting for contract"),
    )


# =============================================================================
# FRONT END FIXTURES
# =============================================================================

@pytest.fixture
def app(paths):
    application = create_app(paths, Settings())
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def run_cli(tmp_path):
    """Invoke the CLI against the temporary root."""
    runner = CliRunner()

    def _run(*args, input=None):
        return runner.invoke(cli, ["--root", str(tmp_path), *args], input=input, obj={})

    return _run
