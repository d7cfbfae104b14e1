"""Flask entrypoint for the videoflow REST API."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from flask import Flask, jsonify, request

from videoflow.config import AppPaths, Settings, get_paths, load_settings
from videoflow.errors import (
    AspectNotFoundError,
    InvalidRequestError,
    VideoflowError,
    VideoNotFoundError,
)
from videoflow.logging_setup import setup_logging
from videoflow.models import Video
from videoflow.services.aspects import (
    aspect_fields,
    aspect_overview,
    get_aspect,
    video_progress,
)
from videoflow.services.phases import PHASE_MENU_ORDER, infer_phase, parse_phase
from videoflow.services.videos import VideoService


def _error(error: str, message: str, status: int):
    return jsonify({"error": error, "message": message}), status


def _require_json() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequestError("request body must be a JSON object")
    return payload


def _require_category() -> str:
    category = request.args.get("category", "").strip()
    if not category:
        raise InvalidRequestError("category query parameter is required")
    return category


def _phase_arg(required: bool):
    raw = request.args.get("phase")
    if raw is None or raw == "":
        if required:
            raise InvalidRequestError("phase query parameter is required")
        return None
    try:
        return parse_phase(raw)
    except ValueError as exc:
        raise InvalidRequestError(f"invalid phase: {raw}") from exc


def video_payload(video: Video) -> dict:
    """Return a video with its derived phase and per-aspect progress."""

    return {
        "video": video.to_dict(),
        "phase": int(infer_phase(video)),
        "progress": {
            key: tasks.to_dict() for key, tasks in video_progress(video).items()
        },
    }


def create_app(paths: AppPaths | None = None, settings: Settings | None = None) -> Flask:
    """Application factory for the videoflow API."""

    paths = paths or get_paths()
    settings = settings or load_settings(paths)
    setup_logging(paths.logs_dir, settings.log_level)

    app = Flask(__name__)
    app.config["VIDEOFLOW_PATHS"] = paths
    app.config["VIDEOFLOW_SETTINGS"] = settings
    service = VideoService(paths)

    @app.after_request
    def add_cors_headers(response):
        """Allow browser front ends served from other origins."""

        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response

    @app.errorhandler(VideoflowError)
    def handle_videoflow_error(exc: VideoflowError):
        """Translate domain errors into JSON responses."""

        if isinstance(exc, (VideoNotFoundError, AspectNotFoundError)):
            return _error("not_found", str(exc), 404)
        if isinstance(exc, InvalidRequestError):
            return _error("invalid_request", str(exc), 400)
        logging.error(
            "Request failed",
            extra={
                "event": "request_failed",
                "context": {"path": request.path, "error": str(exc)},
            },
        )
        return _error("internal_error", str(exc), 500)

    @app.errorhandler(404)
    def handle_not_found(_exc):
        return _error("not_found", f"No route for {request.path}", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(_exc):
        return _error("method_not_allowed", f"{request.method} not allowed", 405)

    @app.route("/health")
    def health():
        """Report that the server is up."""

        return jsonify(
            {
                "status": "ok",
                "time": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            }
        )

    @app.route("/api/videos/phases")
    def video_phases():
        """Return phases that hold at least one video, in menu order."""

        counts = service.get_phase_counts()
        phases = [
            {"id": int(phase), "name": phase.title, "count": counts[phase]}
            for phase in PHASE_MENU_ORDER
            if counts[phase] > 0
        ]
        return jsonify({"phases": phases})

    @app.route("/api/videos")
    def videos_in_phase():
        """Return full records of the videos in one phase."""

        phase = _phase_arg(required=True)
        videos = service.list_videos(phase)
        return jsonify({"videos": [video.to_dict() for video in videos]})

    @app.route("/api/videos/list")
    def video_list():
        """Return lightweight list items, optionally filtered by phase."""

        phase = _phase_arg(required=False)
        items = service.list_summaries(phase)
        return jsonify({"videos": [item.to_dict() for item in items]})

    @app.route("/api/videos", methods=["POST"])
    def create_video():
        """Create an empty video."""

        payload = _require_json()
        name = str(payload.get("name") or "").strip()
        category = str(payload.get("category") or "").strip()
        video = service.create_video(name, category)
        return jsonify(video_payload(video)), 201

    @app.route("/api/videos/<name>")
    def get_video(name: str):
        """Return one video with its phase and progress."""

        video = service.get_video(name, _require_category())
        return jsonify(video_payload(video))

    @app.route("/api/videos/<name>", methods=["PUT"])
    def update_video(name: str):
        """Replace a video record."""

        category = _require_category()
        payload = _require_json()
        raw = payload.get("video")
        if not isinstance(raw, dict):
            raise InvalidRequestError("video object is required")
        video = Video.from_dict(raw)
        video.name = video.name or name
        video.category = video.category or category
        if (video.name, video.category) != (name, category):
            raise InvalidRequestError("name and category cannot be changed by update")
        service.update_video(video)
        return jsonify(video_payload(video))

    @app.route("/api/videos/<name>", methods=["DELETE"])
    def delete_video(name: str):
        """Delete a video and its sibling files."""

        service.delete_video(name, _require_category())
        return "", 204

    @app.route("/api/videos/<name>/move", methods=["POST"])
    def move_video(name: str):
        """Move a video to another category."""

        category = _require_category()
        payload = _require_json()
        target = str(payload.get("target_category") or "").strip()
        if not target:
            raise InvalidRequestError("target_category is required")
        video = service.move_video(name, category, target)
        return jsonify(video_payload(video))

    @app.route("/api/videos/<name>/<aspect_key>", methods=["PUT"])
    def update_aspect(name: str, aspect_key: str):
        """Update the fields of one aspect."""

        category = _require_category()
        get_aspect(aspect_key)
        payload = _require_json()
        video = service.update_aspect(name, category, aspect_key, payload)
        return jsonify(video_payload(video))

    @app.route("/api/categories")
    def categories():
        """Return known categories."""

        return jsonify(
            {"categories": [category.to_dict() for category in service.get_categories()]}
        )

    @app.route("/api/editing/aspects")
    def editing_aspects():
        """Return all aspects with completion counts for an optional video."""

        video = service.find_video(
            request.args.get("videoName"), request.args.get("category")
        )
        return jsonify(aspect_overview(video))

    @app.route("/api/editing/aspects/<aspect_key>/fields")
    def editing_aspect_fields(aspect_key: str):
        """Return field metadata for one aspect."""

        return jsonify(aspect_fields(aspect_key))

    return app


if __name__ == "__main__":
    application = create_app()
    config = application.config["VIDEOFLOW_SETTINGS"]
    application.run(host=config.api_host, port=config.api_port, debug=True)
