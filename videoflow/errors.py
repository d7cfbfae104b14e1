"""
Error types for video operations.

All errors inherit from VideoflowError so front ends can catch them in one
place and translate them into HTTP responses or CLI messages.
"""


class VideoflowError(Exception):
    """Base exception for all videoflow failures."""
    pass


class VideoNotFoundError(VideoflowError):
    """Raised when no record exists for a name and category."""

    def __init__(self, name: str, category: str):
        self.name = name
        self.category = category
        super().__init__(f"Video not found: {name} ({category})")


class InvalidRequestError(VideoflowError):
    """Raised when a request is missing data or carries bad values."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class AspectNotFoundError(VideoflowError):
    """Raised when an unknown aspect key is requested."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"aspect not found: {key}")


class StorageError(VideoflowError):
    """Raised when a record or the index cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
