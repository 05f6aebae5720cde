"""Custom exception hierarchy."""

from pathlib import Path


class LocalDedupError(Exception):
    """Base exception for all local-dedup errors."""


class ConfigError(LocalDedupError):
    """Invalid configuration, such as a root that is not a directory."""


class TraversalError(LocalDedupError):
    """A directory entry could not be inspected."""


class HashingError(LocalDedupError):
    """A candidate file could not be read while computing its digest."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DetectionError(LocalDedupError):
    """Duplicate detection aborted."""
