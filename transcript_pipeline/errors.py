from __future__ import annotations

from pathlib import Path


class PipelineError(Exception):
    """Base error for the course transcript pipeline."""


class RootNotFoundError(PipelineError, FileNotFoundError):
    """Raised when the scan root does not exist."""


class NoInputFilesError(PipelineError):
    """Raised when no subtitle files are found under the scan root."""


class ReadFailureError(PipelineError):
    """Raised when a subtitle file cannot be opened or decoded."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"Failed to read {path}: {cause}")
        self.path = path
        self.cause = cause


class WriteFailureError(PipelineError):
    """Raised when a transcript artifact cannot be written."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause


class EmptyContentError(PipelineError, ValueError):
    """Raised when a processed file is built without any spoken lines."""
