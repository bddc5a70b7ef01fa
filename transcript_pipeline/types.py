from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple

from transcript_pipeline.errors import EmptyContentError


class SortKey(NamedTuple):
    folder_order: int
    file_order: int
    name: str


class Skipped(NamedTuple):
    source_path: Path
    reason: str


@dataclass(frozen=True)
class ProcessedFile:
    name: str
    content: Tuple[str, ...]
    source_path: Path
    relative_path: Path
    folder_name: str

    def __post_init__(self) -> None:
        if not self.content:
            raise EmptyContentError(f"No spoken lines in {self.source_path}")

    def to_text(self) -> str:
        return "\n".join(self.content)


@dataclass
class BatchResult:
    """Tallies and retained files of one batch run."""

    root: Path
    output_dir: Path
    discovered: int = 0
    successes: int = 0
    warnings: int = 0
    errors: int = 0
    files: List[ProcessedFile] = field(default_factory=list)
    skipped: List[Skipped] = field(default_factory=list)
    failures: List[Tuple[Path, str]] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)
    combined_path: Optional[Path] = None

    def record_failure(self, path: Path, reason: str) -> None:
        self.errors += 1
        self.failures.append((path, reason))

    def summary(self) -> str:
        return (f"{self.successes} succeeded, {self.warnings} warnings, "
                f"{self.errors} errors ({self.discovered} files found)")
