"""Caption line filter.

Keeps the spoken text of a WebVTT or SRT file and drops everything that is
caption syntax: headers, comment blocks, cue timings, cue numbers, metadata,
sound annotations and whole-line markup tags.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from transcript_pipeline.errors import ReadFailureError
from transcript_pipeline.logging_utils import get_logger

log = get_logger(__name__)

SUBTITLE_EXTENSIONS = (".vtt", ".srt")

HEADER_TOKEN = "WEBVTT"
BLOCK_RE = re.compile(r"^(?:NOTE|STYLE)(?:\s|$)")
TIMING_RE = re.compile(r"^\d{1,2}:\d{2}:\d{2}.*-->")
INDEX_RE = re.compile(r"^[0-9]+$")
METADATA_PREFIXES = ("Kind:", "Language:")
# [music], [APPLAUSE]
ANNOTATION_RE = re.compile(r"^\[.*\]$")
# <i>...</i>, <c.yellow>...</c>
MARKUP_RE = re.compile(r"^<.*>$")


def is_subtitle_file(path: Path) -> bool:
    return path.suffix.lower() in SUBTITLE_EXTENSIONS


def is_discarded(line: str) -> bool:
    """Return True if the line is caption syntax rather than spoken text."""
    stripped = line.strip()
    return (
        stripped == HEADER_TOKEN
        or bool(BLOCK_RE.match(stripped))
        or bool(TIMING_RE.match(stripped))
        or bool(INDEX_RE.match(stripped))
        or stripped == ""
        or stripped.startswith(METADATA_PREFIXES)
        or bool(ANNOTATION_RE.match(stripped))
        or bool(MARKUP_RE.match(stripped))
    )


def filter_lines(lines: Iterable[str]) -> List[str]:
    """Return the trimmed spoken-text lines, in their original order."""
    return [line.strip() for line in lines if not is_discarded(line)]


def read_caption_lines(path: Path) -> List[str]:
    """Read a subtitle file as UTF-8 text or raise ReadFailureError."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailureError(Path(path), e) from e
    return text.splitlines()


def clean_caption_file(path: Path) -> List[str]:
    """Read and filter one subtitle file; unreadable files yield no lines.

    Standalone entry point for callers that only want the spoken text. The
    batch reads with read_caption_lines so it can count read failures.
    """
    try:
        lines = read_caption_lines(path)
    except ReadFailureError as e:
        log.error(f"read failed: {e.path}: {e.cause}")
        return []
    return filter_lines(lines)
