from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from transcript_pipeline.aggregator import (
    COMBINED_FILENAME,
    build_combined_artifact,
    emit_individual_artifact,
    record_file,
    write_combined_artifact,
)
from transcript_pipeline.caption_filter import filter_lines, is_subtitle_file, read_caption_lines
from transcript_pipeline.errors import (
    NoInputFilesError,
    ReadFailureError,
    RootNotFoundError,
    WriteFailureError,
)
from transcript_pipeline.logging_utils import get_logger
from transcript_pipeline.types import BatchResult, Skipped

log = get_logger(__name__)

OUTPUT_DIRNAME = "Subtitles"

_UNSAFE_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_name(stem: str) -> str:
    """Make a file stem safe to use as an output file name on any platform."""
    cleaned = _UNSAFE_CHARS_RE.sub("_", stem).strip().rstrip(". ")
    return cleaned or "untitled"


def discover_subtitle_files(root: Path, output_dir: Path) -> List[Path]:
    """Snapshot of every subtitle file under root, outside the output directory."""
    found = []
    for path in root.rglob("*"):
        if not path.is_file() or not is_subtitle_file(path):
            continue
        if path == output_dir or output_dir in path.parents:
            continue
        found.append(path)
    return sorted(found)


def process_file(path: Path, root: Path, output_dir: Path, result: BatchResult,
                 written: Dict[str, Path]) -> None:
    """Filter one subtitle file, write its transcript and record the outcome.

    Failures are tallied on ``result`` and never raised.
    """
    try:
        lines = filter_lines(read_caption_lines(path))
    except ReadFailureError as e:
        log.error(f"read failed: {path}: {e.cause}")
        result.record_failure(path, str(e))
        return

    relative_path = path.relative_to(root)
    recorded = record_file(path, relative_path, safe_name(path.stem), lines)
    if isinstance(recorded, Skipped):
        result.warnings += 1
        result.skipped.append(recorded)
        return

    previous = written.get(recorded.name)
    if previous is not None:
        # last write wins on disk; both stay in the combined transcript
        log.warning(f"output name collision: {recorded.name}.txt ({path} and {previous})")
        result.collisions.append(recorded.name)

    try:
        emit_individual_artifact(recorded, output_dir)
    except WriteFailureError as e:
        log.error(f"write failed: {e.path} (from {path}): {e.cause}")
        result.record_failure(path, str(e))
        return

    written[recorded.name] = path
    result.files.append(recorded)
    result.successes += 1
    log.info(f"processed {relative_path}", extra={"lines": len(recorded.content)})


def run_batch(root: Path, output_dirname: str = OUTPUT_DIRNAME,
              generated_at: Optional[datetime] = None) -> BatchResult:
    """Convert every subtitle file under root into a transcript.

    Writes one ``<name>.txt`` per file with spoken text plus the combined
    transcript into ``<root>/<output_dirname>``.

    Raises:
        RootNotFoundError: root does not exist. Nothing is created.
        NoInputFilesError: no subtitle files were found.
    """
    root = Path(root)
    if not root.is_dir():
        raise RootNotFoundError(f"Root path not found: {root}")
    root = root.resolve()
    output_dir = root / output_dirname

    files = discover_subtitle_files(root, output_dir)
    if not files:
        raise NoInputFilesError(f"No subtitle files (.vtt, .srt) found under {root}")

    output_dir.mkdir(parents=True, exist_ok=True)
    result = BatchResult(root=root, output_dir=output_dir, discovered=len(files))
    log.info(f"found {len(files)} subtitle files", extra={"root": str(root), "output_dir": str(output_dir)})

    # the combined transcript is written last and replaces a same-named transcript
    written: Dict[str, Path] = {Path(COMBINED_FILENAME).stem: output_dir / COMBINED_FILENAME}
    for i, path in enumerate(files, start=1):
        log.debug(f"[{i}/{len(files)}] {path.name}")
        process_file(path, root, output_dir, result, written)

    if not result.files:
        log.warning("no transcripts produced; combined transcript not written")
        return result

    text = build_combined_artifact(result.files, root, generated_at=generated_at)
    try:
        result.combined_path = write_combined_artifact(text, output_dir)
    except WriteFailureError as e:
        log.error(f"combined transcript write failed: {e.path}: {e.cause}")
        result.record_failure(e.path, str(e))
    return result
