from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from transcript_pipeline.errors import WriteFailureError
from transcript_pipeline.logging_utils import get_logger
from transcript_pipeline.types import ProcessedFile, Skipped, SortKey

log = get_logger(__name__)

ROOT_FOLDER_LABEL = "Root"
UNNUMBERED = 999999
COMBINED_FILENAME = "00-COMBINED-ALL.txt"
COMBINED_TITLE = "COMBINED TRANSCRIPT - ALL FILES"

FULL_SEPARATOR = "=" * 80
HALF_SEPARATOR = "-" * 40

_LEADING_DIGITS_RE = re.compile(r"^\d+")


def leading_number(text: str) -> int:
    """Leading run of digits as an int; names without one sort last."""
    m = _LEADING_DIGITS_RE.match(text)
    return int(m.group(0)) if m else UNNUMBERED


def sort_key(processed: ProcessedFile) -> SortKey:
    return SortKey(
        folder_order=leading_number(processed.folder_name),
        file_order=leading_number(processed.name),
        name=processed.name,
    )


def sort_files(files: Iterable[ProcessedFile]) -> List[ProcessedFile]:
    # sorted() is stable, so equal keys keep discovery order
    return sorted(files, key=sort_key)


def record_file(source_path: Path, relative_path: Path, name: str,
                content: Sequence[str]) -> Union[ProcessedFile, Skipped]:
    """Build the ProcessedFile for one filtered input, or Skipped if it has no text."""
    if not content:
        log.warning(f"no spoken text after filtering; skip {source_path}")
        return Skipped(source_path=source_path, reason="no spoken text after filtering")
    parent = relative_path.parent
    folder_name = parent.name if parent.parts else ROOT_FOLDER_LABEL
    return ProcessedFile(
        name=name,
        content=tuple(content),
        source_path=source_path,
        relative_path=relative_path,
        folder_name=folder_name,
    )


def _write_text(path: Path, text: str) -> None:
    try:
        # text mode turns "\n" into the platform line terminator
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        raise WriteFailureError(path, e) from e


def emit_individual_artifact(processed: ProcessedFile, output_dir: Path) -> Path:
    """Write ``<output_dir>/<name>.txt``, replacing any existing file."""
    out_path = output_dir / f"{processed.name}.txt"
    _write_text(out_path, processed.to_text())
    log.debug(f"transcript written: {out_path}", extra={"lines": len(processed.content)})
    return out_path


def build_combined_artifact(files: Iterable[ProcessedFile], source_root: Path,
                            generated_at: Optional[datetime] = None) -> str:
    """Merge all transcripts into one document grouped by course folder.

    Files are ordered by (folder number, file number, name). A section banner
    opens every run of files sharing a folder, and each file is introduced by
    an ``=== name ===`` marker.
    """
    ordered = sort_files(files)
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

    lines: List[str] = [
        COMBINED_TITLE,
        f"Generated: {stamp}",
        f"Total files: {len(ordered)}",
        f"Source: {source_root}",
        FULL_SEPARATOR,
        "",
    ]

    current_folder: Optional[str] = None
    for i, processed in enumerate(ordered):
        if i == 0 or processed.folder_name != current_folder:
            current_folder = processed.folder_name
            lines.extend([FULL_SEPARATOR, f"SECTION: {current_folder}", FULL_SEPARATOR, ""])
        lines.append(f"=== {processed.name} ===")
        lines.extend(processed.content)
        lines.extend(["", HALF_SEPARATOR, ""])

    return "\n".join(lines) + "\n"


def write_combined_artifact(text: str, output_dir: Path) -> Path:
    out_path = output_dir / COMBINED_FILENAME
    _write_text(out_path, text)
    log.info(f"combined transcript written: {out_path}")
    return out_path
