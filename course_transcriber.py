from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from transcript_pipeline.batch import OUTPUT_DIRNAME, run_batch
from transcript_pipeline.errors import NoInputFilesError, RootNotFoundError
from transcript_pipeline.logging_utils import setup_logging, get_logger
from transcript_pipeline.types import BatchResult

log = get_logger(__name__)

REMEDIATION_HINTS = (
    "check that the path exists and is spelled correctly",
    "check that you have permission to read it and to create the output folder",
    "close any program that may have the subtitle files open",
)


def default_root() -> Path:
    """Directory of this script when run as a script, else the working directory.

    An installed `course-transcriber` command lives in a bin/ or site-packages
    folder, so it scans the folder it is run from instead.
    """
    invoked = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if invoked is not None and invoked.is_file() and invoked.resolve() == Path(__file__).resolve():
        return invoked.resolve().parent
    return Path.cwd()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for transcript generation."""
    parser = argparse.ArgumentParser(
        description="Convert .vtt/.srt subtitle files under a folder into plain-text transcripts "
                    "plus one combined transcript ordered by course section and lecture.")
    parser.add_argument("root", nargs="?", default=None,
                        help="folder to scan (default: the folder containing this script, or the current folder when installed)")
    parser.add_argument("--root", dest="root_opt", type=str, default=None, help="same as the positional root")
    parser.add_argument("--open", action="store_true", help=f"open the {OUTPUT_DIRNAME} folder when done")
    parser.add_argument("--log_level", type=str, default=None, help="log level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def open_folder(path: Path) -> None:
    """Show a folder in the platform file browser."""
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(path))
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(path)])
        else:
            subprocess.Popen(["xdg-open", str(path)])
    except OSError as e:
        log.warning(f"could not open output folder {path}: {e}")


def _report_fatal(message: str) -> None:
    log.error(message)
    for hint in REMEDIATION_HINTS:
        log.error(f"  - {hint}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code.

    Examples:
      python3 course_transcriber.py "~/Courses/Python Bootcamp"
      python3 course_transcriber.py --root ./course --open
    """
    args = parse_args(argv)
    setup_logging(args.log_level)

    root = Path(args.root_opt or args.root or default_root()).expanduser()
    log.info("transcript generation start", extra={"root": str(root)})

    result: Optional[BatchResult] = None
    try:
        result = run_batch(root)
    except (RootNotFoundError, NoInputFilesError) as e:
        _report_fatal(str(e))
        return 1
    except Exception:
        log.exception("unexpected error; run aborted")
        _report_fatal("transcript generation failed before completing")
        return 1
    finally:
        tally = result.summary() if result is not None else "0 succeeded, 0 warnings, 0 errors"
        log.info(f"summary: {tally}")

    for path, reason in result.failures:
        log.error(f"failed: {path}: {reason}")
    if result.combined_path is not None:
        log.info(f"combined transcript: {result.combined_path}")
    if args.open:
        open_folder(result.output_dir)
    return 0


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
