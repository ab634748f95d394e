"""Batch runs over many files."""
from __future__ import annotations

import fnmatch
import logging
import threading
import warnings
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from remove_unused_js_imports._autofix import apply_edits
from remove_unused_js_imports._autofix import synthesize_edits
from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._data import Edit
from remove_unused_js_imports._detection import detect
from remove_unused_js_imports._errors import ApplyError
from remove_unused_js_imports._errors import ConfigurationWarning
from remove_unused_js_imports._errors import ImportAnalysisError

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = frozenset(
    {".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts"},
)

DEFAULT_EXCLUDE = ("**/node_modules/**",)


class CancellationToken:
    """Checked between files; once cancelled, no further file is started."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class SweepResult:
    """Results of a batch run."""

    # Unused imports per file
    unused_imports: dict[Path, list[BoundName]] = field(default_factory=dict)

    # Files rewritten by --fix
    changed: list[Path] = field(default_factory=list)

    # Files that could not be read, parsed or rewritten
    errors: dict[Path, str] = field(default_factory=dict)

    # Files never started because the run was cancelled
    skipped: list[Path] = field(default_factory=list)

    cancelled: bool = False

    @property
    def total_unused(self) -> int:
        return sum(len(unused) for unused in self.unused_imports.values())


def validate_patterns(patterns: list[str]) -> list[str]:
    """Drop empty or malformed exclusion patterns with a warning."""
    valid: list[str] = []
    for pattern in patterns:
        if not pattern.strip() or pattern.count("[") != pattern.count("]"):
            msg = f"Ignoring invalid exclude pattern {pattern!r}"
            logger.warning(msg)
            warnings.warn(msg, ConfigurationWarning, stacklevel=2)
            continue
        valid.append(pattern)
    return valid


def is_excluded(path: Path, patterns: list[str]) -> bool:
    posix = path.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatch(posix, pattern):
            return True
        # Let **/x/** also match a leading x/ with no directory before it
        if pattern.startswith("**/") and fnmatch.fnmatch(posix, pattern[3:]):
            return True
    return False


def collect_source_files(
    paths: list[Path],
    exclude: list[str] | tuple[str, ...] = DEFAULT_EXCLUDE,
) -> list[Path]:
    """Collect all JS/TS files from given paths."""
    patterns = validate_patterns(list(exclude))
    files: list[Path] = []

    for path in paths:
        if path.is_file():
            if path.suffix in SOURCE_SUFFIXES and not is_excluded(path, patterns):
                files.append(path)
        elif path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if (
                    candidate.suffix in SOURCE_SUFFIXES
                    and candidate.is_file()
                    and not is_excluded(candidate, patterns)
                ):
                    files.append(candidate)

    return files


def _read(path: Path) -> str:
    # Bytes, not read_text(), so CRLF line endings survive a rewrite
    return path.read_bytes().decode("utf-8")


def _write_fixed(path: Path, source: str, edits: list[Edit]) -> None:
    new_source = apply_edits(source, edits)
    if _read(path) != source:
        raise ApplyError(f"{path} changed while it was being analyzed")
    path.write_bytes(new_source.encode("utf-8"))


def fix_file(path: Path) -> bool:
    """Rewrite a file without its unused imports.

    Returns True if the file changed. Raises ParseError for unparseable
    files and ApplyError when the edits cannot be applied, including when
    the file changed on disk while it was being analyzed.
    """
    source = _read(path)
    detection = detect(source, str(path))
    edits = synthesize_edits(detection.table, detection.verdicts)
    if not edits:
        return False
    _write_fixed(path, source, edits)
    return True


def sweep(
    paths: list[Path],
    fix: bool = False,
    cancel: CancellationToken | None = None,
) -> SweepResult:
    """Check (and optionally fix) each file, isolating per-file failures."""
    result = SweepResult()

    for i, path in enumerate(paths):
        if cancel is not None and cancel.cancelled:
            logger.debug("Cancelled before %s", path)
            result.cancelled = True
            result.skipped.extend(paths[i:])
            break

        logger.debug("Analyzing %s", path)
        try:
            source = _read(path)
        except (OSError, UnicodeDecodeError) as e:
            result.errors[path] = f"Error reading {path}: {e}"
            continue

        try:
            detection = detect(source, str(path))
        except ImportAnalysisError as e:
            result.errors[path] = str(e)
            continue

        unused = detection.unused
        if not unused:
            continue
        result.unused_imports[path] = unused

        if fix:
            edits = synthesize_edits(detection.table, detection.verdicts)
            if not edits:
                continue
            try:
                _write_fixed(path, source, edits)
            except (OSError, UnicodeDecodeError, ImportAnalysisError) as e:
                result.errors[path] = f"Error fixing {path}: {e}"
            else:
                result.changed.append(path)

    return result
