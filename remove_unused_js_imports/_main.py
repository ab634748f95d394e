from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._sweep import DEFAULT_EXCLUDE
from remove_unused_js_imports._sweep import CancellationToken
from remove_unused_js_imports._sweep import SweepResult
from remove_unused_js_imports._sweep import collect_source_files
from remove_unused_js_imports._sweep import sweep


def format_unused(filepath: Path, imp: BoundName) -> str:
    return f"{filepath}:{imp.line}: Unused import '{imp.local_name}' from '{imp.module}'"


def check_file(filepath: Path, fix: bool = False) -> tuple[int, list[str]]:
    """Check a file for unused imports.

    Returns:
        Tuple of (number of unused imports found, list of messages)
    """
    result = sweep([filepath], fix=fix)
    messages: list[str] = []

    if filepath in result.errors:
        messages.append(result.errors[filepath])
        return 0, messages

    unused = result.unused_imports.get(filepath, [])
    for imp in unused:
        messages.append(format_unused(filepath, imp))

    if filepath in result.changed:
        messages.append(f"Fixed {len(unused)} unused import(s) in {filepath}")

    return len(unused), messages


def _run_sweep(files: list[Path], fix: bool) -> SweepResult:
    """Sweep with Ctrl-C finishing the current file before stopping."""
    cancel = CancellationToken()

    def _on_interrupt(signum: int, frame: object) -> None:
        print("Interrupted, stopping after the current file", file=sys.stderr)
        cancel.cancel()

    # Signal handlers can only be installed from the main thread
    if threading.current_thread() is not threading.main_thread():
        return sweep(files, fix=fix, cancel=cancel)

    previous = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        return sweep(files, fix=fix, cancel=cancel)
    finally:
        signal.signal(signal.SIGINT, previous)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Detect and optionally fix unused JavaScript/TypeScript imports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s src/app.ts                 Check a single file
  %(prog)s src/                       Check all JS/TS files in a directory
  %(prog)s --fix src/                 Fix all files in a directory
  %(prog)s --exclude '**/dist/**' .   Skip build output
        """,
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to check",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Automatically remove unused imports",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show summary, not individual issues",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="GLOB",
        help=(
            "Skip paths matching this glob (repeatable, "
            f"default: {', '.join(DEFAULT_EXCLUDE)})"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log each file as it is analyzed",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    exclude = args.exclude if args.exclude is not None else list(DEFAULT_EXCLUDE)
    files = collect_source_files(args.paths, exclude)

    if not files:
        print("No JavaScript/TypeScript files found", file=sys.stderr)
        return 1

    result = _run_sweep(files, fix=args.fix)

    if not args.quiet:
        for filepath, unused in result.unused_imports.items():
            for imp in unused:
                print(format_unused(filepath, imp))
        for filepath in result.changed:
            count = len(result.unused_imports[filepath])
            print(f"Fixed {count} unused import(s) in {filepath}")

    for message in result.errors.values():
        print(message, file=sys.stderr)

    if result.cancelled:
        print(
            f"Cancelled, {len(result.skipped)} file(s) not checked",
            file=sys.stderr,
        )

    if result.total_unused > 0:
        action = "Fixed" if args.fix else "Found"
        print(
            f"\n{action} {result.total_unused} unused import(s) "
            f"in {len(result.unused_imports)} file(s)",
        )
        return 0 if args.fix and not result.errors else 1
    elif result.errors:
        return 1
    else:
        print("No unused imports found")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
