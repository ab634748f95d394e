from __future__ import annotations

from remove_unused_js_imports._data import BindingKind
from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._data import DeleteRange
from remove_unused_js_imports._data import Edit
from remove_unused_js_imports._data import ImportStatement
from remove_unused_js_imports._data import ImportTable
from remove_unused_js_imports._data import Position
from remove_unused_js_imports._data import ReplaceRange
from remove_unused_js_imports._data import StatementVerdict
from remove_unused_js_imports._detection import detect
from remove_unused_js_imports._errors import ApplyError


def rebuild_statement(statement: ImportStatement, kept: list[BoundName]) -> str:
    """Reconstruct an import statement from its surviving bindings.

    Specifiers keep their original text; only the separators are
    regenerated, so a multi-line list collapses onto one line.
    """
    default = [b for b in kept if b.kind is BindingKind.DEFAULT]
    namespace = [b for b in kept if b.kind is BindingKind.NAMESPACE]
    named = [
        b for b in kept
        if b.kind in (BindingKind.NAMED, BindingKind.NAMED_ALIASED)
    ]

    clauses: list[str] = [b.specifier_text for b in default + namespace]
    if named:
        clauses.append("{ " + ", ".join(b.specifier_text for b in named) + " }")

    new_import = "import type " if statement.type_only else "import "
    new_import += ", ".join(clauses)
    new_import += f" from {statement.module_specifier}"
    if statement.attributes:
        new_import += f" {statement.attributes}"
    return new_import + ";"


def synthesize_edits(
    table: ImportTable, verdicts: list[StatementVerdict],
) -> list[Edit]:
    """Turn classifier verdicts into non-overlapping edits, in file order."""
    deleted = {v.statement for v in verdicts if not v.kept}
    # Lines also holding an import that survives in some form
    shared_lines: set[int] = set()
    for statement in table.statements:
        if statement.index not in deleted:
            shared_lines.update(range(statement.start.line, statement.end.line + 1))

    edits: list[Edit] = []
    for verdict in sorted(verdicts, key=lambda v: v.statement):
        statement = table.statements[verdict.statement]
        if not verdict.kept:
            lines = range(statement.start.line, statement.end.line + 1)
            if shared_lines.intersection(lines):
                edits.append(ReplaceRange(statement.start, statement.end, ""))
            elif edits and isinstance(edits[-1], DeleteRange) and (
                edits[-1].end_line > statement.start.line
            ):
                # Two dead imports on one line
                edits[-1] = DeleteRange(edits[-1].start_line, statement.end.line + 1)
            else:
                # Remove every line the statement touches, including its newline
                edits.append(
                    DeleteRange(statement.start.line, statement.end.line + 1),
                )
            continue

        kept = [table.names[i] for i in verdict.kept]
        new_import = rebuild_statement(statement, kept)
        if new_import.strip() != statement.text.strip():
            edits.append(ReplaceRange(statement.start, statement.end, new_import))
    return edits


def analyze(source: str, file_identity: str) -> list[Edit]:
    """Compute the edits that remove the unused imports of a file.

    Raises ParseError when the source cannot be parsed.
    """
    detection = detect(source, file_identity)
    return synthesize_edits(detection.table, detection.verdicts)


def _line_offsets(source: str) -> list[int]:
    offsets = [0]
    index = source.find("\n")
    while index != -1:
        offsets.append(index + 1)
        index = source.find("\n", index + 1)
    return offsets


def _offset(offsets: list[int], source: str, position: Position) -> int:
    if position.line >= len(offsets):
        raise ApplyError(f"line {position.line + 1} is past the end of the text")
    line_start = offsets[position.line]
    if position.line + 1 < len(offsets):
        line_end = offsets[position.line + 1] - 1
    else:
        line_end = len(source)
    if position.column > line_end - line_start:
        raise ApplyError(
            f"column {position.column + 1} is past the end of "
            f"line {position.line + 1}",
        )
    return line_start + position.column


def apply_edits(source: str, edits: list[Edit]) -> str:
    """Apply a complete edit set to a text, all or nothing."""
    offsets = _line_offsets(source)
    spans: list[tuple[int, int, str]] = []

    for edit in edits:
        if isinstance(edit, DeleteRange):
            if not 0 <= edit.start_line < edit.end_line:
                raise ApplyError(f"empty or inverted line range: {edit}")
            if edit.start_line >= len(offsets):
                raise ApplyError(f"line range past the end of the text: {edit}")
            start = offsets[edit.start_line]
            if edit.end_line < len(offsets):
                end = offsets[edit.end_line]
            else:
                end = len(source)
            spans.append((start, end, ""))
        else:
            start = _offset(offsets, source, edit.start)
            end = _offset(offsets, source, edit.end)
            if end < start:
                raise ApplyError(f"inverted range: {edit}")
            spans.append((start, end, edit.new_text))

    spans.sort(key=lambda s: (s[0], s[1]))
    for (_, prev_end, _), (next_start, _, _) in zip(spans, spans[1:]):
        if next_start < prev_end:
            raise ApplyError("edits overlap")

    # Apply back to front so earlier offsets stay valid
    result = source
    for start, end, new_text in reversed(spans):
        result = result[:start] + new_text + result[end:]
    return result


def remove_unused_imports(source: str, file_identity: str) -> str:
    """Remove unused imports from the source code."""
    edits = analyze(source, file_identity)
    if not edits:
        return source
    return apply_edits(source, edits)
