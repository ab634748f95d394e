from __future__ import annotations

import logging
from collections.abc import Set
from dataclasses import dataclass

from remove_unused_js_imports._ast_helpers import collect_used_names
from remove_unused_js_imports._ast_helpers import extract_imports
from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._data import ImportTable
from remove_unused_js_imports._data import StatementVerdict
from remove_unused_js_imports._errors import ParseError
from remove_unused_js_imports._parser import parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Detection:
    """The import table of one file and the verdicts on its statements."""

    table: ImportTable
    used_names: frozenset[str]
    verdicts: list[StatementVerdict]

    @property
    def unused(self) -> list[BoundName]:
        return [
            self.table.names[i]
            for verdict in self.verdicts
            for i in verdict.removed
        ]


def classify(table: ImportTable, used_names: Set[str]) -> list[StatementVerdict]:
    """Split each statement's names into kept and removed, in source order.

    Only statements with at least one removed name are returned.
    """
    verdicts: list[StatementVerdict] = []
    for statement in table.statements:
        kept: list[int] = []
        removed: list[int] = []
        for bound in table.names_of(statement):
            if bound.local_name in used_names:
                kept.append(bound.index)
            else:
                removed.append(bound.index)
        if removed:
            verdicts.append(
                StatementVerdict(
                    statement=statement.index,
                    kept=tuple(kept),
                    removed=tuple(removed),
                ),
            )
    return verdicts


def detect(source: str, file_identity: str) -> Detection:
    """Parse, collect usages, extract imports and classify them.

    Raises ParseError when the source cannot be parsed.
    """
    source_file = parse(source, file_identity)
    table = extract_imports(source_file)
    used_names = collect_used_names(source_file)
    return Detection(
        table=table,
        used_names=used_names,
        verdicts=classify(table, used_names),
    )


def find_unused_imports(source: str, file_identity: str) -> list[BoundName]:
    """Find all unused imports in the given source code."""
    try:
        detection = detect(source, file_identity)
    except ParseError as e:
        logger.error("%s", e)
        return []
    return detection.unused
