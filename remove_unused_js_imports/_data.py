from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Union


class BindingKind(Enum):
    DEFAULT = "default"  # import Foo from 'm'
    NAMESPACE = "namespace"  # import * as Foo from 'm'
    NAMED = "named"  # import { Foo } from 'm'
    NAMED_ALIASED = "named-aliased"  # import { Foo as Bar } from 'm'


@dataclass(frozen=True)
class Position:
    """A 0-based line and a 0-based column counted in characters."""

    line: int
    column: int


@dataclass(frozen=True)
class BoundName:
    """One name introduced into the file's scope by an import."""

    index: int  # Position in ImportTable.names
    statement: int  # Index of the owning ImportStatement
    local_name: str  # The name usable in code (alias if present)
    imported_name: str  # The exported name on the module side
    module: str  # The module specifier without quotes
    kind: BindingKind
    type_only: bool
    specifier_text: str  # Verbatim source text of the specifier
    line: int  # 1-based, for diagnostics


@dataclass(frozen=True)
class ImportStatement:
    """A top-level import declaration with at least one bound name."""

    index: int
    module_specifier: str  # Raw text, quotes preserved
    type_only: bool  # import type { ... } from 'm'
    start: Position
    end: Position
    text: str  # Original statement text
    attributes: str | None = None  # with { type: 'json' }, verbatim
    names: tuple[int, ...] = ()  # Ordered BoundName indices

    @property
    def module(self) -> str:
        """The module specifier without its quotes."""
        return self.module_specifier[1:-1]


@dataclass
class ImportTable:
    """Arena of import statements and the names they bind."""

    statements: list[ImportStatement] = field(default_factory=list)
    names: list[BoundName] = field(default_factory=list)

    def names_of(self, statement: ImportStatement) -> list[BoundName]:
        return [self.names[i] for i in statement.names]


@dataclass(frozen=True)
class StatementVerdict:
    """Which names of one statement survive and which are removed."""

    statement: int
    kept: tuple[int, ...]
    removed: tuple[int, ...]


@dataclass(frozen=True)
class DeleteRange:
    """Delete whole lines ``start_line`` up to (not including) ``end_line``."""

    start_line: int
    end_line: int


@dataclass(frozen=True)
class ReplaceRange:
    """Replace the text between two positions with ``new_text``."""

    start: Position
    end: Position
    new_text: str


Edit = Union[DeleteRange, ReplaceRange]
