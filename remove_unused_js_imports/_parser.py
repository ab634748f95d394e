from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import PurePath

import tree_sitter_typescript
from tree_sitter import Language
from tree_sitter import Node
from tree_sitter import Parser

from remove_unused_js_imports._data import Position
from remove_unused_js_imports._errors import ParseError

logger = logging.getLogger(__name__)

# TSX accepts plain JavaScript and JSX as well, but not the <T>expr cast
# syntax, so only the TypeScript-only suffixes get the TypeScript grammar.
TYPESCRIPT_SUFFIXES = frozenset({".ts", ".mts", ".cts"})


@functools.lru_cache(maxsize=None)
def _get_language(dialect: str) -> Language:
    if dialect == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    return Language(tree_sitter_typescript.language_tsx())


def dialect_for(file_identity: str) -> str:
    """Pick the grammar used for a file, from its suffix."""
    if PurePath(file_identity).suffix.lower() in TYPESCRIPT_SUFFIXES:
        return "typescript"
    return "tsx"


def _position(source: bytes, byte_offset: int) -> Position:
    """Convert a byte offset into a (line, character column) position."""
    line = source.count(b"\n", 0, byte_offset)
    line_start = source.rfind(b"\n", 0, byte_offset) + 1
    column = len(source[line_start:byte_offset].decode("utf-8"))
    return Position(line, column)


@dataclass(frozen=True)
class SourceFile:
    """A parsed file: its text, its encoded bytes and the syntax tree."""

    file_identity: str
    text: str
    source: bytes
    root: Node

    def node_text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def start(self, node: Node) -> Position:
        return _position(self.source, node.start_byte)

    def end(self, node: Node) -> Position:
        return _position(self.source, node.end_byte)


def _first_error(node: Node) -> Node | None:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse(text: str, file_identity: str) -> SourceFile:
    """Parse JS/TS/JSX/TSX source text.

    Raises ParseError if the tree has any error or missing node: a region
    the parser could not make sense of may hide usages, so nothing in such
    a file is safe to remove.
    """
    source = text.encode("utf-8")
    parser = Parser(_get_language(dialect_for(file_identity)))
    tree = parser.parse(source)
    root = tree.root_node

    if root.has_error:
        error = _first_error(root) or root
        where = _position(source, error.start_byte)
        logger.debug(
            "%s: parse error at %d:%d",
            file_identity, where.line + 1, where.column + 1,
        )
        raise ParseError(file_identity, where.line + 1, where.column + 1)

    return SourceFile(
        file_identity=file_identity,
        text=text,
        source=source,
        root=root,
    )
