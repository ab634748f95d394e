from __future__ import annotations

from tree_sitter import Node

from remove_unused_js_imports._data import BindingKind
from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._data import ImportStatement
from remove_unused_js_imports._data import ImportTable
from remove_unused_js_imports._parser import SourceFile


class NodeVisitor:
    """Walk a tree-sitter tree, dispatching on node type.

    Like ast.NodeVisitor: ``visit_<node type>`` is called when defined,
    otherwise the named children are visited. Anonymous nodes (keywords,
    punctuation) carry no names and are never visited.
    """

    def visit(self, node: Node) -> None:
        visitor = getattr(self, f"visit_{node.type}", self.generic_visit)
        visitor(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)


def _has_keyword(node: Node, *keywords: str) -> bool:
    return any(
        not child.is_named and child.type in keywords
        for child in node.children
    )


class ImportExtractor:
    """Extract the bound names of the top-level import declarations."""

    def __init__(self, source_file: SourceFile) -> None:
        self.source_file = source_file
        self.table = ImportTable()

    def extract(self) -> ImportTable:
        for node in self.source_file.root.named_children:
            if node.type == "import_statement":
                self._extract_statement(node)
        return self.table

    def _extract_statement(self, node: Node) -> None:
        clause = next(
            (c for c in node.named_children if c.type == "import_clause"),
            None,
        )
        # import './side-effect' and import x = require('m') bind nothing
        # we can remove
        if clause is None:
            return

        source = node.child_by_field_name("source")
        if source is None:
            return
        module = self.source_file.node_text(source)[1:-1]
        attributes = next(
            (c for c in node.named_children if c.type == "import_attribute"),
            None,
        )

        index = len(self.table.statements)
        # import type { A } from 'm' / Flow's import typeof A from 'm'
        type_only = _has_keyword(node, "type", "typeof")

        names: list[int] = []
        for child in clause.named_children:
            if child.type == "identifier":
                names.append(
                    self._add_name(
                        child, index, child, BindingKind.DEFAULT,
                        type_only, imported_name="default", module=module,
                    ),
                )
            elif child.type == "namespace_import":
                ident = child.named_children[-1]
                names.append(
                    self._add_name(
                        ident, index, child, BindingKind.NAMESPACE,
                        type_only, imported_name="*", module=module,
                    ),
                )
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type == "import_specifier":
                        names.append(
                            self._add_specifier(spec, index, type_only, module),
                        )

        text = self.source_file.node_text
        self.table.statements.append(
            ImportStatement(
                index=index,
                module_specifier=text(source),
                type_only=type_only,
                start=self.source_file.start(node),
                end=self.source_file.end(node),
                text=text(node),
                attributes=text(attributes) if attributes else None,
                names=tuple(names),
            ),
        )

    def _add_specifier(
        self,
        spec: Node,
        statement: int,
        statement_type_only: bool,
        module: str,
    ) -> int:
        name = spec.child_by_field_name("name")
        alias = spec.child_by_field_name("alias")
        if alias is not None:
            local, kind = alias, BindingKind.NAMED_ALIASED
        else:
            local, kind = name, BindingKind.NAMED
        if name is None:
            name = local
        imported = self.source_file.node_text(name)
        if name.type == "string":
            # import { "a-b" as ab } from 'm'
            imported = imported[1:-1]
        # import { type A } from 'm': the keyword is an anonymous leading child
        leading = spec.children[0]
        type_only = statement_type_only or (
            not leading.is_named and leading.type in ("type", "typeof")
        )
        return self._add_name(
            local, statement, spec, kind, type_only,
            imported_name=imported, module=module,
        )

    def _add_name(
        self,
        local: Node,
        statement: int,
        specifier: Node,
        kind: BindingKind,
        type_only: bool,
        *,
        imported_name: str,
        module: str,
    ) -> int:
        text = self.source_file.node_text
        bound = BoundName(
            index=len(self.table.names),
            statement=statement,
            local_name=text(local),
            imported_name=imported_name,
            module=module,
            kind=kind,
            type_only=type_only,
            specifier_text=text(specifier),
            line=local.start_point[0] + 1,
        )
        self.table.names.append(bound)
        return bound.index


class NameUsageCollector(NodeVisitor):
    """Collect every name used outside import declarations.

    Usage is by spelling only: a name used in any scope counts, which can
    keep a shadowed import alive but never removes one that is needed.
    """

    def __init__(self, source_file: SourceFile) -> None:
        self.source_file = source_file
        self.used_names: set[str] = set()

    def _add(self, node: Node) -> None:
        self.used_names.add(self.source_file.node_text(node))

    def visit_import_statement(self, node: Node) -> None:
        # Don't count names in import statements as usage
        pass

    def visit_export_statement(self, node: Node) -> None:
        # export { a } from 'm' / export * from 'm' name nothing local
        if node.child_by_field_name("source") is not None:
            return
        self.generic_visit(node)

    def visit_export_specifier(self, node: Node) -> None:
        # export { local as exported }: only the local side is a reference
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._add(name)

    def visit_identifier(self, node: Node) -> None:
        self._add(node)

    def visit_type_identifier(self, node: Node) -> None:
        self._add(node)

    def visit_shorthand_property_identifier(self, node: Node) -> None:
        # { Name } is both a key and a reference to the binding Name
        self._add(node)

    def visit_nested_type_identifier(self, node: Node) -> None:
        # Ns.Member: Member is looked up on Ns, not in scope
        module = node.child_by_field_name("module")
        if module is not None:
            self.visit(module)

    # Keys, member names, labels and literal content are not references
    def visit_property_identifier(self, node: Node) -> None:
        pass

    def visit_shorthand_property_identifier_pattern(self, node: Node) -> None:
        pass

    def visit_private_property_identifier(self, node: Node) -> None:
        pass

    def visit_statement_identifier(self, node: Node) -> None:
        pass

    def visit_string(self, node: Node) -> None:
        pass

    def visit_comment(self, node: Node) -> None:
        pass


def collect_used_names(source_file: SourceFile) -> frozenset[str]:
    """Collect the usage set of a parsed file."""
    collector = NameUsageCollector(source_file)
    collector.visit(source_file.root)
    return frozenset(collector.used_names)


def extract_imports(source_file: SourceFile) -> ImportTable:
    """Extract the import table of a parsed file."""
    return ImportExtractor(source_file).extract()
