"""Module source parsing: tree-sitter grammars for TS/TSX/JS/JSX.

Babel-era projects mix TypeScript, JSX and decorators; the ``tsx`` grammar
accepts all of those, except for TypeScript angle-bracket casts which only
the ``typescript`` grammar reads correctly, so ``.ts`` files use that one.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from scaffold_migrator.config import SOURCE_EXTENSIONS
from scaffold_migrator.exceptions import ModuleParseError
from scaffold_migrator.models import ImportEdge

_TS_LANGUAGE = Language(tsts.language_typescript())
_TSX_LANGUAGE = Language(tsts.language_tsx())

_LANGUAGE_BY_EXTENSION: dict[str, Language] = {
    ".ts": _TS_LANGUAGE,
    ".tsx": _TSX_LANGUAGE,
    ".js": _TSX_LANGUAGE,
    ".jsx": _TSX_LANGUAGE,
}


def has_source_extension(path: str | Path) -> bool:
    return str(path).endswith(SOURCE_EXTENSIONS)


def strip_source_extension(path: str) -> str:
    for ext in SOURCE_EXTENSIONS:
        if path.endswith(ext):
            return path[: -len(ext)]
    return path


def parse_source(content: bytes, path: Path) -> Tree:
    """Parse *content* with the grammar matching *path*'s extension.

    Raises :class:`ModuleParseError` if the tree contains a syntax error.
    """
    language = _LANGUAGE_BY_EXTENSION.get(path.suffix, _TSX_LANGUAGE)
    tree = Parser(language).parse(content)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        row, column = bad.start_point if bad is not None else (0, 0)
        raise ModuleParseError(path, row + 1, column + 1)
    return tree


def parse_file(path: Path) -> Tree:
    return parse_source(path.read_bytes(), path)


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield *node* and all its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _first_error(root: Node) -> Node | None:
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def string_value(node: Node) -> str:
    """Contents of a string literal node, without the quotes."""
    return node.text.decode("utf-8")[1:-1]


def extract_import_edges(tree: Tree) -> list[ImportEdge]:
    """Collect ``import``, ``export ... from`` and ``export * from`` specifiers."""
    edges: list[ImportEdge] = []
    for node in iter_nodes(tree.root_node):
        if node.type == "import_statement":
            kind = "import"
        elif node.type == "export_statement":
            kind = "export-all" if _is_export_all(node) else "export"
        else:
            continue

        source = node.child_by_field_name("source")
        if source is None or source.type != "string":
            continue
        edges.append(
            ImportEdge(
                specifier=string_value(source),
                kind=kind,
                line=node.start_point[0] + 1,
            )
        )
    return edges


def _is_export_all(node: Node) -> bool:
    return any(child.type == "*" for child in node.children)
