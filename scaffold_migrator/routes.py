"""Route Registrar: append lazy route entries to the router configuration.

The configuration is patched by splicing source text at the end of the
``routes`` array found in the tree-sitter tree, so everything around the
insertion point keeps its exact bytes and line positions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog
from tree_sitter import Node, Tree

from scaffold_migrator.exceptions import RouterConfigError, RoutesNotFoundError
from scaffold_migrator.models import RouteDescriptor
from scaffold_migrator.sources import iter_nodes, parse_source, strip_source_extension

log = structlog.get_logger("scaffold_migrator.routes")

ROUTES_IDENTIFIER = "routes"
LAZY_CALLEE = "lazy"
_INDENT_STEP = "    "

# Wrappers around the array literal that do not change its elements
_TRANSPARENT_WRAPPERS = {"as_expression", "satisfies_expression", "parenthesized_expression"}


@dataclass(frozen=True)
class RouteElement:
    """A synthesized ``{ path, component: lazy(() => import(...)) }`` entry."""

    route_path: str
    import_path: str

    def render(self) -> str:
        dynamic_import = f"import({_quote(self.import_path)})"
        return (
            f"{{ path: {_quote(self.route_path)}, "
            f"component: {LAZY_CALLEE}(() => {dynamic_import}) }}"
        )


def build_element(descriptor: RouteDescriptor) -> RouteElement:
    return RouteElement(
        route_path=descriptor.route_path,
        import_path=strip_source_extension(descriptor.component_path),
    )


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def find_routes_declarator(tree: Tree) -> Node | None:
    """First ``variable_declarator`` whose name is ``routes``."""
    for node in iter_nodes(tree.root_node):
        if node.type != "variable_declarator":
            continue
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier" and name.text == ROUTES_IDENTIFIER.encode():
            return node
    return None


def _routes_array(declarator: Node, config_path: Path) -> Node:
    value = declarator.child_by_field_name("value")
    while value is not None and value.type in _TRANSPARENT_WRAPPERS and value.named_children:
        value = value.named_children[0]
    if value is None or value.type != "array":
        found = value.type if value is not None else "no initializer"
        raise RouterConfigError(
            f"`{ROUTES_IDENTIFIER}` in {config_path} is not an array literal ({found})"
        )
    return value


def _line_indent(source: bytes, offset: int) -> str:
    line_start = source.rfind(b"\n", 0, offset) + 1
    line = source[line_start:offset]
    stripped = line.lstrip(b" \t")
    return line[: len(line) - len(stripped)].decode("utf-8")


def splice_elements(source: bytes, array: Node, rendered: Sequence[str]) -> bytes:
    """Insert *rendered* entries after the last element of *array*."""
    items = [child for child in array.named_children if child.type != "comment"]
    multiline = array.start_point[0] != array.end_point[0]

    if items:
        anchor = items[-1].end_byte
        if multiline:
            indent = _line_indent(source, items[-1].start_byte)
            text = "".join(f",\n{indent}{entry}" for entry in rendered)
        else:
            text = "".join(f", {entry}" for entry in rendered)
    else:
        anchor = array.start_byte + 1
        if multiline:
            indent = _line_indent(source, array.start_byte) + _INDENT_STEP
            text = "".join(f"\n{indent}{entry}," for entry in rendered)
        else:
            text = ", ".join(rendered)

    return source[:anchor] + text.encode("utf-8") + source[anchor:]


def register_routes(
    config_path: Path,
    elements: Sequence[RouteElement],
    strict: bool = False,
) -> int | None:
    """Append *elements* to the ``routes`` array of *config_path*.

    Returns the number of appended elements, or None when the file has no
    ``routes`` declarator; in that case the file is left untouched unless
    *strict* is set, which raises :class:`RoutesNotFoundError` instead.
    """
    try:
        source = config_path.read_bytes()
    except FileNotFoundError:
        raise RouterConfigError(f"Router config not found: {config_path}") from None

    tree = parse_source(source, config_path)
    declarator = find_routes_declarator(tree)
    if declarator is None:
        if strict:
            raise RoutesNotFoundError(
                f"No `{ROUTES_IDENTIFIER}` declaration in {config_path}"
            )
        log.warning("routes.declarator_missing", path=str(config_path))
        return None

    array = _routes_array(declarator, config_path)
    if not elements:
        return 0

    patched = splice_elements(source, array, [element.render() for element in elements])
    if not patched.endswith(b"\n"):
        patched += b"\n"
    config_path.write_bytes(patched)

    log.info("routes.registered", path=str(config_path), count=len(elements))
    return len(elements)
