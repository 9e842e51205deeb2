"""
GraphQL document serializer.

Renders an Operation or a Fragment into document text, then appends one
``fragment`` block per distinct fragment reached through spreads, in
first-reference order. Output is deterministic: the same structure always
yields the same bytes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Union

from .dsl.definitions import Fragment, Operation, VariableDefinition
from .dsl.nodes import EnumValue, ListValue, Node, NodeKind, ObjectValue, Variable
from .exceptions import DanglingFragmentReference, DuplicateFragmentName, SerializationError

logger = logging.getLogger(__name__)

Definition = Union[Operation, Fragment]


def format_literal(value: Any) -> str:
    """Format a normalized argument literal for GraphQL."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (int, float)):
        return repr(value)
    elif value is None:
        return "null"
    elif isinstance(value, EnumValue):
        return value.name
    elif isinstance(value, Variable):
        return f"${value.name}"
    elif isinstance(value, ListValue):
        return f"[{' '.join(format_literal(item) for item in value.items)}]"
    elif isinstance(value, ObjectValue):
        items = [f"{key}: {format_literal(item)}" for key, item in value.fields]
        return f"{{{' '.join(items)}}}"
    raise SerializationError(f"Cannot format literal of type {type(value).__name__}")


def _carried_fragments(nodes: Iterable[Node]) -> Iterator[Fragment]:
    for node in nodes:
        if node.fragment is not None:
            yield node.fragment
        yield from _carried_fragments(node.children)


class _FragmentRegistry:
    """Fragments known to one serialization call, in first-reference order."""

    def __init__(self, supplied: Iterable[Fragment]):
        self._known: Dict[str, Fragment] = {}
        self._order: List[Fragment] = []
        for fragment in supplied:
            self.add(fragment)

    def add(self, fragment: Fragment) -> None:
        existing = self._known.get(fragment.name)
        if existing is fragment:
            return
        if existing is None:
            self._known[fragment.name] = fragment
        elif existing != fragment:
            raise DuplicateFragmentName(fragment.name)
        # An equal body may spread by value what the first one spread by name.
        for carried in _carried_fragments(fragment.root):
            self.add(carried)

    def reference(self, node: Node) -> None:
        if node.fragment is not None:
            self.add(node.fragment)
        fragment = self._known.get(node.name)
        if fragment is None:
            raise DanglingFragmentReference(node.name)
        if fragment not in self._order:
            self._order.append(fragment)

    def referenced(self, index: int) -> Fragment:
        return self._order[index]

    def __len__(self) -> int:
        return len(self._order)


class DocumentSerializer:
    """
    Serializer for operations and fragments.

    Examples:
        ```python
        serializer = DocumentSerializer()
        text = serializer.serialize(operation)
        ```
    """

    def __init__(self, indent: str = "  "):
        """
        Initialize serializer.

        Args:
            indent: Indentation unit for one nesting level
        """
        self.indent = indent

    def serialize(self, definition: Definition, fragments: Iterable[Fragment] = ()) -> str:
        """
        Render a definition and its fragment closure.

        Args:
            definition: Operation or Fragment to render
            fragments: Extra fragments for spreads that were built by name

        Returns:
            GraphQL document text

        Raises:
            DanglingFragmentReference: If a spread names an unknown fragment
            DuplicateFragmentName: If two different fragments share a name
        """
        registry = _FragmentRegistry(fragments)
        blocks: List[str] = []

        if isinstance(definition, Operation):
            blocks.append(self._render_operation(definition, registry))
            emitted = 0
        elif isinstance(definition, Fragment):
            registry.add(definition)
            blocks.append(self._render_fragment(definition, registry))
            emitted = 0
        else:
            raise SerializationError(
                f"Cannot serialize {type(definition).__name__}; expected Operation or Fragment"
            )

        # Rendering a fragment may reference further fragments.
        while emitted < len(registry):
            fragment = registry.referenced(emitted)
            emitted += 1
            if isinstance(definition, Fragment) and fragment == definition:
                continue
            blocks.append(self._render_fragment(fragment, registry))

        document = "\n\n".join(blocks)
        logger.debug(
            "Serialized %s document (%d fragments, %d bytes)",
            type(definition).__name__, len(blocks) - 1, len(document),
        )
        return document

    def _render_operation(self, operation: Operation, registry: _FragmentRegistry) -> str:
        header = operation.keyword
        if operation.name:
            header += f" {operation.name}"
        if operation.variables:
            header += f"({' '.join(self._render_variable(var) for var in operation.variables)})"
        return f"{header} {self._render_selection(operation.root, 0, registry)}"

    def _render_variable(self, variable: VariableDefinition) -> str:
        rendered = f"${variable.name}: {variable.type}"
        if variable.has_default:
            rendered += f" = {format_literal(variable.default)}"
        return rendered

    def _render_fragment(self, fragment: Fragment, registry: _FragmentRegistry) -> str:
        return (
            f"fragment {fragment.name} on {fragment.on_type} "
            f"{self._render_selection(fragment.root, 0, registry)}"
        )

    def _render_selection(self, nodes: Iterable[Node], depth: int, registry: _FragmentRegistry) -> str:
        lines = ["{"]
        for node in nodes:
            lines.append(self.indent * (depth + 1) + self._render_node(node, depth + 1, registry))
        lines.append(self.indent * depth + "}")
        return "\n".join(lines)

    def _render_node(self, node: Node, depth: int, registry: _FragmentRegistry) -> str:
        if node.kind == NodeKind.FRAGMENT_SPREAD:
            registry.reference(node)
            return f"...{node.name}"

        if node.kind == NodeKind.INLINE_FRAGMENT:
            return f"... on {node.name} {self._render_selection(node.children, depth, registry)}"

        result = f"{node.alias}: {node.name}" if node.alias else node.name
        if node.arguments:
            args_str = " ".join(f"{key}: {format_literal(value)}" for key, value in node.arguments)
            result += f"({args_str})"
        if node.children:
            result += " " + self._render_selection(node.children, depth, registry)
        return result


def serialize(definition: Definition, fragments: Iterable[Fragment] = ()) -> str:
    """Render a definition with the default serializer."""
    return DocumentSerializer().serialize(definition, fragments)
