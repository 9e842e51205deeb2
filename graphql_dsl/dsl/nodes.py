"""
Selection nodes and argument literals.

Nodes are frozen once built. Argument values are normalized into hashable
literal forms at construction so that two structurally equal trees compare
and hash equal, which the serializer relies on for fragment identity.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple, TYPE_CHECKING

from ..exceptions import MalformedQuery

if TYPE_CHECKING:
    from .definitions import Fragment

NAME_PATTERN = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def validate_name(name: Any, what: str = "name") -> str:
    """Check that ``name`` is a valid GraphQL name and return it."""
    if not isinstance(name, str) or not NAME_PATTERN.match(name):
        raise MalformedQuery(f"Invalid GraphQL {what}: {name!r}", name=name)
    return name


class NodeKind(str, Enum):
    """Kinds of selection nodes."""

    FIELD = "field"
    INLINE_FRAGMENT = "inline-fragment"
    FRAGMENT_SPREAD = "fragment-spread"


@dataclass(frozen=True)
class EnumValue:
    """Bare enum identifier, rendered unquoted."""

    name: str

    def __post_init__(self) -> None:
        validate_name(self.name, "enum value")


@dataclass(frozen=True)
class Variable:
    """Reference to an operation variable, rendered as ``$name``."""

    name: str

    def __post_init__(self) -> None:
        validate_name(self.name, "variable name")


@dataclass(frozen=True)
class ListValue:
    """List literal."""

    items: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ObjectValue:
    """Input object literal with ordered fields."""

    fields: Tuple[Tuple[str, Any], ...] = ()


def to_literal(value: Any) -> Any:
    """
    Normalize a Python value into a hashable GraphQL literal.

    Strings, numbers, booleans and None pass through. Mappings become
    ObjectValue, lists and tuples become ListValue, and Python Enum members
    become EnumValue named after the member.

    Raises:
        MalformedQuery: If the value has no GraphQL literal form
    """
    if isinstance(value, Enum):
        return EnumValue(value.name)
    if value is None or isinstance(value, (str, bool, EnumValue, Variable)):
        return value
    if isinstance(value, (ListValue, ObjectValue)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise MalformedQuery(f"Float literal has no GraphQL form: {value!r}")
        return value
    if isinstance(value, Mapping):
        return ObjectValue(
            tuple(
                (validate_name(key, "input field name"), to_literal(item))
                for key, item in value.items()
            )
        )
    if isinstance(value, (list, tuple)):
        return ListValue(tuple(to_literal(item) for item in value))
    raise MalformedQuery(
        f"Unsupported argument value of type {type(value).__name__}", value=value
    )


def literal_key(value: Any) -> Tuple[Any, ...]:
    """
    Type-aware identity of a normalized literal.

    Python treats ``True``, ``1`` and ``1.0`` as equal, but they render as
    different GraphQL literals, so every scalar is keyed with its type.
    """
    if isinstance(value, ListValue):
        return ("list", tuple(literal_key(item) for item in value.items))
    if isinstance(value, ObjectValue):
        return ("object", tuple((key, literal_key(item)) for key, item in value.fields))
    if isinstance(value, (EnumValue, Variable)):
        return (type(value).__name__, value.name)
    return (type(value).__name__, value)


def freeze_arguments(arguments: Mapping[str, Any]) -> Tuple[Tuple[str, Any], ...]:
    """Normalize an argument mapping, keeping its order."""
    return tuple(
        (validate_name(name, "argument name"), to_literal(value))
        for name, value in arguments.items()
    )


@dataclass(frozen=True, eq=False)
class Node:
    """
    One entry of a selection set.

    Attributes:
        kind: Field, inline fragment or fragment spread
        name: Field name, type condition or referenced fragment name
        alias: Output alias of a field
        arguments: Ordered (name, literal) pairs of a field
        children: Sub-selection
        fragment: Fragment a spread was built from, when known

    Equality is structural and type-aware over arguments. A spread compares
    by fragment name only, so a spread built from a Fragment value equals
    one built from the bare name.
    """

    kind: NodeKind
    name: str
    alias: Optional[str] = None
    arguments: Tuple[Tuple[str, Any], ...] = ()
    children: Tuple["Node", ...] = ()
    fragment: Optional["Fragment"] = None

    def __post_init__(self) -> None:
        validate_name(self.name, "type name" if self.kind != NodeKind.FIELD else "field name")
        if self.alias is not None:
            if self.kind != NodeKind.FIELD:
                raise MalformedQuery("Only fields can carry an alias", name=self.name)
            validate_name(self.alias, "alias")
        if self.kind == NodeKind.FRAGMENT_SPREAD:
            if self.children or self.arguments:
                raise MalformedQuery(
                    f"Fragment spread '{self.name}' cannot have children or arguments"
                )
        elif self.fragment is not None:
            raise MalformedQuery("Only fragment spreads reference a fragment")
        if self.kind == NodeKind.INLINE_FRAGMENT:
            if not self.children:
                raise MalformedQuery(f"Inline fragment on '{self.name}' has no selections")
            if self.arguments:
                raise MalformedQuery(f"Inline fragment on '{self.name}' cannot have arguments")

    @classmethod
    def field(
        cls,
        name: str,
        alias: Optional[str] = None,
        arguments: Optional[Mapping[str, Any]] = None,
        children: Iterable["Node"] = (),
    ) -> "Node":
        """Build a field node."""
        return cls(
            NodeKind.FIELD,
            name,
            alias=alias,
            arguments=freeze_arguments(arguments or {}),
            children=tuple(children),
        )

    @classmethod
    def inline_fragment(cls, type_name: str, children: Iterable["Node"]) -> "Node":
        """Build an inline fragment node (``... on Type``)."""
        return cls(NodeKind.INLINE_FRAGMENT, type_name, children=tuple(children))

    @classmethod
    def spread(cls, fragment: Any) -> "Node":
        """Build a spread from a Fragment value or a fragment name."""
        if isinstance(fragment, str):
            return cls(NodeKind.FRAGMENT_SPREAD, fragment)
        return cls(NodeKind.FRAGMENT_SPREAD, fragment.name, fragment=fragment)

    def structure_key(self) -> Tuple[Any, ...]:
        """Hashable identity of this node and its sub-selection."""
        return (
            self.kind.value,
            self.name,
            self.alias,
            tuple((name, literal_key(value)) for name, value in self.arguments),
            tuple(child.structure_key() for child in self.children),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.structure_key() == other.structure_key()

    def __hash__(self) -> int:
        return hash(self.structure_key())

    @property
    def response_key(self) -> str:
        """Key under which a field appears in response data."""
        return self.alias or self.name
