"""
Operation and fragment definitions.

Both are frozen value objects produced by the builders. They are safe to
reuse, execute repeatedly and share across threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .nodes import Node, to_literal, validate_name

_MISSING: Any = object()


class OperationType(str, Enum):
    """GraphQL operation types."""

    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class VariableDefinition:
    """Operation variable definition (``$name: Type = default``)."""

    name: str
    type: str
    default: Any = _MISSING

    def __post_init__(self) -> None:
        validate_name(self.name, "variable name")
        if not self.type or not self.type.strip():
            raise ValueError("Variable type must not be empty")
        if self.default is not _MISSING:
            object.__setattr__(self, "default", to_literal(self.default))

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING


@dataclass(frozen=True)
class Operation:
    """
    A query or mutation with its root selection set.

    Attributes:
        operation_type: Query or mutation
        root: Top-level selection set
        name: Optional operation name
        variables: Declared operation variables
    """

    operation_type: OperationType
    root: Tuple[Node, ...]
    name: Optional[str] = None
    variables: Tuple[VariableDefinition, ...] = ()

    def __post_init__(self) -> None:
        if self.name is not None:
            validate_name(self.name, "operation name")

    @property
    def keyword(self) -> str:
        return OperationType(self.operation_type).value

    def to_string(self, fragments: Tuple["Fragment", ...] = ()) -> str:
        """Render this operation and its fragment closure."""
        from ..serializer import serialize

        return serialize(self, fragments)

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class Fragment:
    """
    A named, reusable selection set bound to a GraphQL type.

    Equality is structural: two fragments with the same name, type and body
    are the same fragment, no matter where they were built.
    """

    name: str
    on_type: str
    root: Tuple[Node, ...]

    def __post_init__(self) -> None:
        validate_name(self.name, "fragment name")
        validate_name(self.on_type, "type name")

    def to_string(self, fragments: Tuple["Fragment", ...] = ()) -> str:
        """Render this fragment followed by the fragments it spreads."""
        from ..serializer import serialize

        return serialize(self, fragments)

    def __str__(self) -> str:
        return self.to_string()

