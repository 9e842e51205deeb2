"""
Query construction DSL.

Builders accumulate selections inside nested ``with`` blocks and freeze them
into immutable Operation and Fragment values.
"""

from .builder import FieldHandle, FragmentBuilder, OperationBuilder, fragment, mutation, query
from .definitions import Fragment, Operation, OperationType, VariableDefinition
from .nodes import EnumValue, ListValue, Node, NodeKind, ObjectValue, Variable

__all__ = [
    # Builders
    "query",
    "mutation",
    "fragment",
    "OperationBuilder",
    "FragmentBuilder",
    "FieldHandle",
    # Definitions
    "Operation",
    "OperationType",
    "Fragment",
    "VariableDefinition",
    # Nodes and literals
    "Node",
    "NodeKind",
    "EnumValue",
    "Variable",
    "ListValue",
    "ObjectValue",
]
