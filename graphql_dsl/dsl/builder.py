"""
Scoped query builders.

A builder keeps an explicit stack of open selection scopes. Entering a
``with`` block on a field or an inline fragment pushes that selection, every
field reference made inside appends to it, and leaving the block pops it.
No state is shared between builders.

Examples:
    Simple query:
    ```python
    with query() as q:
        with q.catCollection(limit=1):
            with q.items:
                q.name
                q.likes

    operation = q.build()
    ```

    Fragments, type conditions and aliases:
    ```python
    with fragment("CatInfo", "Cat") as f:
        f.fields("name", "likes")
    cat_info = f.build()

    with query("Pets") as q:
        with q.pets(first=10).as_alias("firstPets"):
            q.id
            with q.on("Cat"):
                q.spread(cat_info)
    ```

    Names that are not Python identifiers, or that collide with builder
    methods such as ``field`` or ``on``, go through ``q.field("on")``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from ..exceptions import MalformedQuery
from .definitions import Fragment, Operation, OperationType, VariableDefinition, _MISSING
from .nodes import Node, NodeKind, validate_name


class _Draft:
    """Mutable selection under construction."""

    def __init__(
        self,
        kind: NodeKind,
        name: str,
        alias: Optional[str] = None,
        fragment: Union[Fragment, str, None] = None,
    ):
        self.kind = kind
        self.name = name
        self.alias = alias
        self.fragment = fragment
        self.arguments: Dict[str, Any] = {}
        self.children: List[_Draft] = []

    def freeze(self) -> Node:
        if self.kind == NodeKind.FRAGMENT_SPREAD:
            return Node.spread(self.fragment)
        children = [child.freeze() for child in self.children]
        if self.kind == NodeKind.INLINE_FRAGMENT:
            return Node.inline_fragment(self.name, children)
        return Node.field(self.name, alias=self.alias, arguments=self.arguments, children=children)


class ScopeHandle:
    """Context manager that opens a nested selection on one draft."""

    def __init__(self, builder: "SelectionBuilder", draft: _Draft, parent: _Draft):
        self._builder = builder
        self._draft = draft
        self._parent = parent

    def __enter__(self) -> "SelectionBuilder":
        self._ensure_current()
        self._builder._push(self._draft)
        return self._builder

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._builder._pop(self._draft)
        if exc_type is None and not self._draft.children:
            raise MalformedQuery(f"Selection on '{self._draft.name}' is empty")

    def _ensure_current(self) -> None:
        if not self._builder._stack or self._builder._stack[-1] is not self._parent:
            raise MalformedQuery(
                f"'{self._draft.name}' can only be configured inside the scope that declared it"
            )


class FieldHandle(ScopeHandle):
    """
    Handle on a field that was just appended.

    Calling the handle sets arguments, ``as_alias`` sets the output alias, and
    using it in a ``with`` block opens its sub-selection.
    """

    def __call__(self, arguments: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> "FieldHandle":
        """
        Set field arguments, keeping the order they were given in.

        Args:
            arguments: Optional mapping for names that are not identifiers
            **kwargs: Arguments as keyword arguments

        Returns:
            Self for chaining
        """
        self._ensure_current()
        if arguments:
            self._draft.arguments.update(arguments)
        self._draft.arguments.update(kwargs)
        return self

    def as_alias(self, alias: str) -> "FieldHandle":
        """
        Set field alias.

        Args:
            alias: Field alias

        Returns:
            Self for chaining
        """
        self._ensure_current()
        self._draft.alias = validate_name(alias, "alias")
        return self


class SelectionBuilder:
    """Base builder holding the scope stack and the field reference surface."""

    def __init__(self) -> None:
        self._root = _Draft(NodeKind.FIELD, "root")
        self._stack: List[_Draft] = []
        self._closed = False

    def __enter__(self) -> "SelectionBuilder":
        if self._stack or self._closed:
            raise MalformedQuery("Builder scope can only be entered once")
        self._stack.append(self._root)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._stack.clear()
        self._closed = True

    def __getattr__(self, name: str) -> FieldHandle:
        """
        Reference field ``name`` in the current selection.

        Every public attribute lookup is a field reference, including those
        made by ``hasattr`` or ``getattr(q, name, default)``: inside an open
        scope they append a field, outside of one they raise MalformedQuery.
        Names starting with an underscore (dunder and ``_repr_*_`` hooks looked
        up by debuggers and notebooks) raise AttributeError and append
        nothing. Such names, and names shadowed by builder methods, are
        selected with ``field()``.
        """
        if name.startswith("_"):
            raise AttributeError(name)
        return self.field(name)

    @property
    def _current(self) -> _Draft:
        if not self._stack:
            raise MalformedQuery("Field referenced outside of any query or fragment scope")
        return self._stack[-1]

    def _push(self, draft: _Draft) -> None:
        self._stack.append(draft)

    def _pop(self, draft: _Draft) -> None:
        if not self._stack or self._stack[-1] is not draft:
            raise MalformedQuery(f"Selection scope '{draft.name}' closed out of order")
        self._stack.pop()

    def field(
        self,
        name: str,
        /,
        alias: Optional[str] = None,
        arguments: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> FieldHandle:
        """
        Append a field to the current selection.

        Args:
            name: Field name
            alias: Optional output alias
            arguments: Arguments whose names are ``alias`` or ``arguments``,
                or are not Python identifiers
            **kwargs: Field arguments, in order after ``arguments``

        Returns:
            FieldHandle for the field
        """
        parent = self._current
        draft = _Draft(
            NodeKind.FIELD,
            validate_name(name, "field name"),
            alias=validate_name(alias, "alias") if alias is not None else None,
        )
        if arguments:
            draft.arguments.update(arguments)
        draft.arguments.update(kwargs)
        parent.children.append(draft)
        return FieldHandle(self, draft, parent)

    def fields(self, *names: str) -> "SelectionBuilder":
        """
        Append several leaf fields.

        Args:
            *names: Field names

        Returns:
            Self for chaining
        """
        for name in names:
            self.field(name)
        return self

    def on(self, type_name: str) -> ScopeHandle:
        """
        Append an inline fragment (``... on Type``).

        The fragment's selections are built inside the returned handle's
        ``with`` block.
        """
        parent = self._current
        draft = _Draft(NodeKind.INLINE_FRAGMENT, validate_name(type_name, "type name"))
        parent.children.append(draft)
        return ScopeHandle(self, draft, parent)

    def spread(self, fragment: Union[Fragment, str]) -> "SelectionBuilder":
        """
        Append a spread of a named fragment (``...Name``).

        A Fragment value travels with the spread so the serializer can emit it;
        a bare name must be supplied to the serializer separately.
        """
        parent = self._current
        if isinstance(fragment, Fragment):
            name = fragment.name
        elif isinstance(fragment, str):
            name = validate_name(fragment, "fragment name")
        else:
            raise MalformedQuery(
                f"Cannot spread a {type(fragment).__name__}; expected a Fragment or its name"
            )
        parent.children.append(_Draft(NodeKind.FRAGMENT_SPREAD, name, fragment=fragment))
        return self

    def _frozen_root(self) -> tuple:
        if len(self._stack) > 1:
            raise MalformedQuery(f"Selection scope '{self._stack[-1].name}' is still open")
        if not self._root.children:
            raise MalformedQuery("Selection set is empty")
        return tuple(child.freeze() for child in self._root.children)


class OperationBuilder(SelectionBuilder):
    """Builder for queries and mutations."""

    def __init__(self, operation_type: OperationType, name: Optional[str] = None):
        super().__init__()
        self._operation_type = operation_type
        self._name = validate_name(name, "operation name") if name is not None else None
        self._variables: List[VariableDefinition] = []

    def variable(self, name: str, type_: str, default: Any = _MISSING) -> "OperationBuilder":
        """
        Declare an operation variable.

        Args:
            name: Variable name (without $)
            type_: GraphQL type (e.g., "String!", "Int", "[ID!]!")
            default: Default value

        Returns:
            Self for chaining
        """
        if any(var.name == name for var in self._variables):
            raise MalformedQuery(f"Variable '${name}' is declared twice")
        self._variables.append(VariableDefinition(name, type_, default))
        return self

    def build(self) -> Operation:
        """Freeze the accumulated selection into an Operation."""
        return Operation(
            operation_type=self._operation_type,
            root=self._frozen_root(),
            name=self._name,
            variables=tuple(self._variables),
        )


class FragmentBuilder(SelectionBuilder):
    """Builder for named fragments."""

    def __init__(self, name: str, on_type: str):
        super().__init__()
        self._name = validate_name(name, "fragment name")
        self._on_type = validate_name(on_type, "type name")

    def build(self) -> Fragment:
        """Freeze the accumulated selection into a Fragment."""
        return Fragment(name=self._name, on_type=self._on_type, root=self._frozen_root())


def query(name: Optional[str] = None) -> OperationBuilder:
    """Start building a query."""
    return OperationBuilder(OperationType.QUERY, name)


def mutation(name: Optional[str] = None) -> OperationBuilder:
    """Start building a mutation."""
    return OperationBuilder(OperationType.MUTATION, name)


def fragment(name: str, on_type: str) -> FragmentBuilder:
    """Start building a named fragment."""
    return FragmentBuilder(name, on_type)
