"""
Read-only wrappers over decoded JSON responses.

``wrap`` turns any JSON-shaped value into one of three variants: a scalar, a
list of wrapped values, or an object whose keys read as attributes. Reading a
key that is absent raises MissingField; reading a key that is present with a
null value yields a null scalar.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Dict, Iterator, List, Tuple, Union, overload

from .exceptions import MissingField


class ResponseValue:
    """Base class of wrapped response values."""

    __slots__ = ()

    def to_python(self) -> Any:
        """Return the plain JSON-shaped value."""
        raise NotImplementedError


class ResponseScalar(ResponseValue):
    """
    Wrapped string, number, boolean or null.

    Compares equal to the raw value it wraps, so ``result.data.x == 1``
    reads naturally.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, float, bool, None]):
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Response values are read-only")

    @property
    def value(self) -> Union[str, int, float, bool, None]:
        return self._value

    @property
    def is_null(self) -> bool:
        return self._value is None

    def to_python(self) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseScalar):
            return self._value == other._value
        if isinstance(other, ResponseValue):
            return False
        return self._value == other

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    def __int__(self) -> int:
        return int(self._value)  # type: ignore[arg-type]

    def __float__(self) -> float:
        return float(self._value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return "null" if self._value is None else str(self._value)

    def __repr__(self) -> str:
        return f"ResponseScalar({self._value!r})"


class ResponseList(ResponseValue, Sequence):
    """Wrapped JSON array supporting iteration, indexing and len."""

    __slots__ = ("_items",)

    def __init__(self, items: Tuple[ResponseValue, ...]):
        object.__setattr__(self, "_items", items)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Response values are read-only")

    @overload
    def __getitem__(self, index: int) -> ResponseValue: ...

    @overload
    def __getitem__(self, index: slice) -> "ResponseList": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[ResponseValue, "ResponseList"]:
        if isinstance(index, slice):
            return ResponseList(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ResponseValue]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseList):
            return self._items == other._items
        if isinstance(other, list):
            return self.to_python() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self._items]

    def __repr__(self) -> str:
        return f"ResponseList({list(self._items)!r})"


class ResponseObject(ResponseValue):
    """
    Wrapped JSON object exposing keys as attributes.

    Keys that are not Python identifiers, or that collide with methods of this
    class, are read with ``obj["key"]``. ``resolve`` follows a dotted path in
    one call, with integer segments indexing into lists.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Dict[str, ResponseValue]):
        object.__setattr__(self, "_fields", fields)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Response values are read-only")

    def __getattr__(self, name: str) -> ResponseValue:
        if name.startswith("__"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, key: str) -> ResponseValue:
        try:
            return self._fields[key]
        except KeyError:
            raise MissingField(key, sorted(self._fields)) from None

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._fields))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseObject):
            return self._fields == other._fields
        if isinstance(other, dict):
            return self.to_python() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def keys(self) -> List[str]:
        """Get the object's keys in response order."""
        return list(self._fields)

    def resolve(self, path: str) -> ResponseValue:
        """
        Get a value by dot-separated path.

        Args:
            path: Dot-separated path (e.g., "catCollection.items.0.name")

        Returns:
            Wrapped value at the path

        Raises:
            MissingField: If a key along the path is absent or an index is out
                of range
        """
        current: ResponseValue = self
        for segment in path.split("."):
            if isinstance(current, ResponseObject):
                current = current[segment]
            elif isinstance(current, ResponseList) and segment.lstrip("-").isdigit():
                try:
                    current = current[int(segment)]
                except IndexError:
                    raise MissingField(segment) from None
            else:
                raise MissingField(segment)
        return current

    def to_python(self) -> Dict[str, Any]:
        return {key: value.to_python() for key, value in self._fields.items()}

    def __repr__(self) -> str:
        return f"ResponseObject({self._fields!r})"


def wrap(value: Any) -> ResponseValue:
    """
    Wrap a decoded JSON value.

    Args:
        value: Mapping, sequence or scalar as produced by a JSON decoder

    Returns:
        Wrapped value mirroring the input's structure
    """
    if isinstance(value, ResponseValue):
        return value
    if isinstance(value, dict):
        return ResponseObject({str(key): wrap(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return ResponseList(tuple(wrap(item) for item in value))
    return ResponseScalar(value)
