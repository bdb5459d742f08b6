"""Validated Value — the proof token returned by a successful validation.

Only the validator engine can construct one. The wrapped value is the
projection of the raw input onto its descriptor: undeclared object keys are
dropped, sequences are tuples and every container is read-only.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from shapeguard.errors import ShapeDefinitionError, ShapeMismatchError
from shapeguard.shapes.models import (
    BaseShape,
    LazyShape,
    MappingShape,
    ObjectShape,
    OptionalShape,
    SequenceShape,
    TaggedUnionShape,
)

_ENGINE_TOKEN = object()


def freeze_mapping(items: dict) -> Mapping:
    return MappingProxyType(items)


def thaw(value: Any) -> Any:
    """Deep-copy a projected value into plain mutable ``dict`` / ``list`` containers."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class ValidatedValue:
    """A value proven to match ``shape``. Immutable."""

    __slots__ = ("_value", "_shape")

    def __init__(self, token: object, value: Any, shape: BaseShape):
        if token is not _ENGINE_TOKEN:
            raise ShapeDefinitionError(
                "ValidatedValue can only be produced by the validator engine; call validate()"
            )
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_shape", shape)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ValidatedValue is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ValidatedValue is immutable")

    @property
    def value(self) -> Any:
        return self._value

    @property
    def shape(self) -> BaseShape:
        return self._shape

    @property
    def ok(self) -> bool:
        return True

    def __getitem__(self, key: Any) -> Any:
        return self._value[key]

    def __contains__(self, key: Any) -> bool:
        return isinstance(self._value, Mapping) and key in self._value

    def get(self, key: str, default: Any = None) -> Any:
        if isinstance(self._value, Mapping):
            return self._value.get(key, default)
        return default

    def lookup(self, *path: Any) -> Any:
        """Read a nested value, e.g. ``lookup("metadata", "replies", "count")``."""
        current = self._value
        for element in path:
            current = current[element]
        return current

    def child(self, *path: Any) -> "ValidatedValue":
        """Narrow to a nested value, keeping the proof.

        Walks object fields, sequence indices and mapping keys. A tagged union
        in the middle of the path must be classified first.
        """
        value, shape = self._value, self._shape
        for element in path:
            shape = _unwrap(shape)
            if isinstance(shape, ObjectShape):
                field = shape.get_field(element)
                if field is None:
                    raise KeyError(element)
                value, shape = value[element], field
            elif isinstance(shape, SequenceShape):
                value, shape = value[element], shape.element
            elif isinstance(shape, MappingShape):
                value, shape = value[element], shape.value_shape
            elif isinstance(shape, TaggedUnionShape):
                raise ShapeMismatchError(
                    f"Cannot step into tagged union at {element!r}; classify the value first"
                )
            else:
                raise KeyError(element)
        return ValidatedValue(_ENGINE_TOKEN, value, _unwrap(shape))

    def to_python(self) -> Any:
        """Plain ``dict``/``list`` copy, e.g. for ``json.dumps``."""
        return thaw(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidatedValue):
            return NotImplemented
        return self._value == other._value and self._shape == other._shape

    __hash__ = None

    def __repr__(self) -> str:
        return f"ValidatedValue({self._shape.expected}, {self.to_python()!r})"


def _unwrap(shape: BaseShape) -> BaseShape:
    while isinstance(shape, (OptionalShape, LazyShape)):
        shape = shape.inner if isinstance(shape, OptionalShape) else shape.resolved()
    return shape
