"""Descriptor builders — the short, declarative way to write shapes.

Usage:
    MESSAGE = obj({
        "id": string(),
        "timestamp": number(),
        "reactions": optional(mapping(string(), number())),
    })
"""

from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional, Union

from shapeguard.shapes.models import (
    BaseShape,
    FieldSpec,
    LazyShape,
    LiteralShape,
    MappingShape,
    ObjectShape,
    OptionalShape,
    PrimitiveKind,
    PrimitiveShape,
    SequenceShape,
    Tag,
    TaggedUnionShape,
    UnionMember,
)


def string(pattern: Optional[str] = None) -> PrimitiveShape:
    """A string, optionally required to fully match ``pattern``."""
    return PrimitiveShape(primitive=PrimitiveKind.STRING, pattern=pattern)


def number() -> PrimitiveShape:
    return PrimitiveShape(primitive=PrimitiveKind.NUMBER)


def boolean() -> PrimitiveShape:
    return PrimitiveShape(primitive=PrimitiveKind.BOOLEAN)


def literal(*values: Any) -> LiteralShape:
    return LiteralShape(values=values)


def optional(inner: BaseShape) -> OptionalShape:
    return OptionalShape(inner=inner)


def obj(fields: Union[Mapping[str, BaseShape], Sequence[tuple[str, BaseShape]]] = ()) -> ObjectShape:
    """An object shape. Accepts a dict or a sequence of ``(name, shape)`` pairs."""
    pairs = fields.items() if isinstance(fields, Mapping) else fields
    return ObjectShape(fields=tuple(FieldSpec(name=name, shape=shape) for name, shape in pairs))


def mapping(key_shape: BaseShape, value_shape: BaseShape) -> MappingShape:
    return MappingShape(key_shape=key_shape, value_shape=value_shape)


def sequence(element: BaseShape) -> SequenceShape:
    return SequenceShape(element=element)


def tagged_union(
    members: Union[Mapping[Tag, BaseShape], Sequence[tuple[Tag, BaseShape]]],
    discriminator: Optional[str] = None,
) -> TaggedUnionShape:
    """A tagged union of ``members``, tried in the given order.

    Args:
        members: tag → shape, as a dict or a sequence of ``(tag, shape)`` pairs
        discriminator: name of the field whose literal value selects the member.
            When omitted, members are matched structurally and the earliest
            declared full match wins.
    """
    pairs = members.items() if isinstance(members, Mapping) else members
    return TaggedUnionShape(
        members=tuple(UnionMember(tag=tag, shape=shape) for tag, shape in pairs),
        discriminator=discriminator,
    )


def lazy(resolve: Callable[[], BaseShape]) -> LazyShape:
    """Defer a reference, e.g. ``lazy(lambda: THREAD)`` inside THREAD itself."""
    return LazyShape(resolve=resolve)
