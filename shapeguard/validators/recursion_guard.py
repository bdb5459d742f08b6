"""Recursion guard — rejects recursive descriptors that cannot work.

Recursion is only possible through lazy references, so the guard inspects
every lazy reference reachable from the root descriptor, once per
validation run and before any input is read. Input depth plays no part:
a deep but finite input against a sound recursive descriptor is fine.

A lazy reference is rejected when:
    - lazy references chain deeper than ``max_depth`` (e.g. a factory
      producing a fresh reference on every resolution)
    - it leads back to itself through required object fields only, so no
      finite input can satisfy it: ``node = obj({"child": lazy(lambda: node)})``
    - it leads back to itself through wrappers and union members only, so
      checking would loop at one position forever: ``loop = lazy(lambda: loop)``

Optional fields, sequences and mappings break a cycle: they accept an
absent field or an empty collection.
"""

from shapeguard.errors import ShapeRecursionError
from shapeguard.shapes.models import (
    BaseShape,
    LazyShape,
    MappingShape,
    ObjectShape,
    OptionalShape,
    SequenceShape,
    TaggedUnionShape,
)


def nested_shapes(shape: BaseShape) -> tuple[BaseShape, ...]:
    """Direct children of a descriptor, lazy references left unresolved."""
    if isinstance(shape, ObjectShape):
        return tuple(spec.shape for spec in shape.fields)
    if isinstance(shape, OptionalShape):
        return (shape.inner,)
    if isinstance(shape, SequenceShape):
        return (shape.element,)
    if isinstance(shape, MappingShape):
        return (shape.key_shape, shape.value_shape)
    if isinstance(shape, TaggedUnionShape):
        return tuple(member.shape for member in shape.members)
    return ()


def guard_recursion(shape: BaseShape, max_depth: int) -> None:
    """Check every lazy reference reachable from ``shape``.

    Raises:
        ShapeRecursionError: a reference chains too deep or cycles without progress
        ShapeDefinitionError: a reference resolves to something other than a shape
    """
    # Keyed by id; values keep resolved references alive so ids are not reused
    visited: dict[int, LazyShape] = {}
    pending = [(shape, 0)]
    while pending:
        current, lazy_depth = pending.pop()
        if isinstance(current, LazyShape):
            if id(current) in visited:
                continue
            if lazy_depth >= max_depth:
                raise ShapeRecursionError(max_depth)
            visited[id(current)] = current
            _reject_cycle(current, max_depth)
            pending.append((current.resolved(), lazy_depth + 1))
        elif isinstance(current, BaseShape):
            pending.extend((child, lazy_depth) for child in nested_shapes(current))


def _reject_cycle(start: LazyShape, max_depth: int) -> None:
    """Follow ``start`` through edges that cannot end a recursion.

    Required object fields move into the input but demand a value. Optional
    wrappers, lazy references and union members stay at the same position.
    Union members are only followed before the first object field, since a
    union reached through a field may still offer a terminating member.
    """
    explored: dict[tuple[int, bool], BaseShape] = {}
    pending = [(start.resolved(), False, 1)]
    while pending:
        current, moved, lazy_depth = pending.pop()
        if isinstance(current, LazyShape):
            if current is start:
                reason = (
                    "lazy reference requires itself through required fields"
                    if moved else "lazy reference resolves to itself without consuming input"
                )
                raise ShapeRecursionError(max_depth, reason=reason)
            if lazy_depth >= max_depth:
                raise ShapeRecursionError(max_depth)
            if (id(current), moved) in explored:
                continue
            explored[(id(current), moved)] = current
            pending.append((current.resolved(), moved, lazy_depth + 1))
        elif isinstance(current, OptionalShape):
            pending.append((current.inner, moved, lazy_depth))
        elif isinstance(current, ObjectShape):
            pending.extend(
                (spec.shape, True, lazy_depth)
                for spec in current.fields
                if not isinstance(spec.shape, OptionalShape)
            )
        elif isinstance(current, TaggedUnionShape) and not moved:
            pending.extend((member.shape, moved, lazy_depth) for member in current.members)
