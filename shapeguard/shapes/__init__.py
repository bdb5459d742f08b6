"""Shape Descriptors — declarative, immutable descriptions of expected input."""

from shapeguard.shapes.builders import (
    boolean,
    lazy,
    literal,
    mapping,
    number,
    obj,
    optional,
    sequence,
    string,
    tagged_union,
)
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
    ShapeKind,
    Tag,
    TaggedUnionShape,
    UnionMember,
    json_kind,
)

__all__ = [
    "BaseShape",
    "FieldSpec",
    "LazyShape",
    "LiteralShape",
    "MappingShape",
    "ObjectShape",
    "OptionalShape",
    "PrimitiveKind",
    "PrimitiveShape",
    "SequenceShape",
    "ShapeKind",
    "Tag",
    "TaggedUnionShape",
    "UnionMember",
    "json_kind",
    "boolean",
    "lazy",
    "literal",
    "mapping",
    "number",
    "obj",
    "optional",
    "sequence",
    "string",
    "tagged_union",
]
