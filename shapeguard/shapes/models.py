"""Shape Descriptor models — immutable, recursive descriptions of expected JSON shapes.

Descriptors are pure data: the validator engine interprets them. Every
structural invariant (unique field names, disjoint union tags, well-formed
discriminants) is checked when the descriptor is built, so a malformed
descriptor fails at import time instead of on first use.
"""

import math
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from shapeguard.errors import ShapeDefinitionError

Tag = Union[str, int]


class ShapeKind(str, Enum):
    """Descriptor kinds understood by the validator engine."""

    PRIMITIVE = "primitive"
    LITERAL = "literal"
    OPTIONAL = "optional"
    OBJECT = "object"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    TAGGED_UNION = "tagged_union"
    LAZY = "lazy"


class PrimitiveKind(str, Enum):
    """JSON primitive kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


def json_kind(value: Any) -> str:
    """Name the JSON kind of a runtime value, as reported in path violations."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return type(value).__name__


def same_scalar(left: Any, right: Any) -> bool:
    """Kind-aware scalar equality: ``True`` is not ``1`` and ``"1"`` is not ``1``."""
    return json_kind(left) == json_kind(right) and left == right


def is_tag(value: Any) -> bool:
    return isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool))


class BaseShape(BaseModel):
    """Common base for every descriptor kind."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[ShapeKind]

    @property
    def expected(self) -> str:
        """Kind name reported as ``expected`` in path violations."""
        return self.kind.value


class PrimitiveShape(BaseShape):
    """A JSON string, number or boolean. Strings may be pattern-constrained."""

    kind: ClassVar[ShapeKind] = ShapeKind.PRIMITIVE

    primitive: PrimitiveKind
    pattern: Optional[str] = None

    @model_validator(mode="after")
    def _check_pattern(self) -> "PrimitiveShape":
        if self.pattern is None:
            return self
        if self.primitive != PrimitiveKind.STRING:
            raise ShapeDefinitionError(
                f"A pattern can only constrain string primitives, not '{self.primitive.value}'"
            )
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise ShapeDefinitionError(f"Invalid pattern {self.pattern!r}: {e}") from e
        return self

    @property
    def expected(self) -> str:
        if self.pattern is not None:
            return f"string matching {self.pattern!r}"
        return self.primitive.value


class LiteralShape(BaseShape):
    """One of a closed set of JSON scalar values."""

    kind: ClassVar[ShapeKind] = ShapeKind.LITERAL

    values: tuple[Any, ...]

    @model_validator(mode="after")
    def _check_values(self) -> "LiteralShape":
        if not self.values:
            raise ShapeDefinitionError("A literal shape needs at least one value")
        for value in self.values:
            if value is not None and not isinstance(value, (str, int, float, bool)):
                raise ShapeDefinitionError(
                    f"Literal values must be JSON scalars, got {type(value).__name__}"
                )
            if isinstance(value, float) and math.isnan(value):
                raise ShapeDefinitionError("NaN can never be matched by a literal shape")
        return self

    def accepts(self, value: Any) -> bool:
        return any(same_scalar(value, candidate) for candidate in self.values)

    @property
    def expected(self) -> str:
        if len(self.values) == 1:
            return f"literal {self.values[0]!r}"
        return "one of " + ", ".join(repr(v) for v in self.values)


class OptionalShape(BaseShape):
    """An object field that may be absent. Present values must match ``inner``."""

    kind: ClassVar[ShapeKind] = ShapeKind.OPTIONAL

    inner: BaseShape

    @property
    def expected(self) -> str:
        return self.inner.expected


class FieldSpec(BaseModel):
    """A named field of an object shape."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    shape: BaseShape


class ObjectShape(BaseShape):
    """A JSON object with declared fields, in declaration order.

    Unknown keys in the input are ignored and dropped from the validated value.
    """

    kind: ClassVar[ShapeKind] = ShapeKind.OBJECT

    fields: tuple[FieldSpec, ...] = ()

    @model_validator(mode="after")
    def _check_unique_names(self) -> "ObjectShape":
        seen = set()
        for spec in self.fields:
            if spec.name in seen:
                raise ShapeDefinitionError(f"Duplicate field name '{spec.name}' in object shape")
            seen.add(spec.name)
        return self

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def get_field(self, name: str) -> Optional[BaseShape]:
        for spec in self.fields:
            if spec.name == name:
                return spec.shape
        return None

    # ── Derivations ──

    def extend(self, fields: Mapping[str, BaseShape]) -> "ObjectShape":
        """Return a new shape with ``fields`` added. Redeclared names are replaced in place."""
        merged = [
            FieldSpec(name=spec.name, shape=fields[spec.name]) if spec.name in fields else spec
            for spec in self.fields
        ]
        existing = set(self.field_names)
        merged.extend(
            FieldSpec(name=name, shape=shape) for name, shape in fields.items() if name not in existing
        )
        return ObjectShape(fields=tuple(merged))

    def pick(self, *names: str) -> "ObjectShape":
        """Keep only ``names``, in the original declaration order."""
        self._require_declared(names)
        return ObjectShape(fields=tuple(spec for spec in self.fields if spec.name in names))

    def omit(self, *names: str) -> "ObjectShape":
        self._require_declared(names)
        return ObjectShape(fields=tuple(spec for spec in self.fields if spec.name not in names))

    def partial(self) -> "ObjectShape":
        """Make every field optional."""
        return ObjectShape(fields=tuple(
            spec if isinstance(spec.shape, OptionalShape)
            else FieldSpec(name=spec.name, shape=OptionalShape(inner=spec.shape))
            for spec in self.fields
        ))

    def _require_declared(self, names: tuple[str, ...]) -> None:
        unknown = [name for name in names if name not in self.field_names]
        if unknown:
            raise ShapeDefinitionError(f"Field(s) {unknown} are not declared on this object shape")


class MappingShape(BaseShape):
    """A dynamic-key record: every key matches ``key_shape``, every value ``value_shape``."""

    kind: ClassVar[ShapeKind] = ShapeKind.MAPPING

    key_shape: BaseShape
    value_shape: BaseShape


class SequenceShape(BaseShape):
    """A homogeneous JSON array."""

    kind: ClassVar[ShapeKind] = ShapeKind.SEQUENCE

    element: BaseShape


class UnionMember(BaseModel):
    """One tagged member of a union."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tag: Any
    shape: BaseShape


class TaggedUnionShape(BaseShape):
    """Exactly one of several known shapes.

    With a ``discriminator`` every member is an object shape declaring that
    field as ``Literal(tag)``, and selection is a direct lookup. Without one,
    members are tried structurally in declaration order and the earliest
    declared full match wins.
    """

    kind: ClassVar[ShapeKind] = ShapeKind.TAGGED_UNION

    members: tuple[UnionMember, ...]
    discriminator: Optional[str] = None

    @model_validator(mode="after")
    def _check_members(self) -> "TaggedUnionShape":
        if not self.members:
            raise ShapeDefinitionError("A tagged union needs at least one member")

        seen: list[Tag] = []
        for member in self.members:
            if not is_tag(member.tag):
                raise ShapeDefinitionError(
                    f"Variant tags must be str or int, got {type(member.tag).__name__}"
                )
            if any(same_scalar(member.tag, other) for other in seen):
                raise ShapeDefinitionError(f"Duplicate variant tag {member.tag!r} in tagged union")
            seen.append(member.tag)

            if self.discriminator is not None:
                self._check_discriminant(member)
        return self

    def _check_discriminant(self, member: UnionMember) -> None:
        if not isinstance(member.shape, ObjectShape):
            raise ShapeDefinitionError(
                f"Member {member.tag!r} must be an object shape to carry discriminator '{self.discriminator}'"
            )
        field = member.shape.get_field(self.discriminator)
        if not isinstance(field, LiteralShape) or len(field.values) != 1 or not field.accepts(member.tag):
            raise ShapeDefinitionError(
                f"Member {member.tag!r} must declare '{self.discriminator}' as literal {member.tag!r}"
            )

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(member.tag for member in self.members)

    def member_for(self, tag: Any) -> Optional[UnionMember]:
        """Find the member whose tag equals ``tag`` (kind-aware), if any."""
        for member in self.members:
            if same_scalar(member.tag, tag):
                return member
        return None

    @property
    def expected(self) -> str:
        return "union"


class LazyShape(BaseShape):
    """A deferred reference, resolved at validation time. Used for recursive shapes."""

    kind: ClassVar[ShapeKind] = ShapeKind.LAZY

    resolve: Callable[[], BaseShape]

    def resolved(self) -> BaseShape:
        shape = self.resolve()
        if not isinstance(shape, BaseShape):
            raise ShapeDefinitionError(
                f"Lazy shape resolved to {type(shape).__name__}, expected a shape descriptor"
            )
        return shape
