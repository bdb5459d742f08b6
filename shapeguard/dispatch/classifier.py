"""Variant Classifier — names the tagged-union member a validated value belongs to.

Tie-break policy: a value that structurally matches more than one member of
a union without a discriminator belongs to the earliest declared member.
``{"text": ..., "imageUrl": ...}`` against ``[text, image]`` is ``text``.
"""

from typing import Optional

from shapeguard.errors import ShapeMismatchError
from shapeguard.shapes.models import Tag, TaggedUnionShape
from shapeguard.validators.engine import ShapeValidator, shape_validator
from shapeguard.validators.models import ValidationFailure
from shapeguard.validators.values import ValidatedValue


def classify(
    value: ValidatedValue,
    union: TaggedUnionShape,
    validator: Optional[ShapeValidator] = None,
) -> Tag:
    """Return the tag of the member ``value`` belongs to.

    Raises:
        ShapeMismatchError: ``value`` was not validated against ``union``
    """
    tag, _ = narrow(value, union, validator)
    return tag


def narrow(
    value: ValidatedValue,
    union: TaggedUnionShape,
    validator: Optional[ShapeValidator] = None,
) -> tuple[Tag, ValidatedValue]:
    """Classify ``value`` and re-project it onto the selected member's shape.

    Explicit discriminator: the discriminant field is read directly.
    Structural: the value is re-tested against each member in declaration order.
    """
    _require_validated_against(value, union)
    validator = validator or shape_validator

    if union.discriminator is not None:
        member = union.member_for(value[union.discriminator])
        candidates = [member] if member is not None else []
    else:
        candidates = list(union.members)

    for member in candidates:
        result = validator.validate(value.value, member.shape)
        if not isinstance(result, ValidationFailure):
            return member.tag, result

    # Unreachable for values produced by validate(); a mismatch means the precondition was violated
    raise ShapeMismatchError("Validated value matches no member of the union it was validated against")


def _require_validated_against(value: ValidatedValue, union: TaggedUnionShape) -> None:
    if not isinstance(union, TaggedUnionShape):
        raise ShapeMismatchError(f"classify() needs a tagged union, got '{union.expected}'")
    if not isinstance(value, ValidatedValue):
        raise ShapeMismatchError(
            f"classify() needs a ValidatedValue, got {type(value).__name__}; call validate() first"
        )
    if value.shape != union:
        raise ShapeMismatchError(
            f"Value was validated against '{value.shape.expected}', not this union "
            f"(tags: {list(union.tags)})"
        )
