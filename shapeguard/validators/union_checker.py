"""Tagged union checker — explicit discriminant lookup or ordered structural matching."""

from collections.abc import Mapping
from typing import Any

from shapeguard.shapes.models import ShapeKind, TaggedUnionShape
from shapeguard.validators.base import BaseChecker
from shapeguard.validators.models import ViolationCode


class TaggedUnionChecker(BaseChecker):
    """Selects exactly one member.

    Explicit discriminator: the member whose tag equals the discriminant is
    selected and its own violations are reported. Structural: members are
    tried in declaration order and the first full match wins.

    When no member is selected a single violation is reported at the union's
    path, listing the tried tags rather than every member's field mismatches.
    """

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.TAGGED_UNION

    def check(self, raw: Any, shape: TaggedUnionShape, path, violations, walk) -> Any:
        if shape.discriminator is not None:
            return self._check_discriminated(raw, shape, path, violations, walk)

        for member in shape.members:
            matched, projected = walk.attempt(raw, member.shape, path)
            if matched:
                return projected

        violations.append(self._no_match(path, shape, self._describe_value(raw)))
        return None

    def _check_discriminated(self, raw, shape: TaggedUnionShape, path, violations, walk) -> Any:
        if not isinstance(raw, Mapping):
            violations.append(self._no_match(path, shape, self._describe_value(raw)))
            return None
        if shape.discriminator not in raw:
            violations.append(self._no_match(path, shape, f"missing discriminator '{shape.discriminator}'"))
            return None

        discriminant = raw[shape.discriminator]
        member = shape.member_for(discriminant)
        if member is None:
            violations.append(self._no_match(
                path, shape, f"{shape.discriminator}={self._describe_value(discriminant)}",
            ))
            return None
        return walk.descend(raw, member.shape, path, violations)

    def _no_match(self, path: tuple, shape: TaggedUnionShape, actual: str):
        return self._violation(
            path, ViolationCode.NO_MATCHING_VARIANT, shape.expected, actual, tried=shape.tags,
        )
