"""Object checker — declared fields in declaration order, optional fields may be absent."""

from collections.abc import Mapping
from typing import Any

from shapeguard.shapes.models import ObjectShape, OptionalShape, ShapeKind
from shapeguard.validators.base import BaseChecker
from shapeguard.validators.models import ViolationCode
from shapeguard.validators.values import freeze_mapping


class ObjectChecker(BaseChecker):
    """Validates declared fields only; unknown keys are ignored and dropped."""

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.OBJECT

    def check(self, raw: Any, shape: ObjectShape, path, violations, walk) -> Any:
        if not isinstance(raw, Mapping):
            violations.append(self._wrong_type(path, shape.expected, raw))
            return None

        projected = {}
        for spec in shape.fields:
            field_path = path + (spec.name,)
            if spec.name not in raw:
                # Absence is only acceptable for fields declared optional
                if not isinstance(spec.shape, OptionalShape):
                    violations.append(self._violation(
                        field_path,
                        ViolationCode.MISSING_FIELD,
                        walk.expected_of(spec.shape),
                        "missing",
                    ))
                continue
            projected[spec.name] = walk.descend(raw[spec.name], spec.shape, field_path, violations)

        return freeze_mapping(projected)

