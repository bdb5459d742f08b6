"""Collection checkers — dynamic-key mappings and homogeneous sequences.

Both collect every violation instead of stopping at the first one.
"""

from collections.abc import Mapping
from typing import Any

from shapeguard.shapes.models import MappingShape, SequenceShape, ShapeKind
from shapeguard.validators.base import BaseChecker
from shapeguard.validators.models import ViolationCode
from shapeguard.validators.values import freeze_mapping


def path_key(key: Any) -> Any:
    """Mapping keys become path elements; anything but str/int is rendered with repr."""
    if isinstance(key, str) or (isinstance(key, int) and not isinstance(key, bool)):
        return key
    return repr(key)


class MappingChecker(BaseChecker):
    """Every key must match ``key_shape`` and every value ``value_shape``.

    Offending keys are reported sorted lexicographically, so identical
    malformed inputs always produce identical failures.
    """

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.MAPPING

    def check(self, raw: Any, shape: MappingShape, path, violations, walk) -> Any:
        if not isinstance(raw, Mapping):
            violations.append(self._wrong_type(path, shape.expected, raw))
            return None

        projected = {}
        offences = []
        for key, item in raw.items():
            entry_path = path + (path_key(key),)
            found = []

            key_found = []
            walk.descend(key, shape.key_shape, entry_path, key_found)
            found.extend(
                v.model_copy(update={"code": ViolationCode.INVALID_KEY, "path": entry_path})
                for v in key_found
            )
            projected[key] = walk.descend(item, shape.value_shape, entry_path, found)

            if found:
                offences.append((key, found))

        offences.sort(key=lambda offence: (str(offence[0]), type(offence[0]).__name__))
        for _, found in offences:
            violations.extend(found)

        return freeze_mapping(projected)


class SequenceChecker(BaseChecker):
    """Each element is checked positionally; all failing indices are reported."""

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.SEQUENCE

    def check(self, raw: Any, shape: SequenceShape, path, violations, walk) -> Any:
        if not isinstance(raw, (list, tuple)):
            violations.append(self._wrong_type(path, shape.expected, raw))
            return None

        projected = []
        for index, item in enumerate(raw):
            projected.append(walk.descend(item, shape.element, path + (index,), violations))
        return tuple(projected)
