"""Scalar checkers — primitives and literals. No implicit coercion."""

import math
import re
from typing import Any

from shapeguard.shapes.models import LiteralShape, PrimitiveKind, PrimitiveShape, ShapeKind
from shapeguard.validators.base import BaseChecker
from shapeguard.validators.models import ViolationCode


class PrimitiveChecker(BaseChecker):
    """Exact kind match: ``True`` is not a number, ``"5"`` is not a number, NaN is not a number."""

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.PRIMITIVE

    def check(self, raw: Any, shape: PrimitiveShape, path, violations, walk) -> Any:
        if shape.primitive == PrimitiveKind.STRING:
            if not isinstance(raw, str):
                violations.append(self._wrong_type(path, shape.expected, raw))
            elif shape.pattern is not None and re.fullmatch(shape.pattern, raw) is None:
                violations.append(self._violation(
                    path, ViolationCode.INVALID_VALUE, shape.expected, self._describe_value(raw),
                ))
        elif shape.primitive == PrimitiveKind.NUMBER:
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                violations.append(self._wrong_type(path, shape.expected, raw))
            elif isinstance(raw, float) and math.isnan(raw):
                violations.append(self._violation(path, ViolationCode.INVALID_VALUE, shape.expected, "NaN"))
        elif not isinstance(raw, bool):
            violations.append(self._wrong_type(path, shape.expected, raw))
        return raw


class LiteralChecker(BaseChecker):
    """Value must equal one of the declared scalars, compared kind-aware."""

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.LITERAL

    def check(self, raw: Any, shape: LiteralShape, path, violations, walk) -> Any:
        if not shape.accepts(raw):
            violations.append(self._violation(
                path, ViolationCode.INVALID_VALUE, shape.expected, self._describe_value(raw),
            ))
        return raw
