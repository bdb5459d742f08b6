"""Validator Engine — walks raw input against a Shape Descriptor.

This is the main entry point for shape validation. It dispatches each
descriptor kind to its registered checker and produces either a
ValidatedValue or a ValidationFailure.

Usage:
    result = shape_validator.validate(payload, MESSAGE)
    if not result.ok:
        # Reject the request with result.violations
"""

import json
import time
from typing import Any, Optional, Union

import structlog

from shapeguard.config import get_settings
from shapeguard.errors import ShapeDefinitionError, ValidationFailed
from shapeguard.shapes.models import BaseShape, LazyShape, OptionalShape, ShapeKind
from shapeguard.validators.base import BaseChecker
from shapeguard.validators.models import PathViolation, ValidationFailure, ViolationCode
from shapeguard.validators.recursion_guard import guard_recursion
from shapeguard.validators.values import _ENGINE_TOKEN, ValidatedValue

# Import all checkers
from shapeguard.validators.scalar_checker import LiteralChecker, PrimitiveChecker
from shapeguard.validators.object_checker import ObjectChecker
from shapeguard.validators.collection_checker import MappingChecker, SequenceChecker
from shapeguard.validators.union_checker import TaggedUnionChecker

logger = structlog.get_logger()

ValidationResult = Union[ValidatedValue, ValidationFailure]


class Walk:
    """State of a single validation run: the checker registry.

    One Walk per ``validate`` call, so concurrent calls share nothing mutable.
    The descriptor has passed ``guard_recursion`` before a Walk starts, so
    unwrapping optional and lazy wrappers always terminates.
    """

    def __init__(self, checkers: dict[ShapeKind, BaseChecker]):
        self._checkers = checkers

    def descend(self, raw: Any, shape: BaseShape, path: tuple, violations: list[PathViolation]) -> Any:
        """Check ``raw`` against ``shape`` at ``path``."""
        # A present optional value is checked against the inner shape at the same path
        while isinstance(shape, (LazyShape, OptionalShape)):
            shape = shape.resolved() if isinstance(shape, LazyShape) else shape.inner
        return self._checker_for(shape).check(raw, shape, path, violations, self)

    def attempt(self, raw: Any, shape: BaseShape, path: tuple) -> tuple[bool, Any]:
        """Check without reporting: ``(matched, projected)``."""
        trial: list[PathViolation] = []
        projected = self.descend(raw, shape, path, trial)
        return not trial, projected

    def expected_of(self, shape: BaseShape) -> str:
        """Expected-kind name of ``shape``, resolving lazy references."""
        while isinstance(shape, LazyShape):
            shape = shape.resolved()
        return shape.expected

    def _checker_for(self, shape: BaseShape) -> BaseChecker:
        if not isinstance(shape, BaseShape):
            raise ShapeDefinitionError(
                f"Expected a shape descriptor, got {type(shape).__name__}"
            )
        checker = self._checkers.get(shape.kind)
        if checker is None:
            raise ShapeDefinitionError(f"No checker registered for shape kind '{shape.kind.value}'")
        return checker


class ShapeValidator:
    """Validates untrusted input against Shape Descriptors.

    Design principles:
        - Deterministic: same input → same output, including violation order
        - Total over input: malformed input is data, never an exception
        - Loud over descriptors: malformed descriptors raise ProgrammerError
        - Extensible: add checkers without modifying the engine
    """

    def __init__(
        self,
        checkers: Optional[list[BaseChecker]] = None,
        max_depth: Optional[int] = None,
    ):
        """Initialize with default checkers or a custom list.

        Args:
            checkers: Optional list of checkers. If None, uses all defaults.
            max_depth: Longest chain of lazy references a descriptor may resolve
                through. If None, uses the configured MAX_DEPTH.
        """
        self.max_depth = max_depth if max_depth is not None else get_settings().MAX_DEPTH
        if self.max_depth < 1:
            raise ShapeDefinitionError(f"max_depth must be positive, got {self.max_depth}")
        self._checkers = {checker.kind: checker for checker in (checkers or self._default_checkers())}

    @staticmethod
    def _default_checkers() -> list[BaseChecker]:
        """Create one checker per descriptor kind."""
        return [
            PrimitiveChecker(),
            LiteralChecker(),
            ObjectChecker(),
            MappingChecker(),
            SequenceChecker(),
            TaggedUnionChecker(),
        ]

    def validate(self, raw: Any, shape: BaseShape) -> ValidationResult:
        """Check ``raw`` against ``shape``.

        Args:
            raw: Parsed JSON (nested dicts / lists / scalars) of unknown shape
            shape: Descriptor the value must match

        Returns:
            ValidatedValue on success, ValidationFailure listing every violation otherwise
        """
        start_time = time.perf_counter()
        guard_recursion(shape, self.max_depth)

        walk = Walk(self._checkers)
        violations: list[PathViolation] = []
        try:
            projected = walk.descend(raw, shape, (), violations)
        except RecursionError:
            # Input nested deeper than the interpreter stack allows
            logger.debug("payload_rejected", reason="nesting_too_deep")
            violations = [PathViolation(
                code=ViolationCode.NESTING_TOO_DEEP,
                expected=walk.expected_of(shape),
                actual="value nested too deeply to check",
            )]

        if violations:
            result: ValidationResult = ValidationFailure.build(violations)
        else:
            result = ValidatedValue(_ENGINE_TOKEN, projected, shape)

        logger.debug(
            "shape_validated",
            shape=shape.expected,
            passed=result.ok,
            violations=len(violations),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
        )
        return result

    def validate_json(self, payload: Union[str, bytes, bytearray], shape: BaseShape) -> ValidationResult:
        """Decode a JSON payload, then validate it. Undecodable payloads are a failure, not an error."""
        try:
            raw = json.loads(payload)
        except (ValueError, RecursionError) as e:
            # RecursionError: well-formed JSON nested deeper than the decoder allows
            logger.debug("payload_rejected", reason="invalid_json", error=str(e))
            return ValidationFailure.build([
                PathViolation(
                    code=ViolationCode.INVALID_JSON,
                    expected="json",
                    actual=f"invalid JSON: {e}",
                )
            ])
        return self.validate(raw, shape)

    def is_valid(self, raw: Any, shape: BaseShape) -> bool:
        return self.validate(raw, shape).ok

    def assert_valid(self, raw: Any, shape: BaseShape) -> ValidatedValue:
        """Validate, raising ValidationFailed (a ValueError) on mismatch."""
        result = self.validate(raw, shape)
        if isinstance(result, ValidationFailure):
            raise ValidationFailed(result)
        return result

    def add_checker(self, checker: BaseChecker) -> None:
        """Register a checker, replacing any existing one for the same kind."""
        self._checkers[checker.kind] = checker


# Module-level singleton
shape_validator = ShapeValidator()


def validate(raw: Any, shape: BaseShape) -> ValidationResult:
    return shape_validator.validate(raw, shape)


def validate_json(payload: Union[str, bytes, bytearray], shape: BaseShape) -> ValidationResult:
    return shape_validator.validate_json(payload, shape)


def is_valid(raw: Any, shape: BaseShape) -> bool:
    return shape_validator.is_valid(raw, shape)


def assert_valid(raw: Any, shape: BaseShape) -> ValidatedValue:
    return shape_validator.assert_valid(raw, shape)
