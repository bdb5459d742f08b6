"""shapeguard — structural validation of untrusted JSON and tagged-variant dispatch.

Usage:
    from shapeguard import validate, VariantDispatcher

    result = validate(payload, MESSAGE)
    if not result.ok:
        # Reject the request with result.violations
    line = renderer.dispatch(result)
"""

from shapeguard.dispatch import VariantDispatcher, classify, narrow
from shapeguard.errors import (
    HandlerContractError,
    ProgrammerError,
    ShapeDefinitionError,
    ShapeMismatchError,
    ShapeRecursionError,
    UnhandledVariantError,
    ValidationFailed,
)
from shapeguard.validators import (
    PathViolation,
    ShapeValidator,
    ValidatedValue,
    ValidationFailure,
    ViolationCode,
    assert_valid,
    is_valid,
    validate,
    validate_json,
)

__version__ = "1.0.0"

__all__ = [
    "VariantDispatcher",
    "classify",
    "narrow",
    "HandlerContractError",
    "ProgrammerError",
    "ShapeDefinitionError",
    "ShapeMismatchError",
    "ShapeRecursionError",
    "UnhandledVariantError",
    "ValidationFailed",
    "PathViolation",
    "ShapeValidator",
    "ValidatedValue",
    "ValidationFailure",
    "ViolationCode",
    "assert_valid",
    "is_valid",
    "validate",
    "validate_json",
]
