"""Validator Engine — deterministic shape validation of untrusted input.

Usage:
    from shapeguard.validators import validate

    result = validate(payload, MESSAGE)
    if not result.ok:
        # Reject with result.violations
"""

from shapeguard.validators.base import BaseChecker
from shapeguard.validators.engine import (
    ShapeValidator,
    ValidationResult,
    assert_valid,
    is_valid,
    shape_validator,
    validate,
    validate_json,
)
from shapeguard.validators.models import PathViolation, ValidationFailure, ViolationCode, format_path
from shapeguard.validators.values import ValidatedValue

__all__ = [
    "BaseChecker",
    "ShapeValidator",
    "ValidationResult",
    "shape_validator",
    "validate",
    "validate_json",
    "is_valid",
    "assert_valid",
    "PathViolation",
    "ValidationFailure",
    "ViolationCode",
    "format_path",
    "ValidatedValue",
]
