"""Validation models — violation codes, path violations and the failure report.

All validation is deterministic: same input → same output. Violations are
ordered depth-first in descriptor declaration order, never in the discovery
order of the raw input.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

PathElement = Union[StrictStr, StrictInt]


class ViolationCode(str, Enum):
    """Deterministic codes for every kind of shape mismatch."""

    MISSING_FIELD = "MISSING_FIELD"          # Required object field absent
    INVALID_TYPE = "INVALID_TYPE"            # Wrong JSON kind
    INVALID_VALUE = "INVALID_VALUE"          # Right kind, disallowed value
    INVALID_KEY = "INVALID_KEY"              # Mapping key does not match the key shape
    NO_MATCHING_VARIANT = "NO_MATCHING_VARIANT"  # No tagged-union member accepted the value
    INVALID_JSON = "INVALID_JSON"            # Payload could not be decoded
    NESTING_TOO_DEEP = "NESTING_TOO_DEEP"    # Value nested deeper than the interpreter stack can walk


def format_path(path: tuple) -> str:
    """Render a path as ``$.components[0].name`` / ``$.reactions['👍']``."""
    rendered = "$"
    for element in path:
        if isinstance(element, int):
            rendered += f"[{element}]"
        elif element.isidentifier():
            rendered += f".{element}"
        else:
            rendered += f"[{element!r}]"
    return rendered


class PathViolation(BaseModel):
    """A single mismatch between the raw value and its descriptor."""

    model_config = ConfigDict(frozen=True)

    path: tuple[PathElement, ...] = ()
    code: ViolationCode
    expected: str
    actual: str
    tried: tuple[PathElement, ...] = Field(
        default=(), description="Union tags attempted, in declaration order"
    )

    @property
    def location(self) -> str:
        return format_path(self.path)

    def describe(self) -> str:
        line = f"{self.location}: expected {self.expected}, got {self.actual}"
        if self.tried:
            line += f" (tried: {', '.join(str(tag) for tag in self.tried)})"
        return line


class ValidationFailure(BaseModel):
    """Rejected input — the complete, ordered list of path violations.

    Any single violation rejects the whole value; the raw input must not be
    read after a failed validation.
    """

    model_config = ConfigDict(frozen=True)

    violations: tuple[PathViolation, ...]

    @property
    def ok(self) -> bool:
        return False

    @property
    def summary(self) -> dict[str, int]:
        """Count of violations by code."""
        counts: dict[str, int] = {}
        for violation in self.violations:
            counts[violation.code.value] = counts.get(violation.code.value, 0) + 1
        return counts

    @property
    def paths(self) -> list[tuple]:
        return [violation.path for violation in self.violations]

    def describe(self) -> str:
        return "\n".join(violation.describe() for violation in self.violations)

    @classmethod
    def build(cls, violations: list[PathViolation]) -> "ValidationFailure":
        return cls(violations=tuple(violations))
