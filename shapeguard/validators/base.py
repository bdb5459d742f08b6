"""Base checker — abstract class implementing the Strategy Pattern.

Each checker handles exactly one descriptor kind and is a standalone,
independently testable unit. New kinds are added without modifying the engine.
"""

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

from shapeguard.shapes.models import BaseShape, ShapeKind, json_kind
from shapeguard.validators.models import PathViolation, ViolationCode

if TYPE_CHECKING:
    from shapeguard.validators.engine import Walk


class BaseChecker(ABC):
    """Abstract base for all per-kind shape checkers.

    Contract:
        - check() is deterministic: same input → same output
        - check() never raises for malformed input; it appends PathViolations
        - check() returns the projected value (meaningless once it has appended violations)
        - check() descends into nested shapes only through ``walk.descend``
    """

    @property
    @abstractmethod
    def kind(self) -> ShapeKind:
        """Descriptor kind this checker interprets."""
        ...

    @abstractmethod
    def check(
        self,
        raw: Any,
        shape: BaseShape,
        path: tuple,
        violations: list[PathViolation],
        walk: "Walk",
    ) -> Any:
        """Check ``raw`` against ``shape``, appending violations located under ``path``.

        Args:
            raw: Untrusted input value at this position
            shape: Descriptor of this checker's kind
            path: Field names / indices from the root to this position
            violations: Ordered output list shared by the whole run
            walk: The current validation run, for descending into children

        Returns:
            Projected (read-only, undeclared-keys-dropped) value
        """
        ...

    # ── Helper Methods ──

    def _violation(
        self,
        path: tuple,
        code: ViolationCode,
        expected: str,
        actual: str,
        tried: tuple = (),
    ) -> PathViolation:
        """Convenience method to create a PathViolation."""
        return PathViolation(path=path, code=code, expected=expected, actual=actual, tried=tried)

    def _wrong_type(self, path: tuple, expected: str, raw: Any) -> PathViolation:
        return self._violation(path, ViolationCode.INVALID_TYPE, expected, json_kind(raw))

    def _describe_value(self, raw: Any) -> str:
        """Short description of an offending value: repr for scalars, kind for containers."""
        kind = json_kind(raw)
        if kind in ("string", "number", "boolean", "null"):
            text = repr(raw)
            return text if len(text) <= 40 else text[:37] + "..."
        return kind
