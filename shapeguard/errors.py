"""Exception types for shapeguard.

Two disjoint families:
    - ProgrammerError: a malformed descriptor or a misused API. Never caused
      by untrusted input, never returned as data.
    - ValidationFailed: raised only by ``assert_valid`` for callers that want
      exception-style input rejection. ``validate`` returns failures as data.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapeguard.validators.models import ValidationFailure


class ProgrammerError(Exception):
    """Base exception for descriptor and API misuse errors."""
    pass


class ShapeDefinitionError(ProgrammerError):
    """Raised when a Shape Descriptor is malformed at construction time."""
    pass


class ShapeRecursionError(ProgrammerError):
    """Raised when a recursive descriptor can never be satisfied or never terminates.

    Either its lazy references chain deeper than ``max_depth``, or one of them
    leads back to itself without passing through an optional field, a
    sequence or a mapping.
    """

    def __init__(self, max_depth: int, path: tuple = (), reason: str = ""):
        message = reason or f"lazy references chain deeper than {max_depth}"
        super().__init__(f"Shape descriptor too deep or cyclic: {message} (at {list(path)})")
        self.max_depth = max_depth
        self.path = path
        self.reason = reason


class ShapeMismatchError(ProgrammerError):
    """Raised when a value is classified against a union it was not validated with."""
    pass


class UnhandledVariantError(ProgrammerError):
    """Raised when a dispatcher's handler set does not cover every union tag."""

    def __init__(self, missing: list):
        super().__init__(f"No handler registered for variant tag(s): {missing}")
        self.missing = missing


class HandlerContractError(ProgrammerError):
    """Raised when a handler returns a value that violates its declared output shape."""

    def __init__(self, tag, failure: "ValidationFailure"):
        super().__init__(
            f"Handler for variant {tag!r} returned an invalid result:\n{failure.describe()}"
        )
        self.tag = tag
        self.failure = failure


class ValidationFailed(ValueError):
    """Raised by ``assert_valid`` when untrusted input does not match its shape."""

    def __init__(self, failure: "ValidationFailure"):
        super().__init__(f"Input failed validation:\n{failure.describe()}")
        self.failure = failure
