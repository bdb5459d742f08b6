"""Variant Dispatcher — routes a validated union value to its member's handler.

The handler set must cover every tag of the union. A missing handler fails
when the dispatcher is built, which for module-level dispatchers means at
import time: adding a union member without a handler cannot go unnoticed.
"""

from collections.abc import Mapping
from typing import Any, Callable, Generic, Optional, TypeVar, Union

import structlog

from shapeguard.dispatch.classifier import narrow
from shapeguard.errors import HandlerContractError, ShapeDefinitionError, UnhandledVariantError
from shapeguard.shapes.models import BaseShape, Tag, TaggedUnionShape, same_scalar
from shapeguard.validators.engine import ShapeValidator, shape_validator
from shapeguard.validators.models import ValidationFailure
from shapeguard.validators.values import ValidatedValue

logger = structlog.get_logger()

R = TypeVar("R")
Handler = Callable[[ValidatedValue], R]


class VariantDispatcher(Generic[R]):
    """Total match over the members of a tagged union.

    Each handler receives a ValidatedValue already narrowed to its member's
    shape. With ``returns``, each handler's result is validated against the
    output shape declared for its tag, so the output shape is uniquely
    determined by the input variant, and dispatch returns a ValidatedValue.

    Usage:
        renderer = VariantDispatcher(MESSAGE, {
            "text": render_text,
            "image": render_image,
        })
        line = renderer.dispatch(message)
    """

    def __init__(
        self,
        union: TaggedUnionShape,
        handlers: Mapping[Tag, Handler],
        returns: Optional[Mapping[Tag, BaseShape]] = None,
        validator: Optional[ShapeValidator] = None,
        name: Optional[str] = None,
    ):
        if not isinstance(union, TaggedUnionShape):
            raise ShapeDefinitionError(f"A dispatcher needs a tagged union, got '{union.expected}'")

        self.union = union
        self.name = name or "dispatcher"
        self._validator = validator or shape_validator
        self._handlers = self._cover(handlers, "handler")
        self._returns = self._cover(returns, "output shape") if returns is not None else None

        for tag, handler in self._handlers.items():
            if not callable(handler):
                raise ShapeDefinitionError(f"Handler for variant {tag!r} is not callable")

    def _cover(self, by_tag: Mapping[Tag, Any], what: str) -> dict[Tag, Any]:
        """Re-key ``by_tag`` by the union's own tags, requiring an exact cover."""
        undeclared = [key for key in by_tag if not any(same_scalar(key, tag) for tag in self.union.tags)]
        if undeclared:
            raise ShapeDefinitionError(
                f"{self.name}: {what}(s) given for undeclared variant tag(s) {undeclared}"
            )

        covered = {}
        missing = []
        for tag in self.union.tags:
            matches = [key for key in by_tag if same_scalar(key, tag)]
            if matches:
                covered[tag] = by_tag[matches[0]]
            else:
                missing.append(tag)

        if missing:
            logger.error("dispatcher_incomplete", dispatcher=self.name, missing=missing, kind=what)
            if what == "handler":
                raise UnhandledVariantError(missing)
            raise ShapeDefinitionError(f"{self.name}: no {what} declared for variant tag(s) {missing}")
        return covered

    @property
    def tags(self) -> tuple[Tag, ...]:
        return self.union.tags

    def handler_for(self, tag: Tag) -> Handler:
        return self._handlers[tag]

    def dispatch(self, value: ValidatedValue) -> Union[R, ValidatedValue]:
        """Route ``value`` to its member's handler.

        Raises:
            ShapeMismatchError: ``value`` was not validated against this union
            HandlerContractError: a handler's result violates its output shape
        """
        tag, narrowed = narrow(value, self.union, self._validator)
        result = self._handlers[tag](narrowed)

        logger.debug("variant_dispatched", dispatcher=self.name, tag=tag)

        if self._returns is None:
            return result

        checked = self._validator.validate(result, self._returns[tag])
        if isinstance(checked, ValidationFailure):
            logger.error(
                "handler_contract_violated",
                dispatcher=self.name,
                tag=tag,
                violations=checked.summary,
            )
            raise HandlerContractError(tag, checked)
        return checked

    def dispatch_raw(self, raw: Any) -> Union[R, ValidatedValue, ValidationFailure]:
        """Validate untrusted ``raw`` against the union, then dispatch it.

        Returns the ValidationFailure unchanged when the input is rejected.
        """
        result = self._validator.validate(raw, self.union)
        if isinstance(result, ValidationFailure):
            return result
        return self.dispatch(result)
