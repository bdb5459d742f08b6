"""
Unit tests for the Validator Engine.

Tests verify:
1. Primitive checks never coerce
2. Violations are complete and ordered by declaration, index and sorted key
3. Tagged unions report one violation listing the tried members
4. Validated values are engine-only, projected and immutable
5. Malformed descriptors raise programmer errors instead of failures
"""

import math

import pytest

from shapeguard.errors import (
    ShapeDefinitionError,
    ShapeRecursionError,
    ValidationFailed,
)
from shapeguard.shapes import (
    boolean,
    lazy,
    literal,
    mapping,
    number,
    obj,
    optional,
    sequence,
    string,
    tagged_union,
)
from shapeguard.validators import (
    ShapeValidator,
    ValidatedValue,
    ValidationFailure,
    ViolationCode,
    assert_valid,
    format_path,
    is_valid,
    validate,
    validate_json,
)
from shapeguard.validators.scalar_checker import PrimitiveChecker


MESSAGE = obj({"id": string(), "sender": string(), "timestamp": number()})

STRUCTURAL = tagged_union({
    "text": MESSAGE.extend({"text": string()}),
    "image": MESSAGE.extend({"imageUrl": string(), "width": number(), "height": number()}),
    "video": MESSAGE.extend({"videoUrl": string(), "duration": number()}),
})

TYPED = tagged_union(
    {
        "text": obj({"type": literal("text"), "text": string()}),
        "image": obj({"type": literal("image"), "imageUrl": string()}),
    },
    discriminator="type",
)


# =============================================================================
# PRIMITIVES
# =============================================================================

class TestPrimitives:
    """Exact kind matching with no implicit coercion."""

    def test_valid_primitives(self) -> None:
        assert validate("hi", string()).ok
        assert validate(3, number()).ok
        assert validate(2.5, number()).ok
        assert validate(False, boolean()).ok

    def test_numeric_string_is_not_a_number(self) -> None:
        """A timestamp delivered as a string is rejected, not converted."""
        result = validate("1700000000000", number())
        assert isinstance(result, ValidationFailure)
        violation = result.violations[0]
        assert violation.code == ViolationCode.INVALID_TYPE
        assert violation.expected == "number"
        assert violation.actual == "string"

    def test_bool_is_not_a_number(self) -> None:
        result = validate(True, number())
        assert not result.ok
        assert result.violations[0].actual == "boolean"

    def test_number_is_not_a_bool(self) -> None:
        assert not is_valid(1, boolean())

    def test_nan_is_not_a_number(self) -> None:
        result = validate(math.nan, number())
        assert result.violations[0].code == ViolationCode.INVALID_VALUE
        assert result.violations[0].actual == "NaN"

    def test_null_reported_as_null(self) -> None:
        assert validate(None, string()).violations[0].actual == "null"

    def test_string_pattern(self) -> None:
        shape = string(pattern=r"user-.+")
        assert is_valid("user-42", shape)
        result = validate("bot-1", shape)
        assert result.violations[0].code == ViolationCode.INVALID_VALUE
        assert result.violations[0].actual == "'bot-1'"

    def test_literal_is_kind_aware(self) -> None:
        assert is_valid("sent", literal("sent", "failed"))
        result = validate(True, literal(1))
        assert result.violations[0].code == ViolationCode.INVALID_VALUE
        assert result.violations[0].expected == "literal 1"


# =============================================================================
# OBJECTS AND OPTIONAL FIELDS
# =============================================================================

class TestObjects:
    """Declared fields in declaration order; unknown keys ignored."""

    def test_missing_fields_in_declaration_order(self) -> None:
        """Missing id and timestamp are reported in that order."""
        result = validate({"sender": "Bob"}, MESSAGE)
        assert isinstance(result, ValidationFailure)
        assert result.paths == [("id",), ("timestamp",)]
        assert [v.code for v in result.violations] == [ViolationCode.MISSING_FIELD] * 2
        assert [v.expected for v in result.violations] == ["string", "number"]
        assert all(v.actual == "missing" for v in result.violations)

    def test_order_independent_of_raw_key_order(self) -> None:
        first = validate({"timestamp": "x", "sender": 1, "id": 2}, MESSAGE)
        second = validate({"id": 2, "sender": 1, "timestamp": "x"}, MESSAGE)
        assert first == second
        assert first.paths == [("id",), ("sender",), ("timestamp",)]

    def test_unknown_keys_tolerated_and_dropped(self) -> None:
        raw = {"id": "1", "sender": "A", "timestamp": 5, "extra": "ignored"}
        result = validate(raw, MESSAGE)
        assert isinstance(result, ValidatedValue)
        assert "extra" not in result
        assert result.to_python() == {"id": "1", "sender": "A", "timestamp": 5}

    def test_non_object_rejected(self) -> None:
        result = validate(["id"], MESSAGE)
        assert result.violations[0].path == ()
        assert result.violations[0].expected == "object"
        assert result.violations[0].actual == "sequence"

    def test_optional_absent_is_omitted(self) -> None:
        shape = MESSAGE.extend({"text": optional(string())})
        result = validate({"id": "1", "sender": "A", "timestamp": 5}, shape)
        assert result.ok
        assert "text" not in result

    def test_optional_present_is_checked(self) -> None:
        """Present-but-null is not absence."""
        shape = obj({"text": optional(string())})
        result = validate({"text": None}, shape)
        assert result.paths == [("text",)]
        assert result.violations[0].actual == "null"

    def test_nested_paths(self) -> None:
        shape = obj({"image": optional(obj({"url": string(), "width": number()}))})
        result = validate({"image": {"url": "a.jpg", "width": "640"}}, shape)
        assert result.paths == [("image", "width")]
        assert result.violations[0].location == "$.image.width"

    def test_soundness(self) -> None:
        """A success guarantees every required field is present with the right kind."""
        result = validate({"id": "1", "sender": "A", "timestamp": 5}, MESSAGE)
        assert isinstance(result["id"], str)
        assert isinstance(result["sender"], str)
        assert isinstance(result["timestamp"], int)


# =============================================================================
# SEQUENCES AND MAPPINGS
# =============================================================================

class TestCollections:
    """Every element and entry is checked; nothing short-circuits."""

    def test_sequence_reports_every_bad_index(self) -> None:
        result = validate([1, "x", 3, "y"], sequence(number()))
        assert result.paths == [(1,), (3,)]

    def test_string_is_not_a_sequence(self) -> None:
        assert validate("abc", sequence(string())).violations[0].actual == "string"

    def test_sequence_projects_to_tuple(self) -> None:
        result = validate([1, 2], sequence(number()))
        assert result.value == (1, 2)
        assert result.to_python() == [1, 2]

    def test_mapping_keys_sorted(self) -> None:
        """Offending keys are reported in sorted order, not input order."""
        result = validate({"b": "x", "a": "y", "c": 1}, mapping(string(), number()))
        assert result.paths == [("a",), ("b",)]

    def test_mapping_identical_inputs_identical_failures(self) -> None:
        shape = mapping(string(), number())
        assert validate({"z": "1", "y": "2"}, shape) == validate({"y": "2", "z": "1"}, shape)

    def test_mapping_key_violation(self) -> None:
        shape = mapping(string(pattern=r"user-.+"), number())
        result = validate({"user-1": 1, "bot-1": 2}, shape)
        assert result.paths == [("bot-1",)]
        assert result.violations[0].code == ViolationCode.INVALID_KEY

    def test_mapping_keeps_every_key(self) -> None:
        result = validate({"👍": 3, "👌": 1}, mapping(string(), number()))
        assert result.to_python() == {"👍": 3, "👌": 1}

    def test_emoji_path_rendering(self) -> None:
        assert format_path(("reactions", "👍")) == "$.reactions['👍']"
        assert format_path(("messages", 0, "text")) == "$.messages[0].text"


# =============================================================================
# TAGGED UNIONS
# =============================================================================

class TestTaggedUnions:
    """Structural and discriminated member selection."""

    def test_structural_match(self) -> None:
        raw = {"id": "2", "sender": "Bob", "timestamp": 1, "imageUrl": "a.jpg", "width": 1, "height": 2}
        result = validate(raw, STRUCTURAL)
        assert result.ok
        assert result["imageUrl"] == "a.jpg"

    def test_structural_no_match_lists_tried_members(self) -> None:
        """An image message missing width/height reports one union violation."""
        raw = {"id": "2", "sender": "Bob", "timestamp": 1, "imageUrl": "photo.jpg"}
        result = validate(raw, STRUCTURAL)
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.code == ViolationCode.NO_MATCHING_VARIANT
        assert violation.path == ()
        assert violation.tried == ("text", "image", "video")

    def test_nested_union_path(self) -> None:
        shape = obj({"messages": sequence(STRUCTURAL)})
        result = validate({"messages": [{"id": "1"}]}, shape)
        assert result.paths == [("messages", 0)]

    def test_discriminated_reports_member_violations(self) -> None:
        """Once the discriminant selects a member, its own mismatches are reported."""
        result = validate({"type": "text"}, TYPED)
        assert result.paths == [("text",)]
        assert result.violations[0].code == ViolationCode.MISSING_FIELD

    def test_discriminated_unknown_tag(self) -> None:
        result = validate({"type": "audio", "audioUrl": "a.mp3"}, TYPED)
        violation = result.violations[0]
        assert violation.code == ViolationCode.NO_MATCHING_VARIANT
        assert violation.actual == "type='audio'"
        assert violation.tried == ("text", "image")

    def test_discriminated_missing_discriminator(self) -> None:
        result = validate({"text": "hi"}, TYPED)
        assert result.violations[0].actual == "missing discriminator 'type'"

    def test_discriminated_non_object(self) -> None:
        result = validate("text", TYPED)
        assert result.violations[0].code == ViolationCode.NO_MATCHING_VARIANT


# =============================================================================
# DETERMINISM
# =============================================================================

class TestDeterminism:
    """Same raw value and descriptor always yield an equal result."""

    def test_failure_idempotent(self) -> None:
        raw = {"sender": 5, "reactions": {"b": "x", "a": None}}
        shape = MESSAGE.extend({"reactions": mapping(string(), number())})
        assert validate(raw, shape) == validate(raw, shape)

    def test_success_idempotent(self) -> None:
        raw = {"id": "1", "sender": "A", "timestamp": 5}
        assert validate(raw, MESSAGE) == validate(raw, MESSAGE)

    def test_describe(self) -> None:
        result = validate({"sender": "Bob"}, MESSAGE)
        assert result.describe() == (
            "$.id: expected string, got missing\n"
            "$.timestamp: expected number, got missing"
        )
        assert result.summary == {"MISSING_FIELD": 2}


# =============================================================================
# VALIDATED VALUES
# =============================================================================

class TestValidatedValue:
    """Proof tokens: engine-only construction, read-only contents."""

    def test_cannot_construct_directly(self) -> None:
        with pytest.raises(ShapeDefinitionError):
            ValidatedValue(object(), {"id": "1"}, MESSAGE)

    def test_attributes_are_read_only(self) -> None:
        result = validate({"id": "1", "sender": "A", "timestamp": 5}, MESSAGE)
        with pytest.raises(AttributeError):
            result._value = {}

    def test_contents_are_read_only(self) -> None:
        result = validate({"id": "1", "sender": "A", "timestamp": 5}, MESSAGE)
        with pytest.raises(TypeError):
            result.value["id"] = "2"

    def test_detached_from_raw_input(self) -> None:
        raw = {"id": "1", "sender": "A", "timestamp": 5}
        result = validate(raw, MESSAGE)
        raw["id"] = "changed"
        assert result["id"] == "1"

    def test_child_keeps_proof(self) -> None:
        shape = obj({"messages": sequence(MESSAGE)})
        result = validate({"messages": [{"id": "1", "sender": "A", "timestamp": 5}]}, shape)
        child = result.child("messages", 0)
        assert isinstance(child, ValidatedValue)
        assert child.shape == MESSAGE
        assert child["sender"] == "A"

    def test_lookup(self) -> None:
        shape = obj({"meta": obj({"replies": obj({"count": number()})})})
        result = validate({"meta": {"replies": {"count": 2}}}, shape)
        assert result.lookup("meta", "replies", "count") == 2


# =============================================================================
# JSON PAYLOADS AND EXCEPTION-STYLE HELPERS
# =============================================================================

class TestEntryPoints:
    """validate_json, is_valid and assert_valid."""

    def test_validate_json_bytes(self) -> None:
        result = validate_json(b'{"id": "1", "sender": "A", "timestamp": 5}', MESSAGE)
        assert result.ok

    def test_invalid_json_is_a_failure(self) -> None:
        result = validate_json("{not json", MESSAGE)
        assert isinstance(result, ValidationFailure)
        assert result.violations[0].code == ViolationCode.INVALID_JSON
        assert result.violations[0].path == ()

    def test_assert_valid_raises_value_error(self) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            assert_valid({"sender": "Bob"}, MESSAGE)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.failure.paths == [("id",), ("timestamp",)]

    def test_assert_valid_returns_value(self) -> None:
        assert assert_valid("x", string()).value == "x"


# =============================================================================
# DEEP INPUT
# =============================================================================

CHAIN = obj({"value": number(), "next": optional(lazy(lambda: CHAIN))})


def _chain(length: int) -> dict:
    node = {"value": 0}
    for _ in range(length - 1):
        node = {"value": 0, "next": node}
    return node


class TestDeepInput:
    """Input depth never raises: deep input is checked, absurd depth is a failure."""

    def test_deep_valid_input(self) -> None:
        assert validate(_chain(300), CHAIN).ok

    def test_deep_invalid_input_is_a_failure(self) -> None:
        raw = _chain(150)
        raw["next"]["next"]["value"] = "zero"
        result = validate(raw, CHAIN)
        assert isinstance(result, ValidationFailure)
        assert result.paths == [("next", "next", "value")]

    def test_nesting_beyond_interpreter_stack(self) -> None:
        nested = lazy(lambda: sequence(nested))
        raw: list = []
        for _ in range(20000):
            raw = [raw]
        result = validate(raw, nested)
        assert isinstance(result, ValidationFailure)
        assert result.violations[0].code == ViolationCode.NESTING_TOO_DEEP
        assert result.violations[0].path == ()
        assert result.violations[0].expected == "sequence"

    def test_json_nested_beyond_decoder_limit(self) -> None:
        payload = "[" * 100000 + "]" * 100000
        result = validate_json(payload, string())
        assert isinstance(result, ValidationFailure)
        assert result.violations[0].code == ViolationCode.INVALID_JSON


# =============================================================================
# PROGRAMMER ERRORS
# =============================================================================

class TestProgrammerErrors:
    """Malformed descriptors fail loudly, never as a validation failure."""

    def test_recursive_shape_validates(self) -> None:
        thread = obj({"text": string(), "replies": optional(sequence(lazy(lambda: thread)))})
        raw = {"text": "a", "replies": [{"text": "b", "replies": [{"text": "c"}]}]}
        assert is_valid(raw, thread)
        result = validate({"text": "a", "replies": [{"text": 1}]}, thread)
        assert result.paths == [("replies", 0, "text")]

    def test_self_referencing_lazy_detected(self) -> None:
        loop = lazy(lambda: loop)
        with pytest.raises(ShapeRecursionError):
            validate({}, loop)

    def test_lazy_chain_longer_than_max_depth(self) -> None:
        """max_depth bounds chains of lazy references, not input nesting."""
        last = lazy(lambda: string())
        third = lazy(lambda: last)
        second = lazy(lambda: third)
        first = lazy(lambda: second)
        with pytest.raises(ShapeRecursionError) as exc_info:
            ShapeValidator(max_depth=3).validate("x", first)
        assert exc_info.value.max_depth == 3
        assert ShapeValidator(max_depth=3).validate("x", second).ok

    def test_input_nesting_is_not_limited_by_max_depth(self) -> None:
        shape = obj({"a": obj({"b": obj({"c": obj({"d": string()})})})})
        validator = ShapeValidator(max_depth=1)
        assert validator.validate({"a": {"b": {"c": {"d": "x"}}}}, shape).ok

    def test_required_self_reference_detected(self) -> None:
        """No finite input satisfies an object that requires itself."""
        node = obj({"name": string(), "child": lazy(lambda: node)})
        with pytest.raises(ShapeRecursionError, match="required fields"):
            validate({"name": "a"}, node)

    def test_required_self_reference_through_nested_object(self) -> None:
        node = obj({"wrapper": obj({"next": lazy(lambda: node)})})
        with pytest.raises(ShapeRecursionError):
            validate({}, node)

    def test_optional_self_reference_without_progress(self) -> None:
        wrapped = optional(lazy(lambda: wrapped))
        with pytest.raises(ShapeRecursionError, match="without consuming input"):
            validate("x", wrapped)

    def test_union_member_loop_detected(self) -> None:
        looping = tagged_union({"text": string(), "again": lazy(lambda: looping)})
        with pytest.raises(ShapeRecursionError):
            validate(5, looping)

    def test_optional_field_breaks_cycle(self) -> None:
        node = obj({"name": string(), "child": optional(lazy(lambda: node))})
        assert is_valid({"name": "a", "child": {"name": "b"}}, node)
        result = validate({"name": "a", "child": {}}, node)
        assert result.paths == [("child", "name")]

    def test_union_with_terminating_member_allowed(self) -> None:
        """A union reached through a field may end the recursion with another member."""
        tree = obj({"kid": tagged_union({"leaf": string(), "node": lazy(lambda: tree)})})
        assert is_valid({"kid": {"kid": "leaf"}}, tree)

    def test_unsatisfiable_shape_rejected_before_reading_input(self) -> None:
        node = obj({"child": lazy(lambda: node)})
        with pytest.raises(ShapeRecursionError):
            validate("not even an object", obj({"items": sequence(node)}))

    def test_lazy_must_resolve_to_shape(self) -> None:
        with pytest.raises(ShapeDefinitionError):
            validate("x", lazy(lambda: "string"))

    def test_non_shape_rejected(self) -> None:
        with pytest.raises(ShapeDefinitionError):
            validate("x", "string")

    def test_missing_checker(self) -> None:
        validator = ShapeValidator(checkers=[PrimitiveChecker()])
        with pytest.raises(ShapeDefinitionError, match="No checker registered"):
            validator.validate({}, MESSAGE)

    def test_invalid_max_depth(self) -> None:
        with pytest.raises(ShapeDefinitionError):
            ShapeValidator(max_depth=0)
