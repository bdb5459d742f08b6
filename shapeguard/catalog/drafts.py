"""Message shapes derived from one another instead of being redeclared.

Drafts omit the id, partial drafts make every field optional and anonymized
messages keep only the content fields. Because validation drops undeclared
keys, re-validating a sent message against a narrower shape is all it takes
to derive the narrower value.
"""

from typing import Callable, Optional

from shapeguard.catalog.outgoing import generate_id
from shapeguard.shapes import boolean, lazy, mapping, number, obj, optional, sequence, string
from shapeguard.validators import ValidatedValue, assert_valid

SENT_MESSAGE = obj({
    "id": string(),
    "sender": string(),
    "text": string(),
    "timestamp": number(),
    "metadata": obj({
        "edited": boolean(),
        "replies": obj({
            "count": number(),
            "messages": sequence(string()),
        }),
    }),
})

DRAFT_MESSAGE = SENT_MESSAGE.omit("id")

PARTIAL_DRAFT = DRAFT_MESSAGE.partial()

ANONYMIZED_MESSAGE = SENT_MESSAGE.pick("text", "timestamp", "metadata")

MESSAGE_STATUSES = ("sent", "delivered", "read", "failed")

# Every status must be counted
STATUS_TRACKER = obj({status: number() for status in MESSAGE_STATUSES})

SMALL_MESSAGE = obj({"text": string(), "timestamp": number()})

# Keys are "user-<id>" or "bot-<id>"
MESSAGE_RECIPIENTS = mapping(string(pattern=r"(user|bot)-.+"), SMALL_MESSAGE)

THREAD = obj({
    "id": string(),
    "text": string(),
    "replies": optional(sequence(lazy(lambda: THREAD))),
})


def create_message(draft: ValidatedValue, id_factory: Optional[Callable[[], str]] = None) -> ValidatedValue:
    """Turn a validated DRAFT_MESSAGE into a SENT_MESSAGE with a fresh id."""
    return assert_valid({**draft.to_python(), "id": (id_factory or generate_id)()}, SENT_MESSAGE)


def anonymize(message: ValidatedValue) -> ValidatedValue:
    """Drop sender and id from a validated SENT_MESSAGE."""
    return assert_valid(message.to_python(), ANONYMIZED_MESSAGE)


def thread_size(thread: ValidatedValue) -> int:
    """Number of messages in a validated THREAD, the root included."""
    def count(node) -> int:
        return 1 + sum(count(reply) for reply in node.get("replies", ()))
    return count(thread.value)
