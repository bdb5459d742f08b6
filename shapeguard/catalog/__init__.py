"""Message catalog — the shapes and variant handlers of the messenger domain."""

from shapeguard.catalog.completions import THEMES_RESPONSE, answers_by_theme, parse_themes
from shapeguard.catalog.drafts import (
    ANONYMIZED_MESSAGE,
    DRAFT_MESSAGE,
    MESSAGE_RECIPIENTS,
    PARTIAL_DRAFT,
    SENT_MESSAGE,
    STATUS_TRACKER,
    THREAD,
    anonymize,
    create_message,
    thread_size,
)
from shapeguard.catalog.messages import (
    CHAT_MESSAGE,
    CONVERSATION_RESPONSE,
    INCOMING_MESSAGE,
    MESSAGE_RECORD,
    TYPED_MESSAGE,
    reaction_count,
    render_notification,
    summarize_conversation,
)
from shapeguard.catalog.notifications import NOTIFICATION, describe_notification
from shapeguard.catalog.outgoing import OUTGOING_MESSAGE, SEND_RESPONSE, ResponseBuilder, send_response

__all__ = [
    "THEMES_RESPONSE",
    "answers_by_theme",
    "parse_themes",
    "ANONYMIZED_MESSAGE",
    "DRAFT_MESSAGE",
    "MESSAGE_RECIPIENTS",
    "PARTIAL_DRAFT",
    "SENT_MESSAGE",
    "STATUS_TRACKER",
    "THREAD",
    "anonymize",
    "create_message",
    "thread_size",
    "CHAT_MESSAGE",
    "CONVERSATION_RESPONSE",
    "INCOMING_MESSAGE",
    "MESSAGE_RECORD",
    "TYPED_MESSAGE",
    "reaction_count",
    "render_notification",
    "summarize_conversation",
    "NOTIFICATION",
    "describe_notification",
    "OUTGOING_MESSAGE",
    "SEND_RESPONSE",
    "ResponseBuilder",
    "send_response",
]
