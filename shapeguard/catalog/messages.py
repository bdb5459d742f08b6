"""Incoming message shapes and their per-variant rendering.

Three families of incoming messages:
    - INCOMING_MESSAGE: text / image / video told apart by which properties
      are present (structural union, earliest declared member wins)
    - TYPED_MESSAGE: the same variants carrying an explicit ``type`` field
    - CHAT_MESSAGE: conversation messages with nested attachments and
      reactions, including a ``plain`` member for messages with no content
"""

from shapeguard.dispatch import VariantDispatcher
from shapeguard.shapes import literal, mapping, number, obj, optional, sequence, string, tagged_union
from shapeguard.validators import ValidatedValue

# ── Property-discriminated messages ──

BASE_MESSAGE = obj({
    "id": string(),
    "sender": string(),
    "timestamp": number(),
})

TEXT_MESSAGE = BASE_MESSAGE.extend({"text": string()})

IMAGE_MESSAGE = BASE_MESSAGE.extend({
    "imageUrl": string(),
    "width": number(),
    "height": number(),
})

VIDEO_MESSAGE = BASE_MESSAGE.extend({
    "videoUrl": string(),
    "duration": number(),
})

INCOMING_MESSAGE = tagged_union({
    "text": TEXT_MESSAGE,
    "image": IMAGE_MESSAGE,
    "video": VIDEO_MESSAGE,
})

# ── Explicitly discriminated messages ──

TYPED_MESSAGE = tagged_union(
    {
        "text": obj({"type": literal("text"), "text": string()}),
        "image": obj({"type": literal("image"), "imageUrl": string()}),
        "video": obj({"type": literal("video"), "videoUrl": string()}),
    },
    discriminator="type",
)

# ── Conversation messages ──

IMAGE_ATTACHMENT = obj({
    "url": string(),
    "width": number(),
    "height": number(),
    "caption": string(),
})

VIDEO_ATTACHMENT = obj({
    "url": string(),
    "duration": number(),
    "thumbnail": string(),
    "title": string(),
})

REACTIONS = mapping(string(), number())

PLAIN_CHAT_MESSAGE = BASE_MESSAGE.extend({"reactions": optional(REACTIONS)})

# Flat record with every content field optional, as delivered by the messages API
MESSAGE_RECORD = PLAIN_CHAT_MESSAGE.extend({
    "text": optional(string()),
    "image": optional(IMAGE_ATTACHMENT),
    "video": optional(VIDEO_ATTACHMENT),
})

CHAT_MESSAGE = tagged_union({
    "text": PLAIN_CHAT_MESSAGE.extend({"text": string()}),
    "image": PLAIN_CHAT_MESSAGE.extend({"image": IMAGE_ATTACHMENT}),
    "video": PLAIN_CHAT_MESSAGE.extend({"video": VIDEO_ATTACHMENT}),
    "plain": PLAIN_CHAT_MESSAGE,
})

PARTICIPANT = obj({"id": string(), "name": string(), "status": string()})

CONVERSATION_RESPONSE = obj({
    "conversation": obj({
        "id": string(),
        "title": string(),
        "participants": sequence(PARTICIPANT),
    }),
    "messages": sequence(CHAT_MESSAGE),
    "unreadCount": number(),
    "lastActivity": number(),
})


def _format_number(value) -> str:
    """Render whole floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_duration(seconds) -> str:
    """``125`` → ``2:05``. Fractional seconds are dropped."""
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}:{rest:02d}"


# ── Notification rendering ──

def _render_text(message: ValidatedValue) -> str:
    return f'{message["sender"]} texted "{message["text"]}"'


def _render_image(message: ValidatedValue) -> str:
    size = f"{_format_number(message['width'])}x{_format_number(message['height'])}"
    return f"{message['sender']} sent an image ({size})"


def _render_video(message: ValidatedValue) -> str:
    return f"{message['sender']} sent a video ({format_duration(message['duration'])})"


notification_renderer = VariantDispatcher(
    INCOMING_MESSAGE,
    {
        "text": _render_text,
        "image": _render_image,
        "video": _render_video,
    },
    name="notification_renderer",
)


def render_notification(message: ValidatedValue) -> str:
    """One-line notification for a validated INCOMING_MESSAGE."""
    return notification_renderer.dispatch(message)


# ── Conversation rendering ──

def _chat_text(message: ValidatedValue) -> str:
    return f"{message['sender']}: {message['text']}"


def _chat_image(message: ValidatedValue) -> str:
    return f"{message['sender']} sent an image: {message.lookup('image', 'caption')}"


def _chat_video(message: ValidatedValue) -> str:
    return f"{message['sender']} sent a video: {message.lookup('video', 'title')}"


def _chat_plain(message: ValidatedValue) -> str:
    return f"{message['sender']} sent a message"


chat_line_renderer = VariantDispatcher(
    CHAT_MESSAGE,
    {
        "text": _chat_text,
        "image": _chat_image,
        "video": _chat_video,
        "plain": _chat_plain,
    },
    name="chat_line_renderer",
)


def reaction_count(message: ValidatedValue):
    """Total reactions on a validated chat message; 0 when it has none."""
    reactions = message.get("reactions")
    if reactions is None:
        return 0
    return sum(reactions.values())


def summarize_conversation(response: ValidatedValue) -> list[str]:
    """Display lines for a validated CONVERSATION_RESPONSE."""
    lines = [f"Conversation: {response.lookup('conversation', 'title')}"]
    for index in range(len(response["messages"])):
        message = response.child("messages", index)
        lines.append(chat_line_renderer.dispatch(message))
        lines.append(f"Reactions: {_format_number(reaction_count(message))}")
    return lines
