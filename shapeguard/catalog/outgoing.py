"""Outgoing messages and the send responses they produce.

Each outgoing variant maps to exactly one response shape: a text message
always yields a text response, an image message an image response, and so
on. The mapping is enforced by validating every built response against the
shape declared for its variant. Delivering the message is the transport's
job; this module only builds the response a successful send reports.
"""

import time
import uuid
from typing import Callable, Optional

from shapeguard.dispatch import VariantDispatcher
from shapeguard.shapes import literal, number, obj, optional, string, tagged_union
from shapeguard.validators import ValidatedValue

OUTGOING_BASE = obj({"recipient": string()})

OUTGOING_TEXT = OUTGOING_BASE.extend({
    "type": literal("text"),
    "text": string(),
})

OUTGOING_IMAGE = OUTGOING_BASE.extend({
    "type": literal("image"),
    "imageUrl": string(),
    "caption": optional(string()),
})

OUTGOING_VIDEO = OUTGOING_BASE.extend({
    "type": literal("video"),
    "videoUrl": string(),
    "duration": number(),
    "thumbnail": optional(string()),
})

OUTGOING_MESSAGE = tagged_union(
    {"text": OUTGOING_TEXT, "image": OUTGOING_IMAGE, "video": OUTGOING_VIDEO},
    discriminator="type",
)

RESPONSE_BASE = obj({
    "id": string(),
    "timestamp": number(),
    "deliveryStatus": literal("sent", "failed"),
})

TEXT_RESPONSE = RESPONSE_BASE.extend({
    "type": literal("text"),
    "content": obj({"text": string()}),
})

IMAGE_RESPONSE = RESPONSE_BASE.extend({
    "type": literal("image"),
    "content": obj({
        "imageUrl": string(),
        "uploadStatus": literal("uploading", "complete", "failed"),
        "progress": optional(number()),
    }),
})

VIDEO_RESPONSE = RESPONSE_BASE.extend({
    "type": literal("video"),
    "content": obj({
        "videoUrl": string(),
        "processingStatus": literal("processing", "complete", "failed"),
        "thumbnail": optional(string()),
    }),
})

SEND_RESPONSE = tagged_union(
    {"text": TEXT_RESPONSE, "image": IMAGE_RESPONSE, "video": VIDEO_RESPONSE},
    discriminator="type",
)


def generate_id() -> str:
    return uuid.uuid4().hex[:8]


def now_ms() -> int:
    return int(time.time() * 1000)


class ResponseBuilder:
    """Builds the send response for a validated OUTGOING_MESSAGE.

    Args:
        id_factory: Produces response ids (default: 8 hex chars of a uuid4)
        clock: Produces the response timestamp in epoch milliseconds
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._id_factory = id_factory or generate_id
        self._clock = clock or now_ms
        self._dispatcher = VariantDispatcher(
            OUTGOING_MESSAGE,
            {
                "text": self._text_response,
                "image": self._image_response,
                "video": self._video_response,
            },
            returns={
                "text": TEXT_RESPONSE,
                "image": IMAGE_RESPONSE,
                "video": VIDEO_RESPONSE,
            },
            name="send_response",
        )

    def build(self, message: ValidatedValue) -> ValidatedValue:
        """Response for ``message``; its ``type`` always equals the message's."""
        return self._dispatcher.dispatch(message)

    def _envelope(self, kind: str) -> dict:
        return {
            "id": self._id_factory(),
            "timestamp": self._clock(),
            "deliveryStatus": "sent",
            "type": kind,
        }

    def _text_response(self, message: ValidatedValue) -> dict:
        return {**self._envelope("text"), "content": {"text": message["text"]}}

    def _image_response(self, message: ValidatedValue) -> dict:
        return {
            **self._envelope("image"),
            "content": {
                "imageUrl": message["imageUrl"],
                "uploadStatus": "complete",
                "progress": 100,
            },
        }

    def _video_response(self, message: ValidatedValue) -> dict:
        content = {"videoUrl": message["videoUrl"], "processingStatus": "processing"}
        if "thumbnail" in message:
            content["thumbnail"] = message["thumbnail"]
        return {**self._envelope("video"), "content": content}


# Module-level singleton
response_builder = ResponseBuilder()


def send_response(message: ValidatedValue) -> ValidatedValue:
    return response_builder.build(message)
