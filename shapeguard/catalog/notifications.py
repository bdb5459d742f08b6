"""Notification feed entries, told apart by the properties they carry."""

from shapeguard.dispatch import VariantDispatcher
from shapeguard.shapes import number, obj, string, tagged_union
from shapeguard.validators import ValidatedValue

FRIEND_REQUEST = obj({
    "id": string(),
    "sender": string(),
    "recipient": string(),
    "status": string(),
})

NEW_MESSAGE = obj({
    "id": string(),
    "sender": string(),
    "text": string(),
    "timestamp": number(),
})

APPLICATION_UPDATE = obj({
    "newVersion": string(),
    "releaseNotes": string(),
    "downloadLink": string(),
})

NOTIFICATION = tagged_union({
    "friend_request": FRIEND_REQUEST,
    "new_message": NEW_MESSAGE,
    "application_update": APPLICATION_UPDATE,
})


notification_describer = VariantDispatcher(
    NOTIFICATION,
    {
        "friend_request": lambda n: f"Friend request received from {n['sender']} ({n['status']})",
        "new_message": lambda n: f"New message from {n['sender']}: {n['text']}",
        "application_update": lambda n: f"Application update {n['newVersion']} available at {n['downloadLink']}",
    },
    name="notification_describer",
)


def describe_notification(notification: ValidatedValue) -> str:
    return notification_describer.dispatch(notification)
