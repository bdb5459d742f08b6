"""Structured answers requested from a chat-completion model.

The model is asked to reply with JSON grouping survey answers into themes;
the reply text is untrusted and validated before use.
"""

from typing import Union

import structlog

from shapeguard.shapes import number, obj, sequence, string
from shapeguard.validators import ValidatedValue, ValidationFailure, validate_json

logger = structlog.get_logger()

THEMES_RESPONSE = obj({
    "themes": sequence(obj({
        "summary": string(),
        "answerIds": sequence(number()),
    })),
})


def parse_themes(reply_text: Union[str, bytes]) -> Union[ValidatedValue, ValidationFailure]:
    """Validate the model's JSON reply against THEMES_RESPONSE."""
    result = validate_json(reply_text, THEMES_RESPONSE)
    if isinstance(result, ValidationFailure):
        logger.warning("completion_rejected", violations=result.summary)
    return result


def answers_by_theme(themes: ValidatedValue) -> dict[str, list]:
    """Theme summary → answer ids, for a validated THEMES_RESPONSE."""
    return {theme["summary"]: list(theme["answerIds"]) for theme in themes["themes"]}
