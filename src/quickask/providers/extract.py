"""Answer extraction from Messages API responses."""

import json
from typing import Any

from quickask.errors import ExtractionError


def get_text_content(message: dict[str, Any]) -> str | None:
    """Return the text of the first ``text`` block in ``message["content"]``."""
    content = message.get("content")
    if not isinstance(content, list):
        return None
    for item in content:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "text" and isinstance(item.get("text"), str):
            return item["text"]
    return None


def extract_text(payload: str) -> str:
    try:
        message = json.loads(payload)
    except (ValueError, RecursionError) as exc:
        raise ExtractionError("no text content: response is not valid JSON") from exc
    if not isinstance(message, dict):
        raise ExtractionError("no text content: response is not an object")
    text = get_text_content(message)
    if text is None:
        raise ExtractionError("no text content: failed to get text content from API response")
    return text
