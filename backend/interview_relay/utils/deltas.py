"""Content extraction from OpenAI-format chat-completion payloads."""

from typing import Any, Optional


def _first_choice(payload: Any) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    return choice if isinstance(choice, dict) else None


def extract_delta_content(record: Any) -> Optional[str]:
    """
    Return ``choices[0].delta.content`` from a streaming record.

    Control records (role announcements, finish_reason, usage) carry no
    content and yield None rather than an error.

    Examples:
        >>> extract_delta_content({"choices": [{"delta": {"content": "Hi"}}]})
        'Hi'

        >>> extract_delta_content({"choices": [{"delta": {"role": "assistant"}}]})
    """
    choice = _first_choice(record)
    if choice is None:
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


def extract_message_content(payload: Any) -> str:
    """Return ``choices[0].message.content`` from a non-streaming response, or ""."""
    choice = _first_choice(payload)
    if choice is None:
        return ""
    message = choice.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""
