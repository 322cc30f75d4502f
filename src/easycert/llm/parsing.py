"""Extraction of JSON payloads from free-form LLM responses.

Models often wrap JSON in Markdown code fences even when told not to. The
extractor strips a ```json fence, or failing that a bare ``` fence, and
otherwise parses the whole text. Anything that is not a JSON array raises
ResponseParseError so callers can fall back.
"""

import json
import re
from typing import Any

from easycert.llm.client import LLMError

_LABELED_FENCE_RE = re.compile(r"```json\s*(.*?)\s*(?:```|$)", re.DOTALL | re.IGNORECASE)
_BARE_FENCE_RE = re.compile(r"```[\w-]*\n?(.*?)\s*(?:```|$)", re.DOTALL)


class ResponseParseError(LLMError):
    """Raised when an LLM response does not contain a usable JSON array."""

    def __init__(self, message: str, response_text: str = "") -> None:
        super().__init__(message)
        self.response_text = response_text


def strip_code_fences(text: str) -> str:
    """Return the content of the first code fence, or the stripped text.

    Args:
        text: Raw response text

    Returns:
        Candidate JSON text
    """
    match = _LABELED_FENCE_RE.search(text)
    if match is None:
        match = _BARE_FENCE_RE.search(text)
    if match is not None:
        return match.group(1).strip()
    return text.strip()


def extract_json_array(text: str | None) -> list[Any]:
    """Parse the JSON array contained in an LLM response.

    Args:
        text: Raw response text, possibly fenced

    Returns:
        The parsed array (items are not validated here)

    Raises:
        ResponseParseError: If no JSON array can be parsed
    """
    if not text or not text.strip():
        raise ResponseParseError("Empty response from LLM", text or "")

    candidate = strip_code_fences(text)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e}", text) from e

    if not isinstance(payload, list):
        raise ResponseParseError(
            f"Expected a JSON array, got {type(payload).__name__}", text
        )

    return payload
