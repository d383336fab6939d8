# src/worker/parsing.py - v1
"""Parse the JSON envelope returned for a formatting prompt.

Models are asked for {"formattedContent": ...} but often wrap it in a
markdown code fence or answer in plain markdown. A missing or unusable
envelope is a ParseError, which the worker recovers from by storing the raw
response text.
"""

from __future__ import annotations

import json
import re
from json import JSONDecodeError

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kaiville_research.core.errors import ParseError

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n(.*?)\n?```\s*$", re.DOTALL)


class FormattingEnvelope(BaseModel):
    """Structured answer to the formatting prompt."""

    model_config = ConfigDict(populate_by_name=True)

    formatted_content: str = Field(alias="formattedContent")
    suggested_title: str | None = Field(default=None, alias="suggestedTitle")
    extracted_keywords: list[str] = Field(default_factory=list, alias="extractedKeywords")


def parse_envelope(text: str) -> FormattingEnvelope:
    """Parse a model answer into a FormattingEnvelope.

    Raises:
        ParseError: Not JSON, not an object, or no string formattedContent.
    """
    candidate = text.strip()
    fenced = _FENCE_RE.match(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    try:
        data = json.loads(candidate)
    except JSONDecodeError as e:
        raise ParseError(f"response is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("expected a JSON object")

    try:
        envelope = FormattingEnvelope.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"unexpected envelope shape: {e.error_count()} error(s)") from e

    if not envelope.formatted_content:
        raise ParseError("formattedContent is empty")
    return envelope


def extract_formatted_content(text: str) -> tuple[str, bool]:
    """Return (content, parsed). Falls back to the raw text when parsing fails."""
    try:
        return parse_envelope(text).formatted_content, True
    except ParseError:
        return text, False
