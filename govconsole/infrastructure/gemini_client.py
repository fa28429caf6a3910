"""Client for the text-generation endpoint that proposes rule details."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from govconsole.config import get_settings

logger = logging.getLogger(__name__)

SUGGESTION_FIELDS: tuple[str, ...] = ("condition", "message")

_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "condition": {"type": "STRING"},
        "message": {"type": "STRING"},
    },
    "propertyOrdering": list(SUGGESTION_FIELDS),
}

_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class SuggestionConfigurationError(RuntimeError):
    """Raised when the endpoint settings are missing."""


class SuggestionServiceError(RuntimeError):
    """Raised when the endpoint cannot be reached."""


class MalformedSuggestionError(SuggestionServiceError):
    """Raised when the endpoint answers without a usable suggestion."""


def build_rule_details_prompt(name: str, rule_type: str) -> str:
    """Return the natural-language request for a rule's condition and message."""

    return (
        'Generate a suitable "condition" (e.g., regex for naming, min/max for budget, '
        'specific value for targeting) and a "violation message" for a rule with the '
        "following details:\n"
        f'Rule Name: "{name}"\n'
        f'Rule Type: "{rule_type}"\n\n'
        'Provide the output as a JSON object with two keys: "condition" and "message".\n'
        'Example for Naming Convention: {"condition": "^[A-Z]{3}_[0-9]{4}$", '
        '"message": "Campaign name must start with 3 uppercase letters, followed by an '
        'underscore and 4 digits (e.g., ABC_1234)."}\n'
        'Example for Budget Limit (Min $100, Max $1000): {"condition": "100-1000", '
        '"message": "Budget must be between $100 and $1000."}\n'
        'Example for Targeting Parameter (Age 18-65): {"condition": "18-65", '
        '"message": "Targeting age must be between 18 and 65."}\n'
    )


def build_generate_content_payload(prompt: str) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": _RESPONSE_SCHEMA,
        },
    }


def _strip_code_fences(text: str) -> str:
    match = _CODE_FENCE_PATTERN.match(text.strip())
    return match.group(1) if match else text


def extract_suggestion(result: Any) -> dict[str, str]:
    """Return the suggestion fields present in a ``generateContent`` response.

    Only non-empty string values are kept; a response without candidates,
    without text, or whose text is not a JSON object is malformed.
    """

    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedSuggestionError("Unexpected response structure.") from exc
    if not isinstance(text, str) or not text.strip():
        raise MalformedSuggestionError("Response did not contain any text.")

    try:
        parsed = json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as exc:
        logger.error("Could not decode suggestion payload: %s", text)
        raise MalformedSuggestionError("Response text is not valid JSON.") from exc
    if not isinstance(parsed, Mapping):
        raise MalformedSuggestionError("Response JSON is not an object.")

    suggestion: dict[str, str] = {}
    for field in SUGGESTION_FIELDS:
        value = parsed.get(field)
        if isinstance(value, str) and value:
            suggestion[field] = value
    return suggestion


class RuleSuggestionService:
    """Request a condition and violation message for a rule draft."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        settings = get_settings()

        api_key = (settings.gemini_api_key or "").strip()
        if not api_key:
            raise SuggestionConfigurationError(
                "GEMINI_API_KEY is not defined in the environment."
            )

        self._api_key = api_key
        self._model = settings.gemini_model.strip()
        self._base_url = settings.gemini_base_url.rstrip("/")
        self._timeout = httpx.Timeout(settings.gemini_timeout_seconds)
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def suggest_rule_details(self, name: str, rule_type: str) -> dict[str, str]:
        """Return the suggested ``condition``/``message`` fields that were produced."""

        payload = build_generate_content_payload(build_rule_details_prompt(name, rule_type))
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self._api_key},
                    json=payload,
                )
                result = response.json()
        except httpx.HTTPError as exc:
            logger.error("Suggestion request to %s failed: %s", self.endpoint, exc)
            raise SuggestionServiceError(f"Request to the suggestion endpoint failed: {exc}") from exc
        except ValueError as exc:
            logger.error(
                "Suggestion endpoint answered %s with a non-JSON body", response.status_code
            )
            raise MalformedSuggestionError("Response body is not valid JSON.") from exc

        logger.debug("Raw suggestion response: %s", result)
        if response.is_error:
            logger.error(
                "Suggestion endpoint answered %s: %s", response.status_code, result
            )
        return extract_suggestion(result)


__all__ = [
    "MalformedSuggestionError",
    "RuleSuggestionService",
    "SUGGESTION_FIELDS",
    "SuggestionConfigurationError",
    "SuggestionServiceError",
    "build_generate_content_payload",
    "build_rule_details_prompt",
    "extract_suggestion",
]
