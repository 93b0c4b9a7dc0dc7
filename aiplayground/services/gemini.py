"""Gemini client helpers: send a prompt (with optional inline media) and recover JSON from the reply."""

import base64
import binascii
import json
import logging
import re
from collections.abc import Callable
from typing import TypeVar

from google import genai
from google.genai import errors, types
from pydantic import BaseModel, ValidationError

from aiplayground.config import get_settings
from aiplayground.exceptions import (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

# Greedy: first "{" to last "}" so nested objects and trailing prose are tolerated.
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")
_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,")
_WHITESPACE = re.compile(r"\s+")


def get_client() -> genai.Client:
    api_key = get_settings().gemini_api_key
    if not api_key:
        raise ConfigurationError(
            "Gemini API key not configured. Get one at "
            "https://aistudio.google.com/apikey and set GEMINI_API_KEY in .env"
        )
    return genai.Client(api_key=api_key)


def decode_media(data: str, mime_type: str) -> types.Part:
    """Turn base64 (optionally a data: URL) into an inline Gemini part."""
    payload = _DATA_URL_PREFIX.sub("", data.strip())
    # MIME-wrapped base64 carries line breaks.
    payload = _WHITESPACE.sub("", payload)
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequestError(f"Media data is not valid base64: {e}") from e
    return types.Part.from_bytes(data=raw, mime_type=mime_type)


def _handle_api_error(e: errors.APIError):
    if e.code == 429:
        raise RateLimitError("Gemini API rate limit exceeded. Try again shortly.") from e
    if e.code in (401, 403):
        raise AuthenticationError("Gemini API key is invalid. Check GEMINI_API_KEY in .env.") from e
    raise IntegrationError(f"Gemini API error: {e}") from e


def generate(prompt: str, media: types.Part | None = None, client: genai.Client | None = None) -> str:
    """Send the prompt (and media part, if any) to the configured model, return the reply text."""
    client = client or get_client()
    contents: list = [prompt] if media is None else [prompt, media]
    try:
        response = client.models.generate_content(
            model=get_settings().gemini_model,
            contents=contents,
        )
    except errors.APIError as e:
        _handle_api_error(e)
    return response.text or ""


def extract_json(text: str) -> dict | None:
    """Return the JSON object embedded in a model reply, or None if there isn't a usable one."""
    match = _JSON_SPAN.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_result(text: str, model_cls: type[ResultT], fallback: Callable[[], ResultT]) -> ResultT:
    """Validate the reply's JSON into model_cls, or build the fallback result.

    The fallback is only used when the reply holds no JSON object. Top-level fields
    that fail validation are dropped and take their defaults, so one odd value does
    not throw away the rest of the analysis.
    """
    data = extract_json(text)
    if data is None:
        logger.error("Failed to parse Gemini response: no JSON object found")
        return fallback()
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning("Dropping invalid fields from Gemini response: %s", ", ".join(sorted(map(str, invalid))))
        data = {key: value for key, value in data.items() if key not in invalid}
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        logger.error("Failed to parse Gemini response: %s", e)
        return fallback()
