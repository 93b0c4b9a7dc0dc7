from fastmcp import FastMCP

from aiplayground import auth
from aiplayground.config import get_settings
from aiplayground.exceptions import (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
    WebpageUnavailableError,
)
from aiplayground.services import conversation as conversation_service
from aiplayground.services import document as document_service
from aiplayground.services import image as image_service
from aiplayground.services import webpage as webpage_service

mcp = FastMCP("AI Playground")

_TOOL_ERRORS = (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
    WebpageUnavailableError,
)


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, ConfigurationError):
        return {"error": "config_error", "message": str(e), "action": "Ask the user to set the missing key in .env"}
    if isinstance(e, InvalidRequestError):
        return {"error": "invalid_request", "message": str(e)}
    if isinstance(e, RateLimitError):
        return {"error": "rate_limit", "message": str(e), "action": "Wait a moment and retry"}
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e)}
    if isinstance(e, WebpageUnavailableError):
        return {"error": "webpage_unavailable", "message": str(e)}
    if isinstance(e, IntegrationError):
        return {"error": "integration_error", "message": str(e)}
    return {"error": "unknown_error", "message": str(e)}


@mcp.tool
def analyze_image(image_data: str, mime_type: str = "image/jpeg") -> dict:
    """Describe a base64-encoded image: objects, colors, mood, style, people, visible text (OCR) and tags."""
    try:
        return image_service.analyze_image(image_data, mime_type).model_dump(by_alias=True)
    except _TOOL_ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def analyze_document(document_data: str, mime_type: str = "application/pdf", file_name: str | None = None) -> dict:
    """Summarize a base64-encoded document (PDF, DOC, DOCX, TXT, MD).
    Returns title, short and detailed summaries, key points, topics, quotes and action items."""
    try:
        return document_service.analyze_document(document_data, mime_type, file_name).model_dump(by_alias=True)
    except _TOOL_ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def analyze_conversation(audio_data: str, mime_type: str = "audio/mpeg") -> dict:
    """Transcribe base64-encoded audio, split it by speaker with timestamps, and summarize the discussion."""
    try:
        return conversation_service.analyze_conversation(audio_data, mime_type).model_dump(by_alias=True)
    except _TOOL_ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def analyze_url(url: str) -> dict:
    """Fetch a web page and summarize its main content.
    If the page can't be fetched, returns a limited analysis based on the URL alone."""
    try:
        return webpage_service.analyze_url(url).model_dump(by_alias=True)
    except _TOOL_ERRORS as e:
        return _handle_mcp_error(e)


@mcp.tool
def playground_status() -> dict:
    """Check which backing services (Gemini, Supabase) are configured."""
    settings = get_settings()
    return {
        "model": settings.gemini_model,
        "gemini_configured": bool(settings.gemini_api_key),
        "supabase_configured": auth.is_configured(),
    }
