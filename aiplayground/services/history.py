"""Per-user content history stored in the Supabase `content_history` table."""

import json
import logging

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError

from aiplayground.config import get_settings
from aiplayground.exceptions import ConfigurationError, IntegrationError
from aiplayground.models.history import (
    ContentHistory,
    ContentHistoryPage,
    ContentType,
    CreateContentHistoryInput,
    FileInfo,
    HistoryInput,
)
from aiplayground.services.supabase_client import get_service_client

logger = logging.getLogger(__name__)


def _table():
    return get_service_client().table(get_settings().history_table)


def _handle_api_error(action: str, e: Exception):
    # postgrest errors carry a message; transport errors only have their str().
    raise IntegrationError(f"Supabase error while {action}: {getattr(e, 'message', None) or e}") from e


def save_to_history(user_id: str, entry: CreateContentHistoryInput) -> ContentHistory:
    """Insert a history row for the user and return it as stored."""
    row = {
        "user_id": user_id,
        "content_type": entry.content_type,
        "input_data": entry.input_data.model_dump(exclude_none=True) if entry.input_data else {},
        "output_data": entry.output_data,
        "file_info": entry.file_info.model_dump(exclude_none=True) if entry.file_info else None,
    }
    try:
        resp = _table().insert(row).execute()
    except (APIError, httpx.HTTPError) as e:
        _handle_api_error("saving to history", e)
    if not resp.data:
        raise IntegrationError("Supabase returned no row after saving to history")
    try:
        return ContentHistory.model_validate(resp.data[0])
    except ValidationError as e:
        raise IntegrationError(f"Supabase returned an unexpected history row: {e}") from e


def record_analysis(
    user_id: str,
    content_type: ContentType,
    result: BaseModel,
    input_data: HistoryInput,
    file_info: FileInfo | None = None,
) -> ContentHistory | None:
    """Save an analysis result; failures are logged and never propagate to the caller."""
    entry = CreateContentHistoryInput(
        content_type=content_type,
        input_data=input_data,
        output_data=result.model_dump_json(by_alias=True),
        file_info=file_info,
    )
    try:
        return save_to_history(user_id, entry)
    except (ConfigurationError, IntegrationError) as e:
        logger.error("Failed to save to history: %s", e)
        return None


def get_history(user_id: str, limit: int | None = None, content_type: ContentType | None = None) -> ContentHistoryPage:
    """Newest-first history for the user, optionally filtered to one content type."""
    limit = limit or get_settings().history_default_limit
    query = (
        _table()
        .select("*", count="exact")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
    )
    if content_type:
        query = query.eq("content_type", content_type)
    try:
        resp = query.execute()
    except (APIError, httpx.HTTPError) as e:
        _handle_api_error("fetching history", e)
    count = resp.count or 0
    return ContentHistoryPage(
        data=[ContentHistory.model_validate(row) for row in resp.data or []],
        count=count,
        has_more=count > limit,
    )


def delete_history_item(user_id: str, history_id: str) -> None:
    try:
        _table().delete().eq("id", history_id).eq("user_id", user_id).execute()
    except (APIError, httpx.HTTPError) as e:
        _handle_api_error("deleting history item", e)


def clear_all_history(user_id: str) -> None:
    try:
        _table().delete().eq("user_id", user_id).execute()
    except (APIError, httpx.HTTPError) as e:
        _handle_api_error("clearing history", e)


def setup_table() -> None:
    """Create the history table through the `create_content_history_table` database function."""
    try:
        get_service_client().rpc("create_content_history_table").execute()
    except (APIError, httpx.HTTPError) as e:
        _handle_api_error("creating the content_history table", e)
    logger.info("Content history table created successfully")


# --- Display helpers ---

def format_file_info(file_info: FileInfo | None) -> str:
    """'notes.pdf (application/pdf) - 1.50MB'; size is omitted when unknown."""
    if not file_info:
        return ""
    result = f"{file_info.name} ({file_info.type})"
    if file_info.size:
        result += f" - {file_info.size / (1024 * 1024):.2f}MB"
    return result


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def output_preview(item: ContentHistory, max_length: int = 100) -> str:
    """Short preview of a stored result: its summary or description when the output is JSON."""
    try:
        data = json.loads(item.output_data)
    except json.JSONDecodeError:
        return truncate_text(item.output_data, max_length)
    if isinstance(data, dict):
        for key in ("summary", "description", "title"):
            if isinstance(data.get(key), str) and data[key]:
                return truncate_text(data[key], max_length)
    return truncate_text(item.output_data, max_length)
