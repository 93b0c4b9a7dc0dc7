from fastapi import APIRouter, Depends, Query

from aiplayground.auth import get_current_user
from aiplayground.exceptions import InvalidRequestError
from aiplayground.models.auth import AuthUser
from aiplayground.models.history import (
    ContentType,
    CreateContentHistoryInput,
    HistoryListResponse,
    HistorySaveResponse,
    SuccessResponse,
)
from aiplayground.services import history as history_service

router = APIRouter(prefix="/api/content-history", tags=["history"])


@router.post("")
def save_history(
    entry: CreateContentHistoryInput,
    user: AuthUser = Depends(get_current_user),
) -> HistorySaveResponse:
    if not entry.content_type or entry.input_data is None or not entry.output_data:
        raise InvalidRequestError("Missing required fields: content_type, input_data, or output_data")
    item = history_service.save_to_history(user.id, entry)
    return HistorySaveResponse(success=True, data=item)


@router.get("")
def list_history(
    type: ContentType | None = None,
    limit: int = Query(10, ge=1, le=100),
    user: AuthUser = Depends(get_current_user),
) -> HistoryListResponse:
    page = history_service.get_history(user.id, limit, type)
    return HistoryListResponse(success=True, data=page.data, count=page.count, has_more=page.has_more)


@router.delete("")
def delete_history_item(
    id: str | None = None,
    user: AuthUser = Depends(get_current_user),
) -> SuccessResponse:
    if not id:
        raise InvalidRequestError("History ID is required")
    history_service.delete_history_item(user.id, id)
    return SuccessResponse(success=True)


@router.delete("/all")
def clear_history(user: AuthUser = Depends(get_current_user)) -> SuccessResponse:
    history_service.clear_all_history(user.id)
    return SuccessResponse(success=True)
