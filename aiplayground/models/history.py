from typing import Literal

from pydantic import BaseModel, Field

ContentType = Literal["conversation", "image", "document", "url"]


class ChatMessage(BaseModel):
    role: str
    content: str


class HistoryInput(BaseModel):
    prompt: str | None = None
    url: str | None = None
    messages: list[ChatMessage] | None = None


class FileInfo(BaseModel):
    name: str
    type: str
    size: int | None = None


class ContentHistory(BaseModel):
    id: str
    user_id: str
    content_type: ContentType
    input_data: HistoryInput
    output_data: str
    file_info: FileInfo | None = None
    created_at: str
    updated_at: str | None = None


class CreateContentHistoryInput(BaseModel):
    content_type: ContentType | None = None
    input_data: HistoryInput | None = None
    output_data: str | None = None
    file_info: FileInfo | None = None


class ContentHistoryPage(BaseModel):
    data: list[ContentHistory]
    count: int
    has_more: bool = Field(serialization_alias="hasMore")


class HistorySaveResponse(BaseModel):
    success: bool
    data: ContentHistory


class HistoryListResponse(BaseModel):
    success: bool
    data: list[ContentHistory]
    count: int
    has_more: bool = Field(serialization_alias="hasMore")


class SuccessResponse(BaseModel):
    success: bool
