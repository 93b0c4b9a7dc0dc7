from fastapi import APIRouter, Depends

from aiplayground.auth import get_optional_user
from aiplayground.models.auth import AuthUser
from aiplayground.models.conversation import AnalyzeConversationRequest, ConversationAnalysis
from aiplayground.models.document import AnalyzeDocumentRequest, AnalyzeUrlRequest, DocumentSummary
from aiplayground.models.history import FileInfo, HistoryInput
from aiplayground.models.image import AnalyzeImageRequest, ImageAnalysis
from aiplayground.services import conversation as conversation_service
from aiplayground.services import document as document_service
from aiplayground.services import history as history_service
from aiplayground.services import image as image_service
from aiplayground.services import webpage as webpage_service

router = APIRouter(prefix="/api", tags=["analyze"])


def _file_info(file_name: str | None, mime_type: str) -> FileInfo | None:
    return FileInfo(name=file_name, type=mime_type) if file_name else None


@router.post("/analyze-conversation")
def analyze_conversation(
    req: AnalyzeConversationRequest,
    user: AuthUser | None = Depends(get_optional_user),
) -> ConversationAnalysis:
    result = conversation_service.analyze_conversation(req.audio_data, req.mime_type)
    if user:
        history_service.record_analysis(
            user.id, "conversation", result,
            HistoryInput(prompt="Conversation analysis"),
            _file_info(req.file_name, req.mime_type),
        )
    return result


@router.post("/analyze-image")
def analyze_image(
    req: AnalyzeImageRequest,
    user: AuthUser | None = Depends(get_optional_user),
) -> ImageAnalysis:
    result = image_service.analyze_image(req.image_data, req.mime_type)
    if user:
        history_service.record_analysis(
            user.id, "image", result,
            HistoryInput(prompt="Image analysis"),
            _file_info(req.file_name, req.mime_type),
        )
    return result


@router.post("/analyze-document")
def analyze_document(
    req: AnalyzeDocumentRequest,
    user: AuthUser | None = Depends(get_optional_user),
) -> DocumentSummary:
    result = document_service.analyze_document(req.document_data, req.mime_type, req.file_name)
    if user:
        history_service.record_analysis(
            user.id, "document", result,
            HistoryInput(prompt="Document summarization"),
            _file_info(req.file_name, req.mime_type),
        )
    return result


@router.post("/analyze-url")
def analyze_url(
    req: AnalyzeUrlRequest,
    user: AuthUser | None = Depends(get_optional_user),
) -> DocumentSummary:
    result = webpage_service.analyze_url(req.url)
    if user:
        history_service.record_analysis(user.id, "url", result, HistoryInput(url=req.url))
    return result
