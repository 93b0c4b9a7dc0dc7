from aiplayground.models.common import CamelModel


class DocumentStructure(CamelModel):
    # The model sometimes answers with prose estimates ("about 4") instead of numbers.
    sections: int | str = 0
    tables: int | str = 0
    images: int | str = 0
    links: int | str = 0


class DocumentMetadata(CamelModel):
    author: str | None = None
    publish_date: str | None = None
    language: str = "Unknown"
    source: str = ""


class DocumentSummary(CamelModel):
    """Summary shared by uploaded documents and fetched webpages."""

    title: str = ""
    summary: str = ""
    detailed_summary: str = ""
    key_points: list[str] = []
    topics: list[str] = []
    word_count: int | str = 0
    reading_time: int | str = 0
    sentiment: str = "Neutral"
    difficulty: str = ""
    structure: DocumentStructure = DocumentStructure()
    metadata: DocumentMetadata = DocumentMetadata()
    quotes: list[str] = []
    action_items: list[str] = []
    full_text: str | None = None


class AnalyzeDocumentRequest(CamelModel):
    document_data: str | None = None
    mime_type: str = "application/pdf"
    file_name: str | None = None


class AnalyzeUrlRequest(CamelModel):
    url: str | None = None


class PageContent(CamelModel):
    """Text and metadata pulled out of a fetched webpage."""

    title: str
    author: str = ""
    publish_date: str = ""
    text: str
    structure: DocumentStructure
