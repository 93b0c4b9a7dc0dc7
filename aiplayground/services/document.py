"""Document summarization for uploaded PDF, Word, text and Markdown files."""

import re

from aiplayground.exceptions import InvalidRequestError
from aiplayground.models.document import DocumentMetadata, DocumentStructure, DocumentSummary
from aiplayground.services import gemini

PROMPT = """
Analyze this document and provide a comprehensive summary and analysis. Please return your response in the following JSON format:

{
  "title": "Extract or generate an appropriate title for the document",
  "summary": "A concise 2-3 sentence summary of the main content",
  "detailedSummary": "A more comprehensive summary (4-6 sentences) covering key themes and insights",
  "keyPoints": ["List of 5-8 most important points from the document"],
  "topics": ["List of 4-6 main topics or themes discussed"],
  "wordCount": "Estimated word count",
  "readingTime": "Estimated reading time in minutes",
  "sentiment": "Overall sentiment: Positive/Negative/Neutral/Mixed",
  "difficulty": "Reading difficulty: Beginner/Intermediate/Advanced/Expert",
  "structure": {
    "sections": "Number of main sections",
    "tables": "Number of tables/data structures",
    "images": "Number of images/figures",
    "links": "Number of references/links"
  },
  "metadata": {
    "author": "Author name if mentioned, otherwise null",
    "publishDate": "Publication date if mentioned, otherwise null",
    "language": "Primary language of the document",
    "source": "Document type (PDF/DOCX/etc.)"
  },
  "quotes": ["Array of 2-3 most important or memorable quotes from the text"],
  "actionItems": ["List of actionable items or recommendations if any are present"]
}

Instructions:
1. Read and analyze the entire document content
2. Generate an appropriate title if none is apparent
3. Provide both concise and detailed summaries
4. Extract the most important points and themes
5. Analyze the document structure (sections, tables, images, etc.)
6. Extract key quotes that represent important ideas
7. Extract any actionable items or recommendations
8. Estimate reading difficulty based on vocabulary and concepts
9. Determine sentiment and overall tone
10. Extract metadata where available
11. Handle PDFs, Word documents, and text files appropriately
12. If the document contains tables, charts, or images, describe their content

Please ensure the JSON is valid and properly formatted.
"""

FULL_TEXT_CHARS = 2000
_EXTENSION = re.compile(r"\.[^/.]+$")


def title_from_file_name(file_name: str | None) -> str:
    """'report.final.pdf' -> 'report.final'; empty names fall back to a generic title."""
    return _EXTENSION.sub("", file_name or "") or "Document Analysis"


def fallback_summary(text: str, file_name: str | None) -> DocumentSummary:
    return DocumentSummary(
        title=title_from_file_name(file_name),
        summary="Document analysis completed. Please review the raw response for details.",
        detailed_summary=(
            "The AI has processed your document but the response couldn't be parsed into "
            "the expected format. The analysis was completed successfully."
        ),
        key_points=[
            "Document analysis completed",
            "Please review the content manually for detailed insights",
        ],
        topics=["General content", "Document analysis"],
        word_count=0,
        reading_time=1,
        sentiment="Neutral",
        difficulty="Intermediate",
        structure=DocumentStructure(sections=1, tables=0, images=0, links=0),
        metadata=DocumentMetadata(language="English", source="Document"),
        quotes=[],
        action_items=[],
        full_text=text[:FULL_TEXT_CHARS],
    )


def analyze_document(document_data: str | None, mime_type: str, file_name: str | None = None) -> DocumentSummary:
    if not document_data:
        raise InvalidRequestError("No document data provided")
    client = gemini.get_client()
    media = gemini.decode_media(document_data, mime_type)
    text = gemini.generate(PROMPT, media, client=client)
    return gemini.parse_result(text, DocumentSummary, lambda: fallback_summary(text, file_name))
