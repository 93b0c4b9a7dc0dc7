"""Webpage summarization: fetch a URL, pull the readable text out of it, and summarize with Gemini.

When the page can't be downloaded (blocked, JavaScript-only, bad address) the model is
asked for a limited analysis based on the URL alone.
"""

import json
import logging
import math
import re

import requests
from bs4 import BeautifulSoup

from aiplayground.config import get_settings
from aiplayground.exceptions import (
    AuthenticationError,
    ContentFetchError,
    IntegrationError,
    InvalidRequestError,
    RateLimitError,
    WebpageUnavailableError,
)
from aiplayground.http_client import get_session
from aiplayground.models.document import DocumentMetadata, DocumentStructure, DocumentSummary, PageContent
from aiplayground.services import gemini

logger = logging.getLogger(__name__)

NOISE_SELECTOR = "script, style, nav, footer, header, .nav, .navigation, .sidebar, .advertisement, .ads"
CONTENT_SELECTORS = [
    "article",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "main",
    ".main-content",
    "#content",
    ".story-body",
    ".article-body",
]
MIN_CONTENT_CHARS = 200
MIN_TEXT_CHARS = 50
MIN_FALLBACK_CHARS = 20
WORDS_PER_MINUTE = 200
FULL_TEXT_CHARS = 2000
DEFAULT_TITLE = "Web Page Analysis"
LIMITED_SOURCE = "URL Analysis (Limited)"
UNAVAILABLE_MESSAGE = (
    "Failed to analyze the webpage. The site may not be accessible or may block automated requests."
)


# --- Fetching and extraction ---

def fetch_page(url: str) -> str:
    """Download a page's HTML, raising ContentFetchError on transport or HTTP errors."""
    try:
        resp = get_session().get(url, timeout=get_settings().fetch_timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise ContentFetchError(f"Failed to fetch URL: {e}") from e
    if not resp.ok:
        raise ContentFetchError(f"Failed to fetch URL: {resp.status_code} {resp.reason}")
    return resp.text


def _text(el) -> str:
    return el.get_text().strip() if el is not None else ""


def _meta(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    return (tag.get("content") or "") if tag is not None else ""


def _first_attr(soup: BeautifulSoup, selector: str, attr: str) -> str:
    tag = soup.select_one(selector)
    return (tag.get(attr) or "") if tag is not None else ""


def _selection_text(soup: BeautifulSoup, selector: str) -> str:
    return "".join(el.get_text() for el in soup.select(selector)).strip()


def _fallback_text(soup: BeautifulSoup) -> str:
    """Paragraph text, else the first divs, else the first spans."""
    paragraphs = " ".join(_text(p) for p in soup.find_all("p"))
    if paragraphs:
        return paragraphs
    divs = " ".join(_text(d) for d in soup.find_all("div")[:10])
    if divs:
        return divs
    return " ".join(_text(s) for s in soup.find_all("span")[:20])


def extract_page(html: str, url: str) -> PageContent:
    soup = BeautifulSoup(html, "html.parser")

    title = (
        _text(soup.find("title"))
        or _text(soup.find("h1"))
        or _meta(soup, property="og:title")
        or DEFAULT_TITLE
    )
    author = (
        _meta(soup, name="author")
        or _meta(soup, property="article:author")
        or _text(soup.select_one(".author"))
    )
    publish_date = (
        _meta(soup, property="article:published_time")
        or _meta(soup, name="date")
        or _first_attr(soup, "time", "datetime")
        or _text(soup.select_one(".date"))
    )

    for el in soup.select(NOISE_SELECTOR):
        el.decompose()

    content = ""
    for selector in CONTENT_SELECTORS:
        candidate = _selection_text(soup, selector)
        if len(candidate) > len(content):
            content = candidate
    if len(content) < MIN_CONTENT_CHARS:
        content = _text(soup.body) if soup.body is not None else soup.get_text().strip()

    text = re.sub(r"\s+", " ", content).strip()

    structure = DocumentStructure(
        sections=len(soup.select("h1, h2, h3, h4, h5, h6")),
        tables=len(soup.find_all("table")),
        images=len(soup.find_all("img")),
        links=len(soup.select("a[href]")),
    )

    if len(text) < MIN_TEXT_CHARS:
        fallback = _fallback_text(soup)
        if len(fallback) > MIN_FALLBACK_CHARS:
            text = fallback.strip()
        else:
            text = title or url or "Limited content available for analysis"

    return PageContent(title=title, author=author, publish_date=publish_date, text=text, structure=structure)


def word_count(text: str) -> int:
    return len(text.split(" "))


def reading_time(words: int) -> int:
    return math.ceil(words / WORDS_PER_MINUTE)


# --- Prompts ---

def build_prompt(page: PageContent, max_chars: int) -> str:
    words = word_count(page.text)
    content = page.text[:max_chars]
    if len(page.text) > max_chars:
        content += " ...[content truncated for analysis]"
    structure = page.structure
    return f"""
Analyze this webpage content and provide a comprehensive summary and analysis. Please return your response in the following JSON format:

{{
  "title": {json.dumps(page.title)},
  "summary": "A concise 2-3 sentence summary of the main content",
  "detailedSummary": "A more comprehensive summary (4-6 sentences) covering key themes and insights",
  "keyPoints": ["List of 5-8 most important points from the content"],
  "topics": ["List of 4-6 main topics or themes discussed"],
  "wordCount": {words},
  "readingTime": {reading_time(words)},
  "sentiment": "Overall sentiment: Positive/Negative/Neutral/Mixed",
  "difficulty": "Reading difficulty: Beginner/Intermediate/Advanced/Expert",
  "structure": {{
    "sections": {structure.sections},
    "tables": {structure.tables},
    "images": {structure.images},
    "links": {structure.links}
  }},
  "metadata": {{
    "author": {json.dumps(page.author or None)},
    "publishDate": {json.dumps(page.publish_date or None)},
    "language": "Primary language of the content",
    "source": "Web Article"
  }},
  "quotes": ["Array of 2-3 most important or memorable quotes from the text"],
  "actionItems": ["List of actionable items or recommendations if any are present"]
}}

Webpage Content:
{content}

Instructions:
1. Use the provided title or improve it if needed
2. Provide both concise and detailed summaries
3. Extract the most important points and themes
4. Analyze the content structure and complexity
5. Identify key quotes that represent important ideas
6. Extract any actionable items or recommendations
7. Estimate reading difficulty based on vocabulary and concepts
8. Determine sentiment and overall tone
9. Use provided metadata where available
10. Ensure all arrays contain relevant, non-duplicate items

Please ensure the JSON is valid and properly formatted.
"""


def build_limited_prompt(url: str) -> str:
    available = (
        f"Analysis of {url}: Unable to fully extract webpage content. This might be due to "
        f"JavaScript-heavy content, access restrictions, or site blocking. The URL appears to be: {url}"
    )
    return f"""
Analyze this URL and provide a basic summary based on the URL structure and any available information. Please return your response in the following JSON format:

{{
  "title": {json.dumps(f"Analysis of {url}")},
  "summary": "Unable to extract full webpage content. This might be due to JavaScript-heavy content, access restrictions, or the site blocking automated requests.",
  "detailedSummary": "The analysis was limited due to content extraction issues. The URL suggests it may contain relevant information, but full content analysis was not possible.",
  "keyPoints": ["Content extraction was limited", "Site may use JavaScript rendering", "Manual review recommended"],
  "topics": ["Web analysis limitation", "Content accessibility"],
  "wordCount": 50,
  "readingTime": 1,
  "sentiment": "Neutral",
  "difficulty": "Unknown",
  "structure": {{
    "sections": 0,
    "tables": 0,
    "images": 0,
    "links": 0
  }},
  "metadata": {{
    "language": "Unknown",
    "source": "{LIMITED_SOURCE}"
  }},
  "quotes": [],
  "actionItems": ["Consider accessing the URL manually for full content", "Check if the site allows automated access"]
}}

URL to analyze: {url}
Available information: {available}

Please provide a helpful analysis acknowledging the limitations while still giving useful feedback to the user.
"""


# --- Fallback results ---

def fallback_summary(page: PageContent) -> DocumentSummary:
    words = word_count(page.text)
    return DocumentSummary(
        title=page.title or DEFAULT_TITLE,
        summary=page.text[:300] + "...",
        detailed_summary=page.text[:800] + "...",
        key_points=["Web content analysis completed", "Please review the content manually"],
        topics=["Web content", "Online article"],
        word_count=words,
        reading_time=reading_time(words),
        sentiment="Neutral",
        difficulty="Intermediate",
        structure=page.structure,
        metadata=DocumentMetadata(
            author=page.author or None,
            publish_date=page.publish_date or None,
            language="English",
            source="Web Article",
        ),
        quotes=[],
        action_items=[],
        full_text=page.text[:FULL_TEXT_CHARS],
    )


def limited_fallback_summary(url: str) -> DocumentSummary:
    return DocumentSummary(
        title=f"Analysis of {url}",
        summary="Unable to extract webpage content due to technical limitations.",
        detailed_summary=(
            "The URL could not be fully analyzed due to content extraction issues. This is common "
            "with JavaScript-heavy sites or sites that block automated requests."
        ),
        key_points=[
            "Content extraction failed",
            "Site may use dynamic content loading",
            "Manual review recommended",
        ],
        topics=["Web accessibility", "Content extraction limitations"],
        word_count=0,
        reading_time=1,
        sentiment="Neutral",
        difficulty="Unknown",
        structure=DocumentStructure(),
        metadata=DocumentMetadata(language="Unknown", source=LIMITED_SOURCE),
        quotes=[],
        action_items=[
            "Try accessing the URL manually",
            "Check if the site has an API or RSS feed",
        ],
    )


# --- Analysis ---

def analyze_unreachable_url(url: str, client=None) -> DocumentSummary:
    """Ask the model what it can tell from the URL alone."""
    try:
        text = gemini.generate(build_limited_prompt(url), client=client)
    except (AuthenticationError, IntegrationError, RateLimitError) as e:
        logger.error("AI analysis error for %s: %s", url, e)
        raise WebpageUnavailableError(UNAVAILABLE_MESSAGE) from e
    return gemini.parse_result(text, DocumentSummary, lambda: limited_fallback_summary(url))


def analyze_url(url: str | None) -> DocumentSummary:
    if not url:
        raise InvalidRequestError("No URL provided")
    client = gemini.get_client()

    try:
        html = fetch_page(url)
    except ContentFetchError as e:
        logger.error("URL fetching error: %s", e)
        return analyze_unreachable_url(url, client=client)

    page = extract_page(html, url)
    prompt = build_prompt(page, get_settings().max_content_chars)
    text = gemini.generate(prompt, client=client)
    return gemini.parse_result(text, DocumentSummary, lambda: fallback_summary(page))
