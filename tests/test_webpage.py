import pytest
from unittest.mock import MagicMock

import requests
from google.genai import errors

from aiplayground.exceptions import ContentFetchError, InvalidRequestError, WebpageUnavailableError
from aiplayground.models.document import DocumentStructure, DocumentSummary, PageContent
from aiplayground.services import webpage as webpage_service
from conftest import ARTICLE_BODY, ARTICLE_HTML, DOCUMENT_JSON, fenced, reply, sent_prompt

URL = "https://example.com/posts/fox"


@pytest.fixture
def mock_session(mocker):
    session = MagicMock()
    mocker.patch("aiplayground.services.webpage.get_session", return_value=session)
    return session


@pytest.fixture
def mock_fetch(mocker):
    return mocker.patch("aiplayground.services.webpage.fetch_page", return_value=ARTICLE_HTML)


class TestFetchPage:
    def test_returns_html(self, mock_session):
        mock_session.get.return_value = MagicMock(ok=True, text="<html></html>")
        assert webpage_service.fetch_page(URL) == "<html></html>"
        assert mock_session.get.call_args.args[0] == URL

    def test_http_error(self, mock_session):
        mock_session.get.return_value = MagicMock(ok=False, status_code=403, reason="Forbidden")
        with pytest.raises(ContentFetchError, match="Failed to fetch URL: 403 Forbidden"):
            webpage_service.fetch_page(URL)

    def test_transport_error(self, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(ContentFetchError):
            webpage_service.fetch_page(URL)


class TestExtractPage:
    def test_article_page(self):
        page = webpage_service.extract_page(ARTICLE_HTML, URL)
        assert page.title == "Test Article Title"
        assert page.author == "Jane Doe"
        assert page.publish_date == "2025-01-15T10:00:00Z"
        assert page.text.startswith("Introduction The quick brown fox")
        assert "Sidebar link" not in page.text
        assert "Footer text" not in page.text
        assert "tracking" not in page.text
        assert "  " not in page.text

    def test_structure_counted_after_noise_removal(self):
        page = webpage_service.extract_page(ARTICLE_HTML, URL)
        # Header h1, nav link and sidebar link are removed before counting.
        assert page.structure == DocumentStructure(sections=1, tables=1, images=1, links=1)

    def test_title_falls_back_to_h1_then_og_title(self):
        h1_page = webpage_service.extract_page("<html><body><h1>Main Heading</h1></body></html>", URL)
        assert h1_page.title == "Main Heading"
        og_page = webpage_service.extract_page(
            '<html><head><meta property="og:title" content="OG Title"></head><body></body></html>', URL
        )
        assert og_page.title == "OG Title"
        bare = webpage_service.extract_page("<html><body></body></html>", URL)
        assert bare.title == "Web Page Analysis"

    def test_author_and_date_from_markup(self):
        html = (
            '<html><body><span class="author"> John Smith </span>'
            '<time datetime="2024-05-01">May 1</time></body></html>'
        )
        page = webpage_service.extract_page(html, URL)
        assert page.author == "John Smith"
        assert page.publish_date == "2024-05-01"

    def test_short_body_uses_paragraphs(self):
        html = "<html><body><p>Short para one here.</p><p>Another short paragraph.</p></body></html>"
        page = webpage_service.extract_page(html, URL)
        assert page.text == "Short para one here. Another short paragraph."

    def test_almost_empty_page_uses_title(self):
        html = "<html><head><title>Tiny</title></head><body><span>hi</span></body></html>"
        page = webpage_service.extract_page(html, URL)
        assert page.text == "Tiny"

    def test_longest_content_region_wins(self):
        html = (
            "<html><body>"
            f'<div class="content">{"short words " * 5}</div>'
            f"<main>{ARTICLE_BODY}{ARTICLE_BODY}</main>"
            "</body></html>"
        )
        page = webpage_service.extract_page(html, URL)
        assert page.text == (ARTICLE_BODY * 2).strip()


class TestPromptHelpers:
    def test_word_count_and_reading_time(self):
        assert webpage_service.word_count("one two three") == 3
        assert webpage_service.reading_time(200) == 1
        assert webpage_service.reading_time(201) == 2

    def test_prompt_embeds_page_facts(self):
        page = PageContent(title='Say "hi"', author="", text="alpha beta gamma", structure=DocumentStructure(links=7))
        prompt = webpage_service.build_prompt(page, 50000)
        assert '"title": "Say \\"hi\\""' in prompt
        assert '"wordCount": 3' in prompt
        assert '"links": 7' in prompt
        assert '"author": null' in prompt
        assert "alpha beta gamma" in prompt
        assert "truncated" not in prompt

    def test_prompt_truncates_long_content(self):
        page = PageContent(title="T", text="x" * 100, structure=DocumentStructure())
        prompt = webpage_service.build_prompt(page, 10)
        assert "x" * 10 + " ...[content truncated for analysis]" in prompt
        assert "x" * 11 not in prompt


class TestAnalyzeUrl:
    def test_parses_reply(self, mock_genai_client, mock_fetch):
        reply(mock_genai_client, fenced(DOCUMENT_JSON))
        result = webpage_service.analyze_url(URL)
        assert isinstance(result, DocumentSummary)
        assert result.title == "Quarterly Report"
        prompt = sent_prompt(mock_genai_client)
        assert "Webpage Content:" in prompt
        assert "The quick brown fox" in prompt
        assert '"author": "Jane Doe"' in prompt

    def test_fallback_from_page_content(self, mock_genai_client, mock_fetch):
        reply(mock_genai_client, "I can't produce JSON today.")
        result = webpage_service.analyze_url(URL)
        page = webpage_service.extract_page(ARTICLE_HTML, URL)
        assert result.title == "Test Article Title"
        assert result.summary == page.text[:300] + "..."
        assert result.word_count == len(page.text.split(" "))
        assert result.metadata.author == "Jane Doe"
        assert result.metadata.source == "Web Article"
        assert result.structure.tables == 1
        assert result.full_text == page.text[:2000]

    def test_unreachable_url_gets_limited_analysis(self, mock_genai_client, mocker):
        mocker.patch(
            "aiplayground.services.webpage.fetch_page",
            side_effect=ContentFetchError("Failed to fetch URL: 403 Forbidden"),
        )
        reply(mock_genai_client, '{"title": "Analysis of site", "metadata": {"source": "URL Analysis (Limited)"}}')
        result = webpage_service.analyze_url(URL)
        assert result.title == "Analysis of site"
        prompt = sent_prompt(mock_genai_client)
        assert f"URL to analyze: {URL}" in prompt

    def test_unreachable_url_fallback(self, mock_genai_client, mocker):
        mocker.patch("aiplayground.services.webpage.fetch_page", side_effect=ContentFetchError("down"))
        reply(mock_genai_client, "no json")
        result = webpage_service.analyze_url(URL)
        assert result.title == f"Analysis of {URL}"
        assert result.metadata.source == "URL Analysis (Limited)"
        assert result.word_count == 0

    def test_unreachable_url_and_model_failure(self, mock_genai_client, mocker):
        mocker.patch("aiplayground.services.webpage.fetch_page", side_effect=ContentFetchError("down"))
        mock_genai_client.models.generate_content.side_effect = errors.APIError(
            500, {"error": {"code": 500, "message": "internal", "status": "INTERNAL"}}
        )
        with pytest.raises(WebpageUnavailableError, match="may block automated requests"):
            webpage_service.analyze_url(URL)

    def test_missing_url(self, mock_genai_client, mock_fetch):
        with pytest.raises(InvalidRequestError, match="No URL provided"):
            webpage_service.analyze_url("")
        mock_fetch.assert_not_called()
