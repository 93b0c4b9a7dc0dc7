import base64
import json

import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from aiplayground.models.auth import AuthSession, AuthUser


# --- Canned inputs ---

MEDIA_BYTES = b"fake-media-bytes"
MEDIA_B64 = base64.b64encode(MEDIA_BYTES).decode()

USER = AuthUser(id="11111111-2222-3333-4444-555555555555", email="alice@example.com")
SESSION = AuthSession(access_token="access-abc", refresh_token="refresh-xyz", expires_in=3600, user=USER)


# --- Canned Gemini replies ---

IMAGE_JSON = {
    "description": "A red bicycle leaning against a brick wall.",
    "detailedDescription": "A vintage red bicycle rests against a weathered brick wall in soft evening light.",
    "objects": ["bicycle", "wall", "basket"],
    "colors": ["red", "brown"],
    "mood": "nostalgic",
    "style": "street photography",
    "people": {"count": 0, "details": []},
    "location": "city street",
    "timeOfDay": "evening",
    "textContent": "",
    "technicalDetails": {"composition": "rule of thirds", "lighting": "warm", "quality": "high"},
    "tags": ["bicycle", "urban", "vintage", "red", "street"],
}

CONVERSATION_JSON = {
    "transcript": "Hi, how are you? Fine, thanks.",
    "speakers": [
        {"id": "speaker_1", "label": "Speaker 1", "segments": [{"text": "Hi, how are you?", "startTime": 0, "endTime": 2}]},
        {"id": "speaker_2", "label": "Speaker 2", "segments": [{"text": "Fine, thanks.", "startTime": 2, "endTime": 4}]},
    ],
    "summary": "A short greeting.",
    "keyTopics": ["greetings"],
    "sentiment": "Positive",
    "duration": 4,
}

DOCUMENT_JSON = {
    "title": "Quarterly Report",
    "summary": "Revenue grew in Q3.",
    "detailedSummary": "Revenue grew 12% in Q3 driven by new customers.",
    "keyPoints": ["Revenue up 12%", "Churn down"],
    "topics": ["finance", "growth"],
    "wordCount": 1200,
    "readingTime": 6,
    "sentiment": "Positive",
    "difficulty": "Intermediate",
    "structure": {"sections": 4, "tables": 2, "images": 1, "links": 3},
    "metadata": {"author": "Finance Team", "publishDate": None, "language": "English", "source": "PDF"},
    "quotes": ["We had a great quarter."],
    "actionItems": ["Hire two engineers"],
}


def fenced(data: dict) -> str:
    """Model reply with the JSON wrapped in prose and a code fence."""
    return f"Sure! Here is the analysis:\n```json\n{json.dumps(data, indent=2)}\n```\nLet me know if you need more."


ARTICLE_BODY = "The quick brown fox jumps over the lazy dog. " * 10

ARTICLE_HTML = f"""<html>
<head>
  <title>  Test Article Title </title>
  <meta name="author" content="Jane Doe">
  <meta property="article:published_time" content="2025-01-15T10:00:00Z">
</head>
<body>
  <header><h1>Site Header</h1><nav><a href="/home">Home</a></nav></header>
  <article>
    <h2>Introduction</h2>
    <p>{ARTICLE_BODY}</p>
    <table><tr><td>42</td></tr></table>
    <img src="chart.png">
    <a href="https://example.com/ref">reference</a>
  </article>
  <div class="sidebar"><a href="/other">Sidebar link</a></div>
  <footer>Footer text</footer>
  <script>var tracking = 1;</script>
</body>
</html>"""


# --- Fixtures ---

@pytest.fixture
def mock_genai_client(mocker):
    """Gemini client whose generate_content returns whatever `reply()` sets."""
    client = MagicMock()
    mocker.patch("aiplayground.services.gemini.get_client", return_value=client)
    return client


def reply(client: MagicMock, text: str) -> None:
    client.models.generate_content.return_value = MagicMock(text=text)


def sent_prompt(client: MagicMock) -> str:
    return client.models.generate_content.call_args.kwargs["contents"][0]


@pytest.fixture
def mock_supabase(mocker):
    """Service-role Supabase client used by the history service."""
    client = MagicMock()
    mocker.patch("aiplayground.services.history.get_service_client", return_value=client)
    return client


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from aiplayground.main import api
    yield TestClient(api, follow_redirects=False)
    api.dependency_overrides.clear()


@pytest.fixture
def signed_in(api_client):
    from aiplayground.auth import get_current_user, get_optional_user
    from aiplayground.main import api
    api.dependency_overrides[get_optional_user] = lambda: USER
    api.dependency_overrides[get_current_user] = lambda: USER
    return USER
