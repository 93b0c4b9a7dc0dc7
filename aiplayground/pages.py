"""Server-rendered HTML pages. Each tool page posts the chosen file (as base64 JSON) to its API route."""

import json
from html import escape

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from aiplayground.exceptions import ConfigurationError, IntegrationError
from aiplayground.models.auth import AuthUser
from aiplayground.models.history import ContentType
from aiplayground.services import history as history_service

PROTECTED_PREFIXES = (
    "/dashboard",
    "/history",
    "/image-analysis",
    "/document-summarization",
    "/conversation-analysis",
)

TOOLS = [
    {
        "path": "/image-analysis",
        "title": "Image Analysis",
        "description": "Generate detailed descriptions and insights from your images",
        "endpoint": "/api/analyze-image",
        "field": "imageData",
        "accept": "image/*",
    },
    {
        "path": "/document-summarization",
        "title": "Document Summarization",
        "description": "Summarize PDF, DOC, DOCX, TXT and MD files or any web article",
        "endpoint": "/api/analyze-document",
        "field": "documentData",
        "accept": ".pdf,.doc,.docx,.txt,.md",
    },
    {
        "path": "/conversation-analysis",
        "title": "Conversation Analysis",
        "description": "Transcribe audio, separate speakers and summarize the discussion",
        "endpoint": "/api/analyze-conversation",
        "field": "audioData",
        "accept": "audio/*",
    },
]

_UPLOAD_SCRIPT = """
<script>
async function submitFile(event, endpoint, field) {
  event.preventDefault();
  const file = event.target.elements.file.files[0];
  const out = document.getElementById("result");
  if (!file) { out.textContent = "Choose a file first."; return; }
  out.textContent = "Analyzing...";
  const data = await new Promise((resolve, reject) => {
    const reader = new FileReader();
    reader.onload = () => resolve(reader.result.split(",")[1]);
    reader.onerror = reject;
    reader.readAsDataURL(file);
  });
  const body = {mimeType: file.type || "text/plain", fileName: file.name};
  body[field] = data;
  const resp = await fetch(endpoint, {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify(body)});
  out.textContent = JSON.stringify(await resp.json(), null, 2);
}
async function submitUrl(event) {
  event.preventDefault();
  const out = document.getElementById("result");
  out.textContent = "Analyzing...";
  const resp = await fetch("/api/analyze-url", {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({url: event.target.elements.url.value})});
  out.textContent = JSON.stringify(await resp.json(), null, 2);
}
</script>
"""

_AUTH_SCRIPT = """
<script>
async function submitAuth(event, endpoint) {
  event.preventDefault();
  const form = event.target.elements;
  const resp = await fetch(endpoint, {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({email: form.email.value, password: form.password.value})});
  const data = await resp.json();
  if (resp.ok && endpoint.endsWith("signin")) { window.location = "/dashboard"; return; }
  document.getElementById("result").textContent = data.message;
}
async function signOut() {
  await fetch("/api/auth/signout", {method: "POST"});
  window.location = "/";
}
</script>
"""


def _render(title: str, body: str, user: AuthUser | None = None, script: str = "") -> HTMLResponse:
    if user:
        nav = f'<a href="/dashboard">Dashboard</a> | <a href="/history">History</a> | {escape(user.email or "")} <button onclick="signOut()">Sign out</button>'
    else:
        nav = '<a href="/auth/signin">Sign in</a> | <a href="/auth/signup">Sign up</a>'
    return HTMLResponse(
        f"""<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>{escape(title)} - AI Playground</title></head>
<body>
<nav><a href="/">AI Playground</a> | {nav}</nav>
<main><h1>{escape(title)}</h1>
{body}
</main>
{_AUTH_SCRIPT}{script}
</body></html>"""
    )


def _user(request: Request) -> AuthUser | None:
    return getattr(request.state, "user", None)


def _tool_links() -> str:
    items = "".join(
        f'<li><a href="{t["path"]}">{escape(t["title"])}</a>: {escape(t["description"])}</li>' for t in TOOLS
    )
    return f"<ul>{items}</ul>"


router = APIRouter(include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    body = "<p>Analyze conversations, images, documents and web pages with Gemini.</p>" + _tool_links()
    return _render("AI Playground", body, _user(request))


@router.get("/auth/signin", response_class=HTMLResponse)
def signin_page(request: Request):
    body = """<form onsubmit="submitAuth(event, '/api/auth/signin')">
<input name="email" type="email" placeholder="Email" required>
<input name="password" type="password" placeholder="Password" required>
<button type="submit">Sign in</button></form>
<p>No account? <a href="/auth/signup">Sign up</a></p><p id="result"></p>"""
    return _render("Sign in", body)


@router.get("/auth/signup", response_class=HTMLResponse)
def signup_page(request: Request):
    body = """<form onsubmit="submitAuth(event, '/api/auth/signup')">
<input name="email" type="email" placeholder="Email" required>
<input name="password" type="password" placeholder="Password" required>
<button type="submit">Create account</button></form>
<p>Already registered? <a href="/auth/signin">Sign in</a></p><p id="result"></p>"""
    return _render("Sign up", body)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request):
    user = _user(request)
    greeting = f"<p>Welcome back, {escape(user.email or 'friend')}.</p>" if user else ""
    return _render("Dashboard", greeting + _tool_links(), user)


def _tool_page(request: Request, tool: dict) -> HTMLResponse:
    body = f"""<p>{escape(tool["description"])}</p>
<form onsubmit="submitFile(event, '{tool["endpoint"]}', '{tool["field"]}')">
<input name="file" type="file" accept="{tool["accept"]}"><button type="submit">Analyze</button></form>"""
    if tool["path"] == "/document-summarization":
        body += """<form onsubmit="submitUrl(event)">
<input name="url" type="url" placeholder="https://example.com/article"><button type="submit">Analyze URL</button></form>"""
    body += '<pre id="result"></pre>'
    return _render(tool["title"], body, _user(request), _UPLOAD_SCRIPT)


@router.get("/image-analysis", response_class=HTMLResponse)
def image_analysis_page(request: Request):
    return _tool_page(request, TOOLS[0])


@router.get("/document-summarization", response_class=HTMLResponse)
def document_summarization_page(request: Request):
    return _tool_page(request, TOOLS[1])


@router.get("/conversation-analysis", response_class=HTMLResponse)
def conversation_analysis_page(request: Request):
    return _tool_page(request, TOOLS[2])


_HISTORY_SCRIPT = """
<script>
async function deleteHistoryItem(id) {
  const resp = await fetch("/api/content-history?id=" + encodeURIComponent(id), {method: "DELETE"});
  if (resp.ok) { window.location.reload(); return; }
  document.getElementById("result").textContent = (await resp.json()).message;
}
async function clearHistory() {
  if (!confirm("Delete all of your history?")) return;
  const resp = await fetch("/api/content-history/all", {method: "DELETE"});
  if (resp.ok) { window.location.reload(); return; }
  document.getElementById("result").textContent = (await resp.json()).message;
}
</script>
"""

_HISTORY_CONTROLS = '<p><button onclick="window.location.reload()">Refresh</button>{clear}</p><p id="result"></p>'


@router.get("/history", response_class=HTMLResponse)
def history_page(request: Request, type: ContentType | None = None):
    user = _user(request)
    if user is None:
        return _render("History", "<p>Sign in to see your history.</p>")
    try:
        page = history_service.get_history(user.id, content_type=type)
    except (ConfigurationError, IntegrationError) as e:
        return _render("History", f"<p>Could not load history: {escape(str(e))}</p>", user)
    if not page.data:
        body = _HISTORY_CONTROLS.format(clear="") + "<p>No history yet. Try one of the tools on the dashboard.</p>"
        return _render("History", body, user, _HISTORY_SCRIPT)
    rows = []
    for item in page.data:
        source = item.input_data.url or history_service.format_file_info(item.file_info) or item.input_data.prompt or ""
        delete = f'<button onclick="deleteHistoryItem({escape(json.dumps(item.id))})">Delete</button>'
        rows.append(
            f"<tr><td>{escape(item.content_type)}</td><td>{escape(source)}</td>"
            f"<td>{escape(history_service.output_preview(item))}</td><td>{escape(item.created_at)}</td>"
            f"<td>{delete}</td></tr>"
        )
    more = "<p>Showing the latest entries.</p>" if page.has_more else ""
    body = (
        _HISTORY_CONTROLS.format(clear=' <button onclick="clearHistory()">Clear all</button>')
        + "<table><tr><th>Type</th><th>Input</th><th>Result</th><th>Created</th><th></th></tr>"
        + "".join(rows)
        + "</table>"
        + more
    )
    return _render("History", body, user, _HISTORY_SCRIPT)
