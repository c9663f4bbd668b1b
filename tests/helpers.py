"""
Shared fixtures for the publisher tests.
"""

import json
from datetime import datetime, timezone
from typing import List, Union

import httpx

from verify_blog.clients.anthropic import AnthropicClient

FIXED_NOW = datetime(2026, 3, 7, 9, 5, tzinfo=timezone.utc)

PARAGRAPH = (
    "Weryfikacja kontrahenta po NIP pozwala ograniczyć ryzyko współpracy z nierzetelną firmą. "
    "Sprawdź status VAT, wpis w KRS oraz historię zaległości przed podpisaniem umowy."
)

INDEX_HTML = """<!DOCTYPE html>
<html lang="pl">
<body>
  <header><h1>Blog VERIFY</h1></header>
  <div class="container">
    <article><h2><a href="https://blog.verify24.pl/old.html">Stary wpis</a></h2></article>
  </div>
</body>
</html>
"""

SITEMAP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
    <url>
      <loc>https://blog.verify24.pl/old.html</loc>
    </url>
</urlset>
"""


def make_article_html(headings: int = 4) -> str:
    sections = [f"<h2>Sekcja {i}</h2>\n<p>{PARAGRAPH}</p>" for i in range(1, headings + 1)]
    return "\n".join(sections)


def make_article_data(**overrides) -> dict:
    data = {
        "title": "Jak sprawdzić kontrahenta po NIP",
        "metaDescription": "Praktyczny poradnik: jak krok po kroku zweryfikować firmę po numerze NIP.",
        "articleHtml": make_article_html(4),
        "excerpt": "Dowiedz się, jak szybko zweryfikować kontrahenta.",
    }
    data.update(overrides)
    return data


def message_response(text: str) -> dict:
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
    }


Reply = Union[httpx.Response, Exception]


class ScriptedClient:
    """AnthropicClient over an httpx.MockTransport that plays back ``replies`` in order."""

    def __init__(self, replies: List[Reply]):
        self.replies = list(replies)
        self.requests: List[httpx.Request] = []
        transport = httpx.MockTransport(self._handle)
        self.client = AnthropicClient("test-key", model="test-model",
                                      http_client=httpx.Client(transport=transport))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def ok_reply(data: dict) -> httpx.Response:
    return httpx.Response(200, json=message_response(json.dumps(data, ensure_ascii=False)))


def error_reply(status: int, body: str) -> httpx.Response:
    return httpx.Response(status, text=body)


def connect_error(message: str = "connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(message)
