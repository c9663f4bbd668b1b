"""
Tests for the Anthropic client, retry policy and response parsing.
"""

import json
import unittest
from unittest.mock import MagicMock, patch

import httpx

from verify_blog.clients.anthropic import ANTHROPIC_VERSION, API_URL, AnthropicClient, extract_text
from verify_blog.errors import (
    ConfigError,
    ErrorCategory,
    NetworkError,
    ResponseFormatError,
    ServiceError,
    TransientServiceError,
    classify_error,
)
from verify_blog.generator import ArticleGenerator, parse_article, strip_code_fence
from verify_blog.models import Topic
from tests.helpers import (
    ScriptedClient,
    connect_error,
    error_reply,
    make_article_data,
    message_response,
    ok_reply,
)


class TestStripCodeFence(unittest.TestCase):

    def test_json_fence(self):
        self.assertEqual(strip_code_fence('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_bare_fence(self):
        self.assertEqual(strip_code_fence('  ```\n{"a": 1}\n```  '), '{"a": 1}')

    def test_unfenced_text_is_only_trimmed(self):
        self.assertEqual(strip_code_fence('\n {"a": 1} \n'), '{"a": 1}')


class TestParseArticle(unittest.TestCase):

    def test_camel_case_payload(self):
        article = parse_article(json.dumps(make_article_data(title="Tytuł")))
        self.assertEqual(article.title, "Tytuł")
        self.assertTrue(article.article_html.startswith("<h2>Sekcja 1</h2>"))

    def test_fenced_payload(self):
        article = parse_article("```json\n" + json.dumps(make_article_data()) + "\n```")
        self.assertEqual(article.excerpt, "Dowiedz się, jak szybko zweryfikować kontrahenta.")

    def test_aliased_keys_are_normalized(self):
        article = parse_article(json.dumps({
            "TITLE": "T",
            "description": "D",
            "content": "<h2>x</h2>",
            "summary": "S",
        }))
        self.assertEqual(
            (article.title, article.meta_description, article.article_html, article.excerpt),
            ("T", "D", "<h2>x</h2>", "S"),
        )

    def test_missing_fields_are_left_for_the_validator(self):
        article = parse_article('{"title": "T"}')
        self.assertIsNone(article.excerpt)

    def test_invalid_json(self):
        with self.assertRaises(ResponseFormatError) as ctx:
            parse_article("Oto artykuł: {niepoprawny")
        self.assertIn("Failed to parse JSON", str(ctx.exception))
        self.assertIn("Raw: Oto artykuł", str(ctx.exception))

    def test_non_object_json(self):
        with self.assertRaises(ResponseFormatError):
            parse_article('["title"]')

    def test_wrong_field_type(self):
        with self.assertRaises(ResponseFormatError):
            parse_article('{"title": {"text": "T"}}')


class TestExtractText(unittest.TestCase):

    def test_first_text_block_is_used(self):
        response = {"content": [
            {"type": "thinking", "thinking": "..."},
            {"type": "text", "text": "first"},
            {"type": "text", "text": "second"},
        ]}
        self.assertEqual(extract_text(response), "first")

    def test_no_text_block(self):
        with self.assertRaises(ResponseFormatError):
            extract_text({"content": [{"type": "tool_use", "id": "x"}]})

    def test_missing_content(self):
        with self.assertRaises(ResponseFormatError):
            extract_text({"type": "message"})


class TestErrorClassifier(unittest.TestCase):

    def test_categories(self):
        self.assertEqual(classify_error(TransientServiceError(429, "slow down")), ErrorCategory.TRANSIENT)
        self.assertEqual(classify_error(NetworkError("down")), ErrorCategory.TRANSIENT)
        self.assertEqual(classify_error(httpx.ReadTimeout("timeout")), ErrorCategory.TRANSIENT)
        self.assertEqual(classify_error(ServiceError(400, "bad")), ErrorCategory.PERMANENT)
        self.assertEqual(classify_error(ResponseFormatError("bad")), ErrorCategory.PERMANENT)
        self.assertEqual(classify_error(ConfigError("no key")), ErrorCategory.CONFIG)
        self.assertEqual(classify_error(ValueError("x")), ErrorCategory.PERMANENT)


@patch("time.sleep")
class TestAnthropicClientRetry(unittest.TestCase):

    def test_request_format(self, mock_sleep):
        scripted = ScriptedClient([ok_reply(make_article_data())])
        scripted.client.create_message("Napisz artykuł")

        request = scripted.requests[0]
        self.assertEqual(str(request.url), API_URL)
        self.assertEqual(request.headers["x-api-key"], "test-key")
        self.assertEqual(request.headers["anthropic-version"], ANTHROPIC_VERSION)
        body = json.loads(request.content)
        self.assertEqual(body["model"], "test-model")
        self.assertEqual(body["max_tokens"], 4096)
        self.assertEqual(body["messages"], [{"role": "user", "content": "Napisz artykuł"}])
        mock_sleep.assert_not_called()

    def test_rate_limit_then_success(self, mock_sleep):
        scripted = ScriptedClient([error_reply(429, "rate limited"), ok_reply(make_article_data())])
        response = scripted.client.create_message("prompt")

        self.assertEqual(len(scripted.requests), 2)
        self.assertEqual(response["content"][0]["type"], "text")
        mock_sleep.assert_called_once_with(10)

    def test_two_server_errors_surface_the_last_one(self, mock_sleep):
        scripted = ScriptedClient([error_reply(500, "first"), error_reply(503, "second")])
        with self.assertRaises(TransientServiceError) as ctx:
            scripted.client.create_message("prompt")

        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(str(ctx.exception), "API 503: second")
        self.assertEqual(len(scripted.requests), 2)
        mock_sleep.assert_called_once_with(10)

    def test_client_error_is_not_retried(self, mock_sleep):
        scripted = ScriptedClient([error_reply(400, "invalid model"), ok_reply(make_article_data())])
        with self.assertRaises(ServiceError) as ctx:
            scripted.client.create_message("prompt")

        self.assertNotIsInstance(ctx.exception, TransientServiceError)
        self.assertEqual(len(scripted.requests), 1)
        mock_sleep.assert_not_called()

    def test_network_error_then_success(self, mock_sleep):
        scripted = ScriptedClient([connect_error(), ok_reply(make_article_data())])
        scripted.client.create_message("prompt")
        self.assertEqual(len(scripted.requests), 2)

    def test_network_error_twice(self, mock_sleep):
        scripted = ScriptedClient([connect_error("first"), connect_error("second")])
        with self.assertRaises(NetworkError) as ctx:
            scripted.client.create_message("prompt")
        self.assertIn("second", str(ctx.exception))
        self.assertIsInstance(ctx.exception.original_error, httpx.ConnectError)

    def test_undecodable_body_is_not_retried(self, mock_sleep):
        scripted = ScriptedClient([httpx.Response(200, text="<html>proxy</html>")])
        with self.assertRaises(ResponseFormatError):
            scripted.client.create_message("prompt")
        self.assertEqual(len(scripted.requests), 1)

    def test_missing_api_key(self, mock_sleep):
        with self.assertRaises(ConfigError):
            AnthropicClient("")


class TestArticleGenerator(unittest.TestCase):

    def setUp(self):
        self.topic = Topic(id=1, slug="test-post", titleHint="Biała lista VAT",
                           keywords=["biała lista", "NIP"], category="Poradniki")

    def test_generate_builds_prompt_and_parses_reply(self):
        client = MagicMock(spec=AnthropicClient)
        client.create_message.return_value = message_response(json.dumps(make_article_data(title="Biała lista")))

        article = ArticleGenerator(client).generate(self.topic)

        self.assertEqual(article.title, "Biała lista")
        prompt = client.create_message.call_args[0][0]
        self.assertIn("TEMAT: Biała lista VAT", prompt)
        self.assertIn("SŁOWA KLUCZOWE SEO: biała lista, NIP", prompt)
        self.assertIn("KATEGORIA: Poradniki", prompt)
        self.assertIn('"metaDescription"', prompt)

    def test_service_errors_propagate(self):
        client = MagicMock(spec=AnthropicClient)
        client.create_message.side_effect = ServiceError(401, "invalid x-api-key")

        with self.assertRaises(ServiceError):
            ArticleGenerator(client).generate(self.topic)


if __name__ == '__main__':
    unittest.main()
