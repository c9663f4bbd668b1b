"""
Article generation: prompt → Anthropic API → parsed Article.
"""

import json
import logging
import re

from pydantic import ValidationError

from .clients.anthropic import AnthropicClient, extract_text
from .errors import ResponseFormatError
from .models import Article, Topic
from .prompts import build_article_prompt
from .utils import normalize_dict_keys

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 500

_OPENING_FENCE = re.compile(r"^```(?:json)?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?```$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)
    return text


def parse_article(text: str) -> Article:
    """Decode the model's reply into an Article (fields are not validated here)."""
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(
            f"Failed to parse JSON from API response: {e}\nRaw: {payload[:RAW_PREVIEW_CHARS]}"
        ) from e

    if not isinstance(data, dict):
        raise ResponseFormatError(
            f"Expected a JSON object in API response, got {type(data).__name__}"
            f"\nRaw: {payload[:RAW_PREVIEW_CHARS]}"
        )

    try:
        return Article.model_validate(normalize_dict_keys(data))
    except ValidationError as e:
        raise ResponseFormatError(f"API response does not match the article format: {e}") from e


class ArticleGenerator:
    def __init__(self, client: AnthropicClient):
        self.client = client

    def generate(self, topic: Topic) -> Article:
        prompt = build_article_prompt(topic)
        response = self.client.create_message(prompt)
        article = parse_article(extract_text(response))
        logger.info(f"✅ Content generated. Title: '{article.title}'")
        return article
