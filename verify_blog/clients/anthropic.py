import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import RetryCallState, retry, retry_if_exception, stop_after_attempt, wait_fixed

from ..config import DEFAULT_MODEL
from ..errors import (
    ConfigError,
    NetworkError,
    ResponseFormatError,
    ServiceError,
    TransientServiceError,
    is_transient,
)

logger = logging.getLogger(__name__)

API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 4096

# One retry, fixed delay
MAX_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 10


def _log_retry(retry_state: RetryCallState):
    error = retry_state.outcome.exception()
    logger.warning(
        f"⚠️ {error} (attempt {retry_state.attempt_number}/{MAX_ATTEMPTS}), "
        f"retrying in {RETRY_DELAY_SECONDS}s..."
    )


class AnthropicClient:
    """Thin client for the Anthropic Messages API.

    Each call to :meth:`create_message` sends one request per attempt.
    Rate limits, 5xx responses and network failures are retried once after
    a fixed delay; everything else fails on the first attempt.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL,
                 http_client: Optional[httpx.Client] = None, timeout: float = 120.0):
        if not api_key:
            raise ConfigError("ANTHROPIC_API_KEY environment variable is required")
        self.api_key = api_key
        self.model = model
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout)

    def close(self):
        if self._owns_http_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    @retry(
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait_fixed(RETRY_DELAY_SECONDS),
        retry=retry_if_exception(is_transient),
        before_sleep=_log_retry,
        reraise=True,
    )
    def create_message(self, prompt: str, max_tokens: int = MAX_TOKENS) -> Dict[str, Any]:
        """Send a single-turn user message and return the decoded response body."""
        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        logger.info(f"Calling Anthropic API (Model: {self.model})")
        try:
            response = self.http_client.post(API_URL, headers=self._headers(), json=payload)
        except httpx.TransportError as e:
            raise NetworkError(f"Network error: {e}", original_error=e) from e

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientServiceError(response.status_code, response.text)
        if not response.is_success:
            raise ServiceError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseFormatError(f"API response is not valid JSON: {e}") from e


def extract_text(response: Dict[str, Any]) -> str:
    """Return the text of the first ``text`` content block."""
    blocks = response.get("content") if isinstance(response, dict) else None
    for block in blocks or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str):
                return text
    raise ResponseFormatError("No text content in API response")
