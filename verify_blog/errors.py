"""
Error hierarchy for the publisher.

Every error carries an :class:`ErrorCategory`. The retry policy in the
Anthropic client looks only at :func:`classify_error`, never at messages.
"""

from enum import Enum
from typing import List, Optional

import httpx


class ErrorCategory(str, Enum):
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    CONFIG = "config"


class PublisherError(Exception):
    """Base class for all publisher errors."""

    category = ErrorCategory.PERMANENT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, category={self.category.value})"


class ConfigError(PublisherError):
    """Required configuration is missing."""

    category = ErrorCategory.CONFIG


# --- Generation service -----------------------------------------------------

class ServiceError(PublisherError):
    """Non-success HTTP status that is not worth retrying."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"API {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TransientServiceError(ServiceError):
    """Rate limit (429) or server-side (5xx) failure."""

    category = ErrorCategory.TRANSIENT


class NetworkError(PublisherError):
    """Connection, DNS or read failure below the HTTP layer."""

    category = ErrorCategory.TRANSIENT

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class ResponseFormatError(PublisherError):
    """The service answered, but not with a usable article payload."""


# --- Validation -------------------------------------------------------------

class ArticleValidationError(PublisherError):
    """Generated content breaks a structural rule."""


class MissingFieldsError(ArticleValidationError):
    def __init__(self, fields: List[str]):
        super().__init__(
            "Article missing required fields (title, metaDescription, articleHtml, excerpt): "
            + ", ".join(fields)
        )
        self.fields = fields


class TitleTooLongError(ArticleValidationError):
    def __init__(self, length: int, limit: int):
        super().__init__(f"Title too long: {length} chars (max {limit})")
        self.length = length
        self.limit = limit


class MetaDescriptionTooLongError(ArticleValidationError):
    def __init__(self, length: int, limit: int):
        super().__init__(f"Meta description too long: {length} chars (max {limit})")
        self.length = length
        self.limit = limit


class ArticleTooShortError(ArticleValidationError):
    def __init__(self, length: int, minimum: int):
        super().__init__(f"Article HTML too short: {length} chars (min {minimum})")
        self.length = length
        self.minimum = minimum


class TooFewHeadingsError(ArticleValidationError):
    def __init__(self, count: int, minimum: int):
        super().__init__(f"Article has only {count} H2 headings (min {minimum})")
        self.count = count
        self.minimum = minimum


class ForbiddenMarkupError(ArticleValidationError):
    def __init__(self, tags: List[str]):
        super().__init__(f"Article contains forbidden tags: {', '.join(tags)}")
        self.tags = tags


# --- Storage ----------------------------------------------------------------

class DocumentStructureError(PublisherError):
    """An existing site document lacks the marker we insert at."""

    def __init__(self, path: str, marker: str):
        super().__init__(f"Could not find {marker!r} in {path}")
        self.path = path
        self.marker = marker


class QueueError(PublisherError):
    """The topic queue file cannot be read, parsed or written."""


class InvalidTopicError(PublisherError):
    """The selected queue entry does not match the Topic model."""


class InvalidTransitionError(PublisherError):
    """A topic status change that is not pending -> published/failed."""


def classify_error(exc: BaseException) -> ErrorCategory:
    """Map any exception onto the closed set of categories."""
    if isinstance(exc, PublisherError):
        return exc.category
    if isinstance(exc, httpx.TransportError):
        return ErrorCategory.TRANSIENT
    return ErrorCategory.PERMANENT


def is_transient(exc: BaseException) -> bool:
    return classify_error(exc) == ErrorCategory.TRANSIENT
