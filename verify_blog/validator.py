import re

from .errors import (
    ArticleTooShortError,
    ForbiddenMarkupError,
    MetaDescriptionTooLongError,
    MissingFieldsError,
    TitleTooLongError,
    TooFewHeadingsError,
)
from .models import Article

MAX_TITLE_LENGTH = 100
MAX_META_DESCRIPTION_LENGTH = 200
MIN_ARTICLE_LENGTH = 500
MIN_H2_HEADINGS = 2

REQUIRED_FIELDS = (
    ("title", "title"),
    ("meta_description", "metaDescription"),
    ("article_html", "articleHtml"),
    ("excerpt", "excerpt"),
)

H2_OPEN_TAG = re.compile(r"<h2", re.IGNORECASE)
FORBIDDEN_TAG = re.compile(r"<(script|style)", re.IGNORECASE)


def count_h2_headings(html: str) -> int:
    return len(H2_OPEN_TAG.findall(html))


def validate_article(article: Article):
    """Raise the first ArticleValidationError the article triggers; return None if it passes."""
    missing = [name for attr, name in REQUIRED_FIELDS if not getattr(article, attr)]
    if missing:
        raise MissingFieldsError(missing)

    if len(article.title) > MAX_TITLE_LENGTH:
        raise TitleTooLongError(len(article.title), MAX_TITLE_LENGTH)

    if len(article.meta_description) > MAX_META_DESCRIPTION_LENGTH:
        raise MetaDescriptionTooLongError(len(article.meta_description), MAX_META_DESCRIPTION_LENGTH)

    if len(article.article_html) < MIN_ARTICLE_LENGTH:
        raise ArticleTooShortError(len(article.article_html), MIN_ARTICLE_LENGTH)

    h2_count = count_h2_headings(article.article_html)
    if h2_count < MIN_H2_HEADINGS:
        raise TooFewHeadingsError(h2_count, MIN_H2_HEADINGS)

    forbidden = sorted({tag.lower() for tag in FORBIDDEN_TAG.findall(article.article_html)})
    if forbidden:
        raise ForbiddenMarkupError(forbidden)
