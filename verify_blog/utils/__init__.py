"""
Utility functions for the VERIFY blog publisher.
"""

import re

# ---------------------------------------------------------------------------
# Field alias mapping: key names the model sometimes returns → canonical
# snake_case field names of the Article model.
#
# Keys are first converted to snake_case, then looked up here, so a model
# that answers with "META_DESC" (→ "meta_desc") still lands on
# "meta_description".
# ---------------------------------------------------------------------------
FIELD_ALIASES: dict = {
    # article_html
    "html": "article_html",
    "content": "article_html",
    "html_content": "article_html",
    "article_content": "article_html",
    "article": "article_html",
    "body": "article_html",
    "body_html": "article_html",
    "article_body": "article_html",
    # meta_description
    "description": "meta_description",
    "meta": "meta_description",
    "meta_desc": "meta_description",
    "seo_description": "meta_description",
    # title
    "seo_title": "title",
    "article_title": "title",
    # excerpt
    "summary": "excerpt",
    "lead": "excerpt",
}


def to_snake_case(key: str) -> str:
    """
    'metaDescription' → 'meta_description', 'ARTICLE_HTML' → 'article_html',
    'HTMLContent' → 'html_content'.
    """
    # Split "ABCDef" → "ABC_Def", then "camelCase" → "camel_Case"
    s1 = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', str(key))
    s2 = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s1)
    return s2.lower()


def normalize_dict_keys(data: dict) -> dict:
    """
    Normalize dictionary keys to snake_case, then apply :data:`FIELD_ALIASES`.

    A canonical key present in the input wins over an alias that maps onto it,
    whatever their order.

    Returns the input unchanged if it is not a dict.
    """
    if not isinstance(data, dict):
        return data

    normalized = {}
    aliased = {}
    for key, value in data.items():
        snake_key = to_snake_case(key)
        canonical_key = FIELD_ALIASES.get(snake_key)
        if canonical_key is None:
            normalized[snake_key] = value
        else:
            aliased.setdefault(canonical_key, value)

    for key, value in aliased.items():
        normalized.setdefault(key, value)
    return normalized
