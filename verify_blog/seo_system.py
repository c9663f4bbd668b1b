"""
Schema.org JSON-LD markup for published articles.

This module provides:
- Article markup (headline, description, dates, publisher)
- BreadcrumbList markup (home → blog → article)
- Safe embedding of JSON-LD inside a <script> element
"""

import json
from typing import Dict, List, Tuple

from .config import DEFAULT_MAIN_URL


class SchemaMarkupGenerator:
    """Generate Schema.org JSON-LD markup for content."""

    def __init__(self, main_url: str = DEFAULT_MAIN_URL, publisher_name: str = "VERIFY"):
        self.main_url = main_url
        self.publisher_name = publisher_name

    def generate_article_schema(self, title: str, description: str, date_published: str) -> Dict:
        """
        Generate Schema.org Article markup.

        Args:
            title: Article title
            description: Meta description
            date_published: ISO format date, also used as dateModified

        Returns:
            Schema.org JSON-LD dictionary
        """
        return {
            "@context": "https://schema.org",
            "@type": "Article",
            "headline": title,
            "description": description,
            "datePublished": date_published,
            "dateModified": date_published,
            "author": {
                "@type": "Organization",
                "name": self.publisher_name
            },
            "publisher": {
                "@type": "Organization",
                "name": self.publisher_name,
                "url": self.main_url
            }
        }

    def generate_breadcrumb_schema(self, breadcrumbs: List[Tuple[str, str]]) -> Dict:
        """
        Generate Schema.org BreadcrumbList markup.

        Args:
            breadcrumbs: List of (name, url) tuples, outermost first

        Returns:
            Schema.org BreadcrumbList JSON-LD dictionary
        """
        items = []

        for i, (name, url) in enumerate(breadcrumbs, start=1):
            items.append({
                "@type": "ListItem",
                "position": i,
                "name": name,
                "item": url
            })

        return {
            "@context": "https://schema.org",
            "@type": "BreadcrumbList",
            "itemListElement": items
        }

    def wrap_schema_in_script(self, schema: Dict) -> str:
        """Wrap schema in a JSON-LD script tag. '</' is escaped so text cannot close the element."""
        payload = json.dumps(schema, indent=2, ensure_ascii=False).replace("</", "<\\/")
        return f'<script type="application/ld+json">\n{payload}\n</script>'
