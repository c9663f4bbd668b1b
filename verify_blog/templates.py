"""
HTML/XML fragments for the VERIFY blog: article page, listing card, sitemap entry.

Everything here is a pure function of its arguments; the publication date is
always passed in.
"""

import html
import re
from datetime import datetime, timezone
from typing import Optional

from .config import DEFAULT_MAIN_URL, DEFAULT_SITE_URL
from .models import utc_timestamp
from .seo_system import SchemaMarkupGenerator

CSS = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
      background: #f8fafc;
      color: #1e293b;
      line-height: 1.6;
    }
    .container { max-width: 900px; margin: 0 auto; padding: 40px 20px; }
    header {
      background: linear-gradient(135deg, #1e40af 0%, #7c3aed 100%);
      color: white;
      padding: 60px 20px;
      text-align: center;
      margin-bottom: 40px;
    }
    h1 { font-size: 42px; font-weight: bold; margin-bottom: 16px; }
    .subtitle { font-size: 18px; opacity: 0.9; }
    a { color: #3b82f6; text-decoration: none; }
    a:hover { text-decoration: underline; }
    .cta-box {
      background: linear-gradient(135deg, #fbbf24 0%, #f59e0b 100%);
      color: #1e293b;
      padding: 30px;
      border-radius: 12px;
      margin: 40px 0;
      text-align: center;
    }
    .cta-box h3 { margin-bottom: 12px; font-size: 24px; }
    .cta-box p { margin-bottom: 20px; opacity: 0.9; }
    .cta-button {
      display: inline-block;
      background: white;
      color: #1e40af;
      padding: 14px 32px;
      border-radius: 8px;
      font-weight: bold;
      text-decoration: none;
      transition: transform 0.2s;
    }
    .cta-button:hover { transform: scale(1.05); text-decoration: none; }
    footer {
      text-align: center;
      padding: 40px 20px;
      color: #94a3b8;
      border-top: 1px solid #e2e8f0;
      margin-top: 60px;
    }"""

ARTICLE_CSS = """
    article h2 { font-size: 28px; margin: 32px 0 16px; color: #1e293b; }
    article h3 { font-size: 22px; margin: 24px 0 12px; color: #334155; }
    article p { margin-bottom: 16px; color: #475569; }
    article ul, article ol { margin: 0 0 16px 24px; color: #475569; }
    article li { margin-bottom: 8px; }
    article strong { color: #1e293b; }"""

H2_TAG = re.compile(r"<h2[^>]*>", re.IGNORECASE)


def build_cta_box(main_url: str = DEFAULT_MAIN_URL) -> str:
    return f"""
  <div class="cta-box">
    <h3>Sprawdź kontrahenta po NIP w kilka sekund</h3>
    <p>Raport PDF + scoring ryzyka 0-100 + dane finansowe z KRS</p>
    <a href="{escape_attr(main_url)}/verify" class="cta-button">Sprawdź teraz →</a>
  </div>"""


def escape_html(value: str) -> str:
    """Escape for HTML text content."""
    return html.escape(value, quote=False).replace('"', "&quot;")


def escape_attr(value: str) -> str:
    """Escape for a double- or single-quoted attribute value."""
    return html.escape(value, quote=True)


def _as_utc(date: datetime) -> datetime:
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def format_date(date: datetime) -> str:
    """Polish display date: 7.03.2026."""
    d = _as_utc(date)
    return f"{d.day}.{d.month:02d}.{d.year}"


def format_date_iso(date: datetime) -> str:
    return utc_timestamp(date)


def format_date_short(date: datetime) -> str:
    return _as_utc(date).date().isoformat()


def article_url(slug: str, site_url: str = DEFAULT_SITE_URL) -> str:
    return f"{site_url}/{slug}.html"


def insert_cta_in_middle(article_html: str, cta_box: Optional[str] = None) -> str:
    """
    Place the CTA box before the middle H2 (zero-based index count // 2).
    With fewer than two H2 headings the box goes after the content.
    """
    cta_box = cta_box if cta_box is not None else CTA_BOX
    headings = list(H2_TAG.finditer(article_html))
    if len(headings) < 2:
        return article_html + "\n" + cta_box

    insert_pos = headings[len(headings) // 2].start()
    return article_html[:insert_pos] + "\n" + cta_box + "\n" + article_html[insert_pos:]


def build_article_page(slug: str, title: str, meta_description: str, article_html: str,
                       date: datetime, site_url: str = DEFAULT_SITE_URL,
                       main_url: str = DEFAULT_MAIN_URL) -> str:
    """Full standalone HTML page for one article."""
    url = escape_attr(article_url(slug, site_url))
    site = escape_attr(site_url)
    main = escape_attr(main_url)
    cta_box = build_cta_box(main_url)
    body = insert_cta_in_middle(article_html, cta_box)

    schema = SchemaMarkupGenerator(main_url=main_url)
    article_schema = schema.wrap_schema_in_script(
        schema.generate_article_schema(title, meta_description, format_date_iso(date))
    )
    breadcrumb_schema = schema.wrap_schema_in_script(
        schema.generate_breadcrumb_schema([
            ("Strona główna", main_url),
            ("Poradniki", site_url),
            (title, article_url(slug, site_url)),
        ])
    )

    return f"""<!DOCTYPE html>
<html lang="pl">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_html(title)} | VERIFY</title>
  <meta name="description" content="{escape_attr(meta_description)}">
  <link rel="canonical" href="{url}">

  <!-- Open Graph -->
  <meta property="og:title" content="{escape_attr(title)} | VERIFY">
  <meta property="og:description" content="{escape_attr(meta_description)}">
  <meta property="og:url" content="{url}">
  <meta property="og:type" content="article">

  <!-- Twitter Card -->
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="{escape_attr(title)} | VERIFY">
  <meta name="twitter:description" content="{escape_attr(meta_description)}">

  <!-- Favicon -->
  <link rel="icon" type="image/png" href="{main}/favicon.png">

  <style>{CSS}{ARTICLE_CSS}
  </style>
</head>
<body>

  <header>
    <h1>{escape_html(title)}</h1>
    <p class="subtitle">{format_date(date)}</p>
  </header>

  <div class="container">
    <nav style="margin-bottom: 24px;">
      <a href="{site}">← Wszystkie poradniki</a>
    </nav>

    <article style="background: white; padding: 40px; border-radius: 12px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
{body}
    </article>

{cta_box}
  </div>

  <!-- Schema.org Article -->
  {article_schema}

  <!-- Schema.org BreadcrumbList -->
  {breadcrumb_schema}

  <footer>
    <p><a href="{main}">← Wróć do VERIFY</a> | <a href="{site}">Blog</a></p>
    <p style="margin-top: 12px; font-size: 14px;">© {_as_utc(date).year} VERIFY - Inteligentna Weryfikacja Kontrahentów</p>
  </footer>
</body>
</html>"""


def build_article_card(slug: str, title: str, excerpt: str, date: datetime,
                       site_url: str = DEFAULT_SITE_URL) -> str:
    """Card fragment for the index.html listing."""
    url = escape_attr(article_url(slug, site_url))
    return f"""    <article style="background: white; padding: 30px; border-radius: 12px; margin-bottom: 24px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">

      <h2 style="font-size: 28px; margin-bottom: 12px;">
        <a href="{url}" style="color: #1e293b;">{escape_html(title)}</a>
      </h2>
      <p style="color: #64748b; font-size: 14px; margin-bottom: 16px;">{format_date(date)}</p>
      <p style="color: #475569; margin-bottom: 16px;">{escape_html(excerpt)}</p>
      <a href="{url}" style="color: #3b82f6; font-weight: 600;">Czytaj więcej →</a>
    </article>"""


def build_sitemap_entry(slug: str, date: datetime, site_url: str = DEFAULT_SITE_URL) -> str:
    return f"""<url>
      <loc>{html.escape(article_url(slug, site_url), quote=False)}</loc>
      <lastmod>{format_date_short(date)}</lastmod>
      <changefreq>monthly</changefreq>
      <priority>0.8</priority>
    </url>"""


CTA_BOX = build_cta_box()
