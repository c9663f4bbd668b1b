"""
Article prompt for the VERIFY blog (Polish, counterparty verification).
"""

from .models import Topic


def build_article_prompt(topic: Topic) -> str:
    keywords = ", ".join(topic.keywords)
    return f"""Jesteś ekspertem ds. weryfikacji kontrahentów i bezpieczeństwa biznesowego w Polsce.
Napisz artykuł na blog VERIFY (verify24.pl) - systemu do weryfikacji kontrahentów po NIP.

TEMAT: {topic.title_hint}
SŁOWA KLUCZOWE SEO: {keywords}
KATEGORIA: {topic.category}

WYMAGANIA:
1. Artykuł profesjonalny, merytoryczny, 800-1200 słów
2. Pisz po polsku, naturalnym językiem (nie przesadzaj z uprzejmościami)
3. Minimum 4 nagłówki H2
4. Używaj list punktowanych (ul/li) i numerowanych (ol/li) gdzie pasuje
5. Organicznie wpleć słowa kluczowe w tekst
6. Na końcu krótki akapit o tym jak VERIFY może pomóc w tym temacie
7. NIE używaj tagów <script>, <style>, <img>
8. Używaj TYLKO tagów: h2, h3, p, ul, ol, li, strong, em, a
9. Linki do zewnętrznych źródeł (rejestry rządowe itp.) używaj z target="_blank"

ODPOWIEDZ WYŁĄCZNIE w formacie JSON (bez markdown code blocks):
{{
  "title": "Pełny tytuł artykułu (max 70 znaków)",
  "metaDescription": "Opis meta dla SEO (max 160 znaków)",
  "articleHtml": "Treść artykułu w HTML (h2, p, ul, li, strong, etc.)",
  "excerpt": "Krótki opis artykułu na stronę główną (1-2 zdania, max 200 znaków)"
}}"""
