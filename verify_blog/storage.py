"""
Persistence for the topic queue and the static site files.

The queue is read whole and rewritten whole. Site documents are updated by
inserting fragments at fixed markers; all new contents are computed before
anything is written, so a missing marker leaves the site untouched.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .errors import DocumentStructureError, QueueError
from .models import QueueEntry, RawTopic, Topic

logger = logging.getLogger(__name__)

LISTING_MARKER = '<div class="container">'
SITEMAP_CLOSING_TAG = "</urlset>"


# --- Atomic writers ---------------------------------------------------------

def save_text_atomic(path: Path, text: str):
    """Write to a temp file in the same directory, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=str(path.parent),
                            prefix=f".{path.name}.", suffix=".tmp") as tmp:
        tmp.write(text)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_name = tmp.name
    Path(tmp_name).replace(path)


# --- Topic queue ------------------------------------------------------------

class TopicRepository(ABC):
    """Load → mutate in memory → save. Implementations own the storage format."""

    @abstractmethod
    def load(self) -> List[QueueEntry]:
        ...

    @abstractmethod
    def save(self, topics: Sequence[QueueEntry]):
        ...


def describe_validation_error(error: ValidationError) -> str:
    """One line per pydantic error, e.g. "slug: String should match pattern ..."."""
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "record"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)


def parse_entry(record) -> QueueEntry:
    """Topic when the record validates, otherwise a RawTopic kept verbatim."""
    try:
        return Topic.model_validate(record)
    except ValidationError as e:
        return RawTopic(record, describe_validation_error(e))


class JsonTopicRepository(TopicRepository):
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[QueueEntry]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise QueueError(f"Topic queue not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise QueueError(f"Topic queue is not valid JSON ({self.path}): {e}") from e
        except UnicodeDecodeError as e:
            raise QueueError(f"Topic queue is not valid UTF-8 ({self.path}): {e}") from e
        except OSError as e:
            raise QueueError(f"Could not read topic queue {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise QueueError(f"Topic queue must be a JSON list: {self.path}")

        entries = [parse_entry(record) for record in raw]
        for entry in entries:
            if isinstance(entry, RawTopic):
                logger.debug(f"Topic {entry.id} kept as stored: {entry.problem}")
        return entries

    def save(self, topics: Sequence[QueueEntry]):
        records = [topic.to_record() for topic in topics]
        try:
            save_text_atomic(self.path, json.dumps(records, indent=2, ensure_ascii=False) + "\n")
        except OSError as e:
            raise QueueError(f"Could not write topic queue {self.path}: {e}") from e
        logger.debug(f"Saved {len(records)} topics to {self.path}")


def select_pending(topics: Sequence[QueueEntry]) -> Optional[QueueEntry]:
    """First pending topic in stored order, or None."""
    return next((topic for topic in topics if topic.is_pending), None)


# --- Site documents ---------------------------------------------------------

def insert_listing_card(document: str, card: str, source: str = "index.html") -> str:
    pos = document.find(LISTING_MARKER)
    if pos == -1:
        raise DocumentStructureError(source, LISTING_MARKER)
    insert_pos = pos + len(LISTING_MARKER)
    return document[:insert_pos] + "\n" + card + "\n" + document[insert_pos:]


def insert_sitemap_entry(document: str, entry: str, source: str = "sitemap.xml") -> str:
    pos = document.find(SITEMAP_CLOSING_TAG)
    if pos == -1:
        raise DocumentStructureError(source, SITEMAP_CLOSING_TAG)
    return document[:pos] + entry + "\n" + document[pos:]


@dataclass
class SiteUpdate:
    """Fully computed file contents for one publication, not yet on disk."""

    article_path: Path
    article_html: str
    index_path: Path
    index_html: str
    sitemap_path: Path
    sitemap_xml: str

    def commit(self):
        save_text_atomic(self.article_path, self.article_html)
        logger.info(f"Created: {self.article_path.name}")
        save_text_atomic(self.index_path, self.index_html)
        logger.info(f"Updated: {self.index_path.name}")
        save_text_atomic(self.sitemap_path, self.sitemap_xml)
        logger.info(f"Updated: {self.sitemap_path.name}")


class StaticSite:
    """The blog's document root: <slug>.html pages, index.html and sitemap.xml."""

    def __init__(self, root: Path, index_name: str = "index.html", sitemap_name: str = "sitemap.xml"):
        self.root = Path(root)
        self.index_path = self.root / index_name
        self.sitemap_path = self.root / sitemap_name

    def article_path(self, slug: str) -> Path:
        return self.root / f"{slug}.html"

    def prepare(self, slug: str, page: str, card: str, sitemap_entry: str) -> SiteUpdate:
        index_html = insert_listing_card(
            self.index_path.read_text(encoding="utf-8"), card, source=str(self.index_path)
        )
        sitemap_xml = insert_sitemap_entry(
            self.sitemap_path.read_text(encoding="utf-8"), sitemap_entry, source=str(self.sitemap_path)
        )
        return SiteUpdate(
            article_path=self.article_path(slug),
            article_html=page,
            index_path=self.index_path,
            index_html=index_html,
            sitemap_path=self.sitemap_path,
            sitemap_xml=sitemap_xml,
        )
