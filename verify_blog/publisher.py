"""
Publication workflow for one invocation.

    idle → generating → validating → rendering → persisting → done
                 ↘            ↘            ↘           ↘
                                  failed

Every run that selects a topic ends with exactly one queue rewrite, recording
either ``published`` or ``failed``. A pending entry that does not validate as
a Topic is recorded as ``failed`` without calling the model. If that rewrite
itself fails, ``QueueError`` propagates to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .config import DEFAULT_MAIN_URL, DEFAULT_SITE_URL
from .errors import InvalidTopicError
from .generator import ArticleGenerator
from .models import Article, QueueEntry, RawTopic, Topic
from .storage import SiteUpdate, StaticSite, TopicRepository, select_pending
from .templates import build_article_card, build_article_page, build_sitemap_entry
from .validator import validate_article

logger = logging.getLogger(__name__)


class PublishState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    VALIDATING = "validating"
    RENDERING = "rendering"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PublishResult:
    state: PublishState
    topic: Optional[QueueEntry] = None
    error: Optional[BaseException] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.state == PublishState.FAILED else 0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def failure_reason(error: BaseException) -> str:
    return str(error) or type(error).__name__


class Publisher:
    def __init__(self, repository: TopicRepository, generator: ArticleGenerator, site: StaticSite,
                 site_url: str = DEFAULT_SITE_URL, main_url: str = DEFAULT_MAIN_URL,
                 clock: Callable[[], datetime] = _utc_now):
        self.repository = repository
        self.generator = generator
        self.site = site
        self.site_url = site_url
        self.main_url = main_url
        self.clock = clock
        self.state = PublishState.IDLE

    def _enter(self, state: PublishState):
        logger.debug(f"{self.state.value} → {state.value}")
        self.state = state

    def run(self) -> PublishResult:
        self.state = PublishState.IDLE
        topics = self.repository.load()
        topic = select_pending(topics)

        if topic is None:
            logger.info("No pending topics found. All topics have been published or failed.")
            return PublishResult(PublishState.IDLE)

        logger.info(f"📝 Generating post for: \"{topic.title_hint}\" (id: {topic.id}, slug: {topic.slug})")

        try:
            published_at = self._publish(topic)
        except Exception as e:
            return self._fail(topics, topic, e)

        topic.mark_published(published_at)
        self.repository.save(topics)
        logger.info(f"Topic {topic.id} marked as published.")
        self._enter(PublishState.DONE)
        logger.info("✅ Done!")
        return PublishResult(PublishState.DONE, topic=topic)

    def _publish(self, topic: QueueEntry) -> datetime:
        """Generate, validate, render and write the artifacts. Returns the publication time."""
        if isinstance(topic, RawTopic):
            raise InvalidTopicError(f"Invalid topic record: {topic.problem}")

        self._enter(PublishState.GENERATING)
        article = self.generator.generate(topic)

        self._enter(PublishState.VALIDATING)
        validate_article(article)

        self._enter(PublishState.RENDERING)
        now = self.clock()
        page, card, entry = self._render(topic, article, now)

        self._enter(PublishState.PERSISTING)
        update: SiteUpdate = self.site.prepare(topic.slug, page, card, entry)
        update.commit()
        return now

    def _render(self, topic: Topic, article: Article, date: datetime) -> Tuple[str, str, str]:
        page = build_article_page(
            slug=topic.slug,
            title=article.title,
            meta_description=article.meta_description,
            article_html=article.article_html,
            date=date,
            site_url=self.site_url,
            main_url=self.main_url,
        )
        card = build_article_card(topic.slug, article.title, article.excerpt, date, site_url=self.site_url)
        entry = build_sitemap_entry(topic.slug, date, site_url=self.site_url)
        return page, card, entry

    def _fail(self, topics: List[QueueEntry], topic: QueueEntry, error: Exception) -> PublishResult:
        reason = failure_reason(error)
        logger.error(f"❌ ERROR generating post for topic {topic.id} ({self.state.value}): {reason}")

        topic.mark_failed(self.clock(), reason)
        self.repository.save(topics)
        self._enter(PublishState.FAILED)
        logger.error(f"Topic {topic.id} marked as failed.")
        return PublishResult(PublishState.FAILED, topic=topic, error=error)
