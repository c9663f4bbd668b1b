from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidTransitionError

SLUG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


def utc_timestamp(when: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a Z suffix, e.g. 2026-10-16T08:30:00.000Z."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TopicStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    FAILED = "failed"


class Topic(BaseModel):
    """One queued article. Stored with camelCase keys; unknown keys survive a rewrite."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Union[int, str]
    slug: str = Field(pattern=SLUG_PATTERN, description="File name of the page, without .html")
    title_hint: str = Field(alias="titleHint", description="Working title given to the model")
    category: str = ""
    keywords: List[str] = Field(default_factory=list, description="SEO keywords, in order")
    status: TopicStatus = TopicStatus.PENDING
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    failed_at: Optional[str] = Field(default=None, alias="failedAt")
    fail_reason: Optional[str] = Field(default=None, alias="failReason")

    @field_validator("slug")
    @classmethod
    def _no_relative_segments(cls, value: str) -> str:
        if ".." in value:
            raise ValueError("slug must not contain '..'")
        return value

    @property
    def is_pending(self) -> bool:
        return self.status == TopicStatus.PENDING

    def _require_pending(self, target: TopicStatus):
        if not self.is_pending:
            raise InvalidTransitionError(
                f"Topic {self.id} cannot move from {self.status.value} to {target.value}"
            )

    def mark_published(self, when: datetime):
        self._require_pending(TopicStatus.PUBLISHED)
        self.status = TopicStatus.PUBLISHED
        self.published_at = utc_timestamp(when)

    def mark_failed(self, when: datetime, reason: str):
        self._require_pending(TopicStatus.FAILED)
        self.status = TopicStatus.FAILED
        self.failed_at = utc_timestamp(when)
        self.fail_reason = reason

    def to_record(self) -> dict:
        # Only the status fields this model introduces are dropped when empty;
        # keys from the stored record, null or not, are written back.
        unset = {name for name in ("published_at", "failed_at", "fail_reason")
                 if getattr(self, name) is None and name not in self.model_fields_set}
        return self.model_dump(mode="json", by_alias=True, exclude=unset)


class RawTopic:
    """
    A queue entry that does not validate as a Topic.

    It is written back exactly as read. If it is still pending it can only
    move to failed, with the validation problem as the reason.
    """

    def __init__(self, record: Any, problem: str):
        self.record = record
        self.problem = problem

    def _get(self, key: str, default: Any = None) -> Any:
        return self.record.get(key, default) if isinstance(self.record, dict) else default

    @property
    def id(self) -> Any:
        return self._get("id")

    @property
    def slug(self) -> Any:
        return self._get("slug")

    @property
    def title_hint(self) -> Any:
        return self._get("titleHint")

    @property
    def status(self) -> Any:
        """The stored status as a TopicStatus when it is a known one, else as stored."""
        if not isinstance(self.record, dict):
            return None
        value = self.record.get("status", TopicStatus.PENDING.value)
        try:
            return TopicStatus(value)
        except ValueError:
            return value

    @property
    def is_pending(self) -> bool:
        return self.status is TopicStatus.PENDING

    def mark_failed(self, when: datetime, reason: str):
        if not self.is_pending:
            raise InvalidTransitionError(f"Topic {self.id} is not pending and cannot be marked failed")
        self.record.update(status=TopicStatus.FAILED.value, failedAt=utc_timestamp(when), failReason=reason)

    def to_record(self) -> Any:
        return self.record


QueueEntry = Union[Topic, RawTopic]


class Article(BaseModel):
    """Generated article payload. Fields are optional here; the validator enforces presence."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(default=None, description="Full article title (max 100 chars)")
    meta_description: Optional[str] = Field(default=None, alias="metaDescription",
                                            description="SEO meta description (max 200 chars)")
    article_html: Optional[str] = Field(default=None, alias="articleHtml",
                                        description="Article body markup (h2, p, ul, li, ...)")
    excerpt: Optional[str] = Field(default=None, description="1-2 sentence summary for the listing page")
