"""Domain models shared by the stores, the analytics layer and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class InteractionKind(str, Enum):
    VIEW = "view"
    LIKE = "like"
    SHARE = "share"


def utc_now() -> datetime:
    """Current UTC time as stored by the document store (naive, millisecond precision)."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def isoformat(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds") + "Z"


@dataclass(slots=True)
class User:
    id: str
    username: str
    email: str
    interests: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class Article:
    id: str
    title: str
    content: str
    author: str
    summary: str
    created_by: str
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class ArticleView:
    """Display fields of an article embedded into interaction listings."""

    id: str
    title: str
    author: str
    summary: str
    tags: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Interaction:
    id: str
    article_id: str
    kind: InteractionKind
    created_at: datetime
    updated_at: datetime
    # None on listings, where the owner reference is projected out
    user_id: Optional[str] = None
    article: Optional[ArticleView] = None


@dataclass(slots=True, frozen=True)
class InteractionFilters:
    """Optional narrowing of a user's interactions; ``None`` means no predicate."""

    kind: Optional[InteractionKind] = None
    article_id: Optional[str] = None


@dataclass(slots=True)
class InteractionStats:
    views: int = 0
    likes: int = 0
    shares: int = 0

    @property
    def total(self) -> int:
        return self.views + self.likes + self.shares


@dataclass(slots=True)
class InteractionPage:
    records: List[Interaction]
    total_count: int
    stats: InteractionStats
