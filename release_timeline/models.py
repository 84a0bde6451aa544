"""Pydantic models for release records, change items and filter queries."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from release_timeline.config import (
    DEFAULT_AUTHOR_NAME,
    DEFAULT_AVATAR,
    DEFAULT_TITLE,
    DEFAULT_VERSION,
)


class ChangeCategory(str, Enum):
    FEATURE = "FEATURE"
    BUGFIX = "BUGFIX"
    IMPROVEMENT = "IMPROVEMENT"
    SECURITY = "SECURITY"
    DEPRECATED = "DEPRECATED"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


def new_change_id() -> str:
    """Opaque display key for a change item; never compared across records."""
    return uuid.uuid4().hex[:9]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ChangeItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_change_id)
    category: ChangeCategory = Field(..., alias="type")
    description: str
    details: Optional[str] = Field(default=None, description="Markdown supported")


class Author(BaseModel):
    name: str = DEFAULT_AUTHOR_NAME
    avatar: str = DEFAULT_AVATAR


class ReleaseRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = DEFAULT_VERSION
    date: str = Field(default_factory=utc_now_iso)
    title: str = DEFAULT_TITLE
    description: str = ""
    is_breaking: bool = Field(default=False, alias="isBreaking")
    author: Author = Field(default_factory=Author)
    changes: List[ChangeItem] = Field(default_factory=list)

    def to_storage(self) -> dict:
        """JSON-ready dict using the camelCase keys of the persisted draft format."""
        return self.model_dump(mode="json", by_alias=True)


class FilterQuery(BaseModel):
    search_text: str = ""
    selected_categories: List[ChangeCategory] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.search_text and not self.selected_categories


LOOSE_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def _parse_loose_date(text: str) -> Optional[datetime]:
    for fmt in LOOSE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def release_timestamp(date: str, now: Optional[datetime] = None) -> datetime:
    """Parse a release ``date`` into an aware datetime.

    Calendar dates (``2024-01-01``), ISO timestamps (with or without ``Z``)
    and the common written forms in ``LOOSE_DATE_FORMATS`` (``2024/01/05``,
    ``Jan 5, 2024``) are accepted; naive values are taken as UTC. Anything
    unparseable maps to ``now`` so malformed entries sort to the top of a
    descending timeline.
    """
    fallback = now or datetime.now(timezone.utc)
    text = (date or "").strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = _parse_loose_date(text)
    if parsed is None:
        return fallback
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
