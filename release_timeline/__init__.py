"""Parse, merge and filter markdown release notes for a changelog timeline."""

from release_timeline.loader import load_static_releases
from release_timeline.models import (
    Author,
    ChangeCategory,
    ChangeItem,
    FilterQuery,
    ReleaseRecord,
    Theme,
)
from release_timeline.parser import parse_release_markdown, render_release_markdown
from release_timeline.session import ReleaseTimeline
from release_timeline.store import DraftStore, JsonFileStore, MemoryStore, ThemePreference
from release_timeline.timeline import aggregate_releases, filter_releases

__all__ = [
    "Author",
    "ChangeCategory",
    "ChangeItem",
    "DraftStore",
    "FilterQuery",
    "JsonFileStore",
    "MemoryStore",
    "ReleaseRecord",
    "ReleaseTimeline",
    "Theme",
    "ThemePreference",
    "aggregate_releases",
    "filter_releases",
    "load_static_releases",
    "parse_release_markdown",
    "render_release_markdown",
]
