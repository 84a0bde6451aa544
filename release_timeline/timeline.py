"""Merge, order and filter release collections."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Sequence

from release_timeline.models import ChangeCategory, FilterQuery, ReleaseRecord, release_timestamp


def sort_releases(releases: Iterable[ReleaseRecord]) -> List[ReleaseRecord]:
    """Newest first by full timestamp; unparseable dates count as now."""
    now = datetime.now(timezone.utc)
    return sorted(releases, key=lambda release: release_timestamp(release.date, now=now), reverse=True)


def aggregate_releases(
    drafts: Sequence[ReleaseRecord],
    static_releases: Sequence[ReleaseRecord],
) -> List[ReleaseRecord]:
    # Versions present in both sets are kept twice; drafts do not shadow files.
    return sort_releases([*drafts, *static_releases])


def matches_search(release: ReleaseRecord, search_text: str) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return (
        needle in release.title.lower()
        or needle in release.description.lower()
        or needle in release.version.lower()
        or any(needle in change.description.lower() for change in release.changes)
    )


def matches_categories(release: ReleaseRecord, categories: Sequence[ChangeCategory]) -> bool:
    if not categories:
        return True
    wanted = set(categories)
    return any(change.category in wanted for change in release.changes)


def filter_releases(releases: Sequence[ReleaseRecord], query: FilterQuery) -> List[ReleaseRecord]:
    return [
        release
        for release in releases
        if matches_search(release, query.search_text)
        and matches_categories(release, query.selected_categories)
    ]


def toggle_category(query: FilterQuery, category: ChangeCategory) -> FilterQuery:
    """Return a copy of ``query`` with ``category`` added or removed."""
    if category in query.selected_categories:
        selected = [item for item in query.selected_categories if item != category]
    else:
        selected = [*query.selected_categories, category]
    return query.model_copy(update={"selected_categories": selected})
