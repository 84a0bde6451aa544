from __future__ import annotations

from datetime import datetime, timezone

from fakes import make_change, make_release
from release_timeline.models import ChangeCategory, FilterQuery, release_timestamp
from release_timeline.timeline import (
    aggregate_releases,
    filter_releases,
    sort_releases,
    toggle_category,
)


def test_aggregate_orders_by_date_descending() -> None:
    drafts = [make_release("2.0", "2024-06-01")]
    static = [make_release("1.0", "2024-01-01")]
    assert [release.version for release in aggregate_releases(drafts, static)] == ["2.0", "1.0"]
    assert [release.version for release in aggregate_releases(static, drafts)] == ["2.0", "1.0"]


def test_aggregate_keeps_version_collisions() -> None:
    merged = aggregate_releases([make_release("1.0", "2024-01-01")], [make_release("1.0", "2024-01-01")])
    assert len(merged) == 2


def test_same_day_releases_order_by_time() -> None:
    releases = [
        make_release("1.0.0", "2024-05-01T08:00:00Z"),
        make_release("1.0.1", "2024-05-01T17:30:00Z"),
        make_release("0.9.0", "2024-04-30"),
    ]
    assert [release.version for release in sort_releases(releases)] == ["1.0.1", "1.0.0", "0.9.0"]


def test_unparseable_dates_sort_first() -> None:
    releases = [make_release("1.0.0", "2024-05-01"), make_release("x", "sometime soon")]
    assert [release.version for release in sort_releases(releases)] == ["x", "1.0.0"]


def test_release_timestamp_handles_naive_and_zulu() -> None:
    assert release_timestamp("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert release_timestamp("2024-01-01T12:00:00Z") == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    fallback = datetime(2031, 1, 1, tzinfo=timezone.utc)
    assert release_timestamp("not a date", now=fallback) == fallback


def _collection():
    return [
        make_release(
            "2.1.0",
            "2024-06-01",
            title="Auth overhaul",
            changes=[
                make_change(ChangeCategory.SECURITY, "Rotate session keys", "Affects login tokens"),
            ],
        ),
        make_release(
            "2.0.0",
            "2024-05-01",
            description="Login page redesigned",
            changes=[make_change(ChangeCategory.FEATURE, "New dashboard")],
        ),
        make_release(
            "1.9.0-RC",
            "2024-04-01",
            changes=[make_change(ChangeCategory.BUGFIX, "Fixed CSV export")],
        ),
    ]


def test_empty_query_returns_input_unchanged() -> None:
    releases = _collection()
    assert filter_releases(releases, FilterQuery()) == releases


def test_search_is_case_insensitive_substring() -> None:
    releases = _collection()
    assert [r.version for r in filter_releases(releases, FilterQuery(search_text="LOGIN"))] == ["2.0.0"]
    assert [r.version for r in filter_releases(releases, FilterQuery(search_text="csv"))] == ["1.9.0-RC"]
    assert [r.version for r in filter_releases(releases, FilterQuery(search_text="rc"))] == ["1.9.0-RC"]
    assert [r.version for r in filter_releases(releases, FilterQuery(search_text="overhaul"))] == ["2.1.0"]


def test_search_does_not_look_at_details() -> None:
    release = make_release(
        "3.0.0",
        "2024-07-01",
        changes=[make_change(ChangeCategory.FEATURE, "Session handling", "Fixes the login loop")],
    )
    assert filter_releases([release], FilterQuery(search_text="login")) == []


def test_category_filter_matches_any_selected() -> None:
    releases = _collection()
    query = FilterQuery(selected_categories=[ChangeCategory.BUGFIX, ChangeCategory.SECURITY])
    assert [r.version for r in filter_releases(releases, query)] == ["2.1.0", "1.9.0-RC"]


def test_search_and_categories_are_anded() -> None:
    releases = _collection()
    query = FilterQuery(search_text="login", selected_categories=[ChangeCategory.SECURITY])
    assert filter_releases(releases, query) == []


def test_toggle_category_adds_and_removes() -> None:
    query = FilterQuery(search_text="x")
    added = toggle_category(query, ChangeCategory.FEATURE)
    assert added.selected_categories == [ChangeCategory.FEATURE]
    assert query.selected_categories == []
    removed = toggle_category(added, ChangeCategory.FEATURE)
    assert removed.selected_categories == []
    assert removed.search_text == "x"


def test_release_timestamp_accepts_written_dates() -> None:
    expected = datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert release_timestamp("2024/01/05") == expected
    assert release_timestamp("Jan 5, 2024") == expected
    assert release_timestamp("January 5, 2024") == expected


def test_written_dates_sort_by_their_value() -> None:
    releases = [make_release("old", "Jan 5, 2024"), make_release("new", "2024/03/01")]
    assert [release.version for release in sort_releases(releases)] == ["new", "old"]
