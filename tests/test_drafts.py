from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from fakes import make_change, make_release, without_ids
from release_timeline.config import DRAFT_AUTHOR_NAME
from release_timeline.drafts import export_release, new_change_item, new_draft_release, release_filename
from release_timeline.models import ChangeCategory
from release_timeline.parser import parse_release_markdown


def test_new_change_item_requires_description() -> None:
    with pytest.raises(ValueError):
        new_change_item(ChangeCategory.FEATURE, "   ")


def test_new_change_item_drops_blank_details() -> None:
    item = new_change_item(ChangeCategory.BUGFIX, "Fixed crash", "  \n ")
    assert item.details is None
    assert item.category is ChangeCategory.BUGFIX
    assert len(item.id) == 9


def test_change_ids_are_unique() -> None:
    ids = {new_change_item(ChangeCategory.FEATURE, "Same text").id for _ in range(50)}
    assert len(ids) == 50


def test_new_draft_release_defaults() -> None:
    changes = [new_change_item(ChangeCategory.FEATURE, "Offline mode")]
    draft = new_draft_release("1.2.0", "Offline", "Now works offline", changes)
    assert draft.date == date.today().isoformat()
    assert draft.author.name == DRAFT_AUTHOR_NAME
    assert draft.is_breaking is False
    assert draft.changes == changes


def test_new_draft_release_reports_missing_fields() -> None:
    with pytest.raises(ValueError, match="version, description"):
        new_draft_release("", "Title", " ", [])


@pytest.mark.parametrize(
    "version,expected",
    [("1.2.0", "v1.2.0.md"), ("2.0.0-beta.1", "v2.0.0-beta.1.md"), ("Beta Build!", "vbeta-build.md")],
)
def test_release_filename(version: str, expected: str) -> None:
    assert release_filename(version) == expected


def test_export_release_writes_parseable_document(tmp_path: Path) -> None:
    record = make_release(
        "1.3.0",
        "2024-08-01",
        description="Export test",
        changes=[make_change(ChangeCategory.IMPROVEMENT, "Quicker search", "Indexes titles")],
    )
    target = export_release(record, tmp_path / "releases")
    assert target.name == "v1.3.0.md"
    parsed = parse_release_markdown(target.read_text(encoding="utf-8"))
    assert parsed is not None
    assert without_ids(parsed) == without_ids(record)


def test_export_release_refuses_to_overwrite(tmp_path: Path) -> None:
    record = make_release("1.3.0", "2024-08-01")
    export_release(record, tmp_path)
    with pytest.raises(FileExistsError):
        export_release(record, tmp_path)
    assert export_release(record, tmp_path, overwrite=True).exists()


def test_export_keeps_multi_line_description(tmp_path: Path) -> None:
    changes = [new_change_item(ChangeCategory.FEATURE, "Offline mode")]
    draft = new_draft_release("1.2.0", "Two\nlines", "First line\n---\nSecond line", changes, date="2024-09-01")
    target = export_release(draft, tmp_path)
    parsed = parse_release_markdown(target.read_text(encoding="utf-8"))
    assert parsed is not None
    assert parsed.title == "Two lines"
    assert parsed.description == "First line --- Second line"
    assert [change.description for change in parsed.changes] == ["Offline mode"]
