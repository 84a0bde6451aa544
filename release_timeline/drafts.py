"""Build draft releases and export them as release documents."""

from __future__ import annotations

import logging
from datetime import date as calendar_date
from pathlib import Path
from typing import List, Optional, Sequence

from slugify import slugify

from release_timeline.config import DRAFT_AUTHOR_AVATAR, DRAFT_AUTHOR_NAME
from release_timeline.models import Author, ChangeCategory, ChangeItem, ReleaseRecord
from release_timeline.parser import render_release_markdown

logger = logging.getLogger(__name__)


def new_change_item(category: ChangeCategory, description: str, details: str = "") -> ChangeItem:
    if not description.strip():
        raise ValueError("A change needs a description")
    return ChangeItem(
        category=ChangeCategory(category),
        description=description,
        details=details.strip() or None,
    )


def new_draft_release(
    version: str,
    title: str,
    description: str,
    changes: Sequence[ChangeItem],
    *,
    date: Optional[str] = None,
    is_breaking: bool = False,
    author: Optional[Author] = None,
) -> ReleaseRecord:
    """Assemble a draft the way the creation form submits it.

    Version, title and description are mandatory; the date defaults to
    today's calendar date and the author to the local user.
    """
    missing: List[str] = [
        name
        for name, value in (("version", version), ("title", title), ("description", description))
        if not value or not value.strip()
    ]
    if missing:
        raise ValueError(f"Draft release is missing: {', '.join(missing)}")
    return ReleaseRecord(
        version=version,
        date=date or calendar_date.today().isoformat(),
        title=title,
        description=description,
        is_breaking=is_breaking,
        author=author or Author(name=DRAFT_AUTHOR_NAME, avatar=DRAFT_AUTHOR_AVATAR),
        changes=list(changes),
    )


def release_filename(version: str) -> str:
    slug = slugify(version, regex_pattern=r"[^-a-z0-9.]+") or "0.0.0"
    return f"v{slug}.md"


def export_release(record: ReleaseRecord, directory: Path, overwrite: bool = False) -> Path:
    """Write ``record`` as a release document inside ``directory``."""
    target = Path(directory) / release_filename(record.version)
    if target.exists() and not overwrite:
        raise FileExistsError(f"Release file already exists: {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_release_markdown(record), encoding="utf-8")
    logger.info("Exported release %s to %s", record.version, target)
    return target
