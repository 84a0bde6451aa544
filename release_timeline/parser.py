"""Lenient parser for release documents.

A release document is a frontmatter block followed by change lines::

    ---
    version: 1.2.0
    date: 2024-01-01
    title: Faster sync
    ---
    - [FEATURE] Added offline mode
    > Works without a network connection.
    - [FIX] Crash on startup

Only a missing frontmatter block is a hard failure. Every other problem
degrades to a default value or an ignored line.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from release_timeline.config import (
    DEFAULT_AUTHOR_NAME,
    DEFAULT_AVATAR,
    DEFAULT_TITLE,
    DEFAULT_VERSION,
)
from release_timeline.models import Author, ChangeCategory, ChangeItem, ReleaseRecord, utc_now_iso

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---", flags=re.DOTALL)
CHANGE_LINE_RE = re.compile(r"^- \[(.*?)\] (.*)")
CHANGE_LINE_SEARCH_RE = re.compile(r"^- \[[^\]]+\] .+", flags=re.MULTILINE)

CATEGORY_ALIASES: Dict[str, ChangeCategory] = {
    "FEAT": ChangeCategory.FEATURE,
    "FIX": ChangeCategory.BUGFIX,
    "IMPROVE": ChangeCategory.IMPROVEMENT,
    "SEC": ChangeCategory.SECURITY,
    "DEP": ChangeCategory.DEPRECATED,
}


class FrontmatterMissingError(ValueError):
    pass


def _normalize_newlines(text: str) -> str:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


def split_frontmatter(markdown: str) -> Tuple[str, str]:
    """Return ``(frontmatter, body)``; raise if the ``---`` block is absent."""
    text = _normalize_newlines(markdown)
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise FrontmatterMissingError("No frontmatter found in markdown")
    return match.group(1), text[match.end():].strip()


def parse_frontmatter(block: str) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    for line in block.split("\n"):
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        metadata[key.strip()] = value.strip()
    return metadata


def resolve_category(token: str) -> ChangeCategory:
    """Map a ``[TOKEN]`` to a category; unknown tokens become FEATURE."""
    upper = token.upper()
    try:
        return ChangeCategory(upper)
    except ValueError:
        return CATEGORY_ALIASES.get(upper, ChangeCategory.FEATURE)


class _PendingChange:
    __slots__ = ("category", "description", "details")

    def __init__(self, category: ChangeCategory, description: str) -> None:
        self.category = category
        self.description = description
        self.details = ""

    def finish(self) -> ChangeItem:
        return ChangeItem(
            category=self.category,
            description=self.description,
            details=self.details or None,
        )


def parse_changes(body: str) -> List[ChangeItem]:
    changes: List[ChangeItem] = []
    current: Optional[_PendingChange] = None

    for line in body.split("\n"):
        match = CHANGE_LINE_RE.match(line)
        stripped = line.strip()
        if match:
            if current is not None:
                changes.append(current.finish())
            current = _PendingChange(resolve_category(match.group(1)), match.group(2).strip())
        elif current is not None and stripped.startswith(">"):
            detail = stripped[1:].strip()
            current.details = f"{current.details}\n{detail}" if current.details else detail
        elif current is not None and not stripped:
            # Keeps paragraph breaks for the markdown render of details.
            if current.details:
                current.details += "\n"

    if current is not None:
        changes.append(current.finish())
    return changes


def parse_release_markdown(
    markdown: str,
    *,
    now: Optional[Callable[[], str]] = None,
) -> Optional[ReleaseRecord]:
    """Parse one release document; return None when it has no frontmatter."""
    try:
        frontmatter, body = split_frontmatter(markdown)
    except FrontmatterMissingError as exc:
        logger.error("Skipping release document: %s", exc)
        return None

    metadata = parse_frontmatter(frontmatter)
    return ReleaseRecord(
        version=metadata.get("version") or DEFAULT_VERSION,
        date=metadata.get("date") or (now or utc_now_iso)(),
        title=metadata.get("title") or DEFAULT_TITLE,
        description=metadata.get("description") or "",
        is_breaking=metadata.get("isBreaking") == "true",
        author=Author(
            name=metadata.get("author_name") or DEFAULT_AUTHOR_NAME,
            avatar=metadata.get("author_avatar") or DEFAULT_AVATAR,
        ),
        changes=parse_changes(body),
    )


def is_compliant_markdown(markdown: str) -> bool:
    """A publishable document has frontmatter and at least one change line."""
    try:
        _, body = split_frontmatter(markdown)
    except FrontmatterMissingError:
        return False
    return bool(CHANGE_LINE_SEARCH_RE.search(body))


def _single_line(value: str) -> str:
    """Frontmatter values are one line each; fold any line breaks into spaces."""
    return " ".join(part.strip() for part in _normalize_newlines(value).split("\n") if part.strip())


def render_release_markdown(record: ReleaseRecord) -> str:
    """Render a record in the document grammar accepted by the parser."""
    lines = [
        "---",
        f"version: {_single_line(record.version)}",
        f"date: {_single_line(record.date)}",
        f"title: {_single_line(record.title)}",
    ]
    if record.description:
        lines.append(f"description: {_single_line(record.description)}")
    lines.extend(
        [
            f"isBreaking: {'true' if record.is_breaking else 'false'}",
            f"author_name: {_single_line(record.author.name)}",
            f"author_avatar: {_single_line(record.author.avatar)}",
            "---",
            "",
        ]
    )
    for change in record.changes:
        lines.append(f"- [{change.category.value}] {change.description}")
        if change.details:
            lines.extend(f"> {part}" if part else "" for part in change.details.split("\n"))
    return "\n".join(lines) + "\n"
