from __future__ import annotations

import logging
from typing import Callable, List, Optional

from release_timeline.loader import load_static_releases
from release_timeline.models import FilterQuery, ReleaseRecord
from release_timeline.store import DraftStore
from release_timeline.timeline import aggregate_releases, filter_releases

logger = logging.getLogger(__name__)

StaticLoader = Callable[[], List[ReleaseRecord]]


class ReleaseTimeline:
    """Aggregated view of static releases and local drafts.

    Static releases are loaded once per ``initialize`` and treated as
    read-only; drafts are persisted through the injected ``DraftStore``.
    """

    def __init__(self, drafts: DraftStore, static_loader: StaticLoader) -> None:
        self.drafts = drafts
        self.static_loader = static_loader
        self.static_releases: List[ReleaseRecord] = []
        self.releases: List[ReleaseRecord] = []

    @classmethod
    def from_base_url(cls, drafts: DraftStore, base_url: str, **loader_options) -> "ReleaseTimeline":
        return cls(drafts, lambda: load_static_releases(base_url, **loader_options))

    def initialize(self) -> List[ReleaseRecord]:
        self.static_releases = self.static_loader()
        self.releases = aggregate_releases(self.drafts.load_drafts(), self.static_releases)
        logger.info(
            "Timeline ready: %d releases (%d static)",
            len(self.releases),
            len(self.static_releases),
        )
        return self.releases

    def save_draft(self, record: ReleaseRecord) -> List[ReleaseRecord]:
        self.drafts.save_draft(record)
        self.releases = aggregate_releases(self.drafts.load_drafts(), self.static_releases)
        return self.releases

    def reset_drafts(self) -> List[ReleaseRecord]:
        """Drop every local draft; static releases remain."""
        self.drafts.clear_drafts()
        self.releases = aggregate_releases([], self.static_releases)
        return self.releases

    def filtered(self, query: Optional[FilterQuery] = None) -> List[ReleaseRecord]:
        return filter_releases(self.releases, query or FilterQuery())
