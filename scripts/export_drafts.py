#!/usr/bin/env python3
"""Publish locally stored drafts as release documents.

Each draft is rendered to ``releases/v<version>.md``; existing files are left
alone unless OVERWRITE=true. Run update_release_list.py afterwards to add the
new files to the manifest.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from release_timeline.config import RELEASES_DIR, load_settings
from release_timeline.drafts import export_release
from release_timeline.store import DraftStore, JsonFileStore


def main() -> int:
    settings = load_settings()
    releases_dir = Path(os.environ.get("RELEASES_DIR") or RELEASES_DIR)
    overwrite = os.environ.get("OVERWRITE", "").strip().lower() == "true"

    drafts = DraftStore(JsonFileStore(settings.state_file)).load_drafts()
    if not drafts:
        print(f"No drafts found in {settings.state_file}")
        return 0

    exported = 0
    for draft in drafts:
        try:
            target = export_release(draft, releases_dir, overwrite=overwrite)
        except FileExistsError as exc:
            print(f"Skipping {draft.version}: {exc}")
            continue
        exported += 1
        print(f"Exported {draft.version} -> {target.as_posix()}")

    print(f"Exported {exported} of {len(drafts)} drafts.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
