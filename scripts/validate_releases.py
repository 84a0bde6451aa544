#!/usr/bin/env python3
"""Validate the release manifest and stored drafts against their schemas.

Used by pre-commit hook and can be run standalone.
"""

import sys
from pathlib import Path

from release_timeline.config import RELEASES_DIR, load_settings
from release_timeline.manifest import MANIFEST_FILENAME, validate_drafts_file, validate_manifest_file


def main() -> int:
    settings = load_settings()
    targets = [
        ("Manifest", RELEASES_DIR / MANIFEST_FILENAME, validate_manifest_file),
        ("Drafts", Path(settings.state_file), validate_drafts_file),
    ]

    failed = False
    for label, path, validator in targets:
        if not path.exists():
            print(f"{label}: {path} not found, skipping")
            continue
        errors = validator(path)
        if errors:
            failed = True
            print(f"{label} validation failed:")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"{label} validation passed")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
