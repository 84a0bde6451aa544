#!/usr/bin/env python3
"""Rebuild releases/list.json from the compliant release documents.

A compliant document has a frontmatter block and at least one
``- [TYPE] Description`` line. Files are listed newest version first.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from jsonschema.exceptions import ValidationError as JSONSchemaValidationError

from release_timeline.config import RELEASES_DIR
from release_timeline.manifest import scan_release_directory, write_manifest


def main() -> int:
    releases_dir = Path(os.environ.get("RELEASES_DIR") or RELEASES_DIR)
    if not releases_dir.is_dir():
        print(f"Error updating release list: {releases_dir} is not a directory")
        return 1

    compliant, skipped = scan_release_directory(releases_dir)
    try:
        manifest_path = write_manifest(releases_dir, compliant)
    except JSONSchemaValidationError as exc:
        print(f"Error updating release list: {exc.message}")
        return 1

    print(f"Updated {manifest_path} with {len(compliant)} compliant release files:")
    for path in compliant:
        print(f"  - {path.as_posix()}")

    if skipped:
        print(f"Skipped {len(skipped)} non-compliant files:")
        for path in skipped:
            print(f"  - {path.as_posix()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
