"""Maintain ``list.json`` and validate stored release data against schemas."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

from jsonschema import Draft7Validator
from jsonschema import validate as jsonschema_validate

from release_timeline.config import DRAFTS_STORAGE_KEY, MANIFEST_SCHEMA_PATH, RELEASE_SCHEMA_PATH
from release_timeline.parser import is_compliant_markdown

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "list.json"


SEMVER_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


def parse_semver(text: str) -> Optional[Tuple[int, int, int]]:
    """Numeric version triple of ``text`` (``v`` prefix allowed), or None."""
    match = SEMVER_RE.fullmatch((text or "").strip())
    if match is None:
        return None
    return int(match[1]), int(match[2]), int(match[3])


def filename_version(path: Path) -> Tuple[int, int, int]:
    """Version embedded in a file name like ``v0.1.0.md``; ``0.0.0`` if none."""
    match = re.search(r"v(\d+\.\d+\.\d+)", Path(path).name)
    parsed = parse_semver(match.group(1)) if match else None
    return parsed or (0, 0, 0)


def _is_compliant_file(path: Path) -> bool:
    try:
        return is_compliant_markdown(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return False


def scan_release_directory(directory: Path) -> Tuple[List[Path], List[Path]]:
    """Split ``*.md`` files into compliant (newest version first) and skipped."""
    files = sorted(path for path in Path(directory).iterdir() if path.suffix == ".md" and path.is_file())
    compliant = [path for path in files if _is_compliant_file(path)]
    skipped = [path for path in files if path not in compliant]
    compliant.sort(key=filename_version, reverse=True)
    return compliant, skipped


def validate_against_schema(data: Any, schema_path: Path) -> List[str]:
    schema = json.loads(Path(schema_path).read_text(encoding="utf-8"))
    validator = Draft7Validator(schema)
    messages = []
    for error in validator.iter_errors(data):
        location = f" at: {list(error.path)}" if error.path else ""
        messages.append(f"{error.message}{location}")
    return messages


def write_manifest(directory: Path, files: List[Path], schema_path: Path = MANIFEST_SCHEMA_PATH) -> Path:
    """Write the manifest for ``files`` into ``directory`` and validate it.

    Locators are site-relative (``<directory name>/<file name>``) so the loader
    can resolve them against its base URL wherever the directory lives on disk.
    """
    folder = Path(directory).name
    locators = [f"{folder}/{Path(path).name}" for path in files]
    schema = json.loads(Path(schema_path).read_text(encoding="utf-8"))
    jsonschema_validate(instance=locators, schema=schema)
    manifest_path = Path(directory) / MANIFEST_FILENAME
    manifest_path.write_text(json.dumps(locators, indent=2), encoding="utf-8")
    return manifest_path


def validate_manifest_file(path: Path, schema_path: Path = MANIFEST_SCHEMA_PATH) -> List[str]:
    return validate_against_schema(json.loads(Path(path).read_text(encoding="utf-8")), schema_path)


def validate_drafts_file(
    path: Path,
    schema_path: Path = RELEASE_SCHEMA_PATH,
    key: str = DRAFTS_STORAGE_KEY,
) -> List[str]:
    """Schema errors for stored drafts.

    ``path`` is either a plain JSON list of drafts or a state file written by
    ``JsonFileStore``, whose ``key`` entry holds the serialized list.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = json.loads(data.get(key) or "[]")
    return validate_against_schema(data, schema_path)
