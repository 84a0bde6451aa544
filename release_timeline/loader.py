"""Load the published release documents listed in the manifest."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from urllib.parse import urljoin

import requests

from release_timeline.config import FETCH_TIMEOUT, MANIFEST_PATH
from release_timeline.models import ReleaseRecord
from release_timeline.parser import parse_release_markdown
from release_timeline.timeline import sort_releases

logger = logging.getLogger(__name__)


def _ensure_trailing_slash(base_url: str) -> str:
    return base_url if base_url.endswith("/") else f"{base_url}/"


def fetch_manifest(
    session: requests.Session,
    base_url: str,
    manifest_path: str = MANIFEST_PATH,
    timeout: float = FETCH_TIMEOUT,
) -> List[str]:
    """Fetch the manifest and return its file locators.

    Raises ``RuntimeError`` for an unreachable manifest or a payload that is
    not a JSON array of strings.
    """
    url = urljoin(_ensure_trailing_slash(base_url), manifest_path)
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise RuntimeError(f"Failed to load release manifest {url}: {exc}") from exc
    if not resp.ok:
        raise RuntimeError(f"Failed to load release manifest: {resp.status_code} {resp.reason}")
    try:
        payload = resp.json()
    except ValueError as exc:
        raise RuntimeError(f"Release manifest {url} is not valid JSON") from exc
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise RuntimeError("Unexpected release manifest payload; expected a JSON array of strings.")
    return payload


def fetch_release_document(
    session: requests.Session,
    base_url: str,
    locator: str,
    timeout: float = FETCH_TIMEOUT,
) -> Optional[str]:
    url = urljoin(_ensure_trailing_slash(base_url), locator)
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Failed to fetch release file %s: %s", locator, exc)
        return None
    if not resp.ok:
        logger.warning("Failed to fetch release file %s: %s", locator, resp.status_code)
        return None
    return resp.text


def _load_one(session: requests.Session, base_url: str, locator: str, timeout: float) -> Optional[ReleaseRecord]:
    text = fetch_release_document(session, base_url, locator, timeout=timeout)
    if text is None:
        return None
    record = parse_release_markdown(text)
    if record is None:
        logger.warning("Dropped release file without frontmatter: %s", locator)
    return record


def load_static_releases(
    base_url: str,
    *,
    manifest_path: str = MANIFEST_PATH,
    session: Optional[requests.Session] = None,
    max_workers: int = 8,
    timeout: float = FETCH_TIMEOUT,
) -> List[ReleaseRecord]:
    """Fetch every release listed in the manifest, newest first.

    File fetches run concurrently and the call returns only once all of them
    have finished. Individual failures are skipped; a failing manifest yields
    an empty list. Nothing is retried.
    """
    http = session or requests.Session()
    try:
        try:
            locators = fetch_manifest(http, base_url, manifest_path, timeout=timeout)
        except RuntimeError as exc:
            logger.error("Error loading static releases: %s", exc)
            return []
        if not locators:
            return []

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(locators)))) as executor:
            results = list(
                executor.map(lambda locator: _load_one(http, base_url, locator, timeout), locators)
            )
    finally:
        if session is None:
            http.close()

    releases = [record for record in results if record is not None]
    logger.info("Loaded %d of %d release files", len(releases), len(locators))
    return sort_releases(releases)
