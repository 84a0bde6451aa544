from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_VERSION = "0.0.0"
DEFAULT_TITLE = "Untitled Release"
DEFAULT_AUTHOR_NAME = "Unknown"
DEFAULT_AVATAR = "assets/default-avatar.svg"

DRAFT_AUTHOR_NAME = "You"
DRAFT_AUTHOR_AVATAR = "https://ui-avatars.com/api/?name=You&background=0D8ABC&color=fff"

DRAFTS_STORAGE_KEY = "changelog_releases"
THEME_STORAGE_KEY = "theme"

RELEASES_DIR = Path("releases")
MANIFEST_PATH = "releases/list.json"
FETCH_TIMEOUT = 30.0

SCHEMA_DIR = Path(__file__).parent / "schemas"
MANIFEST_SCHEMA_PATH = SCHEMA_DIR / "manifest-schema.json"
RELEASE_SCHEMA_PATH = SCHEMA_DIR / "release-schema.json"

AI_MODEL = "claude-sonnet-4-5-20250929"


class TimelineSettings(BaseModel):
    base_url: str = "http://localhost:3000/"
    manifest_path: str = MANIFEST_PATH
    state_file: Path = Path(".release_timeline_state.json")
    fetch_timeout: float = Field(default=FETCH_TIMEOUT, gt=0)
    model: str = AI_MODEL
    anthropic_api_key: Optional[str] = None

    @property
    def ai_enabled(self) -> bool:
        return bool(self.anthropic_api_key) and self.anthropic_api_key != "undefined"


ENV_FIELDS: Dict[str, str] = {
    "RELEASE_TIMELINE_BASE_URL": "base_url",
    "RELEASE_TIMELINE_MANIFEST": "manifest_path",
    "RELEASE_TIMELINE_STATE_FILE": "state_file",
    "RELEASE_TIMELINE_FETCH_TIMEOUT": "fetch_timeout",
    "RELEASE_TIMELINE_MODEL": "model",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
}


def load_settings(env: Optional[Mapping[str, str]] = None) -> TimelineSettings:
    """Build settings from environment variables, ignoring empty values."""
    source = os.environ if env is None else env
    values = {
        field: source[var].strip()
        for var, field in ENV_FIELDS.items()
        if source.get(var) and source[var].strip()
    }
    return TimelineSettings.model_validate(values)


def ensure_required_env(names: List[str], env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Look up ``names`` in the environment; raise listing every absent one."""
    source = os.environ if env is None else env
    absent = [name for name in names if name not in source]
    if absent:
        raise RuntimeError(f"Missing required environment variables: {', '.join(absent)}")
    return {name: source[name] for name in names}
