from __future__ import annotations

from pathlib import Path

import pytest

from release_timeline.config import MANIFEST_SCHEMA_PATH, RELEASE_SCHEMA_PATH, ensure_required_env, load_settings


def test_load_settings_defaults() -> None:
    settings = load_settings({})
    assert settings.base_url == "http://localhost:3000/"
    assert settings.manifest_path == "releases/list.json"
    assert settings.state_file == Path(".release_timeline_state.json")
    assert settings.ai_enabled is False


def test_load_settings_from_env() -> None:
    settings = load_settings(
        {
            "RELEASE_TIMELINE_BASE_URL": "https://changelog.example.com/",
            "RELEASE_TIMELINE_FETCH_TIMEOUT": "5",
            "RELEASE_TIMELINE_STATE_FILE": "/tmp/state.json",
            "ANTHROPIC_API_KEY": "sk-test",
            "RELEASE_TIMELINE_MODEL": "   ",
        }
    )
    assert settings.base_url == "https://changelog.example.com/"
    assert settings.fetch_timeout == 5.0
    assert settings.state_file == Path("/tmp/state.json")
    assert settings.ai_enabled is True
    assert settings.model.startswith("claude-")


def test_undefined_api_key_disables_ai() -> None:
    assert load_settings({"ANTHROPIC_API_KEY": "undefined"}).ai_enabled is False


def test_ensure_required_env() -> None:
    assert ensure_required_env(["A"], {"A": "1"}) == {"A": "1"}
    with pytest.raises(RuntimeError, match="B, C"):
        ensure_required_env(["A", "B", "C"], {"A": "1"})


def test_schemas_ship_with_package() -> None:
    assert MANIFEST_SCHEMA_PATH.is_file()
    assert RELEASE_SCHEMA_PATH.is_file()
