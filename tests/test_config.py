"""Tests for settings loading and validation."""

import json
from pathlib import Path

import pytest

from rule_context.config import ConfigRepository, Settings
from rule_context.errors import InvalidConfigError


def test_missing_default_file_yields_defaults(tmp_path: Path) -> None:
    repo = ConfigRepository()
    assert repo.config_path == tmp_path / ".config" / "rule-context" / "config.json"
    assert repo.load_settings() == Settings()


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        ConfigRepository().load_settings(tmp_path / "nope.json")


def test_load_valid_settings(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "rules_dir": "rules",
                "case_sensitive": False,
                "ignored_dirs": ["build"],
                "max_workers": 2,
                "project_root": str(tmp_path),
            }
        ),
        encoding="utf-8",
    )
    settings = ConfigRepository().load_settings(path)
    assert settings.rules_dir == "rules"
    assert settings.extension == ".mdc"
    assert settings.case_sensitive is False
    assert settings.ignored_dirs == ("build",)
    assert settings.max_workers == 2
    assert settings.project_root == tmp_path
    assert settings.rules_root(tmp_path) == tmp_path / "rules"


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidConfigError) as excinfo:
        ConfigRepository().load_settings(path)
    assert "invalid JSON" in str(excinfo.value)


@pytest.mark.parametrize(
    "payload,fragment",
    [
        ({"case_sensitive": "yes"}, "case_sensitive"),
        ({"extension": "mdc"}, "extension"),
        ({"max_workers": 0}, "max_workers"),
        ({"unknown": 1}, "unknown"),
    ],
)
def test_schema_violations(tmp_path: Path, payload: dict, fragment: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(InvalidConfigError) as excinfo:
        ConfigRepository().load_settings(path)
    assert fragment in str(excinfo.value)


def test_save_and_reload(tmp_path: Path) -> None:
    repo = ConfigRepository(tmp_path / "cfg")
    path = repo.save_settings(Settings(rules_dir="docs/rules", max_workers=1))
    assert path == tmp_path / "cfg" / "config.json"
    assert repo.load_settings() == Settings(rules_dir="docs/rules", max_workers=1)
