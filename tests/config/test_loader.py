from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from fff.config import CONFIG_ENV_VAR, load_config
from fff.errors import ConfigurationError


def test_load_config_without_file_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_config()
    assert config.method == "GET"
    assert config.save_all is False


def test_yaml_file_with_overrides(tmp_path: Path) -> None:
    path = tmp_path / "fff.yaml"
    path.write_text(
        yaml.safe_dump({"save_status": [200, 204], "delay_ms": 250, "concurrency": 8}),
        encoding="utf-8",
    )
    config = load_config(path, {"concurrency": 2, "save_all": True})
    assert config.save_status == [200, 204]
    assert config.delay_ms == 250
    assert config.concurrency == 2
    assert config.save_all is True


def test_json_file_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "fff.json"
    path.write_text(json.dumps({"match_string": "Welcome", "ignore_html": True}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    config = load_config()
    assert config.match_string == "Welcome"
    assert config.ignore_html is True


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("list.yaml", "- 1\n- 2\n"),
        ("broken.json", "{not json"),
        ("config.toml", "a = 1"),
    ],
)
def test_bad_files_raise_configuration_error(tmp_path: Path, filename: str, content: str) -> None:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_missing_file_raises_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml")


def test_validation_failure_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        load_config(None, {"method": "BREW"})
